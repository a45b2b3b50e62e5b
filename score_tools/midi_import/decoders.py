"""Chunk and event decoding for Standard MIDI File byte streams."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .messages import (
    CONTROL_CHANGE,
    META_END_OF_TRACK,
    META_KEY_SIGNATURE,
    META_PREFIX,
    META_SMPTE_OFFSET,
    META_TEMPO,
    META_TIME_SIGNATURE,
    META_TRACK_NAME,
    NOTE_OFF,
    NOTE_ON,
    PROGRAM_CHANGE,
    SYSEX_ESCAPE,
    SYSEX_START,
    TEXT_META_NAMES,
    ControlChange,
    EndOfTrack,
    KeySignature,
    MidiMessage,
    NoteOff,
    NoteOn,
    ProgramChange,
    SmpteOffset,
    SysEx,
    Tempo,
    TextMeta,
    TimedMessage,
    TimeSignature,
)
from .models import (
    ChannelEvents,
    MidiErrorKind,
    MidiImportError,
    RawEvent,
    TrackHeader,
    TrackSummary,
)
from .streams import StreamReader

logger = logging.getLogger(__name__)

HEADER_TAG = b"MThd"
TRACK_TAG = b"MTrk"
HEADER_LENGTH = 6


@dataclass
class DecodedFile:
    """Everything the chunk decoder extracted from one byte stream."""

    header: TrackHeader
    channels: ChannelEvents
    tracks: Tuple[TrackSummary, ...]
    tempo_changes: List[TimedMessage] = field(default_factory=list)
    key_signatures: List[TimedMessage] = field(default_factory=list)
    time_signatures: List[TimedMessage] = field(default_factory=list)
    smpte_offset: SmpteOffset | None = None


@dataclass
class _TrackState:
    index: int
    offset: int
    length: int
    tick: int = 0
    running_status: int | None = None
    note_events: int = 0
    name: str | None = None
    programs: Dict[int, int] = field(default_factory=dict)
    control_changes: int = 0
    reached_end_of_track: bool = False

    def summary(self) -> TrackSummary:
        return TrackSummary(
            index=self.index,
            offset=self.offset,
            length=self.length,
            end_tick=self.tick,
            note_events=self.note_events,
            name=self.name,
            programs=dict(self.programs),
            control_changes=self.control_changes,
            reached_end_of_track=self.reached_end_of_track,
        )


class MidiFileDecoder:
    """Walk ``MThd``/``MTrk`` chunks and collect per-channel note events.

    Time restarts at zero for every track chunk, so ticks are relative to the
    start of their own track rather than global across the file. Any fatal
    condition raises :class:`MidiImportError` and nothing is returned.
    """

    def __init__(self, data: bytes):
        self.stream = StreamReader(data)
        self.header: TrackHeader | None = None
        self.channels = ChannelEvents()
        self.tracks: List[TrackSummary] = []
        self.tempo_changes: List[TimedMessage] = []
        self.key_signatures: List[TimedMessage] = []
        self.time_signatures: List[TimedMessage] = []
        self.smpte_offset: SmpteOffset | None = None

    @classmethod
    def decode(cls, data: bytes) -> DecodedFile:
        decoder = cls(data)
        header = decoder._decode()
        return DecodedFile(
            header=header,
            channels=decoder.channels,
            tracks=tuple(decoder.tracks),
            tempo_changes=decoder.tempo_changes,
            key_signatures=decoder.key_signatures,
            time_signatures=decoder.time_signatures,
            smpte_offset=decoder.smpte_offset,
        )

    def _decode(self) -> TrackHeader:
        stream = self.stream
        while not stream.at_end:
            chunk_offset = stream.tell()
            tag = stream.read_fixed(4)
            stream.raise_for_error()
            if tag == HEADER_TAG:
                self._decode_header(chunk_offset)
            elif tag == TRACK_TAG:
                self._decode_track(chunk_offset)
            else:
                raise MidiImportError(
                    MidiErrorKind.UNRECOGNIZED_CHUNK,
                    chunk_offset,
                    f"unrecognized chunk tag {bytes(tag)!r}",
                )
        if self.header is None:
            raise MidiImportError(MidiErrorKind.MALFORMED_HEADER, 0, "missing MThd header chunk")
        logger.debug(
            "Decoded %d track chunk(s) with %d channel event(s)",
            len(self.tracks),
            self.channels.event_count(),
        )
        return self.header

    def _decode_header(self, chunk_offset: int) -> None:
        stream = self.stream
        length = stream.read_be32()
        stream.raise_for_error()
        if self.header is not None:
            raise MidiImportError(
                MidiErrorKind.MALFORMED_HEADER, chunk_offset, "duplicate MThd header chunk"
            )
        if length != HEADER_LENGTH:
            raise MidiImportError(
                MidiErrorKind.MALFORMED_HEADER,
                chunk_offset + 4,
                f"header length must be {HEADER_LENGTH}, got {length}",
            )
        format_version = stream.read_be16()
        number_of_tracks = stream.read_be16()
        time_division = stream.read_be16()
        stream.raise_for_error()
        self.header = TrackHeader(
            format_version=format_version,
            number_of_tracks=number_of_tracks,
            time_division=time_division,
        )
        logger.debug(
            "MThd format=%d tracks=%d division=%d%s",
            format_version,
            number_of_tracks,
            time_division,
            " (SMPTE)" if self.header.is_smpte else "",
        )

    def _decode_track(self, chunk_offset: int) -> None:
        stream = self.stream
        raw_length = stream.read_be32()
        stream.raise_for_error()
        length = raw_length - (1 << 32) if raw_length & 0x80000000 else raw_length
        if length < 0:
            raise MidiImportError(
                MidiErrorKind.MALFORMED_TRACK, chunk_offset + 4, f"negative track length {length}"
            )
        if length > stream.remaining:
            raise MidiImportError(
                MidiErrorKind.MALFORMED_TRACK,
                chunk_offset + 4,
                f"track length {length} exceeds the {stream.remaining} byte(s) left",
            )

        start = stream.tell()
        end = start + length
        track = _TrackState(index=len(self.tracks), offset=chunk_offset, length=length)
        logger.debug("MTrk #%d at byte %d length=%d", track.index, chunk_offset, length)

        while stream.tell() < end:
            event_offset = stream.tell()
            delta = stream.read_varlen()
            track.tick += delta
            message = self._read_message(track)
            stream.raise_for_error()
            if stream.tell() > end:
                raise MidiImportError(
                    MidiErrorKind.MALFORMED_TRACK,
                    event_offset,
                    f"event runs past the end of track #{track.index}",
                )
            self._apply(message, track)
            if isinstance(message, EndOfTrack):
                stream.seek(end)
                break

        self.tracks.append(track.summary())

    def _read_message(self, track: _TrackState) -> MidiMessage:
        stream = self.stream
        status_offset = stream.tell()
        status = stream.peek_byte()
        stream.raise_for_error()
        if status & 0x80:
            stream.read_byte()
        elif track.running_status is None:
            raise MidiImportError(
                MidiErrorKind.UNSUPPORTED_EVENT,
                status_offset,
                f"data byte 0x{status:02X} without running status",
            )
        else:
            status = track.running_status

        if status == META_PREFIX:
            return self._read_meta(status_offset)
        if status in (SYSEX_START, SYSEX_ESCAPE):
            return self._read_sysex(status)
        if status >= 0xF0:
            raise MidiImportError(
                MidiErrorKind.UNSUPPORTED_EVENT,
                status_offset,
                f"system message 0x{status:02X} is not supported",
            )
        track.running_status = status
        return self._read_channel_message(status, status_offset)

    def _read_meta(self, status_offset: int) -> MidiMessage:
        stream = self.stream
        meta_type = stream.read_byte()
        size = stream.read_varlen()
        stream.raise_for_error()

        if meta_type in TEXT_META_NAMES:
            payload = stream.read_fixed(size)
            stream.raise_for_error()
            return TextMeta(meta_type=meta_type, text=payload.decode("latin-1"))

        if meta_type == META_SMPTE_OFFSET:
            self._require_meta_size(size == 5, "SMPTE offset", size, status_offset)
            payload = stream.read_fixed(5)
            stream.raise_for_error()
            hours, minutes, seconds, frames, subframes = payload
            return SmpteOffset(hours, minutes, seconds, frames, subframes)

        if meta_type == META_TEMPO:
            self._require_meta_size(size == 3, "tempo", size, status_offset)
            return Tempo(microseconds_per_quarter=stream.read_be24())

        if meta_type == META_KEY_SIGNATURE:
            self._require_meta_size(size >= 2, "key signature", size, status_offset)
            payload = stream.read_fixed(size)
            stream.raise_for_error()
            sharps = int.from_bytes(payload[:1], "big", signed=True)
            return KeySignature(sharps=sharps, minor=payload[1] == 1)

        if meta_type == META_TIME_SIGNATURE:
            self._require_meta_size(size >= 2, "time signature", size, status_offset)
            payload = stream.read_fixed(size)
            stream.raise_for_error()
            return TimeSignature(
                numerator=payload[0],
                denominator=2 ** payload[1],
                clocks_per_click=payload[2] if size > 2 else 24,
                thirty_seconds_per_quarter=payload[3] if size > 3 else 8,
            )

        if meta_type == META_END_OF_TRACK:
            stream.skip(size)
            return EndOfTrack()

        raise MidiImportError(
            MidiErrorKind.UNSUPPORTED_META,
            status_offset,
            f"unsupported meta event type 0x{meta_type:02X}",
        )

    @staticmethod
    def _require_meta_size(valid: bool, label: str, size: int, offset: int) -> None:
        if not valid:
            raise MidiImportError(
                MidiErrorKind.MALFORMED_META, offset, f"{label} meta event has size {size}"
            )

    def _read_sysex(self, status: int) -> MidiMessage:
        stream = self.stream
        size = stream.read_varlen()
        return SysEx(status=status, data=stream.read_fixed(size))

    def _read_channel_message(self, status: int, status_offset: int) -> MidiMessage:
        stream = self.stream
        event_type = status & 0xF0
        channel = status & 0x0F

        if event_type == NOTE_ON:
            pitch = stream.read_byte()
            return NoteOn(channel=channel, pitch=pitch, velocity=stream.read_byte())
        if event_type == NOTE_OFF:
            pitch = stream.read_byte()
            return NoteOff(channel=channel, pitch=pitch, velocity=stream.read_byte())
        if event_type == PROGRAM_CHANGE:
            return ProgramChange(channel=channel, program=stream.read_byte())
        if event_type == CONTROL_CHANGE:
            controller = stream.read_byte()
            return ControlChange(channel=channel, controller=controller, value=stream.read_byte())

        raise MidiImportError(
            MidiErrorKind.UNSUPPORTED_EVENT,
            status_offset,
            f"channel message 0x{status:02X} is not supported",
        )

    def _apply(self, message: MidiMessage, track: _TrackState) -> None:
        tick = track.tick
        if isinstance(message, NoteOn):
            self.channels.append(
                RawEvent(True, message.channel, message.pitch, message.velocity, tick)
            )
            track.note_events += 1
        elif isinstance(message, NoteOff):
            self.channels.append(
                RawEvent(False, message.channel, message.pitch, message.velocity, tick)
            )
            track.note_events += 1
        elif isinstance(message, ProgramChange):
            track.programs[message.channel] = message.program
            logger.debug(
                "Track %d tick %d: program change ch=%d program=%d",
                track.index,
                tick,
                message.channel,
                message.program,
            )
        elif isinstance(message, ControlChange):
            track.control_changes += 1
            logger.debug(
                "Track %d tick %d: control change ch=%d controller=%d value=%d",
                track.index,
                tick,
                message.channel,
                message.controller,
                message.value,
            )
        elif isinstance(message, TextMeta):
            if message.meta_type == META_TRACK_NAME and track.name is None:
                track.name = message.text
            logger.debug("Track %d tick %d: %s %r", track.index, tick, message.kind, message.text)
        elif isinstance(message, Tempo):
            self.tempo_changes.append((tick, message))
            logger.debug(
                "Track %d tick %d: tempo %d usec per quarter (%.2f bpm)",
                track.index,
                tick,
                message.microseconds_per_quarter,
                message.bpm,
            )
        elif isinstance(message, KeySignature):
            self.key_signatures.append((tick, message))
            logger.debug(
                "Track %d tick %d: key signature sharps=%d minor=%s",
                track.index,
                tick,
                message.sharps,
                message.minor,
            )
        elif isinstance(message, TimeSignature):
            self.time_signatures.append((tick, message))
            logger.debug(
                "Track %d tick %d: time signature %d/%d",
                track.index,
                tick,
                message.numerator,
                message.denominator,
            )
        elif isinstance(message, SmpteOffset):
            self.smpte_offset = message
            logger.debug("Track %d: SMPTE offset %s", track.index, message)
        elif isinstance(message, SysEx):
            logger.debug(
                "Track %d tick %d: ignored sysex 0x%02X (%d byte(s))",
                track.index,
                tick,
                message.status,
                len(message.data),
            )
        elif isinstance(message, EndOfTrack):
            track.reached_end_of_track = True
        else:
            raise TypeError(f"Unhandled MIDI message kind: {type(message).__name__}")


def decode_midi_bytes(data: bytes) -> DecodedFile:
    """Decode ``data`` into per-channel raw events plus file metadata."""

    return MidiFileDecoder.decode(data)


__all__ = [
    "DecodedFile",
    "MidiFileDecoder",
    "decode_midi_bytes",
]
