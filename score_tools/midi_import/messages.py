"""Closed set of MIDI messages understood by the chunk decoder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

META_PREFIX = 0xFF
SYSEX_START = 0xF0
SYSEX_ESCAPE = 0xF7

NOTE_OFF = 0x80
NOTE_ON = 0x90
CONTROL_CHANGE = 0xB0
PROGRAM_CHANGE = 0xC0

META_TEXT = 0x01
META_COPYRIGHT = 0x02
META_TRACK_NAME = 0x03
META_INSTRUMENT_NAME = 0x04
META_LYRIC = 0x05
META_MARKER = 0x06
META_CUE_POINT = 0x07
META_END_OF_TRACK = 0x2F
META_TEMPO = 0x51
META_SMPTE_OFFSET = 0x54
META_TIME_SIGNATURE = 0x58
META_KEY_SIGNATURE = 0x59

TEXT_META_NAMES = {
    META_TEXT: "text",
    META_COPYRIGHT: "copyright",
    META_TRACK_NAME: "track_name",
    META_INSTRUMENT_NAME: "instrument_name",
    META_LYRIC: "lyric",
    META_MARKER: "marker",
    META_CUE_POINT: "cue_point",
}


@dataclass(frozen=True, slots=True)
class NoteOn:
    channel: int
    pitch: int
    velocity: int


@dataclass(frozen=True, slots=True)
class NoteOff:
    channel: int
    pitch: int
    velocity: int


@dataclass(frozen=True, slots=True)
class ProgramChange:
    channel: int
    program: int


@dataclass(frozen=True, slots=True)
class ControlChange:
    channel: int
    controller: int
    value: int


@dataclass(frozen=True, slots=True)
class TextMeta:
    """Any of the text-family meta events (track name, lyric, marker, ...)."""

    meta_type: int
    text: str

    @property
    def kind(self) -> str:
        return TEXT_META_NAMES.get(self.meta_type, "text")


@dataclass(frozen=True, slots=True)
class SmpteOffset:
    hours: int
    minutes: int
    seconds: int
    frames: int
    subframes: int


@dataclass(frozen=True, slots=True)
class Tempo:
    microseconds_per_quarter: int

    @property
    def bpm(self) -> float:
        return 60_000_000.0 / float(max(1, self.microseconds_per_quarter))


@dataclass(frozen=True, slots=True)
class KeySignature:
    sharps: int
    minor: bool


@dataclass(frozen=True, slots=True)
class TimeSignature:
    numerator: int
    denominator: int
    clocks_per_click: int = 24
    thirty_seconds_per_quarter: int = 8


@dataclass(frozen=True, slots=True)
class EndOfTrack:
    pass


@dataclass(frozen=True, slots=True)
class SysEx:
    status: int
    data: bytes


MidiMessage = Union[
    NoteOn,
    NoteOff,
    ProgramChange,
    ControlChange,
    TextMeta,
    SmpteOffset,
    Tempo,
    KeySignature,
    TimeSignature,
    EndOfTrack,
    SysEx,
]

# (tick, message) pairs kept for metadata that does not become score events.
TimedMessage = Tuple[int, MidiMessage]


__all__ = [
    "CONTROL_CHANGE",
    "ControlChange",
    "EndOfTrack",
    "KeySignature",
    "META_CUE_POINT",
    "META_COPYRIGHT",
    "META_END_OF_TRACK",
    "META_INSTRUMENT_NAME",
    "META_KEY_SIGNATURE",
    "META_LYRIC",
    "META_MARKER",
    "META_PREFIX",
    "META_SMPTE_OFFSET",
    "META_TEMPO",
    "META_TEXT",
    "META_TIME_SIGNATURE",
    "META_TRACK_NAME",
    "MidiMessage",
    "NOTE_OFF",
    "NOTE_ON",
    "NoteOff",
    "NoteOn",
    "PROGRAM_CHANGE",
    "ProgramChange",
    "SYSEX_ESCAPE",
    "SYSEX_START",
    "SmpteOffset",
    "SysEx",
    "TEXT_META_NAMES",
    "Tempo",
    "TextMeta",
    "TimeSignature",
    "TimedMessage",
]
