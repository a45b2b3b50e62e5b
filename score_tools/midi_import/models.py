"""Data models, error kinds and constants for the MIDI import pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Tuple

CHANNEL_COUNT = 16
DEFAULT_QUANTIZATION_UNIT = 32
INVALID_PITCH = -1


class MidiErrorKind(str, Enum):
    """Fatal conditions that abort an import."""

    TRUNCATED_STREAM = "TruncatedStream"
    MALFORMED_HEADER = "MalformedHeader"
    MALFORMED_TRACK = "MalformedTrack"
    MALFORMED_META = "MalformedMeta"
    UNSUPPORTED_META = "UnsupportedMeta"
    UNSUPPORTED_EVENT = "UnsupportedEvent"
    UNRECOGNIZED_CHUNK = "UnrecognizedChunk"


class MidiImportError(ValueError):
    """Raised (or returned) when a MIDI byte stream cannot be imported."""

    def __init__(self, kind: MidiErrorKind, offset: int, detail: str):
        self.kind = kind
        self.offset = int(offset)
        self.detail = detail
        super().__init__(f"{kind.value} at byte {self.offset}: {detail}")


@dataclass(slots=True)
class RawEvent:
    """Note-on/off event as read from a track, refined in place by later stages.

    The combiner fills :attr:`length` and invalidates consumed note-offs, the
    quantizer rewrites :attr:`start_time`/:attr:`length` and records the
    applied corrections.
    """

    on: bool
    channel: int
    pitch: int
    velocity: int
    start_time: int
    length: int = 0
    time_correction: int = 0
    length_correction: int = 0

    @property
    def end_time(self) -> int:
        return self.start_time + self.length

    @property
    def is_note_start(self) -> bool:
        return self.on and self.pitch > 0 and self.velocity > 0

    @property
    def is_note_end(self) -> bool:
        return not self.on or self.velocity == 0

    @property
    def is_valid_note(self) -> bool:
        """True for a surviving note-on carrying a positive length."""

        return self.on and self.pitch > 0 and self.velocity > 0 and self.length > 0

    def invalidate(self) -> None:
        self.on = False
        self.pitch = INVALID_PITCH


class ChannelEvents:
    """One ordered event list per MIDI channel, in file order."""

    __slots__ = ("_lists",)

    def __init__(self) -> None:
        self._lists: Tuple[List[RawEvent], ...] = tuple([] for _ in range(CHANNEL_COUNT))

    def __getitem__(self, channel: int) -> List[RawEvent]:
        return self._lists[channel]

    def __iter__(self) -> Iterator[Tuple[int, List[RawEvent]]]:
        return iter(enumerate(self._lists))

    def __len__(self) -> int:
        return CHANNEL_COUNT

    def append(self, event: RawEvent) -> None:
        self._lists[event.channel].append(event)

    def notes(self, channel: int) -> List[RawEvent]:
        """Surviving notes of ``channel`` sorted by start time (stable)."""

        valid = [event for event in self._lists[channel] if event.is_valid_note]
        return sorted(valid, key=lambda event: event.start_time)

    def active_channels(self) -> List[int]:
        return [channel for channel, events in self if any(e.is_valid_note for e in events)]

    def event_count(self) -> int:
        return sum(len(events) for events in self._lists)


@dataclass(frozen=True)
class TrackHeader:
    """Contents of the ``MThd`` chunk; informational for the import."""

    format_version: int
    number_of_tracks: int
    time_division: int

    @property
    def is_smpte(self) -> bool:
        return bool(self.time_division & 0x8000)

    @property
    def ticks_per_quarter(self) -> int | None:
        if self.is_smpte:
            return None
        return self.time_division


@dataclass(frozen=True)
class TrackSummary:
    """What a single ``MTrk`` chunk contributed."""

    index: int
    offset: int
    length: int
    end_tick: int
    note_events: int
    name: str | None = None
    programs: Dict[int, int] = field(default_factory=dict)
    control_changes: int = 0
    reached_end_of_track: bool = False


@dataclass(frozen=True)
class ImportStatistics:
    """Counters for lossy-but-intentional policy decisions."""

    unmatched_note_ons: int = 0
    lost_notes: int = 0
    discarded_overlaps: int = 0
    notes_written: int = 0
    rests_written: int = 0
    ties_written: int = 0

    @property
    def dropped_notes(self) -> int:
        return self.unmatched_note_ons + self.lost_notes + self.discarded_overlaps


@dataclass(frozen=True)
class MidiImportReport:
    """Aggregated outcome of one successful import."""

    header: TrackHeader
    statistics: ImportStatistics
    tracks: Tuple[TrackSummary, ...]
    tempo_changes: Tuple["TimedMessage", ...] = ()
    key_signatures: Tuple["TimedMessage", ...] = ()
    time_signatures: Tuple["TimedMessage", ...] = ()
    quantization_unit: int = DEFAULT_QUANTIZATION_UNIT
    smpte_offset: "SmpteOffset | None" = None

    @property
    def initial_tempo_bpm(self) -> float | None:
        if not self.tempo_changes:
            return None
        return self.tempo_changes[0][1].bpm  # type: ignore[union-attr]


if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .messages import SmpteOffset, TimedMessage


__all__ = [
    "CHANNEL_COUNT",
    "ChannelEvents",
    "DEFAULT_QUANTIZATION_UNIT",
    "INVALID_PITCH",
    "ImportStatistics",
    "MidiErrorKind",
    "MidiImportError",
    "MidiImportReport",
    "RawEvent",
    "TrackHeader",
    "TrackSummary",
]
