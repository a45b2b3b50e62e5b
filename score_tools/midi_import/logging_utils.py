"""Helper formatting routines for MIDI import debug logging."""

from __future__ import annotations

from typing import Sequence

from ..pitch import midi_to_name
from .models import ImportStatistics, RawEvent, TrackHeader


def _format_midi(midi: int) -> str:
    """Return a friendly representation for *midi* including its note name."""

    if midi < 0:
        return f"invalid({midi})"
    return f"{midi_to_name(midi)}({midi})"


def describe_event(event: RawEvent) -> str:
    """Summarise a raw event, including quantization corrections when set."""

    kind = "on" if event.on else "off"
    text = (
        f"{kind} ch={event.channel} pitch={_format_midi(event.pitch)} "
        f"vel={event.velocity} start={event.start_time} length={event.length}"
    )
    if event.time_correction or event.length_correction:
        text += f" corr=({event.time_correction:+d},{event.length_correction:+d})"
    return text


def describe_channel(channel: int, events: Sequence[RawEvent], *, limit: int = 5) -> str:
    """Provide a compact representation of the surviving notes of a channel."""

    notes = [event for event in events if event.is_valid_note]
    if not notes:
        return f"ch={channel} notes=0"

    lowest = min(note.pitch for note in notes)
    highest = max(note.pitch for note in notes)
    preview = [f"{_format_midi(note.pitch)}@{note.start_time}+{note.length}" for note in notes[:limit]]
    if len(notes) > limit:
        preview.append(f"…(+{len(notes) - limit} more)")
    return (
        f"ch={channel} notes={len(notes)} range={_format_midi(lowest)}..{_format_midi(highest)} "
        f"[{'; '.join(preview)}]"
    )


def describe_header(header: TrackHeader) -> str:
    division = (
        f"smpte=0x{header.time_division:04X}"
        if header.is_smpte
        else f"ppq={header.time_division}"
    )
    return f"format={header.format_version} tracks={header.number_of_tracks} {division}"


def describe_statistics(statistics: ImportStatistics) -> str:
    """Summarise ``ImportStatistics`` counters."""

    return (
        f"notes={statistics.notes_written} rests={statistics.rests_written} "
        f"ties={statistics.ties_written} unmatched={statistics.unmatched_note_ons} "
        f"lost={statistics.lost_notes} overlaps={statistics.discarded_overlaps}"
    )


__all__ = [
    "describe_channel",
    "describe_event",
    "describe_header",
    "describe_statistics",
]
