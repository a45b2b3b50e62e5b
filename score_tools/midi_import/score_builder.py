"""Write quantized per-channel notes into the staffs and voices of a sheet."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from domain.score import Note, Rest, Sheet, Staff, Voice, tie_notes

from ..note_values import DEFAULT_MAX_DOTS, decompose_time_length, describe_lengths
from ..pitch import midi_to_diatonic_pitch
from .models import ChannelEvents, RawEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildSummary:
    """Counts of what was written into the sheet."""

    staffs_used: int = 0
    staffs_created: int = 0
    notes_written: int = 0
    rests_written: int = 0
    ties_written: int = 0


def _destination(sheet: Sheet, staff_index: int) -> tuple[Staff, Voice, bool]:
    if staff_index < len(sheet.staffs):
        staff = sheet.staffs[staff_index]
        voice = staff.voices[0] if staff.voices else staff.add_voice()
        return staff, voice, False
    staff = sheet.add_staff()
    return staff, staff.add_voice(), True


def write_channel_to_voice(
    notes: List[RawEvent],
    voice: Voice,
    *,
    max_dots: int = DEFAULT_MAX_DOTS,
    prefer_flats: bool = False,
) -> tuple[int, int, int]:
    """Append rests and (tied) notes for ``notes`` to ``voice``.

    ``notes`` must be valid, non-overlapping and sorted by start time. Tick 0
    maps to the current end of ``voice``, so content already present in a
    reused voice is kept ahead of the import. Returns
    ``(notes_written, rests_written, ties_written)``.
    """

    written_notes = written_rests = written_ties = 0
    cursor = 0
    for event in notes:
        gap = event.start_time - cursor
        if gap < 0:
            raise ValueError(
                f"Note at tick {event.start_time} overlaps the previous note ending at {cursor}"
            )
        if gap:
            for length in decompose_time_length(gap, max_dots=max_dots):
                voice.append(Rest(length))
                written_rests += 1

        lengths = decompose_time_length(event.length, max_dots=max_dots)
        pitch = midi_to_diatonic_pitch(event.pitch, prefer_flats=prefer_flats)
        previous: Note | None = None
        for length in lengths:
            note = voice.append(Note(pitch, length))
            written_notes += 1
            if previous is not None:
                tie_notes(previous, note)
                written_ties += 1
            previous = note
        logger.debug(
            "pitch=%d start=%d length=%d -> %s %s",
            event.pitch,
            event.start_time,
            event.length,
            pitch.describe(),
            describe_lengths(lengths),
        )
        cursor = event.end_time
    return written_notes, written_rests, written_ties


def build_sheet(
    channels: ChannelEvents,
    sheet: Sheet,
    *,
    max_dots: int = DEFAULT_MAX_DOTS,
    prefer_flats: bool = False,
) -> BuildSummary:
    """Give every channel with surviving notes its own staff and voice.

    Existing staffs of ``sheet`` are reused in order (their first voice);
    new five-line staffs with a single voice are created once they run out.
    Every channel is written to a scratch voice first, so ``sheet`` is left
    unchanged when a length cannot be decomposed.
    """

    written: List[tuple[int, Voice, tuple[int, int, int]]] = []
    for channel in range(len(channels)):
        notes = channels.notes(channel)
        if not notes:
            continue
        scratch = Voice()
        counts = write_channel_to_voice(
            notes, scratch, max_dots=max_dots, prefer_flats=prefer_flats
        )
        written.append((channel, scratch, counts))

    staff_index = 0
    created = notes_total = rests_total = ties_total = 0
    for channel, scratch, (written_notes, written_rests, written_ties) in written:
        staff, voice, is_new = _destination(sheet, staff_index)
        created += int(is_new)
        for element in scratch:
            voice.append(element)
        logger.info(
            "MIDI channel %d -> staff %d: %d note(s), %d rest(s), %d tie(s)",
            channel,
            staff_index,
            written_notes,
            written_rests,
            written_ties,
        )
        notes_total += written_notes
        rests_total += written_rests
        ties_total += written_ties
        staff_index += 1

    return BuildSummary(
        staffs_used=staff_index,
        staffs_created=created,
        notes_written=notes_total,
        rests_written=rests_total,
        ties_written=ties_total,
    )


__all__ = ["BuildSummary", "build_sheet", "write_channel_to_voice"]
