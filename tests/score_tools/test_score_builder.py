from __future__ import annotations

import pytest

from domain.score import MusicLength, Note, PlayableLength, Rest, Sheet, Staff, Voice
from score_tools.midi_import.models import ChannelEvents, RawEvent
from score_tools.midi_import.score_builder import build_sheet, write_channel_to_voice


def _note(start: int, length: int, pitch: int = 60, channel: int = 0) -> RawEvent:
    return RawEvent(True, channel, pitch, 100, start, length)


def _describe(voice: Voice) -> list[tuple[str, int, int, str]]:
    rows = []
    for element in voice:
        label = element.pitch.describe() if isinstance(element, Note) else "rest"
        rows.append((label, element.time_start, element.time_length, element.length.describe()))
    return rows


def test_gaps_become_rests_and_long_notes_are_tied() -> None:
    voice = Voice()
    notes = [_note(256, 256, pitch=62), _note(512, 1280, pitch=64)]

    counts = write_channel_to_voice(notes, voice)

    assert counts == (3, 1, 1)
    assert _describe(voice) == [
        ("rest", 0, 256, "quarter"),
        ("D4", 256, 256, "quarter"),
        ("E4", 512, 1024, "whole"),
        ("E4", 1536, 256, "quarter"),
    ]
    tied_first, tied_second = voice.elements[2], voice.elements[3]
    assert tied_first.tie_start is tied_second.tie_end
    assert tied_first.tie_start.end is tied_second
    assert voice.elements[1].tie_start is None


def test_voice_has_no_gaps_or_overlaps() -> None:
    voice = Voice()
    write_channel_to_voice([_note(64, 32), _note(160, 480), _note(1000, 8)], voice)

    cursor = 0
    for element in voice:
        assert element.time_start == cursor
        cursor = element.time_end
    assert voice.time_end == 1008


def test_overlapping_input_is_rejected() -> None:
    with pytest.raises(ValueError):
        write_channel_to_voice([_note(0, 64), _note(32, 32)], Voice())


def test_each_active_channel_gets_its_own_new_staff() -> None:
    channels = ChannelEvents()
    channels.append(_note(0, 256, pitch=72, channel=9))
    channels.append(_note(0, 256, pitch=48, channel=2))

    sheet = Sheet()
    summary = build_sheet(channels, sheet)

    assert summary.staffs_used == 2
    assert summary.staffs_created == 2
    assert [staff.number_of_lines for staff in sheet.staffs] == [5, 5]
    assert [len(staff.voices) for staff in sheet.staffs] == [1, 1]
    # Channel order decides staff order.
    assert sheet.staffs[0].voices[0].notes()[0].pitch.describe() == "C3"
    assert sheet.staffs[1].voices[0].notes()[0].pitch.describe() == "C5"


def test_existing_staffs_are_reused_and_appended_to() -> None:
    sheet = Sheet()
    existing = sheet.add_staff(name="Flute")
    voice = existing.add_voice()
    voice.append(Rest(PlayableLength(MusicLength.HALF)))
    bare = Staff(name="Empty")
    sheet.staffs.append(bare)

    channels = ChannelEvents()
    channels.append(_note(0, 256, channel=0))
    channels.append(_note(256, 256, channel=1))
    summary = build_sheet(channels, sheet)

    assert summary.staffs_created == 0
    assert len(sheet.staffs) == 2
    assert [element.time_start for element in voice] == [0, 512]
    assert len(bare.voices) == 1
    assert _describe(bare.voices[0]) == [("rest", 0, 256, "quarter"), ("C4", 256, 256, "quarter")]
    assert summary.notes_written == 2
    assert summary.rests_written == 1


def test_flats_spelling_is_used_when_requested() -> None:
    voice = Voice()
    write_channel_to_voice([_note(0, 256, pitch=63)], voice, prefer_flats=True)
    assert voice.notes()[0].pitch.describe() == "Eb4"


def test_undecomposable_length_leaves_the_sheet_untouched() -> None:
    sheet = Sheet()
    staff = sheet.add_staff()
    voice = staff.add_voice()
    voice.append(Rest(PlayableLength(MusicLength.QUARTER)))

    channels = ChannelEvents()
    channels.append(_note(0, 480, channel=0))
    channels.append(_note(0, 108, channel=1))

    with pytest.raises(ValueError):
        build_sheet(channels, sheet)

    assert len(sheet.staffs) == 1
    assert [len(s.voices) for s in sheet.staffs] == [1]
    assert _describe(voice) == [("rest", 0, 256, "quarter")]
