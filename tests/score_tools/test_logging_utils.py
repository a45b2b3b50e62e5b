from __future__ import annotations

from score_tools.midi_import.logging_utils import (
    describe_channel,
    describe_event,
    describe_header,
    describe_statistics,
)
from score_tools.midi_import.models import ImportStatistics, RawEvent, TrackHeader


def test_describe_event_includes_corrections() -> None:
    event = RawEvent(True, 3, 61, 90, 64, 32, time_correction=14, length_correction=-15)
    text = describe_event(event)
    assert text == "on ch=3 pitch=C#4(61) vel=90 start=64 length=32 corr=(+14,-15)"


def test_describe_event_for_invalidated_event() -> None:
    event = RawEvent(False, 0, 60, 0, 10)
    event.invalidate()
    assert "pitch=invalid(-1)" in describe_event(event)


def test_describe_channel_limits_preview() -> None:
    events = [RawEvent(True, 0, 60 + i, 100, i * 32, 32) for i in range(7)]
    text = describe_channel(0, events, limit=2)
    assert text.startswith("ch=0 notes=7 range=C4(60)..F#4(66)")
    assert "C4(60)@0+32; C#4(61)@32+32" in text
    assert "(+5 more)" in text
    assert describe_channel(4, []) == "ch=4 notes=0"


def test_describe_header_and_statistics() -> None:
    assert describe_header(TrackHeader(1, 3, 480)) == "format=1 tracks=3 ppq=480"
    assert describe_header(TrackHeader(0, 1, 0xE728)).endswith("smpte=0xE728")
    stats = ImportStatistics(unmatched_note_ons=1, lost_notes=2, discarded_overlaps=3, notes_written=4)
    assert describe_statistics(stats) == (
        "notes=4 rests=0 ties=0 unmatched=1 lost=2 overlaps=3"
    )
    assert stats.dropped_notes == 6
