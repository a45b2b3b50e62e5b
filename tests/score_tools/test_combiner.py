from __future__ import annotations

from score_tools.midi_import.combiner import combine_channel, combine_events
from score_tools.midi_import.models import ChannelEvents, RawEvent


def _on(pitch: int, start: int, velocity: int = 100, channel: int = 0) -> RawEvent:
    return RawEvent(True, channel, pitch, velocity, start)


def _off(pitch: int, start: int, channel: int = 0) -> RawEvent:
    return RawEvent(False, channel, pitch, 64, start)


def test_note_on_pairs_with_next_matching_off() -> None:
    events = [_on(60, 0), _on(64, 10), _off(64, 100), _off(60, 200)]

    assert combine_channel(events) == 0

    first, second, off_64, off_60 = events
    assert (first.pitch, first.start_time, first.length) == (60, 0, 200)
    assert (second.pitch, second.start_time, second.length) == (64, 10, 90)
    assert not off_64.is_valid_note and not off_60.is_valid_note
    assert off_60.pitch == -1


def test_velocity_zero_note_on_ends_a_note() -> None:
    events = [_on(60, 0), _on(60, 480, velocity=0)]
    assert combine_channel(events) == 0
    assert events[0].length == 480
    assert not events[1].is_valid_note


def test_each_off_is_consumed_once() -> None:
    events = [_on(60, 0), _on(60, 10), _off(60, 20)]
    unmatched = combine_channel(events)

    assert unmatched == 1
    assert events[0].length == 20
    assert not events[1].is_valid_note


def test_unmatched_note_on_is_dropped() -> None:
    events = [_on(62, 0), _off(60, 50)]
    assert combine_channel(events) == 1
    assert all(not event.is_valid_note for event in events)


def test_zero_length_pair_is_dropped() -> None:
    events = [_on(60, 100), _off(60, 100)]
    combine_channel(events)
    assert not events[0].is_valid_note


def test_combine_events_counts_across_channels() -> None:
    channels = ChannelEvents()
    for event in (_on(60, 0), _off(60, 10), _on(61, 0, channel=3), _on(62, 0, channel=9)):
        channels.append(event)

    assert combine_events(channels) == 2
    assert channels.active_channels() == [0]


def test_note_end_earlier_than_the_start_is_not_a_match() -> None:
    # Second track restarts at tick 0, after the first track's unreleased note.
    events = [_on(60, 200), _off(60, 0), _on(64, 0), _off(64, 256)]

    assert combine_channel(events) == 1

    assert not events[0].is_valid_note
    assert (events[2].pitch, events[2].length) == (64, 256)
    assert all(event.length > 0 for event in events if event.on and event.pitch > 0)
