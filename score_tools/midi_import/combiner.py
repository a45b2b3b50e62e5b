"""Pair note-on and note-off events into notes with a length."""
from __future__ import annotations

import logging
from typing import List

from .models import ChannelEvents, RawEvent

logger = logging.getLogger(__name__)


def combine_channel(events: List[RawEvent]) -> int:
    """Pair the note starts of one channel list in place.

    A note-off may also be a note-on with velocity zero. Matched offs are
    invalidated so they are never paired twice; starts left without a match
    are invalidated too. Ticks restart with every track, so a note end that
    lies before the start is never taken as its match. Returns the number of
    unmatched note-ons.
    """

    for index, start in enumerate(events):
        if not start.is_note_start or start.length:
            continue
        for candidate in events[index + 1 :]:
            if (
                candidate.pitch == start.pitch
                and candidate.is_note_end
                and candidate.start_time >= start.start_time
            ):
                start.length = candidate.start_time - start.start_time
                candidate.invalidate()
                break

    unmatched = 0
    for event in events:
        if event.on and event.length <= 0:
            if event.is_note_start:
                unmatched += 1
            event.invalidate()
    return unmatched


def combine_events(channels: ChannelEvents) -> int:
    """Run :func:`combine_channel` over all channels; return unmatched note-ons."""

    total = 0
    for channel, events in channels:
        if not events:
            continue
        unmatched = combine_channel(events)
        if unmatched:
            logger.info("Dropped %d unmatched note-on(s) on MIDI channel %d", unmatched, channel)
        total += unmatched
    return total


__all__ = ["combine_channel", "combine_events"]
