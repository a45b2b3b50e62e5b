"""Resolve notes that overlap in time on the same MIDI channel."""
from __future__ import annotations

import logging
from enum import Enum
from typing import List

from .models import ChannelEvents, RawEvent

logger = logging.getLogger(__name__)


class OverlapPolicy(str, Enum):
    """How a note that starts before the previous note ends is handled.

    Only ``DISCARD`` exists: a voice cannot hold two sounding notes, and
    overlapping notes are neither merged into chords nor moved to another
    voice.
    """

    DISCARD = "discard"


def resolve_channel_overlaps(
    events: List[RawEvent], policy: OverlapPolicy = OverlapPolicy.DISCARD
) -> int:
    """Apply ``policy`` to one channel list in place; return discarded notes."""

    policy = OverlapPolicy(policy)
    notes = sorted(
        (event for event in events if event.is_valid_note),
        key=lambda event: event.start_time,
    )
    discarded = 0
    for index, note in enumerate(notes):
        if not note.is_valid_note:
            continue
        note_end = note.end_time
        for later in notes[index + 1 :]:
            if not later.is_valid_note:
                continue
            if later.start_time >= note_end:
                break
            later.invalidate()
            discarded += 1
    return discarded


def resolve_overlaps(
    channels: ChannelEvents, policy: OverlapPolicy = OverlapPolicy.DISCARD
) -> int:
    """Resolve overlaps on every channel; return the total discarded count."""

    total = 0
    for channel, events in channels:
        if not events:
            continue
        discarded = resolve_channel_overlaps(events, policy)
        if discarded:
            logger.info(
                "Discarded %d overlapping note(s) on MIDI channel %d (policy=%s)",
                discarded,
                channel,
                OverlapPolicy(policy).value,
            )
        total += discarded
    return total


__all__ = ["OverlapPolicy", "resolve_channel_overlaps", "resolve_overlaps"]
