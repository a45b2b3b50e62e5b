"""Snap note start times and lengths to a fixed tick grid."""
from __future__ import annotations

import logging
from typing import List

from .logging_utils import describe_event
from .models import DEFAULT_QUANTIZATION_UNIT, ChannelEvents, RawEvent

logger = logging.getLogger(__name__)


def round_to_grid(value: int, unit: int) -> int:
    """Round ``value`` to the nearest multiple of ``unit``, halves rounding up."""

    return ((value + unit // 2) // unit) * unit


def quantize_channel(events: List[RawEvent], unit: int = DEFAULT_QUANTIZATION_UNIT) -> int:
    """Quantize the surviving notes of one channel in place.

    Returns the number of notes whose length rounded down to zero; those are
    invalidated instead of being kept as zero-length notes.
    """

    if unit <= 0:
        raise ValueError(f"Quantization unit must be positive, got {unit}")

    lost = 0
    for event in events:
        event.time_correction = 0
        event.length_correction = 0
        if not (event.on and event.pitch > 0):
            continue

        start = round_to_grid(event.start_time, unit)
        event.time_correction = start - event.start_time
        event.start_time = start

        length = round_to_grid(event.length, unit)
        event.length_correction = length - event.length
        event.length = length
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Quantized %s", describe_event(event))
        if not length:
            event.invalidate()
            lost += 1
    return lost


def quantize_events(channels: ChannelEvents, unit: int = DEFAULT_QUANTIZATION_UNIT) -> int:
    """Quantize every channel; return the total number of lost notes."""

    total = 0
    for channel, events in channels:
        if not events:
            continue
        lost = quantize_channel(events, unit)
        if lost:
            logger.info(
                "Due to rounding %d note(s) got lost on MIDI channel %d", lost, channel
            )
        total += lost
    return total


__all__ = ["quantize_channel", "quantize_events", "round_to_grid"]
