"""Utilities for turning tick durations into canonical note values."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from domain.score import MusicLength, PlayableLength

DEFAULT_MAX_DOTS = 4

# Largest first; the greedy decomposition walks this order.
BASE_LENGTHS: Tuple[MusicLength, ...] = tuple(sorted(MusicLength, reverse=True))
SMALLEST_TIME_LENGTH = int(min(MusicLength))


def _dots_fit(base: MusicLength, dots: int) -> bool:
    # The last dot may not add less than the smallest note value.
    return int(base) >> dots >= SMALLEST_TIME_LENGTH


def _check_max_dots(max_dots: int) -> None:
    if max_dots < 0:
        raise ValueError(f"max_dots must be non-negative, got {max_dots}")


def playable_length_for(time_length: int, *, max_dots: int = DEFAULT_MAX_DOTS) -> PlayableLength:
    """Return the single note value lasting exactly ``time_length`` units."""

    _check_max_dots(max_dots)
    for base in BASE_LENGTHS:
        for dots in range(max_dots + 1):
            if not _dots_fit(base, dots):
                break
            candidate = PlayableLength(base, dots)
            if candidate.time_length == time_length:
                return candidate
    raise ValueError(f"No single note value lasts {time_length} time units")


def decompose_time_length(
    time_length: int, *, max_dots: int = DEFAULT_MAX_DOTS
) -> Tuple[PlayableLength, ...]:
    """Split ``time_length`` into note values whose lengths sum to it exactly.

    Greedy, largest value first: starting from a whole note, pick the most
    dots (up to ``max_dots``) that still fit the remaining duration; when no
    dotting of the current base fits, halve the base and retry. The result is
    used both for notes (which the caller ties together) and for rests.
    """

    _check_max_dots(max_dots)
    if time_length <= 0:
        raise ValueError(f"Duration must be positive, got {time_length}")
    if time_length % SMALLEST_TIME_LENGTH:
        raise ValueError(
            f"Duration {time_length} is not a multiple of the smallest note value "
            f"({SMALLEST_TIME_LENGTH})"
        )

    remaining = time_length
    result: List[PlayableLength] = []
    base_index = 0
    while remaining:
        base = BASE_LENGTHS[base_index]
        best: PlayableLength | None = None
        for dots in range(max_dots + 1):
            if not _dots_fit(base, dots):
                break
            candidate = PlayableLength(base, dots)
            if candidate.time_length > remaining:
                break
            best = candidate
        if best is None:
            base_index += 1
            continue
        result.append(best)
        remaining -= best.time_length
    return tuple(result)


def total_time_length(lengths: Iterable[PlayableLength]) -> int:
    return sum(length.time_length for length in lengths)


def describe_lengths(lengths: Iterable[PlayableLength]) -> str:
    """Join ``lengths`` as ``"half~quarter."`` where ``~`` marks a tie."""

    return "~".join(length.describe() for length in lengths)


__all__ = [
    "BASE_LENGTHS",
    "DEFAULT_MAX_DOTS",
    "SMALLEST_TIME_LENGTH",
    "decompose_time_length",
    "describe_lengths",
    "playable_length_for",
    "total_time_length",
]
