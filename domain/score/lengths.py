"""Note value types used by the score model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class MusicLength(IntEnum):
    """Undotted note values measured in score time units (whole note = 1024)."""

    WHOLE = 1024
    HALF = 512
    QUARTER = 256
    EIGHTH = 128
    SIXTEENTH = 64
    THIRTY_SECOND = 32
    SIXTY_FOURTH = 16
    HUNDRED_TWENTY_EIGHTH = 8

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


@dataclass(frozen=True)
class PlayableLength:
    """A base note value plus augmentation dots."""

    music_length: MusicLength
    dots: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "music_length", MusicLength(self.music_length))
        if self.dots < 0:
            raise ValueError(f"Dots must be non-negative, got {self.dots}")
        if int(self.music_length) % (2 ** self.dots):
            raise ValueError(f"A {self.music_length.label} note cannot carry {self.dots} dot(s)")

    @property
    def time_length(self) -> int:
        """Duration in score time units; every dot adds half the previous value."""

        base = int(self.music_length)
        return 2 * base - (base >> self.dots)

    def describe(self) -> str:
        """Return a compact label such as ``"quarter..."``."""

        return self.music_length.label + "." * self.dots


__all__ = ["MusicLength", "PlayableLength"]
