"""Score document model that MIDI imports are written into."""

from .lengths import MusicLength, PlayableLength
from .model import (
    DEFAULT_STAFF_LINES,
    STEP_NAMES,
    DiatonicPitch,
    Document,
    MusicElement,
    Note,
    Rest,
    Sheet,
    Staff,
    Tie,
    Voice,
    tie_notes,
)

__all__ = [
    "DEFAULT_STAFF_LINES",
    "STEP_NAMES",
    "DiatonicPitch",
    "Document",
    "MusicElement",
    "MusicLength",
    "Note",
    "PlayableLength",
    "Rest",
    "Sheet",
    "Staff",
    "Tie",
    "Voice",
    "tie_notes",
]
