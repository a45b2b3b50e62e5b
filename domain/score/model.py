"""Minimal score document model: sheets hold staffs, staffs hold voices.

Voices are strictly sequential: :meth:`Voice.append` places every element at
the current end of the voice, so a voice never contains gaps or overlaps.
Timing uses score time units where a whole note lasts 1024.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Union

from .lengths import PlayableLength

STEP_NAMES = ("C", "D", "E", "F", "G", "A", "B")
_STEP_TO_PC = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
DEFAULT_STAFF_LINES = 5


@dataclass(frozen=True)
class DiatonicPitch:
    """Staff position plus accidentals.

    ``note_name`` counts diatonic steps from C in octave 0, so middle C
    (C4) is 28. ``accs`` is -1 for a flat, 1 for a sharp.
    """

    note_name: int
    accs: int = 0

    @property
    def step(self) -> str:
        return STEP_NAMES[self.note_name % 7]

    @property
    def octave(self) -> int:
        return self.note_name // 7

    def to_midi(self) -> int:
        return (self.octave + 1) * 12 + _STEP_TO_PC[self.step] + self.accs

    def describe(self) -> str:
        accidental = "#" * self.accs if self.accs > 0 else "b" * -self.accs
        return f"{self.step}{accidental}{self.octave}"


@dataclass(eq=False)
class Rest:
    length: PlayableLength
    time_start: int = 0

    @property
    def time_length(self) -> int:
        return self.length.time_length

    @property
    def time_end(self) -> int:
        return self.time_start + self.time_length


@dataclass(eq=False)
class Note:
    pitch: DiatonicPitch
    length: PlayableLength
    time_start: int = 0
    tie_start: "Tie | None" = field(default=None, repr=False)
    tie_end: "Tie | None" = field(default=None, repr=False)

    @property
    def time_length(self) -> int:
        return self.length.time_length

    @property
    def time_end(self) -> int:
        return self.time_start + self.time_length


@dataclass(eq=False)
class Tie:
    """Links two consecutive notes of the same pitch into one sound."""

    start: Note = field(repr=False)
    end: Note = field(repr=False)


MusicElement = Union[Note, Rest]


def tie_notes(first: Note, second: Note) -> Tie:
    """Tie ``first`` to the note that immediately follows it."""

    if first.pitch != second.pitch:
        raise ValueError(
            f"Cannot tie {first.pitch.describe()} to {second.pitch.describe()}"
        )
    if first.time_end != second.time_start:
        raise ValueError("Tied notes must be adjacent in time")
    tie = Tie(start=first, end=second)
    first.tie_start = tie
    second.tie_end = tie
    return tie


@dataclass(eq=False)
class Voice:
    name: str = ""
    elements: List[MusicElement] = field(default_factory=list)

    @property
    def time_end(self) -> int:
        return self.elements[-1].time_end if self.elements else 0

    def append(self, element: MusicElement) -> MusicElement:
        element.time_start = self.time_end
        self.elements.append(element)
        return element

    def notes(self) -> List[Note]:
        return [element for element in self.elements if isinstance(element, Note)]

    def rests(self) -> List[Rest]:
        return [element for element in self.elements if isinstance(element, Rest)]

    def __iter__(self) -> Iterator[MusicElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)


@dataclass(eq=False)
class Staff:
    name: str = ""
    number_of_lines: int = DEFAULT_STAFF_LINES
    voices: List[Voice] = field(default_factory=list)

    def add_voice(self, name: str = "") -> Voice:
        voice = Voice(name=name)
        self.voices.append(voice)
        return voice


@dataclass(eq=False)
class Sheet:
    name: str = ""
    staffs: List[Staff] = field(default_factory=list)

    def add_staff(self, name: str = "", number_of_lines: int = DEFAULT_STAFF_LINES) -> Staff:
        staff = Staff(name=name, number_of_lines=number_of_lines)
        self.staffs.append(staff)
        return staff


@dataclass(eq=False)
class Document:
    title: str = ""
    sheets: List[Sheet] = field(default_factory=list)

    def add_sheet(self, name: str = "") -> Sheet:
        sheet = Sheet(name=name)
        self.sheets.append(sheet)
        return sheet


__all__ = [
    "DEFAULT_STAFF_LINES",
    "DiatonicPitch",
    "Document",
    "MusicElement",
    "Note",
    "Rest",
    "STEP_NAMES",
    "Sheet",
    "Staff",
    "Tie",
    "Voice",
    "tie_notes",
]
