"""Pitch conversion tables and helpers between MIDI numbers and staff pitches."""

from __future__ import annotations

from typing import Tuple

from domain.score import STEP_NAMES, DiatonicPitch

PC_TO_STEP_SHARP = {
    0: ('C', 0),
    1: ('C', 1),
    2: ('D', 0),
    3: ('D', 1),
    4: ('E', 0),
    5: ('F', 0),
    6: ('F', 1),
    7: ('G', 0),
    8: ('G', 1),
    9: ('A', 0),
    10: ('A', 1),
    11: ('B', 0),
}
PC_TO_STEP_FLAT = {
    0: ('C', 0),
    1: ('D', -1),
    2: ('D', 0),
    3: ('E', -1),
    4: ('E', 0),
    5: ('F', 0),
    6: ('G', -1),
    7: ('G', 0),
    8: ('A', -1),
    9: ('A', 0),
    10: ('B', -1),
    11: ('B', 0),
}

_ACCIDENTAL_TEXT = {-1: 'b', 0: '', 1: '#'}


def midi_to_pitch(midi: int, prefer_flats: bool = False) -> Tuple[str, int, int]:
    octave = midi // 12 - 1
    pc = midi % 12
    step, alter = (PC_TO_STEP_FLAT if prefer_flats else PC_TO_STEP_SHARP)[pc]
    return step, alter, octave


def midi_to_diatonic_pitch(midi: int, prefer_flats: bool = False) -> DiatonicPitch:
    """Spell a chromatic MIDI pitch as a staff position plus accidental.

    Black keys are spelled with sharps unless ``prefer_flats`` is set; the
    key signature is not consulted.
    """
    step, alter, octave = midi_to_pitch(midi, prefer_flats=prefer_flats)
    return DiatonicPitch(note_name=octave * 7 + STEP_NAMES.index(step), accs=alter)


def midi_to_name(midi: int, flats: bool = False) -> str:
    step, alter, octave = midi_to_pitch(midi, prefer_flats=flats)
    return f"{step}{_ACCIDENTAL_TEXT[alter]}{octave}"


__all__ = [
    'PC_TO_STEP_SHARP',
    'PC_TO_STEP_FLAT',
    'midi_to_pitch',
    'midi_to_diatonic_pitch',
    'midi_to_name',
]
