from .io import SheetLoadResult, load_sheet
from .note_values import decompose_time_length, describe_lengths
from .pitch import midi_to_diatonic_pitch, midi_to_name, midi_to_pitch

__all__ = [
    "load_sheet",
    "SheetLoadResult",
    "decompose_time_length",
    "describe_lengths",
    "midi_to_pitch",
    "midi_to_diatonic_pitch",
    "midi_to_name",
]
