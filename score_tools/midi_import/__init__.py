"""Public facade for MIDI import helpers."""

from .models import (
    DEFAULT_QUANTIZATION_UNIT,
    ChannelEvents,
    ImportStatistics,
    MidiErrorKind,
    MidiImportError,
    MidiImportReport,
    RawEvent,
    TrackHeader,
    TrackSummary,
)
from .streams import StreamReader, decode_varlen, encode_varlen
from .decoders import DecodedFile, MidiFileDecoder, decode_midi_bytes
from .combiner import combine_channel, combine_events
from .quantize import quantize_channel, quantize_events, round_to_grid
from .overlap import OverlapPolicy, resolve_channel_overlaps, resolve_overlaps
from .score_builder import BuildSummary, build_sheet, write_channel_to_voice
from .reader import (
    ImportSettings,
    MidiImportOutcome,
    MidiImporter,
    import_midi_bytes,
    read_midi,
)

__all__ = [
    "DEFAULT_QUANTIZATION_UNIT",
    "BuildSummary",
    "ChannelEvents",
    "DecodedFile",
    "ImportSettings",
    "ImportStatistics",
    "MidiErrorKind",
    "MidiFileDecoder",
    "MidiImportError",
    "MidiImportOutcome",
    "MidiImportReport",
    "MidiImporter",
    "OverlapPolicy",
    "RawEvent",
    "StreamReader",
    "TrackHeader",
    "TrackSummary",
    "build_sheet",
    "combine_channel",
    "combine_events",
    "decode_midi_bytes",
    "decode_varlen",
    "encode_varlen",
    "import_midi_bytes",
    "quantize_channel",
    "quantize_events",
    "read_midi",
    "resolve_channel_overlaps",
    "resolve_overlaps",
    "round_to_grid",
    "write_channel_to_voice",
]
