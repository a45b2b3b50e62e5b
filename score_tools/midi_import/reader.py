"""Facade running the whole MIDI-to-sheet import with reporting."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from domain.score import Document, Sheet
from shared.result import Result

from ..note_values import DEFAULT_MAX_DOTS, SMALLEST_TIME_LENGTH
from .combiner import combine_events
from .decoders import MidiFileDecoder
from .logging_utils import describe_channel, describe_header, describe_statistics
from .models import (
    DEFAULT_QUANTIZATION_UNIT,
    ImportStatistics,
    MidiImportError,
    MidiImportReport,
)
from .overlap import OverlapPolicy, resolve_overlaps
from .quantize import quantize_events
from .score_builder import build_sheet

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "imported"


@dataclass(frozen=True)
class ImportSettings:
    """Knobs for the temporal reconstruction stages."""

    quantization_unit: int = DEFAULT_QUANTIZATION_UNIT
    max_dots: int = DEFAULT_MAX_DOTS
    overlap_policy: OverlapPolicy = OverlapPolicy.DISCARD
    prefer_flats: bool = False

    def __post_init__(self) -> None:
        if int(self.quantization_unit) <= 0:
            raise ValueError(f"Quantization unit must be positive, got {self.quantization_unit}")
        if int(self.quantization_unit) % SMALLEST_TIME_LENGTH:
            raise ValueError(
                f"Quantization unit must be a multiple of {SMALLEST_TIME_LENGTH} ticks, "
                f"got {self.quantization_unit}"
            )
        if int(self.max_dots) < 0:
            raise ValueError(f"max_dots must be non-negative, got {self.max_dots}")
        object.__setattr__(self, "overlap_policy", OverlapPolicy(self.overlap_policy))


@dataclass(frozen=True)
class MidiImportOutcome:
    """The populated sheet together with the import report."""

    sheet: Sheet
    report: MidiImportReport


class MidiImporter:
    """Convert Standard MIDI File bytes into a populated sheet.

    Each call owns its intermediate event lists; nothing is retained between
    imports. Failures leave the document untouched.
    """

    def __init__(self, settings: ImportSettings | None = None):
        self.settings = settings or ImportSettings()

    def import_sheet(
        self, data: bytes, document: Document
    ) -> Result[MidiImportOutcome, MidiImportError]:
        try:
            outcome = self._run(data, document)
        except MidiImportError as exc:
            logger.warning("MIDI import failed: %s", exc)
            return Result.err(exc)
        return Result.ok(outcome)

    def _run(self, data: bytes, document: Document) -> MidiImportOutcome:
        settings = self.settings
        decoded = MidiFileDecoder.decode(data)
        logger.info("Decoded MIDI header: %s", describe_header(decoded.header))

        channels = decoded.channels
        unmatched = combine_events(channels)
        lost = quantize_events(channels, settings.quantization_unit)
        discarded = resolve_overlaps(channels, settings.overlap_policy)
        if logger.isEnabledFor(logging.DEBUG):
            for channel in channels.active_channels():
                logger.debug("Resolved %s", describe_channel(channel, channels[channel]))

        sheet, created = _target_sheet(document)
        summary = build_sheet(
            channels,
            sheet,
            max_dots=settings.max_dots,
            prefer_flats=settings.prefer_flats,
        )
        if created:
            document.sheets.append(sheet)

        statistics = ImportStatistics(
            unmatched_note_ons=unmatched,
            lost_notes=lost,
            discarded_overlaps=discarded,
            notes_written=summary.notes_written,
            rests_written=summary.rests_written,
            ties_written=summary.ties_written,
        )
        logger.info("MIDI import finished: %s", describe_statistics(statistics))
        report = MidiImportReport(
            header=decoded.header,
            statistics=statistics,
            tracks=decoded.tracks,
            tempo_changes=tuple(decoded.tempo_changes),
            key_signatures=tuple(decoded.key_signatures),
            time_signatures=tuple(decoded.time_signatures),
            quantization_unit=settings.quantization_unit,
            smpte_offset=decoded.smpte_offset,
        )
        return MidiImportOutcome(sheet=sheet, report=report)


def _target_sheet(document: Document) -> tuple[Sheet, bool]:
    if document.sheets:
        return document.sheets[0], False
    return Sheet(name=DEFAULT_SHEET_NAME), True


def import_midi_bytes(
    data: bytes,
    document: Document | None = None,
    *,
    settings: ImportSettings | None = None,
) -> Result[MidiImportOutcome, MidiImportError]:
    """Import ``data`` into ``document`` (a fresh one when omitted)."""

    return MidiImporter(settings).import_sheet(data, document if document is not None else Document())


def read_midi(
    path: str | Path,
    document: Document | None = None,
    *,
    settings: ImportSettings | None = None,
) -> tuple[Sheet, MidiImportReport]:
    """Import the MIDI file at ``path``; raise :class:`MidiImportError` on failure."""

    data = Path(path).read_bytes()
    outcome = import_midi_bytes(data, document, settings=settings).unwrap()
    return outcome.sheet, outcome.report


__all__ = [
    "DEFAULT_SHEET_NAME",
    "ImportSettings",
    "MidiImportOutcome",
    "MidiImporter",
    "import_midi_bytes",
    "read_midi",
]
