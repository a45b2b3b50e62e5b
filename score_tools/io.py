"""File loading utilities for Standard MIDI Files."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from domain.score import Document, Sheet

from .midi_import import read_midi
from .midi_import.models import MidiImportReport
from .midi_import.reader import ImportSettings

MIDI_SUFFIXES = (".mid", ".midi", ".smf")


@dataclass(frozen=True)
class SheetLoadResult:
    """Container exposing the imported sheet, its document and the import report."""

    document: Document
    sheet: Sheet
    midi_report: MidiImportReport

    def __iter__(self):  # type: ignore[override]
        yield self.sheet
        yield self.midi_report


def load_sheet(
    path: str | Path,
    document: Document | None = None,
    *,
    settings: ImportSettings | None = None,
) -> SheetLoadResult:
    lower = str(path).lower()
    if not lower.endswith(MIDI_SUFFIXES):
        raise ValueError(f"Unsupported score file: {path}")
    if document is None:
        document = Document(title=Path(path).stem)
    sheet, report = read_midi(path, document, settings=settings)
    return SheetLoadResult(document=document, sheet=sheet, midi_report=report)


__all__ = ["MIDI_SUFFIXES", "SheetLoadResult", "load_sheet"]
