"""Application service orchestrating MIDI imports into score documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from domain.score import Document
from score_tools.midi_import import (
    ImportSettings,
    MidiImportError,
    MidiImportOutcome,
    MidiImportReport,
    MidiImporter,
)
from shared.result import Result

logger = logging.getLogger(__name__)

ImportFn = Callable[[bytes, Document], Result[MidiImportOutcome, MidiImportError]]


def _default_importer(settings: ImportSettings) -> ImportFn:
    return MidiImporter(settings).import_sheet


@dataclass(slots=True)
class ScoreImportService:
    """High-level MIDI import entry point remembering the last outcome."""

    settings: ImportSettings = field(default_factory=ImportSettings)
    importer: ImportFn | None = None
    last_report: MidiImportReport | None = None
    last_error: MidiImportError | None = None

    def import_bytes(
        self, data: bytes, document: Document | None = None
    ) -> Result[MidiImportOutcome, MidiImportError]:
        if document is None:
            document = Document()
        importer = self.importer or _default_importer(self.settings)
        result = importer(data, document)
        if result.is_ok():
            outcome = result.unwrap()
            self.last_report = outcome.report
            self.last_error = None
        else:
            self.last_report = None
            self.last_error = result.unwrap_err()
            logger.warning("Import failed: %s", self.last_error)
        return result

    def import_file(
        self, path: str | Path, document: Document | None = None
    ) -> Result[MidiImportOutcome, MidiImportError]:
        """Read ``path`` and import it. Filesystem errors propagate as ``OSError``."""

        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError:
            self.last_report = None
            self.last_error = None
            raise
        if document is None:
            document = Document(title=path.stem)
        logger.info("Importing %s (%d byte(s))", path.name, len(data))
        return self.import_bytes(data, document)


__all__ = ["ImportFn", "ScoreImportService"]
