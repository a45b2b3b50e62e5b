from __future__ import annotations

import pytest

from domain.score import Document
from score_tools.midi_import import (
    ImportSettings,
    MidiErrorKind,
    MidiImportError,
)
from services.import_service import ScoreImportService
from shared.result import Result
from tests.helpers import minimal_note_file


def test_import_file_records_last_report(write_midi) -> None:
    path = write_midi(minimal_note_file(), "melody.mid")
    service = ScoreImportService()

    result = service.import_file(path)

    assert result.is_ok()
    outcome = result.unwrap()
    assert service.last_report is outcome.report
    assert service.last_error is None
    assert outcome.sheet.staffs[0].voices[0].notes()[0].pitch.describe() == "C4"


def test_import_into_given_document(write_midi) -> None:
    document = Document(title="Existing")
    sheet = document.add_sheet("main")
    service = ScoreImportService(settings=ImportSettings(prefer_flats=True))

    outcome = service.import_file(write_midi(minimal_note_file()), document).unwrap()

    assert outcome.sheet is sheet
    assert document.title == "Existing"


def test_failed_import_records_error(write_midi) -> None:
    service = ScoreImportService()
    service.import_file(write_midi(minimal_note_file()))
    assert service.last_report is not None

    result = service.import_file(write_midi(b"RIFF\x00\x00\x00\x00", "bad.mid"))

    assert result.is_err()
    assert service.last_report is None
    assert service.last_error is result.unwrap_err()
    assert service.last_error.kind is MidiErrorKind.UNRECOGNIZED_CHUNK


def test_missing_file_raises(tmp_path) -> None:
    service = ScoreImportService()
    with pytest.raises(FileNotFoundError):
        service.import_file(tmp_path / "absent.mid")
    assert service.last_report is None and service.last_error is None


def test_injected_importer_is_used() -> None:
    calls: list[tuple[bytes, Document]] = []
    error = MidiImportError(MidiErrorKind.MALFORMED_HEADER, 0, "fake")

    def _fake_importer(data: bytes, document: Document) -> Result:
        calls.append((data, document))
        return Result.err(error)

    service = ScoreImportService(importer=_fake_importer)
    result = service.import_bytes(b"data")

    assert result.unwrap_err() is error
    assert calls and calls[0][0] == b"data"
    assert service.last_error is error
