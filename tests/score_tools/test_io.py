from __future__ import annotations

import pytest

from score_tools.io import load_sheet
from score_tools.midi_import import ImportSettings
from tests.helpers import minimal_note_file


@pytest.mark.parametrize("name", ["song.mid", "SONG.MIDI", "take.smf"])
def test_load_sheet_accepts_midi_extensions(write_midi, name: str) -> None:
    path = write_midi(minimal_note_file(), name)

    result = load_sheet(path)

    assert result.document.title == path.stem
    assert result.document.sheets == [result.sheet]
    assert result.midi_report.statistics.notes_written == 1
    sheet, report = result
    assert sheet is result.sheet and report is result.midi_report


def test_load_sheet_rejects_other_files(tmp_path) -> None:
    path = tmp_path / "score.musicxml"
    path.write_text("<score/>", encoding="utf-8")
    with pytest.raises(ValueError, match="Unsupported score file"):
        load_sheet(path)


def test_load_sheet_forwards_settings(write_midi) -> None:
    path = write_midi(minimal_note_file())
    result = load_sheet(path, settings=ImportSettings(quantization_unit=128))
    assert result.midi_report.quantization_unit == 128
    # 480 ticks snap to 512 on a 128 grid.
    assert result.sheet.staffs[0].voices[0].elements[0].time_length == 512
