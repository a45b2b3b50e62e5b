from __future__ import annotations

import sys
from pathlib import Path

import pytest

from app.config import reset_app_config_cache
from shared import logging_config


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()


@pytest.fixture(autouse=True)
def _isolated_log_dir(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """Keep import logs out of the real home directory."""

    monkeypatch.setenv("MIDI_SCORE_LOG_DIR", str(tmp_path_factory.mktemp("logs")))
    monkeypatch.delenv("MIDI_SCORE_LOG_FILE", raising=False)
    reset_app_config_cache()
    yield
    logging_config._reset_for_tests()
    reset_app_config_cache()


@pytest.fixture
def write_midi(tmp_path: Path):
    """Write MIDI bytes to a temporary ``.mid`` file and return its path."""

    def _write(data: bytes, name: str = "song.mid") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
