from __future__ import annotations

from importlib import metadata

import pytest

from app import version


@pytest.fixture(autouse=True)
def _clear_version_cache():
    version.get_app_version.cache_clear()
    yield
    version.get_app_version.cache_clear()


def test_environment_version_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MIDI_SCORE_APP_VERSION", "v2.5.0")
    assert version.get_app_version() == "2.5.0"


def test_installed_distribution_version_is_used(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MIDI_SCORE_APP_VERSION", raising=False)
    requested: list[str] = []

    def _fake_version(name: str) -> str:
        requested.append(name)
        return "0.1.0"

    monkeypatch.setattr(version.metadata, "version", _fake_version)
    assert version.get_app_version() == "0.1.0"
    assert requested == ["midi-score-import"]


def test_uninstalled_tree_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MIDI_SCORE_APP_VERSION", raising=False)

    def _missing(name: str) -> str:
        raise metadata.PackageNotFoundError(name)

    monkeypatch.setattr(version.metadata, "version", _missing)
    assert version.get_app_version() == "0.0.0-dev"
