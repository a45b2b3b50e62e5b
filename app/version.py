"""Application version helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata

_DISTRIBUTION = "midi-score-import"
_FALLBACK_VERSION = "0.0.0-dev"
_VERSION_ENV = "MIDI_SCORE_APP_VERSION"


def _version_from_env() -> str | None:
    env_version = os.environ.get(_VERSION_ENV, "").strip()
    if env_version.startswith("v"):
        env_version = env_version[1:]
    return env_version or None


def _version_from_metadata() -> str | None:
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return None


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return the importer version.

    ``MIDI_SCORE_APP_VERSION`` overrides the version of the installed
    distribution; a source tree that was never installed reports a
    development version.
    """

    return _version_from_env() or _version_from_metadata() or _FALLBACK_VERSION


__all__ = ["get_app_version"]
