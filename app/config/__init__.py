"""Application-wide configuration loaded from JSON resources."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping

from shared.logging_config import LogVerbosity

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from score_tools.midi_import import ImportSettings

logger = logging.getLogger(__name__)

_CONFIG_RESOURCE = "app.json"
_APP_CONFIG_CACHE: AppConfig | None = None

_DEFAULT_QUANTIZATION_UNIT = 32
_DEFAULT_MAX_DOTS = 4
_DEFAULT_OVERLAP_POLICY = "discard"
_OVERLAP_POLICIES = frozenset({"discard"})
_MAX_DOTS_LIMIT = 7
_GRID_STEP = 8


@dataclass(frozen=True)
class ImporterConfig:
    """Defaults for the temporal reconstruction stages of an import."""

    quantization_unit: int = _DEFAULT_QUANTIZATION_UNIT
    max_dots: int = _DEFAULT_MAX_DOTS
    overlap_policy: str = _DEFAULT_OVERLAP_POLICY
    prefer_flats: bool = False

    def to_settings(self) -> "ImportSettings":
        from score_tools.midi_import import ImportSettings, OverlapPolicy

        return ImportSettings(
            quantization_unit=self.quantization_unit,
            max_dots=self.max_dots,
            overlap_policy=OverlapPolicy(self.overlap_policy),
            prefer_flats=self.prefer_flats,
        )


@dataclass(frozen=True)
class LoggingConfig:
    verbosity: LogVerbosity = LogVerbosity.INFO


@dataclass(frozen=True)
class AppConfig:
    """Structured configuration values for the importer."""

    importer: ImporterConfig
    logging: LoggingConfig


def get_app_config() -> AppConfig:
    """Return the cached application configuration."""

    global _APP_CONFIG_CACHE
    if _APP_CONFIG_CACHE is None:
        _APP_CONFIG_CACHE = load_app_config()
    return _APP_CONFIG_CACHE


def reset_app_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _APP_CONFIG_CACHE
    _APP_CONFIG_CACHE = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from ``path`` or the bundled JSON resource."""

    data = _read_config_data(path)
    importer = _parse_importer_section(data.get("importer"))
    logging_config = _parse_logging_section(data.get("logging"))
    return AppConfig(importer=importer, logging=logging_config)


def get_importer_config() -> ImporterConfig:
    return get_app_config().importer


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        logger.warning("Could not read config file %s; using defaults", path)
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed JSON configuration")
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _parse_importer_section(section: Any) -> ImporterConfig:
    if not isinstance(section, Mapping):
        return ImporterConfig()
    unit = _coerce_positive_int(section.get("quantization_unit"), default=_DEFAULT_QUANTIZATION_UNIT)
    if unit % _GRID_STEP:
        logger.warning(
            "Quantization unit %d is not a multiple of %d ticks; using %d",
            unit,
            _GRID_STEP,
            _DEFAULT_QUANTIZATION_UNIT,
        )
        unit = _DEFAULT_QUANTIZATION_UNIT
    max_dots = _coerce_int_in_range(
        section.get("max_dots"), low=0, high=_MAX_DOTS_LIMIT, default=_DEFAULT_MAX_DOTS
    )
    policy = section.get("overlap_policy")
    if not isinstance(policy, str) or policy.strip().lower() not in _OVERLAP_POLICIES:
        policy = _DEFAULT_OVERLAP_POLICY
    prefer_flats = section.get("prefer_flats")
    if not isinstance(prefer_flats, bool):
        prefer_flats = False
    return ImporterConfig(
        quantization_unit=unit,
        max_dots=max_dots,
        overlap_policy=policy.strip().lower(),
        prefer_flats=prefer_flats,
    )


def _parse_logging_section(section: Any) -> LoggingConfig:
    if not isinstance(section, Mapping):
        return LoggingConfig()
    value = section.get("verbosity")
    if isinstance(value, str):
        try:
            return LoggingConfig(verbosity=LogVerbosity(value.strip().lower()))
        except ValueError:
            pass
    return LoggingConfig()


def _coerce_positive_int(value: Any, *, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(float(value))
        except ValueError:
            return default
    else:
        return default
    if candidate <= 0:
        return default
    return candidate


def _coerce_int_in_range(value: Any, *, low: int, high: int, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        return default
    try:
        candidate = int(value)
    except ValueError:
        return default
    if not low <= candidate <= high:
        return default
    return candidate


__all__ = [
    "AppConfig",
    "ImporterConfig",
    "LoggingConfig",
    "get_app_config",
    "get_importer_config",
    "load_app_config",
    "reset_app_config_cache",
]
