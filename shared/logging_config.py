"""Central logging configuration for the MIDI score importer.

Import diagnostics (per-stage statistics at INFO, per-event decoding at
DEBUG) are written to a single log file so a problematic MIDI file can be
investigated after the fact. Repeated calls are no-ops, which keeps the CLI,
the service layer and the tests from stacking duplicate handlers.

Two environment variables customise where the log file is written:

``MIDI_SCORE_LOG_FILE``
    Absolute path to the log file that should be created.

``MIDI_SCORE_LOG_DIR``
    Directory where the default log file name will be created. Ignored when
    ``MIDI_SCORE_LOG_FILE`` is present.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

_LOG_FILE_ENV = "MIDI_SCORE_LOG_FILE"
_LOG_DIR_ENV = "MIDI_SCORE_LOG_DIR"
_DEFAULT_DIRNAME = ".midi_score_import"
_DEFAULT_LOGNAME = "import.log"
_HANDLER_TAG = "_midi_score_logging_handler"
_CONFIGURED = False
_LOG_PATH: Path | None = None
_FILE_HANDLER: logging.FileHandler | None = None
_STDERR_HANDLER: logging.Handler | None = None

USER_HOME_PLACEHOLDER = "<user_home>"


class LogVerbosity(str, Enum):
    """Verbosity levels supported by the import log file."""

    DISABLED = "disabled"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.DISABLED: logging.CRITICAL + 1,
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}

_DEFAULT_VERBOSITY = LogVerbosity.INFO
_CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


def _home_candidates() -> set[str]:
    candidates = {str(Path.home())}
    for env_var in ("HOME", "USERPROFILE"):
        value = os.environ.get(env_var)
        if value:
            candidates.add(os.path.expanduser(value))
    return {
        os.path.normpath(candidate)
        for candidate in candidates
        if candidate and os.path.normpath(candidate) not in {os.sep, "."}
    }


def _build_redaction_patterns() -> tuple[re.Pattern[str], ...]:
    flags = re.IGNORECASE if os.name == "nt" else 0
    variants: set[str] = set()
    for path in _home_candidates():
        variants.update({path, path.replace("\\", "/"), path.replace("/", "\\")})
    # Longest first so a nested home path is not half-replaced.
    ordered = sorted(variants, key=len, reverse=True)
    return tuple(re.compile(re.escape(variant), flags) for variant in ordered)


_REDACTION_PATTERNS = _build_redaction_patterns()


def _sanitize_text(message: str) -> str:
    for pattern in _REDACTION_PATTERNS:
        message = pattern.sub(USER_HOME_PLACEHOLDER, message)
    return message


class _RedactingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return _sanitize_text(super().format(record))


def ensure_app_logging() -> Path:
    """Configure the root logger for the importer.

    The first invocation installs a file handler at the current file
    verbosity and an INFO stderr handler when stderr is interactive. Later
    calls return the already configured log file path.
    """

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _STDERR_HANDLER

    if _CONFIGURED and _LOG_PATH is not None:
        return _LOG_PATH

    log_path = _resolve_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    formatter = _RedactingFormatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(_VERBOSITY_LEVELS[_CURRENT_VERBOSITY])
    file_handler.setFormatter(formatter)
    setattr(file_handler, _HANDLER_TAG, True)
    root.addHandler(file_handler)
    _FILE_HANDLER = file_handler

    if _should_log_to_stderr(root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.INFO)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _HANDLER_TAG, True)
        root.addHandler(stream_handler)
        _STDERR_HANDLER = stream_handler

    _CONFIGURED = True
    _LOG_PATH = log_path

    logging.getLogger(__name__).info(
        "Writing import logs to %s (verbosity=%s)", log_path, _CURRENT_VERBOSITY.value
    )
    return log_path


def set_file_log_verbosity(verbosity: LogVerbosity | str) -> None:
    """Adjust the minimum severity recorded in the import log file."""

    global _CURRENT_VERBOSITY

    if isinstance(verbosity, str):
        try:
            verbosity = LogVerbosity(verbosity.lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    ensure_app_logging()
    _CURRENT_VERBOSITY = verbosity
    if _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(_VERBOSITY_LEVELS[verbosity])
    logging.getLogger(__name__).info("File log verbosity set to %s", verbosity.value)


def get_file_log_verbosity() -> LogVerbosity:
    return _CURRENT_VERBOSITY


def get_log_path() -> Path | None:
    """Return the active log file, or ``None`` before :func:`ensure_app_logging`."""

    return _LOG_PATH


def _resolve_log_path() -> Path:
    env_file = os.environ.get(_LOG_FILE_ENV)
    if env_file:
        return Path(env_file).expanduser()

    env_dir = os.environ.get(_LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser() / _DEFAULT_LOGNAME

    return Path.home() / _DEFAULT_DIRNAME / "logs" / _DEFAULT_LOGNAME


def _should_log_to_stderr(handlers: Iterable[logging.Handler]) -> bool:
    stderr = getattr(sys, "stderr", None)
    is_tty = getattr(stderr, "isatty", None)
    if not callable(is_tty) or not is_tty():
        return False
    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is stderr:
            return False
    return True


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_app_logging`."""

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _STDERR_HANDLER, _CURRENT_VERBOSITY

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    _CONFIGURED = False
    _LOG_PATH = None
    _FILE_HANDLER = None
    _STDERR_HANDLER = None
    _CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


__all__ = [
    "LogVerbosity",
    "USER_HOME_PLACEHOLDER",
    "ensure_app_logging",
    "get_file_log_verbosity",
    "get_log_path",
    "set_file_log_verbosity",
]
