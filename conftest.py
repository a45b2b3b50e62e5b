"""Pytest configuration applied to the entire test suite."""

from __future__ import annotations

import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))


# Step definitions register before feature parsing so scenario text always
# finds its steps, whichever subset of tests is collected.
pytest_plugins = ["tests.e2e.steps.midi_import"]
