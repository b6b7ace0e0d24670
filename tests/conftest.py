"""
Test fixtures for the CGPA tracker.

Provides the UGC preset, a preset with different grade points, and an
application state backed by a JSON file in a temporary directory.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from cgpa_tracker.grading_scales import GradingScalePreset, build_symbol_table, get_preset  # noqa: E402
from cgpa_tracker.state import AppState  # noqa: E402
from cgpa_tracker.storage import JsonFileStore  # noqa: E402


@pytest.fixture
def ugc():
    return get_preset("ugc")


@pytest.fixture
def strict_preset():
    """Different points and bands from UGC, and no A- or B+ symbols."""
    return GradingScalePreset(
        id="strict",
        display_name="Strict Scale",
        symbols=build_symbol_table([
            ("A+", 4.00, 90, 100),
            ("A", 3.70, 80, 89),
            ("B", 3.00, 60, 79),
            ("F", 0.00, 0, 59),
        ]),
        description="Test-only scale",
    )


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(str(tmp_path / "state.json"))


@pytest.fixture
def state(store):
    return AppState.create(store)
