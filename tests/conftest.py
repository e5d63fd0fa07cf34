import sys, os

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

import pytest

from tests.helpers import ScriptedRandom, grid_from_letters, striped_grid

__all__ = [
    "ScriptedRandom",
    "grid_from_letters",
    "striped_grid",
]


@pytest.fixture
def save_path(tmp_path):
    return tmp_path / "high_scores.json"
