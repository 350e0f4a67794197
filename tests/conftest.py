# tests/conftest.py
# Ensure project root is importable during pytest runs
import pathlib
import sys

import matplotlib
import pytest

matplotlib.use("Agg")

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tests.utils.synthetic import make_canonical_dataset, make_raw_inputs  # noqa: E402


@pytest.fixture
def dataset():
    """100 samples (70 negative, 30 positive) with 12 separable factor scores."""
    return make_canonical_dataset()


@pytest.fixture
def raw_inputs():
    """Raw measurements, metadata and the projector that generated them."""
    return make_raw_inputs()
