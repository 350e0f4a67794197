"""Tests for the pretrained latent-factor projector."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from duet.exceptions import SchemaError
from duet.projection import LatentFactorProjector, load_projector, save_projector


def _noise_free_inputs(seed: int = 0):
    rng = np.random.default_rng(seed)
    loadings = rng.normal(size=(20, 4))
    center = rng.normal(size=20)
    scores = rng.normal(size=(15, 4))
    names = [f"f{j}" for j in range(20)]
    frame = pd.DataFrame(scores @ loadings.T + center, columns=names)
    return LatentFactorProjector(names, loadings, center), frame, scores


def test_projection_recovers_scores_in_requested_order() -> None:
    """Noise-free data projects back onto the generating scores."""

    projector, frame, scores = _noise_free_inputs()

    projected = projector.project(frame, [3, 1])

    assert list(projected.columns) == ["Factor3", "Factor1"]
    assert projected.index.equals(frame.index)
    np.testing.assert_allclose(projected.to_numpy(), scores[:, [2, 0]], atol=1e-8)


def test_projection_aligns_columns_by_name() -> None:
    """Column order of the measurements does not change the scores."""

    projector, frame, _ = _noise_free_inputs()
    shuffled = frame.loc[:, frame.columns[::-1]].copy()
    shuffled["extra"] = 1.0

    pd.testing.assert_frame_equal(
        projector.project(shuffled, [1, 2]), projector.project(frame, [1, 2])
    )


def test_missing_values_are_imputed_with_center() -> None:
    """NaN measurements still yield finite scores."""

    projector, frame, _ = _noise_free_inputs()
    frame.iloc[0, :5] = np.nan

    projected = projector.project(frame, [1, 2, 3, 4])

    assert np.isfinite(projected.to_numpy()).all()


@pytest.mark.parametrize("components", [[], [0], [5], [1, 9]])
def test_invalid_components_raise_schema_error(components) -> None:
    """Empty or out-of-range component lists are rejected."""

    projector, frame, _ = _noise_free_inputs()

    with pytest.raises(SchemaError):
        projector.project(frame, components)


def test_missing_features_raise_schema_error() -> None:
    """Measurements lacking a projector feature are rejected."""

    projector, frame, _ = _noise_free_inputs()

    with pytest.raises(SchemaError, match="lack 1 projector features"):
        projector.project(frame.drop(columns=["f3"]), [1])


def test_constructor_validates_shapes() -> None:
    """Feature names and centre must match the loadings."""

    with pytest.raises(ValueError):
        LatentFactorProjector(["a", "b"], np.ones((3, 2)))
    with pytest.raises(ValueError):
        LatentFactorProjector(["a", "b"], np.ones((2, 2)), center=np.zeros(3))


def test_save_and_load(tmp_path) -> None:
    """A saved projector reproduces the same scores after loading."""

    projector, frame, _ = _noise_free_inputs()
    path = tmp_path / "models" / "projector.pt"

    save_projector(projector, path)
    loaded = load_projector(path)

    assert loaded.feature_names == projector.feature_names
    pd.testing.assert_frame_equal(
        loaded.project(frame, [1, 4]), projector.project(frame, [1, 4])
    )
