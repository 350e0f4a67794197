"""Synthetic data generators shared by the test-suite."""

from __future__ import annotations

import numpy as np
import pandas as pd

from duet.projection import LatentFactorProjector, factor_name
from duet.types import STATUS_COLUMN

LEVELS = ("MSS", "MSI")


def make_canonical_dataset(
    n_negative: int = 70,
    n_positive: int = 30,
    n_features: int = 12,
    shift: float = 1.5,
    seed: int = 0,
) -> pd.DataFrame:
    """Return a canonical dataset whose positive class is shifted by ``shift``."""

    rng = np.random.default_rng(seed)
    negative = rng.normal(0.0, 1.0, size=(n_negative, n_features))
    positive = rng.normal(shift, 1.0, size=(n_positive, n_features))
    values = np.vstack([negative, positive])
    index = pd.Index([f"S{i:03d}" for i in range(len(values))], name="sample")

    frame = pd.DataFrame(
        values,
        index=index,
        columns=[factor_name(k) for k in range(1, n_features + 1)],
    )
    frame[STATUS_COLUMN] = pd.Categorical(
        [LEVELS[0]] * n_negative + [LEVELS[1]] * n_positive, categories=list(LEVELS)
    )
    return frame


def make_raw_inputs(
    n_negative: int = 60,
    n_positive: int = 25,
    n_unlabelled: int = 10,
    n_raw_features: int = 40,
    n_factors: int = 6,
    seed: int = 0,
):
    """Return ``(measurements, metadata, projector)`` for a noisy factor model.

    Positive samples are shifted on factors 1 and 2. The metadata mixes the
    case of the accepted status strings and contains ``n_unlabelled`` samples
    with an unsupported value or no value at all.
    """

    rng = np.random.default_rng(seed)
    n_samples = n_negative + n_positive + n_unlabelled
    loadings = rng.normal(size=(n_raw_features, n_factors))
    center = rng.normal(5.0, 1.0, size=n_raw_features)

    scores = rng.normal(size=(n_samples, n_factors))
    scores[n_negative : n_negative + n_positive, :2] += 2.0
    values = scores @ loadings.T + center + rng.normal(0.0, 0.1, size=(n_samples, n_raw_features))

    index = pd.Index([f"P{i:03d}" for i in range(n_samples)], name="sample")
    feature_names = [f"gene_{j}" for j in range(n_raw_features)]
    measurements = pd.DataFrame(values, index=index, columns=feature_names)

    unlabelled = ["MSI-L", None] * (n_unlabelled // 2) + ["MSI-L"] * (n_unlabelled % 2)
    status = (
        [" mss" if i % 3 == 0 else "MSS" for i in range(n_negative)]
        + ["msi" if i % 2 else "MSI" for i in range(n_positive)]
        + unlabelled
    )
    metadata = pd.DataFrame({"msi_status": status, "age": rng.integers(30, 80, n_samples)}, index=index)

    projector = LatentFactorProjector(feature_names, loadings, center)
    return measurements, metadata, projector
