"""Class rebalancing by smoothed bootstrap (ROSE).

Random Over-Sampling Examples draws each synthetic row from a kernel density
estimate of its class: a seed row of the class is picked at random and
Gaussian noise is added with a class-specific diagonal bandwidth. The draws
come from :class:`imblearn.over_sampling.RandomOverSampler` with ``shrinkage``
set, which implements this smoothed bootstrap; :class:`ROSESampler` keeps only
the generated rows and fixes how many of each class are drawn.
"""

from __future__ import annotations

import logging
from numbers import Integral, Real
from typing import Optional

import numpy as np
import pandas as pd
from imblearn.base import BaseSampler
from imblearn.over_sampling import RandomOverSampler
from sklearn.utils import check_random_state
from sklearn.utils._param_validation import Interval, StrOptions

from .data import class_counts, encode_status, feature_columns
from .exceptions import InsufficientDataError
from .types import STATUS_COLUMN

LOGGER = logging.getLogger(__name__)


class ROSESampler(BaseSampler):
    """Replace a binary training set by rows drawn from smoothed class densities.

    Unlike plain over-sampling, none of the input rows are returned: the
    output holds ``n_samples`` synthetic rows, ``round(n_samples *
    positive_fraction)`` of class ``1`` and the rest of class ``0``, in random
    order.

    Parameters
    ----------
    n_samples : int, optional
        Size of the generated set. Defaults to the number of input rows.
    positive_fraction : float, default=0.5
        Target share of class ``1``.
    shrinkage : tuple of float, optional
        ``(class 0, class 1)`` multipliers of the kernel bandwidth. ``0``
        reduces a class to plain bootstrap resampling. Defaults to ``(1, 1)``.
    random_state : int, RandomState instance or None
        Controls seed-row selection, kernel noise and row order.
    """

    _sampling_type = "bypass"
    _parameter_constraints = {
        "sampling_strategy": [StrOptions({"auto"})],
        "n_samples": [None, Interval(Integral, 2, None, closed="left")],
        "positive_fraction": [Interval(Real, 0, 1, closed="neither")],
        "shrinkage": [None, tuple, list],
        "random_state": ["random_state"],
    }

    def __init__(
        self,
        *,
        n_samples=None,
        positive_fraction=0.5,
        shrinkage=None,
        random_state=None,
        sampling_strategy="auto",
    ):
        self.n_samples = n_samples
        self.positive_fraction = positive_fraction
        self.shrinkage = shrinkage
        self.random_state = random_state
        self.sampling_strategy = sampling_strategy

    def _class_targets(self, n_rows: int) -> dict[int, int]:
        n_total = n_rows if self.n_samples is None else int(self.n_samples)
        n_positive = int(round(n_total * self.positive_fraction))
        n_positive = min(max(n_positive, 1), n_total - 1)
        return {0: n_total - n_positive, 1: n_positive}

    def _fit_resample(self, X, y):
        random_state = check_random_state(self.random_state)
        present = set(np.unique(y).tolist())
        if present != {0, 1}:
            raise ValueError(f"ROSESampler expects classes 0 and 1; got {sorted(present)}")

        shrinkage = (1.0, 1.0) if self.shrinkage is None else tuple(self.shrinkage)
        if len(shrinkage) != 2:
            raise ValueError("shrinkage must hold one factor per class")

        targets = self._class_targets(len(y))
        counts = {klass: int(np.sum(y == klass)) for klass in targets}
        oversampler = RandomOverSampler(
            sampling_strategy={klass: counts[klass] + targets[klass] for klass in targets},
            shrinkage={klass: float(shrinkage[klass]) for klass in targets},
            random_state=random_state,
        )
        X_all, y_all = oversampler.fit_resample(X, y)

        # the oversampler returns the input rows first, then the draws
        order = random_state.permutation(sum(targets.values()))
        return np.asarray(X_all)[len(y):][order], np.asarray(y_all)[len(y):][order]


def rose_balance(
    train: pd.DataFrame,
    *,
    random_state: int | np.random.RandomState | None = None,
    n_samples: Optional[int] = None,
    positive_fraction: float = 0.5,
    kernel_scale: tuple[float, float] = (1.0, 1.0),
) -> pd.DataFrame:
    """Return a synthetic, approximately balanced copy of ``train``.

    Parameters
    ----------
    train:
        Canonical training set with a categorical ``status`` column. It is not
        modified.
    random_state:
        Seed or ``RandomState`` for seed-row selection, kernel noise and row
        order.
    n_samples:
        Size of the generated set. Defaults to ``len(train)``.
    positive_fraction:
        Target share of positive rows.
    kernel_scale:
        ``(negative, positive)`` bandwidth multipliers. ``0`` reduces the
        corresponding class to plain bootstrap resampling.

    Returns
    -------
    pandas.DataFrame
        Rows drawn from the smoothed class densities, with the same columns,
        column order and dtypes as ``train`` and a fresh ``RangeIndex``.

    Raises
    ------
    InsufficientDataError
        If a class has fewer than two rows, leaving its spread undefined.
    """

    if not 0 < positive_fraction < 1:
        raise ValueError("positive_fraction must be between 0 and 1 (exclusive)")
    if n_samples is not None and int(n_samples) < 2:
        raise ValueError("n_samples must be at least 2")

    counts = class_counts(train)
    too_small = counts[counts < 2]
    if not too_small.empty:
        raise InsufficientDataError(
            f"Classes need at least 2 rows to estimate a density; got {too_small.to_dict()}"
        )

    features = feature_columns(train)
    sampler = ROSESampler(
        n_samples=None if n_samples is None else int(n_samples),
        positive_fraction=positive_fraction,
        shrinkage=tuple(float(s) for s in kernel_scale),
        random_state=random_state,
    )
    synthetic, synthetic_codes = sampler.fit_resample(
        train.loc[:, features].astype(np.float64), encode_status(train)
    )

    balanced = pd.DataFrame(np.asarray(synthetic), columns=features)
    for column in features:
        balanced[column] = balanced[column].astype(train[column].dtype)
    balanced[STATUS_COLUMN] = pd.Categorical.from_codes(
        np.asarray(synthetic_codes), dtype=train[STATUS_COLUMN].dtype
    )
    balanced = balanced.loc[:, list(train.columns)]

    LOGGER.info(
        "Balanced training set: %s rows, class counts %s (from %s)",
        len(balanced),
        class_counts(balanced).to_dict(),
        counts.to_dict(),
    )
    return balanced


__all__ = ["ROSESampler", "rose_balance"]
