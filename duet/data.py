"""Dataset assembly and stratified partitioning."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from .exceptions import InsufficientDataError, SchemaError
from .projection import FeatureProjector, factor_name
from .types import STATUS_COLUMN, Split, StatusLabels

LOGGER = logging.getLogger(__name__)

MIN_CLASS_SIZE = 4


def assemble_dataset(
    measurements: pd.DataFrame,
    metadata: pd.DataFrame,
    projector: FeatureProjector,
    components: Sequence[int],
    labels: StatusLabels,
    *,
    status_column: str = "status",
) -> pd.DataFrame:
    """Build the canonical dataset of factor scores and binary status.

    Parameters
    ----------
    measurements:
        Raw measurement matrix indexed by sample identifier, one column per
        raw feature.
    metadata:
        Sample annotations indexed by sample identifier. Must contain
        ``status_column``.
    projector:
        Pretrained feature projector used to compute the factor scores.
    components:
        Ordered component identifiers to keep.
    labels:
        Accepted raw status values and their canonical levels.
    status_column:
        Name of the raw status column in ``metadata``.

    Returns
    -------
    pandas.DataFrame
        One row per retained sample, the ``Factor{k}`` score columns in
        ``components`` order and a categorical ``status`` column whose
        categories are ordered negative first.

    Raises
    ------
    SchemaError
        If ``status_column`` is missing, ``components`` is empty, the
        projector output does not match the request, or fewer than two status
        levels remain after filtering.
    """

    components = [int(c) for c in components]
    if not components:
        raise SchemaError("At least one component identifier is required")
    if status_column not in metadata.columns:
        raise SchemaError(f"Metadata has no status column '{status_column}'")

    status = labels.recode(metadata[status_column])
    keep = status.notna() & metadata.index.isin(measurements.index)
    n_dropped = int((~keep).sum())
    if n_dropped:
        LOGGER.info(
            "Dropping %s of %s samples without a recognised '%s' value or measurements",
            n_dropped,
            len(metadata),
            status_column,
        )
    status = status[keep]

    observed = status.cat.remove_unused_categories().cat.categories
    if len(observed) < 2:
        raise SchemaError(
            f"Need both '{labels.negative}' and '{labels.positive}' samples; "
            f"found {list(observed)}"
        )

    scores = projector.project(measurements.loc[status.index], components)
    expected_columns = [factor_name(c) for c in components]
    if list(scores.columns) != expected_columns:
        raise SchemaError(
            f"Projector returned columns {list(scores.columns)}, expected {expected_columns}"
        )
    if not scores.index.equals(status.index):
        raise SchemaError("Projector output is not aligned with the requested samples")

    dataset = scores.copy()
    dataset[STATUS_COLUMN] = status
    LOGGER.info(
        "Assembled dataset: %s samples, %s features, class counts %s",
        len(dataset),
        len(expected_columns),
        class_counts(dataset).to_dict(),
    )
    return dataset


def feature_columns(dataset: pd.DataFrame) -> list[str]:
    """Return every column of ``dataset`` except ``status``."""
    return [column for column in dataset.columns if column != STATUS_COLUMN]


def dataset_features(dataset: pd.DataFrame) -> pd.DataFrame:
    """Return the feature part of ``dataset``."""
    return dataset.loc[:, feature_columns(dataset)]


def encode_status(dataset: pd.DataFrame) -> np.ndarray:
    """Return the status as integers: 0 for the negative, 1 for the positive level."""

    if STATUS_COLUMN not in dataset.columns:
        raise SchemaError(f"Dataset has no '{STATUS_COLUMN}' column")
    status = dataset[STATUS_COLUMN]
    if not isinstance(status.dtype, pd.CategoricalDtype) or len(status.cat.categories) != 2:
        raise SchemaError(f"'{STATUS_COLUMN}' must be categorical with exactly two levels")
    codes = status.cat.codes.to_numpy()
    if (codes < 0).any():
        raise SchemaError("Dataset status contains missing values")
    return codes.astype(np.int64)


def class_counts(dataset: pd.DataFrame) -> pd.Series:
    """Return the number of rows per status level, in level order."""
    return dataset[STATUS_COLUMN].value_counts(sort=False)


def stratified_split(
    dataset: pd.DataFrame,
    train_fraction: float = 0.7,
    *,
    rng: np.random.Generator,
) -> Split:
    """Split ``dataset`` into training and holdout sets, class by class.

    Each class is sampled independently: ``round(n * train_fraction)`` rows,
    clamped so that both partitions receive at least one row, go to the
    training set. Rows keep their original order and index.

    Parameters
    ----------
    dataset:
        Canonical dataset to split. It is not modified.
    train_fraction:
        Share of each class assigned to training, ``0 < f < 1``.
    rng:
        Random source; the same generator state and input order always
        produce the same split.

    Raises
    ------
    InsufficientDataError
        If any class has fewer than four rows.
    """

    if not 0 < train_fraction < 1:
        raise ValueError("train_fraction must be between 0 and 1 (exclusive)")

    counts = class_counts(dataset)
    too_small = counts[counts < MIN_CLASS_SIZE]
    if not too_small.empty:
        raise InsufficientDataError(
            f"Classes need at least {MIN_CLASS_SIZE} samples to split; got {too_small.to_dict()}"
        )

    codes = encode_status(dataset)
    positions = np.arange(len(dataset))
    train_mask = np.zeros(len(dataset), dtype=bool)
    for code in range(len(counts)):
        members = positions[codes == code]
        n_train = int(round(len(members) * train_fraction))
        n_train = min(max(n_train, 1), len(members) - 1)
        chosen = rng.choice(members, size=n_train, replace=False)
        train_mask[chosen] = True

    split = Split(train=dataset.iloc[train_mask].copy(), holdout=dataset.iloc[~train_mask].copy())
    LOGGER.info(
        "Train/holdout split: %s/%s (train counts %s)",
        len(split.train),
        len(split.holdout),
        class_counts(split.train).to_dict(),
    )
    return split


__all__ = [
    "assemble_dataset",
    "feature_columns",
    "dataset_features",
    "encode_status",
    "class_counts",
    "stratified_split",
]
