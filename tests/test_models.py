"""Tests for the linear and ensemble training strategies."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from sklearn.linear_model import LogisticRegression

from duet import models
from duet.data import stratified_split
from duet.exceptions import ConvergenceError, FitError, InsufficientDataError, SchemaError
from duet.models import train_forest_model, train_linear_model
from duet.sampling import rose_balance
from duet.types import STATUS_COLUMN


@pytest.fixture
def split(dataset):
    return stratified_split(dataset, 0.7, rng=np.random.default_rng(0))


@pytest.fixture
def balanced(split) -> pd.DataFrame:
    return rose_balance(split.train, random_state=0)


def test_linear_model_probabilities(balanced, split) -> None:
    """The linear strategy returns well-formed probabilities and a CV AUC."""

    model = train_linear_model(balanced, random_state=0)
    proba = model.predict_proba(split.holdout)

    assert model.name == "linear"
    assert list(proba.columns) == ["MSS", "MSI"]
    assert proba.index.equals(split.holdout.index)
    np.testing.assert_allclose(proba.sum(axis=1), 1.0)
    assert model.cv_auc is not None and model.cv_auc > 0.7
    assert model.feature_names == tuple(c for c in balanced.columns if c != STATUS_COLUMN)


def test_linear_model_is_reproducible(balanced, split) -> None:
    first = train_linear_model(balanced, random_state=3)
    second = train_linear_model(balanced, random_state=3)

    pd.testing.assert_series_equal(
        first.positive_proba(split.holdout), second.positive_proba(split.holdout)
    )
    assert first.cv_auc == second.cv_auc


def test_linear_model_requires_rows_per_fold(dataset) -> None:
    """Classes smaller than the fold count cannot be cross-validated."""

    few = pd.concat(
        [dataset[dataset[STATUS_COLUMN] == "MSS"], dataset[dataset[STATUS_COLUMN] == "MSI"].iloc[:3]]
    )

    with pytest.raises(InsufficientDataError):
        train_linear_model(few, n_folds=5)


def test_linear_model_single_class_raises(dataset) -> None:
    negative_only = dataset[dataset[STATUS_COLUMN] == "MSS"]

    with pytest.raises(FitError) as excinfo:
        train_linear_model(negative_only)
    assert excinfo.value.strategy == "linear"


def test_linear_model_surfaces_non_convergence(balanced, monkeypatch) -> None:
    """Solver convergence warnings become a ConvergenceError."""

    monkeypatch.setattr(
        models, "LogisticRegression", lambda max_iter=1000: LogisticRegression(max_iter=1)
    )

    with pytest.raises(ConvergenceError) as excinfo:
        train_linear_model(balanced, random_state=0)
    assert excinfo.value.strategy == "linear"


def test_forest_model_uses_class_weights(split) -> None:
    """The ensemble trains on the unbalanced rows with the configured weights."""

    model = train_forest_model(split.train, n_trees=50, class_weights=(1.0, 3.0), random_state=0)

    assert model.name == "ensemble"
    assert model.estimator.class_weight == {0: 1.0, 1: 3.0}
    assert model.estimator.n_estimators == 50
    proba = model.predict_proba(split.holdout)
    np.testing.assert_allclose(proba.sum(axis=1), 1.0)


def test_forest_impurity_importance(split) -> None:
    """Impurity importance covers every feature and sums to one."""

    model = train_forest_model(split.train, n_trees=50, random_state=0)

    assert list(model.importance.index) == list(model.feature_names)
    assert model.importance.sum() == pytest.approx(1.0)
    assert (model.importance >= 0).all()


def test_forest_permutation_importance(split) -> None:
    model = train_forest_model(split.train, n_trees=30, importance="permutation", random_state=0)

    assert len(model.importance) == len(model.feature_names)
    assert np.isfinite(model.importance.to_numpy()).all()


def test_forest_single_class_raises(dataset) -> None:
    positive_only = dataset[dataset[STATUS_COLUMN] == "MSI"]

    with pytest.raises(FitError) as excinfo:
        train_forest_model(positive_only, n_trees=10)
    assert excinfo.value.strategy == "ensemble"


def test_forest_rejects_unknown_importance(split) -> None:
    with pytest.raises(ValueError):
        train_forest_model(split.train, importance="gain")


def test_predict_requires_feature_columns(split) -> None:
    model = train_forest_model(split.train, n_trees=10, random_state=0)

    with pytest.raises(SchemaError):
        model.predict_proba(split.holdout.drop(columns=["Factor1"]))
