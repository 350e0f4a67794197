"""Training strategies for the two competing classifiers.

The linear strategy fits a regularised logistic regression on the rebalanced
training set and selects its regularisation strength by cross-validated ROC
AUC. The ensemble strategy fits a random forest on the original, imbalanced
training set and compensates with per-class cost weights instead.
"""

from __future__ import annotations

import logging
import warnings
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.exceptions import ConvergenceWarning
from sklearn.inspection import permutation_importance
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import GridSearchCV, StratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from .data import class_counts, encode_status, feature_columns
from .exceptions import ConvergenceError, FitError, InsufficientDataError
from .types import STATUS_COLUMN, TrainedModel

LOGGER = logging.getLogger(__name__)

LINEAR = "linear"
ENSEMBLE = "ensemble"


def _training_arrays(
    frame: pd.DataFrame, strategy: str
) -> tuple[np.ndarray, np.ndarray, list[str], tuple[str, str]]:
    """Return ``(X, y, feature_names, levels)`` or raise :class:`FitError`."""

    features = feature_columns(frame)
    if not features:
        raise FitError(strategy, "training data has no feature columns")
    y = encode_status(frame)
    if np.unique(y).size < 2:
        raise FitError(strategy, "training data contains a single class")
    X = frame.loc[:, features].to_numpy(dtype=float)
    if not np.all(np.isfinite(X)):
        raise FitError(strategy, "training features contain non-finite values")
    levels = tuple(str(level) for level in frame[STATUS_COLUMN].cat.categories)
    return X, y, features, levels


def train_linear_model(
    balanced: pd.DataFrame,
    *,
    n_folds: int = 5,
    cs: Sequence[float] = (0.1, 1.0, 10.0),
    random_state: int = 0,
) -> TrainedModel:
    """Fit the cross-validated logistic regression strategy.

    Parameters
    ----------
    balanced:
        Rebalanced training set produced by
        :func:`duet.sampling.rose_balance`.
    n_folds:
        Number of stratified folds.
    cs:
        Inverse L2 regularisation strengths to compare. The value with the
        best mean fold ROC AUC is refit on all rows.
    random_state:
        Seed of the fold shuffling.

    Returns
    -------
    TrainedModel
        Model named ``"linear"`` carrying the best mean cross-validated AUC.

    Raises
    ------
    InsufficientDataError
        If a class has fewer rows than ``n_folds``.
    ConvergenceError
        If the logistic regression solver does not converge.
    FitError
        For any other failure of the estimator.
    """

    X, y, features, levels = _training_arrays(balanced, LINEAR)
    smallest = int(class_counts(balanced).min())
    if smallest < n_folds:
        raise InsufficientDataError(
            f"{n_folds}-fold cross-validation needs {n_folds} rows per class; "
            f"smallest class has {smallest}"
        )

    pipeline = Pipeline(
        [
            ("scale", StandardScaler()),
            ("logreg", LogisticRegression(max_iter=1000)),
        ]
    )
    search = GridSearchCV(
        pipeline,
        param_grid={"logreg__C": [float(c) for c in cs]},
        scoring="roc_auc",
        cv=StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=random_state),
        error_score="raise",
        refit=True,
    )

    LOGGER.info(
        "Training %s model: %s rows, %s-fold CV over C=%s",
        LINEAR,
        len(X),
        n_folds,
        list(cs),
    )
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("error", ConvergenceWarning)
            search.fit(X, y)
    except ConvergenceWarning as exc:
        raise ConvergenceError(LINEAR, str(exc)) from exc
    except ValueError as exc:
        raise FitError(LINEAR, str(exc)) from exc

    cv_auc = float(search.best_score_)
    LOGGER.info(
        "Selected C=%s with mean CV AUC %.3f",
        search.best_params_["logreg__C"],
        cv_auc,
    )
    return TrainedModel(
        name=LINEAR,
        estimator=search.best_estimator_,
        feature_names=tuple(features),
        levels=levels,
        cv_auc=cv_auc,
    )


def train_forest_model(
    train: pd.DataFrame,
    *,
    n_trees: int = 500,
    class_weights: tuple[float, float] = (1.0, 3.0),
    importance: str = "impurity",
    random_state: int = 0,
) -> TrainedModel:
    """Fit the class-weighted random forest strategy.

    Parameters
    ----------
    train:
        Original (unbalanced) training set.
    n_trees:
        Number of trees in the forest.
    class_weights:
        ``(negative, positive)`` weights applied to the impurity criterion.
    importance:
        ``"impurity"`` for mean decrease in impurity, or ``"permutation"``
        for the drop in training ROC AUC when a feature is shuffled.
    random_state:
        Seed of bootstrap sampling and feature subsampling.

    Returns
    -------
    TrainedModel
        Model named ``"ensemble"`` carrying per-feature importance scores.

    Raises
    ------
    FitError
        If the forest cannot be built.
    """

    if importance not in ("impurity", "permutation"):
        raise ValueError("importance must be 'impurity' or 'permutation'")
    X, y, features, levels = _training_arrays(train, ENSEMBLE)

    forest = RandomForestClassifier(
        n_estimators=int(n_trees),
        class_weight={0: float(class_weights[0]), 1: float(class_weights[1])},
        random_state=random_state,
    )
    LOGGER.info(
        "Training %s model: %s rows, %s trees, class weights %s",
        ENSEMBLE,
        len(X),
        n_trees,
        tuple(class_weights),
    )
    try:
        forest.fit(X, y)
    except ValueError as exc:
        raise FitError(ENSEMBLE, str(exc)) from exc

    if importance == "permutation":
        result = permutation_importance(
            forest, X, y, scoring="roc_auc", n_repeats=10, random_state=random_state
        )
        scores = result.importances_mean
    else:
        scores = forest.feature_importances_
    importances = pd.Series(scores, index=features, name="importance", dtype=float)

    return TrainedModel(
        name=ENSEMBLE,
        estimator=forest,
        feature_names=tuple(features),
        levels=levels,
        importance=importances,
    )


__all__ = ["LINEAR", "ENSEMBLE", "train_linear_model", "train_forest_model"]
