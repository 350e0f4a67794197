"""Data containers exchanged between the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd

from .exceptions import SchemaError

STATUS_COLUMN = "status"


@dataclass(frozen=True)
class StatusLabels:
    """The two accepted raw status values and their canonical level order.

    Parameters
    ----------
    negative:
        Raw value recoded to the first (negative) level.
    positive:
        Raw value recoded to the second (positive) level.
    """

    negative: str
    positive: str

    @property
    def levels(self) -> tuple[str, str]:
        """Canonical level order, negative first."""
        return (self.negative, self.positive)

    def recode(self, raw: pd.Series) -> pd.Series:
        """Map raw annotations onto canonical levels.

        Matching ignores case and surrounding whitespace. Values outside the
        two accepted strings (including missing values) become ``NaN``.
        """

        lookup = {
            self.negative.strip().lower(): self.negative,
            self.positive.strip().lower(): self.positive,
        }
        normalised = raw.astype("string").str.strip().str.lower()
        mapped = normalised.map(lookup)
        return pd.Series(
            pd.Categorical(mapped, categories=list(self.levels)),
            index=raw.index,
            name=STATUS_COLUMN,
        )


@dataclass(frozen=True, eq=False)
class Split:
    """Disjoint training and holdout partitions of the canonical dataset."""

    train: pd.DataFrame
    holdout: pd.DataFrame


@dataclass(frozen=True, eq=False)
class TrainedModel:
    """A fitted classifier exposing class probabilities for feature rows.

    Attributes
    ----------
    name:
        Strategy name, ``"linear"`` or ``"ensemble"``.
    estimator:
        Fitted scikit-learn estimator trained on 0/1 targets (1 = positive).
    feature_names:
        Feature columns expected by :meth:`predict_proba`, in training order.
    levels:
        Canonical status levels, negative first.
    cv_auc:
        Mean cross-validated ROC AUC when the strategy computed one.
    importance:
        Per-feature importance scores when the strategy exposes them.
    """

    name: str
    estimator: Any
    feature_names: tuple[str, ...]
    levels: tuple[str, str]
    cv_auc: Optional[float] = None
    importance: Optional[pd.Series] = None

    def _feature_matrix(self, frame: pd.DataFrame) -> np.ndarray:
        missing = [name for name in self.feature_names if name not in frame.columns]
        if missing:
            raise SchemaError(f"{self.name} model is missing feature columns: {missing}")
        return frame.loc[:, list(self.feature_names)].to_numpy(dtype=float)

    def predict_proba(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Return class probabilities with one column per level, negative first."""

        proba = self.estimator.predict_proba(self._feature_matrix(frame))
        return pd.DataFrame(proba, index=frame.index, columns=list(self.levels))

    def positive_proba(self, frame: pd.DataFrame) -> pd.Series:
        """Return the probability of the positive level for each row."""

        positive = self.levels[1]
        return self.predict_proba(frame)[positive].rename(positive)


@dataclass(frozen=True, eq=False)
class ModelEvaluation:
    """Holdout performance of a single trained model."""

    name: str
    probabilities: pd.Series
    roc_curve: pd.DataFrame
    auc: float
    auprc: float
    brier: float
    sensitivity: float
    specificity: float

    def metrics(self) -> dict[str, float]:
        """Return the scalar metrics as a plain ``dict``."""

        return {
            "auc": float(self.auc),
            "auprc": float(self.auprc),
            "brier": float(self.brier),
            "sensitivity": float(self.sensitivity),
            "specificity": float(self.specificity),
        }


@dataclass(frozen=True, eq=False)
class EvaluationResult:
    """Comparative evaluation of the linear and ensemble strategies."""

    linear: ModelEvaluation
    ensemble: ModelEvaluation
    confusion_matrix: pd.DataFrame
    importance: pd.Series
    threshold: float

    def summary(self) -> pd.DataFrame:
        """Return one row of scalar metrics per model."""

        return pd.DataFrame(
            {
                self.linear.name: self.linear.metrics(),
                self.ensemble.name: self.ensemble.metrics(),
            }
        ).T


__all__ = [
    "STATUS_COLUMN",
    "StatusLabels",
    "Split",
    "TrainedModel",
    "ModelEvaluation",
    "EvaluationResult",
]
