"""Holdout evaluation of the trained strategies."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import (
    average_precision_score,
    brier_score_loss,
    confusion_matrix,
    roc_auc_score,
    roc_curve,
)

from .data import encode_status
from .exceptions import InsufficientDataError
from .types import EvaluationResult, ModelEvaluation, TrainedModel

LOGGER = logging.getLogger(__name__)


def _require_both_classes(y_true: np.ndarray, what: str) -> None:
    if np.unique(y_true).size < 2:
        raise InsufficientDataError(f"{what} requires both classes in the holdout set")


def roc_points(y_true: np.ndarray, scores: np.ndarray) -> pd.DataFrame:
    """Return the ROC curve evaluated at every distinct score.

    Parameters
    ----------
    y_true:
        Binary targets, 1 for the positive level.
    scores:
        Positive-class probabilities aligned with ``y_true``.

    Returns
    -------
    pandas.DataFrame
        Columns ``fpr``, ``tpr`` and ``threshold``, ordered by increasing
        false-positive rate. The first row is the ``(0, 0)`` corner.
    """

    y_true = np.asarray(y_true)
    _require_both_classes(y_true, "A ROC curve")
    fpr, tpr, thresholds = roc_curve(y_true, np.asarray(scores), drop_intermediate=False)
    return pd.DataFrame({"fpr": fpr, "tpr": tpr, "threshold": thresholds})


def status_confusion_matrix(
    y_true: np.ndarray,
    scores: np.ndarray,
    levels: Sequence[str],
    threshold: float = 0.5,
) -> pd.DataFrame:
    """Return the 2x2 count table of actual versus predicted status.

    A row is predicted positive when its score is strictly above
    ``threshold``.

    Raises
    ------
    InsufficientDataError
        If ``y_true`` contains a single class.
    """

    y_true = np.asarray(y_true)
    _require_both_classes(y_true, "A confusion matrix")
    predicted = (np.asarray(scores) > threshold).astype(np.int64)
    counts = confusion_matrix(y_true, predicted, labels=[0, 1])
    return pd.DataFrame(
        counts,
        index=pd.Index(list(levels), name="actual"),
        columns=pd.Index(list(levels), name="predicted"),
    )


def importance_ranking(model: TrainedModel) -> pd.Series:
    """Return the model's feature importance sorted from most to least important."""

    if model.importance is None:
        raise ValueError(f"The {model.name} model does not expose feature importance")
    return model.importance.sort_values(ascending=False, kind="mergesort")


def evaluate_model(
    model: TrainedModel, holdout: pd.DataFrame, threshold: float = 0.5
) -> ModelEvaluation:
    """Score ``model`` on ``holdout`` and summarise its discrimination.

    Besides the ROC curve and its area, the evaluation reports the area under
    the precision-recall curve, the Brier score, and sensitivity and
    specificity at ``threshold``.
    """

    y_true = encode_status(holdout)
    _require_both_classes(y_true, "Evaluation")
    probabilities = model.positive_proba(holdout)
    scores = probabilities.to_numpy()
    predicted = scores > threshold

    evaluation = ModelEvaluation(
        name=model.name,
        probabilities=probabilities,
        roc_curve=roc_points(y_true, scores),
        auc=float(roc_auc_score(y_true, scores)),
        auprc=float(average_precision_score(y_true, scores)),
        brier=float(brier_score_loss(y_true, scores)),
        sensitivity=float(np.mean(predicted[y_true == 1])),
        specificity=float(np.mean(~predicted[y_true == 0])),
    )
    LOGGER.info("Holdout AUC of %s model: %.3f", model.name, evaluation.auc)
    return evaluation


def evaluate_models(
    linear: TrainedModel,
    ensemble: TrainedModel,
    holdout: pd.DataFrame,
    threshold: float = 0.5,
) -> EvaluationResult:
    """Evaluate both strategies on the untouched holdout set.

    The confusion matrix and the importance ranking are reported for the
    ensemble model.
    """

    y_true = encode_status(holdout)
    _require_both_classes(y_true, "Evaluation")

    ensemble_eval = evaluate_model(ensemble, holdout, threshold)
    return EvaluationResult(
        linear=evaluate_model(linear, holdout, threshold),
        ensemble=ensemble_eval,
        confusion_matrix=status_confusion_matrix(
            y_true, ensemble_eval.probabilities.to_numpy(), ensemble.levels, threshold
        ),
        importance=importance_ranking(ensemble),
        threshold=float(threshold),
    )


__all__ = [
    "roc_points",
    "status_confusion_matrix",
    "importance_ranking",
    "evaluate_model",
    "evaluate_models",
]
