"""Plotting helpers for DUET evaluation results."""

from __future__ import annotations

import itertools
from typing import Optional

import matplotlib.pyplot as plt
from matplotlib.axes import Axes
import numpy as np
import pandas as pd

from .types import EvaluationResult

MODEL_COLOURS = {"linear": "#531f9c", "ensemble": "#e55109"}


def plot_roc_curves(result: EvaluationResult, *, ax: Axes | None = None) -> Axes:
    """Draw the holdout ROC curves of both models on a shared axis.

    Parameters
    ----------
    result : EvaluationResult
        Output of :func:`duet.evaluate.evaluate_models`.
    ax : matplotlib.axes.Axes, optional
        Axis on which to draw. When omitted a new figure is created.

    Returns
    -------
    matplotlib.axes.Axes
        Axis containing one line per model plus the chance diagonal.

    Examples
    --------
    >>> ax = plot_roc_curves(pipeline_result.evaluation)  # doctest: +SKIP
    >>> len(ax.lines)  # doctest: +SKIP
    3
    """

    if ax is None:
        _, ax = plt.subplots(figsize=(4.5, 4.5))

    for evaluation in (result.linear, result.ensemble):
        curve = evaluation.roc_curve
        ax.plot(
            curve["fpr"],
            curve["tpr"],
            label=f"{evaluation.name} (AUC = {evaluation.auc:.3f})",
            color=MODEL_COLOURS.get(evaluation.name),
        )
    ax.plot([0, 1], [0, 1], linestyle="--", color="grey", linewidth=0.8)
    ax.set_xlim(0.0, 1.0)
    ax.set_ylim(0.0, 1.0)
    ax.set_xlabel("False positive rate")
    ax.set_ylabel("True positive rate")
    ax.legend(loc="lower right")
    return ax


def plot_feature_importance(
    importance: pd.Series,
    *,
    ax: Axes | None = None,
    top_n: Optional[int] = None,
) -> Axes:
    """Draw a horizontal bar chart of feature importance, largest on top."""

    ranking = importance.sort_values(ascending=False)
    if top_n is not None:
        ranking = ranking.iloc[:top_n]

    if ax is None:
        _, ax = plt.subplots(figsize=(5.0, max(2.5, 0.35 * len(ranking))))

    positions = np.arange(len(ranking))
    ax.barh(positions, ranking.to_numpy(), color=MODEL_COLOURS["ensemble"])
    ax.set_yticks(positions)
    ax.set_yticklabels(ranking.index.astype(str))
    ax.invert_yaxis()
    ax.set_xlabel("Importance")
    return ax


def plot_confusion_matrix(matrix: pd.DataFrame, *, ax: Axes | None = None) -> Axes:
    """Render a count confusion matrix with annotated cells."""

    if ax is None:
        _, ax = plt.subplots(figsize=(3.5, 3.0))

    counts = matrix.to_numpy(dtype=float)
    ax.imshow(counts, cmap="Blues", aspect="auto")
    ax.set_xticks(np.arange(matrix.shape[1]))
    ax.set_xticklabels(matrix.columns.astype(str))
    ax.set_yticks(np.arange(matrix.shape[0]))
    ax.set_yticklabels(matrix.index.astype(str))
    ax.set_xlabel(matrix.columns.name or "predicted")
    ax.set_ylabel(matrix.index.name or "actual")

    threshold = counts.max() / 2.0 if counts.size else 0.0
    for row_index, col_index in itertools.product(
        range(counts.shape[0]), range(counts.shape[1])
    ):
        value = counts[row_index, col_index]
        ax.text(
            col_index,
            row_index,
            format(int(value), "d"),
            ha="center",
            va="center",
            color="white" if value > threshold else "black",
        )
    return ax


__all__ = ["plot_roc_curves", "plot_feature_importance", "plot_confusion_matrix"]
