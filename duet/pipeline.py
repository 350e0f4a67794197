"""End-to-end orchestration of a single analysis run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from .config import PipelineConfig
from .data import assemble_dataset, stratified_split
from .evaluate import evaluate_models
from .models import train_forest_model, train_linear_model
from .projection import FeatureProjector
from .sampling import rose_balance
from .types import EvaluationResult, Split, StatusLabels, TrainedModel
from .utils.seed import make_rng, stage_seeds

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PipelineResult:
    """Every intermediate and final product of one run."""

    config: PipelineConfig
    dataset: pd.DataFrame
    split: Split
    balanced: pd.DataFrame
    linear_model: TrainedModel
    ensemble_model: TrainedModel
    evaluation: EvaluationResult


def fit_and_evaluate(
    dataset: pd.DataFrame, config: Optional[PipelineConfig] = None
) -> PipelineResult:
    """Split, rebalance, train both strategies and evaluate them.

    Parameters
    ----------
    dataset:
        Canonical dataset as returned by :func:`duet.data.assemble_dataset`.
    config:
        Run configuration. Defaults to :class:`PipelineConfig` defaults.

    Returns
    -------
    PipelineResult
        Results of the run. Identical ``dataset`` and ``config.seed`` produce
        identical results.

    Raises
    ------
    duet.exceptions.DuetError
        Any stage failure aborts the whole run.
    """

    config = config or PipelineConfig()
    seeds = stage_seeds(config.seed)

    split = stratified_split(
        dataset, config.train_fraction, rng=make_rng(seeds["partition"])
    )
    balanced = rose_balance(
        split.train,
        random_state=seeds["balance"],
        positive_fraction=config.balance_fraction,
        kernel_scale=config.kernel_scale,
    )
    linear_model = train_linear_model(
        balanced,
        n_folds=config.n_folds,
        cs=config.linear_cs,
        random_state=seeds["linear_cv"],
    )
    ensemble_model = train_forest_model(
        split.train,
        n_trees=config.n_trees,
        class_weights=config.class_weights,
        importance=config.importance,
        random_state=seeds["forest"],
    )
    evaluation = evaluate_models(
        linear_model, ensemble_model, split.holdout, threshold=config.threshold
    )
    LOGGER.info(
        "Run complete: holdout AUC linear=%.3f ensemble=%.3f",
        evaluation.linear.auc,
        evaluation.ensemble.auc,
    )
    return PipelineResult(
        config=config,
        dataset=dataset,
        split=split,
        balanced=balanced,
        linear_model=linear_model,
        ensemble_model=ensemble_model,
        evaluation=evaluation,
    )


def run_pipeline(
    measurements: pd.DataFrame,
    metadata: pd.DataFrame,
    projector: FeatureProjector,
    config: Optional[PipelineConfig] = None,
) -> PipelineResult:
    """Assemble the canonical dataset from raw inputs, then run :func:`fit_and_evaluate`."""

    config = config or PipelineConfig()
    LOGGER.info(
        "Starting run: %s measured samples, %s annotated samples, components=%s",
        len(measurements),
        len(metadata),
        list(config.components),
    )
    dataset = assemble_dataset(
        measurements,
        metadata,
        projector,
        config.components,
        StatusLabels(config.negative_status, config.positive_status),
        status_column=config.status_column,
    )
    return fit_and_evaluate(dataset, config)


__all__ = ["PipelineResult", "fit_and_evaluate", "run_pipeline"]
