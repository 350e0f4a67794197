"""DUET: dual-strategy prediction of an imbalanced binary status.

The package turns raw sample measurements into a handful of pretrained
latent-factor scores, then compares two answers to class imbalance on the
same data: a logistic regression trained on a ROSE-rebalanced training set
and a class-weighted random forest trained on the original one. Both are
scored on an untouched stratified holdout set.

The stage modules (``data``, ``sampling``, ``models``, ``evaluate``) are
re-exported so that ``import duet`` exposes the whole workflow.
"""

from importlib import import_module

from .config import PipelineConfig
from .exceptions import (
    ConvergenceError,
    DuetError,
    FitError,
    InsufficientDataError,
    SchemaError,
)
from .pipeline import PipelineResult, fit_and_evaluate, run_pipeline
from .projection import LatentFactorProjector
from .types import EvaluationResult, ModelEvaluation, Split, StatusLabels, TrainedModel

__version__ = "0.1.0"

data = import_module(".data", __name__)
sampling = import_module(".sampling", __name__)
models = import_module(".models", __name__)
evaluate = import_module(".evaluate", __name__)

__all__ = [
    "PipelineConfig",
    "PipelineResult",
    "fit_and_evaluate",
    "run_pipeline",
    "LatentFactorProjector",
    "StatusLabels",
    "Split",
    "TrainedModel",
    "ModelEvaluation",
    "EvaluationResult",
    "DuetError",
    "SchemaError",
    "InsufficientDataError",
    "FitError",
    "ConvergenceError",
    "data",
    "sampling",
    "models",
    "evaluate",
]
