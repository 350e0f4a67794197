"""Run configuration for the DUET pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from numbers import Real
from typing import Any, Callable, Iterable, Mapping

import yaml

__all__ = ["PipelineConfig", "DEFAULT_COMPONENTS"]

DEFAULT_COMPONENTS: tuple[int, ...] = tuple(range(1, 13))

_IMPORTANCE_KINDS = ("impurity", "permutation")


def _as_tuple(name: str, values: Any, cast: Callable[[Any], Any]) -> tuple:
    if isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        raise ValueError(f"{name} must be a list of values, got {values!r}")
    try:
        return tuple(cast(value) for value in values)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} contains an invalid value: {exc}") from exc


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable container for every tunable of a pipeline run.

    Parameters
    ----------
    components:
        Ordered, non-empty identifiers of the latent factors to project onto.
        Identifiers are 1-based factor numbers of the pretrained projector.
    status_column:
        Name of the metadata column holding the raw status annotation.
    negative_status, positive_status:
        The two accepted raw status values (matched case-insensitively). They
        also name the canonical levels, negative first.
    train_fraction:
        Share of each class assigned to the training set, ``0 < f < 1``.
    n_folds:
        Number of stratified cross-validation folds for the linear strategy.
    n_trees:
        Forest size of the ensemble strategy.
    class_weights:
        ``(negative, positive)`` cost weights of the ensemble strategy.
    linear_cs:
        Inverse regularisation strengths cross-validated for the linear
        strategy.
    balance_fraction:
        Target share of positive rows in the balanced training set.
    kernel_scale:
        ``(negative, positive)`` multipliers applied to the smoothing
        bandwidth of the imbalance corrector.
    importance:
        ``"impurity"`` (mean decrease in impurity) or ``"permutation"``.
    threshold:
        Probability cut-off used for the confusion matrix.
    seed:
        Root seed from which every stage seed is derived.
    """

    components: tuple[int, ...] = DEFAULT_COMPONENTS
    status_column: str = "status"
    negative_status: str = "MSS"
    positive_status: str = "MSI"
    train_fraction: float = 0.7
    n_folds: int = 5
    n_trees: int = 500
    class_weights: tuple[float, float] = (1.0, 3.0)
    linear_cs: tuple[float, ...] = (0.1, 1.0, 10.0)
    balance_fraction: float = 0.5
    kernel_scale: tuple[float, float] = (1.0, 1.0)
    importance: str = "impurity"
    threshold: float = 0.5
    seed: int = 42

    def __post_init__(self) -> None:
        for name in ("status_column", "negative_status", "positive_status", "importance"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string, got {getattr(self, name)!r}")
        for name in ("train_fraction", "n_folds", "n_trees", "balance_fraction", "threshold", "seed"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ValueError(f"{name} must be a number, got {value!r}")

        # Normalise list-like inputs (e.g. from YAML) into tuples.
        object.__setattr__(self, "components", _as_tuple("components", self.components, int))
        object.__setattr__(
            self, "class_weights", _as_tuple("class_weights", self.class_weights, float)
        )
        object.__setattr__(self, "linear_cs", _as_tuple("linear_cs", self.linear_cs, float))
        object.__setattr__(
            self, "kernel_scale", _as_tuple("kernel_scale", self.kernel_scale, float)
        )

        if not self.components:
            raise ValueError("components must contain at least one identifier")
        if len(set(self.components)) != len(self.components):
            raise ValueError("components must not contain duplicates")
        if not self.status_column:
            raise ValueError("status_column must be a non-empty string")
        if self.negative_status.strip().lower() == self.positive_status.strip().lower():
            raise ValueError("negative_status and positive_status must differ")
        if not 0.0 < self.train_fraction < 1.0:
            raise ValueError("train_fraction must be between 0 and 1 (exclusive)")
        if self.n_folds < 2:
            raise ValueError("n_folds must be at least 2")
        if self.n_trees < 1:
            raise ValueError("n_trees must be positive")
        if len(self.class_weights) != 2 or min(self.class_weights) <= 0:
            raise ValueError("class_weights must be two positive numbers")
        if not self.linear_cs or min(self.linear_cs) <= 0:
            raise ValueError("linear_cs must contain positive values")
        if not 0.0 < self.balance_fraction < 1.0:
            raise ValueError("balance_fraction must be between 0 and 1 (exclusive)")
        if len(self.kernel_scale) != 2 or min(self.kernel_scale) < 0:
            raise ValueError("kernel_scale must be two non-negative numbers")
        if self.importance not in _IMPORTANCE_KINDS:
            raise ValueError(f"importance must be one of {_IMPORTANCE_KINDS}")
        if not 0.0 < self.threshold < 1.0:
            raise ValueError("threshold must be between 0 and 1 (exclusive)")

    def to_dict(self) -> dict[str, object]:
        """Return a plain, YAML/JSON friendly ``dict`` representation."""

        payload = asdict(self)
        for key, value in payload.items():
            if isinstance(value, tuple):
                payload[key] = list(value)
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PipelineConfig":
        """Build a configuration from ``payload``, rejecting unknown keys."""

        known = {field.name for field in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {unknown}")
        return cls(**dict(payload))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PipelineConfig":
        """Load a configuration from a YAML mapping stored at ``path``."""

        with Path(path).open("r") as f:
            payload = yaml.safe_load(f) or {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        return cls.from_dict(payload)
