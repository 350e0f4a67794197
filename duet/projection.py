"""Projection of raw measurements onto pretrained latent-factor scores.

The latent-factor model itself is trained elsewhere; this module only applies
its loadings. The Dataset Assembler depends on the :class:`FeatureProjector`
protocol, so any object with a compatible ``project`` method can be injected
in place of :class:`LatentFactorProjector`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Sequence

import numpy as np
import pandas as pd
import torch
from torch import Tensor, nn

from .exceptions import SchemaError

LOGGER = logging.getLogger(__name__)


def factor_name(component: int) -> str:
    """Return the score column name used for ``component``."""
    return f"Factor{int(component)}"


class FeatureProjector(Protocol):
    """Anything able to turn a measurement matrix into component scores."""

    def project(
        self, measurements: pd.DataFrame, components: Sequence[int]
    ) -> pd.DataFrame:
        """Return a samples × components score matrix aligned on ``measurements.index``."""


class LatentFactorProjector(nn.Module):
    r"""Pretrained linear latent-factor model.

    Raw measurements :math:`X` are centred and explained as
    :math:`X - \mu \approx Z W^\top`; the factor scores :math:`Z` are the
    least-squares solution for each sample.

    Parameters
    ----------
    feature_names:
        Names of the raw measurement features, in the row order of
        ``loadings``.
    loadings:
        Matrix of shape ``(n_features, n_factors)``.
    center:
        Optional per-feature centre subtracted before projection. Defaults to
        zeros.
    """

    def __init__(
        self,
        feature_names: Sequence[str],
        loadings: np.ndarray | Tensor,
        center: np.ndarray | Tensor | None = None,
    ) -> None:
        super().__init__()
        weights = torch.as_tensor(np.asarray(loadings, dtype=np.float64))
        if weights.ndim != 2:
            raise ValueError("loadings must be a two-dimensional matrix")
        self.feature_names = tuple(str(name) for name in feature_names)
        if len(self.feature_names) != weights.shape[0]:
            raise ValueError("feature_names must match the number of loading rows")
        if center is None:
            offset = torch.zeros(weights.shape[0], dtype=torch.float64)
        else:
            offset = torch.as_tensor(np.asarray(center, dtype=np.float64))
            if offset.shape != (weights.shape[0],):
                raise ValueError("center must have one entry per feature")
        self.register_buffer("loadings", weights)
        self.register_buffer("center", offset)

    @property
    def n_factors(self) -> int:
        return int(self.loadings.shape[1])

    def forward(self, X: Tensor) -> Tensor:
        """Return least-squares factor scores of shape ``(n_samples, n_factors)``."""

        centred = X - self.center
        solution = torch.linalg.lstsq(self.loadings, centred.T).solution
        return solution.T

    def project(
        self, measurements: pd.DataFrame, components: Sequence[int]
    ) -> pd.DataFrame:
        """Project ``measurements`` and keep the requested 1-based components.

        Missing measurements are replaced by the feature centre, so they do
        not pull the scores in either direction.
        """

        components = [int(c) for c in components]
        if not components:
            raise SchemaError("At least one component must be selected")
        invalid = [c for c in components if not 1 <= c <= self.n_factors]
        if invalid:
            raise SchemaError(
                f"Components {invalid} are outside the projector's range 1..{self.n_factors}"
            )
        missing = [name for name in self.feature_names if name not in measurements.columns]
        if missing:
            raise SchemaError(
                f"Measurements lack {len(missing)} projector features, e.g. {missing[:5]}"
            )

        values = measurements.loc[:, list(self.feature_names)].to_numpy(dtype=np.float64)
        center = self.center.cpu().numpy()
        values = np.where(np.isnan(values), center, values)

        with torch.no_grad():
            scores = self.forward(torch.from_numpy(values)).cpu().numpy()

        LOGGER.debug(
            "Projected %s samples onto %s of %s factors",
            len(measurements),
            len(components),
            self.n_factors,
        )
        selected = scores[:, [c - 1 for c in components]]
        return pd.DataFrame(
            selected,
            index=measurements.index,
            columns=[factor_name(c) for c in components],
        )


def save_projector(projector: LatentFactorProjector, path: str | Path) -> None:
    """Persist ``projector`` (buffers and feature names) to ``path``."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    torch.save(
        {
            "feature_names": list(projector.feature_names),
            "state_dict": projector.state_dict(),
        },
        path,
    )


def load_projector(path: str | Path) -> LatentFactorProjector:
    """Load a projector previously written by :func:`save_projector`."""

    payload = torch.load(path, map_location="cpu")
    state = payload["state_dict"]
    projector = LatentFactorProjector(
        payload["feature_names"], state["loadings"].numpy(), state["center"].numpy()
    )
    projector.load_state_dict(state)
    return projector


__all__ = [
    "FeatureProjector",
    "LatentFactorProjector",
    "factor_name",
    "save_projector",
    "load_projector",
]
