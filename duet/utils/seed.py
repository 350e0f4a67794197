from __future__ import annotations

from typing import Dict

import numpy as np

STAGES: tuple[str, ...] = ("partition", "balance", "linear_cv", "forest")


def stage_seeds(seed: int) -> Dict[str, int]:
    """Derive one independent integer seed per pipeline stage.

    Parameters
    ----------
    seed:
        Root seed of the run.

    Returns
    -------
    dict
        Mapping of stage name to a 32-bit seed. Identical ``seed`` values
        always yield identical mappings, and no global random state is read or
        modified.
    """
    children = np.random.SeedSequence(int(seed)).spawn(len(STAGES))
    return {
        name: int(child.generate_state(1)[0]) for name, child in zip(STAGES, children)
    }


def make_rng(seed: int) -> np.random.Generator:
    """Return a fresh :class:`numpy.random.Generator` seeded with ``seed``."""
    return np.random.default_rng(int(seed))
