"""Helper utilities shared across the pipeline stages."""

from .seed import make_rng, stage_seeds

__all__ = ["make_rng", "stage_seeds"]
