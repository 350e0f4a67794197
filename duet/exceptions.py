"""Exception hierarchy raised by the DUET pipeline.

Every error is fatal: the pipeline never retries and never returns partial
results, so callers only need to catch :class:`DuetError` to abort a run.
"""

from __future__ import annotations


class DuetError(Exception):
    """Base class for all pipeline errors."""


class SchemaError(DuetError, ValueError):
    """Input tables are missing columns or hold an unusable status vocabulary."""


class InsufficientDataError(DuetError, ValueError):
    """A class has too few rows to split, resample or evaluate."""


class FitError(DuetError, RuntimeError):
    """A training strategy could not produce a usable model.

    Parameters
    ----------
    strategy:
        Name of the strategy that failed (``"linear"`` or ``"ensemble"``).
    message:
        Human-readable description of the failure.
    """

    def __init__(self, strategy: str, message: str) -> None:
        super().__init__(f"[{strategy}] {message}")
        self.strategy = strategy


class ConvergenceError(FitError):
    """The optimiser of a training strategy did not converge."""


__all__ = [
    "DuetError",
    "SchemaError",
    "InsufficientDataError",
    "FitError",
    "ConvergenceError",
]
