from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict

import json

import pandas as pd

if TYPE_CHECKING:
    from ..pipeline import PipelineResult


def read_table(path: str | Path) -> pd.DataFrame:
    """Read a CSV (or tab-separated ``.tsv``) table indexed by its first column."""
    path = Path(path)
    sep = "\t" if path.suffix.lower() in {".tsv", ".tab"} else ","
    return pd.read_csv(path, sep=sep, index_col=0)


def save_json(obj: Dict[str, Any], path: str | Path) -> None:
    """Save a dictionary as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump(obj, f, indent=2)


def load_json(path: str | Path) -> Dict[str, Any]:
    """Load a JSON file into a dictionary."""
    with Path(path).open("r") as f:
        return json.load(f)


def write_results(result: "PipelineResult", out_dir: str | Path) -> Path:
    """Write the metrics, curves, confusion matrix and importance of ``result``.

    Files written to ``out_dir``: ``metrics.json``, ``roc_linear.csv``,
    ``roc_ensemble.csv``, ``confusion_matrix.csv`` and ``importance.csv``.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    evaluation = result.evaluation

    save_json(
        {
            "config": result.config.to_dict(),
            "n_samples": int(len(result.dataset)),
            "n_train": int(len(result.split.train)),
            "n_holdout": int(len(result.split.holdout)),
            "n_balanced": int(len(result.balanced)),
            "cv_auc_linear": result.linear_model.cv_auc,
            "threshold": evaluation.threshold,
            "models": {
                evaluation.linear.name: evaluation.linear.metrics(),
                evaluation.ensemble.name: evaluation.ensemble.metrics(),
            },
        },
        out_dir / "metrics.json",
    )
    for model_eval in (evaluation.linear, evaluation.ensemble):
        model_eval.roc_curve.to_csv(out_dir / f"roc_{model_eval.name}.csv", index=False)
    evaluation.confusion_matrix.to_csv(out_dir / "confusion_matrix.csv")
    evaluation.importance.rename_axis("feature").to_csv(out_dir / "importance.csv")
    return out_dir
