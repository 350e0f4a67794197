"""Command line entry point running the full DUET pipeline."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

import matplotlib

from ..config import PipelineConfig
from ..exceptions import DuetError
from ..pipeline import run_pipeline
from ..projection import load_projector
from ..utils.io import read_table, write_results

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Predict a binary status from latent-factor scores with two competing models"
    )
    parser.add_argument("--measurements", required=True, help="Samples x features table (CSV/TSV)")
    parser.add_argument("--metadata", required=True, help="Sample annotation table (CSV/TSV)")
    parser.add_argument("--projector", required=True, help="Pretrained projector saved with save_projector")
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument("--out", required=True, help="Output directory")
    parser.add_argument("--seed", type=int, default=None, help="Override the configured seed")
    parser.add_argument("--plots", action="store_true", help="Also write PNG figures")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def _write_plots(result, out_dir: Path) -> None:
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    from ..plots import plot_confusion_matrix, plot_feature_importance, plot_roc_curves

    evaluation = result.evaluation
    for name, draw in (
        ("roc_curves.png", lambda: plot_roc_curves(evaluation)),
        ("importance.png", lambda: plot_feature_importance(evaluation.importance)),
        ("confusion_matrix.png", lambda: plot_confusion_matrix(evaluation.confusion_matrix)),
    ):
        ax = draw()
        ax.figure.tight_layout()
        ax.figure.savefig(out_dir / name, dpi=150)
        plt.close(ax.figure)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    config = PipelineConfig.from_yaml(args.config) if args.config else PipelineConfig()
    if args.seed is not None:
        config = PipelineConfig.from_dict({**config.to_dict(), "seed": args.seed})

    try:
        result = run_pipeline(
            read_table(args.measurements),
            read_table(args.metadata),
            load_projector(args.projector),
            config,
        )
    except DuetError as exc:
        LOGGER.error("Run aborted: %s", exc)
        return 1

    out_dir = write_results(result, args.out)
    if args.plots:
        _write_plots(result, out_dir)
    LOGGER.info("Results written to %s", out_dir)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
