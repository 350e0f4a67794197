"""Tests for seed derivation and result export helpers."""

from __future__ import annotations

import numpy as np
import pandas as pd

from duet.config import PipelineConfig
from duet.pipeline import fit_and_evaluate
from duet.utils import make_rng, stage_seeds
from duet.utils.io import load_json, read_table, save_json, write_results


def test_stage_seeds_are_stable_and_distinct() -> None:
    seeds = stage_seeds(42)

    assert seeds == stage_seeds(42)
    assert seeds != stage_seeds(43)
    assert set(seeds) == {"partition", "balance", "linear_cv", "forest"}
    assert len(set(seeds.values())) == len(seeds)


def test_stage_seeds_leave_global_state_alone() -> None:
    np.random.seed(0)
    expected = np.random.random()
    np.random.seed(0)
    stage_seeds(1)
    make_rng(1).random()

    assert np.random.random() == expected


def test_json_round_trip(tmp_path) -> None:
    path = tmp_path / "nested" / "payload.json"

    save_json({"auc": 0.9}, path)

    assert load_json(path) == {"auc": 0.9}


def test_write_results(tmp_path, dataset) -> None:
    result = fit_and_evaluate(dataset, PipelineConfig(n_trees=20))

    out = write_results(result, tmp_path / "run")

    metrics = load_json(out / "metrics.json")
    assert metrics["n_train"] + metrics["n_holdout"] == len(dataset)
    assert metrics["models"]["ensemble"]["auc"] == result.evaluation.ensemble.auc
    assert (out / "confusion_matrix.csv").exists()


def test_read_table_handles_csv_and_tsv(tmp_path) -> None:
    """The separator follows the file suffix and the first column becomes the index."""

    frame = pd.DataFrame({"g1": [1.5, 2.0], "g2": [0.0, -1.0]}, index=pd.Index(["s1", "s2"], name="sample"))
    frame.to_csv(tmp_path / "x.csv")
    frame.to_csv(tmp_path / "x.tsv", sep="\t")

    pd.testing.assert_frame_equal(read_table(tmp_path / "x.csv"), frame)
    pd.testing.assert_frame_equal(read_table(tmp_path / "x.tsv"), frame)
