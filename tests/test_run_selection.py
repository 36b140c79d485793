"""Smoke test for the selection script."""
import os

import pandas as pd
import pytest

from microbiome_survival.features import BorutaConfig
from microbiome_survival.run_selection import build_parser, selection_main


@pytest.fixture
def table_paths(tmp_path, clinical_frame, community_frame):
    clinical = tmp_path / "clinical.csv"
    community = tmp_path / "community.tsv"
    clinical_frame.to_csv(clinical, index=False)
    community_frame.to_csv(community, sep="\t", index=False)
    return str(clinical), str(community)


def test_selection_main_writes_outputs(tmp_path, table_paths):
    clinical, community = table_paths
    out = tmp_path / "out"

    code = selection_main([
        "--clinical", clinical,
        "--community", community,
        "--output", str(out),
        "--max-iter", "2",
        "--n-estimators", "10",
    ])

    assert code == 0
    for name in ("attribute_stats.csv", "importance_history.csv", "boruta_result.joblib"):
        assert os.path.exists(out / name)
    stats = pd.read_csv(out / "attribute_stats.csv", index_col=0)
    assert set(stats['decision']) <= {"Confirmed", "Tentative", "Rejected"}


def test_selection_main_requires_paths(monkeypatch, tmp_path):
    monkeypatch.delenv("CLINICAL_PATH", raising=False)
    monkeypatch.delenv("COMMUNITY_PATH", raising=False)

    with pytest.raises(ValueError, match="CLINICAL_PATH"):
        selection_main(["--output", str(tmp_path)])


def test_parser_defaults_follow_boruta_config():
    defaults = BorutaConfig()

    args = build_parser().parse_args([])

    assert args.max_iter == defaults.max_iterations
    assert args.alpha == defaults.significance_level
    assert args.seed == defaults.random_seed
    assert args.model == defaults.importance_model
    assert args.n_estimators == defaults.n_estimators
