"""Tests for result persistence and figures."""
from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import pytest

from microbiome_survival.data_load import load_clinical_table, load_result, save_dataset, save_result
from microbiome_survival.features import SHADOW_COLUMNS, select
from microbiome_survival.reporting import plot_importance_history, plot_kaplan_meier
from microbiome_survival.survival import fit_kaplan_meier


class TestPersistence:

    def test_roundtrip(self, tmp_path, signal_and_null_features, blocked_outcome):
        result = select(signal_and_null_features, blocked_outcome, max_iterations=0)

        path = save_result(result, tmp_path / "out" / "result.joblib")
        loaded = load_result(path)

        assert loaded.decisions == result.decisions
        assert loaded.feature_names == result.feature_names

    def test_no_overwrite(self, tmp_path, signal_and_null_features, blocked_outcome):
        result = select(signal_and_null_features, blocked_outcome, max_iterations=0)
        path = save_result(result, tmp_path / "result.joblib")

        with pytest.raises(FileExistsError):
            save_result(result, path)
        save_result(result, path, overwrite=True)

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_result(tmp_path / "missing.joblib")

    def test_save_dataset_keeps_index(self, tmp_path):
        df = pd.DataFrame({'decision': ['Confirmed']}, index=pd.Index(['Prevotella'], name='feature'))
        path = tmp_path / "stats" / "attribute_stats.csv"

        save_dataset(df, path)

        assert pd.read_csv(path).columns.tolist() == ['feature', 'decision']

    def test_save_dataset_unknown_format(self, tmp_path):
        with pytest.raises(ValueError):
            save_dataset(pd.DataFrame({'a': [1]}), tmp_path / "table.json")


class TestFigures:

    def test_importance_history(self, constant_model, signal_and_null_features, blocked_outcome):
        result = select(signal_and_null_features, blocked_outcome, max_iterations=3)

        fig = plot_importance_history(result)

        assert isinstance(fig, go.Figure)
        assert len(fig.data) == len(signal_and_null_features.columns) + len(SHADOW_COLUMNS)

    def test_importance_history_without_rejected(self, constant_model, signal_and_null_features, blocked_outcome):
        result = select(signal_and_null_features, blocked_outcome, max_iterations=20)

        fig = plot_importance_history(result, include_rejected=False)

        assert len(fig.data) == len(SHADOW_COLUMNS)

    def test_kaplan_meier(self, clinical_frame):
        fitters = fit_kaplan_meier(load_clinical_table(clinical_frame), group_col='risk_group')

        fig = plot_kaplan_meier(fitters)

        assert [trace.name for trace in fig.data] == ['Low', 'Intermediate', 'High', 'Advanced']
