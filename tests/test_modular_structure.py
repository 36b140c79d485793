"""Tests for the modular structure."""
import pytest
import pandas as pd
import numpy as np


# Test data module
def test_data_loaders():
    """Test data loading functionality."""
    from microbiome_survival.data_load import load_dataset

    # Create a temporary CSV
    df = pd.DataFrame({
        'a': [1, 2, 3],
        'b': [4, 5, 6]
    })

    import tempfile
    with tempfile.NamedTemporaryFile(mode='w', suffix='.csv', delete=False) as f:
        df.to_csv(f.name, index=False)

        # Test loading
        loaded = load_dataset(f.name)
        assert loaded.shape == (3, 2)
        assert list(loaded.columns) == ['a', 'b']


def test_data_detect_format():
    """Test file format detection."""
    from microbiome_survival.data_load import detect_file_format

    assert detect_file_format("abundance.tsv") == "tsv"
    assert detect_file_format("clinical.xlsx") == "xlsx"


# Test features module
def test_features_safe_columns():
    """Test safe_feature_columns."""
    from microbiome_survival.features import safe_feature_columns

    df = pd.DataFrame({
        'sample_id': [1, 2, 3],
        'feature1': [1.0, 2.0, 3.0],
        'feature2': [4.0, 5.0, 6.0],
        'target': [0, 1, 0]
    })

    # safe_feature_columns uses target_cols parameter (list)
    features = safe_feature_columns(df, target_cols=['target'])

    assert 'feature1' in features
    assert 'feature2' in features
    assert 'target' not in features
    # sample_id should be excluded by default
    assert 'sample_id' not in features


# Test models module
def test_models_importance_models():
    """Test importance model factory."""
    from microbiome_survival.models import make_importance_models, SURVIVAL, LABEL

    models = make_importance_models(n_estimators=10)

    assert 'rsf' in models
    assert 'gbsa' in models
    assert 'rf' in models
    assert models['rsf'][1]['outcome'] == SURVIVAL
    assert models['rf'][1]['outcome'] == LABEL


def test_models_get_model():
    """Test get_importance_model."""
    from microbiome_survival.models import get_importance_model

    model, info = get_importance_model('rsf', random_state=7, n_estimators=10)

    assert model is not None
    assert model.get_params()['random_state'] == 7

    with pytest.raises(KeyError):
        get_importance_model('xgboost', random_state=0)


# Test features importance
def test_features_permutation_importance():
    """Test permutation importance."""
    from sklearn.ensemble import RandomForestClassifier
    from microbiome_survival.features import compute_permutation_importance

    rng = np.random.default_rng(0)
    X = rng.normal(size=(40, 3))
    y = (X[:, 0] > 0).astype(int)
    model = RandomForestClassifier(n_estimators=10, random_state=0).fit(X, y)

    importance = compute_permutation_importance(model, X, y, n_repeats=3, random_state=0)

    assert importance.shape == (3,)
    assert importance[0] == importance.max()


# Test survival module
def test_survival_outcome():
    """Test SurvivalOutcome."""
    from microbiome_survival.survival import SurvivalOutcome

    outcome = SurvivalOutcome(time=[5.0, 10.0], event=[True, False])

    assert len(outcome) == 2
    assert outcome.n_events == 1


# Test reporting module
def test_reporting_colors():
    """Test decision colours."""
    from microbiome_survival.reporting import DECISION_COLORS
    from microbiome_survival.features import Decision

    for decision in Decision:
        assert decision.value in DECISION_COLORS


def test_package_exports():
    """Test top-level exports."""
    import microbiome_survival

    assert microbiome_survival.__version__
    assert callable(microbiome_survival.select)
    assert callable(microbiome_survival.build_cohort)
