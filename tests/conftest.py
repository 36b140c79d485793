"""
Shared pytest fixtures and configuration for all tests.
"""

import pytest
import warnings
import numpy as np
import pandas as pd

from microbiome_survival.models import SURVIVAL, IMPURITY
from microbiome_survival.survival import SurvivalOutcome


# Configure pytest to handle warnings properly
def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Suppress specific warnings
    warnings.filterwarnings('ignore', category=UserWarning)
    warnings.filterwarnings('ignore', category=DeprecationWarning)
    warnings.filterwarnings('ignore', category=FutureWarning)
    warnings.filterwarnings('ignore', category=PendingDeprecationWarning)


# ============================================================================
# Cohort fixtures
# ============================================================================

N_SAMPLES = 24
RISK_LEVELS = ["Low", "Intermediate", "High", "Advanced"]


@pytest.fixture(scope='session')
def random_seed():
    """Fixed random seed for reproducible tests."""
    return 42


@pytest.fixture
def clinical_frame(random_seed):
    """Clinical table of 24 patients mimicking the prostate cohort."""
    rng = np.random.default_rng(random_seed)

    risk = np.array(RISK_LEVELS * (N_SAMPLES // len(RISK_LEVELS)))
    # Higher risk -> shorter follow-up on average
    base = {"Low": 2000, "Intermediate": 1500, "High": 1000, "Advanced": 600}
    time = np.array([rng.uniform(0.3, 1.0) * base[r] for r in risk]).round(0)
    event = rng.random(N_SAMPLES) < np.where(np.isin(risk, ["High", "Advanced"]), 0.7, 0.3)
    event[:2] = [True, False]

    return pd.DataFrame({
        'sample_id': [f"P{i:02d}" for i in range(1, N_SAMPLES + 1)],
        'risk_group': risk,
        'time_to_event': time,
        'progression': event.astype(int),
    })


@pytest.fixture
def community_frame(random_seed):
    """Genus abundance percentages (rows sum to 100)."""
    rng = np.random.default_rng(random_seed + 1)

    genera = ['Prevotella', 'Bacteroides', 'Faecalibacterium', 'Ruminococcus', 'Akkermansia', 'Rare_genus']
    raw = rng.dirichlet(np.ones(len(genera) - 1), size=N_SAMPLES) * 100
    abundance = pd.DataFrame(raw, columns=genera[:-1])
    # Present (> 5 %) in a single sample only
    abundance['Rare_genus'] = 0.5
    abundance.loc[0, 'Rare_genus'] = 12.0
    abundance = abundance.div(abundance.sum(axis=1), axis=0) * 100
    abundance.insert(0, 'sample_id', [f"P{i:02d}" for i in range(1, N_SAMPLES + 1)])
    return abundance


# ============================================================================
# Selection fixtures
# ============================================================================

@pytest.fixture
def blocked_outcome():
    """24 samples made of 4 blocks sharing the same 6 (time, event) pairs."""
    times = np.tile([120.0, 250.0, 400.0, 610.0, 800.0, 1000.0], 4)
    events = np.tile([True, False, True, False, True, False], 4)
    index = pd.Index([f"S{i:02d}" for i in range(N_SAMPLES)], name='sample_id')
    return SurvivalOutcome(time=times, event=events, index=index)


@pytest.fixture
def null_features(blocked_outcome):
    """Binary features carrying no in-sample information about the outcome.

    Each feature marks two of the four blocks, so both of its groups hold
    exactly the same outcomes.
    """
    block = np.repeat(np.arange(4), 6)
    return pd.DataFrame({
        'noise_a': np.isin(block, [0, 1]),
        'noise_b': np.isin(block, [0, 2]),
        'noise_c': np.isin(block, [0, 3]),
    }, index=blocked_outcome.index)


@pytest.fixture
def signal_and_null_features(blocked_outcome, null_features):
    """Null features plus one feature equal to the event indicator."""
    features = null_features.copy()
    features.insert(0, 'signal', blocked_outcome.event.copy())
    return features


@pytest.fixture
def fast_boruta_kwargs(random_seed):
    """Small forests so full selection runs stay quick."""
    return dict(
        max_iterations=30,
        significance_level=0.01,
        random_seed=random_seed,
        n_estimators=50,
        n_repeats=3,
    )


class ConstantImportanceModel:
    """Stand-in ensemble whose importances are fixed in advance."""

    fit_calls = 0
    fail_on_call = None
    importance = None

    def __init__(self, random_state=0):
        self.random_state = random_state

    def fit(self, X, y):
        type(self).fit_calls += 1
        if type(self).fail_on_call is not None and type(self).fit_calls >= type(self).fail_on_call:
            raise ValueError("model diverged")
        n = X.shape[1]
        if type(self).importance is None:
            self.feature_importances_ = np.ones(n)
        else:
            self.feature_importances_ = type(self).importance(n)
        return self


@pytest.fixture
def constant_model(monkeypatch):
    """Patch the importance model factory with ConstantImportanceModel."""
    import microbiome_survival.features.boruta as boruta

    ConstantImportanceModel.fit_calls = 0
    ConstantImportanceModel.fail_on_call = None
    ConstantImportanceModel.importance = None

    def fake_get_importance_model(name, random_state, n_estimators=100, n_jobs=None):
        return ConstantImportanceModel(random_state), {"outcome": SURVIVAL, "importance": IMPURITY}

    monkeypatch.setattr(boruta, "get_importance_model", fake_get_importance_model)
    return ConstantImportanceModel
