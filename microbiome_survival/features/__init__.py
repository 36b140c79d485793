"""Feature engineering and selection module.

This module provides presence/absence recoding of taxon abundance,
prevalence filtering and Boruta all-relevant feature selection against
survival (or binary) outcomes.
"""

from .selectors import safe_feature_columns, constant_columns
from .transformers import (
    presence_absence,
    filter_low_prevalence,
    PresenceAbsenceTransformer,
)
from .statistical_tests import HitTestResult, binomial_hit_test, adjust_pvalues
from .importance import compute_importance, compute_permutation_importance
from .boruta import (
    BorutaConfig,
    BorutaResult,
    BorutaSelector,
    Decision,
    SHADOW_COLUMNS,
    select,
)

__all__ = [
    "safe_feature_columns",
    "constant_columns",
    "presence_absence",
    "filter_low_prevalence",
    "PresenceAbsenceTransformer",
    "HitTestResult",
    "binomial_hit_test",
    "adjust_pvalues",
    "compute_importance",
    "compute_permutation_importance",
    "BorutaConfig",
    "BorutaResult",
    "BorutaSelector",
    "Decision",
    "SHADOW_COLUMNS",
    "select",
]
