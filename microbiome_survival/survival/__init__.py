"""Survival analysis module.

This module provides:
- The right-censored outcome type used by feature selection
- Kaplan-Meier curves and log-rank tests by group (lifelines)
- Cox proportional-hazards models and a one-feature-at-a-time screen (lifelines)
"""

from .outcome import SurvivalOutcome
from .kaplan_meier import (
    LogRankResult,
    fit_kaplan_meier,
    median_survival_table,
    logrank_by_group,
)
from .cox import CoxModelResult, encode_covariates, fit_cox_model, univariate_cox_screen

__all__ = [
    "SurvivalOutcome",
    "LogRankResult",
    "fit_kaplan_meier",
    "median_survival_table",
    "logrank_by_group",
    "CoxModelResult",
    "encode_covariates",
    "fit_cox_model",
    "univariate_cox_screen",
]
