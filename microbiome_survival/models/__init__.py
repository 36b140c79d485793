"""Models module - ensemble models for feature importance.

This module provides:
- Random Survival Forest and gradient boosted survival models (scikit-survival)
- Random Forest classifier for plain binary outcomes
"""

from .importance import (
    make_importance_models,
    get_importance_model,
    SURVIVAL,
    LABEL,
    PERMUTATION,
    IMPURITY,
)

__all__ = [
    "make_importance_models",
    "get_importance_model",
    "SURVIVAL",
    "LABEL",
    "PERMUTATION",
    "IMPURITY",
]
