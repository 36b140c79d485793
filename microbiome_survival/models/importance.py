"""Ensemble models used to score feature importance.

This module provides a factory of the ensembles the relevance filter can
fit at each iteration, together with how their importance is read.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from sklearn.base import clone
from sklearn.ensemble import RandomForestClassifier
from sksurv.ensemble import GradientBoostingSurvivalAnalysis, RandomSurvivalForest


# Outcome kinds accepted by the models
SURVIVAL = "survival"
LABEL = "label"

# Importance kinds
PERMUTATION = "permutation"
IMPURITY = "impurity"


def make_importance_models(
    n_estimators: int = 100,
    n_jobs: Optional[int] = None,
) -> Dict[str, Tuple[Any, Dict[str, str]]]:
    """Create dictionary of importance models and how to use them.

    Returns:
        Dictionary mapping model_name -> (model, info) where info holds
        the outcome kind the model is fitted on ("survival" or "label")
        and the importance kind read after fitting ("permutation" or
        "impurity").
    """
    models: Dict[str, Tuple[Any, Dict[str, str]]] = {}

    # Random Survival Forest (no impurity importance, scored by C-index drop)
    models["rsf"] = (
        RandomSurvivalForest(
            n_estimators=n_estimators,
            min_samples_split=6,
            min_samples_leaf=3,
            max_features="sqrt",
            n_jobs=n_jobs,
            random_state=42,
        ),
        {"outcome": SURVIVAL, "importance": PERMUTATION},
    )

    # Gradient boosted Cox model
    models["gbsa"] = (
        GradientBoostingSurvivalAnalysis(
            n_estimators=n_estimators,
            learning_rate=0.1,
            max_depth=3,
            random_state=42,
        ),
        {"outcome": SURVIVAL, "importance": IMPURITY},
    )

    # Random Forest on a plain label
    models["rf"] = (
        RandomForestClassifier(
            n_estimators=n_estimators,
            class_weight="balanced",
            max_depth=5,
            n_jobs=n_jobs,
            random_state=42,
        ),
        {"outcome": LABEL, "importance": IMPURITY},
    )

    return models


def get_importance_model(
    name: str,
    random_state: int,
    n_estimators: int = 100,
    n_jobs: Optional[int] = None,
) -> Tuple[Any, Dict[str, str]]:
    """Get a fresh, seeded importance model.

    Args:
        name: Model name ('rsf', 'gbsa', 'rf')
        random_state: Seed given to the ensemble
        n_estimators: Number of trees / boosting stages
        n_jobs: Parallel jobs for ensembles that support it

    Returns:
        Tuple of (unfitted model, info)

    Raises:
        KeyError: If model name not found
    """
    models = make_importance_models(n_estimators=n_estimators, n_jobs=n_jobs)
    if name not in models:
        available = list(models.keys())
        raise KeyError(
            f"Importance model '{name}' not found. "
            f"Available: {available}"
        )
    model, info = models[name]
    model = clone(model).set_params(random_state=random_state)
    return model, info
