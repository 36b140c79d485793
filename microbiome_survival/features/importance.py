"""Feature importance utilities for the relevance filter."""
from __future__ import annotations

from typing import Any, Dict

import numpy as np
from sklearn.inspection import permutation_importance

from ..models import PERMUTATION, IMPURITY


def compute_permutation_importance(
    model,
    X: np.ndarray,
    y: np.ndarray,
    n_repeats: int = 5,
    random_state: int = 42,
    n_jobs=None,
) -> np.ndarray:
    """Mean drop of the model's own score when each column is shuffled.

    For scikit-survival models the score is Harrell's concordance index,
    so ``y`` must be the structured (event, time) array.

    Args:
        model: Fitted model exposing ``score(X, y)``
        X: Rows to score (held out of the fit)
        y: Target
        n_repeats: Number of permutation repeats
        random_state: Random seed
        n_jobs: Parallel jobs over columns

    Returns:
        Array with one mean importance per column
    """
    result = permutation_importance(
        model,
        X,
        y,
        n_repeats=n_repeats,
        random_state=random_state,
        n_jobs=n_jobs,
    )
    return np.asarray(result.importances_mean, dtype=np.float64)


def compute_importance(
    model,
    info: Dict[str, Any],
    X: np.ndarray,
    y: np.ndarray,
    n_repeats: int = 5,
    random_state: int = 42,
    n_jobs=None,
) -> np.ndarray:
    """Read per-column importance from a fitted model.

    Args:
        model: Fitted model from ``models.get_importance_model``
        info: Model info dict ("importance" key selects the method)
        X: Rows to score (held out of the fit for permutation importance)
        y: Target of the scored rows
        n_repeats: Permutation repeats (permutation importance only)
        random_state: Seed for the permutations
        n_jobs: Parallel jobs for permutation importance

    Returns:
        Array with one importance per column of ``X``
    """
    kind = info["importance"]
    if kind == PERMUTATION:
        return compute_permutation_importance(
            model, X, y,
            n_repeats=n_repeats,
            random_state=random_state,
            n_jobs=n_jobs,
        )
    if kind == IMPURITY:
        return np.asarray(model.feature_importances_, dtype=np.float64)
    raise ValueError(f"Unknown importance kind: {kind}")
