"""Statistical tests deciding feature relevance from shadow hits.

A feature scores a "hit" when its importance beats the best shadow
feature in an iteration. Under the null hypothesis of no relevance the
hit count after ``n`` iterations follows Binomial(n, 0.5):
- many hits (upper tail) -> feature confirmed
- few hits (lower tail) -> feature rejected
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import stats


MULTIPLE_COMPARISON_METHODS = ("bonferroni", "none")


@dataclass
class HitTestResult:
    """Outcome of the binomial hit tests for a set of features."""

    p_accept: np.ndarray
    p_reject: np.ndarray
    accept: np.ndarray
    reject: np.ndarray
    alpha: float


def adjust_pvalues(
    p_values: np.ndarray,
    n_tests: int,
    method: str = "bonferroni",
) -> np.ndarray:
    """Correct p-values for multiple comparisons.

    Args:
        p_values: Raw p-values
        n_tests: Number of hypotheses in the family
        method: 'bonferroni' or 'none'

    Returns:
        Adjusted p-values, capped at 1
    """
    p_values = np.asarray(p_values, dtype=float)
    if method == "none":
        return p_values
    if method == "bonferroni":
        return np.minimum(p_values * max(n_tests, 1), 1.0)
    raise ValueError(
        f"Unknown multiple comparison method '{method}'. "
        f"Available: {list(MULTIPLE_COMPARISON_METHODS)}"
    )


def binomial_hit_test(
    hits: np.ndarray,
    n_iterations: int,
    alpha: float = 0.01,
    n_tests: int = 1,
    method: str = "bonferroni",
) -> HitTestResult:
    """Test hit counts against Binomial(n_iterations, 0.5) in both tails.

    Args:
        hits: Hit count per feature
        n_iterations: Number of iterations run so far
        alpha: Significance level
        n_tests: Family size for the multiple comparison correction
        method: 'bonferroni' or 'none'

    Returns:
        HitTestResult with adjusted p-values and accept/reject masks
    """
    hits = np.asarray(hits, dtype=int)

    if n_iterations <= 0:
        ones = np.ones(hits.shape, dtype=float)
        empty = np.zeros(hits.shape, dtype=bool)
        return HitTestResult(ones, ones.copy(), empty, empty.copy(), alpha)

    # P(X >= hits) and P(X <= hits)
    p_accept = stats.binom.sf(hits - 1, n_iterations, 0.5)
    p_reject = stats.binom.cdf(hits, n_iterations, 0.5)

    p_accept = adjust_pvalues(p_accept, n_tests, method)
    p_reject = adjust_pvalues(p_reject, n_tests, method)

    return HitTestResult(
        p_accept=p_accept,
        p_reject=p_reject,
        accept=p_accept < alpha,
        reject=p_reject < alpha,
        alpha=alpha,
    )
