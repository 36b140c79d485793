"""Tests for the binomial hit tests."""
import numpy as np
import pytest

from microbiome_survival.features import adjust_pvalues, binomial_hit_test


def test_all_hits_confirm():
    """7 hits out of 7: p = 0.5**7 < 0.01."""
    res = binomial_hit_test([7], n_iterations=7, alpha=0.01, n_tests=1)

    assert res.p_accept[0] == pytest.approx(0.5 ** 7)
    assert res.accept.tolist() == [True]
    assert res.reject.tolist() == [False]


def test_bonferroni_needs_more_evidence():
    res = binomial_hit_test([7], n_iterations=7, alpha=0.01, n_tests=2)

    assert res.p_accept[0] == pytest.approx(2 * 0.5 ** 7)
    assert res.accept.tolist() == [False]


def test_no_hits_reject():
    res = binomial_hit_test([0, 4], n_iterations=8, alpha=0.01, n_tests=1)

    assert res.reject.tolist() == [True, False]
    assert res.accept.tolist() == [False, False]


def test_no_correction():
    res = binomial_hit_test([7], n_iterations=7, alpha=0.01, n_tests=10, method="none")

    assert res.accept.tolist() == [True]


def test_zero_iterations_decides_nothing():
    res = binomial_hit_test([0, 0], n_iterations=0)

    assert not res.accept.any()
    assert not res.reject.any()
    np.testing.assert_array_equal(res.p_accept, [1.0, 1.0])


def test_adjust_pvalues_capped():
    adjusted = adjust_pvalues(np.array([0.001, 0.3]), n_tests=5)

    np.testing.assert_allclose(adjusted, [0.005, 1.0])


def test_adjust_pvalues_unknown_method():
    with pytest.raises(ValueError):
        adjust_pvalues(np.array([0.1]), n_tests=2, method="holm")
