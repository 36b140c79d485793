"""Presence/absence recoding of taxon abundance tables."""
from __future__ import annotations

import logging
from typing import List

import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted


logger = logging.getLogger(__name__)


def presence_absence(abundance: pd.DataFrame, threshold: float = 5.0) -> pd.DataFrame:
    """Recode relative abundance (percent) into presence/absence.

    Args:
        abundance: One row per sample, one column per taxon, values in 0-100
        threshold: A taxon is present when its abundance is strictly above it

    Returns:
        Boolean DataFrame with the same index and columns
    """
    numeric = abundance.apply(pd.to_numeric, errors="raise")
    return numeric.gt(threshold)


def filter_low_prevalence(presence: pd.DataFrame, min_present: int = 3) -> pd.DataFrame:
    """Drop taxa present in fewer than ``min_present`` samples.

    Args:
        presence: Boolean presence/absence table
        min_present: Minimum number of samples where the taxon is present

    Returns:
        Table restricted to the prevalent taxa (row order unchanged)
    """
    prevalence = presence.sum(axis=0)
    keep = prevalence.index[prevalence >= min_present]
    dropped = len(presence.columns) - len(keep)
    if dropped:
        logger.info(
            f"Dropped {dropped} of {len(presence.columns)} taxa present in "
            f"fewer than {min_present} samples"
        )
    return presence.loc[:, keep]


class PresenceAbsenceTransformer(BaseEstimator, TransformerMixin):
    """Threshold abundance and keep the taxa prevalent at fit time.

    Args:
        threshold: Abundance percentage above which a taxon is present
        min_present: Minimum number of samples where a kept taxon is present
    """

    def __init__(self, threshold: float = 5.0, min_present: int = 3):
        self.threshold = threshold
        self.min_present = min_present

    def fit(self, X: pd.DataFrame, y=None):
        """Learn which taxa are prevalent enough.

        Args:
            X: Abundance table
            y: Ignored

        Returns:
            self
        """
        presence = filter_low_prevalence(
            presence_absence(X, self.threshold), self.min_present
        )
        self.feature_names_in_ = list(X.columns)
        self.selected_columns_: List[str] = list(presence.columns)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """Recode X and restrict it to the taxa kept in ``fit``.

        Args:
            X: Abundance table with the columns seen in ``fit``

        Returns:
            Boolean presence/absence table
        """
        check_is_fitted(self, "selected_columns_")
        missing = [c for c in self.selected_columns_ if c not in X.columns]
        if missing:
            raise KeyError(f"Columns seen in fit are missing: {missing}")
        return presence_absence(X[self.selected_columns_], self.threshold)

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "selected_columns_")
        return list(self.selected_columns_)
