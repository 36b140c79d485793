"""Feature column utilities.

This module provides functions for selecting and filtering feature columns.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Set

import pandas as pd


# Columns to exclude from features
EXCLUDE_COLS: Set[str] = {"sample_id", "patient_id"}


def safe_feature_columns(
    df: pd.DataFrame,
    target_cols: Optional[Iterable[str]] = None,
) -> List[str]:
    """Return feature columns excluding outcome and identifier columns.

    Args:
        df: Input DataFrame
        target_cols: Outcome/clinical column names to exclude

    Returns:
        List of feature column names
    """
    exclude_set = set(target_cols or []) | EXCLUDE_COLS
    feature_cols = [c for c in df.columns if c not in exclude_set]
    return feature_cols


def constant_columns(df: pd.DataFrame) -> List[str]:
    """Columns taking a single value (missing values count as a value)."""
    return [c for c in df.columns if df[c].nunique(dropna=False) <= 1]
