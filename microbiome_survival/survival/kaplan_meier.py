"""Kaplan-Meier estimation and log-rank tests by group (lifelines)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd
from lifelines import KaplanMeierFitter
from lifelines.statistics import logrank_test, multivariate_logrank_test

from ..config import CONFIG


@dataclass
class LogRankResult:
    """Result of a log-rank comparison of survival between groups."""

    test_name: str
    test_statistic: float
    p_value: float
    degrees_of_freedom: int
    groups: List[str]

    def __str__(self) -> str:
        return (
            f"{self.test_name}: chi2 = {self.test_statistic:.3f} "
            f"(df = {self.degrees_of_freedom}), p = {self.p_value:.4f}"
        )


def _group_levels(series: pd.Series) -> list:
    """Observed group levels, in category order for categoricals."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        present = set(series.dropna())
        return [c for c in series.cat.categories if c in present]
    return sorted(series.dropna().unique(), key=str)


def fit_kaplan_meier(
    df: pd.DataFrame,
    group_col: Optional[str] = None,
    time_col: str = CONFIG.time_column,
    event_col: str = CONFIG.event_column,
) -> Dict[str, KaplanMeierFitter]:
    """Fit one Kaplan-Meier curve per group.

    Args:
        df: Table with time, event and (optionally) group columns
        group_col: Column defining the strata; None fits a single curve
        time_col: Time to event column
        event_col: Event indicator column

    Returns:
        Dictionary mapping group label -> fitted KaplanMeierFitter
    """
    if group_col is None:
        kmf = KaplanMeierFitter()
        kmf.fit(df[time_col], event_observed=df[event_col], label="all")
        return {"all": kmf}

    if group_col not in df.columns:
        raise KeyError(f"Group column '{group_col}' not found in dataset.")

    fitters: Dict[str, KaplanMeierFitter] = {}
    for level in _group_levels(df[group_col]):
        ix = df[group_col] == level
        kmf = KaplanMeierFitter()
        kmf.fit(
            df.loc[ix, time_col],
            event_observed=df.loc[ix, event_col],
            label=str(level),
        )
        fitters[str(level)] = kmf
    return fitters


def median_survival_table(fitters: Dict[str, KaplanMeierFitter]) -> pd.DataFrame:
    """Sample size, events and median survival time per fitted curve."""
    rows = []
    for label, kmf in fitters.items():
        table = kmf.event_table
        rows.append({
            "group": label,
            "n": int(table["at_risk"].iloc[0]),
            "events": int(table["observed"].sum()),
            "median_survival": float(kmf.median_survival_time_),
        })
    return pd.DataFrame(rows).set_index("group")


def logrank_by_group(
    df: pd.DataFrame,
    group_col: str,
    time_col: str = CONFIG.time_column,
    event_col: str = CONFIG.event_column,
) -> LogRankResult:
    """Compare survival across groups with the log-rank test.

    Two groups use the two-sample test, more groups the multivariate one.

    Args:
        df: Table with time, event and group columns
        group_col: Column defining the groups
        time_col: Time to event column
        event_col: Event indicator column

    Returns:
        LogRankResult

    Raises:
        ValueError: If fewer than two groups are present
    """
    if group_col not in df.columns:
        raise KeyError(f"Group column '{group_col}' not found in dataset.")

    data = df.dropna(subset=[group_col])
    levels = _group_levels(data[group_col])
    if len(levels) < 2:
        raise ValueError(f"Log-rank test needs at least two groups in '{group_col}', found {levels}")

    if len(levels) == 2:
        a = data[data[group_col] == levels[0]]
        b = data[data[group_col] == levels[1]]
        res = logrank_test(
            a[time_col], b[time_col],
            event_observed_A=a[event_col],
            event_observed_B=b[event_col],
        )
        name = "Log-rank"
    else:
        res = multivariate_logrank_test(
            data[time_col],
            data[group_col].astype(str),
            data[event_col],
        )
        name = "Multivariate log-rank"

    return LogRankResult(
        test_name=name,
        test_statistic=float(res.test_statistic),
        p_value=float(res.p_value),
        degrees_of_freedom=len(levels) - 1,
        groups=[str(level) for level in levels],
    )
