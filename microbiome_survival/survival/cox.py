"""Cox proportional-hazards models (lifelines).

Covariates are encoded before fitting:
- bool -> 0/1
- ordered categorical (risk group) -> ordinal codes
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd
from lifelines import CoxPHFitter
from lifelines.exceptions import ConvergenceError

from ..config import CONFIG


HR_COLUMNS = ["hazard_ratio", "ci_lower", "ci_upper", "p_value"]


@dataclass
class CoxModelResult:
    """Fitted Cox model with its hazard ratio table."""

    hazard_ratios: pd.DataFrame
    concordance: float
    log_likelihood: float
    n_samples: int
    n_events: int
    fitter: Any

    def __str__(self) -> str:
        return (
            f"Cox PH model (n = {self.n_samples}, events = {self.n_events}, "
            f"C-index = {self.concordance:.3f})\n"
            f"{self.hazard_ratios.round(4).to_string()}"
        )


def encode_covariates(df: pd.DataFrame, covariates: Sequence[str]) -> pd.DataFrame:
    """Numeric encoding of covariates for lifelines."""
    encoded = pd.DataFrame(index=df.index)
    for col in covariates:
        if col not in df.columns:
            raise KeyError(f"Covariate '{col}' not found in dataset.")
        series = df[col]
        if isinstance(series.dtype, pd.CategoricalDtype):
            if not series.cat.ordered:
                raise ValueError(f"Covariate '{col}' is an unordered categorical; one-hot encode it first")
            encoded[col] = series.cat.codes.astype(float)
        elif pd.api.types.is_bool_dtype(series) or pd.api.types.is_numeric_dtype(series):
            encoded[col] = series.astype(float)
        else:
            raise ValueError(f"Covariate '{col}' is not numeric")
    return encoded


def fit_cox_model(
    df: pd.DataFrame,
    covariates: Sequence[str],
    time_col: str = CONFIG.time_column,
    event_col: str = CONFIG.event_column,
    penalizer: float = 0.0,
) -> CoxModelResult:
    """Fit a Cox proportional-hazards model.

    Args:
        df: Table with covariates, time and event columns
        covariates: Columns entering the model
        time_col: Time to event column
        event_col: Event indicator column
        penalizer: L2 penalty passed to CoxPHFitter

    Returns:
        CoxModelResult with hazard ratio, 95% CI and p-value per covariate

    Raises:
        ConvergenceError: If lifelines fails to converge
    """
    covariates = list(covariates)
    if not covariates:
        raise ValueError("At least one covariate is required")

    data = encode_covariates(df, covariates)
    data[time_col] = df[time_col].astype(float)
    data[event_col] = df[event_col].astype(int)
    data = data.dropna()

    cph = CoxPHFitter(penalizer=penalizer)
    cph.fit(data, duration_col=time_col, event_col=event_col)

    ci = np.exp(cph.confidence_intervals_)
    hazard_ratios = pd.DataFrame({
        "hazard_ratio": np.exp(cph.params_),
        "ci_lower": ci.iloc[:, 0],
        "ci_upper": ci.iloc[:, 1],
        "p_value": cph.summary["p"],
    })
    hazard_ratios.index.name = "covariate"

    return CoxModelResult(
        hazard_ratios=hazard_ratios,
        concordance=float(cph.concordance_index_),
        log_likelihood=float(cph.log_likelihood_),
        n_samples=len(data),
        n_events=int(data[event_col].sum()),
        fitter=cph,
    )


def univariate_cox_screen(
    data,
    features: Optional[List[str]] = None,
    time_col: Optional[str] = None,
    event_col: Optional[str] = None,
    penalizer: float = 0.0,
) -> pd.DataFrame:
    """Fit one Cox model per feature.

    Args:
        data: Cohort (anything with ``survival_frame()``) or DataFrame
        features: Features to screen; defaults to all cohort features
        time_col: Time column (taken from the cohort when omitted)
        event_col: Event column (taken from the cohort when omitted)
        penalizer: L2 penalty passed to CoxPHFitter

    Returns:
        DataFrame indexed by feature with hazard_ratio, ci_lower, ci_upper,
        p_value and n_present, sorted by p-value. Features whose model
        could not be fitted get NaN statistics.
    """
    if hasattr(data, "survival_frame"):
        features = list(features if features is not None else data.features.columns)
        time_col = time_col or data.time_column
        event_col = event_col or data.event_column
        frame = data.survival_frame()
    else:
        if features is None:
            raise ValueError("features must be given when screening a DataFrame")
        time_col = time_col or CONFIG.time_column
        event_col = event_col or CONFIG.event_column
        frame = data

    rows = []
    for feature in features:
        row = {"feature": feature, "n_present": float(frame[feature].astype(float).sum())}
        if frame[feature].nunique(dropna=True) <= 1:
            warnings.warn(f"Skipping constant feature '{feature}' in Cox screen")
            rows.append({**row, **{c: np.nan for c in HR_COLUMNS}})
            continue
        try:
            res = fit_cox_model(frame, [feature], time_col, event_col, penalizer)
            stats = res.hazard_ratios.loc[feature, HR_COLUMNS].to_dict()
        except (ConvergenceError, ValueError, ArithmeticError, np.linalg.LinAlgError) as e:
            warnings.warn(f"Cox model failed for '{feature}': {e}")
            stats = {c: np.nan for c in HR_COLUMNS}
        rows.append({**row, **stats})

    result = pd.DataFrame(rows, columns=["feature"] + HR_COLUMNS + ["n_present"])
    return result.set_index("feature").sort_values("p_value", na_position="last")
