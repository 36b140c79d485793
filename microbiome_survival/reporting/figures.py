"""Figures for selection and survival results."""
from __future__ import annotations

from typing import Dict

import pandas as pd
import plotly.graph_objects as go
from lifelines import KaplanMeierFitter

from ..features.boruta import SHADOW_COLUMNS, BorutaResult


DECISION_COLORS: Dict[str, str] = {
    "Confirmed": "green",
    "Tentative": "gold",
    "Rejected": "red",
    "Shadow": "blue",
}


def plot_importance_history(result: BorutaResult, include_rejected: bool = True) -> go.Figure:
    """Box plot of per-iteration importance, one box per feature.

    Features are ordered by median importance and coloured by decision;
    the shadow minimum, mean and maximum are drawn as reference boxes.

    Args:
        result: Result of ``features.select``
        include_rejected: Draw rejected features too

    Returns:
        Plotly Figure
    """
    history = result.importance_history
    columns = [
        name for name in result.feature_names
        if history[name].notna().any()
        and (include_rejected or result.decisions[name].value != "Rejected")
    ]
    columns += SHADOW_COLUMNS
    order = history[columns].median().sort_values(na_position="first").index

    fig = go.Figure()
    for col in order:
        values = history[col].dropna()
        label = "Shadow" if col in SHADOW_COLUMNS else result.decisions[col].value
        fig.add_trace(go.Box(
            y=values,
            name=str(col),
            marker_color=DECISION_COLORS[label],
            legendgroup=label,
            showlegend=False,
        ))

    fig.update_layout(
        title=f"Boruta importance history ({result.iterations} iterations)",
        xaxis_title="Feature",
        yaxis_title="Importance",
    )
    return fig


def plot_kaplan_meier(fitters: Dict[str, KaplanMeierFitter], title: str = "Kaplan-Meier") -> go.Figure:
    """Step curves of fitted Kaplan-Meier estimators.

    Args:
        fitters: Output of ``survival.fit_kaplan_meier``
        title: Figure title

    Returns:
        Plotly Figure
    """
    fig = go.Figure()
    for label, kmf in fitters.items():
        sf: pd.DataFrame = kmf.survival_function_
        fig.add_trace(go.Scatter(
            x=sf.index,
            y=sf.iloc[:, 0],
            mode="lines",
            line_shape="hv",
            name=str(label),
        ))

    fig.update_layout(
        title=title,
        xaxis_title="Days",
        yaxis_title="Survival probability",
        yaxis_range=[0, 1.05],
    )
    return fig
