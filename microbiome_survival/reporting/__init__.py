"""Reporting module for selection and survival figures."""

from .figures import plot_importance_history, plot_kaplan_meier, DECISION_COLORS

__all__ = [
    "plot_importance_history",
    "plot_kaplan_meier",
    "DECISION_COLORS",
]
