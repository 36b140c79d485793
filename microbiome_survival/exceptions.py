"""Exceptions raised by the feature selection routines."""
from __future__ import annotations

from typing import Any, Optional


class FeatureSelectionError(Exception):
    """Base exception for feature selection errors."""
    pass


class InsufficientSamplesError(FeatureSelectionError, ValueError):
    """Raised when the feature table has fewer rows than the configured minimum."""
    pass


class DegenerateOutcomeError(FeatureSelectionError, ValueError):
    """Raised when the outcome carries no learnable signal (no events, one class)."""
    pass


class MisalignedInputError(FeatureSelectionError, ValueError):
    """Raised when feature rows and outcome rows do not pair up."""
    pass


class NonConvergentError(FeatureSelectionError, RuntimeError):
    """Raised when the importance model fails to fit.

    Attributes:
        partial_result: Result holding the iterations completed before the
            failure, or None if the failure happened on the first fit.
    """

    def __init__(self, message: str, partial_result: Optional[Any] = None):
        super().__init__(message)
        self.partial_result = partial_result
