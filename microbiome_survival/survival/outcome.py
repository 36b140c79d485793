"""Right-censored survival outcome."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd
from sksurv.util import Surv


@dataclass
class SurvivalOutcome:
    """Time-to-event pair of a cohort, one entry per sample.

    Attributes:
        time: Follow-up time in days (non-negative)
        event: True if the event (progression) was observed, False if censored
        index: Optional sample identifiers, used to check alignment with features
    """

    time: np.ndarray
    event: np.ndarray
    index: Optional[pd.Index] = None

    def __post_init__(self):
        self.time = np.asarray(self.time, dtype=float).ravel()
        self.event = np.asarray(self.event).astype(bool).ravel()

        if self.time.shape != self.event.shape:
            raise ValueError(
                f"time and event must have the same length "
                f"({len(self.time)} != {len(self.event)})"
            )
        if not np.all(np.isfinite(self.time)):
            raise ValueError("time contains missing or infinite values")
        if np.any(self.time < 0):
            raise ValueError("time must be non-negative")
        if self.index is not None:
            self.index = pd.Index(self.index)
            if len(self.index) != len(self.time):
                raise ValueError("index length does not match the outcome length")

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        time_col: str,
        event_col: str,
    ) -> "SurvivalOutcome":
        """Build an outcome from two columns of a DataFrame, keeping its index."""
        for col in (time_col, event_col):
            if col not in df.columns:
                raise KeyError(f"Required column '{col}' not found in dataset.")
        return cls(
            time=df[time_col].to_numpy(),
            event=df[event_col].to_numpy(),
            index=df.index,
        )

    def __len__(self) -> int:
        return len(self.time)

    def reindex(self, index) -> "SurvivalOutcome":
        """Reorder the outcome to follow ``index``.

        Args:
            index: Sample ids, e.g. the index of a feature table

        Returns:
            New SurvivalOutcome whose rows follow ``index``

        Raises:
            ValueError: If the outcome carries no index
            KeyError: If some ids are not in the outcome
        """
        if self.index is None:
            raise ValueError("Cannot reindex an outcome without sample ids")
        index = pd.Index(index)
        missing = index.difference(self.index)
        if len(missing):
            raise KeyError(f"Sample ids not in outcome: {list(missing[:10])}")
        positions = self.index.get_indexer(index)
        return SurvivalOutcome(
            time=self.time[positions],
            event=self.event[positions],
            index=index,
        )

    @property
    def n_events(self) -> int:
        return int(self.event.sum())

    def to_structured(self) -> np.ndarray:
        """Return the scikit-survival structured array (event, time)."""
        return Surv.from_arrays(event=self.event, time=self.time)

    def to_frame(self, time_col: str = "time", event_col: str = "event") -> pd.DataFrame:
        return pd.DataFrame(
            {time_col: self.time, event_col: self.event},
            index=self.index,
        )
