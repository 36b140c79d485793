"""Cohort assembly: clinical outcome joined with presence/absence features."""
from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from ..config import CONFIG, ProjectConfig
from ..features.transformers import filter_low_prevalence, presence_absence
from ..survival.outcome import SurvivalOutcome
from .loaders import TableSource, load_clinical_table, load_community_table


logger = logging.getLogger(__name__)


@dataclass
class Cohort:
    """Samples with aligned features and survival outcome.

    Attributes:
        clinical: Clinical table indexed by sample id
        features: Presence/absence table, same index and order as ``clinical``
        outcome: Survival outcome carrying the same index
        time_column: Name of the time column in ``clinical``
        event_column: Name of the event column in ``clinical``
    """

    clinical: pd.DataFrame
    features: pd.DataFrame
    outcome: SurvivalOutcome
    time_column: str = CONFIG.time_column
    event_column: str = CONFIG.event_column

    def __post_init__(self):
        if not self.features.index.equals(self.clinical.index):
            raise ValueError("Feature and clinical tables are not aligned on sample id")

    def __len__(self) -> int:
        return len(self.clinical)

    @property
    def sample_ids(self) -> pd.Index:
        return self.clinical.index

    def survival_frame(self, extra_columns=None) -> pd.DataFrame:
        """Features plus time and event columns, ready for lifelines.

        Args:
            extra_columns: Clinical columns to append (e.g. the risk group)

        Returns:
            DataFrame indexed by sample id
        """
        clinical_cols = [self.time_column, self.event_column] + list(extra_columns or [])
        return pd.concat([self.features, self.clinical[clinical_cols]], axis=1)


def build_cohort(
    clinical: TableSource,
    community: TableSource,
    cfg: ProjectConfig = CONFIG,
) -> Cohort:
    """Load both tables, recode presence/absence and join them on sample id.

    The join keeps the clinical table's row order; samples present in
    only one table are dropped with a warning.

    Args:
        clinical: Clinical table (path, URL or DataFrame)
        community: Abundance table (path, URL or DataFrame)
        cfg: Project configuration (column names, thresholds)

    Returns:
        Cohort with aligned features and outcome

    Raises:
        ValueError: If no sample is shared by the two tables
    """
    clinical_df = load_clinical_table(clinical, cfg)
    community_df = load_community_table(community, cfg)

    shared = clinical_df.index[clinical_df.index.isin(community_df.index)]
    only_clinical = clinical_df.index.difference(community_df.index)
    only_community = community_df.index.difference(clinical_df.index)
    if len(only_clinical):
        logger.warning(f"{len(only_clinical)} clinical samples have no community profile: {list(only_clinical[:10])}")
    if len(only_community):
        logger.warning(f"{len(only_community)} community profiles have no clinical record: {list(only_community[:10])}")
    if len(shared) == 0:
        raise ValueError("Clinical and community tables share no sample id")

    clinical_df = clinical_df.loc[shared]
    presence = presence_absence(community_df.loc[shared], cfg.presence_threshold)
    presence = filter_low_prevalence(presence, cfg.min_prevalence)

    outcome = SurvivalOutcome.from_frame(clinical_df, cfg.time_column, cfg.event_column)
    logger.info(
        f"Cohort: {len(shared)} samples, {outcome.n_events} events, "
        f"{presence.shape[1]} taxa after prevalence filter"
    )

    return Cohort(
        clinical=clinical_df,
        features=presence,
        outcome=outcome,
        time_column=cfg.time_column,
        event_column=cfg.event_column,
    )
