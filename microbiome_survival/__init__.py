"""Microbiome Survival - Source Code Package

This package provides a modular framework for:
- Loading clinical and 16S community tables of a cohort
- Presence/absence recoding and prevalence filtering of taxa
- Kaplan-Meier, log-rank and Cox proportional-hazards analysis
- Boruta all-relevant feature selection against a censored outcome

## Module Structure

- **data_load**: Table loading, cohort assembly, result persistence
- **features**: Presence/absence recoding, Boruta feature selection
- **models**: Ensemble models used for feature importance
- **survival**: Survival outcome, Kaplan-Meier, log-rank, Cox models
- **reporting**: Plotly figures for selection and survival results

## Quick Start

```python
from microbiome_survival.data_load import build_cohort
from microbiome_survival.features import select
from microbiome_survival.survival import fit_kaplan_meier, logrank_by_group

cohort = build_cohort("clinical.csv", "community.csv")

# Survival by risk group
fitters = fit_kaplan_meier(cohort.clinical, group_col="risk_group")
print(logrank_by_group(cohort.clinical, "risk_group"))

# Taxa relevant to progression-free survival
result = select(cohort.features, cohort.outcome, max_iterations=100)
print(result.attribute_stats())
```
"""

from .config import CONFIG, ProjectConfig, RANDOM_SEED

from .exceptions import (
    FeatureSelectionError,
    InsufficientSamplesError,
    DegenerateOutcomeError,
    MisalignedInputError,
    NonConvergentError,
)

from .data_load import (
    load_dataset,
    load_clinical_table,
    load_community_table,
    build_cohort,
    Cohort,
)

from .features import (
    presence_absence,
    filter_low_prevalence,
    BorutaConfig,
    BorutaResult,
    BorutaSelector,
    Decision,
    select,
)

from .survival import (
    SurvivalOutcome,
    fit_kaplan_meier,
    logrank_by_group,
    fit_cox_model,
    univariate_cox_screen,
)

__all__ = [
    # Config
    "CONFIG",
    "ProjectConfig",
    "RANDOM_SEED",
    # Errors
    "FeatureSelectionError",
    "InsufficientSamplesError",
    "DegenerateOutcomeError",
    "MisalignedInputError",
    "NonConvergentError",
    # Data
    "load_dataset",
    "load_clinical_table",
    "load_community_table",
    "build_cohort",
    "Cohort",
    # Features
    "presence_absence",
    "filter_low_prevalence",
    "BorutaConfig",
    "BorutaResult",
    "BorutaSelector",
    "Decision",
    "select",
    # Survival
    "SurvivalOutcome",
    "fit_kaplan_meier",
    "logrank_by_group",
    "fit_cox_model",
    "univariate_cox_screen",
    # Modules
    "data_load",
    "features",
    "models",
    "survival",
    "reporting",
]

# Version
__version__ = "0.1.0"
