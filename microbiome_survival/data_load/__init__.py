"""Data loading and I/O module.

This module provides utilities for:
- Loading clinical and community tables from multiple formats (CSV, TSV, Excel, Parquet, Feather)
- Joining them into an aligned cohort
- Saving tables and selection results
"""

from .loaders import (
    load_dataset,
    load_clinical_table,
    load_community_table,
    encode_risk_category,
    summarize_cohort,
)
from .cohort import Cohort, build_cohort
from .io_utils import detect_file_format, save_dataset, save_result, load_result

__all__ = [
    # Loaders
    "load_dataset",
    "load_clinical_table",
    "load_community_table",
    "encode_risk_category",
    "summarize_cohort",
    # Cohort
    "Cohort",
    "build_cohort",
    # IO Utils
    "detect_file_format",
    "save_dataset",
    "save_result",
    "load_result",
]
