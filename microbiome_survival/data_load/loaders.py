"""Dataset loading utilities.

This module handles loading the clinical and community tables of a cohort
from various file formats with robust error handling and format detection.
"""
from __future__ import annotations

import logging
import os
from typing import Optional, Union

import pandas as pd

from ..config import CONFIG, ProjectConfig
from ..features.selectors import safe_feature_columns


logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = {".csv", ".tsv", ".txt", ".parquet", ".feather", ".xlsx", ".xls"}

TableSource = Union[str, os.PathLike, pd.DataFrame]


def _is_url(path: str) -> bool:
    return str(path).lower().startswith(("http://", "https://"))


def load_dataset(path: Union[str, os.PathLike]) -> pd.DataFrame:
    """Load dataset from file path or URL with format auto-detection.

    Supports CSV, TSV, Parquet, Feather, and Excel formats (.xlsx, .xls).

    Args:
        path: Path or http(s) URL to the dataset file

    Returns:
        pandas DataFrame with loaded data

    Raises:
        FileNotFoundError: If a local file does not exist
        ValueError: If file format is not supported
        RuntimeError: If file is corrupted or cannot be read
    """
    path = str(path)

    if not path or (not _is_url(path) and not os.path.exists(path)):
        raise FileNotFoundError(f"Dataset not found: {path}")

    ext = os.path.splitext(path.split("?")[0])[1].lower()

    if ext not in SUPPORTED_FORMATS:
        raise ValueError(
            f"Unsupported file format '{ext}'. "
            f"Supported formats: {sorted(SUPPORTED_FORMATS)}"
        )

    try:
        if ext == ".csv":
            df = pd.read_csv(path)
        elif ext in {".tsv", ".txt"}:
            df = pd.read_csv(path, sep="\t")
        elif ext == ".parquet":
            df = pd.read_parquet(path)
        elif ext == ".feather":
            df = pd.read_feather(path)
        else:
            df = pd.read_excel(path)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise RuntimeError(
            f"Failed to parse {ext} file. "
            f"Check file format and encoding. Error: {e}"
        ) from e

    logger.info(f"Loaded {df.shape[0]} rows x {df.shape[1]} columns from {path}")
    return df


def _as_frame(source: TableSource) -> pd.DataFrame:
    if isinstance(source, pd.DataFrame):
        return source.copy()
    return load_dataset(source)


def _index_by_id(df: pd.DataFrame, id_column: str) -> pd.DataFrame:
    """Use the sample id column as index (or accept an index already named so)."""
    if id_column in df.columns:
        df = df.set_index(id_column)
    elif df.index.name != id_column:
        raise KeyError(f"Required id column '{id_column}' not found in dataset.")

    df.index = df.index.astype(str)
    if df.index.duplicated().any():
        dup = df.index[df.index.duplicated()].unique().tolist()
        raise ValueError(f"Duplicated sample ids: {dup[:10]}")
    return df


def _coerce_event(series: pd.Series) -> pd.Series:
    """Map 0/1, True/False or yes/no style event indicators to bool."""
    if pd.api.types.is_bool_dtype(series):
        return series.astype(bool)
    if pd.api.types.is_numeric_dtype(series):
        values = set(series.dropna().unique())
        if not values <= {0, 1}:
            raise ValueError(f"Event column must be binary, found values {sorted(values)}")
        return series.astype(bool)

    mapping = {
        "1": True, "true": True, "yes": True, "progression": True, "event": True,
        "0": False, "false": False, "no": False, "censored": False,
    }
    normalized = series.astype(str).str.strip().str.lower()
    unknown = sorted(set(normalized) - set(mapping))
    if unknown:
        raise ValueError(f"Unrecognised event indicator values: {unknown}")
    return normalized.map(mapping).astype(bool)


def encode_risk_category(series: pd.Series, categories=None) -> pd.Series:
    """Convert a risk column into an ordered categorical.

    Args:
        series: Raw risk labels
        categories: Ordered levels; defaults to CONFIG.risk_categories

    Returns:
        Ordered categorical Series (unknown labels raise ValueError)
    """
    categories = list(categories or CONFIG.risk_categories)
    labels = series.astype(str).str.strip().str.capitalize()
    unknown = sorted(set(labels[series.notna()]) - set(categories))
    if unknown:
        raise ValueError(f"Unknown risk categories {unknown}; expected {categories}")
    return pd.Series(
        pd.Categorical(labels.where(series.notna()), categories=categories, ordered=True),
        index=series.index,
        name=series.name,
    )


def load_clinical_table(
    source: TableSource,
    cfg: ProjectConfig = CONFIG,
) -> pd.DataFrame:
    """Load and validate the clinical table of a cohort.

    Args:
        source: Path, URL or DataFrame
        cfg: Project configuration with the column names

    Returns:
        DataFrame indexed by sample id with float time, bool event and
        ordered risk category (when the risk column is present)

    Raises:
        KeyError: If time or event column is missing
        ValueError: If time is negative/missing or the event is not binary
    """
    df = _index_by_id(_as_frame(source), cfg.id_column)

    for col in (cfg.time_column, cfg.event_column):
        if col not in df.columns:
            raise KeyError(f"Required column '{col}' not found in clinical table.")

    time = pd.to_numeric(df[cfg.time_column], errors="coerce")
    if time.isna().any():
        bad = df.index[time.isna()].tolist()
        raise ValueError(f"Missing or non-numeric time to event for samples: {bad[:10]}")
    if (time < 0).any():
        bad = df.index[time < 0].tolist()
        raise ValueError(f"Negative time to event for samples: {bad[:10]}")
    df[cfg.time_column] = time.astype(float)

    if df[cfg.event_column].isna().any():
        raise ValueError("Event indicator contains missing values")
    df[cfg.event_column] = _coerce_event(df[cfg.event_column])

    if cfg.risk_column in df.columns:
        df[cfg.risk_column] = encode_risk_category(df[cfg.risk_column], cfg.risk_categories)
    else:
        logger.warning(f"Risk column '{cfg.risk_column}' not found in clinical table")

    return df


def load_community_table(
    source: TableSource,
    cfg: ProjectConfig = CONFIG,
) -> pd.DataFrame:
    """Load the taxon abundance table (percentages, one column per taxon).

    Args:
        source: Path, URL or DataFrame
        cfg: Project configuration with the id column name

    Returns:
        Float DataFrame indexed by sample id

    Raises:
        ValueError: If abundance values are missing or non-numeric
    """
    df = _index_by_id(_as_frame(source), cfg.id_column)

    # Identifier columns exported next to the abundances are not taxa
    taxa = safe_feature_columns(df, [cfg.id_column])
    if len(taxa) < len(df.columns):
        dropped = [c for c in df.columns if c not in taxa]
        logger.info(f"Dropped identifier columns from community table: {dropped}")
        df = df[taxa]

    try:
        df = df.apply(pd.to_numeric, errors="raise").astype(float)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Community table must hold numeric abundances: {e}") from e

    if df.isna().any().any():
        missing = df.columns[df.isna().any()].tolist()
        raise ValueError(f"Community table has missing abundances in: {missing[:10]}")

    out_of_range = ((df < 0) | (df > 100)).sum().sum()
    if out_of_range:
        logger.warning(f"{out_of_range} abundance values fall outside 0-100 %")

    return df


def summarize_cohort(clinical: pd.DataFrame, cfg: ProjectConfig = CONFIG) -> dict:
    """Compute summary tables of the clinical outcome.

    Args:
        clinical: Clinical table from ``load_clinical_table``
        cfg: Project configuration

    Returns:
        Dictionary with:
        - n_samples / n_events: counts
        - time: descriptive statistics of time to event
        - risk_balance: count and fraction per risk category (if present)
    """
    summary = {
        "n_samples": len(clinical),
        "n_events": int(clinical[cfg.event_column].sum()),
        "time": clinical[cfg.time_column].describe(),
    }
    if cfg.risk_column in clinical.columns:
        vc = clinical[cfg.risk_column].value_counts(sort=False)
        summary["risk_balance"] = pd.DataFrame({"count": vc, "fraction": vc / vc.sum()})
    return summary
