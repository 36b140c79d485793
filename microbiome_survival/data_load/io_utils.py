"""I/O utilities for data and selection results.

This module provides utilities for file format detection, table saving
and persistence of Boruta results.
"""
from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

import joblib
import pandas as pd


RESULT_FORMAT_VERSION = "1.0.0"


def detect_file_format(path: str) -> str:
    """Detect file format from extension.

    Args:
        path: File path

    Returns:
        Format string: 'csv', 'tsv', 'parquet', 'feather', 'xlsx', or 'unknown'
    """
    ext = os.path.splitext(str(path))[1].lower()

    format_map = {
        ".csv": "csv",
        ".tsv": "tsv",
        ".parquet": "parquet",
        ".feather": "feather",
        ".xlsx": "xlsx",
    }

    return format_map.get(ext, "unknown")


def save_dataset(
    df: pd.DataFrame,
    path: Union[str, Path],
    format: Optional[str] = None,
    index: bool = True,
    **kwargs
) -> None:
    """Save DataFrame to file with format auto-detection.

    Args:
        df: DataFrame to save
        path: Output file path
        format: Format to use ('csv', 'tsv', 'parquet', 'feather', 'xlsx').
               If None, infers from file extension
        index: Write the index (sample ids, feature names) as a column
        **kwargs: Additional arguments passed to pandas save method
    """
    path = str(path)
    if format is None:
        format = detect_file_format(path)

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    if format == "csv":
        df.to_csv(path, index=index, **kwargs)
    elif format == "tsv":
        df.to_csv(path, sep="\t", index=index, **kwargs)
    elif format == "parquet":
        df.to_parquet(path, index=index, **kwargs)
    elif format == "feather":
        out = df.reset_index() if index else df.reset_index(drop=True)
        out.to_feather(path, **kwargs)
    elif format == "xlsx":
        df.to_excel(path, index=index, **kwargs)
    else:
        raise ValueError(f"Unsupported format: {format}")


def save_result(result: Any, path: Union[str, Path], overwrite: bool = False) -> Path:
    """Persist a BorutaResult (or any picklable result) with joblib.

    Args:
        result: Object to save
        path: Output .joblib path
        overwrite: Replace an existing file

    Returns:
        Path written

    Raises:
        FileExistsError: If path exists and overwrite=False
    """
    path = Path(path)
    if path.exists() and not overwrite:
        raise FileExistsError(f"{path} already exists. Set overwrite=True to replace.")
    path.parent.mkdir(parents=True, exist_ok=True)

    joblib.dump(
        {
            "version": RESULT_FORMAT_VERSION,
            "save_time": datetime.now().isoformat(),
            "result": result,
        },
        path,
    )
    return path


def load_result(path: Union[str, Path]) -> Any:
    """Load a result saved with ``save_result``.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file was not written by ``save_result``
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Result not found: {path}")

    payload = joblib.load(path)
    if not isinstance(payload, dict) or "result" not in payload:
        raise ValueError(f"{path} does not contain a saved result")
    return payload["result"]
