"""Global configuration for the microbiome survival project.

Two external inputs are required: CLINICAL_PATH and COMMUNITY_PATH. They
can be set via environment variables, CLI arguments, or directly in the
dataclass.

Never hardcode other data paths in the codebase.
"""
from __future__ import annotations
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List


RANDOM_SEED: int = 42
ROOT_DIR = Path(__file__).parent.parent

RISK_CATEGORIES: List[str] = ["Low", "Intermediate", "High", "Advanced"]


@dataclass
class ProjectConfig:
    """Project-wide configuration parameters.

    Attributes:
        clinical_path: Path or URL of the clinical table (.csv, .tsv, .parquet, ...).
        community_path: Path or URL of the genus abundance table.
        output_dir: Directory where selection results are written.
        id_column: Sample identifier shared by both tables.
        risk_column: Ordered clinical risk category.
        time_column: Time to event in days.
        event_column: Event indicator (progressed = True, censored = False).
        presence_threshold: Abundance percentage above which a genus is "present".
        min_prevalence: Minimum number of samples where a genus must be present.
        risk_categories: Ordered levels of the risk category.
    """

    clinical_path: str = os.environ.get("CLINICAL_PATH", "")
    community_path: str = os.environ.get("COMMUNITY_PATH", "")
    output_dir: str = os.environ.get("OUTPUT_DIR", str(ROOT_DIR / "processed"))

    id_column: str = os.environ.get("ID_COLUMN", "sample_id")
    risk_column: str = os.environ.get("RISK_COLUMN", "risk_group")
    time_column: str = os.environ.get("TIME_COLUMN", "time_to_event")
    event_column: str = os.environ.get("EVENT_COLUMN", "progression")

    presence_threshold: float = float(os.environ.get("PRESENCE_THRESHOLD", "5.0"))
    min_prevalence: int = int(os.environ.get("MIN_PREVALENCE", "3"))
    risk_categories: List[str] = field(default_factory=lambda: list(RISK_CATEGORIES))


CONFIG = ProjectConfig()


def validate_config(cfg: ProjectConfig) -> None:
    """Validate minimal config is provided and raise helpful errors.

    Args:
        cfg: ProjectConfig
    """
    if not cfg.clinical_path:
        raise ValueError(
            "CLINICAL_PATH is not set. Set env var CLINICAL_PATH or pass --clinical to scripts."
        )
    if not cfg.community_path:
        raise ValueError(
            "COMMUNITY_PATH is not set. Set env var COMMUNITY_PATH or pass --community to scripts."
        )
    if cfg.min_prevalence < 1:
        raise ValueError(f"min_prevalence must be >= 1, got {cfg.min_prevalence}")
