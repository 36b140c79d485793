"""Selection script: cohort assembly, survival summary and Boruta selection."""
from __future__ import annotations

import argparse
import logging
import os
from dataclasses import replace
from typing import Optional

from .config import CONFIG, validate_config
from .data_load import build_cohort, save_dataset, save_result
from .features import BorutaConfig, select
from .survival import logrank_by_group


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Command line parser; selection defaults come from ``BorutaConfig``."""
    defaults = BorutaConfig()
    parser = argparse.ArgumentParser(description="Boruta selection of taxa against progression-free survival.")
    parser.add_argument("--clinical", type=str, default=os.environ.get("CLINICAL_PATH"), help="Clinical table path or URL")
    parser.add_argument("--community", type=str, default=os.environ.get("COMMUNITY_PATH"), help="Abundance table path or URL")
    parser.add_argument("--output", type=str, default=CONFIG.output_dir, help="Output directory")
    parser.add_argument("--max-iter", type=int, default=defaults.max_iterations, help="Maximum Boruta iterations")
    parser.add_argument("--alpha", type=float, default=defaults.significance_level, help="Significance level of the hit tests")
    parser.add_argument("--seed", type=int, default=defaults.random_seed)
    parser.add_argument("--model", type=str, choices=["rsf", "gbsa"], default=defaults.importance_model, help="Importance model")
    parser.add_argument("--n-estimators", type=int, default=defaults.n_estimators)
    parser.add_argument("--rough-fix", action="store_true", help="Resolve tentative features at the end")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def selection_main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = replace(CONFIG, clinical_path=args.clinical or "", community_path=args.community or "")
    validate_config(cfg)

    cohort = build_cohort(cfg.clinical_path, cfg.community_path, cfg)

    if cfg.risk_column in cohort.clinical.columns:
        try:
            print(logrank_by_group(cohort.clinical, cfg.risk_column, cfg.time_column, cfg.event_column))
        except ValueError as e:
            logger.warning(f"Log-rank by risk group skipped: {e}")

    config = BorutaConfig(
        max_iterations=args.max_iter,
        significance_level=args.alpha,
        random_seed=args.seed,
        importance_model=args.model,
        n_estimators=args.n_estimators,
    )
    result = select(cohort.features, cohort.outcome, config)
    if args.rough_fix and result.tentative and result.iterations:
        result = result.tentative_rough_fix()
    print(result)

    os.makedirs(args.output, exist_ok=True)
    save_dataset(result.attribute_stats(), os.path.join(args.output, "attribute_stats.csv"))
    save_dataset(result.importance_history, os.path.join(args.output, "importance_history.csv"))
    result_path = save_result(result, os.path.join(args.output, "boruta_result.joblib"), overwrite=True)
    print(f"Saved selection results to {result_path.parent}")
    return 0


if __name__ == "__main__":
    raise SystemExit(selection_main())
