"""Boruta all-relevant feature selection.

Each iteration appends a block of shadow features (independently shuffled
copies of the features still in play) to the feature table, fits an
ensemble against the outcome and compares every real feature's importance
with the best shadow importance. Permutation importance is measured on
rows held out of that iteration's fit. Hit counts are tested against
Binomial(n, 0.5) after every iteration:
- significantly many hits -> Confirmed
- significantly few hits -> Rejected
- otherwise -> Tentative, tested again next iteration

Confirmed and rejected features are never tested again; rejected ones are
also dropped from the model (and from the shadow block).

Reference: Kursa & Rudnicki (2010), "Feature Selection with the Boruta
Package", Journal of Statistical Software 36(11).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple, Union

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted

from ..config import RANDOM_SEED
from ..exceptions import (
    DegenerateOutcomeError,
    InsufficientSamplesError,
    MisalignedInputError,
    NonConvergentError,
)
from ..models import LABEL, PERMUTATION, SURVIVAL, get_importance_model
from ..survival.outcome import SurvivalOutcome
from .importance import compute_importance
from .selectors import constant_columns
from .statistical_tests import MULTIPLE_COMPARISON_METHODS, binomial_hit_test


logger = logging.getLogger(__name__)

SHADOW_COLUMNS: List[str] = ["shadow_max", "shadow_mean", "shadow_min"]

Outcome = Union[SurvivalOutcome, pd.Series, np.ndarray, list]


class Decision(str, Enum):
    """Relevance decision of a feature."""

    TENTATIVE = "Tentative"
    CONFIRMED = "Confirmed"
    REJECTED = "Rejected"


@dataclass
class BorutaConfig:
    """Configuration of a Boruta run.

    Attributes:
        max_iterations: Maximum number of importance runs
        significance_level: Alpha of the binomial hit tests
        random_seed: Seed of the generator driving shadows, splits and ensembles
        multiple_comparison: 'bonferroni' or 'none'. The Bonferroni family is
            every candidate feature, including features already decided and
            constant features rejected before the first iteration
        min_samples: Minimum number of rows required
        min_shadows: Minimum number of shadow features per iteration
        importance_model: Key of ``models.make_importance_models``
        n_estimators: Ensemble size
        n_repeats: Permutation repeats (permutation importance only)
        holdout_fraction: Share of rows held out of each fit and used to
            score permutation importance, drawn per iteration and
            stratified by event (or label)
        n_jobs: Parallel jobs inside one fit
    """

    max_iterations: int = 100
    significance_level: float = 0.01
    random_seed: Optional[int] = RANDOM_SEED
    multiple_comparison: str = "bonferroni"
    min_samples: int = 10
    min_shadows: int = 5
    importance_model: str = "rsf"
    n_estimators: int = 100
    n_repeats: int = 5
    holdout_fraction: float = 1 / 3
    n_jobs: Optional[int] = None

    def __post_init__(self):
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")
        if not 0.0 < self.significance_level < 1.0:
            raise ValueError(
                f"significance_level must be in (0, 1), got {self.significance_level}"
            )
        if self.multiple_comparison not in MULTIPLE_COMPARISON_METHODS:
            raise ValueError(
                f"multiple_comparison must be one of {list(MULTIPLE_COMPARISON_METHODS)}"
            )
        if self.min_shadows < 1:
            raise ValueError(f"min_shadows must be >= 1, got {self.min_shadows}")
        if self.min_samples < 2:
            raise ValueError(f"min_samples must be >= 2, got {self.min_samples}")
        if not 0.0 < self.holdout_fraction < 1.0:
            raise ValueError(
                f"holdout_fraction must be in (0, 1), got {self.holdout_fraction}"
            )


@dataclass
class BorutaResult:
    """Final state of a Boruta run.

    Attributes:
        feature_names: Candidate features in input order
        decisions: Decision per feature
        hits: Number of iterations each feature beat the best shadow
        decided_at: Iteration a feature left Tentative (0 = rejected before the loop)
        iterations: Number of iterations run
        importance_history: One row per iteration, one column per feature
            (NaN once rejected) plus shadow_max / shadow_mean / shadow_min
        config: Configuration used for the run
    """

    feature_names: List[str]
    decisions: Dict[str, Decision]
    hits: Dict[str, int]
    decided_at: Dict[str, Optional[int]]
    iterations: int
    importance_history: pd.DataFrame
    config: BorutaConfig = field(default_factory=BorutaConfig)

    def _with_decision(self, decision: Decision) -> Set[str]:
        return {name for name in self.feature_names if self.decisions[name] is decision}

    @property
    def confirmed(self) -> Set[str]:
        return self._with_decision(Decision.CONFIRMED)

    @property
    def rejected(self) -> Set[str]:
        return self._with_decision(Decision.REJECTED)

    @property
    def tentative(self) -> Set[str]:
        return self._with_decision(Decision.TENTATIVE)

    @property
    def all_tentative(self) -> bool:
        """True when there were candidates and none of them was decided."""
        return bool(self.feature_names) and len(self.tentative) == len(self.feature_names)

    def selected_features(self, with_tentative: bool = False) -> List[str]:
        """Confirmed features (optionally with tentative ones) in input order."""
        keep = {Decision.CONFIRMED}
        if with_tentative:
            keep.add(Decision.TENTATIVE)
        return [name for name in self.feature_names if self.decisions[name] in keep]

    def attribute_stats(self) -> pd.DataFrame:
        """Summarise the importance history per feature.

        Returns:
            DataFrame indexed by feature with mean/median/min/max importance,
            hit rate over all iterations and the final decision
        """
        columns = [
            "feature", "mean_importance", "median_importance", "min_importance",
            "max_importance", "norm_hits", "decision",
        ]
        rows = []
        for name in self.feature_names:
            values = self.importance_history[name].dropna() if name in self.importance_history else pd.Series(dtype=float)
            rows.append({
                "feature": name,
                "mean_importance": values.mean() if len(values) else np.nan,
                "median_importance": values.median() if len(values) else np.nan,
                "min_importance": values.min() if len(values) else np.nan,
                "max_importance": values.max() if len(values) else np.nan,
                "norm_hits": self.hits[name] / self.iterations if self.iterations else np.nan,
                "decision": self.decisions[name].value,
            })
        return pd.DataFrame(rows, columns=columns).set_index("feature")

    def tentative_rough_fix(self) -> "BorutaResult":
        """Force a decision on tentative features.

        A tentative feature is confirmed when its median importance is
        above the median of the per-iteration shadow maxima, otherwise it
        is rejected. The original result is left untouched.

        Returns:
            New BorutaResult without tentative features
        """
        if self.iterations == 0:
            raise ValueError("Rough fix needs at least one completed iteration")

        shadow_median = self.importance_history["shadow_max"].median()
        decisions = dict(self.decisions)
        decided_at = dict(self.decided_at)
        for name in self.tentative:
            feature_median = self.importance_history[name].median()
            decisions[name] = (
                Decision.CONFIRMED if feature_median > shadow_median else Decision.REJECTED
            )
            decided_at[name] = self.iterations

        return replace(self, decisions=decisions, decided_at=decided_at)

    def __str__(self) -> str:
        """String representation of results."""
        lines = [
            "=" * 60,
            f"Boruta feature selection ({self.iterations} iterations)",
            "=" * 60,
            f"  Confirmed ({len(self.confirmed)}): {', '.join(self.selected_features()) or '-'}",
            f"  Tentative ({len(self.tentative)}): "
            f"{', '.join(n for n in self.feature_names if n in self.tentative) or '-'}",
            f"  Rejected:  {len(self.rejected)}",
            "=" * 60,
        ]
        return "\n".join(lines)


def _resolve_config(config: Optional[BorutaConfig], overrides: Dict) -> BorutaConfig:
    if config is None:
        config = BorutaConfig()
    if overrides:
        known = {f.name for f in fields(BorutaConfig)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown BorutaConfig fields: {sorted(unknown)}")
        config = replace(config, **overrides)
    return config


def _as_feature_frame(features) -> pd.DataFrame:
    """Validate the feature table and return it as a float DataFrame."""
    if isinstance(features, pd.DataFrame):
        X = features
    else:
        arr = np.asarray(features)
        if arr.ndim != 2:
            raise ValueError(f"Feature table must be 2-dimensional, got shape {arr.shape}")
        X = pd.DataFrame(arr, columns=[f"x{i}" for i in range(arr.shape[1])])

    if X.columns.duplicated().any():
        dup = X.columns[X.columns.duplicated()].tolist()
        raise ValueError(f"Duplicated feature names: {dup}")

    try:
        X = X.astype(float)
    except (ValueError, TypeError) as e:
        non_numeric = [c for c in X.columns if not (
            pd.api.types.is_numeric_dtype(X[c]) or pd.api.types.is_bool_dtype(X[c])
        )]
        raise ValueError(f"Feature table has non-numeric columns: {non_numeric}") from e

    if X.isna().any().any():
        missing = X.columns[X.isna().any()].tolist()
        raise ValueError(f"Feature table contains missing values in: {missing}")

    return X


def _check_index(outcome_index: Optional[pd.Index], features, X: pd.DataFrame) -> None:
    if outcome_index is None or not isinstance(features, pd.DataFrame):
        return
    if not outcome_index.equals(X.index):
        raise MisalignedInputError(
            "Outcome index does not match the feature table index; "
            "rows must refer to the same samples in the same order"
        )


def _prepare_outcome(
    outcome: Outcome,
    features,
    X: pd.DataFrame,
    config: BorutaConfig,
    model_info: Dict[str, str],
) -> Tuple[np.ndarray, np.ndarray]:
    """Validate the outcome against the features.

    Returns:
        Tuple of (fitting target, strata used to split held-out rows)
    """
    n_rows = len(X)
    held_out_scoring = model_info["importance"] == PERMUTATION

    if isinstance(outcome, SurvivalOutcome):
        if len(outcome) != n_rows:
            raise MisalignedInputError(
                f"Feature table has {n_rows} rows but outcome has {len(outcome)}"
            )
        _check_index(outcome.index, features, X)
        if model_info["outcome"] != SURVIVAL:
            raise ValueError(
                f"Importance model '{config.importance_model}' expects a label outcome, "
                "got a SurvivalOutcome"
            )
        if n_rows < config.min_samples:
            raise InsufficientSamplesError(
                f"Need at least {config.min_samples} samples, got {n_rows}"
            )
        if outcome.n_events == 0:
            raise DegenerateOutcomeError(
                "All outcomes are censored; no event to learn importance from"
            )
        if held_out_scoring and outcome.n_events < 2:
            raise DegenerateOutcomeError(
                "Held-out importance needs at least 2 events, one to fit and one to score"
            )
        return outcome.to_structured(), outcome.event.copy()

    index = outcome.index if isinstance(outcome, pd.Series) else None
    y = np.asarray(outcome).ravel()
    if len(y) != n_rows:
        raise MisalignedInputError(
            f"Feature table has {n_rows} rows but outcome has {len(y)}"
        )
    _check_index(index, features, X)
    if model_info["outcome"] != LABEL:
        raise ValueError(
            f"Importance model '{config.importance_model}' expects a SurvivalOutcome, "
            "got a plain label"
        )
    if n_rows < config.min_samples:
        raise InsufficientSamplesError(
            f"Need at least {config.min_samples} samples, got {n_rows}"
        )
    _, counts = np.unique(y, return_counts=True)
    if counts.size < 2:
        raise DegenerateOutcomeError("Outcome label has a single class")
    if held_out_scoring and counts.min() < 2:
        raise DegenerateOutcomeError(
            "Held-out importance needs at least 2 samples of every class"
        )
    return y, y


def _holdout_split(
    strata: np.ndarray,
    fraction: float,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray]:
    """Stratified split into fitting rows and held-out scoring rows.

    Every stratum with at least two rows lands on both sides; a single-row
    stratum stays with the fitting rows.
    """
    held_out = []
    for level in np.unique(strata):
        rows = rng.permutation(np.flatnonzero(strata == level))
        if len(rows) < 2:
            continue
        n_held_out = min(max(1, int(round(fraction * len(rows)))), len(rows) - 1)
        held_out.extend(rows[:n_held_out])

    mask = np.zeros(len(strata), dtype=bool)
    mask[held_out] = True
    return np.flatnonzero(~mask), np.flatnonzero(mask)


def _make_shadows(real: np.ndarray, min_shadows: int, rng: np.random.Generator) -> np.ndarray:
    """Replicate the real block until it has ``min_shadows`` columns, then shuffle each column."""
    n_real = real.shape[1]
    n_blocks = max(1, int(np.ceil(min_shadows / n_real)))
    shadow = np.tile(real, (1, n_blocks))
    for j in range(shadow.shape[1]):
        shadow[:, j] = rng.permutation(shadow[:, j])
    return shadow


def _run_iteration(
    real: np.ndarray,
    target: np.ndarray,
    strata: np.ndarray,
    config: BorutaConfig,
    rng: np.random.Generator,
) -> Tuple[np.ndarray, np.ndarray]:
    """Fit one model on real + shadow features.

    Permutation importance is scored on rows held out of the fit, so a
    column that only helps the model memorise its training rows earns
    nothing. Impurity importance comes from the fit on all rows.

    Returns:
        Tuple of (real importances, shadow importances)
    """
    shadow = _make_shadows(real, config.min_shadows, rng)
    X_all = np.hstack([real, shadow])
    seed = int(rng.integers(0, 2**31 - 1))

    model, info = get_importance_model(
        config.importance_model,
        random_state=seed,
        n_estimators=config.n_estimators,
        n_jobs=config.n_jobs,
    )
    if info["importance"] == PERMUTATION:
        fit_rows, score_rows = _holdout_split(strata, config.holdout_fraction, rng)
    else:
        fit_rows = score_rows = np.arange(len(X_all))

    model.fit(X_all[fit_rows], target[fit_rows])
    importance = compute_importance(
        model, info, X_all[score_rows], target[score_rows],
        n_repeats=config.n_repeats,
        random_state=seed,
        n_jobs=config.n_jobs,
    )
    n_real = real.shape[1]
    return importance[:n_real], importance[n_real:]


def _history_frame(records: List[Dict[str, float]], names: List[str]) -> pd.DataFrame:
    history = pd.DataFrame(records, columns=names + SHADOW_COLUMNS, dtype=float)
    history.index = pd.RangeIndex(start=1, stop=len(records) + 1, name="iteration")
    return history


def select(
    features,
    outcome: Outcome,
    config: Optional[BorutaConfig] = None,
    **overrides,
) -> BorutaResult:
    """Run Boruta feature selection.

    Args:
        features: Feature table (DataFrame, or 2-D array with generated names)
        outcome: SurvivalOutcome for survival models, or a label array for 'rf'
        config: BorutaConfig; defaults are used when None
        **overrides: BorutaConfig fields overriding ``config``

    Returns:
        BorutaResult with the decision of every feature

    Raises:
        MisalignedInputError: If features and outcome do not pair up
        InsufficientSamplesError: If there are fewer than ``min_samples`` rows
        DegenerateOutcomeError: If the outcome has no events (or one class), or
            too few events to hold some out for permutation importance
        NonConvergentError: If the importance model fails to fit
        ValueError: If the feature table has missing or non-numeric values
    """
    config = _resolve_config(config, overrides)
    _, model_info = get_importance_model(
        config.importance_model,
        random_state=0,
        n_estimators=config.n_estimators,
    )

    X = _as_feature_frame(features)
    target, strata = _prepare_outcome(outcome, features, X, config, model_info)

    names = [str(c) for c in X.columns]
    values = X.to_numpy(dtype=float)
    rng = np.random.default_rng(config.random_seed)

    decisions: Dict[str, Decision] = {name: Decision.TENTATIVE for name in names}
    hits: Dict[str, int] = {name: 0 for name in names}
    decided_at: Dict[str, Optional[int]] = {name: None for name in names}

    # Zero-variance features carry no signal
    constant = constant_columns(X)
    for column in constant:
        decisions[str(column)] = Decision.REJECTED
        decided_at[str(column)] = 0
    if constant:
        logger.info(f"Rejected {len(constant)} constant feature(s) before the first iteration")

    logger.info(
        f"Boruta on {len(names)} features x {len(X)} samples "
        f"(model={config.importance_model}, max_iterations={config.max_iterations}, "
        f"alpha={config.significance_level})"
    )

    records: List[Dict[str, float]] = []
    iteration = 0

    def build_result() -> BorutaResult:
        return BorutaResult(
            feature_names=list(names),
            decisions=dict(decisions),
            hits=dict(hits),
            decided_at=dict(decided_at),
            iterations=iteration,
            importance_history=_history_frame(records, names),
            config=config,
        )

    while iteration < config.max_iterations:
        tentative = [name for name in names if decisions[name] is Decision.TENTATIVE]
        if not tentative:
            break

        active = [j for j, name in enumerate(names) if decisions[name] is not Decision.REJECTED]
        try:
            real_imp, shadow_imp = _run_iteration(values[:, active], target, strata, config, rng)
        except (ValueError, ArithmeticError, RuntimeError) as e:
            raise NonConvergentError(
                f"Importance model '{config.importance_model}' failed at iteration "
                f"{iteration + 1}: {e}",
                partial_result=build_result(),
            ) from e
        iteration += 1

        shadow_max = float(np.max(shadow_imp))
        record = {name: np.nan for name in names}
        for k, j in enumerate(active):
            name = names[j]
            record[name] = float(real_imp[k])
            # Ties with the best shadow are not hits
            if real_imp[k] > shadow_max:
                hits[name] += 1
        record["shadow_max"] = shadow_max
        record["shadow_mean"] = float(np.mean(shadow_imp))
        record["shadow_min"] = float(np.min(shadow_imp))
        records.append(record)

        test = binomial_hit_test(
            [hits[name] for name in tentative],
            n_iterations=iteration,
            alpha=config.significance_level,
            n_tests=len(names),
            method=config.multiple_comparison,
        )
        for name, accept, reject in zip(tentative, test.accept, test.reject):
            if accept:
                decisions[name] = Decision.CONFIRMED
                decided_at[name] = iteration
                logger.debug(f"Iteration {iteration}: confirmed '{name}'")
            elif reject:
                decisions[name] = Decision.REJECTED
                decided_at[name] = iteration
                logger.debug(f"Iteration {iteration}: rejected '{name}'")

        logger.debug(
            f"Iteration {iteration}: shadow_max={shadow_max:.4f}, "
            f"{sum(d is Decision.TENTATIVE for d in decisions.values())} tentative left"
        )

    result = build_result()
    logger.info(
        f"Boruta finished after {result.iterations} iterations: "
        f"{len(result.confirmed)} confirmed, {len(result.rejected)} rejected, "
        f"{len(result.tentative)} tentative"
    )
    if result.all_tentative:
        logger.warning(
            "No feature could be confirmed or rejected; all remain tentative. "
            "Consider more iterations or BorutaResult.tentative_rough_fix()."
        )
    return result


class BorutaSelector(BaseEstimator, TransformerMixin):
    """Scikit-learn transformer keeping the features Boruta confirms.

    Args:
        config: BorutaConfig for the run
        with_tentative: Also keep tentative features in ``transform``
    """

    def __init__(self, config: Optional[BorutaConfig] = None, with_tentative: bool = False):
        self.config = config
        self.with_tentative = with_tentative

    def fit(self, X, y):
        """Run Boruta on X against y.

        Args:
            X: Feature table
            y: SurvivalOutcome or label array

        Returns:
            self
        """
        self.result_ = select(X, y, self.config)
        self.feature_names_in_ = np.asarray(self.result_.feature_names, dtype=object)
        self.n_features_in_ = len(self.feature_names_in_)
        selected = set(self.result_.selected_features(self.with_tentative))
        self.support_ = np.array([name in selected for name in self.feature_names_in_], dtype=bool)
        return self

    def transform(self, X):
        """Keep only the selected columns.

        Args:
            X: Feature table with the columns seen in ``fit``

        Returns:
            Reduced feature table
        """
        check_is_fitted(self, "support_")
        if isinstance(X, pd.DataFrame):
            return X.loc[:, list(self.feature_names_in_[self.support_])]
        return np.asarray(X)[:, self.support_]

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "support_")
        return self.feature_names_in_[self.support_]
