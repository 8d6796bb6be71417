"""End-to-end production forecasting pipeline.

Stages run in order and each returns new data:

    load -> validate -> profile -> eligibility -> aggregate -> date cut
         -> clip outliers -> stationarity -> split -> evaluate -> forecast

The aggregate series is held out with a fixed trailing window; a single
well uses a fractional window. Nothing is read from or written to disk
except the input file named by the caller.
"""

from dataclasses import dataclass, field
import logging
from pathlib import Path

import pandas as pd

from .config import ProdcastConfig
from .core.aggregation import aggregate_production, select_date_range, to_series, well_series
from .core.eligibility import eligible_wells, filter_records
from .core.evaluation import EvaluationResult, evaluate_models
from .core.forecasting import ForecastRun, refit_and_forecast
from .core.outliers import ClipResult, clip_outliers
from .core.profiling import WellProfile, profile_wells
from .core.splitting import SplitPlan, rolling_origin_plans, split_series
from .core.stationarity import StationarityReport, check_stationarity
from .data.base import load_records
from .exceptions import InvalidInputError
from .models.registry import build_models
from .validation import InputValidator, ValidationResult, summarize_validation

logger = logging.getLogger(__name__)


@dataclass
class PreparedDataset:
    """Records and profiles ready for series construction.

    Attributes:
        records: All loaded records
        profiles: well_id -> WellProfile for every well
        eligible_ids: Wells with enough months of production
        filtered: Records of eligible wells with positive oil and gas
        aggregate: Per-period oil/gas totals over ``filtered``
    """
    records: pd.DataFrame
    profiles: dict[str, WellProfile]
    eligible_ids: list[str]
    filtered: pd.DataFrame
    aggregate: pd.DataFrame


@dataclass
class SeriesAnalysis:
    """Everything computed for one production series.

    Attributes:
        label: Display name (e.g. 'aggregate:oil' or 'W1:oil')
        series: Series before outlier clipping
        clip: Outlier clipping result (None when clipping is disabled)
        stationarity: ADF report (None when the series is too short to test)
        plan: Train/test split of the modeled series
        cv_plans: Rolling-origin plan for the CV chart
        evaluation: Training and testing accuracy per model
        forecast: Forecasts after refitting on the full modeled series
    """
    label: str
    series: pd.Series
    clip: ClipResult | None
    stationarity: StationarityReport | None
    plan: SplitPlan
    cv_plans: list[SplitPlan]
    evaluation: EvaluationResult
    forecast: ForecastRun

    @property
    def modeled_series(self) -> pd.Series:
        """Series the models were fitted on."""
        return self.clip.series if self.clip is not None else self.series

    @property
    def failures(self) -> dict[str, str]:
        """Model failures from evaluation and forecasting combined."""
        return {**self.evaluation.failures, **self.forecast.failures}


@dataclass
class PipelineResult:
    """Result of a full pipeline run.

    Attributes:
        source: Input file
        dataset: Prepared records, profiles and aggregate
        validation: well_id -> ValidationResult
        aggregate: Analysis of the aggregate series
        wells: well_id -> analysis of that well's series
        well_failures: well_id -> reason the well could not be analyzed
    """
    source: Path
    dataset: PreparedDataset
    validation: dict[str, ValidationResult]
    aggregate: SeriesAnalysis
    wells: dict[str, SeriesAnalysis] = field(default_factory=dict)
    well_failures: dict[str, str] = field(default_factory=dict)

    @property
    def validation_summary(self) -> dict:
        return summarize_validation(self.validation)


def prepare_dataset(records: pd.DataFrame, config: ProdcastConfig) -> PreparedDataset:
    """Profile wells, keep the eligible ones and aggregate their records."""
    profiles = profile_wells(records)
    eligible_ids = eligible_wells(profiles, config.eligibility.min_months)
    filtered = filter_records(
        records, eligible_ids, exclude_zero_volumes=config.eligibility.exclude_zero_volumes,
    )
    return PreparedDataset(
        records=records,
        profiles=profiles,
        eligible_ids=eligible_ids,
        filtered=filtered,
        aggregate=aggregate_production(filtered),
    )


def analyze_series(
    series: pd.Series,
    config: ProdcastConfig,
    test_periods: int | None = None,
    test_fraction: float | None = None,
    label: str | None = None,
    show_progress: bool = False,
) -> SeriesAnalysis:
    """Clip, diagnose, split, evaluate and forecast one series.

    Args:
        series: Production series
        config: Pipeline configuration
        test_periods: Trailing test window in periods
        test_fraction: Trailing test window as a fraction of the series
        label: Display name (defaults to the series name)
        show_progress: Show a progress bar while evaluating models

    Returns:
        SeriesAnalysis

    Raises:
        InvalidInputError: If the series is empty or cannot be split
    """
    label = label or str(series.name)
    if len(series) == 0:
        raise InvalidInputError(f"Series {label} is empty")

    clip = clip_outliers(series, config.outliers.iqr_multiplier) if config.outliers.enabled else None
    modeled = clip.series if clip is not None else series

    try:
        stationarity = check_stationarity(
            modeled, config.stationarity.alpha, config.stationarity.max_diff,
        )
    except InvalidInputError as e:
        logger.warning(f"Stationarity check skipped for {label}: {e}")
        stationarity = None

    plan = split_series(modeled, test_periods=test_periods, test_fraction=test_fraction)
    cv_plans = rolling_origin_plans(
        modeled, plan.n_test, slices=config.split.cv_slices, skip=config.split.cv_skip,
    )

    fc = config.forecast
    models = build_models(fc.models, config.models, level=fc.interval_level, freq=fc.freq)
    evaluation = evaluate_models(models, plan, show_progress=show_progress)
    forecast = refit_and_forecast(models, modeled, fc.horizon)

    return SeriesAnalysis(
        label=label,
        series=series,
        clip=clip,
        stationarity=stationarity,
        plan=plan,
        cv_plans=cv_plans,
        evaluation=evaluation,
        forecast=forecast,
    )


def run_aggregate(
    dataset: PreparedDataset,
    config: ProdcastConfig,
    show_progress: bool = False,
) -> SeriesAnalysis:
    """Analyze the aggregate series of the eligible wells.

    The date range cut is applied before clipping, and the last
    ``split.test_periods`` periods are held out.
    """
    product = config.forecast.product
    aggregate = select_date_range(
        dataset.aggregate, config.date_range.start, config.date_range.end,
    )
    if aggregate.empty:
        raise InvalidInputError(
            f"No aggregate periods between {config.date_range.start} and {config.date_range.end}"
        )
    series = to_series(aggregate, product)
    logger.info(f"Aggregate {product} series: {len(series)} periods")
    return analyze_series(
        series,
        config,
        test_periods=config.split.test_periods,
        label=f"aggregate:{product}",
        show_progress=show_progress,
    )


def forecast_well(
    well_id: str,
    dataset: PreparedDataset,
    config: ProdcastConfig,
    show_progress: bool = False,
) -> SeriesAnalysis:
    """Analyze and forecast a single eligible well.

    Uses the well's filtered records and a fractional test window of
    ``split.test_fraction``.

    Raises:
        InvalidInputError: If the well is unknown or not eligible
    """
    if well_id not in dataset.profiles:
        raise InvalidInputError(f"Unknown well: {well_id}")
    if well_id not in dataset.eligible_ids:
        raise InvalidInputError(
            f"Well {well_id} has {dataset.profiles[well_id].months_of_production} months "
            f"of production; at least {config.eligibility.min_months} required"
        )

    product = config.forecast.product
    series = well_series(dataset.filtered, well_id, product)
    return analyze_series(
        series,
        config,
        test_fraction=config.split.test_fraction,
        label=f"{well_id}:{product}",
        show_progress=show_progress,
    )


def run_pipeline(
    filepath: Path | str,
    config: ProdcastConfig | None = None,
    well_ids: list[str] | tuple[str, ...] = (),
    show_progress: bool = False,
) -> PipelineResult:
    """Run the whole pipeline on one input file.

    Args:
        filepath: Production records file (CSV or Excel)
        config: Pipeline configuration (defaults if None)
        well_ids: Wells to analyze individually in addition to the aggregate
        show_progress: Show progress bars while evaluating models

    Returns:
        PipelineResult

    Raises:
        DataFormatError: If the file cannot be loaded
        ValueError: If strict validation finds errors
        InvalidInputError: If no well is eligible
    """
    config = config or ProdcastConfig()
    filepath = Path(filepath)
    records = load_records(filepath)

    validator = InputValidator(
        max_oil_volume=config.validation.max_oil_volume,
        max_gas_volume=config.validation.max_gas_volume,
    )
    validation = validator.validate(records)
    summary = summarize_validation(validation)
    if summary["total_errors"] or summary["total_warnings"]:
        logger.warning(
            f"Validation: {summary['total_errors']} errors, "
            f"{summary['total_warnings']} warnings"
        )
    if config.validation.strict_mode and summary["wells_with_errors"]:
        raise ValueError(
            f"Validation failed for {summary['wells_with_errors']} well(s) in strict mode"
        )

    dataset = prepare_dataset(records, config)
    if not dataset.eligible_ids:
        raise InvalidInputError(
            f"No well has at least {config.eligibility.min_months} months of production"
        )

    result = PipelineResult(
        source=filepath,
        dataset=dataset,
        validation=validation,
        aggregate=run_aggregate(dataset, config, show_progress=show_progress),
    )

    for well_id in well_ids:
        try:
            result.wells[well_id] = forecast_well(
                well_id, dataset, config, show_progress=show_progress,
            )
        except InvalidInputError as e:
            logger.warning(f"Well {well_id} skipped: {e}")
            result.well_failures[well_id] = str(e)

    return result
