"""Core production analysis stages."""

from .profiling import WellProfile, profile_well, profile_wells, profiles_to_frame
from .eligibility import eligible_wells, filter_records
from .aggregation import (
    aggregate_production,
    select_date_range,
    to_series,
    validate_series,
    well_series,
)
from .outliers import ClipResult, OutlierBounds, clip_outliers, detect_outliers, iqr_bounds
from .stationarity import AdfResult, StationarityReport, adf_test, check_stationarity
from .splitting import SplitPlan, rolling_origin_plans, split_series
from .evaluation import (
    AccuracyMetrics,
    AccuracyReport,
    EvaluationResult,
    ModelCalibration,
    accuracy_metrics,
    evaluate_models,
)
from .forecasting import ForecastRun, refit_and_forecast

__all__ = [
    "WellProfile",
    "profile_well",
    "profile_wells",
    "profiles_to_frame",
    "eligible_wells",
    "filter_records",
    "aggregate_production",
    "select_date_range",
    "to_series",
    "validate_series",
    "well_series",
    "ClipResult",
    "OutlierBounds",
    "clip_outliers",
    "detect_outliers",
    "iqr_bounds",
    "AdfResult",
    "StationarityReport",
    "adf_test",
    "check_stationarity",
    "SplitPlan",
    "rolling_origin_plans",
    "split_series",
    "AccuracyMetrics",
    "AccuracyReport",
    "EvaluationResult",
    "ModelCalibration",
    "accuracy_metrics",
    "evaluate_models",
    "ForecastRun",
    "refit_and_forecast",
]
