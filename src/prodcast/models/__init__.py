"""Forecasting models behind a single fit/forecast interface."""

from .arima import ArimaFit, ArimaModel
from .base import FittedModel, ForecastModel, ForecastResult
from .boosted import BoostedFit, BoostedModel
from .features import FEATURE_COLUMNS, calendar_features, future_dates, infer_freq
from .linear import ElasticNetFit, ElasticNetModel
from .prophet_model import ProphetFit, ProphetModel
from .registry import build_model, build_models

__all__ = [
    "ArimaFit",
    "ArimaModel",
    "BoostedFit",
    "BoostedModel",
    "ElasticNetFit",
    "ElasticNetModel",
    "FEATURE_COLUMNS",
    "FittedModel",
    "ForecastModel",
    "ForecastResult",
    "ProphetFit",
    "ProphetModel",
    "build_model",
    "build_models",
    "calendar_features",
    "future_dates",
    "infer_freq",
]
