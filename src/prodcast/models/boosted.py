"""Hybrid models: a base model plus gradient boosting on its residuals.

The base model captures trend and autocorrelation; a scikit-learn
gradient boosting ensemble then learns what is left from the calendar
features. Forecasts and bands are the base values shifted by the
boosted residual prediction.
"""

import numpy as np
import pandas as pd
from sklearn.ensemble import GradientBoostingRegressor

from .base import FittedModel, ForecastModel
from .features import calendar_features


class BoostedFit(FittedModel):
    """Fitted base model with its residual booster."""

    def __init__(self, base_fit: FittedModel, booster: GradientBoostingRegressor, **kwargs):
        super().__init__(**kwargs)
        self.base_fit = base_fit
        self.booster = booster

    def _predict(self, dates: pd.DatetimeIndex) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        base = self.base_fit.predict(dates)
        boost = self.booster.predict(calendar_features(dates))
        return (
            base.point_forecast.to_numpy() + boost,
            base.lower_bound.to_numpy() + boost,
            base.upper_bound.to_numpy() + boost,
        )


class BoostedModel(ForecastModel):
    """Base model boosted by a gradient boosting ensemble on residuals."""

    kind = "boosted"

    def __init__(
        self,
        base: ForecastModel,
        name: str | None = None,
        level: float = 0.95,
        freq: str = "MS",
        n_estimators: int = 200,
        learning_rate: float = 0.05,
        max_depth: int = 3,
        random_state: int = 123,
    ):
        super().__init__(name=name or f"{base.name}_boost", level=level, freq=freq)
        self.base = base
        self.min_periods = base.min_periods
        self.n_estimators = n_estimators
        self.learning_rate = learning_rate
        self.max_depth = max_depth
        self.random_state = random_state

    def _fit(self, series: pd.Series, freq: str) -> FittedModel:
        base_fit = self.base.fit(series)
        features = calendar_features(series.index)

        booster = GradientBoostingRegressor(
            n_estimators=self.n_estimators,
            learning_rate=self.learning_rate,
            max_depth=self.max_depth,
            random_state=self.random_state,
        )
        booster.fit(features, base_fit.residuals.to_numpy())
        fitted = base_fit.fitted_values.to_numpy() + booster.predict(features)

        return BoostedFit(
            base_fit=base_fit,
            booster=booster,
            model_name=self.name,
            model_kind=f"{self.base.kind}_boost",
            training=series,
            fitted_values=fitted,
            fitted_parameters={
                "base": base_fit.fitted_parameters,
                "n_estimators": self.n_estimators,
                "learning_rate": self.learning_rate,
                "max_depth": self.max_depth,
            },
            level=self.level,
            freq=freq,
        )
