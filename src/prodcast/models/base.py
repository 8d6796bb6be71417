"""Common interface of the forecasting models.

Every model, whatever library does the work, is fitted through
``ForecastModel.fit`` and returns a ``FittedModel``. A fitted model knows
its kind, its fitted parameters and in-sample fitted values, and produces
a ``ForecastResult`` for any future dates. Callers never touch the
library objects directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
from typing import Any

import numpy as np
import pandas as pd

from ..exceptions import InvalidInputError, ModelFitError
from .features import future_dates, infer_freq

logger = logging.getLogger(__name__)


@dataclass
class ForecastResult:
    """Point forecast and confidence band of one model.

    All three series share the forecast dates as their index.

    Attributes:
        model_name: Name of the model that produced the forecast
        horizon: Number of forecast periods
        point_forecast: Expected values
        lower_bound: Lower edge of the confidence band
        upper_bound: Upper edge of the confidence band
        level: Confidence level of the band
    """
    model_name: str
    horizon: int
    point_forecast: pd.Series
    lower_bound: pd.Series
    upper_bound: pd.Series
    level: float = 0.95

    @property
    def dates(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex(self.point_forecast.index)

    def to_frame(self) -> pd.DataFrame:
        """Tabulate as date, model, forecast, lower, upper."""
        return pd.DataFrame({
            "date": self.dates,
            "model": self.model_name,
            "forecast": self.point_forecast.to_numpy(),
            "lower": self.lower_bound.to_numpy(),
            "upper": self.upper_bound.to_numpy(),
        })


class FittedModel(ABC):
    """A model fitted to a training series.

    Attributes:
        model_name: Registry name of the model
        model_kind: Family of the model (arima, prophet, boosted, linear)
        training: Series the model was fitted on
        fitted_values: In-sample predictions aligned to ``training``
        fitted_parameters: Parameters chosen during fitting
        level: Confidence level of forecast bands
        freq: Frequency used to lay out forecast dates
    """

    def __init__(
        self,
        model_name: str,
        model_kind: str,
        training: pd.Series,
        fitted_values: np.ndarray | pd.Series,
        fitted_parameters: dict[str, Any],
        level: float,
        freq: str,
    ):
        self.model_name = model_name
        self.model_kind = model_kind
        self.training = training
        self.fitted_values = pd.Series(
            np.asarray(fitted_values, dtype=float), index=training.index, name="fitted",
        )
        self.fitted_parameters = fitted_parameters
        self.level = level
        self.freq = freq

    @property
    def residuals(self) -> pd.Series:
        """Training residuals (actual - fitted)."""
        return (self.training.astype(float) - self.fitted_values).rename("residual")

    @abstractmethod
    def _predict(self, dates: pd.DatetimeIndex) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return (mean, lower, upper) for consecutive periods after training."""

    def predict(self, dates: pd.DatetimeIndex) -> ForecastResult:
        """Forecast the periods ``dates`` that directly follow the training data.

        Raises:
            ModelFitError: If the underlying library fails
        """
        dates = pd.DatetimeIndex(dates, name="date")
        if len(dates) == 0:
            raise InvalidInputError("Forecast needs at least one date")
        try:
            mean, lower, upper = self._predict(dates)
        except ModelFitError:
            raise
        except Exception as e:
            raise ModelFitError(self.model_name, f"forecast failed: {e}") from e

        def as_series(values, name):
            return pd.Series(np.asarray(values, dtype=float), index=dates, name=name)

        return ForecastResult(
            model_name=self.model_name,
            horizon=len(dates),
            point_forecast=as_series(mean, "forecast"),
            lower_bound=as_series(lower, "lower"),
            upper_bound=as_series(upper, "upper"),
            level=self.level,
        )

    def forecast(self, horizon: int) -> ForecastResult:
        """Forecast ``horizon`` periods after the last training date."""
        if horizon < 1:
            raise InvalidInputError(f"Forecast horizon must be at least 1, got {horizon}")
        return self.predict(future_dates(self.training.index[-1], horizon, self.freq))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model_name!r}, {self.fitted_parameters})"


class ForecastModel(ABC):
    """An unfitted forecasting model.

    Subclasses implement ``_fit``; ``fit`` validates the input and turns
    library errors into ModelFitError.

    Attributes:
        name: Registry name, used as the model label in reports
        kind: Model family
        level: Confidence level of forecast bands
        freq: Fallback frequency when the series frequency cannot be inferred
    """

    kind: str = "model"
    min_periods: int = 3

    def __init__(self, name: str | None = None, level: float = 0.95, freq: str = "MS"):
        self.name = name or self.kind
        self.level = level
        self.freq = freq

    @abstractmethod
    def _fit(self, series: pd.Series, freq: str) -> FittedModel:
        """Fit to ``series`` and return the fitted model."""

    def fit(self, series: pd.Series) -> FittedModel:
        """Fit the model to a production series.

        Raises:
            ModelFitError: If the series is too short or the library fails
        """
        if len(series) < self.min_periods:
            raise ModelFitError(
                self.name, f"needs at least {self.min_periods} periods, got {len(series)}"
            )
        if series.isna().any():
            raise ModelFitError(self.name, "series contains undefined values")

        freq = infer_freq(series.index, self.freq)
        try:
            fitted = self._fit(series.astype(float), freq)
        except ModelFitError:
            raise
        except Exception as e:
            raise ModelFitError(self.name, f"fit failed: {e}") from e

        logger.info(f"Fitted {self.name} on {len(series)} periods: {fitted.fitted_parameters}")
        return fitted

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
