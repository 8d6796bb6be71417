"""Refit models on a full series and forecast past its last period."""

from dataclasses import dataclass, field
import logging

import pandas as pd

from ..exceptions import InvalidInputError, ModelFitError
from ..models.base import FittedModel, ForecastModel, ForecastResult

logger = logging.getLogger(__name__)


@dataclass
class ForecastRun:
    """Forecasts of every model that could be refitted.

    Attributes:
        forecasts: model name -> ForecastResult
        fitted: model name -> model refitted on the full series
        failures: model name -> error message
    """
    forecasts: dict[str, ForecastResult] = field(default_factory=dict)
    fitted: dict[str, FittedModel] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    def to_frame(self) -> pd.DataFrame:
        """All forecasts stacked as date, model, forecast, lower, upper."""
        if not self.forecasts:
            return pd.DataFrame(columns=["date", "model", "forecast", "lower", "upper"])
        return pd.concat(
            [f.to_frame() for f in self.forecasts.values()], ignore_index=True
        )


def refit_and_forecast(
    models: list[ForecastModel],
    series: pd.Series,
    horizon: int,
) -> ForecastRun:
    """Refit each model on ``series`` and forecast ``horizon`` periods.

    Forecast dates are the ``horizon`` consecutive periods right after the
    last observed date. Models that fail are logged and skipped.

    Raises:
        InvalidInputError: If ``horizon`` is less than 1 or the series is empty
    """
    if horizon < 1:
        raise InvalidInputError(f"Forecast horizon must be at least 1, got {horizon}")
    if len(series) == 0:
        raise InvalidInputError("Cannot forecast an empty series")

    run = ForecastRun()
    for model in models:
        try:
            fitted = model.fit(series)
            run.forecasts[model.name] = fitted.forecast(horizon)
            run.fitted[model.name] = fitted
        except ModelFitError as e:
            logger.warning(f"Model {model.name} skipped during forecasting: {e}")
            run.failures[model.name] = str(e)

    logger.info(
        f"Forecast {horizon} periods after {series.index[-1].date()} "
        f"with {len(run.forecasts)} model(s)"
    )
    return run
