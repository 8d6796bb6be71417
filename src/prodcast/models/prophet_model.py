"""Additive trend/seasonality model (prophet)."""

import logging

import numpy as np
import pandas as pd

from .base import FittedModel, ForecastModel

logger = logging.getLogger(__name__)


class ProphetFit(FittedModel):
    """Fitted Prophet model."""

    def __init__(self, prophet, **kwargs):
        super().__init__(**kwargs)
        self.prophet = prophet

    def _predict(self, dates: pd.DatetimeIndex) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        prediction = self.prophet.predict(pd.DataFrame({"ds": dates}))
        return (
            prediction["yhat"].to_numpy(),
            prediction["yhat_lower"].to_numpy(),
            prediction["yhat_upper"].to_numpy(),
        )


class ProphetModel(ForecastModel):
    """Prophet with a yearly seasonal term and no weekly/daily terms."""

    kind = "prophet"
    min_periods = 4

    def __init__(
        self,
        name: str | None = None,
        level: float = 0.95,
        freq: str = "MS",
        yearly_seasonality: bool = True,
        changepoint_prior_scale: float = 0.05,
    ):
        super().__init__(name=name, level=level, freq=freq)
        self.yearly_seasonality = yearly_seasonality
        self.changepoint_prior_scale = changepoint_prior_scale

    def _fit(self, series: pd.Series, freq: str) -> FittedModel:
        # prophet pulls in the Stan backend; import on first use
        from prophet import Prophet

        logging.getLogger("cmdstanpy").setLevel(logging.WARNING)

        prophet = Prophet(
            yearly_seasonality=self.yearly_seasonality,
            weekly_seasonality=False,
            daily_seasonality=False,
            changepoint_prior_scale=self.changepoint_prior_scale,
            interval_width=self.level,
        )
        history = pd.DataFrame({"ds": series.index, "y": series.to_numpy()})
        prophet.fit(history)
        in_sample = prophet.predict(history[["ds"]])

        return ProphetFit(
            prophet=prophet,
            model_name=self.name,
            model_kind=self.kind,
            training=series,
            fitted_values=in_sample["yhat"].to_numpy(),
            fitted_parameters={
                "yearly_seasonality": self.yearly_seasonality,
                "changepoint_prior_scale": self.changepoint_prior_scale,
                "n_changepoints": int(len(prophet.changepoints)),
            },
            level=self.level,
            freq=freq,
        )
