"""ARIMA model with automatic order selection (statsmodels)."""

from itertools import product
import logging
import warnings

import numpy as np
import pandas as pd
from statsmodels.tools.sm_exceptions import ConvergenceWarning
from statsmodels.tsa.arima.model import ARIMA

from .base import FittedModel, ForecastModel

logger = logging.getLogger(__name__)

# Errors that rule out one candidate order; anything else aborts the search
CANDIDATE_ERRORS = (ValueError, ArithmeticError, RuntimeError, np.linalg.LinAlgError)


class ArimaFit(FittedModel):
    """Fitted ARIMA model."""

    def __init__(self, results, **kwargs):
        super().__init__(**kwargs)
        self.results = results

    def _predict(self, dates: pd.DatetimeIndex) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        prediction = self.results.get_forecast(steps=len(dates))
        interval = np.asarray(prediction.conf_int(alpha=1 - self.level))
        return np.asarray(prediction.predicted_mean), interval[:, 0], interval[:, 1]


class ArimaModel(ForecastModel):
    """ARIMA(p, d, q) with the order chosen by AIC over a small grid.

    Every combination with p <= max_p, d <= max_d and q <= max_q is tried;
    combinations that fail to fit are skipped. With ``seasonal_period`` > 1
    a seasonal AR(1) term is added.
    """

    kind = "arima"
    min_periods = 6

    def __init__(
        self,
        name: str | None = None,
        level: float = 0.95,
        freq: str = "MS",
        max_p: int = 2,
        max_d: int = 1,
        max_q: int = 2,
        seasonal_period: int = 0,
    ):
        super().__init__(name=name, level=level, freq=freq)
        self.max_p = max_p
        self.max_d = max_d
        self.max_q = max_q
        self.seasonal_period = seasonal_period

    def candidate_orders(self) -> list[tuple[int, int, int]]:
        return list(product(
            range(self.max_p + 1), range(self.max_d + 1), range(self.max_q + 1),
        ))

    def _seasonal_order(self) -> tuple[int, int, int, int]:
        if self.seasonal_period > 1:
            return (1, 0, 0, self.seasonal_period)
        return (0, 0, 0, 0)

    def _fit(self, series: pd.Series, freq: str) -> FittedModel:
        values = series.to_numpy(dtype=float)
        seasonal_order = self._seasonal_order()

        best_results, best_order = None, None
        for order in self.candidate_orders():
            try:
                with warnings.catch_warnings():
                    warnings.simplefilter("ignore", ConvergenceWarning)
                    warnings.simplefilter("ignore", UserWarning)
                    results = ARIMA(values, order=order, seasonal_order=seasonal_order).fit()
            except CANDIDATE_ERRORS as e:
                logger.debug(f"ARIMA{order} failed: {e}")
                continue
            if not np.isfinite(results.aic):
                continue
            if best_results is None or results.aic < best_results.aic:
                best_results, best_order = results, order

        if best_results is None:
            raise ValueError("no candidate ARIMA order could be fitted")

        return ArimaFit(
            results=best_results,
            model_name=self.name,
            model_kind=self.kind,
            training=series,
            fitted_values=best_results.fittedvalues,
            fitted_parameters={
                "order": list(best_order),
                "seasonal_order": list(seasonal_order),
                "aic": float(best_results.aic),
                "params": {
                    str(k): float(v)
                    for k, v in zip(best_results.model.param_names, best_results.params)
                },
            },
            level=self.level,
            freq=freq,
        )
