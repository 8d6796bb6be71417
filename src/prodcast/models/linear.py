"""Regularized linear regression on calendar features (scikit-learn)."""

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.linear_model import ElasticNet
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from .base import FittedModel, ForecastModel
from .features import FEATURE_COLUMNS, calendar_features


class ElasticNetFit(FittedModel):
    """Fitted elastic net with a normal-approximation band.

    The band is the point forecast +/- z * s, where s is the standard
    deviation of the training residuals and z the two-sided normal quantile
    of the confidence level.
    """

    def __init__(self, pipeline: Pipeline, residual_std: float, **kwargs):
        super().__init__(**kwargs)
        self.pipeline = pipeline
        self.residual_std = residual_std

    def _predict(self, dates: pd.DatetimeIndex) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        mean = self.pipeline.predict(calendar_features(dates))
        half_width = stats.norm.ppf(0.5 + self.level / 2) * self.residual_std
        return mean, mean - half_width, mean + half_width


class ElasticNetModel(ForecastModel):
    """Elastic net regression on date number and month-of-year dummies.

    Features are standardized before fitting so the penalty treats the
    trend and seasonal terms alike.
    """

    kind = "linear"

    def __init__(
        self,
        name: str | None = None,
        level: float = 0.95,
        freq: str = "MS",
        alpha: float = 0.01,
        l1_ratio: float = 0.5,
    ):
        super().__init__(name=name or "elastic_net", level=level, freq=freq)
        self.alpha = alpha
        self.l1_ratio = l1_ratio

    def _fit(self, series: pd.Series, freq: str) -> FittedModel:
        features = calendar_features(series.index)
        pipeline = Pipeline([
            ("scale", StandardScaler()),
            ("regress", ElasticNet(alpha=self.alpha, l1_ratio=self.l1_ratio, max_iter=10000)),
        ])
        pipeline.fit(features, series.to_numpy())
        fitted = pipeline.predict(features)
        residual_std = float(np.std(series.to_numpy() - fitted, ddof=1))

        regressor = pipeline.named_steps["regress"]
        return ElasticNetFit(
            pipeline=pipeline,
            residual_std=residual_std,
            model_name=self.name,
            model_kind=self.kind,
            training=series,
            fitted_values=fitted,
            fitted_parameters={
                "alpha": self.alpha,
                "l1_ratio": self.l1_ratio,
                "intercept": float(regressor.intercept_),
                "coefficients": dict(zip(FEATURE_COLUMNS, map(float, regressor.coef_))),
                "residual_std": residual_std,
            },
            level=self.level,
            freq=freq,
        )
