"""Accuracy evaluation of fitted models on training and testing windows.

Each model is fitted on the training partition. Training accuracy comes
from its in-sample fitted values, testing accuracy from a forecast of the
testing dates. Both reports are handed back side by side; choosing a model
is left to the reader.
"""

from dataclasses import dataclass, field
import logging

import numpy as np
import pandas as pd
from tqdm import tqdm

from ..exceptions import InvalidInputError, ModelFitError
from ..models.base import FittedModel, ForecastModel, ForecastResult
from .splitting import SplitPlan

logger = logging.getLogger(__name__)

METRIC_NAMES = ("rmse", "mae", "mape", "smape", "mase", "rsq")
# Metrics where larger is better
_HIGHER_IS_BETTER = {"rsq"}


@dataclass(frozen=True)
class AccuracyMetrics:
    """Accuracy of predictions against actual values.

    Attributes:
        rmse: Root mean squared error
        mae: Mean absolute error
        mape: Mean absolute percentage error (%) over non-zero actuals
        smape: Symmetric MAPE (%)
        mase: MAE scaled by the in-sample naive one-step MAE of the training data
        rsq: Squared correlation between actual and predicted
        n: Number of compared periods
    """
    rmse: float
    mae: float
    mape: float
    smape: float
    mase: float
    rsq: float
    n: int

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in METRIC_NAMES + ("n",)}


def accuracy_metrics(
    actual: pd.Series | np.ndarray,
    predicted: pd.Series | np.ndarray,
    training: pd.Series | np.ndarray | None = None,
) -> AccuracyMetrics:
    """Compute accuracy metrics for one set of predictions.

    Metrics that cannot be computed (no non-zero actuals for MAPE, no
    training data or a flat training series for MASE, constant inputs for
    R-squared) are NaN.

    Args:
        actual: Observed values
        predicted: Predicted values, same length as ``actual``
        training: Training values used to scale MASE

    Returns:
        AccuracyMetrics

    Raises:
        InvalidInputError: If the inputs are empty or differ in length
    """
    a = np.asarray(actual, dtype=float)
    p = np.asarray(predicted, dtype=float)
    if len(a) == 0:
        raise InvalidInputError("Cannot compute accuracy on empty data")
    if len(a) != len(p):
        raise InvalidInputError(
            f"Actual and predicted lengths differ ({len(a)} vs {len(p)})"
        )

    errors = a - p
    abs_errors = np.abs(errors)
    rmse = float(np.sqrt(np.mean(errors ** 2)))
    mae = float(np.mean(abs_errors))

    nonzero = a != 0
    mape = float(np.mean(abs_errors[nonzero] / np.abs(a[nonzero])) * 100) if nonzero.any() else np.nan

    denom = np.abs(a) + np.abs(p)
    with np.errstate(divide="ignore", invalid="ignore"):
        smape_terms = np.where(denom > 0, 2 * abs_errors / denom, 0.0)
    smape = float(np.mean(smape_terms) * 100)

    mase = np.nan
    if training is not None:
        train = np.asarray(training, dtype=float)
        if len(train) >= 2:
            scale = np.mean(np.abs(np.diff(train)))
            if scale > 0:
                mase = float(mae / scale)

    rsq = np.nan
    if len(a) >= 2 and np.std(a) > 0 and np.std(p) > 0:
        rsq = float(np.corrcoef(a, p)[0, 1] ** 2)

    return AccuracyMetrics(
        rmse=rmse, mae=mae, mape=mape, smape=smape, mase=mase, rsq=rsq, n=len(a),
    )


@dataclass
class AccuracyReport:
    """Accuracy of several models on one partition.

    Attributes:
        partition: 'training' or 'testing'
        metrics: model name -> AccuracyMetrics, in evaluation order
    """
    partition: str
    metrics: dict[str, AccuracyMetrics] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.metrics)

    def __contains__(self, model_name: str) -> bool:
        return model_name in self.metrics

    def __getitem__(self, model_name: str) -> AccuracyMetrics:
        return self.metrics[model_name]

    def to_frame(self) -> pd.DataFrame:
        """One row per model with the partition and every metric."""
        rows = [
            {"model": name, "partition": self.partition, **m.to_dict()}
            for name, m in self.metrics.items()
        ]
        return pd.DataFrame(rows, columns=["model", "partition", *METRIC_NAMES, "n"])

    def ranked(self, metric: str = "rmse") -> list[str]:
        """Model names ordered best first by ``metric``; NaN values go last."""
        if metric not in METRIC_NAMES:
            raise InvalidInputError(
                f"Unknown metric {metric!r}; valid: {', '.join(METRIC_NAMES)}"
            )
        sign = -1.0 if metric in _HIGHER_IS_BETTER else 1.0

        def key(name):
            value = getattr(self.metrics[name], metric)
            return (np.isnan(value), sign * value if not np.isnan(value) else 0.0)

        return sorted(self.metrics, key=key)


@dataclass
class ModelCalibration:
    """One model fitted on the training window and its test forecast."""
    model_name: str
    fitted: FittedModel
    test_forecast: ForecastResult
    testing: pd.Series

    @property
    def test_residuals(self) -> pd.Series:
        return (self.testing.astype(float) - self.test_forecast.point_forecast).rename("residual")


@dataclass
class EvaluationResult:
    """Training and testing accuracy of every model that succeeded.

    Attributes:
        training_accuracy: Metrics from in-sample fitted values
        testing_accuracy: Metrics from forecasts of the testing dates
        calibration: model name -> fitted model and test forecast
        failures: model name -> error message for models that failed
    """
    training_accuracy: AccuracyReport
    testing_accuracy: AccuracyReport
    calibration: dict[str, ModelCalibration] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def model_names(self) -> list[str]:
        return list(self.calibration)


def evaluate_models(
    models: list[ForecastModel],
    plan: SplitPlan,
    show_progress: bool = False,
) -> EvaluationResult:
    """Fit every model on the training window and score both windows.

    A model that fails to fit or forecast is logged and recorded in
    ``failures``; the remaining models are still evaluated.

    Args:
        models: Unfitted models
        plan: Train/test split
        show_progress: Show a tqdm progress bar

    Returns:
        EvaluationResult
    """
    result = EvaluationResult(
        training_accuracy=AccuracyReport("training"),
        testing_accuracy=AccuracyReport("testing"),
    )

    iterator = tqdm(models, desc="Evaluating", unit="model", disable=not show_progress)
    for model in iterator:
        try:
            fitted = model.fit(plan.training)
            test_forecast = fitted.predict(plan.testing.index)
        except ModelFitError as e:
            logger.warning(f"Model {model.name} skipped during evaluation: {e}")
            result.failures[model.name] = str(e)
            continue

        result.training_accuracy.metrics[model.name] = accuracy_metrics(
            plan.training, fitted.fitted_values, training=plan.training,
        )
        result.testing_accuracy.metrics[model.name] = accuracy_metrics(
            plan.testing, test_forecast.point_forecast, training=plan.training,
        )
        result.calibration[model.name] = ModelCalibration(
            model_name=model.name,
            fitted=fitted,
            test_forecast=test_forecast,
            testing=plan.testing,
        )

    logger.info(
        f"Evaluated {len(result.calibration)} model(s), {len(result.failures)} failed"
    )
    return result
