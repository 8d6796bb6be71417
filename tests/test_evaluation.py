"""Tests for accuracy metrics, model evaluation and final forecasting."""

import numpy as np
import pandas as pd
import pytest

from prodcast.core.evaluation import (
    METRIC_NAMES,
    AccuracyMetrics,
    AccuracyReport,
    accuracy_metrics,
    evaluate_models,
)
from prodcast.core.forecasting import refit_and_forecast
from prodcast.core.splitting import split_series
from prodcast.exceptions import InvalidInputError
from prodcast.models import ElasticNetModel, ForecastModel


class BrokenModel(ForecastModel):
    """Model whose library call always fails."""

    kind = "broken"

    def _fit(self, series, freq):
        raise np.linalg.LinAlgError("matrix is singular")


class BackendMissingModel(ForecastModel):
    """Model whose library is installed without its backend."""

    kind = "no_backend"

    def _fit(self, series, freq):
        raise AttributeError("backend not available")


def _metrics(rmse, rsq=0.5):
    return AccuracyMetrics(rmse=rmse, mae=rmse, mape=1.0, smape=1.0, mase=1.0, rsq=rsq, n=4)


class TestAccuracyMetrics:
    """Tests for accuracy_metrics."""

    def test_known_values(self):
        actual = [100.0, 200.0, 300.0, 400.0]
        predicted = [110.0, 190.0, 330.0, 400.0]
        m = accuracy_metrics(actual, predicted, training=[100.0, 200.0, 300.0])

        assert m.rmse == pytest.approx(np.sqrt(275.0))
        assert m.mae == pytest.approx(12.5)
        assert m.mape == pytest.approx(6.25)
        expected_smape = np.mean([20 / 210, 20 / 390, 60 / 630, 0.0]) * 100
        assert m.smape == pytest.approx(expected_smape)
        assert m.mase == pytest.approx(0.125)
        assert 0.9 < m.rsq <= 1.0
        assert m.n == 4

    def test_perfect_prediction(self):
        values = [5.0, 7.0, 3.0, 9.0]
        m = accuracy_metrics(values, values)
        assert m.rmse == 0.0
        assert m.mae == 0.0
        assert m.mape == 0.0
        assert m.smape == 0.0
        assert m.rsq == pytest.approx(1.0)

    def test_zero_actuals_skipped_by_mape(self):
        m = accuracy_metrics([0.0, 100.0], [10.0, 110.0])
        assert m.mape == pytest.approx(10.0)

    def test_all_zero_actuals(self):
        m = accuracy_metrics([0.0, 0.0], [0.0, 0.0])
        assert np.isnan(m.mape)
        assert m.smape == 0.0
        assert np.isnan(m.rsq)

    def test_mase_needs_training(self):
        assert np.isnan(accuracy_metrics([1.0, 2.0], [1.5, 2.5]).mase)
        assert np.isnan(accuracy_metrics([1.0, 2.0], [1.5, 2.5], training=[3.0, 3.0]).mase)

    def test_length_mismatch(self):
        with pytest.raises(InvalidInputError, match="lengths differ"):
            accuracy_metrics([1.0, 2.0], [1.0])

    def test_empty(self):
        with pytest.raises(InvalidInputError, match="empty"):
            accuracy_metrics([], [])

    def test_to_dict(self):
        d = _metrics(3.0).to_dict()
        assert list(d) == list(METRIC_NAMES) + ["n"]


class TestAccuracyReport:
    """Tests for AccuracyReport."""

    def test_ranked_lower_is_better(self):
        report = AccuracyReport("testing", {
            "a": _metrics(5.0), "b": _metrics(np.nan), "c": _metrics(1.0),
        })
        assert report.ranked("rmse") == ["c", "a", "b"]

    def test_ranked_rsq_higher_is_better(self):
        report = AccuracyReport("testing", {
            "a": _metrics(1.0, rsq=0.2), "b": _metrics(1.0, rsq=0.9),
        })
        assert report.ranked("rsq") == ["b", "a"]

    def test_unknown_metric(self):
        with pytest.raises(InvalidInputError, match="Unknown metric"):
            AccuracyReport("testing").ranked("r2")

    def test_to_frame(self):
        report = AccuracyReport("training", {"a": _metrics(2.0)})
        frame = report.to_frame()
        assert list(frame.columns) == ["model", "partition", *METRIC_NAMES, "n"]
        assert frame.iloc[0]["partition"] == "training"
        assert "a" in report
        assert len(report) == 1

    def test_empty_frame_has_columns(self):
        assert "rmse" in AccuracyReport("testing").to_frame().columns


class TestEvaluateModels:
    """Tests for evaluate_models."""

    def test_both_partitions_reported(self, monthly_series):
        plan = split_series(monthly_series, test_periods=12)
        result = evaluate_models([ElasticNetModel()], plan)

        assert result.model_names == ["elastic_net"]
        assert result.training_accuracy["elastic_net"].n == 36
        assert result.testing_accuracy["elastic_net"].n == 12
        calibration = result.calibration["elastic_net"]
        assert calibration.test_forecast.dates.equals(plan.testing.index)
        assert len(calibration.test_residuals) == 12

    def test_failing_model_isolated(self, monthly_series):
        plan = split_series(monthly_series, test_periods=12)
        result = evaluate_models([BrokenModel(), ElasticNetModel()], plan)

        assert result.model_names == ["elastic_net"]
        assert "broken" in result.failures
        assert "singular" in result.failures["broken"]
        assert "broken" not in result.testing_accuracy

    def test_unexpected_error_type_isolated(self, monthly_series):
        plan = split_series(monthly_series, test_periods=12)
        result = evaluate_models([BackendMissingModel(), ElasticNetModel()], plan)

        assert result.model_names == ["elastic_net"]
        assert "backend not available" in result.failures["no_backend"]

    def test_no_winner_chosen(self, monthly_series):
        plan = split_series(monthly_series, test_periods=12)
        result = evaluate_models(
            [ElasticNetModel(), ElasticNetModel(name="ridge_like", l1_ratio=0.0)], plan,
        )
        assert len(result.training_accuracy) == 2
        assert len(result.testing_accuracy) == 2


class TestRefitAndForecast:
    """Tests for refit_and_forecast."""

    def test_dates_follow_last_period(self, monthly_series):
        run = refit_and_forecast([ElasticNetModel()], monthly_series, horizon=12)
        result = run.forecasts["elastic_net"]
        expected = pd.date_range("2016-01-01", periods=12, freq="MS")
        assert list(result.dates) == list(expected)
        assert run.fitted["elastic_net"].training.index[-1] == monthly_series.index[-1]

    def test_to_frame(self, monthly_series):
        run = refit_and_forecast([ElasticNetModel()], monthly_series, horizon=3)
        frame = run.to_frame()
        assert list(frame.columns) == ["date", "model", "forecast", "lower", "upper"]
        assert len(frame) == 3

    def test_failures_isolated(self, monthly_series):
        run = refit_and_forecast([BrokenModel(), ElasticNetModel()], monthly_series, horizon=3)
        assert list(run.forecasts) == ["elastic_net"]
        assert "broken" in run.failures

    def test_unexpected_error_type_isolated(self, monthly_series):
        run = refit_and_forecast([BackendMissingModel(), ElasticNetModel()], monthly_series, horizon=3)
        assert list(run.forecasts) == ["elastic_net"]
        assert "no_backend" in run.failures

    def test_empty_run_frame(self, monthly_series):
        run = refit_and_forecast([BrokenModel()], monthly_series, horizon=3)
        assert run.to_frame().empty

    def test_bad_horizon(self, monthly_series):
        with pytest.raises(InvalidInputError, match="at least 1"):
            refit_and_forecast([ElasticNetModel()], monthly_series, horizon=0)

    def test_empty_series(self):
        empty = pd.Series([], index=pd.DatetimeIndex([]), dtype=float)
        with pytest.raises(InvalidInputError, match="empty"):
            refit_and_forecast([ElasticNetModel()], empty, horizon=3)
