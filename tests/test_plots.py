"""Tests for Plotly chart generation."""

import pandas as pd
import plotly.graph_objects as go
import pytest

from prodcast.config import ProdcastConfig
from prodcast.core.splitting import rolling_origin_plans
from prodcast.pipeline import analyze_series
from prodcast.visualization import ForecastPlotter, save_analysis_plots


@pytest.fixture
def analysis(monthly_series):
    config = ProdcastConfig()
    config.forecast.models = ["elastic_net"]
    series = monthly_series.copy()
    series.iloc[10] = series.iloc[10] * 20
    return analyze_series(series, config, test_periods=12, label="aggregate:oil")


class TestForecastPlotter:
    """Tests for ForecastPlotter."""

    def test_time_series_marks_outliers(self, analysis):
        fig = ForecastPlotter().plot_time_series(
            analysis.series, analysis.label, analysis.clip.flagged,
        )
        assert isinstance(fig, go.Figure)
        assert [t.name for t in fig.data] == ["oil", "Outlier"]
        assert len(fig.data[1].x) == analysis.clip.n_flagged

    def test_time_series_without_outliers(self, monthly_series):
        fig = ForecastPlotter().plot_time_series(monthly_series)
        assert len(fig.data) == 1
        assert fig.layout.title.text == "Production: oil"

    def test_cv_plan_one_row_per_slice(self, monthly_series):
        plans = rolling_origin_plans(monthly_series, test_periods=12, slices=3, skip=6)
        fig = ForecastPlotter().plot_cv_plan(plans)
        # training and testing trace per slice
        assert len(fig.data) == 6
        assert len(fig.layout.annotations) == 3

    def test_residuals_with_acf(self, analysis):
        residuals = {"elastic_net": analysis.evaluation.calibration["elastic_net"].test_residuals}
        fig = ForecastPlotter().plot_residuals(residuals, nlags=6)
        bars = [t for t in fig.data if isinstance(t, go.Bar)]
        assert len(bars) == 1
        assert len(bars[0].y) == 7

    def test_residuals_too_short_for_acf(self):
        dates = pd.date_range("2020-01-01", periods=2, freq="MS")
        fig = ForecastPlotter().plot_residuals({"m": pd.Series([1.0, -1.0], index=dates)})
        assert not any(isinstance(t, go.Bar) for t in fig.data)

    def test_forecast_band_and_line(self, analysis):
        fig = ForecastPlotter().plot_forecast(analysis.modeled_series, analysis.forecast.forecasts)
        names = [t.name for t in fig.data]
        assert names[0] == "Actual"
        assert "elastic_net" in names
        band = fig.data[1]
        assert band.fill == "toself"
        assert len(band.x) == 2 * analysis.forecast.forecasts["elastic_net"].horizon

    def test_save_html(self, tmp_path, monthly_series):
        plotter = ForecastPlotter()
        path = plotter.save(plotter.plot_time_series(monthly_series), tmp_path / "series.html")
        assert path.exists()
        assert "plotly" in path.read_text().lower()


class TestSaveAnalysisPlots:
    """Tests for save_analysis_plots."""

    def test_writes_chart_set(self, tmp_path, analysis):
        paths = save_analysis_plots(analysis, tmp_path / "plots")
        assert [p.name for p in paths] == [
            "aggregate_oil_series.html",
            "aggregate_oil_cv_plan.html",
            "aggregate_oil_residuals.html",
            "aggregate_oil_forecast.html",
        ]
        assert all(p.exists() for p in paths)
