"""Plotly charts for production series, CV plans, residuals and forecasts."""

from .plots import ForecastPlotter, save_analysis_plots

__all__ = ["ForecastPlotter", "save_analysis_plots"]
