"""Interactive Plotly charts for production series and forecasts."""

from pathlib import Path
from typing import TYPE_CHECKING, Literal

import numpy as np
import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots
from statsmodels.tsa.stattools import acf

from ..core.splitting import SplitPlan
from ..models.base import ForecastResult

if TYPE_CHECKING:
    from ..pipeline import SeriesAnalysis


class ForecastPlotter:
    """Create interactive production and forecast plots."""

    # Color palette for multiple models
    COLORS = [
        "#1f77b4", "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
        "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf"
    ]

    def __init__(self, width: int = 1000, height: int = 600):
        """Initialize plotter.

        Args:
            width: Plot width in pixels
            height: Plot height in pixels
        """
        self.width = width
        self.height = height

    def _color(self, i: int) -> str:
        return self.COLORS[i % len(self.COLORS)]

    def _layout(self, fig: go.Figure, title: str, y_title: str, height: float | None = None) -> None:
        fig.update_layout(
            title=dict(text=title, font=dict(size=16)),
            xaxis_title="Date",
            yaxis_title=y_title,
            width=self.width,
            height=height or self.height,
            legend=dict(yanchor="top", y=0.99, xanchor="right", x=0.99),
            hovermode='x unified',
        )

    def plot_time_series(
        self,
        series: pd.Series,
        title: str | None = None,
        flagged: pd.Series | None = None,
    ) -> go.Figure:
        """Line plot of a production series.

        Args:
            series: Production series
            title: Chart title (defaults to the series name)
            flagged: Optional boolean mask of outliers to mark

        Returns:
            Plotly Figure object
        """
        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=series.index,
            y=series.to_numpy(),
            mode='lines',
            name=str(series.name or "value"),
            line=dict(color=self._color(0), width=2),
        ))

        if flagged is not None and flagged.any():
            marked = series[flagged.to_numpy()]
            fig.add_trace(go.Scatter(
                x=marked.index,
                y=marked.to_numpy(),
                mode='markers',
                name='Outlier',
                marker=dict(size=9, color='#d62728', symbol='x'),
            ))

        self._layout(fig, title or f"Production: {series.name}", "Volume per period")
        return fig

    def plot_cv_plan(self, plans: list[SplitPlan], title: str = "Cross-validation plan") -> go.Figure:
        """One panel per slice showing the training and testing windows.

        Args:
            plans: Rolling-origin plans, most recent first

        Returns:
            Plotly Figure with one row per slice
        """
        fig = make_subplots(
            rows=len(plans), cols=1,
            shared_xaxes=True,
            subplot_titles=[f"Slice {p.slice_id + 1}" for p in plans],
            vertical_spacing=0.06,
        )

        for row, plan in enumerate(plans, start=1):
            for part, values, color in (
                ("Training", plan.training, self._color(0)),
                ("Testing", plan.testing, self._color(3)),
            ):
                fig.add_trace(
                    go.Scatter(
                        x=values.index, y=values.to_numpy(),
                        mode='lines',
                        name=part,
                        line=dict(color=color),
                        legendgroup=part,
                        showlegend=row == 1,
                    ),
                    row=row, col=1,
                )

        fig.update_layout(
            title=title,
            width=self.width,
            height=max(self.height, 220 * len(plans)),
        )
        return fig

    def plot_residuals(
        self,
        residuals: dict[str, pd.Series],
        title: str = "Residuals",
        nlags: int = 12,
    ) -> go.Figure:
        """Residuals over time and their autocorrelation, per model.

        Args:
            residuals: model name -> residual series
            title: Chart title
            nlags: Lags shown in the ACF panel

        Returns:
            Plotly Figure with a time panel and an ACF panel
        """
        fig = make_subplots(
            rows=2, cols=1,
            subplot_titles=("Residuals over time", "Autocorrelation"),
            vertical_spacing=0.15,
        )

        for i, (name, resid) in enumerate(residuals.items()):
            color = self._color(i)
            fig.add_trace(
                go.Scatter(
                    x=resid.index, y=resid.to_numpy(),
                    mode='lines+markers',
                    name=name,
                    line=dict(color=color),
                    legendgroup=name,
                ),
                row=1, col=1,
            )

            values = resid.dropna().to_numpy(dtype=float)
            if len(values) < 3 or np.std(values) == 0:
                continue
            lags = min(nlags, len(values) - 1)
            fig.add_trace(
                go.Bar(
                    x=np.arange(lags + 1), y=acf(values, nlags=lags),
                    name=name,
                    marker_color=color,
                    legendgroup=name,
                    showlegend=False,
                ),
                row=2, col=1,
            )

        fig.add_hline(y=0, line=dict(color='gray', dash='dot'), row=1, col=1)
        fig.update_xaxes(title_text="Lag", row=2, col=1)
        fig.update_layout(
            title=title,
            width=self.width,
            height=self.height * 1.2,
            barmode='group',
        )
        return fig

    def plot_forecast(
        self,
        history: pd.Series,
        forecasts: dict[str, ForecastResult],
        title: str | None = None,
    ) -> go.Figure:
        """History followed by each model's forecast and confidence band.

        Args:
            history: Observed series
            forecasts: model name -> ForecastResult

        Returns:
            Plotly Figure object
        """
        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=history.index, y=history.to_numpy(),
            mode='lines',
            name='Actual',
            line=dict(color='black', width=2),
        ))

        for i, (name, result) in enumerate(forecasts.items(), start=1):
            color = self._color(i)
            dates = result.dates
            # Band as a closed polygon: upper edge forward, lower edge back
            fig.add_trace(go.Scatter(
                x=list(dates) + list(dates[::-1]),
                y=list(result.upper_bound.to_numpy()) + list(result.lower_bound.to_numpy()[::-1]),
                fill='toself',
                fillcolor=color,
                opacity=0.15,
                line=dict(width=0),
                name=f'{name} ({result.level:.0%})',
                legendgroup=name,
                hoverinfo='skip',
                showlegend=False,
            ))
            fig.add_trace(go.Scatter(
                x=dates, y=result.point_forecast.to_numpy(),
                mode='lines',
                name=name,
                line=dict(color=color, width=2, dash='dash'),
                legendgroup=name,
            ))

        self._layout(fig, title or f"Forecast: {history.name}", "Volume per period")
        return fig

    def save(
        self,
        fig: go.Figure,
        output_path: Path | str,
        format: Literal["html", "png", "svg", "pdf"] = "html"
    ) -> Path:
        """Save figure to file.

        Args:
            fig: Plotly Figure object
            output_path: Output file path
            format: Output format (image formats need kaleido)

        Returns:
            Path to saved file
        """
        output_path = Path(output_path)

        if format == "html":
            fig.write_html(output_path)
        else:
            fig.write_image(output_path, format=format)

        return output_path


def save_analysis_plots(
    analysis: "SeriesAnalysis",
    output_dir: Path | str,
    plotter: ForecastPlotter | None = None,
) -> list[Path]:
    """Write the standard chart set of one analysis as HTML files.

    Charts: the raw series with outliers marked, the CV plan, test-window
    residuals of each model, and the forecasts.

    Args:
        analysis: Result of analyzing one series
        output_dir: Directory for the files (created if missing)
        plotter: Plotter to use (default size if None)

    Returns:
        Paths of the written files
    """
    plotter = plotter or ForecastPlotter()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = analysis.label.replace(":", "_")

    flagged = analysis.clip.flagged if analysis.clip is not None else None
    figures = {
        "series": plotter.plot_time_series(analysis.series, analysis.label, flagged),
        "cv_plan": plotter.plot_cv_plan(analysis.cv_plans, f"CV plan: {analysis.label}"),
        "residuals": plotter.plot_residuals(
            {name: c.test_residuals for name, c in analysis.evaluation.calibration.items()},
            f"Test residuals: {analysis.label}",
        ),
        "forecast": plotter.plot_forecast(
            analysis.modeled_series, analysis.forecast.forecasts, f"Forecast: {analysis.label}",
        ),
    }

    return [
        plotter.save(fig, output_dir / f"{stem}_{kind}.html")
        for kind, fig in figures.items()
    ]
