"""Export pipeline results as JSON or CSV."""

import json
from datetime import date, datetime
import math
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pandas as pd

from ..config import ProdcastConfig
from ..core.profiling import WellProfile, profiles_to_frame
from ..validation import ValidationResult, summarize_validation

if TYPE_CHECKING:
    from ..pipeline import PipelineResult, SeriesAnalysis


class ResultExporter:
    """Export profiles, accuracy reports and forecasts.

    JSON output is one document holding the configuration, a profile
    summary, validation findings and, for each analyzed series, both
    accuracy reports, the forecasts and any model failures. CSV output
    writes the same tables as separate files.
    """

    def __init__(self, config: ProdcastConfig | None = None):
        """Initialize exporter.

        Args:
            config: Configuration (included in JSON export)
        """
        self.config = config or ProdcastConfig()

    def _format_date(self, d: date | pd.Timestamp | None) -> str | None:
        """Format date as ISO string."""
        if d is None or d is pd.NaT:
            return None
        if isinstance(d, pd.Timestamp):
            d = d.date()
        return d.isoformat()

    def _number(self, value: float | None, digits: int = 4) -> float | None:
        """Round a float; NaN and infinity become null."""
        if value is None or not math.isfinite(value):
            return None
        return round(float(value), digits)

    def _export_profile(self, profile: WellProfile) -> dict[str, Any]:
        return {
            "well_id": profile.well_id,
            "months_of_production": profile.months_of_production,
            "first_period": self._format_date(profile.first_period),
            "last_period": self._format_date(profile.last_period),
            "avg_gas_oil_ratio": self._number(profile.avg_gas_oil_ratio),
            "avg_monthly_gas_decline_rate": self._number(profile.avg_monthly_gas_decline_rate, 6),
            "total_oil": self._number(profile.total_oil, 2),
            "total_gas": self._number(profile.total_gas, 2),
        }

    def _export_validation(self, results: dict[str, ValidationResult]) -> dict[str, Any]:
        """Summary plus every issue, tagged with its well."""
        issues = []
        for well_id, result in results.items():
            for issue in result.issues:
                issues.append({
                    "well_id": well_id,
                    "code": issue.code,
                    "severity": issue.severity.name.lower(),
                    "message": issue.message,
                    "guidance": issue.guidance,
                })

        return {"summary": summarize_validation(results), "issues": issues}

    def export_analysis(self, analysis: "SeriesAnalysis") -> dict[str, Any]:
        """Export one analyzed series to a JSON-compatible dict."""
        evaluation = analysis.evaluation

        def accuracy(report):
            return {
                name: {k: self._number(v) if k != "n" else v for k, v in m.to_dict().items()}
                for name, m in report.metrics.items()
            }

        forecasts = {}
        for name, result in analysis.forecast.forecasts.items():
            forecasts[name] = {
                "level": result.level,
                "periods": [
                    {
                        "date": self._format_date(d),
                        "forecast": self._number(f, 2),
                        "lower": self._number(lo, 2),
                        "upper": self._number(hi, 2),
                    }
                    for d, f, lo, hi in zip(
                        result.dates,
                        result.point_forecast.to_numpy(),
                        result.lower_bound.to_numpy(),
                        result.upper_bound.to_numpy(),
                    )
                ],
            }

        fitted = {
            name: {"kind": c.fitted.model_kind, "parameters": c.fitted.fitted_parameters}
            for name, c in evaluation.calibration.items()
        }

        clip = analysis.clip
        return {
            "label": analysis.label,
            "periods": len(analysis.series),
            "first_period": self._format_date(analysis.series.index[0]),
            "last_period": self._format_date(analysis.series.index[-1]),
            "outliers": None if clip is None else {
                "replaced": clip.n_flagged,
                "lower": self._number(clip.bounds.lower, 2),
                "upper": self._number(clip.bounds.upper, 2),
                "median": self._number(clip.bounds.median, 2),
            },
            "stationarity": (
                analysis.stationarity.summary() if analysis.stationarity is not None else None
            ),
            "split": {
                "training_periods": analysis.plan.n_train,
                "testing_periods": analysis.plan.n_test,
                "testing_start": self._format_date(analysis.plan.test_start),
            },
            "models": fitted,
            "accuracy": {
                "training": accuracy(evaluation.training_accuracy),
                "testing": accuracy(evaluation.testing_accuracy),
            },
            "forecasts": forecasts,
            "failures": analysis.failures,
        }

    def export_result(self, result: "PipelineResult") -> dict[str, Any]:
        """Export a full pipeline run to a JSON-compatible dict."""
        dataset = result.dataset
        return {
            "generated": datetime.now().isoformat(timespec="seconds"),
            "source": str(result.source),
            "config": self.config.to_dict(),
            "well_count": len(dataset.profiles),
            "eligible_wells": dataset.eligible_ids,
            "profiles": [self._export_profile(p) for p in dataset.profiles.values()],
            "validation": self._export_validation(result.validation),
            "aggregate": self.export_analysis(result.aggregate),
            "wells": {
                well_id: self.export_analysis(analysis)
                for well_id, analysis in result.wells.items()
            },
            "well_failures": result.well_failures,
        }

    def save_json(self, result: "PipelineResult", output_path: Path | str) -> Path:
        """Export a pipeline run and save to a JSON file.

        Returns:
            Path to saved file
        """
        output_path = Path(output_path)
        data = self.export_result(result)

        with open(output_path, "w") as f:
            json.dump(data, f, indent=2, default=str)

        return output_path

    def accuracy_frame(self, result: "PipelineResult", partition: str) -> pd.DataFrame:
        """Accuracy rows of every analyzed series for one partition."""
        frames = []
        for analysis in [result.aggregate, *result.wells.values()]:
            report = (
                analysis.evaluation.training_accuracy if partition == "training"
                else analysis.evaluation.testing_accuracy
            )
            frame = report.to_frame()
            frame.insert(0, "series", analysis.label)
            frames.append(frame)
        return pd.concat(frames, ignore_index=True)

    def forecast_frame(self, result: "PipelineResult") -> pd.DataFrame:
        """Forecast rows of every analyzed series."""
        frames = []
        for analysis in [result.aggregate, *result.wells.values()]:
            frame = analysis.forecast.to_frame()
            frame.insert(0, "series", analysis.label)
            frames.append(frame)
        return pd.concat(frames, ignore_index=True)

    def save_csv(self, result: "PipelineResult", output_dir: Path | str) -> list[Path]:
        """Write profiles, accuracy and forecast tables as CSV files.

        Returns:
            Paths of the written files
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        tables = {
            "well_profiles.csv": profiles_to_frame(result.dataset.profiles),
            "accuracy_training.csv": self.accuracy_frame(result, "training"),
            "accuracy_testing.csv": self.accuracy_frame(result, "testing"),
            "forecasts.csv": self.forecast_frame(result),
        }

        paths = []
        for filename, frame in tables.items():
            path = output_dir / filename
            frame.to_csv(path, index=False)
            paths.append(path)
        return paths

    def save(self, result: "PipelineResult", output_dir: Path | str) -> list[Path]:
        """Save in the configured output format.

        Returns:
            Paths of the written files
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        if self.config.output.format == "csv":
            return self.save_csv(result, output_dir)
        return [self.save_json(result, output_dir / "prodcast_results.json")]
