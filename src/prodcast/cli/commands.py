"""CLI commands for prodcast."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..config import MODEL_NAMES, ProdcastConfig, generate_default_config
from ..exceptions import ProdcastError

app = typer.Typer(
    name="prodcast",
    help="Oil & Gas production forecasting: clean, profile, evaluate and forecast",
    add_completion=False,
)


def _load_config(config: Path | None) -> ProdcastConfig:
    if config:
        typer.echo(f"Loading config from {config}")
        try:
            return ProdcastConfig.from_yaml(config)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
    return ProdcastConfig()


def _format_metric(value: float) -> str:
    return "n/a" if value != value else f"{value:,.2f}"


def _report_analysis(analysis) -> None:
    """Print accuracy tables and forecast summary for one series."""
    typer.echo("")
    typer.echo(f"{analysis.label}: {len(analysis.series)} periods "
               f"({analysis.plan.n_train} training, {analysis.plan.n_test} testing)")

    if analysis.clip is not None and analysis.clip.n_flagged:
        typer.echo(f"  Outliers replaced: {analysis.clip.n_flagged}")
    if analysis.stationarity is not None:
        d = analysis.stationarity.differences_required
        typer.echo(f"  Differences for stationarity: {d if d is not None else 'not reached'}")

    for report in (analysis.evaluation.training_accuracy, analysis.evaluation.testing_accuracy):
        if not len(report):
            continue
        typer.echo(f"  {report.partition.capitalize()} accuracy:")
        typer.echo(f"    {'model':<15} {'RMSE':>14} {'MAE':>14} {'MAPE %':>8}")
        for name in report.ranked("rmse"):
            m = report[name]
            typer.echo(
                f"    {name:<15} {_format_metric(m.rmse):>14} "
                f"{_format_metric(m.mae):>14} {_format_metric(m.mape):>8}"
            )

    for name, result in analysis.forecast.forecasts.items():
        last = result.point_forecast.iloc[-1]
        typer.echo(
            f"  {name}: {result.horizon} periods to {result.dates[-1].date()}, "
            f"last {_format_metric(last)}"
        )

    for name, message in analysis.failures.items():
        typer.echo(f"  {name} failed: {message}", err=True)


@app.command()
def run(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Input CSV/Excel file with production records",
            exists=True,
        )
    ],
    output: Annotated[
        Path,
        typer.Option(
            "-o", "--output",
            help="Output directory for results and charts",
        )
    ] = Path("output"),
    config: Annotated[
        Optional[Path],
        typer.Option(
            "-c", "--config",
            help="YAML config file (use 'prodcast init' to generate template)",
            exists=True,
        )
    ] = None,
    well: Annotated[
        Optional[list[str]],
        typer.Option(
            "-w", "--well",
            help="Also forecast this well on its own (repeatable)",
        )
    ] = None,
    product: Annotated[
        Optional[str],
        typer.Option(
            "-p", "--product",
            help="Product to forecast: oil or gas (overrides config)",
        )
    ] = None,
    horizon: Annotated[
        Optional[int],
        typer.Option(
            "--horizon",
            help="Periods to forecast (overrides config)",
        )
    ] = None,
    model: Annotated[
        Optional[list[str]],
        typer.Option(
            "-m", "--model",
            help=f"Model(s) to run: {', '.join(MODEL_NAMES)} (overrides config)",
        )
    ] = None,
    export_format: Annotated[
        Optional[str],
        typer.Option(
            "--format",
            help="Export format: json or csv (overrides config)",
        )
    ] = None,
    no_plots: Annotated[
        bool,
        typer.Option(
            "--no-plots",
            help="Skip writing HTML charts",
        )
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "-v", "--verbose",
            help="Log pipeline progress",
        )
    ] = False,
) -> None:
    """Run the full pipeline and write results.

    Loads the records, profiles and filters wells, builds the aggregate
    series, evaluates every configured model on a trailing test window and
    forecasts past the last period. Accuracy for training and testing is
    reported side by side; no model is picked automatically.

    Example:
        prodcast run production.csv -o results/ --well W1 --well W2
    """
    from ..export import ResultExporter
    from ..pipeline import run_pipeline
    from ..visualization import ForecastPlotter, save_analysis_plots

    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    pc_config = _load_config(config)

    # CLI overrides
    if product:
        pc_config.forecast.product = product.lower()  # type: ignore
    if horizon is not None:
        pc_config.forecast.horizon = horizon
    if model:
        pc_config.forecast.models = [m.lower() for m in model]
    if export_format:
        pc_config.output.format = export_format.lower()  # type: ignore
        if pc_config.output.format not in ("json", "csv"):
            typer.echo(f"Error: Invalid format '{export_format}'. Must be json or csv.", err=True)
            raise typer.Exit(1)
    if no_plots:
        pc_config.output.plots = False

    try:
        pc_config.validate()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    try:
        result = run_pipeline(
            input_file, pc_config, well_ids=well or (), show_progress=not verbose,
        )
    except (ProdcastError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    dataset = result.dataset
    summary = result.validation_summary
    typer.echo(f"Wells: {len(dataset.profiles)} loaded, {len(dataset.eligible_ids)} eligible")
    typer.echo(f"Records kept: {len(dataset.filtered)} of {len(dataset.records)}")
    if summary["total_errors"] or summary["total_warnings"]:
        typer.echo(
            f"Validation: {summary['total_errors']} errors, "
            f"{summary['total_warnings']} warnings (see 'prodcast validate')"
        )

    _report_analysis(result.aggregate)
    for analysis in result.wells.values():
        _report_analysis(analysis)
    for well_id, message in result.well_failures.items():
        typer.echo(f"Well {well_id} skipped: {message}", err=True)

    output.mkdir(parents=True, exist_ok=True)
    written = ResultExporter(pc_config).save(result, output)

    if pc_config.output.plots:
        plotter = ForecastPlotter()
        plot_dir = output / "plots"
        for analysis in [result.aggregate, *result.wells.values()]:
            written.extend(save_analysis_plots(analysis, plot_dir, plotter))

    typer.echo("")
    typer.echo(f"Wrote {len(written)} file(s) to {output}")


@app.command()
def profile(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Input CSV/Excel file with production records",
            exists=True,
        )
    ],
    output: Annotated[
        Optional[Path],
        typer.Option(
            "-o", "--output",
            help="CSV file for the well profiles",
        )
    ] = None,
    min_months: Annotated[
        Optional[int],
        typer.Option(
            "--min-months",
            help="Eligibility threshold in months (default from config: 24)",
        )
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option(
            "-c", "--config",
            help="YAML config file",
            exists=True,
        )
    ] = None,
) -> None:
    """Profile each well and show which wells are eligible.

    Example:
        prodcast profile production.csv -o profiles.csv
    """
    from ..core.eligibility import eligible_wells
    from ..core.profiling import profile_wells, profiles_to_frame
    from ..data.base import load_records

    pc_config = _load_config(config)
    threshold = min_months if min_months is not None else pc_config.eligibility.min_months

    try:
        records = load_records(input_file)
    except ProdcastError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    profiles = profile_wells(records)
    eligible = set(eligible_wells(profiles, threshold))

    typer.echo(f"Wells: {len(profiles)} ({len(eligible)} with at least {threshold} months)")
    typer.echo("")
    typer.echo(f"  {'well':<16} {'months':>6} {'first':>10} {'avg GOR':>12} {'gas decline':>12}")
    for well_id, p in profiles.items():
        marker = "*" if well_id in eligible else " "
        typer.echo(
            f"{marker} {well_id:<16} {p.months_of_production:>6} {str(p.first_period):>10} "
            f"{_format_metric(p.avg_gas_oil_ratio):>12} "
            f"{_format_metric(p.avg_monthly_gas_decline_rate):>12}"
        )

    if output:
        frame = profiles_to_frame(profiles)
        frame["eligible"] = frame["well_id"].isin(eligible)
        frame.to_csv(output, index=False)
        typer.echo(f"\nProfiles written to: {output}")


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Option(
            "-o", "--output",
            help="Output file path",
        )
    ] = Path("prodcast.yaml"),
) -> None:
    """Generate a default configuration file.

    Creates a YAML config file with all available settings and their defaults.

    Example:
        prodcast init -o my_config.yaml
    """
    if output.exists():
        overwrite = typer.confirm(f"{output} already exists. Overwrite?")
        if not overwrite:
            raise typer.Exit(0)

    generate_default_config(output)
    typer.echo(f"Config file created: {output}")

    typer.echo("\nEdit this file to customize settings, then use:")
    typer.echo(f"  prodcast run data.csv --config {output}")


@app.command()
def validate(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Input CSV/Excel file with production records",
            exists=True,
        )
    ],
    config: Annotated[
        Optional[Path],
        typer.Option(
            "-c", "--config",
            help="YAML config file with validation settings",
            exists=True,
        )
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option(
            "-o", "--output",
            help="Output file for detailed validation report",
        )
    ] = None,
) -> None:
    """Validate production records without running forecasts.

    Exit codes:
        0: No errors found (warnings may be present)
        1: Validation errors found, or the file cannot be loaded

    Example:
        prodcast validate data.csv --output report.txt
    """
    from ..data.base import load_records
    from ..validation import InputValidator, summarize_validation

    pc_config = _load_config(config)

    typer.echo(f"Loading {input_file}...")
    try:
        records = load_records(input_file)
    except ProdcastError as e:
        typer.echo(f"  Error loading file: {e}", err=True)
        raise typer.Exit(1)

    validator = InputValidator(
        max_oil_volume=pc_config.validation.max_oil_volume,
        max_gas_volume=pc_config.validation.max_gas_volume,
    )
    results = validator.validate(records)
    summary = summarize_validation(results)

    typer.echo("")
    typer.echo("Validation Summary:")
    typer.echo(f"  Total wells: {len(results)}")
    typer.echo(f"  Wells with errors: {summary['wells_with_errors']}")
    typer.echo(f"  Wells with warnings: {summary['wells_with_warnings']}")
    typer.echo(f"  Total errors: {summary['total_errors']}")
    typer.echo(f"  Total warnings: {summary['total_warnings']}")

    if summary["by_code"]:
        typer.echo("")
        typer.echo("Issues by code:")
        for code, count in sorted(summary["by_code"].items()):
            typer.echo(f"  {code}: {count}")

    if output:
        with open(output, "w") as f:
            f.write("prodcast Validation Report\n")
            f.write("=" * 40 + "\n\n")
            f.write(f"File: {input_file}\n")
            f.write(f"Total wells: {len(results)}\n")
            f.write(f"Total errors: {summary['total_errors']}\n")
            f.write(f"Total warnings: {summary['total_warnings']}\n\n")

            for result in results.values():
                if result.issues:
                    f.write(f"\n{result.well_id}\n")
                    f.write("-" * 30 + "\n")
                    for issue in result.issues:
                        f.write(f"  [{issue.code}] {issue.severity.name}: {issue.message}\n")
                        f.write(f"    Guidance: {issue.guidance}\n")

        typer.echo(f"\nDetailed report written to: {output}")

    if summary["total_errors"] > 0:
        raise typer.Exit(1)


@app.command()
def info(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="Input CSV/Excel file to inspect",
            exists=True,
        )
    ],
) -> None:
    """Display information about a production data file.

    Shows detected format, well count, date range, and column names.
    """
    from ..data.base import DataParser, detect_parser

    typer.echo(f"Inspecting: {input_file}")
    typer.echo("")

    try:
        df = DataParser.load_file(input_file)
    except ProdcastError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Rows: {len(df)}")
    typer.echo(f"Columns: {list(df.columns)}")

    try:
        parser = detect_parser(df)
        typer.echo(f"Detected format: {type(parser).__name__}")

        records = parser.parse(df)
        counts = records.groupby("well_id", sort=True)["date"].agg(["count", "min", "max"])
        typer.echo(f"Wells found: {len(counts)}")
        if len(records):
            typer.echo(
                f"Periods: {records['date'].min().date()} to {records['date'].max().date()}"
            )

        if len(counts):
            typer.echo("\nSample wells:")
            for well_id, row in counts.head(5).iterrows():
                typer.echo(
                    f"  {well_id}: {row['count']} months, "
                    f"{row['min'].date()} to {row['max'].date()}"
                )
            if len(counts) > 5:
                typer.echo(f"  ... and {len(counts) - 5} more")

    except ValueError as e:
        typer.echo(f"Format detection failed: {e}", err=True)
        raise typer.Exit(1)
