"""Configuration file support for prodcast.

Supports YAML config files with per-stage parameters.
CLI flags override config file values.
"""

from dataclasses import asdict, dataclass, field, fields as dataclass_fields
import logging
from pathlib import Path
from typing import ClassVar, Literal

import pandas as pd
import yaml

logger = logging.getLogger(__name__)

MODEL_NAMES = ("arima", "arima_boost", "prophet", "prophet_boost", "elastic_net")


@dataclass
class EligibilityConfig:
    """Well eligibility parameters.

    Attributes:
        min_months: Minimum months of production for a well to be kept (default 24)
        exclude_zero_volumes: Drop records with zero oil or gas before aggregation
    """
    min_months: int = 24
    exclude_zero_volumes: bool = True


@dataclass
class DateRangeConfig:
    """Date cut applied to the aggregate series.

    Attributes:
        start: Keep periods on/after this ISO date (None = no lower cut)
        end: Keep periods on/before this ISO date (None = no upper cut)
    """
    start: str | None = "2010-01-01"
    end: str | None = None


@dataclass
class OutlierConfig:
    """IQR outlier clipping parameters.

    Attributes:
        enabled: Replace outliers before modeling (default True)
        iqr_multiplier: Fence width in IQRs beyond Q1/Q3 (default 1.5)
    """
    enabled: bool = True
    iqr_multiplier: float = 1.5


@dataclass
class SplitConfig:
    """Train/test windowing.

    Attributes:
        test_periods: Trailing test window for the aggregate series (default 12)
        test_fraction: Test window as a fraction of length for per-well series (default 0.2)
        cv_slices: Number of rolling-origin slices in the CV plan (default 4)
        cv_skip: Periods the test window moves back per slice (default 6)
    """
    test_periods: int = 12
    test_fraction: float = 0.2
    cv_slices: int = 4
    cv_skip: int = 6


@dataclass
class ForecastConfig:
    """Forecast target and horizon.

    Attributes:
        product: Volume to forecast - 'oil' or 'gas' (default 'oil')
        horizon: Periods to forecast past the last observed date (default 6)
        interval_level: Confidence level of the forecast bands (default 0.95)
        freq: Pandas frequency of the series when it cannot be inferred (default 'MS')
        models: Model names to fit and compare
    """
    product: Literal["oil", "gas"] = "oil"
    horizon: int = 6
    interval_level: float = 0.95
    freq: str = "MS"
    models: list[str] = field(default_factory=lambda: list(MODEL_NAMES))


@dataclass
class ModelParams:
    """Library-level model parameters.

    Attributes:
        max_p: Largest AR order tried in the ARIMA order search
        max_d: Largest differencing order tried
        max_q: Largest MA order tried
        seasonal_period: Seasonal period for a seasonal AR term (0 = none)
        n_estimators: Boosting stages for the gradient boosted hybrids
        learning_rate: Boosting learning rate
        max_depth: Depth of each boosting tree
        random_state: Seed for the boosting ensemble
        alpha: Elastic net penalty strength
        l1_ratio: Elastic net L1/L2 mix (1.0 = lasso)
        yearly_seasonality: Let Prophet fit a yearly seasonal term
        changepoint_prior_scale: Prophet trend flexibility
    """
    max_p: int = 2
    max_d: int = 1
    max_q: int = 2
    seasonal_period: int = 0
    n_estimators: int = 200
    learning_rate: float = 0.05
    max_depth: int = 3
    random_state: int = 123
    alpha: float = 0.01
    l1_ratio: float = 0.5
    yearly_seasonality: bool = True
    changepoint_prior_scale: float = 0.05


@dataclass
class StationarityConfig:
    """Augmented Dickey-Fuller diagnostic parameters.

    Attributes:
        alpha: Significance level for rejecting a unit root (default 0.05)
        max_diff: Largest number of differences to test (default 1)
    """
    alpha: float = 0.05
    max_diff: int = 1


@dataclass
class ValidationConfig:
    """Input validation configuration.

    Attributes:
        max_oil_volume: Maximum expected monthly oil volume - IV002 threshold
        max_gas_volume: Maximum expected monthly gas volume - IV002 threshold
        strict_mode: If True, abort the run when validation finds errors
    """
    max_oil_volume: float = 50000.0
    max_gas_volume: float = 500000.0
    strict_mode: bool = False


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        plots: Write HTML charts (default True)
        format: Export format - 'json' or 'csv' (default 'json')
    """
    plots: bool = True
    format: Literal["json", "csv"] = "json"


@dataclass
class ProdcastConfig:
    """Complete prodcast configuration."""
    eligibility: EligibilityConfig = field(default_factory=EligibilityConfig)
    date_range: DateRangeConfig = field(default_factory=DateRangeConfig)
    outliers: OutlierConfig = field(default_factory=OutlierConfig)
    split: SplitConfig = field(default_factory=SplitConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    models: ModelParams = field(default_factory=ModelParams)
    stationarity: StationarityConfig = field(default_factory=StationarityConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid
        """
        errors = []

        if self.eligibility.min_months < 1:
            errors.append(
                f"eligibility.min_months ({self.eligibility.min_months}) must be at least 1"
            )

        for name in ("start", "end"):
            value = getattr(self.date_range, name)
            if value is None:
                continue
            try:
                pd.Timestamp(value)
            except ValueError:
                errors.append(f"date_range.{name} ({value!r}) is not an ISO date")

        if self.outliers.iqr_multiplier <= 0:
            errors.append(
                f"outliers.iqr_multiplier ({self.outliers.iqr_multiplier}) must be greater than 0"
            )

        if self.split.test_periods < 1:
            errors.append(
                f"split.test_periods ({self.split.test_periods}) must be at least 1"
            )
        if not 0 < self.split.test_fraction < 1:
            errors.append(
                f"split.test_fraction ({self.split.test_fraction}) must be between 0 and 1"
            )
        if self.split.cv_slices < 1:
            errors.append(f"split.cv_slices ({self.split.cv_slices}) must be at least 1")
        if self.split.cv_skip < 1:
            errors.append(f"split.cv_skip ({self.split.cv_skip}) must be at least 1")

        if self.forecast.product not in ("oil", "gas"):
            errors.append(f"forecast.product ({self.forecast.product}) must be oil or gas")
        if self.forecast.horizon < 1:
            errors.append(f"forecast.horizon ({self.forecast.horizon}) must be at least 1")
        if not 0 < self.forecast.interval_level < 1:
            errors.append(
                f"forecast.interval_level ({self.forecast.interval_level}) must be between 0 and 1"
            )
        if not self.forecast.models:
            errors.append("forecast.models must name at least one model")
        unknown = [m for m in self.forecast.models if m not in MODEL_NAMES]
        if unknown:
            errors.append(
                f"forecast.models has unknown model(s) {', '.join(unknown)}; "
                f"valid: {', '.join(MODEL_NAMES)}"
            )

        if min(self.models.max_p, self.models.max_d, self.models.max_q) < 0:
            errors.append("models.max_p, max_d and max_q must not be negative")
        if self.models.n_estimators < 1:
            errors.append(f"models.n_estimators ({self.models.n_estimators}) must be at least 1")
        if self.models.alpha < 0:
            errors.append(f"models.alpha ({self.models.alpha}) must not be negative")
        if not 0 <= self.models.l1_ratio <= 1:
            errors.append(f"models.l1_ratio ({self.models.l1_ratio}) must be between 0 and 1")

        if not 0 < self.stationarity.alpha < 1:
            errors.append(
                f"stationarity.alpha ({self.stationarity.alpha}) must be between 0 and 1"
            )

        if errors:
            raise ValueError("Invalid configuration:\n  - " + "\n  - ".join(errors))

    @classmethod
    def from_yaml(cls, filepath: Path | str) -> "ProdcastConfig":
        """Load configuration from YAML file.

        Args:
            filepath: Path to YAML config file

        Returns:
            ProdcastConfig instance

        Raises:
            ValueError: If configuration values are invalid
        """
        filepath = Path(filepath)
        with open(filepath) as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data)
        config.validate()
        return config

    @staticmethod
    def _filter_unknown_keys(
        section_data: dict,
        dataclass_type: type,
        section_name: str,
    ) -> dict:
        """Drop keys a section does not define, warning about each."""
        known_keys = {f.name for f in dataclass_fields(dataclass_type)}
        unknown_keys = set(section_data) - known_keys
        if unknown_keys:
            logger.warning(
                f"Unknown key(s) in '{section_name}' config section: "
                f"{', '.join(sorted(unknown_keys))}. "
                f"Valid keys: {', '.join(sorted(known_keys))}"
            )
        return {k: v for k, v in section_data.items() if k in known_keys}

    # Mapping of section name -> dataclass type for from_dict iteration
    _SECTION_TYPES: ClassVar[dict[str, type]] = {
        "eligibility": EligibilityConfig, "date_range": DateRangeConfig,
        "outliers": OutlierConfig, "split": SplitConfig, "forecast": ForecastConfig,
        "models": ModelParams, "stationarity": StationarityConfig,
        "validation": ValidationConfig, "output": OutputConfig,
    }

    @classmethod
    def from_dict(cls, data: dict) -> "ProdcastConfig":
        """Create configuration from dictionary.

        Unknown keys in any section are logged as warnings and ignored,
        rather than causing opaque TypeErrors.

        Args:
            data: Configuration dictionary

        Returns:
            ProdcastConfig instance
        """
        config = cls()

        unknown_sections = set(data) - set(cls._SECTION_TYPES)
        if unknown_sections:
            logger.warning(
                f"Unknown top-level config section(s): {', '.join(sorted(unknown_sections))}. "
                f"Valid sections: {', '.join(sorted(cls._SECTION_TYPES))}"
            )

        for section, dtype in cls._SECTION_TYPES.items():
            if section in data:
                section_data = cls._filter_unknown_keys(data[section] or {}, dtype, section)
                if section == "forecast" and "models" in section_data:
                    section_data["models"] = list(section_data["models"])
                if section == "date_range":
                    # YAML turns bare 2010-01-01 into a date object
                    section_data = {
                        k: (str(v) if v is not None else None) for k, v in section_data.items()
                    }
                setattr(config, section, dtype(**section_data))

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return asdict(self)

    def to_yaml(self, filepath: Path | str) -> None:
        """Save configuration to YAML file."""
        filepath = Path(filepath)
        with open(filepath, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)


def generate_default_config(filepath: Path | str) -> Path:
    """Generate a default configuration file.

    Args:
        filepath: Output file path

    Returns:
        Path to created file
    """
    filepath = Path(filepath)

    content = """# prodcast configuration file

# Wells kept for the forecasting subset
eligibility:
  min_months: 24              # Minimum months of production
  exclude_zero_volumes: true  # Drop periods with zero oil or gas

# Date cut applied to the aggregate series
date_range:
  start: "2010-01-01"         # Keep periods on/after this date (null = all)
  end: null                   # Keep periods on/before this date (null = all)

# IQR outlier clipping
outliers:
  enabled: true
  iqr_multiplier: 1.5         # Fence = Q1 - k*IQR .. Q3 + k*IQR

# Train/test windows
split:
  test_periods: 12            # Aggregate series: trailing test periods
  test_fraction: 0.2          # Per-well series: trailing fraction
  cv_slices: 4                # Rolling-origin CV plan slices
  cv_skip: 6                  # Periods between slices

# Forecast target
forecast:
  product: oil                # oil or gas
  horizon: 6                  # Periods ahead
  interval_level: 0.95        # Confidence band level
  freq: MS                    # Series frequency when it cannot be inferred
  models:
    - arima
    - arima_boost
    - prophet
    - prophet_boost
    - elastic_net

# Model parameters
models:
  max_p: 2                    # ARIMA order search limits
  max_d: 1
  max_q: 2
  seasonal_period: 0          # 12 adds a seasonal AR term for monthly data
  n_estimators: 200           # Gradient boosting stages
  learning_rate: 0.05
  max_depth: 3
  random_state: 123
  alpha: 0.01                 # Elastic net penalty
  l1_ratio: 0.5
  yearly_seasonality: true    # Prophet
  changepoint_prior_scale: 0.05

# Augmented Dickey-Fuller diagnostic
stationarity:
  alpha: 0.05
  max_diff: 1

# Input validation
validation:
  max_oil_volume: 50000       # IV002 threshold
  max_gas_volume: 500000      # IV002 threshold
  strict_mode: false          # Abort on validation errors

# Output options
output:
  plots: true                 # Write HTML charts
  format: json                # json or csv
"""

    with open(filepath, "w") as f:
        f.write(content)

    return filepath
