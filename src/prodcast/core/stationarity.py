"""Augmented Dickey-Fuller stationarity diagnostic.

The check is informational: it reports how many differences the series
needs, but the series handed to the models is left unchanged.
"""

from dataclasses import dataclass, field
import logging

import numpy as np
import pandas as pd
from statsmodels.tsa.stattools import adfuller

from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)

# adfuller needs a handful of observations beyond its lag terms
MIN_OBSERVATIONS = 10


@dataclass
class AdfResult:
    """Outcome of one ADF test.

    Attributes:
        differences: How many times the series was differenced first
        statistic: ADF test statistic
        p_value: MacKinnon approximate p-value
        used_lag: Lags chosen by AIC
        n_obs: Observations used in the regression
        critical_values: Critical values keyed by level ("1%", "5%", "10%")
        is_stationary: True if a unit root is rejected at alpha
    """
    differences: int
    statistic: float
    p_value: float
    used_lag: int
    n_obs: int
    critical_values: dict[str, float]
    is_stationary: bool


@dataclass
class StationarityReport:
    """ADF results for the series and its differences."""
    tests: list[AdfResult] = field(default_factory=list)
    alpha: float = 0.05

    @property
    def differences_required(self) -> int | None:
        """Smallest number of differences that passed, None if none did."""
        for test in self.tests:
            if test.is_stationary:
                return test.differences
        return None

    @property
    def is_stationary(self) -> bool:
        return bool(self.tests) and self.tests[0].is_stationary

    def summary(self) -> dict:
        return {
            "alpha": self.alpha,
            "differences_required": self.differences_required,
            "tests": [
                {
                    "differences": t.differences,
                    "statistic": t.statistic,
                    "p_value": t.p_value,
                    "is_stationary": t.is_stationary,
                }
                for t in self.tests
            ],
        }


def adf_test(series: pd.Series, alpha: float = 0.05, differences: int = 0) -> AdfResult:
    """Run an Augmented Dickey-Fuller test on ``series``.

    Args:
        series: Values to test (undefined values dropped)
        alpha: Significance level for rejecting the unit root
        differences: Recorded on the result; the caller differences the data

    Raises:
        InvalidInputError: If too few observations remain or the values are constant
    """
    values = np.asarray(series, dtype=float)
    values = values[~np.isnan(values)]
    if len(values) < MIN_OBSERVATIONS:
        raise InvalidInputError(
            f"ADF test needs at least {MIN_OBSERVATIONS} observations, got {len(values)}"
        )

    try:
        statistic, p_value, used_lag, n_obs, critical_values, _ = adfuller(values, autolag="AIC")
    except ValueError as e:
        raise InvalidInputError(f"ADF test not possible (d={differences}): {e}") from e
    return AdfResult(
        differences=differences,
        statistic=float(statistic),
        p_value=float(p_value),
        used_lag=int(used_lag),
        n_obs=int(n_obs),
        critical_values={k: float(v) for k, v in critical_values.items()},
        is_stationary=bool(p_value < alpha),
    )


def check_stationarity(
    series: pd.Series,
    alpha: float = 0.05,
    max_diff: int = 1,
) -> StationarityReport:
    """Test the series, then its differences, until a unit root is rejected.

    A differenced series that cannot be tested (constant or too short)
    ends the search; the levels already tested are kept.

    Args:
        series: Production series
        alpha: Significance level
        max_diff: Largest number of differences to test

    Returns:
        StationarityReport with one AdfResult per level tested

    Raises:
        InvalidInputError: If the undifferenced series cannot be tested
    """
    report = StationarityReport(alpha=alpha)
    current = pd.Series(series, dtype=float)

    for d in range(max_diff + 1):
        if d > 0:
            current = current.diff().dropna()
        try:
            result = adf_test(current, alpha=alpha, differences=d)
        except InvalidInputError as e:
            if d == 0:
                raise
            logger.warning(f"Stopping stationarity search: {e}")
            break
        report.tests.append(result)
        logger.info(
            f"ADF (d={d}): statistic={result.statistic:.3f}, p={result.p_value:.3f}, "
            f"stationary={result.is_stationary}"
        )
        if result.is_stationary:
            break

    return report
