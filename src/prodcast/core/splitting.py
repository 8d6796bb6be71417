"""Train/test partitioning of production series.

A split keeps a non-empty training prefix followed immediately by a
trailing testing window; concatenating the two gives back the series.
"""

from dataclasses import dataclass
import logging
import math

import pandas as pd

from ..exceptions import InvalidInputError
from .aggregation import validate_series

logger = logging.getLogger(__name__)


@dataclass
class SplitPlan:
    """A series partitioned into training and testing windows.

    Attributes:
        training: Leading periods used to fit models
        testing: Trailing periods held out for evaluation
        slice_id: Position in a rolling-origin plan (0 = most recent)
    """
    training: pd.Series
    testing: pd.Series
    slice_id: int = 0

    @property
    def n_train(self) -> int:
        return len(self.training)

    @property
    def n_test(self) -> int:
        return len(self.testing)

    @property
    def train_end(self) -> pd.Timestamp:
        return self.training.index[-1]

    @property
    def test_start(self) -> pd.Timestamp:
        return self.testing.index[0]

    def reconstruct(self) -> pd.Series:
        """Concatenate training and testing back into one series."""
        return pd.concat([self.training, self.testing])


def resolve_test_window(
    n: int,
    test_periods: int | None = None,
    test_fraction: float | None = None,
) -> int:
    """Turn a period count or a fraction into a test window length.

    A fraction is rounded up: ``ceil(fraction * n)``.

    Raises:
        InvalidInputError: If both or neither parameter is given, or the
            resulting window leaves no training data
    """
    if (test_periods is None) == (test_fraction is None):
        raise InvalidInputError("Give exactly one of test_periods or test_fraction")

    if test_fraction is not None:
        if not 0 < test_fraction < 1:
            raise InvalidInputError(f"test_fraction must be between 0 and 1, got {test_fraction}")
        window = math.ceil(test_fraction * n)
    else:
        window = int(test_periods)

    if window < 1:
        raise InvalidInputError(f"Test window must be at least 1 period, got {window}")
    if window >= n:
        raise InvalidInputError(
            f"Test window of {window} periods leaves no training data in a series of {n}"
        )
    return window


def split_series(
    series: pd.Series,
    test_periods: int | None = None,
    test_fraction: float | None = None,
) -> SplitPlan:
    """Split a series into a training prefix and a trailing test window.

    Args:
        series: Production series
        test_periods: Number of trailing periods to hold out
        test_fraction: Fraction of the series to hold out (rounded up)

    Returns:
        SplitPlan with non-empty training and testing windows

    Raises:
        InvalidInputError: If the series is empty or the window is invalid
    """
    if len(series) == 0:
        raise InvalidInputError("Cannot split an empty series")
    validate_series(series)

    window = resolve_test_window(len(series), test_periods, test_fraction)
    plan = SplitPlan(training=series.iloc[:-window], testing=series.iloc[-window:])
    logger.info(
        f"Split {len(series)} periods: {plan.n_train} training "
        f"(to {plan.train_end.date()}), {plan.n_test} testing"
    )
    return plan


def rolling_origin_plans(
    series: pd.Series,
    test_periods: int,
    slices: int = 4,
    skip: int = 6,
    min_train_periods: int = 1,
) -> list[SplitPlan]:
    """Build a rolling-origin cross-validation plan.

    Slice 0 is the ordinary split; each further slice moves the end of the
    test window ``skip`` periods back. Slices that would leave fewer than
    ``min_train_periods`` training periods are dropped.

    Args:
        series: Production series
        test_periods: Length of every test window
        slices: Maximum number of slices
        skip: Periods between consecutive slice ends
        min_train_periods: Smallest acceptable training window

    Returns:
        List of SplitPlan, most recent first

    Raises:
        InvalidInputError: If the series is empty or not even one slice fits
    """
    if len(series) == 0:
        raise InvalidInputError("Cannot build a plan for an empty series")
    if test_periods < 1 or slices < 1 or skip < 1:
        raise InvalidInputError("test_periods, slices and skip must all be at least 1")
    validate_series(series)

    plans = []
    n = len(series)
    for slice_id in range(slices):
        end = n - slice_id * skip
        train_end = end - test_periods
        if train_end < min_train_periods:
            logger.info(f"CV plan stopped at {slice_id} slices: not enough training data")
            break
        plans.append(SplitPlan(
            training=series.iloc[:train_end],
            testing=series.iloc[train_end:end],
            slice_id=slice_id,
        ))

    if not plans:
        raise InvalidInputError(
            f"Series of {n} periods is too short for a {test_periods}-period test window"
        )
    return plans
