"""IQR outlier detection and replacement.

Bounds are computed once from the original series:

    lower = Q1 - k * IQR
    upper = Q3 + k * IQR

with linear-interpolation quartiles. Values strictly outside the bounds are
replaced by the median of the original series in a single pass.
"""

from dataclasses import dataclass
import logging

import numpy as np
import pandas as pd

from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlierBounds:
    """Quartile statistics and fences of a series."""
    q1: float
    q3: float
    iqr: float
    lower: float
    upper: float
    median: float

    def contains(self, values: np.ndarray) -> np.ndarray:
        """Boolean mask of values inside ``[lower, upper]``."""
        values = np.asarray(values, dtype=float)
        return (values >= self.lower) & (values <= self.upper)


@dataclass
class ClipResult:
    """Outcome of clipping a series.

    Attributes:
        series: Series with outliers replaced (same index as the input)
        bounds: Bounds computed from the original series
        flagged: Boolean mask (aligned to the index) of replaced values
    """
    series: pd.Series
    bounds: OutlierBounds
    flagged: pd.Series

    @property
    def n_flagged(self) -> int:
        return int(self.flagged.sum())


def iqr_bounds(values: np.ndarray | pd.Series, multiplier: float = 1.5) -> OutlierBounds:
    """Compute quartiles, IQR fences and median of ``values``.

    Undefined values are ignored.

    Raises:
        InvalidInputError: If there is no defined value or multiplier is not positive
    """
    if multiplier <= 0:
        raise InvalidInputError(f"IQR multiplier must be positive, got {multiplier}")
    arr = np.asarray(values, dtype=float)
    arr = arr[~np.isnan(arr)]
    if len(arr) == 0:
        raise InvalidInputError("Cannot compute IQR bounds of an empty series")

    q1, median, q3 = np.quantile(arr, [0.25, 0.5, 0.75], method="linear")
    iqr = q3 - q1
    return OutlierBounds(
        q1=float(q1),
        q3=float(q3),
        iqr=float(iqr),
        lower=float(q1 - multiplier * iqr),
        upper=float(q3 + multiplier * iqr),
        median=float(median),
    )


def detect_outliers(series: pd.Series, multiplier: float = 1.5) -> pd.Series:
    """Boolean mask of values strictly outside the IQR fences."""
    bounds = iqr_bounds(series, multiplier)
    values = series.to_numpy(dtype=float)
    mask = (values < bounds.lower) | (values > bounds.upper)
    return pd.Series(mask, index=series.index, name="outlier")


def clip_outliers(series: pd.Series, multiplier: float = 1.5) -> ClipResult:
    """Replace IQR outliers with the median of the original series.

    The input is not modified; the returned series has the same index,
    length and order.

    Args:
        series: Production series
        multiplier: Fence width in IQRs

    Returns:
        ClipResult with the cleaned series, bounds and flagged mask

    Raises:
        InvalidInputError: If the series is empty
    """
    if len(series) == 0:
        raise InvalidInputError("Cannot clip outliers of an empty series")

    bounds = iqr_bounds(series, multiplier)
    values = series.to_numpy(dtype=float)
    flagged = (values < bounds.lower) | (values > bounds.upper)

    cleaned = series.astype(float).where(~flagged, bounds.median)

    if flagged.any():
        logger.info(
            f"Replaced {int(flagged.sum())} of {len(series)} values outside "
            f"[{bounds.lower:.2f}, {bounds.upper:.2f}] with median {bounds.median:.2f}"
        )

    return ClipResult(
        series=cleaned,
        bounds=bounds,
        flagged=pd.Series(flagged, index=series.index, name="outlier"),
    )
