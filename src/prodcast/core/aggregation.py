"""Aggregation of well records into production series.

A production series is a float ``pd.Series`` indexed by a strictly
increasing, duplicate-free ``DatetimeIndex`` named ``date``.
"""

import logging

import numpy as np
import pandas as pd

from ..exceptions import InvalidInputError

logger = logging.getLogger(__name__)


def aggregate_production(records: pd.DataFrame) -> pd.DataFrame:
    """Sum oil and gas across wells per period.

    Only wells that report a period contribute to it; nothing is zero-filled.

    Args:
        records: Record table (usually already filtered)

    Returns:
        DataFrame indexed by period (ascending) with columns
        ``oil``, ``gas`` and ``well_count``
    """
    aggregate = (
        records.groupby("date", sort=True)
        .agg(
            oil=("oil", "sum"),
            gas=("gas", "sum"),
            well_count=("well_id", "nunique"),
        )
    )
    aggregate.index = pd.DatetimeIndex(aggregate.index, name="date")
    logger.info(f"Aggregated {len(records)} records into {len(aggregate)} periods")
    return aggregate


def select_date_range(
    data: pd.DataFrame | pd.Series,
    start: str | pd.Timestamp | None = None,
    end: str | pd.Timestamp | None = None,
) -> pd.DataFrame | pd.Series:
    """Keep the periods within ``[start, end]`` (either bound optional)."""
    mask = np.ones(len(data), dtype=bool)
    if start is not None:
        mask &= np.asarray(data.index >= pd.Timestamp(start))
    if end is not None:
        mask &= np.asarray(data.index <= pd.Timestamp(end))
    return data.loc[mask].copy()


def validate_series(series: pd.Series) -> pd.Series:
    """Check that ``series`` is a production series and return it.

    Raises:
        InvalidInputError: If the index is not a strictly increasing,
            unique DatetimeIndex
    """
    if not isinstance(series, pd.Series):
        raise InvalidInputError(f"Expected a pandas Series, got {type(series).__name__}")
    if not isinstance(series.index, pd.DatetimeIndex):
        raise InvalidInputError("Series must be indexed by dates")
    if not series.index.is_unique:
        raise InvalidInputError("Series dates must be unique")
    if not series.index.is_monotonic_increasing:
        raise InvalidInputError("Series dates must be increasing")
    return series


def to_series(aggregate: pd.DataFrame, product: str) -> pd.Series:
    """Extract one product from an aggregate frame as a production series."""
    if product not in ("oil", "gas"):
        raise InvalidInputError(f"Unknown product: {product}")
    series = aggregate[product].astype(float).rename(product)
    series.index.name = "date"
    return validate_series(series)


def well_series(records: pd.DataFrame, well_id: str, product: str) -> pd.Series:
    """Production series of a single well.

    Duplicate periods for the well are summed so dates stay unique.

    Raises:
        InvalidInputError: If the well has no records
    """
    rows = records.loc[records["well_id"] == well_id]
    if rows.empty:
        raise InvalidInputError(f"No records for well {well_id}")
    per_period = rows.groupby("date", sort=True).agg(
        oil=("oil", "sum"), gas=("gas", "sum"), well_count=("well_id", "nunique"),
    )
    per_period.index = pd.DatetimeIndex(per_period.index, name="date")
    return to_series(per_period, product).rename(f"{well_id}:{product}")
