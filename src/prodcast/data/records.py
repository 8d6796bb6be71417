"""Data models for production records and wells."""

from dataclasses import dataclass
from datetime import date
from typing import Iterator, Literal

import numpy as np
import pandas as pd

# Column order of a parsed production record table
RECORD_COLUMNS = ["well_id", "date", "oil", "gas"]


@dataclass(frozen=True)
class ProductionRecord:
    """One reported production period for a well.

    Attributes:
        well_id: Well identifier
        period: Production period (first of month for monthly data)
        oil: Oil volume for the period (NaN when not reported)
        gas: Gas volume for the period (NaN when not reported)
    """
    well_id: str
    period: date
    oil: float
    gas: float


def iter_records(records: pd.DataFrame) -> Iterator[ProductionRecord]:
    """Yield ProductionRecord objects from a record table."""
    for row in records[RECORD_COLUMNS].itertuples(index=False):
        yield ProductionRecord(
            well_id=str(row.well_id),
            period=pd.Timestamp(row.date).date(),
            oil=float(row.oil),
            gas=float(row.gas),
        )


@dataclass
class ProductionData:
    """Production history of one well.

    Attributes:
        dates: Array of production dates
        oil: Oil volumes per period
        gas: Gas volumes per period
    """
    dates: np.ndarray  # datetime64
    oil: np.ndarray
    gas: np.ndarray

    def get_product(self, product: Literal["oil", "gas"]) -> np.ndarray:
        """Get volume array for specified product.

        Raises:
            ValueError: If product is unknown
        """
        if product == "oil":
            return self.oil
        elif product == "gas":
            return self.gas
        else:
            raise ValueError(f"Unknown product: {product}")

    @property
    def n_months(self) -> int:
        """Number of reported periods."""
        return len(self.dates)

    @property
    def first_date(self) -> date | None:
        """First production date."""
        if len(self.dates) > 0:
            return pd.Timestamp(self.dates.min()).date()
        return None

    @property
    def last_date(self) -> date | None:
        """Last production date."""
        if len(self.dates) > 0:
            return pd.Timestamp(self.dates.max()).date()
        return None


@dataclass
class Well:
    """A well with its production history.

    Attributes:
        well_id: Well identifier
        production: Historical production data
        metadata: Extra attribute columns carried from the input file
    """
    well_id: str
    production: ProductionData
    metadata: dict


def wells_from_records(records: pd.DataFrame) -> list[Well]:
    """Group a record table into Well objects (sorted by date within well).

    Args:
        records: Record table with at least RECORD_COLUMNS

    Returns:
        List of Well objects in well_id order
    """
    extra_cols = [c for c in records.columns if c not in RECORD_COLUMNS]
    wells = []
    for well_id, group in records.groupby("well_id", sort=True):
        group = group.sort_values("date")
        metadata = {}
        for col in extra_cols:
            values = group[col].dropna()
            if len(values) > 0:
                metadata[col] = values.iloc[0]
        wells.append(Well(
            well_id=str(well_id),
            production=ProductionData(
                dates=group["date"].values,
                oil=group["oil"].to_numpy(dtype=float),
                gas=group["gas"].to_numpy(dtype=float),
            ),
            metadata=metadata,
        ))
    return wells
