"""Per-well production summary statistics.

Profiles are used to filter out short-lived wells before aggregation.
Ratio and decline terms with a zero or undefined denominator are
non-finite and are left out of the averages; a profile field with no
finite term at all is NaN rather than an error.
"""

from dataclasses import asdict, dataclass
from datetime import date
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WellProfile:
    """Summary statistics for one well.

    Attributes:
        well_id: Well identifier
        avg_gas_oil_ratio: Mean gas/oil ratio over periods with a finite ratio
        months_of_production: Number of records reported for the well
        first_period: First reported period
        last_period: Last reported period
        avg_monthly_gas_decline_rate: Mean period-over-period fractional
            change in gas volume (NaN with fewer than 2 records)
        total_oil: Sum of reported oil volumes
        total_gas: Sum of reported gas volumes
    """
    well_id: str
    avg_gas_oil_ratio: float
    months_of_production: int
    first_period: date | None
    last_period: date | None
    avg_monthly_gas_decline_rate: float
    total_oil: float
    total_gas: float


def _finite_mean(values: np.ndarray) -> float:
    """Mean of the finite entries, NaN if there are none."""
    finite = values[np.isfinite(values)]
    if len(finite) == 0:
        return float("nan")
    return float(finite.mean())


def gas_oil_ratios(oil: np.ndarray, gas: np.ndarray) -> np.ndarray:
    """Per-period gas/oil ratio; non-finite where oil is zero or undefined."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.asarray(gas, dtype=float) / np.asarray(oil, dtype=float)


def gas_decline_terms(gas: np.ndarray) -> np.ndarray:
    """Period-over-period fractional change in gas volume.

    Returns an array one shorter than ``gas``; terms whose previous period
    is zero or undefined are non-finite.
    """
    gas = np.asarray(gas, dtype=float)
    if len(gas) < 2:
        return np.array([], dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        return (gas[1:] - gas[:-1]) / gas[:-1]


def profile_well(well_id: str, records: pd.DataFrame) -> WellProfile:
    """Build the profile of a single well.

    Args:
        well_id: Well identifier
        records: Records for this well only (any order)

    Returns:
        WellProfile for the well
    """
    records = records.sort_values("date")
    oil = records["oil"].to_numpy(dtype=float)
    gas = records["gas"].to_numpy(dtype=float)

    first_period = pd.Timestamp(records["date"].iloc[0]).date() if len(records) else None
    last_period = pd.Timestamp(records["date"].iloc[-1]).date() if len(records) else None

    return WellProfile(
        well_id=str(well_id),
        avg_gas_oil_ratio=_finite_mean(gas_oil_ratios(oil, gas)),
        months_of_production=len(records),
        first_period=first_period,
        last_period=last_period,
        avg_monthly_gas_decline_rate=_finite_mean(gas_decline_terms(gas)),
        total_oil=float(np.nansum(oil)),
        total_gas=float(np.nansum(gas)),
    )


def profile_wells(records: pd.DataFrame) -> dict[str, WellProfile]:
    """Profile every well in a record table.

    Args:
        records: Record table from the loader

    Returns:
        Dict of well_id -> WellProfile, in well_id order
    """
    profiles = {
        str(well_id): profile_well(str(well_id), group)
        for well_id, group in records.groupby("well_id", sort=True)
    }
    logger.info(f"Profiled {len(profiles)} wells")
    return profiles


def profiles_to_frame(profiles: dict[str, WellProfile]) -> pd.DataFrame:
    """Tabulate profiles, one row per well."""
    columns = list(WellProfile.__dataclass_fields__)
    return pd.DataFrame([asdict(p) for p in profiles.values()], columns=columns)
