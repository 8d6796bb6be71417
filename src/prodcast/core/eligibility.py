"""Selection of wells and records that feed the forecasting subset."""

import logging

import pandas as pd

from .profiling import WellProfile

logger = logging.getLogger(__name__)


def eligible_wells(profiles: dict[str, WellProfile], min_months: int = 24) -> list[str]:
    """Return ids of wells with at least ``min_months`` records.

    Args:
        profiles: Dict of well_id -> WellProfile
        min_months: Minimum months of production

    Returns:
        Sorted list of qualifying well ids
    """
    selected = sorted(
        well_id for well_id, profile in profiles.items()
        if profile.months_of_production >= min_months
    )
    logger.info(
        f"{len(selected)} of {len(profiles)} wells have at least {min_months} months of production"
    )
    return selected


def filter_records(
    records: pd.DataFrame,
    well_ids: list[str],
    exclude_zero_volumes: bool = True,
) -> pd.DataFrame:
    """Restrict records to the given wells and drop unusable periods.

    With ``exclude_zero_volumes`` any record whose oil or gas volume is not
    strictly positive (zero, negative or undefined) is removed. This is an
    exclusion, not a clip: the period disappears from that well's history.

    Args:
        records: Record table from the loader
        well_ids: Wells to keep
        exclude_zero_volumes: Drop records with non-positive oil or gas

    Returns:
        New record table (index reset)
    """
    keep = records["well_id"].isin(set(well_ids))
    if exclude_zero_volumes:
        keep &= (records["oil"] > 0) & (records["gas"] > 0)

    filtered = records.loc[keep].reset_index(drop=True)
    logger.info(
        f"Kept {len(filtered)} of {len(records)} records "
        f"({filtered['well_id'].nunique()} wells)"
    )
    return filtered
