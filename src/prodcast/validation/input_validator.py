"""Input validation for production records.

Checks production value ranges, dates and duplicate periods. Missing or
unparseable dates never reach this stage: the loader rejects them.
"""

from datetime import date

import numpy as np
import pandas as pd

from ..data.records import Well, wells_from_records
from .result import ValidationIssue, ValidationResult


def _date_strings(dates: np.ndarray) -> list[str]:
    return [str(pd.Timestamp(d).date()) for d in dates]


class InputValidator:
    """Validates production record inputs.

    Error codes:
        IV001: Negative production values
        IV002: Values exceed threshold (>50k oil, >500k gas per period)
        IV003: Periods without a reported volume
        IV004: Future dates in data
        IV005: Duplicate periods for a well
    """

    def __init__(
        self,
        max_oil_volume: float = 50000.0,
        max_gas_volume: float = 500000.0,
        today: date | None = None,
    ):
        """Initialize input validator.

        Args:
            max_oil_volume: Maximum expected oil volume per period
            max_gas_volume: Maximum expected gas volume per period
            today: Reference date for the future-date check (default: today)
        """
        self.max_volumes = {
            "oil": max_oil_volume,
            "gas": max_gas_volume,
        }
        self.today = today

    def validate(self, records: pd.DataFrame) -> dict[str, ValidationResult]:
        """Validate every well in a record table.

        Args:
            records: Record table from the loader

        Returns:
            Dict of well_id -> ValidationResult (wells without issues included)
        """
        return {well.well_id: self.validate_well(well) for well in wells_from_records(records)}

    def validate_well(self, well: Well) -> ValidationResult:
        """Validate all aspects of a well's input data."""
        result = ValidationResult(well_id=well.well_id)
        result = result.merge(self._validate_dates(well))
        for product in ("oil", "gas"):
            result = result.merge(self._validate_production_values(well, product))
        return result

    def _validate_dates(self, well: Well) -> ValidationResult:
        """Check for future and duplicate dates."""
        result = ValidationResult(well_id=well.well_id)
        dates = np.asarray(well.production.dates, dtype="datetime64[D]")
        if len(dates) == 0:
            return result

        today = np.datetime64(self.today or date.today())
        future = dates[dates > today]
        if len(future) > 0:
            result.add_issue(ValidationIssue.future_dates(
                count=len(future),
                first_date=str(future.min()),
            ))

        duplicated = pd.Index(dates).duplicated()
        if duplicated.any():
            result.add_issue(ValidationIssue.duplicate_periods(
                count=int(duplicated.sum()),
                dates=_date_strings(dates[duplicated]),
            ))

        return result

    def _validate_production_values(self, well: Well, product: str) -> ValidationResult:
        """Check for negative, missing and implausibly large volumes."""
        result = ValidationResult(well_id=well.well_id)
        values = well.production.get_product(product)
        dates = well.production.dates
        if len(values) == 0:
            return result

        missing_mask = np.isnan(values)
        if missing_mask.any():
            result.add_issue(ValidationIssue.missing_volumes(
                product=product,
                count=int(missing_mask.sum()),
                dates=_date_strings(dates[missing_mask]),
            ))

        with np.errstate(invalid="ignore"):
            negative_mask = values < 0
            exceeds_mask = values > self.max_volumes[product]

        if negative_mask.any():
            result.add_issue(ValidationIssue.negative_values(
                product=product,
                count=int(negative_mask.sum()),
                dates=_date_strings(dates[negative_mask]),
                values=values[negative_mask].tolist(),
            ))

        if exceeds_mask.any():
            result.add_issue(ValidationIssue.exceeds_threshold(
                product=product,
                count=int(exceeds_mask.sum()),
                threshold=self.max_volumes[product],
                dates=_date_strings(dates[exceeds_mask]),
                max_value=float(np.nanmax(values)),
            ))

        return result
