"""Parser for ARIES production data exports.

ARIES exports are recognized by a PROPNUM identifier column or an
ARIES-style date column (P_DATE, YYYYMM) alongside oil and gas volumes.

Date Format Handling
--------------------

1. YYYYMM (numeric): 202301 -> 2023-01-01
2. YYYY-MM (string): "2023-01" -> 2023-01-01
3. ISO dates: "2023-01-01"

Example Input File
------------------

```csv
PROPNUM,YYYYMM,MONTHLY_OIL,MONTHLY_GAS
WELL001,202001,5000,25000
WELL001,202002,4500,22000
WELL002,202001,6000,30000
```
"""

import pandas as pd

from ..exceptions import DataFormatError
from .base import DataParser


class AriesParser(DataParser):
    """Parser for ARIES production data CSV exports."""

    # Column name mappings (lowercase -> standard name)
    COLUMN_MAPPINGS = {
        # Identifiers
        'propnum': 'propnum',
        'prop_num': 'propnum',
        'property': 'propnum',
        'property number': 'propnum',
        'api': 'api',
        # Dates
        'p_date': 'date',
        'pdate': 'date',
        'prod_date': 'date',
        'yyyymm': 'date',
        'year_month': 'date',
        'date': 'date',
        # Oil
        'oil': 'oil',
        'monthly_oil': 'oil',
        'monthlyoil': 'oil',
        'oil_prod': 'oil',
        'oil_volume': 'oil',
        # Gas
        'gas': 'gas',
        'monthly_gas': 'gas',
        'monthlygas': 'gas',
        'gas_prod': 'gas',
        'gas_volume': 'gas',
    }

    def can_parse(self, df: pd.DataFrame) -> bool:
        """Check if DataFrame has ARIES-style columns."""
        cols_lower = {str(c).lower().strip() for c in df.columns}

        has_propnum = bool(cols_lower & {'propnum', 'prop_num', 'property', 'property number'})
        has_aries_date = bool(cols_lower & {'p_date', 'pdate', 'yyyymm'})
        has_production = bool(cols_lower & {'oil', 'monthly_oil', 'gas', 'monthly_gas'})

        return (has_propnum or has_aries_date) and has_production

    def _resolve_id_column(self, col_map: dict[str, str]) -> str:
        id_col = col_map.get("propnum") or col_map.get("api")
        if not id_col:
            raise DataFormatError("No identifier column (PROPNUM) found")
        return id_col

    def _parse_dates(self, date_series: pd.Series) -> pd.Series:
        """Parse ARIES date formats (YYYYMM, YYYY-MM or ISO dates)."""
        non_null = date_series.dropna()
        if len(non_null) == 0:
            return pd.to_datetime(date_series, errors="coerce")

        if pd.api.types.is_numeric_dtype(date_series):
            as_text = date_series.astype("Int64").astype(str)
        else:
            as_text = date_series.astype(str).str.strip()
        sample = as_text[date_series.notna()].iloc[0]

        if sample.isdigit() and len(sample) == 6:
            return pd.to_datetime(as_text, format="%Y%m", errors="coerce")

        if len(sample) == 7 and "-" in sample:
            return pd.to_datetime(as_text, format="%Y-%m", errors="coerce")

        return super()._parse_dates(date_series)
