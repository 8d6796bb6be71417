"""Parser for generic well production tables.

Format Detection
----------------

The parser detects a production table when a file has:
1. A well identifier column (Well ID, API Number, Entity ID, ...)
2. A date column (Date, Production Date, Period, ...)
3. Oil and gas volume columns

Detection is case-insensitive and tolerant of spacing variations. Enverus
(DrillingInfo) exports match this format.

Dates must be ISO year-month-day (``2020-01-01``). Any other column is kept
as a well attribute and ignored by the pipeline.

Example Input File
------------------

```csv
Well ID,Well Name,Date,Oil,Gas,Basin
W001,Smith 1H,2020-01-01,5000,25000,Permian
W001,Smith 1H,2020-02-01,4500,22000,Permian
W002,Jones 2H,2020-01-01,6000,30000,Permian
```
"""

import pandas as pd

from ..exceptions import DataFormatError
from .base import DataParser


class StandardParser(DataParser):
    """Parser for well id / date / oil / gas tables.

    When several identifier columns exist, the priority is
    ``well_id`` > ``entity_id`` > ``api``.
    """

    # Column name mappings (lowercase -> standard name)
    COLUMN_MAPPINGS = {
        # Identifiers
        'well id': 'well_id',
        'well_id': 'well_id',
        'wellid': 'well_id',
        'uwi': 'well_id',
        'entity id': 'entity_id',
        'entityid': 'entity_id',
        'entity_id': 'entity_id',
        'api': 'api',
        'api number': 'api',
        'api_number': 'api',
        'api14': 'api',
        'api 14': 'api',
        # Dates
        'date': 'date',
        'production date': 'date',
        'productiondate': 'date',
        'production_date': 'date',
        'prod date': 'date',
        'period': 'date',
        'month': 'date',
        # Oil
        'oil': 'oil',
        'oil (bbl)': 'oil',
        'oil bbl': 'oil',
        'oil_bbl': 'oil',
        'monthly oil': 'oil',
        'oil_volume': 'oil',
        'liquid': 'oil',
        # Gas
        'gas': 'gas',
        'gas (mcf)': 'gas',
        'gas mcf': 'gas',
        'gas_mcf': 'gas',
        'monthly gas': 'gas',
        'gas_volume': 'gas',
    }

    def can_parse(self, df: pd.DataFrame) -> bool:
        """Check if DataFrame has identifier, date, oil and gas columns."""
        mapped = set(self._map_columns(df))
        has_id = bool(mapped & {"well_id", "entity_id", "api"})
        return has_id and {"date", "oil", "gas"} <= mapped

    def _resolve_id_column(self, col_map: dict[str, str]) -> str:
        id_col = col_map.get("well_id") or col_map.get("entity_id") or col_map.get("api")
        if not id_col:
            raise DataFormatError("No identifier column found")
        return id_col
