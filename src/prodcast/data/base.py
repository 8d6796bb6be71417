"""Abstract base class for production data parsers."""

from abc import ABC, abstractmethod
import logging
from pathlib import Path

import pandas as pd

from ..exceptions import DataFormatError
from .records import RECORD_COLUMNS

logger = logging.getLogger(__name__)


class DataParser(ABC):
    """Abstract base class for production data parsers.

    Parsers turn a raw DataFrame into a record table with columns
    ``well_id, date, oil, gas`` followed by any unmapped attribute columns,
    sorted by well and date.
    """

    # Subclasses must define COLUMN_MAPPINGS: dict[str, str]
    COLUMN_MAPPINGS: dict[str, str] = {}

    @abstractmethod
    def can_parse(self, df: pd.DataFrame) -> bool:
        """Check if this parser can handle the given DataFrame.

        Args:
            df: DataFrame loaded from input file

        Returns:
            True if this parser recognizes the format
        """
        pass

    @abstractmethod
    def _resolve_id_column(self, col_map: dict[str, str]) -> str:
        """Resolve the well identifier column from the column mapping.

        Args:
            col_map: Standard name -> actual column name mapping

        Returns:
            Actual column name to group by

        Raises:
            DataFormatError: If no identifier column found
        """
        pass

    def _map_columns(self, df: pd.DataFrame) -> dict[str, str]:
        """Map DataFrame columns to standard names using COLUMN_MAPPINGS.

        Returns:
            Dictionary mapping standard name -> actual column name
        """
        cols_lower = {str(c).lower().strip(): c for c in df.columns}
        mapping: dict[str, str] = {}

        for col_lower, actual_col in cols_lower.items():
            if col_lower in self.COLUMN_MAPPINGS:
                standard_name = self.COLUMN_MAPPINGS[col_lower]
                # Don't overwrite if already mapped (priority to first match)
                if standard_name not in mapping:
                    mapping[standard_name] = actual_col

        return mapping

    def _parse_dates(self, date_series: pd.Series) -> pd.Series:
        """Parse ISO year-month-day dates. Unparseable values become NaT.

        Subclasses can override for custom formats.
        """
        return pd.to_datetime(date_series, format="ISO8601", errors="coerce")

    def parse(self, df: pd.DataFrame) -> pd.DataFrame:
        """Parse DataFrame into a production record table.

        Args:
            df: DataFrame with production data

        Returns:
            Record table sorted by well_id then date

        Raises:
            DataFormatError: If required columns are missing or any date is
                missing or unparseable
        """
        col_map = self._map_columns(df)

        id_col = self._resolve_id_column(col_map)
        date_col = col_map.get("date")
        if not date_col:
            raise DataFormatError("No date column found")

        missing = [name for name in ("oil", "gas") if name not in col_map]
        if missing:
            raise DataFormatError(f"No {' or '.join(missing)} column found")

        dates = self._parse_dates(df[date_col])
        bad_mask = dates.isna()
        if bad_mask.any():
            bad_rows = df.index[bad_mask].tolist()
            samples = df.loc[bad_mask, date_col].head(5).tolist()
            raise DataFormatError(
                f"{len(bad_rows)} row(s) have missing or unparseable dates in column "
                f"'{date_col}' (rows {bad_rows[:10]}, values {samples})"
            )

        if df[id_col].isna().any():
            raise DataFormatError(f"Well identifier column '{id_col}' has missing values")

        records = pd.DataFrame({
            "well_id": df[id_col].astype(str).str.strip(),
            "date": dates,
            "oil": pd.to_numeric(df[col_map["oil"]], errors="coerce").astype(float),
            "gas": pd.to_numeric(df[col_map["gas"]], errors="coerce").astype(float),
        })

        mapped_cols = {id_col, date_col, col_map["oil"], col_map["gas"]}
        for col in df.columns:
            if col not in mapped_cols and col not in RECORD_COLUMNS:
                records[col] = df[col].values

        records = records.sort_values(["well_id", "date"], kind="mergesort")
        return records.reset_index(drop=True)

    @classmethod
    def load_file(cls, filepath: Path | str) -> pd.DataFrame:
        """Load CSV or Excel file into DataFrame.

        Args:
            filepath: Path to input file

        Returns:
            pandas DataFrame

        Raises:
            DataFormatError: If file format not supported
        """
        filepath = Path(filepath)

        if filepath.suffix.lower() == ".csv":
            return pd.read_csv(filepath)
        elif filepath.suffix.lower() in (".xlsx", ".xls"):
            return pd.read_excel(filepath)
        else:
            raise DataFormatError(f"Unsupported file format: {filepath.suffix}")


def detect_parser(df: pd.DataFrame) -> DataParser:
    """Auto-detect appropriate parser for DataFrame.

    Args:
        df: DataFrame loaded from input file

    Returns:
        Appropriate DataParser instance

    Raises:
        DataFormatError: If no parser can handle the format
    """
    # Import here to avoid circular imports
    from .aries import AriesParser
    from .standard import StandardParser

    # ARIES first: PROPNUM files may also carry a generic "date" column
    parsers = [AriesParser(), StandardParser()]

    for parser in parsers:
        if parser.can_parse(df):
            return parser

    cols = list(df.columns[:10])
    raise DataFormatError(
        f"Could not detect data format. Columns found: {cols}... "
        "Expected well id, date, oil and gas columns."
    )


def load_records(filepath: Path | str) -> pd.DataFrame:
    """Load production records from file with format auto-detection.

    Args:
        filepath: Path to CSV or Excel file

    Returns:
        Record table (well_id, date, oil, gas, extra attribute columns)

    Raises:
        DataFormatError: If the file cannot be read as production records
    """
    df = DataParser.load_file(filepath)
    parser = detect_parser(df)
    records = parser.parse(df)
    logger.info(
        f"Loaded {len(records)} records for {records['well_id'].nunique()} wells "
        f"from {filepath} ({type(parser).__name__})"
    )
    return records
