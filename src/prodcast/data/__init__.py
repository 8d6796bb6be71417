"""Production record models and file parsers."""

from .records import (
    RECORD_COLUMNS,
    ProductionRecord,
    ProductionData,
    Well,
    iter_records,
    wells_from_records,
)
from .base import DataParser, detect_parser, load_records
from .standard import StandardParser
from .aries import AriesParser

__all__ = [
    "RECORD_COLUMNS",
    "ProductionRecord",
    "ProductionData",
    "Well",
    "iter_records",
    "wells_from_records",
    "DataParser",
    "detect_parser",
    "load_records",
    "StandardParser",
    "AriesParser",
]
