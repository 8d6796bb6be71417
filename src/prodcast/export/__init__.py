"""Export modules for pipeline results."""

from .json_export import ResultExporter

__all__ = ["ResultExporter"]
