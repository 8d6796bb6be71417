"""Input validation for production records.

Usage:
    from prodcast.validation import InputValidator, summarize_validation

    results = InputValidator(max_oil_volume=50000).validate(records)
    summary = summarize_validation(results)
"""

from .result import (
    IssueSeverity,
    IssueCategory,
    ValidationIssue,
    ValidationResult,
    summarize_validation,
)
from .input_validator import InputValidator

__all__ = [
    "IssueSeverity",
    "IssueCategory",
    "ValidationIssue",
    "ValidationResult",
    "summarize_validation",
    "InputValidator",
]
