"""Issue codes and per-well results of the input checks.

Codes:
    IV001  negative oil or gas volume          ERROR
    IV002  volume above the configured limit   WARNING
    IV003  period without a volume             INFO
    IV004  period after the reference date     WARNING
    IV005  period reported more than once      WARNING
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

# Dates and values listed in an issue's details
MAX_LISTED = 10


class IssueSeverity(Enum):
    ERROR = auto()
    WARNING = auto()
    INFO = auto()


class IssueCategory(Enum):
    """VOLUMES covers the value checks, PERIODS the date checks."""
    VOLUMES = auto()
    PERIODS = auto()


@dataclass
class ValidationIssue:
    """One finding of the input checks.

    Attributes:
        code: Issue code (IV001-IV005)
        category: VOLUMES or PERIODS
        severity: ERROR, WARNING or INFO
        message: What was found
        guidance: What to look at in the source data
        details: Counts, offending dates and values
    """
    code: str
    category: IssueCategory
    severity: IssueSeverity
    message: str
    guidance: str
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code}] {self.severity.name}: {self.message}"

    @staticmethod
    def negative_values(product: str, count: int, dates: list, values: list) -> "ValidationIssue":
        return ValidationIssue(
            code="IV001",
            category=IssueCategory.VOLUMES,
            severity=IssueSeverity.ERROR,
            message=f"{count} negative {product} volume(s)",
            guidance=f"Reported {product} volumes cannot be below zero; correct the source rows",
            details={
                "product": product, "negative_count": count,
                "dates": dates[:MAX_LISTED], "values": values[:MAX_LISTED],
            },
        )

    @staticmethod
    def exceeds_threshold(
        product: str, count: int, threshold: float, dates: list, max_value: float,
    ) -> "ValidationIssue":
        return ValidationIssue(
            code="IV002",
            category=IssueCategory.VOLUMES,
            severity=IssueSeverity.WARNING,
            message=f"{count} {product} volume(s) above {threshold:,.0f} per period",
            guidance="Check units (daily vs monthly, Mcf vs MMcf) for these periods",
            details={
                "product": product, "exceeds_count": count, "threshold": threshold,
                "max_value": max_value, "dates": dates[:MAX_LISTED],
            },
        )

    @staticmethod
    def missing_volumes(product: str, count: int, dates: list) -> "ValidationIssue":
        return ValidationIssue(
            code="IV003",
            category=IssueCategory.VOLUMES,
            severity=IssueSeverity.INFO,
            message=f"{count} period(s) without a {product} volume",
            guidance="These periods are left out of the forecasting subset",
            details={"product": product, "missing_count": count, "dates": dates[:MAX_LISTED]},
        )

    @staticmethod
    def future_dates(count: int, first_date: str) -> "ValidationIssue":
        return ValidationIssue(
            code="IV004",
            category=IssueCategory.PERIODS,
            severity=IssueSeverity.WARNING,
            message=f"{count} period(s) dated after today, first {first_date}",
            guidance="Production cannot be reported ahead of time; check the date column",
            details={"future_date_count": count, "first_future_date": first_date},
        )

    @staticmethod
    def duplicate_periods(count: int, dates: list) -> "ValidationIssue":
        return ValidationIssue(
            code="IV005",
            category=IssueCategory.PERIODS,
            severity=IssueSeverity.WARNING,
            message=f"{count} period(s) reported more than once",
            guidance="Repeated periods of a well are summed when the series is built",
            details={"duplicate_count": count, "dates": dates[:MAX_LISTED]},
        )


@dataclass
class ValidationResult:
    """Issues found for one well."""
    well_id: str | None = None
    issues: list[ValidationIssue] = field(default_factory=list)

    def _count(self, severity: IssueSeverity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(IssueSeverity.WARNING)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    @property
    def codes(self) -> list[str]:
        return [i.code for i in self.issues]

    def add_issue(self, issue: ValidationIssue) -> None:
        self.issues.append(issue)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """New result holding the issues of both; neither input is changed."""
        return ValidationResult(
            well_id=self.well_id or other.well_id,
            issues=self.issues + other.issues,
        )


def summarize_validation(
    results: dict[str, ValidationResult] | list[ValidationResult],
) -> dict:
    """Totals over the per-well results.

    Returns:
        Dict with wells_with_errors, wells_with_warnings, total_errors,
        total_warnings, and issue counts by_category and by_code
    """
    if isinstance(results, dict):
        results = list(results.values())

    issues = [issue for result in results for issue in result.issues]
    return {
        "wells_with_errors": sum(1 for r in results if r.has_errors),
        "wells_with_warnings": sum(1 for r in results if r.has_warnings),
        "total_errors": sum(r.error_count for r in results),
        "total_warnings": sum(r.warning_count for r in results),
        "by_category": dict(Counter(i.category.name for i in issues)),
        "by_code": dict(Counter(i.code for i in issues)),
    }
