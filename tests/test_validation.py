"""Tests for input validation of production records."""

from datetime import date

import pandas as pd
import pytest

from prodcast.validation import (
    InputValidator,
    IssueCategory,
    IssueSeverity,
    ValidationIssue,
    ValidationResult,
    summarize_validation,
)


def _records(well_id="W1", dates=None, oil=None, gas=None):
    dates = dates or ["2020-01-01", "2020-02-01", "2020-03-01"]
    n = len(dates)
    return pd.DataFrame({
        "well_id": [well_id] * n,
        "date": pd.to_datetime(dates),
        "oil": oil if oil is not None else [100.0] * n,
        "gas": gas if gas is not None else [500.0] * n,
    })


@pytest.fixture
def validator():
    return InputValidator(max_oil_volume=1000, max_gas_volume=5000, today=date(2024, 1, 1))


class TestInputValidator:
    """Tests for InputValidator."""

    def test_clean_data_has_no_issues(self, validator):
        results = validator.validate(_records())
        assert list(results) == ["W1"]
        assert results["W1"].issues == []
        assert not results["W1"].has_errors

    def test_negative_values(self, validator):
        results = validator.validate(_records(oil=[100.0, -5.0, 100.0]))
        issues = results["W1"].issues
        assert [i.code for i in issues] == ["IV001"]
        assert issues[0].severity == IssueSeverity.ERROR
        assert issues[0].details["values"] == [-5.0]
        assert results["W1"].has_errors

    def test_exceeds_threshold(self, validator):
        results = validator.validate(_records(gas=[500.0, 9000.0, 500.0]))
        issue = results["W1"].issues[0]
        assert issue.code == "IV002"
        assert issue.severity == IssueSeverity.WARNING
        assert issue.details["product"] == "gas"
        assert issue.details["max_value"] == 9000.0

    def test_missing_volumes_info(self, validator):
        results = validator.validate(_records(oil=[100.0, float("nan"), 100.0]))
        issue = results["W1"].issues[0]
        assert issue.code == "IV003"
        assert issue.severity == IssueSeverity.INFO
        assert issue.details["dates"] == ["2020-02-01"]
        assert not results["W1"].has_errors

    def test_future_dates(self, validator):
        results = validator.validate(_records(dates=["2023-12-01", "2024-01-01", "2024-02-01"]))
        issue = results["W1"].issues[0]
        assert issue.code == "IV004"
        assert issue.details["future_date_count"] == 1

    def test_duplicate_periods(self, validator):
        results = validator.validate(_records(dates=["2020-01-01", "2020-01-01", "2020-02-01"]))
        issue = results["W1"].issues[0]
        assert issue.code == "IV005"
        assert issue.details["dates"] == ["2020-01-01"]

    def test_one_result_per_well(self, validator, three_wells):
        results = validator.validate(three_wells)
        assert sorted(results) == ["W1", "W2", "W3"]


class TestValidationResult:
    """Tests for ValidationResult and summaries."""

    def test_merge(self):
        a = ValidationResult("W1", [ValidationIssue.future_dates(1, "2030-01-01")])
        b = ValidationResult(None, [ValidationIssue.negative_values("oil", 1, [], [-1.0])])
        merged = a.merge(b)
        assert merged.well_id == "W1"
        assert merged.error_count == 1
        assert merged.warning_count == 1
        assert len(a.issues) == 1  # Original untouched

    def test_codes_and_categories(self):
        result = ValidationResult("W1", [
            ValidationIssue.missing_volumes("gas", 2, []),
            ValidationIssue.duplicate_periods(1, []),
        ])
        assert result.codes == ["IV003", "IV005"]
        assert [i.category for i in result.issues] == [IssueCategory.VOLUMES, IssueCategory.PERIODS]
        assert result.issues[0].severity == IssueSeverity.INFO
        assert result.has_warnings
        assert not result.has_errors

    def test_issue_str(self):
        issue = ValidationIssue.future_dates(2, "2030-01-01")
        assert str(issue).startswith("[IV004] WARNING")
        assert "2030-01-01" in issue.message

    def test_details_capped(self):
        dates = [f"2020-{m:02d}-01" for m in range(1, 13)]
        issue = ValidationIssue.missing_volumes("oil", 12, dates)
        assert len(issue.details["dates"]) == 10
        assert issue.details["missing_count"] == 12

    def test_summarize(self):
        results = {
            "W1": ValidationResult("W1", [ValidationIssue.negative_values("oil", 1, [], [-1.0])]),
            "W2": ValidationResult("W2", [ValidationIssue.future_dates(1, "2030-01-01")]),
            "W3": ValidationResult("W3"),
        }
        summary = summarize_validation(results)
        assert summary["wells_with_errors"] == 1
        assert summary["wells_with_warnings"] == 1
        assert summary["by_code"] == {"IV001": 1, "IV004": 1}
        assert summary["by_category"] == {"VOLUMES": 1, "PERIODS": 1}
        assert summarize_validation(list(results.values())) == summary
