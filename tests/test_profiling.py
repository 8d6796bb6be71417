"""Tests for well profiling and eligibility."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from prodcast.core.eligibility import eligible_wells, filter_records
from prodcast.core.profiling import (
    WellProfile,
    gas_decline_terms,
    gas_oil_ratios,
    profile_well,
    profile_wells,
    profiles_to_frame,
)


def _well(oil, gas, start="2020-01-01", well_id="W1"):
    n = len(oil)
    return pd.DataFrame({
        "well_id": [well_id] * n,
        "date": pd.date_range(start, periods=n, freq="MS"),
        "oil": np.asarray(oil, dtype=float),
        "gas": np.asarray(gas, dtype=float),
    })


class TestGasOilRatio:
    """Tests for the average gas/oil ratio."""

    def test_simple_average(self):
        profile = profile_well("W1", _well([10, 20], [100, 400]))
        assert profile.avg_gas_oil_ratio == pytest.approx(15.0)

    def test_zero_and_missing_oil_ignored(self):
        profile = profile_well("W1", _well([10, 0, np.nan], [100, 50, 70]))
        assert profile.avg_gas_oil_ratio == pytest.approx(10.0)

    def test_no_finite_ratio_is_nan(self):
        profile = profile_well("W1", _well([0, 0], [100, 50]))
        assert np.isnan(profile.avg_gas_oil_ratio)

    def test_ratios_array(self):
        ratios = gas_oil_ratios(np.array([2.0, 0.0]), np.array([4.0, 1.0]))
        assert ratios[0] == 2.0
        assert not np.isfinite(ratios[1])


class TestGasDecline:
    """Tests for the average monthly gas decline rate."""

    def test_constant_gas_is_zero(self):
        profile = profile_well("W1", _well([5] * 6, [300] * 6))
        assert profile.avg_monthly_gas_decline_rate == 0.0

    def test_fractional_change_mean(self):
        # (90-100)/100 = -0.1, (81-90)/90 = -0.1
        profile = profile_well("W1", _well([1, 1, 1], [100, 90, 81]))
        assert profile.avg_monthly_gas_decline_rate == pytest.approx(-0.1)

    def test_zero_denominator_excluded(self):
        # terms: (0-100)/100 = -1, (50-0)/0 = inf (excluded), (25-50)/50 = -0.5
        terms = gas_decline_terms(np.array([100.0, 0.0, 50.0, 25.0]))
        assert np.isfinite(terms).sum() == 2

        profile = profile_well("W1", _well([1, 1, 1, 1], [100, 0, 50, 25]))
        assert profile.avg_monthly_gas_decline_rate == pytest.approx(-0.75)

    def test_single_record_is_nan(self):
        profile = profile_well("W1", _well([5], [300]))
        assert np.isnan(profile.avg_monthly_gas_decline_rate)
        assert profile.months_of_production == 1

    def test_all_terms_undefined_is_nan(self):
        profile = profile_well("W1", _well([1, 1, 1], [0, 0, 0]))
        assert np.isnan(profile.avg_monthly_gas_decline_rate)


class TestProfileWells:
    """Tests for profiling a record table."""

    def test_month_count_equals_records(self, three_wells):
        profiles = profile_wells(three_wells)
        assert set(profiles) == {"W1", "W2", "W3"}
        for well_id, profile in profiles.items():
            assert profile.months_of_production == (three_wells["well_id"] == well_id).sum()

    def test_periods_and_totals(self, three_wells):
        profile = profile_wells(three_wells)["W2"]
        rows = three_wells[three_wells["well_id"] == "W2"]
        assert profile.first_period == date(2016, 1, 1)
        assert profile.last_period == date(2018, 6, 1)
        assert profile.total_oil == pytest.approx(rows["oil"].sum())

    def test_unsorted_input(self):
        records = _well([1, 1, 1], [100, 90, 81]).iloc[::-1]
        profile = profile_well("W1", records)
        assert profile.first_period == date(2020, 1, 1)
        assert profile.avg_monthly_gas_decline_rate == pytest.approx(-0.1)

    def test_profiles_to_frame(self, three_wells):
        frame = profiles_to_frame(profile_wells(three_wells))
        assert list(frame.columns) == list(WellProfile.__dataclass_fields__)
        assert frame["well_id"].tolist() == ["W1", "W2", "W3"]


class TestEligibility:
    """Tests for the eligibility filter."""

    def test_eligible_wells(self, three_wells):
        profiles = profile_wells(three_wells)
        assert eligible_wells(profiles, 24) == ["W1", "W2"]
        assert eligible_wells(profiles, 31) == ["W1"]
        assert eligible_wells(profiles, 1) == ["W1", "W2", "W3"]

    def test_threshold_is_inclusive(self):
        profiles = profile_wells(_well([1] * 24, [1] * 24))
        assert eligible_wells(profiles, 24) == ["W1"]

    def test_filter_drops_zero_negative_and_missing(self):
        records = _well([10, 0, 10, 10, np.nan], [5, 5, 0, -1, 5])
        filtered = filter_records(records, ["W1"])
        assert len(filtered) == 1
        assert filtered.loc[0, "date"] == pd.Timestamp("2020-01-01")

    def test_filter_keeps_only_given_wells(self, three_wells):
        filtered = filter_records(three_wells, ["W1", "W2"])
        assert set(filtered["well_id"]) == {"W1", "W2"}
        assert len(filtered) == 66

    def test_filter_without_volume_exclusion(self):
        records = _well([10, 0], [5, 5])
        assert len(filter_records(records, ["W1"], exclude_zero_volumes=False)) == 2

    def test_input_not_modified(self, three_wells):
        before = three_wells.copy()
        filter_records(three_wells, ["W1"])
        pd.testing.assert_frame_equal(three_wells, before)
