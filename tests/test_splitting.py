"""Tests for train/test splitting and rolling-origin plans."""

import pandas as pd
import pytest

from prodcast.core.splitting import resolve_test_window, rolling_origin_plans, split_series
from prodcast.exceptions import InvalidInputError


def _series(n):
    dates = pd.date_range("2018-01-01", periods=n, freq="MS", name="date")
    return pd.Series(range(n), index=dates, dtype=float, name="oil")


class TestSplitSeries:
    """Tests for split_series."""

    @pytest.mark.parametrize("n, periods", [(13, 12), (24, 12), (48, 1), (5, 4)])
    def test_fixed_window_reconstructs(self, n, periods):
        series = _series(n)
        plan = split_series(series, test_periods=periods)
        assert plan.n_test == periods
        assert plan.n_train == n - periods
        pd.testing.assert_series_equal(plan.reconstruct(), series, check_freq=False)

    @pytest.mark.parametrize("n, fraction, expected", [
        (10, 0.2, 2),
        (11, 0.2, 3),   # ceil(2.2)
        (36, 0.2, 8),   # ceil(7.2)
        (30, 0.2, 6),
        (3, 0.5, 2),    # ceil(1.5)
    ])
    def test_fraction_rounds_up(self, n, fraction, expected):
        plan = split_series(_series(n), test_fraction=fraction)
        assert plan.n_test == expected
        pd.testing.assert_series_equal(plan.reconstruct(), _series(n), check_freq=False)

    def test_contiguous_no_overlap(self):
        plan = split_series(_series(24), test_periods=6)
        assert plan.train_end < plan.test_start
        assert plan.test_start == plan.train_end + pd.offsets.MonthBegin(1)
        assert not plan.training.index.intersection(plan.testing.index).size

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError, match="empty"):
            split_series(_series(0), test_periods=1)

    def test_window_too_large(self):
        with pytest.raises(InvalidInputError, match="no training data"):
            split_series(_series(12), test_periods=12)

    def test_fraction_leaving_no_training(self):
        with pytest.raises(InvalidInputError, match="no training data"):
            split_series(_series(1), test_fraction=0.2)

    def test_both_parameters_rejected(self):
        with pytest.raises(InvalidInputError, match="exactly one"):
            split_series(_series(24), test_periods=6, test_fraction=0.2)

    def test_neither_parameter_rejected(self):
        with pytest.raises(InvalidInputError, match="exactly one"):
            split_series(_series(24))

    def test_zero_window_rejected(self):
        with pytest.raises(InvalidInputError, match="at least 1"):
            split_series(_series(24), test_periods=0)

    def test_bad_fraction_rejected(self):
        with pytest.raises(InvalidInputError, match="between 0 and 1"):
            resolve_test_window(24, test_fraction=1.5)


class TestRollingOriginPlans:
    """Tests for rolling_origin_plans."""

    def test_slices_move_back(self):
        plans = rolling_origin_plans(_series(48), test_periods=12, slices=4, skip=6)
        assert [p.slice_id for p in plans] == [0, 1, 2, 3]
        assert [p.n_train for p in plans] == [36, 30, 24, 18]
        assert all(p.n_test == 12 for p in plans)
        assert plans[0].testing.index[-1] == _series(48).index[-1]

    def test_first_slice_matches_split(self):
        series = _series(30)
        plan = split_series(series, test_periods=6)
        first = rolling_origin_plans(series, test_periods=6)[0]
        pd.testing.assert_series_equal(first.training, plan.training)
        pd.testing.assert_series_equal(first.testing, plan.testing)

    def test_stops_when_training_runs_out(self):
        plans = rolling_origin_plans(_series(20), test_periods=6, slices=4, skip=6)
        assert [p.n_train for p in plans] == [14, 8, 2]

    def test_too_short_raises(self):
        with pytest.raises(InvalidInputError, match="too short"):
            rolling_origin_plans(_series(6), test_periods=6)

    def test_invalid_arguments(self):
        with pytest.raises(InvalidInputError):
            rolling_origin_plans(_series(24), test_periods=6, skip=0)
