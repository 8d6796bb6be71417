"""Shared fixtures: synthetic production records."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest


def make_well_frame(
    well_id: str,
    start: str,
    months: int,
    oil0: float = 1000.0,
    gas0: float = 5000.0,
    decline: float = 0.03,
    seed: int = 0,
) -> pd.DataFrame:
    """Monthly records for one well with exponential decline and mild noise."""
    rng = np.random.default_rng(seed)
    dates = pd.date_range(start, periods=months, freq="MS")
    t = np.arange(months)
    season = 1 + 0.05 * np.sin(2 * np.pi * t / 12)
    oil = oil0 * np.exp(-decline * t) * season * rng.uniform(0.97, 1.03, months)
    gas = gas0 * np.exp(-decline * t) * season * rng.uniform(0.97, 1.03, months)
    return pd.DataFrame({
        "well_id": well_id,
        "date": dates,
        "oil": np.round(oil, 1),
        "gas": np.round(gas, 1),
    })


@pytest.fixture
def three_wells() -> pd.DataFrame:
    """Two long-lived wells (36 and 30 months) and one 10-month well."""
    frames = [
        make_well_frame("W1", "2015-01-01", 36, seed=1),
        make_well_frame("W2", "2016-01-01", 30, oil0=800.0, gas0=3000.0, seed=2),
        make_well_frame("W3", "2017-01-01", 10, oil0=500.0, gas0=2000.0, seed=3),
    ]
    records = pd.concat(frames, ignore_index=True)
    return records.sort_values(["well_id", "date"]).reset_index(drop=True)


@pytest.fixture
def three_wells_csv(tmp_path, three_wells) -> Path:
    """``three_wells`` written as a CSV with ISO dates."""
    path = tmp_path / "production.csv"
    frame = three_wells.copy()
    frame["date"] = frame["date"].dt.strftime("%Y-%m-%d")
    frame.to_csv(path, index=False)
    return path


@pytest.fixture
def monthly_series() -> pd.Series:
    """48 months of declining seasonal production."""
    dates = pd.date_range("2012-01-01", periods=48, freq="MS", name="date")
    t = np.arange(48)
    values = 10000 * np.exp(-0.02 * t) * (1 + 0.08 * np.sin(2 * np.pi * t / 12))
    rng = np.random.default_rng(42)
    return pd.Series(values * rng.uniform(0.98, 1.02, 48), index=dates, name="oil")
