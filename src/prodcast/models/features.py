"""Calendar features and forecast date helpers.

Every calendar-driven model sees the same inputs: a numeric date encoding
(days since 1970-01-01) and a one-hot month label with all twelve months
present, so training and forecast frames always line up.
"""

import numpy as np
import pandas as pd

EPOCH = pd.Timestamp("1970-01-01")
MONTH_COLUMNS = [f"month_{m:02d}" for m in range(1, 13)]
FEATURE_COLUMNS = ["date_num"] + MONTH_COLUMNS


def date_numeric(dates: pd.DatetimeIndex) -> np.ndarray:
    """Days since 1970-01-01 as floats."""
    dates = pd.DatetimeIndex(dates)
    return np.asarray((dates - EPOCH) / pd.Timedelta(days=1), dtype=float)


def calendar_features(dates: pd.DatetimeIndex) -> pd.DataFrame:
    """Feature frame indexed by ``dates`` with FEATURE_COLUMNS."""
    dates = pd.DatetimeIndex(dates)
    months = np.eye(12)[dates.month.to_numpy() - 1] if len(dates) else np.zeros((0, 12))
    features = pd.DataFrame(months, index=dates, columns=MONTH_COLUMNS)
    features.insert(0, "date_num", date_numeric(dates))
    return features


def infer_freq(index: pd.DatetimeIndex, default: str = "MS") -> str:
    """Frequency of ``index``, falling back to ``default`` when irregular or short."""
    if len(index) >= 3:
        freq = pd.infer_freq(index)
        if freq is not None:
            return freq
    return default


def future_dates(last_date: pd.Timestamp, horizon: int, freq: str = "MS") -> pd.DatetimeIndex:
    """The ``horizon`` consecutive periods immediately after ``last_date``."""
    offset = pd.tseries.frequencies.to_offset(freq)
    first = pd.Timestamp(last_date) + offset
    return pd.date_range(first, periods=horizon, freq=offset, name="date")
