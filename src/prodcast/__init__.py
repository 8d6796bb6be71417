"""prodcast: well production cleaning, model comparison and forecasting."""

__version__ = "0.1.0"
