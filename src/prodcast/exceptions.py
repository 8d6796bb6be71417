"""Exception types raised by prodcast.

Load-time and argument problems subclass ``ValueError`` so callers that
already catch ``ValueError`` keep working.
"""


class ProdcastError(Exception):
    """Base class for all prodcast errors."""


class DataFormatError(ProdcastError, ValueError):
    """Input file cannot be interpreted (columns, dates, file type)."""


class InvalidInputError(ProdcastError, ValueError):
    """A stage received input it cannot work with (e.g. an empty series)."""


class ModelFitError(ProdcastError):
    """A forecasting model failed to fit or to produce a forecast.

    Attributes:
        model_name: Name of the model that failed
    """

    def __init__(self, model_name: str, message: str):
        self.model_name = model_name
        super().__init__(f"{model_name}: {message}")
