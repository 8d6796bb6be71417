"""Model registry: builds the configured models by name."""

from ..config import MODEL_NAMES, ModelParams
from ..exceptions import InvalidInputError
from .arima import ArimaModel
from .base import ForecastModel
from .boosted import BoostedModel
from .linear import ElasticNetModel
from .prophet_model import ProphetModel


def _arima(params: ModelParams, level: float, freq: str) -> ArimaModel:
    return ArimaModel(
        level=level, freq=freq,
        max_p=params.max_p, max_d=params.max_d, max_q=params.max_q,
        seasonal_period=params.seasonal_period,
    )


def _prophet(params: ModelParams, level: float, freq: str) -> ProphetModel:
    return ProphetModel(
        level=level, freq=freq,
        yearly_seasonality=params.yearly_seasonality,
        changepoint_prior_scale=params.changepoint_prior_scale,
    )


def _boost(base: ForecastModel, params: ModelParams, level: float, freq: str) -> BoostedModel:
    return BoostedModel(
        base, level=level, freq=freq,
        n_estimators=params.n_estimators, learning_rate=params.learning_rate,
        max_depth=params.max_depth, random_state=params.random_state,
    )


def build_model(
    name: str,
    params: ModelParams | None = None,
    level: float = 0.95,
    freq: str = "MS",
) -> ForecastModel:
    """Build one model by registry name.

    Args:
        name: One of MODEL_NAMES
        params: Model parameters (defaults if None)
        level: Confidence level of forecast bands
        freq: Fallback series frequency

    Raises:
        InvalidInputError: If the name is not registered
    """
    params = params or ModelParams()
    if name == "arima":
        return _arima(params, level, freq)
    if name == "arima_boost":
        return _boost(_arima(params, level, freq), params, level, freq)
    if name == "prophet":
        return _prophet(params, level, freq)
    if name == "prophet_boost":
        return _boost(_prophet(params, level, freq), params, level, freq)
    if name == "elastic_net":
        return ElasticNetModel(
            level=level, freq=freq, alpha=params.alpha, l1_ratio=params.l1_ratio,
        )
    raise InvalidInputError(
        f"Unknown model {name!r}; valid models: {', '.join(MODEL_NAMES)}"
    )


def build_models(
    names: list[str] | tuple[str, ...] = MODEL_NAMES,
    params: ModelParams | None = None,
    level: float = 0.95,
    freq: str = "MS",
) -> list[ForecastModel]:
    """Build the named models in order.

    Raises:
        InvalidInputError: If no names are given or any name is unknown
    """
    if not names:
        raise InvalidInputError("At least one model name is required")
    return [build_model(name, params, level, freq) for name in names]
