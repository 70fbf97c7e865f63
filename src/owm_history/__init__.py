"""Typed client for the OpenWeatherMap historical weather endpoint."""

from .config import Settings, load_settings
from .exceptions import (
    ConfigError,
    DataUnitError,
    HistoryDecodeError,
    HistoryRequestError,
    InvalidInputError,
    OWMError,
)
from .history import HistoricalClient
from .models import (
    Coordinates,
    HistoricalParameters,
    HistoricalWeatherResponse,
    WeatherHistory,
)
from .units import DATA_UNITS, valid_data_unit

__all__ = [
    "DATA_UNITS",
    "ConfigError",
    "Coordinates",
    "DataUnitError",
    "HistoricalClient",
    "HistoricalParameters",
    "HistoricalWeatherResponse",
    "HistoryDecodeError",
    "HistoryRequestError",
    "InvalidInputError",
    "OWMError",
    "Settings",
    "WeatherHistory",
    "load_settings",
    "valid_data_unit",
]
