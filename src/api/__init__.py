# src/api/__init__.py
from .weather_lookup import (
    WeatherConfigError as WeatherConfigError,
    WeatherLookup as WeatherLookup,
    WeatherLookupError as WeatherLookupError,
    WeatherReading as WeatherReading,
    get_api_key as get_api_key,
)
