# src/api/weather_lookup.py
"""
Weather Lookup: one OpenWeatherMap GET per call.

Used by the search box, the map click handler and the heat-map pipeline.
Every failure (network, rate limit, not found, broken payload) surfaces as
WeatherLookupError; callers treat all of them as "unavailable".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from src.api.http import http_get_json
from src.config import (
    HTTP_TIMEOUT_S,
    OWM_API_KEY_NAME,
    OWM_UNITS,
    OWM_WEATHER_URL,
    get_secret,
)
from src.heatmap.cancel import CancelScope, OperationCancelled


class WeatherLookupError(RuntimeError):
    """Raised when a weather lookup fails for any reason."""


class WeatherConfigError(RuntimeError):
    """Heitetään, jos OpenWeatherMap API-avain puuttuu."""


@dataclass(frozen=True)
class WeatherReading:
    name: str
    country: str
    temperature_c: float
    humidity: int
    wind_speed: float
    condition: str
    latitude: float | None = None
    longitude: float | None = None


def parse_reading(payload: dict[str, Any]) -> WeatherReading:
    """Map an OpenWeatherMap /weather payload to a WeatherReading."""
    try:
        main = payload["main"]
        conditions = payload.get("weather") or []
        coord = payload.get("coord") or {}
        return WeatherReading(
            name=str(payload.get("name") or ""),
            country=str((payload.get("sys") or {}).get("country") or ""),
            temperature_c=float(main["temp"]),
            humidity=int(main["humidity"]),
            wind_speed=float(payload["wind"]["speed"]),
            condition=str(conditions[0]["main"]) if conditions else "",
            latitude=float(coord["lat"]) if "lat" in coord else None,
            longitude=float(coord["lon"]) if "lon" in coord else None,
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise WeatherLookupError(f"malformed weather payload: {e!r}") from e


def get_api_key() -> str:
    key = get_secret(OWM_API_KEY_NAME, section="openweather", key="api_key")
    if not key:
        raise WeatherConfigError(
            f"OpenWeatherMap API key missing: set {OWM_API_KEY_NAME} in secrets.toml or the environment"
        )
    return key


class WeatherLookup:
    """OpenWeatherMap current-weather client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = OWM_WEATHER_URL,
        timeout: float = HTTP_TIMEOUT_S,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.session = session

    def bind(self, session: requests.Session) -> WeatherLookup:
        """Same key and endpoint, requests go through the given session."""
        return WeatherLookup(self.api_key, self.base_url, self.timeout, session)

    def lookup_by_city(self, name: str) -> WeatherReading:
        name = (name or "").strip()
        if not name:
            raise WeatherLookupError("empty city name")
        return self._lookup({"q": name})

    def lookup_by_coordinates(
        self, lat: float, lon: float, scope: CancelScope | None = None
    ) -> WeatherReading:
        return self._lookup({"lat": lat, "lon": lon}, scope=scope)

    def _lookup(self, query: dict[str, Any], scope: CancelScope | None = None) -> WeatherReading:
        if scope is not None:
            scope.raise_if_cancelled()

        params = {**query, "appid": self.api_key, "units": OWM_UNITS}
        try:
            payload = http_get_json(
                self.base_url, params=params, timeout=self.timeout, session=self.session
            )
        except (requests.RequestException, ValueError) as e:
            # suljettu sessio peruutuksen jälkeen näkyy verkkovirheenä
            if scope is not None and scope.cancelled:
                raise OperationCancelled("lookup aborted") from e
            raise WeatherLookupError(f"weather lookup failed for {query}: {e}") from e

        if scope is not None:
            scope.raise_if_cancelled()
        return parse_reading(payload)
