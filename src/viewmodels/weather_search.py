from __future__ import annotations

import logging
from dataclasses import dataclass

from src.api.weather_lookup import WeatherLookup, WeatherLookupError, WeatherReading
from src.config import SEARCH_ERROR_TEXT, UNKNOWN_LOCATION

logger = logging.getLogger("weathermap")


@dataclass
class SearchState:
    """Hakukortin tila: viimeisin onnistunut lukema tai virheilmoitus."""

    query: str = ""
    reading: WeatherReading | None = None
    error: str | None = None
    clicked: tuple[float, float] | None = None
    clicked_label: str | None = None


def run_city_search(lookup: WeatherLookup, query: str, state: SearchState) -> SearchState:
    """Search by city name. Failure clears the previous reading and sets the error."""
    query = (query or "").strip()
    if not query:
        return state

    state.query = query
    state.error = None
    try:
        state.reading = lookup.lookup_by_city(query)
    except WeatherLookupError as e:
        logger.info("city search failed for %r: %s", query, e)
        state.reading = None
        state.error = SEARCH_ERROR_TEXT
    return state


def run_coordinate_lookup(
    lookup: WeatherLookup, lat: float, lon: float, state: SearchState
) -> SearchState:
    """Map click: weather for the clicked point plus a label for its marker.

    A failed lookup only labels the marker; the search card keeps what it shows.
    """
    state.clicked = (lat, lon)
    try:
        reading = lookup.lookup_by_coordinates(lat, lon)
    except WeatherLookupError as e:
        logger.warning("lookup failed for (%s, %s): %s", lat, lon, e)
        state.clicked_label = UNKNOWN_LOCATION
        return state

    state.error = None
    state.reading = reading
    state.clicked_label = reading.name or UNKNOWN_LOCATION
    if reading.name:
        state.query = reading.name
    return state
