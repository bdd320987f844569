# config.py
"""Configuration settings for the Weathermap dashboard."""

import os
from collections.abc import Mapping

import streamlit as st

HTTP_TIMEOUT_S: float = 8.0

DEV: bool = os.environ.get("DEV", "0") == "1"

# ------------------- OPENWEATHERMAP -------------------

OWM_WEATHER_URL: str = "https://api.openweathermap.org/data/2.5/weather"
"""Current weather endpoint (one GET per lookup)."""

OWM_UNITS: str = "metric"
"""Units requested from OpenWeatherMap (°C, m/s)."""

OWM_API_KEY_NAME: str = "OPENWEATHER_API_KEY"
"""Name of the API key in secrets.toml or the environment."""

# ------------------- HEAT MAP GRID -------------------

GRID_LAT_MIN: int = -60
GRID_LAT_MAX: int = 60
GRID_LON_MIN: int = -180
GRID_LON_MAX: int = 180
GRID_STEP_DEG: int = 20
"""Sampling grid bounds (inclusive) and step in degrees."""

HEATMAP_BATCH_SIZE: int = 8
"""Grid points fetched concurrently per batch."""

HEATMAP_BATCH_DELAY_S: float = 1.5
"""Pause between batches to stay under the API rate limit."""

HEATMAP_POLL_S: float = 2.0
"""How often the progress box re-checks a running heat-map fetch."""

# ------------------- NORMALIZATION -------------------

TEMP_SCALE_MIN_C: float = -20.0
TEMP_SCALE_MAX_C: float = 40.0
"""Temperature range mapped linearly onto intensity 0..100."""

INTENSITY_MAX: float = 100.0

# ------------------- HEAT OVERLAY STYLE -------------------

HEAT_RADIUS: int = 40
HEAT_BLUR: int = 20
HEAT_MAX_ZOOM: int = 10
HEAT_MIN_OPACITY: float = 0.3

HEAT_GRADIENT: dict[float, str] = {
    0.0: "#2c7bb6",  # kylmä (sininen)
    0.2: "#81b9df",
    0.4: "#c7e8ad",
    0.6: "#ffed6f",  # keltainen
    0.8: "#f46d43",
    1.0: "#d73027",  # kuuma (punainen)
}
"""Cold-blue → yellow → hot-red gradient keyed by intensity fraction."""

# ------------------- MAP -------------------

MAP_CENTER: tuple[float, float] = (20.0, 0.0)
MAP_ZOOM: int = 2
MAP_MIN_ZOOM: int = 2
MAP_MAX_ZOOM: int = 18
MAP_HEIGHT_PX: int = 640

MAP_TILES_URL: str = "https://{s}.basemaps.cartocdn.com/rastertiles/voyager_labels_under/{z}/{x}/{y}.png"
MAP_TILES_ATTR: str = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'
    ' &copy; <a href="https://carto.com/attributions">CARTO</a>'
)

UNKNOWN_LOCATION: str = "Unknown Location"

# ------------------- UI TEXTS -------------------

SEARCH_ERROR_TEXT: str = (
    "Failed to fetch weather data. Please check the city name and try again."
)


def get_secret(name: str, section: str | None = None, key: str | None = None) -> str | None:
    """Hae asetus Streamlit secretsista tai ympäristömuuttujasta."""
    try:
        if name in st.secrets:
            secret_val = st.secrets.get(name)
            if secret_val is not None and str(secret_val).strip():
                return str(secret_val).strip()

        if section and key:
            sub = st.secrets.get(section)
            if isinstance(sub, Mapping):
                sub_val = sub.get(key)
                if sub_val is not None and str(sub_val).strip():
                    return str(sub_val).strip()
    except Exception:
        # secrets.toml puuttuu tai on rikki -> jatketaan ympäristömuuttujiin
        pass

    val = os.getenv(name)
    if val is not None and val.strip():
        return val.strip()

    return None
