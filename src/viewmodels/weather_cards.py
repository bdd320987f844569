from __future__ import annotations

from dataclasses import dataclass

from src.api.weather_lookup import WeatherReading


@dataclass
class WeatherCard:
    """UI:lle valmis kortti yhdestä suureesta."""

    title: str
    value: str
    icon: str


def _condition_icon(condition: str) -> str:
    return "☀️" if condition == "Clear" else "☁️"


def build_location_title(reading: WeatherReading) -> str:
    if reading.country:
        return f"{reading.name}, {reading.country}"
    return reading.name


def build_weather_cards(reading: WeatherReading) -> list[WeatherCard]:
    """Temperature, humidity, wind and condition, in that order."""
    return [
        WeatherCard("Temperature", f"{round(reading.temperature_c)}°C", "🌡️"),
        WeatherCard("Humidity", f"{reading.humidity}%", "💧"),
        WeatherCard("Wind Speed", f"{reading.wind_speed:g} m/s", "💨"),
        WeatherCard("Weather", reading.condition or "—", _condition_icon(reading.condition)),
    ]
