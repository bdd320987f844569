from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from src.config import INTENSITY_MAX, TEMP_SCALE_MAX_C, TEMP_SCALE_MIN_C
from src.heatmap.grid import GridPoint


def normalize(celsius: float) -> float:
    """Map °C linearly onto 0..100: -20 °C → 0, 40 °C → 100, clamped outside."""
    span = TEMP_SCALE_MAX_C - TEMP_SCALE_MIN_C
    fraction = min(max((celsius - TEMP_SCALE_MIN_C) / span, 0.0), 1.0)
    return fraction * INTENSITY_MAX


@dataclass(frozen=True)
class TemperatureSample:
    latitude: float
    longitude: float
    raw_celsius: float
    intensity: float

    @classmethod
    def from_reading(cls, point: GridPoint, celsius: float) -> TemperatureSample:
        return cls(point.latitude, point.longitude, float(celsius), normalize(celsius))


def heat_points(samples: Iterable[TemperatureSample]) -> list[list[float]]:
    """Samples as leaflet.heat triples [lat, lon, intensity]."""
    return [[s.latitude, s.longitude, s.intensity] for s in samples]
