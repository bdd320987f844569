from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field

from folium.plugins import HeatMap

from src.config import (
    HEAT_BLUR,
    HEAT_GRADIENT,
    HEAT_MAX_ZOOM,
    HEAT_MIN_OPACITY,
    HEAT_RADIUS,
    INTENSITY_MAX,
)
from src.map_surface import MapSurface

OVERLAY_NAME = "Temperature"


@dataclass(frozen=True)
class HeatStyle:
    radius: int = HEAT_RADIUS
    blur: int = HEAT_BLUR
    max_zoom: int = HEAT_MAX_ZOOM
    max_intensity: float = INTENSITY_MAX
    min_opacity: float = HEAT_MIN_OPACITY
    gradient: dict[float, str] = field(default_factory=lambda: dict(HEAT_GRADIENT))


def build_heat_layer(points: Sequence[Sequence[float]], style: HeatStyle) -> HeatMap:
    """leaflet.heat layer for [lat, lon, intensity] triples."""
    return HeatMap(
        [list(p) for p in points],
        name=OVERLAY_NAME,
        radius=style.radius,
        blur=style.blur,
        max_zoom=style.max_zoom,
        min_opacity=style.min_opacity,
        gradient=style.gradient,
        max=style.max_intensity,
    )


class HeatOverlayRenderer:
    """Keeps at most one heat overlay on its map surface."""

    def __init__(self, surface: MapSurface, style: HeatStyle | None = None) -> None:
        self.surface = surface
        self.style = style or HeatStyle()
        self._layer: HeatMap | None = None
        self._lock = threading.Lock()

    @property
    def layer(self) -> HeatMap | None:
        return self._layer

    def render(self, points: Sequence[Sequence[float]]) -> HeatMap:
        with self._lock:
            if self._layer is not None:
                self.surface.remove_overlay(self._layer)
                self._layer = None
            layer = build_heat_layer(points, self.style)
            self.surface.install_overlay(layer)
            self._layer = layer
            return layer

    def clear(self) -> None:
        with self._lock:
            if self._layer is not None:
                self.surface.remove_overlay(self._layer)
                self._layer = None
