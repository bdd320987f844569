# src/map_surface.py
"""Map capability on top of folium: base map, heat overlays and the click marker."""

from __future__ import annotations

import folium
from folium.plugins import HeatMap

from src.config import (
    MAP_CENTER,
    MAP_MAX_ZOOM,
    MAP_MIN_ZOOM,
    MAP_TILES_ATTR,
    MAP_TILES_URL,
    MAP_ZOOM,
)


def create_base_map(
    center: tuple[float, float] = MAP_CENTER,
    zoom: int = MAP_ZOOM,
) -> folium.Map:
    """Fresh folium map; a new one is built on every Streamlit rerun."""
    return folium.Map(
        location=list(center),
        zoom_start=zoom,
        min_zoom=MAP_MIN_ZOOM,
        max_zoom=MAP_MAX_ZOOM,
        tiles=MAP_TILES_URL,
        attr=MAP_TILES_ATTR,
        zoom_control=True,
        scrollWheelZoom=True,
        world_copy_jump=True,
    )


class MapSurface:
    """Install/remove layers on one folium map."""

    def __init__(self, m: folium.Map | None = None) -> None:
        self._map = m if m is not None else create_base_map()
        self._marker: folium.Marker | None = None

    @property
    def handle(self) -> folium.Map:
        return self._map

    # --- overlays ---

    def install_overlay(self, layer: HeatMap) -> None:
        layer.add_to(self._map)

    def remove_overlay(self, layer: HeatMap) -> None:
        self._detach(layer)

    def overlays(self) -> list[HeatMap]:
        return [child for child in self._map._children.values() if isinstance(child, HeatMap)]

    # --- marker ---

    def place_marker(self, lat: float, lon: float, popup_text: str) -> folium.Marker:
        """Yksi merkki kerrallaan: vanha poistetaan ennen uutta."""
        self.remove_marker()
        popup = folium.Popup(
            f'<div style="text-align: center;">{popup_text}</div>',
            max_width=240,
        )
        self._marker = folium.Marker([lat, lon], popup=popup, tooltip=popup_text)
        self._marker.add_to(self._map)
        return self._marker

    def remove_marker(self) -> None:
        if self._marker is not None:
            self._detach(self._marker)
            self._marker = None

    @property
    def marker(self) -> folium.Marker | None:
        return self._marker

    def _detach(self, element: folium.MacroElement) -> None:
        self._map._children.pop(element.get_name(), None)
        element._parent = None
