# src/ui/card_map.py
from __future__ import annotations

import html

import streamlit as st
from streamlit_folium import st_folium

from src.api.weather_lookup import WeatherConfigError
from src.config import HEATMAP_POLL_S, MAP_HEIGHT_PX
from src.heatmap.coordinator import RunState
from src.heatmap.overlay import HeatOverlayRenderer
from src.map_surface import MapSurface
from src.session import DashboardSession, get_session
from src.ui.common import card, section_title
from src.utils import report_error
from src.viewmodels.heatmap_summary import build_heatmap_status, legend_stops

HEATMAP_TOGGLE_KEY = "heatmap_on"

INSTRUCTIONS_HTML = """
<div class="map-instructions">
  <div class="title">Click anywhere on the map</div>
  <div class="sub">Select any location to check its weather</div>
  <div class="sub">Heat map shows global temperature distribution</div>
</div>
"""


def _legend_html() -> str:
    stops = legend_stops()
    colors = ", ".join(color for _, color in stops)
    labels = "".join(f"<span>{label}</span>" for label, _ in stops)
    return (
        "<div class='heat-legend'>"
        f"<div class='bar' style='background:linear-gradient(to right, {colors});'></div>"
        f"<div class='labels'>{labels}</div>"
        "</div>"
    )


@st.fragment(run_every=HEATMAP_POLL_S)
def _heatmap_progress(session: DashboardSession) -> None:
    """Polls the running fetch; a finished fetch triggers a full rerun to draw the overlay."""
    status = build_heatmap_status(session.heatmap.current)
    if status["loading"]:
        st.progress(status["progress"], text=status["label"])
        return
    if status["state"] is RunState.RENDERING:
        st.rerun()
    st.caption(status["label"])


def build_map(session: DashboardSession, show_heatmap: bool) -> MapSurface:
    """Fresh folium map with this session's overlay and click marker."""
    surface = MapSurface()
    if show_heatmap:
        session.heatmap.render(HeatOverlayRenderer(surface))

    clicked = session.search.clicked
    if clicked is not None:
        label = session.search.clicked_label or "Loading..."
        surface.place_marker(clicked[0], clicked[1], html.escape(label))
    return surface


def card_map() -> None:
    """Render the world map with the temperature heat map and click-to-lookup."""
    try:
        session = get_session(st.session_state)
        section_title("🗺️ World weather")
        st.markdown(INSTRUCTIONS_HTML, unsafe_allow_html=True)

        show_heatmap = st.toggle("Show heat map", value=True, key=HEATMAP_TOGGLE_KEY)
        if show_heatmap:
            session.heatmap.ensure_started()
            if st.button("Refresh heat map"):
                session.heatmap.start()
        else:
            # kartta "irrotetaan": ajo perutaan ja overlay poistetaan
            session.heatmap.stop()

        surface = build_map(session, show_heatmap)
        out = st_folium(
            surface.handle,
            height=MAP_HEIGHT_PX,
            use_container_width=True,
            returned_objects=["last_clicked"],
            key="world_map",
        )

        if session.clicks.dispatch_new((out or {}).get("last_clicked")):
            st.rerun()

        if show_heatmap:
            _heatmap_progress(session)
            st.markdown(_legend_html(), unsafe_allow_html=True)

    except WeatherConfigError as e:
        card("World weather", f"<span class='hint'>{html.escape(str(e))}</span>", height_dvh=20)
    except Exception as e:
        report_error("card_map", e)
        card("World weather", f"<span class='hint'>Error: {html.escape(str(e))}</span>", height_dvh=20)
