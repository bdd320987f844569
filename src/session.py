# src/session.py
"""
Selainistunnon tila yhdessä oliossa.

DashboardSession owns everything that used to be global in a dashboard like
this: the API-key bound lookup client, the heat-map coordinator (and through
it the current run's cancel scope and overlay), the map click subscriptions
and the search state. One instance lives in st.session_state per browser tab.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import MutableMapping
from typing import Any

from src.api.weather_lookup import WeatherLookup, get_api_key
from src.heatmap.coordinator import HeatmapCoordinator
from src.map_events import ClickEvents, Subscription
from src.viewmodels.weather_search import SearchState, run_coordinate_lookup

logger = logging.getLogger("weathermap")

SESSION_KEY = "weathermap_session"


class DashboardSession:
    def __init__(
        self,
        lookup: WeatherLookup,
        coordinator: HeatmapCoordinator | None = None,
    ) -> None:
        self.lookup = lookup
        self.heatmap = coordinator or HeatmapCoordinator(lookup)
        self.clicks = ClickEvents()
        self.search = SearchState()
        self._subscriptions: list[Subscription] = [self.clicks.subscribe(self._on_map_click)]
        self.closed = False
        # Streamlit ei kerro välilehden sulkemisesta: kun session_state
        # pudottaa istunnon, roskienkeruu pysäyttää sen lämpökartan.
        self._stop_heatmap = weakref.finalize(self, self.heatmap.close)

    def _on_map_click(self, lat: float, lon: float) -> None:
        logger.info("map click at (%.3f, %.3f)", lat, lon)
        run_coordinate_lookup(self.lookup, lat, lon, self.search)

    def close(self) -> None:
        """Release click handlers and stop the heat map."""
        if self.closed:
            return
        for sub in self._subscriptions:
            sub.unsubscribe()
        self._subscriptions.clear()
        self._stop_heatmap()
        self.closed = True


def get_session(state: MutableMapping[str, Any]) -> DashboardSession:
    """Hae istunto session_statesta tai luo uusi (WeatherConfigError jos avain puuttuu).

    A session whose API key no longer matches the configured one (secrets are
    re-read on every rerun) is closed and replaced.
    """
    api_key = get_api_key()
    session = state.get(SESSION_KEY)
    if session is not None and not session.closed and session.lookup.api_key == api_key:
        return session
    if session is not None:
        logger.info("replacing dashboard session")
        session.close()
    session = DashboardSession(WeatherLookup(api_key))
    state[SESSION_KEY] = session
    return session
