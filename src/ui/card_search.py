# src/ui/card_search.py
from __future__ import annotations

import html

import streamlit as st

from src.api.weather_lookup import WeatherConfigError
from src.session import get_session
from src.ui.common import card, section_title, value_card
from src.utils import report_error
from src.viewmodels.weather_cards import build_location_title, build_weather_cards
from src.viewmodels.weather_search import SearchState, run_city_search

QUERY_KEY = "city_query"


def _search_from_input() -> None:
    """on_change: Enter tekstikentässä käynnistää haun samoin kuin nappi."""
    query = str(st.session_state.get(QUERY_KEY, "") or "")
    if not query.strip():
        return
    session = get_session(st.session_state)
    run_city_search(session.lookup, query, session.search)


def render_search_results(state: SearchState) -> None:
    """Inline error or the location heading + four weather cards (2 × 2)."""
    if state.error:
        st.error(state.error)
        return
    if state.reading is None:
        return

    section_title(html.escape(build_location_title(state.reading)), mt=6, mb=6)
    cards = build_weather_cards(state.reading)
    for row in (cards[:2], cards[2:]):
        cols = st.columns(2, gap="small")
        for col, wc in zip(cols, row):
            with col:
                value_card(wc.title, html.escape(wc.value), wc.icon)


def card_search() -> None:
    """Render the city search box and the weather of the selected location."""
    try:
        session = get_session(st.session_state)
        section_title("🔎 Weather")

        query = st.text_input(
            "Enter City",
            key=QUERY_KEY,
            placeholder="e.g. Helsinki",
            on_change=_search_from_input,
        )
        if st.button("Search", type="primary", disabled=not (query or "").strip()):
            with st.spinner("Fetching weather..."):
                run_city_search(session.lookup, query, session.search)

        render_search_results(session.search)

    except WeatherConfigError as e:
        card("Weather", f"<span class='hint'>{html.escape(str(e))}</span>", height_dvh=10)
    except Exception as e:
        report_error("card_search", e)
        card("Weather", f"<span class='hint'>Error: {html.escape(str(e))}</span>", height_dvh=10)
