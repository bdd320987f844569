from __future__ import annotations

import importlib
from types import SimpleNamespace
from unittest.mock import MagicMock

import folium

from src.api.weather_lookup import WeatherConfigError
from src.heatmap.coordinator import HeatmapCoordinator, RunState
from src.heatmap.grid import generate_grid
from src.session import DashboardSession

card_map_module = importlib.import_module("src.ui.card_map")


class DummySt:
    """Kevyt stub streamlitille card_map-testejä varten."""

    def __init__(self, heatmap_on: bool = True, refresh: bool = False):
        self.session_state: dict[str, object] = {}
        self.heatmap_on = heatmap_on
        self.refresh = refresh
        self.markdowns: list[str] = []
        self.reruns = 0

    def markdown(self, html, unsafe_allow_html=False):
        self.markdowns.append(html)

    def toggle(self, label, value=True, key=None):
        self.session_state[key] = self.heatmap_on
        return self.heatmap_on

    def button(self, label, **kw):
        return self.refresh

    def rerun(self):
        self.reruns += 1


class StubLookup:
    def __init__(self):
        self.clicks: list[tuple[float, float]] = []

    def bind(self, session):
        return self

    def lookup_by_coordinates(self, lat, lon, scope=None):
        if scope is None:
            self.clicks.append((lat, lon))
            name = "Rome"
        else:
            name = ""
        return SimpleNamespace(name=name, temperature_c=25.0)


def _session(lookup):
    coordinator = HeatmapCoordinator(
        lookup,
        grid_factory=lambda: generate_grid(lat_min=0, lat_max=0, lon_min=0, lon_max=20, step=20),
        delay_s=0,
        spawn=lambda fn: fn(),
        session_factory=MagicMock,
    )
    return DashboardSession(lookup, coordinator=coordinator)


def _setup(monkeypatch, dummy_st, session, clicked=None):
    captured: dict[str, object] = {}
    progress: list[object] = []

    def fake_st_folium(fmap, **kw):
        captured["map"] = fmap
        captured.update(kw)
        return {"last_clicked": clicked}

    monkeypatch.setattr(card_map_module, "st", dummy_st)
    monkeypatch.setattr(card_map_module, "get_session", lambda state: session)
    monkeypatch.setattr(card_map_module, "section_title", lambda *a, **k: None)
    monkeypatch.setattr(card_map_module, "st_folium", fake_st_folium)
    monkeypatch.setattr(card_map_module, "_heatmap_progress", lambda s: progress.append(s))
    return captured, progress


def _children(fmap, kind):
    return [c for c in fmap._children.values() if isinstance(c, kind)]


def test_map_with_heatmap_on_draws_overlay_and_legend(monkeypatch):
    from folium.plugins import HeatMap

    dummy_st = DummySt(heatmap_on=True)
    session = _session(StubLookup())
    captured, progress = _setup(monkeypatch, dummy_st, session)

    card_map_module.card_map()

    fmap = captured["map"]
    assert isinstance(fmap, folium.Map)
    assert captured["returned_objects"] == ["last_clicked"]
    layers = _children(fmap, HeatMap)
    assert len(layers) == 1
    assert layers[0].data == [[0.0, 0.0, 75.0], [0.0, 20.0, 75.0]]
    assert session.heatmap.current.state is RunState.DONE
    assert progress == [session]
    assert any("heat-legend" in m for m in dummy_st.markdowns)
    assert any("Click anywhere on the map" in m for m in dummy_st.markdowns)


def test_rerun_reuses_finished_run(monkeypatch):
    dummy_st = DummySt(heatmap_on=True)
    session = _session(StubLookup())
    _setup(monkeypatch, dummy_st, session)

    card_map_module.card_map()
    first = session.heatmap.current
    card_map_module.card_map()

    assert session.heatmap.current is first


def test_refresh_button_starts_new_run(monkeypatch):
    dummy_st = DummySt(heatmap_on=True)
    session = _session(StubLookup())
    _setup(monkeypatch, dummy_st, session)
    card_map_module.card_map()
    first = session.heatmap.current

    dummy_st.refresh = True
    card_map_module.card_map()

    assert session.heatmap.current is not first
    assert first.scope.cancelled


def test_heatmap_off_cancels_run_and_draws_plain_map(monkeypatch):
    from folium.plugins import HeatMap

    dummy_st = DummySt(heatmap_on=True)
    session = _session(StubLookup())
    captured, progress = _setup(monkeypatch, dummy_st, session)
    card_map_module.card_map()
    run = session.heatmap.current

    dummy_st.heatmap_on = False
    progress.clear()
    card_map_module.card_map()

    assert session.heatmap.current is None
    assert run.scope.cancelled
    assert _children(captured["map"], HeatMap) == []
    assert progress == []


def test_new_click_looks_up_weather_and_reruns(monkeypatch):
    dummy_st = DummySt(heatmap_on=False)
    lookup = StubLookup()
    session = _session(lookup)
    _setup(monkeypatch, dummy_st, session, clicked={"lat": 41.9, "lng": 12.5})

    card_map_module.card_map()

    assert lookup.clicks == [(41.9, 12.5)]
    assert session.search.clicked_label == "Rome"
    assert dummy_st.reruns == 1

    # sama klikkaus seuraavalla rerunilla ei käynnistä uutta hakua
    card_map_module.card_map()
    assert lookup.clicks == [(41.9, 12.5)]
    assert dummy_st.reruns == 1


def test_clicked_location_gets_single_marker(monkeypatch):
    dummy_st = DummySt(heatmap_on=False)
    session = _session(StubLookup())
    session.search.clicked = (41.9, 12.5)
    session.search.clicked_label = "Rome"
    captured, _ = _setup(monkeypatch, dummy_st, session)

    card_map_module.card_map()

    markers = _children(captured["map"], folium.Marker)
    assert len(markers) == 1
    assert list(markers[0].location) == [41.9, 12.5]


def test_missing_api_key_renders_hint_card(monkeypatch):
    dummy_st = DummySt()
    monkeypatch.setattr(card_map_module, "st", dummy_st)

    def no_key(state):
        raise WeatherConfigError("OpenWeatherMap API key missing")

    shown: list[tuple[str, str]] = []
    monkeypatch.setattr(card_map_module, "get_session", no_key)
    monkeypatch.setattr(
        card_map_module, "card", lambda title, body, height_dvh=16: shown.append((title, body))
    )

    card_map_module.card_map()

    assert shown and "API key missing" in shown[0][1]


def test_legend_lists_scale_labels():
    html = card_map_module._legend_html()
    assert "-20°C" in html and "40°C" in html
    assert "linear-gradient" in html
