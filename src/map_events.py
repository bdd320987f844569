# src/map_events.py
"""Map click subscriptions.

Handlers are registered with ClickEvents.subscribe(), which hands back a
Subscription; calling unsubscribe() on it detaches the handler.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger("weathermap")

ClickHandler = Callable[[float, float], None]


class Subscription:
    def __init__(self, events: ClickEvents, handler: ClickHandler) -> None:
        self._events = events
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._events._remove(self)


class ClickEvents:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subs: list[Subscription] = []
        self._last_click: tuple[float, float] | None = None

    def subscribe(self, handler: ClickHandler) -> Subscription:
        sub = Subscription(self, handler)
        with self._lock:
            self._subs.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subs:
                self._subs.remove(sub)

    def dispatch(self, lat: float, lon: float) -> int:
        """Call every live handler; returns how many were called."""
        with self._lock:
            subs = list(self._subs)
        for sub in subs:
            sub.handler(lat, lon)
        return len(subs)

    def dispatch_new(self, clicked: dict | None) -> bool:
        """
        streamlit-folium palauttaa viimeisimmän klikkauksen jokaisella
        rerunilla; välitetään vain uusi klikkaus.
        """
        if not clicked:
            return False
        try:
            point = (float(clicked["lat"]), float(clicked["lng"]))
        except (KeyError, TypeError, ValueError):
            logger.warning("ignoring malformed click payload: %r", clicked)
            return False
        if point == self._last_click:
            return False
        self._last_click = point
        self.dispatch(*point)
        return True
