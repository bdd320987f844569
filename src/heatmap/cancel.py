"""Structured cancellation for heat-map runs.

A CancelScope is passed down the call chain (coordinator → batch fetch →
lookup). Cancelling a scope cancels its children and fires its on-cancel
callbacks exactly once.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger("weathermap")


class OperationCancelled(Exception):
    """Raised inside an operation whose scope has been cancelled."""


class CancelScope:
    def __init__(self, parent: CancelScope | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self._children: list[CancelScope] = []
        self._parent = parent
        if parent is not None:
            parent._adopt(self)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def _adopt(self, child: CancelScope) -> None:
        with self._lock:
            if not self._event.is_set():
                self._children.append(child)
                return
        child.cancel()

    def _discard(self, child: CancelScope) -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def child(self) -> CancelScope:
        return CancelScope(parent=self)

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it.

        If the scope is already cancelled the callback runs immediately.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)

                def _remove() -> None:
                    with self._lock:
                        if callback in self._callbacks:
                            self._callbacks.remove(callback)

                return _remove
        callback()
        return lambda: None

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
            children, self._children = self._children, []

        if self._parent is not None:
            self._parent._discard(self)
        for child in children:
            child.cancel()
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("cancel callback failed")

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("scope cancelled")

    def sleep(self, seconds: float) -> bool:
        """Wait up to `seconds`; wakes early on cancel. True if still active."""
        if seconds > 0:
            self._event.wait(seconds)
        return not self._event.is_set()
