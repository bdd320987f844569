# src/api/abortable.py
"""
requests.Session, jonka keskeneräiset pyynnöt voi katkaista.

Session.close() only drops idle pooled connections; a request that is
already waiting for its response keeps its socket until the server answers
or the timeout expires. AbortableSession tracks every connection its pools
open and abort() shuts those sockets down, so a blocked read returns at once
and the request fails with requests.ConnectionError.
"""

from __future__ import annotations

import logging
import socket
import threading
import weakref
from collections.abc import Callable
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

logger = logging.getLogger("weathermap")


def _tracking_pool(
    base: type[HTTPConnectionPool], track: Callable[[Any], None]
) -> type[HTTPConnectionPool]:
    class TrackingPool(base):  # type: ignore[misc, valid-type]
        def _new_conn(self):
            conn = super()._new_conn()
            track(conn)
            return conn

    TrackingPool.__name__ = f"Tracking{base.__name__}"
    return TrackingPool


def _shutdown(conn: Any) -> None:
    sock = getattr(conn, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError as e:
        # yhteys ehti jo sulkeutua
        logger.debug("abort: socket already closed: %s", e)


class AbortableAdapter(HTTPAdapter):
    """HTTPAdapter that can shut down the sockets of requests in flight."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._conn_lock = threading.Lock()
        self._live: weakref.WeakSet[Any] = weakref.WeakSet()
        self._aborted = False
        super().__init__(*args, **kwargs)

    @property
    def aborted(self) -> bool:
        return self._aborted

    def init_poolmanager(self, *args: Any, **kwargs: Any) -> None:
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {
            "http": _tracking_pool(HTTPConnectionPool, self._track),
            "https": _tracking_pool(HTTPSConnectionPool, self._track),
        }

    def _track(self, conn: Any) -> None:
        connect = conn.connect

        def connect_then_check() -> None:
            connect()
            # abort() ehti ennen kuin socket oli olemassa
            if self._aborted:
                _shutdown(conn)

        conn.connect = connect_then_check
        with self._conn_lock:
            self._live.add(conn)

    def send(self, request: requests.PreparedRequest, *args: Any, **kwargs: Any) -> requests.Response:
        if self._aborted:
            raise requests.ConnectionError("session aborted", request=request)
        return super().send(request, *args, **kwargs)

    def abort(self) -> None:
        with self._conn_lock:
            self._aborted = True
            conns = list(self._live)
        for conn in conns:
            _shutdown(conn)
        if conns:
            logger.debug("abort: shut down %d connection(s)", len(conns))


class AbortableSession(requests.Session):
    """One per heat-map run; abort() is registered as the run's cancel callback."""

    def __init__(self) -> None:
        super().__init__()
        self._adapter = AbortableAdapter()
        self.mount("https://", self._adapter)
        self.mount("http://", self._adapter)

    @property
    def aborted(self) -> bool:
        return self._adapter.aborted

    def abort(self) -> None:
        self._adapter.abort()
