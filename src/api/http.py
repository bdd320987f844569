# src/api/http.py
from typing import Any

import requests

from src.config import HTTP_TIMEOUT_S

USER_AGENT = "Weathermap/1.0 (+https://openweathermap.org/current)"


def http_get_json(
    url: str,
    params: dict[str, Any] | None = None,
    timeout: float = HTTP_TIMEOUT_S,
    session: requests.Session | None = None,
) -> dict[str, Any]:
    """GET a JSON document. Non-2xx responses raise requests.HTTPError.

    One request per call; callers decide what a failure means.
    """
    headers = {"User-Agent": USER_AGENT}
    getter = session.get if session is not None else requests.get
    resp = getter(url, params=params, timeout=timeout, headers=headers)
    resp.raise_for_status()
    data = resp.json()
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object from {url}, got {type(data).__name__}")
    return data
