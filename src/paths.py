"""
paths.py – Weathermapin hakemistot.

Polut lasketaan tämän tiedoston sijainnista, joten `streamlit run main.py`
toimii mistä tahansa työhakemistosta.
"""

from __future__ import annotations

from pathlib import Path

# src/paths.py -> projektin juuri
ROOT_DIR = Path(__file__).resolve().parents[1]

ASSETS = ROOT_DIR / "assets"
LOGS = ROOT_DIR / "logs"


def asset_path(name: str) -> Path:
    """Tiedosto assets-kansiosta (esim. style.css)."""
    return ASSETS / name


def ensure_dirs() -> None:
    LOGS.mkdir(parents=True, exist_ok=True)
