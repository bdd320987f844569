# src/viewmodels/heatmap_summary.py
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from src.config import HEAT_GRADIENT, TEMP_SCALE_MAX_C, TEMP_SCALE_MIN_C
from src.heatmap.coordinator import HeatmapRun, RunState
from src.heatmap.normalize import TemperatureSample

SAMPLE_COLUMNS = ["latitude", "longitude", "temp_c", "intensity"]


def samples_to_frame(samples: Iterable[TemperatureSample]) -> pd.DataFrame:
    rows = [(s.latitude, s.longitude, s.raw_celsius, s.intensity) for s in samples]
    return pd.DataFrame(rows, columns=SAMPLE_COLUMNS)


def summarize_samples(samples: Iterable[TemperatureSample]) -> dict[str, Any]:
    """Count and min/mean/max °C; None values when there are no samples."""
    df = samples_to_frame(samples)
    if df.empty:
        return {"count": 0, "min_temp": None, "mean_temp": None, "max_temp": None}
    return {
        "count": int(len(df)),
        "min_temp": float(df["temp_c"].min()),
        "mean_temp": float(df["temp_c"].mean()),
        "max_temp": float(df["temp_c"].max()),
    }


def build_heatmap_status(run: HeatmapRun | None) -> dict[str, Any]:
    """
    Kokoaa kartan tilalaatikon tiedot ajosta:
    tila, eräedistyminen ja yhteenveto näytteistä.
    """
    if run is None:
        return {"state": None, "loading": False, "progress": 0.0, "label": "Heat map off"}

    state = run.state
    total = run.batches_total
    progress = (run.batches_done / total) if total else 0.0
    loading = state in (RunState.PENDING, RunState.FETCHING)

    if loading:
        label = "Loading temperature data..."
    elif state is RunState.CANCELLED:
        label = "Heat map cancelled"
    else:
        summary = summarize_samples(run.samples)
        if summary["count"]:
            label = (
                f"{summary['count']}/{run.points_total} points · "
                f"{round(summary['min_temp'])}°C … {round(summary['max_temp'])}°C "
                f"(mean {round(summary['mean_temp'])}°C)"
            )
        else:
            label = "No temperature data available"

    return {
        "state": state,
        "loading": loading,
        "progress": min(max(progress, 0.0), 1.0),
        "label": label,
    }


def legend_stops() -> list[tuple[str, str]]:
    """Gradient stops as (°C label, colour) pairs for the legend."""
    span = TEMP_SCALE_MAX_C - TEMP_SCALE_MIN_C
    return [
        (f"{round(TEMP_SCALE_MIN_C + fraction * span)}°C", color)
        for fraction, color in sorted(HEAT_GRADIENT.items())
    ]
