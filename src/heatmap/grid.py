from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from src.config import (
    GRID_LAT_MAX,
    GRID_LAT_MIN,
    GRID_LON_MAX,
    GRID_LON_MIN,
    GRID_STEP_DEG,
)

T = TypeVar("T")


@dataclass(frozen=True)
class GridPoint:
    latitude: float
    longitude: float


def generate_grid(
    lat_min: int = GRID_LAT_MIN,
    lat_max: int = GRID_LAT_MAX,
    lon_min: int = GRID_LON_MIN,
    lon_max: int = GRID_LON_MAX,
    step: int = GRID_STEP_DEG,
) -> tuple[GridPoint, ...]:
    """Fixed sampling grid, latitude outer loop, longitude inner loop.

    Bounds are inclusive. Oletuksilla 7 × 19 = 133 pistettä.
    """
    return tuple(
        GridPoint(float(lat), float(lon))
        for lat in range(lat_min, lat_max + 1, step)
        for lon in range(lon_min, lon_max + 1, step)
    )


def partition_batches(items: Sequence[T], size: int) -> list[tuple[T, ...]]:
    """Contiguous, non-overlapping chunks of `size`; the last may be shorter."""
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    return [tuple(items[i : i + size]) for i in range(0, len(items), size)]
