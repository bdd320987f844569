"""
Batched temperature fetch for the heat map.

The grid goes through the Weather Lookup in fixed-size batches:
  * batches run strictly one after another
  * inside a batch every lookup is submitted at once and awaited together
  * the scope is checked before each batch and woken during the pause
  * a failing point is logged and dropped, never retried
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any

from src.config import HEATMAP_BATCH_DELAY_S, HEATMAP_BATCH_SIZE
from src.heatmap.cancel import CancelScope, OperationCancelled
from src.heatmap.grid import GridPoint, partition_batches
from src.heatmap.normalize import TemperatureSample

logger = logging.getLogger("weathermap")


class FetchStatus(enum.Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass
class FetchResult:
    samples: list[TemperatureSample] = field(default_factory=list)
    status: FetchStatus = FetchStatus.COMPLETED
    batches_done: int = 0
    batches_total: int = 0

    @property
    def cancelled(self) -> bool:
        return self.status is FetchStatus.CANCELLED


def _fetch_point(lookup: Any, point: GridPoint, scope: CancelScope) -> TemperatureSample | None:
    try:
        reading = lookup.lookup_by_coordinates(point.latitude, point.longitude, scope=scope)
    except OperationCancelled:
        return None
    except Exception as e:
        if scope.cancelled:
            return None
        logger.warning(
            "heatmap: skipping point (%s, %s): %s: %s",
            point.latitude,
            point.longitude,
            type(e).__name__,
            e,
        )
        return None
    return TemperatureSample.from_reading(point, reading.temperature_c)


def fetch_temperature_samples(
    grid: Sequence[GridPoint],
    scope: CancelScope,
    lookup: Any,
    *,
    batch_size: int = HEATMAP_BATCH_SIZE,
    delay_s: float = HEATMAP_BATCH_DELAY_S,
    on_batch: Callable[[int, int], None] | None = None,
) -> FetchResult:
    """
    Hakee lämpötilat gridin pisteille eräajona.

    `lookup` needs a `lookup_by_coordinates(lat, lon, scope=...)` method
    returning an object with `temperature_c`. Samples come back in grid
    order with failed points left out.
    """
    batches = partition_batches(grid, batch_size)
    result = FetchResult(batches_total=len(batches))
    if not batches:
        return result

    # pool is shut down (all futures settled) before returning
    with ThreadPoolExecutor(max_workers=batch_size, thread_name_prefix="heatmap") as pool:
        for index, batch in enumerate(batches):
            if scope.cancelled:
                result.status = FetchStatus.CANCELLED
                break

            futures = [pool.submit(_fetch_point, lookup, point, scope) for point in batch]
            wait(futures)

            if scope.cancelled:
                # kesken jäänyt erä ei tuota näytteitä
                result.status = FetchStatus.CANCELLED
                break

            # futures list is in batch order, so grid order is kept
            result.samples.extend(s for s in (f.result() for f in futures) if s is not None)
            result.batches_done = index + 1

            if on_batch is not None:
                on_batch(result.batches_done, result.batches_total)

            is_last = index == len(batches) - 1
            if not is_last:
                scope.sleep(delay_s)

    if result.cancelled:
        logger.info(
            "heatmap: fetch cancelled after %s/%s batches (%s samples)",
            result.batches_done,
            result.batches_total,
            len(result.samples),
        )
    else:
        logger.info(
            "heatmap: fetched %s/%s points in %s batches",
            len(result.samples),
            len(grid),
            result.batches_total,
        )
    return result
