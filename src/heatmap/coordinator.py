"""
Heat-map run coordination.

One HeatmapRun is one end-to-end pass: grid → batched fetch → overlay.

    pending → fetching → rendering → done
    pending / fetching → cancelled

HeatmapCoordinator keeps at most one non-terminal run per map. Starting a
new run cancels the previous one; the new run does not fetch before the
previous one has settled, so there are never two runs on the network.
"""

from __future__ import annotations

import enum
import itertools
import logging
import math
import threading
from collections.abc import Callable, Sequence
from typing import Any

from src.api.abortable import AbortableSession
from src.config import HEATMAP_BATCH_DELAY_S, HEATMAP_BATCH_SIZE
from src.heatmap.batch_fetch import FetchResult, fetch_temperature_samples
from src.heatmap.cancel import CancelScope
from src.heatmap.grid import GridPoint, generate_grid
from src.heatmap.normalize import TemperatureSample, heat_points
from src.heatmap.overlay import HeatOverlayRenderer

logger = logging.getLogger("weathermap")

_run_ids = itertools.count(1)


class RunState(enum.Enum):
    PENDING = "pending"
    FETCHING = "fetching"
    RENDERING = "rendering"
    DONE = "done"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({RunState.DONE, RunState.CANCELLED})

_ALLOWED: dict[RunState, frozenset[RunState]] = {
    RunState.PENDING: frozenset({RunState.FETCHING, RunState.CANCELLED}),
    RunState.FETCHING: frozenset({RunState.RENDERING, RunState.CANCELLED}),
    RunState.RENDERING: frozenset({RunState.DONE, RunState.CANCELLED}),
    RunState.DONE: frozenset(),
    RunState.CANCELLED: frozenset(),
}


def _start_thread(target: Callable[[], None]) -> None:
    threading.Thread(target=target, name="heatmap-run", daemon=True).start()


class HeatmapRun:
    """A single cancellable heat-map pass. Owns its scope, HTTP session and overlay."""

    def __init__(
        self,
        lookup: Any,
        *,
        grid: Sequence[GridPoint] | None = None,
        batch_size: int = HEATMAP_BATCH_SIZE,
        delay_s: float = HEATMAP_BATCH_DELAY_S,
        previous: HeatmapRun | None = None,
        scope: CancelScope | None = None,
        session_factory: Callable[[], AbortableSession] = AbortableSession,
    ) -> None:
        self.run_id = next(_run_ids)
        self.scope = scope if scope is not None else CancelScope()
        self._lookup = lookup
        self._grid = grid
        self._batch_size = batch_size
        self._delay_s = delay_s
        self._previous = previous
        self._session_factory = session_factory

        self._lock = threading.Lock()
        self._settled = threading.Event()
        self._state = RunState.PENDING
        self._renderer: HeatOverlayRenderer | None = None

        self.samples: list[TemperatureSample] = []
        self.batches_done = 0
        self.batches_total = 0
        self.points_total = 0

    def __repr__(self) -> str:
        return f"<HeatmapRun #{self.run_id} {self._state.value}>"

    # --- tila ---

    @property
    def state(self) -> RunState:
        with self._lock:
            return self._state

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def has_overlay(self) -> bool:
        with self._lock:
            return self._renderer is not None and self._renderer.layer is not None

    def _transition(self, target: RunState) -> bool:
        with self._lock:
            if target not in _ALLOWED[self._state]:
                return False
            logger.debug("heatmap run #%s: %s -> %s", self.run_id, self._state.value, target.value)
            self._state = target
            return True

    def wait_settled(self, timeout: float | None = None) -> bool:
        """Block until fetch() has returned (or the run was cancelled before it began)."""
        return self._settled.wait(timeout)

    # --- fetch ---

    def fetch(self) -> FetchResult | None:
        """pending → fetching → rendering (or cancelled). Runs on the worker thread."""
        try:
            if self._previous is not None:
                self._previous.wait_settled()
                self._previous = None

            if not self._transition(RunState.FETCHING):
                return None

            grid = self._grid if self._grid is not None else generate_grid()
            self.points_total = len(grid)
            self.batches_total = math.ceil(len(grid) / self._batch_size)

            session = self._session_factory()
            release = self.scope.on_cancel(session.abort)
            try:
                result = fetch_temperature_samples(
                    grid,
                    self.scope,
                    self._lookup.bind(session),
                    batch_size=self._batch_size,
                    delay_s=self._delay_s,
                    on_batch=self._on_batch,
                )
            finally:
                release()
                session.close()

            self.samples = result.samples
            self.batches_total = result.batches_total
            if result.cancelled or not self._transition(RunState.RENDERING):
                self._transition(RunState.CANCELLED)
            return result
        except Exception:
            logger.exception("heatmap run #%s failed", self.run_id)
            self.cancel()
            return None
        finally:
            self._settled.set()

    def _on_batch(self, done: int, total: int) -> None:
        self.batches_done = done
        self.batches_total = total

    # --- render ---

    def render(self, renderer: HeatOverlayRenderer) -> bool:
        """Install this run's overlay: rendering → done. Re-rendering a done run is allowed."""
        with self._lock:
            if self._state not in (RunState.RENDERING, RunState.DONE) or self.scope.cancelled:
                return False
            renderer.render(heat_points(self.samples))
            self._renderer = renderer
            if self._state is RunState.RENDERING:
                self._state = RunState.DONE
                logger.info(
                    "heatmap run #%s: overlay installed (%s samples)", self.run_id, len(self.samples)
                )
            return True

    # --- cancel ---

    def cancel(self) -> bool:
        """Revoke the run: stop fetching and tear down its overlay.

        An active run goes to `cancelled`; a `done` run keeps its state but
        loses its overlay. Returns True if the run was still active.
        """
        with self._lock:
            was_active = self._state not in TERMINAL_STATES
            if was_active:
                self._state = RunState.CANCELLED
            renderer, self._renderer = self._renderer, None
        self.scope.cancel()
        if renderer is not None:
            renderer.clear()
        if was_active:
            logger.info("heatmap run #%s cancelled", self.run_id)
        return was_active


class HeatmapCoordinator:
    """Owns the current heat-map run of one map view."""

    def __init__(
        self,
        lookup: Any,
        *,
        grid_factory: Callable[[], Sequence[GridPoint]] = generate_grid,
        batch_size: int = HEATMAP_BATCH_SIZE,
        delay_s: float = HEATMAP_BATCH_DELAY_S,
        spawn: Callable[[Callable[[], None]], None] = _start_thread,
        session_factory: Callable[[], AbortableSession] = AbortableSession,
    ) -> None:
        self._lookup = lookup
        self._grid_factory = grid_factory
        self._batch_size = batch_size
        self._delay_s = delay_s
        self._spawn = spawn
        self._session_factory = session_factory
        # ajojen yhteinen juuri; close() peruu kaikki
        self._scope = CancelScope()
        self._lock = threading.Lock()
        self._current: HeatmapRun | None = None

    @property
    def current(self) -> HeatmapRun | None:
        with self._lock:
            return self._current

    def start(self) -> HeatmapRun:
        """Start a new run, superseding (cancelling) the current one."""
        with self._lock:
            previous = self._current
            if previous is not None:
                previous.cancel()
            run = HeatmapRun(
                self._lookup,
                grid=self._grid_factory(),
                batch_size=self._batch_size,
                delay_s=self._delay_s,
                previous=previous,
                scope=self._scope.child(),
                session_factory=self._session_factory,
            )
            self._current = run
        logger.info("heatmap run #%s started", run.run_id)
        self._spawn(run.fetch)
        return run

    def ensure_started(self) -> HeatmapRun:
        """Mount: start a run unless one already exists."""
        with self._lock:
            run = self._current
        return run if run is not None else self.start()

    def stop(self) -> None:
        """Unmount: cancel the current run and tear down its overlay."""
        with self._lock:
            run, self._current = self._current, None
        if run is not None:
            run.cancel()

    def render(self, renderer: HeatOverlayRenderer) -> bool:
        run = self.current
        if run is None:
            return False
        return run.render(renderer)

    def close(self) -> None:
        """Session teardown: cancel the current run and any run started later."""
        self.stop()
        self._scope.cancel()
