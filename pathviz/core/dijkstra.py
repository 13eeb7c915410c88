# pathviz/core/dijkstra.py
#!/usr/bin/env python3
"""
Dijkstra (uniform cost) — one emitted event per suspension point for animation.

API:
- PathSearch.start(grid, callbacks...) -> SearchRun | None
- SearchRun.advance() -> delay in ms before the next call, or None when finished
- PathSearch.run(grid, callbacks..., pacer=...) drives a SearchRun to completion

Callbacks:
- on_explore(cell)        every finalized cell except start and end
- on_path_step(cell)      every path cell except start and end, start -> end order
- on_finished(success, explored, path_length, elapsed_ms)
- on_status(text)         "searching" -> "path found" | "no path found" | ...

Frontier PQ entries are (distance, row-major index, row, col): lower distance
first, ties by scan order. Stale entries are skipped on pop.
"""

import heapq
import logging
import threading
import time
from typing import Callable, Iterator, List, Optional, Tuple

from pathviz.core.grid import Grid
from pathviz.core.types import (
    Cell,
    Coord,
    SearchStats,
    STATUS_CANCELLED,
    STATUS_MISSING_ENDPOINTS,
    STATUS_NO_PATH,
    STATUS_PATH_FOUND,
    STATUS_READY,
    STATUS_SEARCHING,
)

LOGGER = logging.getLogger(__name__)

SPEED_PRESETS = {
    "fast": 10,
    "medium": 50,
    "slow": 150,
}
DEFAULT_SPEED = "medium"

CellCallback = Callable[[Cell], None]
FinishedCallback = Callable[[bool, int, int, int], None]
StatusCallback = Callable[[str], None]
Pacer = Callable[[int], None]


def sleep_pacer(delay_ms: int) -> None:
    time.sleep(delay_ms / 1000.0)


def no_pacing(delay_ms: int) -> None:
    return None


class SearchRun:
    """State of one execution; lives until the run finishes or is cancelled."""

    def __init__(self, engine: "PathSearch", grid: Grid,
                 on_explore: Optional[CellCallback] = None,
                 on_path_step: Optional[CellCallback] = None,
                 on_finished: Optional[FinishedCallback] = None,
                 on_status: Optional[StatusCallback] = None,
                 cancel: Optional[threading.Event] = None):
        self.engine = engine
        self.grid = grid
        self.explored = 0
        self.path: List[Coord] = []
        self.finished = False
        self.success = False
        self._on_explore = on_explore
        self._on_path_step = on_path_step
        self._on_finished = on_finished
        self._on_status = on_status
        self._cancel = cancel if cancel is not None else threading.Event()
        self._t0 = time.perf_counter()
        self._steps = self._search()

    # -------------------- driving --------------------

    def advance(self) -> Optional[int]:
        if self.finished:
            return None
        if self._cancel.is_set():
            self._steps.close()
            self._finish(False, 0, STATUS_CANCELLED)
            return None
        try:
            return next(self._steps)
        except StopIteration:
            return None
        except Exception:
            if not self.finished:
                self.finished = True
                self.engine._abort(self)
            raise

    def cancel(self) -> None:
        self._cancel.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def elapsed_ms(self) -> int:
        return int(round((time.perf_counter() - self._t0) * 1000.0))

    # -------------------- algorithm --------------------

    def _order(self, cell: Cell) -> int:
        return cell.row * self.grid.cols + cell.col

    def _search(self) -> Iterator[int]:
        grid = self.grid
        start, end = grid.start_cell, grid.end_cell

        frontier = {c.coord for c in grid.iter_cells() if not c.is_wall}
        open_pq: List[Tuple[int, int, int, int]] = [(0, self._order(start), start.row, start.col)]

        while open_pq:
            d_u, _, row, col = heapq.heappop(open_pq)
            u = grid.cells[row][col]
            if u.coord not in frontier or d_u != u.distance:
                continue

            frontier.discard(u.coord)
            u.visited = True
            self.explored += 1

            if u is end:
                yield from self._trace_path(u)
                return

            if u is not start:
                if self._on_explore:
                    self._on_explore(u)
                yield self.engine.delay_ms

            for v in grid.neighbors(u):
                if v.coord not in frontier:
                    continue
                alt = u.distance + 1
                if alt < v.distance:
                    v.distance = alt
                    v.predecessor = u.coord
                    heapq.heappush(open_pq, (alt, self._order(v), v.row, v.col))

        # PQ drained: whatever is left in the frontier is at infinity
        self._finish(False, 0, STATUS_NO_PATH)

    def _trace_path(self, end: Cell) -> Iterator[int]:
        path: List[Coord] = []
        cur: Optional[Cell] = end
        while cur is not None:
            path.append(cur.coord)
            cur = self.grid.cell_at(*cur.predecessor) if cur.predecessor else None
        path.reverse()
        self.path = path

        for row, col in path[1:-1]:
            cell = self.grid.cells[row][col]
            cell.on_final_path = True
            if self._on_path_step:
                self._on_path_step(cell)
            yield self.engine.path_delay_ms

        self._finish(True, len(path) - 1, STATUS_PATH_FOUND)

    def _finish(self, success: bool, path_length: int, status: str) -> None:
        self.finished = True
        self.success = success
        stats = SearchStats(self.explored, path_length, self.elapsed_ms())
        self.engine._release(self, status, stats)
        if self._on_status:
            self._on_status(status)
        if self._on_finished:
            self._on_finished(success, stats.explored, stats.path_length, stats.elapsed_ms)


class PathSearch:
    """Dijkstra engine; at most one active run per instance."""

    def __init__(self, speed: str = DEFAULT_SPEED):
        self.running = False
        self.delay_ms = SPEED_PRESETS[DEFAULT_SPEED]
        self.status = STATUS_READY
        self.stats = SearchStats()
        self.last_path: List[Coord] = []
        self.set_speed(speed)

    def set_speed(self, preset: str) -> None:
        self.delay_ms = SPEED_PRESETS.get(preset, SPEED_PRESETS[DEFAULT_SPEED])

    @property
    def path_delay_ms(self) -> int:
        return self.delay_ms * 2

    def start(self, grid: Grid,
              on_explore: Optional[CellCallback] = None,
              on_path_step: Optional[CellCallback] = None,
              on_finished: Optional[FinishedCallback] = None,
              on_status: Optional[StatusCallback] = None,
              cancel: Optional[threading.Event] = None) -> Optional[SearchRun]:
        """Begin a run; None when one is already active or endpoints are missing."""
        if self.running or grid.locked:
            LOGGER.debug("search already in progress; request ignored")
            return None

        if grid.start_cell is None or grid.end_cell is None:
            self.status = STATUS_MISSING_ENDPOINTS
            if on_status:
                on_status(self.status)
            return None

        self.running = True
        grid.reset_search_state()
        grid.locked = True
        grid.start_cell.distance = 0
        self.last_path = []
        self.status = STATUS_SEARCHING
        search = SearchRun(self, grid, on_explore, on_path_step, on_finished, on_status, cancel)
        if on_status:
            try:
                on_status(self.status)
            except Exception:
                search.finished = True
                self._abort(search)
                raise
        LOGGER.debug("search started %s -> %s on %dx%d grid", grid.start, grid.end, grid.rows, grid.cols)
        return search

    def run(self, grid: Grid,
            on_explore: Optional[CellCallback] = None,
            on_path_step: Optional[CellCallback] = None,
            on_finished: Optional[FinishedCallback] = None,
            on_status: Optional[StatusCallback] = None,
            pacer: Pacer = sleep_pacer,
            cancel: Optional[threading.Event] = None) -> bool:
        """Run a search to completion; True only when a path was found."""
        search = self.start(grid, on_explore, on_path_step, on_finished, on_status, cancel)
        if search is None:
            return False
        delay = search.advance()
        while delay is not None:
            pacer(delay)
            delay = search.advance()
        return search.success

    def _abort(self, search: SearchRun) -> None:
        search.grid.locked = False
        self.running = False
        self.status = STATUS_READY
        LOGGER.exception("search aborted by a failing callback")

    def _release(self, search: SearchRun, status: str, stats: SearchStats) -> None:
        search.grid.locked = False
        self.running = False
        self.status = status
        self.stats = stats
        self.last_path = list(search.path) if search.success else []
        LOGGER.info("search %s: explored=%d path_len=%d time=%dms",
                    status, stats.explored, stats.path_length, stats.elapsed_ms)
