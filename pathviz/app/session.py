# pathviz/app/session.py
#!/usr/bin/env python3
"""
Visualizer session: the state the viewer renders and the handlers it calls.

Nothing here touches pygame; time comes in as `now_ms` so the pacing of a
run can be driven by any clock (pygame ticks in the viewer, plain ints in tests).
"""

import logging
from typing import List, Optional, Set

from pathviz.core.dijkstra import DEFAULT_SPEED, SPEED_PRESETS, PathSearch, SearchRun
from pathviz.core.grid import Grid
from pathviz.core.types import Cell, Coord, Role, SearchStats, STATUS_READY

LOGGER = logging.getLogger(__name__)

DEFAULT_ROWS = 10
DEFAULT_COLS = 10

DEMO_START: Coord = (2, 2)
DEMO_END: Coord = (7, 7)
DEMO_WALLS: List[Coord] = [(3, 3), (3, 4), (3, 5), (4, 5), (5, 5), (6, 5)]

# pygame mouse buttons
BUTTON_PRIMARY = 1
BUTTON_SECONDARY = 3


class VisualizerSession:
    def __init__(self, rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS,
                 speed: str = DEFAULT_SPEED, seed_demo: bool = True):
        self.grid = Grid(rows, cols)
        self.engine = PathSearch(speed)
        self.speed = speed if speed in SPEED_PRESETS else DEFAULT_SPEED
        self.status = STATUS_READY
        self.stats = SearchStats()

        # overlays, filled by engine callbacks
        self.explored: Set[Coord] = set()
        self.path: List[Coord] = []

        self._run: Optional[SearchRun] = None
        self._next_due_ms = 0

        if seed_demo and self.grid.in_bounds(*DEMO_END):
            self.grid.set_role(*DEMO_START, Role.START)
            self.grid.set_role(*DEMO_END, Role.END)
            self.grid.place_walls(DEMO_WALLS)

    @property
    def searching(self) -> bool:
        return self._run is not None and not self._run.finished

    # -------------------- input --------------------

    def click(self, row: int, col: int, button: int) -> None:
        if self.searching:
            LOGGER.debug("click on (%d, %d) ignored while searching", row, col)
            return
        if button == BUTTON_PRIMARY:
            self.grid.set_role(row, col, Role.WALL)
        elif button == BUTTON_SECONDARY:
            self.grid.cycle_endpoint(row, col)

    def set_speed(self, preset: str) -> None:
        if preset not in SPEED_PRESETS:
            LOGGER.warning("unknown speed preset %r, using %s", preset, DEFAULT_SPEED)
        self.speed = preset if preset in SPEED_PRESETS else DEFAULT_SPEED
        self.engine.set_speed(self.speed)

    def find_path(self, now_ms: int) -> bool:
        """Kick off a run; the first step happens on the next tick()."""
        if self.searching:
            return False
        self._reset_overlays()
        self._run = self.engine.start(
            self.grid,
            on_explore=self._on_explore,
            on_path_step=self._on_path_step,
            on_finished=self._on_finished,
            on_status=self._on_status,
        )
        self._next_due_ms = now_ms
        return self._run is not None

    def tick(self, now_ms: int) -> None:
        """Advance the active run by at most one step once its pacing delay is over."""
        if not self.searching or now_ms < self._next_due_ms:
            return
        delay = self._run.advance()
        if delay is None:
            self._run = None
        else:
            self._next_due_ms = now_ms + delay
        if self._run is not None:
            self.stats = SearchStats(self._run.explored, 0, self._run.elapsed_ms())

    def cancel(self) -> None:
        if not self.searching:
            return
        self._run.cancel()
        self._run.advance()
        self._run = None

    def clear_path(self) -> None:
        if self.searching:
            return
        self.grid.reset_search_state()
        self._reset_overlays()
        self.status = STATUS_READY

    def clear_grid(self) -> None:
        if self.searching:
            return
        self.grid.reset_all()
        self._reset_overlays()
        self.status = STATUS_READY

    # -------------------- engine callbacks --------------------

    def _on_explore(self, cell: Cell) -> None:
        self.explored.add(cell.coord)

    def _on_path_step(self, cell: Cell) -> None:
        self.path.append(cell.coord)

    def _on_status(self, status: str) -> None:
        self.status = status

    def _on_finished(self, success: bool, explored: int, path_length: int, elapsed_ms: int) -> None:
        self.stats = SearchStats(explored, path_length, elapsed_ms)

    def _reset_overlays(self) -> None:
        self.explored.clear()
        self.path = []
        self.stats = SearchStats()
