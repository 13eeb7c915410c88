# pathviz/core/grid.py
#!/usr/bin/env python3
"""
Grid model for the visualizer.

- Cells live in a [row][col] matrix built once per grid (and again on reset_all).
- start / end are kept as (row, col) indices into the matrix, never as owners.
- Role changes that would break "one start, one end, no wall under either"
  are ignored rather than reported.
- While a search holds the grid (locked=True) structural changes are refused.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from pathviz.core.types import Cell, Coord, Role

LOGGER = logging.getLogger(__name__)

# up, down, left, right; order drives frontier tie-breaks
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass
class Grid:
    rows: int
    cols: int
    cells: List[List[Cell]] = field(init=False, repr=False)   # [row][col]
    start: Optional[Coord] = field(init=False, default=None)
    end: Optional[Coord] = field(init=False, default=None)
    locked: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        for dim in (self.rows, self.cols):
            if not isinstance(dim, int) or isinstance(dim, bool):
                raise ValueError(f"grid dimensions must be integers, got {self.rows!r}x{self.cols!r}")
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"grid needs at least one row and column, got {self.rows}x{self.cols}")
        self._build()

    def _build(self) -> None:
        self.cells = [[Cell(r, c) for c in range(self.cols)] for r in range(self.rows)]

    # -------------------- lookups --------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell_at(self, row: int, col: int) -> Optional[Cell]:
        if self.in_bounds(row, col):
            return self.cells[row][col]
        return None

    @property
    def start_cell(self) -> Optional[Cell]:
        return self.cell_at(*self.start) if self.start is not None else None

    @property
    def end_cell(self) -> Optional[Cell]:
        return self.cell_at(*self.end) if self.end is not None else None

    def neighbors(self, cell: Cell) -> List[Cell]:
        """Return the in-bounds, non-wall 4-neighbours of cell (up, down, left, right)."""
        out: List[Cell] = []
        for dr, dc in DIRECTIONS:
            n = self.cell_at(cell.row + dr, cell.col + dc)
            if n is not None and not n.is_wall:
                out.append(n)
        return out

    def iter_cells(self) -> Iterable[Cell]:
        """Row-major scan of every cell."""
        for row in self.cells:
            yield from row

    def walls(self) -> List[Coord]:
        return [c.coord for c in self.iter_cells() if c.is_wall]

    # -------------------- resets --------------------

    def reset_search_state(self) -> None:
        if self._refuse("reset_search_state"):
            return
        for cell in self.iter_cells():
            cell.clear_search_state()

    def reset_all(self) -> None:
        if self._refuse("reset_all"):
            return
        self._build()
        self.start = None
        self.end = None

    # -------------------- role mutations --------------------

    def set_role(self, row: int, col: int, role: Role) -> None:
        if self._refuse("set_role"):
            return
        cell = self.cell_at(row, col)
        if cell is None:
            return

        if role is Role.WALL:
            if not cell.is_start and not cell.is_end:
                cell.is_wall = not cell.is_wall
        elif role is Role.START:
            if cell.is_wall or cell.is_end:
                return
            prev = self.start_cell
            if prev is not None:
                prev.is_start = False
            cell.is_start = True
            self.start = cell.coord
        elif role is Role.END:
            if cell.is_wall or cell.is_start:
                return
            prev = self.end_cell
            if prev is not None:
                prev.is_end = False
            cell.is_end = True
            self.end = cell.coord

    def cycle_endpoint(self, row: int, col: int) -> None:
        """Secondary-click rule: fill start, then end, then swap/reassign on later clicks."""
        cell = self.cell_at(row, col)
        if cell is None or cell.is_wall:
            return
        if self.start is None:
            self.set_role(row, col, Role.START)
        elif self.end is None:
            self.set_role(row, col, Role.END)
        elif cell.is_start:
            self._move_endpoint_onto(cell, Role.END)
        elif cell.is_end:
            self._move_endpoint_onto(cell, Role.START)
        else:
            self.set_role(row, col, Role.START)

    def _move_endpoint_onto(self, cell: Cell, role: Role) -> None:
        if self._refuse("cycle_endpoint"):
            return
        # drop the current role first; set_role refuses start over end and vice versa
        if role is Role.END:
            cell.is_start = False
            self.start = None
        else:
            cell.is_end = False
            self.end = None
        self.set_role(cell.row, cell.col, role)

    def place_walls(self, coords: Iterable[Coord]) -> None:
        """Mark every coordinate as a wall (not a toggle); endpoints are skipped."""
        if self._refuse("place_walls"):
            return
        for row, col in coords:
            cell = self.cell_at(row, col)
            if cell is not None and not cell.is_start and not cell.is_end:
                cell.is_wall = True

    def _refuse(self, op: str) -> bool:
        if self.locked:
            LOGGER.debug("grid locked by a running search; ignoring %s", op)
        return self.locked
