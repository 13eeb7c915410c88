# pathviz/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass
from enum import Enum
from math import inf
from typing import NamedTuple, Optional, Tuple

Coord = Tuple[int, int]  # (row, col)

# Status strings shown to the user
STATUS_READY = "ready"
STATUS_SEARCHING = "searching"
STATUS_PATH_FOUND = "path found"
STATUS_NO_PATH = "no path found"
STATUS_MISSING_ENDPOINTS = "missing endpoints"
STATUS_CANCELLED = "cancelled"


class Role(Enum):
    START = "start"
    END = "end"
    WALL = "wall"   # toggles


@dataclass
class Cell:
    row: int
    col: int
    is_wall: bool = False
    is_start: bool = False
    is_end: bool = False
    visited: bool = False
    on_final_path: bool = False
    distance: float = inf
    predecessor: Optional[Coord] = None

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    def clear_search_state(self) -> None:
        self.visited = False
        self.on_final_path = False
        self.distance = inf
        self.predecessor = None


class SearchStats(NamedTuple):
    explored: int = 0
    path_length: int = 0
    elapsed_ms: int = 0
