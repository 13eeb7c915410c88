from math import inf

import pytest

from pathviz.core.grid import Grid
from pathviz.core.types import Role


def _roles(grid):
    return [(c.coord, c.is_wall, c.is_start, c.is_end) for c in grid.iter_cells()]


def test_new_grid_has_default_cells():
    grid = Grid(3, 4)
    assert len(grid.cells) == 3 and all(len(r) == 4 for r in grid.cells)
    assert grid.start is None and grid.end is None
    cell = grid.cell_at(2, 3)
    assert cell.coord == (2, 3)
    assert not cell.is_wall and not cell.visited and cell.distance == inf


@pytest.mark.parametrize("rows, cols", [(0, 5), (5, 0), (-1, 3)])
def test_empty_grid_is_rejected(rows, cols):
    with pytest.raises(ValueError):
        Grid(rows, cols)


@pytest.mark.parametrize("rows, cols", [(2.5, 3), (3, "4"), (True, 3)])
def test_non_integer_dimensions_are_rejected(rows, cols):
    with pytest.raises(ValueError):
        Grid(rows, cols)


def test_endpoints_and_lock_are_not_constructor_arguments():
    with pytest.raises(TypeError):
        Grid(3, 3, start=(0, 0))
    with pytest.raises(TypeError):
        Grid(3, 3, locked=True)
    grid = Grid(3, 3)
    assert grid.start is None and grid.end is None and not grid.locked


def test_cell_at_out_of_bounds_returns_none():
    grid = Grid(2, 2)
    assert grid.cell_at(-1, 0) is None
    assert grid.cell_at(0, 2) is None
    assert grid.cell_at(2, 0) is None


def test_neighbors_order_and_wall_exclusion():
    grid = Grid(3, 3)
    center = grid.cell_at(1, 1)
    assert [n.coord for n in grid.neighbors(center)] == [(0, 1), (2, 1), (1, 0), (1, 2)]

    grid.set_role(2, 1, Role.WALL)
    assert [n.coord for n in grid.neighbors(center)] == [(0, 1), (1, 0), (1, 2)]

    corner = grid.cell_at(0, 0)
    assert [n.coord for n in grid.neighbors(corner)] == [(1, 0), (0, 1)]


def test_neighbors_never_return_walls_or_out_of_bounds():
    grid = Grid(4, 5)
    grid.place_walls([(0, 1), (1, 2), (2, 2), (3, 0)])
    for cell in grid.iter_cells():
        out = grid.neighbors(cell)
        assert len(out) <= 4
        for n in out:
            assert not n.is_wall
            assert grid.in_bounds(n.row, n.col)
            assert abs(n.row - cell.row) + abs(n.col - cell.col) == 1


def test_new_start_clears_previous_start():
    grid = Grid(3, 3)
    grid.set_role(0, 0, Role.START)
    grid.set_role(1, 1, Role.START)
    assert grid.start == (1, 1)
    assert not grid.cell_at(0, 0).is_start
    assert sum(c.is_start for c in grid.iter_cells()) == 1


def test_conflicting_roles_are_ignored():
    grid = Grid(3, 3)
    grid.set_role(0, 0, Role.START)
    grid.set_role(2, 2, Role.END)
    grid.set_role(1, 1, Role.WALL)

    grid.set_role(0, 0, Role.WALL)      # wall over start
    grid.set_role(2, 2, Role.WALL)      # wall over end
    grid.set_role(1, 1, Role.START)     # start over wall
    grid.set_role(2, 2, Role.START)     # start over end
    grid.set_role(0, 0, Role.END)       # end over start
    grid.set_role(9, 9, Role.START)     # out of bounds

    assert grid.start == (0, 0) and grid.cell_at(0, 0).is_start
    assert grid.end == (2, 2) and grid.cell_at(2, 2).is_end
    assert grid.cell_at(1, 1).is_wall
    assert not grid.cell_at(0, 0).is_wall and not grid.cell_at(2, 2).is_wall


def test_wall_role_toggles():
    grid = Grid(2, 2)
    grid.set_role(0, 1, Role.WALL)
    assert grid.walls() == [(0, 1)]
    grid.set_role(0, 1, Role.WALL)
    assert grid.walls() == []


def test_role_invariants_hold_after_mixed_sequence():
    grid = Grid(4, 4)
    ops = [
        (0, 0, Role.START), (0, 1, Role.END), (1, 1, Role.WALL), (1, 1, Role.START),
        (3, 3, Role.START), (0, 0, Role.END), (3, 3, Role.WALL), (2, 2, Role.END),
        (0, 1, Role.START), (1, 1, Role.WALL), (1, 1, Role.END),
    ]
    for row, col, role in ops:
        grid.set_role(row, col, role)
        starts = [c for c in grid.iter_cells() if c.is_start]
        ends = [c for c in grid.iter_cells() if c.is_end]
        assert len(starts) <= 1 and len(ends) <= 1
        assert all(not c.is_wall for c in starts + ends)
        assert grid.start == (starts[0].coord if starts else None)
        assert grid.end == (ends[0].coord if ends else None)


def test_reset_search_state_keeps_roles_and_is_idempotent():
    grid = Grid(3, 3)
    grid.set_role(0, 0, Role.START)
    grid.set_role(2, 2, Role.END)
    grid.set_role(1, 1, Role.WALL)
    for cell in grid.iter_cells():
        cell.visited = True
        cell.on_final_path = True
        cell.distance = 4
        cell.predecessor = (0, 0)
    before = _roles(grid)

    grid.reset_search_state()
    once = [(c.visited, c.on_final_path, c.distance, c.predecessor) for c in grid.iter_cells()]
    grid.reset_search_state()
    twice = [(c.visited, c.on_final_path, c.distance, c.predecessor) for c in grid.iter_cells()]

    assert _roles(grid) == before
    assert once == twice
    assert all(state == (False, False, inf, None) for state in once)


def test_reset_all_restores_fresh_grid():
    grid = Grid(3, 3)
    grid.set_role(0, 0, Role.START)
    grid.set_role(2, 2, Role.END)
    grid.set_role(1, 1, Role.WALL)
    grid.cell_at(1, 0).visited = True

    grid.reset_all()
    assert grid.start is None and grid.end is None
    assert _roles(grid) == _roles(Grid(3, 3))
    assert not grid.cell_at(1, 0).visited


def test_cycle_endpoint_rule():
    grid = Grid(3, 3)
    grid.cycle_endpoint(0, 0)
    assert grid.start == (0, 0)
    grid.cycle_endpoint(2, 2)
    assert grid.end == (2, 2)

    # other cell -> becomes start
    grid.cycle_endpoint(1, 0)
    assert grid.start == (1, 0) and not grid.cell_at(0, 0).is_start

    # current end -> becomes start
    grid.cycle_endpoint(2, 2)
    assert grid.start == (2, 2) and grid.end is None
    assert grid.cell_at(2, 2).is_start and not grid.cell_at(2, 2).is_end

    grid.cycle_endpoint(0, 2)
    assert grid.end == (0, 2)

    # current start -> becomes end
    grid.cycle_endpoint(2, 2)
    assert grid.end == (2, 2) and grid.start is None
    assert not grid.cell_at(0, 2).is_end


def test_cycle_endpoint_ignores_walls():
    grid = Grid(2, 2)
    grid.set_role(0, 0, Role.WALL)
    grid.cycle_endpoint(0, 0)
    assert grid.start is None


def test_locked_grid_rejects_mutations():
    grid = Grid(3, 3)
    grid.set_role(0, 0, Role.START)
    grid.cell_at(1, 1).visited = True
    grid.locked = True

    grid.set_role(1, 1, Role.WALL)
    grid.set_role(2, 2, Role.END)
    grid.cycle_endpoint(2, 2)
    grid.place_walls([(0, 1)])
    grid.reset_all()
    grid.reset_search_state()

    assert grid.walls() == []
    assert grid.start == (0, 0) and grid.end is None
    assert grid.cell_at(1, 1).visited

    grid.locked = False
    grid.set_role(1, 1, Role.WALL)
    assert grid.walls() == [(1, 1)]
