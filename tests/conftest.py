import pytest

from gridsearch.core.grid import Grid


def _grid_from_rows(rows):
    """'#' wall, 'S' source, 'T' target, anything else open."""
    grid = Grid.empty(len(rows), len(rows[0]))
    grid.regenerate(lambda r, c: rows[r][c] == "#")
    for r, line in enumerate(rows):
        for c, ch in enumerate(line):
            if ch == "S":
                grid.set_source(r, c)
            elif ch == "T":
                grid.set_target(r, c)
    return grid


@pytest.fixture
def grid_from_rows():
    """Builder for literal grids drawn as lists of strings."""
    return _grid_from_rows
