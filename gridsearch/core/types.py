# gridsearch/core/types.py
#!/usr/bin/env python3
from enum import Enum, IntFlag
from typing import Optional, Tuple

Cell = Tuple[int, int]  # (row, col)


class CellInfo(IntFlag):
    """Packed per-cell flags (one byte per cell)."""

    WALL = 1
    FRONTIER = 2
    VISITED = 4
    FROM_LEFT = 16
    FROM_RIGHT = 32
    FROM_UP = 64
    FROM_DOWN = 128

    def origin_offset(self) -> Tuple[int, int]:
        """(dr, dc) pointing at the neighbour this cell was reached from."""
        if self & CellInfo.FROM_UP:
            dr = -1
        elif self & CellInfo.FROM_DOWN:
            dr = 1
        else:
            dr = 0
        if self & CellInfo.FROM_LEFT:
            dc = -1
        elif self & CellInfo.FROM_RIGHT:
            dc = 1
        else:
            dc = 0
        return dr, dc


STATE_BITS = CellInfo.WALL | CellInfo.FRONTIER | CellInfo.VISITED
ORIGIN_BITS = CellInfo.FROM_LEFT | CellInfo.FROM_RIGHT | CellInfo.FROM_UP | CellInfo.FROM_DOWN


class CellState(Enum):
    OPEN = "open"
    WALL = "wall"
    FRONTIER = "frontier"
    VISITED = "visited"
    SOURCE = "source"
    TARGET = "target"


# ---------- errors ----------

class GridError(Exception):
    """Base class for grid errors."""


class IndexOutOfBounds(GridError, IndexError):
    """A (row, col) outside the grid was queried."""

    def __init__(self, row: Optional[int], col: Optional[int], n_rows: Optional[int] = None,
                 n_cols: Optional[int] = None, detail: Optional[str] = None):
        if detail is not None:
            msg = detail
        elif n_rows is None or n_cols is None:
            msg = f"invalid cell ({row}, {col})"
        else:
            msg = f"cell ({row}, {col}) outside {n_rows}x{n_cols} grid"
        super().__init__(msg)
        self.row = row
        self.col = col


class InvalidCoordinate(IndexOutOfBounds):
    """Precondition violation: a bad source/target coordinate."""

