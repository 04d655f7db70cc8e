# gridsearch/core/grid.py
#!/usr/bin/env python3
"""
Occupancy grid with packed per-cell flags.

- One byte per cell, row-major: idx = row * n_cols + col
- WALL / FRONTIER / VISITED are kept mutually exclusive by set_state()
- FROM_* origin bits record which neighbour a cell was reached from
- source / target are index overlays, not flags; they win classification:
      TARGET > SOURCE > WALL > VISITED > FRONTIER > OPEN
- `revision` bumps on every mutation so a viewer can cheaply tell
  whether it needs to repaint
"""

from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from gridsearch.core.types import (
    Cell,
    CellInfo,
    CellState,
    IndexOutOfBounds,
    InvalidCoordinate,
    ORIGIN_BITS,
    STATE_BITS,
)

# up, left, right, down (expansion order depends on this)
NEIGHBOR_OFFSETS_4WAY: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))

_STATE_FLAG = {
    CellState.WALL: CellInfo.WALL,
    CellState.FRONTIER: CellInfo.FRONTIER,
    CellState.VISITED: CellInfo.VISITED,
}


class CellStates:
    """Restartable view over (row, col, state) in row-major order."""

    def __init__(self, grid: "Grid"):
        self._grid = grid

    def __len__(self) -> int:
        return self._grid.n_rows * self._grid.n_cols

    def __iter__(self) -> Iterator[Tuple[int, int, CellState]]:
        g = self._grid
        for idx in range(len(self)):
            row, col = g.idx_to_rc(idx)
            yield row, col, g.cell_state(row, col)


class CellOrigins:
    """Restartable view over (row, col, dr, dc) in row-major order."""

    def __init__(self, grid: "Grid"):
        self._grid = grid

    def __len__(self) -> int:
        return self._grid.n_rows * self._grid.n_cols

    def __iter__(self) -> Iterator[Tuple[int, int, int, int]]:
        g = self._grid
        for idx in range(len(self)):
            row, col = g.idx_to_rc(idx)
            dr, dc = CellInfo(g.cells[idx]).origin_offset()
            yield row, col, dr, dc


@dataclass
class Grid:
    n_rows: int
    n_cols: int
    cells: bytearray = field(init=False, repr=False)
    source_idx: Optional[int] = field(default=None, init=False)
    target_idx: Optional[int] = field(default=None, init=False)
    revision: int = field(default=0, init=False, compare=False)

    def __post_init__(self):
        if self.n_rows < 1 or self.n_cols < 1:
            raise ValueError(f"grid must be at least 1x1, got {self.n_rows}x{self.n_cols}")
        self.cells = bytearray(self.n_rows * self.n_cols)

    @classmethod
    def empty(cls, n_rows: int, n_cols: int) -> "Grid":
        return cls(n_rows, n_cols)

    def copy(self) -> "Grid":
        """Independent snapshot, same revision."""
        other = Grid(self.n_rows, self.n_cols)
        other.cells[:] = self.cells
        other.source_idx = self.source_idx
        other.target_idx = self.target_idx
        other.revision = self.revision
        return other

    # -------------------- indexing --------------------

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.n_rows and 0 <= col < self.n_cols

    def rc_to_idx(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise IndexOutOfBounds(row, col, self.n_rows, self.n_cols)
        return row * self.n_cols + col

    def idx_to_rc(self, idx: int) -> Cell:
        return idx // self.n_cols, idx % self.n_cols

    def _checked_idx(self, row: int, col: int) -> int:
        if not self.in_bounds(row, col):
            raise InvalidCoordinate(row, col, self.n_rows, self.n_cols)
        return row * self.n_cols + col

    def _touch(self) -> None:
        self.revision += 1

    # -------------------- bulk mutators --------------------

    def regenerate(self, wall_predicate: Callable[[int, int], bool]) -> "Grid":
        """Set WALL iff wall_predicate(row, col), row-major. Nothing else changes."""
        try:
            for row in range(self.n_rows):
                for col in range(self.n_cols):
                    idx = row * self.n_cols + col
                    if wall_predicate(row, col):
                        self.cells[idx] |= CellInfo.WALL
                    else:
                        self.cells[idx] &= ~CellInfo.WALL & 0xFF
        finally:
            # cells written before a predicate error still count as a change
            self._touch()
        return self

    def clear(self) -> None:
        """Drop every flag, walls included. Endpoints are kept."""
        self.cells[:] = bytes(len(self.cells))
        self._touch()

    def clear_search(self) -> None:
        """Drop search progress (visited/frontier/origin bits), keep walls."""
        for idx, bits in enumerate(self.cells):
            self.cells[idx] = bits & CellInfo.WALL
        self._touch()

    # -------------------- per-cell mutators --------------------

    def set_wall(self, row: int, col: int, is_wall: bool) -> None:
        self.set_state(row, col, CellState.WALL if is_wall else CellState.OPEN)

    def set_state(self, row: int, col: int, state: CellState) -> None:
        idx = self.rc_to_idx(row, col)
        if state is CellState.TARGET:
            self.target_idx = idx
        elif state is CellState.SOURCE:
            self.source_idx = idx
        else:
            # origin bits survive state changes
            bits = self.cells[idx] & ~STATE_BITS & 0xFF
            self.cells[idx] = bits | _STATE_FLAG.get(state, 0)
        self._touch()

    def set_source(self, row: int, col: int) -> None:
        self.source_idx = self._checked_idx(row, col)
        self._touch()

    def set_target(self, row: int, col: int) -> None:
        self.target_idx = self._checked_idx(row, col)
        self._touch()

    def mark_visited(self, row: int, col: int) -> None:
        self.set_state(row, col, CellState.VISITED)

    def mark_frontier(self, row: int, col: int) -> None:
        self.set_state(row, col, CellState.FRONTIER)

    def flags(self, row: int, col: int) -> CellInfo:
        return CellInfo(self.cells[self.rc_to_idx(row, col)])

    def set_flag(self, row: int, col: int, flag: CellInfo, on: bool = True) -> None:
        """Raw flag access; bypasses the WALL/VISITED/FRONTIER exclusivity."""
        idx = self.rc_to_idx(row, col)
        if on:
            self.cells[idx] |= flag
        else:
            self.cells[idx] &= ~flag & 0xFF
        self._touch()

    def set_origin(self, source: Cell, target: Cell) -> None:
        """Record on `target` which side `source` lies on."""
        idx = self.rc_to_idx(*target)
        bits = self.cells[idx] & ~ORIGIN_BITS & 0xFF
        if source[0] < target[0]:
            bits |= CellInfo.FROM_UP
        elif source[0] > target[0]:
            bits |= CellInfo.FROM_DOWN
        if source[1] < target[1]:
            bits |= CellInfo.FROM_LEFT
        elif source[1] > target[1]:
            bits |= CellInfo.FROM_RIGHT
        self.cells[idx] = bits
        self._touch()

    # -------------------- queries --------------------

    @property
    def source(self) -> Optional[Cell]:
        return None if self.source_idx is None else self.idx_to_rc(self.source_idx)

    @property
    def target(self) -> Optional[Cell]:
        return None if self.target_idx is None else self.idx_to_rc(self.target_idx)

    def cell_state(self, row: int, col: int) -> CellState:
        idx = self.rc_to_idx(row, col)
        bits = self.cells[idx]
        if idx == self.target_idx:
            return CellState.TARGET
        if idx == self.source_idx:
            return CellState.SOURCE
        if bits & CellInfo.WALL:
            return CellState.WALL
        if bits & CellInfo.VISITED:
            return CellState.VISITED
        if bits & CellInfo.FRONTIER:
            return CellState.FRONTIER
        return CellState.OPEN

    def is_wall(self, row: int, col: int) -> bool:
        return bool(self.cells[self.rc_to_idx(row, col)] & CellInfo.WALL)

    def is_visited(self, row: int, col: int) -> bool:
        return bool(self.cells[self.rc_to_idx(row, col)] & CellInfo.VISITED)

    def is_frontier(self, row: int, col: int) -> bool:
        return bool(self.cells[self.rc_to_idx(row, col)] & CellInfo.FRONTIER)

    def is_untouched(self, row: int, col: int) -> bool:
        return not self.cells[self.rc_to_idx(row, col)] & STATE_BITS

    def is_source(self, row: int, col: int) -> bool:
        return self.source_idx == self.rc_to_idx(row, col)

    def is_target(self, row: int, col: int) -> bool:
        return self.target_idx == self.rc_to_idx(row, col)

    def neighbors(self, row: int, col: int) -> List[Cell]:
        self.rc_to_idx(row, col)
        out: List[Cell] = []
        for dr, dc in NEIGHBOR_OFFSETS_4WAY:
            r, c = row + dr, col + dc
            if self.in_bounds(r, c):
                out.append((r, c))
        return out

    def cell_states(self) -> CellStates:
        return CellStates(self)

    def cell_origins(self) -> CellOrigins:
        return CellOrigins(self)

    def trace_path(self, cell: Cell) -> List[Cell]:
        """Follow origin bits from `cell` back to the source.

        Returns the path source -> cell (inclusive), or [] when the chain
        breaks before reaching the source.
        """
        if self.source is None:
            return []
        path = [cell]
        cur = cell
        # a well-formed chain can't be longer than the grid
        for _ in range(len(self.cells)):
            if cur == self.source:
                path.reverse()
                return path
            dr, dc = self.flags(*cur).origin_offset()
            if (dr, dc) == (0, 0):
                return []
            cur = (cur[0] + dr, cur[1] + dc)
            if not self.in_bounds(*cur):
                return []
            path.append(cur)
        return []
