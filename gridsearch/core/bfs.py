# gridsearch/core/bfs.py
#!/usr/bin/env python3
"""
Breadth-first search — one expansion per step() for animation.

Stepper API expected by the viewer:
- reset(source, target, grid) - step(grid) -> done - metrics()

The searcher never keeps a reference to the grid; it is handed in on every
reset() and step() call and all visited/frontier marking happens on it.

States:  idle -> searching -> found | exhausted
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from gridsearch.core.grid import Grid
from gridsearch.core.types import Cell, InvalidCoordinate

logger = logging.getLogger(__name__)

IDLE = "idle"
SEARCHING = "searching"
FOUND = "found"
EXHAUSTED = "exhausted"


def _check_cell(cell: Cell, grid: Grid) -> Cell:
    try:
        row, col = cell
    except (TypeError, ValueError):
        raise InvalidCoordinate(None, None, detail=f"not a (row, col) pair: {cell!r}") from None
    if not (isinstance(row, int) and isinstance(col, int)) or row < 0 or col < 0:
        raise InvalidCoordinate(row, col)
    if not grid.in_bounds(row, col):
        raise InvalidCoordinate(row, col, grid.n_rows, grid.n_cols)
    return row, col


@dataclass
class BreadthFirstSearcher:
    name: str = "BFS"

    frontier_queue: Deque[Cell] = field(default_factory=deque)
    visit_order: List[Cell] = field(default_factory=list)
    target: Optional[Cell] = None
    status: str = IDLE
    steps: int = 0
    popped_count: int = 0

    # -------------------- lifecycle --------------------

    def reset(self, source: Cell, target: Cell, grid: Grid) -> None:
        """Drop any in-flight search and seed the queue with `source`.

        `grid` is only used to bounds-check the endpoints; its flags are left
        alone, clearing them is the caller's business.
        """
        source = _check_cell(source, grid)
        self.target = _check_cell(target, grid)
        self.frontier_queue.clear()
        self.frontier_queue.append(source)
        self.visit_order.clear()
        self.steps = 0
        self.popped_count = 0
        self.status = SEARCHING
        logger.debug("bfs reset: source=%s target=%s", source, self.target)

    @property
    def done(self) -> bool:
        return self.status in (FOUND, EXHAUSTED)

    @property
    def frontier(self) -> Tuple[Cell, ...]:
        return tuple(self.frontier_queue)

    # -------------------- stepping --------------------

    def step(self, grid: Grid) -> bool:
        """Do one unit of search work on `grid`. Returns True once finished."""
        self.steps += 1
        if not self.frontier_queue:
            if self.status == SEARCHING:
                self.status = EXHAUSTED
                logger.debug("bfs exhausted after %d pops", self.popped_count)
            return True

        row, col = self.frontier_queue.popleft()
        self.popped_count += 1

        if grid.is_target(row, col):
            self.frontier_queue.clear()
            self.status = FOUND
            logger.debug("bfs found target (%d, %d)", row, col)
            return True

        # a cell can be queued twice before either copy is expanded
        if grid.is_visited(row, col):
            logger.debug("bfs already visited (%d, %d)", row, col)
            return False

        grid.mark_visited(row, col)
        self.visit_order.append((row, col))
        logger.debug("bfs visiting (%d, %d)", row, col)

        for nr, nc in grid.neighbors(row, col):
            if not grid.is_untouched(nr, nc):
                logger.debug("bfs skipping neighbor (%d, %d)", nr, nc)
                continue
            grid.mark_frontier(nr, nc)
            grid.set_origin((row, col), (nr, nc))
            self.frontier_queue.append((nr, nc))
            logger.debug("bfs extending frontier to (%d, %d)", nr, nc)

        return False

    def metrics(self) -> dict:
        return {
            "algo": self.name,
            "target": self.target,
            "status": self.status,
            "steps": self.steps,
            "popped": self.popped_count,
            "queue_size": len(self.frontier_queue),
            "visited_count": len(self.visit_order),
        }
