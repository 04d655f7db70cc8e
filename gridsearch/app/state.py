# gridsearch/app/state.py
#!/usr/bin/env python3
"""Application state shared by the viewer: grid, searcher, pause flag."""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from gridsearch.app.config import MAX_GRID_SIZE, MIN_GRID_SIZE
from gridsearch.core.bfs import FOUND
from gridsearch.core.grid import Grid
from gridsearch.core.searchers import Stepper, make_searcher
from gridsearch.core.types import Cell, InvalidCoordinate

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    grid_size: int
    fill_percent: float
    grid: Grid
    searcher: Stepper
    algo: str = "bfs"
    paused: bool = True
    rng: random.Random = field(default_factory=random.Random, repr=False)

    @classmethod
    def new(cls, grid_size: int, fill_percent: float, algo: str = "bfs",
            seed: Optional[int] = None) -> "AppState":
        state = cls(
            grid_size=grid_size,
            fill_percent=fill_percent,
            grid=Grid.empty(grid_size, grid_size),
            searcher=make_searcher(algo),
            algo=algo,
            rng=random.Random(seed),
        )
        state.regenerate_grid()
        return state

    # -------------------- endpoints --------------------

    def default_endpoints(self):
        source_r = int(self.grid_size * 0.2)
        target_r = int(self.grid_size * 0.8)
        return (source_r, source_r), (target_r, target_r)

    def set_search_endpoints(self, source: Cell, target: Cell) -> None:
        if tuple(source) == tuple(target):
            raise InvalidCoordinate(*target)
        self.grid.set_source(*source)
        self.grid.set_target(*target)
        self.searcher.reset(source, target, grid=self.grid)

    # -------------------- grid lifecycle --------------------

    def regenerate_grid(self) -> None:
        self.paused = True
        self.grid = Grid.empty(self.grid_size, self.grid_size)
        p = self.fill_percent
        self.grid.regenerate(lambda _row, _col: self.rng.random() < p)
        source, target = self.default_endpoints()
        self.grid.set_wall(*source, False)
        self.grid.set_wall(*target, False)
        self.set_search_endpoints(source, target)
        logger.info("regenerated %dx%d grid (fill=%.2f)", self.grid_size, self.grid_size, p)

    def fill_randomly(self, p: float) -> "AppState":
        self.fill_percent = min(1.0, max(0.0, p))
        self.regenerate_grid()
        return self

    def resize(self, grid_size: int) -> None:
        self.grid_size = min(MAX_GRID_SIZE, max(MIN_GRID_SIZE, int(grid_size)))
        self.regenerate_grid()

    def select_searcher(self, algo: str) -> None:
        """Swap strategy; the new stepper starts from a clean search."""
        self.searcher = make_searcher(algo)
        self.algo = algo.lower()
        self.restart_search()

    def restart_search(self) -> None:
        self.paused = True
        self.grid.clear_search()
        self.searcher.reset(self.grid.source, self.grid.target, grid=self.grid)

    # -------------------- stepping --------------------

    def search_step_delay(self) -> float:
        """Seconds between animation steps; bigger grids step faster."""
        return 5.0 / self.grid_size ** 3

    def step_search(self) -> bool:
        done = self.searcher.step(self.grid)
        self.paused |= done
        return done

    def toggle_paused(self) -> None:
        self.paused = not self.paused

    def found_path(self) -> List[Cell]:
        if self.searcher.status != FOUND or self.grid.target is None:
            return []
        return self.grid.trace_path(self.grid.target)
