# gridsearch/core/searchers.py
#!/usr/bin/env python3
"""Search strategy registry.

Every strategy implements the Stepper protocol. Callers only ever talk to a
Stepper, so adding Dijkstra or A* later means adding an entry to SEARCHERS.
"""

from typing import Callable, Dict, List, Protocol

from gridsearch.core.bfs import BreadthFirstSearcher
from gridsearch.core.grid import Grid
from gridsearch.core.types import Cell


class Stepper(Protocol):
    name: str
    status: str

    def reset(self, source: Cell, target: Cell, grid: Grid) -> None: ...

    def step(self, grid: Grid) -> bool: ...

    def metrics(self) -> dict: ...


SEARCHERS: Dict[str, Callable[[], Stepper]] = {
    "bfs": BreadthFirstSearcher,
}


def available_searchers() -> List[str]:
    return sorted(SEARCHERS)


def make_searcher(name: str) -> Stepper:
    """Fresh stepper for `name`; never shares working state with another."""
    try:
        factory = SEARCHERS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown search algorithm {name!r} (choose from {', '.join(available_searchers())})") from None
    return factory()
