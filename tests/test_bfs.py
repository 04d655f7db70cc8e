"""
Tests for the incremental breadth-first searcher and the strategy registry.
"""

import pytest

from gridsearch.core.bfs import BreadthFirstSearcher
from gridsearch.core.grid import Grid
from gridsearch.core.searchers import available_searchers, make_searcher
from gridsearch.core.types import CellState, InvalidCoordinate


def seeded(grid):
    searcher = BreadthFirstSearcher()
    searcher.reset(grid.source, grid.target, grid=grid)
    return searcher


def run_to_completion(searcher, grid, limit=None):
    limit = limit or grid.n_rows * grid.n_cols + 1
    for calls in range(1, limit + 1):
        if searcher.step(grid):
            return calls
    raise AssertionError(f"search did not finish within {limit} steps")


# =============================================================================
# Lifecycle
# =============================================================================


class TestLifecycle:
    def test_new_searcher_is_idle(self) -> None:
        searcher = BreadthFirstSearcher()
        assert searcher.status == "idle"
        assert searcher.frontier == ()
        assert not searcher.done

    def test_stepping_unseeded_searcher_is_done_and_harmless(self) -> None:
        grid = Grid.empty(2, 2)
        searcher = BreadthFirstSearcher()
        rev = grid.revision
        assert searcher.step(grid) is True
        assert grid.revision == rev

    def test_reset_seeds_queue_without_touching_grid(self, grid_from_rows) -> None:
        grid = grid_from_rows(["S.T"])
        rev = grid.revision
        searcher = seeded(grid)
        assert searcher.frontier == ((0, 0),)
        assert searcher.status == "searching"
        assert not grid.is_visited(0, 0)
        assert grid.revision == rev

    def test_reset_discards_progress_but_not_grid_flags(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            "S....",
            ".....",
            "....T",
        ])
        searcher = seeded(grid)
        for _ in range(4):
            searcher.step(grid)
        visited_before = [(r, c) for r, c, s in grid.cell_states() if grid.is_visited(r, c)]
        assert len(visited_before) == 4

        searcher.reset((1, 1), grid.target, grid=grid)
        assert searcher.frontier == ((1, 1),)
        assert searcher.visit_order == []
        for cell in visited_before:
            assert grid.is_visited(*cell)

    @pytest.mark.parametrize("source", [(-1, 0), (0, -2), (3, 0), (0, 5)])
    def test_reset_rejects_out_of_bounds(self, source) -> None:
        grid = Grid.empty(3, 5)
        searcher = BreadthFirstSearcher()
        with pytest.raises(InvalidCoordinate):
            searcher.reset(source, (1, 1), grid=grid)
        assert searcher.status == "idle"

    def test_reset_rejects_far_out_of_bounds_before_any_step(self) -> None:
        grid = Grid.empty(3, 3)
        searcher = BreadthFirstSearcher()
        with pytest.raises(InvalidCoordinate):
            searcher.reset((99, 99), (0, 0), grid=grid)
        assert searcher.status == "idle"
        assert searcher.frontier == ()

    def test_reset_rejects_out_of_bounds_target(self) -> None:
        grid = Grid.empty(3, 3)
        searcher = BreadthFirstSearcher()
        with pytest.raises(InvalidCoordinate):
            searcher.reset((0, 0), (3, 3), grid=grid)
        assert searcher.status == "idle"

    def test_reset_requires_grid(self) -> None:
        with pytest.raises(TypeError):
            BreadthFirstSearcher().reset((0, 0), (1, 1))

    @pytest.mark.parametrize("bad", [None, (1,), "x", (1, 2, 3)])
    def test_reset_rejects_non_pairs_naming_the_value(self, bad) -> None:
        with pytest.raises(InvalidCoordinate, match="not a \\(row, col\\) pair") as excinfo:
            BreadthFirstSearcher().reset(bad, (0, 0), grid=Grid.empty(2, 2))
        assert repr(bad) in str(excinfo.value)
        assert "-1" not in str(excinfo.value)

    def test_metrics_report_target(self, grid_from_rows) -> None:
        grid = grid_from_rows(["S.T"])
        searcher = seeded(grid)
        assert searcher.metrics()["target"] == (0, 2)


# =============================================================================
# Single steps
# =============================================================================


class TestStep:
    def test_first_step_visits_source_and_expands_in_order(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            ".....",
            ".....",
            "..S..",
            ".....",
            "....T",
        ])
        searcher = seeded(grid)
        assert searcher.step(grid) is False
        assert grid.is_visited(2, 2)
        assert grid.cell_state(2, 2) is CellState.SOURCE
        assert searcher.frontier == ((1, 2), (2, 1), (2, 3), (3, 2))
        for cell in searcher.frontier:
            assert grid.cell_state(*cell) is CellState.FRONTIER

    def test_walls_are_never_queued(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            ".#.",
            "#S.",
            "..T",
        ])
        searcher = seeded(grid)
        searcher.step(grid)
        assert searcher.frontier == ((1, 2), (2, 1))
        assert grid.is_wall(0, 1)
        assert grid.is_wall(1, 0)

    def test_frontier_cells_are_not_requeued(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            "S.",
            "..",
            ".T",
        ])
        searcher = seeded(grid)
        searcher.step(grid)           # (0,0) -> queue (0,1), (1,0)
        searcher.step(grid)           # (0,1) -> (1,1)
        searcher.step(grid)           # (1,0) -> (2,0); (1,1) already frontier
        assert searcher.frontier == ((1, 1), (2, 0))

    def test_duplicate_queue_entry_is_skipped(self, grid_from_rows) -> None:
        grid = grid_from_rows(["S..T"])
        searcher = seeded(grid)
        searcher.step(grid)
        # same cell queued twice; the second copy must be a no-op
        searcher.frontier_queue.append((0, 1))
        searcher.step(grid)
        assert searcher.frontier == ((0, 1), (0, 2))
        rev = grid.revision
        assert searcher.step(grid) is False
        assert grid.revision == rev
        assert searcher.frontier == ((0, 2),)

    def test_popping_visited_cell_does_no_work(self, grid_from_rows) -> None:
        grid = grid_from_rows(["S.T"])
        grid.mark_visited(0, 1)
        searcher = seeded(grid)
        searcher.frontier_queue.clear()
        searcher.frontier_queue.append((0, 1))
        rev = grid.revision
        assert searcher.step(grid) is False
        assert grid.revision == rev
        assert searcher.frontier == ()

    def test_each_step_pops_at_most_one(self) -> None:
        grid = Grid.empty(4, 4)
        grid.set_source(0, 0)
        grid.set_target(3, 3)
        searcher = seeded(grid)
        for _ in range(5):
            before = searcher.metrics()["popped"]
            searcher.step(grid)
            assert searcher.metrics()["popped"] == before + 1

    def test_frontier_expansion_records_origin(self, grid_from_rows) -> None:
        grid = grid_from_rows(["S.T"])
        searcher = seeded(grid)
        searcher.step(grid)
        assert grid.flags(0, 1).origin_offset() == (0, -1)


# =============================================================================
# Full runs
# =============================================================================


class TestFullSearch:
    def test_open_grid_found_and_fully_reached(self) -> None:
        grid = Grid.empty(5, 5)
        grid.set_source(0, 0)
        grid.set_target(4, 4)
        searcher = seeded(grid)
        run_to_completion(searcher, grid)
        assert searcher.status == "found"
        assert searcher.frontier == ()
        for r, c, state in grid.cell_states():
            if (r, c) == (4, 4):
                continue
            assert grid.is_visited(r, c)
        assert len(searcher.visit_order) == 24

    def test_found_path_is_shortest(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            "S....",
            ".###.",
            ".#T#.",
            ".#.#.",
            ".....",
        ])
        searcher = seeded(grid)
        run_to_completion(searcher, grid)
        assert searcher.status == "found"
        path = grid.trace_path(grid.target)
        assert path[0] == (0, 0)
        assert path[-1] == (2, 2)
        assert len(path) - 1 == 8
        for (r0, c0), (r1, c1) in zip(path, path[1:]):
            assert abs(r0 - r1) + abs(c0 - c1) == 1
            assert not grid.is_wall(r1, c1)

    def test_enclosed_target_exhausts(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            "S....",
            "..###",
            "..#T#",
            "..###",
            ".....",
        ])
        searcher = seeded(grid)
        run_to_completion(searcher, grid)
        assert searcher.status == "exhausted"
        assert not grid.is_visited(2, 3)
        assert grid.cell_state(2, 3) is CellState.TARGET
        assert grid.trace_path(grid.target) == []

    def test_target_on_wall_is_unreachable(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            "S..",
            "...",
            "..#",
        ])
        grid.set_target(2, 2)
        searcher = seeded(grid)
        run_to_completion(searcher, grid)
        assert searcher.status == "exhausted"
        assert grid.cell_state(2, 2) is CellState.TARGET

    def test_done_search_stays_done(self, grid_from_rows) -> None:
        grid = grid_from_rows(["ST"])
        searcher = seeded(grid)
        run_to_completion(searcher, grid)
        rev = grid.revision
        for _ in range(3):
            assert searcher.step(grid) is True
        assert searcher.status == "found"
        assert grid.revision == rev

    @pytest.mark.parametrize("rows", [
        ["S....", ".....", ".....", ".....", "....T"],
        ["S.#..", ".##..", "....#", "#.#..", "...#T"],
        ["S#...", "##...", ".....", ".....", "....T"],
        ["S#T"],
    ])
    def test_terminates_within_cell_count_plus_one(self, grid_from_rows, rows) -> None:
        grid = grid_from_rows(rows)
        searcher = seeded(grid)
        calls = run_to_completion(searcher, grid)
        assert calls <= grid.n_rows * grid.n_cols + 1
        assert searcher.done

    def test_visit_order_is_deterministic(self, grid_from_rows) -> None:
        rows = [
            "S..#....",
            ".#.#.##.",
            ".#...#..",
            ".####.#.",
            "......#T",
        ]
        orders = []
        for _ in range(3):
            grid = grid_from_rows(rows)
            searcher = seeded(grid)
            run_to_completion(searcher, grid)
            orders.append(list(searcher.visit_order))
        assert orders[0] == orders[1] == orders[2]

    def test_visit_order_is_breadth_first(self, grid_from_rows) -> None:
        grid = grid_from_rows([
            "...",
            ".S.",
            "..T",
        ])
        searcher = seeded(grid)
        run_to_completion(searcher, grid)
        assert searcher.visit_order[:5] == [(1, 1), (0, 1), (1, 0), (1, 2), (2, 1)]


# =============================================================================
# Registry
# =============================================================================


class TestRegistry:
    def test_bfs_is_available(self) -> None:
        assert "bfs" in available_searchers()

    def test_make_searcher_returns_fresh_instances(self) -> None:
        a = make_searcher("bfs")
        b = make_searcher("BFS")
        assert isinstance(a, BreadthFirstSearcher)
        assert a is not b
        a.reset((0, 0), (1, 1), grid=Grid.empty(2, 2))
        assert b.frontier == ()

    def test_unknown_searcher(self) -> None:
        with pytest.raises(ValueError, match="unknown search algorithm"):
            make_searcher("dijkstra")
