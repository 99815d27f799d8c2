"""
Tests for AStarPathfinder.

Covers the fixed scenarios (open grid, funnel through a wall gap), the
boundary cases that must return an empty path, and the shape of every
returned path.

Usage:
    pytest test_pathfinding.py
    python test_pathfinding.py
"""
from typing import List

from src.navigation import AStarPathfinder, GridMap, PathfindingConfig
from src.navigation.base import Cell


def assert_valid_path(grid: GridMap, start: Cell, goal: Cell, path: List[Cell]) -> None:
    """Path is non-empty, 4-connected, walkable, starts next to start, ends at goal."""
    assert path, "expected a path"
    assert path[-1] == goal
    previous = start
    for cell in path:
        assert grid.is_in_bounds(cell)
        assert grid.is_walkable(cell)
        assert abs(cell[0] - previous[0]) + abs(cell[1] - previous[1]) == 1
        previous = cell


def build_wall_grid() -> GridMap:
    """5x5 grid with column x=2 obstructed except (2, 4)."""
    grid = GridMap(5, 5)
    for y in range(4):
        grid.set_walkable((2, y), False)
    return grid


def test_open_grid_manhattan_length():
    grid = GridMap(5, 5)
    planner = AStarPathfinder(grid)

    path = planner.find_path((0, 0), (4, 4))

    assert len(path) == 8
    assert_valid_path(grid, (0, 0), (4, 4), path)
    assert (0, 0) not in path
    assert planner.last_stats.path_length == 8
    assert planner.last_stats.expansions > 0


def test_wall_gap_funnels_path():
    grid = build_wall_grid()
    planner = AStarPathfinder(grid)

    path = planner.find_path((0, 0), (4, 4))

    assert_valid_path(grid, (0, 0), (4, 4), path)
    assert (2, 4) in path
    assert len(path) == 8

    # Coming from the bottom right costs a detour through the gap
    path = planner.find_path((4, 0), (0, 0))
    assert_valid_path(grid, (4, 0), (0, 0), path)
    assert (2, 4) in path
    assert len(path) == 12


def test_same_start_and_goal_is_empty():
    grid = GridMap(5, 5)
    planner = AStarPathfinder(grid)
    assert planner.find_path((2, 2), (2, 2)) == []


def test_obstructed_goal_fails_fast():
    grid = GridMap(5, 5)
    grid.set_walkable((4, 4), False)
    planner = AStarPathfinder(grid)

    assert planner.find_path((0, 0), (4, 4)) == []
    assert planner.last_stats.expansions == 0


def test_obstructed_start_and_out_of_bounds_are_empty():
    grid = GridMap(5, 5)
    grid.set_walkable((0, 0), False)
    planner = AStarPathfinder(grid)

    assert planner.find_path((0, 0), (4, 4)) == []
    assert planner.find_path((1, 1), (5, 5)) == []
    assert planner.find_path((-1, 0), (4, 4)) == []


def test_unreachable_goal_is_empty():
    grid = GridMap(5, 5)
    for y in range(5):
        grid.set_walkable((2, y), False)
    planner = AStarPathfinder(grid)

    assert planner.find_path((0, 0), (4, 4)) == []


def test_repeated_calls_are_identical():
    grid = GridMap(8, 8)
    grid.generate_random_obstructions(probability=0.2, seed=11)
    grid.set_walkable((0, 0), True)
    grid.set_walkable((7, 7), True)
    planner = AStarPathfinder(grid)

    first = planner.find_path((0, 0), (7, 7))
    second = planner.find_path((0, 0), (7, 7))
    assert first == second


def test_equal_cost_ties_expand_first_inserted():
    grid = GridMap(3, 3)
    planner = AStarPathfinder(grid)

    # (0, 1) and (1, 0) tie on f; the up neighbor is queued first and wins
    path = planner.find_path((0, 0), (2, 2))

    assert path == [(0, 1), (1, 1), (1, 2), (2, 2)]
    assert planner.last_stats.expansions == 9


def test_no_state_leaks_between_searches():
    grid = build_wall_grid()
    planner = AStarPathfinder(grid)

    planner.find_path((0, 0), (4, 4))
    path = planner.find_path((0, 4), (0, 0))

    assert_valid_path(grid, (0, 4), (0, 0), path)
    assert len(path) == 4


def test_iteration_cap_gives_up():
    grid = GridMap(10, 10)
    planner = AStarPathfinder(grid, PathfindingConfig(max_iterations=3))
    assert planner.find_path((0, 0), (9, 9)) == []


if __name__ == "__main__":
    print("=" * 60)
    print("A* pathfinding tests")
    print("=" * 60)
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            func()
            print(f"  {name}: ok")

    grid = build_wall_grid()
    path = AStarPathfinder(grid).find_path((0, 0), (4, 4))
    print("\nPath through the wall gap:")
    print(grid.to_ascii(path, start=(0, 0), goal=(4, 4)))
    print("\nAll A* tests passed!")
