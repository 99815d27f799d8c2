"""
Tests for GridAgent driving planners over a changing grid.

Usage:
    pytest test_agent.py
    python test_agent.py
"""
import pytest

from src.navigation import (
    AStarPathfinder,
    DStarLitePlanner,
    GridAgent,
    GridAgentConfig,
    GridMap,
    HybridController,
    HybridControllerConfig,
    PlannerMode,
)


def assert_connected(history):
    for a, b in zip(history, history[1:]):
        assert abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def test_agent_reaches_goal_on_open_grid():
    grid = GridMap(6, 6)
    agent = GridAgent(grid, AStarPathfinder(grid), start=(0, 0), goal=(5, 5))

    assert agent.run(max_ticks=50)
    assert agent.position == (5, 5)
    assert len(agent.history) == 11  # start + 10 steps
    assert_connected(agent.history)

    state = agent.get_state()
    assert state.is_complete
    assert not state.is_stuck


def test_agent_replans_around_new_obstruction():
    grid = GridMap(10, 10)
    controller = HybridController(grid, HybridControllerConfig(activation_delay=0.0))
    agent = GridAgent(grid, controller, start=(0, 0), goal=(9, 9))

    for _ in range(3):
        agent.tick()

    # Drop an obstruction right in front of the agent
    ahead = agent.path[1]
    assert grid.toggle_obstruction(ahead, True)

    assert agent.run(max_ticks=100)
    assert ahead not in agent.history
    assert_connected(agent.history)
    assert controller.mode is PlannerMode.INCREMENTAL


def test_agent_cell_cannot_be_obstructed():
    grid = GridMap(5, 5)
    agent = GridAgent(grid, DStarLitePlanner(grid), start=(1, 1), goal=(4, 4))

    assert not grid.toggle_obstruction((1, 1), True)
    assert not grid.toggle_obstruction((4, 4), True)

    agent.tick()
    assert grid.is_protected(agent.position)
    assert not grid.is_protected((1, 1))


def test_agent_clears_obstructed_goal_and_notifies_planner():
    grid = GridMap(5, 5)
    grid.set_walkable((4, 4), False)
    planner = DStarLitePlanner(grid)

    agent = GridAgent(grid, planner, start=(0, 0), goal=(4, 4))

    assert grid.is_walkable((4, 4))
    assert planner.pending_changes == 1
    assert agent.run(max_ticks=20)


def test_agent_reports_stuck_when_walled_in():
    grid = GridMap(5, 5)
    for y in range(5):
        grid.set_walkable((2, y), False)
    agent = GridAgent(
        grid,
        AStarPathfinder(grid),
        start=(0, 0),
        goal=(4, 4),
        config=GridAgentConfig(replan_interval=2),
    )

    assert not agent.run(max_ticks=5)
    state = agent.get_state()
    assert state.is_stuck
    assert not state.has_path
    assert agent.position == (0, 0)


def test_replan_interval_must_be_positive():
    grid = GridMap(5, 5)
    with pytest.raises(ValueError):
        GridAgent(
            grid,
            AStarPathfinder(grid),
            start=(0, 0),
            goal=(4, 4),
            config=GridAgentConfig(replan_interval=0),
        )


if __name__ == "__main__":
    print("=" * 60)
    print("GridAgent tests")
    print("=" * 60)
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            func()
            print(f"  {name}: ok")
    print("\nAll GridAgent tests passed!")
