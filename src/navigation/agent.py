"""
Simulated grid agent that follows planner output one cell per tick.

Stands in for the movement layer: it polls a planner on a fixed cadence,
steps along the latest path and keeps its own cell protected so nothing
can be placed on top of it.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from .base import Cell, NavigationState, Planner
from .grid_map import GridMap

logger = logging.getLogger(__name__)


@dataclass
class GridAgentConfig:
    """Configuration for the simulated agent."""
    replan_interval: int = 1  # Ticks between planner calls
    protect_position: bool = True  # Keep the occupied cell walkable


class GridAgent:
    """
    Moves across a GridMap toward a goal using any Planner.

    Flow per tick:
    1. Replan if the interval elapsed or the current path is used up
    2. Step onto the next cell of the path if it is still walkable
    3. Mark complete once the goal cell is reached
    """

    def __init__(
        self,
        grid: GridMap,
        planner: Planner,
        start: Cell,
        goal: Cell,
        config: Optional[GridAgentConfig] = None,
    ):
        self.grid = grid
        self.planner = planner
        self.config = config or GridAgentConfig()
        if self.config.replan_interval < 1:
            raise ValueError(
                f"replan_interval must be at least 1, got {self.config.replan_interval}"
            )

        self._position: Cell = start
        self._goal: Cell = goal
        self._path: List[Cell] = []
        self._path_index = 0
        self._ticks = 0
        self._is_stuck = False
        self._history: List[Cell] = [start]

        if self.config.protect_position:
            self._protect(start)
            self._protect(goal)

    @property
    def position(self) -> Cell:
        return self._position

    @property
    def goal(self) -> Cell:
        return self._goal

    @property
    def history(self) -> List[Cell]:
        """Cells visited so far, starting position first."""
        return list(self._history)

    @property
    def path(self) -> List[Cell]:
        """Remaining planned cells."""
        return self._path[self._path_index:]

    @property
    def is_complete(self) -> bool:
        return self._position == self._goal

    def _protect(self, cell: Cell) -> None:
        if self.grid.add_protected_position(cell):
            # Clearing an obstruction is a walkability change
            notify = getattr(self.planner, "mark_cell_changed", None)
            if notify is not None:
                notify(cell)
            logger.warning("Cleared obstruction at protected position %s", cell)

    def _replan(self) -> None:
        self._path = self.planner.find_path(self._position, self._goal)
        self._path_index = 0
        self._is_stuck = not self._path
        if self._is_stuck:
            logger.debug("Agent at %s has no path to %s", self._position, self._goal)

    def tick(self) -> Cell:
        """Advance one tick; returns the agent's position afterwards."""
        if self.is_complete:
            return self._position

        due = self._ticks % self.config.replan_interval == 0
        exhausted = self._path_index >= len(self._path)
        self._ticks += 1

        if due or exhausted:
            self._replan()

        if self._path_index >= len(self._path):
            return self._position

        next_cell = self._path[self._path_index]
        if not self.grid.is_walkable(next_cell):
            # Path went stale between replans; wait for the next one
            self._path = []
            self._path_index = 0
            return self._position

        self._move_to(next_cell)
        self._path_index += 1
        return self._position

    def _move_to(self, cell: Cell) -> None:
        if self.config.protect_position:
            self.grid.remove_protected_position(self._position)
            self._protect(cell)
        self._position = cell
        self._history.append(cell)

    def run(self, max_ticks: int) -> bool:
        """
        Tick until the goal is reached or max_ticks elapse.

        Returns:
            True if the goal was reached
        """
        for _ in range(max_ticks):
            if self.is_complete:
                break
            self.tick()
        return self.is_complete

    def get_state(self) -> NavigationState:
        """Get current navigation state."""
        remaining = max(0, len(self._path) - self._path_index)
        return NavigationState(
            has_path=remaining > 0,
            waypoints_remaining=remaining,
            total_waypoints=len(self._path),
            is_complete=self.is_complete,
            is_stuck=self._is_stuck and not self.is_complete,
        )
