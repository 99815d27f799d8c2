"""
A* pathfinding algorithm implementation.

Finds the shortest 4-connected path through a GridMap while avoiding
obstructed cells. All search state lives in the call that creates it.
"""
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

import numpy as np

from .base import Cell, Planner, SearchStats
from .grid_map import GridMap
from .priority_queue import IndexedPriorityQueue

logger = logging.getLogger(__name__)

# Cost of moving between two adjacent cells
STEP_COST = 1.0


def euclidean_distance(a: Cell, b: Cell) -> float:
    """Straight-line distance; admissible for unit-cost 4-connected moves."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return float(np.sqrt(dx * dx + dy * dy))


@dataclass
class PathfindingConfig:
    """Configuration for A* pathfinding."""
    heuristic_weight: float = 1.0  # Weight for heuristic (1.0 = standard A*)
    max_iterations: Optional[int] = None  # Safety limit, None = unbounded


class AStarPathfinder(Planner):
    """
    A* pathfinding algorithm.

    Finds the shortest path from start to goal on a snapshot of the grid.
    Open cells are ordered by f = g + h, ties going to the cell that was
    inserted first.
    """

    def __init__(self, grid: GridMap, config: Optional[PathfindingConfig] = None):
        self.grid = grid
        self.config = config or PathfindingConfig()
        self.last_stats = SearchStats()

    def _heuristic(self, cell: Cell, goal: Cell) -> float:
        return euclidean_distance(cell, goal) * self.config.heuristic_weight

    def _reconstruct_path(
        self,
        came_from: Dict[Cell, Cell],
        current: Cell,
    ) -> List[Cell]:
        """Reconstruct path from came_from dict, excluding the start cell."""
        path = []
        while current in came_from:
            path.append(current)
            current = came_from[current]
        path.reverse()
        return path

    def find_path(self, start: Cell, goal: Cell) -> List[Cell]:
        """
        Find shortest path from start to goal avoiding obstructions.

        Args:
            start: Starting cell (x, y)
            goal: Goal cell (x, y)

        Returns:
            Cells from the first step after start up to and including goal,
            or an empty list if no path exists
        """
        started_at = time.perf_counter()
        self.last_stats = SearchStats()

        path = self._search(start, goal)

        self.last_stats.path_length = len(path)
        self.last_stats.elapsed_seconds = time.perf_counter() - started_at
        return path

    def _search(self, start: Cell, goal: Cell) -> List[Cell]:
        grid = self.grid

        if not grid.is_in_bounds(start) or not grid.is_in_bounds(goal):
            logger.debug("Rejected request %s -> %s: out of bounds", start, goal)
            return []
        # A blocked goal can never be reached
        if not grid.is_walkable(goal):
            logger.debug("Rejected request %s -> %s: goal obstructed", start, goal)
            return []
        if not grid.is_walkable(start):
            logger.debug("Rejected request %s -> %s: start obstructed", start, goal)
            return []

        # Already at goal
        if start == goal:
            return []

        open_set = IndexedPriorityQueue()
        closed_set: Set[Cell] = set()
        came_from: Dict[Cell, Cell] = {}
        g_score: Dict[Cell, float] = {start: 0.0}

        open_set.enqueue(start, self._heuristic(start, goal))
        iterations = 0
        max_iterations = self.config.max_iterations

        while open_set:
            if max_iterations is not None and iterations >= max_iterations:
                logger.warning(
                    "A* gave up after %d iterations (%s -> %s)", iterations, start, goal
                )
                return []
            iterations += 1

            # Get cell with lowest f_score
            current = open_set.dequeue()
            self.last_stats.expansions += 1

            if current == goal:
                return self._reconstruct_path(came_from, current)

            closed_set.add(current)

            for neighbor in grid.neighbors(current):
                if neighbor in closed_set or not grid.is_walkable(neighbor):
                    continue

                tentative_g = g_score[current] + STEP_COST

                if neighbor not in open_set or tentative_g < g_score[neighbor]:
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative_g
                    f_score = tentative_g + self._heuristic(neighbor, goal)
                    open_set.enqueue(neighbor, f_score)

        logger.debug("No path found from %s to %s", start, goal)
        return []

    def reset(self) -> None:
        self.last_stats = SearchStats()

    @property
    def name(self) -> str:
        return "AStarPathfinder"
