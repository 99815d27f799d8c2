"""
D* Lite incremental planner.

Searches backwards from the goal and keeps its g/rhs bookkeeping between
calls. When cells change walkability only the affected region is repaired,
and when the agent moves the accumulated offset km keeps previously queued
keys comparable with fresh ones.
"""
import logging
import threading
import time
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from .base import Cell, Planner, SearchStats
from .grid_map import GridMap
from .pathfinding import STEP_COST, euclidean_distance
from .priority_queue import IndexedPriorityQueue

logger = logging.getLogger(__name__)

INF = float("inf")

Key = Tuple[float, float]


class DStarLitePlanner(Planner):
    """
    Incremental shortest-path planner for a fixed goal on a changing grid.

    Usage:
        planner = DStarLitePlanner(grid)
        path = planner.find_path(start, goal)

        grid.set_walkable(cell, False)
        planner.mark_cell_changed(cell)
        path = planner.find_path(new_start, goal)  # repairs, does not restart

    All state changes happen under one re-entrant lock, so find_path() and
    mark_cell_changed() may be called from different threads.
    """

    def __init__(self, grid: GridMap):
        self.grid = grid
        self._lock = threading.RLock()

        self._g: Dict[Cell, float] = {}
        self._rhs: Dict[Cell, float] = {}
        self._queue = IndexedPriorityQueue()
        self._km: float = 0.0
        self._goal: Optional[Cell] = None
        self._last_start: Optional[Cell] = None

        # Cells reported as changed since the last planning call
        self._pending: Deque[Cell] = deque()

        self.last_stats = SearchStats()

    # ------------------------------------------------------------------
    # Bookkeeping accessors
    # ------------------------------------------------------------------

    @property
    def goal(self) -> Optional[Cell]:
        return self._goal

    @property
    def km(self) -> float:
        return self._km

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    @property
    def pending_changes(self) -> int:
        with self._lock:
            return len(self._pending)

    def g(self, cell: Cell) -> float:
        return self._g.get(cell, INF)

    def rhs(self, cell: Cell) -> float:
        return self._rhs.get(cell, INF)

    def is_consistent(self, cell: Cell) -> bool:
        return self.g(cell) == self.rhs(cell)

    # ------------------------------------------------------------------
    # Core D* Lite procedures
    # ------------------------------------------------------------------

    def heuristic(self, a: Cell, b: Cell) -> float:
        return euclidean_distance(a, b)

    def edge_cost(self, a: Cell, b: Cell) -> float:
        """Cost of stepping from a into b; the goal is always enterable."""
        if b == self._goal or self.grid.is_walkable(b):
            return STEP_COST
        return INF

    def calculate_key(self, cell: Cell, start: Cell) -> Key:
        best = min(self.g(cell), self.rhs(cell))
        return (best + self.heuristic(cell, start) + self._km, best)

    def initialize(self, goal: Cell, start: Optional[Cell] = None) -> None:
        """Forget everything and seed the search from a new goal."""
        with self._lock:
            self._queue.clear()
            self._g.clear()
            self._rhs.clear()
            self._pending.clear()
            self._km = 0.0
            self._goal = goal
            self._last_start = start

            self._rhs[goal] = 0.0
            self._queue.enqueue(goal, self.calculate_key(goal, start if start is not None else goal))
            logger.debug("Initialized D* Lite for goal %s", goal)

    def update_vertex(self, cell: Cell, start: Cell) -> None:
        """Recompute rhs for a cell and fix its queue membership."""
        if cell != self._goal:
            best = INF
            for successor in self.grid.neighbors(cell):
                cost = self.edge_cost(cell, successor) + self.g(successor)
                if cost < best:
                    best = cost
            self._rhs[cell] = best

        self._queue.remove(cell)
        if self.g(cell) != self.rhs(cell):
            self._queue.enqueue(cell, self.calculate_key(cell, start))

    def compute_shortest_path(self, start: Cell) -> None:
        """Process inconsistent cells until start is consistent and settled."""
        queue = self._queue
        while queue and (
            queue.peek_key() < self.calculate_key(start, start)
            or self.rhs(start) != self.g(start)
        ):
            old_key = queue.peek_key()
            cell = queue.dequeue()
            new_key = self.calculate_key(cell, start)

            if old_key < new_key:
                # Queued before km grew; put it back under its current key
                queue.enqueue(cell, new_key)
                continue

            self.last_stats.expansions += 1

            if self.g(cell) > self.rhs(cell):
                self._g[cell] = self.rhs(cell)
                for predecessor in self.grid.neighbors(cell):
                    self.update_vertex(predecessor, start)
            else:
                self._g[cell] = INF
                self.update_vertex(cell, start)
                for predecessor in self.grid.neighbors(cell):
                    self.update_vertex(predecessor, start)

    def mark_cell_changed(self, cell: Cell) -> None:
        """Record a cell whose walkability changed; applied on the next find_path()."""
        with self._lock:
            self._pending.append(cell)

    def _apply_pending_changes(self, start: Cell) -> int:
        applied = 0
        while self._pending:
            cell = self._pending.popleft()
            if not self.grid.is_in_bounds(cell):
                continue
            # Edges into the cell changed, so its neighbors' rhs may too
            self.update_vertex(cell, start)
            for neighbor in self.grid.neighbors(cell):
                self.update_vertex(neighbor, start)
            applied += 1
        return applied

    # ------------------------------------------------------------------
    # Planner interface
    # ------------------------------------------------------------------

    def find_path(self, start: Cell, goal: Cell) -> List[Cell]:
        """
        Find (or repair) the shortest path from start to goal.

        Returns:
            Cells from the first step after start up to and including goal,
            or an empty list if no path exists
        """
        started_at = time.perf_counter()
        with self._lock:
            self.last_stats = SearchStats()
            path = self._plan(start, goal)
            self.last_stats.path_length = len(path)
            self.last_stats.elapsed_seconds = time.perf_counter() - started_at
        return path

    def _plan(self, start: Cell, goal: Cell) -> List[Cell]:
        grid = self.grid

        if not grid.is_in_bounds(start) or not grid.is_in_bounds(goal):
            logger.debug("Rejected request %s -> %s: out of bounds", start, goal)
            return []
        if not grid.is_walkable(goal):
            logger.debug("Rejected request %s -> %s: goal obstructed", start, goal)
            return []
        if not grid.is_walkable(start):
            logger.debug("Rejected request %s -> %s: start obstructed", start, goal)
            return []

        if goal != self._goal:
            self.initialize(goal, start)
        elif self._last_start is not None and start != self._last_start:
            self._km += self.heuristic(self._last_start, start)
        self._last_start = start

        applied = self._apply_pending_changes(start)
        if applied:
            logger.debug("Applied %d changed cells", applied)

        if start == goal:
            return []

        self.compute_shortest_path(start)

        if self.g(start) == INF:
            logger.debug("No path found from %s to %s", start, goal)
            return []

        return self._reconstruct_path(start, goal)

    def _reconstruct_path(self, start: Cell, goal: Cell) -> List[Cell]:
        """Greedily follow the cheapest successor from start to goal."""
        path: List[Cell] = []
        visited = {start}
        current = start
        max_steps = self.grid.size

        while current != goal:
            if len(path) >= max_steps:
                logger.warning(
                    "Path reconstruction exceeded %d steps from %s; returning partial path",
                    max_steps, start,
                )
                return path

            best_cell = None
            best_cost = INF
            for successor in self.grid.neighbors(current):
                cost = self.edge_cost(current, successor) + self.g(successor)
                if cost < best_cost:
                    best_cost = cost
                    best_cell = successor

            if best_cell is None or best_cell in visited:
                logger.warning(
                    "Path reconstruction stalled at %s (%d steps); returning partial path",
                    current, len(path),
                )
                return path

            path.append(best_cell)
            visited.add(best_cell)
            current = best_cell

        return path

    def reset(self) -> None:
        with self._lock:
            self._queue.clear()
            self._g.clear()
            self._rhs.clear()
            self._pending.clear()
            self._km = 0.0
            self._goal = None
            self._last_start = None
            self.last_stats = SearchStats()

    @property
    def name(self) -> str:
        return "DStarLitePlanner"
