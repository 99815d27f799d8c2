"""
Hybrid controller combining one-shot A* with incremental D* Lite.

The controller starts with A*, which is cheapest while the grid is static.
Once new obstructions appear (after an activation delay during which the
grid is assumed static) it switches permanently to D* Lite and forwards
every changed cell so the incremental planner can repair its search.
"""
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, List, Optional, Set

from .base import Cell, Planner
from .dstar_lite import DStarLitePlanner
from .grid_map import GridMap
from .pathfinding import AStarPathfinder, PathfindingConfig

logger = logging.getLogger(__name__)


class PlannerMode(Enum):
    """Which planner the hybrid controller delegates to."""
    ONE_SHOT = auto()     # AStarPathfinder
    INCREMENTAL = auto()  # DStarLitePlanner (terminal)


@dataclass
class HybridControllerConfig:
    """Configuration for hybrid controller."""
    # Seconds after construction before D* Lite may be activated
    activation_delay: float = 5.0

    # Log planner selection and the mode switch
    log_mode_switching: bool = True

    # Settings for the A* planner used in ONE_SHOT mode
    pathfinding: Optional[PathfindingConfig] = None


class HybridController(Planner):
    """
    Planner that picks A* or D* Lite depending on how the grid evolves.

    Architecture:
    1. Each find_path() diffs the grid's obstruction set against the set
       seen on the previous call (once the activation delay has elapsed)
    2. The first newly obstructed cell switches ONE_SHOT -> INCREMENTAL
    3. In INCREMENTAL mode every added or cleared obstruction is forwarded
       to D* Lite via mark_cell_changed() before it plans
    4. There is no way back to ONE_SHOT

    Usage:
        controller = HybridController(grid, HybridControllerConfig(activation_delay=0))
        path = controller.find_path(start, goal)
    """

    def __init__(
        self,
        grid: GridMap,
        config: Optional[HybridControllerConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        one_shot: Optional[AStarPathfinder] = None,
        incremental: Optional[DStarLitePlanner] = None,
    ):
        self.grid = grid
        self.config = config or HybridControllerConfig()
        self._clock = clock
        self._lock = threading.RLock()

        self._one_shot = one_shot or AStarPathfinder(grid, self.config.pathfinding)
        self._incremental = incremental or DStarLitePlanner(grid)

        self._mode = PlannerMode.ONE_SHOT
        self._started_at = clock()
        self._last_obstructions: Set[Cell] = grid.get_obstructed_cells()
        self._activation_logged = False

    @property
    def mode(self) -> PlannerMode:
        return self._mode

    @property
    def is_incremental(self) -> bool:
        return self._mode is PlannerMode.INCREMENTAL

    @property
    def active_planner(self) -> Planner:
        if self._mode is PlannerMode.INCREMENTAL:
            return self._incremental
        return self._one_shot

    @property
    def one_shot_planner(self) -> AStarPathfinder:
        return self._one_shot

    @property
    def incremental_planner(self) -> DStarLitePlanner:
        return self._incremental

    def activation_elapsed(self) -> bool:
        """Whether the grace period before D* Lite may be used has passed."""
        return self._clock() - self._started_at >= self.config.activation_delay

    def find_path(self, start: Cell, goal: Cell) -> List[Cell]:
        with self._lock:
            if self.activation_elapsed():
                if not self._activation_logged and self.config.log_mode_switching:
                    logger.info(
                        "D* Lite now available (after %.1f seconds)",
                        self.config.activation_delay,
                    )
                self._activation_logged = True
                self._check_for_obstruction_changes()

            planner = self.active_planner
            if self.config.log_mode_switching:
                logger.debug("Using %s for %s -> %s", planner.name, start, goal)

            return planner.find_path(start, goal)

    def _check_for_obstruction_changes(self) -> None:
        current = self.grid.get_obstructed_cells()
        added = current - self._last_obstructions
        removed = self._last_obstructions - current

        if added and self._mode is PlannerMode.ONE_SHOT:
            self._mode = PlannerMode.INCREMENTAL
            if self.config.log_mode_switching:
                logger.info(
                    "%d new obstructions detected - switching to D* Lite", len(added)
                )

        if self._mode is PlannerMode.INCREMENTAL:
            for cell in sorted(added | removed):
                self._incremental.mark_cell_changed(cell)

        self._last_obstructions = current

    def mark_cell_changed(self, cell: Cell) -> None:
        """Forward a walkability change to the incremental planner."""
        # D* Lite reads the whole grid on its first run after the switch
        if self._mode is PlannerMode.INCREMENTAL:
            self._incremental.mark_cell_changed(cell)

    def reset(self) -> None:
        """Reset planners; the mode stays INCREMENTAL once switched."""
        with self._lock:
            self._one_shot.reset()
            self._incremental.reset()
            self._last_obstructions = self.grid.get_obstructed_cells()

    @property
    def name(self) -> str:
        return "HybridController"
