"""
Abstract base classes for grid planners.

This module defines the interface that all planning strategies must implement,
allowing easy swapping between different approaches:
- AStarPathfinder: one-shot search over a snapshot of the grid
- DStarLitePlanner: incremental search that repairs itself after grid changes
- HybridController: starts with A*, switches to D* Lite once the grid changes
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple

# Integer grid coordinate (x, y)
Cell = Tuple[int, int]


@dataclass
class SearchStats:
    """Bookkeeping for the most recent planning call."""
    expansions: int = 0
    elapsed_seconds: float = 0.0
    path_length: int = 0


@dataclass
class NavigationState:
    """Current state of navigation progress."""
    has_path: bool
    waypoints_remaining: int
    total_waypoints: int
    is_complete: bool
    is_stuck: bool  # Planner reported no valid path


class Planner(ABC):
    """
    Abstract base class for planning strategies.

    All planners answer the same request: the ordered cells to walk from
    ``start`` to ``goal``. The returned list excludes ``start`` and ends with
    ``goal``; an empty list means "no path" and is never an error signal.
    """

    @abstractmethod
    def find_path(self, start: Cell, goal: Cell) -> List[Cell]:
        """
        Compute a path from start to goal.

        Args:
            start: Cell the agent currently occupies
            goal: Destination cell

        Returns:
            Cells to visit in order, or an empty list if there is no path
        """
        pass

    @abstractmethod
    def reset(self) -> None:
        """Drop any state carried between calls."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this planning strategy."""
        pass
