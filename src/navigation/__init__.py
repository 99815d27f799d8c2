"""
Navigation module for grid pathfinding and incremental replanning.

This module provides pluggable planning strategies:
- AStarPathfinder: one-shot A* over the current grid
- DStarLitePlanner: D* Lite, repairs its search when cells change
- HybridController: A* until new obstructions appear, then D* Lite for good

All planners implement the same interface, so the movement layer can swap
strategies without changing how it requests paths.

Example usage:
    from src.navigation import GridMap, HybridController, HybridControllerConfig

    grid = GridMap(25, 25)
    controller = HybridController(grid, HybridControllerConfig(activation_delay=5.0))

    # Request a path (list of cells, empty if there is none)
    path = controller.find_path((0, 0), (24, 24))

    # Obstruct a cell; the controller notices on its next call
    grid.toggle_obstruction((3, 4), True)
    path = controller.find_path((1, 0), (24, 24))
"""

# Base classes and interfaces
from .base import (
    Cell,
    Planner,
    SearchStats,
    NavigationState,
)

# Walkability grid
from .grid_map import (
    GridMap,
    GridMapConfig,
)

# Frontier structure
from .priority_queue import IndexedPriorityQueue

# A* pathfinding
from .pathfinding import (
    AStarPathfinder,
    PathfindingConfig,
    euclidean_distance,
)

# D* Lite
from .dstar_lite import DStarLitePlanner

# Hybrid controller (A* -> D* Lite)
from .hybrid_navigator import (
    HybridController,
    HybridControllerConfig,
    PlannerMode,
)

# Simulated agent
from .agent import (
    GridAgent,
    GridAgentConfig,
)

__all__ = [
    # Base
    "Cell",
    "Planner",
    "SearchStats",
    "NavigationState",
    # Grid
    "GridMap",
    "GridMapConfig",
    # Queue
    "IndexedPriorityQueue",
    # Pathfinding
    "AStarPathfinder",
    "PathfindingConfig",
    "euclidean_distance",
    "DStarLitePlanner",
    # Hybrid controller
    "HybridController",
    "HybridControllerConfig",
    "PlannerMode",
    # Agent
    "GridAgent",
    "GridAgentConfig",
]
