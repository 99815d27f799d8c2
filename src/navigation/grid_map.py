"""
Grid-based walkability map for pathfinding.

Holds a fixed-size grid of cells that are either walkable (0) or obstructed
(1), and answers the bounds / walkability / neighbor queries every planner
relies on.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

import numpy as np

from .base import Cell

logger = logging.getLogger(__name__)

# Fixed neighbor order: up, down, left, right
DIRECTIONS: Tuple[Cell, ...] = ((0, 1), (0, -1), (-1, 0), (1, 0))


@dataclass
class GridMapConfig:
    """Configuration for grid map generation."""
    tile_size: float = 4.0  # World units per grid cell
    obstruction_probability: float = 0.2  # Used by generate_random_obstructions
    seed: Optional[int] = None


class GridMap:
    """
    Discrete walkability grid.

    Cells are (x, y) tuples. Storage is a numpy array indexed [y, x] where
    0 marks a walkable cell and 1 an obstructed one. Width and height are
    fixed for the lifetime of the map.
    """

    def __init__(
        self,
        width: int,
        height: int,
        config: Optional[GridMapConfig] = None,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.config = config or GridMapConfig()
        self._width = int(width)
        self._height = int(height)
        self.tile_size = self.config.tile_size

        # 0 = walkable, 1 = obstructed
        self.grid = np.zeros((self._height, self._width), dtype=np.uint8)

        # Cells that may never be obstructed (agent position, destination, ...)
        self._protected: Set[Cell] = set()

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self._width * self._height

    def is_in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self._width and 0 <= y < self._height

    def is_walkable(self, cell: Cell) -> bool:
        """Off-grid cells are never walkable."""
        if not self.is_in_bounds(cell):
            return False
        x, y = cell
        return bool(self.grid[y, x] == 0)

    def set_walkable(self, cell: Cell, walkable: bool) -> bool:
        """
        Set walkability of a cell.

        Returns:
            True if the cell's state changed, False otherwise (including
            out-of-bounds cells, which are ignored)
        """
        if not self.is_in_bounds(cell):
            return False
        x, y = cell
        value = 0 if walkable else 1
        if self.grid[y, x] == value:
            return False
        self.grid[y, x] = value
        return True

    def neighbors(self, cell: Cell) -> List[Cell]:
        """
        Get in-bounds 4-connected neighbors in the order up, down, left, right.

        Walkability is not checked here; see walkable_neighbors().
        """
        x, y = cell
        result = []
        for dx, dy in DIRECTIONS:
            neighbor = (x + dx, y + dy)
            if self.is_in_bounds(neighbor):
                result.append(neighbor)
        return result

    def walkable_neighbors(self, cell: Cell) -> List[Cell]:
        return [n for n in self.neighbors(cell) if self.is_walkable(n)]

    def get_obstructed_cells(self) -> Set[Cell]:
        """Get the set of all obstructed cells."""
        ys, xs = np.nonzero(self.grid)
        return {(int(x), int(y)) for x, y in zip(xs, ys)}

    # ------------------------------------------------------------------
    # Protected positions
    # ------------------------------------------------------------------

    def is_protected(self, cell: Cell) -> bool:
        return cell in self._protected

    def add_protected_position(self, cell: Cell) -> bool:
        """
        Protect a cell from obstruction, clearing it if currently obstructed.

        Returns:
            True if protecting the cell changed its walkability
        """
        self._protected.add(cell)
        return self.set_walkable(cell, True)

    def remove_protected_position(self, cell: Cell) -> None:
        self._protected.discard(cell)

    @property
    def protected_positions(self) -> Set[Cell]:
        return set(self._protected)

    def toggle_obstruction(self, cell: Cell, obstructed: bool) -> bool:
        """
        Place or remove an obstruction, honoring protected positions.

        Returns:
            True if the cell's walkability changed
        """
        if self.is_protected(cell):
            if obstructed:
                logger.warning("Refused obstruction at protected position %s", cell)
            return False
        return self.set_walkable(cell, not obstructed)

    def generate_random_obstructions(
        self,
        probability: Optional[float] = None,
        seed: Optional[int] = None,
    ) -> Set[Cell]:
        """
        Clear the grid and obstruct each unprotected cell at random.

        Args:
            probability: Chance for each cell to be obstructed
                         (defaults to config.obstruction_probability)
            seed: Seed for the random generator (defaults to config.seed)

        Returns:
            The set of obstructed cells after generation
        """
        if probability is None:
            probability = self.config.obstruction_probability
        if seed is None:
            seed = self.config.seed

        rng = np.random.default_rng(seed)
        rolls = rng.random((self._height, self._width))

        self.grid.fill(0)
        self.grid[rolls < probability] = 1
        for x, y in self._protected:
            if self.is_in_bounds((x, y)):
                self.grid[y, x] = 0

        obstructed = self.get_obstructed_cells()
        logger.info(
            "Generated %d obstructions on %dx%d grid (p=%.2f)",
            len(obstructed), self._width, self._height, probability,
        )
        return obstructed

    # ------------------------------------------------------------------
    # World coordinates
    # ------------------------------------------------------------------

    def _offsets(self) -> Tuple[float, float]:
        # Grid is centred on the world origin
        offset_x = (self._width - 1) * self.tile_size / 2.0
        offset_z = (self._height - 1) * self.tile_size / 2.0
        return offset_x, offset_z

    def world_to_grid(self, x: float, z: float) -> Cell:
        """Convert world coordinates to the nearest grid cell (not clamped)."""
        offset_x, offset_z = self._offsets()
        gx = int(np.round((x + offset_x) / self.tile_size))
        gy = int(np.round((z + offset_z) / self.tile_size))
        return gx, gy

    def grid_to_world(self, cell: Cell) -> Tuple[float, float]:
        """Convert a grid cell to world coordinates (cell center)."""
        offset_x, offset_z = self._offsets()
        gx, gy = cell
        return gx * self.tile_size - offset_x, gy * self.tile_size - offset_z

    # ------------------------------------------------------------------
    # Debugging
    # ------------------------------------------------------------------

    def to_ascii(
        self,
        path: Optional[List[Cell]] = None,
        start: Optional[Cell] = None,
        goal: Optional[Cell] = None,
    ) -> str:
        """
        Generate ASCII visualization of the grid.

        Args:
            path: Optional list of cells to mark with '*'
            start: Optional cell to mark with 'S'
            goal: Optional cell to mark with 'G'

        Returns:
            ASCII string representation, highest y on the first line
        """
        path_set = set(path) if path else set()
        lines = []

        for gy in range(self._height - 1, -1, -1):  # Top to bottom
            row = ""
            for gx in range(self._width):
                cell = (gx, gy)
                if cell == start:
                    row += "S"
                elif cell == goal:
                    row += "G"
                elif cell in path_set:
                    row += "*"
                elif self.grid[gy, gx] == 1:
                    row += "#"
                else:
                    row += "."
            lines.append(row)

        return "\n".join(lines)

    def __repr__(self) -> str:
        blocked = int(np.sum(self.grid))
        return (
            f"GridMap(size={self._width}x{self._height}, "
            f"obstructed={blocked}/{self.size})"
        )
