"""Core coordinate types for the terrain grid."""

from pydantic import BaseModel

# 4-neighborhood deltas
# Coordinate system: +X is East, +Y is South
NEIGHBOR_DELTAS: tuple[tuple[int, int], ...] = (
    (0, -1),
    (1, 0),
    (0, 1),
    (-1, 0),
)


class Position(BaseModel, frozen=True):
    """Immutable grid cell coordinate."""

    x: int
    y: int

    def neighbors(self) -> list["Position"]:
        """Return the four orthogonal neighbors (may lie outside the grid)."""
        return [Position(x=self.x + dx, y=self.y + dy) for dx, dy in NEIGHBOR_DELTAS]

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return f"Position(x={self.x}, y={self.y})"
