"""Arena geometry.

The arena is an axis-aligned box centred on the origin in X and Z with the
floor at ``min_y``.  Fighters are clamped inside it by half their sprite size.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ArenaConfig:
    """Bounds of the fighting arena in world units."""

    width: float = 900
    height: float = 400
    depth: float = 600
    min_x: float = -450
    max_x: float = 450
    min_y: float = 0  # floor
    max_y: float = 400  # ceiling
    min_z: float = -300  # back wall
    max_z: float = 300  # front wall

    @property
    def center_x(self) -> float:
        return (self.min_x + self.max_x) / 2

    @property
    def half_width(self) -> float:
        return (self.max_x - self.min_x) / 2

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "minX": self.min_x,
            "maxX": self.max_x,
            "minY": self.min_y,
            "maxY": self.max_y,
            "minZ": self.min_z,
            "maxZ": self.max_z,
        }


ARENA = ArenaConfig()

# Wall margins used by the AI when deciding it is "near" a wall
CORNERED_THRESHOLD = 100
WALL_NEAR_MARGIN = 80
