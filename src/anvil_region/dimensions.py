"""
Per-dimension vertical layout.

Heightmap values are stored relative to the dimension's minimum build
height, so every dimension carries the offset that maps them back to world
y, plus the inclusive range extracted surfaces are clamped to.
"""

from enum import Enum
from typing import Tuple


class Dimension(str, Enum):
    OVERWORLD = "overworld"
    NETHER = "nether"
    END = "end"

    @classmethod
    def from_name(cls, name: str) -> "Dimension":
        """Parse ``overworld``, ``nether`` or ``end`` (case-insensitive)."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            allowed = " | ".join(d.value for d in cls)
            raise ValueError(f"Invalid dimension '{name}'. Allowed: {allowed}") from None


# Nether surfaces are searched between the lava sea and the bedrock roof
NETHER_SEARCH_MIN_Y = 31
NETHER_SEARCH_MAX_Y = 127

_HEIGHT_OFFSETS = {
    Dimension.OVERWORLD: -64,
    Dimension.NETHER: 0,
    Dimension.END: 0,
}

_HEIGHT_BOUNDS = {
    Dimension.OVERWORLD: (-64, 320),
    Dimension.NETHER: (0, 256),
    Dimension.END: (0, 256),
}


def get_dimension_height_offset(dimension: Dimension) -> int:
    """Offset added to a heightmap value to obtain world y."""
    return _HEIGHT_OFFSETS[dimension]


def get_dimension_heights(dimension: Dimension) -> Tuple[int, int]:
    """Inclusive (min_y, max_y) bounds of the dimension."""
    return _HEIGHT_BOUNDS[dimension]
