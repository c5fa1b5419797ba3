"""
Anvil world data representation module.

This module provides the data structures produced by region decoding and
surface extraction, in a form the rendering side can consume directly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np
from nbtlib import Compound


CHUNK_WIDTH = 16
SURFACE_BLOCK_COUNT = CHUNK_WIDTH * CHUNK_WIDTH
SURFACE_BIOME_COUNT = 16


@dataclass(frozen=True)
class BlockPosition:
    """World block coordinates."""

    x: int
    y: int
    z: int


@dataclass(frozen=True)
class Block:
    """
    Topmost relevant block of one column.

    Attributes:
        position: World coordinates of the block
        name: Namespaced block name (e.g. ``minecraft:stone``)
        depth: Thickness of the water above the block, 0 when the block
            itself is the surface
        snowy: Whether the block carries ``snowy=true``
    """

    position: BlockPosition
    name: str
    depth: int = 0
    snowy: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert block to dictionary format for inspection."""
        return {
            'position': (self.position.x, self.position.y, self.position.z),
            'name': self.name,
            'depth': self.depth,
            'snowy': self.snowy,
        }


@dataclass(frozen=True)
class ChunkPosition:
    """Chunk coordinates (in chunks, not blocks)."""

    x: int
    z: int


@dataclass
class Chunk:
    """
    One fully generated chunk decoded from a region file.

    Attributes:
        data_version: Data version the chunk was saved with
        last_update: Game tick of the last save
        inhabited_time: Cumulative ticks players spent in the chunk
        position: Chunk coordinates
        nbt: Decoded root compound; treated as read-only
    """

    data_version: int
    last_update: int
    inhabited_time: int
    position: ChunkPosition
    nbt: Compound = field(repr=False)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary information for this chunk."""
        return {
            'position': (self.position.x, self.position.z),
            'data_version': self.data_version,
            'last_update': self.last_update,
            'inhabited_time': self.inhabited_time,
            'tags': sorted(self.nbt.keys()),
        }


@dataclass
class ChunkSurface:
    """
    Extracted surface of a chunk.

    Attributes:
        blocks: 256 blocks, row-major over the 16x16 columns (Z outer, X inner)
        biomes: Up to 16 biome names over the 4x4 cell grid, same order
    """

    blocks: List[Block] = field(default_factory=list)
    biomes: List[str] = field(default_factory=list)

    def heights(self) -> np.ndarray:
        """
        Block y values as a grid.

        Returns:
            Array of shape (16, 16) indexed ``[z, x]``
        """
        heights = np.array([block.position.y for block in self.blocks], dtype=np.int32)
        return heights.reshape(CHUNK_WIDTH, CHUNK_WIDTH)

    def depths(self) -> np.ndarray:
        """Water depths as a (16, 16) grid indexed ``[z, x]``."""
        depths = np.array([block.depth for block in self.blocks], dtype=np.uint16)
        return depths.reshape(CHUNK_WIDTH, CHUNK_WIDTH)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for this surface."""
        names = [block.name for block in self.blocks]
        heights = [block.position.y for block in self.blocks]

        return {
            'blocks': len(self.blocks),
            'biomes': len(self.biomes),
            'unique_blocks': len(set(names)),
            'unique_biomes': len(set(self.biomes)),
            'submerged': sum(1 for block in self.blocks if block.depth > 0),
            'snowy': sum(1 for block in self.blocks if block.snowy),
            'min_y': min(heights) if heights else None,
            'max_y': max(heights) if heights else None,
        }


@dataclass
class Region:
    """
    Decoded content of one region file.

    Chunks keep the order of their slots in the location table, which is
    not necessarily sorted by position.
    """

    chunks: List[Chunk] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self):
        return iter(self.chunks)
