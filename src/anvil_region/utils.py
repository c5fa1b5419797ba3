"""
Utility functions for decoded region data.

This module provides helper functions for common operations on decoded
chunks and surfaces, such as coordinate conversion, validation and
printing.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, List, Tuple

from .chunk_processor import is_air
from .data_structures import SURFACE_BIOME_COUNT, SURFACE_BLOCK_COUNT, Block, Chunk, ChunkSurface
from .dimensions import Dimension, get_dimension_heights
from .regions import REGION_WIDTH


def chunk_to_region_coords(x: int, z: int) -> Tuple[int, int]:
    """Region holding the chunk at chunk coordinates (x, z)."""
    return x // REGION_WIDTH, z // REGION_WIDTH


def get_biome_index(local_x: int, local_z: int) -> int:
    """Index into ``ChunkSurface.biomes`` for a chunk-local column."""
    return (local_z // 4) * 4 + local_x // 4


def group_chunks_by_region(chunks: Iterable[Chunk]) -> Dict[Tuple[int, int], List[Chunk]]:
    """
    Group chunks by the region their position falls in.

    Chunks normally all belong to the region file they came from, but
    ``xPos``/``zPos`` are authoritative, so relocated chunks are grouped
    where they claim to be.
    """
    regions = defaultdict(list)
    for chunk in chunks:
        regions[chunk_to_region_coords(chunk.position.x, chunk.position.z)].append(chunk)
    return dict(regions)


def format_block_info(block: Block) -> str:
    """
    Format block information as human-readable string.

    Args:
        block: Block object

    Returns:
        Formatted string describing the block
    """
    pos = block.position
    lines = [f"Block at ({pos.x}, {pos.y}, {pos.z}): {block.name}"]

    if block.depth > 0:
        lines.append(f"  Under water: {block.depth} blocks")
    if block.snowy:
        lines.append("  Snowy: Yes")

    return '\n'.join(lines)


def validate_surface(surface: ChunkSurface, dimension: Dimension) -> Dict[str, Any]:
    """
    Validate surface data against the extraction invariants.

    Args:
        surface: ChunkSurface to validate
        dimension: Dimension the surface was extracted for

    Returns:
        Dictionary with validation results and warnings
    """
    issues = []
    warnings = []

    if len(surface.blocks) != SURFACE_BLOCK_COUNT:
        issues.append(f"Block count mismatch: expected {SURFACE_BLOCK_COUNT}, got {len(surface.blocks)}")

    if len(surface.biomes) != SURFACE_BIOME_COUNT:
        issues.append(f"Biome count mismatch: expected {SURFACE_BIOME_COUNT}, got {len(surface.biomes)}")

    min_y, max_y = get_dimension_heights(dimension)
    for block in surface.blocks:
        pos = block.position
        if not min_y <= pos.y <= max_y:
            issues.append(f"Block ({pos.x}, {pos.z}): y={pos.y} outside [{min_y}, {max_y}]")

        if block.depth < 0 or block.depth > 0xFFFF:
            issues.append(f"Block ({pos.x}, {pos.z}): Invalid depth {block.depth}")

        if is_air(block.name):
            warnings.append(f"Block ({pos.x}, {pos.z}): Surface is {block.name}")

        if dimension is not Dimension.OVERWORLD and block.depth > 0:
            warnings.append(f"Block ({pos.x}, {pos.z}): Depth {block.depth} outside the Overworld")

    return {
        'valid': len(issues) == 0,
        'issues': issues,
        'warnings': warnings[:10],  # Limit warnings to first 10
        'warning_count': len(warnings),
    }


def print_surface_summary(surface: ChunkSurface):
    """
    Print a formatted summary of surface contents.

    Args:
        surface: ChunkSurface to summarize
    """
    summary = surface.get_summary()

    print("=" * 60)
    if surface.blocks:
        first = surface.blocks[0].position
        print(f"Surface of chunk at ({first.x // 16}, {first.z // 16})")
    print(f"Height range: {summary['min_y']} to {summary['max_y']}")
    print("=" * 60)

    print(f"\nBlocks:")
    print(f"  Columns: {summary['blocks']}")
    print(f"  Unique blocks: {summary['unique_blocks']}")
    print(f"  Submerged: {summary['submerged']}")
    print(f"  Snowy: {summary['snowy']}")

    print(f"\nBiomes:")
    print(f"  Samples: {summary['biomes']}")
    print(f"  Unique biomes: {', '.join(sorted(set(surface.biomes)))}")

    print()
