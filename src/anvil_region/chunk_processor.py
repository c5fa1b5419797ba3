"""
Surface extraction for decoded Anvil chunks.

This module turns one chunk's NBT tree into its ``ChunkSurface``: the
topmost relevant block of each of the 256 columns, the water depth above
it, and the biome of every 4x4 cell.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np
from nbtlib import Compound

from .data_structures import CHUNK_WIDTH, Block, BlockPosition, Chunk, ChunkSurface
from .dimensions import (
    NETHER_SEARCH_MAX_Y,
    NETHER_SEARCH_MIN_Y,
    Dimension,
    get_dimension_height_offset,
    get_dimension_heights,
)
from .errors import DecodeError, MissingSectionError, StructuralDecodeError
from .nbt_access import as_compound, get_compound, get_list, get_long_array, get_section_y, tag_kind
from .packed import decode_heightmap
from .sections import get_biome_at_position, get_block_at_position

logger = logging.getLogger(__name__)


SECTION_HEIGHT = 16
BIOME_CELL_WIDTH = 4
MAX_DEPTH = 0xFFFF

AIR_BLOCKS = ("minecraft:air", "air")


def is_air(name: str) -> bool:
    """Air, cave air and void air all count as empty space."""
    return name in AIR_BLOCKS or name.endswith("_air")


def parse_chunk_heightmaps(root: Mapping) -> Tuple[np.ndarray, np.ndarray]:
    """
    Decode the world surface and ocean floor heightmaps.

    Returns:
        ``(motion_blocking, ocean_floor)``, each of shape (256,)
    """
    heightmaps = get_compound(root, "Heightmaps")

    motion_blocking = decode_heightmap(get_long_array(heightmaps, "MOTION_BLOCKING", context="Heightmaps"))
    ocean_floor = decode_heightmap(get_long_array(heightmaps, "OCEAN_FLOOR", context="Heightmaps"))

    return motion_blocking, ocean_floor


def parse_chunk_sections(root: Mapping) -> Dict[int, Compound]:
    """Map each section's (possibly negative) Y index to its compound."""
    sections = {}
    for i, entry in enumerate(get_list(root, "sections")):
        section = as_compound(entry, f"sections[{i}]")
        sections[get_section_y(section)] = section
    return sections


def build_nether_columns(sections: Mapping[int, Compound]) -> List[List[str]]:
    """
    Resolve every block name of the Nether search range once.

    Returns:
        ``columns[z * 16 + x][y - NETHER_SEARCH_MIN_Y]`` for y in 31..127
    """
    levels = NETHER_SEARCH_MAX_Y - NETHER_SEARCH_MIN_Y + 1
    columns: List[List[Optional[str]]] = [[None] * levels for _ in range(CHUNK_WIDTH * CHUNK_WIDTH)]

    for y in range(NETHER_SEARCH_MIN_Y, NETHER_SEARCH_MAX_Y + 1):
        section_index, local_y = divmod(y, SECTION_HEIGHT)
        section = sections.get(section_index)
        if section is None:
            raise MissingSectionError(section_index)

        level = y - NETHER_SEARCH_MIN_Y
        for local_z in range(CHUNK_WIDTH):
            for local_x in range(CHUNK_WIDTH):
                name, _ = get_block_at_position(section, local_x, local_y, local_z)
                columns[local_z * CHUNK_WIDTH + local_x][level] = name

    return columns


def find_nether_surface(column: List[str]) -> int:
    """
    Find the floor below the bedrock roof in one precomputed Nether column.

    Scans down from the roof for the first air block, then keeps going down
    for the first non-air block. Columns with no opening, or no floor below
    it, fall back to the bottom of the search range.
    """
    opening = None
    for y in range(NETHER_SEARCH_MAX_Y, NETHER_SEARCH_MIN_Y - 1, -1):
        if is_air(column[y - NETHER_SEARCH_MIN_Y]):
            opening = y
            break

    if opening is None:
        return NETHER_SEARCH_MIN_Y

    for y in range(opening - 1, NETHER_SEARCH_MIN_Y - 1, -1):
        if not is_air(column[y - NETHER_SEARCH_MIN_Y]):
            return y

    return NETHER_SEARCH_MIN_Y


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def extract_surface(chunk: Chunk, dimension: Dimension) -> ChunkSurface:
    """
    Extract the highest blocks of a chunk and their biomes.

    Args:
        chunk: Decoded chunk
        dimension: Dimension the chunk belongs to

    Returns:
        ChunkSurface with 256 blocks and 16 biomes

    Raises:
        StructuralDecodeError: If a required tag is missing or mistyped,
            including a missing section (``MissingSectionError``)
        BoundsError: If a packed index points outside its array or palette

    Example:
        >>> region = parse_region_bytes(data)
        >>> surface = extract_surface(region.chunks[0], Dimension.OVERWORLD)
        >>> surface.heights().shape
        (16, 16)
    """
    root = chunk.nbt
    if not isinstance(root, Compound):
        raise StructuralDecodeError("root", "Compound", tag_kind(root))

    motion_blocking, ocean_floor = parse_chunk_heightmaps(root)
    sections = parse_chunk_sections(root)

    offset = get_dimension_height_offset(dimension)
    min_y, max_y = get_dimension_heights(dimension)

    nether_columns = build_nether_columns(sections) if dimension is Dimension.NETHER else None

    blocks: List[Block] = []
    biomes: List[str] = []

    for local_z in range(CHUNK_WIDTH):
        for local_x in range(CHUNK_WIDTH):
            column = local_z * CHUNK_WIDTH + local_x

            surface_y = _clamp(int(motion_blocking[column]) - 1 + offset, min_y, max_y)
            ocean_y = _clamp(int(ocean_floor[column]) - 1 + offset, min_y, max_y)

            # Only the Overworld distinguishes the ocean floor from the surface
            if dimension is not Dimension.OVERWORLD:
                ocean_y = surface_y

            if nether_columns is not None:
                surface_y = ocean_y = find_nether_surface(nether_columns[column])

            section_index, local_y = divmod(ocean_y, SECTION_HEIGHT)
            section = sections.get(section_index)
            if section is None:
                raise MissingSectionError(section_index)

            if local_x % BIOME_CELL_WIDTH == 0 and local_z % BIOME_CELL_WIDTH == 0:
                biomes.append(get_biome_at_position(section, local_x, local_y, local_z))

            name, properties = get_block_at_position(section, local_x, local_y, local_z)
            depth = min(max(surface_y - ocean_y, 0), MAX_DEPTH)
            snowy = properties is not None and properties.get("snowy") == "true"

            blocks.append(Block(
                position=BlockPosition(
                    x=chunk.position.x * CHUNK_WIDTH + local_x,
                    y=ocean_y,
                    z=chunk.position.z * CHUNK_WIDTH + local_z,
                ),
                name=name,
                depth=depth,
                snowy=snowy,
            ))

    return ChunkSurface(blocks=blocks, biomes=biomes)


def iter_surfaces(
    chunks: Iterable[Chunk],
    dimension: Dimension,
    skip_errors: bool = True,
) -> Iterator[Tuple[Chunk, ChunkSurface]]:
    """
    Extract the surface of every chunk in turn.

    Args:
        chunks: Chunks to process, e.g. ``region.chunks``
        dimension: Dimension the chunks belong to
        skip_errors: Log and skip chunks that fail to decode instead of raising

    Yields:
        ``(chunk, surface)`` pairs for each chunk that decoded

    Example:
        >>> for chunk, surface in iter_surfaces(region, Dimension.NETHER):
        ...     heights = surface.heights()
    """
    for chunk in chunks:
        try:
            surface = extract_surface(chunk, dimension)
        except DecodeError as e:
            if not skip_errors:
                raise
            logger.warning(f"Skipping chunk ({chunk.position.x}, {chunk.position.z}): {e}")
            continue
        yield chunk, surface
