"""
Minecraft Anvil region decoding for map rendering.

This package decodes Anvil region files (.mca) and extracts, for every
column of a chunk, the topmost block with its biome, water depth and snow
state, which is what top-down map renderers need.

Main modules:
    - regions: Region file container parsing
    - chunk_processor: Surface extraction from decoded chunks
    - sections: Paletted block and biome lookups inside a section
    - packed: Packed-integer decoding for heightmaps and palettes
    - data_structures: Core data structures (Chunk, ChunkSurface, Block)
    - dimensions: Per-dimension vertical layout
    - world_handler: Region file loading
    - utils: Helper functions for inspection and validation
"""

from .chunk_processor import extract_surface, iter_surfaces, parse_chunk_heightmaps, parse_chunk_sections
from .data_structures import Block, BlockPosition, Chunk, ChunkPosition, ChunkSurface, Region
from .dimensions import Dimension, get_dimension_height_offset, get_dimension_heights
from .errors import (
    BoundsError,
    DecodeError,
    MissingSectionError,
    RegionTruncatedError,
    StructuralDecodeError,
    UnsupportedFormatError,
)
from .packed import calculate_biome_bits_per_entry, calculate_bits_per_entry, decode_heightmap, extract_palette_index
from .regions import parse_chunk_from_bytes, parse_region_bytes
from .world_handler import find_region_files, load_region, parse_region_filename, region_dir_for_dimension
from .utils import (
    chunk_to_region_coords,
    format_block_info,
    get_biome_index,
    group_chunks_by_region,
    print_surface_summary,
    validate_surface,
)

__all__ = [
    # Region decoding
    'parse_region_bytes',
    'parse_chunk_from_bytes',
    'load_region',
    'find_region_files',
    'region_dir_for_dimension',
    'parse_region_filename',

    # Surface extraction
    'extract_surface',
    'iter_surfaces',
    'parse_chunk_heightmaps',
    'parse_chunk_sections',

    # Packed data
    'decode_heightmap',
    'extract_palette_index',
    'calculate_bits_per_entry',
    'calculate_biome_bits_per_entry',

    # Data structures
    'Block',
    'BlockPosition',
    'Chunk',
    'ChunkPosition',
    'ChunkSurface',
    'Region',
    'Dimension',
    'get_dimension_height_offset',
    'get_dimension_heights',

    # Errors
    'DecodeError',
    'StructuralDecodeError',
    'MissingSectionError',
    'BoundsError',
    'UnsupportedFormatError',
    'RegionTruncatedError',

    # Utilities
    'chunk_to_region_coords',
    'get_biome_index',
    'group_chunks_by_region',
    'format_block_info',
    'validate_surface',
    'print_surface_summary',
]

__version__ = '0.1.0'
