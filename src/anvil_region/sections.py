"""
Block and biome lookups inside one 16x16x16 chunk section.

Both block states and biomes are paletted: the section stores a list of
distinct values plus a packed array of indices into that list. A palette
with a single entry covers the whole section and the packed array is
omitted.
"""

from typing import Dict, Mapping, Optional, Tuple

from nbtlib import String

from .errors import BoundsError, StructuralDecodeError
from .nbt_access import as_compound, get_compound, get_list, get_long_array, get_optional_compound, get_string, tag_kind
from .packed import calculate_biome_bits_per_entry, calculate_bits_per_entry, extract_palette_index


# Block properties kept on resolved blocks; everything else is dropped
RETAINED_PROPERTIES = ("snowy",)

BlockData = Tuple[str, Optional[Dict[str, str]]]


def extract_block_data(block: Mapping) -> BlockData:
    """
    Read the name and retained properties of a block state palette entry.

    Returns:
        ``(name, properties)`` where properties is ``None`` or a dict holding
        only the retained keys
    """
    properties = get_optional_compound(block, "Properties", context="block")

    block_props = None
    if properties is not None:
        for prop in RETAINED_PROPERTIES:
            value = properties.get(prop)
            if isinstance(value, String):
                if block_props is None:
                    block_props = {}
                block_props[prop] = str(value)

    name = get_string(block, "Name", context="block")
    return name, block_props


def get_block_at_position(section: Mapping, x: int, y: int, z: int) -> BlockData:
    """
    Resolve the block state at a section-local coordinate (each 0-15).

    Raises:
        StructuralDecodeError: If ``block_states`` or its children are malformed
        BoundsError: If the packed index points outside the palette
    """
    block_states = get_compound(section, "block_states", context="section")
    palette = get_list(block_states, "palette", context="block_states")

    if len(palette) == 1:
        return extract_block_data(as_compound(palette[0], "block_states.palette[0]"))

    data = get_long_array(block_states, "data", context="block_states")

    block_index = (y * 16 + z) * 16 + x
    bits_per_entry = calculate_bits_per_entry(len(palette))
    palette_index = extract_palette_index(data, block_index, bits_per_entry)

    if palette_index >= len(palette):
        raise BoundsError(
            f"Invalid palette index: got {palette_index}, palette size is {len(palette)}, "
            f"bits_per_entry is {bits_per_entry}, block_index is {block_index}",
            palette_index=palette_index,
            palette_size=len(palette),
            bits_per_entry=bits_per_entry,
            block_index=block_index,
        )

    return extract_block_data(as_compound(palette[palette_index], f"block_states.palette[{palette_index}]"))


def get_biome_at_position(section: Mapping, x: int, y: int, z: int) -> str:
    """
    Resolve the biome name at a section-local coordinate (each 0-15).

    Biomes are stored per 4x4x4 cell.
    """
    biomes = get_compound(section, "biomes", context="section")
    palette = get_list(biomes, "palette", context="biomes")

    if len(palette) == 1:
        return _biome_name(palette[0], 0)

    data = get_long_array(biomes, "data", context="biomes")

    cell_x, cell_y, cell_z = x // 4, y // 4, z // 4
    biome_index = (cell_y * 4 + cell_z) * 4 + cell_x
    bits_per_entry = calculate_biome_bits_per_entry(len(palette))
    palette_index = extract_palette_index(data, biome_index, bits_per_entry)

    if palette_index >= len(palette):
        raise BoundsError(
            f"Invalid biome palette index: got {palette_index}, palette size is {len(palette)}, "
            f"bits_per_entry is {bits_per_entry}, biome_index is {biome_index}",
            palette_index=palette_index,
            palette_size=len(palette),
            bits_per_entry=bits_per_entry,
            biome_index=biome_index,
        )

    return _biome_name(palette[palette_index], palette_index)


def _biome_name(entry, index: int) -> str:
    if not isinstance(entry, String):
        raise StructuralDecodeError(f"palette[{index}]", "String", tag_kind(entry), context="biomes")
    return str(entry)
