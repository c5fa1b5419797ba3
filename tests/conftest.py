"""
Shared builders for NBT trees and region files used across the tests.
"""

import io
import struct
import zlib
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import nbtlib
import pytest
from nbtlib import Byte, Compound, Int, List as NbtList, Long, LongArray, String

from src.anvil_region.data_structures import Chunk, ChunkPosition


PaletteEntry = Union[str, Tuple[str, Dict[str, str]]]

AIR = "minecraft:air"
STONE = "minecraft:stone"
WATER = "minecraft:water"
GRASS = "minecraft:grass_block"
PLAINS = "minecraft:plains"


def to_signed(word: int) -> int:
    """NBT longs are signed; fold an unsigned 64-bit value into that range."""
    return word - (1 << 64) if word >= (1 << 63) else word


def pack_values(values: Sequence[int], bits: int) -> LongArray:
    """Pack values the way Anvil does: low bits first, no straddling."""
    per_word = 64 // bits
    words = [0] * (-(-len(values) // per_word))
    for i, value in enumerate(values):
        words[i // per_word] |= value << ((i % per_word) * bits)
    return LongArray([to_signed(word) for word in words])


def heightmap(values: Union[int, Sequence[int]]) -> LongArray:
    """Packed 256-column heightmap; a single int fills every column."""
    if isinstance(values, int):
        values = [values] * 256
    return pack_values(values, 9)


def palette_entry(entry: PaletteEntry) -> Compound:
    if isinstance(entry, str):
        return Compound({"Name": String(entry)})
    name, properties = entry
    return Compound({
        "Name": String(name),
        "Properties": Compound({key: String(value) for key, value in properties.items()}),
    })


def block_indices(fn: Callable[[int, int, int], int]) -> List[int]:
    """Flattened (y, z, x) palette indices of one section."""
    return [fn(x, y, z) for y in range(16) for z in range(16) for x in range(16)]


def make_section(
    y: int,
    palette: Sequence[PaletteEntry],
    indices: Optional[Sequence[int]] = None,
    biomes: Sequence[str] = (PLAINS,),
    biome_indices: Optional[Sequence[int]] = None,
    y_tag=Byte,
) -> Compound:
    block_states = Compound({"palette": NbtList[Compound]([palette_entry(e) for e in palette])})
    if indices is not None:
        bits = max(4, (len(palette) - 1).bit_length())
        block_states["data"] = pack_values(indices, bits)

    biome_compound = Compound({"palette": NbtList[String]([String(b) for b in biomes])})
    if biome_indices is not None:
        biome_compound["data"] = pack_values(biome_indices, (len(biomes) - 1).bit_length())

    return Compound({
        "Y": y_tag(y),
        "block_states": block_states,
        "biomes": biome_compound,
    })


def make_chunk_nbt(
    sections: Iterable[Compound],
    motion_blocking: Union[int, Sequence[int]] = 128,
    ocean_floor: Union[int, Sequence[int]] = 128,
    x_pos: Optional[int] = 0,
    z_pos: Optional[int] = 0,
    status: Optional[str] = "minecraft:full",
    data_version: int = 3465,
) -> Compound:
    root = Compound({
        "DataVersion": Int(data_version),
        "LastUpdate": Long(123456),
        "InhabitedTime": Long(789),
        "Heightmaps": Compound({
            "MOTION_BLOCKING": heightmap(motion_blocking),
            "OCEAN_FLOOR": heightmap(ocean_floor),
        }),
        "sections": NbtList[Compound](list(sections)),
    })
    if x_pos is not None:
        root["xPos"] = Int(x_pos)
    if z_pos is not None:
        root["zPos"] = Int(z_pos)
    if status is not None:
        root["Status"] = String(status)
    return root


def make_chunk(root: Compound, x: int = 0, z: int = 0) -> Chunk:
    return Chunk(
        data_version=int(root.get("DataVersion", 0)),
        last_update=0,
        inhabited_time=0,
        position=ChunkPosition(x=x, z=z),
        nbt=root,
    )


def serialize_nbt(root: Compound) -> bytes:
    f = nbtlib.File(root, gzipped=False, byteorder="big")
    buf = io.BytesIO()
    f.write(buf)
    return buf.getvalue()


def region_entry(root: Compound) -> Tuple[int, bytes]:
    """(compression type, stored payload) of a zlib-compressed chunk."""
    return 2, zlib.compress(serialize_nbt(root))


def build_region(entries: Dict[int, Tuple[int, bytes]]) -> bytes:
    """Lay out chunk payloads in sectors behind a location table."""
    header = bytearray(8192)
    body = bytearray()
    sector = 2

    for slot, (compression, payload) in sorted(entries.items()):
        blob = struct.pack(">IB", len(payload) + 1, compression) + payload
        sectors = -(-len(blob) // 4096)
        blob += b"\x00" * (sectors * 4096 - len(blob))
        struct.pack_into(">I", header, slot * 4, (sector << 8) | sectors)
        body += blob
        sector += sectors

    return bytes(header + body)


def overworld_sections() -> List[Compound]:
    """
    Sections -4..3 of a simple Overworld chunk.

    Stone fills y <= 54, water fills 55..62 and the rest is air, except
    column (0, 0) which has a snowy grass block at y = 55 and no water.
    """
    palette = [AIR, STONE, WATER, (GRASS, {"snowy": "true"})]
    sections = []
    for section_y in range(-4, 4):
        def index(x, y, z, base=section_y * 16):
            world_y = base + y
            if world_y <= 54:
                return 1
            if x == 0 and z == 0:
                return 3 if world_y == 55 else 0
            return 2 if world_y <= 62 else 0
        sections.append(make_section(section_y, palette, block_indices(index)))
    return sections


@pytest.fixture
def overworld_chunk_nbt() -> Compound:
    # Water surface at y = 62, floor at y = 54; column (0, 0) is dry land at 55
    motion_blocking = [127] * 256
    ocean_floor = [119] * 256
    motion_blocking[0] = 120
    ocean_floor[0] = 120
    return make_chunk_nbt(overworld_sections(), motion_blocking, ocean_floor, x_pos=2, z_pos=-3)
