"""
Region file (``.mca``) container parsing.

A region file starts with an 8 KiB header whose first 4 KiB is the location
table: 1024 big-endian entries of a 3-byte sector offset and a 1-byte
sector count, one per chunk of the 32x32 area. Chunk payloads live in 4 KiB
sectors after the header, each prefixed by a 4-byte length and a 1-byte
compression type.

Corrupt or unsupported chunk slots are skipped so one bad chunk does not
cost the whole region; structural problems with the file itself, or with
the fields every chunk must carry, raise.
"""

import logging
import struct
import zlib
from typing import List, Optional, Tuple

from nbtlib import Compound, Int, String

from .data_structures import Chunk, ChunkPosition, Region
from .errors import DecodeError, RegionTruncatedError, UnsupportedFormatError
from .nbt_access import get_int, get_long, parse_nbt

logger = logging.getLogger(__name__)


SECTOR_SIZE = 4096
HEADER_SIZE = 2 * SECTOR_SIZE
CHUNKS_PER_REGION = 1024
REGION_WIDTH = 32
CHUNK_HEADER_SIZE = 5

COMPRESSION_ZLIB = 2
FULL_STATUS = "minecraft:full"


def read_location_table(data: bytes) -> List[Tuple[int, int]]:
    """
    Read the location table of a region file.

    Returns:
        1024 ``(sector_offset, sector_count)`` tuples in slot order

    Raises:
        RegionTruncatedError: If the buffer is shorter than the header
    """
    if len(data) < HEADER_SIZE:
        raise RegionTruncatedError(len(data), HEADER_SIZE)

    entries = struct.unpack_from(f">{CHUNKS_PER_REGION}I", data, 0)
    return [(entry >> 8, entry & 0xFF) for entry in entries]


def decompress_chunk(compression_type: int, payload: bytes) -> bytes:
    """
    Inflate one chunk payload.

    Raises:
        UnsupportedFormatError: For any compression other than zlib
        DecodeError: If the zlib stream is corrupt
    """
    if compression_type != COMPRESSION_ZLIB:
        raise UnsupportedFormatError(f"Unsupported compression type {compression_type}")

    try:
        return zlib.decompress(payload)
    except zlib.error as e:
        raise DecodeError(f"Failed to inflate chunk payload: {e}") from e


def parse_chunk_from_bytes(slot_index: int, payload: bytes) -> Optional[Chunk]:
    """
    Build a Chunk from one decompressed NBT payload.

    Args:
        slot_index: Index of the chunk in the location table (0-1023), used
            for the position when ``xPos``/``zPos`` are absent
        payload: Uncompressed NBT bytes

    Returns:
        The chunk, or None when the payload is not a decodable compound or
        the chunk is not fully generated

    Raises:
        UnsupportedFormatError: For chunks in the pre-``sections`` layout
        StructuralDecodeError: If ``DataVersion``, ``LastUpdate`` or
            ``InhabitedTime`` is missing or mistyped
    """
    try:
        root = parse_nbt(payload)
    except DecodeError as e:
        logger.warning(f"Slot {slot_index}: {e}")
        return None

    if not isinstance(root, Compound):
        logger.warning(f"Slot {slot_index}: root tag is not a Compound")
        return None

    status = root.get("Status")
    if isinstance(status, String) and str(status) != FULL_STATUS:
        logger.debug(f"Slot {slot_index}: skipping proto-chunk with status {status}")
        return None

    if "sections" not in root and isinstance(root.get("Level"), Compound):
        raise UnsupportedFormatError(f"Slot {slot_index}: chunk uses the pre-1.18 'Level' layout")

    data_version = get_int(root, "DataVersion")
    last_update = get_long(root, "LastUpdate")
    inhabited_time = get_long(root, "InhabitedTime")

    x_pos = root.get("xPos")
    z_pos = root.get("zPos")
    chunk_x = int(x_pos) if isinstance(x_pos, Int) else slot_index % REGION_WIDTH
    chunk_z = int(z_pos) if isinstance(z_pos, Int) else slot_index // REGION_WIDTH

    return Chunk(
        data_version=data_version,
        last_update=last_update,
        inhabited_time=inhabited_time,
        position=ChunkPosition(x=chunk_x, z=chunk_z),
        nbt=root,
    )


def parse_region_bytes(data: bytes) -> Region:
    """
    Decode every fully generated chunk of a region file.

    Args:
        data: Complete content of a ``.mca`` file

    Returns:
        Region holding the chunks in slot order

    Raises:
        RegionTruncatedError: If the file is shorter than its header
        StructuralDecodeError: If a chunk lacks its required metadata

    Example:
        >>> region = parse_region_bytes(Path("r.0.0.mca").read_bytes())
        >>> print(f"{len(region)} chunks")
    """
    locations = read_location_table(data)
    chunks = []

    for slot_index, (sector_offset, sector_count) in enumerate(locations):
        if sector_offset == 0 or sector_count == 0:
            continue

        byte_offset = sector_offset * SECTOR_SIZE
        if byte_offset + CHUNK_HEADER_SIZE > len(data):
            logger.warning(f"Slot {slot_index}: chunk header at byte {byte_offset} is past the end of the file")
            continue

        length, compression_type = struct.unpack_from(">IB", data, byte_offset)
        data_start = byte_offset + CHUNK_HEADER_SIZE
        data_end = data_start + length - 1
        if length == 0 or data_end > len(data):
            logger.warning(f"Slot {slot_index}: chunk of {length} bytes at byte {byte_offset} exceeds the file")
            continue

        try:
            payload = decompress_chunk(compression_type, data[data_start:data_end])
        except UnsupportedFormatError as e:
            logger.debug(f"Slot {slot_index}: {e}")
            continue
        except DecodeError as e:
            logger.warning(f"Slot {slot_index}: {e}")
            continue

        try:
            chunk = parse_chunk_from_bytes(slot_index, payload)
        except UnsupportedFormatError as e:
            logger.debug(str(e))
            continue

        if chunk is not None:
            chunks.append(chunk)

    return Region(chunks=chunks)
