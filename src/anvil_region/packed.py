"""
Packed-integer decoding for heightmaps and palette index arrays.

Anvil stores small unsigned integers packed into 64-bit longs, lowest bits
first. Since data version 2529 (1.16) values never straddle two longs: each
long holds ``64 // bits_per_entry`` values and the remaining high bits are
padding.

NBT longs are signed, so every word is reinterpreted as unsigned before any
shifting is done.
"""

from typing import Sequence

import numpy as np

from .errors import BoundsError


U64_MASK = (1 << 64) - 1

# Heightmap layout: 16x16 columns, 9 bits each, 7 values per long
HM_LENGTH = 256
HM_BITS_PER_VALUE = 9
HM_VALUES_PER_LONG = 64 // HM_BITS_PER_VALUE
HM_WORD_COUNT = -(-HM_LENGTH // HM_VALUES_PER_LONG)

# Block state palettes never use fewer than 4 bits, nor more than 15
MIN_BLOCK_BITS = 4
MAX_BLOCK_BITS = 15
DIRECT_BLOCK_BITS_THRESHOLD = 8


def _as_unsigned(words: Sequence[int]) -> np.ndarray:
    return np.array([int(word) & U64_MASK for word in words], dtype=np.uint64)


def decode_heightmap(words: Sequence[int]) -> np.ndarray:
    """
    Decode a packed heightmap into 256 column heights.

    Args:
        words: Packed long array (at least 37 longs)

    Returns:
        Array of shape (256,) and dtype uint16, row-major (Z outer, X inner)

    Raises:
        BoundsError: If the array is too short to hold 256 values
    """
    if len(words) < HM_WORD_COUNT:
        raise BoundsError(
            f"Heightmap needs {HM_WORD_COUNT} longs, got {len(words)}",
            required=HM_WORD_COUNT,
            length=len(words),
        )

    packed = _as_unsigned(words[:HM_WORD_COUNT])
    shifts = np.arange(HM_VALUES_PER_LONG, dtype=np.uint64) * np.uint64(HM_BITS_PER_VALUE)
    mask = np.uint64((1 << HM_BITS_PER_VALUE) - 1)

    values = (packed[:, np.newaxis] >> shifts) & mask
    return values.reshape(-1)[:HM_LENGTH].astype(np.uint16)


def extract_palette_index(words: Sequence[int], element_index: int, bits_per_entry: int) -> int:
    """
    Read one packed palette index.

    Args:
        words: Packed long array
        element_index: Flattened index of the element to read
        bits_per_entry: Width of every packed value; 0 means a single-entry palette

    Returns:
        The unsigned palette index

    Raises:
        BoundsError: If the element lies past the end of the array
    """
    if bits_per_entry == 0:
        return 0

    entries_per_word = 64 // bits_per_entry
    word_index = element_index // entries_per_word
    bit_offset = (element_index % entries_per_word) * bits_per_entry

    if word_index >= len(words):
        raise BoundsError(
            f"Long index {word_index} out of bounds (data length: {len(words)})",
            word_index=word_index,
            length=len(words),
            element_index=element_index,
            bits_per_entry=bits_per_entry,
        )

    word = int(words[word_index]) & U64_MASK
    return (word >> bit_offset) & ((1 << bits_per_entry) - 1)


def _ceil_log2(n: int) -> int:
    return (n - 1).bit_length() if n > 1 else 0


def calculate_bits_per_entry(palette_size: int) -> int:
    """Bits per entry of a block state array for a palette of ``palette_size`` entries."""
    if palette_size <= 1:
        return 0

    min_bits = _ceil_log2(palette_size)
    if min_bits <= MIN_BLOCK_BITS:
        return MIN_BLOCK_BITS
    if min_bits <= DIRECT_BLOCK_BITS_THRESHOLD:
        return min_bits
    return min(min_bits, MAX_BLOCK_BITS)


def calculate_biome_bits_per_entry(palette_size: int) -> int:
    """Biome arrays use the smallest width that fits the palette, without clamping."""
    return _ceil_log2(palette_size)
