"""
Checked lookups over decoded NBT trees.

Trees come from nbtlib. Every accessor verifies both presence and tag kind
and raises ``StructuralDecodeError`` naming the key and the tag actually
found, so malformed or version-mismatched chunks fail with a location
instead of a ``KeyError`` deep inside the extractor.
"""

import io
from typing import Any, Mapping, Optional

import nbtlib
from nbtlib import Byte, Compound, Int, List, Long, LongArray, String

from .errors import DecodeError, StructuralDecodeError


class _StrictReader(io.BytesIO):
    """BytesIO that raises on short reads instead of returning fewer bytes."""

    def read(self, size: Optional[int] = -1) -> bytes:
        chunk = super().read(size)
        if size is not None and size >= 0 and len(chunk) < size:
            raise EOFError(f"Unexpected end of NBT data: wanted {size} bytes, got {len(chunk)}")
        return chunk


def parse_nbt(data: bytes) -> Compound:
    """
    Decode an uncompressed, big-endian NBT payload.

    nbtlib reads a truncated number as 0, so the payload is read through a
    reader that fails on short reads.

    Raises:
        DecodeError: If the payload is truncated or nbtlib cannot parse it
    """
    try:
        return nbtlib.File.parse(_StrictReader(data), byteorder="big")
    except Exception as e:
        raise DecodeError(f"Failed to decode NBT payload: {e}") from e


def tag_kind(value: Any) -> str:
    """Human-readable tag kind of ``value`` for error messages."""
    if value is None:
        return "missing"
    return type(value).__name__


def _require(parent: Mapping, key: str, tag_type, expected: str, context: Optional[str]):
    value = parent.get(key)
    if not isinstance(value, tag_type):
        raise StructuralDecodeError(key, expected, tag_kind(value), context)
    return value


def _optional(parent: Mapping, key: str, tag_type, expected: str, context: Optional[str]):
    if key not in parent:
        return None
    return _require(parent, key, tag_type, expected, context)


def get_compound(parent: Mapping, key: str, context: Optional[str] = None) -> Compound:
    return _require(parent, key, Compound, "Compound", context)


def get_list(parent: Mapping, key: str, context: Optional[str] = None) -> List:
    return _require(parent, key, List, "List", context)


def get_string(parent: Mapping, key: str, context: Optional[str] = None) -> str:
    return str(_require(parent, key, String, "String", context))


def get_int(parent: Mapping, key: str, context: Optional[str] = None) -> int:
    return int(_require(parent, key, Int, "Int", context))


def get_long(parent: Mapping, key: str, context: Optional[str] = None) -> int:
    return int(_require(parent, key, Long, "Long", context))


def get_long_array(parent: Mapping, key: str, context: Optional[str] = None) -> LongArray:
    return _require(parent, key, LongArray, "LongArray", context)


def get_optional_compound(parent: Mapping, key: str, context: Optional[str] = None) -> Optional[Compound]:
    return _optional(parent, key, Compound, "Compound", context)


def get_section_y(section: Mapping) -> int:
    """Section ``Y`` is written as a Byte by the game but as an Int by some tools."""
    return int(_require(section, "Y", (Byte, Int), "Byte or Int", "section"))


def as_compound(value: Any, name: str) -> Compound:
    """Check that a list element is a compound."""
    if not isinstance(value, Compound):
        raise StructuralDecodeError(name, "Compound", tag_kind(value))
    return value
