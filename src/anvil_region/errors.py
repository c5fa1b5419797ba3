"""
Error types raised while decoding Anvil region files and chunk surfaces.

Every error derives from ``DecodeError`` (itself a ``ValueError``, the same
error family used for invalid world files elsewhere in the package), so
callers can catch the whole family at once or single out one kind.
"""

from typing import Any, Dict, Optional


class DecodeError(ValueError):
    """Base class for all region and chunk decoding failures."""


class StructuralDecodeError(DecodeError):
    """
    A required tag is absent or holds an unexpected tag kind.

    Attributes:
        key: Name of the tag that was looked up
        expected: Tag kind that was required (e.g. ``"Compound"``)
        observed: Tag kind actually found, or ``"missing"``
        context: Optional dotted path of the parent (e.g. ``"block_states"``)
    """

    def __init__(self, key: str, expected: str, observed: str, context: Optional[str] = None):
        self.key = key
        self.expected = expected
        self.observed = observed
        self.context = context

        path = f"{context}.{key}" if context else key
        if observed == "missing":
            message = f"'{path}' not found (expected {expected})"
        else:
            message = f"'{path}' is not a {expected}. Got {observed}"
        super().__init__(message)


class MissingSectionError(StructuralDecodeError):
    """The vertical section needed for a column is not present in the chunk."""

    def __init__(self, section_index: int):
        self.section_index = section_index
        super().__init__(key=f"Y={section_index}", expected="section", observed="missing", context="sections")
        self.args = (f"Section Y={section_index} missing",)


class BoundsError(DecodeError):
    """A computed index falls outside its backing array."""

    def __init__(self, message: str, **details: Any):
        self.details: Dict[str, Any] = details
        super().__init__(message)


class UnsupportedFormatError(DecodeError):
    """The data uses a compression scheme or chunk layout this package does not read."""


class RegionTruncatedError(DecodeError):
    """The region buffer is shorter than the format requires."""

    def __init__(self, size: int, required: int):
        self.size = size
        self.required = required
        super().__init__(f"Region file too small: {size} bytes, at least {required} required")
