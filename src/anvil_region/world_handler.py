"""
Region file loading and world folder layout utilities.

The decoding functions work on bytes; this module is the thin layer that
finds region files on disk and reads them.
"""

import re
from pathlib import Path
from typing import List, Tuple, Union

from .data_structures import Region
from .dimensions import Dimension
from .regions import parse_region_bytes


REGION_FILENAME = re.compile(r"^r\.(-?\d+)\.(-?\d+)\.mca$")

_DIMENSION_FOLDERS = {
    Dimension.OVERWORLD: Path("region"),
    Dimension.NETHER: Path("DIM-1") / "region",
    Dimension.END: Path("DIM1") / "region",
}


def load_region(path: Union[str, Path]) -> Region:
    """
    Load a region file.

    Args:
        path: Path to the .mca region file

    Returns:
        Decoded region

    Raises:
        FileNotFoundError: If the region file doesn't exist
        ValueError: If the file is not a region file; decode failures are
            ``DecodeError``, a ValueError subclass

    Example:
        >>> region = load_region("world/region/r.0.0.mca")
        >>> print(f"Chunks: {len(region)}")
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Region file not found: {path}")

    if path.suffix != '.mca':
        raise ValueError(f"Invalid region file extension: {path.suffix}. Expected '.mca'")

    return parse_region_bytes(path.read_bytes())


def find_region_files(region_dir: Union[str, Path]) -> List[Path]:
    """Return sorted list of non-empty .mca files in *region_dir*."""
    region_dir = Path(region_dir)
    if not region_dir.is_dir():
        raise FileNotFoundError(f"Region folder not found: {region_dir}")

    return sorted(
        path for path in region_dir.glob("*.mca")
        if path.is_file() and path.stat().st_size > 0
    )


def region_dir_for_dimension(world_dir: Union[str, Path], dimension: Dimension) -> Path:
    """Folder holding the region files of *dimension* inside a world save."""
    return Path(world_dir) / _DIMENSION_FOLDERS[dimension]


def parse_region_filename(path: Union[str, Path]) -> Tuple[int, int]:
    """
    Region coordinates encoded in a ``r.<x>.<z>.mca`` file name.

    Raises:
        ValueError: If the name does not follow the pattern
    """
    match = REGION_FILENAME.match(Path(path).name)
    if match is None:
        raise ValueError(f"Not a region file name: {Path(path).name}")
    return int(match.group(1)), int(match.group(2))
