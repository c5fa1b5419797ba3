#!/usr/bin/env python3
"""
chunkmap

Example usage demonstrating region decoding and surface extraction
for top-down map rendering.
"""

import sys
from pathlib import Path

from src.anvil_region import (
    DecodeError,
    Dimension,
    extract_surface,
    find_region_files,
    iter_surfaces,
    load_region,
    print_surface_summary,
    region_dir_for_dimension,
    validate_surface,
)

WORLD_DIR = Path("world")


def example_single_chunk():
    """Extract and display the surface of a single chunk."""
    print("=" * 70)
    print("Example 1: Single Chunk Surface")
    print("=" * 70)

    region_path = region_dir_for_dimension(WORLD_DIR, Dimension.OVERWORLD) / "r.0.0.mca"
    if not region_path.exists():
        print(f"Region file not found: {region_path}")
        print("Please place a Minecraft save in the world/ directory")
        return

    region = load_region(region_path)
    print(f"\nRegion: {region_path.name}")
    print(f"  Chunks: {len(region)}")
    if not len(region):
        return

    chunk = region.chunks[0]
    print(f"  First chunk: ({chunk.position.x}, {chunk.position.z}), data version {chunk.data_version}")

    surface = extract_surface(chunk, Dimension.OVERWORLD)

    print()
    print_surface_summary(surface)

    validation = validate_surface(surface, Dimension.OVERWORLD)
    if validation['valid']:
        print("✓ Surface validation passed")
    else:
        print("⚠ Surface validation issues:")
        for issue in validation['issues']:
            print(f"  - {issue}")

    if validation['warnings']:
        print(f"⚠ {validation['warning_count']} warnings (showing first 10)")
        for warning in validation['warnings']:
            print(f"  - {warning}")

    heights = surface.heights()
    depths = surface.depths()
    print("\nGrid Representation:")
    print(f"  Heights: {heights.shape} {heights.dtype}, {heights.min()} to {heights.max()}")
    print(f"  Deepest water: {depths.max()} blocks")


def example_dimension_iteration(dimension: Dimension):
    """Demonstrate extracting every surface of one dimension."""
    print("\n" + "=" * 70)
    print(f"Example 2: {dimension.value.title()} Iteration")
    print("=" * 70)

    region_dir = region_dir_for_dimension(WORLD_DIR, dimension)
    if not region_dir.is_dir():
        print(f"Region folder not found: {region_dir}")
        return

    region_count = 0
    chunk_count = 0
    submerged = 0

    for region_path in find_region_files(region_dir):
        region_count += 1
        region = load_region(region_path)

        for chunk, surface in iter_surfaces(region, dimension):
            chunk_count += 1
            summary = surface.get_summary()
            submerged += summary['submerged']

            if chunk_count <= 3:  # Show first few chunks
                print(f"  Chunk {chunk_count}: pos=({chunk.position.x:4d}, {chunk.position.z:4d}), "
                      f"y={summary['min_y']:4d}..{summary['max_y']:4d}, "
                      f"blocks={summary['unique_blocks']:3d}, "
                      f"biomes={summary['unique_biomes']:2d}")

    print(f"\nProcessed {chunk_count} chunks in {region_count} regions")
    print(f"  Submerged columns: {submerged:,}")
    if chunk_count:
        print(f"  Avg submerged per chunk: {submerged / chunk_count:.1f}")


def main():
    """Run example demonstrations."""
    print("\n" + "=" * 70)
    print("CHUNKMAP - Anvil Surface Extraction")
    print("=" * 70)

    try:
        example_single_chunk()
        example_dimension_iteration(Dimension.NETHER)

        print("\n" + "=" * 70)
        print("Examples completed successfully!")
        print("=" * 70)

    except FileNotFoundError as e:
        print(f"\nError: {e}")
        print("\nPlease ensure you have a Minecraft save in the world/ directory")
        sys.exit(1)
    except DecodeError as e:
        print(f"\nDecode error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
