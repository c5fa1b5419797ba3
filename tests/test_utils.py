"""Tests for inspection and validation helpers."""

import numpy as np
import pytest

from src.anvil_region.chunk_processor import extract_surface
from src.anvil_region.data_structures import Block, BlockPosition, ChunkSurface
from src.anvil_region.dimensions import Dimension
from src.anvil_region.utils import (
    chunk_to_region_coords,
    format_block_info,
    get_biome_index,
    group_chunks_by_region,
    print_surface_summary,
    validate_surface,
)

from .conftest import PLAINS, make_chunk


@pytest.fixture
def surface(overworld_chunk_nbt):
    return extract_surface(make_chunk(overworld_chunk_nbt, x=2, z=-3), Dimension.OVERWORLD)


@pytest.mark.parametrize("x, z, expected", [
    (0, 0, (0, 0)),
    (31, 31, (0, 0)),
    (32, -1, (1, -1)),
    (-33, -32, (-2, -1)),
])
def test_chunk_to_region_coords(x, z, expected):
    assert chunk_to_region_coords(x, z) == expected


def test_get_biome_index():
    assert get_biome_index(0, 0) == 0
    assert get_biome_index(3, 3) == 0
    assert get_biome_index(4, 0) == 1
    assert get_biome_index(15, 15) == 15
    assert get_biome_index(0, 8) == 8


def test_group_chunks_by_region(overworld_chunk_nbt):
    chunks = [
        make_chunk(overworld_chunk_nbt, x=0, z=0),
        make_chunk(overworld_chunk_nbt, x=-1, z=0),
        make_chunk(overworld_chunk_nbt, x=31, z=5),
    ]
    groups = group_chunks_by_region(chunks)

    assert sorted(groups) == [(-1, 0), (0, 0)]
    assert [chunk.position.x for chunk in groups[(0, 0)]] == [0, 31]


def test_surface_grids(surface):
    heights = surface.heights()
    depths = surface.depths()

    assert heights.shape == (16, 16)
    assert heights[0, 0] == 55
    assert np.all(heights[1:, :] == 54)
    assert depths.dtype == np.uint16
    assert depths[0, 0] == 0
    assert depths[15, 15] == 8


def test_surface_summary(surface):
    summary = surface.get_summary()

    assert summary['blocks'] == 256
    assert summary['biomes'] == 16
    assert summary['unique_blocks'] == 2
    assert summary['unique_biomes'] == 1
    assert summary['submerged'] == 255
    assert summary['snowy'] == 1
    assert (summary['min_y'], summary['max_y']) == (54, 55)


def test_chunk_summary(overworld_chunk_nbt):
    summary = make_chunk(overworld_chunk_nbt, x=2, z=-3).get_summary()

    assert summary['position'] == (2, -3)
    assert summary['data_version'] == 3465
    assert 'Heightmaps' in summary['tags']


def test_validate_surface(surface):
    result = validate_surface(surface, Dimension.OVERWORLD)

    assert result['valid']
    assert result['issues'] == []
    assert result['warning_count'] == 0


def test_validate_surface_flags_problems():
    blocks = [
        Block(BlockPosition(0, 400, 0), "minecraft:stone"),
        Block(BlockPosition(1, 60, 0), "minecraft:air", depth=3),
    ]
    result = validate_surface(ChunkSurface(blocks=blocks, biomes=[PLAINS]), Dimension.END)

    assert not result['valid']
    assert any("Block count" in issue for issue in result['issues'])
    assert any("Biome count" in issue for issue in result['issues'])
    assert any("y=400" in issue for issue in result['issues'])
    assert result['warning_count'] == 2


def test_format_block_info():
    text = format_block_info(Block(BlockPosition(1, 60, -2), "minecraft:sand", depth=4, snowy=True))

    assert text.startswith("Block at (1, 60, -2): minecraft:sand")
    assert "Under water: 4 blocks" in text
    assert "Snowy: Yes" in text


def test_format_block_info_dry():
    assert format_block_info(Block(BlockPosition(0, 0, 0), "minecraft:dirt")) == "Block at (0, 0, 0): minecraft:dirt"


def test_print_surface_summary(surface, capsys):
    print_surface_summary(surface)
    out = capsys.readouterr().out

    assert "Surface of chunk at (2, -3)" in out
    assert "Height range: 54 to 55" in out
    assert PLAINS in out
