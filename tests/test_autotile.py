import random

import pytest

from prmap.converter.autotile import (
    NEIGHBOR_OFFSETS,
    compute_neighbor_mask,
    is_compatible,
    substitute_cell,
    substitute_layer,
)
from prmap.converter.grid import TileGrid
from prmap.shared.errors import StyleTileUndefined, StyleVariantUndefined
from prmap.shared.models import Direction, Tile


N, S, W, E = Direction.NORTH, Direction.SOUTH, Direction.WEST, Direction.EAST
OPPOSITE = {N: S, S: N, W: E, E: W}

GRASS = Tile(sheet_id="grass", x=0, y=4)
DIRT = Tile(sheet_id="dirt", x=0, y=4)
BRICK = Tile(sheet_id="walls", x=0, y=4)
STONE = Tile(sheet_id="walls", x=4, y=4)
PROP = Tile(sheet_id="props", x=0, y=0)
FLOOR = Tile(sheet_id="floors", x=1, y=1)
MOSS = Tile(sheet_id="grass", x=5, y=5)
GRASS_VARIANT = Tile(sheet_id="grass", x=1, y=1)
POND = Tile(sheet_id="water", x=0, y=0)
CRACKED = Tile(sheet_id="walls", x=0, y=6)


def test_three_cells_in_a_row_on_a_single_row_map(catalog, variant):
    grid = TileGrid.from_rows([[None, GRASS, GRASS, GRASS, None]])

    assert compute_neighbor_mask(grid, 1, 0, catalog) == N | S | E
    assert compute_neighbor_mask(grid, 2, 0, catalog) == N | S | W | E
    assert compute_neighbor_mask(grid, 3, 0, catalog) == N | S | W

    output = substitute_layer(grid, catalog)
    assert output == [
        None,
        Tile(sheet_id="grass", x=variant(N | S | E)[0], y=variant(N | S | E)[1]),
        Tile(sheet_id="grass", x=variant(N | S | W | E)[0], y=variant(N | S | W | E)[1]),
        Tile(sheet_id="grass", x=variant(N | S | W)[0], y=variant(N | S | W)[1]),
        None,
    ]


def test_empty_neighbors_block_a_sprite_set_tile(catalog):
    grid = TileGrid.from_rows([
        [None, None, None, None, None],
        [None, GRASS, GRASS, GRASS, None],
        [None, None, None, None, None],
    ])
    assert compute_neighbor_mask(grid, 1, 1, catalog) == E
    assert compute_neighbor_mask(grid, 2, 1, catalog) == W | E
    assert compute_neighbor_mask(grid, 3, 1, catalog) == W


def test_lone_cell_sees_only_map_edges(catalog, variant):
    grid = TileGrid.from_rows([[GRASS]])
    assert compute_neighbor_mask(grid, 0, 0, catalog) == N | S | W | E
    x, y = variant(N | S | W | E)
    assert substitute_cell(grid, 0, 0, catalog) == Tile(sheet_id="grass", x=x, y=y)


@pytest.mark.parametrize("center, target, expected", [
    (GRASS, GRASS, True),
    (GRASS, GRASS_VARIANT, True),
    (GRASS, DIRT, True),        # same style, both sheets mix
    (BRICK, BRICK, True),
    (BRICK, STONE, False),      # same sheet, no mixing, different sets
    (GRASS, BRICK, False),      # different styles
    (PROP, PROP, True),         # neither has a sprite set
    (PROP, None, True),
    (None, None, True),
    (GRASS, None, False),
    (GRASS, PROP, False),
    (FLOOR, MOSS, False),
])
def test_is_compatible(catalog, center, target, expected):
    assert is_compatible(center, target, catalog) is expected


def test_compatibility_is_symmetric(catalog):
    grid = TileGrid.from_rows([
        [GRASS, DIRT, BRICK, STONE, None],
        [PROP, GRASS, BRICK, BRICK, MOSS],
        [None, STONE, DIRT, PROP, GRASS_VARIANT],
        [FLOOR, FLOOR, GRASS, DIRT, STONE],
    ])
    masks = {(x, y): compute_neighbor_mask(grid, x, y, catalog) for x, y in grid.positions()}

    for x, y in grid.positions():
        for direction, dx, dy in NEIGHBOR_OFFSETS:
            nx, ny = x + dx, y + dy
            if not grid.in_bounds(nx, ny):
                continue
            toward = bool(masks[(x, y)] & direction)
            back = bool(masks[(nx, ny)] & OPPOSITE[direction])
            assert toward == back, f"({x}, {y}) -> ({nx}, {ny})"


def random_grid(seed, width=7, height=5):
    rng = random.Random(seed)
    choices = [GRASS, GRASS, DIRT, BRICK, BRICK, STONE, PROP, FLOOR, MOSS, GRASS_VARIANT, None]
    return TileGrid(width, height, tuple(rng.choice(choices) for _ in range(width * height)))


@pytest.mark.parametrize("seed", range(5))
def test_visiting_order_does_not_change_the_result(catalog, seed):
    grid = random_grid(seed)
    expected = substitute_layer(grid, catalog)

    positions = list(grid.positions())
    random.Random(seed + 100).shuffle(positions)
    output = [None] * len(grid.cells)
    for x, y in positions:
        output[grid.index(x, y)] = substitute_cell(grid, x, y, catalog)

    assert output == expected


@pytest.mark.parametrize("seed", range(3))
def test_substitution_is_idempotent(catalog, seed):
    grid = random_grid(seed)
    once = substitute_layer(grid, catalog)
    twice = substitute_layer(TileGrid(grid.width, grid.height, tuple(once)), catalog)
    assert twice == once


def test_source_grid_is_left_untouched(catalog):
    grid = TileGrid.from_rows([[GRASS, GRASS], [None, BRICK]])
    before = grid.cells
    output = substitute_layer(grid, catalog)
    assert grid.cells == before
    assert output != list(before)


@pytest.mark.parametrize("tile", [PROP, FLOOR, MOSS, GRASS_VARIANT])
def test_ineligible_cells_pass_through(catalog, tile):
    grid = TileGrid.from_rows([
        [GRASS, DIRT, GRASS],
        [BRICK, tile, GRASS],
        [None, GRASS, STONE],
    ])
    assert substitute_cell(grid, 1, 1, catalog) == tile
    assert substitute_layer(grid, catalog)[grid.index(1, 1)] == tile


def test_mask_picks_style_from_sheet_table(catalog):
    grid = TileGrid.from_rows([
        [PROP, PROP, PROP],
        [PROP, POND, PROP],
        [PROP, PROP, PROP],
    ])
    assert compute_neighbor_mask(grid, 1, 1, catalog) == Direction.NONE
    assert substitute_cell(grid, 1, 1, catalog) == Tile(sheet_id="water", x=1, y=0)


def test_missing_style_for_mask_is_an_error(catalog):
    grid = TileGrid.from_rows([[PROP, POND]])
    with pytest.raises(StyleVariantUndefined) as excinfo:
        substitute_layer(grid, catalog)
    error = excinfo.value
    assert (error.x, error.y, error.sheet_id) == (1, 0, "water")
    assert error.directions == N | S | E
    assert "North, South, East" in str(error)


def test_missing_style_tile_in_sprite_set_is_an_error(catalog):
    grid = TileGrid.from_rows([[CRACKED]])
    with pytest.raises(StyleTileUndefined) as excinfo:
        substitute_cell(grid, 0, 0, catalog)
    assert excinfo.value.sprite_set_id == "cracked"
    assert excinfo.value.style == "nswe"
