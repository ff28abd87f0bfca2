"""Shared catalog and map fixtures.

Every tileset is 128px wide (8 columns of 16px tiles). Autotiled sheets carry
a direction table with one style per cardinal mask, named after the
compatible sides ("nse", "w", "none", ...); the sprite sets place the style
for mask m at column m % 4, row m // 4, and their representative tile "rep"
at row 4.
"""
import pytest

from prmap.shared.models import Catalog, Direction, format_direction


TILE_SIZE = 16
COLUMNS = 8
FIRST_GIDS = {"floors": 1, "grass": 65, "dirt": 129, "walls": 193, "props": 257, "water": 321}

CARDINALS = ((Direction.NORTH, "n"), (Direction.SOUTH, "s"), (Direction.WEST, "w"), (Direction.EAST, "e"))


def style_name(mask):
    return "".join(letter for flag, letter in CARDINALS if mask & flag) or "none"


def variant_locations(column_offset=0):
    locations = [
        {"Id": style_name(m), "X": column_offset + m % 4, "Y": m // 4} for m in range(16)
    ]
    locations.append({"Id": "rep", "X": column_offset, "Y": 4})
    return locations


def build_catalog_data():
    table = {format_direction(Direction(m)): style_name(m) for m in range(16)}
    return {
        "SpriteSheets": [
            {"Id": "floors", "File": "tiles/floors.png", "Width": 128, "Height": 128, "Style": "floor"},
            {"Id": "grass", "File": "tiles/grass.png", "Width": 128, "Height": 128, "Style": "terrain",
             "MixWithOwnStyle": True, "StyleSetByDirection": table},
            {"Id": "dirt", "File": "tiles\\dirt.png", "Width": 128, "Height": 128, "Style": "terrain",
             "MixWithOwnStyle": True, "StyleSetByDirection": table},
            {"Id": "walls", "File": "tiles/walls.png", "Width": 128, "Height": 128, "Style": "wall",
             "MixWithOwnStyle": False, "StyleSetByDirection": table},
            {"Id": "props", "File": "props.png", "Width": 128, "Height": 128},
            {"Id": "water", "File": "tiles/water.png", "Width": 128, "Height": 128, "Style": "liquid",
             "StyleSetByDirection": {"None": "single"}},
        ],
        "SpriteSets": [
            {"Id": "grass", "SheetId": "grass", "TileLocations": variant_locations(), "RepresentSetId": "rep"},
            {"Id": "moss", "SheetId": "grass", "RepresentSetId": "missing",
             "TileLocations": [{"Id": "a", "X": 5, "Y": 5}, {"Id": "b", "X": 6, "Y": 5}]},
            {"Id": "dirt", "SheetId": "dirt", "TileLocations": variant_locations(), "RepresentSetId": "rep"},
            {"Id": "brick", "SheetId": "walls", "TileLocations": variant_locations(), "RepresentSetId": "rep"},
            {"Id": "stone", "SheetId": "walls", "TileLocations": variant_locations(4), "RepresentSetId": "rep"},
            {"Id": "cracked", "SheetId": "walls", "TileLocations": [{"Id": "rep", "X": 0, "Y": 6}],
             "RepresentSetId": "rep"},
            {"Id": "pond", "SheetId": "water", "RepresentSetId": "rep",
             "TileLocations": [{"Id": "rep", "X": 0, "Y": 0}, {"Id": "single", "X": 1, "Y": 0}]},
        ],
    }


@pytest.fixture
def catalog_data():
    return build_catalog_data()


@pytest.fixture
def catalog(catalog_data):
    return Catalog.model_validate(catalog_data)


@pytest.fixture
def gid():
    """GID of the tile at (x, y) on the named sheet's tileset."""
    def _gid(sheet, x, y):
        return FIRST_GIDS[sheet] + y * COLUMNS + x
    return _gid


@pytest.fixture
def variant():
    """(x, y) of the style for a direction mask, in a set starting at column_offset."""
    def _variant(mask, column_offset=0):
        m = int(mask)
        return column_offset + m % 4, m // 4
    return _variant


@pytest.fixture
def make_map_data():
    """Build a Tiled JSON map dict from layer dicts."""
    def _make(width, height, layers):
        return {
            "width": width,
            "height": height,
            "tilewidth": TILE_SIZE,
            "tileheight": TILE_SIZE,
            "orientation": "orthogonal",
            "tilesets": [
                {"firstgid": first, "name": name, "imagewidth": COLUMNS * TILE_SIZE,
                 "imageheight": COLUMNS * TILE_SIZE, "tilecount": COLUMNS * COLUMNS,
                 "tilewidth": TILE_SIZE, "tileheight": TILE_SIZE}
                for name, first in FIRST_GIDS.items()
            ],
            "layers": layers,
        }
    return _make
