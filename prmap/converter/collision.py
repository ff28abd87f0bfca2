from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from ..shared.models import COLLISION_SHEET_ID, Direction, Tile
from .grid import TileGrid


N, S, W, E = Direction.NORTH, Direction.SOUTH, Direction.WEST, Direction.EAST

# Blocked sides for each tile of the collision sheet, keyed by (column, row).
COLLISION_TILES: Mapping[Tuple[int, int], Direction] = MappingProxyType({
    (0, 0): N | W,
    (1, 0): N,
    (2, 0): N | E,
    (3, 0): N | W | E,
    (5, 0): N | W | E | S,

    (0, 1): W,
    (1, 1): Direction.NONE,
    (2, 1): E,
    (3, 1): W | E,
    (4, 1): N | W | S,
    (5, 1): N | S,
    (6, 1): N | E | S,

    (0, 2): W | S,
    (1, 2): S,
    (2, 2): E | S,
    (3, 2): S | W | E,
})


def get_collision_direction(tile: Optional[Tile], collision_sheet: str = COLLISION_SHEET_ID) -> Direction:
    """Blocked directions for a tile; anything unmapped is fully open."""
    if tile is None or tile.sheet_id != collision_sheet:
        return Direction.NONE
    return COLLISION_TILES.get((tile.x, tile.y), Direction.NONE)


def derive_collisions(grid: TileGrid, collision_sheet: str = COLLISION_SHEET_ID) -> List[Direction]:
    return [get_collision_direction(tile, collision_sheet) for tile in grid.cells]
