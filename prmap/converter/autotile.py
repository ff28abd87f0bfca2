"""
Autotiling: replace representative sprite-set tiles with the variant that
matches their cardinal neighbors.

Neighbor checks always read the resolved source grid, and substituted tiles
go into a separate output list, so the result does not depend on the order
cells are visited in.
"""
import logging
from typing import List, Optional, Tuple

from ..shared.errors import SheetNotFound, StyleTileUndefined, StyleVariantUndefined
from ..shared.models import Catalog, Direction, SpriteSheet, Tile
from .grid import TileGrid


logger = logging.getLogger(__name__)

NEIGHBOR_OFFSETS: Tuple[Tuple[Direction, int, int], ...] = (
    (Direction.NORTH, 0, -1),
    (Direction.SOUTH, 0, 1),
    (Direction.WEST, -1, 0),
    (Direction.EAST, 1, 0),
)


def _sheet_of(tile: Tile, catalog: Catalog) -> SpriteSheet:
    sheet = catalog.find_sheet(tile)
    if sheet is None:
        raise SheetNotFound(tile.sheet_id)
    return sheet


def is_compatible(center: Optional[Tile], target: Optional[Tile], catalog: Catalog) -> bool:
    """Whether `target` visually continues `center`.

    Two tiles outside any sprite set (empty cells included) continue each
    other. Two sprite-set tiles do when their sheets share a style and the
    target's sheet mixes with its own style or both belong to the same set.
    """
    center_set = catalog.find_sprite_set(center)
    target_set = catalog.find_sprite_set(target)
    if center_set is None and target_set is None:
        return True
    if center_set is None or target_set is None:
        return False
    center_sheet = _sheet_of(center, catalog)
    target_sheet = _sheet_of(target, catalog)
    if target_sheet.style != center_sheet.style:
        return False
    return target_sheet.mix_with_own_style or target_set is center_set


def compute_neighbor_mask(grid: TileGrid, x: int, y: int, catalog: Catalog) -> Direction:
    """Cardinal directions whose neighbor is compatible with the cell at (x, y).

    Neighbors outside the grid always count as compatible.
    """
    center = grid.get(x, y)
    mask = Direction.NONE
    for direction, dx, dy in NEIGHBOR_OFFSETS:
        nx, ny = x + dx, y + dy
        if not grid.in_bounds(nx, ny) or is_compatible(center, grid.get(nx, ny), catalog):
            mask |= direction
    return mask


def substitute_cell(grid: TileGrid, x: int, y: int, catalog: Catalog) -> Optional[Tile]:
    """The output tile for one cell.

    Only a sprite set's representative tile, on a sheet with a direction
    table, is replaced; everything else passes through unchanged.
    """
    tile = grid.get(x, y)
    if tile is None:
        return None

    sprite_set = catalog.find_sprite_set(tile)
    if sprite_set is None:
        return tile
    sheet = _sheet_of(tile, catalog)
    if sheet.style_set_by_direction is None or not sprite_set.is_representative(tile):
        return tile

    mask = compute_neighbor_mask(grid, x, y, catalog)
    style = sheet.style_set_by_direction.get(mask)
    if style is None:
        raise StyleVariantUndefined(x, y, sheet.id, mask)
    location = sprite_set.get_from_style(style)
    if location is None:
        raise StyleTileUndefined(x, y, sprite_set.id, style)

    logger.debug(f"({x}, {y}) {sprite_set.id}: mask {int(mask)} -> '{style}'")
    return Tile(sheet_id=tile.sheet_id, x=location.x, y=location.y)


def substitute_layer(grid: TileGrid, catalog: Catalog) -> List[Optional[Tile]]:
    """Autotile a whole layer, row by row, into a new list of tiles."""
    output: List[Optional[Tile]] = [None] * len(grid.cells)
    for x, y in grid.positions():
        output[grid.index(x, y)] = substitute_cell(grid, x, y, catalog)
    return output
