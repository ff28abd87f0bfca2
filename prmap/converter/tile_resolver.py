"""
Resolves Tiled GIDs into sheet-relative tiles.
"""
from typing import Dict, List, Optional

from ..shared.errors import ConversionError, LayerShapeMismatch, SheetNotFound, TilesetNotFound
from ..shared.models import Catalog, Tile
from ..shared.tiled import MapLayer, MapTileset, TiledMap
from .grid import TileGrid


class TileResolver:
    """Maps GIDs onto (sheet, column, row) using the map's tilesets.

    A tileset is matched to a catalog sheet by name: the tileset's name must
    equal the sheet image's file name without extension.
    """

    def __init__(self, tiled_map: TiledMap, catalog: Catalog):
        self.tilesets: List[MapTileset] = list(tiled_map.tilesets)
        self.tile_width = tiled_map.tile_width
        self.catalog = catalog
        self._sheet_ids: Dict[str, str] = {}

    def find_tileset(self, gid: int) -> MapTileset:
        for tileset in self.tilesets:
            if tileset.contains(gid):
                return tileset
        raise TilesetNotFound(gid)

    def sheet_id_for(self, tileset: MapTileset) -> str:
        if tileset.name not in self._sheet_ids:
            sheet = self.catalog.find_sheet_by_name(tileset.name)
            if sheet is None:
                raise SheetNotFound(tileset.name)
            self._sheet_ids[tileset.name] = sheet.id
        return self._sheet_ids[tileset.name]

    def resolve(self, gid: int) -> Tile:
        """Resolve a non-zero GID. GID 0 is an empty cell, see resolve_cell."""
        tileset = self.find_tileset(gid)
        columns = tileset.image_width // self.tile_width
        if columns <= 0:
            raise ConversionError(
                f"Tileset '{tileset.name}' is narrower than one {self.tile_width}px tile"
            )
        local_id = gid - tileset.first_gid
        return Tile(
            sheet_id=self.sheet_id_for(tileset),
            x=local_id % columns,
            y=local_id // columns,
        )

    def resolve_cell(self, gid: int) -> Optional[Tile]:
        if gid == 0:
            return None
        return self.resolve(gid)

    def resolve_layer(self, layer: MapLayer, width: int, height: int) -> TileGrid:
        """Resolve every cell of a tile layer; layers without data come back empty."""
        width = layer.width or width
        height = layer.height or height
        if layer.data is None:
            return TileGrid.empty(width, height)
        if len(layer.data) != width * height:
            raise LayerShapeMismatch(layer.name, width * height, len(layer.data))
        return TileGrid(width, height, tuple(self.resolve_cell(gid) for gid in layer.data))
