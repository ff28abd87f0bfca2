import logging
import time
from typing import List, Optional

from pydantic import BaseModel, Field

from ..shared.config import ConverterConfig
from ..shared.errors import ConversionError
from ..shared.models import NPC, Catalog, DirectionValue, LayerKind, Tile
from ..shared.tiled import MapLayer, TiledMap
from .autotile import substitute_layer
from .collision import derive_collisions
from .objects import decode_npc
from .tile_resolver import TileResolver


class ConvertedLayer(BaseModel):
    name: str
    kind: LayerKind
    tiles: List[Optional[Tile]]
    substituted: int = 0


class ConvertedMap(BaseModel):
    width: int
    height: int
    tile_width: int
    tile_height: int
    layers: List[ConvertedLayer] = Field(default_factory=list)
    npcs: Optional[List[NPC]] = None
    collisions: Optional[List[DirectionValue]] = None
    conversion_time: float = 0


class MapConverter:
    """
    Converts a Tiled map into render-ready layers for one catalog.

    - ground/doodads layers are autotiled
    - the collision layer becomes per-cell blocked directions
    - the NPC layer's objects become NPC records
    - any other layer passes through with its tiles resolved

    A conversion either succeeds completely or raises a ConversionError.
    """
    def __init__(self, catalog: Catalog, config: Optional[ConverterConfig] = None):
        self.catalog = catalog
        self.config = config or ConverterConfig()
        self.logger = logging.getLogger(__name__)

    def convert(self, tiled_map: TiledMap) -> ConvertedMap:
        start_time = time.time()
        resolver = TileResolver(tiled_map, self.catalog)
        result = ConvertedMap(
            width=tiled_map.width,
            height=tiled_map.height,
            tile_width=tiled_map.tile_width,
            tile_height=tiled_map.tile_height,
        )

        for layer in tiled_map.layers:
            kind = self.config.classify_layer(layer.name)
            try:
                if kind == LayerKind.NPCS:
                    if result.npcs is not None:
                        self.logger.warning(f"Ignoring extra NPC layer '{layer.name}'")
                        continue
                    result.npcs = self._convert_npcs(layer, tiled_map, resolver)
                elif kind == LayerKind.COLLISIONS:
                    if result.collisions is not None:
                        self.logger.warning(f"Ignoring extra collision layer '{layer.name}'")
                        continue
                    grid = resolver.resolve_layer(layer, tiled_map.width, tiled_map.height)
                    result.collisions = derive_collisions(grid, self.config.collision_sheet)
                    blocked = len([d for d in result.collisions if d])
                    self.logger.info(f"Layer '{layer.name}': {blocked} blocking cells")
                else:
                    result.layers.append(self._convert_tile_layer(layer, kind, tiled_map, resolver))
            except ConversionError as e:
                self.logger.error(f"Failed to convert layer '{layer.name}': {e}")
                raise

        result.conversion_time = time.time() - start_time
        return result

    def _convert_tile_layer(self, layer: MapLayer, kind: LayerKind, tiled_map: TiledMap,
                            resolver: TileResolver) -> ConvertedLayer:
        grid = resolver.resolve_layer(layer, tiled_map.width, tiled_map.height)
        if not self.config.is_styleable(kind):
            self.logger.info(f"Layer '{layer.name}': passed through ({kind.value})")
            return ConvertedLayer(name=layer.name, kind=kind, tiles=list(grid.cells))

        tiles = substitute_layer(grid, self.catalog)
        substituted = len([1 for before, after in zip(grid.cells, tiles) if before != after])
        self.logger.info(f"Layer '{layer.name}': {substituted} autotiled cells")
        return ConvertedLayer(name=layer.name, kind=kind, tiles=tiles, substituted=substituted)

    def _convert_npcs(self, layer: MapLayer, tiled_map: TiledMap, resolver: TileResolver) -> List[NPC]:
        npcs = [
            decode_npc(obj, resolver, tiled_map.tile_width, tiled_map.tile_height)
            for obj in layer.objects or []
        ]
        self.logger.info(f"Layer '{layer.name}': {len(npcs)} NPCs")
        return npcs
