"""
Assembles a ConvertedMap into the .prmap document layout.
"""
from typing import Any, Dict, List, Optional, Union

from ..shared.models import NPC, Direction, Tile, format_direction
from .map_converter import ConvertedMap


def tile_entry(tile: Optional[Tile]) -> Optional[Dict[str, Any]]:
    if tile is None:
        return None
    return {"SId": tile.sheet_id, "SX": tile.x, "SY": tile.y}


def npc_entry(npc: NPC) -> Dict[str, Any]:
    return {
        "Id": npc.id,
        "SheetTile": {"SheetId": npc.sheet_tile.sheet_id, "X": npc.sheet_tile.x, "Y": npc.sheet_tile.y},
        "Flipped": npc.flipped,
        "X": npc.x,
        "Y": npc.y,
    }


def collision_entry(directions: Direction, collision_format: str = "names") -> Union[str, int]:
    if collision_format == "int":
        return int(directions)
    return format_direction(directions)


def assemble_output(converted: ConvertedMap, collision_format: str = "names") -> Dict[str, Any]:
    """Build the .prmap document.

    Every tile list keeps one entry per cell (None for empty cells) so the
    engine can index it with y * width + x.
    """
    collisions: Optional[List[Union[str, int]]] = None
    if converted.collisions is not None:
        collisions = [collision_entry(d, collision_format) for d in converted.collisions]

    return {
        "Width": converted.width,
        "Height": converted.height,
        "TileWidth": converted.tile_width,
        "TileHeight": converted.tile_height,
        "Layers": [
            {"Name": layer.name, "Tiles": [tile_entry(tile) for tile in layer.tiles]}
            for layer in converted.layers
        ],
        "NPCs": [npc_entry(npc) for npc in converted.npcs] if converted.npcs is not None else None,
        "Collisions": collisions,
    }
