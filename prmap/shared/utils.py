import json
import string
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .models import Catalog, parse_direction
from .tiled import TiledMap


SHEET_MARKERS = string.ascii_lowercase + string.ascii_uppercase + string.digits


def load_config(config_file: str) -> Dict[str, Any]:
    """Load configuration from JSON file."""
    config_path = Path("config") / config_file
    with open(config_path, "r") as f:
        return json.load(f)


def load_catalog(path: Path) -> Catalog:
    """Load the sprite sheet / sprite set catalog."""
    # utf-8-sig: catalogs authored with Windows tools often carry a BOM
    with open(path, "r", encoding="utf-8-sig") as f:
        return Catalog.model_validate(json.load(f))


def load_tiled_map(path: Path) -> TiledMap:
    """Load a Tiled JSON map export."""
    with open(path, "r", encoding="utf-8-sig") as f:
        return TiledMap.model_validate(json.load(f))


def read_load_file(path: Path) -> Tuple[Path, Path]:
    """Read the catalog and map paths from a load file (one path per line)."""
    with open(path, "r", encoding="utf-8-sig") as f:
        lines = [line.strip() for line in f if line.strip()]
    if len(lines) < 2:
        raise ValueError(f"{path} must list the catalog path and the map path on two lines")
    return Path(lines[0]), Path(lines[1])


def output_path_for(map_path: Path, extension: str = ".prmap") -> Path:
    """The converted map is written next to the source map, with its stem."""
    return map_path.parent / (map_path.stem + extension)


def write_prmap(document: Dict[str, Any], path: Path, indent: Optional[int] = 2) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(document, f, indent=indent)
    return path


def load_prmap(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        return json.load(f)


def visualize_prmap(document: Dict[str, Any]) -> str:
    """Convert a .prmap document to a human-readable text grid per layer."""
    width = document["Width"]
    height = document["Height"]
    result = []

    for layer in document.get("Layers") or []:
        tiles = layer["Tiles"]
        markers: Dict[str, str] = {}
        result.append(f"Layer '{layer['Name']}' ({width}x{height}):")
        for y in range(height):
            line = ""
            for x in range(width):
                tile = tiles[y * width + x]
                if tile is None:
                    line += "."
                    continue
                sheet_id = tile["SId"]
                if sheet_id not in markers:
                    markers[sheet_id] = SHEET_MARKERS[len(markers) % len(SHEET_MARKERS)]
                line += markers[sheet_id]
            result.append(line)
        if markers:
            legend = ", ".join(f"{marker}={sheet_id}" for sheet_id, marker in markers.items())
            result.append(f"  sheets: {legend}")
        result.append("")

    collisions = document.get("Collisions")
    if collisions:
        # One hex digit per cell: the blocked cardinal directions as a mask
        result.append(f"Collisions ({width}x{height}):")
        for y in range(height):
            row = [parse_direction(value) for value in collisions[y * width:(y + 1) * width]]
            result.append("".join(format(int(d) & 0xF, "x") if d else "." for d in row))
        result.append("")

    npcs: List[Dict[str, Any]] = document.get("NPCs") or []
    if npcs:
        result.append("NPCs:")
        for npc in npcs:
            flipped = " (flipped)" if npc["Flipped"] else ""
            tile = npc["SheetTile"]
            result.append(
                f"- {npc['Id']} at ({npc['X']},{npc['Y']}) "
                f"using {tile['SheetId']}[{tile['X']},{tile['Y']}]{flipped}"
            )

    return "\n".join(result).rstrip("\n")


def count_blocked_cells(collisions: Optional[List[Any]]) -> int:
    """Count collision cells that block at least one direction."""
    if not collisions:
        return 0
    return sum(1 for value in collisions if parse_direction(value))
