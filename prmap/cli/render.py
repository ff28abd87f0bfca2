import logging
from pathlib import Path, PureWindowsPath
from typing import Any, Dict, Optional

import click
from PIL import Image, ImageDraw
from rich.console import Console

from ..shared.models import Catalog, Direction, parse_direction
from ..shared.utils import load_catalog, load_prmap


console = Console()
logger = logging.getLogger(__name__)

COLLISION_COLOR = (255, 0, 0, 255)


class SheetImages:
    """Lazily loads catalog sheet images, resolved relative to the catalog file."""

    def __init__(self, catalog: Catalog, root: Path):
        self.sheets = {sheet.id: sheet for sheet in catalog.sheets}
        self.root = root
        self._images: Dict[str, Optional[Image.Image]] = {}

    def get(self, sheet_id: str) -> Optional[Image.Image]:
        if sheet_id not in self._images:
            sheet = self.sheets.get(sheet_id)
            image = None
            if sheet is None:
                logger.warning(f"Sheet '{sheet_id}' is not in the catalog, skipping its tiles")
            else:
                path = self.root / Path(*PureWindowsPath(sheet.file).parts)
                if path.exists():
                    image = Image.open(path).convert("RGBA")
                else:
                    logger.warning(f"Sheet image {path} not found, skipping its tiles")
            self._images[sheet_id] = image
        return self._images[sheet_id]

    def crop(self, sheet_id: str, x: int, y: int, tw: int, th: int) -> Optional[Image.Image]:
        sheet = self.get(sheet_id)
        if sheet is None:
            return None
        return sheet.crop((x * tw, y * th, x * tw + tw, y * th + th))


def render_prmap(document: Dict[str, Any], images: SheetImages, draw_collisions: bool = False) -> Image.Image:
    """Render a .prmap document: layers in order, then NPCs, then collision edges."""
    width, height = document["Width"], document["Height"]
    tw, th = document["TileWidth"], document["TileHeight"]
    canvas = Image.new("RGBA", (width * tw, height * th), (0, 0, 0, 0))

    for layer in document.get("Layers") or []:
        for i, tile in enumerate(layer["Tiles"]):
            if tile is None:
                continue
            sprite = images.crop(tile["SId"], tile["SX"], tile["SY"], tw, th)
            if sprite is not None:
                canvas.alpha_composite(sprite, ((i % width) * tw, (i // width) * th))

    for npc in document.get("NPCs") or []:
        tile = npc["SheetTile"]
        sprite = images.crop(tile["SheetId"], tile["X"], tile["Y"], tw, th)
        if sprite is None:
            continue
        if npc["Flipped"]:
            sprite = sprite.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
        canvas.alpha_composite(sprite, (npc["X"] * tw, npc["Y"] * th))

    collisions = document.get("Collisions")
    if draw_collisions and collisions:
        draw = ImageDraw.Draw(canvas)
        for i, value in enumerate(collisions):
            blocked = parse_direction(value)
            left, top = (i % width) * tw, (i // width) * th
            right, bottom = left + tw - 1, top + th - 1
            if blocked & Direction.NORTH:
                draw.line([(left, top), (right, top)], fill=COLLISION_COLOR)
            if blocked & Direction.SOUTH:
                draw.line([(left, bottom), (right, bottom)], fill=COLLISION_COLOR)
            if blocked & Direction.WEST:
                draw.line([(left, top), (left, bottom)], fill=COLLISION_COLOR)
            if blocked & Direction.EAST:
                draw.line([(right, top), (right, bottom)], fill=COLLISION_COLOR)

    return canvas


@click.command()
@click.argument("prmap_file", type=click.Path(exists=True))
@click.option("--catalog", "-c", type=click.Path(exists=True), required=True, help="Catalog the map was converted with")
@click.option("--out", "-o", type=click.Path(), help="Output PNG (default: next to the .prmap)")
@click.option("--collisions", is_flag=True, help="Draw blocked tile edges in red")
def render(prmap_file, catalog, out, collisions):
    """Render a converted .prmap map to a PNG preview."""
    prmap_path = Path(prmap_file)
    catalog_path = Path(catalog)
    document = load_prmap(prmap_path)
    images = SheetImages(load_catalog(catalog_path), catalog_path.parent)

    canvas = render_prmap(document, images, draw_collisions=collisions)

    out_path = Path(out) if out else prmap_path.with_suffix(".png")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    canvas.save(out_path)
    console.print(f"[green]Rendered {prmap_path} → {out_path}[/green]")
