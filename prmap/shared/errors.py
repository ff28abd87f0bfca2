"""
Errors raised while converting a Tiled map into a .prmap map.

Every fatal condition derives from ConversionError so callers can abort the
whole conversion with a single except clause.
"""
from .models import format_direction


class ConversionError(Exception):
    """Base class for conditions that abort a map conversion."""


class TilesetNotFound(ConversionError):
    def __init__(self, gid: int):
        self.gid = gid
        super().__init__(f"No tileset contains GID {gid}")


class SheetNotFound(ConversionError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No sprite sheet matches '{name}'")


class StyleVariantUndefined(ConversionError):
    """A sheet's direction table has no style for a computed neighbor mask."""

    def __init__(self, x: int, y: int, sheet_id: str, directions):
        self.x = x
        self.y = y
        self.sheet_id = sheet_id
        self.directions = directions
        super().__init__(
            f"Sheet '{sheet_id}' defines no style for directions "
            f"[{format_direction(directions)}] (mask {int(directions)}) at cell ({x}, {y})"
        )


class StyleTileUndefined(ConversionError):
    """A sprite set has no tile location for the requested style."""

    def __init__(self, x: int, y: int, sprite_set_id: str, style: str):
        self.x = x
        self.y = y
        self.sprite_set_id = sprite_set_id
        self.style = style
        super().__init__(
            f"Sprite set '{sprite_set_id}' has no tile for style '{style}' at cell ({x}, {y})"
        )


class LayerShapeMismatch(ConversionError):
    def __init__(self, layer: str, expected: int, actual: int):
        self.layer = layer
        self.expected = expected
        self.actual = actual
        super().__init__(f"Layer '{layer}' has {actual} cells, expected {expected}")


class ObjectPropertyMissing(ConversionError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Object is missing required property '{name}'")
