import re
from enum import Enum, IntFlag
from pathlib import PureWindowsPath
from typing import Annotated, Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_pascal
from pydantic.functional_validators import PlainValidator


COLLISION_SHEET_ID = "floors"


class Direction(IntFlag):
    NONE = 0
    NORTH = 1 << 0
    SOUTH = 1 << 1
    WEST = 1 << 2
    EAST = 1 << 3
    NORTH_WEST = 1 << 4
    NORTH_EAST = 1 << 5
    SOUTH_WEST = 1 << 6
    SOUTH_EAST = 1 << 7


# Single-bit flags in ascending order, with the names used in catalog and output files.
DIRECTION_NAMES: Tuple[Tuple[Direction, str], ...] = (
    (Direction.NORTH, "North"),
    (Direction.SOUTH, "South"),
    (Direction.WEST, "West"),
    (Direction.EAST, "East"),
    (Direction.NORTH_WEST, "NorthWest"),
    (Direction.NORTH_EAST, "NorthEast"),
    (Direction.SOUTH_WEST, "SouthWest"),
    (Direction.SOUTH_EAST, "SouthEast"),
)

_DIRECTION_LOOKUP = {
    name.replace("_", "").lower(): member for name, member in Direction.__members__.items()
}


def parse_direction(value: Any) -> Direction:
    """Read a direction set from an int mask or a flag-name string.

    Accepts "North, West", "North|West", "NorthWest", "north_west", "None"
    and decimal masks such as "5".
    """
    if isinstance(value, Direction):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot interpret {value!r} as a direction")
    if isinstance(value, int):
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Direction mask {value} does not fit in 8 bits")
        return Direction(value)
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return parse_direction(int(text))
        result = Direction.NONE
        for part in re.split(r"[,|]", text):
            key = part.strip().replace("_", "").lower()
            if not key:
                continue
            if key not in _DIRECTION_LOOKUP:
                raise ValueError(f"Unknown direction flag: {part.strip()!r}")
            result |= _DIRECTION_LOOKUP[key]
        return result
    raise ValueError(f"Cannot interpret {value!r} as a direction")


def format_direction(directions: Direction) -> str:
    """Render a direction set as "North, West", or "None" when empty."""
    names = [name for flag, name in DIRECTION_NAMES if directions & flag]
    return ", ".join(names) if names else "None"


DirectionValue = Annotated[Direction, PlainValidator(parse_direction)]


class LayerKind(str, Enum):
    GROUND = "ground"
    DOODADS = "doodads"
    NPCS = "npcs"
    COLLISIONS = "collisions"
    OTHER = "other"


class Tile(BaseModel):
    """A tile on a sprite sheet, addressed by its column and row."""
    model_config = ConfigDict(frozen=True)

    sheet_id: str
    x: int
    y: int


class CatalogModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)


class SpriteSheet(CatalogModel):
    id: str
    file: str
    width: int = 0
    height: int = 0
    style: Optional[str] = None
    mix_with_own_style: bool = False
    linked_sheet_id: Optional[str] = None
    style_set_by_direction: Optional[Dict[DirectionValue, str]] = None

    @property
    def name(self) -> str:
        """File name of the sheet image without directory or extension."""
        return PureWindowsPath(self.file).stem


class SpriteSetTile(CatalogModel):
    id: str
    x: int
    y: int


class SpriteSet(CatalogModel):
    id: str
    sheet_id: str
    tile_locations: List[SpriteSetTile] = Field(default_factory=list)
    represent_set_id: Optional[str] = None

    def get_from_style(self, style: str) -> Optional[SpriteSetTile]:
        for location in self.tile_locations:
            if location.id == style:
                return location
        return None

    def style_at(self, x: int, y: int) -> Optional[str]:
        for location in self.tile_locations:
            if location.x == x and location.y == y:
                return location.id
        return None

    def is_representative(self, tile: Tile) -> bool:
        return (
            self.represent_set_id is not None
            and self.style_at(tile.x, tile.y) == self.represent_set_id
        )


class Catalog(BaseModel):
    """Sprite sheets and sprite sets describing the game's tile art.

    Lookups are indexed once after validation; the catalog is read-only for
    the rest of a conversion run.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sheets: List[SpriteSheet] = Field(default_factory=list, alias="SpriteSheets")
    sets: List[SpriteSet] = Field(default_factory=list, alias="SpriteSets")

    _sheets_by_id: Dict[str, SpriteSheet] = PrivateAttr(default_factory=dict)
    _sheets_by_name: Dict[str, SpriteSheet] = PrivateAttr(default_factory=dict)
    _sets_by_location: Dict[Tuple[str, int, int], SpriteSet] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        for sheet in self.sheets:
            self._sheets_by_id.setdefault(sheet.id, sheet)
            self._sheets_by_name.setdefault(sheet.name, sheet)
        # First set listed wins when two sets claim the same location
        for sprite_set in self.sets:
            for location in sprite_set.tile_locations:
                key = (sprite_set.sheet_id, location.x, location.y)
                self._sets_by_location.setdefault(key, sprite_set)

    def find_sheet(self, tile: Optional[Tile]) -> Optional[SpriteSheet]:
        if tile is None:
            return None
        return self._sheets_by_id.get(tile.sheet_id)

    def find_sheet_by_name(self, name: str) -> Optional[SpriteSheet]:
        return self._sheets_by_name.get(name)

    def find_sprite_set(self, tile: Optional[Tile]) -> Optional[SpriteSet]:
        if tile is None:
            return None
        return self._sets_by_location.get((tile.sheet_id, tile.x, tile.y))


class NPC(BaseModel):
    id: str
    sheet_tile: Tile
    flipped: bool = False
    x: int
    y: int
