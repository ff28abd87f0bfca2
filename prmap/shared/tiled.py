"""
Models for the Tiled JSON map export consumed by the converter.

Only the fields the converter reads are modelled; everything else in the
export is ignored.
"""
import base64
import gzip
import struct
import zlib
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ObjectPropertyMissing


def decode_layer_data(data: str, encoding: Optional[str], compression: Optional[str]) -> List[int]:
    """Decode base64 layer data (optionally zlib/gzip compressed) into GIDs."""
    if encoding != "base64":
        raise ValueError(f"Unsupported layer data encoding: {encoding!r}")
    raw = base64.b64decode(data)
    try:
        if compression == "zlib":
            raw = zlib.decompress(raw)
        elif compression == "gzip":
            raw = gzip.decompress(raw)
        elif compression:
            raise ValueError(f"Unsupported layer data compression: {compression!r}")
    except (zlib.error, OSError, EOFError) as e:
        raise ValueError(f"Could not decompress {compression} layer data: {e}") from e
    if len(raw) % 4:
        raise ValueError("Layer data is not a whole number of 32-bit GIDs")
    return list(struct.unpack(f"<{len(raw) // 4}I", raw))


class MapTileset(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_gid: int = Field(alias="firstgid")
    image_width: int = Field(alias="imagewidth")
    image_height: int = Field(default=0, alias="imageheight")
    tile_count: int = Field(alias="tilecount")
    name: str

    def contains(self, gid: int) -> bool:
        return self.first_gid <= gid < self.first_gid + self.tile_count


class MapObject(BaseModel):
    gid: int = 0
    x: float = 0
    y: float = 0
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("properties", mode="before")
    @classmethod
    def _normalize_properties(cls, value: Any) -> Any:
        # Current Tiled writes a list of {name, type, value}; older exports a plain object.
        if value is None:
            return {}
        if isinstance(value, list):
            props = {}
            for item in value:
                if not isinstance(item, dict) or "name" not in item:
                    raise ValueError(f"Malformed object property: {item!r}")
                props[item["name"]] = item.get("value")
            return props
        return value

    def get_property(self, name: str) -> str:
        if name not in self.properties:
            raise ObjectPropertyMissing(name)
        return str(self.properties[name])


class MapLayer(BaseModel):
    name: str = ""
    width: int = 0
    height: int = 0
    data: Optional[List[int]] = None
    objects: Optional[List[MapObject]] = None
    encoding: Optional[str] = None
    compression: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _decode_data(cls, values: Any) -> Any:
        if isinstance(values, dict) and isinstance(values.get("data"), str):
            values = dict(values)
            values["data"] = decode_layer_data(
                values["data"], values.get("encoding"), values.get("compression")
            )
        return values


class TiledMap(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    width: int
    height: int
    tile_width: int = Field(alias="tilewidth")
    tile_height: int = Field(alias="tileheight")
    tilesets: List[MapTileset] = Field(default_factory=list)
    layers: List[MapLayer] = Field(default_factory=list)
