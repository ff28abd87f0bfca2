"""
Decoding of Tiled object GIDs, whose top three bits carry flip and rotation.
"""
from typing import NamedTuple

from ..shared.models import NPC
from ..shared.tiled import MapObject
from .tile_resolver import TileResolver


FLIP_H_BIT = 31
FLIP_V_BIT = 30
ROTATE_BIT = 29

FLIP_H_FLAG = 1 << FLIP_H_BIT
FLIP_V_FLAG = 1 << FLIP_V_BIT
ROTATE_FLAG = 1 << ROTATE_BIT
FLAGS_MASK = FLIP_H_FLAG | FLIP_V_FLAG | ROTATE_FLAG
UINT32_MASK = 0xFFFFFFFF


class DecodedGid(NamedTuple):
    gid: int
    flipped_h: bool = False
    flipped_v: bool = False
    rotated: bool = False


def decode_gid(packed: int) -> DecodedGid:
    """Split a packed GID into its flags and the clean GID.

    Only the low 32 bits are read, so a negative value written by a signed
    exporter decodes as its two's complement.
    """
    value = packed & UINT32_MASK
    return DecodedGid(
        gid=value & ~FLAGS_MASK & UINT32_MASK,
        flipped_h=bool(value & FLIP_H_FLAG),
        flipped_v=bool(value & FLIP_V_FLAG),
        rotated=bool(value & ROTATE_FLAG),
    )


def encode_gid(decoded: DecodedGid) -> int:
    value = decoded.gid & ~FLAGS_MASK & UINT32_MASK
    if decoded.flipped_h:
        value |= FLIP_H_FLAG
    if decoded.flipped_v:
        value |= FLIP_V_FLAG
    if decoded.rotated:
        value |= ROTATE_FLAG
    return value


def decode_npc(obj: MapObject, resolver: TileResolver, tile_width: int, tile_height: int) -> NPC:
    """Build an NPC from a placed object; pixel positions snap to the tile grid."""
    decoded = decode_gid(obj.gid)
    return NPC(
        id=obj.get_property("id"),
        sheet_tile=resolver.resolve(decoded.gid),
        flipped=decoded.flipped_h,
        x=int(obj.x // tile_width),
        y=int(obj.y // tile_height),
    )
