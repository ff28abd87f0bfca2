from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

from ..shared.models import Tile


@dataclass(frozen=True)
class TileGrid:
    """Read-only row-major grid of resolved tiles; None marks an empty cell."""
    width: int
    height: int
    cells: Tuple[Optional[Tile], ...]

    def __post_init__(self):
        object.__setattr__(self, "cells", tuple(self.cells))
        if len(self.cells) != self.width * self.height:
            raise ValueError(
                f"Grid of {self.width}x{self.height} needs {self.width * self.height} cells, "
                f"got {len(self.cells)}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[Tile]]]) -> "TileGrid":
        height = len(rows)
        width = len(rows[0]) if rows else 0
        return cls(width, height, tuple(cell for row in rows for cell in row))

    @classmethod
    def empty(cls, width: int, height: int) -> "TileGrid":
        return cls(width, height, (None,) * (width * height))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def get(self, x: int, y: int) -> Optional[Tile]:
        return self.cells[self.index(x, y)]

    def positions(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.height):
            for x in range(self.width):
                yield x, y
