import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .models import COLLISION_SHEET_ID, LayerKind
from .utils import load_config


logger = logging.getLogger(__name__)


class ConverterConfig(BaseModel):
    """Settings for a conversion run, read from config/converter.json."""

    collision_sheet: str = COLLISION_SHEET_ID
    ground_layer: str = "ground"
    doodads_layer: str = "doodads"
    npcs_layer: str = "npcs"
    collisions_layer: str = "collisions"
    styleable_layers: List[LayerKind] = Field(
        default_factory=lambda: [LayerKind.GROUND, LayerKind.DOODADS]
    )
    output_extension: str = ".prmap"
    indent: Optional[int] = 2
    collision_format: Literal["names", "int"] = "names"

    def classify_layer(self, name: str) -> LayerKind:
        """Layer names are matched exactly and case-sensitively."""
        names = {
            self.ground_layer: LayerKind.GROUND,
            self.doodads_layer: LayerKind.DOODADS,
            self.npcs_layer: LayerKind.NPCS,
            self.collisions_layer: LayerKind.COLLISIONS,
        }
        return names.get(name, LayerKind.OTHER)

    def is_styleable(self, kind: LayerKind) -> bool:
        return kind in self.styleable_layers

    @classmethod
    def load(cls, config_file: str = "converter.json") -> "ConverterConfig":
        try:
            data = load_config(config_file)
        except FileNotFoundError:
            logger.debug(f"No config/{config_file}, using default converter settings")
            return cls()
        return cls(**data)
