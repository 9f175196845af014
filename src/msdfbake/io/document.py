"""Sprite document loading.

A sprite document is a JSON file describing one sprite as slots of closed
paths:

    {
      "width": 32, "height": 32, "scale": 1.0,
      "slots": [
        {"color": [255, 255, 255, 255],
         "paths": [{"subtract": false,
                    "anchors": [{"x": 4, "y": 4, "curve": 0}, ...]}]}
      ]
    }

Validation is done with pydantic; the models convert into the domain
sprite types consumed by the pipeline.
"""

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from msdfbake.domain import Anchor, SpritePath, SpriteSlot
from msdfbake.exceptions import SpriteDocumentError


class AnchorModel(BaseModel):
    """Anchor entry of a path."""

    x: float
    y: float
    curve: float = 0.0


class PathModel(BaseModel):
    """Closed path entry of a slot."""

    anchors: list[AnchorModel] = Field(default_factory=list)
    subtract: bool = False

    def to_domain(self) -> SpritePath:
        return SpritePath(
            anchors=[Anchor(a.x, a.y, a.curve) for a in self.anchors],
            subtract=self.subtract,
        )


class SlotModel(BaseModel):
    """Slot entry: paths sharing one fill color."""

    paths: list[PathModel] = Field(default_factory=list)
    color: tuple[int, int, int, int] = (255, 255, 255, 255)

    def to_domain(self) -> SpriteSlot:
        return SpriteSlot(paths=[p.to_domain() for p in self.paths], color=self.color)


class SpriteDocument(BaseModel):
    """Whole sprite: rectangle size, scale and slots."""

    width: int = Field(default=32, ge=1, le=4096, description="Slot width in texels")
    height: int = Field(default=32, ge=1, le=4096, description="Slot height in texels")
    scale: float = Field(default=1.0, gt=0.0, description="Texels per sprite unit")
    slots: list[SlotModel] = Field(default_factory=list)

    def to_slots(self) -> list[SpriteSlot]:
        """Domain slots in document order."""
        return [slot.to_domain() for slot in self.slots]


def load_sprite_document(path: Path) -> SpriteDocument:
    """Read and validate a sprite document.

    Raises:
        SpriteDocumentError: If the file is unreadable or does not validate
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SpriteDocumentError(str(path), str(e)) from e
    try:
        return SpriteDocument.model_validate_json(text)
    except ValidationError as e:
        raise SpriteDocumentError(str(path), str(e)) from e
