"""Sprite path input model.

Sprite outlines arrive from the shape editor as closed paths of anchors in
screen space (Y-down). Each anchor carries a curvature that bends the edge
running from it to the next anchor.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Anchor:
    """Path anchor.

    Attributes:
        x: X position in sprite units
        y: Y position in sprite units (Y-down)
        curve: Signed offset of the outgoing edge's midpoint along its
            left-hand normal; 0 for a straight edge
    """

    x: float
    y: float
    curve: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y, "curve": self.curve}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Anchor":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"], curve=data.get("curve", 0.0))


@dataclass
class SpritePath:
    """Closed path of anchors.

    Attributes:
        anchors: Anchors in drawing order; the last connects back to the first
        subtract: True when the path carves area out of the additive paths
            drawn before it
    """

    anchors: list[Anchor] = field(default_factory=list)
    subtract: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "anchors": [a.to_dict() for a in self.anchors],
            "subtract": self.subtract,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpritePath":
        """Deserialize from dictionary."""
        return cls(
            anchors=[Anchor.from_dict(a) for a in data["anchors"]],
            subtract=data.get("subtract", False),
        )


@dataclass
class SpriteSlot:
    """Paths sharing one fill color, baked into one atlas sub-region.

    Attributes:
        paths: Paths of the slot, in draw order
        color: RGBA fill color handed to the renderer alongside the field
    """

    paths: list[SpritePath] = field(default_factory=list)
    color: tuple[int, int, int, int] = (255, 255, 255, 255)

    @property
    def add_paths(self) -> list[SpritePath]:
        """Additive paths."""
        return [p for p in self.paths if not p.subtract]

    @property
    def subtract_paths(self) -> list[SpritePath]:
        """Subtract-flagged paths."""
        return [p for p in self.paths if p.subtract]

    def draw_runs(self) -> list[tuple[bool, list[SpritePath]]]:
        """Group consecutive paths of the same kind, keeping draw order.

        Returns:
            (subtract, paths) pairs; a subtract run only carves from the
            additive runs drawn before it
        """
        runs: list[tuple[bool, list[SpritePath]]] = []
        for path in self.paths:
            if runs and runs[-1][0] == path.subtract:
                runs[-1][1].append(path)
            else:
                runs.append((path.subtract, [path]))
        return runs
