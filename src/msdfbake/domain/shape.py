"""Shape: the set of contours consumed by the generators.

A Shape is built once per glyph or sprite slot, prepared (validated,
normalized, colored) and then treated as read-only by every generation
stage.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from msdfbake.domain.contour import Contour
from msdfbake.domain.edge import Bounds
from msdfbake.exceptions import ShapeIntegrityError

EMPTY_BOUNDS: Bounds = (math.inf, math.inf, -math.inf, -math.inf)


@dataclass
class Shape:
    """Vector shape made of closed contours.

    Attributes:
        contours: Contours of the shape
        inverse_y_axis: True when the geometry is Y-up (font units) and output
            rows must be written bottom-up
    """

    contours: list[Contour] = field(default_factory=list)
    inverse_y_axis: bool = False

    def add_contour(self, contour: Contour | None = None) -> Contour:
        """Append a contour (a new empty one by default) and return it."""
        if contour is None:
            contour = Contour()
        self.contours.append(contour)
        return contour

    @property
    def edge_count(self) -> int:
        """Total number of edges over all contours."""
        return sum(len(contour.edges) for contour in self.contours)

    def is_empty(self) -> bool:
        """Check if the shape has no edges at all."""
        return self.edge_count == 0

    def validate(self) -> None:
        """Check that every non-empty contour forms a closed loop.

        Raises:
            ShapeIntegrityError: If an edge does not start where its
                predecessor ends
        """
        for contour_index, contour in enumerate(self.contours):
            gap = contour.first_gap()
            if gap is not None:
                raise ShapeIntegrityError(contour_index, gap)

    def normalize(self) -> int:
        """Split every single-edge contour into three consecutive thirds.

        Edge coloring needs at least three edges to place three colors around
        a closed single-edge contour. Contours that already have more than
        one edge are left untouched, so normalizing twice splits nothing.

        Returns:
            Number of contours that were split
        """
        split = 0
        for contour in self.contours:
            if len(contour.edges) == 1:
                contour.edges = list(contour.edges[0].split_in_thirds())
                split += 1
        return split

    def bounds(self) -> Bounds:
        """Bounding box (left, bottom, right, top) over all edges.

        Returns:
            Bounds tuple; an empty shape yields inverted infinite bounds
        """
        bounds = EMPTY_BOUNDS
        for contour in self.contours:
            bounds = contour.bound(bounds)
        return bounds

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "contours": [c.to_dict() for c in self.contours],
            "inverse_y_axis": self.inverse_y_axis,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Shape":
        """Deserialize from dictionary."""
        return cls(
            contours=[Contour.from_dict(c) for c in data["contours"]],
            inverse_y_axis=data.get("inverse_y_axis", False),
        )
