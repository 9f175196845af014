"""Closed contour of edge segments.

A contour is a cyclic sequence of edges where each edge ends exactly where
the next one starts. Neighbour access is modulo-indexed, so the edge before
the first one is the last one.
"""

from dataclasses import dataclass, field
from typing import Any

from msdfbake.domain.edge import Bounds, EdgeSegment
from msdfbake.domain.vector import shoelace, sign


@dataclass
class Contour:
    """A closed contour representing a shape boundary.

    Attributes:
        edges: Ordered list of edge segments
    """

    edges: list[EdgeSegment] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.edges)

    def add_edge(self, edge: EdgeSegment) -> None:
        """Append an edge to the end of the contour."""
        self.edges.append(edge)

    def prev_edge(self, index: int) -> EdgeSegment:
        """Edge preceding the edge at index, wrapping around."""
        return self.edges[(index - 1) % len(self.edges)]

    def next_edge(self, index: int) -> EdgeSegment:
        """Edge following the edge at index, wrapping around."""
        return self.edges[(index + 1) % len(self.edges)]

    def is_closed(self) -> bool:
        """Check the closure invariant.

        Returns:
            True if every edge starts exactly where the previous one ends
        """
        return self.first_gap() is None

    def first_gap(self) -> int | None:
        """Index of the first edge that does not start at its predecessor's end.

        Returns:
            Edge index, or None for a closed (or empty) contour
        """
        if not self.edges:
            return None
        corner = self.edges[-1].end
        for index, edge in enumerate(self.edges):
            if edge.start != corner:
                return index
            corner = edge.end
        return None

    def winding(self) -> int:
        """Winding sign from the shoelace sum over the edges.

        Computed on every call so that it always reflects the current edges.
        Contours with one or two edges are sampled at interior points so that
        a closed curve still yields a meaningful area.

        Returns:
            1, -1, or 0 for a degenerate contour
        """
        if not self.edges:
            return 0

        total = 0.0
        if len(self.edges) == 1:
            a = self.edges[0].point(0)
            b = self.edges[0].point(1 / 3)
            c = self.edges[0].point(2 / 3)
            total += shoelace(a, b) + shoelace(b, c) + shoelace(c, a)
        elif len(self.edges) == 2:
            a = self.edges[0].point(0)
            b = self.edges[0].point(0.5)
            c = self.edges[1].point(0)
            d = self.edges[1].point(0.5)
            total += shoelace(a, b) + shoelace(b, c) + shoelace(c, d) + shoelace(d, a)
        else:
            prev = self.edges[-1].point(0)
            for edge in self.edges:
                cur = edge.point(0)
                total += shoelace(prev, cur)
                prev = cur
        return sign(total)

    def reverse(self) -> None:
        """Reverse the traversal direction in place."""
        self.edges = [edge.reversed() for edge in reversed(self.edges)]

    def bound(self, bounds: Bounds) -> Bounds:
        """Extend (left, bottom, right, top) bounds to include every edge."""
        for edge in self.edges:
            bounds = edge.bound(bounds)
        return bounds

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"edges": [edge.to_dict() for edge in self.edges]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Contour":
        """Deserialize from dictionary."""
        return cls(edges=[EdgeSegment.from_dict(e) for e in data["edges"]])
