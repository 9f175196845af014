"""Per-channel distance selectors.

A selector accumulates, for one pixel, the closest true distance and the
closest perpendicular pseudo-distances on either side of the edge. The
pseudo-distances extend each edge's field along the bisector of its joints,
which keeps the channels straight right up to the corners instead of
rounding them.
"""

from dataclasses import dataclass, field

from msdfbake.domain import INFINITE_DISTANCE, EdgeColor, EdgeSegment, SignedDistance, Vector2
from msdfbake.domain.vector import median


def perpendicular_distance(distance: float, ep: Vector2, edge_dir: Vector2) -> float | None:
    """Perpendicular distance from an endpoint along its tangent.

    Args:
        distance: Current best distance
        ep: Vector from the endpoint to the query point
        edge_dir: Unit tangent pointing away from the edge at the endpoint

    Returns:
        The perpendicular distance if the query point lies beyond the
        endpoint and it is closer than distance, otherwise None
    """
    if ep.dot(edge_dir) > 0:
        perpendicular = ep.cross(edge_dir)
        if abs(perpendicular) < abs(distance):
            return perpendicular
    return None


@dataclass
class PerpendicularDistanceSelector:
    """Distance selector for a single channel.

    Attributes:
        min_true_distance: Closest true distance seen so far
        min_negative_perpendicular_distance: Closest pseudo-distance <= 0
        min_positive_perpendicular_distance: Closest pseudo-distance >= 0
        near_edge: Edge owning min_true_distance
        near_edge_param: Parameter of the closest point on near_edge
    """

    min_true_distance: SignedDistance = INFINITE_DISTANCE
    min_negative_perpendicular_distance: float = -abs(INFINITE_DISTANCE.distance)
    min_positive_perpendicular_distance: float = abs(INFINITE_DISTANCE.distance)
    near_edge: EdgeSegment | None = None
    near_edge_param: float = 0.0

    def add_edge_true_distance(
        self, edge: EdgeSegment, distance: SignedDistance, param: float
    ) -> None:
        """Offer a true distance to the selector."""
        if distance < self.min_true_distance:
            self.min_true_distance = distance
            self.near_edge = edge
            self.near_edge_param = param

    def add_edge_perpendicular_distance(self, distance: float) -> None:
        """Offer a perpendicular pseudo-distance to the selector."""
        if distance <= 0 and distance > self.min_negative_perpendicular_distance:
            self.min_negative_perpendicular_distance = distance
        if distance >= 0 and distance < self.min_positive_perpendicular_distance:
            self.min_positive_perpendicular_distance = distance

    def merge(self, other: "PerpendicularDistanceSelector") -> None:
        """Fold another selector's state into this one."""
        if other.min_true_distance < self.min_true_distance:
            self.min_true_distance = other.min_true_distance
            self.near_edge = other.near_edge
            self.near_edge_param = other.near_edge_param
        if other.min_negative_perpendicular_distance > self.min_negative_perpendicular_distance:
            self.min_negative_perpendicular_distance = other.min_negative_perpendicular_distance
        if other.min_positive_perpendicular_distance < self.min_positive_perpendicular_distance:
            self.min_positive_perpendicular_distance = other.min_positive_perpendicular_distance

    def distance(self, p: Vector2) -> float:
        """Final distance for this channel at p.

        Starts from the pseudo-distance on the side of the true distance's
        sign, then prefers the nearest edge's (perpendicular-extended) true
        distance when that is closer.
        """
        if self.min_true_distance.distance < 0:
            min_distance = self.min_negative_perpendicular_distance
        else:
            min_distance = self.min_positive_perpendicular_distance
        if self.near_edge is not None:
            distance = self.near_edge.distance_to_perpendicular_distance(
                self.min_true_distance, p, self.near_edge_param
            )
            if abs(distance.distance) < abs(min_distance):
                min_distance = distance.distance
        return min_distance


@dataclass(frozen=True, slots=True)
class MultiDistance:
    """Per-channel distances of one pixel."""

    r: float
    g: float
    b: float

    def median(self) -> float:
        """Median of the three channels."""
        return median(self.r, self.g, self.b)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


def _channels(color: EdgeColor) -> tuple[bool, bool, bool]:
    return (
        bool(color & EdgeColor.RED),
        bool(color & EdgeColor.GREEN),
        bool(color & EdgeColor.BLUE),
    )


@dataclass
class MultiDistanceSelector:
    """Three channel selectors fed by colored edges."""

    r: PerpendicularDistanceSelector = field(default_factory=PerpendicularDistanceSelector)
    g: PerpendicularDistanceSelector = field(default_factory=PerpendicularDistanceSelector)
    b: PerpendicularDistanceSelector = field(default_factory=PerpendicularDistanceSelector)

    def add_edge(
        self,
        prev_edge: EdgeSegment,
        edge: EdgeSegment,
        next_edge: EdgeSegment,
        p: Vector2,
    ) -> None:
        """Offer an edge, with its contour neighbours, to the channels it colors.

        The true distance goes to every channel in the edge's color. Beyond
        each endpoint, the perpendicular distance is also offered when p lies
        on the edge's side of the bisector shared with the neighbouring edge.
        """
        distance, param = edge.signed_distance(p)
        channels = (self.r, self.g, self.b)
        enabled = _channels(edge.color)
        selectors = [s for s, on in zip(channels, enabled, strict=True) if on]
        for selector in selectors:
            selector.add_edge_true_distance(edge, distance, param)

        ap = p - edge.point(0)
        bp = p - edge.point(1)
        a_dir = edge.direction(0).normalize(True)
        b_dir = edge.direction(1).normalize(True)
        prev_dir = prev_edge.direction(1).normalize(True)
        next_dir = next_edge.direction(0).normalize(True)
        add = ap.dot((prev_dir + a_dir).normalize(True))
        bdd = -bp.dot((b_dir + next_dir).normalize(True))

        if add > 0:
            pd = perpendicular_distance(distance.distance, ap, -a_dir)
            if pd is not None:
                for selector in selectors:
                    selector.add_edge_perpendicular_distance(-pd)
        if bdd > 0:
            pd = perpendicular_distance(distance.distance, bp, b_dir)
            if pd is not None:
                for selector in selectors:
                    selector.add_edge_perpendicular_distance(pd)

    def merge(self, other: "MultiDistanceSelector") -> None:
        """Fold another selector's channels into this one."""
        self.r.merge(other.r)
        self.g.merge(other.g)
        self.b.merge(other.b)

    def distance(self, p: Vector2) -> MultiDistance:
        """Final per-channel distances at p."""
        return MultiDistance(self.r.distance(p), self.g.distance(p), self.b.distance(p))


@dataclass
class TrueDistanceSelector:
    """Single-channel selector keeping only the closest true distance."""

    min_distance: SignedDistance = INFINITE_DISTANCE

    def add_edge(self, edge: EdgeSegment, p: Vector2) -> None:
        """Offer an edge to the selector."""
        distance, _ = edge.signed_distance(p)
        if distance < self.min_distance:
            self.min_distance = distance

    def distance(self) -> float:
        """Closest signed distance."""
        return self.min_distance.distance
