"""Edge segments, channel colors and signed distances.

This module defines the building blocks of a contour:
- EdgeColor: 3-bit channel membership flag
- SignedDistance: distance plus orthogonality, with the tie-break ordering
- EdgeSegment: abstract segment with Linear, Quadratic and Cubic variants

Every segment answers the same questions (point at t, direction at t,
signed distance to a point, scanline crossings, bounds, splitting), so the
generators dispatch once per edge and never inspect the variant.
"""

import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Any

from msdfbake.domain._solver import solve_cubic, solve_quadratic
from msdfbake.domain.vector import Vector2, mix, non_zero_sign, sign

Bounds = tuple[float, float, float, float]

# Newton iteration starts and steps for cubic distance search
CUBIC_SEARCH_STARTS = 4
CUBIC_SEARCH_STEPS = 4


class EdgeColor(IntFlag):
    """Channels an edge contributes to.

    Single channels combine into the two-channel colors used by edge coloring.
    BLACK (no channel) is never valid on an edge reaching a generator.
    """

    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class SegmentKind(Enum):
    """Edge segment variant tag."""

    LINEAR = "linear"
    QUADRATIC = "quadratic"
    CUBIC = "cubic"


@dataclass(frozen=True, slots=True)
class SignedDistance:
    """Signed distance with an orthogonality measure for tie-breaking.

    Ordering compares the absolute distance first and then the dot value.
    A smaller dot means the closest point is reached more perpendicularly,
    which gives a more reliable normal estimate.

    Attributes:
        distance: Signed distance (positive on the filled side)
        dot: Absolute cosine between the edge direction and the query vector
    """

    distance: float = -sys.float_info.max
    dot: float = 0.0

    def __lt__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a < b or (a == b and self.dot < other.dot)

    def __gt__(self, other: "SignedDistance") -> bool:
        a, b = abs(self.distance), abs(other.distance)
        return a > b or (a == b and self.dot > other.dot)

    def __le__(self, other: "SignedDistance") -> bool:
        return not self > other

    def __ge__(self, other: "SignedDistance") -> bool:
        return not self < other


INFINITE_DISTANCE = SignedDistance()


class EdgeSegment(ABC):
    """Abstract edge segment of a contour.

    Attributes:
        color: Channels this edge contributes to
    """

    __slots__ = ("color",)

    kind: SegmentKind

    def __init__(self, color: EdgeColor = EdgeColor.WHITE) -> None:
        self.color = color

    @property
    @abstractmethod
    def points(self) -> tuple[Vector2, ...]:
        """Defining control points, start point first and end point last."""

    @abstractmethod
    def point(self, t: float) -> Vector2:
        """Point on the segment at parameter t in [0, 1]."""

    @abstractmethod
    def direction(self, t: float) -> Vector2:
        """Tangent direction (not normalized) at parameter t."""

    @abstractmethod
    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        """Signed distance from origin and the parameter of the closest point.

        The parameter may fall outside [0, 1] when the closest point is an
        endpoint; it then tells which endpoint and how far beyond it the
        origin projects.
        """

    @abstractmethod
    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        """Crossings of the horizontal line at y.

        Returns:
            List of (x, dy) pairs where dy is +1 for upward and -1 for
            downward crossings
        """

    @abstractmethod
    def bound(self, bounds: Bounds) -> Bounds:
        """Extend (left, bottom, right, top) bounds to include this segment."""

    @abstractmethod
    def reversed(self) -> "EdgeSegment":
        """Same geometry traversed in the opposite direction."""

    @abstractmethod
    def split_at(self, t: float) -> tuple["EdgeSegment", "EdgeSegment"]:
        """Split at parameter t into two segments of the same variant."""

    @property
    def start(self) -> Vector2:
        """Start point of the segment."""
        return self.points[0]

    @property
    def end(self) -> Vector2:
        """End point of the segment."""
        return self.points[-1]

    def split_in_thirds(self) -> tuple["EdgeSegment", "EdgeSegment", "EdgeSegment"]:
        """Split into three consecutive parts of equal parameter span.

        The split is done recursively: one third is cut off first and the
        remainder is halved, so consecutive parts share exact endpoints.
        """
        first, rest = self.split_at(1 / 3)
        second, third = rest.split_at(0.5)
        return first, second, third

    def distance_to_perpendicular_distance(
        self, distance: SignedDistance, origin: Vector2, param: float
    ) -> SignedDistance:
        """Convert a distance measured at an endpoint into a pseudo-distance.

        When the closest point lies beyond an endpoint, the perpendicular
        distance to the tangent line extended from that endpoint replaces the
        radial distance, provided it is not larger.

        Args:
            distance: True distance previously computed for origin
            origin: Query point
            param: Parameter returned together with distance

        Returns:
            The pseudo-distance, or the unchanged distance
        """
        if param < 0:
            direction = self.direction(0).normalize()
            aq = origin - self.point(0)
            if aq.dot(direction) < 0:
                perpendicular = aq.cross(direction)
                if abs(perpendicular) <= abs(distance.distance):
                    return SignedDistance(perpendicular, 0.0)
        elif param > 1:
            direction = self.direction(1).normalize()
            bq = origin - self.point(1)
            if bq.dot(direction) > 0:
                perpendicular = bq.cross(direction)
                if abs(perpendicular) <= abs(distance.distance):
                    return SignedDistance(perpendicular, 0.0)
        return distance

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {
            "kind": self.kind.value,
            "points": [p.to_dict() for p in self.points],
            "color": int(self.color),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EdgeSegment":
        """Deserialize any segment variant from dictionary."""
        points = [Vector2.from_dict(p) for p in data["points"]]
        color = EdgeColor(data["color"])
        kind = SegmentKind(data["kind"])
        if kind is SegmentKind.LINEAR:
            return LinearSegment(*points, color=color)
        if kind is SegmentKind.QUADRATIC:
            return QuadraticSegment(*points, color=color)
        return CubicSegment(*points, color=color)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EdgeSegment):
            return NotImplemented
        return (
            self.kind is other.kind
            and self.points == other.points
            and self.color == other.color
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.points, int(self.color)))

    def __repr__(self) -> str:
        coords = ", ".join(f"({p.x:g}, {p.y:g})" for p in self.points)
        return f"{type(self).__name__}({coords}, color={self.color.name})"


def _point_bounds(bounds: Bounds, p: Vector2) -> Bounds:
    left, bottom, right, top = bounds
    return (min(left, p.x), min(bottom, p.y), max(right, p.x), max(top, p.y))


class LinearSegment(EdgeSegment):
    """Straight line segment between two points."""

    __slots__ = ("p0", "p1")

    kind = SegmentKind.LINEAR

    def __init__(self, p0: Vector2, p1: Vector2, color: EdgeColor = EdgeColor.WHITE) -> None:
        super().__init__(color)
        self.p0 = p0
        self.p1 = p1

    @property
    def points(self) -> tuple[Vector2, ...]:
        return (self.p0, self.p1)

    def point(self, t: float) -> Vector2:
        return mix(self.p0, self.p1, t)

    def direction(self, t: float) -> Vector2:
        return self.p1 - self.p0

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        aq = origin - self.p0
        ab = self.p1 - self.p0
        length_sq = ab.dot(ab)
        param = aq.dot(ab) / length_sq if length_sq > 0 else 0.0
        eq = (self.p1 if param > 0.5 else self.p0) - origin
        endpoint_distance = eq.length()
        if 0 < param < 1:
            ortho_distance = ab.orthonormal(False).dot(aq)
            if abs(ortho_distance) < endpoint_distance:
                return SignedDistance(ortho_distance, 0.0), param
        return (
            SignedDistance(
                non_zero_sign(aq.cross(ab)) * endpoint_distance,
                abs(ab.normalize().dot(eq.normalize())),
            ),
            param,
        )

    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        p0, p1 = self.p0, self.p1
        if (p0.y <= y < p1.y) or (p1.y <= y < p0.y):
            param = (y - p0.y) / (p1.y - p0.y)
            x = p0.x + (p1.x - p0.x) * param
            return [(x, sign(p1.y - p0.y))]
        return []

    def bound(self, bounds: Bounds) -> Bounds:
        return _point_bounds(_point_bounds(bounds, self.p0), self.p1)

    def reversed(self) -> "LinearSegment":
        return LinearSegment(self.p1, self.p0, self.color)

    def split_at(self, t: float) -> tuple["LinearSegment", "LinearSegment"]:
        m = self.point(t)
        return LinearSegment(self.p0, m, self.color), LinearSegment(m, self.p1, self.color)


class QuadraticSegment(EdgeSegment):
    """Quadratic Bezier segment.

    A control point collinear with the endpoints makes the curvature
    ill-conditioned; such a segment keeps its control points but answers
    every geometric query as the straight line between its endpoints.
    """

    __slots__ = ("_linear", "p0", "p1", "p2")

    kind = SegmentKind.QUADRATIC

    # Relative cross-product magnitude below which the control point is collinear
    COLLINEAR_EPSILON = 1e-12

    def __init__(
        self, p0: Vector2, p1: Vector2, p2: Vector2, color: EdgeColor = EdgeColor.WHITE
    ) -> None:
        super().__init__(color)
        self.p0 = p0
        self.p1 = p1
        self.p2 = p2
        self._linear: LinearSegment | None = None
        ab = p1 - p0
        bc = p2 - p1
        scale = max(ab.dot(ab), bc.dot(bc))
        if scale == 0 or abs(ab.cross(bc)) <= self.COLLINEAR_EPSILON * scale:
            self._linear = LinearSegment(p0, p2, color)

    @property
    def is_degenerate(self) -> bool:
        """True when the segment behaves as a straight line."""
        return self._linear is not None

    @property
    def points(self) -> tuple[Vector2, ...]:
        return (self.p0, self.p1, self.p2)

    def point(self, t: float) -> Vector2:
        if self._linear is not None:
            return self._linear.point(t)
        return mix(mix(self.p0, self.p1, t), mix(self.p1, self.p2, t), t)

    def direction(self, t: float) -> Vector2:
        if self._linear is not None:
            return self._linear.direction(t)
        tangent = mix(self.p1 - self.p0, self.p2 - self.p1, t)
        if not tangent:
            return self.p2 - self.p0
        return tangent

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        if self._linear is not None:
            return self._linear.signed_distance(origin)

        qa = self.p0 - origin
        ab = self.p1 - self.p0
        br = self.p2 - self.p1 - ab
        a = br.dot(br)
        b = 3 * ab.dot(br)
        c = 2 * ab.dot(ab) + qa.dot(br)
        d = qa.dot(ab)
        solutions = solve_cubic(a, b, c, d) or []

        ep_dir = self.direction(0)
        min_distance = non_zero_sign(ep_dir.cross(qa)) * qa.length()
        param = -qa.dot(ep_dir) / ep_dir.dot(ep_dir)

        ep_dir = self.direction(1)
        qc = self.p2 - origin
        distance = qc.length()
        if distance < abs(min_distance):
            min_distance = non_zero_sign(ep_dir.cross(qc)) * distance
            param = (origin - self.p1).dot(ep_dir) / ep_dir.dot(ep_dir)

        for t in solutions:
            if 0 < t < 1:
                qe = qa + ab * (2 * t) + br * (t * t)
                distance = qe.length()
                if distance <= abs(min_distance):
                    min_distance = non_zero_sign((ab + br * t).cross(qe)) * distance
                    param = t

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            dot = abs(self.direction(0).normalize().dot(qa.normalize()))
        else:
            dot = abs(self.direction(1).normalize().dot(qc.normalize()))
        return SignedDistance(min_distance, dot), param

    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        if self._linear is not None:
            return self._linear.scanline_intersections(y)

        p0, p1, p2 = self.p0, self.p1, self.p2
        xs: list[float] = [p0.x]
        dys: list[int] = []
        next_dy = 1 if y > p0.y else -1

        if p0.y == y:
            if p0.y < p1.y or (p0.y == p1.y and p0.y < p2.y):
                dys.append(1)
            else:
                next_dy = 1

        ab = p1 - p0
        br = p2 - p1 - ab
        roots = sorted(solve_quadratic(br.y, 2 * ab.y, p0.y - y) or [])
        for t in roots:
            if len(dys) >= 2:
                break
            if 0 <= t <= 1:
                x = p0.x + 2 * t * ab.x + t * t * br.x
                _set_slot(xs, len(dys), x)
                if next_dy * (ab.y + t * br.y) >= 0:
                    dys.append(next_dy)
                    next_dy = -next_dy

        if p2.y == y:
            if next_dy > 0 and dys:
                dys.pop()
                next_dy = -1
            if (p2.y < p1.y or (p2.y == p1.y and p2.y < p0.y)) and len(dys) < 2:
                _set_slot(xs, len(dys), p2.x)
                if next_dy < 0:
                    dys.append(-1)
                    next_dy = 1

        if next_dy != (1 if y >= p2.y else -1):
            if dys:
                dys.pop()
            else:
                if abs(p2.y - y) < abs(p0.y - y):
                    _set_slot(xs, 0, p2.x)
                dys.append(next_dy)

        return list(zip(xs, dys, strict=False))

    def bound(self, bounds: Bounds) -> Bounds:
        bounds = _point_bounds(_point_bounds(bounds, self.p0), self.p2)
        if self._linear is not None:
            return bounds
        bot = (self.p1 - self.p0) - (self.p2 - self.p1)
        if bot.x:
            param = (self.p1.x - self.p0.x) / bot.x
            if 0 < param < 1:
                bounds = _point_bounds(bounds, self.point(param))
        if bot.y:
            param = (self.p1.y - self.p0.y) / bot.y
            if 0 < param < 1:
                bounds = _point_bounds(bounds, self.point(param))
        return bounds

    def reversed(self) -> "QuadraticSegment":
        return QuadraticSegment(self.p2, self.p1, self.p0, self.color)

    def split_at(self, t: float) -> tuple["QuadraticSegment", "QuadraticSegment"]:
        a = mix(self.p0, self.p1, t)
        b = mix(self.p1, self.p2, t)
        m = mix(a, b, t)
        return (
            QuadraticSegment(self.p0, a, m, self.color),
            QuadraticSegment(m, b, self.p2, self.color),
        )


class CubicSegment(EdgeSegment):
    """Cubic Bezier segment."""

    __slots__ = ("p0", "p1", "p2", "p3")

    kind = SegmentKind.CUBIC

    def __init__(
        self,
        p0: Vector2,
        p1: Vector2,
        p2: Vector2,
        p3: Vector2,
        color: EdgeColor = EdgeColor.WHITE,
    ) -> None:
        super().__init__(color)
        # Both handles collapsed onto the endpoints: spread them along the chord
        if (p1 == p0 or p1 == p3) and (p2 == p0 or p2 == p3):
            p1 = mix(p0, p3, 1 / 3)
            p2 = mix(p0, p3, 2 / 3)
        self.p0 = p0
        self.p1 = p1
        self.p2 = p2
        self.p3 = p3

    @property
    def points(self) -> tuple[Vector2, ...]:
        return (self.p0, self.p1, self.p2, self.p3)

    def point(self, t: float) -> Vector2:
        p12 = mix(self.p1, self.p2, t)
        return mix(
            mix(mix(self.p0, self.p1, t), p12, t),
            mix(p12, mix(self.p2, self.p3, t), t),
            t,
        )

    def direction(self, t: float) -> Vector2:
        tangent = mix(
            mix(self.p1 - self.p0, self.p2 - self.p1, t),
            mix(self.p2 - self.p1, self.p3 - self.p2, t),
            t,
        )
        if not tangent:
            if t == 0:
                return self.p2 - self.p0
            if t == 1:
                return self.p3 - self.p1
        return tangent

    def signed_distance(self, origin: Vector2) -> tuple[SignedDistance, float]:
        qa = self.p0 - origin
        ab = self.p1 - self.p0
        br = self.p2 - self.p1 - ab
        as_ = (self.p3 - self.p2) - (self.p2 - self.p1) - br

        ep_dir = self.direction(0)
        min_distance = non_zero_sign(ep_dir.cross(qa)) * qa.length()
        param = -qa.dot(ep_dir) / ep_dir.dot(ep_dir)

        ep_dir = self.direction(1)
        qd = self.p3 - origin
        distance = qd.length()
        if distance < abs(min_distance):
            min_distance = non_zero_sign(ep_dir.cross(qd)) * distance
            param = (ep_dir - qd).dot(ep_dir) / ep_dir.dot(ep_dir)

        for i in range(CUBIC_SEARCH_STARTS + 1):
            t = i / CUBIC_SEARCH_STARTS
            qe = qa + ab * (3 * t) + br * (3 * t * t) + as_ * (t * t * t)
            d1 = ab * 3 + br * (6 * t) + as_ * (3 * t * t)
            d2 = br * 6 + as_ * (6 * t)
            improved = t - qe.dot(d1) / (d1.dot(d1) + qe.dot(d2))
            if 0 < improved < 1:
                remaining = CUBIC_SEARCH_STEPS
                while True:
                    t = improved
                    qe = qa + ab * (3 * t) + br * (3 * t * t) + as_ * (t * t * t)
                    d1 = ab * 3 + br * (6 * t) + as_ * (3 * t * t)
                    remaining -= 1
                    if remaining == 0:
                        break
                    d2 = br * 6 + as_ * (6 * t)
                    improved = t - qe.dot(d1) / (d1.dot(d1) + qe.dot(d2))
                    if not 0 < improved < 1:
                        break
                distance = qe.length()
                if distance < abs(min_distance):
                    min_distance = non_zero_sign(d1.cross(qe)) * distance
                    param = t

        if 0 <= param <= 1:
            return SignedDistance(min_distance, 0.0), param
        if param < 0.5:
            dot = abs(self.direction(0).normalize().dot(qa.normalize()))
        else:
            dot = abs(self.direction(1).normalize().dot(qd.normalize()))
        return SignedDistance(min_distance, dot), param

    def scanline_intersections(self, y: float) -> list[tuple[float, int]]:
        p0, p1, p2, p3 = self.p0, self.p1, self.p2, self.p3
        xs: list[float] = [p0.x]
        dys: list[int] = []
        next_dy = 1 if y > p0.y else -1

        if p0.y == y:
            if p0.y < p1.y or (
                p0.y == p1.y and (p0.y < p2.y or (p0.y == p2.y and p0.y < p3.y))
            ):
                dys.append(1)
            else:
                next_dy = 1

        ab = p1 - p0
        br = p2 - p1 - ab
        as_ = (p3 - p2) - (p2 - p1) - br
        roots = sorted(solve_cubic(as_.y, 3 * br.y, 3 * ab.y, p0.y - y) or [])
        for t in roots:
            if len(dys) >= 3:
                break
            if 0 <= t <= 1:
                x = p0.x + 3 * t * ab.x + 3 * t * t * br.x + t * t * t * as_.x
                _set_slot(xs, len(dys), x)
                if next_dy * (ab.y + 2 * t * br.y + t * t * as_.y) >= 0:
                    dys.append(next_dy)
                    next_dy = -next_dy

        if p3.y == y:
            if next_dy > 0 and dys:
                dys.pop()
                next_dy = -1
            if (
                p3.y < p2.y
                or (p3.y == p2.y and (p3.y < p1.y or (p3.y == p1.y and p3.y < p0.y)))
            ) and len(dys) < 3:
                _set_slot(xs, len(dys), p3.x)
                if next_dy < 0:
                    dys.append(-1)
                    next_dy = 1

        if next_dy != (1 if y >= p3.y else -1):
            if dys:
                dys.pop()
            else:
                if abs(p3.y - y) < abs(p0.y - y):
                    _set_slot(xs, 0, p3.x)
                dys.append(next_dy)

        return list(zip(xs, dys, strict=False))

    def bound(self, bounds: Bounds) -> Bounds:
        bounds = _point_bounds(_point_bounds(bounds, self.p0), self.p3)
        a0 = self.p1 - self.p0
        a1 = (self.p2 - self.p1 - a0) * 2
        a2 = self.p3 - self.p2 * 3 + self.p1 * 3 - self.p0
        for roots in (solve_quadratic(a2.x, a1.x, a0.x), solve_quadratic(a2.y, a1.y, a0.y)):
            for t in roots or []:
                if 0 < t < 1:
                    bounds = _point_bounds(bounds, self.point(t))
        return bounds

    def reversed(self) -> "CubicSegment":
        return CubicSegment(self.p3, self.p2, self.p1, self.p0, self.color)

    def split_at(self, t: float) -> tuple["CubicSegment", "CubicSegment"]:
        a = mix(self.p0, self.p1, t)
        b = mix(self.p1, self.p2, t)
        c = mix(self.p2, self.p3, t)
        ab = mix(a, b, t)
        bc = mix(b, c, t)
        m = mix(ab, bc, t)
        return (
            CubicSegment(self.p0, a, ab, m, self.color),
            CubicSegment(m, bc, c, self.p3, self.color),
        )


def _set_slot(xs: list[float], index: int, value: float) -> None:
    """Write value at index, growing the list by one if needed."""
    if index < len(xs):
        xs[index] = value
    else:
        xs.append(value)
