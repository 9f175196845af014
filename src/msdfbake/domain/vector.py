"""Double-precision 2D vector and scalar helpers.

All geometry and distance math in msdfbake runs on Python floats (IEEE
doubles). Sub-pixel corner information is exactly what the distance field
encodes, so nothing here narrows precision.
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Vector2:
    """An immutable 2D vector or point.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)

    def __mul__(self, value: float) -> "Vector2":
        return Vector2(self.x * value, self.y * value)

    __rmul__ = __mul__

    def __truediv__(self, value: "float | Vector2") -> "Vector2":
        if isinstance(value, Vector2):
            return Vector2(self.x / value.x, self.y / value.y)
        return Vector2(self.x / value, self.y / value)

    def __bool__(self) -> bool:
        return self.x != 0.0 or self.y != 0.0

    def dot(self, other: "Vector2") -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vector2") -> float:
        """Z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def normalize(self, allow_zero: bool = False) -> "Vector2":
        """Return the unit vector in the same direction.

        A zero vector normalizes to (0, 1), or to (0, 0) when allow_zero is set.
        """
        length = self.length()
        if length == 0.0:
            return Vector2(0.0, 0.0 if allow_zero else 1.0)
        return Vector2(self.x / length, self.y / length)

    def orthonormal(self, polarity: bool = True, allow_zero: bool = False) -> "Vector2":
        """Return a unit vector perpendicular to this one.

        Args:
            polarity: True rotates counter-clockwise, False clockwise
            allow_zero: Return a zero vector for zero input instead of a unit axis

        Returns:
            Perpendicular unit vector
        """
        length = self.length()
        if length == 0.0:
            fallback = 0.0 if allow_zero else 1.0
            return Vector2(0.0, fallback) if polarity else Vector2(0.0, -fallback)
        if polarity:
            return Vector2(-self.y / length, self.x / length)
        return Vector2(self.y / length, -self.x / length)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to a simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for IPC."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vector2":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


def mix(a: Vector2, b: Vector2, t: float) -> Vector2:
    """Linear interpolation between two points, exact at t = 0 and t = 1."""
    return Vector2(a.x * (1.0 - t) + b.x * t, a.y * (1.0 - t) + b.y * t)


def mix_scalar(a: float, b: float, t: float) -> float:
    """Linear interpolation between two scalars."""
    return a * (1.0 - t) + b * t


def sign(value: float) -> int:
    """Return -1, 0 or 1 according to the sign of value."""
    return (value > 0.0) - (value < 0.0)


def non_zero_sign(value: float) -> int:
    """Return 1 for positive values and -1 otherwise."""
    return 1 if value > 0.0 else -1


def median(a: float, b: float, c: float) -> float:
    """Return the middle of three values."""
    return max(min(a, b), min(max(a, b), c))


def shoelace(a: Vector2, b: Vector2) -> float:
    """Trapezoid term of the shoelace sum for the edge a -> b."""
    return (b.x - a.x) * (a.y + b.y)
