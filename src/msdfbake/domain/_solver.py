"""Internal polynomial root solvers.

This is an internal module containing helper functions for edge segment
distance queries and scanline intersections. Not intended for public use.
"""

import math

_EPSILON = 1e-14


def solve_quadratic(a: float, b: float, c: float) -> list[float] | None:
    """Solve a*x^2 + b*x + c = 0 for real roots.

    Args:
        a: Quadratic coefficient
        b: Linear coefficient
        c: Constant term

    Returns:
        List of real roots (possibly empty), or None when every x is a root
    """
    if abs(a) < _EPSILON:
        if abs(b) < _EPSILON:
            if c == 0:
                return None
            return []
        return [-c / b]

    discriminant = b * b - 4 * a * c
    if discriminant > 0:
        discriminant = math.sqrt(discriminant)
        return [(-b + discriminant) / (2 * a), (-b - discriminant) / (2 * a)]
    if discriminant == 0:
        return [-b / (2 * a)]
    return []


def _solve_cubic_normed(a: float, b: float, c: float) -> list[float]:
    """Solve x^3 + a*x^2 + b*x + c = 0 using the trigonometric/Cardano method."""
    a2 = a * a
    q = (a2 - 3 * b) / 9
    r = (a * (2 * a2 - 9 * b) + 27 * c) / 54
    r2 = r * r
    q3 = q * q * q

    if r2 < q3:
        t = r / math.sqrt(q3)
        t = max(-1.0, min(1.0, t))
        t = math.acos(t)
        a /= 3
        q = -2 * math.sqrt(q)
        return [
            q * math.cos(t / 3) - a,
            q * math.cos((t + 2 * math.pi) / 3) - a,
            q * math.cos((t - 2 * math.pi) / 3) - a,
        ]

    big_a = -math.copysign(math.pow(abs(r) + math.sqrt(r2 - q3), 1 / 3), r)
    big_b = 0.0 if big_a == 0 else q / big_a
    a /= 3
    roots = [(big_a + big_b) - a]
    imaginary = 0.5 * math.sqrt(3.0) * (big_a - big_b)
    if abs(imaginary) < _EPSILON:
        roots.append(-0.5 * (big_a + big_b) - a)
    return roots


def solve_cubic(a: float, b: float, c: float, d: float) -> list[float] | None:
    """Solve a*x^3 + b*x^2 + c*x + d = 0 for real roots.

    Degrades to the quadratic solver when the cubic coefficient vanishes.

    Returns:
        List of real roots (possibly empty), or None when every x is a root
    """
    if abs(a) < _EPSILON:
        return solve_quadratic(b, c, d)
    return _solve_cubic_normed(b / a, c / a, d / a)
