"""Internal Bezier curve flattening algorithms.

This is an internal module containing helper functions for the curve
flattener. Not intended for public use.
"""

import math

from meshtext.domain import Point


class SubdivisionLimitError(ValueError):
    """Curve did not become flat within the recursion limit."""


def _distance_to_chord(point: Point, start: Point, end: Point) -> float:
    """Perpendicular distance of `point` from the chord start-end."""
    dx = end.x - start.x
    dy = end.y - start.y
    length = math.hypot(dx, dy)
    if length < 1e-12:
        return math.hypot(point.x - start.x, point.y - start.y)
    return abs((point.x - start.x) * dy - (point.y - start.y) * dx) / length


def _midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def flatten_quadratic(
    points: list[Point], tolerance: float, max_depth: int, depth: int = 0
) -> list[Point]:
    """Flatten a quadratic Bezier curve using recursive subdivision.

    The curve lies in the convex hull of its control points, so once the
    control point is within `tolerance` of the chord the chord is too.

    Args:
        points: List of 3 control points [p0, p1, p2]
        tolerance: Maximum distance from true curve
        max_depth: Maximum recursion depth
        depth: Current recursion depth

    Returns:
        List of points approximating the curve, including both endpoints

    Raises:
        SubdivisionLimitError: If the curve is not flat after max_depth levels
    """
    p0, p1, p2 = points

    distance = _distance_to_chord(p1, p0, p2)

    if distance <= tolerance:
        return [p0, p2]

    if depth >= max_depth:
        raise SubdivisionLimitError(
            f"Quadratic segment not flat after {max_depth} subdivisions"
        )

    # Subdivide at t=0.5
    q1 = _midpoint(p0, p1)
    r1 = _midpoint(p1, p2)
    mid = _midpoint(q1, r1)

    left = flatten_quadratic([p0, q1, mid], tolerance, max_depth, depth + 1)
    right = flatten_quadratic([mid, r1, p2], tolerance, max_depth, depth + 1)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right


def flatten_cubic(
    points: list[Point], tolerance: float, max_depth: int, depth: int = 0
) -> list[Point]:
    """Flatten a cubic Bezier curve using recursive subdivision.

    Uses De Casteljau's algorithm for subdivision.

    Args:
        points: List of 4 control points [p0, p1, p2, p3]
        tolerance: Maximum distance from true curve
        max_depth: Maximum recursion depth
        depth: Current recursion depth

    Returns:
        List of points approximating the curve, including both endpoints

    Raises:
        SubdivisionLimitError: If the curve is not flat after max_depth levels
    """
    p0, p1, p2, p3 = points

    distance = max(_distance_to_chord(p1, p0, p3), _distance_to_chord(p2, p0, p3))

    if distance <= tolerance:
        return [p0, p3]

    if depth >= max_depth:
        raise SubdivisionLimitError(
            f"Cubic segment not flat after {max_depth} subdivisions"
        )

    # First level
    q1 = _midpoint(p0, p1)
    q2 = _midpoint(p1, p2)
    q3 = _midpoint(p2, p3)

    # Second level
    r1 = _midpoint(q1, q2)
    r2 = _midpoint(q2, q3)

    # Third level (midpoint)
    mid = _midpoint(r1, r2)

    left = flatten_cubic([p0, q1, r1, mid], tolerance, max_depth, depth + 1)
    right = flatten_cubic([mid, r2, q3, p3], tolerance, max_depth, depth + 1)

    # Combine, avoiding duplicate midpoint
    return left[:-1] + right
