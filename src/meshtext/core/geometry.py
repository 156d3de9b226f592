"""Geometric operations for contours and polygons.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Point-in-polygon testing (ray casting algorithm)
- Bezier curve flattening
- Duplicate point removal
- Interior point computation (nesting probes)
- Containment and overlap of whole contours (via shapely)

All functions are pure and stateless.
"""

from shapely.geometry import Polygon

from meshtext.core._bezier import flatten_cubic as _flatten_cubic
from meshtext.core._bezier import flatten_quadratic as _flatten_quadratic
from meshtext.domain import Contour, Point


def signed_area(points: list[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> p1 = Point(0.0, 0.0)
        >>> p2 = Point(1.0, 0.0)
        >>> p3 = Point(1.0, 1.0)
        >>> p4 = Point(0.0, 1.0)
        >>> signed_area([p1, p2, p3, p4])  # CCW square
        1.0
        >>> signed_area([p1, p4, p3, p2])  # CW square
        -1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def point_in_polygon(point: Point, polygon: list[Point]) -> bool:
    """Determine if a point is inside a polygon using ray casting algorithm.

    Casts a horizontal ray from the point to the right and counts intersections
    with polygon edges. Odd number of intersections = inside, even = outside.

    Args:
        point: The point to test
        polygon: List of points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise

    Examples:
        >>> square = [Point(0.0, 0.0), Point(2.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0)]
        >>> point_in_polygon(Point(1.0, 1.0), square)
        True
        >>> point_in_polygon(Point(3.0, 3.0), square)
        False
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        # Check if ray from point intersects edge (j, i)
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def bezier_flatten(points: list[Point], tolerance: float, max_depth: int = 16) -> list[Point]:
    """Convert Bezier curve to line segments using recursive subdivision.

    Handles both quadratic (3 points) and cubic (4 points) Bezier curves.

    Args:
        points: Control points of the Bezier curve (3 for quadratic, 4 for cubic)
        tolerance: Maximum distance from true curve (in outline units)
        max_depth: Recursion limit for subdivision

    Returns:
        List of points forming line segments that approximate the curve,
        including both endpoints

    Raises:
        ValueError: If points list is not of length 2 to 4
        SubdivisionLimitError: If the curve does not flatten within max_depth
    """
    if len(points) == 2:
        # Already a line segment
        return list(points)
    elif len(points) == 3:
        return _flatten_quadratic(points, tolerance, max_depth)
    elif len(points) == 4:
        return _flatten_cubic(points, tolerance, max_depth)
    else:
        raise ValueError(f"Expected 2-4 points for Bezier curve, got {len(points)}")


def dedupe_points(points: list[Point]) -> list[Point]:
    """Remove consecutive duplicates, including a closing point equal to the first."""
    result: list[Point] = []
    for point in points:
        if not result or point != result[-1]:
            result.append(point)
    while len(result) > 1 and result[-1] == result[0]:
        result.pop()
    return result


def interior_point(contour: Contour) -> Point:
    """Find a point strictly inside a simple polygon.

    Cuts the polygon with a horizontal scanline through the middle of the
    widest gap between distinct vertex heights, then returns the midpoint of
    the widest inside span on that line. Works for concave polygons where
    the centroid may lie outside.

    Args:
        contour: A simple, non-degenerate contour

    Returns:
        A point inside the contour

    Raises:
        ValueError: If the contour has no interior
    """
    points = contour.points
    ys = sorted({p.y for p in points})
    if len(ys) < 2:
        raise ValueError("Contour has no interior")

    gap_index = max(range(len(ys) - 1), key=lambda i: ys[i + 1] - ys[i])
    y = (ys[gap_index] + ys[gap_index + 1]) / 2

    # The scanline never passes through a vertex, so every crossing is proper
    crossings: list[float] = []
    n = len(points)
    for i in range(n):
        a = points[i]
        b = points[(i + 1) % n]
        if (a.y > y) != (b.y > y):
            crossings.append(a.x + (y - a.y) * (b.x - a.x) / (b.y - a.y))
    crossings.sort()

    spans = [(crossings[k], crossings[k + 1]) for k in range(0, len(crossings) - 1, 2)]
    if not spans:
        raise ValueError("Contour has no interior")
    left, right = max(spans, key=lambda span: span[1] - span[0])
    return Point((left + right) / 2, y)


def to_shapely(contour: Contour) -> Polygon:
    """Build the shapely polygon bounded by a contour."""
    return Polygon([p.to_tuple() for p in contour.points])


def contour_inside(inner: Contour, outer: Contour) -> bool:
    """Check that `inner` lies inside `outer`.

    Touching the boundary of `outer` is allowed; any part of `inner` outside
    it is not, including an edge that leaves a concave `outer` between two
    inside vertices.
    """
    return bool(to_shapely(outer).contains(to_shapely(inner)))


def contours_overlap(a: Contour, b: Contour) -> bool:
    """Check whether the interiors of two contours share an area.

    Contours that only touch along their boundaries do not overlap.
    """
    a_min_x, a_min_y, a_max_x, a_max_y = a.bounding_box()
    b_min_x, b_min_y, b_max_x, b_max_y = b.bounding_box()
    if a_max_x <= b_min_x or b_max_x <= a_min_x or a_max_y <= b_min_y or b_max_y <= a_min_y:
        return False
    return bool(to_shapely(a).relate_pattern(to_shapely(b), "2********"))
