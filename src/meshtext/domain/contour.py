"""Core geometric types for contour representation.

This module defines the fundamental geometric types used by the pipeline:
- Point: An immutable 2D point
- WindingDirection: Enum for contour winding direction
- Contour: A closed polyline approximating one closed curve of a glyph
- PolygonWithHoles: One outer contour with the holes it encloses
"""

from dataclasses import dataclass, field
from enum import Enum, auto


class WindingDirection(Enum):
    """Contour winding direction.

    In TrueType convention outer contours wind clockwise and holes wind
    counter-clockwise. PostScript/CFF fonts use the opposite convention,
    which is why the classifier never relies on a fixed orientation.
    """

    CLOCKWISE = auto()
    COUNTER_CLOCKWISE = auto()


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate in outline units
        y: Y coordinate in outline units
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)


@dataclass
class Contour:
    """A closed contour representing a shape boundary.

    Closure is implied: the first point is not repeated at the end.

    Attributes:
        points: List of points forming the contour
    """

    points: list[Point]
    _cached_area: float | None = field(default=None, repr=False, init=False)
    _cached_bbox: tuple[float, float, float, float] | None = field(
        default=None, repr=False, init=False
    )

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        """Calculate signed area using shoelace formula.

        The sign of the area indicates winding direction:
        - Positive area: counter-clockwise winding
        - Negative area: clockwise winding

        Result is cached for efficiency.

        Returns:
            Signed area of the contour
        """
        if self._cached_area is not None:
            return self._cached_area

        n = len(self.points)
        if n < 3:
            self._cached_area = 0.0
            return 0.0

        area = 0.0
        for i in range(n):
            j = (i + 1) % n
            area += self.points[i].x * self.points[j].y
            area -= self.points[j].x * self.points[i].y

        self._cached_area = area / 2.0
        return self._cached_area

    @property
    def winding(self) -> WindingDirection:
        """Winding direction derived from the signed area."""
        if self.signed_area() > 0:
            return WindingDirection.COUNTER_CLOCKWISE
        return WindingDirection.CLOCKWISE

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Calculate bounding box of the contour.

        Result is cached for efficiency.

        Returns:
            Tuple of (min_x, min_y, max_x, max_y)
        """
        if self._cached_bbox is not None:
            return self._cached_bbox

        if not self.points:
            self._cached_bbox = (0.0, 0.0, 0.0, 0.0)
            return self._cached_bbox

        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]

        self._cached_bbox = (min(xs), min(ys), max(xs), max(ys))
        return self._cached_bbox

    def reversed(self) -> "Contour":
        """Return a copy of this contour with the opposite winding."""
        return Contour(points=list(reversed(self.points)))

    def oriented(self, direction: WindingDirection) -> "Contour":
        """Return this contour, reversed if needed, so it winds in `direction`."""
        if self.winding == direction:
            return self
        return self.reversed()


@dataclass
class PolygonWithHoles:
    """One outer boundary plus the holes it encloses.

    Holes are fully contained in the outer contour and cross neither the
    outer contour nor each other. After classification the outer contour
    winds counter-clockwise and every hole winds clockwise.

    Attributes:
        outer: The enclosing boundary
        holes: Hole contours in discovery order
    """

    outer: Contour
    holes: list[Contour] = field(default_factory=list)

    @property
    def contours(self) -> list[Contour]:
        """Outer contour followed by the holes."""
        return [self.outer, *self.holes]

    @property
    def vertex_count(self) -> int:
        """Total number of boundary vertices (outer + holes)."""
        return sum(len(c.points) for c in self.contours)
