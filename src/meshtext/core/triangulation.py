"""Triangulation of polygons with holes.

The constrained Delaunay triangulation itself is delegated to a
`Triangulator`. The default implementation wraps Shewchuk's Triangle through
the `triangle` package; tests and callers may plug in their own.

Every triangulator must keep the input vertices unchanged: the indices it
returns are interpreted against the point list it was given, so any added
(Steiner) point is treated as a failure. Polygons are checked with shapely
before they reach the backend.
"""

from dataclasses import dataclass
from typing import Protocol

import numpy as np
import structlog
import triangle as tr
from shapely.geometry import Polygon
from shapely.validation import explain_validity

from meshtext.domain import PolygonWithHoles
from meshtext.exceptions import TriangulationError

logger = structlog.get_logger(__name__)


class Triangulator(Protocol):
    """Constrained triangulation of a planar straight line graph."""

    def triangulate(
        self, points: np.ndarray, segments: np.ndarray, holes: np.ndarray
    ) -> np.ndarray:
        """Triangulate the region bounded by `segments`.

        Args:
            points: (N, 2) float64 vertex positions
            segments: (E, 2) int constrained edges between vertex indices
            holes: (H, 2) float64 seed points, one inside each hole

        Returns:
            (M, 3) int array of triangles indexing into `points`
        """
        ...


class TriangleTriangulator:
    """Triangulator backed by Shewchuk's Triangle.

    Uses the switches:
    - p: triangulate a planar straight line graph (respects segments and holes)
    - Q: quiet
    - Y: no Steiner points on boundary segments
    """

    def __init__(self, switches: str = "pQY") -> None:
        self.switches = switches

    def triangulate(
        self, points: np.ndarray, segments: np.ndarray, holes: np.ndarray
    ) -> np.ndarray:
        triangle_input = {"vertices": points, "segments": segments}
        if len(holes):
            triangle_input["holes"] = holes

        result = tr.triangulate(triangle_input, self.switches)

        if len(result["vertices"]) != len(points):
            raise TriangulationError(
                None,
                f"Triangulator added {len(result['vertices']) - len(points)} vertices "
                "(self-intersecting outline)",
            )
        return np.asarray(result.get("triangles", np.zeros((0, 3))), dtype=np.int64)


@dataclass
class Triangulation:
    """Triangulated outline of a glyph (or part of one).

    Attributes:
        points: (N, 2) float64 vertex positions
        triangles: (M, 3) int64 triangles, counter-clockwise
        edges: (E, 2) int64 boundary edges, following contour orientation
    """

    points: np.ndarray
    triangles: np.ndarray
    edges: np.ndarray

    @classmethod
    def empty(cls) -> "Triangulation":
        return cls(
            points=np.zeros((0, 2), dtype=np.float64),
            triangles=np.zeros((0, 3), dtype=np.int64),
            edges=np.zeros((0, 2), dtype=np.int64),
        )

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)

    @classmethod
    def merge(cls, parts: list["Triangulation"]) -> "Triangulation":
        """Concatenate triangulations, offsetting the indices of each part."""
        if not parts:
            return cls.empty()

        offsets = np.cumsum([0] + [len(part.points) for part in parts[:-1]])
        return cls(
            points=np.vstack([part.points for part in parts]),
            triangles=np.vstack(
                [part.triangles + offset for part, offset in zip(parts, offsets, strict=True)]
            ),
            edges=np.vstack(
                [part.edges + offset for part, offset in zip(parts, offsets, strict=True)]
            ),
        )


def _orient_ccw(points: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Swap two corners of every clockwise triangle."""
    a = points[triangles[:, 0]]
    b = points[triangles[:, 1]]
    c = points[triangles[:, 2]]
    cross = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (
        c[:, 0] - a[:, 0]
    )
    oriented = triangles.copy()
    clockwise = cross < 0
    oriented[clockwise] = oriented[clockwise][:, [0, 2, 1]]
    return oriented


def _check_input(polygon: PolygonWithHoles, points: np.ndarray) -> Polygon:
    """Reject input the backend cannot triangulate safely.

    Triangle misbehaves on repeated vertices, which show up when a hole
    touches its outer contour at a vertex or a contour touches itself.

    Returns:
        The polygon as a valid shapely polygon
    """
    unique, counts = np.unique(points, axis=0, return_counts=True)
    if len(unique) != len(points):
        x, y = unique[counts > 1][0]
        raise TriangulationError(None, f"Coincident vertices at ({x:g}, {y:g})")

    shape = Polygon(
        [p.to_tuple() for p in polygon.outer.points],
        [[p.to_tuple() for p in hole.points] for hole in polygon.holes],
    )
    if not shape.is_valid:
        raise TriangulationError(None, f"Invalid polygon: {explain_validity(shape)}")
    return shape


def triangulate(polygon: PolygonWithHoles, triangulator: Triangulator) -> Triangulation:
    """Triangulate one polygon with holes.

    Args:
        polygon: Classified polygon (outer CCW, holes CW)
        triangulator: Constrained triangulation backend

    Returns:
        Triangulation whose points are the outer contour followed by the
        holes, in contour order

    Raises:
        TriangulationError: If the polygon has coincident vertices or is not
            a valid polygon, or if the backend fails, adds vertices,
            references unknown vertices or returns no triangles
    """
    points: list[tuple[float, float]] = []
    edges: list[tuple[int, int]] = []
    for contour in polygon.contours:
        offset = len(points)
        n = len(contour.points)
        points.extend(p.to_tuple() for p in contour.points)
        edges.extend((offset + i, offset + (i + 1) % n) for i in range(n))

    point_array = np.array(points, dtype=np.float64).reshape(-1, 2)
    edge_array = np.array(edges, dtype=np.int64).reshape(-1, 2)

    shape = _check_input(polygon, point_array)
    seeds = [Polygon(ring).representative_point() for ring in shape.interiors]
    hole_array = np.array([(seed.x, seed.y) for seed in seeds], dtype=np.float64).reshape(-1, 2)

    try:
        triangles = triangulator.triangulate(point_array, edge_array, hole_array)
    except TriangulationError:
        raise
    except Exception as e:
        raise TriangulationError(None, f"Triangulator failed: {e}") from e

    triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    if len(triangles) == 0:
        raise TriangulationError(None, "Triangulator returned no triangles")
    if triangles.min() < 0 or triangles.max() >= len(point_array):
        raise TriangulationError(None, "Triangulator referenced an unknown vertex")

    logger.debug(
        "Polygon triangulated",
        vertices=len(point_array),
        holes=len(polygon.holes),
        triangles=len(triangles),
    )
    return Triangulation(
        points=point_array,
        triangles=_orient_ccw(point_array, triangles),
        edges=edge_array,
    )


def triangulate_glyph(
    polygons: list[PolygonWithHoles], triangulator: Triangulator
) -> Triangulation:
    """Triangulate every polygon of a glyph and merge the results."""
    return Triangulation.merge([triangulate(polygon, triangulator) for polygon in polygons])
