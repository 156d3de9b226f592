"""Unit tests for contour classification.

Tests cover:
- Outer/hole detection for both TrueType and CFF winding conventions
- Islands nested inside holes
- Same-winding nesting under each nesting rule
- Unmatched and uncontained holes
- Overlapping contours at the same nesting level
"""

import pytest
from conftest import square_contour

from meshtext.config import NestingRule
from meshtext.core.classifier import ContourClassifier, classify
from meshtext.core.geometry import point_in_polygon
from meshtext.domain import Contour, Point, WindingDirection
from meshtext.exceptions import ClassificationError


class TestOuterAndHoles:
    """Tests for grouping holes with their outer contour."""

    def test_single_contour(self):
        polygons = classify([square_contour(0, 0, 100, ccw=False)])

        assert len(polygons) == 1
        assert polygons[0].holes == []
        assert polygons[0].outer.winding == WindingDirection.COUNTER_CLOCKWISE

    def test_truetype_convention(self):
        """Clockwise outer, counter-clockwise hole."""
        outer = square_contour(0, 0, 200, ccw=False)
        hole = square_contour(50, 50, 100, ccw=True)

        polygons = classify([outer, hole])

        assert len(polygons) == 1
        assert len(polygons[0].holes) == 1
        assert polygons[0].outer.winding == WindingDirection.COUNTER_CLOCKWISE
        assert polygons[0].holes[0].winding == WindingDirection.CLOCKWISE

    def test_cff_convention(self):
        """Counter-clockwise outer, clockwise hole."""
        outer = square_contour(0, 0, 200, ccw=True)
        hole = square_contour(50, 50, 100, ccw=False)

        polygons = classify([outer, hole])

        assert len(polygons) == 1
        assert len(polygons[0].holes) == 1
        assert polygons[0].outer.winding == WindingDirection.COUNTER_CLOCKWISE
        assert polygons[0].holes[0].winding == WindingDirection.CLOCKWISE

    def test_hole_listed_before_outer(self):
        hole = square_contour(50, 50, 100, ccw=True)
        outer = square_contour(0, 0, 200, ccw=False)

        polygons = classify([hole, outer])

        assert len(polygons) == 1
        assert polygons[0].outer.bounding_box() == (0, 0, 200, 200)

    def test_two_holes(self):
        """Like the digit 8."""
        outer = square_contour(0, 0, 300, ccw=False)
        upper = square_contour(100, 175, 100, ccw=True)
        lower = square_contour(100, 25, 100, ccw=True)

        polygons = classify([outer, upper, lower])

        assert len(polygons) == 1
        assert [h.bounding_box()[1] for h in polygons[0].holes] == [175, 25]

    def test_separate_outers_in_discovery_order(self):
        """Like the letter i: stem and dot are separate polygons."""
        stem = square_contour(0, 0, 50, ccw=False)
        dot = square_contour(0, 100, 30, ccw=False)

        polygons = classify([stem, dot])

        assert len(polygons) == 2
        assert polygons[0].outer.bounding_box() == (0, 0, 50, 50)
        assert polygons[1].outer.bounding_box() == (0, 100, 30, 130)

    def test_holes_are_contained(self):
        outer = square_contour(0, 0, 300, ccw=False)
        hole = square_contour(100, 100, 100, ccw=True)

        polygon = classify([outer, hole])[0]

        for point in polygon.holes[0].points:
            assert point_in_polygon(point, polygon.outer.points)

    def test_empty(self):
        assert classify([]) == []


class TestIslands:
    """Tests for filled contours inside holes."""

    def test_island_inside_hole(self):
        """Like the registered sign: ring with a filled shape in its hole."""
        outer = square_contour(0, 0, 300, ccw=False)
        hole = square_contour(50, 50, 200, ccw=True)
        island = square_contour(100, 100, 100, ccw=False)

        polygons = classify([outer, hole, island])

        assert len(polygons) == 2
        assert len(polygons[0].holes) == 1
        assert polygons[1].holes == []
        assert polygons[1].outer.bounding_box() == (100, 100, 200, 200)

    def test_island_with_its_own_hole(self):
        outer = square_contour(0, 0, 400, ccw=False)
        hole = square_contour(50, 50, 300, ccw=True)
        island = square_contour(100, 100, 200, ccw=False)
        island_hole = square_contour(150, 150, 100, ccw=True)

        polygons = classify([outer, hole, island, island_hole])

        assert len(polygons) == 2
        assert len(polygons[0].holes) == 1
        assert len(polygons[1].holes) == 1
        assert polygons[1].holes[0].bounding_box() == (150, 150, 250, 250)


class TestNestingRules:
    """Tests for contours nested in a contour with the same winding."""

    def _same_sign_fill(self) -> list[Contour]:
        return [square_contour(0, 0, 100, ccw=False), square_contour(20, 20, 60, ccw=False)]

    def _hole_in_hole(self) -> list[Contour]:
        return [
            square_contour(0, 0, 100, ccw=False),
            square_contour(10, 10, 80, ccw=True),
            square_contour(20, 20, 60, ccw=True),
        ]

    def test_winding_same_sign_fill_is_island(self):
        polygons = ContourClassifier(NestingRule.WINDING).classify(self._same_sign_fill())

        assert len(polygons) == 2
        assert all(p.holes == [] for p in polygons)

    def test_winding_hole_in_hole_fails(self):
        with pytest.raises(ClassificationError, match="nested in hole"):
            ContourClassifier(NestingRule.WINDING).classify(self._hole_in_hole())

    def test_even_odd_same_sign_fill_is_hole(self):
        polygons = ContourClassifier(NestingRule.EVEN_ODD).classify(self._same_sign_fill())

        assert len(polygons) == 1
        assert len(polygons[0].holes) == 1
        assert polygons[0].holes[0].winding == WindingDirection.CLOCKWISE

    def test_even_odd_hole_in_hole_is_island(self):
        polygons = ContourClassifier(NestingRule.EVEN_ODD).classify(self._hole_in_hole())

        assert len(polygons) == 2
        assert len(polygons[0].holes) == 1
        assert polygons[1].outer.winding == WindingDirection.COUNTER_CLOCKWISE

    def test_strict_rejects_same_sign_nesting(self):
        with pytest.raises(ClassificationError, match="same winding"):
            ContourClassifier(NestingRule.STRICT).classify(self._same_sign_fill())

    def test_strict_accepts_alternating_winding(self):
        contours = [square_contour(0, 0, 100, ccw=False), square_contour(20, 20, 60, ccw=True)]
        polygons = ContourClassifier(NestingRule.STRICT).classify(contours)
        assert len(polygons[0].holes) == 1


class TestClassificationErrors:
    """Tests for contours that cannot be classified."""

    def test_unmatched_hole(self):
        """A top-level contour with the hole winding has no container."""
        outer = square_contour(0, 0, 100, ccw=False)
        stray = square_contour(200, 0, 50, ccw=True)

        with pytest.raises(ClassificationError, match="no enclosing outer contour"):
            classify([outer, stray])

    def test_hole_crossing_outer(self):
        outer = square_contour(0, 0, 100, ccw=False)
        crossing = Contour(points=[Point(10, 10), Point(90, 10), Point(90, 110), Point(10, 110)])

        with pytest.raises(ClassificationError, match="not contained"):
            classify([outer, crossing])

    def test_error_has_no_glyph_id(self):
        """Glyph ids are attached by the caller."""
        outer = square_contour(0, 0, 100, ccw=False)
        stray = square_contour(200, 0, 50, ccw=True)

        with pytest.raises(ClassificationError) as exc_info:
            classify([outer, stray])
        assert exc_info.value.glyph_id is None


class TestOverlaps:
    """Tests for contours that share area without nesting."""

    def test_overlapping_outers(self):
        """Two fills that partly overlap would cover the overlap twice."""
        first = square_contour(0, 0, 10)
        second = Contour(points=[Point(8, 3), Point(12, 3), Point(12, 7), Point(8, 7)])

        with pytest.raises(ClassificationError, match="Contours 0 and 1 overlap"):
            classify([first, second])

    def test_overlapping_holes(self):
        outer = square_contour(0, 0, 100, ccw=False)
        left = square_contour(10, 10, 50, ccw=True)
        right = square_contour(40, 20, 50, ccw=True)

        with pytest.raises(ClassificationError, match="Contours 1 and 2 overlap"):
            classify([outer, left, right])

    def test_touching_outers_are_separate(self):
        """Sharing an edge is not an overlap."""
        left = square_contour(0, 0, 10, ccw=False)
        right = square_contour(10, 0, 10, ccw=False)

        polygons = classify([left, right])

        assert len(polygons) == 2

    def test_hole_edge_leaving_concave_outer(self):
        """Every hole vertex is inside the U, but its top edge crosses the notch."""
        u_shape = Contour(
            points=[
                Point(0, 0), Point(30, 0), Point(30, 40), Point(20, 40),
                Point(20, 20), Point(10, 20), Point(10, 40), Point(0, 40),
            ]
        )
        hole = Contour(points=[Point(2, 30), Point(28, 30), Point(28, 2), Point(2, 2)])
        assert all(point_in_polygon(p, u_shape.points) for p in hole.points)

        with pytest.raises(ClassificationError, match="not contained"):
            classify([u_shape, hole])

    def test_hole_touching_outer_corner_is_accepted(self):
        """Containment allows the hole to touch the outer boundary."""
        outer = square_contour(0, 0, 10)
        hole = Contour(points=[Point(0, 0), Point(5, 8), Point(8, 5)])

        polygons = classify([outer, hole])

        assert len(polygons) == 1
        assert len(polygons[0].holes) == 1


class TestNestingTree:
    """Tests for the nesting tree itself."""

    def test_depths_and_children(self):
        outer = square_contour(0, 0, 300, ccw=False)
        hole = square_contour(50, 50, 200, ccw=True)
        island = square_contour(100, 100, 100, ccw=False)

        tree = ContourClassifier().build_nesting_tree([outer, hole, island])

        assert tree[0].depth == 0
        assert tree[1].parent == 0
        assert tree[2].parent == 1
        assert tree[2].depth == 2
        assert tree[0].children == [1]
        assert [tree[i].is_outer for i in range(3)] == [True, False, True]
