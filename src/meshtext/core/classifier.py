"""Contour classification: grouping contours into polygons with holes.

This module classifies the flattened contours of a glyph into:
- Outer contours (filled boundaries)
- Holes, each associated with the outer contour that encloses it
- Islands (filled contours nested inside a hole, e.g. the R inside ®)

The winding direction of each contour comes from its signed area; the
containment relationships come from point-in-polygon tests against a
representative interior point. Because fonts disagree on the orientation of
outer contours (TrueType winds them clockwise, CFF counter-clockwise), the
fill orientation is taken from the largest top-level contour instead of
being fixed. Whole-contour containment and overlap checks go through
shapely.
"""

from dataclasses import dataclass

import structlog
from shapely.errors import GEOSException

from meshtext.config import NestingRule
from meshtext.core.geometry import (
    contour_inside,
    contours_overlap,
    interior_point,
    point_in_polygon,
)
from meshtext.domain import Contour, PolygonWithHoles, WindingDirection
from meshtext.exceptions import ClassificationError

logger = structlog.get_logger(__name__)


@dataclass
class ContourNode:
    """A node in the contour nesting tree.

    Attributes:
        index: Index of this contour in the glyph's contour list
        is_outer: True for filled contours, False for holes
        parent: Index of parent contour (None if root)
        children: Indices of child contours
        depth: Nesting depth (0 for top-level)
    """

    index: int
    is_outer: bool
    parent: int | None
    children: list[int]
    depth: int


class ContourClassifier:
    """Groups contours into polygons with holes.

    The classifier is stateless apart from its nesting rule and is safe to
    share between threads.
    """

    def __init__(self, nesting_rule: NestingRule = NestingRule.WINDING) -> None:
        """Initialize the classifier.

        Args:
            nesting_rule: Treatment of contours nested inside a contour with
                the same winding
        """
        self.nesting_rule = nesting_rule

    def classify(self, contours: list[Contour]) -> list[PolygonWithHoles]:
        """Classify contours into polygons with holes.

        Args:
            contours: Closed, non-degenerate contours of one glyph

        Returns:
            Polygons in contour order. Outer contours wind counter-clockwise,
            holes clockwise.

        Raises:
            ClassificationError: If a hole has no enclosing outer contour,
                nesting cannot be resolved under the nesting rule, two contours
                at the same level overlap, or a hole is not fully contained in
                its outer contour
        """
        if not contours:
            return []

        tree = self.build_nesting_tree(contours)

        polygons: dict[int, PolygonWithHoles] = {}
        for idx in sorted(tree):
            node = tree[idx]
            if node.is_outer:
                polygons[idx] = PolygonWithHoles(
                    outer=contours[idx].oriented(WindingDirection.COUNTER_CLOCKWISE)
                )

        for idx in sorted(tree):
            node = tree[idx]
            if node.is_outer:
                continue
            if node.parent is None or node.parent not in polygons:
                raise ClassificationError(
                    None, f"Hole contour {idx} has no enclosing outer contour"
                )
            outer = contours[node.parent]
            hole = contours[idx]
            try:
                inside = contour_inside(hole, outer)
            except GEOSException as e:
                raise ClassificationError(None, f"Hole contour {idx}: {e}") from e
            if not inside:
                raise ClassificationError(
                    None, f"Hole contour {idx} is not contained in contour {node.parent}"
                )
            polygons[node.parent].holes.append(hole.oriented(WindingDirection.CLOCKWISE))

        result = [polygons[idx] for idx in sorted(polygons)]
        logger.debug(
            "Contour classification",
            total=len(contours),
            polygons=len(result),
            holes=sum(len(p.holes) for p in result),
        )
        return result

    def build_nesting_tree(self, contours: list[Contour]) -> dict[int, ContourNode]:
        """Build the nesting tree and decide the role of every contour.

        For each contour, finds its immediate parent (smallest contour that
        contains it), regardless of winding direction, then assigns the
        outer/hole role top-down according to the nesting rule.

        Args:
            contours: All contours in the glyph

        Returns:
            Dict mapping contour index to ContourNode

        Raises:
            ClassificationError: If a role cannot be assigned or two
                sibling contours overlap
        """
        areas = [abs(contour.signed_area()) for contour in contours]

        probes = []
        for idx, contour in enumerate(contours):
            try:
                probes.append(interior_point(contour))
            except ValueError as e:
                raise ClassificationError(None, f"Contour {idx}: {e}") from e

        parent_map: dict[int, int | None] = {}
        for idx, probe in enumerate(probes):
            candidates = [
                other_idx
                for other_idx, other in enumerate(contours)
                if other_idx != idx
                and areas[other_idx] > areas[idx]
                and point_in_polygon(probe, other.points)
            ]
            # Choose the smallest containing contour as parent
            parent_map[idx] = min(candidates, key=lambda i: areas[i]) if candidates else None

        depths: dict[int, int] = {}

        def get_depth(idx: int) -> int:
            if idx not in depths:
                parent = parent_map[idx]
                depths[idx] = 0 if parent is None else get_depth(parent) + 1
            return depths[idx]

        for idx in parent_map:
            get_depth(idx)

        roots = [idx for idx, parent in parent_map.items() if parent is None]
        fill_ccw = contours[max(roots, key=lambda i: areas[i])].signed_area() > 0

        tree: dict[int, ContourNode] = {}
        for idx in sorted(parent_map, key=lambda i: (depths[i], i)):
            parent = parent_map[idx]
            is_outer = self._is_outer(idx, contours, tree, parent, depths[idx], fill_ccw)
            tree[idx] = ContourNode(
                index=idx,
                is_outer=is_outer,
                parent=parent,
                children=[],
                depth=depths[idx],
            )

        # Populate children lists
        for idx, node in tree.items():
            if node.parent is not None:
                tree[node.parent].children.append(idx)

        self._check_siblings(contours, tree)
        return tree

    def _check_siblings(self, contours: list[Contour], tree: dict[int, ContourNode]) -> None:
        """Reject contours that partly overlap another contour at the same level.

        Two overlapping siblings would cover the shared area twice, which no
        polygon-with-holes can express.
        """
        levels: dict[int | None, list[int]] = {}
        for idx in sorted(tree):
            levels.setdefault(tree[idx].parent, []).append(idx)

        for siblings in levels.values():
            for pos, a in enumerate(siblings):
                for b in siblings[pos + 1 :]:
                    try:
                        overlap = contours_overlap(contours[a], contours[b])
                    except GEOSException as e:
                        raise ClassificationError(None, f"Contours {a} and {b}: {e}") from e
                    if overlap:
                        raise ClassificationError(None, f"Contours {a} and {b} overlap")

    def _is_outer(
        self,
        idx: int,
        contours: list[Contour],
        tree: dict[int, ContourNode],
        parent: int | None,
        depth: int,
        fill_ccw: bool,
    ) -> bool:
        """Decide whether a contour is filled, given its already classified parent."""
        if self.nesting_rule == NestingRule.EVEN_ODD:
            return depth % 2 == 0

        is_ccw = contours[idx].signed_area() > 0

        if parent is None:
            if is_ccw != fill_ccw:
                raise ClassificationError(
                    None, f"Hole contour {idx} has no enclosing outer contour"
                )
            return True

        parent_node = tree[parent]
        parent_ccw = contours[parent].signed_area() > 0

        if is_ccw != parent_ccw:
            # Opposite winding: a hole in a filled contour, an island in a hole
            return not parent_node.is_outer

        if self.nesting_rule == NestingRule.STRICT:
            raise ClassificationError(
                None, f"Contour {idx} is nested in contour {parent} with the same winding"
            )

        if parent_node.is_outer:
            return True

        raise ClassificationError(
            None, f"Hole contour {idx} is nested in hole contour {parent}"
        )


def classify(
    contours: list[Contour], nesting_rule: NestingRule = NestingRule.WINDING
) -> list[PolygonWithHoles]:
    """Classify contours into polygons with holes.

    Convenience wrapper around ContourClassifier.classify().
    """
    return ContourClassifier(nesting_rule).classify(contours)
