"""Converters between fonttools and domain models.

This module turns fonttools glyph drawings into the outline commands
consumed by the curve flattener.
"""

from typing import Any

from fontTools.pens.basePen import BasePen
from fontTools.pens.transformPen import TransformPen

from meshtext.domain import Close, CubicTo, LineTo, MoveTo, OutlineCommand, Point, QuadTo


class OutlineCommandPen(BasePen):
    """Pen recording a glyph drawing as domain outline commands.

    BasePen splits TrueType qCurveTo runs with implied on-curve points
    (including contours without any on-curve point) into single quadratic
    segments and decomposes components through the glyph set, so the
    recording only contains MoveTo, LineTo, QuadTo, CubicTo and Close.

    Example:
        pen = OutlineCommandPen(glyph_set)
        glyph_set["A"].draw(pen)
        commands = pen.commands
    """

    def __init__(self, glyph_set: Any = None) -> None:
        super().__init__(glyph_set)
        self.commands: list[OutlineCommand] = []

    def _moveTo(self, pt: tuple[float, float]) -> None:
        self.commands.append(MoveTo(_point(pt)))

    def _lineTo(self, pt: tuple[float, float]) -> None:
        self.commands.append(LineTo(_point(pt)))

    def _qCurveToOne(self, pt1: tuple[float, float], pt2: tuple[float, float]) -> None:
        self.commands.append(QuadTo(_point(pt1), _point(pt2)))

    def _curveToOne(
        self,
        pt1: tuple[float, float],
        pt2: tuple[float, float],
        pt3: tuple[float, float],
    ) -> None:
        self.commands.append(CubicTo(_point(pt1), _point(pt2), _point(pt3)))

    def _closePath(self) -> None:
        self.commands.append(Close())

    def _endPath(self) -> None:
        # Open contours are closed implicitly
        self.commands.append(Close())


def _point(pt: tuple[float, float]) -> Point:
    return Point(float(pt[0]), float(pt[1]))


def fonttools_glyph_to_commands(
    fonttools_glyph: Any,
    glyph_set: Any,
    scale: float = 1.0,
) -> list[OutlineCommand]:
    """Convert a fonttools glyph to outline commands.

    Handles both TrueType (quadratic curves) and OpenType/CFF (cubic
    curves). Winding is left as drawn; the contour classifier does not
    depend on the font's convention.

    Args:
        fonttools_glyph: The fonttools glyph object from a GlyphSet
        glyph_set: The glyph set, used to decompose composite glyphs
        scale: Uniform scale applied to every coordinate

    Returns:
        Outline commands in drawing order
    """
    pen = OutlineCommandPen(glyph_set)
    if scale == 1.0:
        fonttools_glyph.draw(pen)
    else:
        fonttools_glyph.draw(TransformPen(pen, (scale, 0, 0, scale, 0, 0)))
    return pen.commands
