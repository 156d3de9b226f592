"""Outline drawing commands.

A glyph outline is an ordered sequence of pen commands, the same model the
fontTools pen protocol uses (moveTo, lineTo, qCurveTo, curveTo, closePath).
Curves with several off-curve points are decomposed by the font layer, so
every command here carries exactly the points of a single segment.
"""

from dataclasses import dataclass

from meshtext.domain.contour import Point


@dataclass(frozen=True, slots=True)
class MoveTo:
    """Start a new contour at `point`."""

    point: Point


@dataclass(frozen=True, slots=True)
class LineTo:
    """Straight segment to `point`."""

    point: Point


@dataclass(frozen=True, slots=True)
class QuadTo:
    """Quadratic Bezier segment through `ctrl` to `point`."""

    ctrl: Point
    point: Point


@dataclass(frozen=True, slots=True)
class CubicTo:
    """Cubic Bezier segment through `ctrl1` and `ctrl2` to `point`."""

    ctrl1: Point
    ctrl2: Point
    point: Point


@dataclass(frozen=True, slots=True)
class Close:
    """Close the current contour."""


OutlineCommand = MoveTo | LineTo | QuadTo | CubicTo | Close
