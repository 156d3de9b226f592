"""Curve flattening: outline commands to closed polylines.

Turns the pen commands of one glyph into contours. Straight segments are
kept verbatim; quadratic and cubic segments are approximated by recursive
subdivision until they are within the requested tolerance.
"""

import structlog

from meshtext.core._bezier import SubdivisionLimitError
from meshtext.core.geometry import bezier_flatten, dedupe_points, signed_area
from meshtext.domain import (
    Close,
    Contour,
    CubicTo,
    LineTo,
    MoveTo,
    OutlineCommand,
    Point,
    QuadTo,
)
from meshtext.exceptions import OutlineError

logger = structlog.get_logger(__name__)


def flatten(
    commands: list[OutlineCommand],
    tolerance: float,
    max_depth: int = 16,
    area_epsilon: float = 1e-12,
) -> list[Contour]:
    """Flatten an outline into closed contours.

    A contour starts at every MoveTo and ends at Close, at the next MoveTo,
    or at the end of the command list. Contours with fewer than three
    distinct points or without enclosed area are dropped.

    Args:
        commands: Outline drawing commands of one glyph
        tolerance: Maximum perpendicular deviation from the true curve
        max_depth: Recursion limit for curve subdivision
        area_epsilon: Contours with |area| at or below this are dropped

    Returns:
        List of contours in outline order

    Raises:
        OutlineError: If a drawing command precedes any MoveTo, or a curve
            cannot be flattened within the recursion limit
    """
    contours: list[Contour] = []
    current: list[Point] | None = None

    def finish() -> None:
        if current is None:
            return
        points = dedupe_points(current)
        if len(points) < 3 or abs(signed_area(points)) <= area_epsilon:
            logger.debug("Dropped degenerate contour", points=len(points))
            return
        contours.append(Contour(points=points))

    for command in commands:
        if isinstance(command, MoveTo):
            finish()
            current = [command.point]
            continue

        if isinstance(command, Close):
            finish()
            current = None
            continue

        if current is None:
            raise OutlineError(
                None, f"{type(command).__name__} command before any MoveTo"
            )

        start = current[-1]
        if isinstance(command, LineTo):
            current.append(command.point)
        elif isinstance(command, QuadTo):
            current.extend(
                _flatten_segment([start, command.ctrl, command.point], tolerance, max_depth)
            )
        elif isinstance(command, CubicTo):
            current.extend(
                _flatten_segment(
                    [start, command.ctrl1, command.ctrl2, command.point],
                    tolerance,
                    max_depth,
                )
            )
        else:
            raise OutlineError(None, f"Unknown outline command {command!r}")

    finish()
    return contours


def _flatten_segment(points: list[Point], tolerance: float, max_depth: int) -> list[Point]:
    """Flatten one curve segment, omitting its start point (already in the contour)."""
    try:
        return bezier_flatten(points, tolerance, max_depth)[1:]
    except SubdivisionLimitError as e:
        raise OutlineError(None, str(e)) from e
