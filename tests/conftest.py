"""Shared fixtures: fake font faces, outline helpers and a generated TrueType font."""

from collections import Counter
from pathlib import Path

import numpy as np
import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import newTable
from fontTools.ttLib.tables._k_e_r_n import KernTable_format_0

from meshtext.domain import Close, Contour, LineTo, MoveTo, OutlineCommand, Point


def ring_commands(*rings: list[tuple[float, float]]) -> list[OutlineCommand]:
    """Outline commands drawing each ring as a closed polyline."""
    commands: list[OutlineCommand] = []
    for ring in rings:
        commands.append(MoveTo(Point(*ring[0])))
        commands.extend(LineTo(Point(*p)) for p in ring[1:])
        commands.append(Close())
    return commands


def square(x0: float, y0: float, size: float, ccw: bool = True) -> list[tuple[float, float]]:
    """Corners of an axis-aligned square."""
    ring = [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]
    return ring if ccw else list(reversed(ring))


def square_contour(x0: float, y0: float, size: float, ccw: bool = True) -> Contour:
    return Contour(points=[Point(x, y) for x, y in square(x0, y0, size, ccw)])


class FakeFace:
    """Deterministic in-memory font face.

    Glyph ids are assigned 1, 2, ... in the order of `glyphs`; id 0 is the
    outline-less .notdef glyph.
    """

    def __init__(
        self,
        glyphs: dict[str, tuple[list[OutlineCommand], float]],
        kerning: dict[tuple[str, str], float] | None = None,
        font_id: str = "fake",
        notdef_advance: float = 0.0,
    ) -> None:
        self._font_id = font_id
        self._ids = {char: i + 1 for i, char in enumerate(glyphs)}
        self._outlines = {self._ids[c]: cmds for c, (cmds, _) in glyphs.items()}
        self._advances = {self._ids[c]: adv for c, (_, adv) in glyphs.items()}
        self._advances[0] = notdef_advance
        self._kerning = {
            (self._ids[a], self._ids[b]): value for (a, b), value in (kerning or {}).items()
        }
        self.outline_calls: Counter[int] = Counter()

    @property
    def font_id(self) -> str:
        return self._font_id

    def glyph_id(self, code_point: int) -> int:
        return self._ids.get(chr(code_point), 0)

    def outline(self, glyph_id: int) -> list[OutlineCommand]:
        self.outline_calls[glyph_id] += 1
        return list(self._outlines.get(glyph_id, []))

    def advance_width(self, glyph_id: int) -> float:
        return self._advances[glyph_id]

    def kerning(self, left: int, right: int) -> float:
        return self._kerning.get((left, right), 0.0)


class FanTriangulator:
    """Triangulates convex hole-free input as a fan around vertex 0."""

    def __init__(self) -> None:
        self.calls = 0

    def triangulate(
        self, points: np.ndarray, segments: np.ndarray, holes: np.ndarray
    ) -> np.ndarray:
        self.calls += 1
        n = len(points)
        return np.array([[0, i, i + 1] for i in range(1, n - 1)], dtype=np.int64)


@pytest.fixture
def ab_face() -> FakeFace:
    """'A' is a triangle, 'B' a square with a square hole, ' ' has no outline."""
    return FakeFace(
        {
            "A": (ring_commands([(0, 0), (8, 0), (4, 8)]), 10.0),
            "B": (ring_commands(square(0, 0, 10), square(3, 3, 4, ccw=False)), 12.0),
            " ": ([], 5.0),
        }
    )


# Outlines of the generated test font, in font units (1000 UPM)
FONT_ASCENT = 800
FONT_DESCENT = -200


def _draw_glyphs() -> dict[str, object]:
    glyphs = {}

    pen = TTGlyphPen(None)
    glyphs[".notdef"] = pen.glyph()

    pen = TTGlyphPen(None)
    glyphs["space"] = pen.glyph()

    # Triangle, clockwise (TrueType outer)
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((500, 800))
    pen.lineTo((1000, 0))
    pen.closePath()
    glyphs["A"] = pen.glyph()

    # Square with a square hole
    pen = TTGlyphPen(None)
    pen.moveTo((0, 0))
    pen.lineTo((0, 700))
    pen.lineTo((700, 700))
    pen.lineTo((700, 0))
    pen.closePath()
    pen.moveTo((200, 200))
    pen.lineTo((500, 200))
    pen.lineTo((500, 500))
    pen.lineTo((200, 500))
    pen.closePath()
    glyphs["B"] = pen.glyph()

    # Rounded ring drawn with quadratic arcs
    pen = TTGlyphPen(None)
    pen.moveTo((350, 0))
    pen.qCurveTo((0, 0), (0, 350))
    pen.qCurveTo((0, 700), (350, 700))
    pen.qCurveTo((700, 700), (700, 350))
    pen.qCurveTo((700, 0), (350, 0))
    pen.closePath()
    pen.moveTo((350, 150))
    pen.qCurveTo((550, 150), (550, 350))
    pen.qCurveTo((550, 550), (350, 550))
    pen.qCurveTo((150, 550), (150, 350))
    pen.qCurveTo((150, 150), (350, 150))
    pen.closePath()
    glyphs["O"] = pen.glyph()

    return glyphs


def build_test_font(path: Path) -> Path:
    """Write a small TrueType font with the glyphs A, B, O and space."""
    advances = {".notdef": 500, "space": 250, "A": 1000, "B": 800, "O": 750}
    glyphs = _draw_glyphs()

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(list(advances))
    fb.setupCharacterMap({ord("A"): "A", ord("B"): "B", ord("O"): "O", ord(" "): "space"})
    fb.setupGlyf(glyphs)
    glyph_table = fb.font["glyf"]
    fb.setupHorizontalMetrics(
        {name: (adv, getattr(glyph_table[name], "xMin", 0)) for name, adv in advances.items()}
    )
    fb.setupHorizontalHeader(ascent=FONT_ASCENT, descent=FONT_DESCENT)
    fb.setupNameTable({"familyName": "MeshTest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=FONT_ASCENT, usWinAscent=FONT_ASCENT, usWinDescent=-FONT_DESCENT)
    fb.setupPost()

    kern = newTable("kern")
    kern.version = 0
    subtable = KernTable_format_0()
    subtable.coverage = 1
    subtable.kernTable = {("A", "B"): -100}
    kern.kernTables = [subtable]
    fb.font["kern"] = kern

    fb.save(str(path))
    return path


@pytest.fixture
def font_path(tmp_path: Path) -> Path:
    """Path of the generated test font."""
    return build_test_font(tmp_path / "MeshTest-Regular.ttf")
