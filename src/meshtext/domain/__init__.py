"""Domain models for meshtext.

This module contains the core domain models representing outlines, contours,
polygons and meshes. All models are designed to be:

- Immutable where possible (frozen dataclasses, read-only arrays)
- Independent of fontTools and triangle implementation details

Key classes:
- Point: A 2D point
- MoveTo, LineTo, QuadTo, CubicTo, Close: Outline drawing commands
- Contour: A closed contour representing a shape boundary
- PolygonWithHoles: An outer contour with its holes
- Flat2D, Extruded3D: Mesh mode variants
- GlyphMesh: Mesh of a single glyph
- SectionMesh: Merged mesh of a text section
"""

from meshtext.domain.contour import Contour, Point, PolygonWithHoles, WindingDirection
from meshtext.domain.mesh import (
    BoundingBox,
    Extruded3D,
    Flat2D,
    GlyphFailure,
    GlyphMesh,
    GlyphPlacement,
    MeshMode,
    SectionMesh,
    apply_transform,
    translation,
)
from meshtext.domain.outline import Close, CubicTo, LineTo, MoveTo, OutlineCommand, QuadTo

__all__: list[str] = [
    # Enums
    "WindingDirection",
    # Outline commands
    "Close",
    "CubicTo",
    "LineTo",
    "MoveTo",
    "OutlineCommand",
    "QuadTo",
    # Geometry
    "Contour",
    "Point",
    "PolygonWithHoles",
    # Meshes
    "BoundingBox",
    "Extruded3D",
    "Flat2D",
    "GlyphFailure",
    "GlyphMesh",
    "GlyphPlacement",
    "MeshMode",
    "SectionMesh",
    "apply_transform",
    "translation",
]
