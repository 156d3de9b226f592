"""Core mesh generation algorithms for meshtext.

This module contains the glyph-to-mesh pipeline:

- Curve flattening (outline commands to closed contours)
- Contour classification (outer contours, holes, islands)
- Triangulation hand-off (constrained Delaunay via Triangle)
- Mesh assembly (flat and extruded glyph meshes)
- Glyph caching and text layout

The pipeline stages are pure functions; the GlyphCache is the only shared
mutable state and is owned by a MeshGenerator.

Key functions:
- flatten: Convert outline commands to contours
- classify: Group contours into polygons with holes
- triangulate / triangulate_glyph: Triangulate polygons
- assemble: Build a glyph mesh from a triangulation
- layout: Place glyph meshes along a cursor

Key classes:
- ContourClassifier: Contour nesting and hole assignment
- TriangleTriangulator: Triangulator backed by Shewchuk's Triangle
- GlyphCache: Thread-safe glyph mesh memo
- MeshGenerator: Owner object tying the pipeline together for one font
"""

from meshtext.core.assembler import assemble
from meshtext.core.cache import GlyphCache, GlyphCacheKey
from meshtext.core.classifier import ContourClassifier, ContourNode, classify
from meshtext.core.flattener import flatten
from meshtext.core.generator import MeshGenerator
from meshtext.core.geometry import (
    bezier_flatten,
    contour_inside,
    contours_overlap,
    interior_point,
    point_in_polygon,
    signed_area,
)
from meshtext.core.layout import FontFace, layout, section_matrix
from meshtext.core.triangulation import (
    Triangulation,
    TriangleTriangulator,
    Triangulator,
    triangulate,
    triangulate_glyph,
)

__all__ = [
    # Pipeline stages
    "assemble",
    "classify",
    "flatten",
    "layout",
    "section_matrix",
    "triangulate",
    "triangulate_glyph",
    # Classes
    "ContourClassifier",
    "ContourNode",
    "FontFace",
    "GlyphCache",
    "GlyphCacheKey",
    "MeshGenerator",
    "TriangleTriangulator",
    "Triangulation",
    "Triangulator",
    # Geometry functions
    "bezier_flatten",
    "contour_inside",
    "contours_overlap",
    "interior_point",
    "point_in_polygon",
    "signed_area",
]
