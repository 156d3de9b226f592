"""Text layout: placing glyph meshes along a cursor.

The layout walks a string character by character, fetches each glyph mesh,
moves it to the current cursor position, applies the section transform and
appends it to one merged buffer. Glyph errors are collected per character so
one bad glyph does not lose the rest of the section.
"""

from collections.abc import Callable
from typing import Protocol

import numpy as np
import structlog

from meshtext.config import MeshConfig
from meshtext.domain import (
    Flat2D,
    GlyphFailure,
    GlyphMesh,
    GlyphPlacement,
    OutlineCommand,
    SectionMesh,
    apply_transform,
    translation,
)
from meshtext.exceptions import ConfigurationError, GlyphError

logger = structlog.get_logger(__name__)


class FontFace(Protocol):
    """Glyph lookup and metrics of one font.

    Coordinates and metrics are in the same units; glyph ids are stable for
    the lifetime of the face.
    """

    @property
    def font_id(self) -> str: ...

    def glyph_id(self, code_point: int) -> int:
        """Glyph id of a code point, 0 (.notdef) when unmapped."""
        ...

    def outline(self, glyph_id: int) -> list[OutlineCommand]:
        """Outline commands of a glyph; empty for glyphs without outline."""
        ...

    def advance_width(self, glyph_id: int) -> float:
        """Horizontal advance of a glyph."""
        ...

    def kerning(self, left: int, right: int) -> float:
        """Pair adjustment added between two glyphs (0.0 if none)."""
        ...


def section_matrix(transform: np.ndarray | None, config: MeshConfig) -> np.ndarray:
    """Validate a section transform against the mesh settings.

    A 4x4 matrix produces 3D output, a 3x3 matrix produces 2D output and is
    only valid for flat meshes. None means the 4x4 identity.

    Raises:
        ConfigurationError: If the transform has the wrong shape, contains
            non-finite values, or is 2D while the mesh mode is extruded
    """
    if transform is None:
        return np.eye(4)

    matrix = np.asarray(transform, dtype=np.float64)
    if matrix.shape not in ((3, 3), (4, 4)):
        raise ConfigurationError(f"transform must be 3x3 or 4x4, got shape {matrix.shape}")
    if not np.all(np.isfinite(matrix)):
        raise ConfigurationError("transform contains non-finite values")
    if matrix.shape == (3, 3) and not isinstance(config.mesh_mode(), Flat2D):
        raise ConfigurationError("a 3x3 transform requires the flat mesh mode")
    return matrix


def layout(
    text: str,
    face: FontFace,
    glyph_mesh: Callable[[int], GlyphMesh],
    config: MeshConfig,
    transform: np.ndarray | None = None,
    strict: bool = False,
) -> SectionMesh:
    """Lay out a string and merge its glyph meshes.

    Args:
        text: Characters to lay out, left to right
        face: Font face for glyph ids and metrics
        glyph_mesh: Returns the glyph-local mesh of a glyph id (usually
            through the glyph cache)
        config: Mesh settings the glyphs are built with
        transform: Section transform, 4x4 for 3D output or 3x3 for 2D
            output (flat mode only); identity if omitted
        strict: Raise the first glyph error instead of collecting it

    Returns:
        The merged section mesh

    Raises:
        ConfigurationError: If the transform does not fit the settings
        GlyphError: In strict mode, for the first glyph that fails
    """
    matrix = section_matrix(transform, config)
    dim = matrix.shape[0] - 1

    vertex_parts: list[np.ndarray] = []
    index_parts: list[np.ndarray] = []
    placements: list[GlyphPlacement] = []
    failures: list[GlyphFailure] = []
    vertex_total = 0

    cursor_x = 0.0
    cursor_y = 0.0
    previous: int | None = None

    for index, char in enumerate(text):
        glyph_id = face.glyph_id(ord(char))
        if previous is not None:
            cursor_x += face.kerning(previous, glyph_id)

        try:
            mesh = glyph_mesh(glyph_id)
        except GlyphError as e:
            if strict:
                raise
            logger.debug("Glyph skipped in layout", index=index, glyph_id=glyph_id, error=str(e))
            failures.append(GlyphFailure(index=index, char=char, error=e))
            mesh = None

        count = 0
        if mesh is not None and not mesh.is_empty:
            placed = mesh.vertices[:, :dim]
            vertex_parts.append(
                apply_transform(placed, matrix @ translation(cursor_x, cursor_y, dim=dim))
            )
            if mesh.indices is not None:
                index_parts.append(mesh.indices.astype(np.uint32) + np.uint32(vertex_total))
            count = mesh.vertex_count

        placements.append(
            GlyphPlacement(
                index=index,
                char=char,
                glyph_id=glyph_id,
                offset=(cursor_x, cursor_y),
                vertex_start=vertex_total,
                vertex_count=count,
            )
        )
        vertex_total += count
        cursor_x += face.advance_width(glyph_id)
        previous = glyph_id

    if vertex_parts:
        vertices = np.vstack(vertex_parts).astype(np.float32)
    else:
        vertices = np.zeros((0, dim), dtype=np.float32)

    if config.indexed:
        indices = (
            np.concatenate(index_parts) if index_parts else np.zeros(0, dtype=np.uint32)
        )
    else:
        indices = None

    logger.debug(
        "Section laid out",
        characters=len(text),
        vertices=len(vertices),
        failures=len(failures),
    )
    return SectionMesh(
        vertices=vertices,
        indices=indices,
        cursor=(cursor_x, cursor_y),
        placements=placements,
        failures=failures,
    )
