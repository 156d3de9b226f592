"""Mesh types produced by the pipeline.

This module defines the outputs handed to rendering code:
- Flat2D / Extruded3D: The tagged mesh mode variant
- BoundingBox: Axis-aligned bounds of a mesh
- GlyphMesh: The mesh of a single glyph, as stored in the glyph cache
- SectionMesh: The merged mesh of a laid-out string

Vertex buffers are numpy arrays. Glyph meshes are immutable: their arrays are
flagged read-only and every transformation returns a new mesh.
"""

import itertools
from dataclasses import dataclass, field
from typing import Literal

import numpy as np


@dataclass(frozen=True, slots=True)
class Flat2D:
    """Flat glyphs in the z = 0 plane."""

    @property
    def dimensionality(self) -> Literal["2d", "3d"]:
        return "2d"

    @property
    def depth(self) -> float:
        return 0.0


@dataclass(frozen=True, slots=True)
class Extruded3D:
    """Extruded glyphs: front face at z = 0, back face at z = -depth.

    Attributes:
        depth: Distance between front and back face, must be positive
    """

    depth: float

    def __post_init__(self) -> None:
        if not self.depth > 0:
            raise ValueError(f"Extrusion depth must be positive, got {self.depth}")

    @property
    def dimensionality(self) -> Literal["2d", "3d"]:
        return "3d"


MeshMode = Flat2D | Extruded3D


def apply_transform(points: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """Apply a homogeneous affine transform to a set of points.

    Args:
        points: (N, D) array of points
        matrix: (D + 1, D + 1) homogeneous transformation matrix

    Returns:
        (N, D) array of transformed points
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    dim = points.shape[1]
    if matrix.shape != (dim + 1, dim + 1):
        raise ValueError(
            f"Expected a {dim + 1}x{dim + 1} matrix for {dim}D points, got {matrix.shape}"
        )
    if len(points) == 0:
        return np.asarray(points, dtype=np.float64).copy()
    linear = matrix[:dim, :dim]
    offset = matrix[:dim, dim]
    return np.asarray(points, dtype=np.float64) @ linear.T + offset


def translation(dx: float, dy: float, dim: int = 3) -> np.ndarray:
    """Homogeneous translation matrix moving points by (dx, dy) in the xy-plane."""
    matrix = np.eye(dim + 1)
    matrix[0, dim] = dx
    matrix[1, dim] = dy
    return matrix


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min: Minimum corner
        max: Maximum corner
    """

    min: tuple[float, ...]
    max: tuple[float, ...]

    @classmethod
    def from_points(cls, points: np.ndarray) -> "BoundingBox":
        """Bounds of a (N, D) point array; an empty array gives a zero box."""
        if len(points) == 0:
            zero = tuple(0.0 for _ in range(points.shape[1]))
            return cls(min=zero, max=zero)
        return cls(
            min=tuple(float(v) for v in points.min(axis=0)),
            max=tuple(float(v) for v in points.max(axis=0)),
        )

    @property
    def center(self) -> tuple[float, ...]:
        return tuple((lo + hi) / 2.0 for lo, hi in zip(self.min, self.max, strict=True))

    @property
    def size(self) -> tuple[float, ...]:
        return tuple(abs(hi - lo) for lo, hi in zip(self.min, self.max, strict=True))

    def combine(self, other: "BoundingBox") -> "BoundingBox":
        """Smallest box containing both boxes."""
        return BoundingBox(
            min=tuple(min(a, b) for a, b in zip(self.min, other.min, strict=True)),
            max=tuple(max(a, b) for a, b in zip(self.max, other.max, strict=True)),
        )

    def transformed(self, matrix: np.ndarray) -> "BoundingBox":
        """Bounds of this box after a homogeneous affine transform.

        Every corner is transformed, so the result stays axis-aligned and
        encloses the box under rotations and mirroring too.
        """
        corners = np.array(list(itertools.product(*zip(self.min, self.max, strict=True))))
        return BoundingBox.from_points(apply_transform(corners, matrix))


def _readonly(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class GlyphMesh:
    """Triangle mesh of a single glyph in glyph-local coordinates.

    Indexed meshes share vertices between triangles and carry a flat index
    buffer (three indices per triangle). Non-indexed meshes carry three
    vertices per triangle and no index buffer.

    Attributes:
        vertices: (N, 3) float32 vertex positions
        indices: Flat uint32 index buffer, or None for non-indexed meshes
        mode: The mesh mode the glyph was built for
    """

    vertices: np.ndarray
    indices: np.ndarray | None
    mode: MeshMode = field(default_factory=Flat2D)

    def __post_init__(self) -> None:
        vertices = np.array(self.vertices, dtype=np.float32).reshape(-1, 3)
        object.__setattr__(self, "vertices", _readonly(vertices))
        if self.indices is not None:
            indices = np.array(self.indices, dtype=np.uint32).reshape(-1)
            if indices.size % 3:
                raise ValueError("Index buffer length must be a multiple of 3")
            if indices.size and int(indices.max()) >= len(vertices):
                raise ValueError("Index buffer references a missing vertex")
            object.__setattr__(self, "indices", _readonly(indices))
        elif len(vertices) % 3:
            raise ValueError("Non-indexed vertex buffer must hold whole triangles")

    @classmethod
    def empty(cls, mode: MeshMode, indexed: bool) -> "GlyphMesh":
        """Mesh without geometry, used for glyphs without an outline."""
        indices = np.zeros(0, dtype=np.uint32) if indexed else None
        return cls(vertices=np.zeros((0, 3), dtype=np.float32), indices=indices, mode=mode)

    @property
    def is_indexed(self) -> bool:
        return self.indices is not None

    @property
    def is_empty(self) -> bool:
        return len(self.vertices) == 0

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        if self.indices is not None:
            return self.indices.size // 3
        return len(self.vertices) // 3

    @property
    def bbox(self) -> BoundingBox:
        return BoundingBox.from_points(self.vertices)

    def triangles(self) -> np.ndarray:
        """Corner positions of every triangle as a (K, 3, 3) array."""
        if self.indices is not None:
            return self.vertices[self.indices].reshape(-1, 3, 3)
        return self.vertices.reshape(-1, 3, 3)

    def transformed(self, matrix: np.ndarray) -> "GlyphMesh":
        """Return a copy with every vertex transformed by a 4x4 matrix."""
        return GlyphMesh(
            vertices=apply_transform(self.vertices, matrix),
            indices=self.indices,
            mode=self.mode,
        )

    def copy(self) -> "GlyphMesh":
        return GlyphMesh(vertices=self.vertices, indices=self.indices, mode=self.mode)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GlyphMesh):
            return NotImplemented
        if self.mode != other.mode or self.is_indexed != other.is_indexed:
            return False
        if self.indices is not None and not np.array_equal(self.indices, other.indices):
            return False
        return np.array_equal(self.vertices, other.vertices)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class GlyphFailure:
    """A character of a text section whose glyph could not be built.

    Attributes:
        index: Position of the character in the input string
        char: The character
        error: The glyph error that was raised
    """

    index: int
    char: str
    error: Exception


@dataclass(frozen=True)
class GlyphPlacement:
    """Where a character ended up inside a section mesh.

    Attributes:
        index: Position of the character in the input string
        char: The character
        glyph_id: Glyph id resolved by the font face
        offset: Cursor position the glyph was placed at
        vertex_start: First vertex of this glyph in the section buffer
        vertex_count: Number of vertices contributed by this glyph
    """

    index: int
    char: str
    glyph_id: int
    offset: tuple[float, float]
    vertex_start: int
    vertex_count: int


@dataclass
class SectionMesh:
    """Merged mesh of a laid-out text section.

    Attributes:
        vertices: (N, 3) positions, or (N, 2) for 2D output
        indices: Flat uint32 index buffer, or None for non-indexed meshes
        cursor: Cursor position after the last character
        placements: Per-character placement, in input order
        failures: Characters whose glyph could not be built
    """

    vertices: np.ndarray
    indices: np.ndarray | None
    cursor: tuple[float, float] = (0.0, 0.0)
    placements: list[GlyphPlacement] = field(default_factory=list)
    failures: list[GlyphFailure] = field(default_factory=list)

    @property
    def is_indexed(self) -> bool:
        return self.indices is not None

    @property
    def dimensions(self) -> int:
        return int(self.vertices.shape[1])

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        if self.indices is not None:
            return self.indices.size // 3
        return len(self.vertices) // 3

    @property
    def bbox(self) -> BoundingBox:
        return BoundingBox.from_points(self.vertices)

    @property
    def ok(self) -> bool:
        """True when every glyph of the section was built."""
        return not self.failures

    def triangles(self) -> np.ndarray:
        """Corner positions of every triangle as a (K, 3, D) array."""
        dim = self.dimensions
        if self.indices is not None:
            return self.vertices[self.indices].reshape(-1, 3, dim)
        return self.vertices.reshape(-1, 3, dim)
