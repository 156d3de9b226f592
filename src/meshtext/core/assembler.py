"""Mesh assembly: triangulated outlines to flat or extruded glyph meshes."""

import numpy as np

from meshtext.domain import Extruded3D, Flat2D, GlyphMesh, MeshMode


def assemble(
    points: np.ndarray,
    triangles: np.ndarray,
    edges: np.ndarray,
    mode: MeshMode,
    indexed: bool,
) -> GlyphMesh:
    """Build a glyph mesh from a 2D triangulation.

    Flat meshes place the triangulation in the z = 0 plane. Extruded meshes
    get a front face at z = 0, a back face at z = -depth with reversed
    winding, and two side-wall triangles per boundary edge.

    Args:
        points: (N, 2) vertex positions
        triangles: (M, 3) counter-clockwise triangles
        edges: (E, 2) boundary edges, outer contours counter-clockwise and
            holes clockwise so the filled region is on the left of each edge
        mode: Flat2D or Extruded3D
        indexed: Share vertices through an index buffer

    Returns:
        The assembled glyph mesh
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    edges = np.asarray(edges, dtype=np.int64).reshape(-1, 2)

    if len(triangles) == 0:
        return GlyphMesh.empty(mode, indexed)

    n = len(points)
    front = np.column_stack([points, np.zeros(n)])

    if isinstance(mode, Flat2D):
        vertices = front
        faces = triangles
    elif isinstance(mode, Extruded3D):
        back = np.column_stack([points, np.full(n, -mode.depth)])
        vertices = np.vstack([front, back])

        back_faces = triangles[:, ::-1] + n

        # The filled region lies left of each edge, so the outward normal
        # points right: (a_front, a_back, b_back) and (a_front, b_back, b_front)
        a = edges[:, 0]
        b = edges[:, 1]
        side_faces = np.concatenate(
            [
                np.column_stack([a, a + n, b + n]),
                np.column_stack([a, b + n, b]),
            ]
        )
        faces = np.vstack([triangles, back_faces, side_faces])
    else:
        raise TypeError(f"Unknown mesh mode {mode!r}")

    if indexed:
        return GlyphMesh(vertices=vertices, indices=faces.reshape(-1), mode=mode)
    return GlyphMesh(vertices=vertices[faces.reshape(-1)], indices=None, mode=mode)
