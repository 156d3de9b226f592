"""Mesh writer for exporting meshes.

This module provides the MeshWriter class for writing section or glyph
meshes as Wavefront OBJ files.
"""

from datetime import datetime
from pathlib import Path
from typing import TextIO

import numpy as np

from meshtext.domain import GlyphMesh, SectionMesh


def write_obj(stream: TextIO, vertices: np.ndarray, faces: np.ndarray, name: str) -> None:
    """Write vertices and triangles in Wavefront OBJ format.

    Args:
        stream: Text stream to write to
        vertices: (N, 2) or (N, 3) positions; 2D positions get z = 0
        faces: (K, 3) zero-based vertex indices
        name: Object name
    """
    timestamp = datetime.now().strftime("%Y-%m-%dT%H:%M:%S")
    stream.write(f"# meshtext export {timestamp}\n")
    stream.write(f"# {len(vertices)} vertices, {len(faces)} triangles\n")
    stream.write(f"o {name}\n")

    for vertex in vertices:
        x, y = float(vertex[0]), float(vertex[1])
        z = float(vertex[2]) if len(vertex) > 2 else 0.0
        stream.write(f"v {x:.6g} {y:.6g} {z:.6g}\n")

    # OBJ indices are one-based
    for a, b, c in faces + 1:
        stream.write(f"f {a} {b} {c}\n")


class MeshWriter:
    """Writes meshes as Wavefront OBJ files.

    Indexed meshes keep their shared vertices; non-indexed meshes are
    written with consecutive faces.

    Example:
        writer = MeshWriter(Path("hello.obj"))
        writer.save(section)
    """

    def __init__(self, output_path: Path) -> None:
        """Initialize the mesh writer.

        Args:
            output_path: Path where the mesh will be saved
        """
        self._output_path = output_path

    def save(self, mesh: SectionMesh | GlyphMesh, name: str = "text") -> None:
        """Save a mesh to the output path.

        Raises:
            OSError: If file cannot be written
        """
        if mesh.indices is not None:
            faces = np.asarray(mesh.indices, dtype=np.int64).reshape(-1, 3)
        else:
            faces = np.arange(len(mesh.vertices), dtype=np.int64).reshape(-1, 3)

        with self._output_path.open("w", encoding="utf-8") as stream:
            write_obj(stream, mesh.vertices, faces, name)

    @staticmethod
    def get_output_path(font_path: Path) -> Path:
        """Generate the default output path next to the font.

        Converts: font.ttf -> font-mesh.obj
                  Roboto-Regular.otf -> Roboto-Regular-mesh.obj

        Args:
            font_path: Font file path

        Returns:
            Path with -mesh suffix and .obj extension
        """
        return font_path.parent / f"{font_path.stem}-mesh.obj"
