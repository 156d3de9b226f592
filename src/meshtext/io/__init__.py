"""Font and mesh I/O layer for meshtext.

This module handles reading fonts using fonttools and writing meshes. It
provides a clean abstraction layer between fonttools and the domain models.

Key responsibilities:
- Load TTF/OTF fonts
- Convert fonttools drawings to outline commands
- Provide glyph ids, outlines and metrics through a font face
- Export meshes as Wavefront OBJ

Key classes:
- FontReader: Load fonts
- FontToolsFace: fonttools-backed font face
- MeshWriter: Save meshes
"""

from meshtext.io.converter import OutlineCommandPen, fonttools_glyph_to_commands
from meshtext.io.reader import FontReader, FontToolsFace
from meshtext.io.writer import MeshWriter, write_obj

__all__ = [
    "FontReader",
    "FontToolsFace",
    "MeshWriter",
    "OutlineCommandPen",
    "fonttools_glyph_to_commands",
    "write_obj",
]
