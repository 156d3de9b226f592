"""meshtext - Generate triangle meshes from text.

meshtext turns the outlines of a TrueType/OpenType font into triangle meshes
that can be uploaded to a renderer, either as flat glyphs lying in the z = 0
plane or as extruded glyphs with front, back and side faces.

Example:
    $ meshtext render FiraMono-Regular.ttf "Hello" --extrude --depth 0.1

This will create FiraMono-Regular-mesh.obj containing the extruded text mesh.
"""

from meshtext.config import MeshConfig, MeshTextSettings, make_mesh_config
from meshtext.core import GlyphCache, MeshGenerator
from meshtext.domain import Extruded3D, Flat2D, GlyphMesh, SectionMesh

__version__ = "0.3.0"

__all__ = [
    "Extruded3D",
    "Flat2D",
    "GlyphCache",
    "GlyphMesh",
    "MeshConfig",
    "MeshGenerator",
    "MeshTextSettings",
    "SectionMesh",
    "__version__",
    "make_mesh_config",
]
