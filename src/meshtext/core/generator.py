"""Mesh generation orchestration.

This module ties the pipeline stages together for one font:

    outline -> flatten -> classify -> triangulate -> assemble -> cache -> layout

Key components:
- MeshGenerator: Owner of a font face, its glyph cache and build statistics
"""

from pathlib import Path

import numpy as np

from meshtext.config import MeshConfig, MeshTextSettings, get_default_settings
from meshtext.core.assembler import assemble
from meshtext.core.cache import GlyphCache, GlyphCacheKey
from meshtext.core.classifier import ContourClassifier
from meshtext.core.flattener import flatten
from meshtext.core.layout import FontFace, layout
from meshtext.core.triangulation import TriangleTriangulator, Triangulator, triangulate_glyph
from meshtext.domain import GlyphMesh, SectionMesh
from meshtext.exceptions import ConfigurationError, GlyphError
from meshtext.io import FontReader
from meshtext.utils import BuildLogger, BuildStats


class MeshGenerator:
    """Generates glyph and text meshes for one font.

    The generator owns the glyph cache; meshes built by one generator are
    never shared with another. Every public method takes the mesh settings
    to use, falling back to the settings the generator was created with.

    Example:
        generator = MeshGenerator.from_file(Path("font.ttf"))
        section = generator.generate_section("Hello", make_mesh_config(indexed=False))
        print(section.triangle_count)
    """

    def __init__(
        self,
        face: FontFace,
        settings: MeshTextSettings | None = None,
        triangulator: Triangulator | None = None,
        cache: GlyphCache | None = None,
        build_logger: BuildLogger | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            face: Font face providing glyph ids, outlines and metrics
            settings: Application settings (defaults if None)
            triangulator: Triangulation backend (Triangle if None)
            cache: Glyph cache (a new one following the cache settings if None)
            build_logger: Build logger (a new one if None)
        """
        self.face = face
        self.settings = settings if settings is not None else get_default_settings()
        self.triangulator = triangulator if triangulator is not None else TriangleTriangulator()
        self.cache = cache if cache is not None else GlyphCache(self.settings.cache.enabled)
        self.classifier = ContourClassifier(self.settings.classifier.nesting_rule)
        self.build_logger = build_logger if build_logger is not None else BuildLogger()

        if self.settings.cache.preload_charset:
            self.precache_glyphs(self.settings.cache.preload_charset)

    @classmethod
    def from_file(
        cls, font_path: Path, settings: MeshTextSettings | None = None, **kwargs: object
    ) -> "MeshGenerator":
        """Create a generator for a font file.

        Raises:
            FontLoadError: If the font cannot be loaded
        """
        settings = settings if settings is not None else get_default_settings()
        reader = FontReader(font_path, normalize=settings.font.normalize)
        reader.load()
        return cls(reader.face(), settings, **kwargs)  # type: ignore[arg-type]

    @property
    def stats(self) -> BuildStats:
        """Statistics of the builds done so far."""
        return self.build_logger.stats

    def cache_key(self, glyph_id: int, config: MeshConfig | None = None) -> GlyphCacheKey:
        """Cache key of a glyph built with `config`."""
        config = config if config is not None else self.settings.mesh
        return GlyphCacheKey.for_config(self.face.font_id, glyph_id, config)

    def build_glyph(self, glyph_id: int, config: MeshConfig | None = None) -> GlyphMesh:
        """Build the mesh of one glyph, bypassing the cache.

        Args:
            glyph_id: Glyph id within the face
            config: Mesh settings

        Returns:
            Glyph-local mesh; empty for glyphs without outline

        Raises:
            GlyphError: If any pipeline stage fails for this glyph
        """
        config = config if config is not None else self.settings.mesh
        mode = config.mesh_mode()

        try:
            contours = flatten(
                self.face.outline(glyph_id),
                config.tolerance,
                max_depth=self.settings.flatten.max_subdivision_depth,
                area_epsilon=self.settings.flatten.area_epsilon,
            )
            if not contours:
                return GlyphMesh.empty(mode, config.indexed)
            polygons = self.classifier.classify(contours)
            triangulation = triangulate_glyph(polygons, self.triangulator)
        except GlyphError as e:
            if e.glyph_id is None:
                raise type(e)(glyph_id, e.reason) from e
            raise

        return assemble(
            triangulation.points,
            triangulation.triangles,
            triangulation.edges,
            mode,
            config.indexed,
        )

    def _build_logged(self, glyph_id: int, config: MeshConfig) -> GlyphMesh:
        with self.build_logger.glyph_build(glyph_id):
            mesh = self.build_glyph(glyph_id, config)
        self.build_logger.log_glyph_built(glyph_id, mesh.triangle_count)
        return mesh

    def _glyph_mesh(self, glyph_id: int, config: MeshConfig) -> GlyphMesh:
        """Fetch a glyph mesh through the cache, recording statistics."""
        built = False

        def builder() -> GlyphMesh:
            nonlocal built
            built = True
            return self._build_logged(glyph_id, config)

        mesh = self.cache.get_or_build(self.cache_key(glyph_id, config), builder)
        if not built:
            self.build_logger.log_cache_hit(glyph_id)
        return mesh

    def generate_glyph(
        self,
        char: str,
        config: MeshConfig | None = None,
        transform: np.ndarray | None = None,
    ) -> GlyphMesh:
        """Mesh of a single character.

        Args:
            char: A single character
            config: Mesh settings
            transform: Optional 4x4 matrix applied to the glyph-local mesh

        Raises:
            ConfigurationError: If `char` is not one character or the
                transform is not 4x4
            GlyphError: If the glyph cannot be built
        """
        config = config if config is not None else self.settings.mesh
        if len(char) != 1:
            raise ConfigurationError(f"expected a single character, got {char!r}")
        if transform is not None and np.shape(transform) != (4, 4):
            raise ConfigurationError("glyph transforms must be 4x4")

        mesh = self._glyph_mesh(self.face.glyph_id(ord(char)), config)
        if transform is not None:
            return mesh.transformed(transform)
        return mesh

    def generate_section(
        self,
        text: str,
        config: MeshConfig | None = None,
        transform: np.ndarray | None = None,
        strict: bool = False,
    ) -> SectionMesh:
        """Lay out a string and merge its glyph meshes.

        Args:
            text: Characters to lay out
            config: Mesh settings
            transform: Section transform, 4x4 or (flat mode only) 3x3
            strict: Raise the first glyph error instead of collecting it

        Raises:
            ConfigurationError: If the transform does not fit the settings
            GlyphError: In strict mode, for the first glyph that fails
        """
        config = config if config is not None else self.settings.mesh
        return layout(
            text,
            self.face,
            lambda glyph_id: self._glyph_mesh(glyph_id, config),
            config,
            transform=transform,
            strict=strict,
        )

    def precache_glyphs(
        self, text: str, config: MeshConfig | None = None
    ) -> dict[str, GlyphError]:
        """Build and cache the glyphs of every character in `text`.

        Returns:
            Dict mapping each character that failed to its error
        """
        config = config if config is not None else self.settings.mesh
        keys_by_char = {
            char: self.cache_key(self.face.glyph_id(ord(char)), config) for char in text
        }

        failures = self.cache.preload(
            keys_by_char.values(),
            lambda key: self._build_logged(key.glyph_id, config),
            max_workers=self.settings.cache.max_workers,
        )
        return {char: failures[key] for char, key in keys_by_char.items() if key in failures}

    def precache_custom_glyph(
        self, char: str, mesh: GlyphMesh, config: MeshConfig | None = None
    ) -> None:
        """Use a caller-supplied mesh for a character.

        Raises:
            ConfigurationError: If the mesh does not match the settings
        """
        config = config if config is not None else self.settings.mesh
        if len(char) != 1:
            raise ConfigurationError(f"expected a single character, got {char!r}")
        if mesh.mode != config.mesh_mode() or mesh.is_indexed != config.indexed:
            raise ConfigurationError("custom glyph mesh does not match the mesh settings")

        self.cache.insert(self.cache_key(self.face.glyph_id(ord(char)), config), mesh)

    def clear_cache(self) -> None:
        """Remove every cached glyph mesh."""
        self.cache.clear()
