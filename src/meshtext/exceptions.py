"""Exception hierarchy for meshtext."""


class MeshTextError(Exception):
    """Base exception for all meshtext errors."""

    pass


class FontError(MeshTextError):
    """Errors related to font loading."""

    pass


class FontLoadError(FontError):
    """Error loading a font file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load font '{path}': {reason}")


class ConfigurationError(MeshTextError):
    """Invalid mesh settings.

    Raised before any glyph of a call is processed.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid configuration: {reason}")


class GlyphError(MeshTextError):
    """A single glyph could not be turned into a mesh.

    Glyph errors never affect other glyphs of the same text section and
    never leave an entry behind in the glyph cache.
    """

    kind = "glyph"

    def __init__(self, glyph_id: int | None, reason: str) -> None:
        self.glyph_id = glyph_id
        self.reason = reason
        label = "?" if glyph_id is None else str(glyph_id)
        super().__init__(f"{self.kind.capitalize()} error in glyph {label}: {reason}")


class OutlineError(GlyphError):
    """Missing or malformed outline data."""

    kind = "outline"


class ClassificationError(GlyphError):
    """Contours could not be grouped into polygons with holes."""

    kind = "classification"


class TriangulationError(GlyphError):
    """The triangulator rejected the polygon."""

    kind = "triangulation"
