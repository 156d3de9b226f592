"""Font reader for loading TTF/OTF fonts.

This module provides the FontReader class for loading font files and the
FontToolsFace, the fonttools-backed font face used by the mesh generator.
"""

import hashlib
from io import BytesIO
from pathlib import Path

import structlog
from fontTools.ttLib import TTFont, TTLibError

from meshtext.domain import OutlineCommand
from meshtext.exceptions import FontLoadError, OutlineError
from meshtext.io.converter import fonttools_glyph_to_commands

logger = structlog.get_logger(__name__)


class FontToolsFace:
    """Font face backed by a fonttools TTFont.

    With normalisation enabled every coordinate and metric is divided by
    the font height (ascender - descender from the hhea table), so a line
    of text is one unit tall whatever the font's units per em.

    Attributes:
        font_id: Identifier used in glyph cache keys
        scale: Factor applied to font units
    """

    def __init__(self, font: TTFont, font_id: str, normalize: bool = True) -> None:
        """Initialize the face.

        Args:
            font: Loaded font
            font_id: Identifier used in glyph cache keys
            normalize: Scale coordinates by 1 / font height
        """
        self._font = font
        self._font_id = font_id
        self._glyph_set = font.getGlyphSet()
        self._glyph_order = font.getGlyphOrder()
        self._cmap = font.getBestCmap() or {}
        self._metrics = font["hmtx"].metrics  # type: ignore[attr-defined]
        self._kern_pairs = _read_kern_pairs(font)
        self.scale = 1.0 / self.height if normalize else 1.0

    @property
    def font_id(self) -> str:
        return self._font_id

    @property
    def height(self) -> float:
        """Font height in font units (ascender - descender).

        Falls back to units per em when the hhea table gives no height.
        """
        hhea = self._font["hhea"]
        height = hhea.ascent - hhea.descent  # type: ignore[attr-defined]
        if height <= 0:
            return float(self._font["head"].unitsPerEm)  # type: ignore[attr-defined]
        return float(height)

    def glyph_id(self, code_point: int) -> int:
        name = self._cmap.get(code_point)
        if name is None:
            return 0
        return self._font.getGlyphID(name)

    def glyph_name(self, glyph_id: int) -> str:
        """Name of a glyph id.

        Raises:
            OutlineError: If the glyph id is not in the font
        """
        if not 0 <= glyph_id < len(self._glyph_order):
            raise OutlineError(glyph_id, "Glyph id not in font")
        return self._glyph_order[glyph_id]

    def outline(self, glyph_id: int) -> list[OutlineCommand]:
        name = self.glyph_name(glyph_id)
        try:
            return fonttools_glyph_to_commands(
                self._glyph_set[name], self._glyph_set, scale=self.scale
            )
        except (KeyError, TTLibError, ValueError, TypeError) as e:
            raise OutlineError(glyph_id, f"Cannot read outline of '{name}': {e}") from e

    def advance_width(self, glyph_id: int) -> float:
        name = self.glyph_name(glyph_id)
        advance, _lsb = self._metrics.get(name, (0, 0))
        return advance * self.scale

    def kerning(self, left: int, right: int) -> float:
        if not self._kern_pairs:
            return 0.0
        pair = (self.glyph_name(left), self.glyph_name(right))
        return self._kern_pairs.get(pair, 0) * self.scale


def _read_kern_pairs(font: TTFont) -> dict[tuple[str, str], int]:
    """Collect the pairs of all format 0 subtables of the legacy kern table."""
    if "kern" not in font:
        return {}

    pairs: dict[tuple[str, str], int] = {}
    for subtable in font["kern"].kernTables:  # type: ignore[attr-defined]
        table = getattr(subtable, "kernTable", None)
        if getattr(subtable, "format", None) == 0 and table:
            pairs.update(table)
    return pairs


class FontReader:
    """Loads TTF/OTF fonts.

    Example:
        with FontReader(Path("font.ttf")) as reader:
            face = reader.face()
            print(face.glyph_id(ord("A")))
    """

    def __init__(self, font_path: Path, normalize: bool = True) -> None:
        """Initialize the font reader.

        Args:
            font_path: Path to the TTF or OTF font file
            normalize: Scale coordinates of created faces by 1 / font height
        """
        self._font_path = font_path
        self._normalize = normalize
        self._font: TTFont | None = None
        self._font_id: str | None = None

    def load(self) -> None:
        """Load the font file.

        Raises:
            FontLoadError: If the file does not exist or is not a valid font
        """
        if not self._font_path.exists():
            raise FontLoadError(str(self._font_path), "file not found")

        try:
            data = self._font_path.read_bytes()
            self._font = TTFont(BytesIO(data))
        except (OSError, TTLibError, AssertionError, ValueError) as e:
            raise FontLoadError(str(self._font_path), str(e)) from e

        if "hmtx" not in self._font or "hhea" not in self._font:
            self.close()
            raise FontLoadError(str(self._font_path), "missing horizontal metrics")

        self._font_id = hashlib.sha256(data).hexdigest()[:16]
        logger.debug("Font loaded", path=str(self._font_path), font_id=self._font_id)

    @property
    def font(self) -> TTFont:
        """The loaded fonttools font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        if self._font is None:
            raise RuntimeError("Font not loaded. Call load() first.")
        return self._font

    @property
    def format(self) -> str:
        """Return font format.

        Returns:
            'TrueType' for TTF fonts, 'OpenType' for OTF fonts

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        if "CFF " in self.font or "CFF2" in self.font:
            return "OpenType"
        return "TrueType"

    @property
    def units_per_em(self) -> int:
        """Return font's units per em.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self.font["head"].unitsPerEm  # type: ignore[attr-defined]

    @property
    def glyph_count(self) -> int:
        """Return total number of glyphs in the font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        return self.font["maxp"].numGlyphs  # type: ignore[attr-defined]

    def face(self) -> FontToolsFace:
        """Create the font face of the loaded font.

        Raises:
            RuntimeError: If font has not been loaded yet
        """
        font = self.font
        if self._font_id is None:
            raise RuntimeError("Font id missing. Call load() first.")
        return FontToolsFace(font, self._font_id, normalize=self._normalize)

    def close(self) -> None:
        """Close the font file and free resources."""
        if self._font is not None:
            self._font.close()
            self._font = None

    def __enter__(self) -> "FontReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
