"""Unit tests for the Font I/O layer.

Tests for FontReader, FontToolsFace, the outline pen and the OBJ writer.
"""

import io
from pathlib import Path
from unittest.mock import MagicMock

import numpy as np
import pytest

from meshtext.domain import Close, LineTo, MoveTo, Point, QuadTo, SectionMesh
from meshtext.exceptions import FontLoadError, OutlineError
from meshtext.io.converter import OutlineCommandPen
from meshtext.io.reader import FontReader
from meshtext.io.writer import MeshWriter, write_obj


class TestFontReader:
    """Tests for FontReader class."""

    def test_init(self):
        """Test FontReader initialization."""
        path = Path("test.ttf")
        reader = FontReader(path)
        assert reader._font_path == path
        assert reader._font is None

    def test_load_nonexistent_file(self):
        """Test loading a nonexistent file raises FontLoadError."""
        reader = FontReader(Path("nonexistent.ttf"))
        with pytest.raises(FontLoadError, match="file not found"):
            reader.load()

    def test_load_invalid_file(self, tmp_path):
        """Test loading a file that is not a font raises FontLoadError."""
        path = tmp_path / "garbage.ttf"
        path.write_bytes(b"definitely not a font")

        with pytest.raises(FontLoadError) as exc_info:
            FontReader(path).load()
        assert exc_info.value.path == str(path)

    def test_format_before_load(self):
        """Test accessing format before loading raises RuntimeError."""
        reader = FontReader(Path("test.ttf"))
        with pytest.raises(RuntimeError, match="Font not loaded"):
            _ = reader.format

    def test_units_per_em_before_load(self):
        """Test accessing units_per_em before loading raises RuntimeError."""
        reader = FontReader(Path("test.ttf"))
        with pytest.raises(RuntimeError, match="Font not loaded"):
            _ = reader.units_per_em

    def test_face_before_load(self):
        """Test creating a face before loading raises RuntimeError."""
        reader = FontReader(Path("test.ttf"))
        with pytest.raises(RuntimeError, match="Font not loaded"):
            reader.face()

    def test_face_without_font_id(self):
        """A font set without load() has no id to key the cache with."""
        reader = FontReader(Path("test.ttf"))
        reader._font = MagicMock()
        with pytest.raises(RuntimeError, match="Font id missing"):
            reader.face()

    def test_load(self, font_path):
        """Test loading the generated TrueType font."""
        with FontReader(font_path) as reader:
            assert reader.format == "TrueType"
            assert reader.units_per_em == 1000
            assert reader.glyph_count == 5

    def test_font_id_from_content(self, font_path, tmp_path):
        """Test identical files share a font id."""
        copy = tmp_path / "copy.ttf"
        copy.write_bytes(font_path.read_bytes())

        with FontReader(font_path) as a, FontReader(copy) as b:
            assert a.face().font_id == b.face().font_id

    def test_close(self, font_path):
        reader = FontReader(font_path)
        reader.load()
        reader.close()
        with pytest.raises(RuntimeError):
            _ = reader.font


class TestFontToolsFace:
    """Tests for the fonttools-backed font face."""

    @pytest.fixture
    def face(self, font_path):
        reader = FontReader(font_path)
        reader.load()
        yield reader.face()
        reader.close()

    def test_glyph_ids(self, face):
        assert face.glyph_id(ord("A")) == 2
        assert face.glyph_id(ord(" ")) == 1
        assert face.glyph_id(ord("Z")) == 0

    def test_normalized_metrics(self, face):
        """Font height is ascender - descender = 1000 units."""
        assert face.scale == pytest.approx(0.001)
        assert face.advance_width(face.glyph_id(ord("A"))) == pytest.approx(1.0)
        assert face.advance_width(face.glyph_id(ord(" "))) == pytest.approx(0.25)

    def test_unnormalized_metrics(self, font_path):
        with FontReader(font_path, normalize=False) as reader:
            face = reader.face()
            assert face.scale == 1.0
            assert face.advance_width(face.glyph_id(ord("B"))) == 800

    def test_kerning(self, face):
        a = face.glyph_id(ord("A"))
        b = face.glyph_id(ord("B"))
        assert face.kerning(a, b) == pytest.approx(-0.1)
        assert face.kerning(b, a) == 0.0

    def test_outline_scaled(self, face):
        commands = face.outline(face.glyph_id(ord("A")))

        assert isinstance(commands[0], MoveTo)
        assert isinstance(commands[-1], Close)
        xs = [c.point.x for c in commands if isinstance(c, (MoveTo, LineTo))]
        assert max(xs) == pytest.approx(1.0)

    def test_quadratic_outline(self, face):
        commands = face.outline(face.glyph_id(ord("O")))

        assert any(isinstance(c, QuadTo) for c in commands)
        assert sum(isinstance(c, MoveTo) for c in commands) == 2
        assert sum(isinstance(c, Close) for c in commands) == 2

    def test_empty_outline(self, face):
        assert face.outline(face.glyph_id(ord(" "))) == []

    def test_unknown_glyph_id(self, face):
        with pytest.raises(OutlineError, match="not in font"):
            face.outline(999)


class TestOutlineCommandPen:
    """Tests for recording pen drawings."""

    def test_lines(self):
        pen = OutlineCommandPen()
        pen.moveTo((0, 0))
        pen.lineTo((1, 0))
        pen.lineTo((0, 1))
        pen.closePath()

        assert pen.commands == [
            MoveTo(Point(0.0, 0.0)),
            LineTo(Point(1.0, 0.0)),
            LineTo(Point(0.0, 1.0)),
            Close(),
        ]

    def test_implied_on_curve_point(self):
        """Two consecutive off-curve points imply an on-curve midpoint."""
        pen = OutlineCommandPen()
        pen.moveTo((0, 0))
        pen.qCurveTo((1, 0), (2, 2), (3, 0))
        pen.closePath()

        quads = [c for c in pen.commands if isinstance(c, QuadTo)]
        assert len(quads) == 2
        assert quads[0].point == Point(1.5, 1.0)
        assert quads[1].ctrl == Point(2.0, 2.0)

    def test_open_path_is_closed(self):
        pen = OutlineCommandPen()
        pen.moveTo((0, 0))
        pen.lineTo((1, 0))
        pen.endPath()

        assert pen.commands[-1] == Close()


class TestMeshWriter:
    """Tests for OBJ export."""

    def test_write_obj(self):
        stream = io.StringIO()
        vertices = np.array([[0, 0], [1, 0], [0, 1]], dtype=np.float32)
        write_obj(stream, vertices, np.array([[0, 1, 2]]), "glyph")

        lines = stream.getvalue().splitlines()
        assert "o glyph" in lines
        assert "v 1 0 0" in lines
        assert lines[-1] == "f 1 2 3"

    def test_save_indexed(self, tmp_path):
        section = SectionMesh(
            vertices=np.array([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], dtype=np.float32),
            indices=np.array([0, 1, 2, 0, 2, 3], dtype=np.uint32),
            cursor=(1.0, 0.0),
        )
        output = tmp_path / "square.obj"

        MeshWriter(output).save(section)

        lines = output.read_text(encoding="utf-8").splitlines()
        assert sum(line.startswith("v ") for line in lines) == 4
        assert [line for line in lines if line.startswith("f ")] == ["f 1 2 3", "f 1 3 4"]

    def test_save_non_indexed(self, tmp_path):
        section = SectionMesh(
            vertices=np.zeros((6, 3), dtype=np.float32), indices=None, cursor=(0.0, 0.0)
        )
        output = tmp_path / "flat.obj"

        MeshWriter(output).save(section)

        faces = [line for line in output.read_text().splitlines() if line.startswith("f ")]
        assert faces == ["f 1 2 3", "f 4 5 6"]

    def test_get_output_path(self):
        """Test output path generation."""
        assert MeshWriter.get_output_path(Path("/fonts/Roboto-Regular.otf")) == Path(
            "/fonts/Roboto-Regular-mesh.obj"
        )
