"""Unit tests for the I/O layer.

Tests for FontReader, BitmapWriter, sprite documents and converter functions.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest
from PIL import Image

from msdfbake.domain import (
    Anchor,
    ByteImage,
    CubicSegment,
    LinearSegment,
    QuadraticSegment,
    SpritePath,
    Vector2,
)
from msdfbake.exceptions import (
    BitmapSaveError,
    FontFormatError,
    FontLoadError,
    GlyphNotFoundError,
    SpriteDocumentError,
)
from msdfbake.io.converter import glyph_to_shape, recording_to_shape, sprite_paths_to_shape
from msdfbake.io.document import SpriteDocument, load_sprite_document
from msdfbake.io.reader import FontReader
from msdfbake.io.writer import BitmapWriter


def mock_outline_font(tag: str = "glyf") -> MagicMock:
    mock_font = MagicMock()
    mock_font.__contains__ = Mock(side_effect=lambda x: x == tag)
    return mock_font


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

    def test_load_garbage_file(self, tmp_path):
        """Test an unreadable font raises FontLoadError."""
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"not a font" * 16)
        with pytest.raises(FontLoadError):
            FontReader(path).load()

    @patch("msdfbake.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_font_without_outlines(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test a font with neither glyf nor CFF is rejected."""
        mock_ttfont.return_value = mock_outline_font("bitmap")
        with pytest.raises(FontFormatError):
            FontReader(Path("test.ttf")).load()

    @patch("msdfbake.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_format_truetype(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test format property for TrueType fonts."""
        mock_ttfont.return_value = mock_outline_font("glyf")
        reader = FontReader(Path("test.ttf"))
        reader.load()
        assert reader.format == "TrueType"

    @patch("msdfbake.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_format_opentype(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test format property for CFF fonts."""
        mock_ttfont.return_value = mock_outline_font("CFF ")
        reader = FontReader(Path("test.otf"))
        reader.load()
        assert reader.format == "OpenType"

    @patch("msdfbake.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_units_per_em(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test units_per_em property."""
        mock_font = mock_outline_font()
        mock_font.__getitem__ = Mock(return_value=MagicMock(unitsPerEm=2048))
        mock_ttfont.return_value = mock_font

        reader = FontReader(Path("test.ttf"))
        reader.load()

        assert reader.units_per_em == 2048

    @patch("msdfbake.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_glyph_name_for_unmapped(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test an unmapped character raises GlyphNotFoundError."""
        mock_font = mock_outline_font()
        mock_font.getBestCmap.return_value = {0x41: "A"}
        mock_ttfont.return_value = mock_font

        reader = FontReader(Path("test.ttf"))
        reader.load()

        assert reader.glyph_name_for("A") == "A"
        with pytest.raises(GlyphNotFoundError):
            reader.glyph_name_for("B")

    @patch("msdfbake.io.reader.TTFont")
    @patch.object(Path, "exists", return_value=True)
    def test_context_manager(self, _mock_exists, mock_ttfont):  # noqa: ARG002
        """Test FontReader as context manager."""
        mock_font = mock_outline_font()
        mock_ttfont.return_value = mock_font

        with FontReader(Path("test.ttf")) as reader:
            assert reader._font is not None

        mock_font.close.assert_called_once()


class TestConverter:
    """Tests for converter functions."""

    def test_recording_closes_with_line(self):
        """Test an open pen path is closed with a straight edge."""
        recording = [
            ("moveTo", ((0.0, 0.0),)),
            ("lineTo", ((0.0, 100.0),)),
            ("lineTo", ((100.0, 100.0),)),
            ("lineTo", ((100.0, 0.0),)),
            ("closePath", ()),
        ]
        shape = recording_to_shape(recording)
        assert len(shape.contours) == 1
        edges = shape.contours[0].edges
        assert len(edges) == 4
        assert all(isinstance(e, LinearSegment) for e in edges)
        assert edges[-1].end == Vector2(0.0, 0.0)
        assert shape.contours[0].is_closed()

    def test_recording_already_closed(self):
        """Test no closing edge is added when the path returns to its start."""
        recording = [
            ("moveTo", ((0.0, 0.0),)),
            ("lineTo", ((0.0, 10.0),)),
            ("lineTo", ((10.0, 0.0),)),
            ("lineTo", ((0.0, 0.0),)),
            ("closePath", ()),
        ]
        assert len(recording_to_shape(recording).contours[0].edges) == 3

    def test_zero_length_line_skipped(self):
        """Test repeated points do not create empty edges."""
        recording = [
            ("moveTo", ((0.0, 0.0),)),
            ("lineTo", ((0.0, 10.0),)),
            ("lineTo", ((0.0, 10.0),)),
            ("lineTo", ((10.0, 0.0),)),
            ("closePath", ()),
        ]
        assert len(recording_to_shape(recording).contours[0].edges) == 3

    def test_quadratic_implied_points(self):
        """Test consecutive off-curve points get implied on-curve midpoints."""
        recording = [
            ("moveTo", ((0.0, 0.0),)),
            ("qCurveTo", ((0.0, 10.0), (10.0, 10.0), (10.0, 0.0))),
            ("closePath", ()),
        ]
        edges = recording_to_shape(recording).contours[0].edges
        assert len(edges) == 3
        assert isinstance(edges[0], QuadraticSegment)
        assert edges[0].end == Vector2(5.0, 10.0)
        assert isinstance(edges[1], QuadraticSegment)
        assert isinstance(edges[2], LinearSegment)

    def test_all_off_curve_contour(self):
        """Test a contour without on-curve points starts between its ends."""
        recording = [
            ("qCurveTo", ((0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0), None)),
            ("closePath", ()),
        ]
        contour = recording_to_shape(recording).contours[0]
        assert len(contour.edges) == 4
        assert contour.edges[0].start == Vector2(0.0, 5.0)
        assert contour.is_closed()

    def test_cubic(self):
        """Test curveTo becomes a cubic segment."""
        recording = [
            ("moveTo", ((0.0, 0.0),)),
            ("curveTo", ((0.0, 10.0), (10.0, 10.0), (10.0, 0.0))),
            ("closePath", ()),
        ]
        edges = recording_to_shape(recording).contours[0].edges
        assert isinstance(edges[0], CubicSegment)
        assert len(edges) == 2

    def test_glyph_to_shape(self):
        """Test a fontTools glyph is drawn into a Y-up shape."""

        class FakeGlyph:
            def draw(self, pen):
                pen.moveTo((0, 0))
                pen.lineTo((0, 10))
                pen.lineTo((10, 10))
                pen.lineTo((10, 0))
                pen.closePath()

        shape = glyph_to_shape(FakeGlyph())
        assert shape.inverse_y_axis
        assert shape.contours[0].winding() == 1

        reversed_shape = glyph_to_shape(FakeGlyph(), reverse_contours=True)
        assert reversed_shape.contours[0].winding() == -1

    def test_sprite_paths_straight_and_curved(self):
        """Test anchor curvature selects line or quadratic edges."""
        path = SpritePath([Anchor(0, 0), Anchor(5, 10), Anchor(10, 0, curve=2.0)])
        shape = sprite_paths_to_shape([path])
        edges = shape.contours[0].edges
        assert isinstance(edges[0], LinearSegment)
        assert isinstance(edges[1], LinearSegment)
        assert isinstance(edges[2], QuadraticSegment)
        assert edges[2].p1 == Vector2(5.0, -2.0)
        assert shape.contours[0].is_closed()

    def test_sprite_paths_reoriented(self):
        """Test every sprite contour ends up positively wound."""
        path = SpritePath([Anchor(0, 0), Anchor(10, 0), Anchor(5, 10)])
        shape = sprite_paths_to_shape([path])
        assert shape.contours[0].winding() == 1
        assert not shape.inverse_y_axis

    def test_sprite_paths_too_short_skipped(self):
        """Test paths with fewer than three anchors are dropped."""
        shape = sprite_paths_to_shape([SpritePath([Anchor(0, 0), Anchor(1, 1)])])
        assert shape.is_empty()


class TestBitmapWriter:
    """Tests for BitmapWriter."""

    def test_save_rgb(self, tmp_path):
        """Test a 3-channel image is written as an RGB PNG."""
        image = ByteImage(2, 1, 3, bytearray([255, 0, 0, 0, 127, 255]))
        path = BitmapWriter(tmp_path / "out").save(image, "A")

        assert path == tmp_path / "out" / "A.png"
        with Image.open(path) as saved:
            assert saved.mode == "RGB"
            assert saved.size == (2, 1)
            assert saved.getpixel((1, 0)) == (0, 127, 255)

    def test_save_grayscale(self, tmp_path):
        """Test a 1-channel image is written as an L PNG."""
        image = ByteImage(1, 2, 1, bytearray([10, 200]))
        path = tmp_path / "sdf.png"
        BitmapWriter.save_as(image, path)
        with Image.open(path) as saved:
            assert saved.mode == "L"
            assert saved.getpixel((0, 1)) == 200

    def test_save_failure(self, tmp_path):
        """Test an unwritable path raises BitmapSaveError."""
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(BitmapSaveError):
            BitmapWriter.save_as(ByteImage(1, 1), blocker / "a.png")

    def test_glyph_filename(self):
        """Test glyph file names are safe on case-insensitive filesystems."""
        assert BitmapWriter.get_glyph_filename("A", "A") == "A"
        assert BitmapWriter.get_glyph_filename("a", "a") == "a_lower"
        assert BitmapWriter.get_glyph_filename("1", "one") == "one"
        assert BitmapWriter.get_glyph_filename("?", "") == "u003F"
        assert BitmapWriter.get_glyph_filename(".", "glyph.alt") == "u002E"


class TestSpriteDocument:
    """Tests for sprite document loading."""

    def test_load(self, tmp_path):
        """Test a document converts into domain slots."""
        path = tmp_path / "sprite.json"
        path.write_text(
            json.dumps(
                {
                    "width": 16,
                    "height": 8,
                    "slots": [
                        {
                            "color": [255, 0, 0, 255],
                            "paths": [
                                {"anchors": [{"x": 1, "y": 1}, {"x": 5, "y": 1}, {"x": 3, "y": 6}]},
                                {
                                    "subtract": True,
                                    "anchors": [
                                        {"x": 2, "y": 2, "curve": 0.5},
                                        {"x": 4, "y": 2},
                                        {"x": 3, "y": 4},
                                    ],
                                },
                            ],
                        }
                    ],
                }
            )
        )
        document = load_sprite_document(path)
        assert (document.width, document.height, document.scale) == (16, 8, 1.0)
        slots = document.to_slots()
        assert slots[0].color == (255, 0, 0, 255)
        assert len(slots[0].add_paths) == 1
        assert slots[0].subtract_paths[0].anchors[0] == Anchor(2.0, 2.0, 0.5)

    def test_defaults(self):
        """Test an empty document has a default slot size."""
        document = SpriteDocument()
        assert (document.width, document.height) == (32, 32)
        assert document.to_slots() == []

    def test_invalid_document(self, tmp_path):
        """Test validation errors become SpriteDocumentError."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"width": 0}))
        with pytest.raises(SpriteDocumentError):
            load_sprite_document(path)

    def test_missing_document(self, tmp_path):
        """Test a missing file becomes SpriteDocumentError."""
        with pytest.raises(SpriteDocumentError):
            load_sprite_document(tmp_path / "missing.json")
