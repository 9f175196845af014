"""Shared fixtures for integration tests."""

from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen


def _rect(pen: TTGlyphPen, x0: int, y0: int, x1: int, y1: int, clockwise: bool = True) -> None:
    points = [(x0, y0), (x0, y1), (x1, y1), (x1, y0)]
    if not clockwise:
        points.reverse()
    pen.moveTo(points[0])
    for point in points[1:]:
        pen.lineTo(point)
    pen.closePath()


def build_test_font(path: Path) -> Path:
    """Write a small TrueType font with A (bar), O (ring) and X (overlap).

    A: rectangle 100..500 x 0..700
    O: outer 50..550 x 0..700 with a hole 200..400 x 200..500
    X: two overlapping rectangles 100..400 and 300..600, both 0..700
    """
    fb = FontBuilder(1000, isTTF=True)
    glyph_order = [".notdef", "space", "A", "O", "X"]
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({0x20: "space", 0x41: "A", 0x4F: "O", 0x58: "X"})

    glyphs = {}
    glyphs[".notdef"] = TTGlyphPen(None).glyph()
    glyphs["space"] = TTGlyphPen(None).glyph()

    pen = TTGlyphPen(None)
    _rect(pen, 100, 0, 500, 700)
    glyphs["A"] = pen.glyph()

    pen = TTGlyphPen(None)
    _rect(pen, 50, 0, 550, 700)
    _rect(pen, 200, 200, 400, 500, clockwise=False)
    glyphs["O"] = pen.glyph()

    pen = TTGlyphPen(None)
    _rect(pen, 100, 0, 400, 700)
    _rect(pen, 300, 0, 600, 700)
    glyphs["X"] = pen.glyph()

    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(
        {
            ".notdef": (500, 0),
            "space": (250, 0),
            "A": (600, 100),
            "O": (600, 50),
            "X": (700, 100),
        }
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "Bake Test", "styleName": "Regular"})
    fb.setupOS2()
    fb.setupPost()
    fb.save(str(path))
    return path


@pytest.fixture
def test_font(tmp_path: Path) -> Path:
    """Path to a freshly built test font."""
    return build_test_font(tmp_path / "BakeTest.ttf")
