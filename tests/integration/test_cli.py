"""End-to-end tests of the command line interface."""

import json
from pathlib import Path

import pytest
from PIL import Image
from typer.testing import CliRunner

from msdfbake import __version__
from msdfbake.cli.app import app

runner = CliRunner()


def square(x0: float, y0: float, x1: float, y1: float, subtract: bool = False) -> dict:
    return {
        "subtract": subtract,
        "anchors": [
            {"x": x0, "y": y0},
            {"x": x1, "y": y0},
            {"x": x1, "y": y1},
            {"x": x0, "y": y1},
        ],
    }


@pytest.fixture
def sprite_document(tmp_path: Path) -> Path:
    """Two-slot sprite: a filled square and a square frame."""
    document = {
        "width": 32,
        "height": 32,
        "scale": 1.0,
        "slots": [
            {"paths": [square(4, 4, 28, 28)]},
            {
                "color": [255, 0, 0, 255],
                "paths": [square(4, 4, 28, 28), square(12, 12, 20, 20, subtract=True)],
            },
        ],
    }
    path = tmp_path / "icon.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


class TestVersion:
    """Test the version option."""

    def test_version(self):
        """Test --version prints the package version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestGlyphsCommand:
    """Test the glyphs command."""

    def test_bake_font(self, test_font: Path, tmp_path: Path):
        """Test baking selected characters writes one PNG each."""
        output_dir = tmp_path / "glyphs"
        result = runner.invoke(
            app,
            [
                "glyphs",
                str(test_font),
                "-o",
                str(output_dir),
                "-c",
                "AO",
                "-j",
                "1",
                "-q",
                "--log-file",
                str(tmp_path / "bake.log"),
            ],
        )
        assert result.exit_code == 0, result.output
        assert (output_dir / "A.png").exists()
        assert (output_dir / "O.png").exists()

    def test_missing_font(self, tmp_path: Path):
        """Test a missing input file exits with an error."""
        result = runner.invoke(app, ["glyphs", str(tmp_path / "missing.ttf")])
        assert result.exit_code == 1

    def test_invalid_mode(self, test_font: Path):
        """Test an unknown generator mode is rejected."""
        result = runner.invoke(app, ["glyphs", str(test_font), "-m", "fancy"])
        assert result.exit_code == 1

    def test_unreadable_font(self, tmp_path: Path):
        """Test a file that is not a font exits with an error."""
        path = tmp_path / "broken.ttf"
        path.write_bytes(b"not a font" * 16)
        result = runner.invoke(
            app, ["glyphs", str(path), "-q", "--log-file", str(tmp_path / "bake.log")]
        )
        assert result.exit_code == 1


class TestSpriteCommand:
    """Test the sprite command."""

    def test_bake_sprite_strip(
        self,
        sprite_document: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test every slot lands in its own cell of the strip."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "icon.png"
        result = runner.invoke(app, ["sprite", str(sprite_document), "-o", str(output), "-q"])
        assert result.exit_code == 0, result.output

        image = Image.open(output)
        assert image.size == (64, 32)
        assert sorted(image.getpixel((16, 16)))[1] > 127
        assert sorted(image.getpixel((1, 1)))[1] < 127
        # Second slot has a hole in the middle
        assert sorted(image.getpixel((32 + 16, 16)))[1] < 127
        assert sorted(image.getpixel((32 + 6, 16)))[1] > 127

    def test_size_override(
        self,
        sprite_document: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ):
        """Test command line options override the document size."""
        monkeypatch.chdir(tmp_path)
        output = tmp_path / "icon.png"
        result = runner.invoke(
            app,
            ["sprite", str(sprite_document), "-o", str(output), "--width", "16", "--height", "16",
             "--scale", "0.5", "-q"],
        )
        assert result.exit_code == 0, result.output
        assert Image.open(output).size == (32, 16)

    def test_empty_document(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test a document without slots is rejected."""
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "empty.json"
        path.write_text('{"slots": []}', encoding="utf-8")
        result = runner.invoke(app, ["sprite", str(path), "-o", str(tmp_path / "x.png"), "-q"])
        assert result.exit_code == 1

    def test_invalid_document(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test a document failing validation is reported."""
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "bad.json"
        path.write_text('{"width": -3}', encoding="utf-8")
        result = runner.invoke(app, ["sprite", str(path), "-o", str(tmp_path / "x.png"), "-q"])
        assert result.exit_code == 1
