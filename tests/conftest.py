from __future__ import annotations

import json
import logging
from pathlib import Path
from types import SimpleNamespace

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from freetype.ft_errors import FT_Exception

# 1024 units per em at 16px is 64 units per pixel, so outlines on multiples
# of 64 land exactly on the pixel grid.
UPM = 1024
ASCENT = 896
DESCENT = -128
SQUARE_LETTERS = "ABCDE"


def _square_glyph():
    pen = TTGlyphPen(None)
    # 2..14 px horizontally, 0..12 px vertically at 16px
    pen.moveTo((128, 0))
    pen.lineTo((128, 768))
    pen.lineTo((896, 768))
    pen.lineTo((896, 0))
    pen.closePath()
    return pen.glyph()


def build_test_font(out_path: Path) -> Path:
    glyph_order = [".notdef", "space"] + list(SQUARE_LETTERS)
    fb = FontBuilder(UPM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)

    glyf = {".notdef": TTGlyphPen(None).glyph(), "space": TTGlyphPen(None).glyph()}
    hmtx = {".notdef": (UPM, 0), "space": (UPM, 0)}
    for letter in SQUARE_LETTERS:
        glyf[letter] = _square_glyph()
        hmtx[letter] = (UPM, 128)

    fb.setupGlyf(glyf)
    fb.setupHorizontalMetrics(hmtx)
    cmap = {0x20: "space"}
    cmap.update({ord(letter): letter for letter in SQUARE_LETTERS})
    fb.setupCharacterMap(cmap)
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
    )
    fb.setupNameTable(
        {
            "familyName": "Fontgen Test",
            "styleName": "Regular",
            "uniqueFontIdentifier": "FontgenTest-Regular",
            "fullName": "Fontgen Test Regular",
            "psName": "FontgenTest-Regular",
            "version": "Version 1.000",
        }
    )
    fb.setupPost(isFixedPitch=1)
    fb.save(str(out_path))
    return out_path


@pytest.fixture(scope="session")
def test_font(tmp_path_factory) -> Path:
    return build_test_font(tmp_path_factory.mktemp("fonts") / "FontgenTest-Regular.ttf")


@pytest.fixture
def write_spec(tmp_path):
    """Write a spec JSON into tmp_path and return its path."""

    def _write(font_path: str, name: str = "spec.json", **overrides) -> Path:
        spec = {
            "font_path": font_path,
            "font_size": 16,
            "cell_width": 16,
            "cell_height": 16,
            "atlas_padding_x": 0,
            "atlas_padding_y": 0,
            "atlas_width": 64,
            "atlas_height": 64,
            "glyphs": list(SQUARE_LETTERS),
        }
        spec.update(overrides)
        path = tmp_path / name
        path.write_text(json.dumps(spec), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_fontgen_logger():
    # cli.setup_logging detaches the package logger from the root logger,
    # which would hide records from caplog in later tests.
    yield
    logger = logging.getLogger("fontgen")
    logger.handlers[:] = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class StubFace:
    """Stands in for freetype.Face: every glyph is a solid block of one shade."""

    def __init__(self, sizes: dict[str, tuple[int, int]], failing: str = "", pitch_pad: int = 0):
        self.sizes = sizes
        self.failing = failing
        self.pitch_pad = pitch_pad
        self.loaded: list[str] = []
        self.glyph = None
        self.size = SimpleNamespace(height=16 << 6)

    def load_char(self, code: int, flags: int) -> None:
        char = chr(code)
        self.loaded.append(char)
        if char in self.failing or char not in self.sizes:
            raise FT_Exception(0x10)
        width, rows = self.sizes[char]
        pitch = width + self.pitch_pad
        row = [code & 0xFF] * width + [0xAA] * self.pitch_pad
        self.glyph = SimpleNamespace(
            bitmap=SimpleNamespace(width=width, rows=rows, pitch=pitch, buffer=row * rows),
            metrics=SimpleNamespace(horiBearingX=-65, horiBearingY=rows << 6),
            advance=SimpleNamespace(x=1280, y=0),
        )


@pytest.fixture
def stub_face():
    return StubFace
