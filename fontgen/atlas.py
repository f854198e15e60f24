"""
Glyph rasterization and grid packing.

Glyphs are packed into a uniform grid of cell_width x cell_height cells, in
the order they appear in the spec. The number of columns is

    cells_per_row = (atlas_width - 2 * atlas_padding_x) // cell_width

while each cell's origin is offset by the padding:

    x = cell_x * cell_width + atlas_padding_x
    y = cell_y * cell_height + atlas_padding_y

Padding therefore narrows the column count once but shifts every cell, and
is never taken into account for the row count. Do not change this formula:
regenerated atlases must keep their existing layout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import freetype
from freetype.ft_errors import FT_Exception

from .errors import AtlasOverflowError, FontError, SpecError
from .metadata import GlyphMetadata, from_26_6
from .spec import FontSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtlasLayout:
    cell_width: int
    cell_height: int
    padding_x: int
    padding_y: int
    cells_per_row: int

    @classmethod
    def from_spec(cls, spec: FontSpec) -> "AtlasLayout":
        if spec.cell_width == 0:
            raise SpecError("cell_width must be greater than zero")
        usable_width = spec.atlas_width - 2 * spec.atlas_padding_x
        if usable_width < 0:
            raise SpecError(
                f"atlas_padding_x {spec.atlas_padding_x} leaves no room in a "
                f"{spec.atlas_width} pixel wide atlas"
            )
        cells_per_row = usable_width // spec.cell_width
        if cells_per_row == 0 and spec.glyphs:
            raise SpecError(
                f"atlas is too narrow for a single {spec.cell_width} pixel cell "
                f"(width {spec.atlas_width}, padding {spec.atlas_padding_x})"
            )
        return cls(
            cell_width=spec.cell_width,
            cell_height=spec.cell_height,
            padding_x=spec.atlas_padding_x,
            padding_y=spec.atlas_padding_y,
            cells_per_row=cells_per_row,
        )

    def cell(self, index: int) -> tuple[int, int]:
        return index % self.cells_per_row, index // self.cells_per_row

    def origin(self, index: int) -> tuple[int, int]:
        """Top-left pixel of the glyph placed at position index."""
        cell_x, cell_y = self.cell(index)
        return (
            cell_x * self.cell_width + self.padding_x,
            cell_y * self.cell_height + self.padding_y,
        )


class Atlas:
    """Single-channel 8-bit atlas buffer, row-major."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)

    def blit(self, glyph: str, origin: tuple[int, int], bitmap: "freetype.Bitmap") -> None:
        """Copy a rendered FreeType bitmap to origin.

        Rows are addressed as row * atlas_width + col, so a bitmap wider than
        the remaining row space continues on the next atlas row. A row that
        would end past the buffer raises AtlasOverflowError.
        """
        origin_x, origin_y = origin
        width = bitmap.width
        pitch = bitmap.pitch
        buf = bitmap.buffer
        for y in range(bitmap.rows):
            start = (origin_y + y) * self.width + origin_x
            end = start + width
            if end > len(self.pixels):
                raise AtlasOverflowError(glyph, end, len(self.pixels))
            self.pixels[start:end] = bytes(buf[y * pitch : y * pitch + width])


def open_face(font_path: Path, font_size: int) -> "freetype.Face":
    """Open a font face and set its pixel size."""
    try:
        face = freetype.Face(str(font_path))
    except FT_Exception as exc:
        raise FontError(f"failed to create font face from {font_path}: {exc}") from exc

    try:
        face.set_pixel_sizes(font_size, 0)
    except FT_Exception as exc:
        raise FontError(f"failed to set pixel size {font_size} on {font_path}: {exc}") from exc
    return face


def render_glyph(face: "freetype.Face", char: str) -> bool:
    """Load and render char into face.glyph. Returns False if FreeType refuses it."""
    try:
        face.load_char(ord(char), freetype.FT_LOAD_RENDER)
    except FT_Exception as exc:
        logger.debug("load_char(U+%04X) failed: %s", ord(char), exc)
        return False
    return True


def build_atlas(
    face: "freetype.Face", spec: FontSpec, layout: AtlasLayout | None = None
) -> tuple[Atlas, dict[str, GlyphMetadata]]:
    """Rasterize every requested glyph into a new atlas.

    Glyphs that are empty or cannot be rendered are logged and skipped; their
    cell stays blank. The returned map is keyed by the full glyph string.
    """
    if layout is None:
        layout = AtlasLayout.from_spec(spec)
    atlas = Atlas(spec.atlas_width, spec.atlas_height)
    glyphs: dict[str, GlyphMetadata] = {}

    for index, glyph in enumerate(spec.glyphs):
        # Only the first code point is rendered; the whole string stays the key.
        if not glyph:
            logger.warning("Invalid glyph: `%s`", glyph)
            continue
        char = glyph[0]
        if not render_glyph(face, char):
            logger.warning("Failed to load glyph: `%s`", char)
            continue

        origin = layout.origin(index)
        slot = face.glyph
        bitmap = slot.bitmap
        atlas.blit(glyph, origin, bitmap)

        glyphs[glyph] = GlyphMetadata(
            x=origin[0],
            y=origin[1],
            width=bitmap.width,
            height=bitmap.rows,
            hori_bearing_x=from_26_6(slot.metrics.horiBearingX),
            hori_bearing_y=from_26_6(slot.metrics.horiBearingY),
            advance_x=from_26_6(slot.advance.x),
            advance_y=from_26_6(slot.advance.y),
        )
        logger.debug(
            "glyph `%s` -> cell %s at %s, %dx%d", glyph, layout.cell(index), origin, bitmap.width, bitmap.rows
        )

    return atlas, glyphs


def line_height(face: "freetype.Face") -> int:
    return from_26_6(face.size.height)
