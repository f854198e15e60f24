"""Error types raised by fontgen.

Every fatal failure is a FontgenError subclass carrying the exit status the
command line front end returns for it. Per-glyph problems are not errors:
they are logged and the glyph is left out of the atlas.
"""

from __future__ import annotations


class FontgenError(Exception):
    """Base exception for fatal fontgen failures."""

    exit_code = 1


class SpecError(FontgenError):
    """The font spec file is unreadable, malformed or describes an unusable grid."""

    exit_code = 2


class MetadataError(FontgenError):
    """A metadata document does not match the FontMetadata schema."""

    exit_code = 2


class FontError(FontgenError):
    """FreeType could not open the face or accept the pixel size."""

    exit_code = 3


class OutputError(FontgenError):
    """The atlas image or metadata file could not be encoded or written."""

    exit_code = 4


class AtlasOverflowError(FontgenError):
    exit_code = 5

    def __init__(self, glyph: str, row_end: int, buffer_size: int):
        self.glyph = glyph
        self.row_end = row_end
        self.buffer_size = buffer_size
        super().__init__(
            f"glyph `{glyph}` does not fit in the atlas "
            f"(row ends at byte {row_end}, buffer holds {buffer_size} bytes)"
        )
