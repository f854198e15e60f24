"""Pack font glyphs into a grayscale atlas texture with JSON metrics."""

from importlib.metadata import PackageNotFoundError, version

from .errors import FontgenError
from .metadata import FontMetadata, GlyphMetadata, load_metadata
from .spec import FontSpec, load_spec

try:
    __version__ = version("fontgen")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "FontMetadata",
    "FontSpec",
    "FontgenError",
    "GlyphMetadata",
    "load_metadata",
    "load_spec",
]
