"""
Atlas metadata records.

This module is also what a consuming renderer imports to read the JSON file
written next to the atlas image:

    meta = load_metadata(Path("assets/out.json"))
    g = meta.glyphs["A"]
    # sample the atlas at (g.x, g.y, g.width, g.height), draw at
    # (pen_x + g.hori_bearing_x, baseline - g.hori_bearing_y), then
    # pen_x += g.advance_x
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .errors import MetadataError


def from_26_6(value: int) -> int:
    """Convert a FreeType 26.6 fixed-point value to whole pixels.

    >> is an arithmetic shift, so negative bearings round toward negative
    infinity: -65 becomes -2.
    """
    return value >> 6


def _require_int(data: dict, name: str, owner: str) -> int:
    if name not in data:
        raise MetadataError(f"{owner}: missing field `{name}`")
    value = data[name]
    if isinstance(value, bool) or not isinstance(value, int):
        raise MetadataError(f"{owner}: `{name}` must be an integer")
    return value


@dataclass(frozen=True)
class GlyphMetadata:
    x: int
    y: int
    width: int
    height: int
    hori_bearing_x: int
    hori_bearing_y: int
    advance_x: int
    advance_y: int

    def to_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Any) -> "GlyphMetadata":
        if not isinstance(data, dict):
            raise MetadataError("glyph entry must be an object")
        return cls(**{f.name: _require_int(data, f.name, "glyph entry") for f in fields(cls)})


@dataclass
class FontMetadata:
    atlas_path: str
    line_height: int
    glyphs: dict[str, GlyphMetadata] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        # Sorted keys keep the output stable across runs.
        return {
            "atlas_path": self.atlas_path,
            "line_height": self.line_height,
            "glyphs": {key: self.glyphs[key].to_dict() for key in sorted(self.glyphs)},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Any) -> "FontMetadata":
        if not isinstance(data, dict):
            raise MetadataError("font metadata must be an object")
        if not isinstance(data.get("atlas_path"), str):
            raise MetadataError("font metadata: `atlas_path` must be a string")
        line_height = _require_int(data, "line_height", "font metadata")
        glyphs = data.get("glyphs")
        if not isinstance(glyphs, dict):
            raise MetadataError("font metadata: `glyphs` must be an object")
        return cls(
            atlas_path=data["atlas_path"],
            line_height=line_height,
            glyphs={key: GlyphMetadata.from_dict(value) for key, value in glyphs.items()},
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> "FontMetadata":
        try:
            data = json.loads(text)
        except ValueError as exc:
            raise MetadataError(f"malformed font metadata: {exc}") from exc
        return cls.from_dict(data)


def load_metadata(path: Path) -> FontMetadata:
    """Read a metadata file written by fontgen."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise MetadataError(f"failed to read font metadata {path}: {exc.strerror or exc}") from exc
    return FontMetadata.from_json(raw)
