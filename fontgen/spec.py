"""
Font spec loading.

A font spec is a JSON object describing one atlas:

  {
    "font_path": "fonts/Mono.ttf",   relative to the spec file's directory
    "font_size": 16,                 pixel size passed to FreeType
    "cell_width": 16,
    "cell_height": 16,
    "atlas_padding_x": 0,
    "atlas_padding_y": 0,
    "atlas_width": 256,
    "atlas_height": 256,
    "glyphs": ["A", "B", "C"]        first character of each entry is rendered
  }

Every field is required. Unknown fields are ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import SpecError

U32_MAX = (1 << 32) - 1

UINT_FIELDS = (
    "font_size",
    "cell_width",
    "cell_height",
    "atlas_padding_x",
    "atlas_padding_y",
    "atlas_width",
    "atlas_height",
)


@dataclass
class FontSpec:
    font_path: Path
    font_size: int
    cell_width: int
    cell_height: int
    atlas_padding_x: int
    atlas_padding_y: int
    atlas_width: int
    atlas_height: int
    glyphs: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any, base_dir: Path | None = None) -> "FontSpec":
        """Validate a decoded spec object.

        When base_dir is given, font_path is resolved against it.
        """
        if not isinstance(data, dict):
            raise SpecError("malformed font spec file: top-level value must be an object")

        missing = [name for name in ("font_path", *UINT_FIELDS, "glyphs") if name not in data]
        if missing:
            raise SpecError("malformed font spec file: missing field(s) " + ", ".join(missing))

        font_path = data["font_path"]
        if not isinstance(font_path, str):
            raise SpecError("malformed font spec file: `font_path` must be a string")

        values: dict[str, int] = {}
        for name in UINT_FIELDS:
            value = data[name]
            # bool is an int subclass; JSON true/false is not a size.
            if isinstance(value, bool) or not isinstance(value, int):
                raise SpecError(f"malformed font spec file: `{name}` must be an unsigned integer")
            if not 0 <= value <= U32_MAX:
                raise SpecError(f"malformed font spec file: `{name}` out of range: {value}")
            values[name] = value

        glyphs = data["glyphs"]
        if not isinstance(glyphs, list) or not all(isinstance(g, str) for g in glyphs):
            raise SpecError("malformed font spec file: `glyphs` must be a list of strings")
        for glyph in glyphs:
            try:
                glyph.encode("utf-8")
            except UnicodeEncodeError as exc:
                raise SpecError(
                    f"malformed font spec file: glyph {glyph!r} is not valid UTF-8 ({exc.reason})"
                ) from exc

        path = Path(font_path)
        if base_dir is not None:
            path = base_dir / path
        return cls(font_path=path, glyphs=list(glyphs), **values)


def load_spec(spec_path: Path) -> FontSpec:
    """Read a spec file and resolve its font path against the file's directory."""
    try:
        raw = spec_path.read_bytes()
    except OSError as exc:
        raise SpecError(f"failed to open font spec file {spec_path}: {exc.strerror or exc}") from exc

    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise SpecError(f"malformed font spec file {spec_path}: {exc}") from exc

    return FontSpec.from_dict(data, base_dir=spec_path.parent)
