"""Encode and write the atlas image and its metadata."""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from .atlas import Atlas
from .errors import OutputError
from .metadata import FontMetadata

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_BASE = Path("./out")


@dataclass(frozen=True)
class OutputPaths:
    image: Path
    metadata: Path

    @classmethod
    def from_base(cls, base: Path) -> "OutputPaths":
        try:
            return cls(image=base.with_suffix(".png"), metadata=base.with_suffix(".json"))
        except ValueError as exc:
            raise OutputError(f"invalid output path {base}: {exc}") from exc

    def atlas_path(self) -> str:
        """Image path as recorded in the metadata, relative to the metadata file."""
        return os.path.join(".", self.image.name)


def encode_png(atlas: Atlas) -> bytes:
    image = Image.frombytes("L", (atlas.width, atlas.height), bytes(atlas.pixels))
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


def write_outputs(atlas: Atlas, metadata: FontMetadata, paths: OutputPaths) -> None:
    """Encode both payloads, then write them.

    Nothing touches the filesystem until both encodings have succeeded.
    """
    try:
        png_bytes = encode_png(atlas)
    except (OSError, ValueError) as exc:
        raise OutputError(f"failed to encode atlas image: {exc}") from exc
    try:
        metadata_bytes = metadata.to_json().encode("utf-8")
    except UnicodeEncodeError as exc:
        raise OutputError(f"failed to encode font metadata: {exc}") from exc

    for path, payload in ((paths.image, png_bytes), (paths.metadata, metadata_bytes)):
        try:
            with open(path, "wb") as f:
                f.write(payload)
        except OSError as exc:
            raise OutputError(f"failed to write {path}: {exc.strerror or exc}") from exc
        logger.debug("wrote %s (%d bytes)", path, len(payload))
