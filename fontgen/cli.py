"""
Command line front end.

Usage:
  fontgen fonts/mono.json
  fontgen fonts/mono.json -o assets/mono      writes assets/mono.png + assets/mono.json
  python -m fontgen fonts/mono.json -v        log every glyph placement
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .atlas import AtlasLayout, build_atlas, line_height, open_face
from .errors import FontgenError
from .metadata import FontMetadata
from .output import DEFAULT_OUTPUT_BASE, OutputPaths, write_outputs
from .spec import load_spec

logger = logging.getLogger("fontgen")


class ColoredFormatter(logging.Formatter):
    """Colours the level name when writing to a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[1;33m",
        "ERROR": "\033[0;31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str, use_color: bool):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        color = self.COLORS.get(record.levelname, self.RESET)
        return message.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)


def setup_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter("%(levelname)s: %(message)s", use_color=sys.stderr.isatty()))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def run(spec_path: Path, output_base: Path) -> FontMetadata:
    """Build one atlas from a spec file and write <output_base>.png/.json."""
    spec = load_spec(spec_path)
    paths = OutputPaths.from_base(output_base)
    layout = AtlasLayout.from_spec(spec)

    logger.info("Loading font: %s", spec.font_path)
    face = open_face(spec.font_path, spec.font_size)

    atlas, glyphs = build_atlas(face, spec, layout)
    metadata = FontMetadata(
        atlas_path=paths.atlas_path(),
        line_height=line_height(face),
        glyphs=glyphs,
    )
    skipped = len(spec.glyphs) - len(glyphs)
    if skipped:
        logger.debug("%d of %d glyph entries produced no new metadata", skipped, len(spec.glyphs))

    logger.info("Saving as: %s.[png,json]", output_base)
    write_outputs(atlas, metadata, paths)
    return metadata


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fontgen",
        description="Pack glyphs from a font into a grayscale atlas PNG plus JSON metrics.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("spec", metavar="FONT_SPEC_PATH", type=Path, help="Path to the JSON font spec file.")
    parser.add_argument(
        "-o",
        dest="output",
        metavar="PATH",
        type=Path,
        default=DEFAULT_OUTPUT_BASE,
        help="Output path without extension (default: ./out).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every glyph placement.")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        run(args.spec, args.output)
    except FontgenError as err:
        logger.error("%s", err)
        return err.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
