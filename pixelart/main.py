"""Точка входа: пикселизация изображения из командной строки."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Tuple

from pixelart import config
from pixelart.errors import PixelationError
from pixelart.models.pixelation_config import PixelShape
from pixelart.pixelate import pixelate
from pixelart.services.display_service import DisplayService

logger = logging.getLogger("pixelart")


def _display_size(value: str) -> Tuple[int, int]:
    try:
        width, height = (int(part) for part in value.lower().split("x", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("display size must be positive")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pixelart", description="Turn an image into block pixel art.")
    parser.add_argument("source", help="image URL, file:// URL, data: URI or local path")
    parser.add_argument("-b", "--block-size", type=int, default=config.DEFAULT_BLOCK_SIZE,
                        help="block edge length in pixels (default: %(default)s)")
    parser.add_argument("--shape", choices=[s.value for s in PixelShape], default=PixelShape.SQUARE.value)
    parser.add_argument("--borders", action="store_true", help="stroke every block boundary")
    parser.add_argument("--align", action="store_true", help="crop to exact multiples of the block size")
    parser.add_argument("-o", "--output", help="output PNG path (default: derived from --artist/--album)")
    parser.add_argument("--display", type=_display_size, metavar="WxH",
                        help="fit the result into a WxH display canvas before saving")
    parser.add_argument("--artist", help="artist name used in the default file name")
    parser.add_argument("--album", help="album name used in the default file name")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Разбирает аргументы, запускает конвейер и сохраняет PNG."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    display = DisplayService()
    try:
        surface = asyncio.run(
            pixelate(args.source, args.block_size, args.borders, args.shape, args.align)
        )
    except PixelationError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    if args.display:
        surface = display.fit_to_display(surface, args.display)
    output = args.output or display.download_filename(args.artist, args.album, args.block_size)
    path = display.save(surface, output)
    logger.info("Saved %dx%d pixel art to %s", surface.width, surface.height, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
