#!/usr/bin/env python3
"""
Kometa Images - default poster generator

Creates Kometa's labeled default posters (languages, awards, genres,
networks, decades, ...) with ImageMagick.

Run order:
  1. Rotate the run log
  2. Optionally verify bundled assets against a checksum manifest
  3. Validate fonts and load the translation file
  4. Resolve point sizes through the persistent point size cache
  5. Render posters in parallel

Environment Variables:
  IMAGES_MAGICK_BINARY, IMAGES_CACHE_DB, IMAGES_WORKERS, IMAGES_FONT_DIRS, ...
  (see constants.py)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .categories import category_fonts, category_names
from .checksums import load_manifest, verify_checksums
from .constants import (
    logger,
    CACHE_DB_PATH,
    FONT_DIRS,
    MAGICK_BINARY,
    MEASURE_TIMEOUT,
    OUTPUT_DIR,
    RENDER_TIMEOUT,
    RENDER_WORKERS,
    TRANSLATIONS_DIR,
)
from .errors import ChecksumError, KometaImagesError
from .fonts import validate_fonts
from .generator import PosterGenerator
from .logs import close_file_logging, setup_file_logging
from .measure import MagickMeasurer
from .pointsize_cache import PointSizeCache
from .render import MagickRenderer
from .store import PointSizeStore
from .translations import load_translation

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Kometa default poster generator')
    parser.add_argument('--language', '-l', default='en',
                        help='Translation file to use (default: en)')
    parser.add_argument('--category', '-c', action='append', choices=category_names(),
                        help='Category to generate; repeat for several (default: all)')
    parser.add_argument('--output', '-o', type=Path, default=OUTPUT_DIR,
                        help='Output directory')
    parser.add_argument('--translations', type=Path, default=TRANSLATIONS_DIR,
                        help='Directory holding <language>.yml files')
    parser.add_argument('--cache-db', type=Path, default=CACHE_DB_PATH,
                        help='Point size cache database')
    parser.add_argument('--reset-cache', action='store_true',
                        help='Forget every cached point size before running')
    parser.add_argument('--workers', '-w', type=int, default=RENDER_WORKERS,
                        help='Parallel render workers')
    parser.add_argument('--log-dir', type=Path, default=Path('logs'),
                        help='Directory for rotated run logs')
    parser.add_argument('--verify-checksums', type=Path, metavar='MANIFEST',
                        help='Verify bundled assets against a checksum manifest first')
    return parser


def _verify_assets(manifest_path: Path) -> None:
    manifest = load_manifest(manifest_path)
    bad = verify_checksums(manifest_path.parent, manifest)
    if bad:
        raise ChecksumError(f"{len(bad)} bundled asset(s) failed checksum verification")


def run(args: argparse.Namespace) -> int:
    """Run a full generation pass and return the exit code."""
    categories = args.category or category_names()

    if args.verify_checksums:
        _verify_assets(args.verify_checksums)

    fonts = validate_fonts(category_fonts(categories), FONT_DIRS)
    translation = load_translation(args.language, args.translations)

    store = PointSizeStore(args.cache_db)
    cache = PointSizeCache(store, MagickMeasurer(MAGICK_BINARY, MEASURE_TIMEOUT))
    if args.reset_cache:
        store.clear()

    generator = PosterGenerator(
        cache,
        MagickRenderer(MAGICK_BINARY, RENDER_TIMEOUT),
        translation,
        fonts,
        args.output / args.language,
    )
    result = generator.generate(categories, args.workers)

    logger.info("=" * 60)
    logger.info(
        f"RUN_SUMMARY rendered={len(result.rendered)} failed={len(result.failed)} "
        f"skipped={len(result.skipped)}"
    )
    logger.info(
        f"POINTSIZE_CACHE hits={cache.hits} misses={cache.misses} entries={store.count()}"
    )
    logger.info("=" * 60)

    return EXIT_OK if result.ok else EXIT_FAILURES


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    handler = setup_file_logging(args.log_dir)
    try:
        return run(args)
    except KometaImagesError as e:
        logger.error(f"FATAL {e}")
        return EXIT_FATAL
    finally:
        close_file_logging(handler)


if __name__ == '__main__':
    sys.exit(main())
