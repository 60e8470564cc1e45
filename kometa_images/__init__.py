"""
Kometa Images - Default Poster Package

This package generates Kometa's default posters with ImageMagick,
including:
- Persistent optimal point size cache
- Caption measurement and poster rendering through the magick CLI
- Translation lookup and category tables
- Font validation and asset checksum verification
- Parallel batch rendering with rotated run logs
"""

from .constants import (
    logger,
    MAGICK_BINARY,
    CACHE_DB_PATH,
    MEASURE_TIMEOUT,
    RENDER_TIMEOUT,
    RENDER_WORKERS,
)

from .errors import (
    KometaImagesError,
    StoreUnavailableError,
    MeasurementError,
    PointSizeResolveError,
    RenderError,
    TranslationError,
    FontError,
    ChecksumError,
)

from .store import PointSizeStore

from .pointsize_cache import (
    PointSizeCache,
    build_cache_key,
    clamp_point_size,
)

from .measure import MagickMeasurer
from .render import MagickRenderer, RenderParams

from .translations import (
    load_translation,
    get_property,
    translate,
)

from .fonts import (
    find_font,
    validate_fonts,
)

from .checksums import (
    compute_checksum,
    build_manifest,
    write_manifest,
    load_manifest,
    verify_checksums,
)

from .batch import BatchResult, PosterJob, run_batch
from .generator import PosterGenerator

__all__ = [
    # Constants
    'logger',
    'MAGICK_BINARY',
    'CACHE_DB_PATH',
    'MEASURE_TIMEOUT',
    'RENDER_TIMEOUT',
    'RENDER_WORKERS',
    # Errors
    'KometaImagesError',
    'StoreUnavailableError',
    'MeasurementError',
    'PointSizeResolveError',
    'RenderError',
    'TranslationError',
    'FontError',
    'ChecksumError',
    # Point size cache
    'PointSizeStore',
    'PointSizeCache',
    'build_cache_key',
    'clamp_point_size',
    # ImageMagick collaborators
    'MagickMeasurer',
    'MagickRenderer',
    'RenderParams',
    # Translations
    'load_translation',
    'get_property',
    'translate',
    # Fonts
    'find_font',
    'validate_fonts',
    # Checksums
    'compute_checksum',
    'build_manifest',
    'write_manifest',
    'load_manifest',
    'verify_checksums',
    # Batch
    'BatchResult',
    'PosterJob',
    'run_batch',
    'PosterGenerator',
]
