"""
Constants and configuration for Kometa Images.

This module contains all global constants and environment-based configuration
used throughout the default-image generation run.
"""

import logging
import os
import sys
from pathlib import Path

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='| %(levelname)-8s | %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger('KometaImages')
# basicConfig is a no-op when the host already configured the root logger
logger.setLevel(logging.INFO)

# ============================================================================
# ImageMagick Configuration
# ============================================================================
# IMAGES_MAGICK_BINARY: ImageMagick 7 entry point (measurement and rendering)
MAGICK_BINARY = os.environ.get('IMAGES_MAGICK_BINARY', 'magick')

# Caption sizing dry runs are quick; a hung one must not stall the batch
MEASURE_TIMEOUT = float(os.environ.get('IMAGES_MEASURE_TIMEOUT', '60'))

# Watchdog for each poster render
RENDER_TIMEOUT = float(os.environ.get('IMAGES_RENDER_TIMEOUT', '300'))

# Parallel render workers
RENDER_WORKERS = int(os.environ.get('IMAGES_WORKERS', '4'))

# ============================================================================
# Point Size Cache
# ============================================================================
# Deleting this file resets all cached point sizes
CACHE_DB_PATH = Path(os.environ.get('IMAGES_CACHE_DB', 'pointsize_cache.db'))

# Seconds sqlite waits on a locked database before giving up
STORE_BUSY_TIMEOUT = float(os.environ.get('IMAGES_STORE_TIMEOUT', '30'))

CACHE_TABLE = 'pointsize_cache'

# ============================================================================
# Font Configuration
# ============================================================================
# IMAGES_STRICT_FONTS: If true, fail if required fonts are missing
# Default: false (log warnings but continue)
STRICT_FONTS = os.environ.get('IMAGES_STRICT_FONTS', '0') == '1'

FONT_DIRS = [
    Path(p) for p in os.environ.get('IMAGES_FONT_DIRS', 'fonts').split(os.pathsep) if p
]

FONT_EXTENSIONS = ('.ttf', '.otf')

# ============================================================================
# Logs and Output
# ============================================================================
LOG_FILE_NAME = 'create_images.log'
LOG_KEEP = int(os.environ.get('IMAGES_LOG_KEEP', '9'))

TRANSLATIONS_DIR = Path(os.environ.get('IMAGES_TRANSLATIONS_DIR', 'translations'))
OUTPUT_DIR = Path(os.environ.get('IMAGES_OUTPUT_DIR', 'images'))

# Kometa default-image canvas
POSTER_WIDTH = 2000
POSTER_HEIGHT = 3000
