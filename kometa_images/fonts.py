"""
Font handling for Kometa Images.

This module resolves the fonts referenced by the category tables to files on
disk and confirms they load before any ImageMagick work starts.
"""

from pathlib import Path
from typing import Dict, Iterable, List, Optional

from PIL import ImageFont

from .constants import (
    logger,
    STRICT_FONTS,
    FONT_DIRS,
    FONT_EXTENSIONS,
)
from .errors import FontError


def find_font(font: str, font_dirs: Iterable[Path] = FONT_DIRS) -> Optional[Path]:
    """
    Find the file for a font identifier.

    An identifier is either a path to a font file or a file stem
    (e.g. 'Comfortaa-Medium') looked up in font_dirs.
    """
    direct = Path(font)
    if direct.suffix.lower() in FONT_EXTENSIONS and direct.exists():
        return direct.resolve()

    for font_dir in font_dirs:
        for ext in FONT_EXTENSIONS:
            candidate = Path(font_dir) / f"{font}{ext}"
            if candidate.exists():
                return candidate.resolve()
    return None


def _font_loads(path: Path) -> bool:
    try:
        ImageFont.truetype(str(path), 12)
        return True
    except OSError as e:
        logger.warning(f"FONT_INVALID path={path} error={e}")
        return False


def validate_fonts(
    fonts: Iterable[str],
    font_dirs: Iterable[Path] = FONT_DIRS,
    strict: bool = STRICT_FONTS,
) -> Dict[str, str]:
    """
    Resolve every required font to a loadable file.

    Returns a mapping of font identifier -> font file path for the fonts that
    were found. Missing fonts are logged; in strict mode they raise FontError.
    """
    font_dirs = [Path(d) for d in font_dirs]
    resolved: Dict[str, str] = {}
    problems: List[str] = []

    for font in sorted(set(fonts)):
        path = find_font(font, font_dirs)
        if path is None:
            logger.warning(f"FONT_MISSING font={font} searched={', '.join(str(d) for d in font_dirs)}")
            problems.append(font)
            continue
        if not _font_loads(path):
            problems.append(font)
            continue
        resolved[font] = str(path)
        logger.debug(f"FONT_OK font={font} path={path}")

    if problems:
        if strict:
            raise FontError(
                f"Required fonts unavailable: {', '.join(problems)}. "
                f"Set IMAGES_STRICT_FONTS=0 to continue without them."
            )
        logger.warning("  Posters using these fonts will fall back to ImageMagick's font lookup.")
    else:
        logger.info(f"FONTS_OK count={len(resolved)}")

    return resolved
