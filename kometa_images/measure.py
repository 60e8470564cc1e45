"""
Caption measurement for Kometa Images.

Asks ImageMagick which point size lets a caption fill a box, without
rendering anything. This is the slow step the point size cache avoids.
"""

import math
import subprocess
from typing import List

from .constants import logger, MAGICK_BINARY, MEASURE_TIMEOUT
from .errors import MeasurementError


def escape_caption_text(text: str) -> str:
    """Escape text so ImageMagick's caption: coder takes it literally."""
    escaped = text.replace('\\', '\\\\')
    # caption: expands percent escapes such as %w
    escaped = escaped.replace('%', '%%')
    # caption:@file reads the text from a file
    if escaped.startswith('@'):
        escaped = '\\' + escaped
    return escaped


def build_measure_command(
    text: str,
    font: str,
    box_width: int,
    box_height: int,
    magick_binary: str = MAGICK_BINARY,
) -> List[str]:
    """Build the caption sizing dry-run command."""
    return [
        magick_binary,
        '-size', f'{int(box_width)}x{int(box_height)}',
        '-font', str(font),
        f'caption:{escape_caption_text(text)}',
        '-format', '%[caption:pointsize]',
        'info:',
    ]


def parse_point_size(output: str) -> int:
    """Parse the point size ImageMagick prints; decimals are truncated."""
    value = output.strip()
    if not value:
        raise ValueError("empty output")
    size = float(value)
    if not math.isfinite(size) or size < 1:
        raise ValueError(f"not a usable point size: {value!r}")
    return int(size)


class MagickMeasurer:
    """Text-measurement collaborator backed by the ImageMagick CLI."""

    def __init__(self, magick_binary: str = MAGICK_BINARY, timeout: float = MEASURE_TIMEOUT):
        self.magick_binary = magick_binary
        self.timeout = timeout

    def measure(self, text: str, font: str, box_width: int, box_height: int) -> int:
        """Return ImageMagick's suggested point size for text in the box."""
        cmd = build_measure_command(text, font, box_width, box_height, self.magick_binary)
        logger.debug(f"MEASURE_COMMAND {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise MeasurementError(
                f"ImageMagick binary not found: {self.magick_binary}", cmd
            ) from e
        except subprocess.TimeoutExpired as e:
            raise MeasurementError(
                f"Caption measurement timed out after {self.timeout:.0f}s", cmd
            ) from e

        stderr = (result.stderr or '').strip()
        if result.returncode != 0:
            raise MeasurementError(
                f"Caption measurement exited with code {result.returncode}", cmd, stderr
            )

        try:
            return parse_point_size(result.stdout or '')
        except ValueError as e:
            raise MeasurementError(f"Unparsable caption point size ({e})", cmd, stderr) from e
