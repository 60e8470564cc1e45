"""
Poster rendering for Kometa Images.

This module builds and runs the ImageMagick command that draws one poster:
a solid canvas with a caption composited into its text box.
"""

import subprocess
from pathlib import Path
from typing import List, NamedTuple, Optional

from .constants import logger, MAGICK_BINARY, RENDER_TIMEOUT
from .errors import RenderError
from .measure import escape_caption_text


class RenderParams(NamedTuple):
    """Everything ImageMagick needs to draw one poster."""
    text: str
    font: str
    point_size: int
    width: int
    height: int
    box_width: int
    box_height: int
    fill: str
    background: str
    output_path: Path
    gravity: str = 'center'
    offset_x: int = 0
    offset_y: int = 0
    stroke: Optional[str] = None
    stroke_width: int = 0


def build_render_command(params: RenderParams, magick_binary: str = MAGICK_BINARY) -> List[str]:
    """Build the magick command line for params."""
    caption = [
        '(',
        '-size', f'{params.box_width}x{params.box_height}',
        '-background', 'none',
        '-font', str(params.font),
        '-pointsize', str(params.point_size),
        '-fill', params.fill,
    ]
    if params.stroke and params.stroke_width > 0:
        caption += ['-stroke', params.stroke, '-strokewidth', str(params.stroke_width)]
    caption += [
        '-gravity', params.gravity,
        f'caption:{escape_caption_text(params.text)}',
        ')',
    ]

    return [
        magick_binary,
        '-size', f'{params.width}x{params.height}',
        f'xc:{params.background}',
        *caption,
        '-gravity', params.gravity,
        '-geometry', f'{params.offset_x:+d}{params.offset_y:+d}',
        '-composite',
        str(params.output_path),
    ]


class MagickRenderer:
    """Rendering collaborator backed by the ImageMagick CLI."""

    def __init__(self, magick_binary: str = MAGICK_BINARY, timeout: float = RENDER_TIMEOUT):
        self.magick_binary = magick_binary
        self.timeout = timeout

    def render(self, params: RenderParams) -> Path:
        """Render params to its output path and return that path."""
        output_path = Path(params.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        cmd = build_render_command(params, self.magick_binary)
        logger.debug(f"RENDER_COMMAND {' '.join(cmd)}")

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
            raise RenderError(output_path, f"ImageMagick binary not found: {self.magick_binary}") from e
        except subprocess.TimeoutExpired as e:
            raise RenderError(output_path, f"timed out after {self.timeout:.0f}s") from e

        if result.returncode != 0:
            stderr = (result.stderr or '').strip() or 'unknown error'
            raise RenderError(output_path, f"exit code {result.returncode}: {stderr}")

        if not output_path.exists():
            raise RenderError(output_path, "magick exited cleanly but wrote no file")

        return output_path
