"""
Exception hierarchy for Kometa Images.
"""

from pathlib import Path
from typing import Optional, Sequence


class KometaImagesError(Exception):
    """Base class for all errors raised by this package."""


class StoreUnavailableError(KometaImagesError):
    """The point size store could not be opened, created or queried."""

    def __init__(self, db_path: Path, reason: str):
        self.db_path = Path(db_path)
        self.reason = reason
        super().__init__(f"Point size store unavailable at {self.db_path}: {reason}")


class MeasurementError(KometaImagesError):
    """The caption sizing subprocess failed or printed something unusable."""

    def __init__(self, message: str, command: Optional[Sequence[str]] = None, stderr: str = ''):
        self.command = list(command) if command else []
        self.stderr = stderr
        detail = f"{message}: {stderr}" if stderr else message
        super().__init__(detail)


class PointSizeResolveError(KometaImagesError):
    """Resolving a point size failed for one specific measurement request."""

    def __init__(self, text: str, font: str, box_width: int, box_height: int,
                 min_point_size: int, max_point_size: int, reason: str):
        self.text = text
        self.font = font
        self.box_width = box_width
        self.box_height = box_height
        self.min_point_size = min_point_size
        self.max_point_size = max_point_size
        self.reason = reason
        super().__init__(
            f"Could not resolve point size for text={text!r} font={font} "
            f"box={box_width}x{box_height} range={min_point_size}-{max_point_size}: {reason}"
        )


class RenderError(KometaImagesError):
    """An ImageMagick render did not produce its output image."""

    def __init__(self, output_path: Path, reason: str):
        self.output_path = Path(output_path)
        self.reason = reason
        super().__init__(f"Render failed for {self.output_path}: {reason}")


class TranslationError(KometaImagesError):
    """A translation file is missing, malformed or lacks a property."""


class FontError(KometaImagesError):
    """A required font is missing or cannot be loaded."""


class ChecksumError(KometaImagesError):
    """Bundled assets do not match their checksum manifest."""
