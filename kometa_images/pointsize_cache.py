"""
Optimal point size cache for Kometa Images.

Thousands of posters share the same (text, font, box, range) combinations
across runs. Measuring each one means an ImageMagick subprocess, so resolved
sizes are memoized in a persistent PointSizeStore.

Key Concepts:
- Cache key: SHA256 of the canonical JSON encoding of the ordered request
  (text, font, box width, box height, min size, max size)
- Clamping: the measured size is pinned to [min, max] before it is stored
- Failed measurements are never stored
"""

import hashlib
import json

from .constants import logger
from .errors import MeasurementError, PointSizeResolveError


def _as_size(name: str, value) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be an integer, not bool")
    return int(value)


def build_cache_key(
    text: str,
    font: str,
    box_width: int,
    box_height: int,
    min_point_size: int,
    max_point_size: int,
) -> str:
    """
    Build the cache key for a measurement request.

    JSON quoting keeps every field delimited, so requests that differ in any
    field cannot share a key no matter which characters the text contains.
    """
    canonical = json.dumps(
        [
            str(text),
            str(font),
            _as_size('box_width', box_width),
            _as_size('box_height', box_height),
            _as_size('min_point_size', min_point_size),
            _as_size('max_point_size', max_point_size),
        ],
        ensure_ascii=False,
        separators=(',', ':'),
    )
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()


def clamp_point_size(raw: int, min_point_size: int, max_point_size: int) -> int:
    """Pin raw to the nearest bound of [min_point_size, max_point_size]."""
    if min_point_size > max_point_size:
        raise ValueError(
            f"min_point_size {min_point_size} is greater than max_point_size {max_point_size}"
        )
    return max(min_point_size, min(max_point_size, raw))


class PointSizeCache:
    """
    Memoized point size lookup.

    Args:
        store: a PointSizeStore (or anything with ensure_table/get/put)
        measurer: any object with measure(text, font, box_width, box_height) -> int
    """

    def __init__(self, store, measurer):
        self.store = store
        self.measurer = measurer
        self.hits = 0
        self.misses = 0
        self.store.ensure_table()

    def resolve(
        self,
        text: str,
        font: str,
        box_width: int,
        box_height: int,
        min_point_size: int,
        max_point_size: int,
    ) -> int:
        """Return the largest point size that fits the box, clamped to the range."""
        min_point_size = _as_size('min_point_size', min_point_size)
        max_point_size = _as_size('max_point_size', max_point_size)
        if min_point_size < 1:
            raise ValueError(f"min_point_size must be positive, got {min_point_size}")
        if min_point_size > max_point_size:
            raise ValueError(
                f"min_point_size {min_point_size} is greater than max_point_size {max_point_size}"
            )

        key = build_cache_key(text, font, box_width, box_height, min_point_size, max_point_size)

        cached = self.store.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        try:
            raw = self.measurer.measure(text, font, box_width, box_height)
        except MeasurementError as e:
            logger.error(
                f"POINTSIZE_FAILED text={text!r} font={font} box={box_width}x{box_height} error={e}"
            )
            raise PointSizeResolveError(
                text, font, box_width, box_height, min_point_size, max_point_size, str(e)
            ) from e

        result = clamp_point_size(raw, min_point_size, max_point_size)
        if raw < min_point_size:
            logger.warning(
                f"POINTSIZE_TRUNCATED text={text!r} font={font} box={box_width}x{box_height} "
                f"measured={raw} min={min_point_size}"
            )
        elif raw > max_point_size:
            logger.debug(f"POINTSIZE_CAPPED text={text!r} measured={raw} max={max_point_size}")

        self.store.put(key, result)
        return result
