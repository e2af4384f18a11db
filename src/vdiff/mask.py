"""Region masking: clear rectangles and restrict a raster to a bounding box."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from vdiff.raster import Raster

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Box:
    """Axis-aligned rectangle in device pixels."""

    left: int = 0
    top: int = 0
    width: int = 0
    height: int = 0

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def is_active(self) -> bool:
        """An all-zero box means "no bounds"."""
        return bool(self.left or self.top or self.width or self.height)

    def to_dict(self) -> dict[str, int]:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}


def _clamp(value: int, upper: int) -> int:
    return min(upper, max(0, int(value)))


def clear_rect(raster: Raster, x0: int, y0: int, x1: int, y1: int) -> int:
    """Zero every channel of the pixels in ``[x0, x1) x [y0, y1)``.

    Coordinates are clamped to the raster and may be given in either order.

    Returns:
        Number of pixels whose alpha was non-zero before clearing.
    """
    x0, x1 = sorted((_clamp(x0, raster.width), _clamp(x1, raster.width)))
    y0, y1 = sorted((_clamp(y0, raster.height), _clamp(y1, raster.height)))
    if x0 == x1 or y0 == y1:
        return 0

    region = raster.pixels[y0:y1, x0:x1]
    count = int(np.count_nonzero(region[..., 3]))
    region[...] = 0
    log.debug("clear rect %d/%d - %d/%d | %d pixels cleared", x0, y0, x1, y1, count)
    return count


def clear_outside(raster: Raster, box: Box) -> int:
    """Clear everything outside ``box`` as four non-overlapping border strips."""
    w, h = raster.width, raster.height
    cleared = clear_rect(raster, 0, 0, box.left, h)
    cleared += clear_rect(raster, box.left, 0, w, box.top)
    cleared += clear_rect(raster, box.left, box.bottom, w, h)
    cleared += clear_rect(raster, box.right, box.top, w, box.bottom)
    return cleared


def apply_mask(raster: Raster, bounds: Box, ignore: Iterable[Box] = ()) -> int:
    """Clear pixels outside ``bounds`` (when active) and inside every ignored box.

    Returns:
        Total number of previously opaque pixels cleared, i.e. the pixels
        excluded from the comparison.
    """
    cleared = 0
    if bounds.is_active:
        log.debug("apply bounds %s", bounds)
        cleared += clear_outside(raster, bounds)

    for box in ignore:
        cleared += clear_rect(raster, box.left, box.top, box.right, box.bottom)

    return cleared
