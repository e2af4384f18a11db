"""Pixel differ: thin wrapper around pixelmatch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import numpy as np
from pixelmatch import pixelmatch

from vdiff.raster import Raster

RGB = tuple[int, int, int]

# Luma coefficients used by pixelmatch's colour delta.
_Y_COEFFS = np.array([0.29889531, 0.58662247, 0.11448223])


@dataclass(frozen=True)
class DiffArgs:
    """Arguments handed to the pixel differ unchanged."""

    threshold: float = 0.1
    alpha: float = 0.5
    include_aa: bool = False
    diff_mask: bool = False
    aa_color: RGB = (128, 128, 128)
    diff_color: RGB = (255, 0, 0)
    diff_color_alt: RGB | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "threshold": self.threshold,
            "alpha": self.alpha,
            "include_aa": self.include_aa,
            "diff_mask": self.diff_mask,
            "aa_color": list(self.aa_color),
            "diff_color": list(self.diff_color),
            "diff_color_alt": list(self.diff_color_alt) if self.diff_color_alt else None,
        }


class PixelDiffer(Protocol):
    def __call__(self, expected: Raster, actual: Raster, args: DiffArgs) -> tuple[int, Raster]: ...


def _luma_on_white(pixels: np.ndarray) -> np.ndarray:
    """Brightness of each pixel after blending it over white."""
    rgb = pixels[..., :3].astype(np.float64)
    a = pixels[..., 3:4].astype(np.float64) / 255.0
    blended = 255.0 + (rgb - 255.0) * a
    return blended @ _Y_COEFFS


def _apply_alt_color(
    expected: Raster, actual: Raster, diff: np.ndarray, color: RGB, alt: RGB
) -> None:
    """Recolour flagged pixels where ``actual`` is darker than ``expected``."""
    flagged = np.all(diff[..., :3] == np.array(color, dtype=np.uint8), axis=-1)
    if not flagged.any():
        return
    darker = _luma_on_white(expected.pixels) > _luma_on_white(actual.pixels)
    diff[flagged & darker, :3] = alt


def pixelmatch_differ(expected: Raster, actual: Raster, args: DiffArgs) -> tuple[int, Raster]:
    """Count mismatching pixels between two equally sized rasters.

    Returns:
        (mismatch count, diff raster). Anti-aliased pixels are only counted
        when ``args.include_aa`` is set.
    """
    width, height = expected.size
    output = bytearray(width * height * 4)
    mismatch = pixelmatch(
        expected.pixels.tobytes(),
        actual.pixels.tobytes(),
        width,
        height,
        output,
        threshold=args.threshold,
        includeAA=args.include_aa,
        alpha=args.alpha,
        aa_color=tuple(args.aa_color),
        diff_color=tuple(args.diff_color),
        diff_mask=args.diff_mask,
    )
    diff = np.frombuffer(bytes(output), dtype=np.uint8).reshape(height, width, 4).copy()
    if args.diff_color_alt is not None and mismatch:
        _apply_alt_color(expected, actual, diff, args.diff_color, args.diff_color_alt)
    return int(mismatch), Raster(diff)
