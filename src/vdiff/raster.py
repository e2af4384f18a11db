"""RGBA raster type and PNG codec."""

from __future__ import annotations

import io
from dataclasses import dataclass

import numpy as np
from PIL import Image


@dataclass
class Raster:
    """Decoded image: ``pixels`` is a ``(height, width, 4)`` uint8 RGBA array."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"expected an HxWx4 array, got shape {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            self.pixels = self.pixels.astype(np.uint8)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def copy(self) -> Raster:
        return Raster(self.pixels.copy())

    @classmethod
    def blank(cls, width: int, height: int) -> Raster:
        """Return a fully transparent raster."""
        return cls(np.zeros((height, width, 4), dtype=np.uint8))


def from_image(img: Image.Image) -> Raster:
    """Convert a Pillow image of any mode to a Raster."""
    return Raster(np.array(img.convert("RGBA"), dtype=np.uint8))


def decode_png(data: bytes) -> Raster:
    """Decode image bytes into an RGBA raster.

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a readable image.
    """
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        return from_image(img)


def encode_png(raster: Raster) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(raster.pixels).save(buf, format="PNG")
    return buf.getvalue()
