"""Shared helpers for unit tests."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from vdiff.config import EngineConfig
from vdiff.pixel_diff import DiffArgs
from vdiff.raster import Raster

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def make_raster(
    width: int = 10,
    height: int = 10,
    color: tuple[int, int, int, int] = BLACK,
) -> Raster:
    """Return a solid-color raster."""
    return Raster(np.full((height, width, 4), color, dtype=np.uint8))


def with_pixels(
    raster: Raster,
    points: Sequence[tuple[int, int]],
    color: tuple[int, int, int, int] = WHITE,
) -> Raster:
    """Return a copy of ``raster`` with the (x, y) ``points`` painted ``color``."""
    out = raster.copy()
    for x, y in points:
        out.pixels[y, x] = color
    return out


def write_png(path: Path, raster: Raster) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(raster.pixels).save(path, format="PNG")
    return path


def read_png(path: Path) -> Raster:
    with Image.open(path) as img:
        return Raster(np.array(img.convert("RGBA"), dtype=np.uint8))


# Scattered points (no two adjacent) so every one is a plain, non-anti-aliased diff.
SPARSE_POINTS = [(1, 1), (3, 1), (5, 1), (7, 1), (1, 3), (3, 3), (5, 3), (7, 3), (1, 5), (3, 5)]


class ScriptedDiffer:
    """Pixel differ returning preset mismatch counts, one per call.

    Writes into a single reused output buffer the way a real differ may,
    filling it with the call index so snapshots can be told apart.
    """

    def __init__(self, counts: Sequence[int]) -> None:
        self.counts = list(counts)
        self.calls: list[tuple[Raster, Raster, DiffArgs]] = []
        self._buffer: Raster | None = None

    def __call__(self, expected: Raster, actual: Raster, args: DiffArgs) -> tuple[int, Raster]:
        index = len(self.calls)
        self.calls.append((expected, actual, args))
        if self._buffer is None:
            self._buffer = Raster.blank(*expected.size)
        self._buffer.pixels[...] = (index, index, index, 255)
        return self.counts[index], self._buffer


class FakeDriver:
    """Capture driver writing a fixed raster for every screenshot."""

    def __init__(self, raster: Raster | None = None) -> None:
        self.raster = raster or make_raster()
        self.shots: list[Path] = []
        self.element_shots: list[tuple[str, Path]] = []

    def save_screenshot(self, path: Path) -> None:
        self.shots.append(path)
        write_png(path, self.raster)

    def save_element_screenshot(self, selector: str, path: Path) -> None:
        self.element_shots.append((selector, path))
        write_png(path, self.raster)


class ViewportOnlyDriver:
    def __init__(self) -> None:
        self.shots: list[Path] = []

    def save_screenshot(self, path: Path) -> None:
        self.shots.append(path)
        write_png(path, make_raster())


@pytest.fixture
def config(tmp_path: Path) -> EngineConfig:
    """Engine config with every folder under tmp_path; capture disabled."""
    return EngineConfig(
        expected_dir=tmp_path / "base",
        actual_dir=tmp_path / "actual",
        diff_dir=tmp_path / "diff",
        output_dir=tmp_path / "output",
        capture_actual=False,
        capture_expected=False,
    )
