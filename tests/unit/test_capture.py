"""Tests for screenshot capture helpers."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import WHITE, FakeDriver, ViewportOnlyDriver, make_raster, read_png, write_png
from PIL import Image

from vdiff.capture import (
    BoundingBoxResolver,
    ElementScreenshotCapable,
    ScreenshotCapable,
    box_from_client_rect,
    capture_element,
    capture_viewport,
)
from vdiff.mask import Box
from vdiff.storage import FileStorage


class _ExtensionDriver:
    """Picks the image format from the file extension, like most browser drivers."""

    def save_screenshot(self, path: Path) -> None:
        Image.new("RGBA", (4, 4), (255, 255, 255, 255)).save(path)


class _FailingDriver:
    def save_screenshot(self, path: Path) -> None:
        path.write_bytes(b"partial")
        raise RuntimeError("browser went away")


class TestBoxFromClientRect:
    def test_unit_density(self) -> None:
        assert box_from_client_rect(10.7, 20.2, 30.9, 40.0) == Box(10, 20, 30, 40)

    def test_scaled(self) -> None:
        assert box_from_client_rect(10, 20, 30, 40, density=2) == Box(20, 40, 60, 80)

    @pytest.mark.parametrize("density", [None, 0])
    def test_missing_density(self, density: float | None) -> None:
        assert box_from_client_rect(1, 2, 3, 4, density=density) == Box(1, 2, 3, 4)


class TestProtocols:
    def test_fake_driver_capabilities(self) -> None:
        driver = FakeDriver()
        assert isinstance(driver, ScreenshotCapable)
        assert isinstance(driver, ElementScreenshotCapable)
        assert not isinstance(driver, BoundingBoxResolver)

    def test_viewport_only(self) -> None:
        assert not isinstance(ViewportOnlyDriver(), ElementScreenshotCapable)


class TestCaptureViewport:
    def test_replaces_target(self, tmp_path: Path) -> None:
        target = write_png(tmp_path / "actual" / "shot.png", make_raster(3, 3))
        scratch = tmp_path / "scratch"
        driver = FakeDriver(make_raster(10, 10, WHITE))
        capture_viewport(driver, target, scratch, FileStorage())
        assert read_png(target).size == (10, 10)
        assert driver.shots[0].parent == scratch
        assert driver.shots[0].name.endswith(".temp.png")
        assert list(scratch.iterdir()) == []

    def test_temp_names_unique(self, tmp_path: Path) -> None:
        driver = FakeDriver()
        for name in ("a.png", "b.png"):
            capture_viewport(driver, tmp_path / name, tmp_path, FileStorage())
        assert driver.shots[0] != driver.shots[1]

    def test_temp_file_has_image_extension(self, tmp_path: Path) -> None:
        target = tmp_path / "shot.png"
        capture_viewport(_ExtensionDriver(), target, tmp_path / "scratch", FileStorage())
        assert read_png(target).size == (4, 4)

    def test_failure_cleans_temp(self, tmp_path: Path) -> None:
        target = write_png(tmp_path / "shot.png", make_raster())
        scratch = tmp_path / "scratch"
        with pytest.raises(RuntimeError):
            capture_viewport(_FailingDriver(), target, scratch, FileStorage())
        assert read_png(target).size == (10, 10)
        assert list(scratch.iterdir()) == []


class TestCaptureElement:
    def test_delegates(self, tmp_path: Path) -> None:
        driver = FakeDriver()
        target = tmp_path / "logo.png"
        capture_element(driver, "#logo", target)
        assert driver.element_shots == [("#logo", target)]
        assert target.is_file()
