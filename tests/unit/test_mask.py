"""Tests for region masking."""

from __future__ import annotations

import numpy as np
import pytest
from conftest import make_raster

from vdiff.mask import Box, apply_mask, clear_rect


class TestClearRect:
    def test_counts_and_zeroes_region(self) -> None:
        r = make_raster(10, 10)
        assert clear_rect(r, 2, 3, 5, 7) == 12
        assert not r.pixels[3:7, 2:5].any()
        assert np.count_nonzero(r.pixels[..., 3]) == 100 - 12

    def test_reversed_coordinates(self) -> None:
        r = make_raster(10, 10)
        assert clear_rect(r, 5, 7, 2, 3) == 12

    def test_clamped_to_raster(self) -> None:
        r = make_raster(4, 4)
        assert clear_rect(r, -10, -10, 100, 2) == 8
        assert r.pixels.shape == (4, 4, 4)
        assert r.pixels[2:, :, 3].all()

    @pytest.mark.parametrize("rect", [(3, 0, 3, 10), (0, 4, 10, 4), (20, 20, 30, 30)])
    def test_empty_rect_is_noop(self, rect: tuple[int, int, int, int]) -> None:
        r = make_raster(10, 10)
        assert clear_rect(r, *rect) == 0
        assert r.pixels[..., 3].all()

    def test_second_clear_counts_zero(self) -> None:
        r = make_raster(10, 10)
        assert clear_rect(r, 0, 0, 4, 4) == 16
        assert clear_rect(r, 0, 0, 4, 4) == 0

    def test_transparent_pixels_not_counted(self) -> None:
        r = make_raster(4, 4, (10, 20, 30, 0))
        r.pixels[0, 0] = (1, 2, 3, 1)
        assert clear_rect(r, 0, 0, 4, 4) == 1
        assert not r.pixels.any()


class TestApplyMask:
    def test_inactive_bounds_clear_nothing(self) -> None:
        r = make_raster(10, 10)
        assert apply_mask(r, Box()) == 0
        assert r.pixels[..., 3].all()

    @pytest.mark.parametrize(
        "box",
        [
            Box(2, 3, 4, 5),
            Box(0, 0, 10, 10),
            Box(0, 0, 1, 1),
            Box(9, 9, 1, 1),
            Box(4, 0, 2, 10),
        ],
    )
    def test_bounds_area_conservation(self, box: Box) -> None:
        r = make_raster(10, 10)
        cleared = apply_mask(r, box)
        assert cleared + box.width * box.height == 100
        inside = r.pixels[box.top : box.bottom, box.left : box.right, 3]
        assert inside.all()

    def test_bounds_left_half(self) -> None:
        r = make_raster(10, 10)
        assert apply_mask(r, Box(0, 0, 5, 10)) == 50
        assert not r.pixels[:, 5:].any()

    def test_bounds_partly_outside_raster(self) -> None:
        r = make_raster(10, 10)
        assert apply_mask(r, Box(8, 8, 10, 10)) == 96

    def test_ignore_regions(self) -> None:
        r = make_raster(10, 10)
        cleared = apply_mask(r, Box(), [Box(0, 0, 2, 2), Box(5, 5, 3, 1)])
        assert cleared == 7

    def test_overlapping_regions_counted_once(self) -> None:
        r = make_raster(10, 10)
        cleared = apply_mask(r, Box(), [Box(0, 0, 4, 4), Box(2, 2, 4, 4), Box(0, 0, 4, 4)])
        assert cleared == 16 + 16 - 4

    def test_ignore_inside_excluded_bounds(self) -> None:
        r = make_raster(10, 10)
        cleared = apply_mask(r, Box(0, 0, 5, 10), [Box(6, 0, 2, 2), Box(4, 0, 2, 1)])
        assert cleared == 50 + 1
