"""Visual regression engine: the entry points test suites call."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from vdiff.candidates import list_candidates
from vdiff.capture import (
    BoundingBoxResolver,
    ElementScreenshotCapable,
    ScreenshotCapable,
    capture_element,
    capture_viewport,
)
from vdiff.compare import ComparisonResult, compare
from vdiff.config import MISSING, CaptureFlag, EngineConfig
from vdiff.errors import CaptureUnavailableError, NoBaselineFoundError, VisualMismatchError
from vdiff.options import build_options
from vdiff.paths import ImagePaths
from vdiff.pixel_diff import PixelDiffer, pixelmatch_differ
from vdiff.raster import Raster, decode_png, encode_png
from vdiff.storage import FileStorage

log = logging.getLogger(__name__)


def mismatch_message(result: ComparisonResult) -> str:
    msg = f"Images are different by {result.difference_percent}%"
    if result.diff_artifact:
        msg += f" - differences are displayed in '{result.diff_artifact}'"
    return msg


class VisualEngine:
    """Compares captured images with their baselines.

    The config is fixed at construction; every call builds fresh options and
    a fresh result, so one engine can serve many comparisons.
    """

    def __init__(
        self,
        config: EngineConfig,
        *,
        storage: FileStorage | None = None,
        driver: ScreenshotCapable | ElementScreenshotCapable | None = None,
        bbox_resolver: BoundingBoxResolver | None = None,
        differ: PixelDiffer = pixelmatch_differ,
    ) -> None:
        self.config = config
        self.storage = storage or FileStorage()
        self.driver = driver
        self.bbox_resolver = bbox_resolver
        self.differ = differ

    def check_visual_differences(
        self, image: str, options: Mapping[str, Any] | None = None
    ) -> ComparisonResult:
        """Compare and assert that the images match.

        Raises:
            VisualMismatchError: If the best candidate exceeds the tolerance.
            ComparisonError: If the comparison could not be performed.
        """
        result = self.get_visual_differences(image, options)
        log.info(
            "Difference: %s%% | %d / %d pixels",
            result.difference_percent,
            result.diff_pixel_count,
            result.relevant_pixel_count,
        )
        if not result.match:
            raise VisualMismatchError(mismatch_message(result), result)
        return result

    def get_visual_differences(
        self, image: str, options: Mapping[str, Any] | None = None
    ) -> ComparisonResult:
        """Compare ``image`` with all its baselines without asserting.

        A non-matching comparison returns normally; only structural and IO
        failures raise.
        """
        opts = build_options(options, self.config, self.bbox_resolver)
        paths = ImagePaths(self.config, image, opts.compare_with, self.storage)
        log.info("check differences in %s ...", image)

        self._maybe_capture(paths, "actual", opts.capture_actual)
        self._maybe_capture(paths, "expected", opts.capture_expected)

        candidates = list_candidates(paths.require("expected"), self.storage)
        if not candidates:
            raise NoBaselineFoundError(f"no expected base image found for {image}")

        actual = self._load(paths.require("actual"))

        def diff_name(label: str) -> str:
            return str(paths.require("diff", label))

        def dump(raster: Raster, label: str) -> None:
            self._save(paths.require("output", label), encode_png(raster))

        outcome = compare(
            actual,
            candidates,
            opts,
            load=self._load,
            differ=self.differ,
            diff_name=diff_name if self.config.diff_enabled else None,
            dump=dump,
        )
        result = outcome.result
        if not result.match and result.diff_artifact and outcome.diff_png is not None:
            self._save(Path(result.diff_artifact), outcome.diff_png)
        return result

    def take_screenshot(self, name: str, which: str = "actual", element: str = "") -> Path:
        """Capture the viewport (or one element) as the actual or expected image."""
        paths = ImagePaths(self.config, name, storage=self.storage)
        target = paths.require("expected" if which == "expected" else "actual")
        self._capture(target, element)
        return target

    def _capture(self, target: Path, element: str = "") -> None:
        if element:
            if not isinstance(self.driver, ElementScreenshotCapable):
                raise CaptureUnavailableError("driver cannot capture single elements")
            capture_element(self.driver, element, target)
            return
        if not isinstance(self.driver, ScreenshotCapable):
            raise CaptureUnavailableError("no screenshot driver configured")
        scratch = self.config.output_dir or target.parent
        capture_viewport(self.driver, target, scratch, self.storage)

    def _maybe_capture(self, paths: ImagePaths, which: str, flag: CaptureFlag) -> None:
        if flag is False:
            return
        target = paths.require(which)
        if flag == MISSING:
            if self.storage.exists(target, "read"):
                return
            if which == "expected" and list_candidates(target, self.storage):
                return
            if not isinstance(self.driver, ScreenshotCapable):
                log.debug("%s image missing and no driver configured, not capturing", which)
                return
        self._capture(target)

    def _load(self, path: Path) -> Raster:
        log.debug("load image from %s ...", path)
        return decode_png(self.storage.read(path))

    def _save(self, path: Path, data: bytes) -> None:
        log.debug("save image to %s ...", path)
        self.storage.write(path, data)
