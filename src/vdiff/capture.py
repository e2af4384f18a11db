"""Screenshot capture interfaces.

Automation backends (Playwright, WebDriver, ...) implement these protocols;
the engine only calls the protocol methods.
"""

from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Protocol, runtime_checkable

from vdiff.mask import Box
from vdiff.storage import FileStorage

log = logging.getLogger(__name__)


@runtime_checkable
class ScreenshotCapable(Protocol):
    def save_screenshot(self, path: Path) -> None:
        """Write a PNG of the current viewport to ``path``."""
        ...


@runtime_checkable
class ElementScreenshotCapable(Protocol):
    def save_element_screenshot(self, selector: str, path: Path) -> None:
        """Write a PNG of the single element matching ``selector`` to ``path``.

        Raises:
            ElementNotFoundError: If nothing matches ``selector``.
        """
        ...


@runtime_checkable
class BoundingBoxResolver(Protocol):
    def bounding_box(self, selector: str) -> Box:
        """Return the element's box in device pixels.

        Raises:
            ElementNotFoundError: If nothing matches ``selector``.
            ElementNotUniqueError: If several elements match.
        """
        ...


def box_from_client_rect(
    x: float, y: float, width: float, height: float, density: float | None = 1
) -> Box:
    """Scale a CSS-pixel client rect by the device pixel ratio."""
    scale = int(density or 1) or 1
    return Box(
        left=int(scale * x),
        top=int(scale * y),
        width=int(scale * width),
        height=int(scale * height),
    )


def _temp_name() -> str:
    # Random so that parallel workers sharing a scratch dir never collide.
    return f"~{secrets.token_hex(4)}.temp.png"


def capture_viewport(
    driver: ScreenshotCapable, target: Path, scratch_dir: Path, storage: FileStorage
) -> None:
    """Screenshot the viewport into ``target``, replacing any existing file."""
    storage.ensure_directory(scratch_dir)
    temp = scratch_dir / _temp_name()
    log.debug("capture viewport -> %s (via %s)", target, temp.name)
    try:
        driver.save_screenshot(temp)
        storage.delete(target)
        storage.move(temp, target)
    finally:
        storage.delete(temp)


def capture_element(driver: ElementScreenshotCapable, selector: str, target: Path) -> None:
    log.debug("capture element %s -> %s", selector, target)
    driver.save_element_screenshot(selector, target)
