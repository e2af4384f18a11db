"""Exception taxonomy for vdiff.

``ComparisonError`` and its subclasses mean the comparison could not be
performed. ``VisualMismatchError`` means it was performed and the images
differ beyond the tolerance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vdiff.compare import ComparisonResult


class VdiffError(Exception):
    """Base class for all vdiff errors."""


class ConfigError(VdiffError):
    """Engine configuration file is unreadable or malformed."""


class ComparisonError(VdiffError):
    """The comparison could not be performed."""


class NoBaselineFoundError(ComparisonError):
    pass


class EmptyActualImageError(ComparisonError):
    pass


class DimensionMismatchError(ComparisonError, ValueError):
    pass


class MissingPathConfigurationError(ComparisonError):
    pass


class ImageFileNotFoundError(ComparisonError, FileNotFoundError):
    pass


class FileNotWritableError(ComparisonError, PermissionError):
    pass


class ElementNotFoundError(ComparisonError):
    pass


class ElementNotUniqueError(ComparisonError):
    pass


class CaptureUnavailableError(ComparisonError):
    """A screenshot was requested but no capture driver is configured."""


class VisualMismatchError(AssertionError):
    """Raised by the asserting entry point when the best candidate does not match."""

    def __init__(self, message: str, result: ComparisonResult) -> None:
        super().__init__(message)
        self.result = result
