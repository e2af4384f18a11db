"""Multi-candidate comparison: pick the baseline variant closest to the actual image."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from vdiff.candidates import Candidate
from vdiff.errors import DimensionMismatchError, EmptyActualImageError, NoBaselineFoundError
from vdiff.mask import apply_mask
from vdiff.options import ComparisonOptions
from vdiff.pixel_diff import PixelDiffer, pixelmatch_differ
from vdiff.raster import Raster, encode_png

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateResult:
    """Outcome of comparing the actual image with one baseline candidate."""

    match: bool
    difference_percent: float
    diff_artifact: str
    diff_pixel_count: int
    total_pixel_count: int
    relevant_pixel_count: int
    variation_label: str


@dataclass(frozen=True)
class ComparisonResult:
    """Best candidate's fields plus every candidate's result in discovery order."""

    match: bool
    difference_percent: float
    diff_artifact: str
    diff_pixel_count: int
    total_pixel_count: int
    relevant_pixel_count: int
    variation_label: str
    per_candidate: tuple[CandidateResult, ...] = ()

    @classmethod
    def from_best(
        cls, best: CandidateResult, per_candidate: Sequence[CandidateResult]
    ) -> ComparisonResult:
        return cls(**asdict(best), per_candidate=tuple(per_candidate))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CompareOutcome:
    """Comparison result plus the encoded diff image of the best candidate."""

    result: ComparisonResult
    diff_png: bytes | None


def difference_percent(diff_pixels: int, relevant_pixels: int) -> float:
    """Percentage of relevant pixels that differ, rounded to 4 places.

    A fully masked image has nothing left to compare and counts as 0%.
    """
    if relevant_pixels <= 0:
        return 0.0
    return round(100 * diff_pixels / relevant_pixels, 4)


def compare(
    actual: Raster,
    candidates: Sequence[Candidate],
    options: ComparisonOptions,
    *,
    load: Callable[[Path], Raster],
    differ: PixelDiffer = pixelmatch_differ,
    diff_name: Callable[[str], str] | None = None,
    dump: Callable[[Raster, str], None] | None = None,
) -> CompareOutcome:
    """Compare ``actual`` against every candidate and keep the best match.

    ``actual`` is masked in place once and reused for every candidate.
    Candidates are evaluated strictly in order; the lowest mismatch count
    wins and ties keep the earlier candidate.

    Args:
        actual: The captured image. Mutated by masking.
        candidates: Baselines in discovery order.
        options: Sanitized comparison options.
        load: Decodes a candidate file.
        differ: Pixel differ, ``pixelmatch_differ`` by default.
        diff_name: Maps a variation label to the diff artifact name. None
            when diff output is disabled.
        dump: Receives each masked raster with a label (``actual``,
            ``expected``, ``expected.1``, ...) when intermediate dumps are on.

    Returns:
        CompareOutcome whose ``diff_png`` is the best candidate's diff image.

    Raises:
        NoBaselineFoundError: If ``candidates`` is empty.
        EmptyActualImageError: If ``actual`` has zero height.
        DimensionMismatchError: If any candidate's size differs from ``actual``.
    """
    if not candidates:
        raise NoBaselineFoundError("no expected base image found")
    if not actual.height:
        raise EmptyActualImageError("current screenshot is empty (zero height)")

    total_pixels = actual.width * actual.height
    excluded = apply_mask(actual, options.bounds, options.ignore)
    relevant_pixels = total_pixels - excluded
    if relevant_pixels <= 0:
        log.warning("every pixel is masked out, treating the comparison as a match")
    if dump is not None and options.dump_intermediate:
        dump(actual, "actual")

    results: list[CandidateResult] = []
    best: CandidateResult | None = None
    best_png: bytes | None = None

    for i, candidate in enumerate(candidates):
        expected = load(candidate.path)
        if expected.size != actual.size:
            raise DimensionMismatchError(
                f"image sizes do not match: {candidate.path.name} is "
                f"{expected.width}x{expected.height}, actual is {actual.width}x{actual.height}"
            )

        apply_mask(expected, options.bounds, options.ignore)
        if dump is not None and options.dump_intermediate:
            dump(expected, f"expected.{i}" if i else "expected")

        diff_pixels, diff_raster = differ(expected, actual, options.args)
        percent = difference_percent(diff_pixels, relevant_pixels)
        match = percent <= options.tolerance
        artifact = diff_name(candidate.variation) if diff_name and not match else ""

        result = CandidateResult(
            match=match,
            difference_percent=percent,
            diff_artifact=artifact,
            diff_pixel_count=diff_pixels,
            total_pixel_count=total_pixels,
            relevant_pixel_count=relevant_pixels,
            variation_label=candidate.variation,
        )
        results.append(result)
        log.debug(
            "candidate %s: %d diff pixels (%s%%)", candidate.path.name, diff_pixels, percent
        )

        if best is None or diff_pixels < best.diff_pixel_count:
            # Encode now: the differ may hand back a reused buffer.
            best_png = encode_png(diff_raster)
            best = result

    assert best is not None
    return CompareOutcome(result=ComparisonResult.from_best(best, results), diff_png=best_png)
