"""TSV rendering of comparison results and candidate listings.

Numbers are printed raw and empty fields as '-'.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from vdiff.candidates import Candidate
from vdiff.compare import ComparisonResult

RESULT_HEADER = ("variation", "match", "difference", "diff_pixels", "relevant_pixels", "diff_image")
CANDIDATE_HEADER = ("path", "variation")


def _cell(value: Any) -> str:
    text = "" if value is None else str(value)
    return text.replace("\t", "\\t").replace("\n", "\\n") or "-"


def render_tsv(rows: Iterable[Sequence[Any]], header: Sequence[str] | None = None) -> str:
    """Render rows (and an optional header) as newline-terminated TSV text."""
    table = [header, *rows] if header else list(rows)
    return "".join("\t".join(_cell(v) for v in row) + "\n" for row in table)


def result_rows(result: ComparisonResult) -> list[tuple[Any, ...]]:
    """One row per evaluated candidate, in discovery order."""
    return [
        (
            r.variation_label,
            "yes" if r.match else "no",
            f"{r.difference_percent:.4f}",
            r.diff_pixel_count,
            r.relevant_pixel_count,
            r.diff_artifact,
        )
        for r in result.per_candidate
    ]


def candidate_rows(candidates: Iterable[Candidate]) -> list[tuple[str, str]]:
    return [(str(c.path), c.variation) for c in candidates]
