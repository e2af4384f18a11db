"""vdiff candidates command -- list the baselines an image is compared with."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from vdiff.candidates import list_candidates
from vdiff.commands._helpers import engine_from_params, err_exit
from vdiff.errors import VdiffError
from vdiff.formatters.json_fmt import to_json
from vdiff.formatters.tsv import CANDIDATE_HEADER, candidate_rows, render_tsv
from vdiff.paths import ImagePaths


@click.command("candidates")
@click.argument("image")
@click.option("--expected-dir", type=click.Path(file_okay=False, path_type=Path), default=None)
@click.option("--compare-with", default="", help="Baseline name to look up instead of IMAGE.")
@click.option("--no-header", is_flag=True, help="Omit TSV header.")
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
@click.pass_obj
def candidates_cmd(
    obj: dict[str, Any] | None,
    image: str,
    expected_dir: Path | None,
    compare_with: str,
    no_header: bool,
    use_json: bool,
) -> None:
    """List the baseline files IMAGE would be compared against."""
    try:
        engine = engine_from_params((obj or {}).get("config"), {"expected_dir": expected_dir})
        paths = ImagePaths(engine.config, image, compare_with, engine.storage)
        found = list_candidates(paths.require("expected"), engine.storage)
    except (VdiffError, OSError) as exc:
        err_exit(str(exc))

    if use_json:
        click.echo(to_json([{"path": str(c.path), "variation": c.variation} for c in found]))
        return
    header = None if no_header else CANDIDATE_HEADER
    click.echo(render_tsv(candidate_rows(found), header), nl=False)
