"""vdiff compare command -- report differences without asserting."""

from __future__ import annotations

from typing import Any

import click

from vdiff.commands._helpers import (
    comparison_options,
    engine_from_params,
    err_exit,
    options_from_params,
)
from vdiff.errors import VdiffError
from vdiff.formatters.json_fmt import to_json
from vdiff.formatters.tsv import RESULT_HEADER, render_tsv, result_rows


@click.command("compare")
@click.argument("image")
@comparison_options
@click.option("--no-header", is_flag=True, help="Omit TSV header.")
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
@click.pass_obj
def compare_cmd(
    obj: dict[str, Any] | None, image: str, no_header: bool, use_json: bool, **params: Any
) -> None:
    """Compare IMAGE with every baseline variant and print all results.

    Prints one row per baseline candidate; the best match is reported on
    stderr. Differences do not change the exit code; exit 2 only when the
    comparison could not be performed.
    """
    try:
        engine = engine_from_params((obj or {}).get("config"), params)
        result = engine.get_visual_differences(image, options_from_params(params))
    except (VdiffError, ValueError, OSError) as exc:
        err_exit(str(exc))

    if use_json:
        click.echo(to_json(result.to_dict()))
        return
    header = None if no_header else RESULT_HEADER
    click.echo(render_tsv(result_rows(result), header), nl=False)
    best = result.variation_label or "-"
    click.echo(
        f"best: {best} ({'match' if result.match else 'differs'}, "
        f"{result.difference_percent:.4f}%)",
        err=True,
    )
