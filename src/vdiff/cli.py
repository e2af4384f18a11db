from __future__ import annotations

import logging
from pathlib import Path

import click

from vdiff import __version__
from vdiff.commands.candidates import candidates_cmd
from vdiff.commands.check import check_cmd
from vdiff.commands.compare import compare_cmd


def _setup_logging(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Enable DEBUG logging on stderr for -v."""
    if not value:
        return
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("vdiff").setLevel(logging.DEBUG)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="vdiff")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_setup_logging,
    help="Debug logging on stderr.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="PATH",
    help="JSON engine config (default: ./vdiff.json when present).",
)
@click.pass_context
def main(ctx: click.Context, config_path: Path | None) -> None:
    """vdiff: visual regression checks against baseline screenshots."""
    ctx.ensure_object(dict)
    ctx.obj["config"] = config_path


main.add_command(check_cmd, name="check")
main.add_command(compare_cmd, name="compare")
main.add_command(candidates_cmd, name="candidates")


if __name__ == "__main__":
    main()
