# topmark:header:start
#
#   project      : QueryStruct
#   file         : main.py
#   file_relpath : src/querystruct/cli/main.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct command line entry point.

The group callback initializes shared state once and stores it on ``ctx.obj``:
the console, the resolved verbosity, and the configuration sources
(``--config``/``--no-config``). The configuration itself is loaded lazily by
the commands that need it (see `querystruct.cli.cmd_common.get_codec_config`).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from querystruct.cli.commands.config import config_command
from querystruct.cli.commands.decode import canonicalize_command, decode_command
from querystruct.cli.commands.parse import parse_command
from querystruct.cli.commands.schema import schema_command
from querystruct.cli.commands.tag_options import options_command
from querystruct.cli.commands.version import version_command
from querystruct.cli.console import ClickConsole
from querystruct.cli.options import (
    common_color_options,
    common_verbose_options,
    resolve_color,
    resolve_verbosity,
)
from querystruct.config.logging import get_logger, resolve_env_log_level, setup_logging

if TYPE_CHECKING:
    from querystruct.cli.console import ConsoleLike

logger = get_logger(__name__)


def init_common_state(
    ctx: click.Context,
    *,
    verbose: int,
    quiet: int,
    no_color: bool,
    config_files: tuple[str, ...],
    no_config: bool,
) -> None:
    """Initialize shared state (verbosity, color, config sources) on the Click context.

    Args:
        ctx (click.Context): Current Click context; will have ``obj`` and ``color`` set.
        verbose (int): Count of ``-v`` flags.
        quiet (int): Count of ``-q`` flags.
        no_color (bool): Whether ``--no-color`` was passed.
        config_files (tuple[str, ...]): Extra config files from ``--config``.
        no_config (bool): Skip discovery of config files in the working directory.
    """
    ctx.obj = ctx.obj or {}

    level_cli: int = resolve_verbosity(verbose, quiet)
    ctx.obj["verbosity_level"] = level_cli

    # QUERYSTRUCT_LOG_LEVEL wins over -v/-q for internal logging
    level_env: int | None = resolve_env_log_level()
    ctx.obj["log_level"] = level_env if level_env is not None else level_cli
    setup_logging(level=ctx.obj["log_level"])

    enable_color: bool = resolve_color(no_color=no_color)
    ctx.obj["color_enabled"] = enable_color
    ctx.color = enable_color
    ctx.obj["console"] = ClickConsole(enable_color=enable_color)

    ctx.obj["config_files"] = config_files
    ctx.obj["no_config"] = no_config


@click.group(
    cls=click.Group,
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    help="QueryStruct: encode typed records as query strings and back.",
)
@common_verbose_options
@common_color_options
@click.option(
    "--config",
    "config_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Additional config file(s) merged after discovered ones.",
)
@click.option(
    "--no-config",
    is_flag=True,
    help="Do not discover pyproject.toml / querystruct.toml in the working directory.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: int,
    quiet: int,
    no_color: bool,
    config_files: tuple[str, ...],
    no_config: bool,
) -> None:
    """Entry point for the QueryStruct CLI."""
    init_common_state(
        ctx,
        verbose=verbose,
        quiet=quiet,
        no_color=no_color,
        config_files=config_files,
        no_config=no_config,
    )
    console: ConsoleLike = ctx.obj["console"]

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


cli.add_command(version_command)

cli.add_command(options_command)

cli.add_command(config_command)

cli.add_command(parse_command)

cli.add_command(schema_command)

cli.add_command(decode_command)

cli.add_command(canonicalize_command)

if __name__ == "__main__":
    cli()
