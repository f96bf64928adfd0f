# topmark:header:start
#
#   project      : QueryStruct
#   file         : version.py
#   file_relpath : src/querystruct/cli/commands/version.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct `version` command.

Prints the QueryStruct version as installed in the active Python environment.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import click

from querystruct.cli.cmd_common import get_console, get_effective_verbosity
from querystruct.cli.options import OutputFormat, output_format_option
from querystruct.constants import QUERYSTRUCT_VERSION

if TYPE_CHECKING:
    from querystruct.cli.console import ConsoleLike


@click.command(
    name="version",
    help="Show the current version of QueryStruct.",
)
@output_format_option()
def version_command(*, output_format: OutputFormat) -> None:
    """Show the current version of QueryStruct.

    Args:
        output_format (OutputFormat): Output format (text, json or markdown).
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    verbose: bool = get_effective_verbosity(ctx) <= logging.INFO

    if output_format is OutputFormat.JSON:
        console.print(json.dumps({"version": QUERYSTRUCT_VERSION}))
    elif output_format is OutputFormat.MARKDOWN:
        console.print("# QueryStruct Version\n")
        console.print(f"**QueryStruct version: {QUERYSTRUCT_VERSION}**")
    elif verbose:
        console.print(console.styled("QueryStruct version:\n", bold=True, underline=True))
        console.print(f"    {console.styled(QUERYSTRUCT_VERSION, bold=True)}")
    else:
        console.print(console.styled(QUERYSTRUCT_VERSION, bold=True))
