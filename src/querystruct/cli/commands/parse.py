# topmark:header:start
#
#   project      : QueryStruct
#   file         : parse.py
#   file_relpath : src/querystruct/cli/commands/parse.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct `parse` command.

Parses a query string into its multimap and prints it as JSON.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from querystruct.cli.cmd_common import get_codec_config, get_console, read_query
from querystruct.core.values import QueryValues

if TYPE_CHECKING:
    from querystruct.cli.console import ConsoleLike
    from querystruct.config.model import CodecConfig


@click.command(
    name="parse",
    help="Print the multimap of a query string as JSON (reads STDIN without QUERY).",
)
@click.argument("query", required=False)
def parse_command(*, query: str | None) -> None:
    """Print the multimap of a query string as JSON.

    Args:
        query (str | None): The query string; ``None`` or ``-`` reads STDIN.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: CodecConfig = get_codec_config(ctx)

    values: QueryValues = QueryValues.parse(
        read_query(query),
        keep_blank_values=config.keep_blank_values,
        separator=config.separator,
    )
    console.print(json.dumps(values, indent=2))
