# topmark:header:start
#
#   project      : QueryStruct
#   file         : tag_options.py
#   file_relpath : src/querystruct/cli/commands/tag_options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct `options` command.

Lists the field annotation options understood by the encoder and decoder.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from querystruct.cli.cmd_common import get_console
from querystruct.cli.options import OutputFormat, output_format_option
from querystruct.core.tags import TagOption

if TYPE_CHECKING:
    from querystruct.cli.console import ConsoleLike


@click.command(
    name="options",
    help="List the recognized field annotation options.",
)
@output_format_option()
def options_command(*, output_format: OutputFormat) -> None:
    """List the recognized field annotation options.

    Args:
        output_format (OutputFormat): Output format (text, json or markdown).
    """
    console: ConsoleLike = get_console(click.get_current_context())

    if output_format is OutputFormat.JSON:
        payload: list[dict[str, str]] = [
            {"option": option.key, "description": option.label} for option in TagOption
        ]
        console.print(json.dumps(payload, indent=2))
        return

    if output_format is OutputFormat.MARKDOWN:
        console.print("| Option | Description |")
        console.print("|---|---|")
        for option in TagOption:
            console.print(f"| `{option.key}` | {option.label} |")
        return

    width: int = max(len(option.key) for option in TagOption)
    for option in TagOption:
        console.print(f"{console.styled(option.key.ljust(width), bold=True)}  {option.label}")
