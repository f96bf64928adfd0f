# topmark:header:start
#
#   project      : QueryStruct
#   file         : config.py
#   file_relpath : src/querystruct/cli/commands/config.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct `config` command.

Prints the effective configuration (defaults merged with discovered and
explicit config files) as TOML, ready to be pasted into ``querystruct.toml``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from querystruct.cli.cmd_common import get_codec_config, get_console
from querystruct.cli.options import OutputFormat, output_format_option
from querystruct.config.io import to_toml

if TYPE_CHECKING:
    from querystruct.cli.console import ConsoleLike
    from querystruct.config.model import CodecConfig


@click.command(
    name="config",
    help="Print the effective configuration as TOML.",
)
@output_format_option()
def config_command(*, output_format: OutputFormat) -> None:
    """Print the effective configuration.

    Args:
        output_format (OutputFormat): ``text``/``markdown`` print TOML, ``json`` a
            JSON object including the merged sources.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: CodecConfig = get_codec_config(ctx)

    if output_format is OutputFormat.JSON:
        payload = {"config": config.to_toml_dict(), "sources": list(config.config_files)}
        console.print(json.dumps(payload, indent=2))
        return

    document: str = to_toml(config.to_toml_dict())
    if output_format is OutputFormat.MARKDOWN:
        console.print("```toml")
        console.print(document.rstrip("\n"))
        console.print("```")
        return

    for source in config.config_files:
        console.print(f"# merged: {source}")
    console.print(document.rstrip("\n"))
