# topmark:header:start
#
#   project      : QueryStruct
#   file         : schema.py
#   file_relpath : src/querystruct/cli/commands/schema.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct `schema` command.

Lists the flattened key patterns of a record type, one line per leaf field.
Sequence indices and map keys appear as ``<i>`` and ``<key>`` placeholders.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from querystruct.cli.cmd_common import (
    codec_errors,
    get_codec_config,
    get_console,
    resolve_record_type,
)
from querystruct.cli.options import OutputFormat, output_format_option
from querystruct.schema.builder import build_schema

if TYPE_CHECKING:
    from querystruct.cli.console import ConsoleLike
    from querystruct.config.model import CodecConfig
    from querystruct.schema.model import RecordSchema


@click.command(
    name="schema",
    help="List the key patterns of a record type given as 'module:QualName'.",
)
@click.argument("target")
@output_format_option()
def schema_command(*, target: str, output_format: OutputFormat) -> None:
    """List the key patterns of a record type.

    Args:
        target (str): Record type as ``package.module:QualName``.
        output_format (OutputFormat): Output format (text, json or markdown).
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: CodecConfig = get_codec_config(ctx)
    record_type: type = resolve_record_type(target)

    with codec_errors():
        schema: RecordSchema = build_schema(record_type, config.metadata_keys)

    rows: list[dict[str, Any]] = [
        {
            "key": key,
            "field": spec.attr,
            "type": spec.info.describe(),
            "options": sorted(spec.tag.options),
        }
        for key, spec in schema.iter_keys()
    ]

    if output_format is OutputFormat.JSON:
        console.print(json.dumps(rows, indent=2))
        return

    if output_format is OutputFormat.MARKDOWN:
        console.print(f"# {record_type.__qualname__}\n")
        console.print("| Key | Field | Type | Options |")
        console.print("|---|---|---|---|")
        for row in rows:
            options: str = ", ".join(row["options"])
            console.print(f"| `{row['key']}` | {row['field']} | `{row['type']}` | {options} |")
        return

    width: int = max((len(row["key"]) for row in rows), default=0)
    for row in rows:
        suffix: str = f"  [{','.join(row['options'])}]" if row["options"] else ""
        console.print(
            f"{console.styled(row['key'].ljust(width), bold=True)}  {row['type']}{suffix}"
        )
