# topmark:header:start
#
#   project      : QueryStruct
#   file         : decode.py
#   file_relpath : src/querystruct/cli/commands/decode.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct `decode` and `canonicalize` commands.

Both decode a query string into a fresh, zero-valued instance of a record type
given as ``module:QualName``. ``decode`` prints the record as JSON;
``canonicalize`` encodes it again and prints the canonical query string.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import click

from querystruct.api import encode_query, load_query
from querystruct.cli.cmd_common import (
    codec_errors,
    get_codec_config,
    get_console,
    read_query,
    resolve_record_type,
    to_jsonable,
)

if TYPE_CHECKING:
    from querystruct.cli.console import ConsoleLike
    from querystruct.config.model import CodecConfig


@click.command(
    name="decode",
    help="Decode QUERY (or STDIN) into a record type given as 'module:QualName'.",
)
@click.argument("target")
@click.argument("query", required=False)
def decode_command(*, target: str, query: str | None) -> None:
    """Decode a query string and print the record as JSON.

    Args:
        target (str): Record type as ``package.module:QualName``.
        query (str | None): The query string; ``None`` or ``-`` reads STDIN.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: CodecConfig = get_codec_config(ctx)
    record_type: type = resolve_record_type(target)

    with codec_errors():
        record: Any = load_query(read_query(query), record_type, config=config)
    console.print(json.dumps(to_jsonable(record), indent=2))


@click.command(
    name="canonicalize",
    help="Decode QUERY (or STDIN) into a record type, then print it re-encoded.",
)
@click.argument("target")
@click.argument("query", required=False)
def canonicalize_command(*, target: str, query: str | None) -> None:
    """Decode a query string and print its canonical re-encoding.

    Args:
        target (str): Record type as ``package.module:QualName``.
        query (str | None): The query string; ``None`` or ``-`` reads STDIN.
    """
    ctx: click.Context = click.get_current_context()
    console: ConsoleLike = get_console(ctx)
    config: CodecConfig = get_codec_config(ctx)
    record_type: type = resolve_record_type(target)

    with codec_errors():
        record: Any = load_query(read_query(query), record_type, config=config)
        canonical: str = encode_query(record, config=config)
    console.print(canonical)
