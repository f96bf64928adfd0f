# topmark:header:start
#
#   project      : QueryStruct
#   file         : cmd_common.py
#   file_relpath : src/querystruct/cli/cmd_common.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers shared by QueryStruct CLI commands.

Covers access to the group-level state stored on ``ctx.obj`` (console,
configuration), record target resolution, query input (argument or STDIN),
codec error translation and JSON rendering of decoded records.
"""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from querystruct.cli.errors import QuerystructUsageError, cli_error_for
from querystruct.codec.scalars import format_rfc3339
from querystruct.config.logging import get_logger
from querystruct.config.model import MutableCodecConfig
from querystruct.core.errors import QueryError
from querystruct.utils.introspection import resolve_object

if TYPE_CHECKING:
    from collections.abc import Iterator

    from querystruct.cli.console import ConsoleLike
    from querystruct.config.logging import QuerystructLogger
    from querystruct.config.model import CodecConfig

logger: QuerystructLogger = get_logger(__name__)


def get_console(ctx: click.Context) -> ConsoleLike:
    """Return the console created by the group callback."""
    ctx.ensure_object(dict)
    return ctx.obj["console"]


def get_effective_verbosity(ctx: click.Context) -> int:
    """Return the logging level resolved from ``-v``/``-q`` (WARNING by default)."""
    ctx.ensure_object(dict)
    return int(ctx.obj.get("verbosity_level", 30))


def get_codec_config(ctx: click.Context) -> CodecConfig:
    """Return the effective configuration, loading it on first use.

    Layers: ``pyproject.toml`` and ``querystruct.toml`` in the working
    directory (unless ``--no-config``), then ``--config`` files.

    Raises:
        QuerystructConfigError: If a configuration source is invalid.
    """
    ctx.ensure_object(dict)
    cached: CodecConfig | None = ctx.obj.get("config")
    if cached is not None:
        return cached
    with codec_errors():
        draft: MutableCodecConfig = MutableCodecConfig.load_merged(
            search_dir=None if ctx.obj.get("no_config") else Path.cwd(),
            extra_files=[Path(p) for p in ctx.obj.get("config_files", ())],
        )
        config: CodecConfig = draft.freeze()
    logger.debug("Effective configuration from %s", config.config_files or "<defaults>")
    ctx.obj["config"] = config
    return config


@contextmanager
def codec_errors() -> Iterator[None]:
    """Translate codec errors raised in the block into CLI errors."""
    try:
        yield
    except QueryError as exc:
        logger.debug("Codec error: %r", exc)
        raise cli_error_for(exc) from exc


def resolve_record_type(target: str) -> type:
    """Resolve a ``module:QualName`` target to a dataclass type.

    Raises:
        QuerystructUsageError: If the target cannot be imported or is not a
            dataclass type.
    """
    try:
        obj: Any = resolve_object(target)
    except (ValueError, ImportError, AttributeError) as exc:
        raise QuerystructUsageError(f"Cannot resolve record type '{target}': {exc}") from exc
    if not (isinstance(obj, type) and dataclasses.is_dataclass(obj)):
        raise QuerystructUsageError(f"'{target}' is not a dataclass type")
    return obj


def read_query(query: str | None) -> str:
    """Return the query argument, or STDIN when it is omitted or ``-``."""
    if query is None or query == "-":
        query = click.get_text_stream("stdin").read()
    return query.strip()


def to_jsonable(value: Any) -> Any:
    """Convert a decoded record tree into JSON-compatible data.

    Records become objects keyed by attribute name, times RFC 3339 strings,
    enums their value, tuples lists; mapping keys are stringified.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if isinstance(value, datetime):
        return format_rfc3339(value)
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value
