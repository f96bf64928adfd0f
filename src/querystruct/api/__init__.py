# topmark:header:start
#
#   project      : QueryStruct
#   file         : __init__.py
#   file_relpath : src/querystruct/api/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Public QueryStruct API (stable surface).

Thin functional wrappers around `Encoder` and `Decoder`. Every function
accepts an optional ``config``: either a frozen `CodecConfig` or a plain
mapping of flat overrides (``tag_key``, ``time_layout``, ``separator``...),
normalized internally into an immutable snapshot.

Example:
```python
from dataclasses import dataclass

from querystruct import api, query_field


@dataclass
class Search:
    query: str = query_field("q")
    page: int = query_field("page,omitempty", default=0)


assert api.encode_query(Search(query="foo")) == "q=foo"
search = api.load_query("q=bar&page=2", Search)
assert (search.query, search.page) == ("bar", 2)
```
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from querystruct.codec.decoder import Decoder
from querystruct.codec.encoder import Encoder
from querystruct.config.model import DEFAULT_CONFIG, CodecConfig, MutableCodecConfig
from querystruct.core.errors import InvalidTargetError
from querystruct.core.values import QueryValues
from querystruct.schema.builder import build_schema

if TYPE_CHECKING:
    from collections.abc import Sequence

    from querystruct.schema.model import RecordSchema

T = TypeVar("T")

ConfigLike = CodecConfig | Mapping[str, Any] | None


def resolve_config(config: ConfigLike = None) -> CodecConfig:
    """Normalize ``config`` into a frozen `CodecConfig`.

    Raises:
        ConfigError: If an override is unknown or wrongly typed.
    """
    if config is None:
        return DEFAULT_CONFIG
    if isinstance(config, CodecConfig):
        return config
    draft = MutableCodecConfig()
    draft.apply_overrides(config)
    return draft.freeze()


def encode(record: Any, *, config: ConfigLike = None) -> QueryValues:
    """Encode a dataclass record into a multimap.

    Args:
        record (Any): The record; ``None`` yields an empty multimap.
        config (ConfigLike): Codec configuration or flat overrides.

    Returns:
        QueryValues: The encoded entries.
    """
    return Encoder(resolve_config(config)).encode(record)


def encode_query(record: Any, *, config: ConfigLike = None) -> str:
    """Encode a record and render it as a percent-encoded query string."""
    cfg: CodecConfig = resolve_config(config)
    return Encoder(cfg).encode(record).to_query_string(separator=cfg.separator)


def decode(
    values: Mapping[str, Sequence[str] | str],
    target: T,
    *,
    config: ConfigLike = None,
) -> T:
    """Decode a multimap into ``target`` in place (sparse update).

    Args:
        values (Mapping[str, Sequence[str] | str]): The multimap.
        target (T): A mutable dataclass instance.
        config (ConfigLike): Codec configuration or flat overrides.

    Returns:
        T: ``target`` itself.

    Raises:
        InvalidTargetError: If ``target`` is not a mutable dataclass instance.
        InvalidScalarValueError: If a raw value fails to parse.
        UnsupportedTypeError: If the record type has an unsupported field.
    """
    Decoder(values, resolve_config(config)).decode(target)
    return target


def decode_query(query: str, target: T, *, config: ConfigLike = None) -> T:
    """Parse a query string and decode it into ``target`` in place."""
    cfg: CodecConfig = resolve_config(config)
    values: QueryValues = QueryValues.parse(
        query, keep_blank_values=cfg.keep_blank_values, separator=cfg.separator
    )
    return decode(values, target, config=cfg)


def load(
    values: Mapping[str, Sequence[str] | str],
    record_type: type[T],
    *,
    config: ConfigLike = None,
) -> T:
    """Build a zero-valued ``record_type`` instance and decode ``values`` into it.

    Frozen record types are supported: the instance is decoded as a mutable
    copy and rebuilt with `dataclasses.replace`.

    Raises:
        InvalidTargetError: If ``record_type`` is not a dataclass type.
    """
    cfg: CodecConfig = resolve_config(config)
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise InvalidTargetError(record_type, "expected a dataclass type")
    schema: RecordSchema = build_schema(record_type, cfg.metadata_keys)
    return Decoder(values, cfg).load(schema)


def load_query(query: str, record_type: type[T], *, config: ConfigLike = None) -> T:
    """Parse a query string into a new ``record_type`` instance."""
    cfg: CodecConfig = resolve_config(config)
    values: QueryValues = QueryValues.parse(
        query, keep_blank_values=cfg.keep_blank_values, separator=cfg.separator
    )
    return load(values, record_type, config=cfg)


__all__ = [
    "ConfigLike",
    "decode",
    "decode_query",
    "encode",
    "encode_query",
    "load",
    "load_query",
    "resolve_config",
]
