# topmark:header:start
#
#   project      : QueryStruct
#   file         : __init__.py
#   file_relpath : src/querystruct/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct package.

QueryStruct is a bidirectional codec between flat query-string multimaps and
typed dataclass records. Field names, nesting, sequence layouts and time
formats are driven by per-field annotations stored in ``dataclasses.field``
metadata.

Key grammar:
    - scalar: ``field``
    - nested: ``outer[inner]``, arbitrarily deep
    - sequences: ``field=a&field=b``, ``field[]=a``, ``field=a,b``,
      ``field0=a``, ``field[0][x]=...``
    - mappings: ``field[k]=v``
"""

from __future__ import annotations

from querystruct.api import decode, decode_query, encode, encode_query, load, load_query
from querystruct.codec.decoder import Decoder
from querystruct.codec.encoder import Encoder
from querystruct.codec.hooks import NullableQueryEncoder, QueryEncoder, Zeroable
from querystruct.config.model import CodecConfig, MetadataKeys, MutableCodecConfig
from querystruct.constants import QUERYSTRUCT_VERSION
from querystruct.core.errors import (
    ConfigError,
    CustomEncoderError,
    InvalidBooleanValueError,
    InvalidScalarValueError,
    InvalidTargetError,
    QueryError,
    UnsupportedTypeError,
)
from querystruct.core.tags import TagOption, TagSpec, parse_tag
from querystruct.core.values import QueryValues
from querystruct.schema.builder import build_schema
from querystruct.schema.fields import embedded, query_field

__version__: str = QUERYSTRUCT_VERSION

__all__ = [
    "CodecConfig",
    "ConfigError",
    "CustomEncoderError",
    "Decoder",
    "Encoder",
    "InvalidBooleanValueError",
    "InvalidScalarValueError",
    "InvalidTargetError",
    "MetadataKeys",
    "MutableCodecConfig",
    "NullableQueryEncoder",
    "QueryEncoder",
    "QueryError",
    "QueryValues",
    "TagOption",
    "TagSpec",
    "UnsupportedTypeError",
    "Zeroable",
    "__version__",
    "build_schema",
    "decode",
    "decode_query",
    "embedded",
    "encode",
    "encode_query",
    "load",
    "load_query",
    "parse_tag",
    "query_field",
]
