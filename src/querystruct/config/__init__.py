# topmark:header:start
#
#   project      : QueryStruct
#   file         : __init__.py
#   file_relpath : src/querystruct/config/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Configuration and logging for QueryStruct.

Exports the immutable `CodecConfig`, its builder `MutableCodecConfig`, the
`MetadataKeys` naming the dataclass metadata entries, and `DEFAULT_CONFIG`.
"""

from __future__ import annotations

from querystruct.config.model import (
    DEFAULT_CONFIG,
    CodecConfig,
    MetadataKeys,
    MutableCodecConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "CodecConfig",
    "MetadataKeys",
    "MutableCodecConfig",
]
