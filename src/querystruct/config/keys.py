# topmark:header:start
#
#   project      : QueryStruct
#   file         : keys.py
#   file_relpath : src/querystruct/config/keys.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Canonical TOML section and key names for QueryStruct configuration.

These strings are the external configuration API as it appears in
``querystruct.toml`` and in ``[tool.querystruct]`` inside ``pyproject.toml``.
Renaming or removing a key is a breaking change.
"""

from __future__ import annotations

from typing import Final


class Toml:
    """TOML section names and keys used by QueryStruct configuration."""

    # [tool.querystruct] in pyproject.toml
    SECTION_TOOL: Final[str] = "tool"
    SECTION_QUERYSTRUCT: Final[str] = "querystruct"

    # [fields]: names of the dataclass field metadata entries
    SECTION_FIELDS: Final[str] = "fields"

    KEY_TAG_KEY: Final[str] = "tag_key"
    KEY_LAYOUT_KEY: Final[str] = "layout_key"
    KEY_DELIMITER_KEY: Final[str] = "delimiter_key"
    KEY_EMBED_KEY: Final[str] = "embed_key"

    # [time]
    SECTION_TIME: Final[str] = "time"

    KEY_TIME_LAYOUT: Final[str] = "layout"

    # [query]: query-string parsing and rendering
    SECTION_QUERY: Final[str] = "query"

    KEY_KEEP_BLANK_VALUES: Final[str] = "keep_blank_values"
    KEY_SEPARATOR: Final[str] = "separator"
    KEY_MAX_SEQUENCE_INDEX: Final[str] = "max_sequence_index"
