# topmark:header:start
#
#   project      : QueryStruct
#   file         : io.py
#   file_relpath : src/querystruct/config/io.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""TOML I/O helpers for QueryStruct configuration.

Parsing and rendering use `tomlkit`; values are returned as plain ``dict``
structures. Typed getters raise `ConfigError` naming the offending source and
key instead of silently falling back, because a misspelled metadata key name
would otherwise make every field annotation inert.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeAlias

import tomlkit
from tomlkit.exceptions import ParseError as TomlkitParseError

from querystruct.config.keys import Toml
from querystruct.config.logging import get_logger
from querystruct.core.errors import ConfigError

if TYPE_CHECKING:
    from pathlib import Path

    from querystruct.config.logging import QuerystructLogger

TomlTable: TypeAlias = dict[str, Any]

logger: QuerystructLogger = get_logger(__name__)


def load_toml_dict(path: Path) -> TomlTable:
    """Load a TOML file into a plain dict.

    Args:
        path (Path): File to read.

    Returns:
        TomlTable: The parsed document.

    Raises:
        ConfigError: If the file cannot be read or is not valid TOML.
    """
    try:
        text: str = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    try:
        doc: TomlTable = tomlkit.parse(text).unwrap()
    except TomlkitParseError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
    logger.debug("Loaded TOML config %s", path)
    return doc


def extract_pyproject_table(doc: TomlTable) -> TomlTable | None:
    """Return the ``[tool.querystruct]`` table of a pyproject document, if any."""
    tool: Any = doc.get(Toml.SECTION_TOOL)
    if not isinstance(tool, dict):
        return None
    table: Any = tool.get(Toml.SECTION_QUERYSTRUCT)
    if table is None:
        return None
    if not isinstance(table, dict):
        raise ConfigError(f"[{Toml.SECTION_TOOL}.{Toml.SECTION_QUERYSTRUCT}] must be a table")
    return table


def get_table_value(table: TomlTable, key: str, *, source: str) -> TomlTable:
    """Return the sub-table ``key`` (empty when absent).

    Raises:
        ConfigError: If ``key`` is present but not a table.
    """
    value: Any = table.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"{source}: [{key}] must be a table, got {type(value).__name__}")
    return value


def get_string_value_checked(table: TomlTable, key: str, *, source: str) -> str | None:
    """Return the string at ``key``, ``None`` when absent.

    Raises:
        ConfigError: If the value is present but not a string.
    """
    if key not in table:
        return None
    value: Any = table[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source}: '{key}' must be a string, got {type(value).__name__}")
    return value


def get_bool_value_checked(table: TomlTable, key: str, *, source: str) -> bool | None:
    """Return the boolean at ``key``, ``None`` when absent.

    Raises:
        ConfigError: If the value is present but not a boolean.
    """
    if key not in table:
        return None
    value: Any = table[key]
    if not isinstance(value, bool):
        raise ConfigError(f"{source}: '{key}' must be a boolean, got {type(value).__name__}")
    return value


def get_int_value_checked(table: TomlTable, key: str, *, source: str) -> int | None:
    """Return the integer at ``key``, ``None`` when absent.

    Raises:
        ConfigError: If the value is present but not an integer (booleans included).
    """
    if key not in table:
        return None
    value: Any = table[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{source}: '{key}' must be an integer, got {type(value).__name__}")
    return int(value)


def to_toml(data: TomlTable) -> str:
    """Render a plain dict as a TOML document string."""
    return tomlkit.dumps(data)
