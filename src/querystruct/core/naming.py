# topmark:header:start
#
#   project      : QueryStruct
#   file         : naming.py
#   file_relpath : src/querystruct/core/naming.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Key naming and scoping rules shared by the encoder and decoder.

Nested records are addressed with bracket notation: a field ``inner`` of a
record stored under ``outer`` is keyed ``outer[inner]``, arbitrarily deep
(``a[b][c]``). The empty scope is the top level and yields bare field names.

The inverse helpers recover positional information (map keys, sequence
indices) from flat keys. They return ``None`` instead of raising when a key does
not have the expected shape: the flat key space is shared by sibling fields with
overlapping prefixes, so a non-matching key simply belongs to another field.
"""

from __future__ import annotations

import re
from typing import Final

_DIGITS: Final[re.Pattern[str]] = re.compile(r"[0-9]+")
_INDEXED: Final[re.Pattern[str]] = re.compile(r"\[([0-9]+)\]")


def compose_key(scope: str, name: str) -> str:
    """Return the fully qualified key of ``name`` inside ``scope``.

    Args:
        scope (str): Parent scope; empty for the top level.
        name (str): Field key name.

    Returns:
        str: ``name`` at the top level, else ``scope[name]``.
    """
    if not scope:
        return name
    return f"{scope}[{name}]"


def brackets_key(key: str) -> str:
    """Return the key used by the ``brackets`` sequence strategy (``key[]``)."""
    return f"{key}[]"


def numbered_key(key: str, index: int | str) -> str:
    """Return the key used by the ``numbered`` sequence strategy (``key0``, ``key1``...)."""
    return f"{key}{index}"


def indexed_key(key: str, index: int | str) -> str:
    """Return the key used by the ``indexed`` sequence strategy (``key[0]``...)."""
    return f"{key}[{index}]"


def map_key_fragment(key: str, scope: str) -> str | None:
    """Return the raw map key carried inside ``scope[<fragment>]``.

    The fragment runs from just after ``scope + "["`` up to the final ``"]"``.

    Args:
        key (str): A flat key from the multimap.
        scope (str): The mapping field's key.

    Returns:
        str | None: The fragment, or ``None`` if ``key`` does not have that shape.
    """
    prefix: str = f"{scope}["
    if len(key) <= len(prefix) or not key.startswith(prefix) or not key.endswith("]"):
        return None
    return key[len(prefix) : -1]


def numbered_index(key: str, scope: str) -> int | None:
    """Return the element index of a ``numbered`` sequence key.

    Args:
        key (str): A flat key from the multimap.
        scope (str): The sequence field's key.

    Returns:
        int | None: The index when ``key`` is ``scope`` followed by decimal digits;
        ``None`` otherwise (the key belongs to a different field).
    """
    if not key.startswith(scope):
        return None
    remainder: str = key[len(scope) :]
    if not _DIGITS.fullmatch(remainder):
        return None
    return int(remainder)


def indexed_element(key: str, scope: str) -> tuple[int, str] | None:
    """Split an ``indexed`` sequence key into its element index and sub-key.

    ``items[2]`` yields ``(2, "")``; ``items[2][name]`` yields ``(2, "[name]")``.

    Args:
        key (str): A flat key from the multimap.
        scope (str): The sequence field's key.

    Returns:
        tuple[int, str] | None: ``(index, rest)``, or ``None`` if ``key`` is not
        an element key of ``scope``.
    """
    if not key.startswith(scope):
        return None
    match: re.Match[str] | None = _INDEXED.match(key, len(scope))
    if match is None:
        return None
    return int(match.group(1)), key[match.end() :]
