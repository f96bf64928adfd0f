# topmark:header:start
#
#   project      : QueryStruct
#   file         : hooks.py
#   file_relpath : src/querystruct/codec/hooks.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Per-type extension points.

Custom encoders:
    A type implementing `QueryEncoder` renders itself: the encoder hands it the
    fully scoped key and the output multimap, and it may add zero, one or many
    entries. Exceptions it raises abort the whole encode.

    A type additionally implementing `NullableQueryEncoder` also renders a
    *missing* value: an ``Optional[T]`` field holding ``None`` calls
    ``T.encode_none(key, values)`` instead of producing no entry (``omitempty``
    still skips it).

Emptiness:
    ``omitempty`` consults `is_empty_value`. Types may define ``is_zero()`` to
    decide for themselves.

Example:
    ```python
    class Flags(list[str]):
        def encode_values(self, key: str, values: QueryValues) -> None:
            for i, flag in enumerate(self):
                values.set(f"{key}.{i}", flag)
    ```
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from querystruct.core.values import QueryValues


@runtime_checkable
class QueryEncoder(Protocol):
    """Capability of a value to encode itself into a multimap."""

    def encode_values(self, key: str, values: QueryValues) -> None:
        """Add this value's entries for ``key`` to ``values``."""
        ...


@runtime_checkable
class NullableQueryEncoder(QueryEncoder, Protocol):
    """`QueryEncoder` that can also render an absent (``None``) value."""

    @classmethod
    def encode_none(cls, key: str, values: QueryValues) -> None:
        """Add the entries representing a missing value for ``key``."""
        ...


@runtime_checkable
class Zeroable(Protocol):
    """Capability of a value to report whether it is its type's zero value."""

    def is_zero(self) -> bool:
        """Return True when the value is empty for ``omitempty`` purposes."""
        ...


def implements_encoder(tp: object) -> bool:
    """Return whether the type ``tp`` declares ``encode_values``."""
    return isinstance(tp, type) and callable(getattr(tp, "encode_values", None))


def implements_nullable_encoder(tp: object) -> bool:
    """Return whether the type ``tp`` declares both ``encode_values`` and ``encode_none``."""
    return implements_encoder(tp) and callable(getattr(tp, "encode_none", None))


def is_empty_value(value: Any) -> bool:
    """Return whether ``value`` is empty for the purposes of ``omitempty``.

    Empty values are ``None``, ``False``, ``0``, ``0.0``, empty strings and
    containers, and ``datetime.min`` (naive or aware). Values exposing
    ``is_zero()`` decide for themselves. Records are never empty.

    Args:
        value (Any): The field value.

    Returns:
        bool: True when the field should be omitted.
    """
    if value is None:
        return True
    if isinstance(value, Zeroable) and not isinstance(value, type):
        return bool(value.is_zero())
    if isinstance(value, Enum):
        return is_empty_value(value.value)
    if isinstance(value, (bool, int, float)):
        return value == 0
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) == datetime.min
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False
