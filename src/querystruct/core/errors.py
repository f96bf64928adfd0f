# topmark:header:start
#
#   project      : QueryStruct
#   file         : errors.py
#   file_relpath : src/querystruct/core/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions raised by the QueryStruct codec.

Every failure surfaces from the top-level encode/decode call as a subclass of
`QueryError`; there is no partial-success mode.

Hierarchy:
    - `QueryError`
        - `InvalidTargetError`: decode destination is not a mutable record instance.
        - `UnsupportedTypeError`: a field type has no applicable kind.
        - `InvalidScalarValueError`: a raw value failed to parse.
            - `InvalidBooleanValueError`: a boolean literal matched neither token.
        - `CustomEncoderError`: a custom encoder raised a foreign exception.
        - `ConfigError`: configuration sources are malformed.
"""

from __future__ import annotations

from typing import Any


class QueryError(Exception):
    """Base class for all QueryStruct errors."""


class InvalidTargetError(QueryError, TypeError):
    """Decode destination is not a mutable dataclass instance.

    Attributes:
        target (Any): The rejected destination.
        reason (str): Short description of what is wrong with it.
    """

    def __init__(self, target: Any, reason: str) -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"querystruct: cannot decode into {type(target).__name__}: {reason}")


class UnsupportedTypeError(QueryError, TypeError):
    """A field's static type cannot be encoded or decoded.

    Attributes:
        type_ (object): The offending type.
        context (str | None): Where it appeared, e.g. ``"map key"``.
        owner (str | None): ``Record.field`` path of the declaring field, when known.
    """

    def __init__(
        self,
        type_: object,
        *,
        context: str | None = None,
        owner: str | None = None,
    ) -> None:
        self.type_ = type_
        self.context = context
        self.owner = owner
        name: str = getattr(type_, "__qualname__", None) or repr(type_)
        msg: str = f"{name} is unsupported"
        if context:
            msg += f" in {context}"
        if owner:
            msg += f" (field {owner})"
        super().__init__(msg)


class InvalidScalarValueError(QueryError, ValueError):
    """A raw string could not be parsed into the field's type.

    Attributes:
        key (str): The multimap key the value was read from.
        value (str): The offending raw value.
        expected (str): Name of the expected type.
    """

    def __init__(self, key: str, value: str, expected: str, detail: str | None = None) -> None:
        self.key = key
        self.value = value
        self.expected = expected
        msg: str = f"invalid {expected} value {value!r} (key: {key!r})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class InvalidBooleanValueError(InvalidScalarValueError):
    """A boolean literal matched neither the true nor the false token.

    Attributes:
        true_value (str): Accepted token for ``True``.
        false_value (str): Accepted token for ``False``.
    """

    def __init__(self, key: str, value: str, true_value: str, false_value: str) -> None:
        self.true_value = true_value
        self.false_value = false_value
        super().__init__(
            key,
            value,
            "bool",
            f"expected true: {true_value!r}, false: {false_value!r}",
        )


class CustomEncoderError(QueryError):
    """A custom encoder failed with a non-QueryStruct exception.

    The original exception is chained as ``__cause__``.

    Attributes:
        key (str): The key handed to the encoder.
    """

    def __init__(self, key: str, cause: BaseException) -> None:
        self.key = key
        super().__init__(f"custom encoder failed for key {key!r}: {cause}")


class ConfigError(QueryError):
    """Configuration sources are missing, malformed, or wrongly typed."""
