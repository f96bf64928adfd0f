# topmark:header:start
#
#   project      : QueryStruct
#   file         : scalars.py
#   file_relpath : src/querystruct/codec/scalars.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Leaf value rendering and parsing: scalars and time values.

Rendering is total over well-typed input. Parsing raises
`InvalidScalarValueError` (or `InvalidBooleanValueError`) naming the key and
the offending raw string.

Canonical forms:
    - ``bool``: ``true``/``false``, or ``1``/``0`` with the ``int`` option.
    - ``int``: decimal, optional sign, no separators or whitespace.
    - ``float``: shortest round-tripping form; integral values drop the
      fractional part (``2.0`` renders as ``2``).
    - enums: the rendering of their value.
    - ``datetime``: RFC 3339 in the value's own offset (``Z`` for UTC), epoch
      units with ``unix``/``unixmilli``/``unixnano``, or a ``strftime`` layout.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Final

from querystruct.constants import BOOL_INT_TOKENS, BOOL_TOKENS
from querystruct.core.errors import InvalidBooleanValueError, InvalidScalarValueError
from querystruct.core.tags import TagOption

if TYPE_CHECKING:
    from querystruct.core.tags import TagSpec

EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)

_INT_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")
_RFC3339_RE: Final[re.Pattern[str]] = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)

# Largest magnitude rendered without an exponent (matches `repr` switching).
_FLOAT_PLAIN_LIMIT: Final[float] = 1e16

_MICROS_PER_UNIT: Final[dict[TagOption, int]] = {
    TagOption.UNIX: 1_000_000,
    TagOption.UNIXMILLI: 1_000,
}


def bool_tokens(tag: TagSpec) -> tuple[str, str]:
    """Return the ``(true, false)`` tokens selected by the ``int`` option."""
    return BOOL_INT_TOKENS if TagOption.INT in tag else BOOL_TOKENS


def format_scalar(value: Any, tag: TagSpec) -> str:
    """Render a scalar field value to its canonical string form.

    Args:
        value (Any): A ``str``, ``int``, ``float``, ``bool`` (or subclass/enum).
        tag (TagSpec): The field's tag (``int`` affects booleans).

    Returns:
        str: The rendered value; ``None`` renders as the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        return format_scalar(value.value, tag)
    if isinstance(value, bool):
        true_token, false_token = bool_tokens(tag)
        return true_token if value else false_token
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        # -0.0 keeps its sign through repr
        if value.is_integer() and abs(value) < _FLOAT_PLAIN_LIMIT and math.copysign(1.0, value) > 0:
            return str(int(value))
        return repr(float(value))
    return str(value)


def parse_scalar(key: str, raw: str, py_type: type, tag: TagSpec) -> Any:
    """Parse a raw string into ``py_type``.

    Args:
        key (str): The multimap key (for error reporting).
        raw (str): The raw value.
        py_type (type): Declared scalar type (``str``/``int``/``float``/``bool``
            or a subclass of one of them, including enums).
        tag (TagSpec): The field's tag (``int`` affects booleans).

    Returns:
        Any: The parsed value, an instance of ``py_type``.

    Raises:
        InvalidScalarValueError: If ``raw`` is not a valid literal.
        InvalidBooleanValueError: If a boolean literal matches neither token.
    """
    if issubclass(py_type, Enum):
        for member in py_type:
            if format_scalar(member, tag) == raw:
                return member
        raise InvalidScalarValueError(key, raw, py_type.__name__, "no matching member")

    if issubclass(py_type, bool):
        true_token, false_token = bool_tokens(tag)
        if raw == true_token:
            return True
        if raw == false_token:
            return False
        raise InvalidBooleanValueError(key, raw, true_token, false_token)

    if issubclass(py_type, int):
        if not _INT_RE.fullmatch(raw):
            raise InvalidScalarValueError(key, raw, "int")
        return _construct(key, raw, py_type, int(raw))

    if issubclass(py_type, float):
        if not raw or raw != raw.strip() or "_" in raw:
            raise InvalidScalarValueError(key, raw, "float")
        try:
            number: float = float(raw)
        except ValueError as exc:
            raise InvalidScalarValueError(key, raw, "float") from exc
        return _construct(key, raw, py_type, number)

    return _construct(key, raw, py_type, raw)


def _construct(key: str, raw: str, py_type: type, parsed: Any) -> Any:
    """Wrap ``parsed`` in ``py_type`` when the declared type is a subclass."""
    if type(parsed) is py_type:
        return parsed
    try:
        return py_type(parsed)
    except (TypeError, ValueError) as exc:
        raise InvalidScalarValueError(key, raw, py_type.__name__, str(exc)) from exc


def as_aware(value: datetime) -> datetime:
    """Return ``value`` with UTC attached when it is naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def epoch_micros(value: datetime) -> int:
    """Return the number of microseconds between the Unix epoch and ``value``."""
    return (as_aware(value) - EPOCH) // timedelta(microseconds=1)


def format_rfc3339(value: datetime) -> str:
    """Render ``value`` as RFC 3339 with second precision.

    Naive values are rendered as UTC. A zero offset renders as ``Z``.
    """
    value = as_aware(value)
    text: str = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    offset: timedelta | None = value.utcoffset()
    if not offset:
        return text + "Z"
    sign: str = "+" if offset > timedelta(0) else "-"
    minutes: int = abs(offset) // timedelta(minutes=1)
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def format_time(value: datetime, tag: TagSpec, default_layout: str = "") -> str:
    """Render a time value per the field's options.

    Precedence: ``unix``, ``unixmilli``, ``unixnano``, the field's layout
    override, ``default_layout``, then RFC 3339.

    Args:
        value (datetime): The time value (naive values are UTC).
        tag (TagSpec): The field's tag.
        default_layout (str): Configured default ``strftime`` layout.

    Returns:
        str: The rendered value.
    """
    for option, scale in _MICROS_PER_UNIT.items():
        if option in tag:
            return str(epoch_micros(value) // scale)
    if TagOption.UNIXNANO in tag:
        return str(epoch_micros(value) * 1_000)
    layout: str = tag.layout or default_layout
    if layout:
        return as_aware(value).strftime(layout)
    return format_rfc3339(value)


def parse_time(
    key: str,
    raw: str,
    tag: TagSpec,
    default_layout: str = "",
    py_type: type = datetime,
) -> datetime:
    """Parse a time value per the field's options.

    The result is always timezone-aware: epoch units and layouts without an
    offset yield UTC.

    Raises:
        InvalidScalarValueError: If ``raw`` does not match the expected format.
    """
    result: datetime
    if TagOption.UNIX in tag or TagOption.UNIXMILLI in tag or TagOption.UNIXNANO in tag:
        result = _parse_epoch(key, raw, tag)
    elif tag.layout or default_layout:
        layout: str = tag.layout or default_layout
        try:
            result = as_aware(datetime.strptime(raw, layout))
        except ValueError as exc:
            raise InvalidScalarValueError(key, raw, "time", f"layout {layout!r}") from exc
    else:
        result = _parse_rfc3339(key, raw)

    if type(result) is not py_type:
        result = py_type.combine(result.date(), result.timetz())
    return result


def _parse_epoch(key: str, raw: str, tag: TagSpec) -> datetime:
    if not _INT_RE.fullmatch(raw):
        raise InvalidScalarValueError(key, raw, "time", "expected an integer timestamp")
    count: int = int(raw)
    if TagOption.UNIX in tag:
        micros: int = count * 1_000_000
    elif TagOption.UNIXMILLI in tag:
        micros = count * 1_000
    else:
        micros = count // 1_000
    try:
        return EPOCH + timedelta(microseconds=micros)
    except OverflowError as exc:
        raise InvalidScalarValueError(key, raw, "time", "timestamp out of range") from exc


def _parse_rfc3339(key: str, raw: str) -> datetime:
    match: re.Match[str] | None = _RFC3339_RE.fullmatch(raw)
    if match is None:
        raise InvalidScalarValueError(key, raw, "time", "expected RFC 3339")
    year, month, day, hour, minute, second = (int(g) for g in match.group(1, 2, 3, 4, 5, 6))
    fraction: str = (match.group(7) or "").ljust(6, "0")[:6]
    try:
        tz: timezone = timezone.utc
        if match.group(9):
            offset = timedelta(hours=int(match.group(10)), minutes=int(match.group(11)))
            tz = timezone(-offset if match.group(9) == "-" else offset)
        return datetime(year, month, day, hour, minute, second, int(fraction), tzinfo=tz)
    except ValueError as exc:
        raise InvalidScalarValueError(key, raw, "time", str(exc)) from exc
