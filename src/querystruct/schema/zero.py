# topmark:header:start
#
#   project      : QueryStruct
#   file         : zero.py
#   file_relpath : src/querystruct/schema/zero.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Zero values for classified types.

Used by `querystruct.load` to build a fresh record and by the decoder to
materialize optional records, grow numbered sequences and seed map entries.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from querystruct.core.errors import InvalidTargetError
from querystruct.schema.model import FieldKind

if TYPE_CHECKING:
    from querystruct.schema.model import FieldSpec, RecordSchema, TypeInfo


def zero_value(info: TypeInfo) -> Any:
    """Return the zero value of a classified type.

    Optionals are ``None``; scalars, sequences and mappings are their type
    called without arguments; enums their first member; times
    ``datetime.min``; records a zero-constructed instance. Custom types
    without a decodable base have no zero value and yield ``None``.

    Args:
        info (TypeInfo): The classified type.

    Returns:
        Any: A fresh zero value.
    """
    kind: FieldKind = info.kind
    if kind is FieldKind.OPTIONAL:
        return None
    if kind is FieldKind.NESTED and info.schema is not None:
        return make_zero_record(info.schema)
    if kind is FieldKind.CUSTOM:
        return zero_value(info.element) if info.element is not None else None
    if kind is FieldKind.TIME:
        return info.py_type.combine(datetime.min.date(), datetime.min.time())
    py_type: Any = info.py_type
    if isinstance(py_type, type) and issubclass(py_type, Enum):
        return next(iter(py_type))
    return py_type()


def make_zero_record(schema: RecordSchema) -> Any:
    """Instantiate ``schema.record_type`` with zero values for required fields.

    Fields with a default or ``default_factory`` keep it. Hidden fields (tagged
    ``-`` or private) must have a default.

    Raises:
        InvalidTargetError: If a hidden field has no default.
    """
    record_type: type = schema.record_type
    visible: dict[str, FieldSpec] = {spec.attr: spec for spec in schema.fields}
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(record_type):
        if not f.init:
            continue
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        spec: FieldSpec | None = visible.get(f.name)
        if spec is None:
            raise InvalidTargetError(
                record_type,
                f"hidden field '{f.name}' has no default, cannot build a zero value",
            )
        kwargs[f.name] = zero_value(spec.info)
    return record_type(**kwargs)
