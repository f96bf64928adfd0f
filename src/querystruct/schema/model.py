# topmark:header:start
#
#   project      : QueryStruct
#   file         : model.py
#   file_relpath : src/querystruct/schema/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Static description of record types.

A record type (a dataclass) is flattened once into a `RecordSchema`: an
ordered tuple of `FieldSpec`, each carrying the field's effective key name, its
parsed `TagSpec`, whether it is promoted (embedded with its name elided), and a
`TypeInfo` tree that classifies the declared type into one closed `FieldKind`.

The encoder and decoder dispatch on `FieldKind` only; no type inspection
happens while values are being walked.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from querystruct.core.naming import brackets_key, compose_key, indexed_key, numbered_key
from querystruct.core.tags import SequenceStrategy, TagOption

if TYPE_CHECKING:
    from collections.abc import Iterator

    from querystruct.core.tags import TagSpec


class FieldKind(str, Enum):
    """Closed set of field kinds."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    NESTED = "nested"
    OPTIONAL = "optional"
    TIME = "time"
    CUSTOM = "custom"


@dataclass(frozen=True)
class TypeInfo:
    """Classified type of a field, sequence element or mapping value.

    Attributes:
        kind (FieldKind): The field kind.
        py_type (Any): Concrete Python class (``str``, ``list``, the dataclass,
            the custom encoder class...). ``None`` for OPTIONAL.
        element (TypeInfo | None): Element type for SEQUENCE, value type for
            MAPPING, inner type for OPTIONAL, decode fallback for CUSTOM.
        key_type (type | None): Key type (``str`` or ``int``) for MAPPING.
        schema (RecordSchema | None): Record layout for NESTED.
        nullable_encoder (bool): For OPTIONAL: the inner type can render a
            missing value itself (``encode_none``).
    """

    kind: FieldKind
    py_type: Any = None
    element: TypeInfo | None = None
    key_type: type | None = None
    schema: RecordSchema | None = field(default=None, compare=False, repr=False)
    nullable_encoder: bool = False

    def unwrap_optional(self) -> TypeInfo:
        """Return the innermost non-OPTIONAL type."""
        info: TypeInfo = self
        while info.kind is FieldKind.OPTIONAL and info.element is not None:
            info = info.element
        return info

    def decode_info(self) -> TypeInfo | None:
        """Return the type used for decoding (CUSTOM resolves to its fallback)."""
        if self.kind is FieldKind.CUSTOM:
            return self.element
        return self

    def describe(self) -> str:
        """Return a short human-readable rendering, e.g. ``list[int]``."""
        if self.kind is FieldKind.OPTIONAL and self.element is not None:
            return f"{self.element.describe()} | None"
        name: str = getattr(self.py_type, "__name__", str(self.py_type))
        if self.kind is FieldKind.SEQUENCE and self.element is not None:
            return f"{name}[{self.element.describe()}]"
        if self.kind is FieldKind.MAPPING and self.element is not None and self.key_type:
            return f"{name}[{self.key_type.__name__}, {self.element.describe()}]"
        return name


@dataclass(frozen=True)
class FieldSpec:
    """One visible field of a record.

    Attributes:
        attr (str): Python attribute name.
        name (str): Effective key name (tag name, else ``attr``).
        tag (TagSpec): Parsed annotation.
        info (TypeInfo): Classified declared type.
        promoted (bool): Embedded field whose inner fields surface in the
            parent's scope.
    """

    attr: str
    name: str
    tag: TagSpec
    info: TypeInfo
    promoted: bool = False

    @property
    def omitempty(self) -> bool:
        """Whether zero values are skipped on encode."""
        return TagOption.OMITEMPTY in self.tag


@dataclass(frozen=True)
class RecordSchema:
    """Flattened layout of one record type.

    Attributes:
        record_type (type): The dataclass.
        fields (tuple[FieldSpec, ...]): Visible fields in declaration order.
        frozen (bool): Whether instances are immutable (not decodable in place).
    """

    record_type: type
    fields: tuple[FieldSpec, ...]
    frozen: bool = False

    @property
    def declared(self) -> tuple[FieldSpec, ...]:
        """Non-promoted fields in declaration order."""
        return tuple(f for f in self.fields if not f.promoted)

    @property
    def promoted(self) -> tuple[FieldSpec, ...]:
        """Promoted fields in declaration order."""
        return tuple(f for f in self.fields if f.promoted)

    def traversal_order(self) -> tuple[FieldSpec, ...]:
        """Declared fields first, then promoted fields.

        Both directions walk fields in this order so that repeated values under
        a shared key line up between encode and decode.
        """
        return self.declared + self.promoted

    def iter_keys(self, scope: str = "") -> Iterator[tuple[str, FieldSpec]]:
        """Yield ``(key pattern, field)`` for every leaf reachable from this record.

        Promoted records contribute their leaves at ``scope``; nested records
        recurse with the field's key. Sequence and mapping patterns use
        ``<i>`` and ``<key>`` placeholders.

        Args:
            scope (str): Scope of this record.

        Yields:
            tuple[str, FieldSpec]: Key pattern and the declaring field.
        """
        for spec in self.traversal_order():
            inner: TypeInfo = spec.info.unwrap_optional()
            if spec.promoted and inner.schema is not None:
                yield from inner.schema.iter_keys(scope)
                continue
            key: str = compose_key(scope, spec.name)
            if inner.kind is FieldKind.NESTED and inner.schema is not None:
                yield from inner.schema.iter_keys(key)
            elif inner.kind is FieldKind.SEQUENCE:
                yield from _sequence_patterns(spec, inner, key)
            elif inner.kind is FieldKind.MAPPING:
                yield f"{key}[<key>]", spec
            else:
                yield key, spec


def _sequence_patterns(
    spec: FieldSpec,
    info: TypeInfo,
    key: str,
) -> Iterator[tuple[str, FieldSpec]]:
    strategy: SequenceStrategy = spec.tag.sequence_strategy()
    if strategy is SequenceStrategy.BRACKETS:
        yield brackets_key(key), spec
    elif strategy is SequenceStrategy.NUMBERED:
        yield numbered_key(key, "<i>"), spec
    elif strategy is SequenceStrategy.INDEXED:
        element: TypeInfo | None = info.element.unwrap_optional() if info.element else None
        if element is not None and element.schema is not None:
            yield from element.schema.iter_keys(indexed_key(key, "<i>"))
        else:
            yield indexed_key(key, "<i>"), spec
    else:
        yield key, spec
