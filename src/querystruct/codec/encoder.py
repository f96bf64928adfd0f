# topmark:header:start
#
#   project      : QueryStruct
#   file         : encoder.py
#   file_relpath : src/querystruct/codec/encoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Record to multimap encoding.

The encoder walks a record's schema depth-first. Nested records recurse with
the field's key as their scope. Embedded (promoted) records and the record
elements of ``indexed`` sequences are deferred until every other field of the
current record has been written, and then walk with the current scope or the
element key respectively. This ordering only affects the insertion order of
keys in the output multimap.

Writes are purely additive. The only failure paths are unsupported types
(raised while building the schema) and custom encoders.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from querystruct.codec.hooks import is_empty_value
from querystruct.codec.scalars import format_scalar, format_time
from querystruct.config.logging import get_logger
from querystruct.config.model import DEFAULT_CONFIG
from querystruct.core.errors import CustomEncoderError, InvalidTargetError, QueryError
from querystruct.core.naming import brackets_key, compose_key, indexed_key, numbered_key
from querystruct.core.tags import SequenceStrategy
from querystruct.core.values import QueryValues
from querystruct.schema.builder import build_schema
from querystruct.schema.model import FieldKind
from querystruct.utils.introspection import format_callable_pretty

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from querystruct.config.logging import QuerystructLogger
    from querystruct.config.model import CodecConfig
    from querystruct.core.tags import TagSpec
    from querystruct.schema.model import RecordSchema, TypeInfo

logger: QuerystructLogger = get_logger(__name__)

# (record, schema, scope) walked after the fields of the current record.
_Deferred = list[tuple[Any, "RecordSchema", str]]


def _is_omitted(info: TypeInfo, value: Any) -> bool:
    """Return whether an ``omitempty`` field is skipped.

    An optional field is empty only when it is ``None``: a present optional
    holding its type's zero value is still encoded.
    """
    if info.kind is FieldKind.OPTIONAL:
        return value is None
    return is_empty_value(value)


class Encoder:
    """Encode dataclass records into a `QueryValues` multimap.

    Args:
        config (CodecConfig | None): Codec configuration; defaults apply when
            ``None``.
    """

    def __init__(self, config: CodecConfig | None = None) -> None:
        self._config: CodecConfig = config or DEFAULT_CONFIG

    def encode(self, record: Any) -> QueryValues:
        """Encode ``record`` into a new multimap.

        Args:
            record (Any): A dataclass instance, or ``None`` (empty result).

        Returns:
            QueryValues: The encoded entries.

        Raises:
            InvalidTargetError: If ``record`` is not a dataclass instance.
            UnsupportedTypeError: If the record type has an unsupported field.
            CustomEncoderError: If a custom encoder fails.
        """
        values = QueryValues()
        if record is None:
            return values
        if isinstance(record, type) or not dataclasses.is_dataclass(record):
            raise InvalidTargetError(record, "expected a dataclass instance")
        schema: RecordSchema = build_schema(type(record), self._config.metadata_keys)
        self._encode_record(record, schema, "", values)
        logger.debug(
            "Encoded %s into %d key(s)", type(record).__qualname__, len(values)
        )
        return values

    def _encode_record(
        self,
        record: Any,
        schema: RecordSchema,
        scope: str,
        values: QueryValues,
    ) -> None:
        deferred: _Deferred = []
        for spec in schema.fields:
            value: Any = getattr(record, spec.attr)
            if spec.promoted:
                if value is not None:
                    inner: TypeInfo = spec.info.unwrap_optional()
                    if inner.schema is not None:
                        deferred.append((value, inner.schema, scope))
                continue

            key: str = compose_key(scope, spec.name)
            if spec.omitempty and _is_omitted(spec.info, value):
                logger.trace("skip empty %s", key)
                continue
            logger.trace("encode %s (%s)", key, spec.info.kind.value)
            self._encode_value(spec.info, spec.tag, value, key, values, deferred)

        for value, inner_schema, inner_scope in deferred:
            self._encode_record(value, inner_schema, inner_scope, values)

    def _encode_value(
        self,
        info: TypeInfo,
        tag: TagSpec,
        value: Any,
        key: str,
        values: QueryValues,
        deferred: _Deferred,
    ) -> None:
        kind: FieldKind = info.kind
        if kind is FieldKind.OPTIONAL:
            if value is None:
                if info.nullable_encoder:
                    encode_none: Callable[[str, QueryValues], None] = (
                        info.unwrap_optional().py_type.encode_none
                    )
                    self._call_custom(encode_none, key, values)
                return
            assert info.element is not None
            self._encode_value(info.element, tag, value, key, values, deferred)
        elif value is None:
            return
        elif kind is FieldKind.CUSTOM:
            self._call_custom(value.encode_values, key, values)
        elif kind is FieldKind.SEQUENCE:
            assert info.element is not None
            self._encode_sequence(info.element, tag, value, key, values, deferred)
        elif kind is FieldKind.MAPPING:
            self._encode_mapping(info, tag, value, key, values, deferred)
        elif kind is FieldKind.NESTED:
            assert info.schema is not None
            self._encode_record(value, info.schema, key, values)
        else:
            values.add(key, self._render(info, tag, value))

    def _encode_sequence(
        self,
        element: TypeInfo,
        tag: TagSpec,
        items: Iterable[Any],
        key: str,
        values: QueryValues,
        deferred: _Deferred,
    ) -> None:
        strategy: SequenceStrategy = tag.sequence_strategy()
        if strategy is SequenceStrategy.JOINED:
            delimiter: str = tag.delimiter() or ""
            values.add(key, delimiter.join(self._render(element, tag, item) for item in items))
            return

        record_info: TypeInfo = element.unwrap_optional()
        for i, item in enumerate(items):
            if strategy is SequenceStrategy.BRACKETS:
                item_key: str = brackets_key(key)
            elif strategy is SequenceStrategy.NUMBERED:
                item_key = numbered_key(key, i)
            elif strategy is SequenceStrategy.INDEXED:
                item_key = indexed_key(key, i)
                if record_info.kind is FieldKind.NESTED:
                    if item is not None and record_info.schema is not None:
                        deferred.append((item, record_info.schema, item_key))
                    continue
            else:
                item_key = key
            values.add(item_key, self._render(element, tag, item))

    def _encode_mapping(
        self,
        info: TypeInfo,
        tag: TagSpec,
        mapping: Mapping[Any, Any],
        key: str,
        values: QueryValues,
        deferred: _Deferred,
    ) -> None:
        assert info.element is not None
        for map_key, item in mapping.items():
            entry_key: str = compose_key(key, format_scalar(map_key, tag))
            self._encode_value(info.element, tag, item, entry_key, values, deferred)

    def _render(self, info: TypeInfo, tag: TagSpec, value: Any) -> str:
        """Render a leaf value (scalar, time, or a custom type's base) to a string."""
        info = info.unwrap_optional()
        if value is None:
            return ""
        if info.kind is FieldKind.CUSTOM:
            if info.element is None:
                return str(value)
            info = info.element.unwrap_optional()
        if info.kind is FieldKind.TIME:
            return format_time(value, tag, self._config.time_layout)
        return format_scalar(value, tag)

    def _call_custom(
        self,
        encode: Callable[[str, QueryValues], None],
        key: str,
        values: QueryValues,
    ) -> None:
        logger.trace("custom encoder %s for %s", format_callable_pretty(encode), key)
        try:
            encode(key, values)
        except QueryError:
            raise
        except Exception as exc:
            logger.debug(
                "Custom encoder %s failed for key %r: %s",
                format_callable_pretty(encode),
                key,
                exc,
            )
            raise CustomEncoderError(key, exc) from exc
