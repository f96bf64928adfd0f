# topmark:header:start
#
#   project      : QueryStruct
#   file         : decoder.py
#   file_relpath : src/querystruct/codec/decoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Multimap to record decoding.

The decoder resolves every field's key exactly as the encoder computes it
(same schema, same naming helpers) and dispatches on the field kind. Each
step reports whether the field was actually populated; composite values with
no populated children report "not populated" and keep their current value.

Decoding is a sparse update. Absent keys are never an error and leave fields
untouched. Sequence and mapping fields are rebuilt from scratch as soon as one
of their keys is present.
Element indices of numbered and indexed keys are bounded by the configured
``max_sequence_index``.

Repeated values under one scalar key are handed out positionally to the
fields sharing that key, in traversal order (declared fields before promoted
ones): the first claimant reads the first value, the next one the second, and
a claimant finding no remaining value is not populated.

Updates are computed on copies and committed to the target only after the
whole traversal succeeded, so a failing decode leaves the target unchanged.
"""

from __future__ import annotations

import copy
import dataclasses
import re
from typing import TYPE_CHECKING, Any, Final

from querystruct.codec.scalars import parse_scalar, parse_time
from querystruct.config.logging import get_logger
from querystruct.config.model import DEFAULT_CONFIG
from querystruct.core.errors import (
    InvalidScalarValueError,
    InvalidTargetError,
    UnsupportedTypeError,
)
from querystruct.core.naming import (
    brackets_key,
    compose_key,
    indexed_element,
    indexed_key,
    map_key_fragment,
    numbered_index,
    numbered_key,
)
from querystruct.core.tags import SequenceStrategy
from querystruct.core.values import QueryValues
from querystruct.schema.builder import build_schema
from querystruct.schema.model import FieldKind
from querystruct.schema.zero import make_zero_record, zero_value

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from querystruct.config.logging import QuerystructLogger
    from querystruct.config.model import CodecConfig
    from querystruct.core.tags import TagSpec
    from querystruct.schema.model import RecordSchema, TypeInfo

logger: QuerystructLogger = get_logger(__name__)

_INT_KEY_RE: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")

# (populated, value)
_Result = tuple[bool, Any]


def check_target(target: Any) -> None:
    """Validate a decode destination.

    Raises:
        InvalidTargetError: If ``target`` is ``None``, a class, not a
            dataclass instance, or a frozen dataclass instance.
    """
    if target is None:
        raise InvalidTargetError(target, "target is None")
    if isinstance(target, type):
        raise InvalidTargetError(target, "expected an instance, got a class")
    if not dataclasses.is_dataclass(target):
        raise InvalidTargetError(target, "expected a dataclass instance")
    params: Any = getattr(type(target), "__dataclass_params__", None)
    if getattr(params, "frozen", False):
        raise InvalidTargetError(target, "frozen dataclass instances cannot be updated in place")


class Decoder:
    """Decode a multimap into dataclass records.

    Args:
        values (Mapping[str, Sequence[str] | str]): Source multimap. Plain
            mappings are copied into a `QueryValues`.
        config (CodecConfig | None): Codec configuration; defaults apply when
            ``None``.
    """

    def __init__(
        self,
        values: Mapping[str, Sequence[str] | str],
        config: CodecConfig | None = None,
    ) -> None:
        self._values: QueryValues = (
            values if isinstance(values, QueryValues) else QueryValues.of(values)
        )
        self._config: CodecConfig = config or DEFAULT_CONFIG
        self._cursors: dict[str, int] = {}

    def decode(self, target: Any) -> bool:
        """Decode the multimap into ``target`` in place.

        Args:
            target (Any): A mutable dataclass instance.

        Returns:
            bool: Whether at least one field was populated.

        Raises:
            InvalidTargetError: If ``target`` is not a mutable dataclass instance.
            UnsupportedTypeError: If the record type has an unsupported field.
            InvalidScalarValueError: If a raw value fails to parse.
        """
        check_target(target)
        schema: RecordSchema = build_schema(type(target), self._config.metadata_keys)
        self._cursors = {}
        changes: dict[str, Any] = self._decode_fields(target, schema, "")
        for attr, value in changes.items():
            setattr(target, attr, value)
        logger.debug(
            "Decoded %d field(s) into %s", len(changes), type(target).__qualname__
        )
        return bool(changes)

    def load(self, schema: RecordSchema) -> Any:
        """Decode the multimap into a fresh zero-valued instance of a record type.

        Args:
            schema (RecordSchema): Schema of the record type to instantiate.

        Returns:
            Any: The new record.
        """
        self._cursors = {}
        _, record = self._decode_record(make_zero_record(schema), schema, "")
        return record

    def _take(self, key: str) -> str | None:
        """Return the next unclaimed value of ``key``, or None when exhausted."""
        raw_values: list[str] | None = self._values.get(key)
        if not raw_values:
            return None
        position: int = self._cursors.get(key, 0)
        if position >= len(raw_values):
            return None
        self._cursors[key] = position + 1
        return raw_values[position]

    def _decode_fields(self, record: Any, schema: RecordSchema, scope: str) -> dict[str, Any]:
        changes: dict[str, Any] = {}
        for spec in schema.traversal_order():
            key: str = scope if spec.promoted else compose_key(scope, spec.name)
            logger.trace("decode %s (%s)", key or "<root>", spec.info.kind.value)
            populated, value = self._decode_value(
                spec.info, spec.tag, key, getattr(record, spec.attr)
            )
            if populated:
                changes[spec.attr] = value
        return changes

    def _decode_record(self, record: Any, schema: RecordSchema, scope: str) -> _Result:
        if record is None:
            record = make_zero_record(schema)
        changes: dict[str, Any] = self._decode_fields(record, schema, scope)
        if not changes:
            return False, record
        if schema.frozen:
            return True, dataclasses.replace(record, **changes)
        updated: Any = copy.copy(record)
        for attr, value in changes.items():
            setattr(updated, attr, value)
        return True, updated

    def _decode_value(self, info: TypeInfo, tag: TagSpec, key: str, current: Any) -> _Result:
        kind: FieldKind = info.kind
        if kind is FieldKind.OPTIONAL:
            assert info.element is not None
            seed: Any = current if current is not None else zero_value(info.element)
            populated, value = self._decode_value(info.element, tag, key, seed)
            return (True, value) if populated else (False, current)
        if kind is FieldKind.CUSTOM:
            if info.element is None:
                return self._undecodable(info, key, current)
            return self._decode_value(info.element, tag, key, current)
        if kind is FieldKind.NESTED:
            assert info.schema is not None
            return self._decode_record(current, info.schema, key)
        if kind is FieldKind.SEQUENCE:
            return self._decode_sequence(info, tag, key, current)
        if kind is FieldKind.MAPPING:
            return self._decode_mapping(info, tag, key, current)

        raw: str | None = self._take(key)
        if raw is None:
            return False, current
        return True, self._parse_leaf(info, tag, key, raw)

    def _undecodable(self, info: TypeInfo, key: str, current: Any) -> _Result:
        """Handle a custom type without a decodable base type.

        Absent keys leave the field alone; present ones are an error.
        """
        nested_prefix: str = f"{key}["
        if any(k == key or k.startswith(nested_prefix) for k in self._values):
            raise UnsupportedTypeError(
                info.py_type, context="decoding (no decodable base type)", owner=key
            )
        return False, current

    def _parse_leaf(self, info: TypeInfo, tag: TagSpec, key: str, raw: str) -> Any:
        """Parse one raw value into a scalar, time or custom-scalar element."""
        info = info.unwrap_optional()
        if info.kind is FieldKind.CUSTOM:
            if info.element is None:
                raise UnsupportedTypeError(
                    info.py_type, context="decoding (no decodable base type)", owner=key
                )
            info = info.element.unwrap_optional()
        if info.kind is FieldKind.TIME:
            return parse_time(key, raw, tag, self._config.time_layout, info.py_type)
        return parse_scalar(key, raw, info.py_type, tag)

    def _decode_sequence(self, info: TypeInfo, tag: TagSpec, key: str, current: Any) -> _Result:
        assert info.element is not None
        element: TypeInfo = info.element
        strategy: SequenceStrategy = tag.sequence_strategy()
        items: list[Any]

        if strategy is SequenceStrategy.JOINED:
            raw: str | None = self._take(key)
            if raw is None:
                return False, current
            delimiter: str = tag.delimiter() or ""
            parts: list[str] = raw.split(delimiter) if raw else []
            items = [self._parse_leaf(element, tag, key, part) for part in parts]
        elif strategy is SequenceStrategy.NUMBERED:
            found: dict[int, str] = {}
            for candidate in self._values:
                index: int | None = numbered_index(candidate, key)
                if index is None:
                    continue
                self._check_index(candidate, index)
                # the canonical spelling wins over zero-padded ones (n1 over n01)
                if index not in found or candidate == numbered_key(key, index):
                    found[index] = candidate
            if not found:
                return False, current
            items = [zero_value(element) for _ in range(max(found) + 1)]
            for index, candidate in found.items():
                _, items[index] = self._decode_value(element, tag, candidate, items[index])
        elif strategy is SequenceStrategy.INDEXED:
            populated, items = self._decode_indexed(element, tag, key)
            if not populated:
                return False, current
        else:
            source: str = brackets_key(key) if strategy is SequenceStrategy.BRACKETS else key
            raw_values: list[str] = self._values.get_all(source)
            if not raw_values:
                return False, current
            items = [self._parse_leaf(element, tag, source, part) for part in raw_values]

        logger.trace("sequence %s: %d element(s) (%s)", key, len(items), strategy.value)
        if info.py_type is list:
            return True, items
        return True, info.py_type(items)

    def _decode_indexed(self, element: TypeInfo, tag: TagSpec, key: str) -> tuple[bool, list[Any]]:
        is_record: bool = element.unwrap_optional().kind is FieldKind.NESTED
        scopes: dict[int, str] = {}
        for candidate in self._values:
            located: tuple[int, str] | None = indexed_element(candidate, key)
            if located is None:
                continue
            index, rest = located
            if bool(rest) != is_record:
                continue
            self._check_index(candidate, index)
            scope: str = candidate[: len(candidate) - len(rest)]
            if index not in scopes or scope == indexed_key(key, index):
                scopes[index] = scope
        if not scopes:
            return False, []

        items: list[Any] = [zero_value(element) for _ in range(max(scopes) + 1)]
        populated: bool = False
        for index in sorted(scopes):
            ok, value = self._decode_value(element, tag, scopes[index], items[index])
            if ok:
                items[index] = value
                populated = True
        return populated, items

    def _check_index(self, candidate: str, index: int) -> None:
        """Reject element indices beyond the configured maximum.

        Raises:
            InvalidScalarValueError: If ``index`` exceeds ``max_sequence_index``.
        """
        limit: int = self._config.max_sequence_index
        if index > limit:
            raise InvalidScalarValueError(
                candidate, str(index), "sequence index", detail=f"maximum is {limit}"
            )

    def _decode_mapping(self, info: TypeInfo, tag: TagSpec, key: str, current: Any) -> _Result:
        assert info.element is not None
        assert info.key_type is not None
        result: dict[Any, Any] = {}
        for candidate in list(self._values):
            fragment: str | None = map_key_fragment(candidate, key)
            if fragment is None:
                continue
            map_key: Any = self._parse_map_key(candidate, fragment, info.key_type)
            populated, value = self._decode_value(
                info.element, tag, candidate, zero_value(info.element)
            )
            if populated:
                result[map_key] = value
        if not result:
            return False, current
        logger.trace("mapping %s: %d entr(ies)", key, len(result))
        if info.py_type is dict:
            return True, result
        return True, info.py_type(result)

    @staticmethod
    def _parse_map_key(candidate: str, fragment: str, key_type: type) -> Any:
        if issubclass(key_type, str):
            return fragment
        if not _INT_KEY_RE.fullmatch(fragment):
            raise InvalidScalarValueError(candidate, fragment, "int map key")
        return int(fragment)
