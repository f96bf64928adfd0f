# topmark:header:start
#
#   project      : QueryStruct
#   file         : builder.py
#   file_relpath : src/querystruct/schema/builder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Build and cache `RecordSchema` descriptions of dataclass record types.

The builder resolves each field's type hints once, classifies them into a
`FieldKind` tree and validates every combination the codec cannot express.
Unsupported shapes raise `UnsupportedTypeError` here, before any value is read
or written, instead of surfacing halfway through a traversal.

Supported declared types:
    - scalars: ``str``, ``int``, ``float``, ``bool`` (and subclasses, including enums)
    - ``datetime.datetime``
    - ``list[T]``, ``tuple[T, ...]``, ``Sequence[T]``
    - ``dict[K, V]``, ``Mapping[K, V]`` with ``K`` in ``{str, int}``
    - dataclasses (nested records)
    - ``T | None`` / ``Optional[T]``
    - any type implementing ``encode_values`` (custom encoder)
"""

from __future__ import annotations

import collections.abc
import dataclasses
import functools
import types
import typing
from datetime import datetime
from typing import TYPE_CHECKING, Any, Final, Union

from querystruct.codec.hooks import implements_encoder, implements_nullable_encoder
from querystruct.config.logging import get_logger
from querystruct.config.model import MetadataKeys
from querystruct.core.errors import UnsupportedTypeError
from querystruct.core.tags import SequenceStrategy, TagSpec, parse_tag
from querystruct.schema.model import FieldKind, FieldSpec, RecordSchema, TypeInfo

if TYPE_CHECKING:
    from querystruct.config.logging import QuerystructLogger

logger: QuerystructLogger = get_logger(__name__)

_SCALAR_TYPES: Final[tuple[type, ...]] = (bool, int, float, str)
_SEQUENCE_ORIGINS: Final[tuple[Any, ...]] = (list, tuple, collections.abc.Sequence)
_MAPPING_ORIGINS: Final[tuple[Any, ...]] = (dict, collections.abc.Mapping)
_MAP_KEY_TYPES: Final[tuple[type, ...]] = (str, int)

# Element kinds a sequence may hold (records additionally need `indexed`).
_LEAF_KINDS: Final[frozenset[FieldKind]] = frozenset(
    {FieldKind.SCALAR, FieldKind.TIME, FieldKind.CUSTOM}
)

# Map values keep their entry key intact only with these layouts.
_MAP_SEQUENCE_STRATEGIES: Final[frozenset[SequenceStrategy]] = frozenset(
    {SequenceStrategy.JOINED, SequenceStrategy.REPEATED}
)


def build_schema(record_type: type, keys: MetadataKeys | None = None) -> RecordSchema:
    """Return the (cached) schema of a dataclass record type.

    Args:
        record_type (type): The dataclass to describe.
        keys (MetadataKeys | None): Field metadata entry names; defaults apply
            when ``None``.

    Returns:
        RecordSchema: The flattened, validated layout.

    Raises:
        UnsupportedTypeError: If ``record_type`` is not a dataclass or any field
            has a type the codec cannot handle.
    """
    return _build_cached(record_type, keys or MetadataKeys())


@functools.cache
def _build_cached(record_type: type, keys: MetadataKeys) -> RecordSchema:
    schema: RecordSchema = _build(record_type, keys, ())
    logger.debug(
        "Built schema for %s: %d field(s), %d promoted",
        record_type.__qualname__,
        len(schema.fields),
        len(schema.promoted),
    )
    return schema


def clear_schema_cache() -> None:
    """Drop all cached schemas (e.g. after redefining record types in a REPL)."""
    _build_cached.cache_clear()


def _build(record_type: type, keys: MetadataKeys, stack: tuple[type, ...]) -> RecordSchema:
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise UnsupportedTypeError(record_type, context="record position (expected a dataclass)")
    if record_type in stack:
        raise UnsupportedTypeError(record_type, context="a recursive record definition")

    try:
        hints: dict[str, Any] = typing.get_type_hints(record_type)
    except (NameError, TypeError) as exc:
        raise UnsupportedTypeError(
            record_type, context=f"annotations that cannot be resolved ({exc})"
        ) from exc

    inner_stack: tuple[type, ...] = (*stack, record_type)
    specs: list[FieldSpec] = []
    for f in dataclasses.fields(record_type):
        spec: FieldSpec | None = _build_field(record_type, f, hints[f.name], keys, inner_stack)
        if spec is not None:
            specs.append(spec)

    params: Any = getattr(record_type, "__dataclass_params__", None)
    return RecordSchema(
        record_type=record_type,
        fields=tuple(specs),
        frozen=bool(getattr(params, "frozen", False)),
    )


def _build_field(
    owner: type,
    f: dataclasses.Field[Any],
    hint: Any,
    keys: MetadataKeys,
    stack: tuple[type, ...],
) -> FieldSpec | None:
    meta: collections.abc.Mapping[str, Any] = f.metadata
    tag: TagSpec = parse_tag(
        meta.get(keys.tag),
        layout=meta.get(keys.layout),
        delimiter=meta.get(keys.delimiter),
    )
    if tag.skipped:
        return None

    embedded: bool = bool(meta.get(keys.embed, False))
    if f.name.startswith("_") and not embedded:
        # private attribute
        return None

    owner_path: str = f"{owner.__qualname__}.{f.name}"
    info: TypeInfo = _classify(hint, keys, stack, owner_path)
    _validate_field(info, tag, owner_path)

    promoted: bool = embedded and not tag.name and info.unwrap_optional().kind is FieldKind.NESTED
    return FieldSpec(
        attr=f.name,
        name=tag.name or f.name,
        tag=tag,
        info=info,
        promoted=promoted,
    )


def _classify(hint: Any, keys: MetadataKeys, stack: tuple[type, ...], owner: str) -> TypeInfo:
    """Classify a resolved type hint into a `TypeInfo` tree."""
    while hasattr(hint, "__supertype__"):
        # typing.NewType
        hint = hint.__supertype__

    origin: Any = typing.get_origin(hint)
    args: tuple[Any, ...] = typing.get_args(hint)

    if origin is Union or origin is types.UnionType:
        members: list[Any] = [a for a in args if a is not type(None)]
        if len(members) != 1 or len(members) == len(args):
            raise UnsupportedTypeError(
                hint, context="a union (only `T | None` is supported)", owner=owner
            )
        inner: TypeInfo = _classify(members[0], keys, stack, owner)
        innermost: TypeInfo = inner.unwrap_optional()
        return TypeInfo(
            kind=FieldKind.OPTIONAL,
            element=inner,
            nullable_encoder=innermost.kind is FieldKind.CUSTOM
            and implements_nullable_encoder(innermost.py_type),
        )

    if implements_encoder(hint):
        return TypeInfo(
            kind=FieldKind.CUSTOM,
            py_type=hint,
            element=_custom_fallback(hint, keys, stack, owner),
        )

    if origin in _SEQUENCE_ORIGINS:
        return _classify_sequence(hint, origin, args, keys, stack, owner)

    if origin in _MAPPING_ORIGINS:
        return _classify_mapping(hint, dict, args, keys, stack, owner)

    if isinstance(hint, type) and origin is None:
        if issubclass(hint, datetime):
            return TypeInfo(kind=FieldKind.TIME, py_type=hint)
        if issubclass(hint, _SCALAR_TYPES):
            return TypeInfo(kind=FieldKind.SCALAR, py_type=hint)
        if dataclasses.is_dataclass(hint):
            return TypeInfo(
                kind=FieldKind.NESTED,
                py_type=hint,
                schema=_build(hint, keys, stack),
            )

    raise UnsupportedTypeError(hint, owner=owner)


def _classify_sequence(
    hint: Any,
    origin: Any,
    args: tuple[Any, ...],
    keys: MetadataKeys,
    stack: tuple[type, ...],
    owner: str,
    py_type: type | None = None,
) -> TypeInfo:
    if origin is tuple:
        if len(args) != 2 or args[1] is not Ellipsis:
            raise UnsupportedTypeError(hint, context="a fixed-size tuple", owner=owner)
        default_type: type = tuple
    else:
        if len(args) != 1:
            raise UnsupportedTypeError(hint, context="an unparameterized sequence", owner=owner)
        default_type = list

    element: TypeInfo = _classify(args[0], keys, stack, owner)
    leaf: TypeInfo = element.unwrap_optional()
    if leaf.kind not in _LEAF_KINDS and leaf.kind is not FieldKind.NESTED:
        raise UnsupportedTypeError(args[0], context="a sequence element", owner=owner)
    return TypeInfo(kind=FieldKind.SEQUENCE, py_type=py_type or default_type, element=element)


def _classify_mapping(
    hint: Any,
    py_type: type,
    args: tuple[Any, ...],
    keys: MetadataKeys,
    stack: tuple[type, ...],
    owner: str,
) -> TypeInfo:
    if len(args) != 2:
        raise UnsupportedTypeError(hint, context="an unparameterized mapping", owner=owner)
    key_type: Any = args[0]
    if key_type is bool or key_type not in _MAP_KEY_TYPES:
        raise UnsupportedTypeError(key_type, context="map key", owner=owner)

    value: TypeInfo = _classify(args[1], keys, stack, owner)
    leaf: TypeInfo = value.unwrap_optional()
    if leaf.kind is FieldKind.SEQUENCE and leaf.element is not None:
        leaf = leaf.element.unwrap_optional()
        if leaf.kind is FieldKind.NESTED:
            raise UnsupportedTypeError(args[1], context="map value", owner=owner)
    if leaf.kind not in _LEAF_KINDS:
        raise UnsupportedTypeError(args[1], context="map value", owner=owner)
    return TypeInfo(kind=FieldKind.MAPPING, py_type=py_type, element=value, key_type=key_type)


def _custom_fallback(
    tp: type,
    keys: MetadataKeys,
    stack: tuple[type, ...],
    owner: str,
) -> TypeInfo | None:
    """Return the kind used to decode a custom-encoder type, or None if it has none.

    Custom encoders have no decode counterpart, so decoding falls back to the
    type's base: a scalar or ``datetime`` subclass, a ``list[T]``/``dict[K, V]``
    subclass, or a dataclass.
    """
    if issubclass(tp, datetime):
        return TypeInfo(kind=FieldKind.TIME, py_type=tp)
    if issubclass(tp, _SCALAR_TYPES):
        return TypeInfo(kind=FieldKind.SCALAR, py_type=tp)
    if dataclasses.is_dataclass(tp):
        return TypeInfo(kind=FieldKind.NESTED, py_type=tp, schema=_build(tp, keys, stack))
    for base in getattr(tp, "__orig_bases__", ()):
        origin: Any = typing.get_origin(base)
        if origin in (list, tuple) and issubclass(tp, origin):
            return _classify_sequence(
                base, origin, typing.get_args(base), keys, stack, owner, py_type=tp
            )
        if origin is dict and issubclass(tp, dict):
            return _classify_mapping(base, tp, typing.get_args(base), keys, stack, owner)
    return None


def _validate_field(info: TypeInfo, tag: TagSpec, owner: str) -> None:
    """Reject option/type combinations the encoder cannot represent."""
    base: TypeInfo = info.unwrap_optional()
    if base.kind is FieldKind.CUSTOM:
        base = base.element.unwrap_optional() if base.element is not None else base
    strategy: SequenceStrategy = tag.sequence_strategy()
    if base.kind is FieldKind.MAPPING and base.element is not None:
        value: TypeInfo = base.element.unwrap_optional()
        if value.kind is FieldKind.SEQUENCE and strategy not in _MAP_SEQUENCE_STRATEGIES:
            raise UnsupportedTypeError(
                value.py_type,
                context=f"map value with the '{strategy.value}' sequence layout",
                owner=owner,
            )
        return
    if base.kind is not FieldKind.SEQUENCE or base.element is None:
        return
    element: TypeInfo = base.element.unwrap_optional()
    if element.kind is FieldKind.NESTED and strategy is not SequenceStrategy.INDEXED:
        raise UnsupportedTypeError(
            element.py_type,
            context="a sequence without the 'indexed' option",
            owner=owner,
        )
