# topmark:header:start
#
#   project      : QueryStruct
#   file         : test_decoder.py
#   file_relpath : tests/codec/test_decoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for multimap to record decoding (`querystruct.codec.decoder`)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from querystruct.api import decode, decode_query, load
from querystruct.codec.decoder import Decoder
from querystruct.core.errors import (
    InvalidBooleanValueError,
    InvalidScalarValueError,
    InvalidTargetError,
)
from querystruct.core.values import QueryValues
from tests import records
from tests.conftest import parametrize

Y2K: datetime = datetime(2000, 1, 1, 12, 34, 56, tzinfo=timezone.utc)


@parametrize(
    "values, expected",
    [
        # empty
        (
            {"s": [""], "i": ["0"], "f": ["0"], "b": ["false"]},
            records.Scalars(),
        ),
        # basic primitives
        (
            {"s": ["a"], "i": ["-1"], "f": ["0.25"], "b": ["true"]},
            records.Scalars(s="a", i=-1, f=0.25, b=True),
        ),
        # skip empty
        ({}, records.Scalars()),
        # the first value wins for a single field
        ({"s": ["a", "b"]}, records.Scalars(s="a")),
        ({"v": ["1"]}, records.IntBool(v=True)),
        (
            {"color": ["green"], "level": ["2"]},
            records.EnumFields(records.Color.GREEN, records.Level.HIGH),
        ),
    ],
)
def test_decode_scalars(values: dict[str, list[str]], expected: Any) -> None:
    """Scalars parse the first value of their key; absent keys keep defaults."""
    assert load(values, type(expected)) == expected


def test_decode_optionals() -> None:
    """Optionals are materialized only when their key is present."""
    assert load({"s": "string", "items": ["a"]}, records.Optionals) == records.Optionals(
        s="string", items=["a"]
    )
    assert load({"when": "2000-01-01T12:34:56Z"}, records.OptionalTime).when == Y2K
    assert load({}, records.Optionals) == records.Optionals()


def test_decode_time_values() -> None:
    """Time values parse per the same options used to encode them."""
    values: dict[str, str] = {
        "rfc": "2000-01-01T12:34:56Z",
        "unix": "946730096",
        "milli": "946730096000",
        "nano": "946730096000000000",
        "day": "2000-01-01",
    }

    record: records.Times = load(values, records.Times)

    assert record == records.Times(
        rfc=Y2K, unix=Y2K, milli=Y2K, nano=Y2K, day=datetime(2000, 1, 1, tzinfo=timezone.utc)
    )


def test_decode_time_with_configured_layout() -> None:
    """The configured default layout applies to fields without their own."""
    record = load({"when": "2000"}, records.OptionalTime, config={"time_layout": "%Y"})

    assert record.when == datetime(2000, 1, 1, tzinfo=timezone.utc)


def test_decode_sequences() -> None:
    """Each sequence layout decodes back from its key grammar."""
    values: dict[str, list[str]] = {
        "plain": ["a", "b"],
        "comma": ["a,b"],
        "space": ["a b"],
        "semicolon": ["a;b"],
        "brackets[]": ["a", "b"],
        "numbered0": ["a"],
        "numbered1": ["b"],
        "indexed[0]": ["a"],
        "indexed[1]": ["b"],
    }

    record: records.Sequences = load(values, records.Sequences)

    expected: list[str] = ["a", "b"]
    assert record == records.Sequences(
        plain=expected,
        comma=expected,
        space=expected,
        semicolon=expected,
        brackets=expected,
        numbered=expected,
        indexed=expected,
    )


@parametrize(
    "values, expected",
    [
        ({"v": ["a", "b"]}, records.Tuples(("a", "b"))),
        ({"v": ["1", "2"]}, records.AbstractSequence([1, 2])),
        ({"v": ["1 0"]}, records.BoolSequence([True, False])),
        ({"v": ["string string"]}, records.OptionalElements(["string", "string"])),
        (
            {"v": ["946730096,0"]},
            records.TimeSequence([Y2K, datetime(1970, 1, 1, tzinfo=timezone.utc)]),
        ),
        (
            {"pipe": ["a|b"], "avocado": ["a\N{AVOCADO}b"], "overridden": ["a,b"]},
            records.CustomDelimiters(["a", "b"], ["a", "b"], ["a", "b"]),
        ),
    ],
)
def test_decode_sequence_variants(values: dict[str, list[str]], expected: Any) -> None:
    """Element types and sequence containers follow the declaration."""
    assert load(values, type(expected)) == expected


def test_decode_sequence_container_types() -> None:
    """Tuples stay tuples; abstract sequences decode as lists."""
    assert type(load({"v": ["a"]}, records.Tuples).v) is tuple
    assert type(load({"v": ["1"]}, records.AbstractSequence).v) is list


def test_decode_joined_empty_value_is_empty_sequence() -> None:
    """An empty joined value decodes to an empty sequence."""
    target = records.Sequences(comma=["stale"])

    decode({"comma": [""]}, target)

    assert target.comma == []


def test_decode_numbered_sequence_grows_and_skips_foreign_keys() -> None:
    """Numbered keys grow the sequence to the highest index; other keys are ignored."""
    values: dict[str, list[str]] = {"numbered2": ["c"], "numbered0": ["a"], "numberedx": ["?"]}

    record: records.Sequences = load(values, records.Sequences)

    assert record.numbered == ["a", "", "c"]


def test_decode_zero_padded_sequence_indices() -> None:
    """Zero-padded indices read the values of the key that was matched."""
    record: records.Sequences = load(
        {"numbered01": ["x"], "indexed[02]": ["y"]}, records.Sequences
    )

    assert record.numbered == ["", "x"]
    assert record.indexed == ["", "", "y"]


def test_decode_canonical_index_wins_over_zero_padded_one() -> None:
    """When both spellings of an index are present, the unpadded key is read."""
    record: records.Sequences = load(
        {"numbered01": ["padded"], "numbered1": ["plain"]}, records.Sequences
    )

    assert record.numbered == ["", "plain"]


def test_decode_zero_padded_record_indices() -> None:
    """Records at zero-padded indices decode from their own element keys."""
    order: records.Order = load(
        {"items[01][name]": ["b"], "items[01][qty]": ["2"]}, records.Order
    )

    assert order.items == [records.Item(), records.Item("b", 2)]


@parametrize(
    "values",
    [
        {"numbered5000000": ["x"]},
        {"indexed[5000000]": ["x"]},
        {"numbered10001": ["x"]},
    ],
)
def test_decode_rejects_sequence_index_beyond_maximum(values: dict[str, list[str]]) -> None:
    """Element indices above ``max_sequence_index`` fail before any allocation."""
    with pytest.raises(InvalidScalarValueError, match="maximum is 10000") as excinfo:
        load(values, records.Sequences)

    assert excinfo.value.key == next(iter(values))
    assert excinfo.value.expected == "sequence index"


def test_decode_rejects_record_index_beyond_maximum() -> None:
    """The maximum also applies to records inside ``indexed`` sequences."""
    with pytest.raises(InvalidScalarValueError):
        load({"items[99][name]": ["x"]}, records.Order, config={"max_sequence_index": 10})


def test_decode_sequence_index_maximum_is_configurable() -> None:
    """Indices up to the configured maximum are accepted."""
    config: dict[str, Any] = {"max_sequence_index": 2}

    record: records.Sequences = load({"numbered2": ["c"]}, records.Sequences, config=config)
    assert record.numbered == ["", "", "c"]

    with pytest.raises(InvalidScalarValueError, match="maximum is 2"):
        load({"numbered3": ["d"]}, records.Sequences, config=config)


def test_decode_sequence_index_failure_leaves_target_unchanged() -> None:
    """A rejected index leaves the decode target untouched."""
    target = records.Sequences(numbered=["kept"])

    with pytest.raises(InvalidScalarValueError):
        decode({"plain": ["new"], "numbered20": ["x"]}, target, config={"max_sequence_index": 5})

    assert target == records.Sequences(numbered=["kept"])


def test_decode_sequences_are_rebuilt() -> None:
    """Sequences are replaced as a whole once one of their keys is present."""
    target = records.Sequences(plain=["old", "older"], brackets=["kept"])

    decode({"plain": ["new"]}, target)

    assert target.plain == ["new"]
    assert target.brackets == ["kept"]


def test_decode_nested_records() -> None:
    """Nested records recurse with their key as scope."""
    record = load({"nest[a][value]": ["that"], "nest[b]": [""]}, records.Outer)
    assert record == records.Outer(records.Nested(a=records.SubNested("that")))

    record = load(
        {"nest[a][value]": [""], "nest[b]": [""], "nest[ptr][value]": ["that"]},
        records.Outer,
    )
    assert record == records.Outer(records.Nested(ptr=records.SubNested("that")))


def test_decode_indexed_records() -> None:
    """Records inside ``indexed`` sequences decode from their element keys."""
    values: dict[str, list[str]] = {
        "id": ["o1"],
        "items[1][name]": ["b"],
        "items[0][name]": ["a"],
        "items[0][qty]": ["1"],
        "items[1][qty]": ["2"],
    }

    order: records.Order = load(values, records.Order)

    assert order == records.Order(id="o1", items=[records.Item("a", 1), records.Item("b", 2)])


def test_decode_indexed_records_with_gaps() -> None:
    """Missing indices are filled with zero records."""
    order: records.Order = load({"items[2][name]": ["c"]}, records.Order)

    assert order.items == [records.Item(), records.Item(), records.Item("c")]


def test_decode_mappings() -> None:
    """Map keys are recovered from the bracketed key fragment."""
    values: dict[str, list[str]] = {
        "labels[k1]": ["v1"],
        "labels[k2]": ["v2"],
        "counts[10]": ["1"],
        "counts[-1]": ["2"],
    }

    record: records.Maps = load(values, records.Maps)

    assert record.labels == {"k1": "v1", "k2": "v2"}
    assert record.counts == {10: 1, -1: 2}


def test_decode_mapping_values() -> None:
    """Map values decode through the field's options."""
    record: records.MapOfLists = load(
        {"groups[g]": ["x,y"], "repeated[r]": ["1", "2"]}, records.MapOfLists
    )
    assert record.groups == {"g": ["x", "y"]}
    assert record.repeated == {"r": [1, 2]}

    optionals: records.MapOfOptionals = load({"v[a]": ["1"]}, records.MapOfOptionals)
    assert optionals.v == {"a": 1}


def test_decode_int_map_key_must_parse() -> None:
    """An unparsable fragment for an integer-keyed map is an error."""
    with pytest.raises(InvalidScalarValueError) as excinfo:
        load({"counts[ten]": ["1"]}, records.Maps)

    assert excinfo.value.key == "counts[ten]"
    assert excinfo.value.value == "ten"


def test_decode_mappings_are_rebuilt() -> None:
    """Mappings are replaced as a whole once one of their keys is present."""
    target = records.Maps(labels={"old": "x"}, counts={1: 1})

    decode({"labels[new]": "y"}, target)

    assert target.labels == {"new": "y"}
    assert target.counts == {1: 1}


def test_decode_embedded_records() -> None:
    """Promoted fields read from the enclosing scope."""
    assert load({"v": ["foo"]}, records.Embeds) == records.Embeds(records.Inner("foo"))
    assert load({"v": ["foo"]}, records.OptionalEmbed) == records.OptionalEmbed(
        records.Inner("foo")
    )
    assert load({}, records.OptionalEmbed) == records.OptionalEmbed()
    assert load({"x": "x", "w": "w", "v": "v"}, records.Chain) == records.Chain(
        records.Middle(records.Inner("v"), w="w"), x="x"
    )
    assert load({"in[v]": ["a"]}, records.NamedEmbed) == records.NamedEmbed(records.Inner("a"))


def test_decode_shared_key_single_value_populates_declared_field_only() -> None:
    """A single value under a shared key goes to the declared field."""
    record: records.Mixed = load({"v": ["foo"]}, records.Mixed)

    assert record == records.Mixed(inner=records.Inner(""), v="foo")


def test_decode_shared_key_values_are_distributed_in_traversal_order() -> None:
    """Repeated values under a shared key are handed out positionally."""
    record: records.Mixed = load({"v": ["foo", "bar"]}, records.Mixed)
    assert record == records.Mixed(inner=records.Inner("bar"), v="foo")

    private: records.PrivateEmbed = load({"v": ["foo", "bar"]}, records.PrivateEmbed)
    assert private._inner == records.Mixed(inner=records.Inner("bar"), v="foo")  # noqa: SLF001


def test_decode_is_a_sparse_update() -> None:
    """Fields without a matching key keep their current values."""
    target = records.Scalars(s="keep", i=5)

    populated: bool = Decoder(QueryValues.of({"b": "true"})).decode(target)

    assert populated
    assert target == records.Scalars(s="keep", i=5, b=True)


def test_decode_reports_unpopulated() -> None:
    """`Decoder.decode` reports whether anything was populated."""
    target = records.Scalars()

    assert not Decoder({"unrelated": ["x"]}).decode(target)
    assert target == records.Scalars()


def test_decode_returns_target() -> None:
    """`decode` returns the updated target itself."""
    target = records.Scalars()

    assert decode({"i": "3"}, target) is target
    assert decode_query("s=a+b", target) is target
    assert target == records.Scalars(s="a b", i=3)


@parametrize(
    "values",
    [
        {"i": ["x"]},
        {"i": [""]},
        {"f": ["1,5"]},
        {"b": ["yes"]},
    ],
)
def test_decode_invalid_scalars(values: dict[str, list[str]]) -> None:
    """Parse failures name the key and the raw value."""
    key, raw = next(iter(values.items()))

    with pytest.raises(InvalidScalarValueError) as excinfo:
        load(values, records.Scalars)

    assert excinfo.value.key == key
    assert excinfo.value.value == raw[0]


def test_decode_invalid_int_bool() -> None:
    """Booleans under ``int`` accept only ``1``/``0``."""
    with pytest.raises(InvalidBooleanValueError) as excinfo:
        load({"v": "true"}, records.IntBool)

    assert "'1'" in str(excinfo.value)
    assert "'0'" in str(excinfo.value)


@parametrize(
    "target",
    [
        None,
        "string",
        {"i": 1},
        records.Scalars,
        records.NotARecord(),
        records.FrozenPoint(),
    ],
)
def test_decode_invalid_target(target: Any) -> None:
    """Only mutable dataclass instances are valid destinations."""
    with pytest.raises(InvalidTargetError):
        decode({"i": "1"}, target)


def test_decode_failure_leaves_target_unchanged() -> None:
    """A failing field aborts the decode before anything is committed."""
    target = records.Scalars(s="keep")

    with pytest.raises(InvalidScalarValueError):
        decode({"s": "new", "i": "1", "b": "maybe"}, target)

    assert target == records.Scalars(s="keep")


def test_decode_failure_leaves_nested_records_unchanged() -> None:
    """Nested records are updated on copies, not in place."""
    nested = records.Nested()
    target = records.Outer(nested)
    order = records.Order(items=[records.Item("a", 1)])

    decode({"nest[a][value]": "x"}, target)

    assert target.nest.a.value == "x"
    assert nested.a.value == ""

    with pytest.raises(InvalidScalarValueError):
        decode({"id": "o2", "items[0][qty]": "many"}, order)
    assert order == records.Order(items=[records.Item("a", 1)])


def test_load_frozen_record() -> None:
    """`load` rebuilds frozen records instead of mutating them."""
    point: records.FrozenPoint = load({"x": "1", "y": "2"}, records.FrozenPoint)

    assert point == records.FrozenPoint(1, 2)


def test_load_fills_required_fields() -> None:
    """`load` zero-constructs records whose fields have no defaults."""
    record: records.Required = load({"name": "n", "tags": ["a"]}, records.Required)

    assert record == records.Required(name="n", count=0, when=datetime.min, tags=["a"])


@parametrize("record_type", [records.NotARecord, records.Scalars(), int])
def test_load_invalid_record_type(record_type: Any) -> None:
    """`load` requires a dataclass type."""
    with pytest.raises(InvalidTargetError):
        load({}, record_type)
