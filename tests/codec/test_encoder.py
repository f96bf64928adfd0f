# topmark:header:start
#
#   project      : QueryStruct
#   file         : test_encoder.py
#   file_relpath : tests/codec/test_encoder.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for record to multimap encoding (`querystruct.codec.encoder`)."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from querystruct.api import encode, encode_query
from querystruct.codec.encoder import Encoder
from querystruct.core.errors import InvalidTargetError
from querystruct.core.values import QueryValues
from tests import records
from tests.conftest import make_config, parametrize

Y2K: datetime = datetime(2000, 1, 1, 12, 34, 56, tzinfo=timezone.utc)


def _assert_encodes(record: Any, expected: dict[str, list[str]]) -> None:
    values: QueryValues = encode(record)
    assert values == expected
    assert list(values) == list(expected)


@parametrize(
    "record, expected",
    [
        # zero values
        (records.Scalars(), {"s": [""], "i": ["0"], "f": ["0"], "b": ["false"]}),
        # simple non-zero values
        (
            records.Scalars(s="v", i=1, f=0.1, b=True),
            {"s": ["v"], "i": ["1"], "f": ["0.1"], "b": ["true"]},
        ),
        # bool-specific options
        (records.IntBool(v=False), {"v": ["0"]}),
        (records.IntBool(v=True), {"v": ["1"]}),
        # enums render their value
        (records.EnumFields(), {"color": ["red"], "level": ["1"]}),
    ],
)
def test_encode_basic_types(record: Any, expected: dict[str, list[str]]) -> None:
    """Scalars render to their canonical form under the field name."""
    _assert_encodes(record, expected)


def test_encode_time_values() -> None:
    """Time values honor the epoch options and layout override."""
    record = records.Times(rfc=Y2K, unix=Y2K, milli=Y2K, nano=Y2K, day=Y2K)

    _assert_encodes(
        record,
        {
            "rfc": ["2000-01-01T12:34:56Z"],
            "unix": ["946730096"],
            "milli": ["946730096000"],
            "nano": ["946730096000000000"],
            "day": ["2000-01-01"],
        },
    )


def test_encode_time_with_configured_layout() -> None:
    """The configured default layout replaces RFC 3339."""
    values: QueryValues = encode(records.OptionalTime(when=Y2K), config={"time_layout": "%Y"})

    assert values == {"when": ["2000"]}


@parametrize(
    "record, expected",
    [
        # absent optionals produce no entry
        (records.Optionals(), {}),
        (
            records.Optionals(s="s", i=0, items=["a", "b"]),
            {"s": ["s"], "i": ["0"], "items": ["a", "b"]},
        ),
        (records.Optionals(items=[]), {}),
        (records.OptionalTime(when=Y2K), {"when": ["2000-01-01T12:34:56Z"]}),
    ],
)
def test_encode_optionals(record: Any, expected: dict[str, list[str]]) -> None:
    """``None`` short-circuits to no entry; present values encode normally."""
    _assert_encodes(record, expected)


@parametrize(
    "record, expected",
    [
        (records.Sequences(), {"comma": [""], "space": [""], "semicolon": [""]}),
        (records.Sequences(plain=["a", "b"]), {"plain": ["a", "b"]}),
        (records.Sequences(comma=["a", "b"]), {"comma": ["a,b"]}),
        (records.Sequences(space=["a", "b"]), {"space": ["a b"]}),
        (records.Sequences(semicolon=["a", "b"]), {"semicolon": ["a;b"]}),
        (records.Sequences(brackets=["a", "b"]), {"brackets[]": ["a", "b"]}),
        (records.Sequences(numbered=["a", "b"]), {"numbered0": ["a"], "numbered1": ["b"]}),
        (records.Sequences(indexed=["a", "b"]), {"indexed[0]": ["a"], "indexed[1]": ["b"]}),
        (records.Tuples(), {"v": ["", ""]}),
        (records.Tuples(v=("a", "b")), {"v": ["a", "b"]}),
        (records.AbstractSequence(v=(1, 2)), {"v": ["1", "2"]}),
        (records.BoolSequence(v=[True, False]), {"v": ["1 0"]}),
        (records.OptionalElements(v=["a", None, "b"]), {"v": ["a  b"]}),
        (records.TimeSequence(v=[Y2K, Y2K]), {"v": ["946730096,946730096"]}),
    ],
)
def test_encode_sequences(record: Any, expected: dict[str, list[str]]) -> None:
    """Each sequence layout produces its key grammar."""
    _assert_encodes(record, expected)


def test_encode_numbered_sequence_indices_have_no_leading_zeros() -> None:
    """Numbered keys use plain decimal indices."""
    values: QueryValues = encode(records.Sequences(numbered=[str(i) for i in range(11)]))

    assert list(values) == [f"numbered{i}" for i in range(11)]


def test_encode_empty_joined_sequence() -> None:
    """A joined sequence without elements renders one empty value."""
    values: QueryValues = encode(records.CustomDelimiters())

    assert values == {"pipe": [""], "avocado": [""], "overridden": [""]}


def test_encode_custom_delimiters() -> None:
    """Custom delimiters join elements unless a built-in delimiter is set."""
    record = records.CustomDelimiters(pipe=["a", "b"], avocado=["a", "b"], overridden=["a", "b"])

    _assert_encodes(
        record,
        {
            "pipe": ["a|b"],
            "avocado": ["a\N{AVOCADO}b"],
            "overridden": ["a,b"],
        },
    )


def test_encode_nested_records() -> None:
    """Nested records compose bracketed keys; absent optional records are skipped."""
    _assert_encodes(
        records.Outer(records.Nested(a=records.SubNested("v"))),
        {"nest[a][value]": ["v"]},
    )
    _assert_encodes(
        records.Outer(records.Nested(b=records.SubNested(), ptr=records.SubNested("v"))),
        {"nest[a][value]": [""], "nest[b][value]": [""], "nest[ptr][value]": ["v"]},
    )


def test_encode_indexed_records() -> None:
    """Records inside ``indexed`` sequences are scoped at their element key."""
    order = records.Order(
        id="o1",
        items=[records.Item("a", 1), records.Item("b", 2)],
    )

    _assert_encodes(
        order,
        {
            "id": ["o1"],
            "items[0][name]": ["a"],
            "items[0][qty]": ["1"],
            "items[1][name]": ["b"],
            "items[1][qty]": ["2"],
        },
    )


@parametrize(
    "record, expected",
    [
        (records.Hidden(visible="v", skipped="s", _private="p"), {"visible": ["v"]}),
        (records.OmitEmpty(), {}),
        # the field is actually named "omitempty"
        (records.NamedOmitempty(), {"omitempty": [""]}),
        # a present optional holding an empty value is not omitted
        (records.OmitEmpty(opt=""), {"opt": [""]}),
        (
            records.OmitEmpty(s="s", i=1, b=True, when=Y2K, items=["a"]),
            {
                "s": ["s"],
                "i": ["1"],
                "b": ["true"],
                "when": ["2000-01-01T12:34:56Z"],
                "items": ["a"],
            },
        ),
    ],
)
def test_encode_omit_empty(record: Any, expected: dict[str, list[str]]) -> None:
    """``omitempty`` skips zero values; hidden and private fields never appear."""
    _assert_encodes(record, expected)


@parametrize(
    "record, expected",
    [
        (records.Embeds(records.Inner("a")), {"v": ["a"]}),
        (records.OptionalEmbed(records.Inner("a")), {"v": ["a"]}),
        (records.OptionalEmbed(), {}),
        # declared fields first, then promoted ones
        (records.Mixed(inner=records.Inner("a"), v="b"), {"v": ["b", "a"]}),
        # values from private embeds are still included
        (
            records.PrivateEmbed(records.Mixed(inner=records.Inner("bar"), v="foo")),
            {"v": ["foo", "bar"]},
        ),
        # promotion is transitive
        (
            records.Chain(records.Middle(records.Inner("v"), w="w"), x="x"),
            {"x": ["x"], "w": ["w"], "v": ["v"]},
        ),
        (records.NamedEmbed(records.Inner("a")), {"in[v]": ["a"]}),
    ],
)
def test_encode_embedded_records(record: Any, expected: dict[str, list[str]]) -> None:
    """Embedded records surface their fields in the enclosing scope."""
    _assert_encodes(record, expected)


def test_encode_mappings() -> None:
    """Mappings encode one ``field[k]`` entry per item, in iteration order."""
    _assert_encodes(
        records.Maps(labels={"b": "2", "a": "1"}, counts={10: 1, -1: 2}),
        {"labels[b]": ["2"], "labels[a]": ["1"], "counts[10]": ["1"], "counts[-1]": ["2"]},
    )
    _assert_encodes(
        records.MapOfLists(groups={"g": ["x", "y"]}, repeated={"r": [1, 2]}),
        {"groups[g]": ["x,y"], "repeated[r]": ["1", "2"]},
    )
    _assert_encodes(records.MapOfOptionals(v={"a": 1, "b": None}), {"v[a]": ["1"]})


def test_encode_none_record() -> None:
    """``None`` encodes to an empty multimap."""
    assert encode(None) == {}
    assert encode_query(None) == ""


@parametrize("record", ["", 1, records.Scalars, [records.Scalars()]])
def test_encode_invalid_input(record: Any) -> None:
    """Only dataclass instances can be encoded."""
    with pytest.raises(InvalidTargetError):
        encode(record)


def test_encode_query_string() -> None:
    """`encode_query` percent-encodes the multimap with the configured separator."""
    search = records.Search(query="a b", tags=["x", "y"], filters={"lang": "en"})

    assert encode_query(search) == "q=a+b&tag=x%2Cy&filter%5Blang%5D=en"
    assert encode_query(search, config={"separator": ";"}) == "q=a+b;tag=x%2Cy;filter%5Blang%5D=en"


def test_encoder_instance_is_reusable() -> None:
    """An `Encoder` keeps no state between calls."""
    encoder = Encoder(make_config())

    assert encoder.encode(records.Inner("a")) == {"v": ["a"]}
    assert encoder.encode(records.Inner("b")) == {"v": ["b"]}
