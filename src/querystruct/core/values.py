# topmark:header:start
#
#   project      : QueryStruct
#   file         : values.py
#   file_relpath : src/querystruct/core/values.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Ordered string multimap exchanged at the codec boundary.

`QueryValues` maps each key to the ordered list of its raw string values.
Insertion order of keys and of repeated values is preserved. Percent-escaping
is not a concern of the codec: `QueryValues.parse` and
`QueryValues.to_query_string` delegate it to `urllib.parse`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl, urlencode


class QueryValues(dict[str, list[str]]):
    """Ordered mapping from key to the list of its raw values.

    Example:
        ```python
        values = QueryValues()
        values.add("tag", "a")
        values.add("tag", "b")
        assert values.to_query_string() == "tag=a&tag=b"
        ```
    """

    @classmethod
    def of(cls, data: Mapping[str, str | Iterable[str]]) -> QueryValues:
        """Build a multimap from a mapping of single values or value lists.

        Args:
            data (Mapping[str, str | Iterable[str]]): Source entries.

        Returns:
            QueryValues: A new multimap.
        """
        out = cls()
        for key, raw in data.items():
            out[key] = [raw] if isinstance(raw, str) else list(raw)
        return out

    @classmethod
    def parse(
        cls,
        query: str,
        *,
        keep_blank_values: bool = True,
        separator: str = "&",
    ) -> QueryValues:
        """Parse a URL query string (without the leading ``?``).

        Args:
            query (str): The query string, e.g. ``"q=foo&page=2"``.
            keep_blank_values (bool): Keep ``key=`` pairs with empty values.
            separator (str): Pair separator.

        Returns:
            QueryValues: The parsed multimap.
        """
        out = cls()
        pairs: list[tuple[str, str]] = parse_qsl(
            query.lstrip("?"),
            keep_blank_values=keep_blank_values,
            separator=separator,
        )
        for key, raw in pairs:
            out.add(key, raw)
        return out

    def add(self, key: str, value: str) -> None:
        """Append ``value`` to the values of ``key``."""
        self.setdefault(key, []).append(value)

    def set(self, key: str, value: str) -> None:
        """Replace all values of ``key`` with the single ``value``."""
        self[key] = [value]

    def get_first(self, key: str, default: str = "") -> str:
        """Return the first value of ``key``, or ``default`` when absent or empty."""
        values: list[str] | None = self.get(key)
        if values:
            return values[0]
        return default

    def get_all(self, key: str) -> list[str]:
        """Return a copy of all values of ``key`` (empty when absent)."""
        return list(self.get(key, []))

    def pairs(self) -> list[tuple[str, str]]:
        """Return the flattened ``(key, value)`` pairs in insertion order."""
        return [(key, raw) for key, values in self.items() for raw in values]

    def to_query_string(self, *, separator: str = "&") -> str:
        """Render the multimap as a percent-encoded query string.

        Args:
            separator (str): Pair separator.

        Returns:
            str: The query string (no leading ``?``).
        """
        encoded: list[str] = [urlencode([pair]) for pair in self.pairs()]
        return separator.join(encoded)

    def __repr__(self) -> str:
        return f"QueryValues({dict.__repr__(self)})"
