# topmark:header:start
#
#   project      : QueryStruct
#   file         : fields.py
#   file_relpath : src/querystruct/schema/fields.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Helpers declaring annotated dataclass fields.

The schema builder reads per-field annotations from ``dataclasses.field``
metadata. These helpers fill that metadata under the configured entry names.

Example:
    ```python
    @dataclass
    class Search:
        query: str = query_field("q")
        tags: list[str] = query_field("tag,comma", default_factory=list)
        since: datetime = query_field("since,omitempty", layout="%Y-%m-%d",
                                      default=datetime.min)
        paging: Paging = embedded(default_factory=Paging)
    ```
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

from querystruct.config.model import MetadataKeys

if TYPE_CHECKING:
    from collections.abc import Mapping


def query_field(
    tag: str | None = None,
    *,
    layout: str | None = None,
    delimiter: str | None = None,
    embed: bool = False,
    keys: MetadataKeys | None = None,
    metadata: Mapping[str, Any] | None = None,
    **field_kwargs: Any,
) -> Any:
    """Return a ``dataclasses.field`` carrying a QueryStruct annotation.

    Args:
        tag (str | None): Raw annotation ``name[,option]*``.
        layout (str | None): Time layout override (``strftime`` syntax).
        delimiter (str | None): Custom sequence join delimiter.
        embed (bool): Mark the field as embedded (anonymous). Without a tag
            name, the fields of the nested record are promoted into the
            enclosing scope.
        keys (MetadataKeys | None): Metadata entry names; must match the
            names the codec is configured with.
        metadata (Mapping[str, Any] | None): Extra metadata to merge.
        **field_kwargs (Any): Forwarded to ``dataclasses.field`` (``default``,
            ``default_factory``, ``repr``...).

    Returns:
        Any: The dataclass field specifier.
    """
    keys = keys or MetadataKeys()
    meta: dict[str, Any] = dict(metadata or {})
    if tag is not None:
        meta[keys.tag] = tag
    if layout is not None:
        meta[keys.layout] = layout
    if delimiter is not None:
        meta[keys.delimiter] = delimiter
    if embed:
        meta[keys.embed] = True
    return dataclasses.field(metadata=meta, **field_kwargs)


def embedded(tag: str | None = None, **kwargs: Any) -> Any:
    """Shorthand for ``query_field(tag, embed=True, ...)``."""
    return query_field(tag, embed=True, **kwargs)
