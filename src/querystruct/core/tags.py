# topmark:header:start
#
#   project      : QueryStruct
#   file         : tags.py
#   file_relpath : src/querystruct/core/tags.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Field tag model: canonical ``(name, options)`` pairs.

A raw field annotation has the grammar ``name[,option]*``. The first segment is
the field's key name (empty means "use the declared attribute name", ``-``
hides the field from both directions); the remaining segments are option flags
checked by membership. Unknown flags are kept but ignored by the codec, so
annotations stay forward compatible.

Example:
    ```python
    tag = parse_tag("q,omitempty,comma")
    assert tag.name == "q"
    assert TagOption.OMITEMPTY in tag
    assert tag.delimiter() == ","
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from querystruct.core.enum_mixins import KeyedStrEnum

SKIP_NAME: Final[str] = "-"


class TagOption(KeyedStrEnum):
    """Option flags recognized by the encoder and decoder."""

    OMITEMPTY = ("omitempty", "Skip the field on encode when it holds its zero value")
    COMMA = ("comma", "Join sequence elements with ','")
    SPACE = ("space", "Join sequence elements with ' '")
    SEMICOLON = ("semicolon", "Join sequence elements with ';'")
    BRACKETS = ("brackets", "Repeat sequence elements under 'key[]'")
    NUMBERED = ("numbered", "Repeat sequence elements under 'key0', 'key1', ...")
    INDEXED = ("indexed", "Repeat sequence elements under 'key[0]', 'key[1]', ...")
    INT = ("int", "Render booleans as '1' / '0'")
    UNIX = ("unix", "Render time values as seconds since the epoch")
    UNIXMILLI = ("unixmilli", "Render time values as milliseconds since the epoch")
    UNIXNANO = ("unixnano", "Render time values as nanoseconds since the epoch")


class SequenceStrategy(str, Enum):
    """How a sequence field is laid out in the multimap."""

    JOINED = "joined"
    BRACKETS = "brackets"
    NUMBERED = "numbered"
    INDEXED = "indexed"
    REPEATED = "repeated"


# Join delimiters in precedence order.
DELIMITER_OPTIONS: Final[tuple[tuple[TagOption, str], ...]] = (
    (TagOption.COMMA, ","),
    (TagOption.SPACE, " "),
    (TagOption.SEMICOLON, ";"),
)


@dataclass(frozen=True)
class TagSpec:
    """Parsed field annotation.

    Attributes:
        name (str): Key name override; empty to use the declared name.
        options (frozenset[str]): Option flags (see `TagOption`).
        layout (str | None): Time layout override (``strftime`` syntax).
        custom_delimiter (str | None): Custom sequence join delimiter.
    """

    name: str = ""
    options: frozenset[str] = frozenset()
    layout: str | None = None
    custom_delimiter: str | None = None

    def __contains__(self, option: object) -> bool:
        return str(option) in self.options

    @property
    def skipped(self) -> bool:
        """Whether the field is hidden from both directions."""
        return self.name == SKIP_NAME

    def delimiter(self) -> str | None:
        """Return the sequence join delimiter, or ``None`` for repeated values.

        ``comma``/``space``/``semicolon`` win over ``brackets``; the custom
        delimiter applies only when none of those options is set.
        """
        for option, sep in DELIMITER_OPTIONS:
            if option in self:
                return sep
        if TagOption.BRACKETS in self:
            return None
        return self.custom_delimiter or None

    def sequence_strategy(self) -> SequenceStrategy:
        """Return the layout used for sequence fields carrying this tag.

        Precedence: a join delimiter, then ``brackets``, ``numbered`` and
        ``indexed``; plain repeated values otherwise.
        """
        if self.delimiter() is not None:
            return SequenceStrategy.JOINED
        if TagOption.BRACKETS in self:
            return SequenceStrategy.BRACKETS
        if TagOption.NUMBERED in self:
            return SequenceStrategy.NUMBERED
        if TagOption.INDEXED in self:
            return SequenceStrategy.INDEXED
        return SequenceStrategy.REPEATED


EMPTY_TAG: Final[TagSpec] = TagSpec()


def parse_tag(
    raw: str | None,
    *,
    layout: str | None = None,
    delimiter: str | None = None,
) -> TagSpec:
    """Split a raw field annotation into its name and comma-separated options.

    Args:
        raw (str | None): The annotation, e.g. ``"q,omitempty"``. ``None`` is
            treated like an empty annotation.
        layout (str | None): Optional time layout carried next to the annotation.
        delimiter (str | None): Optional custom sequence delimiter.

    Returns:
        TagSpec: The parsed tag. Parsing never fails.
    """
    if not raw:
        return TagSpec(layout=layout or None, custom_delimiter=delimiter or None)
    name, *options = raw.split(",")
    return TagSpec(
        name=name,
        options=frozenset(options),
        layout=layout or None,
        custom_delimiter=delimiter or None,
    )
