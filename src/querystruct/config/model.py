# topmark:header:start
#
#   project      : QueryStruct
#   file         : model.py
#   file_relpath : src/querystruct/config/model.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Codec configuration: immutable runtime snapshot and mutable builder.

- `CodecConfig` is a frozen snapshot consumed by the encoder, decoder and
  schema builder.
- `MutableCodecConfig` collects layered sources (defaults, ``pyproject.toml``,
  ``querystruct.toml``, explicit overrides) and produces a `CodecConfig` via
  `MutableCodecConfig.freeze`. Use `CodecConfig.thaw` to edit a snapshot.

Precedence (lowest to highest):
    1. Built-in defaults.
    2. ``[tool.querystruct]`` in ``pyproject.toml``.
    3. ``querystruct.toml`` (or files passed explicitly).
    4. Overrides (CLI/API mappings).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

from querystruct.config.io import (
    extract_pyproject_table,
    get_bool_value_checked,
    get_int_value_checked,
    get_string_value_checked,
    get_table_value,
    load_toml_dict,
)
from querystruct.config.keys import Toml
from querystruct.config.logging import get_logger
from querystruct.constants import (
    DEFAULT_DELIMITER_KEY,
    DEFAULT_EMBED_KEY,
    DEFAULT_LAYOUT_KEY,
    DEFAULT_MAX_SEQUENCE_INDEX,
    DEFAULT_TAG_KEY,
    PYPROJECT_TOML_NAME,
    QUERYSTRUCT_TOML_NAME,
)
from querystruct.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from querystruct.config.io import TomlTable
    from querystruct.config.logging import QuerystructLogger

logger: QuerystructLogger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MetadataKeys:
    """Names of the dataclass field metadata entries read by the schema builder.

    Hashable, so it can be part of the schema cache key.

    Attributes:
        tag (str): Entry holding the ``name[,option]*`` annotation.
        layout (str): Entry holding the time layout override.
        delimiter (str): Entry holding a custom sequence delimiter.
        embed (str): Entry marking a field as embedded (anonymous).
    """

    tag: str = DEFAULT_TAG_KEY
    layout: str = DEFAULT_LAYOUT_KEY
    delimiter: str = DEFAULT_DELIMITER_KEY
    embed: str = DEFAULT_EMBED_KEY


@dataclass(frozen=True, slots=True)
class CodecConfig:
    """Immutable runtime configuration.

    Attributes:
        metadata_keys (MetadataKeys): Field metadata entry names.
        time_layout (str): Default ``strftime`` layout for time values; empty
            selects RFC 3339.
        keep_blank_values (bool): Keep ``key=`` pairs when parsing query strings.
        separator (str): Pair separator for query strings.
        max_sequence_index (int): Largest element index accepted from numbered
            and indexed sequence keys when decoding.
        config_files (tuple[str, ...]): Sources merged into this snapshot.
    """

    metadata_keys: MetadataKeys = MetadataKeys()
    time_layout: str = ""
    keep_blank_values: bool = True
    separator: str = "&"
    max_sequence_index: int = DEFAULT_MAX_SEQUENCE_INDEX
    config_files: tuple[str, ...] = ()

    def thaw(self) -> MutableCodecConfig:
        """Return a mutable copy of this snapshot."""
        return MutableCodecConfig(
            tag_key=self.metadata_keys.tag,
            layout_key=self.metadata_keys.layout,
            delimiter_key=self.metadata_keys.delimiter,
            embed_key=self.metadata_keys.embed,
            time_layout=self.time_layout,
            keep_blank_values=self.keep_blank_values,
            separator=self.separator,
            max_sequence_index=self.max_sequence_index,
            config_files=list(self.config_files),
        )

    def to_toml_dict(self) -> TomlTable:
        """Return the configuration in its TOML shape (without provenance)."""
        return {
            Toml.SECTION_FIELDS: {
                Toml.KEY_TAG_KEY: self.metadata_keys.tag,
                Toml.KEY_LAYOUT_KEY: self.metadata_keys.layout,
                Toml.KEY_DELIMITER_KEY: self.metadata_keys.delimiter,
                Toml.KEY_EMBED_KEY: self.metadata_keys.embed,
            },
            Toml.SECTION_TIME: {
                Toml.KEY_TIME_LAYOUT: self.time_layout,
            },
            Toml.SECTION_QUERY: {
                Toml.KEY_KEEP_BLANK_VALUES: self.keep_blank_values,
                Toml.KEY_SEPARATOR: self.separator,
                Toml.KEY_MAX_SEQUENCE_INDEX: self.max_sequence_index,
            },
        }


# Override value types other than str.
_OVERRIDE_TYPES: Final[dict[str, type]] = {
    Toml.KEY_KEEP_BLANK_VALUES: bool,
    Toml.KEY_MAX_SEQUENCE_INDEX: int,
}

# Flat override names accepted by `MutableCodecConfig.apply_overrides`.
_OVERRIDE_KEYS: Final[frozenset[str]] = frozenset(
    {
        Toml.KEY_TAG_KEY,
        Toml.KEY_LAYOUT_KEY,
        Toml.KEY_DELIMITER_KEY,
        Toml.KEY_EMBED_KEY,
        "time_layout",
        Toml.KEY_KEEP_BLANK_VALUES,
        Toml.KEY_SEPARATOR,
        Toml.KEY_MAX_SEQUENCE_INDEX,
    }
)


@dataclass
class MutableCodecConfig:
    """Mutable builder used while merging configuration sources."""

    tag_key: str = DEFAULT_TAG_KEY
    layout_key: str = DEFAULT_LAYOUT_KEY
    delimiter_key: str = DEFAULT_DELIMITER_KEY
    embed_key: str = DEFAULT_EMBED_KEY
    time_layout: str = ""
    keep_blank_values: bool = True
    separator: str = "&"
    max_sequence_index: int = DEFAULT_MAX_SEQUENCE_INDEX
    config_files: list[str] = field(default_factory=lambda: [])

    def merge_table(self, table: TomlTable, *, source: str) -> None:
        """Merge a ``querystruct`` TOML table into this builder.

        Keys absent from ``table`` keep their current values.

        Args:
            table (TomlTable): The ``querystruct`` table (already unwrapped from
                ``[tool]`` for pyproject files).
            source (str): Source identifier used in error messages and provenance.

        Raises:
            ConfigError: If a value has the wrong type.
        """
        fields_tbl: TomlTable = get_table_value(table, Toml.SECTION_FIELDS, source=source)
        for attr, key in (
            ("tag_key", Toml.KEY_TAG_KEY),
            ("layout_key", Toml.KEY_LAYOUT_KEY),
            ("delimiter_key", Toml.KEY_DELIMITER_KEY),
            ("embed_key", Toml.KEY_EMBED_KEY),
        ):
            value: str | None = get_string_value_checked(fields_tbl, key, source=source)
            if value is not None:
                setattr(self, attr, value)

        time_tbl: TomlTable = get_table_value(table, Toml.SECTION_TIME, source=source)
        layout: str | None = get_string_value_checked(time_tbl, Toml.KEY_TIME_LAYOUT, source=source)
        if layout is not None:
            self.time_layout = layout

        query_tbl: TomlTable = get_table_value(table, Toml.SECTION_QUERY, source=source)
        keep: bool | None = get_bool_value_checked(
            query_tbl, Toml.KEY_KEEP_BLANK_VALUES, source=source
        )
        if keep is not None:
            self.keep_blank_values = keep
        separator: str | None = get_string_value_checked(
            query_tbl, Toml.KEY_SEPARATOR, source=source
        )
        if separator is not None:
            self.separator = separator
        max_index: int | None = get_int_value_checked(
            query_tbl, Toml.KEY_MAX_SEQUENCE_INDEX, source=source
        )
        if max_index is not None:
            self.max_sequence_index = max_index

        self.config_files.append(source)
        logger.debug("Merged configuration from %s", source)

    def merge_file(self, path: Path) -> None:
        """Merge a ``querystruct.toml`` or ``pyproject.toml`` file.

        A ``pyproject.toml`` without a ``[tool.querystruct]`` table is ignored.
        """
        doc: TomlTable = load_toml_dict(path)
        if path.name == PYPROJECT_TOML_NAME:
            table: TomlTable | None = extract_pyproject_table(doc)
            if table is None:
                logger.debug("No [tool.querystruct] table in %s", path)
                return
            self.merge_table(table, source=str(path))
        else:
            self.merge_table(doc, source=str(path))

    def apply_overrides(self, overrides: Mapping[str, Any]) -> None:
        """Apply flat overrides (e.g. from the CLI); ``None`` values are ignored.

        Raises:
            ConfigError: On unknown keys or wrongly typed values.
        """
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in _OVERRIDE_KEYS:
                raise ConfigError(f"unknown configuration override '{key}'")
            expected: type = _OVERRIDE_TYPES.get(key, str)
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigError(f"override '{key}' must be of type {expected.__name__}")
            setattr(self, key, value)

    def freeze(self) -> CodecConfig:
        """Validate and freeze into an immutable `CodecConfig`.

        Raises:
            ConfigError: If a metadata key name or the separator is empty, or
                if ``max_sequence_index`` is negative.
        """
        for attr in ("tag_key", "layout_key", "delimiter_key", "embed_key", "separator"):
            if not getattr(self, attr):
                raise ConfigError(f"'{attr}' must not be empty")
        if self.max_sequence_index < 0:
            raise ConfigError("'max_sequence_index' must not be negative")
        return CodecConfig(
            metadata_keys=MetadataKeys(
                tag=self.tag_key,
                layout=self.layout_key,
                delimiter=self.delimiter_key,
                embed=self.embed_key,
            ),
            time_layout=self.time_layout,
            keep_blank_values=self.keep_blank_values,
            separator=self.separator,
            max_sequence_index=self.max_sequence_index,
            config_files=tuple(self.config_files),
        )

    @classmethod
    def load_merged(
        cls,
        *,
        search_dir: Path | None = None,
        extra_files: Iterable[Path] = (),
        overrides: Mapping[str, Any] | None = None,
    ) -> MutableCodecConfig:
        """Build a builder from all configuration layers.

        Args:
            search_dir (Path | None): Directory searched for ``pyproject.toml``
                and ``querystruct.toml``; ``None`` skips discovery.
            extra_files (Iterable[Path]): Additional config files, merged last.
            overrides (Mapping[str, Any] | None): Flat overrides applied on top.

        Returns:
            MutableCodecConfig: The merged builder.
        """
        draft = cls()
        if search_dir is not None:
            for name in (PYPROJECT_TOML_NAME, QUERYSTRUCT_TOML_NAME):
                candidate: Path = search_dir / name
                if candidate.is_file():
                    draft.merge_file(candidate)
        for path in extra_files:
            draft.merge_file(Path(path))
        if overrides:
            draft.apply_overrides(overrides)
        return draft


DEFAULT_CONFIG: Final[CodecConfig] = CodecConfig()
