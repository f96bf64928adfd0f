# topmark:header:start
#
#   project      : QueryStruct
#   file         : constants.py
#   file_relpath : src/querystruct/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct Constants."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

try:
    QUERYSTRUCT_VERSION: str = get_version("querystruct")
except PackageNotFoundError:  # running from a source checkout without install
    QUERYSTRUCT_VERSION = "0.0.0"

# Default names of the dataclass field metadata entries:
DEFAULT_TAG_KEY: str = "url"
DEFAULT_LAYOUT_KEY: str = "layout"
DEFAULT_DELIMITER_KEY: str = "del"
DEFAULT_EMBED_KEY: str = "embed"

# Largest element index accepted by numbered and indexed sequence keys:
DEFAULT_MAX_SEQUENCE_INDEX: int = 10_000

# Configuration file names searched by the config loader:
PYPROJECT_TOML_NAME: str = "pyproject.toml"
QUERYSTRUCT_TOML_NAME: str = "querystruct.toml"

# Tokens used for booleans without / with the "int" option:
BOOL_TOKENS: tuple[str, str] = ("true", "false")
BOOL_INT_TOKENS: tuple[str, str] = ("1", "0")
