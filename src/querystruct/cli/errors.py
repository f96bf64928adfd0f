# topmark:header:start
#
#   project      : QueryStruct
#   file         : errors.py
#   file_relpath : src/querystruct/cli/errors.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exceptions for the QueryStruct CLI.

Usage:
    Raise these exceptions in CLI commands to signal errors with standardized
    messages and exit codes. `cli_error_for` maps codec errors
    (`querystruct.core.errors`) onto them.

Styling:
    Exceptions prefer the project console if available (see `show()`); if no
    console is present in the Click context, they fall back to Click's default
    styling.
"""

from __future__ import annotations

from typing import IO, Any

import click

from querystruct.cli.exit_codes import ExitCode
from querystruct.core.errors import (
    ConfigError,
    CustomEncoderError,
    InvalidScalarValueError,
    InvalidTargetError,
    QueryError,
    UnsupportedTypeError,
)


class QuerystructCliError(click.ClickException):
    """Base class for all QueryStruct CLI errors."""

    exit_code = ExitCode.FAILURE

    def format_message(self) -> str:  # pragma: no cover - trivial
        """Return the plain error message text (no color; see `show()`)."""
        return str(getattr(self, "message", ""))

    def show(self, file: IO[Any] | None = None) -> None:  # pragma: no cover - Click prints errors
        """Display the error using the project console if available.

        Falls back to Click's default error display when no console is present.
        """
        ctx: click.Context | None = click.get_current_context(silent=True)
        if ctx is not None and isinstance(getattr(ctx, "obj", None), dict):
            console = ctx.obj.get("console")
            if console is not None:
                console.error(console.styled(f"Error: {self.format_message()}", fg="bright_red"))
                return
        super().show(file)


class QuerystructUsageError(QuerystructCliError):
    """Error for command-line invocation errors (invalid flags/args/targets)."""

    exit_code = ExitCode.USAGE_ERROR


class QuerystructDataError(QuerystructCliError):
    """Error for input data that cannot be decoded."""

    exit_code = ExitCode.DATA_ERROR


class QuerystructUnsupportedTypeError(QuerystructCliError):
    """Error for record types with fields the codec cannot handle."""

    exit_code = ExitCode.UNSUPPORTED_TYPE


class QuerystructEncoderError(QuerystructCliError):
    """Error for failing custom encoders."""

    exit_code = ExitCode.ENCODER_ERROR


class QuerystructConfigError(QuerystructCliError):
    """Error for configuration errors (missing/invalid/malformed config)."""

    exit_code = ExitCode.CONFIG_ERROR


_ERROR_MAP: tuple[tuple[type[QueryError], type[QuerystructCliError]], ...] = (
    (ConfigError, QuerystructConfigError),
    (UnsupportedTypeError, QuerystructUnsupportedTypeError),
    (CustomEncoderError, QuerystructEncoderError),
    (InvalidScalarValueError, QuerystructDataError),
    (InvalidTargetError, QuerystructDataError),
)


def cli_error_for(exc: QueryError) -> QuerystructCliError:
    """Return the CLI error matching a codec error.

    Args:
        exc (QueryError): The codec error.

    Returns:
        QuerystructCliError: A CLI error carrying the message and exit code.
    """
    for error_type, cli_type in _ERROR_MAP:
        if isinstance(exc, error_type):
            return cli_type(str(exc))
    return QuerystructCliError(str(exc))
