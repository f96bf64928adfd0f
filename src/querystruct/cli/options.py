# topmark:header:start
#
#   project      : QueryStruct
#   file         : options.py
#   file_relpath : src/querystruct/cli/options.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Common CLI options and parameter types.

This module centralizes reusable options (verbosity, color, output format) and
their resolution logic, so commands and the group can stay thin.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Generic, NoReturn, ParamSpec, TypeVar

import click

from querystruct.cli.errors import QuerystructUsageError
from querystruct.config.logging import TRACE_LEVEL
from querystruct.core.enum_mixins import KeyedStrEnum

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec("P")
R = TypeVar("R")
E = TypeVar("E", bound=KeyedStrEnum)


class OutputFormat(KeyedStrEnum):
    """Output format for command results."""

    TEXT = ("text", "Human-friendly text", ("default", "plain"))
    JSON = ("json", "A single JSON document (machine-readable)")
    MARKDOWN = ("markdown", "Markdown", ("md",))


def resolve_verbosity(verbose_count: int, quiet_count: int) -> int:
    """Resolve the logging level from the ``-v``/``-q`` counts.

    Args:
        verbose_count: Number of times ``-v`` is passed.
        quiet_count: Number of times ``-q`` is passed.

    Returns:
        The logging level as an integer: TRACE for ``-vvv``, DEBUG for ``-vv``,
        INFO for ``-v``, ERROR for ``-q``; WARNING by default.

    Raises:
        QuerystructUsageError: If both flags are used simultaneously.
    """
    if verbose_count > 0 and quiet_count > 0:
        raise QuerystructUsageError("The '--verbose' and '--quiet' options are mutually exclusive.")

    if verbose_count >= 3:
        return TRACE_LEVEL
    if verbose_count == 2:
        return logging.DEBUG
    if verbose_count == 1:
        return logging.INFO
    if quiet_count >= 1:
        return logging.ERROR
    return logging.WARNING


def resolve_color(*, no_color: bool, stdout_isatty: bool | None = None) -> bool:
    """Determine whether color output should be enabled.

    Honors ``--no-color``, then ``FORCE_COLOR`` and ``NO_COLOR``; otherwise
    enables color when stdout is a TTY.
    """
    if no_color:
        return False
    force_color: str | None = os.getenv("FORCE_COLOR")
    if force_color and force_color != "0":
        return True
    if os.getenv("NO_COLOR") is not None:
        return False
    if stdout_isatty is None:
        stdout_isatty = sys.stdout.isatty()
    return bool(stdout_isatty)


def common_verbose_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``-v/--verbose`` and ``-q/--quiet`` (counted) to a command."""
    f = click.option(
        "-v",
        "--verbose",
        count=True,
        help="Increase verbosity. Specify up to three times for more detail.",
    )(f)
    f = click.option(
        "-q",
        "--quiet",
        count=True,
        help="Only report errors.",
    )(f)
    return f


def common_color_options(f: Callable[P, R]) -> Callable[P, R]:
    """Add ``--no-color`` to a command."""
    f = click.option(
        "--no-color",
        "no_color",
        is_flag=True,
        help="Disable color output.",
    )(f)
    return f


class EnumChoiceParam(click.ParamType, Generic[E]):
    """A Click parameter type that converts a string to a member of a `KeyedStrEnum`."""

    enum_cls: type[E]
    name: str
    choices: list[str]

    def __init__(self, enum_cls: type[E]) -> None:
        self.enum_cls = enum_cls
        self.name = enum_cls.__name__.lower()
        self.choices = [member.value for member in enum_cls]

    def _fail_noreturn(
        self,
        message: str,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> NoReturn:
        raise click.BadParameter(message, param=param, ctx=ctx)

    def convert(
        self,
        value: object,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> E:
        """Convert a token (key, name or alias) to an enum member."""
        if isinstance(value, self.enum_cls):
            return value
        member: E | None = self.enum_cls.parse(str(value))
        if member is None:
            self._fail_noreturn(
                f"Invalid value '{value}'. Must be one of: {', '.join(self.choices)}",
                param,
                ctx,
            )
        return member

    def __repr__(self) -> str:
        return f"EnumChoiceParam({self.enum_cls.__name__})"


def output_format_option(
    *, default: OutputFormat = OutputFormat.TEXT
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Return a ``--format`` option decorator for `OutputFormat`."""
    return click.option(
        "--format",
        "output_format",
        type=EnumChoiceParam(OutputFormat),
        default=default.value,
        show_default=True,
        help=f"Output format ({', '.join(m.value for m in OutputFormat)}).",
    )

