# topmark:header:start
#
#   project      : QueryStruct
#   file         : conftest.py
#   file_relpath : tests/cli/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""CLI test helpers for running QueryStruct through Click's test runner.

Record targets passed to the CLI use the ``tests.records:QualName`` form; the
``tests`` namespace package is importable because pytest puts the repository
root on ``sys.path`` (see ``pythonpath`` in ``pyproject.toml``).
"""

from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any

from click.testing import CliRunner, Result

from querystruct.cli.exit_codes import ExitCode
from querystruct.cli.main import cli

if TYPE_CHECKING:
    from collections.abc import Sequence


def run_cli(
    argv: str | Sequence[str] | None,
    *,
    input_text: str | bytes | IO[Any] | None = None,
) -> Result:
    """Invoke the CLI in the current working directory.

    Args:
        argv (str | Sequence[str] | None): CLI argument vector, e.g.
            ``["parse", "a=1"]``.
        input_text (str | bytes | IO[Any] | None): Optional standard input
            passed to the command (used when the query argument is omitted).

    Returns:
        Result: The `click.testing.Result` produced by
            `click.testing.CliRunner.invoke`.

    Example:
        ```python
        result = run_cli(["parse", "a=1"])
        assert result.exit_code == ExitCode.SUCCESS
        ```
    """
    runner = CliRunner()
    return runner.invoke(cli, argv, input=input_text)


def assert_SUCCESS(result: Result) -> None:
    """Assert that the command exited successfully (code 0).

    Args:
        result (Result): The Result object returned by `run_cli`.
    """
    assert result.exit_code == ExitCode.SUCCESS, result.output


def assert_USAGE_ERROR(result: Result) -> None:
    """Assert that the command exited with USAGE_ERROR (code 64).

    Args:
        result (Result): The Result object returned by `run_cli`.
    """
    assert result.exit_code == ExitCode.USAGE_ERROR, result.output


def assert_exit_code(result: Result, expected: ExitCode) -> None:
    """Assert that the command exited with ``expected``.

    Args:
        result (Result): The Result object returned by `run_cli`.
        expected (ExitCode): The expected exit code.
    """
    assert result.exit_code == expected, result.output
