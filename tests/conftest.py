# topmark:header:start
#
#   project      : QueryStruct
#   file         : conftest.py
#   file_relpath : tests/conftest.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Pytest configuration for the QueryStruct test suite.

This file sets up global fixtures and customizes the logging configuration for
test runs, so that every field visit of the codec is traced while tests run.

Notes:
    Tests should respect the immutable/mutable configuration split:

    - Build configs using `querystruct.config.MutableCodecConfig` (mutable),
      then `freeze()` into a `querystruct.config.CodecConfig` for **public
      API** calls (``querystruct.api.encode/decode``).
    - Do **not** mutate a frozen `CodecConfig`. If you need to tweak one, call
      `CodecConfig.thaw()`, edit the returned builder, then `freeze()` again.

    Record types used by tests live in `tests.records` (a regular module), so
    that their annotations resolve and the CLI can import them as
    ``tests.records:QualName``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar, cast

import pytest

from querystruct.config import logging
from querystruct.config.model import MutableCodecConfig

if TYPE_CHECKING:
    from pathlib import Path

    from querystruct.config.model import CodecConfig

F = TypeVar("F", bound=Callable[..., object])

# This defines the type for the decorator function itself:
# It takes a Callable (F) and returns the same Callable (F).
DecoratorType = Callable[[F], F]


def as_typed_mark(mark: Any) -> DecoratorType[Any]:
    """Wrap a pytest mark so static type checkers preserve the function type.

    Args:
        mark (Any): A pytest mark decorator such as `pytest.mark.cli`.

    Returns:
        DecoratorType[Any]: A decorator that preserves the wrapped function's type.
    """

    def _decorator(func: F) -> F:
        return cast("F", mark(func))

    return _decorator


mark_cli: DecoratorType[Any] = as_typed_mark(pytest.mark.cli)
mark_hypothesis_slow: DecoratorType[Any] = as_typed_mark(pytest.mark.hypothesis_slow)


def parametrize(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.mark.parametrize`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.mark.parametrize`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.mark.parametrize`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    mark: pytest.MarkDecorator = pytest.mark.parametrize(*args, **kwargs)
    return as_typed_mark(mark)


def hookimpl(*args: Any, **kwargs: Any) -> Callable[[F], F]:
    """Typed wrapper for `pytest.hookimpl`.

    Args:
        *args (Any): Positional arguments forwarded to `pytest.hookimpl`.
        **kwargs (Any): Keyword arguments forwarded to `pytest.hookimpl`.

    Returns:
        Callable[[F], F]: A decorator that preserves the wrapped function's type.
    """
    return as_typed_mark(pytest.hookimpl(*args, **kwargs))


@pytest.fixture(autouse=True)
def silence_querystruct_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure QueryStruct's runtime log level is not forced via env during tests.

    This avoids accidental DEBUG/TRACE noise in CLI output when the developer
    has exported QUERYSTRUCT_LOG_LEVEL in their shell.

    Args:
        monkeypatch (pytest.MonkeyPatch): Pytest monkeypatch fixture used to
            manipulate environment variables.
    """
    monkeypatch.delenv(logging.LOG_LEVEL_ENV, raising=False)


@hookimpl(tryfirst=True)
def pytest_configure(config: pytest.Config) -> None:  # pylint: disable=unused-argument
    """Configure pytest settings and customize logging for the test suite.

    This function sets the logging level to TRACE for all tests, ensuring
    detailed output is captured during test execution.

    Args:
        config (pytest.Config): The pytest configuration object.
    """
    logging.setup_logging(level=logging.TRACE_LEVEL)


@pytest.fixture
def isolation(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run a test in an empty temporary working directory.

    Keeps configuration discovery (``pyproject.toml``/``querystruct.toml`` in the
    working directory) from picking up files of the repository itself.

    Args:
        tmp_path (Path): The pytest-provided temporary directory for the test.
        monkeypatch (pytest.MonkeyPatch): Fixture to change the working directory.

    Returns:
        Path: The isolated working directory.
    """
    cwd: Path = tmp_path / "proj"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


def make_config(**overrides: Any) -> CodecConfig:
    """Return a frozen `CodecConfig` built from defaults and flat overrides.

    Args:
        **overrides (Any): Flat overrides (``tag_key``, ``time_layout``...).

    Returns:
        CodecConfig: An immutable configuration snapshot for use in tests.
    """
    draft = MutableCodecConfig()
    draft.apply_overrides(overrides)
    return draft.freeze()
