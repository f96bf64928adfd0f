# topmark:header:start
#
#   project      : QueryStruct
#   file         : test_logging_setup.py
#   file_relpath : tests/config/test_logging_setup.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the logging helpers (`querystruct.config.logging`)."""

from __future__ import annotations

import logging

import pytest

from querystruct.config.logging import (
    LOG_LEVEL_ENV,
    TRACE_LEVEL,
    QuerystructLogger,
    get_logger,
    resolve_env_log_level,
)
from tests.cli.conftest import assert_SUCCESS, run_cli
from tests.conftest import parametrize


@parametrize(
    "raw, expected",
    [
        ("TRACE", TRACE_LEVEL),
        ("debug", logging.DEBUG),
        (" Warn ", logging.WARNING),
        ("20", logging.INFO),
        ("chatty", None),
        ("", None),
    ],
)
def test_resolve_env_log_level(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: int | None
) -> None:
    """Level names and numbers are accepted; unknown names are ignored."""
    monkeypatch.setenv(LOG_LEVEL_ENV, raw)

    assert resolve_env_log_level() == expected


def test_env_log_level_unset() -> None:
    """Without the variable no level is forced."""
    assert resolve_env_log_level() is None


def test_loggers_have_trace() -> None:
    """Package loggers are `QuerystructLogger` instances with `trace()`."""
    logger = get_logger("querystruct.tests.trace")

    assert isinstance(logger, QuerystructLogger)
    assert logging.getLevelName(TRACE_LEVEL) == "TRACE"


def test_verbose_and_quiet_flags_parse() -> None:
    """Verbosity and quietness flags are accepted by every command."""
    for args in (["-v", "version"], ["-vvv", "version"], ["-q", "version"], ["-qq", "version"]):
        assert_SUCCESS(run_cli(args))
