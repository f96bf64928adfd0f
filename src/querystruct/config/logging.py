# topmark:header:start
#
#   project      : QueryStruct
#   file         : logging.py
#   file_relpath : src/querystruct/config/logging.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""QueryStruct logging with a TRACE level below DEBUG.

The codec logs every field visit at TRACE, schema builds at DEBUG, and custom
encoder failures at DEBUG before they propagate. Nothing is printed unless the
application (or the CLI) calls `setup_logging`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Final, cast

from yachalk import chalk

if TYPE_CHECKING:
    from collections.abc import Mapping

TRACE_LEVEL: Final[int] = logging.DEBUG - 5

LOG_LEVEL_ENV: Final[str] = "QUERYSTRUCT_LOG_LEVEL"


class QuerystructLogger(logging.Logger):
    """Logger class adding `trace()` for the TRACE level."""

    def trace(
        self,
        msg: object,
        *args: object,
        extra: Mapping[str, object] | None = None,
    ) -> None:
        """Log 'msg % args' with severity 'TRACE'.

        Args:
            msg (object): The message to be logged.
            *args (object): Arguments merged into ``msg``.
            extra (Mapping[str, object] | None): Optional extra record attributes.
        """
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, msg=msg, args=args, extra=extra, stacklevel=2)


if logging.getLevelName(TRACE_LEVEL) != "TRACE":
    logging.addLevelName(TRACE_LEVEL, "TRACE")

logging.setLoggerClass(QuerystructLogger)


LOG_FORMAT = "[%(levelname)s] %(message)s"
DEBUG_LOG_FORMAT = "[%(levelname)s] [%(filename)s:%(lineno)d] [%(funcName)s] %(message)s"

_LEVEL_NAMES: Final[dict[str, int]] = {
    "TRACE": TRACE_LEVEL,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "NOTSET": logging.NOTSET,
}


class ChalkFormatter(logging.Formatter):
    """Formatter coloring each record by severity."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record and colorize it according to its level.

        Args:
            record (logging.LogRecord): The record to format.

        Returns:
            str: The colorized message.
        """
        level: int = record.levelno
        message: str = super().format(record)

        if level >= logging.CRITICAL:
            return chalk.red_bright(message)
        if level >= logging.ERROR:
            return chalk.red(message)
        if level >= logging.WARNING:
            return chalk.yellow(message)
        if level >= logging.INFO:
            return chalk.green(message)
        if level >= logging.DEBUG:
            return chalk.gray(message)
        if level >= TRACE_LEVEL:
            return chalk.blue(message)
        return chalk.dim.red(message)


def resolve_env_log_level() -> int | None:
    """Return a logging level from ``QUERYSTRUCT_LOG_LEVEL`` or None if unset.

    Accepts level names (``"TRACE"``, ``"debug"``...) and numeric strings.
    Unknown names resolve to ``None``.
    """
    raw: str | None = os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return None
    token: str = raw.strip().upper()
    if token.isdigit():
        return int(token)
    return _LEVEL_NAMES.get(token)


def setup_logging(level: int | None = None) -> None:
    """Configure the root logger with a colored stdout handler.

    If ``level`` is None, the environment is consulted via `resolve_env_log_level`.
    Default is CRITICAL when unspecified.
    """
    if level is None:
        level = resolve_env_log_level() or logging.CRITICAL

    root_logger: logging.Logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ChalkFormatter(LOG_FORMAT if level >= logging.INFO else DEBUG_LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.propagate = False


def get_logger(name: str) -> QuerystructLogger:
    """Retrieve a `QuerystructLogger` with the specified name.

    Args:
        name (str): The name of the logger.

    Returns:
        QuerystructLogger: The logger instance.
    """
    return cast("QuerystructLogger", logging.getLogger(name))
