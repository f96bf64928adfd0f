# topmark:header:start
#
#   project      : QueryStruct
#   file         : exit_codes.py
#   file_relpath : src/querystruct/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the QueryStruct CLI.

QueryStruct aligns with the BSD `sysexits` convention so that other tooling can
interpret failures consistently.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the QueryStruct CLI.

    Attributes:
        SUCCESS: Successful execution with no errors.
        FAILURE: Generic failure (non-specific error).
        USAGE_ERROR: Command-line invocation error (invalid flags/args, unknown
            record target). Mirrors BSD ``EX_USAGE (64)``.
        DATA_ERROR: Input data could not be decoded (invalid scalar value,
            invalid decode target). Mirrors BSD ``EX_DATAERR (65)``.
        UNSUPPORTED_TYPE: The record type has a field the codec cannot handle.
            Mirrors BSD ``EX_UNAVAILABLE (69)``.
        ENCODER_ERROR: A custom encoder failed. Mirrors BSD ``EX_SOFTWARE (70)``.
        CONFIG_ERROR: Configuration error (missing/invalid/malformed config).
            Mirrors BSD ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last-resort).
    """

    SUCCESS = 0
    FAILURE = 1

    # sysexits-aligned values
    USAGE_ERROR = 64  # EX_USAGE
    DATA_ERROR = 65  # EX_DATAERR
    UNSUPPORTED_TYPE = 69  # EX_UNAVAILABLE
    ENCODER_ERROR = 70  # EX_SOFTWARE
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
