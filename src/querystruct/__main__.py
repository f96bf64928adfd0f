# topmark:header:start
#
#   project      : QueryStruct
#   file         : __main__.py
#   file_relpath : src/querystruct/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running QueryStruct via ``python -m querystruct``.

Delegates to :func:`querystruct.cli.main.cli`, the single CLI entry point.
"""

from __future__ import annotations

from querystruct.cli.main import cli

if __name__ == "__main__":
    cli()
