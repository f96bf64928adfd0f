# topmark:header:start
#
#   project      : QueryStruct
#   file         : __init__.py
#   file_relpath : src/querystruct/core/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Core building blocks: tag model, key naming, the multimap and error types.

Modules here are dependency-free (stdlib only) so they can be imported from
anywhere in the package without circular-import risk.
"""
