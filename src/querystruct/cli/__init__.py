# topmark:header:start
#
#   project      : QueryStruct
#   file         : __init__.py
#   file_relpath : src/querystruct/cli/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Click-based command line interface for QueryStruct."""
