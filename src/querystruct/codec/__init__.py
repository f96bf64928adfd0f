# topmark:header:start
#
#   project      : QueryStruct
#   file         : __init__.py
#   file_relpath : src/querystruct/codec/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Encoding and decoding engines.

- `querystruct.codec.encoder`: record -> multimap.
- `querystruct.codec.decoder`: multimap -> record.
- `querystruct.codec.hooks`: per-type extension points (custom encoders,
  emptiness).
- `querystruct.codec.scalars`: string rendering and parsing of leaf values.

This package module intentionally imports nothing so the schema layer can depend
on `querystruct.codec.hooks` without import cycles.
"""
