"""Big-endian binary codec for bewire.

This module provides the cursor, the wire type model, the size calculator and
the encode/decode traversals.
"""

from __future__ import annotations

from .cursor import Cursor, new_cursor
from .decoder import decode, decode_from
from .encoder import encode, encode_into
from .schema import FieldSchema, RecordSchema, WireKind, WireType, resolve_wire_type
from .sizing import encoded_size, field_sizes, static_size

__all__ = [
    "encode",
    "encode_into",
    "decode",
    "decode_from",
    "Cursor",
    "new_cursor",
    "encoded_size",
    "field_sizes",
    "static_size",
    "RecordSchema",
    "FieldSchema",
    "WireKind",
    "WireType",
    "resolve_wire_type",
]
