"""bewire: Big-Endian Wire Records

A Python library for converting structured records to and from a fixed
big-endian binary wire format, the layout used by many classic binary network
protocols (SSH requests, C structs sent over sockets, ...).

Key Features:
- Pydantic-based record modeling
- Fixed-width integers, booleans, length-prefixed strings
- Fixed-size arrays and length-prefixed sequences
- Nested records (also inside arrays and sequences)
- Exact size calculation before encoding
- Cursor API for hand-parsing heterogeneous payloads

Wire format:
    integer (w bits)      w/8 bytes, big-endian, two's complement if signed
    bool                  1 byte, 0x00 false, nonzero true
    str                   4-byte length L, then L bytes (UTF-8)
    FixedArray(T, N)      N elements, no prefix
    list[T]               4-byte count C, then C elements
    nested record         fields inlined, no delimiter

Quick Start:
    >>> from bewire import BaseRecord, UInt32, encode, decode
    >>>
    >>> class PtyRequest(BaseRecord):
    ...     term: str
    ...     width: UInt32
    ...     height: UInt32
    ...     pixel_width: UInt32 = 0
    ...     pixel_height: UInt32 = 0
    >>>
    >>> request = PtyRequest(term="xterm", width=80, height=24)
    >>> data = encode(request)
    >>> decoded = decode(data, PtyRequest)
"""

from __future__ import annotations

from .codec import (
    Cursor,
    FieldSchema,
    RecordSchema,
    WireKind,
    WireType,
    decode,
    decode_from,
    encode,
    encode_into,
    encoded_size,
    field_sizes,
    new_cursor,
    resolve_wire_type,
    static_size,
)
from .config import DEFAULT_CONFIG, CodecConfig
from .exceptions import (
    BewireError,
    DecodeError,
    EncodeError,
    InsufficientInput,
    LengthOverflow,
    SchemaError,
    UnsupportedType,
)
from .models import (
    BaseRecord,
    FixedArray,
    FixedLength,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    WireInt,
)

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BaseRecord",
    "encode",
    "decode",
    "encode_into",
    "decode_from",
    # Field helpers
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "WireInt",
    "FixedArray",
    "FixedLength",
    # Cursor
    "Cursor",
    "new_cursor",
    # Schema
    "RecordSchema",
    "FieldSchema",
    "WireKind",
    "WireType",
    "resolve_wire_type",
    # Sizing
    "encoded_size",
    "field_sizes",
    "static_size",
    # Configuration
    "CodecConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "BewireError",
    "UnsupportedType",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    "InsufficientInput",
    "LengthOverflow",
    # Version
    "__version__",
]
