"""Binary encoder for Pydantic records.

This module provides the encode() function that converts a record (or a single
scalar) to the big-endian wire format. Fields are encoded in declaration order;
the output buffer is sized exactly by the size calculator before anything is
written.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import BewireError, EncodeError
from .cursor import Cursor
from .schema import RecordSchema, WireKind, WireType, as_wire_type, shape_of
from .sizing import check_length, size_of, text_bytes

logger = logging.getLogger(__name__)


def encode(value: Any, shape: Any = None, *, config: Optional[CodecConfig] = None) -> bytes:
    """Encode a record or scalar value to the wire format.

    Args:
        value: BaseRecord instance, or a scalar/collection value
        shape: Wire type or annotation of ``value``. Inferred for records,
            ``str``, ``bytes`` and ``bool``; required for integers and lists.
        config: Codec configuration (defaults to DEFAULT_CONFIG)

    Returns:
        Encoded bytes

    Raises:
        UnsupportedType: If the shape is outside the wire type set
        LengthOverflow: If a string or sequence is too long for its prefix
        EncodeError: If a value does not match its field type or the record
            exceeds its wire_max_bytes

    Examples:
        ```python
        from bewire import BaseRecord, UInt16, UInt32, encode

        class PtyRequest(BaseRecord):
            term: str
            width: UInt32
            height: UInt32

        data = encode(PtyRequest(term="xterm", width=80, height=24))

        # Scalars
        encode("Hello")            # b"\\x00\\x00\\x00\\x05Hello"
        encode(17, UInt16)         # b"\\x00\\x11"
        encode([1, 2], list[UInt16])
        ```
    """
    config = config or DEFAULT_CONFIG
    wire_type = shape_of(value) if shape is None else as_wire_type(shape)

    size = size_of(value, wire_type, config)

    if wire_type.kind is WireKind.RECORD:
        max_bytes = getattr(wire_type.record, "wire_max_bytes", None)
        if max_bytes is not None and size > max_bytes:
            raise EncodeError(
                f"Encoded record size ({size} bytes) exceeds wire_max_bytes={max_bytes}"
            )

    cursor = Cursor.for_writing(size)
    _encode_value(cursor, value, wire_type, config)

    if cursor.remaining() != 0:
        raise EncodeError(
            f"Encoder wrote {cursor.position} bytes, size calculator reported {size}"
        )

    logger.debug("Encoded %s into %d bytes", wire_type.describe(), size)
    return cursor.getvalue()


def encode_into(
    cursor: Cursor, value: Any, shape: Any = None, *, config: Optional[CodecConfig] = None
) -> None:
    """Encode a value at the cursor's current position.

    The cursor must have at least ``encoded_size(value, shape)`` bytes left.
    This is the building block for payloads composed by hand, e.g. a header
    written field by field followed by a typed body.

    Raises:
        UnsupportedType: If the shape is outside the wire type set
        LengthOverflow: If a string or sequence is too long for its prefix
        EncodeError: If a value does not match its type or the buffer is full
    """
    config = config or DEFAULT_CONFIG
    wire_type = shape_of(value) if shape is None else as_wire_type(shape)
    if wire_type.kind is WireKind.RECORD:
        assert wire_type.record is not None
        RecordSchema.from_model(wire_type.record)
    _encode_value(cursor, value, wire_type, config)


def _encode_value(cursor: Cursor, value: Any, wire_type: WireType, config: CodecConfig) -> None:
    """Encode a single value according to its wire type.

    Args:
        cursor: Cursor to write to
        value: Value to encode
        wire_type: Resolved wire type
        config: Codec configuration

    Raises:
        EncodeError: If value is invalid
    """
    kind = wire_type.kind

    if kind is WireKind.BOOL:
        if not isinstance(value, bool):
            raise EncodeError(f"Expected bool, got {type(value).__name__}", offset=cursor.position)
        cursor.write_bool(value)
        return

    if kind is WireKind.UINT or kind is WireKind.INT:
        if not isinstance(value, int):
            raise EncodeError(f"Expected int, got {type(value).__name__}", offset=cursor.position)
        if kind is WireKind.UINT:
            cursor.write_uint(value, wire_type.bits)
        else:
            cursor.write_int(value, wire_type.bits)
        return

    if kind is WireKind.STRING:
        raw = text_bytes(value, config)
        cursor.write_u32(len(raw))
        cursor.write_bytes(raw)
        return

    if kind is WireKind.RECORD:
        assert wire_type.record is not None
        if not isinstance(value, wire_type.record):
            raise EncodeError(
                f"Expected {wire_type.record.__name__}, got {type(value).__name__}",
                offset=cursor.position,
            )
        _encode_record(cursor, value, RecordSchema.from_model(wire_type.record), config)
        return

    # FIXED_ARRAY / SEQUENCE
    element = wire_type.element
    assert element is not None
    count = check_length(value, wire_type, config)
    if kind is WireKind.SEQUENCE:
        cursor.write_u32(count)

    if wire_type.is_byte_run:
        try:
            raw = value if isinstance(value, (bytes, bytearray)) else bytes(value)
        except (TypeError, ValueError) as err:
            raise EncodeError(f"Invalid byte values: {err}", offset=cursor.position) from err
        cursor.write_bytes(raw)
        return

    for index, item in enumerate(value):
        try:
            _encode_value(cursor, item, element, config)
        except BewireError as err:
            err.add_context(f"[{index}]")
            raise


def _encode_record(
    cursor: Cursor, record: BaseModel, schema: RecordSchema, config: CodecConfig
) -> None:
    """Encode each field of a record in declaration order, inline."""
    for field in schema.fields:
        try:
            _encode_value(cursor, getattr(record, field.name), field.wire_type, config)
        except BewireError as err:
            err.add_context(field.name)
            raise
