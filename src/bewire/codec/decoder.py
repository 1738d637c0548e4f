"""Binary decoder for Pydantic records.

This module provides the decode() function that converts wire-format bytes
back to a record (or scalar), and decode_from() for pulling a typed value out
of a cursor the caller is already reading from.

The shape always comes from the caller: fixed array lengths are taken from the
record definition, never from the data.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Type, TypeVar, overload

from pydantic import ValidationError

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import BewireError, DecodeError, InsufficientInput, LengthOverflow
from ..models.base import BaseRecord
from .cursor import Cursor
from .schema import RecordSchema, WireKind, WireType, as_wire_type

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseRecord)


@overload
def decode(data: bytes, shape: Type[T], *, config: Optional[CodecConfig] = None) -> T: ...


@overload
def decode(data: bytes, shape: Any, *, config: Optional[CodecConfig] = None) -> Any: ...


def decode(data: bytes, shape: Any, *, config: Optional[CodecConfig] = None) -> Any:
    """Decode wire-format bytes to a record or scalar value.

    Decoding is all-or-nothing: either the complete value is returned or an
    exception is raised, never a partially populated record.

    Args:
        data: Binary data to decode (bytes, bytearray or memoryview)
        shape: Record class, annotation (``str``, ``UInt16``, ``list[UInt8]``,
            ...) or WireType describing the expected value
        config: Codec configuration (defaults to DEFAULT_CONFIG)

    Returns:
        Decoded value

    Raises:
        UnsupportedType: If the shape is outside the wire type set
        InsufficientInput: If the data is truncated
        LengthOverflow: If a length prefix exceeds config.max_length
        DecodeError: If the data is otherwise invalid (bad UTF-8, trailing
            bytes in strict mode, value rejected by the record model)

    Examples:
        ```python
        from bewire import decode

        request = decode(data, PtyRequest)
        print(f"{request.term}: {request.width}x{request.height}")

        decode(b"\\x00\\x00\\x00\\x05Hello", str)   # "Hello"
        ```
    """
    config = config or DEFAULT_CONFIG
    cursor = Cursor(data)
    value = decode_from(cursor, shape, config=config)

    if config.strict and cursor.remaining():
        raise DecodeError(
            f"{cursor.remaining()} trailing bytes after value", offset=cursor.position
        )

    logger.debug("Decoded %d of %d bytes", cursor.position, cursor.capacity)
    return value


def decode_from(cursor: Cursor, shape: Any, *, config: Optional[CodecConfig] = None) -> Any:
    """Decode one value at the cursor's current position.

    On success the cursor is left just after the value. On failure it is moved
    back to where decoding started, so a caller reading from a stream can retry
    once more bytes have arrived.

    Example:
        >>> cursor = new_cursor(packet)
        >>> kind = cursor.read_u8()
        >>> request_id = cursor.read_u32()
        >>> body = decode_from(cursor, BODIES[kind])

    Raises:
        UnsupportedType: If the shape is outside the wire type set
        InsufficientInput: If the data is truncated
        LengthOverflow: If a length prefix exceeds config.max_length
        DecodeError: If the data is otherwise invalid
    """
    config = config or DEFAULT_CONFIG
    wire_type = as_wire_type(shape)
    if wire_type.kind is WireKind.RECORD:
        # Schema errors surface before any byte is consumed
        assert wire_type.record is not None
        RecordSchema.from_model(wire_type.record)

    start = cursor.position
    try:
        return _decode_value(cursor, wire_type, config)
    except BewireError:
        cursor.seek(start)
        raise


def _read_length(cursor: Cursor, element: Optional[WireType], config: CodecConfig) -> int:
    """Read a 4-byte length prefix and check it against the remaining input.

    Raises:
        LengthOverflow: If the length exceeds config.max_length
        InsufficientInput: If fewer bytes remain than the declared length needs
    """
    offset = cursor.position
    length = cursor.read_u32()
    if length > config.max_length:
        raise LengthOverflow(
            f"Declared length {length} exceeds maximum length {config.max_length}",
            offset=offset,
        )
    needed = length * (element.min_size if element is not None else 1)
    if needed > cursor.remaining():
        raise InsufficientInput(needed, cursor.remaining(), offset=cursor.position)
    return length


def _decode_value(cursor: Cursor, wire_type: WireType, config: CodecConfig) -> Any:
    """Decode a single value according to its wire type.

    Args:
        cursor: Cursor to read from
        wire_type: Resolved wire type
        config: Codec configuration

    Returns:
        Decoded value

    Raises:
        DecodeError: If data is invalid
        InsufficientInput: If data is truncated
    """
    kind = wire_type.kind

    if kind is WireKind.BOOL:
        return cursor.read_bool()

    if kind is WireKind.UINT:
        return cursor.read_uint(wire_type.bits)

    if kind is WireKind.INT:
        return cursor.read_int(wire_type.bits)

    if kind is WireKind.STRING:
        length = _read_length(cursor, None, config)
        offset = cursor.position
        raw = cursor.read_bytes(length)
        try:
            return raw.decode(config.encoding, config.errors)
        except UnicodeDecodeError as err:
            raise DecodeError(f"Invalid {config.encoding} string: {err}", offset=offset) from err

    if kind is WireKind.RECORD:
        assert wire_type.record is not None
        return _decode_record(cursor, RecordSchema.from_model(wire_type.record), config)

    # FIXED_ARRAY / SEQUENCE
    element = wire_type.element
    assert element is not None
    if kind is WireKind.FIXED_ARRAY:
        assert wire_type.length is not None
        count = wire_type.length
    else:
        count = _read_length(cursor, element, config)

    if wire_type.is_byte_run:
        raw = cursor.read_bytes(count)
        if wire_type.as_bytes:
            return raw
        return tuple(raw) if wire_type.as_tuple else list(raw)

    items = []
    for index in range(count):
        try:
            items.append(_decode_value(cursor, element, config))
        except BewireError as err:
            err.add_context(f"[{index}]")
            raise
    return tuple(items) if wire_type.as_tuple else items


def _decode_record(cursor: Cursor, schema: RecordSchema, config: CodecConfig) -> BaseRecord:
    """Decode each field in declaration order and build the record once."""
    start = cursor.position
    field_values: dict[str, Any] = {}
    for field in schema.fields:
        try:
            field_values[field.name] = _decode_value(cursor, field.wire_type, config)
        except BewireError as err:
            err.add_context(field.name)
            raise

    try:
        return schema.record_class.model_validate(field_values, by_name=True)
    except ValidationError as err:
        raise DecodeError(
            f"Failed to construct {schema.record_class.__name__}: {err}", offset=start
        ) from err
