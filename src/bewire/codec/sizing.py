"""Encoded size calculation.

This module computes the exact number of bytes a value will occupy on the wire
without encoding it. The encoder calls it first so the output buffer can be
allocated once at the correct size, and the length checks it performs mean
oversized strings and sequences are rejected before any byte is written.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import BewireError, EncodeError, LengthOverflow
from .cursor import LENGTH_PREFIX_SIZE
from .schema import RecordSchema, WireKind, WireType, as_wire_type, shape_of


def check_length(value: Any, wire_type: WireType, config: CodecConfig) -> int:
    """Validate the element count of a collection against its wire type.

    Returns:
        Number of elements

    Raises:
        EncodeError: If value is not a collection, or a fixed array does not
            have exactly N elements
        LengthOverflow: If a sequence is longer than the 4-byte prefix or
            config.max_length allows
    """
    if not isinstance(value, (list, tuple, bytes, bytearray)):
        raise EncodeError(f"Expected a list, tuple or bytes, got {type(value).__name__}")
    count = len(value)
    if wire_type.kind is WireKind.FIXED_ARRAY:
        if count != wire_type.length:
            raise EncodeError(
                f"Fixed array {wire_type.describe()} expects {wire_type.length} "
                f"elements, got {count}"
            )
    elif count > config.max_length:
        raise LengthOverflow(
            f"Sequence of {count} elements exceeds maximum length {config.max_length}"
        )
    return count


def text_bytes(value: Any, config: CodecConfig) -> bytes:
    """Encode a string field value and check its byte length.

    Raises:
        EncodeError: If value is not a str or cannot be encoded
        LengthOverflow: If the encoded text is longer than config.max_length
    """
    if not isinstance(value, str):
        raise EncodeError(f"Expected str, got {type(value).__name__}")
    try:
        raw = value.encode(config.encoding, config.errors)
    except UnicodeEncodeError as err:
        raise EncodeError(f"Cannot encode string as {config.encoding}: {err}") from err
    if len(raw) > config.max_length:
        raise LengthOverflow(
            f"String of {len(raw)} bytes exceeds maximum length {config.max_length}"
        )
    return raw


def size_of(value: Any, wire_type: WireType, config: CodecConfig = DEFAULT_CONFIG) -> int:
    """Return the exact encoded size of ``value`` in bytes.

    Args:
        value: Value to measure
        wire_type: Resolved wire type of the value
        config: Codec configuration (string encoding, length limits)

    Returns:
        Size in bytes

    Raises:
        EncodeError: If the value does not match its wire type
        LengthOverflow: If a string or sequence is too long
    """
    kind = wire_type.kind

    if kind in (WireKind.BOOL, WireKind.UINT, WireKind.INT):
        return wire_type.bits // 8

    if kind is WireKind.STRING:
        return LENGTH_PREFIX_SIZE + len(text_bytes(value, config))

    if kind is WireKind.RECORD:
        assert wire_type.record is not None
        if not isinstance(value, wire_type.record):
            raise EncodeError(
                f"Expected {wire_type.record.__name__}, got {type(value).__name__}"
            )
        return _record_size(value, RecordSchema.from_model(wire_type.record), config)

    # FIXED_ARRAY / SEQUENCE
    element = wire_type.element
    assert element is not None
    count = check_length(value, wire_type, config)
    prefix = LENGTH_PREFIX_SIZE if kind is WireKind.SEQUENCE else 0

    element_size = element.fixed_size
    if element_size is not None:
        return prefix + count * element_size

    total = prefix
    for index, item in enumerate(value):
        try:
            total += size_of(item, element, config)
        except BewireError as err:
            err.add_context(f"[{index}]")
            raise
    return total


def _record_size(record: BaseModel, schema: RecordSchema, config: CodecConfig) -> int:
    total = 0
    for field in schema.fields:
        try:
            total += size_of(getattr(record, field.name), field.wire_type, config)
        except BewireError as err:
            err.add_context(field.name)
            raise
    return total


def encoded_size(value: Any, shape: Any = None, *, config: Optional[CodecConfig] = None) -> int:
    """Calculate the encoded size of a record or value in bytes.

    This is always equal to ``len(encode(value, shape))``.

    Args:
        value: Record instance or scalar value
        shape: Wire type or annotation (inferred for records, str, bytes, bool)
        config: Codec configuration

    Returns:
        Size in bytes

    Raises:
        UnsupportedType: If the shape is outside the wire type set
        EncodeError: If the value does not match its shape

    Example:
        >>> encoded_size(PtyRequest(term="xterm", width=80, height=24))
        25
        >>> encoded_size("Hello")
        9
    """
    wire_type = shape_of(value) if shape is None else as_wire_type(shape)
    return size_of(value, wire_type, config or DEFAULT_CONFIG)


def field_sizes(record: BaseModel, *, config: Optional[CodecConfig] = None) -> dict[str, int]:
    """Get the encoded size in bytes of each field of a record.

    Example:
        >>> field_sizes(PtyRequest(term="xterm", width=80, height=24))
        {'term': 9, 'width': 4, 'height': 4, 'pixel_width': 4, 'pixel_height': 4}
    """
    config = config or DEFAULT_CONFIG
    schema = RecordSchema.from_model(type(record))
    sizes = {}
    for field in schema.fields:
        try:
            sizes[field.name] = size_of(getattr(record, field.name), field.wire_type, config)
        except BewireError as err:
            err.add_context(field.name)
            raise
    return sizes


def static_size(shape: Any) -> Optional[int]:
    """Return the encoded size of a shape if it is value-independent.

    Args:
        shape: Record class, annotation or WireType

    Returns:
        Size in bytes, or None if the shape contains strings or sequences

    Example:
        >>> static_size(UInt32)
        4
        >>> static_size(PtyRequest) is None
        True
    """
    return as_wire_type(shape).fixed_size
