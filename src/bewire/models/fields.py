"""Field type helpers and utilities.

This module provides the fixed-width integer aliases and the FixedArray field
helper used to declare record fields.

Integer aliases carry a WireInt marker (width and signedness, read by the
schema) and Pydantic range constraints (checked when a record is built).
FixedArray works the same way with a FixedLength marker.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo


@dataclass(frozen=True)
class WireInt:
    """Width marker for fixed-width integer annotations.

    Attributes:
        bits: Width in bits (8, 16, 32 or 64)
        signed: Whether the integer is two's-complement signed
    """

    bits: int
    signed: bool = False

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64):
            raise ValueError(f"bits must be 8, 16, 32 or 64, got {self.bits}")

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


@dataclass(frozen=True)
class FixedLength:
    """Element-count marker for fixed-size array annotations.

    Only this marker makes a collection a fixed array on the wire. Plain
    ``min_length``/``max_length`` validation constraints never change the
    wire format.

    Attributes:
        length: Exact number of elements (or bytes)
    """

    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"length must be >= 0, got {self.length}")


def _int_alias(bits: int, signed: bool) -> Any:
    marker = WireInt(bits, signed)
    return Annotated[int, marker, Field(ge=marker.min_value, le=marker.max_value)]


UInt8 = _int_alias(8, False)
UInt16 = _int_alias(16, False)
UInt32 = _int_alias(32, False)
UInt64 = _int_alias(64, False)
Int8 = _int_alias(8, True)
Int16 = _int_alias(16, True)
Int32 = _int_alias(32, True)
Int64 = _int_alias(64, True)


def FixedArray(*, length: int, **kwargs: Any) -> FieldInfo:
    """Create a fixed-length array field.

    The element count is part of the record's shape: it is not written to the
    wire, and the decoder reads exactly ``length`` elements. Applied to
    ``bytes`` the field is a raw byte run of that length.

    Args:
        length: Exact number of elements (or bytes)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as Annotated metadata. It validates
        the element count and carries a FixedLength marker for the schema.

    Example:
        >>> class Message(BaseRecord):
        ...     window: Annotated[list[UInt16], FixedArray(length=3)]
        ...     magic: Annotated[bytes, FixedArray(length=4)]
    """
    marker = FixedLength(length)
    field_info = cast(FieldInfo, Field(min_length=length, max_length=length, **kwargs))
    field_info.metadata.append(marker)
    return field_info
