"""Schema introspection for Pydantic records.

This module maps Python annotations onto the closed set of wire types and
extracts, for each record class, the ordered list of fields the codec walks.

Every annotation resolves to exactly one WireKind:

    bool                                   BOOL
    UInt8 .. UInt64                        UINT
    Int8 .. Int64                          INT
    str                                    STRING
    bytes                                  SEQUENCE of UINT8 (decoded as bytes)
    list[T] / tuple[T, ...]                SEQUENCE of T
    Annotated[list[T], FixedArray(...)]    FIXED_ARRAY of T
    BaseRecord subclass                    RECORD

Anything else raises UnsupportedType before a single byte is written or read.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import Annotated, Any, Iterable, List, Optional, Type, get_args, get_origin

from pydantic.fields import FieldInfo

from ..exceptions import UnsupportedType
from ..models.base import BaseRecord
from ..models.fields import FixedLength, WireInt
from .cursor import LENGTH_PREFIX_SIZE


class WireKind(enum.Enum):
    """Closed set of wire type variants."""

    BOOL = "bool"
    UINT = "uint"
    INT = "int"
    STRING = "string"
    FIXED_ARRAY = "fixed_array"
    SEQUENCE = "sequence"
    RECORD = "record"


_INTEGER_KINDS = (WireKind.UINT, WireKind.INT)
_COLLECTION_KINDS = (WireKind.FIXED_ARRAY, WireKind.SEQUENCE)


@dataclass(frozen=True)
class WireType:
    """A resolved wire type.

    Attributes:
        kind: Variant of the closed wire type set
        bits: Width for integer kinds
        element: Element type for FIXED_ARRAY and SEQUENCE
        length: Element count for FIXED_ARRAY
        record: Record class for RECORD
        as_bytes: Collection of UINT8 represented as ``bytes`` in Python
        as_tuple: Collection represented as ``tuple`` in Python
    """

    kind: WireKind
    bits: int = 0
    element: Optional[WireType] = None
    length: Optional[int] = None
    record: Optional[Type[BaseRecord]] = None
    as_bytes: bool = False
    as_tuple: bool = False

    @classmethod
    def boolean(cls) -> WireType:
        return cls(WireKind.BOOL, bits=8)

    @classmethod
    def unsigned(cls, bits: int) -> WireType:
        return cls(WireKind.UINT, bits=bits)

    @classmethod
    def signed(cls, bits: int) -> WireType:
        return cls(WireKind.INT, bits=bits)

    @classmethod
    def string(cls) -> WireType:
        return cls(WireKind.STRING)

    @classmethod
    def fixed_array(cls, element: WireType, length: int, **kwargs: Any) -> WireType:
        _check_element(element)
        if length < 0:
            raise UnsupportedType(f"Fixed array length must be >= 0, got {length}")
        return cls(WireKind.FIXED_ARRAY, element=element, length=length, **kwargs)

    @classmethod
    def sequence(cls, element: WireType, **kwargs: Any) -> WireType:
        _check_element(element)
        return cls(WireKind.SEQUENCE, element=element, **kwargs)

    @classmethod
    def nested(cls, record: Type[BaseRecord]) -> WireType:
        return cls(WireKind.RECORD, record=record)

    @property
    def is_byte_run(self) -> bool:
        """True for collections of UINT8, which are copied as raw bytes."""
        return (
            self.kind in _COLLECTION_KINDS
            and self.element is not None
            and self.element.kind is WireKind.UINT
            and self.element.bits == 8
        )

    @property
    def fixed_size(self) -> Optional[int]:
        """Encoded size in bytes if it does not depend on the value, else None."""
        if self.kind is WireKind.BOOL or self.kind in _INTEGER_KINDS:
            return self.bits // 8
        if self.kind is WireKind.FIXED_ARRAY:
            assert self.element is not None and self.length is not None
            element_size = self.element.fixed_size
            return None if element_size is None else element_size * self.length
        if self.kind is WireKind.RECORD:
            assert self.record is not None
            return RecordSchema.from_model(self.record).fixed_size
        return None

    @property
    def min_size(self) -> int:
        """Smallest possible encoded size in bytes."""
        fixed = self.fixed_size
        if fixed is not None:
            return fixed
        if self.kind in (WireKind.STRING, WireKind.SEQUENCE):
            return LENGTH_PREFIX_SIZE
        if self.kind is WireKind.FIXED_ARRAY:
            assert self.element is not None and self.length is not None
            return self.element.min_size * self.length
        assert self.record is not None
        return RecordSchema.from_model(self.record).min_size

    def describe(self) -> str:
        """Return a short human-readable name such as ``uint16[3]``."""
        if self.kind is WireKind.BOOL:
            return "bool"
        if self.kind in _INTEGER_KINDS:
            return f"{self.kind.value}{self.bits}"
        if self.kind is WireKind.STRING:
            return "string"
        if self.kind is WireKind.RECORD:
            assert self.record is not None
            return self.record.__name__
        assert self.element is not None
        if self.kind is WireKind.FIXED_ARRAY:
            return f"{self.element.describe()}[{self.length}]"
        return f"{self.element.describe()}[]"


def _check_element(element: WireType) -> None:
    if element.kind in _COLLECTION_KINDS:
        raise UnsupportedType(
            f"Multidimensional arrays/sequences are not supported: "
            f"element type is {element.describe()}"
        )


def check_countable(wire_type: WireType, name: str = "<value>") -> None:
    """Reject sequences whose elements can encode to zero bytes.

    The decoder bounds a sequence count by the input left to read, which only
    works for elements of at least one byte. Records without fields and empty
    fixed arrays are allowed as fields but not as sequence elements.

    Raises:
        UnsupportedType: If the sequence element has a minimum size of 0
    """
    if wire_type.kind is not WireKind.SEQUENCE:
        return
    assert wire_type.element is not None
    if wire_type.element.min_size == 0:
        raise UnsupportedType(
            f"Field {name}: sequence elements must occupy at least one byte, "
            f"{wire_type.element.describe()} can encode to zero bytes"
        )


def _constraints(metadata: Iterable[Any]) -> tuple[Optional[WireInt], Optional[FixedLength]]:
    """Extract the width and fixed-length markers from annotation metadata."""
    width = None
    fixed = None
    for constraint in metadata:
        if isinstance(constraint, WireInt):
            width = constraint
        elif isinstance(constraint, FixedLength):
            fixed = constraint
        elif isinstance(constraint, FieldInfo):
            nested_width, nested_fixed = _constraints(constraint.metadata)
            width = nested_width or width
            fixed = nested_fixed or fixed
    return width, fixed


def resolve_wire_type(
    annotation: Any, metadata: Iterable[Any] = (), name: str = "<value>"
) -> WireType:
    """Classify a Python annotation into exactly one wire type.

    Args:
        annotation: Type annotation (``str``, ``UInt16``, ``list[UInt8]``, a
            record class, ...)
        metadata: Extra annotation metadata, as stored on a Pydantic FieldInfo
        name: Field name used in error messages

    Returns:
        Resolved WireType

    Raises:
        UnsupportedType: If the annotation is outside the closed wire type set
    """
    metadata = list(metadata)

    # Annotated[T, ...]: fold the extras into the metadata
    if get_origin(annotation) is Annotated:
        base, *extras = get_args(annotation)
        return resolve_wire_type(base, [*metadata, *extras], name)

    width, fixed = _constraints(metadata)
    fixed_length = None if fixed is None else fixed.length

    if annotation is bool:
        return WireType.boolean()

    if annotation is int:
        if width is None:
            raise UnsupportedType(
                f"Field {name}: integer fields need an explicit width "
                f"(UInt8..UInt64, Int8..Int64)"
            )
        if width.signed:
            return WireType.signed(width.bits)
        return WireType.unsigned(width.bits)

    if annotation is str:
        return WireType.string()

    if annotation is bytes:
        element = WireType.unsigned(8)
        if fixed_length is not None:
            return WireType.fixed_array(element, fixed_length, as_bytes=True)
        return WireType.sequence(element, as_bytes=True)

    if isinstance(annotation, type) and issubclass(annotation, BaseRecord):
        return WireType.nested(annotation)

    origin = get_origin(annotation)
    if origin in (list, tuple):
        args = get_args(annotation)
        as_tuple = origin is tuple
        if as_tuple and (len(args) != 2 or args[1] is not Ellipsis):
            raise UnsupportedType(
                f"Field {name}: only homogeneous tuple[T, ...] is supported, got {annotation}"
            )
        if not args:
            raise UnsupportedType(f"Field {name}: collection needs an element type")
        element = resolve_wire_type(args[0], (), f"{name}[]")
        if element.kind in _COLLECTION_KINDS:
            raise UnsupportedType(
                f"Field {name}: multidimensional arrays/sequences are not supported"
            )
        if fixed_length is not None:
            return WireType.fixed_array(element, fixed_length, as_tuple=as_tuple)
        return WireType.sequence(element, as_tuple=as_tuple)

    if annotation is float:
        raise UnsupportedType(f"Field {name}: floating point fields are not supported")

    raise UnsupportedType(
        f"Field {name}: unsupported type {annotation!r}. "
        f"Supported: bool, fixed-width int, str, bytes, list, tuple, BaseRecord."
    )


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single field.

    Attributes:
        name: Field name
        wire_type: Resolved wire type
    """

    name: str
    wire_type: WireType


class RecordSchema:
    """Schema information for an entire record.

    This class introspects a Pydantic model and resolves the wire type of each
    field, in declaration order.

    Example:
        >>> schema = RecordSchema.from_model(PtyRequest)
        >>> for field in schema.fields:
        ...     print(f"{field.name}: {field.wire_type.describe()}")
    """

    _cache: dict[type, RecordSchema] = {}
    _cache_lock = threading.Lock()

    def __init__(self, record_class: Type[BaseRecord]) -> None:
        """Initialize schema from a record class.

        Args:
            record_class: BaseRecord subclass to introspect
        """
        self.record_class = record_class
        self.fields: List[FieldSchema] = []
        self._introspect()

    @classmethod
    def from_model(cls, record_class: Type[BaseRecord]) -> RecordSchema:
        """Return the (cached) schema for a record class.

        Args:
            record_class: BaseRecord subclass

        Returns:
            RecordSchema instance

        Raises:
            UnsupportedType: If any field cannot be mapped onto a wire type
        """
        schema = cls._cache.get(record_class)
        if schema is None:
            schema = cls(record_class)
            with cls._cache_lock:
                schema = cls._cache.setdefault(record_class, schema)
            # Cached first so self-referencing records terminate
            try:
                for record in schema.nested_records():
                    cls.from_model(record)
                for field in schema.fields:
                    check_countable(field.wire_type, field.name)
            except UnsupportedType:
                with cls._cache_lock:
                    cls._cache.pop(record_class, None)
                raise
        return schema

    def nested_records(self) -> List[Type[BaseRecord]]:
        """Return the record classes referenced by fields or collection elements."""
        records = []
        for field in self.fields:
            wire_type: Optional[WireType] = field.wire_type
            while wire_type is not None:
                if wire_type.record is not None:
                    records.append(wire_type.record)
                wire_type = wire_type.element
        return records

    def _introspect(self) -> None:
        """Introspect the model and populate field schemas."""
        if not (isinstance(self.record_class, type) and issubclass(self.record_class, BaseRecord)):
            raise UnsupportedType(f"{self.record_class!r} is not a BaseRecord subclass")

        for field_name, field_info in self.record_class.model_fields.items():
            if field_info.annotation is None:
                raise UnsupportedType(f"Field {field_name} has no type annotation")
            wire_type = resolve_wire_type(field_info.annotation, field_info.metadata, field_name)
            self.fields.append(FieldSchema(field_name, wire_type))

    @property
    def fixed_size(self) -> Optional[int]:
        """Encoded size in bytes if every field is fixed-size, else None."""
        total = 0
        for field in self.fields:
            size = field.wire_type.fixed_size
            if size is None:
                return None
            total += size
        return total

    @property
    def min_size(self) -> int:
        """Smallest possible encoded size in bytes."""
        return sum(field.wire_type.min_size for field in self.fields)


def shape_of(value: Any) -> WireType:
    """Infer the wire type of a value whose Python type determines it.

    Raises:
        UnsupportedType: If the type is ambiguous (e.g. a bare ``int``)
    """
    if isinstance(value, BaseRecord):
        return WireType.nested(type(value))
    if isinstance(value, bool):
        return WireType.boolean()
    if isinstance(value, str):
        return WireType.string()
    if isinstance(value, (bytes, bytearray)):
        return WireType.sequence(WireType.unsigned(8), as_bytes=True)
    raise UnsupportedType(
        f"Cannot infer the wire type of {type(value).__name__}; pass an explicit shape"
    )


def as_wire_type(shape: Any) -> WireType:
    """Resolve a shape argument (WireType, record class or annotation)."""
    wire_type = shape if isinstance(shape, WireType) else resolve_wire_type(shape)
    check_countable(wire_type)
    return wire_type
