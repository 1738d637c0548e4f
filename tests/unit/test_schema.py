"""Unit tests for the wire type model."""

from __future__ import annotations

from typing import Annotated, Optional

import pytest
from pydantic import Field

from bewire import (
    BaseRecord,
    FixedArray,
    FixedLength,
    Int16,
    RecordSchema,
    UInt8,
    UInt16,
    UInt32,
    UnsupportedType,
    WireKind,
    WireType,
    resolve_wire_type,
    static_size,
)


class Inner(BaseRecord):
    """Fixed-size nested record."""

    a: UInt16
    b: bool


class Mixed(BaseRecord):
    """One field per wire kind."""

    flag: bool
    small: UInt8
    delta: Int16
    name: str
    raw: bytes
    magic: Annotated[bytes, FixedArray(length=4)]
    window: Annotated[list[UInt16], FixedArray(length=3)]
    values: list[UInt32]
    pair: tuple[UInt8, ...]
    inner: Inner
    inners: list[Inner]


class TestResolveWireType:
    """Test annotation classification."""

    def test_scalars(self) -> None:
        """Test scalar annotations."""
        assert resolve_wire_type(bool) == WireType.boolean()
        assert resolve_wire_type(UInt8) == WireType.unsigned(8)
        assert resolve_wire_type(Int16) == WireType.signed(16)
        assert resolve_wire_type(str) == WireType.string()

    def test_collections(self) -> None:
        """Test array and sequence annotations."""
        sequence = resolve_wire_type(list[UInt16])
        assert sequence.kind is WireKind.SEQUENCE
        assert sequence.element == WireType.unsigned(16)

        fixed = resolve_wire_type(Annotated[list[UInt16], FixedArray(length=3)])
        assert fixed.kind is WireKind.FIXED_ARRAY
        assert fixed.length == 3

        raw = resolve_wire_type(bytes)
        assert raw.kind is WireKind.SEQUENCE
        assert raw.is_byte_run
        assert raw.as_bytes

    def test_length_constraints_keep_prefix(self) -> None:
        """Test pydantic length bounds do not turn a sequence into a fixed array."""
        bounded = Field(min_length=2, max_length=2)

        assert resolve_wire_type(Annotated[list[UInt16], bounded]).kind is WireKind.SEQUENCE
        assert resolve_wire_type(Annotated[bytes, bounded]).kind is WireKind.SEQUENCE

    def test_fixed_length_marker(self) -> None:
        """Test the FixedLength marker alone selects a fixed array."""
        wire_type = resolve_wire_type(Annotated[bytes, FixedLength(4)])

        assert wire_type == WireType.fixed_array(WireType.unsigned(8), 4, as_bytes=True)

    def test_nested_record(self) -> None:
        """Test record classes resolve to RECORD."""
        wire_type = resolve_wire_type(Inner)
        assert wire_type.kind is WireKind.RECORD
        assert wire_type.record is Inner

    @pytest.mark.parametrize(
        "annotation",
        [int, float, dict[str, UInt8], Optional[UInt8], set[UInt8], tuple[UInt8, UInt16]],
    )
    def test_unsupported(self, annotation: object) -> None:
        """Test annotations outside the wire type set."""
        with pytest.raises(UnsupportedType):
            resolve_wire_type(annotation)

    def test_unwidthed_int_message(self) -> None:
        """Test bare int asks for an explicit width."""
        with pytest.raises(UnsupportedType, match="explicit width"):
            resolve_wire_type(int, name="count")

    def test_multidimensional_rejected(self) -> None:
        """Test list of lists and array of arrays are rejected."""
        with pytest.raises(UnsupportedType, match="[Mm]ultidimensional"):
            resolve_wire_type(list[list[UInt8]])

        with pytest.raises(UnsupportedType, match="[Mm]ultidimensional"):
            resolve_wire_type(list[bytes])

        row = Annotated[list[UInt8], FixedArray(length=2)]
        with pytest.raises(UnsupportedType, match="[Mm]ultidimensional"):
            resolve_wire_type(Annotated[list[row], FixedArray(length=2)])


class TestRecordSchema:
    """Test record introspection."""

    def test_field_order(self) -> None:
        """Test fields are listed in declaration order."""
        schema = RecordSchema.from_model(Mixed)
        assert [field.name for field in schema.fields] == [
            "flag",
            "small",
            "delta",
            "name",
            "raw",
            "magic",
            "window",
            "values",
            "pair",
            "inner",
            "inners",
        ]

    def test_describe(self) -> None:
        """Test human-readable wire type names."""
        schema = RecordSchema.from_model(Mixed)
        described = {field.name: field.wire_type.describe() for field in schema.fields}

        assert described["delta"] == "int16"
        assert described["magic"] == "uint8[4]"
        assert described["window"] == "uint16[3]"
        assert described["values"] == "uint32[]"
        assert described["inner"] == "Inner"
        assert described["inners"] == "Inner[]"

    def test_schema_is_cached(self) -> None:
        """Test the schema is built once per class."""
        assert RecordSchema.from_model(Mixed) is RecordSchema.from_model(Mixed)

    def test_sizes(self) -> None:
        """Test static and minimum sizes."""
        assert RecordSchema.from_model(Inner).fixed_size == 3
        assert static_size(Inner) == 3
        assert static_size(Annotated[list[Inner], FixedArray(length=4)]) == 12
        assert static_size(Mixed) is None
        # 1 + 1 + 2 + 4 + 4 + 4 + 6 + 4 + 4 + 3 + 4
        assert RecordSchema.from_model(Mixed).min_size == 37

    def test_nested_schema_errors_surface(self) -> None:
        """Test an invalid nested record fails when the outer schema is built."""

        class BadInner(BaseRecord):
            ratio: float

        class Outer(BaseRecord):
            items: list[BadInner]

        with pytest.raises(UnsupportedType, match="floating point"):
            RecordSchema.from_model(Outer)

        # Still fails the second time (not cached as valid)
        with pytest.raises(UnsupportedType):
            RecordSchema.from_model(Outer)

    def test_self_referencing_record(self) -> None:
        """Test a record containing a sequence of itself."""

        class Node(BaseRecord):
            value: UInt8
            children: list[Node] = []

        schema = RecordSchema.from_model(Node)
        assert schema.fields[1].wire_type.element == WireType.nested(Node)
        assert schema.min_size == 5

    def test_zero_size_sequence_element_rejected(self) -> None:
        """Test sequences of records without fields are rejected."""

        class Empty(BaseRecord):
            pass

        class Holder(BaseRecord):
            items: list[Empty]

        class Wrapper(BaseRecord):
            empty: Empty
            tag: UInt8

        with pytest.raises(UnsupportedType, match="at least one byte"):
            RecordSchema.from_model(Holder)

        assert RecordSchema.from_model(Wrapper).fixed_size == 1
