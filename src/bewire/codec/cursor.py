"""Byte cursor for big-endian reads and writes.

This module provides the position-tracked view over a byte buffer used by the
encoder and decoder. All multi-byte values are big-endian; signed values use
two's complement.

A cursor is owned by a single encode or decode call. It can also be used
directly to pull fields out of a payload whose layout is not known statically
(for example a protocol header followed by a typed body).
"""

from __future__ import annotations

import struct

from ..exceptions import DecodeError, EncodeError, InsufficientInput

_FORMATS: dict[tuple[int, bool], struct.Struct] = {
    (8, False): struct.Struct(">B"),
    (16, False): struct.Struct(">H"),
    (32, False): struct.Struct(">I"),
    (64, False): struct.Struct(">Q"),
    (8, True): struct.Struct(">b"),
    (16, True): struct.Struct(">h"),
    (32, True): struct.Struct(">i"),
    (64, True): struct.Struct(">q"),
}

LENGTH_PREFIX_SIZE = 4


def _format(bits: int, signed: bool) -> struct.Struct:
    try:
        return _FORMATS[(bits, signed)]
    except KeyError:
        raise ValueError(f"bits must be 8, 16, 32 or 64, got {bits}") from None


def _check_int(value: object, type_name: str, offset: int) -> None:
    if not isinstance(value, int):
        raise EncodeError(
            f"Expected int for {type_name}, got {type(value).__name__}", offset=offset
        )


class Cursor:
    """Position-tracked view over a byte buffer.

    Reading requires any bytes-like object. Writing requires a mutable buffer,
    which Cursor.for_writing() allocates at a fixed size.

    Example:
        >>> cursor = Cursor(b"\\x00\\x11\\x00\\x00\\x00\\x02hi")
        >>> cursor.read_u16()
        17
        >>> cursor.read_string()
        'hi'
        >>> cursor.remaining()
        0
    """

    __slots__ = ("_buf", "_view", "_pos")

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        """Initialize a cursor at position 0.

        Args:
            data: Buffer to read from (or write into, if mutable)
        """
        self._buf = data
        self._view = memoryview(data)
        self._pos = 0

    @classmethod
    def for_writing(cls, size: int) -> Cursor:
        """Create a cursor over a zeroed buffer of exactly ``size`` bytes."""
        return cls(bytearray(size))

    @property
    def position(self) -> int:
        """Current offset from the start of the buffer."""
        return self._pos

    @property
    def capacity(self) -> int:
        """Total size of the underlying buffer."""
        return len(self._view)

    def seek(self, position: int) -> None:
        """Move to an absolute offset within the buffer."""
        if not 0 <= position <= len(self._view):
            raise ValueError(f"seek out of bounds: {position} (capacity {len(self._view)})")
        self._pos = position

    def remaining(self) -> int:
        """Return the number of bytes between the position and the end."""
        return len(self._view) - self._pos

    def require(self, num_bytes: int) -> None:
        """Check that ``num_bytes`` can be read at the current position.

        Raises:
            InsufficientInput: If fewer bytes remain
        """
        if num_bytes > len(self._view) - self._pos:
            raise InsufficientInput(num_bytes, self.remaining(), offset=self._pos)

    def getvalue(self) -> bytes:
        """Return the whole underlying buffer as bytes."""
        return self._view.tobytes()

    # Reads

    def read_uint(self, bits: int) -> int:
        """Read an unsigned big-endian integer of 8, 16, 32 or 64 bits.

        Raises:
            InsufficientInput: If not enough bytes are available
        """
        return self._unpack(_format(bits, False))

    def read_int(self, bits: int) -> int:
        """Read a two's-complement signed big-endian integer.

        Raises:
            InsufficientInput: If not enough bytes are available
        """
        return self._unpack(_format(bits, True))

    def _unpack(self, fmt: struct.Struct) -> int:
        self.require(fmt.size)
        (value,) = fmt.unpack_from(self._view, self._pos)
        self._pos += fmt.size
        return int(value)

    def read_u8(self) -> int:
        return self._unpack(_FORMATS[(8, False)])

    def read_u16(self) -> int:
        return self._unpack(_FORMATS[(16, False)])

    def read_u32(self) -> int:
        return self._unpack(_FORMATS[(32, False)])

    def read_u64(self) -> int:
        return self._unpack(_FORMATS[(64, False)])

    def read_i8(self) -> int:
        return self._unpack(_FORMATS[(8, True)])

    def read_i16(self) -> int:
        return self._unpack(_FORMATS[(16, True)])

    def read_i32(self) -> int:
        return self._unpack(_FORMATS[(32, True)])

    def read_i64(self) -> int:
        return self._unpack(_FORMATS[(64, True)])

    def read_bool(self) -> bool:
        """Read one byte as a boolean (any nonzero value is True)."""
        return self.read_u8() != 0

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read a raw run of ``num_bytes`` bytes.

        Raises:
            InsufficientInput: If not enough bytes are available
        """
        if num_bytes < 0:
            raise ValueError(f"num_bytes must be >= 0, got {num_bytes}")
        self.require(num_bytes)
        end = self._pos + num_bytes
        data = self._view[self._pos : end].tobytes()
        self._pos = end
        return data

    read_fixed_bytes = read_bytes

    def read_string(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        """Read a 4-byte length prefix followed by that many bytes of text.

        The position is left unchanged if the string is truncated.

        Raises:
            InsufficientInput: If the prefix or the text is truncated
            DecodeError: If the bytes are not valid for ``encoding``
        """
        start = self._pos
        length = self.read_u32()
        try:
            raw = self.read_bytes(length)
        except InsufficientInput:
            self._pos = start
            raise
        try:
            return raw.decode(encoding, errors)
        except UnicodeDecodeError as err:
            self._pos = start
            raise DecodeError(f"Invalid {encoding} string: {err}", offset=start + 4) from err

    # Writes

    def write_uint(self, value: int, bits: int) -> None:
        """Write an unsigned big-endian integer of 8, 16, 32 or 64 bits.

        Raises:
            EncodeError: If value does not fit or the buffer is full
        """
        _check_int(value, f"uint{bits}", self._pos)
        if value < 0 or value >= 1 << bits:
            raise EncodeError(f"Value {value} does not fit in uint{bits}", offset=self._pos)
        self._pack(_format(bits, False), value)

    def write_int(self, value: int, bits: int) -> None:
        """Write a two's-complement signed big-endian integer.

        Raises:
            EncodeError: If value does not fit or the buffer is full
        """
        _check_int(value, f"int{bits}", self._pos)
        bound = 1 << (bits - 1)
        if value < -bound or value >= bound:
            raise EncodeError(f"Value {value} does not fit in int{bits}", offset=self._pos)
        self._pack(_format(bits, True), value)

    def _pack(self, fmt: struct.Struct, value: int) -> None:
        self._reserve(fmt.size)
        fmt.pack_into(self._view, self._pos, value)
        self._pos += fmt.size

    def _reserve(self, num_bytes: int) -> None:
        if self._view.readonly:
            raise EncodeError("Cursor buffer is read-only", offset=self._pos)
        if num_bytes > len(self._view) - self._pos:
            raise EncodeError(
                f"Write of {num_bytes} bytes past end of buffer "
                f"({self.remaining()} remaining)",
                offset=self._pos,
            )

    def write_u8(self, value: int) -> None:
        self.write_uint(value, 8)

    def write_u16(self, value: int) -> None:
        self.write_uint(value, 16)

    def write_u32(self, value: int) -> None:
        self.write_uint(value, 32)

    def write_u64(self, value: int) -> None:
        self.write_uint(value, 64)

    def write_i8(self, value: int) -> None:
        self.write_int(value, 8)

    def write_i16(self, value: int) -> None:
        self.write_int(value, 16)

    def write_i32(self, value: int) -> None:
        self.write_int(value, 32)

    def write_i64(self, value: int) -> None:
        self.write_int(value, 64)

    def write_bool(self, value: bool) -> None:
        """Write a boolean as one byte (0x01 or 0x00)."""
        self.write_uint(1 if value else 0, 8)

    def write_bytes(self, data: bytes | bytearray | memoryview) -> None:
        """Write a raw run of bytes at the current position."""
        num_bytes = len(data)
        self._reserve(num_bytes)
        self._view[self._pos : self._pos + num_bytes] = data
        self._pos += num_bytes

    def write_string(self, value: str, encoding: str = "utf-8", errors: str = "strict") -> None:
        """Write a 4-byte byte-length prefix followed by the encoded text."""
        raw = value.encode(encoding, errors)
        self.write_u32(len(raw))
        self.write_bytes(raw)


def new_cursor(data: bytes | bytearray | memoryview) -> Cursor:
    """Create a cursor positioned at the start of ``data``.

    Example:
        >>> cursor = new_cursor(payload)
        >>> msg_type = cursor.read_u8()
        >>> body = decode_from(cursor, BODY_TYPES[msg_type])
    """
    return Cursor(data)
