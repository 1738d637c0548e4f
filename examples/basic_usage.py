#!/usr/bin/env python3
"""Basic usage example for bewire.

This example demonstrates:
1. Defining a record with Pydantic
2. Calculating its encoded size
3. Encoding to the big-endian wire format
4. Decoding back to a Pydantic model
5. Pulling a header apart by hand with a cursor
"""

from __future__ import annotations

from typing import Annotated

from bewire import (
    BaseRecord,
    FixedArray,
    UInt16,
    UInt32,
    decode,
    decode_from,
    encode,
    encoded_size,
    field_sizes,
    new_cursor,
)


class PtyRequest(BaseRecord):
    """SSH terminal request (RFC 4254, section 6.2)."""

    term: str
    width: UInt32
    height: UInt32
    pixel_width: UInt32 = 0
    pixel_height: UInt32 = 0
    modes: bytes = b""


class Margins(BaseRecord):
    """Record with a fixed-size array: no length prefix on the wire."""

    sides: Annotated[list[UInt16], FixedArray(length=4)]


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bewire Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Creating a pty request...")
    request = PtyRequest(term="xterm", width=80, height=24)
    print(f"   {request!r}")
    print()

    print("2. Analyzing field sizes...")
    for field_name, size in field_sizes(request).items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(request)} bytes")
    print()

    print("3. Encoding...")
    data = encode(request)
    print(f"   Encoded size: {len(data)} bytes")
    print(f"   Hex: {data.hex(' ')}")
    print()

    print("4. Decoding...")
    decoded = decode(data, PtyRequest)
    print(f"   {decoded.term}: {decoded.width}x{decoded.height}")
    if decoded == request:
        print("   ✓ Round-trip successful! Records match.")
    else:
        print("   ✗ Round-trip failed! Records don't match.")
    print()

    print("5. Fixed-size arrays...")
    margins = encode(Margins(sides=[1, 2, 3, 4]))
    print(f"   Hex: {margins.hex(' ')} ({len(margins)} bytes, no prefix)")
    print()

    print("6. Reading a header by hand, then a typed body...")
    packet = bytes([98, 0, 0, 0, 7]) + data
    cursor = new_cursor(packet)
    message_type = cursor.read_u8()
    channel = cursor.read_u32()
    body = decode_from(cursor, PtyRequest)
    print(f"   type={message_type} channel={channel} term={body.term}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
