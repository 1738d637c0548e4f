"""End-to-end integration tests."""

from __future__ import annotations

import threading
from typing import Annotated

import pytest

from bewire import (
    BaseRecord,
    CodecConfig,
    Cursor,
    FixedArray,
    InsufficientInput,
    LengthOverflow,
    UInt8,
    UInt32,
    decode,
    decode_from,
    encode,
    encode_into,
    encoded_size,
    new_cursor,
    static_size,
)

MSG_CHANNEL_REQUEST = 98


class PtyRequest(BaseRecord):
    """SSH pty-req channel request body."""

    term: str
    width: UInt32
    height: UInt32
    pixel_width: UInt32
    pixel_height: UInt32
    modes: bytes


class WindowChange(BaseRecord):
    """SSH window-change channel request body."""

    width: UInt32
    height: UInt32
    pixel_width: UInt32
    pixel_height: UInt32


class EnvVar(BaseRecord):
    """Single environment variable."""

    name: str
    value: str


class SessionSetup(BaseRecord):
    """Composite record: nested record, sequence of records, fixed array."""

    pty: PtyRequest
    env: list[EnvVar]
    cookie: Annotated[bytes, FixedArray(length=16)]
    want_x11: bool


BODIES: dict[str, type[BaseRecord]] = {
    "pty-req": PtyRequest,
    "window-change": WindowChange,
}


def build_channel_request(channel: int, request_type: str, body: BaseRecord) -> bytes:
    """Write a channel request header by hand, followed by a typed body."""
    name = request_type.encode("ascii")
    cursor = Cursor.for_writing(1 + 4 + 4 + len(name) + 1 + encoded_size(body))
    cursor.write_u8(MSG_CHANNEL_REQUEST)
    cursor.write_u32(channel)
    cursor.write_string(request_type)
    cursor.write_bool(True)
    encode_into(cursor, body)
    return cursor.getvalue()


def parse_channel_request(packet: bytes) -> tuple[int, str, bool, BaseRecord]:
    """Read the heterogeneous header, then decode the body its type names."""
    cursor = new_cursor(packet)
    assert cursor.read_u8() == MSG_CHANNEL_REQUEST
    channel = cursor.read_u32()
    request_type = cursor.read_string()
    want_reply = cursor.read_bool()
    body = decode_from(cursor, BODIES[request_type])
    assert cursor.remaining() == 0
    return channel, request_type, want_reply, body


class TestEndToEndWorkflow:
    """Test complete end-to-end workflows."""

    def test_channel_request_workflow(self) -> None:
        """Test a hand-written header followed by a typed body."""
        pty = PtyRequest(
            term="xterm-256color",
            width=132,
            height=43,
            pixel_width=0,
            pixel_height=0,
            modes=b"\x81\x00\x00\x96\x00\x00",
        )

        packet = build_channel_request(7, "pty-req", pty)
        channel, request_type, want_reply, body = parse_channel_request(packet)

        assert channel == 7
        assert request_type == "pty-req"
        assert want_reply is True
        assert body == pty

    def test_fixed_size_body(self) -> None:
        """Test a fixed-size body has a static size."""
        change = WindowChange(width=80, height=24, pixel_width=640, pixel_height=480)

        assert static_size(WindowChange) == 16
        packet = build_channel_request(1, "window-change", change)
        assert len(packet) == 1 + 4 + 4 + len("window-change") + 1 + 16
        assert parse_channel_request(packet)[3] == change

    def test_composite_record(self) -> None:
        """Test nested records, sequences of records and fixed arrays together."""
        setup = SessionSetup(
            pty=PtyRequest(
                term="vt100", width=80, height=24, pixel_width=0, pixel_height=0, modes=b""
            ),
            env=[EnvVar(name="LANG", value="en_US.UTF-8"), EnvVar(name="TZ", value="UTC")],
            cookie=bytes(range(16)),
            want_x11=False,
        )

        data = encode(setup)

        assert len(data) == encoded_size(setup)
        assert decode(data, SessionSetup, config=CodecConfig(strict=True)) == setup

    def test_streaming_retry(self) -> None:
        """Test a truncated read can be retried once more bytes arrive."""
        change = WindowChange(width=80, height=24, pixel_width=0, pixel_height=0)
        data = encode(change)

        with pytest.raises(InsufficientInput):
            decode(data[:10], WindowChange)

        assert decode(data, WindowChange) == change

    def test_untrusted_length_limit(self) -> None:
        """Test a corrupt sequence count is rejected before reading elements."""
        data = bytearray(encode([EnvVar(name="A", value="B")], list[EnvVar]))
        data[0:4] = (1_000_000).to_bytes(4, "big")

        with pytest.raises(LengthOverflow):
            decode(bytes(data), list[EnvVar], config=CodecConfig(max_length=1024))

    def test_concurrent_calls(self) -> None:
        """Test independent calls on several threads share no state."""
        records = [
            SessionSetup(
                pty=PtyRequest(
                    term=f"term{i}", width=i, height=i, pixel_width=0, pixel_height=0, modes=b""
                ),
                env=[EnvVar(name=str(i), value="x" * i)],
                cookie=bytes([i]) * 16,
                want_x11=i % 2 == 0,
            )
            for i in range(8)
        ]
        errors: list[Exception] = []

        def worker(record: SessionSetup) -> None:
            try:
                for _ in range(50):
                    assert decode(encode(record), SessionSetup) == record
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(record,)) for record in records]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []


def test_uint8_list_and_bytes_share_wire_format() -> None:
    """Test bytes and list[UInt8] encode identically."""
    assert encode(b"\x01\x02") == encode([1, 2], list[UInt8])
