"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from bewire import BaseRecord, UInt32


class PtyRequest(BaseRecord):
    """SSH pty-req payload (RFC 4254, section 6.2) without terminal modes."""

    term: str
    width: UInt32
    height: UInt32
    pixel_width: UInt32 = 0
    pixel_height: UInt32 = 0


@pytest.fixture
def pty_request() -> PtyRequest:
    """Sample pty request for an 80x24 xterm."""
    return PtyRequest(term="xterm", width=80, height=24)


@pytest.fixture
def pty_request_bytes() -> bytes:
    """Wire encoding of the sample pty request."""
    return bytes(
        [0, 0, 0, 5, 120, 116, 101, 114, 109, 0, 0, 0, 80, 0, 0, 0, 24, 0, 0, 0, 0, 0, 0, 0, 0]
    )
