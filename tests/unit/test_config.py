"""Tests for codec configuration."""

from __future__ import annotations

import dataclasses

import pytest

from bewire import CodecConfig, DecodeError, decode, encode
from bewire.config import DEFAULT_CONFIG, MAX_PREFIX_LENGTH


def test_defaults() -> None:
    """Test the default configuration describes the plain wire format."""
    assert DEFAULT_CONFIG.max_length == MAX_PREFIX_LENGTH == 0xFFFFFFFF
    assert DEFAULT_CONFIG.strict is False
    assert DEFAULT_CONFIG.encoding == "utf-8"
    assert DEFAULT_CONFIG.errors == "strict"


@pytest.mark.parametrize("max_length", [-1, MAX_PREFIX_LENGTH + 1])
def test_max_length_range(max_length: int) -> None:
    """Test max_length must fit in the 4-byte prefix."""
    with pytest.raises(ValueError, match="max_length"):
        CodecConfig(max_length=max_length)


def test_unknown_encoding() -> None:
    """Test unknown string codecs are rejected up front."""
    with pytest.raises(ValueError, match="Unknown string encoding"):
        CodecConfig(encoding="not-a-codec")


def test_frozen() -> None:
    """Test configurations cannot be changed after creation."""
    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.strict = True  # type: ignore[misc]


def test_alternate_encoding() -> None:
    """Test string fields honour the configured codec."""
    config = CodecConfig(encoding="latin-1")

    data = encode("café", config=config)

    assert data == b"\x00\x00\x00\x04caf\xe9"
    assert decode(data, str, config=config) == "café"


def test_replace_errors_on_decode() -> None:
    """Test the codec error handler is applied when decoding."""
    data = b"\x00\x00\x00\x02\xffA"

    with pytest.raises(DecodeError):
        decode(data, str)
    assert decode(data, str, config=CodecConfig(errors="replace")) == "�A"
