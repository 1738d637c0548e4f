"""Codec configuration.

This module provides the configuration dataclass shared by the encoder and
decoder. The defaults describe the wire format exactly; lowering ``max_length``
is the usual reason to pass a custom configuration when decoding untrusted
input.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass

# Largest value a 4-byte length prefix can carry
MAX_PREFIX_LENGTH = 0xFFFFFFFF


@dataclass(frozen=True)
class CodecConfig:
    """Configuration for encode/decode calls.

    Attributes:
        max_length: Largest string byte length or sequence element count that is
            accepted on decode and produced on encode (default 0xFFFFFFFF, the
            limit of the 4-byte prefix). Declared lengths above it raise
            LengthOverflow.

        strict: If True, top-level decode() rejects input with bytes left over
            after the value (default False, trailing bytes are ignored).

        encoding: Codec used for string fields (default "utf-8").

        errors: Error handler for the string codec (default "strict").

    Examples:
        ```python
        from bewire import CodecConfig, decode

        # Reject strings/sequences longer than 4 KiB and any trailing garbage
        config = CodecConfig(max_length=4096, strict=True)
        request = decode(data, PtyRequest, config=config)
        ```
    """

    max_length: int = MAX_PREFIX_LENGTH
    strict: bool = False
    encoding: str = "utf-8"
    errors: str = "strict"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not 0 <= self.max_length <= MAX_PREFIX_LENGTH:
            raise ValueError(
                f"max_length must be 0-{MAX_PREFIX_LENGTH}, got {self.max_length}"
            )

        try:
            codecs.lookup(self.encoding)
        except LookupError as err:
            raise ValueError(f"Unknown string encoding: {self.encoding}") from err


DEFAULT_CONFIG = CodecConfig()
