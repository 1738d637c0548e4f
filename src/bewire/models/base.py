"""Base record class and bewire-specific Pydantic configuration.

This module provides the BaseRecord class that all bewire records should inherit from.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class BaseRecord(BaseModel):
    """Base class for all bewire records.

    Records declare their fields with type annotations; declaration order is
    the wire order. Records are immutable once built: the decoder accumulates
    field values and constructs the record in a single step.

    bewire-specific options can be configured as ClassVar attributes:

    Example:
        >>> from typing import Annotated, ClassVar, Optional
        >>> class PtyRequest(BaseRecord):
        ...     term: str
        ...     width: UInt32
        ...     height: UInt32
        ...     modes: bytes
        ...
        ...     wire_max_bytes: ClassVar[Optional[int]] = 1024

    Attributes:
        wire_max_bytes: Maximum encoded size in bytes (optional, checked by encode)
    """

    model_config = ConfigDict(
        # Records are never mutated after construction
        frozen=True,
        strict=False,
        # Forbid extra fields not defined in schema
        extra="forbid",
        # Byte runs are arbitrary binary, not text
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    wire_max_bytes: ClassVar[int | None] = None
