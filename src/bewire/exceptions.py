"""Exception hierarchy for bewire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BewireError for easy catching of any bewire-specific error.

Errors raised while walking a record carry the byte offset at which the failure
happened and the path of the field being processed (e.g. ``modes[2].name``).
The path is assembled on the way back up the traversal, so building it costs
nothing unless an error is actually raised.
"""

from __future__ import annotations


class BewireError(Exception):
    """Base exception for all bewire errors.

    Attributes:
        message: Human-readable description without location information
        offset: Byte offset of the failure, if known
        path: Field path segments, outermost first
    """

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.path: list[str] = []

    def add_context(self, segment: str) -> None:
        """Prepend a field name or ``[index]`` segment to the error path."""
        self.path.insert(0, segment)

    @property
    def field_path(self) -> str:
        """Return the path rendered as ``outer.items[2].name``."""
        rendered = ""
        for segment in self.path:
            if segment.startswith("[") or not rendered:
                rendered += segment
            else:
                rendered += "." + segment
        return rendered

    def __str__(self) -> str:
        location = []
        if self.path:
            location.append(f"field '{self.field_path}'")
        if self.offset is not None:
            location.append(f"offset {self.offset}")
        if location:
            return f"{self.message} ({', '.join(location)})"
        return self.message


class UnsupportedType(BewireError):
    """Raised when a field's shape does not map onto any wire type.

    This is a schema (programming) error, not a data error.

    Examples:
        - Floating point fields
        - Mappings, sets, unions and Optional fields
        - Integers without an explicit width
        - Multidimensional arrays/sequences (list of lists)
    """


SchemaError = UnsupportedType


class EncodeError(BewireError):
    """Raised when encoding a value fails.

    Examples:
        - Field value has the wrong Python type
        - Integer out of range for its width
        - Encoded record exceeds wire_max_bytes
    """


class DecodeError(BewireError):
    """Raised when decoding binary data fails.

    Examples:
        - Invalid UTF-8 in a string field
        - Trailing bytes in strict mode
        - Decoded values rejected by the record model
    """


class InsufficientInput(DecodeError):
    """Raised when fewer bytes remain than a field requires.

    Attributes:
        needed: Number of bytes the read required
        remaining: Number of bytes that were left in the buffer
    """

    def __init__(self, needed: int, remaining: int, *, offset: int | None = None) -> None:
        super().__init__(
            f"Insufficient input: need {needed} bytes, {remaining} remaining",
            offset=offset,
        )
        self.needed = needed
        self.remaining = remaining


class LengthOverflow(EncodeError, DecodeError):
    """Raised when a length prefix or element count cannot be represented.

    On decode this signals a corrupt length prefix (larger than the configured
    maximum). On encode it means a string or sequence is too long for its
    4-byte prefix or for the configured maximum.
    """
