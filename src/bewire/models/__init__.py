"""Pydantic record modeling for bewire.

This module provides the BaseRecord class and field utilities for defining
binary records using Pydantic.
"""

from __future__ import annotations

from .base import BaseRecord
from .fields import (
    FixedArray,
    FixedLength,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    WireInt,
)

__all__ = [
    "BaseRecord",
    "FixedArray",
    "FixedLength",
    "WireInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
]
