"""Record analysis CLI command."""

from __future__ import annotations

import importlib.util
import inspect
import sys
from pathlib import Path

from ..codec.schema import RecordSchema
from ..models.base import BaseRecord


def load_records(file_path: Path) -> list[type[BaseRecord]]:
    """Load a Python file and return the BaseRecord classes it defines.

    Args:
        file_path: Path to Python file containing record definitions

    Returns:
        Record classes sorted by name (imported classes are skipped)
    """
    spec = importlib.util.spec_from_file_location("user_module", file_path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Could not load module from {file_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules["user_module"] = module
    spec.loader.exec_module(module)

    record_classes = []
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if obj is not BaseRecord and issubclass(obj, BaseRecord):
            # Only include classes defined in this file (not imported)
            if obj.__module__ == "user_module":
                record_classes.append(obj)

    return record_classes


def analyze_file(file_path: Path) -> None:
    """Analyze all BaseRecord classes in a Python file.

    Args:
        file_path: Path to Python file containing record definitions
    """
    record_classes = load_records(file_path)

    if not record_classes:
        print(f"No BaseRecord classes found in {file_path}")
        return

    print("|" * 7, "bewire: Big-Endian Wire Records", "|" * 7)
    print(f"{len(record_classes)} record{'s' if len(record_classes) != 1 else ''} loaded.")
    print("Sizes are in bytes.")
    print()

    for record_class in record_classes:
        analyze_record_class(record_class)


def analyze_record_class(record_class: type[BaseRecord]) -> None:
    """Print the wire layout of a single record class.

    Args:
        record_class: Record class to analyze
    """
    schema = RecordSchema.from_model(record_class)
    fixed_size = schema.fixed_size
    max_bytes = record_class.wire_max_bytes

    print(f"{'=' * 19} {record_class.__name__} {'=' * 19}")

    if fixed_size is not None:
        print(f"Encoded size: {fixed_size} bytes (fixed)")
    else:
        print(f"Encoded size: variable, at least {schema.min_size} bytes")
    if max_bytes is not None:
        print(f"Allowed maximum size of record: {max_bytes} bytes")
    print()

    offset: int | None = 0
    for i, field in enumerate(schema.fields, 1):
        wire_type = field.wire_type
        size = wire_type.fixed_size
        size_text = f"{size} bytes" if size is not None else f"variable (>= {wire_type.min_size})"
        offset_text = f"@{offset}" if offset is not None else "@?"

        field_desc = f"{i}. {field.name} : {wire_type.describe()}"
        dots = "." * max(1, 54 - len(field_desc) - len(size_text))
        print(f"        {field_desc}{dots}{size_text} {offset_text}")

        if offset is not None and size is not None:
            offset += size
        else:
            offset = None

    print()
