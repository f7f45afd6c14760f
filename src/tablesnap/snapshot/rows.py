"""
Row normalization and JSON serialization.

Provides stable, byte-level deterministic serialization of table rows so
snapshot files only change when row content changes. Two layers:

- to_scalar / coerce_row: the boundary where driver values become JSON
  scalars (None, bool, int, float, str). Known non-scalar types are
  stringified explicitly; anything else is rejected.
- normalize_row / serialize_row: key ordering and the on-disk text format.
"""

import json
import math
import uuid
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from ..core.exceptions import UnsupportedValueError
from ..core.models import Row, Scalar


def to_scalar(value: Any, column: Optional[str] = None) -> Scalar:
    """
    Convert a driver value to a JSON scalar.

    - None, bool, int and str pass through unchanged
    - Finite floats pass through; NaN and infinities are rejected
    - Decimal is converted to its exact string form
    - datetime, date and time become ISO-8601 strings
    - UUID becomes its canonical string
    - bytes, bytearray and memoryview become lowercase hex

    Args:
        value: The value returned by the database driver
        column: Column name, used in error messages

    Returns:
        A JSON scalar

    Raises:
        UnsupportedValueError: If the value has no scalar representation
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedValueError(
                f"Column '{column}' holds non-finite float {value!r}",
                column=column,
                value_type="float",
            )
        return value

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise UnsupportedValueError(
                f"Column '{column}' holds non-finite decimal {value!r}",
                column=column,
                value_type="Decimal",
            )
        return str(value)

    # datetime is a subclass of date, both expose isoformat()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()

    if isinstance(value, uuid.UUID):
        return str(value)

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()

    raise UnsupportedValueError(
        f"Column '{column}' holds unsupported type {type(value).__name__}",
        column=column,
        value_type=type(value).__name__,
    )


def coerce_row(row: Mapping[str, Any]) -> Row:
    """Apply to_scalar to every value of a row."""
    return {name: to_scalar(value, column=name) for name, value in row.items()}


def normalize_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return the row with keys in lexicographic order.

    Values are not transformed. Rows with the same keys and values produce
    the same normalized row regardless of input key order.
    """
    return {key: row[key] for key in sorted(row)}


def serialize_row(row: Mapping[str, Any]) -> str:
    """
    Serialize a normalized row as indented JSON text.

    Key order is taken from the mapping as given, so callers pass the result
    of normalize_row. The output ends with a newline.

    Raises:
        ValueError: If the row contains NaN or infinite floats
        TypeError: If the row contains non-JSON values
    """
    return json.dumps(row, indent=2, ensure_ascii=False, allow_nan=False) + "\n"
