"""
Primary key discovery and row identity strings.
"""

from typing import Any, Iterable, Mapping, Optional, Tuple

from ..core.exceptions import MissingKeyColumnError
from ..core.models import ColumnMetadata

PrimaryKeySpec = Tuple[str, ...]


def primary_key_spec(columns: Iterable[ColumnMetadata]) -> PrimaryKeySpec:
    """
    Derive the primary key spec from column metadata.

    Args:
        columns: Column metadata as returned with the query results

    Returns:
        Sorted, de-duplicated names of the primary key columns. Empty if the
        table reports no primary key.
    """
    return tuple(sorted({c.name for c in columns if c.is_primary_key}))


def format_key_value(value: Any) -> str:
    """Render a key value for use in a row identity."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def row_identity(
    spec: PrimaryKeySpec,
    row: Mapping[str, Any],
    table_name: Optional[str] = None,
) -> str:
    """
    Build the identity string of a row: 'col1=val1;col2=val2'.

    Args:
        spec: Primary key spec for the row's table
        row: Raw or normalized row
        table_name: Table name, used in error messages

    Returns:
        The identity string; empty if there are no key columns

    Raises:
        MissingKeyColumnError: If the row lacks one of the key columns
    """
    parts = []
    for column in spec:
        if column not in row:
            raise MissingKeyColumnError(column, table_name=table_name)
        parts.append(f"{column}={format_key_value(row[column])}")
    return ";".join(parts)
