"""
SQL identifier validation and quoting for table names.

Table names come from configuration and are interpolated into SQL, so they
are restricted to plain identifiers, optionally schema-qualified.
"""

from typing import Optional, Tuple


def is_valid_identifier(name: str) -> bool:
    """Validate that a name is a safe SQL identifier."""
    return bool(name and name.replace('_', 'a').isalnum() and not name[0].isdigit())


def is_valid_table_name(name: str) -> bool:
    """Validate a table name of the form 'table' or 'schema.table'."""
    if not isinstance(name, str):
        return False
    parts = name.split(".")
    return 1 <= len(parts) <= 2 and all(is_valid_identifier(p) for p in parts)


def split_table_name(name: str) -> Tuple[Optional[str], str]:
    """Split 'schema.table' into (schema, table); schema is None if absent."""
    if "." in name:
        schema, table = name.split(".", 1)
        return schema, table
    return None, name


def quote_table_name(name: str) -> str:
    """
    Quote a table name for SQL Server.

    Args:
        name: Table name, optionally schema-qualified

    Returns:
        Bracket-quoted name, e.g. '[dbo].[users]'

    Raises:
        ValueError: If the name is not a valid table name
    """
    if not is_valid_table_name(name):
        raise ValueError(f"Invalid table name: {name}")
    return ".".join(f"[{part}]" for part in name.split("."))
