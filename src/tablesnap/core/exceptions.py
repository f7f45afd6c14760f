"""
Custom exceptions for the table snapshot tool.

Every error raised by the tool derives from TableSnapshotError so the CLI can
report it without a traceback. None of them are retried; a failed run is
re-run by the operator.
"""

from typing import Optional


class TableSnapshotError(Exception):
    """Base exception for all table snapshot errors."""
    pass


class ConfigError(TableSnapshotError):
    """
    Error in the snapshot configuration.

    Raised when:
    - Configuration file is missing or cannot be parsed
    - Required values (such as the table list) are not set
    - Values are of the wrong type or out of range
    """
    pass


class QueryError(TableSnapshotError):
    """
    Error loading a table from the database.

    Raised when:
    - The database is unreachable or the login fails
    - The table does not exist or access is denied
    - The query fails for any other driver-level reason
    """

    def __init__(self, message: str, table_name: Optional[str] = None):
        super().__init__(message)
        self.table_name = table_name


class FileSystemError(TableSnapshotError):
    """
    Error reading or writing the snapshot directory.

    The table directory may be left partially reconciled: some rows written,
    some stale files not yet deleted. Re-running the snapshot converges it.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class MissingKeyColumnError(TableSnapshotError):
    """A row has no value for one of the table's primary key columns."""

    def __init__(self, column: str, table_name: Optional[str] = None):
        where = f" in table {table_name}" if table_name else ""
        super().__init__(f"Row is missing primary key column '{column}'{where}")
        self.column = column
        self.table_name = table_name


class UnsupportedValueError(TableSnapshotError):
    """A column value is not a JSON scalar and has no explicit conversion."""

    def __init__(self, message: str, column: Optional[str] = None, value_type: Optional[str] = None):
        super().__init__(message)
        self.column = column
        self.value_type = value_type
