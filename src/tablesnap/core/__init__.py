"""
Core models, errors and helpers for the table snapshot tool.
"""

from .exceptions import (
    TableSnapshotError,
    ConfigError,
    QueryError,
    FileSystemError,
    MissingKeyColumnError,
    UnsupportedValueError,
)
from .models import (
    ColumnMetadata,
    TableData,
    TableSnapshotRequest,
    TableSnapshotResult,
    ConnectionSettings,
    SnapshotConfig,
)

__all__ = [
    "TableSnapshotError",
    "ConfigError",
    "QueryError",
    "FileSystemError",
    "MissingKeyColumnError",
    "UnsupportedValueError",
    "ColumnMetadata",
    "TableData",
    "TableSnapshotRequest",
    "TableSnapshotResult",
    "ConnectionSettings",
    "SnapshotConfig",
]
