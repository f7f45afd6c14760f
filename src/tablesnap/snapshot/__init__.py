"""
Snapshot module for table-to-directory reconciliation.

This module provides:
- Row normalization: scalar conversion, key ordering, JSON serialization
- Key specs: primary key discovery and row identity strings
- File names: filesystem-safe encoding of row identities
- Table snapshotter: per-table write/delete reconciliation
- Snapshot run: sequential snapshot of all configured tables
"""

from .rows import to_scalar, coerce_row, normalize_row, serialize_row
from .keyspec import primary_key_spec, row_identity
from .file_names import encode_file_name, is_snapshot_file_name
from .table_snapshot import TableSnapshotter
from .run import run_snapshot

__all__ = [
    "to_scalar",
    "coerce_row",
    "normalize_row",
    "serialize_row",
    "primary_key_spec",
    "row_identity",
    "encode_file_name",
    "is_snapshot_file_name",
    "TableSnapshotter",
    "run_snapshot",
]
