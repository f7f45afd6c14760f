"""
Table snapshotter: reconciles a table's directory with its current rows.

Directory structure:
    {base_dir}/{table_name}/
        {encoded row identity}.json

Every row is written to the file named after its primary key. Files present
before the run that no row claims are deleted afterwards, so the directory
ends up holding exactly one file per current row.

There is no rollback. An I/O error aborts the table and may leave new files
written while stale ones are still present; running the snapshot again
converges the directory.
"""

import logging
from pathlib import Path
from typing import Set

from ..core.exceptions import FileSystemError
from ..core.models import TableSnapshotRequest, TableSnapshotResult
from ..source.base import TableSource
from .file_names import DEFAULT_MAX_FILE_NAME_LENGTH, encode_file_name, is_snapshot_file_name
from .keyspec import primary_key_spec, row_identity
from .rows import normalize_row, serialize_row

logger = logging.getLogger(__name__)


class TableSnapshotter:
    """
    Writes one JSON file per row and removes files for rows that are gone.

    Rows are written unconditionally unless skip_unchanged is set, in which
    case files whose bytes already match are left alone.
    """

    def __init__(
        self,
        source: TableSource,
        max_file_name_length: int = DEFAULT_MAX_FILE_NAME_LENGTH,
        skip_unchanged: bool = False,
    ):
        """
        Initialize the table snapshotter.

        Args:
            source: Source the table rows are loaded from
            max_file_name_length: Upper bound for snapshot file names
            skip_unchanged: Whether to skip rewriting byte-identical files
        """
        self.source = source
        self.max_file_name_length = max_file_name_length
        self.skip_unchanged = skip_unchanged

    def snapshot(self, request: TableSnapshotRequest) -> TableSnapshotResult:
        """
        Snapshot a table into its directory.

        Args:
            request: Table name and base directory

        Returns:
            TableSnapshotResult with row and file counts

        Raises:
            QueryError: If the table cannot be loaded
            MissingKeyColumnError: If a row lacks a primary key column
            FileSystemError: If the directory cannot be read or written
        """
        table_name = request.table_name
        table_dir = request.table_dir
        log_extra = {"table": table_name}

        self._ensure_directory(table_dir)
        stale = self._list_snapshot_files(table_dir)

        table = self.source.load_table(table_name)
        spec = primary_key_spec(table.columns)

        result = TableSnapshotResult(
            table_name=table_name,
            table_dir=table_dir,
            primary_key=spec,
            row_count=len(table.rows),
        )

        if not spec and table.rows:
            logger.warning(
                f"Table {table_name} has no primary key; all rows map to one file",
                extra=log_extra,
            )

        seen: Set[str] = set()
        for row in table.rows:
            normalized = normalize_row(row)
            identity = row_identity(spec, normalized, table_name=table_name)
            file_name = encode_file_name(identity, self.max_file_name_length)

            if file_name in seen:
                result.collisions += 1
                logger.warning(
                    f"Duplicate key '{identity}' in {table_name}; last row wins",
                    extra=log_extra,
                )
            seen.add(file_name)
            stale.discard(file_name)

            if self._write_row(table_dir / file_name, serialize_row(normalized)):
                result.files_written += 1
            else:
                result.files_unchanged += 1

        for file_name in sorted(stale):
            self._delete(table_dir / file_name)
            result.files_deleted += 1
            logger.debug(f"Deleted stale file {file_name}", extra=log_extra)

        return result

    def _ensure_directory(self, table_dir: Path) -> None:
        """Create the table directory and any missing parents."""
        try:
            table_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(
                f"Failed to create directory {table_dir}: {e}", path=str(table_dir)
            ) from e

    def _list_snapshot_files(self, table_dir: Path) -> Set[str]:
        """Return the names of the snapshot files currently in the directory."""
        try:
            return {
                entry.name
                for entry in table_dir.iterdir()
                if is_snapshot_file_name(entry.name) and entry.is_file()
            }
        except OSError as e:
            raise FileSystemError(
                f"Failed to list directory {table_dir}: {e}", path=str(table_dir)
            ) from e

    def _write_row(self, path: Path, content: str) -> bool:
        """
        Replace the file with the given content.

        Returns:
            True if the file was written, False if it was skipped as unchanged
        """
        data = content.encode("utf-8")
        try:
            if self.skip_unchanged and path.is_file() and path.read_bytes() == data:
                return False
            path.write_bytes(data)
        except OSError as e:
            raise FileSystemError(f"Failed to write {path}: {e}", path=str(path)) from e
        return True

    def _delete(self, path: Path) -> None:
        """Delete a stale snapshot file."""
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise FileSystemError(f"Failed to delete {path}: {e}", path=str(path)) from e
