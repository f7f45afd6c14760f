"""
Core data models for table snapshots.

Defines the values passed between the query source, the table snapshotter
and the snapshot run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

# Column values after scalar conversion (see snapshot.rows.to_scalar)
Scalar = Union[None, bool, int, float, str]
Row = Dict[str, Scalar]


@dataclass(frozen=True)
class ColumnMetadata:
    """
    Column information returned alongside query results.

    Attributes:
        name: Column name as reported by the driver
        is_primary_key: Whether the column is part of the table's primary key
    """
    name: str
    is_primary_key: bool = False


@dataclass
class TableData:
    """Rows and column metadata loaded for one table."""
    columns: List[ColumnMetadata] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)


@dataclass(frozen=True)
class TableSnapshotRequest:
    """
    A request to snapshot one table.

    Attributes:
        table_name: Table to snapshot (plain or schema-qualified)
        base_dir: Base data directory; the table gets its own subdirectory
    """
    table_name: str
    base_dir: Path

    @property
    def table_dir(self) -> Path:
        """Return the snapshot directory for this table."""
        return Path(self.base_dir) / self.table_name


@dataclass
class TableSnapshotResult:
    """Outcome of snapshotting one table."""
    table_name: str
    table_dir: Path
    primary_key: Tuple[str, ...] = ()
    row_count: int = 0
    files_written: int = 0
    files_unchanged: int = 0
    files_deleted: int = 0
    collisions: int = 0

    def summary(self) -> str:
        """Get a one-line human-readable summary."""
        line = (
            f"{self.table_name}: {self.row_count} rows "
            f"({self.files_written} written, {self.files_unchanged} unchanged, "
            f"{self.files_deleted} deleted)"
        )
        if self.collisions:
            line += f", {self.collisions} key collisions"
        return line


@dataclass
class ConnectionSettings:
    """
    SQL Server connection parameters.

    Attributes:
        host: Server host
        port: Server port
        user: Login name
        password: Login password
        database: Database name (server default if not set)
        driver: ODBC driver name
        trust_server_certificate: Whether to trust self-signed certificates
        connection_timeout: Login timeout in seconds (0 = driver default)
        connection_string: Full ODBC connection string (other fields ignored)
    """
    host: str = "localhost"
    port: int = 1433
    user: str = "sa"
    password: Optional[str] = None
    database: Optional[str] = None
    driver: str = "ODBC Driver 18 for SQL Server"
    trust_server_certificate: bool = True
    connection_timeout: int = 0
    connection_string: Optional[str] = None

    def build_connection_string(self) -> str:
        """Return the ODBC connection string for these settings."""
        if self.connection_string:
            return self.connection_string

        parts = [
            f"Driver={{{self.driver}}}",
            f"Server={self.host},{self.port}",
        ]
        if self.database:
            parts.append(f"Database={self.database}")
        if self.user:
            parts.append(f"UID={_odbc_value(self.user)}")
        if self.password is not None:
            parts.append(f"PWD={_odbc_value(self.password)}")
        if self.trust_server_certificate:
            parts.append("TrustServerCertificate=yes")
        return ";".join(parts)


def _odbc_value(value: str) -> str:
    """Brace-quote an ODBC attribute value that contains separators."""
    if any(ch in value for ch in ";{}=") or value != value.strip():
        return "{" + value.replace("}", "}}") + "}"
    return value


@dataclass
class SnapshotConfig:
    """
    Fully resolved configuration for a snapshot run.

    Constructed once by the config loader and passed explicitly to the run.
    """
    tables: List[str]
    data_path: Path = Path("data")
    connection: ConnectionSettings = field(default_factory=ConnectionSettings)
    max_file_name_length: int = 255
    skip_unchanged: bool = False
