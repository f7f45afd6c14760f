"""
SQL Server table source.

Loads a whole table with `SELECT *` and reports which columns form the
primary key. A new connection is opened for every table and closed before
load_table returns, whether or not the query succeeded.
"""

import logging
from typing import Set

from ..core.exceptions import QueryError
from ..core.identifiers import quote_table_name, split_table_name
from ..core.models import ColumnMetadata, ConnectionSettings, TableData
from ..snapshot.rows import coerce_row
from .base import TableSource

logger = logging.getLogger(__name__)

# Optional pyodbc import
try:
    import pyodbc
except ImportError:
    pyodbc = None


class SqlTableSource(TableSource):
    """
    Table source backed by SQL Server through pyodbc.
    """

    def __init__(self, settings: ConnectionSettings):
        """
        Initialize the SQL table source.

        Args:
            settings: Connection parameters
        """
        if pyodbc is None:
            raise ImportError(
                "pyodbc is required for SqlTableSource. "
                "Install with: pip install pyodbc"
            )

        self.settings = settings
        self.connection_string = settings.build_connection_string()

    def _connect(self, table_name: str):
        """Open a new database connection."""
        try:
            conn = pyodbc.connect(
                self.connection_string,
                timeout=self.settings.connection_timeout,
            )
            logger.debug("Connected to SQL Server")
            return conn
        except pyodbc.Error as e:
            raise QueryError(
                f"Failed to connect to SQL Server: {e}", table_name=table_name
            ) from e

    def load_table(self, table_name: str) -> TableData:
        """
        Load every row of a table along with its primary key columns.

        Args:
            table_name: Table to load, 'table' or 'schema.table'

        Returns:
            TableData with column metadata and scalar-converted rows

        Raises:
            QueryError: On invalid names, connection or query failures
        """
        try:
            quoted = quote_table_name(table_name)
        except ValueError as e:
            raise QueryError(str(e), table_name=table_name) from e

        conn = self._connect(table_name)
        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT * FROM {quoted}")
            column_names = [d[0] for d in cursor.description]
            records = cursor.fetchall()
            cursor.close()

            key_columns = self._get_primary_key_columns(conn, table_name)

            columns = [
                ColumnMetadata(name=name, is_primary_key=name in key_columns)
                for name in column_names
            ]
            rows = [coerce_row(dict(zip(column_names, record))) for record in records]

            logger.debug(f"Loaded {len(rows)} rows from {table_name}")
            return TableData(columns=columns, rows=rows)

        except pyodbc.Error as e:
            raise QueryError(
                f"Failed to load table {table_name}: {e}", table_name=table_name
            ) from e

        finally:
            conn.close()
            logger.debug("Closed SQL Server connection")

    def _get_primary_key_columns(self, conn, table_name: str) -> Set[str]:
        """Query the catalog for the primary key columns of a table."""
        schema, table = split_table_name(table_name)
        cursor = conn.cursor()
        try:
            cursor.primaryKeys(table=table, schema=schema)
            return {row.column_name for row in cursor.fetchall()}
        finally:
            cursor.close()

    def get_name(self) -> str:
        """Return the source name."""
        return "sqlserver"
