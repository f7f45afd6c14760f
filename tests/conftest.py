"""
Shared test fixtures and configuration for pytest.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tablesnap.core.exceptions import QueryError
from tablesnap.core.models import ColumnMetadata, ConnectionSettings, TableData
from tablesnap.source.base import TableSource


logger = logging.getLogger(__name__)


# ============================================================================
# Environment detection
# ============================================================================

def sqlserver_settings() -> Optional[ConnectionSettings]:
    """Build connection settings for the test server, or None if not configured."""
    password = os.environ.get("TABLESNAP_SQLSERVER_PASSWORD") or os.environ.get("MSSQL_SA_PASSWORD")
    if not password:
        return None

    return ConnectionSettings(
        host=os.environ.get("TABLESNAP_SQLSERVER_HOST", "localhost"),
        port=int(os.environ.get("TABLESNAP_SQLSERVER_PORT", "1433")),
        user=os.environ.get("TABLESNAP_SQLSERVER_USER", "sa"),
        password=password,
        database=os.environ.get("TABLESNAP_SQLSERVER_DATABASE",
                                os.environ.get("MSSQL_DATABASE", "master")),
        driver=os.environ.get("TABLESNAP_SQLSERVER_DRIVER", "ODBC Driver 18 for SQL Server"),
        connection_timeout=5,
    )


def is_sqlserver_available() -> bool:
    """Check if SQL Server is available for testing."""
    settings = sqlserver_settings()
    if settings is None:
        return False

    try:
        import pyodbc

        conn = pyodbc.connect(settings.build_connection_string(), timeout=5)
        conn.close()
        return True

    except Exception as e:
        logger.debug(f"SQL Server not available: {e}")
        return False


# ============================================================================
# Pytest hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (requires SQL Server)")


def pytest_collection_modifyitems(config, items):
    """Automatically skip integration tests if SQL Server is not available."""
    if not any("integration" in item.keywords for item in items):
        return
    if is_sqlserver_available():
        return

    skip_sqlserver = pytest.mark.skip(
        reason="SQL Server not available (set MSSQL_SA_PASSWORD and ensure SQL Server is running)"
    )

    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_sqlserver)


# ============================================================================
# Fakes
# ============================================================================

class InMemoryTableSource(TableSource):
    """
    Table source serving rows from memory.

    Tables are registered with a list of primary key columns and a list of
    rows; the column list is derived from the rows in first-seen order.
    """

    def __init__(self):
        self.tables: Dict[str, TableData] = {}
        self.load_calls: List[str] = []

    def set_table(self, name: str, rows: List[dict], primary_key: List[str] = ()) -> None:
        column_names: List[str] = []
        for row in rows:
            for column in row:
                if column not in column_names:
                    column_names.append(column)
        for column in primary_key:
            if column not in column_names:
                column_names.append(column)

        self.tables[name] = TableData(
            columns=[
                ColumnMetadata(name=c, is_primary_key=c in primary_key)
                for c in column_names
            ],
            rows=[dict(row) for row in rows],
        )

    def load_table(self, table_name: str) -> TableData:
        self.load_calls.append(table_name)
        if table_name not in self.tables:
            raise QueryError(f"Invalid object name '{table_name}'", table_name=table_name)
        return self.tables[table_name]


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def sqlserver_connection_settings() -> Optional[ConnectionSettings]:
    """Session-scoped fixture providing SQL Server connection settings."""
    return sqlserver_settings()


@pytest.fixture
def memory_source() -> InMemoryTableSource:
    """Fixture providing an empty in-memory table source."""
    return InMemoryTableSource()


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Fixture providing a fresh base data directory."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def users_source(memory_source) -> InMemoryTableSource:
    """Fixture providing a 'users' table keyed by id."""
    memory_source.set_table(
        "users",
        rows=[{"id": 1, "name": "a"}, {"id": 2, "name": "b"}],
        primary_key=["id"],
    )
    return memory_source
