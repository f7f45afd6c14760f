"""
Source interface for loading table contents.
"""

from abc import ABC, abstractmethod

from ..core.models import TableData


class TableSource(ABC):
    """
    Abstract base class for table sources.

    A table source returns every row of a table together with column
    metadata that flags the primary key columns.
    """

    @abstractmethod
    def load_table(self, table_name: str) -> TableData:
        """
        Load all rows of a table.

        Args:
            table_name: Table to load, optionally schema-qualified

        Returns:
            TableData with columns and rows. Row values are JSON scalars.

        Raises:
            QueryError: If the table cannot be loaded
        """
        pass

    def get_name(self) -> str:
        """Return the source name/identifier."""
        return type(self).__name__
