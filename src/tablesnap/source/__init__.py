"""
Table sources for the snapshot tool.
"""

from .base import TableSource
from .sql_source import SqlTableSource

__all__ = [
    "TableSource",
    "SqlTableSource",
]
