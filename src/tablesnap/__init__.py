"""
tablesnap: keeps a directory of per-row JSON files in sync with database tables.
"""

__version__ = "0.1.0"
