"""Data access layer: the table-store interface every backend implements."""

from shared.dal.table_store import Row, TableStore

__all__ = [
    "Row",
    "TableStore",
]
