"""Abstract interface for a partitioned key-value table."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Row = dict[str, Any]


class TableStore(ABC):
    """Rows addressed by (partition_key, row_key), scanned in row-key order.

    Only single-row writes are atomic; there are no cross-row transactions.
    Backend failures surface as StorageUnavailableError.
    """

    @abstractmethod
    async def insert(self, partition_key: str, row_key: str, data: Row) -> None:
        """Add a row. Raises EntityExistsError if the key is already taken."""

    @abstractmethod
    async def upsert(self, partition_key: str, row_key: str, data: Row) -> None:
        """Insert the row or replace it wholesale."""

    @abstractmethod
    async def get(self, partition_key: str, row_key: str) -> Row | None: ...

    @abstractmethod
    async def scan(self, partition_key: str, limit: int | None = None) -> list[Row]:
        """Return up to ``limit`` rows of the partition in ascending row-key order."""

    @abstractmethod
    async def delete(self, partition_key: str, row_key: str) -> bool:
        """Remove a row. Returns False when it did not exist."""

    @abstractmethod
    async def count(self, partition_key: str) -> int: ...

    @abstractmethod
    async def ping(self) -> None:
        """Raise StorageUnavailableError if the backend cannot serve requests."""


def check_limit(limit: int | None) -> None:
    if limit is not None and limit <= 0:
        raise ValueError(f"Scan limit must be positive, got {limit}")
