"""In-memory table store for tests and single-process deployments."""

import asyncio
import bisect
import copy

from shared.dal.table_store import Row, TableStore, check_limit
from shared.errors import EntityExistsError, StorageUnavailableError


class InMemoryTableStore(TableStore):
    """Dict-backed TableStore.

    Each partition keeps a sorted list of its row keys next to the row
    mapping, so scans never sort. Rows are deep-copied on the way in and
    out; callers never share state with the store.

    Limitation: data lives only as long as the process. Set ``available`` to
    False to make every call fail with StorageUnavailableError.
    """

    def __init__(self) -> None:
        self._rows: dict[str, dict[str, Row]] = {}
        self._keys: dict[str, list[str]] = {}
        self._lock = asyncio.Lock()
        self.available = True

    async def insert(self, partition_key: str, row_key: str, data: Row) -> None:
        self._ensure_available()
        async with self._lock:
            rows = self._rows.setdefault(partition_key, {})
            if row_key in rows:
                raise EntityExistsError(partition_key, row_key)
            rows[row_key] = copy.deepcopy(data)
            bisect.insort(self._keys.setdefault(partition_key, []), row_key)

    async def upsert(self, partition_key: str, row_key: str, data: Row) -> None:
        self._ensure_available()
        async with self._lock:
            rows = self._rows.setdefault(partition_key, {})
            if row_key not in rows:
                bisect.insort(self._keys.setdefault(partition_key, []), row_key)
            rows[row_key] = copy.deepcopy(data)

    async def get(self, partition_key: str, row_key: str) -> Row | None:
        self._ensure_available()
        row = self._rows.get(partition_key, {}).get(row_key)
        return copy.deepcopy(row) if row is not None else None

    async def scan(self, partition_key: str, limit: int | None = None) -> list[Row]:
        self._ensure_available()
        check_limit(limit)
        rows = self._rows.get(partition_key, {})
        keys = self._keys.get(partition_key, [])
        selected = keys if limit is None else keys[:limit]
        return [copy.deepcopy(rows[key]) for key in selected]

    async def delete(self, partition_key: str, row_key: str) -> bool:
        self._ensure_available()
        async with self._lock:
            rows = self._rows.get(partition_key)
            if rows is None or row_key not in rows:
                return False
            del rows[row_key]
            keys = self._keys[partition_key]
            del keys[bisect.bisect_left(keys, row_key)]
            return True

    async def count(self, partition_key: str) -> int:
        self._ensure_available()
        return len(self._rows.get(partition_key, {}))

    async def ping(self) -> None:
        self._ensure_available()

    def _ensure_available(self) -> None:
        if not self.available:
            raise StorageUnavailableError("In-memory table store is marked unavailable")
