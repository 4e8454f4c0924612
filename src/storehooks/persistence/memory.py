"""In-memory persistence adapter.

Keeps one dict per entity kind. Transactions stage writes and apply
them in one step on commit, which is enough to exercise deferred
post-hooks without a database.
"""

import copy
import itertools
from typing import Any

from storehooks.persistence.errors import PersistenceError
from storehooks.persistence.transaction import Transaction

# Marks a staged delete
_DELETED = object()


class MemoryTransaction(Transaction):
    """Transaction over a MemoryAdapter; staged writes are visible to itself."""

    def __init__(self, adapter: "MemoryAdapter") -> None:
        super().__init__()
        self.adapter = adapter
        self._staged: dict[tuple[str, Any], Any] = {}

    def stage(self, kind: str, id: Any, data: Any) -> None:
        self._ensure_active("write through")
        self._staged[(kind, id)] = data

    def lookup(self, kind: str, id: Any) -> Any:
        """Staged value for (kind, id), _DELETED, or None if untouched."""
        return self._staged.get((kind, id))

    async def _commit(self) -> None:
        for (kind, id), data in self._staged.items():
            table = self.adapter.tables.setdefault(kind, {})
            if data is _DELETED:
                table.pop(id, None)
            else:
                table[id] = data
        self._staged.clear()

    async def _rollback(self) -> None:
        self._staged.clear()


class MemoryAdapter:
    """Dict-backed adapter. Ids are integers allocated from one counter."""

    def __init__(self) -> None:
        self.tables: dict[str, dict[Any, dict[str, Any]]] = {}
        self._ids = itertools.count(1)

    def transaction(self) -> MemoryTransaction:
        return MemoryTransaction(self)

    async def allocate_id(self, kind: str) -> int:
        id = next(self._ids)
        while id in self.tables.get(kind, {}):
            id = next(self._ids)
        return id

    async def save(
        self,
        kind: str,
        id: Any,
        data: dict[str, Any],
        transaction: MemoryTransaction | None = None,
    ) -> dict[str, Any]:
        record = copy.deepcopy(data)
        if transaction is not None:
            self._check(transaction).stage(kind, id, record)
        else:
            self.tables.setdefault(kind, {})[id] = record
        return copy.deepcopy(record)

    async def get(
        self, kind: str, id: Any, transaction: MemoryTransaction | None = None
    ) -> dict[str, Any] | None:
        record = self._read(kind, id, transaction)
        return copy.deepcopy(record) if record is not None else None

    async def delete(
        self, kind: str, ids: list[Any], transaction: MemoryTransaction | None = None
    ) -> list[Any]:
        deleted = []
        for id in ids:
            if self._read(kind, id, transaction) is None:
                continue
            if transaction is not None:
                self._check(transaction).stage(kind, id, _DELETED)
            else:
                self.tables[kind].pop(id)
            deleted.append(id)
        return deleted

    def _read(
        self, kind: str, id: Any, transaction: MemoryTransaction | None
    ) -> dict[str, Any] | None:
        if transaction is not None:
            staged = self._check(transaction).lookup(kind, id)
            if staged is _DELETED:
                return None
            if staged is not None:
                return staged
        return self.tables.get(kind, {}).get(id)

    def _check(self, transaction: Any) -> MemoryTransaction:
        if not isinstance(transaction, MemoryTransaction) or transaction.adapter is not self:
            raise PersistenceError("Transaction does not belong to this adapter")
        return transaction
