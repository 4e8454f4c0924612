"""PersistenceAdapter Protocol: shared interface for all storage adapters."""

from typing import Any, Protocol, runtime_checkable

from storehooks.persistence.transaction import Transaction


@runtime_checkable
class PersistenceAdapter(Protocol):
    """Interface the entity layer needs from a storage backend.

    Every call accepts an optional transaction created by the same
    adapter; writes made through it stay invisible outside it until
    commit.
    """

    async def allocate_id(self, kind: str) -> Any: ...

    async def save(
        self,
        kind: str,
        id: Any,
        data: dict[str, Any],
        transaction: Transaction | None = None,
    ) -> dict[str, Any]: ...

    async def get(
        self, kind: str, id: Any, transaction: Transaction | None = None
    ) -> dict[str, Any] | None: ...

    async def delete(
        self, kind: str, ids: list[Any], transaction: Transaction | None = None
    ) -> list[Any]: ...

    def transaction(self) -> Transaction: ...
