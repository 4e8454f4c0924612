"""Transaction handle shared by persistence adapters.

Each transaction owns a TransactionHookQueue (``post_hooks``) so that
wrapped operations can defer their post-hooks until the caller has
committed. The caller then runs them explicitly:

    txn = adapter.transaction()
    await user.save(txn)
    await txn.commit()
    results = await txn.exec_post_hooks()
"""

import logging
from enum import Enum
from typing import Any

from storehooks.hooks.runner import HookRunner
from storehooks.hooks.transaction import TransactionHookQueue
from storehooks.persistence.errors import TransactionStateError

logger = logging.getLogger(__name__)


class TransactionState(Enum):
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    FAILED = "failed"


class Transaction:
    """Base transaction handle; adapters implement _commit and _rollback."""

    def __init__(self, runner: HookRunner | None = None) -> None:
        self.post_hooks = TransactionHookQueue(runner)
        self.state = TransactionState.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.state is TransactionState.ACTIVE

    def _ensure_active(self, action: str) -> None:
        if not self.is_active:
            raise TransactionStateError(
                f"Cannot {action} a transaction that is {self.state.value}"
            )

    async def commit(self) -> None:
        self._ensure_active("commit")
        try:
            await self._commit()
        except Exception:
            # Nothing was applied, so queued post-hooks must never run
            self.state = TransactionState.FAILED
            self.post_hooks.discard()
            raise
        self.state = TransactionState.COMMITTED

    async def rollback(self) -> None:
        self._ensure_active("roll back")
        try:
            await self._rollback()
        finally:
            self.state = TransactionState.ROLLED_BACK
            self.post_hooks.discard()

    async def exec_post_hooks(self) -> list[Any]:
        """Run the post-hooks deferred during this transaction.

        Only meaningful after a successful commit. Before that, nothing
        runs and the queue is left untouched.

        Returns:
            One entry per deferred operation, in call order: the raw
            result, or a PostHookEnvelope when some of its post-hooks failed.
        """
        if self.state is not TransactionState.COMMITTED:
            logger.warning(
                "exec_post_hooks() called on a %s transaction; no post-hooks run",
                self.state.value,
            )
            return []
        return await self.post_hooks.trigger()

    async def __aenter__(self) -> "Transaction":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self.is_active:
            return
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    async def _commit(self) -> None:
        raise NotImplementedError

    async def _rollback(self) -> None:
        raise NotImplementedError
