"""Post-hook deferral for operations running inside a transaction.

Post-hooks must never observe writes that end up rolled back, so while
a transaction is open their chains are parked on the transaction's
queue. The transaction owner triggers the queue after a successful
commit, or discards it on rollback.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from storehooks.hooks.runner import HookRunner
from storehooks.hooks.types import ExecutionScope, HookFn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingPostHooks:
    """A post-chain captured together with the result it will receive."""

    chain: tuple[HookFn, ...]
    scope: ExecutionScope
    result: Any


class TransactionHookQueue:
    """Append-only list of deferred post-chains for one transaction."""

    def __init__(self, runner: HookRunner | None = None) -> None:
        self._runner = runner or HookRunner()
        self._pending: list[PendingPostHooks] = []

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> tuple[PendingPostHooks, ...]:
        return tuple(self._pending)

    def enqueue(
        self,
        chain: Sequence[HookFn],
        scope: ExecutionScope,
        captured_result: Any,
    ) -> None:
        self._pending.append(PendingPostHooks(tuple(chain), scope, captured_result))

    async def trigger(self) -> list[Any]:
        """Run every queued chain in enqueue order, removing each as it starts.

        Post-hook failures never fail the trigger; each entry's value is
        either its raw result or a PostHookEnvelope. If the trigger itself
        is interrupted (e.g. cancelled), the chains not yet started stay
        queued for a later trigger; the interrupted one is not retried.
        """
        logger.debug("Running %d deferred post-hook chain(s)", len(self._pending))

        results = []
        while self._pending:
            entry = self._pending.pop(0)
            results.append(
                await self._runner.run_post_chain(entry.scope, entry.result, entry.chain)
            )
        return results

    def discard(self) -> None:
        """Drop every queued chain without running it."""
        if self._pending:
            logger.debug("Discarding %d deferred post-hook chain(s)", len(self._pending))
        self._pending.clear()


@runtime_checkable
class TransactionContext(Protocol):
    """Any transaction handle that owns a TransactionHookQueue."""

    post_hooks: TransactionHookQueue
