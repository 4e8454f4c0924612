"""Composition of hook chains around a target operation."""

import functools
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any

from storehooks.hooks.registry import HookRegistry
from storehooks.hooks.runner import HookRunner
from storehooks.hooks.transaction import TransactionContext
from storehooks.hooks.types import ExecutionScope, Phase

logger = logging.getLogger(__name__)

Target = Callable[..., Awaitable[Any]]


def find_transaction(
    args: Sequence[Any], kwargs: Mapping[str, Any]
) -> TransactionContext | None:
    """Return the first transaction handle among the call arguments."""
    for value in (*args, *kwargs.values()):
        if isinstance(value, TransactionContext):
            return value
    return None


class MethodWrapper:
    """Runs pre-chain, target and post-chain for one schema's operations.

    Order of events for a call:
    1. pre-chain (skipped when pre_hooks=False); an exception ends the call
    2. target with the (possibly overridden) positional arguments
    3. post-chain on success, or deferral onto the transaction's queue
       when a transaction handle is among the arguments
    """

    def __init__(self, registry: HookRegistry, runner: HookRunner | None = None) -> None:
        self.registry = registry
        self.runner = runner or HookRunner()

    async def invoke(
        self,
        operation: str,
        scope: ExecutionScope,
        target: Target,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        *,
        pre_hooks: bool = True,
        scope_for: Callable[..., ExecutionScope] | None = None,
    ) -> Any:
        """Invoke ``target`` for ``operation`` with its hooks.

        Args:
            operation: Operation name the chains are registered under
            scope: Scope bound to every hook of this call
            target: The wrapped coroutine function
            args: Positional arguments; pre-hooks see and may replace them
            kwargs: Keyword arguments, passed through to the target untouched
            pre_hooks: False skips the pre phase for this call only
            scope_for: Rebuilds the scope from the positional arguments;
                when given and a pre-hook overrode the arguments, the
                post phase is bound to the scope of the final arguments.
                Otherwise ``scope`` is used for both phases.

        Returns:
            The target result, or a PostHookEnvelope if post-hooks failed.
            Inside a transaction, always the raw target result.
        """
        kwargs = dict(kwargs or {})
        call_args = list(args)

        if pre_hooks:
            chain = self.registry.get_chain(operation, Phase.PRE)
            if chain:
                logger.debug("Running %d pre-hook(s) for '%s'", len(chain), operation)
                call_args = await self.runner.run_pre_chain(scope, call_args, chain)
                if scope_for is not None and call_args != list(args):
                    scope = scope_for(*call_args)
        else:
            logger.debug("Pre-hooks disabled for this '%s' call", operation)

        result = await target(*call_args, **kwargs)

        chain = self.registry.get_chain(operation, Phase.POST)
        if not chain:
            return result

        transaction = find_transaction(call_args, kwargs)
        if transaction is not None:
            logger.debug(
                "Deferring %d post-hook(s) for '%s' until commit", len(chain), operation
            )
            transaction.post_hooks.enqueue(chain, scope, result)
            return result

        return await self.runner.run_post_chain(scope, result, chain)

    def wrap(
        self,
        operation: str,
        target: Target,
        scope_for: Callable[..., ExecutionScope],
    ) -> Callable[..., Awaitable[Any]]:
        """Return an async callable running ``target`` with its hooks.

        ``scope_for`` receives the positional arguments and returns the
        scope for the call; it is applied again after an override. The returned callable accepts a
        ``pre_hooks`` keyword like :meth:`invoke`.
        """

        @functools.wraps(target)
        async def wrapped(*args: Any, pre_hooks: bool = True, **kwargs: Any) -> Any:
            return await self.invoke(
                operation,
                scope_for(*args),
                target,
                args,
                kwargs,
                pre_hooks=pre_hooks,
                scope_for=scope_for,
            )

        return wrapped
