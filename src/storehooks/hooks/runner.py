"""Hook chain execution for storehooks.

Runs one chain at a time, strictly in order. The two phases fail in
different ways:
- pre: a raising hook stops the chain and the exception reaches the
  caller as-is; a hook may replace the call arguments with override().
- post: a raising hook is recorded as a PostHookError and the chain
  carries on; the caller gets a PostHookEnvelope instead of the raw result.
"""

import inspect
import logging
from collections.abc import Sequence
from typing import Any

from storehooks.hooks.types import (
    ExecutionScope,
    HookFn,
    PostHookEnvelope,
    PostHookError,
    extract_override,
    hook_name,
)

logger = logging.getLogger(__name__)


async def _call(fn: HookFn, scope: ExecutionScope, args: Sequence[Any]) -> Any:
    result = fn(scope, *args)
    if inspect.isawaitable(result):
        result = await result
    return result


class HookRunner:
    """Executes hook chains for entity operations.

    Hooks never run concurrently: each one is awaited before the next
    starts, so overrides and the failure list are deterministic.
    """

    async def run_pre_chain(
        self,
        scope: ExecutionScope,
        args: Sequence[Any],
        chain: Sequence[HookFn],
    ) -> list[Any]:
        """Run pre-hooks and return the arguments for the target operation.

        Args:
            scope: EntityScope or StaticScope passed to every hook
            args: Positional arguments of the original call
            chain: Hooks in registration order

        Returns:
            The original arguments, or those of the latest override.

        Raises:
            Whatever the first failing hook raised; later hooks never run.
        """
        current = list(args)
        for fn in tuple(chain):
            result = await _call(fn, scope, current)
            replacement = extract_override(result)
            if replacement is not None:
                logger.debug("Pre-hook '%s' overrode arguments", hook_name(fn))
                current = replacement
        return current

    async def run_post_chain(
        self,
        scope: ExecutionScope,
        target_result: Any,
        chain: Sequence[HookFn],
    ) -> Any:
        """Run post-hooks against a successful operation result.

        Returns:
            ``target_result`` unchanged if every hook succeeded, otherwise a
            PostHookEnvelope listing the failures in hook order.
        """
        errors: list[PostHookError] = []
        for fn in tuple(chain):
            try:
                await _call(fn, scope, (target_result,))
            except Exception as e:
                name = hook_name(fn)
                logger.error("Post-hook '%s' failed: %s", name, e)
                errors.append(PostHookError.from_exception(e, hook=name))

        if errors:
            return PostHookEnvelope(result=target_result, errors_post_hook=tuple(errors))
        return target_result
