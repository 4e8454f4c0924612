"""storehooks entity operation hook system.

Runs ordered chains of async functions around entity operations:
- pre: before the operation; can replace its arguments or cancel it by raising
- post: after the operation succeeded; failures are collected, never fatal

Inside a transaction, post-hooks wait until the caller commits and
calls ``transaction.exec_post_hooks()``.

Usage:
    from storehooks.hooks import HookError, override

    async def hash_password(scope, *args):
        scope.entity["password"] = hasher(scope.entity["password"])

    async def protect_root(scope, id):
        if id == 1:
            raise HookError("Cannot delete the root account", code=403)

    schema.pre("save", hash_password)
    schema.pre("delete", protect_root)
"""

from storehooks.hooks.errors import HookError, UnknownOperationError
from storehooks.hooks.registry import HookLibrary, HookRegistry, hook
from storehooks.hooks.runner import HookRunner
from storehooks.hooks.transaction import (
    PendingPostHooks,
    TransactionContext,
    TransactionHookQueue,
)
from storehooks.hooks.types import (
    BUILTIN_OPERATIONS,
    OVERRIDE_KEY,
    EntityScope,
    ExecutionScope,
    HookFn,
    Phase,
    PostHookEnvelope,
    PostHookError,
    StaticScope,
    has_post_hook_errors,
    override,
)
from storehooks.hooks.wrapper import MethodWrapper

__all__ = [
    "BUILTIN_OPERATIONS",
    "EntityScope",
    "ExecutionScope",
    "HookError",
    "HookFn",
    "HookLibrary",
    "HookRegistry",
    "HookRunner",
    "MethodWrapper",
    "OVERRIDE_KEY",
    "PendingPostHooks",
    "Phase",
    "PostHookEnvelope",
    "PostHookError",
    "StaticScope",
    "TransactionContext",
    "TransactionHookQueue",
    "UnknownOperationError",
    "has_post_hook_errors",
    "hook",
    "override",
]
