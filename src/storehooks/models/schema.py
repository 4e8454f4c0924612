"""Schema: definition-time surface for hooks and custom methods."""

from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from storehooks.hooks.registry import HookRegistry
from storehooks.hooks.types import HookFn, Phase
from storehooks.models.entity import Entity

CustomMethod = Callable[..., Awaitable[Any]]


class Schema:
    """Holds the hooks and custom methods of one entity kind.

    Built once while the application is set up; Models created from it
    read the registry on every call.

    Example:
        schema = Schema()
        schema.pre("save", hash_password)
        schema.post("delete", [purge_cache, audit_delete])
        schema.method("archive", archive, hooks=True)
        schema.pre("archive", check_not_archived)
    """

    def __init__(self, custom_operations: Iterable[str] = ()) -> None:
        self.hooks = HookRegistry(custom_operations)
        self.methods: dict[str, CustomMethod] = {}

    def pre(self, operation: str, hook_or_hooks: HookFn | Iterable[HookFn]) -> "Schema":
        self.hooks.register(operation, Phase.PRE, hook_or_hooks)
        return self

    def post(self, operation: str, hook_or_hooks: HookFn | Iterable[HookFn]) -> "Schema":
        self.hooks.register(operation, Phase.POST, hook_or_hooks)
        return self

    def enable_hooks(self, *operations: str) -> "Schema":
        """Opt custom methods into pre/post hooks."""
        self.hooks.enable(*operations)
        return self

    def method(self, name: str, fn: CustomMethod, *, hooks: bool = False) -> "Schema":
        """Attach a custom entity method.

        ``fn`` is called as ``fn(entity, *args, **kwargs)``. With
        ``hooks=True`` the method accepts pre/post hooks like save.
        """
        if hasattr(Entity, name):
            raise ValueError(f"Method name '{name}' clashes with a built-in Entity attribute")
        self.methods[name] = fn
        if hooks:
            self.enable_hooks(name)
        return self
