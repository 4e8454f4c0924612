"""Hook registries for storehooks.

HookRegistry holds the pre and post chains of one schema, keyed by
operation name. HookLibrary is the process-wide table of *named* hook
functions that YAML metadata refers to; it follows the same pattern as
the validator registry of a metadata-driven app.
"""

import logging
from collections.abc import Callable, Iterable

from storehooks.hooks.errors import UnknownOperationError
from storehooks.hooks.types import BUILTIN_OPERATIONS, HookFn, Phase, hook_name

logger = logging.getLogger(__name__)


class HookRegistry:
    """Ordered pre/post hook chains per operation.

    Built during schema definition and treated as read-only once
    operations start running. Registering again appends, never replaces.

    Example:
        registry = HookRegistry()
        registry.register("save", Phase.PRE, hash_password)
        registry.register("save", Phase.POST, [notify, audit])
        registry.get_chain("save", Phase.POST)  # (notify, audit)
    """

    def __init__(self, custom_operations: Iterable[str] = ()) -> None:
        self._supported: set[str] = set(BUILTIN_OPERATIONS)
        self._chains: dict[tuple[str, Phase], list[HookFn]] = {}
        self.enable(*custom_operations)

    def enable(self, *operations: str) -> None:
        """Opt custom operations into the hook mechanism."""
        for operation in operations:
            if not operation or not isinstance(operation, str):
                raise ValueError(f"Invalid operation name: {operation!r}")
            self._supported.add(operation)

    def is_supported(self, operation: str) -> bool:
        return operation in self._supported

    @property
    def operations(self) -> list[str]:
        return sorted(self._supported)

    def register(
        self,
        operation: str,
        phase: Phase | str,
        hook_or_hooks: HookFn | Iterable[HookFn],
    ) -> None:
        """Append one hook or an ordered group of hooks to a chain.

        Args:
            operation: Operation name (save, delete, get or an enabled custom one)
            phase: Phase.PRE / Phase.POST or "pre" / "post"
            hook_or_hooks: A hook function or a list of them (kept in order)

        Raises:
            UnknownOperationError: If the operation does not support hooks
            TypeError: If a hook is not callable
        """
        phase = Phase(phase)
        if operation not in self._supported:
            raise UnknownOperationError(operation, self.operations)

        hooks = [hook_or_hooks] if callable(hook_or_hooks) else list(hook_or_hooks)
        for fn in hooks:
            if not callable(fn):
                raise TypeError(f"Hook for '{operation}' must be callable, got {fn!r}")

        self._chains.setdefault((operation, phase), []).extend(hooks)
        logger.debug(
            "Registered %d %s-hook(s) on '%s': %s",
            len(hooks),
            phase.value,
            operation,
            ", ".join(hook_name(fn) for fn in hooks),
        )

    def get_chain(self, operation: str, phase: Phase | str) -> tuple[HookFn, ...]:
        """Snapshot of the chain for (operation, phase); empty if none."""
        return tuple(self._chains.get((operation, Phase(phase)), ()))


class HookLibrary:
    """Named hook functions referenced from entity metadata.

    Hooks must be registered (usually with the @hook decorator at import
    time) before metadata that names them is turned into a schema.
    """

    _hooks: dict[str, HookFn] = {}

    @classmethod
    def register(cls, name: str, hook_fn: HookFn) -> None:
        """Register a hook function by name.

        Idempotent; re-registering the same name is a no-op.
        """
        if name in cls._hooks:
            return
        cls._hooks[name] = hook_fn

    @classmethod
    def get(cls, name: str) -> HookFn:
        """Get a named hook.

        Raises:
            ValueError: If no hook is registered under ``name``
        """
        if name not in cls._hooks:
            raise ValueError(
                f"Hook '{name}' is not registered. "
                "Named hooks must be registered before metadata is loaded."
            )
        return cls._hooks[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._hooks

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._hooks.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._hooks.clear()


def hook(name: str) -> Callable[[HookFn], HookFn]:
    """Decorator registering a function in the HookLibrary.

    Usage:
        @hook("hashPassword")
        async def hash_password(scope, *args):
            scope.entity["password"] = hasher(scope.entity["password"])
    """

    def decorator(fn: HookFn) -> HookFn:
        HookLibrary.register(name, fn)
        return fn

    return decorator
