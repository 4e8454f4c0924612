"""Hook system types for storehooks.

Defines the core data structures shared by the registry, runner and wrapper:
- Phase: pre or post
- EntityScope / StaticScope: what a hook is bound to while it runs
- override(): the payload a pre-hook returns to replace the call arguments
- PostHookError / PostHookEnvelope: non-fatal post-hook failures
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from storehooks.models.entity import Entity
    from storehooks.models.model import Model

# Key a pre-hook result must carry to replace the operation's arguments
OVERRIDE_KEY = "__override"

BUILTIN_OPERATIONS = ("save", "delete", "get")


class Phase(Enum):
    """When a hook chain runs relative to its operation."""

    PRE = "pre"
    POST = "post"


@dataclass(frozen=True)
class EntityScope:
    """Scope for operations acting on a single entity.

    Hooks may read and write ``entity`` fields in place; the target
    operation and later hooks in the chain see those writes.
    """

    entity: Entity

    @property
    def model(self) -> Model:
        return self.entity.model

    @property
    def is_static(self) -> bool:
        return False


@dataclass(frozen=True)
class StaticScope:
    """Scope for collection-level operations (e.g. delete by a list of ids)."""

    model: Model

    @property
    def is_static(self) -> bool:
        return True


ExecutionScope = Union[EntityScope, StaticScope]

# Hook signature: (scope, *args) -> awaitable. Pre-hooks may resolve to an
# override payload; anything else they return is ignored.
HookFn = Callable[..., Awaitable[Any]]


def override(*args: Any) -> dict[str, list[Any]]:
    """Build the payload a pre-hook returns to replace the call arguments.

    Usage:
        async def redirect_delete(scope, id):
            return override(999)
    """
    return {OVERRIDE_KEY: list(args)}


def extract_override(value: Any) -> list[Any] | None:
    """Return the replacement argument list carried by ``value``, if any."""
    if not isinstance(value, Mapping) or OVERRIDE_KEY not in value:
        return None
    replacement = value[OVERRIDE_KEY]
    if isinstance(replacement, (list, tuple)):
        return list(replacement)
    return [replacement]


def hook_name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


@dataclass(frozen=True)
class PostHookError:
    """A failure captured from one post-hook.

    Attributes:
        code: Error code (the exception's ``code`` attribute, else 500)
        message: Error message (the exception's ``message`` attribute, else str(exc))
        hook: Name of the hook that failed (diagnostic, not compared)
        exception: The original exception (diagnostic, not compared)
    """

    code: int | str
    message: str
    hook: str | None = field(default=None, compare=False)
    exception: BaseException | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_exception(cls, exc: BaseException, hook: str | None = None) -> PostHookError:
        code = getattr(exc, "code", None)
        message = getattr(exc, "message", None)
        return cls(
            code=code if code is not None else 500,
            message=message if isinstance(message, str) else str(exc),
            hook=hook,
            exception=exc,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class PostHookEnvelope:
    """Successful result that carries one or more post-hook failures.

    A wrapped operation resolves either to its raw result or to this
    envelope. The envelope only exists when something failed, so
    ``errors_post_hook`` is never empty.
    """

    result: Any
    errors_post_hook: tuple[PostHookError, ...]

    def __post_init__(self) -> None:
        if not self.errors_post_hook:
            raise ValueError("PostHookEnvelope requires at least one PostHookError")
        object.__setattr__(self, "errors_post_hook", tuple(self.errors_post_hook))

    def to_dict(self) -> dict[str, Any]:
        return {
            "result": self.result,
            "errorsPostHook": [e.to_dict() for e in self.errors_post_hook],
        }


def has_post_hook_errors(value: Any) -> bool:
    """True when ``value`` is an envelope reporting post-hook failures."""
    return isinstance(value, PostHookEnvelope)
