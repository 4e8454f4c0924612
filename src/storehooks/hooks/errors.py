"""Exceptions raised by the hook system."""


class HookError(Exception):
    """Error raised by (or on behalf of) a hook.

    Pre-hooks raise it to cancel an operation; the instance propagates to
    the caller unchanged. Post-hooks raising it have ``code`` and
    ``message`` copied into the collected PostHookError.

    Args:
        message: Human-readable error message.
        code: Machine-readable code (default: 500).

    Example:
        async def guard_admin(scope, *args):
            if scope.entity.get("role") == "admin":
                raise HookError("Admins cannot be deleted", code=403)
    """

    def __init__(self, message: str, code: int | str = 500) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class UnknownOperationError(HookError):
    """Raised at registration time for an operation that cannot carry hooks."""

    def __init__(self, operation: str, supported: list[str]) -> None:
        self.operation = operation
        self.supported = supported
        super().__init__(
            f"Operation '{operation}' does not support hooks. "
            f"Supported operations: {', '.join(supported)}",
            code=400,
        )
