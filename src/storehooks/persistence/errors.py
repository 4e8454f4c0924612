"""Errors raised by persistence adapters."""

from typing import Any


class PersistenceError(Exception):
    """Base class for storage failures."""

    code: int | str = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EntityNotFoundError(PersistenceError):
    """Raised when a lookup by id finds nothing."""

    code = 404

    def __init__(self, kind: str, id: Any) -> None:
        self.kind = kind
        self.id = id
        super().__init__(f"{kind} '{id}' not found")


class TransactionStateError(PersistenceError):
    """Raised when a transaction is used after it has finished."""

    code = 409
