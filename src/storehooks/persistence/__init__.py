"""Persistence layer - storage adapters and transactions."""

from storehooks.persistence.adapter import PersistenceAdapter
from storehooks.persistence.errors import (
    EntityNotFoundError,
    PersistenceError,
    TransactionStateError,
)
from storehooks.persistence.memory import MemoryAdapter, MemoryTransaction
from storehooks.persistence.transaction import Transaction, TransactionState

__all__ = [
    "EntityNotFoundError",
    "MemoryAdapter",
    "MemoryTransaction",
    "PersistenceAdapter",
    "PersistenceError",
    "Transaction",
    "TransactionState",
    "TransactionStateError",
]
