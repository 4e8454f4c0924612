"""storehooks: pre/post hook chains around entity operations.

    from storehooks import MemoryAdapter, Model, Schema

    schema = Schema()
    schema.pre("save", hash_password)
    schema.post("save", send_welcome_email)

    users = Model("User", schema, MemoryAdapter())
    result = await users.create({"email": "a@example.com", "password": "pw"}).save()
"""

from storehooks.hooks import (
    EntityScope,
    HookError,
    PostHookEnvelope,
    PostHookError,
    StaticScope,
    UnknownOperationError,
    has_post_hook_errors,
    hook,
    override,
)
from storehooks.models import DeleteResult, Entity, Model, Schema
from storehooks.persistence import (
    EntityNotFoundError,
    MemoryAdapter,
    PersistenceAdapter,
    Transaction,
)

__version__ = "0.1.0"

__all__ = [
    "DeleteResult",
    "Entity",
    "EntityNotFoundError",
    "EntityScope",
    "HookError",
    "MemoryAdapter",
    "Model",
    "PersistenceAdapter",
    "PostHookEnvelope",
    "PostHookError",
    "Schema",
    "StaticScope",
    "Transaction",
    "UnknownOperationError",
    "has_post_hook_errors",
    "hook",
    "override",
]
