"""Model: entry point for the operations of one entity kind."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from storehooks.hooks.types import EntityScope, ExecutionScope, StaticScope
from storehooks.hooks.wrapper import MethodWrapper
from storehooks.models.entity import Entity
from storehooks.models.schema import Schema
from storehooks.persistence.adapter import PersistenceAdapter
from storehooks.persistence.errors import EntityNotFoundError


@dataclass
class DeleteResult:
    """Outcome of a delete, handed to 'delete' post-hooks.

    Attributes:
        success: True if at least one record was removed
        keys: The ids the caller asked to delete
        deleted: The ids that existed and were removed
    """

    success: bool
    keys: list[Any]
    deleted: list[Any] = field(default_factory=list)


def _is_many(id_or_ids: Any) -> bool:
    return isinstance(id_or_ids, (list, tuple))


class Model:
    """Hooked get/delete for one kind, and a factory for its entities.

    Example:
        users = Model("User", schema, MemoryAdapter())
        user = users.create({"email": "a@example.com"})
        await user.save()
        await users.delete(user.id)
    """

    def __init__(self, kind: str, schema: Schema, adapter: PersistenceAdapter) -> None:
        self.kind = kind
        self.schema = schema
        self.adapter = adapter
        self.hooks = MethodWrapper(schema.hooks)

    def __repr__(self) -> str:
        return f"<Model {self.kind}>"

    def create(self, data: dict[str, Any] | None = None, id: Any = None) -> Entity:
        """Build an unsaved entity."""
        return Entity(self, data, id)

    def scope_for(self, id_or_ids: Any, *_: Any) -> ExecutionScope:
        """EntityScope for a single id, StaticScope for a list of ids."""
        if _is_many(id_or_ids):
            return StaticScope(self)
        return EntityScope(Entity(self, id=id_or_ids))

    async def get(self, id_or_ids: Any, *args: Any, pre_hooks: bool = True, **kwargs: Any) -> Any:
        """Fetch one entity by id, or several by a list of ids.

        A single missing id raises EntityNotFoundError; with a list,
        missing ids come back as None in their position.
        """
        return await self.hooks.invoke(
            "get",
            self.scope_for(id_or_ids),
            self._get,
            (id_or_ids, *args),
            kwargs,
            pre_hooks=pre_hooks,
            scope_for=self.scope_for,
        )

    async def delete(
        self, id_or_ids: Any, *args: Any, pre_hooks: bool = True, **kwargs: Any
    ) -> Any:
        """Delete one entity by id, or several by a list of ids."""
        return await self.hooks.invoke(
            "delete",
            self.scope_for(id_or_ids),
            self._delete,
            (id_or_ids, *args),
            kwargs,
            pre_hooks=pre_hooks,
            scope_for=self.scope_for,
        )

    async def _get(self, id_or_ids: Any, transaction: Any = None) -> Any:
        if _is_many(id_or_ids):
            entities: list[Entity | None] = []
            for id in id_or_ids:
                record = await self.adapter.get(self.kind, id, transaction)
                entities.append(Entity(self, record, id) if record is not None else None)
            return entities

        record = await self.adapter.get(self.kind, id_or_ids, transaction)
        if record is None:
            raise EntityNotFoundError(self.kind, id_or_ids)
        return Entity(self, record, id_or_ids)

    async def _delete(self, id_or_ids: Any, transaction: Any = None) -> DeleteResult:
        keys = list(id_or_ids) if _is_many(id_or_ids) else [id_or_ids]
        deleted = await self.adapter.delete(self.kind, keys, transaction)
        return DeleteResult(success=bool(deleted), keys=keys, deleted=list(deleted))
