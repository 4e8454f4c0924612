"""Entity: one record of a Model, with hooked save and custom methods."""

from __future__ import annotations

import functools
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from storehooks.hooks.types import EntityScope

if TYPE_CHECKING:
    from storehooks.models.model import Model


class Entity:
    """A record of one entity kind.

    Fields are read and written like a dict. ``id`` is None until the
    first save allocates one.
    """

    def __init__(
        self,
        model: Model,
        data: dict[str, Any] | None = None,
        id: Any = None,
    ) -> None:
        self.model = model
        self.id = id
        self.data: dict[str, Any] = dict(data or {})

    @property
    def kind(self) -> str:
        return self.model.kind

    def __getitem__(self, field: str) -> Any:
        return self.data[field]

    def __setitem__(self, field: str, value: Any) -> None:
        self.data[field] = value

    def __delitem__(self, field: str) -> None:
        del self.data[field]

    def __contains__(self, field: object) -> bool:
        return field in self.data

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def get(self, field: str, default: Any = None) -> Any:
        return self.data.get(field, default)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.data}

    def __repr__(self) -> str:
        return f"<Entity {self.kind} id={self.id!r}>"

    async def save(self, *args: Any, pre_hooks: bool = True, **kwargs: Any) -> Any:
        """Create or update this entity, running the 'save' hooks.

        Accepts ``transaction`` positionally or by keyword. Resolves to
        the entity itself, or to a PostHookEnvelope wrapping it when
        post-hooks failed.
        """
        return await self.model.hooks.invoke(
            "save", EntityScope(self), self._save, args, kwargs, pre_hooks=pre_hooks
        )

    async def _save(self, transaction: Any = None) -> Entity:
        adapter = self.model.adapter
        if self.id is None:
            self.id = await adapter.allocate_id(self.kind)
        self.data = await adapter.save(self.kind, self.id, self.data, transaction)
        return self

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes not found normally: custom methods
        model = self.__dict__.get("model")
        if model is None or name not in model.schema.methods:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

        target = functools.partial(model.schema.methods[name], self)
        if not model.schema.hooks.is_supported(name):
            return target

        async def hooked(*args: Any, pre_hooks: bool = True, **kwargs: Any) -> Any:
            return await model.hooks.invoke(
                name, EntityScope(self), target, args, kwargs, pre_hooks=pre_hooks
            )

        return hooked
