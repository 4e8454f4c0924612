"""Load entity hook declarations from YAML files."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from storehooks.hooks.errors import UnknownOperationError
from storehooks.hooks.registry import HookLibrary
from storehooks.hooks.types import BUILTIN_OPERATIONS, Phase
from storehooks.models.schema import Schema

logger = logging.getLogger(__name__)


@dataclass
class HookConfig:
    """Hook reference from YAML metadata."""

    name: str
    description: str = ""


@dataclass
class EntityHooksModel:
    """Hook declarations of one entity kind.

    ``hooks`` maps phase ("pre" / "post") to operation name to the
    ordered hook references for that chain.
    """

    name: str
    custom_operations: list[str] = field(default_factory=list)
    hooks: dict[str, dict[str, list[HookConfig]]] = field(default_factory=dict)
    description: str = ""

    @property
    def operations(self) -> list[str]:
        return [*BUILTIN_OPERATIONS, *self.custom_operations]

    def chain(self, operation: str, phase: Phase | str) -> list[HookConfig]:
        return self.hooks.get(Phase(phase).value, {}).get(operation, [])

    def hook_names(self) -> list[str]:
        """Every referenced hook name, in declaration order."""
        names = []
        for by_operation in self.hooks.values():
            for configs in by_operation.values():
                names.extend(c.name for c in configs)
        return names


class MetadataLoader:
    """Loads entity hook declarations from ``<metadata>/entities/*.yaml``."""

    def __init__(self, metadata_path: Path):
        self.metadata_path = metadata_path
        self.entities: dict[str, EntityHooksModel] = {}

    def load_all(self) -> None:
        entities_path = self.metadata_path / "entities"
        if not entities_path.exists():
            logger.warning("No entities directory at %s", entities_path)
            return

        for yaml_file in sorted(entities_path.glob("*.yaml")):
            with open(yaml_file) as f:
                data = yaml.safe_load(f)
            if data and "entity" in data:
                entity = self._resolve_entity(data)
                if entity.name in self.entities:
                    raise ValueError(f"Entity '{entity.name}' is defined more than once")
                self.entities[entity.name] = entity
            else:
                logger.warning("Skipping %s: no 'entity' key", yaml_file)

    def _resolve_entity(self, data: dict) -> EntityHooksModel:
        name = data["entity"]
        custom = data.get("customOperations", []) or []
        if isinstance(custom, str):
            custom = [custom]

        entity = EntityHooksModel(
            name=name,
            custom_operations=list(custom),
            description=data.get("description", ""),
        )
        entity.hooks = self._resolve_hooks(entity, data.get("hooks", {}) or {})
        return entity

    def _resolve_hooks(
        self, entity: EntityHooksModel, data: dict
    ) -> dict[str, dict[str, list[HookConfig]]]:
        """Convert the hooks section into HookConfig lists by phase and operation."""
        hooks: dict[str, dict[str, list[HookConfig]]] = {}
        for phase_name, by_operation in data.items():
            try:
                phase = Phase(phase_name)
            except ValueError:
                raise ValueError(
                    f"Entity '{entity.name}': unknown hook phase '{phase_name}' "
                    "(expected 'pre' or 'post')"
                ) from None

            for operation, hook_list in (by_operation or {}).items():
                if operation not in entity.operations:
                    raise UnknownOperationError(operation, sorted(entity.operations))
                if not isinstance(hook_list, list):
                    hook_list = [hook_list]
                hooks.setdefault(phase.value, {})[operation] = [
                    self._resolve_hook(entity, phase, operation, h) for h in hook_list
                ]
        return hooks

    def _resolve_hook(
        self, entity: EntityHooksModel, phase: Phase, operation: str, data: Any
    ) -> HookConfig:
        if isinstance(data, str):
            return HookConfig(name=data)
        if not isinstance(data, dict) or not data.get("name"):
            raise ValueError(
                f"Entity '{entity.name}': hook in {phase.value} '{operation}' "
                "has no 'name'"
            )
        return HookConfig(name=data["name"], description=data.get("description", ""))

    def get_entity(self, name: str) -> EntityHooksModel | None:
        return self.entities.get(name)

    def list_entities(self) -> list[str]:
        return list(self.entities.keys())


def unregistered_hooks(entity: EntityHooksModel) -> list[str]:
    """Names referenced by ``entity`` that are not in the HookLibrary."""
    missing: list[str] = []
    for name in entity.hook_names():
        if not HookLibrary.is_registered(name) and name not in missing:
            missing.append(name)
    return missing


def build_schema(entity: EntityHooksModel, schema: Schema | None = None) -> Schema:
    """Register the entity's declared hooks on a Schema.

    Args:
        entity: Declarations loaded from YAML
        schema: Existing schema to extend (e.g. one with custom methods
            already attached); a new one is created when omitted

    Raises:
        ValueError: If a referenced hook name is not registered
    """
    if schema is None:
        schema = Schema(entity.custom_operations)
    else:
        schema.enable_hooks(*entity.custom_operations)

    for phase in Phase:
        for operation, configs in entity.hooks.get(phase.value, {}).items():
            schema.hooks.register(
                operation, phase, [HookLibrary.get(c.name) for c in configs]
            )
    return schema
