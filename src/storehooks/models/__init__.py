"""Entity layer: schemas, models and entities wrapped by the hook system."""

from storehooks.models.entity import Entity
from storehooks.models.model import DeleteResult, Model
from storehooks.models.schema import Schema

__all__ = ["DeleteResult", "Entity", "Model", "Schema"]
