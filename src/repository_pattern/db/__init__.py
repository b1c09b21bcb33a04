"""
Persistence layer.

Public API:
- AbstractRepository: Generic async CRUD contract
- MongoRepository: Motor-backed implementation (subclasses supply ``update``)
- Entity: Base model for stored documents
"""

from .mongo_repository import MongoRepository
from .pydantic_models import Entity
from .repository_base import AbstractRepository

__all__ = [
    "AbstractRepository",
    "MongoRepository",
    "Entity",
]
