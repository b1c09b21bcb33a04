"""Entity and repository types shared by the tests."""

from typing import List, Optional

from pydantic import Field

from repository_pattern.db.mongo_repository import MongoRepository
from repository_pattern.db.pydantic_models import Entity


class Item(Entity):
    name: str
    quantity: int = 0
    tags: List[str] = Field(default_factory=list)
    note: Optional[str] = None


class ItemRepository(MongoRepository[Item]):
    async def update(self, entity: Item) -> bool:
        return await self._replace(entity)
