from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar, Union

T = TypeVar("T")
TId = TypeVar("TId")


class AbstractRepository(ABC, Generic[T, TId]):
    """Generic async CRUD interface for one entity type.

    Filters are store-native query documents and are passed through to the
    backing store unchanged.
    """

    @abstractmethod
    async def get(self, entity_id: TId) -> Optional[T]:
        """Return the entity with ``entity_id`` or ``None`` if there is none."""
        raise NotImplementedError

    @abstractmethod
    async def get_all(self) -> List[T]:
        """Return every entity in the repository."""
        raise NotImplementedError

    @abstractmethod
    async def find(self, predicate: Dict[str, Any]) -> List[T]:
        """Return all entities matching ``predicate``."""
        raise NotImplementedError

    @abstractmethod
    async def single_or_default(self, predicate: Dict[str, Any]) -> Optional[T]:
        """Return the only entity matching ``predicate``; ``None`` if zero or several match."""
        raise NotImplementedError

    @abstractmethod
    async def add(self, entity: T) -> bool:
        """Add ``entity``. Returns whether it could be added."""
        raise NotImplementedError

    @abstractmethod
    async def add_range(self, entities: Iterable[T]) -> bool:
        """Add several entities at once. Returns whether they could be added."""
        raise NotImplementedError

    @abstractmethod
    async def remove(self, entity_or_id: Union[T, TId]) -> bool:
        """Remove an entity, given either the entity or its id."""
        raise NotImplementedError

    @abstractmethod
    async def remove_all(self) -> bool:
        """Remove every entity in the repository."""
        raise NotImplementedError

    @abstractmethod
    async def remove_range(
        self,
        target: Union[Dict[str, Any], Iterable[Union[T, TId]], None],
    ) -> bool:
        """Remove every entity matching a filter, or the given entities/ids."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, entity: T) -> bool:
        """Update ``entity``. Returns whether it could be updated."""
        raise NotImplementedError
