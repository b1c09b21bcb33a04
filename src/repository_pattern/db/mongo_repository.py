from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Type, TypeVar, Union, get_args, get_origin

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import InvalidName

from repository_pattern.common.custom_exceptions import StoreUnavailableException
from repository_pattern.common.utils import ensure_object_id, normalize_id_filter
from repository_pattern.db.pydantic_models import Entity
from repository_pattern.db.repository_base import AbstractRepository

logger = logging.getLogger(__name__)

TEntity = TypeVar("TEntity", bound=Entity)


class MongoRepository(AbstractRepository[TEntity, ObjectId]):
    """MongoDB-backed repository for a single entity type.

    Subclasses bind the entity type through the generic parameter and
    supply ``update``::

        class UserRepository(MongoRepository[User]):
            async def update(self, entity: User) -> bool:
                return await self._replace(entity)

    Reads let driver errors propagate. ``add``/``add_range`` log the driver
    error and return ``False``. Delete operations return the driver's
    acknowledgment, which does not say whether anything was deleted.
    """

    entity_type: Type[TEntity]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in cls.__dict__.get("__orig_bases__", ()):
            origin = get_origin(base)
            if not (isinstance(origin, type) and issubclass(origin, MongoRepository)):
                continue
            args = get_args(base)
            if args and isinstance(args[0], type) and issubclass(args[0], Entity):
                cls.entity_type = args[0]
                break

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        collection_name: Optional[str] = None,
    ):
        entity_type = getattr(self, "entity_type", None)
        if entity_type is None:
            raise TypeError(
                f"{type(self).__name__} has no entity type; subclass MongoRepository[YourEntity] "
                "or set the entity_type class attribute."
            )

        self._database = database
        self._collection_name = collection_name or entity_type.__name__

        if database is None:
            raise StoreUnavailableException(
                f"{type(self).__name__}: no database handle to resolve collection "
                f"'{self._collection_name}' from.",
                self._collection_name,
            )
        try:
            collection = database.get_collection(self._collection_name)
        except (InvalidName, TypeError) as e:
            raise StoreUnavailableException(
                f"{type(self).__name__}: collection '{self._collection_name}' cannot be resolved: {e}",
                self._collection_name,
            ) from e
        if collection is None:
            raise StoreUnavailableException(
                f"{type(self).__name__}: no collection named '{self._collection_name}' found in database.",
                self._collection_name,
            )
        self._collection: AsyncIOMotorCollection = collection

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self._database

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self._collection

    # ------------------------------------------------------------------
    # Get
    # ------------------------------------------------------------------
    async def get(self, entity_id: Any) -> Optional[TEntity]:
        if entity_id is None:
            return None
        try:
            identifier = ensure_object_id(entity_id)
        except (InvalidId, TypeError):
            logger.debug(f"'{entity_id}' is not a valid ObjectId; nothing to look up in '{self._collection_name}'")
            return None
        document = await self._collection.find_one({"_id": identifier})
        return self._to_entity(document) if document is not None else None

    async def get_all(self) -> List[TEntity]:
        return await self._fetch({})

    async def find(self, predicate: Optional[Dict[str, Any]]) -> List[TEntity]:
        return await self._fetch(predicate or {})

    async def iterate(self, predicate: Optional[Dict[str, Any]] = None) -> AsyncIterator[TEntity]:
        """Stream matching entities one by one instead of loading them all."""
        normalized_filter = normalize_id_filter(predicate or {})
        async for document in self._collection.find(normalized_filter):
            yield self._to_entity(document)

    async def single_or_default(self, predicate: Optional[Dict[str, Any]]) -> Optional[TEntity]:
        normalized_filter = normalize_id_filter(predicate or {})
        cursor = self._collection.find(normalized_filter)
        # Two documents are enough to tell "exactly one" from "several".
        documents = await cursor.to_list(length=2)
        if len(documents) != 1:
            logger.debug(
                f"single_or_default on '{self._collection_name}' matched {len(documents)} "
                f"document(s) for {normalized_filter}; returning None"
            )
            return None
        return self._to_entity(documents[0])

    # ------------------------------------------------------------------
    # Add
    # ------------------------------------------------------------------
    async def add(self, entity: TEntity) -> bool:
        try:
            result = await self._collection.insert_one(entity.to_document())
        except Exception:
            logger.warning(
                f"Failed to add {type(entity).__name__} to collection '{self._collection_name}'.",
                exc_info=True,
            )
            return False
        entity.id = result.inserted_id
        return True

    async def add_range(self, entities: Iterable[TEntity]) -> bool:
        if entities is None:
            return False
        batch = list(entities)
        if not batch:
            logger.debug(f"add_range on '{self._collection_name}' called with no entities")
            return False
        explicit_ids = [entity.id for entity in batch if entity.id is not None]
        if len(set(explicit_ids)) != len(explicit_ids):
            # insert_many is ordered: documents before the clash would already be stored
            logger.warning(
                f"add_range on '{self._collection_name}' rejected: the batch repeats an id"
            )
            return False
        try:
            result = await self._collection.insert_many([entity.to_document() for entity in batch])
        except Exception:
            logger.warning(
                f"Failed to add {len(batch)} entities to collection '{self._collection_name}'.",
                exc_info=True,
            )
            return False
        for entity, inserted_id in zip(batch, result.inserted_ids):
            entity.id = inserted_id
        logger.info(f"Inserted {len(batch)} documents into '{self._collection_name}'")
        return True

    # ------------------------------------------------------------------
    # Remove
    # ------------------------------------------------------------------
    async def remove(self, entity_or_id: Union[TEntity, ObjectId, str]) -> bool:
        entity_id = entity_or_id.id if isinstance(entity_or_id, Entity) else entity_or_id
        if entity_id is None:
            logger.debug(f"Nothing to remove from '{self._collection_name}': no id given")
            return False
        result = await self._collection.delete_one(normalize_id_filter({"_id": entity_id}))
        return result.acknowledged

    async def remove_all(self) -> bool:
        result = await self._collection.delete_many({})
        return result.acknowledged

    async def remove_range(
        self,
        target: Union[Dict[str, Any], Iterable[Union[TEntity, ObjectId, str]], None],
    ) -> bool:
        if target is None:
            return False

        if isinstance(target, dict):
            filter_doc = normalize_id_filter(target)
        else:
            ids = [item.id if isinstance(item, Entity) else item for item in target]
            filter_doc = normalize_id_filter({"_id": {"$in": [i for i in ids if i is not None]}})

        logger.debug(f"delete_many on '{self._collection_name}' with filter {filter_doc}")
        result = await self._collection.delete_many(filter_doc)
        return result.acknowledged

    # ------------------------------------------------------------------
    # Update helpers
    # ------------------------------------------------------------------
    async def _replace(self, entity: TEntity, *, upsert: bool = False) -> bool:
        """Replace the stored document that has the entity's id with the entity."""
        if entity.id is None:
            logger.debug(f"Cannot replace a {type(entity).__name__} without an id in '{self._collection_name}'")
            return False
        result = await self._collection.replace_one(
            {"_id": entity.id},
            entity.to_document(),
            upsert=upsert,
        )
        return result.acknowledged

    def _to_entity(self, document: Dict[str, Any]) -> TEntity:
        return self.entity_type.model_validate(document)

    async def _fetch(self, filters: Dict[str, Any]) -> List[TEntity]:
        logger.debug(f"MongoDB query filters (before normalization): {filters}")
        normalized_filters = normalize_id_filter(filters)
        logger.debug(f"MongoDB query filters (after normalization): {normalized_filters}")
        cursor = self._collection.find(normalized_filters)
        documents = await cursor.to_list(length=None)
        logger.info(f"MongoDB query on '{self._collection_name}' returned {len(documents)} documents")
        return [self._to_entity(document) for document in documents]
