"""Tests for MongoRepository's interaction with the Motor collection (mocked driver)."""

import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import AutoReconnect, DuplicateKeyError, InvalidName, ServerSelectionTimeoutError

from entities import Item, ItemRepository
from repository_pattern.common.custom_exceptions import DatabaseException, StoreUnavailableException
from repository_pattern.db.mongo_repository import MongoRepository, TEntity


def _delete_result(acknowledged=True, deleted_count=0):
    return SimpleNamespace(acknowledged=acknowledged, deleted_count=deleted_count)


def _mock_collection(documents=None):
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=documents or [])
    collection = MagicMock()
    collection.find.return_value = cursor
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock(return_value=SimpleNamespace(inserted_id=ObjectId()))
    collection.insert_many = AsyncMock()
    collection.delete_one = AsyncMock(return_value=_delete_result())
    collection.delete_many = AsyncMock(return_value=_delete_result())
    collection.replace_one = AsyncMock(return_value=SimpleNamespace(acknowledged=True, matched_count=1))
    return collection


def _repo(collection):
    database = MagicMock()
    database.get_collection.return_value = collection
    return ItemRepository(database)


# --- construction ---

def test_construction_fails_without_database():
    with pytest.raises(StoreUnavailableException):
        ItemRepository(None)


def test_construction_fails_when_name_is_rejected():
    database = MagicMock()
    database.get_collection.side_effect = InvalidName("collection names must not contain '$'")
    with pytest.raises(StoreUnavailableException) as exc_info:
        ItemRepository(database, collection_name="bad$name")
    assert exc_info.value.collection_name == "bad$name"
    assert isinstance(exc_info.value.__cause__, InvalidName)


def test_construction_fails_when_no_collection_is_returned():
    database = MagicMock()
    database.get_collection.return_value = None
    with pytest.raises(StoreUnavailableException):
        ItemRepository(database)


def test_store_unavailable_is_a_database_exception():
    assert issubclass(StoreUnavailableException, DatabaseException)


def test_entity_type_comes_from_generic_parameter():
    assert ItemRepository.entity_type is Item


def test_entity_type_is_inherited_by_subclasses():
    class AuditedItemRepository(ItemRepository):
        pass

    assert AuditedItemRepository.entity_type is Item


def test_entity_type_resolved_through_generic_intermediate():
    class ReplacingRepository(MongoRepository[TEntity]):
        async def update(self, entity: TEntity) -> bool:
            return await self._replace(entity)

    class ConcreteRepository(ReplacingRepository[Item]):
        pass

    assert ConcreteRepository.entity_type is Item
    repo = ConcreteRepository(MagicMock())
    assert repo.collection_name == "Item"


def test_repository_without_entity_type_cannot_be_constructed():
    class Untyped(MongoRepository):
        async def update(self, entity) -> bool:
            return False

    with pytest.raises(TypeError):
        Untyped(MagicMock())


def test_update_must_be_supplied_by_subclass():
    class NoUpdate(MongoRepository[Item]):
        pass

    with pytest.raises(TypeError):
        NoUpdate(MagicMock())


# --- reads propagate store errors ---

async def test_find_propagates_store_errors():
    collection = _mock_collection()
    collection.find.return_value.to_list.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(ServerSelectionTimeoutError):
        await _repo(collection).find({"name": "a"})


async def test_get_propagates_store_errors():
    collection = _mock_collection()
    collection.find_one.side_effect = AutoReconnect("connection lost")
    with pytest.raises(AutoReconnect):
        await _repo(collection).get(ObjectId())


async def test_get_queries_by_object_id():
    collection = _mock_collection()
    oid = ObjectId()
    await _repo(collection).get(str(oid))
    collection.find_one.assert_awaited_once_with({"_id": oid})


async def test_single_or_default_reads_at_most_two_documents():
    collection = _mock_collection(documents=[{"_id": ObjectId(), "name": "a"}])
    result = await _repo(collection).single_or_default({"name": "a"})
    assert result.name == "a"
    collection.find.return_value.to_list.assert_awaited_once_with(length=2)


# --- writes collapse failures into False ---

async def test_add_returns_false_on_duplicate_key(caplog):
    collection = _mock_collection()
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
    with caplog.at_level(logging.WARNING, logger="repository_pattern.db.mongo_repository"):
        assert await _repo(collection).add(Item(name="a")) is False
    assert "Failed to add Item" in caplog.text


async def test_add_returns_false_on_connection_loss():
    collection = _mock_collection()
    collection.insert_one.side_effect = AutoReconnect("connection lost")
    item = Item(name="a")
    assert await _repo(collection).add(item) is False
    assert item.id is None


async def test_add_omits_unset_id_from_document():
    collection = _mock_collection()
    await _repo(collection).add(Item(name="a"))
    document = collection.insert_one.await_args.args[0]
    assert "_id" not in document
    assert document["name"] == "a"


async def test_add_range_returns_false_on_store_failure():
    collection = _mock_collection()
    collection.insert_many.side_effect = AutoReconnect("connection lost")
    assert await _repo(collection).add_range([Item(name="a"), Item(name="b")]) is False


# --- deletes report acknowledgment ---

async def test_remove_reports_unacknowledged_delete():
    collection = _mock_collection()
    collection.delete_one.return_value = _delete_result(acknowledged=False)
    assert await _repo(collection).remove(ObjectId()) is False


async def test_remove_all_reports_acknowledgment_not_effect():
    collection = _mock_collection()
    collection.delete_many.return_value = _delete_result(acknowledged=True, deleted_count=0)
    assert await _repo(collection).remove_all() is True
    collection.delete_many.assert_awaited_once_with({})


async def test_remove_entity_deletes_by_its_id():
    collection = _mock_collection()
    item = Item(id=ObjectId(), name="a")
    await _repo(collection).remove(item)
    collection.delete_one.assert_awaited_once_with({"_id": item.id})


async def test_remove_range_none_does_not_contact_store():
    collection = _mock_collection()
    assert await _repo(collection).remove_range(None) is False
    collection.delete_many.assert_not_called()


async def test_remove_range_builds_in_filter_from_ids_and_entities():
    collection = _mock_collection()
    first, second = ObjectId(), ObjectId()
    await _repo(collection).remove_range([str(first), Item(id=second, name="b"), Item(name="unsaved")])
    collection.delete_many.assert_awaited_once_with({"_id": {"$in": [first, second]}})


async def test_remove_range_forwards_predicate():
    collection = _mock_collection()
    await _repo(collection).remove_range({"quantity": {"$lt": 1}})
    collection.delete_many.assert_awaited_once_with({"quantity": {"$lt": 1}})


async def test_add_range_with_repeated_id_does_not_contact_store():
    collection = _mock_collection()
    shared_id = ObjectId()
    batch = [Item(name="fresh"), Item(id=shared_id, name="a"), Item(id=shared_id, name="b")]
    assert await _repo(collection).add_range(batch) is False
    collection.insert_many.assert_not_called()


async def test_remove_without_id_does_not_contact_store():
    collection = _mock_collection()
    assert await _repo(collection).remove(Item(name="unsaved")) is False
    assert await _repo(collection).remove(None) is False
    collection.delete_one.assert_not_called()


async def test_find_with_none_predicate_queries_everything():
    collection = _mock_collection()
    await _repo(collection).find(None)
    collection.find.assert_called_once_with({})
