"""
Test Configuration Module
"""

from uuid import uuid4

import pytest
from mongomock_motor import AsyncMongoMockClient

from entities import ItemRepository


@pytest.fixture
def database():
    """Fresh in-memory Motor-compatible database per test."""
    client = AsyncMongoMockClient()
    return client[f"test_{uuid4().hex}"]


@pytest.fixture
def repo(database):
    return ItemRepository(database)
