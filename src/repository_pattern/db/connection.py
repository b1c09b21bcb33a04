"""
MongoDB connection helpers.

Builds the Motor client and database handles repositories are constructed
with, and checks that the server is reachable.
"""
import logging
from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from repository_pattern.common.utils import sanitize_connection_string
from repository_pattern.configs.pydantic_models import DbConfig

logger = logging.getLogger(__name__)


def create_client(db_config: DbConfig) -> AsyncIOMotorClient:
    client_kwargs: Dict[str, Any] = {
        "serverSelectionTimeoutMS": db_config.server_selection_timeout_ms,
    }
    if db_config.app_name:
        client_kwargs["appname"] = db_config.app_name
    client_kwargs.update(db_config.client_options)

    logger.info(f"Connecting to MongoDB at {sanitize_connection_string(db_config.connection_string)}")
    return AsyncIOMotorClient(db_config.connection_string, **client_kwargs)


def get_database(client: AsyncIOMotorClient, db_config: DbConfig) -> AsyncIOMotorDatabase:
    return client[db_config.database_name]


async def check_connection(client: AsyncIOMotorClient) -> bool:
    """
    Check if the MongoDB server answers a ping.
    """
    try:
        await client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.error("MongoDB ping failed: %s", e)
        return False
