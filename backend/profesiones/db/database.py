# profesiones/db/database.py
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from profesiones.core.config import settings

logger = logging.getLogger("profesiones.db")

USERS = "users"
APPOINTMENTS = "appointments"
APPOINTMENT_SLOTS = "appointment_slots"

_client: Optional[AsyncIOMotorClient] = None


def get_client() -> AsyncIOMotorClient:
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(
            settings.MONGO_URL,
            serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
        )
    return _client


def get_database() -> AsyncIOMotorDatabase:
    return get_client()[settings.MONGO_DB_NAME]


async def get_db() -> AsyncIOMotorDatabase:
    """FastAPI dependency; overridden in tests with an in-memory database."""
    return get_database()


async def ensure_indexes(db) -> None:
    await db[USERS].create_index("email", unique=True)
    await db[USERS].create_index("role")
    await db[APPOINTMENTS].create_index(
        [("professional", ASCENDING), ("date", ASCENDING), ("status", ASCENDING)]
    )
    await db[APPOINTMENTS].create_index([("client", ASCENDING), ("date", ASCENDING)])
    logger.info("MongoDB indexes ensured")
