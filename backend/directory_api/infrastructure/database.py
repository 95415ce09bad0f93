"""Document Store Manager — one motor client per process, pinged on startup.

Invariants:
    - init_store pings the server before returning; failure raises StoreUnavailableError
      and leaves no manager behind (startup aborts, no retry loop)
    - Clients are tz_aware: datetimes read back carry UTC tzinfo
    - get_users_collection is the FastAPI dependency; tests override it
"""

import logging

from motor.motor_asyncio import (
    AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError

from directory_api.core.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class DocumentStoreManager:
    """Owns the motor client and hands out collections."""

    def __init__(self, uri: str, database: str, timeout_ms: int = 5000):
        self.client = AsyncIOMotorClient(
            uri, tz_aware=True, serverSelectionTimeoutMS=timeout_ms,
        )
        self.database_name = database
        self.database: AsyncIOMotorDatabase = self.client[database]

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self.database[USERS_COLLECTION]

    async def ping(self) -> None:
        await self.client.admin.command("ping")

    async def health_check(self) -> bool:
        """Check store connectivity (for readiness probes)."""
        try:
            await self.ping()
            return True
        except PyMongoError as e:
            logger.error(f"Store health check failed: {e}")
            return False

    def close(self) -> None:
        self.client.close()


# Singleton (initialized on startup)
store_manager: DocumentStoreManager | None = None


async def init_store(
    uri: str, database: str, timeout_ms: int = 5000,
) -> DocumentStoreManager:
    global store_manager
    try:
        manager = DocumentStoreManager(uri, database, timeout_ms)
    except PyMongoError as e:
        logger.critical(f"Invalid document store configuration: {e}")
        raise StoreUnavailableError(str(e)) from e
    try:
        await manager.ping()
    except PyMongoError as e:
        manager.close()
        logger.critical(
            f"Document store connection failed: {e}",
            extra={"database": database},
        )
        raise StoreUnavailableError(str(e)) from e
    store_manager = manager
    logger.info("Document store connected", extra={"database": database})
    return manager


async def close_store() -> None:
    global store_manager
    if store_manager:
        store_manager.close()
        store_manager = None
    logger.info("Document store connection closed")


def get_users_collection() -> AsyncIOMotorCollection:
    """FastAPI dependency for the users collection."""
    if not store_manager:
        raise RuntimeError("Document store not initialized")
    return store_manager.users
