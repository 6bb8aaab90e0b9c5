"""Document Store Manager — one pooled AsyncMongoClient per process, with health checks.

Invariants:
    - The client is created once (lifespan startup) and closed once (lifespan shutdown)
    - The manager lives on app.state.store; there is no module-level client
    - A failed startup ping is logged, not raised: the API keeps serving and each
      request surfaces the store failure as DatabaseError
    - Pool size and timeouts are the driver's, tuned only through Settings

Design Decisions:
    - pymongo's native async client over a thread-pool wrapper: no blocking calls
      on the event loop
"""

import logging

from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import ConfigurationError, PyMongoError

from user_api.config import Settings
from user_api.core.domain_types import StoreOperation
from user_api.core.errors import DatabaseError
from user_api.infrastructure.user_repository import MongoUserRepository

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "test"


class DocumentStoreManager:
    """Owns the store client and hands out collections."""

    def __init__(
        self,
        uri: str,
        database: str | None = None,
        collection: str = "users",
        max_pool_size: int = 100,
        server_selection_timeout_ms: int = 5000,
    ):
        self.client = AsyncMongoClient(
            uri,
            maxPoolSize=max_pool_size,
            serverSelectionTimeoutMS=server_selection_timeout_ms,
        )
        if database:
            self.database = self.client[database]
        else:
            # Database named in the URI path, "test" when the URI has none
            self.database = self.client.get_default_database(default=DEFAULT_DATABASE)
        self.users = self.database[collection]

    @classmethod
    def from_settings(cls, settings: Settings) -> "DocumentStoreManager":
        return cls(
            settings.mongodb_uri,
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
            max_pool_size=settings.mongodb_max_pool_size,
            server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
        )

    async def connect(self) -> bool:
        """Ping the store once at startup. Returns False (and logs) on failure."""
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(
                f"Could not connect to document store: {e}",
                extra={"operation": StoreOperation.CONNECT.value},
            )
            return False
        logger.info(f"Connected to document store (database={self.database.name})")
        return True

    async def health_check(self) -> bool:
        """Check store connectivity (for the readiness endpoint)."""
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"Store health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.close()
        logger.info("Document store connections closed")


async def init_store(settings: Settings) -> DocumentStoreManager:
    """Create the manager and try the initial connection."""
    try:
        manager = DocumentStoreManager.from_settings(settings)
    except ConfigurationError as e:
        raise DatabaseError(str(e), StoreOperation.CONNECT.value) from e
    await manager.connect()
    return manager


def get_user_repository(request: Request) -> MongoUserRepository:
    """FastAPI dependency for the user repository."""
    manager: DocumentStoreManager | None = getattr(request.app.state, "store", None)
    if manager is None:
        raise DatabaseError("Document store not initialized", StoreOperation.CONNECT.value)
    return MongoUserRepository(manager.users)
