"""
MongoDB connection lifecycle.

One ``AsyncMongoClient`` is created at startup and shared by every request
for the life of the process; pooling is left to the driver. The connection is
an explicit object owned by the application rather than module state.
"""

import structlog
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from api.src.config import Settings

logger = structlog.get_logger(__name__)


class MongoConnection:
    """Owns the shared MongoDB client and hands out collections."""

    def __init__(self, settings: Settings, client: Optional[AsyncMongoClient] = None):
        """
        Initialize the connection holder.

        Args:
            settings: Application settings
            client: Pre-built client; created by connect() otherwise
        """
        self.settings = settings
        self.client = client

    @property
    def is_initialized(self) -> bool:
        return self.client is not None

    @property
    def database(self) -> AsyncDatabase:
        if self.client is None:
            raise RuntimeError("MongoDB client not initialized. Call connect() during startup.")
        return self.client[self.settings.database_name]

    @property
    def services(self) -> AsyncCollection:
        return self.database[self.settings.services_collection]

    @property
    def orders(self) -> AsyncCollection:
        return self.database[self.settings.orders_collection]

    async def connect(self) -> bool:
        """
        Create the client (if needed) and ping the deployment.

        A failure is logged and swallowed: the process keeps serving and
        requests that reach the database fail on their own.

        Returns:
            True if the ping succeeded
        """
        try:
            if self.client is None:
                self.client = AsyncMongoClient(
                    self.settings.mongodb_uri,
                    server_api=ServerApi("1"),
                )
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(
                "database_connection_failed",
                target=self.settings.mongodb_target,
                error=str(e),
            )
            return False

        logger.info(
            "database_connected",
            target=self.settings.mongodb_target,
            database=self.settings.database_name,
        )
        return True

    async def close(self) -> None:
        """Close the shared client."""
        if self.client is None:
            return
        await self.client.close()
        self.client = None
        logger.info("mongodb_connection_closed")
