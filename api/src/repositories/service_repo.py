"""
Service repository for catalog queries.

Read-only access to the ``services`` collection. Documents are populated out
of band; this repository only searches, sorts and fetches them.
"""

import structlog
from typing import List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, TEXT
from pymongo.asynchronous.collection import AsyncCollection

from api.src.models.documents import Document
from shared.metrics import DatabaseMetrics

logger = structlog.get_logger(__name__)

# Descriptive fields covered by the full-text index.
TEXT_INDEX_FIELDS = ("title", "description")


def build_search_query(search: Optional[str]) -> Document:
    """Full-text filter for a non-empty search term, otherwise match all."""
    if search:
        return {"$text": {"$search": search}}
    return {}


def price_sort_direction(order: Optional[str]) -> int:
    """Ascending only for ``asc``; anything else (or nothing) sorts descending."""
    return ASCENDING if order == "asc" else DESCENDING


class ServiceRepository:
    """Repository for service catalog operations."""

    def __init__(self, collection: AsyncCollection, metrics: Optional[DatabaseMetrics] = None):
        """
        Initialize service repository.

        Args:
            collection: ``services`` collection
            metrics: Optional operation counters
        """
        self.collection = collection
        self.metrics = metrics

    def _record(self, operation: str) -> None:
        if self.metrics is not None:
            self.metrics.record(self.collection.name, operation)

    async def ensure_text_index(self) -> str:
        """
        Create the full-text index used by searches.

        Idempotent: MongoDB returns the existing index name when an identical
        index is already present.

        Returns:
            Index name
        """
        self._record("create_index")
        name = await self.collection.create_index(
            [(field, TEXT) for field in TEXT_INDEX_FIELDS]
        )
        logger.info("services_text_index_ready", index=name)
        return name

    async def list_services(self, search: Optional[str] = None, order: Optional[str] = None) -> List[Document]:
        """
        List services, optionally full-text filtered, sorted by price.

        Args:
            search: Free-form search text; empty or None matches everything
            order: ``asc`` for ascending price, anything else descending

        Returns:
            Every matching service (unbounded)
        """
        query = build_search_query(search)
        direction = price_sort_direction(order)

        self._record("find")
        cursor = self.collection.find(query).sort("price", direction)
        services = await cursor.to_list(length=None)

        logger.debug("services_listed", search=search, direction=direction, count=len(services))
        return services

    async def get_service(self, service_id: str) -> Optional[Document]:
        """
        Fetch one service by identifier.

        Args:
            service_id: Hex ObjectId string

        Returns:
            The service, or None when nothing matches

        Raises:
            bson.errors.InvalidId: If ``service_id`` is not a valid ObjectId
        """
        self._record("find_one")
        return await self.collection.find_one({"_id": ObjectId(service_id)})
