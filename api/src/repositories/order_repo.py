"""
Order repository for database operations.

Every method issues exactly one MongoDB operation against the ``orders``
collection. No transactions are used, so callers combining a lookup with a
write (ownership check, then delete) are not atomic.
"""

import structlog
from typing import Any, List, Optional

from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.results import DeleteResult, InsertOneResult, UpdateResult

from api.src.models.documents import Document
from shared.metrics import DatabaseMetrics

logger = structlog.get_logger(__name__)


class OrderRepository:
    """Repository for order database operations."""

    def __init__(self, collection: AsyncCollection, metrics: Optional[DatabaseMetrics] = None):
        """
        Initialize order repository.

        Args:
            collection: ``orders`` collection
            metrics: Optional operation counters
        """
        self.collection = collection
        self.metrics = metrics

    def _record(self, operation: str) -> None:
        if self.metrics is not None:
            self.metrics.record(self.collection.name, operation)

    async def list_orders(self, email: str) -> List[Document]:
        """
        List all orders owned by ``email``.

        Args:
            email: Owner email (an empty string matches orders with an empty owner)

        Returns:
            Matching orders in natural order
        """
        self._record("find")
        cursor = self.collection.find({"email": email})
        return await cursor.to_list(length=None)

    async def create_order(self, order: Document) -> InsertOneResult:
        """
        Insert an order verbatim.

        Args:
            order: Order document as supplied by the caller

        Returns:
            Insert result carrying the new identifier
        """
        self._record("insert_one")
        # insert_one adds _id to the dict it is given; keep the caller's copy intact.
        result = await self.collection.insert_one(dict(order))
        logger.info("order_created", order_id=str(result.inserted_id))
        return result

    async def get_order(self, order_id: str) -> Optional[Document]:
        """
        Fetch one order by identifier.

        Raises:
            bson.errors.InvalidId: If ``order_id`` is not a valid ObjectId
        """
        self._record("find_one")
        return await self.collection.find_one({"_id": ObjectId(order_id)})

    async def update_status(self, order_id: str, status: Any) -> UpdateResult:
        """
        Set an order's status field.

        A missing order is not an error: the result reports zero matches.

        Raises:
            bson.errors.InvalidId: If ``order_id`` is not a valid ObjectId
        """
        self._record("update_one")
        result = await self.collection.update_one(
            {"_id": ObjectId(order_id)},
            {"$set": {"status": status}},
        )
        logger.info(
            "order_status_updated",
            order_id=order_id,
            matched=result.matched_count,
            modified=result.modified_count,
        )
        return result

    async def delete_order(self, order_id: str) -> DeleteResult:
        """
        Delete one order by identifier.

        Raises:
            bson.errors.InvalidId: If ``order_id`` is not a valid ObjectId
        """
        self._record("delete_one")
        result = await self.collection.delete_one({"_id": ObjectId(order_id)})
        logger.info("order_deleted", order_id=order_id, deleted=result.deleted_count)
        return result
