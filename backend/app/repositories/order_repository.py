"""
Order Repository - read access to orders

Orders are written by the order service; the catalog only looks them up
to resolve downloads.
"""
from typing import Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.domain.order import Order
from app.core.errors import PersistenceError


class OrderRepository:
    """Repository for Order lookups"""

    def __init__(self, collection: Collection):
        self.collection = collection

    def find_by_id(self, order_id: str) -> Optional[Order]:
        """
        Find an order by document ID or business order number

        Args:
            order_id: Mongo ObjectId string or the order's orderId

        Returns:
            Order or None if not found
        """
        if ObjectId.is_valid(order_id):
            query = {"$or": [{"_id": ObjectId(order_id)}, {"orderId": order_id}]}
        else:
            query = {"orderId": order_id}

        try:
            doc = self.collection.find_one(query)
        except PyMongoError as e:
            raise PersistenceError(f"Error fetching order {order_id}: {e}") from e

        if not doc:
            return None

        return Order.from_document(doc)
