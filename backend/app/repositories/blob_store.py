"""
Blob Store - Data Access Layer for product payloads

Installable ZIP payloads are kept in MongoDB, one document per product:

    {"productId": "<uuid>", "fileName": "theme.zip", "fileData": "<base64>"}

Referential integrity with the metadata artifact is not enforced here;
orphans are tolerated and reported by the consistency audit.
"""
import logging
from typing import Iterable, List

from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.domain.blob import ProductBlob
from app.core.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


class BlobStore:
    """
    Repository for product payload documents

    All pymongo failures surface as PersistenceError; nothing is retried
    here.
    """

    def __init__(self, collection: Collection):
        self.collection = collection

    def ensure_indexes(self) -> None:
        """Create the unique productId index (idempotent)"""
        try:
            self.collection.create_index([("productId", ASCENDING)], unique=True)
        except PyMongoError as e:
            raise PersistenceError(f"Error creating productId index: {e}") from e

    def put(self, product_id: str, file_name: str, data: str) -> None:
        """
        Create or overwrite the payload of a product

        Args:
            product_id: Product ID (unique key)
            file_name: Delivered file name
            data: Base64 encoded content
        """
        try:
            self.collection.update_one(
                {"productId": product_id},
                {"$set": {"productId": product_id, "fileName": file_name, "fileData": data}},
                upsert=True,
            )
        except PyMongoError as e:
            raise PersistenceError(f"Error storing file for product {product_id}: {e}") from e

        logger.debug(f"Stored payload {file_name!r} for product {product_id}")

    def get(self, product_id: str) -> ProductBlob:
        """
        Fetch the payload of a product

        Raises:
            NotFoundError: If no payload is stored for the product
        """
        try:
            doc = self.collection.find_one({"productId": product_id})
        except PyMongoError as e:
            raise PersistenceError(f"Error reading file for product {product_id}: {e}") from e

        if not doc:
            raise NotFoundError(f"No file stored for product {product_id}")

        return ProductBlob.model_validate(doc)

    def delete(self, product_id: str) -> None:
        """Remove the payload of a product; no-op if absent"""
        try:
            self.collection.delete_one({"productId": product_id})
        except PyMongoError as e:
            raise PersistenceError(f"Error deleting file for product {product_id}: {e}") from e

    def delete_many(self, product_ids: Iterable[str]) -> None:
        """Remove the payloads of several products; absent ids are ignored"""
        ids = list(product_ids)
        if not ids:
            return

        try:
            self.collection.delete_many({"productId": {"$in": ids}})
        except PyMongoError as e:
            raise PersistenceError(f"Error deleting files for {len(ids)} products: {e}") from e

    def list_product_ids(self) -> List[str]:
        """IDs of every product that has a stored payload"""
        try:
            docs = self.collection.find({}, {"productId": 1, "_id": 0})
            return [doc["productId"] for doc in docs]
        except PyMongoError as e:
            raise PersistenceError(f"Error listing stored files: {e}") from e
