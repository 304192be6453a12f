"""
Unit tests for BlobStore

Semantics are checked against the in-memory collection; pymongo failure
translation is checked with a MagicMock collection.
"""
import pytest
from unittest.mock import MagicMock
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from app.repositories.blob_store import BlobStore
from app.domain.blob import ProductBlob
from app.core.errors import NotFoundError, PersistenceError


class TestBlobStore:
    """Test BlobStore methods"""

    def test_put_then_get(self, blob_store):
        blob_store.put("p1", "theme.zip", "UEs=")

        blob = blob_store.get("p1")

        assert isinstance(blob, ProductBlob)
        assert blob.product_id == "p1"
        assert blob.file_name == "theme.zip"
        assert blob.file_data == "UEs="

    def test_put_overwrites_existing_payload(self, blob_store, blob_collection):
        blob_store.put("p1", "v1.zip", "djE=")
        blob_store.put("p1", "v2.zip", "djI=")

        assert blob_collection.product_ids() == ["p1"]
        assert blob_store.get("p1").file_name == "v2.zip"

    def test_get_missing_raises_not_found(self, blob_store):
        with pytest.raises(NotFoundError):
            blob_store.get("missing")

    def test_delete_is_idempotent(self, blob_store, blob_collection):
        blob_store.put("p1", "a.zip", "YQ==")

        blob_store.delete("p1")
        blob_store.delete("p1")

        assert blob_collection.product_ids() == []

    def test_delete_many_ignores_absent_ids(self, blob_store, blob_collection):
        blob_store.put("p1", "a.zip", "YQ==")
        blob_store.put("p2", "b.zip", "Yg==")
        blob_store.put("p3", "c.zip", "Yw==")

        blob_store.delete_many(["p1", "p3", "nope"])

        assert blob_collection.product_ids() == ["p2"]

    def test_delete_many_with_no_ids_does_not_hit_collection(self):
        collection = MagicMock()

        BlobStore(collection).delete_many([])

        collection.delete_many.assert_not_called()

    def test_list_product_ids(self, blob_store):
        blob_store.put("p1", "a.zip", "YQ==")
        blob_store.put("p2", "b.zip", "Yg==")

        assert sorted(blob_store.list_product_ids()) == ["p1", "p2"]

    def test_ensure_indexes_creates_unique_product_id_index(self, blob_store, blob_collection):
        blob_store.ensure_indexes()

        assert blob_collection.indexes == [([("productId", 1)], True)]

    def test_put_uses_upsert_on_product_id(self):
        collection = MagicMock()

        BlobStore(collection).put("p1", "a.zip", "YQ==")

        collection.update_one.assert_called_once_with(
            {"productId": "p1"},
            {"$set": {"productId": "p1", "fileName": "a.zip", "fileData": "YQ=="}},
            upsert=True,
        )

    @pytest.mark.parametrize("method, args", [
        ("put", ("p1", "a.zip", "YQ==")),
        ("get", ("p1",)),
        ("delete", ("p1",)),
        ("delete_many", (["p1", "p2"],)),
        ("list_product_ids", ()),
        ("ensure_indexes", ()),
    ])
    def test_pymongo_errors_become_persistence_errors(self, method, args):
        collection = MagicMock()
        for name in ("update_one", "find_one", "delete_one", "delete_many", "find", "create_index"):
            getattr(collection, name).side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(PersistenceError):
            getattr(BlobStore(collection), method)(*args)

    def test_persistence_error_keeps_cause(self):
        collection = MagicMock()
        collection.find_one.side_effect = PyMongoError("boom")

        with pytest.raises(PersistenceError) as exc_info:
            BlobStore(collection).get("p1")

        assert isinstance(exc_info.value.__cause__, PyMongoError)
