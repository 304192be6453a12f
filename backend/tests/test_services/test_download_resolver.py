"""
Unit tests for DownloadResolver

Resolution is strict precedence: order file, then the FIRST product's
payload only, then NoDeliverable.
"""
import base64
import pytest
from unittest.mock import MagicMock

from app.core.auth import TokenUser
from app.domain.blob import ProductBlob
from app.domain.order import Order
from app.repositories.blob_store import BlobStore
from app.services.download_resolver import DownloadResolver
from app.core.errors import (
    ForbiddenError,
    NotFoundError,
    NoDeliverableError,
    CorruptStoreError,
    PersistenceError,
)


OWNER = TokenUser(id="owner-1", email="owner@example.com", role="customer")
STRANGER = TokenUser(id="someone-else", email="x@example.com", role="customer")
ADMIN = TokenUser(id="admin-1", email="admin@example.com", role="admin")


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode()


def _order(**overrides):
    data = {
        "id": "650000000000000000000001",
        "orderId": "ORD-1",
        "user": OWNER.id,
        "status": "Delivered",
        "isProductOrder": True,
        "productIds": [],
    }
    data.update(overrides)
    return Order.model_validate(data)


@pytest.fixture
def resolver(blob_store):
    return DownloadResolver(blob_store)


class TestAuthorization:

    def test_stranger_is_forbidden(self, resolver, blob_store):
        blob_store.put("p1", "a.zip", _b64(b"a"))

        with pytest.raises(ForbiddenError):
            resolver.resolve(_order(productIds=["p1"]), STRANGER)

    def test_admin_may_download_any_order(self, resolver, blob_store):
        blob_store.put("p1", "a.zip", _b64(b"a"))

        assert resolver.resolve(_order(productIds=["p1"]), ADMIN).content == b"a"

    def test_forbidden_is_checked_before_resolution(self, resolver):
        with pytest.raises(ForbiddenError):
            resolver.resolve(_order(), STRANGER)


class TestPrecedence:

    def test_order_file_wins_over_product_ids(self, resolver, blob_store):
        blob_store.put("p1", "product.zip", _b64(b"product"))
        order = _order(
            productIds=["p1"],
            downloadableFile={"fileName": "custom.zip", "fileData": _b64(b"custom")},
        )

        download = resolver.resolve(order, OWNER)

        assert download.file_name == "custom.zip"
        assert download.content == b"custom"
        assert download.media_type == "application/zip"

    def test_order_file_without_data_falls_through(self, resolver, blob_store):
        blob_store.put("p1", "product.zip", _b64(b"product"))
        order = _order(productIds=["p1"], downloadableFile={"fileName": "custom.zip", "fileData": ""})

        assert resolver.resolve(order, OWNER).file_name == "product.zip"

    def test_first_product_payload(self, resolver, blob_store):
        blob_store.put("p1", "one.zip", _b64(b"one"))
        blob_store.put("p2", "two.zip", _b64(b"two"))

        download = resolver.resolve(_order(productIds=["p1", "p2"]), OWNER)

        assert download.file_name == "one.zip"
        assert download.content == b"one"

    def test_second_product_is_never_consulted(self):
        """productIds=[p1, p2], no payload for p1, payload for p2 -> NoDeliverable"""
        def fake_get(product_id):
            if product_id == "p1":
                raise NotFoundError(f"No file stored for product {product_id}")
            return ProductBlob(productId=product_id, fileName="two.zip", fileData=_b64(b"two"))

        blobs = MagicMock(spec=BlobStore)
        blobs.get.side_effect = fake_get

        with pytest.raises(NoDeliverableError):
            DownloadResolver(blobs).resolve(_order(productIds=["p1", "p2"]), OWNER)

        blobs.get.assert_called_once_with("p1")

    def test_second_product_payload_ignored_with_real_store(self, resolver, blob_store):
        blob_store.put("p2", "two.zip", _b64(b"two"))

        with pytest.raises(NoDeliverableError):
            resolver.resolve(_order(productIds=["p1", "p2"]), OWNER)

    def test_non_product_order_ignores_product_ids(self, resolver, blob_store):
        blob_store.put("p1", "one.zip", _b64(b"one"))

        with pytest.raises(NoDeliverableError):
            resolver.resolve(_order(isProductOrder=False, productIds=["p1"]), OWNER)

    def test_empty_product_ids(self, resolver):
        with pytest.raises(NoDeliverableError):
            resolver.resolve(_order(productIds=[]), OWNER)


class TestPayloadDecoding:

    def test_missing_file_name_defaults(self, resolver):
        order = _order(downloadableFile={"fileData": _b64(b"zip")})

        assert resolver.resolve(order, OWNER).file_name == "download.zip"

    def test_invalid_base64_is_corrupt(self, resolver):
        order = _order(downloadableFile={"fileName": "bad.zip", "fileData": "abc"})

        with pytest.raises(CorruptStoreError):
            resolver.resolve(order, OWNER)

    def test_store_failure_propagates(self):
        blobs = MagicMock(spec=BlobStore)
        blobs.get.side_effect = PersistenceError("mongo down")

        with pytest.raises(PersistenceError):
            DownloadResolver(blobs).resolve(_order(productIds=["p1"]), OWNER)
