"""
Pytest fixtures and configuration for the catalog backend tests

Storage fixtures are local: the metadata artifact lives in tmp_path and
the payload collection is an in-memory stand-in for a pymongo collection.
"""
import copy
import pytest
from jose import jwt
from fastapi.testclient import TestClient

from app.core.config import settings
from app.domain.product import ProductCreate, DownloadablePayload
from app.repositories.metadata_store import MetadataStore
from app.repositories.blob_store import BlobStore
from app.services.catalog_coordinator import CatalogCoordinator


class InMemoryCollection:
    """
    Minimal pymongo Collection double for the payload store

    Supports the calls BlobStore makes: equality and `$in` filters on
    top-level keys, `$set` upserts, and deletes.
    """

    def __init__(self):
        self.docs = []
        self.indexes = []

    @staticmethod
    def _matches(doc, query):
        for key, condition in query.items():
            if isinstance(condition, dict) and "$in" in condition:
                if doc.get(key) not in condition["$in"]:
                    return False
            elif doc.get(key) != condition:
                return False
        return True

    def create_index(self, keys, unique=False):
        self.indexes.append((keys, unique))

    def update_one(self, query, update, upsert=False):
        for doc in self.docs:
            if self._matches(doc, query):
                doc.update(update["$set"])
                return
        if upsert:
            self.docs.append({"_id": len(self.docs) + 1, **query, **update["$set"]})

    def find_one(self, query, projection=None):
        for doc in self.docs:
            if self._matches(doc, query):
                return copy.deepcopy(doc)
        return None

    def find(self, query, projection=None):
        return [copy.deepcopy(doc) for doc in self.docs if self._matches(doc, query)]

    def delete_one(self, query):
        for doc in self.docs:
            if self._matches(doc, query):
                self.docs.remove(doc)
                return

    def delete_many(self, query):
        self.docs = [doc for doc in self.docs if not self._matches(doc, query)]

    def product_ids(self):
        return [doc["productId"] for doc in self.docs]


@pytest.fixture
def catalog_path(tmp_path):
    """Path of the catalog artifact (not created yet)"""
    return tmp_path / "constant.tsx"


@pytest.fixture
def metadata_store(catalog_path):
    return MetadataStore(catalog_path)


@pytest.fixture
def blob_collection():
    return InMemoryCollection()


@pytest.fixture
def blob_store(blob_collection):
    return BlobStore(blob_collection)


@pytest.fixture
def coordinator(metadata_store, blob_store):
    return CatalogCoordinator(metadata_store, blob_store)


@pytest.fixture
def sample_product_data():
    """
    Provides sample product data for tests
    """
    return {
        "title": "Sales Dashboard",
        "description": "React admin dashboard",
        "features": ["Dark mode", "Charts"],
        "images": ["https://cdn.example.com/dash.png"],
        "price": 49.0,
        "category": "templates",
    }


@pytest.fixture
def sample_payload():
    """Base64 of b'PK-zip-bytes'"""
    return {"fileName": "dashboard.zip", "fileData": "UEstemlwLWJ5dGVz"}


@pytest.fixture
def make_product(coordinator, sample_product_data):
    """Factory adding a product through the coordinator"""
    def _make(title="Sales Dashboard", payload=None, **overrides):
        data = {**sample_product_data, "title": title, **overrides}
        if payload is not None:
            data["downloadableFile"] = DownloadablePayload.model_validate(payload)
        return coordinator.add_product(ProductCreate.model_validate(data))
    return _make


@pytest.fixture
def make_token():
    """Factory minting bearer tokens signed with the configured secret"""
    def _make(user_id="64f1c0a2b3c4d5e6f7a8b9c0", role="customer", email="buyer@example.com"):
        payload = {"id": user_id, "role": role, "email": email}
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return _make


@pytest.fixture
def admin_headers(make_token):
    token = make_token(user_id="64f1c0a2b3c4d5e6f7a8b9ff", role="admin", email="admin@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def client(coordinator, blob_store):
    """
    TestClient with storage dependencies pointed at the local fixtures

    Individual tests override the order/user repositories as needed.
    """
    from app.main import app
    from app.api.dependencies import (
        get_catalog_coordinator,
        get_download_resolver,
        get_user_repository,
    )
    from app.services.download_resolver import DownloadResolver
    from unittest.mock import MagicMock

    users = MagicMock()
    users.get_wishlist.return_value = set()

    app.dependency_overrides[get_catalog_coordinator] = lambda: coordinator
    app.dependency_overrides[get_download_resolver] = lambda: DownloadResolver(blob_store)
    app.dependency_overrides[get_user_repository] = lambda: users

    yield TestClient(app)

    app.dependency_overrides.clear()
