"""
Shared FastAPI dependencies

The coordinator is a process-wide singleton: its lock is the single writer
slot for the metadata artifact, so every request must get the same one.
"""
from functools import lru_cache

from app.core.config import settings
from app.core.database import (
    get_product_files_collection,
    get_orders_collection,
    get_users_collection,
)
from app.repositories.metadata_store import MetadataStore
from app.repositories.blob_store import BlobStore
from app.repositories.order_repository import OrderRepository
from app.repositories.user_repository import UserRepository
from app.services.catalog_coordinator import CatalogCoordinator
from app.services.download_resolver import DownloadResolver


@lru_cache(maxsize=1)
def get_metadata_store() -> MetadataStore:
    return MetadataStore(settings.CATALOG_FILE_PATH, settings.CATALOG_EXPORT_NAME)


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    return BlobStore(get_product_files_collection())


@lru_cache(maxsize=1)
def get_catalog_coordinator() -> CatalogCoordinator:
    return CatalogCoordinator(
        get_metadata_store(),
        get_blob_store(),
        default_type=settings.DEFAULT_PRODUCT_TYPE,
    )


def get_download_resolver() -> DownloadResolver:
    return DownloadResolver(get_blob_store())


def get_order_repository() -> OrderRepository:
    return OrderRepository(get_orders_collection())


def get_user_repository() -> UserRepository:
    return UserRepository(get_users_collection())
