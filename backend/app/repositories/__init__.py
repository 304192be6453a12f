"""
Repository Layer - Data Access

This layer handles all storage access and returns domain models.
Repositories abstract away file and MongoDB details from business logic.
"""
from app.repositories.metadata_store import MetadataStore
from app.repositories.blob_store import BlobStore
from app.repositories.order_repository import OrderRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    'MetadataStore',
    'BlobStore',
    'OrderRepository',
    'UserRepository',
]
