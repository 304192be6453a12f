"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from app.domain.product import (
    ProductMetadata,
    ProductListing,
    ProductCreate,
    ProductUpdate,
    DownloadablePayload,
    ConsistencyReport,
)
from app.domain.blob import ProductBlob
from app.domain.order import Order, OrderStatus, DownloadableFile, User

__all__ = [
    'ProductMetadata',
    'ProductListing',
    'ProductCreate',
    'ProductUpdate',
    'DownloadablePayload',
    'ConsistencyReport',
    'ProductBlob',
    'Order',
    'OrderStatus',
    'DownloadableFile',
    'User',
]
