"""
Products API Endpoints
Catalog listing and admin product management

Metadata goes to the catalog artifact, payloads to MongoDB; the
coordinator keeps both in step. Handlers are plain `def` so FastAPI runs
them in its threadpool and the coordinator lock serializes writers.
"""
from fastapi import APIRouter, Depends, Response, status
from typing import Optional, List

from app.core.auth import TokenUser, get_current_user_optional, require_admin
from app.domain.product import (
    ProductMetadata,
    ProductListing,
    ProductCreate,
    ProductUpdate,
    BulkDeleteRequest,
)
from app.repositories.user_repository import UserRepository
from app.services.catalog_coordinator import CatalogCoordinator
from app.api.dependencies import get_catalog_coordinator, get_user_repository

router = APIRouter()


@router.get("", response_model=List[ProductListing])
def list_products(
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    coordinator: CatalogCoordinator = Depends(get_catalog_coordinator),
    users: UserRepository = Depends(get_user_repository),
):
    """
    Get the catalog in display order

    Every product carries `wishlisted`; it is false for anonymous callers.
    """
    wishlist = users.get_wishlist(user.id) if user else None
    return coordinator.list_products(wishlist)


@router.post("", response_model=ProductMetadata, status_code=status.HTTP_201_CREATED)
def add_product(
    product: ProductCreate,
    admin: TokenUser = Depends(require_admin),
    coordinator: CatalogCoordinator = Depends(get_catalog_coordinator),
):
    """Add a product (metadata to the artifact, ZIP to MongoDB)"""
    return coordinator.add_product(product)


@router.put("/{product_id}", response_model=ProductMetadata)
def update_product(
    product_id: str,
    changes: ProductUpdate,
    admin: TokenUser = Depends(require_admin),
    coordinator: CatalogCoordinator = Depends(get_catalog_coordinator),
):
    """
    Update a product

    Send `"downloadableFile": null` to remove the stored file; omit the key
    to leave it untouched.
    """
    return coordinator.update_product(product_id, changes)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: str,
    admin: TokenUser = Depends(require_admin),
    coordinator: CatalogCoordinator = Depends(get_catalog_coordinator),
):
    coordinator.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_products(
    request: BulkDeleteRequest,
    admin: TokenUser = Depends(require_admin),
    coordinator: CatalogCoordinator = Depends(get_catalog_coordinator),
):
    """Bulk delete; unknown ids are ignored"""
    coordinator.delete_products(request.ids)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
