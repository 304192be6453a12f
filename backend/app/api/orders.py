"""
Orders API Endpoints
Order downloads (payloads resolved from MongoDB)
"""
from fastapi import APIRouter, Depends, Response

from app.core.auth import TokenUser, get_current_user
from app.core.errors import NotFoundError
from app.repositories.order_repository import OrderRepository
from app.services.download_resolver import DownloadResolver
from app.api.dependencies import get_order_repository, get_download_resolver

router = APIRouter()


@router.get("/{order_id}/download")
def download_order_file(
    order_id: str,
    user: TokenUser = Depends(get_current_user),
    orders: OrderRepository = Depends(get_order_repository),
    resolver: DownloadResolver = Depends(get_download_resolver),
):
    """
    Download the deliverable of an order

    Only the order owner or an admin may download. The order's own file
    wins; otherwise the file of the first product in the order is sent.
    """
    order = orders.find_by_id(order_id)
    if order is None:
        raise NotFoundError("Order not found")

    download = resolver.resolve(order, user)
    return Response(
        content=download.content,
        media_type=download.media_type,
        headers={"Content-Disposition": f'attachment; filename="{download.file_name}"'},
    )
