"""
Download Resolver
Decides which stored payload satisfies an order

Precedence (first match wins):
1. The order's own downloadableFile, when it carries data
2. For product orders, the payload of the FIRST product in productIds
3. Nothing -> NoDeliverableError

Only the first product of a multi-product order is ever looked up; later
products are not consulted even when the first has no payload.
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from app.core.auth import TokenUser
from app.domain.order import Order
from app.repositories.blob_store import BlobStore
from app.core.errors import (
    ForbiddenError,
    NotFoundError,
    NoDeliverableError,
    CorruptStoreError,
)

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "download.zip"
ZIP_MEDIA_TYPE = "application/zip"


@dataclass
class ResolvedDownload:
    file_name: str
    content: bytes
    media_type: str = ZIP_MEDIA_TYPE


class DownloadResolver:
    """Service resolving order downloads against the payload store"""

    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store

    def resolve(self, order: Order, user: TokenUser) -> ResolvedDownload:
        """
        Resolve the file delivered for an order

        Args:
            order: Order being downloaded
            user: Authenticated caller

        Raises:
            ForbiddenError: Caller neither owns the order nor is an admin
            NoDeliverableError: No payload satisfies the order
            CorruptStoreError: Stored payload is not valid base64
        """
        if order.user != user.id and not user.is_admin:
            raise ForbiddenError(f"Order {order.order_id} does not belong to the caller")

        file_name, file_data = self._find_payload(order)
        if not file_data:
            raise NoDeliverableError("No deliverable file found.")

        try:
            content = base64.b64decode(file_data)
        except (binascii.Error, ValueError) as e:
            raise CorruptStoreError(f"Stored file for order {order.order_id} is not valid base64") from e

        return ResolvedDownload(file_name=file_name or DEFAULT_FILE_NAME, content=content)

    def _find_payload(self, order: Order) -> Tuple[Optional[str], Optional[str]]:
        custom = order.downloadable_file
        if custom is not None and custom.file_data:
            logger.debug(f"Order {order.order_id}: delivering attached file")
            return custom.file_name, custom.file_data

        product_ids = order.product_ids if order.is_product_order else []
        if not product_ids:
            return None, None

        # TODO: confirm with product owner whether multi-product orders should bundle every payload
        first_product_id = product_ids[0]
        try:
            blob = self.blob_store.get(first_product_id)
        except NotFoundError:
            logger.info(f"Order {order.order_id}: no payload stored for product {first_product_id}")
            return None, None

        return blob.file_name, blob.file_data
