"""
Order and User Domain Models

Orders and users are owned by the order/user services; the catalog only
reads them. These models cover the fields needed for download resolution
and the wishlist overlay.
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List


class OrderStatus(str, Enum):
    """Order lifecycle states (owned by the order service)"""
    FAILED = "Failed"
    PENDING = "Pending"
    PENDING_PAYMENT = "Pending Payment"
    PROCESSING = "Processing"
    DELIVERED = "Delivered"
    REFUND_ACCEPTED = "Refund Accepted"
    REFUNDED = "Refunded"
    CANCELLED = "Cancelled"


class DownloadableFile(BaseModel):
    """Order-specific payload overriding the catalog payload"""

    file_name: Optional[str] = Field(None, alias="fileName")
    file_data: Optional[str] = Field(None, alias="fileData")

    model_config = ConfigDict(populate_by_name=True)


class Order(BaseModel):
    """
    Order domain model (read-only view for downloads)

    Fields:
        id: Document ID
        orderId: Business order number
        user: Owner user ID
        status: Lifecycle status
        downloadableFile: Custom payload attached to this order
        isProductOrder: Whether productIds references catalog products
        productIds: Catalog product IDs, in order
    """

    id: str = Field(..., description="Document ID")
    order_id: str = Field(..., alias="orderId", description="Business order number")
    user: str = Field(..., description="Owner user ID")
    status: OrderStatus = Field(OrderStatus.PENDING, description="Order status")
    downloadable_file: Optional[DownloadableFile] = Field(None, alias="downloadableFile")
    is_product_order: bool = Field(False, alias="isProductOrder")
    product_ids: List[str] = Field(default_factory=list, alias="productIds")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_document(cls, doc: dict) -> "Order":
        """Build from a MongoDB document (ObjectIds become strings)"""
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        data["user"] = str(data.get("user"))
        data["productIds"] = [str(pid) for pid in data.get("productIds") or []]
        return cls.model_validate(data)


class User(BaseModel):
    """User domain model (lightweight, wishlist only)"""

    id: str = Field(..., description="User ID")
    wishlist: List[str] = Field(default_factory=list, description="Wishlisted product IDs")

    @classmethod
    def from_document(cls, doc: dict) -> "User":
        return cls(
            id=str(doc["_id"]),
            wishlist=[str(pid) for pid in doc.get("wishlist") or []],
        )
