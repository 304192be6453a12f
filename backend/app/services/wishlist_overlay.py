"""
Wishlist overlay for catalog listings
"""
from typing import Iterable, List, Optional, Set

from app.domain.product import ProductMetadata, ProductListing


def apply_wishlist(
    products: Iterable[ProductMetadata],
    wishlist: Optional[Set[str]] = None,
) -> List[ProductListing]:
    """
    Attach a `wishlisted` flag to every product, keeping listing order.

    Args:
        products: Catalog records in display order
        wishlist: Product IDs saved by the caller; None for anonymous callers

    Returns:
        One ProductListing per record. `wishlisted` is always present and is
        only True when a wishlist was given and contains the record's id.
    """
    saved = wishlist or set()
    return [
        ProductListing.model_validate({**product.to_record(), "wishlisted": product.id in saved})
        for product in products
    ]
