"""
Admin API - Catalog maintenance endpoints

Cross-store consistency is best-effort: an interrupted write can leave a
payload with no product record. These endpoints report and clean that up.
"""
from fastapi import APIRouter, Depends
from typing import Dict, Any
from datetime import datetime

from app.core.auth import TokenUser, require_admin
from app.services.catalog_coordinator import CatalogCoordinator
from app.api.dependencies import get_catalog_coordinator

router = APIRouter()


@router.get("/catalog/consistency")
def catalog_consistency(
    admin: TokenUser = Depends(require_admin),
    coordinator: CatalogCoordinator = Depends(get_catalog_coordinator),
) -> Dict[str, Any]:
    """
    Compare the catalog artifact with stored payloads

    Returns:
        consistent: True when both stores agree
        orphan_blob_ids: Payloads without a product record
        dangling_product_ids: Products naming a file that is not stored
    """
    report = coordinator.audit_consistency()
    return {
        "status": "success",
        "consistent": report.is_consistent,
        "timestamp": datetime.now().isoformat(),
        "data": report.model_dump(),
    }


@router.post("/catalog/prune-orphans")
def prune_orphans(
    admin: TokenUser = Depends(require_admin),
    coordinator: CatalogCoordinator = Depends(get_catalog_coordinator),
) -> Dict[str, Any]:
    """Delete payloads that no product references"""
    pruned = coordinator.prune_orphan_blobs()
    return {
        "status": "success",
        "message": f"Removed {len(pruned)} orphan file(s)",
        "pruned_ids": pruned,
    }
