#!/usr/bin/env python3
"""
Catalog reconciliation
Compares constant.tsx with the productfiles collection and optionally
removes payloads that no product references

Usage:
    python scripts/sync/reconcile_catalog.py            # report only
    python scripts/sync/reconcile_catalog.py --prune    # delete orphan payloads

Run from backend/ with the same .env as the API. Stop the API (or make
sure no admin is editing products) before pruning: the writer lock only
covers one process.
"""
import sys
import logging
import argparse
from pathlib import Path
from dotenv import load_dotenv

# Load environment
env_path = Path(__file__).parent.parent.parent / '.env'
load_dotenv(env_path)

from app.api.dependencies import get_catalog_coordinator
from app.core.errors import CatalogError

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description='Reconcile catalog metadata with stored payloads')
    parser.add_argument('--prune', action='store_true', help='Delete payloads with no product record')
    args = parser.parse_args()

    coordinator = get_catalog_coordinator()

    try:
        report = coordinator.audit_consistency()
    except CatalogError as e:
        logger.error(f"❌ {e.kind}: {e.message}")
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("CATALOG CONSISTENCY")
    logger.info("=" * 60)
    logger.info(f"Products in artifact: {report.product_count}")
    logger.info(f"Stored payloads:      {report.blob_count}")
    logger.info(f"Orphan payloads:      {len(report.orphan_blob_ids)}")
    for product_id in report.orphan_blob_ids:
        logger.info(f"  - {product_id}")
    logger.info(f"Missing payloads:     {len(report.dangling_product_ids)}")
    for product_id in report.dangling_product_ids:
        logger.info(f"  - {product_id}")

    if report.is_consistent:
        logger.info("\n✅ Catalog and payload store agree")
        return

    if args.prune and report.orphan_blob_ids:
        pruned = coordinator.prune_orphan_blobs()
        logger.info(f"\n🧹 Removed {len(pruned)} orphan payload(s)")

    if report.dangling_product_ids:
        logger.warning("\n⚠️  Products above reference a file that is not stored; re-upload it via the admin panel")
        sys.exit(2)


if __name__ == "__main__":
    main()
