"""
Catalog Coordinator
Keeps the metadata artifact and the payload store in step

Purpose:
- Serialize every catalog mutation behind one writer lock
- Order the two store writes so a crash in between leaves, at worst, an
  unreferenced payload and never a record pointing at a missing payload
- Serve the catalog listing with the caller's wishlist overlay

Ordering rules (payload store first, metadata second):
- add:    put payload  -> insert record  -> write artifact
- update: put/delete payload -> merge record -> write artifact
- delete: delete payload(s)  -> drop record(s) -> write artifact

If the payload step fails nothing else happens. If the artifact write
fails after the payload step succeeded, the payload change stays in place
(an orphan payload is a space leak, not a broken download).

Single process only: the lock does not protect against a second process
writing the same artifact.
"""
import uuid
import logging
import threading
from typing import Iterable, List, Optional, Set

import pydantic

from app.domain.product import (
    ProductMetadata,
    ProductListing,
    ProductCreate,
    ProductUpdate,
    DownloadablePayload,
    ConsistencyReport,
)
from app.repositories.metadata_store import MetadataStore
from app.repositories.blob_store import BlobStore
from app.services.wishlist_overlay import apply_wishlist
from app.core.errors import ValidationError, NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "images", "price", "category")


class CatalogCoordinator:
    """
    Service sequencing compound metadata + payload operations

    One instance is shared by all requests of the process; its lock is the
    single writer slot for the artifact.
    """

    def __init__(
        self,
        metadata_store: MetadataStore,
        blob_store: BlobStore,
        default_type: str = "dashboard",
    ):
        self.metadata_store = metadata_store
        self.blob_store = blob_store
        self.default_type = default_type
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_products(self, wishlist: Optional[Set[str]] = None) -> List[ProductListing]:
        """
        Catalog listing for display

        Does not take the writer lock; the artifact is replaced atomically so
        a concurrent read sees either the old or the new content.
        """
        products = self.metadata_store.read_all_or_empty()
        return apply_wishlist(products, wishlist)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_product(self, data: ProductCreate) -> ProductMetadata:
        """
        Create a product, storing its payload first when one is supplied

        Raises:
            ValidationError: Missing required fields or payload without a file name
            PersistenceError: Payload or artifact write failed
            CorruptStoreError: Artifact cannot be parsed
        """
        self._validate_new_product(data)
        payload = data.downloadable_file
        if payload is not None and payload.has_data:
            self._validate_payload(payload)

        with self._write_lock:
            products = self.metadata_store.read_all()
            product_id = str(uuid.uuid4())

            file_name = None
            if payload is not None and payload.has_data:
                logger.info(f"[SYNC] add {product_id}: storing payload {payload.file_name!r}")
                self.blob_store.put(product_id, payload.file_name, payload.file_data)
                file_name = payload.file_name

            product = ProductMetadata(
                id=product_id,
                title=data.title,
                description=data.description,
                features=data.features or [],
                images=data.images,
                price=data.price,
                category=data.category,
                type=data.type or self.default_type,
                downloadable_file_name=file_name,
            )

            products.insert(0, product)
            self._write_after_blob_step(products, product_id, "add", blob_changed=file_name is not None)

        logger.info(f"[SYNC] Product {product_id} added ({product.title!r})")
        return product

    def update_product(self, product_id: str, changes: ProductUpdate) -> ProductMetadata:
        """
        Update product fields and optionally replace or remove its payload

        `changes.downloadableFile`:
        - omitted: payload untouched
        - null: payload deleted, downloadableFileName cleared
        - object with fileData: payload replaced (upsert)

        Raises:
            NotFoundError: Product does not exist
            ValidationError: Merged record is invalid
            PersistenceError: Payload or artifact write failed
        """
        payload = changes.downloadable_file
        replace_payload = payload is not None and payload.has_data
        clear_payload = changes.payload_provided and payload is None
        if replace_payload:
            self._validate_payload(payload)

        fields = changes.metadata_changes()
        if "images" in fields and not fields["images"]:
            raise ValidationError("Product must have at least one image")
        cleared = [field for field in REQUIRED_FIELDS if field in fields and fields[field] in (None, "")]
        if cleared:
            raise ValidationError(f"Required product fields cannot be cleared: {', '.join(cleared)}")

        with self._write_lock:
            products = self.metadata_store.read_all()
            index = self._index_of(products, product_id)
            if index is None:
                raise NotFoundError(f"Product {product_id} not found")

            merged = {**products[index].to_record(), **fields, "id": product_id}
            if replace_payload:
                merged["downloadableFileName"] = payload.file_name
            elif clear_payload:
                merged["downloadableFileName"] = None

            try:
                updated = ProductMetadata.model_validate(merged)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid product data: {e}") from e

            if replace_payload:
                logger.info(f"[SYNC] update {product_id}: replacing payload {payload.file_name!r}")
                self.blob_store.put(product_id, payload.file_name, payload.file_data)
            elif clear_payload:
                logger.info(f"[SYNC] update {product_id}: removing payload")
                self.blob_store.delete(product_id)

            products[index] = updated
            self._write_after_blob_step(
                products, product_id, "update", blob_changed=replace_payload or clear_payload
            )

        logger.info(f"[SYNC] Product {product_id} updated")
        return updated

    def delete_product(self, product_id: str) -> None:
        """
        Delete a product and its payload

        The payload is removed even when there is no record (orphan cleanup).
        Unknown ids are otherwise a no-op.
        """
        with self._write_lock:
            products = self.metadata_store.read_all()

            logger.info(f"[SYNC] delete {product_id}: removing payload")
            self.blob_store.delete(product_id)

            self._remove_records(products, {product_id}, product_id)

    def delete_products(self, product_ids: Iterable[str]) -> None:
        """
        Delete several products and their payloads with one artifact write

        Ids with no record are ignored.
        """
        ids = list(dict.fromkeys(product_ids))
        if not ids:
            return

        with self._write_lock:
            products = self.metadata_store.read_all()

            logger.info(f"[SYNC] bulk delete: removing payloads for {len(ids)} products")
            self.blob_store.delete_many(ids)

            self._remove_records(products, set(ids), f"{len(ids)} ids")

    # ------------------------------------------------------------------
    # Consistency audit
    # ------------------------------------------------------------------

    def audit_consistency(self) -> ConsistencyReport:
        """Compare artifact records with stored payloads"""
        products = self.metadata_store.read_all()
        blob_ids = set(self.blob_store.list_product_ids())
        product_ids = {p.id for p in products}

        return ConsistencyReport(
            product_count=len(products),
            blob_count=len(blob_ids),
            orphan_blob_ids=sorted(blob_ids - product_ids),
            dangling_product_ids=[
                p.id for p in products if p.has_download and p.id not in blob_ids
            ],
        )

    def prune_orphan_blobs(self) -> List[str]:
        """Delete payloads that no product record references"""
        with self._write_lock:
            report = self.audit_consistency()
            if report.orphan_blob_ids:
                self.blob_store.delete_many(report.orphan_blob_ids)
                logger.info(f"[SYNC] Pruned {len(report.orphan_blob_ids)} orphan payload(s)")
            return report.orphan_blob_ids

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _index_of(products: List[ProductMetadata], product_id: str) -> Optional[int]:
        for index, product in enumerate(products):
            if product.id == product_id:
                return index
        return None

    @staticmethod
    def _validate_new_product(data: ProductCreate) -> None:
        missing = [field for field in REQUIRED_FIELDS if getattr(data, field) in (None, "", [])]
        if missing:
            raise ValidationError(f"Missing required product fields: {', '.join(missing)}")

    @staticmethod
    def _validate_payload(payload: DownloadablePayload) -> None:
        if not payload.file_name:
            raise ValidationError("downloadableFile.fileName is required when fileData is sent")

    def _remove_records(self, products: List[ProductMetadata], ids: Set[str], label: str) -> None:
        remaining = [p for p in products if p.id not in ids]
        removed = len(products) - len(remaining)
        if removed == 0:
            logger.info(f"[SYNC] delete {label}: no matching records, artifact unchanged")
            return

        self._write_after_blob_step(remaining, label, "delete", blob_changed=True)
        logger.info(f"[SYNC] {removed} product(s) deleted")

    def _write_after_blob_step(
        self,
        products: List[ProductMetadata],
        label: str,
        operation: str,
        blob_changed: bool,
    ) -> None:
        try:
            self.metadata_store.write_all(products)
        except PersistenceError:
            if blob_changed:
                logger.warning(
                    f"[SYNC] {operation} {label}: payload store changed but artifact write failed; "
                    f"payload left in place"
                )
            raise
