"""
Metadata Store - Data Access Layer for the catalog artifact

Product metadata lives in constant.tsx, a TypeScript module the frontend
imports directly:

    export const products = [
      {
        "id": "...",
        "title": "...",
        ...
      }
    ];

The file is also a reviewed source document and gets edited by hand, so
reads forgive trailing commas and writes are pretty-printed with a stable
field order. Writes replace the file atomically: a failed write leaves the
previous content intact and readers never see a half-written file.
"""
import os
import re
import json
import logging
import tempfile
from pathlib import Path
from typing import List, Union

import pydantic

from app.domain.product import ProductMetadata
from app.core.errors import CorruptStoreError, PersistenceError

logger = logging.getLogger(__name__)

# `,` followed only by whitespace and then a closing bracket/brace
TRAILING_COMMA_RE = re.compile(r",\s*([\]}])")


class MetadataStore:
    """
    Repository for the product metadata artifact

    Full-collection semantics: read_all returns every record, write_all
    replaces every record. Callers that read-modify-write must serialize
    through CatalogCoordinator.
    """

    def __init__(self, path: Union[str, Path], export_name: str = "products"):
        self.path = Path(path)
        self.export_name = export_name

    @property
    def marker(self) -> str:
        return f"export const {self.export_name} = "

    def parse(self, content: str) -> List[ProductMetadata]:
        """
        Parse artifact text into product records

        Raises:
            CorruptStoreError: marker missing, invalid JSON, top level not an
                array, an entry without an id, or duplicate ids
        """
        if not content.strip():
            return []

        start = content.find(self.marker)
        if start == -1:
            raise CorruptStoreError(f"'{self.marker.strip()}' not found in {self.path.name}")

        json_str = content[start + len(self.marker):].strip()
        if json_str.endswith(";"):
            json_str = json_str[:-1]
        json_str = TRAILING_COMMA_RE.sub(r"\1", json_str)

        try:
            records = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise CorruptStoreError(f"Invalid product data in {self.path.name}: {e}") from e

        if not isinstance(records, list):
            raise CorruptStoreError(f"'{self.export_name}' in {self.path.name} is not an array")

        # Partial records are kept as written; each entry still needs an id
        products = []
        seen_ids = set()
        for index, record in enumerate(records):
            try:
                product = ProductMetadata.model_validate(record)
            except pydantic.ValidationError as e:
                raise CorruptStoreError(f"Invalid product record at index {index}: {e}") from e

            if product.id in seen_ids:
                raise CorruptStoreError(f"Duplicate product id {product.id!r} in {self.path.name}")
            seen_ids.add(product.id)
            products.append(product)

        return products

    def serialize(self, products: List[ProductMetadata]) -> str:
        records = [product.to_record() for product in products]
        body = json.dumps(records, indent=2, ensure_ascii=False)
        return f"{self.marker}{body};\n"

    def read_all(self) -> List[ProductMetadata]:
        """
        Read every product record

        Returns:
            Records in display order; empty list if the file is missing or empty

        Raises:
            CorruptStoreError: If the artifact cannot be parsed
            PersistenceError: If the file exists but cannot be read
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as e:
            raise CorruptStoreError(f"{self.path.name} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise PersistenceError(f"Error reading {self.path}: {e}") from e

        return self.parse(content)

    def read_all_or_empty(self) -> List[ProductMetadata]:
        """Display read: an unparsable artifact yields an empty listing"""
        try:
            return self.read_all()
        except CorruptStoreError as e:
            logger.warning(f"Catalog artifact unreadable, serving empty listing: {e.message}")
            return []

    def write_all(self, products: List[ProductMetadata]) -> None:
        """
        Replace the artifact with the given records

        Writes a temporary file next to the artifact, fsyncs it and renames
        it over the original.

        Raises:
            PersistenceError: If the write cannot be completed
        """
        content = self.serialize(products)
        directory = self.path.parent
        tmp_path = None

        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            raise PersistenceError(f"Error writing {self.path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.info(f"[SYNC] {self.path.name} updated with {len(products)} products")
