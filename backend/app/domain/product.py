"""
Product Domain Models

Represents catalog products as stored in the metadata artifact, the
request schemas used to create and update them, and the per-request
listing shape with the wishlist flag.

Field names follow the artifact (camelCase aliases) so that a record
read from constant.tsx is written back byte-for-byte in the same shape.
"""
from pydantic import BaseModel, Field, ConfigDict, NonNegativeFloat, NonNegativeInt, field_validator
from typing import Optional, List, Union


class DownloadablePayload(BaseModel):
    """
    Installable payload sent along with a product create/update

    Fields:
        fileName: Name the file is delivered under (e.g. "theme.zip")
        fileData: Base64 encoded file content
    """

    file_name: Optional[str] = Field(None, alias="fileName")
    file_data: Optional[str] = Field(None, alias="fileData")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def has_data(self) -> bool:
        return bool(self.file_data)


class ProductMetadata(BaseModel):
    """
    Product record - one entry of the metadata artifact

    The artifact holds an ordered list of these records; list order is
    display order, newest first.

    Fields:
        id: Opaque unique identifier (UUID4), immutable once created
        title: Display title
        description: Display description
        features: Ordered feature bullet points (may be empty)
        images: Ordered image references
        price: Non-negative price
        category: Classification tag
        type: Product kind tag ("dashboard" when absent)
        downloadableFileName: File name of the stored payload, if any

    Records on disk are taken as they are: only `id` is mandatory, missing
    keys are not added back on write, and unknown keys are kept
    (extra="allow") and written back after the known fields. Required-field
    and price checks apply to create/update requests.
    """

    id: str = Field(..., description="Product ID")
    title: Optional[str] = Field(None, description="Product title")
    description: Optional[str] = Field(None, description="Product description")
    features: List[str] = Field(default_factory=list, description="Feature list")
    images: List[str] = Field(default_factory=list, description="Image URLs")
    price: Optional[Union[int, float]] = Field(None, description="Price, kept as written")
    category: Optional[str] = Field(None, description="Product category")
    type: str = Field("dashboard", description="Product type")
    downloadable_file_name: Optional[str] = Field(
        None,
        alias="downloadableFileName",
        description="File name of the stored payload",
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        # Hand-edited records sometimes carry numeric ids
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def has_download(self) -> bool:
        return self.downloadable_file_name is not None

    def to_record(self) -> dict:
        """Artifact representation with stable field order, omitting keys the record never had"""
        record = self.model_dump(by_alias=True)
        unset = {
            field.alias or name
            for name, field in type(self).model_fields.items()
            if name not in self.model_fields_set
        }
        return {key: value for key, value in record.items() if key not in unset}


class ProductListing(ProductMetadata):
    """Product record as shown to a caller, with the wishlist flag"""

    wishlisted: bool = False


class ProductCreate(BaseModel):
    """
    Schema for creating a new product

    Required-field checks happen in the coordinator so that missing
    fields surface as a catalog ValidationError.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    price: Optional[Union[NonNegativeInt, NonNegativeFloat]] = None
    category: Optional[str] = None
    type: Optional[str] = None
    downloadable_file: Optional[DownloadablePayload] = Field(None, alias="downloadableFile")

    model_config = ConfigDict(populate_by_name=True)


class ProductUpdate(BaseModel):
    """
    Schema for updating an existing product

    `downloadableFile` distinguishes three cases: omitted (file untouched),
    explicit null (file removed) and a payload with data (file replaced).
    Any `id` sent by the caller is ignored.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    features: Optional[List[str]] = None
    images: Optional[List[str]] = None
    price: Optional[Union[NonNegativeInt, NonNegativeFloat]] = None
    category: Optional[str] = None
    type: Optional[str] = None
    downloadable_file: Optional[DownloadablePayload] = Field(None, alias="downloadableFile")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @property
    def payload_provided(self) -> bool:
        return "downloadable_file" in self.model_fields_set

    def metadata_changes(self) -> dict:
        """Fields explicitly set by the caller, keyed by artifact name"""
        return self.model_dump(
            by_alias=True,
            exclude_unset=True,
            exclude={"downloadable_file"},
        )


class BulkDeleteRequest(BaseModel):
    ids: List[str]


class ConsistencyReport(BaseModel):
    """
    Cross-store consistency snapshot

    Fields:
        orphan_blob_ids: Stored payloads with no product record
        dangling_product_ids: Records naming a file that has no payload
    """
    product_count: int = 0
    blob_count: int = 0
    orphan_blob_ids: List[str] = Field(default_factory=list)
    dangling_product_ids: List[str] = Field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.orphan_blob_ids and not self.dangling_product_ids
