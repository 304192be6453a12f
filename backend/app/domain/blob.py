"""
Product payload stored in the blob store
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class ProductBlob(BaseModel):
    """
    One document of the productfiles collection

    Fields:
        productId: Product ID this payload belongs to (unique)
        fileName: Delivered file name
        fileData: Base64 encoded file content
    """

    product_id: str = Field(..., alias="productId")
    file_name: Optional[str] = Field(None, alias="fileName")
    file_data: str = Field("", alias="fileData")

    model_config = ConfigDict(populate_by_name=True)
