"""Product models for the storefront catalog"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductColor(BaseModel):
    code: str
    name: str


class Product(BaseModel):
    """Product row from the catalog"""
    model_config = ConfigDict(extra="ignore", from_attributes=True)

    id: str
    slug: Optional[str] = None
    name: str
    description: Optional[str] = None
    price_cents: int = Field(ge=0)
    currency: str = "IDR"
    images: list[str] = []
    sizes: list[str] = []
    colors: list[ProductColor] = []
    category: Optional[str] = None
    in_stock: bool = True
    is_active: bool = True
    is_customizable: bool = False
    created_at: Optional[datetime] = None

    @field_validator("images", mode="before")
    @classmethod
    def _keep_string_images(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [image for image in value if isinstance(image, str)]

    @field_validator("sizes", "colors", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("in_stock", mode="before")
    @classmethod
    def _null_as_in_stock(cls, value: Any) -> Any:
        return True if value is None else value


class ProductListResponse(BaseModel):
    """Response from the product listing"""
    items: list[Product]
