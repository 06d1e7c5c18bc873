"""Catalog data models.

Dishes and banner slides store their image bytes inline in the document,
next to the content type needed to serve them. Listing endpoints use the
summary models, which never carry image data.
"""

from decimal import Decimal
from typing import Any

from boto3.dynamodb.types import Binary
from pydantic import BaseModel, Field, field_serializer


def _to_bytes(value: Any) -> bytes:
    """Unwrap a DynamoDB binary attribute into raw bytes."""
    if isinstance(value, Binary):
        return bytes(value.value)
    return bytes(value)


class DishSummary(BaseModel):
    """Dish as returned by the listing endpoint (no image payload)."""

    id: str = Field(..., description="Unique identifier for the dish")
    name: str = Field(..., description="Dish name")
    price: Decimal = Field(..., description="Dish price", ge=0)
    description: str = Field(default="", description="Dish description")
    category: str = Field(default="", description="Menu category")
    available: bool = Field(default=True, description="Whether the dish can be ordered")

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        """Serialize price as a JSON number."""
        return float(price)

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "DishSummary":
        """Create DishSummary from DynamoDB item.

        Args:
            item: DynamoDB item dictionary (image attributes are ignored)

        Returns:
            DishSummary: Parsed model instance
        """
        return cls(
            id=item["dish_id"],
            name=item["name"],
            price=Decimal(str(item["price"])),
            description=item.get("description", ""),
            category=item.get("category", ""),
            available=item.get("available", True),
        )


class Dish(DishSummary):
    """Full dish record, including the stored image."""

    image_data: bytes | None = Field(None, description="Raw image bytes", exclude=True)
    content_type: str | None = Field(None, description="MIME type of the image", exclude=True)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "dish_id": self.id,
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "available": self.available,
        }

        if self.image_data is not None:
            item["image_data"] = self.image_data

        if self.content_type is not None:
            item["content_type"] = self.content_type

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Dish":
        """Create Dish from DynamoDB item, keeping the image payload."""
        return cls(
            id=item["dish_id"],
            name=item["name"],
            price=Decimal(str(item["price"])),
            description=item.get("description", ""),
            category=item.get("category", ""),
            available=item.get("available", True),
            image_data=_to_bytes(item["image_data"]) if "image_data" in item else None,
            content_type=item.get("content_type"),
        )

    def to_summary(self) -> DishSummary:
        """Strip the image payload."""
        return DishSummary(
            id=self.id,
            name=self.name,
            price=self.price,
            description=self.description,
            category=self.category,
            available=self.available,
        )


class BannerSlideSummary(BaseModel):
    """Banner slide as returned by the listing endpoint."""

    id: str = Field(..., description="Unique identifier for the slide")
    image_name: str = Field(..., description="Display name of the banner image")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "BannerSlideSummary":
        return cls(id=item["slide_id"], image_name=item["image_name"])


class BannerSlide(BannerSlideSummary):
    """Full banner slide record, including the stored image."""

    image_data: bytes | None = Field(None, description="Raw image bytes", exclude=True)
    content_type: str | None = Field(None, description="MIME type of the image", exclude=True)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "slide_id": self.id,
            "image_name": self.image_name,
        }

        if self.image_data is not None:
            item["image_data"] = self.image_data

        if self.content_type is not None:
            item["content_type"] = self.content_type

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "BannerSlide":
        return cls(
            id=item["slide_id"],
            image_name=item["image_name"],
            image_data=_to_bytes(item["image_data"]) if "image_data" in item else None,
            content_type=item.get("content_type"),
        )
