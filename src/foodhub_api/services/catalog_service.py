"""Catalog service for dishes and landing-page banner slides."""

import asyncio
import logging
import uuid
from dataclasses import dataclass

from foodhub_api.errors import BadRequestError, NotFoundError
from foodhub_api.models.catalog_models import BannerSlideSummary, DishSummary
from foodhub_api.observability import traced
from foodhub_api.repositories.store_repositories import BannerSlideRepository, DishRepository

logger = logging.getLogger(__name__)

IMAGE_NOT_FOUND_MESSAGE = "Image not found"
INVALID_ID_MESSAGE = "Invalid ID format"


@dataclass
class StoredImage:
    """Raw image bytes together with the content type they were stored with."""

    data: bytes
    content_type: str


def is_valid_id(value: str) -> bool:
    """Check that an identifier is a well-formed UUID string."""
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


class CatalogService:
    """Read-only access to the dish catalog and banner carousel."""

    def __init__(
        self,
        dish_repository: DishRepository,
        banner_slide_repository: BannerSlideRepository,
    ) -> None:
        """Initialize the CatalogService.

        Args:
            dish_repository: Repository for dish records
            banner_slide_repository: Repository for banner slide records
        """
        self.dish_repository = dish_repository
        self.banner_slide_repository = banner_slide_repository

    @traced("list_dishes")
    async def list_dishes(self) -> list[DishSummary]:
        """List all dishes without their image payloads."""
        return await asyncio.to_thread(self.dish_repository.list_summaries)

    @traced("get_dish_image")
    async def get_dish_image(self, dish_id: str) -> StoredImage:
        """Fetch the stored image of a dish.

        A malformed id is treated like a missing record.

        Raises:
            NotFoundError: If the id is malformed, or the dish or its image is missing
        """
        if not is_valid_id(dish_id):
            raise NotFoundError(IMAGE_NOT_FOUND_MESSAGE)

        dish = await asyncio.to_thread(self.dish_repository.get_dish, dish_id)
        if dish is None or not dish.image_data or not dish.content_type:
            raise NotFoundError(IMAGE_NOT_FOUND_MESSAGE)

        return StoredImage(data=dish.image_data, content_type=dish.content_type)

    @traced("list_banner_slides")
    async def list_banner_slides(self) -> list[BannerSlideSummary]:
        """List all banner slides without their image payloads."""
        return await asyncio.to_thread(self.banner_slide_repository.list_summaries)

    @traced("get_banner_slide_image")
    async def get_banner_slide_image(self, slide_id: str) -> StoredImage:
        """Fetch the stored image of a banner slide.

        Raises:
            BadRequestError: If the id is not a well-formed identifier
            NotFoundError: If the slide or its image is missing
        """
        if not is_valid_id(slide_id):
            raise BadRequestError(INVALID_ID_MESSAGE)

        slide = await asyncio.to_thread(self.banner_slide_repository.get_slide, slide_id)
        if slide is None or not slide.image_data or not slide.content_type:
            raise NotFoundError(IMAGE_NOT_FOUND_MESSAGE)

        return StoredImage(data=slide.image_data, content_type=slide.content_type)
