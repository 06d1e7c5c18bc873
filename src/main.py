"""Main application entry point for the FoodHub API.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from foodhub_api.events.broadcaster import EventBroadcaster
from foodhub_api.handlers.api_handler import create_app
from foodhub_api.observability import configure_logging, setup_observability
from foodhub_api.repositories.store_repositories import (
    BannerSlideRepository,
    BookingRepository,
    DishRepository,
    NotificationRepository,
    UserRepository,
    check_tables,
)
from foodhub_api.services.auth_service import AuthService
from foodhub_api.services.booking_service import BookingService
from foodhub_api.services.catalog_service import CatalogService
from foodhub_api.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

DEFAULT_TABLE_NAMES = {
    "dishes": ("DYNAMODB_DISHES_TABLE", "foodhub-dishes"),
    "users": ("DYNAMODB_USERS_TABLE", "foodhub-users"),
    "banner_slides": ("DYNAMODB_BANNER_SLIDES_TABLE", "foodhub-banner-slides"),
    "bookings": ("DYNAMODB_BOOKINGS_TABLE", "foodhub-bookings"),
    "notifications": ("DYNAMODB_NOTIFICATIONS_TABLE", "foodhub-notifications"),
}


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # DynamoDB Local accepts any credentials
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    return boto3.resource("dynamodb", region_name=region)


def get_table_names() -> dict[str, str]:
    """Resolve table names from the environment."""
    return {key: os.getenv(env_var, default) for key, (env_var, default) in DEFAULT_TABLE_NAMES.items()}


def split_env_list(name: str) -> list[str]:
    """Read a comma-separated environment variable as a list."""
    return [value.strip() for value in os.getenv(name, "").split(",") if value.strip()]


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource and checks the tables
    3. Initializes repositories
    4. Creates services and the event broadcaster
    5. Creates the FastAPI app
    6. Sets up observability

    A store that cannot be reached at startup is logged, not fatal:
    requests fail individually until it comes back.

    Returns:
        Configured FastAPI application instance
    """
    log_level = os.getenv("LOG_LEVEL", "INFO")
    configure_logging(log_level)

    logger.info("Starting FoodHub backend server...")

    dynamodb_resource = get_dynamodb_resource()
    tables = get_table_names()
    check_tables(dynamodb_resource, tables.values())

    user_repository = UserRepository(dynamodb_resource=dynamodb_resource, table_name=tables["users"])
    dish_repository = DishRepository(dynamodb_resource=dynamodb_resource, table_name=tables["dishes"])
    banner_slide_repository = BannerSlideRepository(
        dynamodb_resource=dynamodb_resource, table_name=tables["banner_slides"]
    )
    booking_repository = BookingRepository(
        dynamodb_resource=dynamodb_resource, table_name=tables["bookings"]
    )
    notification_repository = NotificationRepository(
        dynamodb_resource=dynamodb_resource, table_name=tables["notifications"]
    )

    logger.info(f"Repositories configured - tables: {', '.join(tables.values())}")

    broadcaster = EventBroadcaster(max_queue_size=int(os.getenv("EVENT_QUEUE_SIZE", "100")))

    app = create_app(
        auth_service=AuthService(user_repository=user_repository),
        catalog_service=CatalogService(
            dish_repository=dish_repository,
            banner_slide_repository=banner_slide_repository,
        ),
        booking_service=BookingService(
            booking_repository=booking_repository,
            user_repository=user_repository,
        ),
        notification_service=NotificationService(
            notification_repository=notification_repository,
            broadcaster=broadcaster,
        ),
        broadcaster=broadcaster,
        notification_api_keys=split_env_list("NOTIFICATION_API_KEYS"),
        cors_origins=split_env_list("CORS_ALLOW_ORIGINS"),
        broadcast_log_level=getattr(logging, log_level.upper(), logging.INFO),
    )

    if not app.state.notification_key_validator.enabled:
        logger.warning("NOTIFICATION_API_KEYS not set - notification creation is open to anyone")

    setup_observability(app)

    logger.info("FoodHub API initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "3001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Server is running on port {port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
