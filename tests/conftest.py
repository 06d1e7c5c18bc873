"""Shared pytest fixtures and configuration for all tests."""

import os

# Must be set before src.main is imported so no real application is built
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import UTC, datetime  # noqa: E402

import pytest  # noqa: E402

from foodhub_api.auth.passwords import hash_password  # noqa: E402
from foodhub_api.models.user_models import User  # noqa: E402

VALID_ID = "0f8fad5b-d9cb-469f-a165-70867728950e"
OTHER_VALID_ID = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


@pytest.fixture
def valid_id() -> str:
    """Fixture providing a well-formed record identifier."""
    return VALID_ID


@pytest.fixture
def sample_user() -> User:
    """Fixture providing a stored user whose password is 'secret'."""
    return User(
        user_id=VALID_ID,
        username="alice",
        email="alice@example.com",
        password_hash=hash_password("secret"),
        created_at=datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
    )


@pytest.fixture
def dish_item() -> dict:
    """Fixture providing a DynamoDB dish item with an image."""
    return {
        "dish_id": VALID_ID,
        "name": "Pho Bo",
        "price": 45000,
        "description": "Beef noodle soup",
        "category": "Noodles",
        "available": True,
        "image_data": b"\x89PNG\r\n",
        "content_type": "image/png",
    }


@pytest.fixture
def notification_item() -> dict:
    """Fixture providing a DynamoDB notification item."""
    return {
        "notification_id": VALID_ID,
        "feed": "notifications",
        "title": "Weekend deal",
        "description": "20% off all noodles",
        "image": "https://cdn.example.com/deal.png",
        "link": "#",
        "time": "30 minutes ago",
        "created_at": "2024-01-15T10:30:00+00:00",
        "updated_at": "2024-01-15T10:30:00+00:00",
    }
