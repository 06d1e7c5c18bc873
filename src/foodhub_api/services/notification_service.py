"""Notification service for site announcements."""

import asyncio
import logging
import uuid
from datetime import UTC, datetime

from foodhub_api.errors import ValidationError
from foodhub_api.events.broadcaster import EventBroadcaster
from foodhub_api.models.notification_models import DEFAULT_LINK, Notification
from foodhub_api.observability import traced
from foodhub_api.observability.metrics import record_notification_created
from foodhub_api.repositories.store_repositories import NotificationRepository

logger = logging.getLogger(__name__)

RECENT_NOTIFICATIONS_LIMIT = 20


class NotificationService:
    """Service for creating and listing notifications.

    Newly created notifications are also pushed to connected clients as a
    {"type": "notification"} event when a broadcaster is configured.
    """

    def __init__(
        self,
        notification_repository: NotificationRepository,
        broadcaster: EventBroadcaster | None = None,
    ) -> None:
        """Initialize the NotificationService.

        Args:
            notification_repository: Repository for notification records
            broadcaster: Optional broadcaster for live notification events
        """
        self.notification_repository = notification_repository
        self.broadcaster = broadcaster

    @traced("list_notifications")
    async def list_notifications(self) -> list[Notification]:
        """Return the most recent notifications, newest first."""
        return await asyncio.to_thread(
            self.notification_repository.list_recent, limit=RECENT_NOTIFICATIONS_LIMIT
        )

    @traced("create_notification")
    async def create_notification(
        self,
        title: str | None,
        description: str | None,
        image: str | None,
        time: str | None,
        link: str | None = None,
    ) -> Notification:
        """Create a notification.

        Args:
            title: Headline
            description: Body text
            image: Image URL
            time: Relative time label shown to users
            link: Target link, "#" when omitted

        Returns:
            The stored notification

        Raises:
            ValidationError: If title, description, image or time is missing
        """
        if not title or not description or not image or not time:
            raise ValidationError("Please provide all required fields.")

        now = datetime.now(UTC)
        notification = Notification(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            image=image,
            link=link or DEFAULT_LINK,
            time=time,
            created_at=now,
            updated_at=now,
        )
        saved = await asyncio.to_thread(
            self.notification_repository.save_notification, notification
        )
        record_notification_created()

        if self.broadcaster is not None:
            self.broadcaster.broadcast(
                {"type": "notification", "notification": saved.model_dump(mode="json")}
            )

        return saved
