"""Announcement models shown in the site's notification panel."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

# Every notification shares this partition value on the feed index, so the
# newest-first listing is a single index query.
NOTIFICATION_FEED = "notifications"

DEFAULT_LINK = "#"


class Notification(BaseModel):
    """Notification record.

    Stored in DynamoDB with notification_id as partition key and listed
    through the feed-created_at-index GSI.
    """

    id: str = Field(..., description="Unique notification identifier")
    title: str = Field(..., min_length=1, description="Headline")
    description: str = Field(..., min_length=1, description="Body text")
    image: str = Field(..., min_length=1, description="URL to an image")
    link: str = Field(default=DEFAULT_LINK, description="Target link")
    time: str = Field(..., min_length=1, description="Relative time label, e.g. '30 minutes ago'")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "notification_id": self.id,
            "feed": NOTIFICATION_FEED,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "link": self.link,
            "time": self.time,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Notification":
        """Create Notification from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Notification: Parsed model instance
        """
        return cls(
            id=item["notification_id"],
            title=item["title"],
            description=item["description"],
            image=item["image"],
            link=item.get("link", DEFAULT_LINK),
            time=item["time"],
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item.get("updated_at", item["created_at"])),
        )
