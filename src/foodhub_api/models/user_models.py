"""User account models.

The stored User record carries the bcrypt hash; everything leaving the
service goes through PublicUser, which has no password field at all.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class User(BaseModel):
    """Registered user as stored in DynamoDB.

    Stored with user_id as partition key; email and username are looked up
    through the email-index and username-index GSIs.
    """

    user_id: str = Field(..., description="Unique user identifier")
    username: str = Field(..., min_length=1, description="Unique username")
    email: str = Field(..., min_length=1, description="Unique email address")
    password_hash: str = Field(..., description="bcrypt hash of the password")
    created_at: datetime = Field(..., description="Registration timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "user_id": self.user_id,
            "username": self.username,
            "email": self.email,
            "password_hash": self.password_hash,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "User":
        """Create User from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            User: Parsed model instance
        """
        return cls(
            user_id=item["user_id"],
            username=item["username"],
            email=item["email"],
            password_hash=item["password_hash"],
            created_at=datetime.fromisoformat(item["created_at"]),
        )

    def to_public(self) -> "PublicUser":
        """Project the user onto its public fields."""
        return PublicUser(id=self.user_id, username=self.username, email=self.email)


class PublicUser(BaseModel):
    """Public projection of a user, safe to return to clients."""

    id: str
    username: str
    email: str
