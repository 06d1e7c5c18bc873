"""Table booking models."""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class BookingStatusEnum(str, Enum):
    """Enumeration of booking status values."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class OrderedDish(BaseModel):
    """A dish pre-ordered with a booking."""

    dish_id: str = Field(..., min_length=1, description="Referenced dish identifier")
    quantity: int = Field(..., description="Number of portions", ge=1)


class Booking(BaseModel):
    """Table reservation placed by a user.

    Stored in DynamoDB with booking_id as partition key and queried per user
    through the user_id-index GSI (sorted by created_at).
    """

    id: str = Field(..., description="Unique booking identifier")
    user_id: str = Field(..., description="Owning user identifier")
    name: str = Field(..., min_length=1, description="Name the table is booked under")
    phone: str = Field(..., min_length=1, description="Contact phone number")
    date: dt.date = Field(..., description="Reservation date")
    time: str = Field(..., min_length=1, description="Reservation time, e.g. '19:30'")
    guests: int = Field(..., description="Number of guests", ge=1)
    notes: str | None = Field(None, description="Free-text notes")
    ordered_dishes: list[OrderedDish] = Field(default_factory=list)
    status: BookingStatusEnum = Field(default=BookingStatusEnum.PENDING)
    created_at: dt.datetime = Field(..., description="Creation timestamp")
    updated_at: dt.datetime = Field(..., description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "booking_id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "phone": self.phone,
            "date": self.date.isoformat(),
            "time": self.time,
            "guests": self.guests,
            "ordered_dishes": [
                {"dish_id": d.dish_id, "quantity": d.quantity} for d in self.ordered_dishes
            ],
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.notes is not None:
            item["notes"] = self.notes

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Booking":
        """Create Booking from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Booking: Parsed model instance
        """
        return cls(
            id=item["booking_id"],
            user_id=item["user_id"],
            name=item["name"],
            phone=item["phone"],
            date=dt.date.fromisoformat(item["date"]),
            time=item["time"],
            guests=int(item["guests"]),
            notes=item.get("notes"),
            ordered_dishes=[
                OrderedDish(dish_id=d["dish_id"], quantity=int(d["quantity"]))
                for d in item.get("ordered_dishes", [])
            ],
            status=BookingStatusEnum(item.get("status", BookingStatusEnum.PENDING.value)),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=dt.datetime.fromisoformat(item["updated_at"]),
        )
