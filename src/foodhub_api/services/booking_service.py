"""Booking service for table reservations."""

import datetime as dt
import asyncio
import logging
import uuid

from pydantic import ValidationError as PydanticValidationError

from foodhub_api.errors import NotFoundError, ValidationError
from foodhub_api.models.booking_models import Booking, BookingStatusEnum, OrderedDish
from foodhub_api.observability import traced
from foodhub_api.observability.metrics import record_booking_created
from foodhub_api.repositories.store_repositories import BookingRepository, UserRepository

logger = logging.getLogger(__name__)


class BookingService:
    """Service for creating and reading bookings.

    Bookings are always created as pending; nothing here changes a
    booking's status afterwards.
    """

    def __init__(
        self,
        booking_repository: BookingRepository,
        user_repository: UserRepository,
    ) -> None:
        """Initialize the BookingService.

        Args:
            booking_repository: Repository for booking records
            user_repository: Repository used to check the owning user exists
        """
        self.booking_repository = booking_repository
        self.user_repository = user_repository

    @traced("create_booking")
    async def create_booking(
        self,
        user_id: str | None,
        name: str | None,
        phone: str | None,
        date: dt.date | None,
        time: str | None,
        guests: int | None,
        notes: str | None = None,
        ordered_dishes: list[OrderedDish] | None = None,
    ) -> Booking:
        """Create a pending booking for a user.

        Args:
            user_id: Owning user
            name: Name the table is booked under
            phone: Contact phone number
            date: Reservation date
            time: Reservation time
            guests: Number of guests (at least 1)
            notes: Optional free-text notes
            ordered_dishes: Optional dishes pre-ordered with the booking

        Returns:
            The stored booking

        Raises:
            ValidationError: If a required field is missing or out of range
            NotFoundError: If the user does not exist
        """
        if not user_id or not name or not phone or date is None or not time or guests is None:
            raise ValidationError("Please provide all required booking fields.")

        if await asyncio.to_thread(self.user_repository.get_user, user_id) is None:
            raise NotFoundError(f"User {user_id} not found")

        now = dt.datetime.now(dt.UTC)
        try:
            booking = Booking(
                id=str(uuid.uuid4()),
                user_id=user_id,
                name=name,
                phone=phone,
                date=date,
                time=time,
                guests=guests,
                notes=notes,
                ordered_dishes=ordered_dishes or [],
                status=BookingStatusEnum.PENDING,
                created_at=now,
                updated_at=now,
            )
        except PydanticValidationError as e:
            raise ValidationError("Invalid booking.", detail=str(e)) from e

        saved = await asyncio.to_thread(self.booking_repository.save_booking, booking)
        record_booking_created()
        logger.info(f"Booking {saved.id} created for user {user_id}")
        return saved

    @traced("get_booking")
    async def get_booking(self, booking_id: str) -> Booking:
        """Get a booking by ID.

        Raises:
            NotFoundError: If no such booking exists
        """
        booking = await asyncio.to_thread(self.booking_repository.get_booking, booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found")
        return booking

    @traced("list_bookings_for_user")
    async def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        """List a user's bookings, newest first."""
        return await asyncio.to_thread(self.booking_repository.list_bookings_for_user, user_id)
