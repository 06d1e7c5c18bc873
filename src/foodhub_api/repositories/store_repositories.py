"""DynamoDB repository classes for FoodHub records.

Each repository owns a single table. Missing records come back as None;
store failures are logged and re-raised as DocumentStoreError so the HTTP
layer can answer with a 500 that echoes the underlying message.
"""

import logging
from collections.abc import Iterable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from foodhub_api.errors import ConflictError, DocumentStoreError
from foodhub_api.models.booking_models import Booking
from foodhub_api.models.catalog_models import BannerSlide, BannerSlideSummary, Dish, DishSummary
from foodhub_api.models.notification_models import NOTIFICATION_FEED, Notification
from foodhub_api.models.user_models import User

logger = logging.getLogger(__name__)

DISH_SUMMARY_FIELDS = ("dish_id", "name", "price", "description", "category", "available")
BANNER_SUMMARY_FIELDS = ("slide_id", "image_name")


def _projection(fields: Iterable[str]) -> dict[str, Any]:
    """Build scan/query kwargs that only read the given attributes.

    Every attribute goes through a placeholder since several of them
    (name, description) are DynamoDB reserved words.
    """
    names = {f"#f{i}": field for i, field in enumerate(fields)}
    return {
        "ProjectionExpression": ", ".join(names),
        "ExpressionAttributeNames": names,
    }


def _store_error(action: str, error: Exception) -> DocumentStoreError:
    logger.error(f"Failed to {action}: {error}")
    return DocumentStoreError(f"Document store error while trying to {action}", detail=str(error))


class _TableRepository:
    """Shared table handle and paginated scan."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def _scan_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        """Scan the whole table, following LastEvaluatedKey."""
        items: list[dict[str, Any]] = []
        response = self.table.scan(**kwargs)
        items.extend(response.get("Items", []))

        while "LastEvaluatedKey" in response:
            response = self.table.scan(ExclusiveStartKey=response["LastEvaluatedKey"], **kwargs)
            items.extend(response.get("Items", []))

        return items


class DishRepository(_TableRepository):
    """Repository for dish records (partition key dish_id)."""

    def list_summaries(self) -> list[DishSummary]:
        """List every dish without reading image attributes.

        Returns:
            list: DishSummary objects (empty list if none found)
        """
        try:
            items = self._scan_all(**_projection(DISH_SUMMARY_FIELDS))
        except (ClientError, BotoCoreError) as e:
            raise _store_error("list dishes", e) from e

        return [DishSummary.from_dynamodb_item(item) for item in items]

    def get_dish(self, dish_id: str) -> Dish | None:
        """Retrieve a dish, image included.

        Args:
            dish_id: Dish identifier

        Returns:
            Dish if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"dish_id": dish_id})
        except (ClientError, BotoCoreError) as e:
            raise _store_error("get dish", e) from e

        if "Item" not in response:
            return None

        return Dish.from_dynamodb_item(response["Item"])


class BannerSlideRepository(_TableRepository):
    """Repository for banner slide records (partition key slide_id)."""

    def list_summaries(self) -> list[BannerSlideSummary]:
        """List every banner slide without reading image attributes."""
        try:
            items = self._scan_all(**_projection(BANNER_SUMMARY_FIELDS))
        except (ClientError, BotoCoreError) as e:
            raise _store_error("list banner slides", e) from e

        return [BannerSlideSummary.from_dynamodb_item(item) for item in items]

    def get_slide(self, slide_id: str) -> BannerSlide | None:
        """Retrieve a banner slide, image included.

        Args:
            slide_id: Slide identifier

        Returns:
            BannerSlide if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"slide_id": slide_id})
        except (ClientError, BotoCoreError) as e:
            raise _store_error("get banner slide", e) from e

        if "Item" not in response:
            return None

        return BannerSlide.from_dynamodb_item(response["Item"])


class UserRepository(_TableRepository):
    """Repository for user records.

    Partition key user_id; email-index and username-index GSIs back the
    uniqueness checks and login lookups.
    """

    def _find_one(self, index_name: str, attribute: str, value: str) -> User | None:
        try:
            response = self.table.query(
                IndexName=index_name,
                KeyConditionExpression="#attr = :value",
                ExpressionAttributeNames={"#attr": attribute},
                ExpressionAttributeValues={":value": value},
                Limit=1,
            )
        except (ClientError, BotoCoreError) as e:
            raise _store_error(f"look up user by {attribute}", e) from e

        items = response.get("Items", [])
        if not items:
            return None

        return User.from_dynamodb_item(items[0])

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email address."""
        return self._find_one("email-index", "email", email)

    def get_by_username(self, username: str) -> User | None:
        """Find a user by username."""
        return self._find_one("username-index", "username", username)

    def get_user(self, user_id: str) -> User | None:
        """Retrieve a user by ID.

        Args:
            user_id: User identifier

        Returns:
            User if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"user_id": user_id})
        except (ClientError, BotoCoreError) as e:
            raise _store_error("get user", e) from e

        if "Item" not in response:
            return None

        return User.from_dynamodb_item(response["Item"])

    def create_user(self, user: User) -> User:
        """Persist a new user.

        Args:
            user: User to create

        Returns:
            The stored user

        Raises:
            ConflictError: If a record with the same user_id already exists
            DocumentStoreError: On any other store failure
        """
        try:
            self.table.put_item(
                Item=user.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(user_id)",
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise ConflictError("Username or email already exists.") from e
            raise _store_error("create user", e) from e
        except BotoCoreError as e:
            raise _store_error("create user", e) from e

        return user


class BookingRepository(_TableRepository):
    """Repository for bookings (partition key booking_id, user_id-index GSI)."""

    def save_booking(self, booking: Booking) -> Booking:
        """Save or update a booking."""
        try:
            self.table.put_item(Item=booking.to_dynamodb_item())
        except (ClientError, BotoCoreError) as e:
            raise _store_error("save booking", e) from e

        return booking

    def get_booking(self, booking_id: str) -> Booking | None:
        """Retrieve a booking by ID.

        Args:
            booking_id: Booking identifier

        Returns:
            Booking if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"booking_id": booking_id})
        except (ClientError, BotoCoreError) as e:
            raise _store_error("get booking", e) from e

        if "Item" not in response:
            return None

        return Booking.from_dynamodb_item(response["Item"])

    def list_bookings_for_user(self, user_id: str) -> list[Booking]:
        """List a user's bookings, newest first.

        Uses a Global Secondary Index on user_id sorted by created_at.

        Args:
            user_id: User identifier

        Returns:
            list: Booking objects (empty list if none found)
        """
        try:
            response = self.table.query(
                IndexName="user_id-index",
                KeyConditionExpression="user_id = :uid",
                ExpressionAttributeValues={":uid": user_id},
                ScanIndexForward=False,
            )
        except (ClientError, BotoCoreError) as e:
            raise _store_error("list bookings", e) from e

        return [Booking.from_dynamodb_item(item) for item in response.get("Items", [])]


class NotificationRepository(_TableRepository):
    """Repository for notifications (partition key notification_id)."""

    def save_notification(self, notification: Notification) -> Notification:
        """Persist a notification."""
        try:
            self.table.put_item(Item=notification.to_dynamodb_item())
        except (ClientError, BotoCoreError) as e:
            raise _store_error("save notification", e) from e

        return notification

    def list_recent(self, limit: int) -> list[Notification]:
        """List the most recent notifications, newest first.

        Uses the feed-created_at-index GSI, where every notification shares
        the same partition value and sorts by created_at.

        Args:
            limit: Maximum number of notifications to return

        Returns:
            list: Notification objects (empty list if none found)
        """
        try:
            response = self.table.query(
                IndexName="feed-created_at-index",
                KeyConditionExpression="feed = :feed",
                ExpressionAttributeValues={":feed": NOTIFICATION_FEED},
                ScanIndexForward=False,
                Limit=limit,
            )
        except (ClientError, BotoCoreError) as e:
            raise _store_error("list notifications", e) from e

        return [Notification.from_dynamodb_item(item) for item in response.get("Items", [])]


def check_tables(dynamodb_resource: DynamoDBServiceResource, table_names: Iterable[str]) -> bool:
    """Check that every table is reachable.

    Failures are logged, not raised: the service keeps running and
    requests fail individually until the store comes back.

    Returns:
        bool: True if all tables answered, False otherwise
    """
    client = dynamodb_resource.meta.client
    reachable = True

    for table_name in table_names:
        try:
            client.describe_table(TableName=table_name)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Document store connection error for table {table_name}: {e}")
            reachable = False

    if reachable:
        logger.info("Document store connected successfully")

    return reachable
