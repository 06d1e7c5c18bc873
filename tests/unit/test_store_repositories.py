"""Unit tests for DynamoDB repository classes."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from boto3.dynamodb.types import Binary
from botocore.exceptions import ClientError, EndpointConnectionError

from foodhub_api.errors import ConflictError, DocumentStoreError
from foodhub_api.models.booking_models import Booking, OrderedDish
from foodhub_api.models.notification_models import Notification
from foodhub_api.models.user_models import User
from foodhub_api.repositories.store_repositories import (
    BannerSlideRepository,
    BookingRepository,
    DishRepository,
    NotificationRepository,
    UserRepository,
    check_tables,
)


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "Server error"}}, operation)


@pytest.mark.unit
class TestDishRepository:
    """Test suite for DishRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        """Create a mock DynamoDB resource."""
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> DishRepository:
        return DishRepository(dynamodb_resource=mock_dynamodb, table_name="test-dishes")

    def test_repository_initialization(self, mock_dynamodb: MagicMock) -> None:
        """Test that repository binds to the named table."""
        repo = DishRepository(dynamodb_resource=mock_dynamodb, table_name="test-table")
        assert repo.table_name == "test-table"
        mock_dynamodb.Table.assert_called_once_with("test-table")

    def test_list_summaries_projects_out_images(
        self, repository: DishRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that the scan only requests non-image attributes."""
        mock_dynamodb.Table.return_value.scan.return_value = {
            "Items": [{"dish_id": "d1", "name": "Pho", "price": 45000}]
        }

        dishes = repository.list_summaries()

        assert len(dishes) == 1
        assert dishes[0].id == "d1"
        kwargs = mock_dynamodb.Table.return_value.scan.call_args.kwargs
        requested = set(kwargs["ExpressionAttributeNames"].values())
        assert "image_data" not in requested
        assert "content_type" not in requested
        assert "name" in requested

    def test_list_summaries_follows_pagination(
        self, repository: DishRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that every page of the scan is read."""
        mock_dynamodb.Table.return_value.scan.side_effect = [
            {
                "Items": [{"dish_id": "d1", "name": "Pho", "price": 1}],
                "LastEvaluatedKey": {"dish_id": "d1"},
            },
            {"Items": [{"dish_id": "d2", "name": "Banh Mi", "price": 2}]},
        ]

        dishes = repository.list_summaries()

        assert [d.id for d in dishes] == ["d1", "d2"]
        second_call = mock_dynamodb.Table.return_value.scan.call_args_list[1]
        assert second_call.kwargs["ExclusiveStartKey"] == {"dish_id": "d1"}

    def test_list_summaries_store_error(
        self, repository: DishRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that scan failures surface as DocumentStoreError."""
        mock_dynamodb.Table.return_value.scan.side_effect = client_error(
            "InternalServerError", "Scan"
        )

        with pytest.raises(DocumentStoreError) as exc_info:
            repository.list_summaries()

        assert exc_info.value.status_code == 500
        assert "Server error" in exc_info.value.detail

    def test_get_dish_unwraps_binary(
        self, repository: DishRepository, mock_dynamodb: MagicMock, dish_item: dict
    ) -> None:
        """Test that DynamoDB Binary image attributes come back as bytes."""
        dish_item["image_data"] = Binary(b"\x89PNG\r\n")
        mock_dynamodb.Table.return_value.get_item.return_value = {"Item": dish_item}

        dish = repository.get_dish(dish_item["dish_id"])

        assert dish is not None
        assert dish.image_data == b"\x89PNG\r\n"
        assert dish.content_type == "image/png"

    def test_get_dish_not_found(self, repository: DishRepository, mock_dynamodb: MagicMock) -> None:
        """Test that a missing dish returns None."""
        mock_dynamodb.Table.return_value.get_item.return_value = {}

        assert repository.get_dish("missing") is None


@pytest.mark.unit
class TestBannerSlideRepository:
    """Test suite for BannerSlideRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> BannerSlideRepository:
        return BannerSlideRepository(dynamodb_resource=mock_dynamodb, table_name="test-slides")

    def test_list_summaries(self, repository: BannerSlideRepository, mock_dynamodb: MagicMock) -> None:
        """Test listing banner slides."""
        mock_dynamodb.Table.return_value.scan.return_value = {
            "Items": [{"slide_id": "s1", "image_name": "summer.jpg"}]
        }

        slides = repository.list_summaries()

        assert len(slides) == 1
        assert slides[0].image_name == "summer.jpg"

    def test_get_slide_connection_error(
        self, repository: BannerSlideRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that transport failures also surface as DocumentStoreError."""
        mock_dynamodb.Table.return_value.get_item.side_effect = EndpointConnectionError(
            endpoint_url="http://localhost:8000"
        )

        with pytest.raises(DocumentStoreError):
            repository.get_slide("s1")


@pytest.mark.unit
class TestUserRepository:
    """Test suite for UserRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> UserRepository:
        return UserRepository(dynamodb_resource=mock_dynamodb, table_name="test-users")

    def test_get_by_email_queries_index(
        self, repository: UserRepository, mock_dynamodb: MagicMock, sample_user: User
    ) -> None:
        """Test that email lookups use the email-index GSI."""
        mock_dynamodb.Table.return_value.query.return_value = {
            "Items": [sample_user.to_dynamodb_item()]
        }

        user = repository.get_by_email("alice@example.com")

        assert user is not None
        assert user.username == "alice"
        kwargs = mock_dynamodb.Table.return_value.query.call_args.kwargs
        assert kwargs["IndexName"] == "email-index"
        assert kwargs["ExpressionAttributeValues"] == {":value": "alice@example.com"}

    def test_get_by_username_not_found(
        self, repository: UserRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that an unknown username returns None."""
        mock_dynamodb.Table.return_value.query.return_value = {"Items": []}

        assert repository.get_by_username("nobody") is None
        kwargs = mock_dynamodb.Table.return_value.query.call_args.kwargs
        assert kwargs["IndexName"] == "username-index"

    def test_create_user_is_conditional(
        self, repository: UserRepository, mock_dynamodb: MagicMock, sample_user: User
    ) -> None:
        """Test that user creation never overwrites an existing record."""
        result = repository.create_user(sample_user)

        assert result == sample_user
        kwargs = mock_dynamodb.Table.return_value.put_item.call_args.kwargs
        assert kwargs["ConditionExpression"] == "attribute_not_exists(user_id)"
        assert kwargs["Item"]["password_hash"] == sample_user.password_hash

    def test_create_user_condition_failure_is_conflict(
        self, repository: UserRepository, mock_dynamodb: MagicMock, sample_user: User
    ) -> None:
        """Test that a failed condition maps to ConflictError."""
        mock_dynamodb.Table.return_value.put_item.side_effect = client_error(
            "ConditionalCheckFailedException", "PutItem"
        )

        with pytest.raises(ConflictError):
            repository.create_user(sample_user)

    def test_create_user_other_error(
        self, repository: UserRepository, mock_dynamodb: MagicMock, sample_user: User
    ) -> None:
        """Test that other put failures map to DocumentStoreError."""
        mock_dynamodb.Table.return_value.put_item.side_effect = client_error(
            "ProvisionedThroughputExceededException", "PutItem"
        )

        with pytest.raises(DocumentStoreError):
            repository.create_user(sample_user)


@pytest.mark.unit
class TestBookingRepository:
    """Test suite for BookingRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> BookingRepository:
        return BookingRepository(dynamodb_resource=mock_dynamodb, table_name="test-bookings")

    @pytest.fixture
    def booking(self) -> Booking:
        now = datetime.now(UTC)
        return Booking(
            id="b1",
            user_id="u1",
            name="Alice",
            phone="0901234567",
            date="2024-02-14",
            time="19:30",
            guests=2,
            ordered_dishes=[OrderedDish(dish_id="d1", quantity=2)],
            created_at=now,
            updated_at=now,
        )

    def test_save_and_get_booking(
        self, repository: BookingRepository, mock_dynamodb: MagicMock, booking: Booking
    ) -> None:
        """Test that a saved item reads back into an equal booking."""
        repository.save_booking(booking)
        stored = mock_dynamodb.Table.return_value.put_item.call_args.kwargs["Item"]
        mock_dynamodb.Table.return_value.get_item.return_value = {"Item": stored}

        loaded = repository.get_booking("b1")

        assert loaded == booking
        assert stored["status"] == "pending"

    def test_list_bookings_for_user_newest_first(
        self, repository: BookingRepository, mock_dynamodb: MagicMock
    ) -> None:
        """Test that the user index is queried in descending order."""
        mock_dynamodb.Table.return_value.query.return_value = {"Items": []}

        assert repository.list_bookings_for_user("u1") == []
        kwargs = mock_dynamodb.Table.return_value.query.call_args.kwargs
        assert kwargs["IndexName"] == "user_id-index"
        assert kwargs["ScanIndexForward"] is False


@pytest.mark.unit
class TestNotificationRepository:
    """Test suite for NotificationRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> NotificationRepository:
        return NotificationRepository(dynamodb_resource=mock_dynamodb, table_name="test-notifications")

    def test_list_recent_queries_feed_index(
        self, repository: NotificationRepository, mock_dynamodb: MagicMock, notification_item: dict
    ) -> None:
        """Test that listing reads the feed index newest first with a limit."""
        mock_dynamodb.Table.return_value.query.return_value = {"Items": [notification_item]}

        notifications = repository.list_recent(limit=20)

        assert len(notifications) == 1
        assert notifications[0].title == "Weekend deal"
        kwargs = mock_dynamodb.Table.return_value.query.call_args.kwargs
        assert kwargs["IndexName"] == "feed-created_at-index"
        assert kwargs["ScanIndexForward"] is False
        assert kwargs["Limit"] == 20

    def test_save_notification_writes_feed(
        self, repository: NotificationRepository, mock_dynamodb: MagicMock, notification_item: dict
    ) -> None:
        """Test that saved notifications carry the feed partition value."""
        notification = Notification.from_dynamodb_item(notification_item)

        repository.save_notification(notification)

        item = mock_dynamodb.Table.return_value.put_item.call_args.kwargs["Item"]
        assert item["feed"] == "notifications"
        assert item["notification_id"] == notification.id


@pytest.mark.unit
class TestCheckTables:
    """Tests for the startup connectivity check."""

    def test_all_tables_reachable(self) -> None:
        mock_dynamodb = MagicMock()

        assert check_tables(mock_dynamodb, ["a", "b"]) is True
        assert mock_dynamodb.meta.client.describe_table.call_count == 2

    def test_unreachable_table_is_logged_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that connection failures are reported without raising."""
        mock_dynamodb = MagicMock()
        mock_dynamodb.meta.client.describe_table.side_effect = client_error(
            "ResourceNotFoundException", "DescribeTable"
        )

        assert check_tables(mock_dynamodb, ["missing-table"]) is False
        assert "missing-table" in caplog.text
