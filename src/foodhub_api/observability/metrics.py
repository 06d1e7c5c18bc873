"""Custom metrics for the FoodHub API."""

from opentelemetry import metrics

# Get meter for the API service
meter = metrics.get_meter("foodhub-api")

user_registration_counter = meter.create_counter(
    name="user_registrations_total",
    description="Total number of user registrations by outcome",
    unit="1",
)

login_attempt_counter = meter.create_counter(
    name="login_attempts_total",
    description="Total number of login attempts by outcome",
    unit="1",
)

# Open push connections gauge
event_stream_connections = meter.create_up_down_counter(
    name="event_stream_connections",
    description="Current number of open event stream connections",
    unit="1",
)

events_broadcast_counter = meter.create_counter(
    name="events_broadcast_total",
    description="Total number of events fanned out to push connections by type",
    unit="1",
)

notifications_created_counter = meter.create_counter(
    name="notifications_created_total",
    description="Total number of notifications created",
    unit="1",
)

bookings_created_counter = meter.create_counter(
    name="bookings_created_total",
    description="Total number of bookings created",
    unit="1",
)


def record_registration(outcome: str) -> None:
    """Record a registration attempt.

    Args:
        outcome: "success", "conflict" or "invalid"
    """
    user_registration_counter.add(1, {"outcome": outcome})


def record_login(success: bool) -> None:
    """Record a login attempt.

    Args:
        success: Whether the credentials were accepted
    """
    login_attempt_counter.add(1, {"outcome": "success" if success else "failure"})


def record_connection_change(change: int) -> None:
    """Record a change in the number of open event stream connections.

    Args:
        change: +1 when a client subscribes, -1 when it leaves
    """
    event_stream_connections.add(change)


def record_broadcast(event_type: str, recipients: int) -> None:
    """Record an event fanned out to push connections.

    Args:
        event_type: The envelope type ("log", "error", "notification", ...)
        recipients: Number of connections the event was queued for
    """
    events_broadcast_counter.add(recipients, {"type": event_type})


def record_notification_created() -> None:
    notifications_created_counter.add(1)


def record_booking_created() -> None:
    bookings_created_counter.add(1)
