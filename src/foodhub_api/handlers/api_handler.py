"""FastAPI application exposing the FoodHub REST API."""

import datetime as dt
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from pydantic import BaseModel, Field

from foodhub_api.auth.api_dependencies import check_api_key_header
from foodhub_api.auth.api_key_validator import APIKeyValidator
from foodhub_api.errors import FoodHubError
from foodhub_api.events.broadcaster import EventBroadcaster
from foodhub_api.models.booking_models import Booking, OrderedDish
from foodhub_api.models.catalog_models import BannerSlideSummary, DishSummary
from foodhub_api.models.notification_models import Notification
from foodhub_api.models.user_models import PublicUser
from foodhub_api.services.auth_service import AuthService
from foodhub_api.services.booking_service import BookingService
from foodhub_api.services.catalog_service import CatalogService, StoredImage
from foodhub_api.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to FoodHub API! The server is running correctly."

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class MessageResponse(BaseModel):
    """Plain message response model."""

    message: str


class RegisterRequest(BaseModel):
    """Registration payload. Fields are checked by the auth service."""

    username: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    """Login payload."""

    email: str | None = None
    password: str | None = None


class AuthResponse(BaseModel):
    """Response model for register and login."""

    message: str
    user: PublicUser


class NotificationCreateRequest(BaseModel):
    """Notification payload. Missing fields are reported as 400."""

    title: str | None = None
    description: str | None = None
    image: str | None = None
    link: str | None = None
    time: str | None = None


class BookingCreateRequest(BaseModel):
    """Booking payload."""

    user_id: str | None = None
    name: str | None = None
    phone: str | None = None
    date: dt.date | None = None
    time: str | None = None
    guests: int | None = None
    notes: str | None = None
    ordered_dishes: list[OrderedDish] = Field(default_factory=list)


def create_app(
    auth_service: AuthService,
    catalog_service: CatalogService,
    booking_service: BookingService,
    notification_service: NotificationService,
    broadcaster: EventBroadcaster,
    notification_api_keys: list[str] | None = None,
    cors_origins: list[str] | None = None,
    broadcast_log_level: int = logging.INFO,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        auth_service: Service for registration and login
        catalog_service: Service for dishes and banner slides
        booking_service: Service for bookings
        notification_service: Service for notifications
        broadcaster: Event broadcaster backing /api/events
        notification_api_keys: Keys required to create notifications (open when empty)
        cors_origins: Allowed CORS origins (defaults to any origin)
        broadcast_log_level: Minimum log level mirrored to event stream clients

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.broadcaster.install(level=broadcast_log_level)
        logger.info("Event broadcaster registered as log sink")
        try:
            yield
        finally:
            app.state.broadcaster.uninstall()

    app = FastAPI(
        title="FoodHub API",
        description="REST backend for the FoodHub food-ordering site",
        version="2.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store services in app state for access in route handlers
    app.state.auth_service = auth_service
    app.state.catalog_service = catalog_service
    app.state.booking_service = booking_service
    app.state.notification_service = notification_service
    app.state.broadcaster = broadcaster
    app.state.notification_key_validator = APIKeyValidator(api_keys=notification_api_keys)

    @app.exception_handler(FoodHubError)
    async def handle_foodhub_error(request: Request, exc: FoodHubError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Invalid request body.", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error", "error": str(exc)},
        )

    async def image_response(load: Callable[[], Awaitable[StoredImage]]) -> Response:
        """Serve an image, answering failures in plain text."""
        try:
            image = await load()
        except FoodHubError as e:
            if e.status_code >= 500:
                logger.error(f"Error serving image: {e.detail or e.message}")
                return PlainTextResponse("Server error", status_code=500)
            return PlainTextResponse(e.message, status_code=e.status_code)
        except Exception as e:
            logger.error(f"Error serving image: {e}")
            return PlainTextResponse("Server error", status_code=500)

        return Response(content=image.data, media_type=image.content_type)

    def validate_notification_key(x_api_key: str | None = Header(None)) -> str | None:
        """Dependency guarding notification creation when keys are configured."""
        return check_api_key_header(
            x_api_key=x_api_key, validator=app.state.notification_key_validator
        )

    @app.get("/", response_model=MessageResponse, tags=["Health"])
    async def root() -> MessageResponse:
        """Liveness check."""
        return MessageResponse(message=WELCOME_MESSAGE)

    @app.get("/api/events", tags=["Events"])
    async def events(request: Request) -> StreamingResponse:
        """Open a Server-Sent Events stream of log lines and application events."""
        return StreamingResponse(
            app.state.broadcaster.stream(request.is_disconnected),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    @app.get("/api/dishes", response_model=list[DishSummary], tags=["Catalog"])
    async def list_dishes() -> list[DishSummary]:
        """List all dishes without image data."""
        dishes: list[DishSummary] = await app.state.catalog_service.list_dishes()
        return dishes

    @app.get("/api/dishes/{dish_id}/image", tags=["Catalog"])
    async def get_dish_image(dish_id: str) -> Response:
        """Serve the raw image of a dish."""
        return await image_response(lambda: app.state.catalog_service.get_dish_image(dish_id))

    @app.get("/api/bannerslides", response_model=list[BannerSlideSummary], tags=["Catalog"])
    async def list_banner_slides() -> list[BannerSlideSummary]:
        """List all banner slides without image data."""
        slides: list[BannerSlideSummary] = await app.state.catalog_service.list_banner_slides()
        return slides

    @app.get("/api/bannerslides/{slide_id}/image", tags=["Catalog"])
    async def get_banner_slide_image(slide_id: str) -> Response:
        """Serve the raw image of a banner slide."""
        return await image_response(
            lambda: app.state.catalog_service.get_banner_slide_image(slide_id)
        )

    @app.post(
        "/api/register",
        response_model=AuthResponse,
        status_code=status.HTTP_201_CREATED,
        tags=["Auth"],
    )
    async def register(payload: RegisterRequest) -> AuthResponse:
        """Register a new user."""
        user = await app.state.auth_service.register(
            username=payload.username,
            email=payload.email,
            password=payload.password,
        )
        return AuthResponse(message="Registration successful!", user=user)

    @app.post("/api/login", response_model=AuthResponse, tags=["Auth"])
    async def login(payload: LoginRequest) -> AuthResponse:
        """Authenticate a user by email and password."""
        user = await app.state.auth_service.login(email=payload.email, password=payload.password)
        return AuthResponse(message="Login successful!", user=user)

    @app.get("/api/notifications", response_model=list[Notification], tags=["Notifications"])
    async def list_notifications() -> list[Notification]:
        """List the 20 most recent notifications, newest first."""
        notifications: list[Notification] = (
            await app.state.notification_service.list_notifications()
        )
        return notifications

    @app.post(
        "/api/notifications",
        response_model=Notification,
        status_code=status.HTTP_201_CREATED,
        tags=["Notifications"],
    )
    async def create_notification(
        payload: NotificationCreateRequest,
        _api_key: str | None = Depends(validate_notification_key),
    ) -> Notification:
        """Create a notification."""
        notification: Notification = await app.state.notification_service.create_notification(
            title=payload.title,
            description=payload.description,
            image=payload.image,
            time=payload.time,
            link=payload.link,
        )
        return notification

    @app.post(
        "/api/bookings",
        response_model=Booking,
        status_code=status.HTTP_201_CREATED,
        tags=["Bookings"],
    )
    async def create_booking(payload: BookingCreateRequest) -> Booking:
        """Create a pending booking."""
        booking: Booking = await app.state.booking_service.create_booking(
            user_id=payload.user_id,
            name=payload.name,
            phone=payload.phone,
            date=payload.date,
            time=payload.time,
            guests=payload.guests,
            notes=payload.notes,
            ordered_dishes=payload.ordered_dishes,
        )
        return booking

    @app.get("/api/bookings/{booking_id}", response_model=Booking, tags=["Bookings"])
    async def get_booking(booking_id: str) -> Booking:
        """Get a booking by ID."""
        booking: Booking = await app.state.booking_service.get_booking(booking_id)
        return booking

    @app.get("/api/users/{user_id}/bookings", response_model=list[Booking], tags=["Bookings"])
    async def list_user_bookings(user_id: str) -> list[Booking]:
        """List a user's bookings, newest first."""
        bookings: list[Booking] = await app.state.booking_service.list_bookings_for_user(user_id)
        return bookings

    return app
