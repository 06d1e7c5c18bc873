"""Auth service for user registration and credential checks."""

import asyncio
import logging
import uuid
from datetime import UTC, datetime

from foodhub_api.auth.passwords import hash_password, verify_password
from foodhub_api.errors import AuthError, ConflictError, ValidationError
from foodhub_api.models.user_models import PublicUser, User
from foodhub_api.observability import traced
from foodhub_api.observability.metrics import record_login, record_registration
from foodhub_api.repositories.store_repositories import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Incorrect email or password."


class AuthService:
    """Service for registering and authenticating users.

    Sessions and tokens are not issued here: a successful call only
    returns the public projection of the user.
    """

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize the AuthService.

        Args:
            user_repository: Repository for user records
        """
        self.user_repository = user_repository

    @traced("register_user")
    async def register(
        self,
        username: str | None,
        email: str | None,
        password: str | None,
    ) -> PublicUser:
        """Register a new user.

        Args:
            username: Desired username (must be unique)
            email: Email address (must be unique)
            password: Plaintext password, hashed before storage

        Returns:
            The public projection of the created user

        Raises:
            ValidationError: If any field is missing or empty
            ConflictError: If the username or email is already taken
        """
        if not username or not email or not password:
            record_registration("invalid")
            raise ValidationError("Please fill in all required fields.")

        if (
            await asyncio.to_thread(self.user_repository.get_by_email, email) is not None
            or await asyncio.to_thread(self.user_repository.get_by_username, username) is not None
        ):
            record_registration("conflict")
            raise ConflictError("Username or email already exists.")

        user = User(
            user_id=str(uuid.uuid4()),
            username=username,
            email=email,
            password_hash=await asyncio.to_thread(hash_password, password),
            created_at=datetime.now(UTC),
        )
        saved = await asyncio.to_thread(self.user_repository.create_user, user)

        record_registration("success")
        logger.info(f"Registered user {saved.user_id}")
        return saved.to_public()

    @traced("login_user")
    async def login(self, email: str | None, password: str | None) -> PublicUser:
        """Check a user's credentials.

        Unknown emails and wrong passwords produce the same AuthError so a
        caller cannot tell which one was wrong.

        Raises:
            ValidationError: If email or password is missing
            AuthError: If the credentials do not match a user
        """
        if not email or not password:
            raise ValidationError("Please enter your email and password.")

        user = await asyncio.to_thread(self.user_repository.get_by_email, email)
        if user is None or not await asyncio.to_thread(
            verify_password, password, user.password_hash
        ):
            record_login(False)
            raise AuthError(INVALID_CREDENTIALS_MESSAGE)

        record_login(True)
        return user.to_public()
