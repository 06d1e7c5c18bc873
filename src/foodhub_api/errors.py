"""Error taxonomy for the FoodHub API.

Services raise these exceptions and the HTTP layer converts them into
responses. Each exception carries the status code it maps to, so handlers
never need to branch on the exception type.
"""


class FoodHubError(Exception):
    """Base class for all errors raised by FoodHub services."""

    status_code: int = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable message returned to the caller
            detail: Optional underlying error detail (echoed for 500s)
        """
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_response_body(self) -> dict[str, str]:
        """Build the JSON body returned for this error."""
        body = {"message": self.message}
        if self.detail is not None:
            body["error"] = self.detail
        return body


class ValidationError(FoodHubError):
    """A required field is missing or malformed."""

    status_code = 400


class BadRequestError(FoodHubError):
    """The request itself is malformed (for example a bad identifier)."""

    status_code = 400


class AuthError(FoodHubError):
    """Credentials were rejected."""

    status_code = 401


class NotFoundError(FoodHubError):
    """The requested resource does not exist."""

    status_code = 404


class ConflictError(FoodHubError):
    """A unique key is already taken."""

    status_code = 409


class InternalError(FoodHubError):
    """An unexpected failure in the store or a library."""

    status_code = 500


class DocumentStoreError(InternalError):
    """The document store rejected or failed an operation."""
