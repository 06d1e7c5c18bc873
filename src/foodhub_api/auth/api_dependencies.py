"""FastAPI dependencies for API key checks."""

from typing import Annotated

from fastapi import Header, HTTPException

from foodhub_api.auth.api_key_validator import APIKeyValidator


def check_api_key_header(
    x_api_key: Annotated[str | None, Header()] = None,
    validator: APIKeyValidator | None = None,
) -> str | None:
    """Check the X-API-Key header against the configured validator.

    Args:
        x_api_key: API key from X-API-Key header (injected by FastAPI)
        validator: Validator for the endpoint; None or disabled means open

    Returns:
        The presented key (None when the endpoint is open and no key was sent)

    Raises:
        HTTPException: 401 if keys are configured and the header is missing or wrong
    """
    if validator is None or not validator.enabled:
        return x_api_key

    if not x_api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    if not validator.validate(x_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    return x_api_key
