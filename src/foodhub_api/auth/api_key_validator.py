"""API key validation for write endpoints that are otherwise open.

Notification creation has no user-level authorization. Operators can
restrict it by configuring API keys; with no keys configured the validator
is disabled and every request passes.
"""

import hmac


class APIKeyValidator:
    """Validates API keys against a configured set.

    An empty key list disables validation rather than locking the
    endpoint.
    """

    def __init__(self, api_keys: list[str] | None = None) -> None:
        """Initialize validator.

        Args:
            api_keys: Valid API key strings; blank entries are ignored
        """
        self.api_keys = {key for key in (api_keys or []) if key}

    @property
    def enabled(self) -> bool:
        """Whether any key is configured."""
        return bool(self.api_keys)

    def validate(self, api_key: str | None) -> bool:
        """Validate an API key.

        Args:
            api_key: The API key presented by the caller

        Returns:
            bool: True if validation is disabled or the key matches
        """
        if not self.enabled:
            return True
        if not api_key:
            return False
        return any(hmac.compare_digest(api_key, key) for key in self.api_keys)
