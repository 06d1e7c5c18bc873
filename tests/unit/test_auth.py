"""Unit tests for password hashing and API key checks."""

import pytest
from fastapi import HTTPException

from foodhub_api.auth.api_dependencies import check_api_key_header
from foodhub_api.auth.api_key_validator import APIKeyValidator
from foodhub_api.auth.passwords import hash_password, verify_password


@pytest.mark.unit
class TestPasswords:
    """Test suite for bcrypt password hashing."""

    def test_hash_uses_cost_factor_10(self) -> None:
        hashed = hash_password("secret")

        assert hashed.startswith("$2b$10$")
        assert "secret" not in hashed

    def test_hashes_are_salted(self) -> None:
        """Test that the same password hashes differently each time."""
        assert hash_password("secret") != hash_password("secret")

    def test_verify_password(self) -> None:
        hashed = hash_password("secret")

        assert verify_password("secret", hashed) is True
        assert verify_password("Secret", hashed) is False

    def test_verify_malformed_hash_is_mismatch(self) -> None:
        assert verify_password("secret", "not-a-bcrypt-hash") is False


@pytest.mark.unit
class TestAPIKeyValidator:
    """Test suite for APIKeyValidator."""

    def test_disabled_without_keys(self) -> None:
        """Test that an empty key list leaves the endpoint open."""
        validator = APIKeyValidator(api_keys=[])

        assert validator.enabled is False
        assert validator.validate(None) is True
        assert validator.validate("anything") is True

    def test_blank_keys_are_ignored(self) -> None:
        validator = APIKeyValidator(api_keys=["", ""])

        assert validator.enabled is False

    def test_validate_with_multiple_keys(self) -> None:
        validator = APIKeyValidator(api_keys=["key1", "key2"])

        assert validator.enabled is True
        assert validator.validate("key1") is True
        assert validator.validate("key2") is True
        assert validator.validate("key3") is False
        assert validator.validate("") is False

    def test_validate_is_case_sensitive(self) -> None:
        validator = APIKeyValidator(api_keys=["TestKey123"])

        assert validator.validate("TestKey123") is True
        assert validator.validate("testkey123") is False

    def test_validate_does_not_strip_whitespace(self) -> None:
        validator = APIKeyValidator(api_keys=["key"])

        assert validator.validate(" key") is False


@pytest.mark.unit
class TestCheckAPIKeyHeader:
    """Test suite for the X-API-Key dependency."""

    def test_open_when_no_validator(self) -> None:
        assert check_api_key_header(x_api_key=None, validator=None) is None

    def test_open_when_validator_disabled(self) -> None:
        assert check_api_key_header(x_api_key=None, validator=APIKeyValidator()) is None

    def test_returns_key_when_valid(self) -> None:
        validator = APIKeyValidator(api_keys=["valid-key"])

        assert check_api_key_header(x_api_key="valid-key", validator=validator) == "valid-key"

    def test_raises_401_when_missing(self) -> None:
        validator = APIKeyValidator(api_keys=["valid-key"])

        with pytest.raises(HTTPException) as exc_info:
            check_api_key_header(x_api_key=None, validator=validator)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Missing API key"

    def test_raises_401_when_invalid(self) -> None:
        validator = APIKeyValidator(api_keys=["valid-key"])

        with pytest.raises(HTTPException) as exc_info:
            check_api_key_header(x_api_key="wrong", validator=validator)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid API key"
