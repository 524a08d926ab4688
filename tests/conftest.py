"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from hookline_client.config import Settings
from hookline_client.errors import CanonicalError, ErrorKind


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.API_BASE_URL = "http://custom:3000/api"
    """
    return Settings(
        # === Application ===
        APP_NAME="Hookline Client (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Backend ===
        API_BASE_URL="http://backend.test/api",
        REQUEST_DEADLINE_MS=30000,

        # === Retry ===
        RETRY_MAX_ATTEMPTS=3,
        RETRY_BASE_DELAY_MS=1000,
        RETRY_MAX_DELAY_MS=30000,
        RETRY_BACKOFF_MULTIPLIER=2.0,

        # === Redis ===
        REDIS_URL="redis://localhost:6379/0",
        REDIS_MAX_CONNECTIONS=10,
        TOKEN_STORAGE_KEY="auth_token",

        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def create_error():
    """Factory fixture to create CanonicalError with custom values.

    Usage:
        def test_something(create_error):
            error = create_error(ErrorKind.RATE_LIMITED, retryable=True)
    """
    def _create(
        kind: ErrorKind = ErrorKind.NETWORK_UNREACHABLE,
        retryable: bool = True,
        retry_after_seconds: int | None = 5,
        user_message: str = "Something went wrong.",
    ) -> CanonicalError:
        return CanonicalError(
            kind=kind,
            user_message=user_message,
            raw_message="raw failure",
            retryable=retryable,
            retry_after_seconds=retry_after_seconds,
            remediation_steps=["Try again"],
        )

    return _create
