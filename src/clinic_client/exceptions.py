"""Custom exception hierarchy for the clinic API client."""

from __future__ import annotations


class ClinicClientError(Exception):
    """Base exception for all clinic_client errors."""


class ClinicAuthError(ClinicClientError):
    """Authentication failed (missing, invalid or expired token)."""


class ClinicAPIError(ClinicClientError):
    """A clinic API call returned an error response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ClinicRateLimitError(ClinicAPIError):
    """HTTP 429, too many requests."""

    def __init__(self, message: str = "Rate limited by the clinic API") -> None:
        super().__init__(message, status_code=429)


class ClinicGraphQLError(ClinicAPIError):
    """The request reached the API but the GraphQL layer reported errors."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages) or "Unknown GraphQL error", status_code=200)
        self.messages = messages
