"""Eventrel exception hierarchy.

Provides structured exceptions for error handling throughout the client.
All exceptions inherit from EventrelError, so callers can tell errors raised
by this library apart from any other runtime error with one except clause.
"""

from __future__ import annotations

from typing import Any


class EventrelError(Exception):
    """Base exception for all Eventrel client errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
    """

    code: str = "eventrel_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ValidationError(EventrelError):
    """Invalid input provided.

    Raised locally, before any network call, when a builder or service
    receives a missing or malformed value.

    Attributes:
        field: The field that failed validation.
        message: Description of the validation failure.
    """

    code: str = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "field": self.field,
                "message": self.message,
            }
        }


class HydrationError(EventrelError):
    """A response body could not be turned into an entity.

    Indicates a mismatch between the API contract and what the server
    returned (missing required fields, unknown enum values, wrong types).

    Attributes:
        entity: Name of the entity being built (e.g. "OutboundEvent").
        errors: Structured error details, usually from pydantic.
    """

    code: str = "hydration_error"

    def __init__(
        self,
        entity: str,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.entity = entity
        self.errors = errors or []
        super().__init__(f"Could not hydrate {entity}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "entity": self.entity,
                "message": self.message,
                "details": self.errors,
            }
        }


class APIError(EventrelError):
    """The HTTP request failed or the API answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code, or None when no response was received.
        idempotency_key: Idempotency key sent with the request, if any.
        body: Decoded response body, if one could be decoded.
    """

    code: str = "api_error"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        idempotency_key: str | None = None,
        body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.idempotency_key = idempotency_key
        self.body = body
        if idempotency_key:
            message = f"{message} [idempotency key: {idempotency_key}]"
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code,
                "status_code": self.status_code,
                "idempotency_key": self.idempotency_key,
                "message": self.message,
            }
        }


class RequestTimeoutError(APIError):
    """The request did not complete within the configured timeout."""

    code: str = "request_timeout"


class ConfigurationError(EventrelError):
    """Configuration error.

    Raised when required configuration (such as the API token) is missing
    or invalid.
    """

    code: str = "configuration_error"
