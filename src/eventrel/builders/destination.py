"""Fluent builder for destinations.

Example:
    ```python
    response = (
        client.destination()
        .name("Analytics")
        .webhook_url("https://analytics.example.com/webhook")
        .bidirectional()
        .with_description("Main analytics endpoint")
        .with_metadata_dict({"environment": "production", "team": "analytics"})
        .with_timeout(45)
        .with_retry_limit(5)
        .with_rate_limit(per_minute=1000, per_hour=50000)
        .with_batching(50, "batched")
        .with_event_filtering(["user.created", "order.completed"])
        .with_dead_letter_queue()
        .verify_ssl()
        .create()
    )
    ```
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Self

import validators

from eventrel.exceptions import ValidationError
from eventrel.helpers import destination_body
from eventrel.models import DeliveryStrategy, WebhookMode

if TYPE_CHECKING:
    from eventrel.client import EventrelClient
    from eventrel.responses import DestinationResponse


class DestinationBuilder:
    """Accumulates destination settings and creates the destination.

    Range checks on numeric settings happen as soon as they are set.
    Name and URL checks happen in ``build()`` / ``create()``.
    """

    def __init__(
        self,
        client: EventrelClient,
        name: str | None = None,
        webhook_url: str | None = None,
    ) -> None:
        self._client = client
        self._name = name or ""
        self._webhook_url = webhook_url or ""
        self._webhook_mode = WebhookMode.OUTBOUND
        self._description: str | None = None
        self._headers: dict[str, str] = {}
        self._metadata: dict[str, Any] = {}
        self._webhook_config: dict[str, Any] = {}
        self._timeout: int | None = None
        self._retry_limit: int | None = None
        self._rate_limit_per_minute: int | None = None
        self._rate_limit_per_hour: int | None = None
        self._rate_limit_per_day: int | None = None
        self._is_active = True

    def name(self, name: str) -> Self:
        self._name = name
        return self

    def webhook_url(self, url: str) -> Self:
        self._webhook_url = url
        return self

    # Mode. The last call wins.

    def mode(self, mode: WebhookMode | str) -> Self:
        """Set the mode from an enum member or its wire value.

        Raises:
            ValidationError: If the value is not a known mode.
        """
        try:
            self._webhook_mode = WebhookMode(mode.lower() if isinstance(mode, str) else mode)
        except ValueError as e:
            allowed = ", ".join(m.value for m in WebhookMode)
            raise ValidationError("webhook_mode", f"Must be one of: {allowed}") from e
        return self

    def bidirectional(self) -> Self:
        return self.mode(WebhookMode.BIDIRECTIONAL)

    def outbound(self) -> Self:
        return self.mode(WebhookMode.OUTBOUND)

    def inbound(self) -> Self:
        return self.mode(WebhookMode.INBOUND)

    def with_description(self, description: str) -> Self:
        self._description = description
        return self

    # Headers and metadata merge into what is already set.

    def with_header(self, name: str, value: str) -> Self:
        self._headers[name] = value
        return self

    def with_headers(self, headers: Mapping[str, str]) -> Self:
        self._headers.update(headers)
        return self

    def with_bearer_token(self, token: str) -> Self:
        return self.with_header("Authorization", f"Bearer {token}")

    def with_api_key(self, api_key: str, header_name: str = "X-API-Key") -> Self:
        return self.with_header(header_name, api_key)

    def with_metadata(self, key: str, value: Any) -> Self:
        self._metadata[key] = value
        return self

    def with_metadata_dict(self, metadata: Mapping[str, Any]) -> Self:
        self._metadata.update(metadata)
        return self

    # Delivery limits

    def with_timeout(self, seconds: int) -> Self:
        if seconds < 1:
            raise ValidationError("timeout", "Timeout must be at least 1 second")
        self._timeout = seconds
        return self

    def with_retry_limit(self, limit: int) -> Self:
        if limit < 0:
            raise ValidationError("retry_limit", "Retry limit cannot be negative")
        self._retry_limit = limit
        return self

    def with_rate_limit(
        self,
        per_minute: int | None = None,
        per_hour: int | None = None,
        per_day: int | None = None,
    ) -> Self:
        """Set all three rate-limit tiers; None means unlimited."""
        self._rate_limit_per_minute = per_minute
        self._rate_limit_per_hour = per_hour
        self._rate_limit_per_day = per_day
        return self

    def active(self) -> Self:
        self._is_active = True
        return self

    def inactive(self) -> Self:
        self._is_active = False
        return self

    # Webhook config

    def with_batching(self, size: int, strategy: DeliveryStrategy | str = "batched") -> Self:
        """Deliver ``size`` events per request using ``strategy``.

        Raises:
            ValidationError: If size is below 1 or the strategy is unknown.
        """
        if size < 1:
            raise ValidationError("batch_size", "Batch size must be at least 1")
        try:
            resolved = DeliveryStrategy(strategy)
        except ValueError as e:
            allowed = ", ".join(s.value for s in DeliveryStrategy)
            raise ValidationError("delivery_strategy", f"Must be one of: {allowed}") from e
        self._webhook_config["batch_size"] = size
        self._webhook_config["delivery_strategy"] = resolved.value
        return self

    def with_event_filtering(self, allowed_events: Iterable[str]) -> Self:
        self._webhook_config["event_filtering"] = {
            "enabled": True,
            "allowed_events": list(allowed_events),
        }
        return self

    def without_event_filtering(self) -> Self:
        self._webhook_config["event_filtering"] = {"enabled": False, "allowed_events": None}
        return self

    def verify_ssl(self) -> Self:
        self._webhook_config["verify_ssl"] = True
        return self

    def skip_ssl_verification(self) -> Self:
        """Turn off certificate checks. Development only."""
        self._webhook_config["verify_ssl"] = False
        return self

    def with_dead_letter_queue(self) -> Self:
        self._webhook_config["dead_letter_queue"] = True
        return self

    def without_dead_letter_queue(self) -> Self:
        self._webhook_config["dead_letter_queue"] = False
        return self

    def follow_redirects(self) -> Self:
        self._webhook_config["follow_redirects"] = True
        return self

    def dont_follow_redirects(self) -> Self:
        self._webhook_config["follow_redirects"] = False
        return self

    def with_signature(self, algorithm: str = "sha256", header_name: str | None = None) -> Self:
        self._webhook_config["signature_algorithm"] = algorithm
        if header_name is not None:
            self._webhook_config["signature_header"] = header_name
        return self

    def with_timestamp_tolerance(self, seconds: int) -> Self:
        if seconds < 0:
            raise ValidationError("timestamp_tolerance", "Timestamp tolerance cannot be negative")
        self._webhook_config["timestamp_tolerance"] = seconds
        return self

    def include_headers_in_payload(self) -> Self:
        self._webhook_config["include_headers"] = True
        return self

    def with_webhook_config(self, config: Mapping[str, Any]) -> Self:
        """Merge raw webhook config keys not covered by the other setters."""
        self._webhook_config.update(config)
        return self

    # Presets

    def production_preset(self) -> Self:
        """SSL on, dead-letter queue, batches of 50, 5 retries, 45s timeout, sha256."""
        return (
            self.verify_ssl()
            .with_dead_letter_queue()
            .with_batching(50, DeliveryStrategy.BATCHED)
            .with_retry_limit(5)
            .with_timeout(45)
            .with_signature("sha256")
            .with_timestamp_tolerance(300)
            .follow_redirects()
        )

    def development_preset(self) -> Self:
        """SSL off, immediate delivery, 3 retries, 120s timeout, no dead-letter queue."""
        return (
            self.skip_ssl_verification()
            .with_retry_limit(3)
            .with_timeout(120)
            .with_webhook_config({"delivery_strategy": DeliveryStrategy.IMMEDIATE.value})
            .without_dead_letter_queue()
        )

    # Output

    def build(self) -> dict[str, Any]:
        """Validate and return the request body without creating anything.

        Raises:
            ValidationError: If the name or URL is missing, or the URL is malformed.
        """
        self._validate()
        return destination_body(**self._fields())

    def create(self) -> DestinationResponse:
        """Validate, then create the destination through the API."""
        self._validate()
        return self._client.destinations.create(**self._fields())

    def _fields(self) -> dict[str, Any]:
        return {
            "name": self._name,
            "webhook_url": self._webhook_url,
            "webhook_mode": self._webhook_mode.value,
            "description": self._description,
            "headers": dict(self._headers),
            "metadata": dict(self._metadata),
            "webhook_config": dict(self._webhook_config),
            "timeout": self._timeout,
            "retry_limit": self._retry_limit,
            "rate_limit_per_minute": self._rate_limit_per_minute,
            "rate_limit_per_hour": self._rate_limit_per_hour,
            "rate_limit_per_day": self._rate_limit_per_day,
            "is_active": self._is_active,
        }

    def _validate(self) -> None:
        if not self._name:
            raise ValidationError("name", "Destination name is required")
        if not self._webhook_url:
            raise ValidationError("webhook_url", "Webhook URL is required")
        if not is_valid_url(self._webhook_url):
            raise ValidationError("webhook_url", "Invalid webhook URL format")


def is_valid_url(url: str) -> bool:
    """Check an absolute http(s) URL. Single-label hosts such as localhost pass."""
    return bool(validators.url(url, simple_host=True))


__all__ = ["DestinationBuilder", "is_valid_url"]
