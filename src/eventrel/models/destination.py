"""Destination entity and its nested delivery configuration.

A destination is a configured webhook endpoint: a URL plus the policy the
server applies when delivering to it (signatures, batching, filtering,
rate limits, retries).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import Field, field_validator

from .base import Entity, empty_list_as_dict
from .enums import DeliveryStrategy, WebhookMode

DEFAULT_SIGNATURE_HEADER = "X-Webhook-Signature"


class EventFiltering(Entity):
    """Allow-list of event types a destination accepts.

    When filtering is disabled, or no list is set, every event type is
    allowed.
    """

    enabled: bool | None = None
    allowed_events: list[str] | None = None

    def is_event_allowed(self, event_type: str) -> bool:
        """Check if an event type would be delivered to the destination."""
        if not self.enabled or self.allowed_events is None:
            return True
        return event_type in self.allowed_events

    def get_allowed_event_count(self) -> int | None:
        """Number of allowed types, or None when all types are allowed."""
        if not self.enabled or self.allowed_events is None:
            return None
        return len(self.allowed_events)


class WebhookConfig(Entity):
    """Delivery behaviour for a destination.

    Attributes:
        batch_size: Events per HTTP request when batching.
        verify_ssl: Whether the server verifies the endpoint's certificate.
        event_filtering: Event type allow-list.
        include_headers: Whether request headers are echoed into the payload.
        follow_redirects: Whether 3xx responses are followed.
        signature_header: Custom header carrying the HMAC signature.
        dead_letter_queue: Whether exhausted events go to a dead-letter queue.
        delivery_strategy: immediate, batched or scheduled.
        signature_algorithm: HMAC algorithm, e.g. "sha256".
        timestamp_tolerance: Accepted clock skew in seconds for replay protection.
    """

    batch_size: int | None = None
    verify_ssl: bool | None = None
    event_filtering: EventFiltering | None = None
    include_headers: bool | None = None
    follow_redirects: bool | None = None
    signature_header: str | None = None
    dead_letter_queue: bool | None = None
    delivery_strategy: DeliveryStrategy | None = None
    signature_algorithm: str | None = None
    timestamp_tolerance: int | None = None

    def is_batching_enabled(self) -> bool:
        """Batching is active only for a batch size greater than 1."""
        return self.batch_size is not None and self.batch_size > 1

    def has_event_filtering(self) -> bool:
        return self.event_filtering is not None and bool(self.event_filtering.enabled)

    def get_delivery_strategy_label(self) -> str:
        if self.delivery_strategy is None:
            return "Default Delivery"
        return self.delivery_strategy.label

    def is_secure(self) -> bool:
        """True when SSL certificates of the endpoint are verified."""
        return bool(self.verify_ssl)

    def has_dead_letter_queue(self) -> bool:
        return bool(self.dead_letter_queue)

    def get_security_summary(self) -> dict[str, Any]:
        return {
            "ssl_verification": self.verify_ssl,
            "signature_algorithm": self.signature_algorithm,
            "timestamp_tolerance": self.timestamp_tolerance,
            "signature_header": self.signature_header or DEFAULT_SIGNATURE_HEADER,
        }

    def get_delivery_summary(self) -> dict[str, Any]:
        return {
            "strategy": self.delivery_strategy.value if self.delivery_strategy else None,
            "batching_enabled": self.is_batching_enabled(),
            "batch_size": self.batch_size,
            "follow_redirects": self.follow_redirects,
            "dead_letter_queue": self.dead_letter_queue,
        }


class Destination(Entity):
    """A configured webhook endpoint.

    Attributes:
        uuid: Unique identifier.
        name: Human-readable name.
        slug: URL-friendly slug.
        identifier: Application identifier used to target events (app_ prefix).
        description: Optional description.
        metadata: Free-form metadata (environment, owner, ...).
        webhook_mode: bidirectional, outbound or inbound.
        webhook_url: Endpoint URL.
        webhook_secret: Signing secret (whsec_ prefix).
        inbound_token: Token for receiving inbound webhooks.
        webhook_config: Delivery configuration.
        headers: Custom headers sent with every delivery.
        timeout: Delivery timeout in seconds.
        retry_limit: Maximum delivery retries.
        rate_limit_per_minute: Requests per minute cap.
        rate_limit_per_hour: Requests per hour cap.
        rate_limit_per_day: Requests per day cap.
        is_active: Whether the destination is switched on.
        deleted_at: Soft-deletion time.
    """

    uuid: str = Field(min_length=1)
    name: str
    slug: str
    identifier: str
    description: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    webhook_mode: WebhookMode
    webhook_url: str
    webhook_secret: str
    inbound_token: str | None = None
    webhook_config: WebhookConfig | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: int | None = None
    retry_limit: int | None = None
    rate_limit_per_minute: int | None = None
    rate_limit_per_hour: int | None = None
    rate_limit_per_day: int | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @field_validator("metadata", "headers", mode="before")
    @classmethod
    def _maps(cls, value: Any) -> Any:
        return empty_list_as_dict(value)

    @field_validator("webhook_config", mode="before")
    @classmethod
    def _empty_config(cls, value: Any) -> Any:
        return None if value == [] else value

    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def is_enabled(self) -> bool:
        """Active and not soft-deleted."""
        return self.is_active and not self.is_deleted()

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)

    def has_rate_limiting(self) -> bool:
        return any(
            limit is not None and limit > 0
            for limit in (
                self.rate_limit_per_minute,
                self.rate_limit_per_hour,
                self.rate_limit_per_day,
            )
        )

    def is_bidirectional(self) -> bool:
        return self.webhook_mode is WebhookMode.BIDIRECTIONAL

    def is_outbound_only(self) -> bool:
        return self.webhook_mode is WebhookMode.OUTBOUND

    def is_inbound_only(self) -> bool:
        return self.webhook_mode is WebhookMode.INBOUND

    def can_send_events(self) -> bool:
        return self.webhook_mode.can_send()

    def can_receive_webhooks(self) -> bool:
        return self.webhook_mode.can_receive()

    def get_age(self, now: datetime | None = None) -> int:
        """Whole days since the destination was created."""
        now = now or datetime.now(UTC)
        return (now - _aware(self.created_at)).days

    def is_recently_updated(self, now: datetime | None = None) -> bool:
        """Updated within the last 24 hours."""
        now = now or datetime.now(UTC)
        return now - _aware(self.updated_at) < timedelta(hours=24)

    def get_summary(self, now: datetime | None = None) -> dict[str, Any]:
        return {
            "uuid": self.uuid,
            "identifier": self.identifier,
            "name": self.name,
            "enabled": self.is_enabled(),
            "webhook_mode": self.webhook_mode.value,
            "has_rate_limiting": self.has_rate_limiting(),
            "age_days": self.get_age(now),
            "environment": self.get_metadata("environment", "unknown"),
        }


def _aware(value: datetime) -> datetime:
    # The API sends UTC; treat naive timestamps as UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


__all__ = [
    "DEFAULT_SIGNATURE_HEADER",
    "Destination",
    "EventFiltering",
    "WebhookConfig",
]
