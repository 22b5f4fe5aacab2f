"""Outbound event entity."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from .base import Entity, empty_list_as_dict
from .enums import EventStatus


class OutboundEvent(Entity):
    """An event queued for, or delivered to, a destination.

    Attributes:
        uuid: Unique identifier assigned by the API.
        idempotency_key: Key the event was deduplicated under, if any.
        event_type: Dot-namespaced type, e.g. "user.created".
        payload: Arbitrary event data.
        status: Delivery status.
        tags: Ordered tags attached to the event.
        batch: Batch identifier when sent as part of a batch.
        failure_reason: Why delivery failed (failed events only).
        cancel_reason: Why the event was cancelled (cancelled events only).
        retry_count: Number of delivery retries so far.
        scheduled_at: Requested delivery time for scheduled events.
        last_attempted_at: Time of the most recent delivery attempt.
        delivered_at: Delivery time (delivered events only).
        cancelled_at: Cancellation time (cancelled events only).
        metadata: Extra server-side metadata.
    """

    uuid: str = Field(min_length=1)
    idempotency_key: str | None = None
    event_type: str = Field(min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)
    status: EventStatus
    tags: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    batch: str | None = None
    failure_reason: str | None = None
    cancel_reason: str | None = None
    retry_count: int | None = None
    scheduled_at: datetime | None = None
    last_attempted_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("payload", mode="before")
    @classmethod
    def _payload_map(cls, value: Any) -> Any:
        return empty_list_as_dict(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @model_validator(mode="after")
    def _status_fields_consistent(self) -> OutboundEvent:
        """Terminal-state fields may only accompany their own status."""
        if self.failure_reason is not None and self.status is not EventStatus.FAILED:
            raise ValueError(f"failure_reason set on a {self.status.value} event")
        if self.status is not EventStatus.CANCELLED and (
            self.cancel_reason is not None or self.cancelled_at is not None
        ):
            raise ValueError(f"cancellation fields set on a {self.status.value} event")
        if self.delivered_at is not None and self.status is not EventStatus.DELIVERED:
            raise ValueError(f"delivered_at set on a {self.status.value} event")
        return self

    def is_scheduled(self) -> bool:
        return self.scheduled_at is not None

    def is_final(self) -> bool:
        return self.status.is_final()

    def can_retry(self) -> bool:
        return self.status.can_retry()

    def can_cancel(self) -> bool:
        return self.status.can_cancel()

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


__all__ = ["OutboundEvent"]
