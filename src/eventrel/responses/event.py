"""Responses returned by the event endpoints."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from typing import Any

from eventrel.models import EventStatus, OutboundEvent

from .base import (
    BaseResponse,
    EventCollectionMixin,
    PaginatedResponse,
    require_mapping,
    summarize_event,
)


class EventResponse(BaseResponse):
    """A single event, from create/get/retry/cancel.

    The event is read from ``data.outbound_event``.

    Raises:
        HydrationError: If the body carries no valid event.
    """

    event: OutboundEvent

    def _parse(self) -> None:
        data = require_mapping(self.data, "OutboundEvent", "outbound_event")
        self.event = OutboundEvent.hydrate(data.get("outbound_event"))

    def get_details(self) -> OutboundEvent:
        return self.event

    @property
    def id(self) -> str:
        return self.event.uuid

    @property
    def event_type(self) -> str:
        return self.event.event_type

    @property
    def status(self) -> EventStatus:
        return self.event.status

    @property
    def payload(self) -> dict[str, Any]:
        return self.event.payload

    @property
    def tags(self) -> list[str]:
        return self.event.tags

    @property
    def failure_reason(self) -> str | None:
        return self.event.failure_reason

    @property
    def cancellation_reason(self) -> str | None:
        return self.event.cancel_reason

    @property
    def retry_count(self) -> int:
        return self.event.retry_count or 0

    @property
    def scheduled_at(self) -> datetime | None:
        return self.event.scheduled_at

    @property
    def last_attempted_at(self) -> datetime | None:
        return self.event.last_attempted_at

    @property
    def delivered_at(self) -> datetime | None:
        return self.event.delivered_at

    @property
    def cancelled_at(self) -> datetime | None:
        return self.event.cancelled_at

    @property
    def created_at(self) -> datetime:
        return self.event.created_at

    @property
    def updated_at(self) -> datetime:
        return self.event.updated_at

    def is_scheduled(self) -> bool:
        return self.event.is_scheduled()

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.event.model_dump(mode="json"),
            "id": self.id,
            "retry_count": self.retry_count,
            **super().to_dict(),
        }


class BatchEventResponse(EventCollectionMixin, BaseResponse):
    """Summary of a batch create.

    Reads ``data.batch``, ``data.total_events`` and ``data.outbound_events``.
    """

    def _parse(self) -> None:
        data = require_mapping(self.data, "OutboundEvent", "batch")
        self.batch_id: str = data.get("batch") or ""
        self.events = OutboundEvent.hydrate_many(data.get("outbound_events"))
        self.total_events: int = int(data.get("total_events") or 0)

    def _expected_total(self) -> int:
        return self.total_events

    def get_batch_id(self) -> str:
        return self.batch_id

    def get_total_events(self) -> int:
        return self.total_events

    def get_event(self, identifier: int | str) -> OutboundEvent | None:
        """Look an event up by position (int) or UUID (str)."""
        if isinstance(identifier, int):
            return self.get_event_by_index(identifier)
        return self.get_event_by_uuid(identifier)

    def get_event_by_index(self, index: int) -> OutboundEvent | None:
        if 0 <= index < len(self.events):
            return self.events[index]
        return None

    def first(self) -> OutboundEvent | None:
        return self.events[0] if self.events else None

    def last(self) -> OutboundEvent | None:
        return self.events[-1] if self.events else None

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[OutboundEvent]:
        return iter(self.events)

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "total_events": self.total_events,
            "events": [summarize_event(event) for event in self.events],
            **super().to_dict(),
        }


class BulkRetryResponse(EventCollectionMixin, BaseResponse):
    """Result of retrying several events at once.

    Reads ``data.retried_count`` and ``data.outbound_events``; the
    overall outcome is in the top-level ``status`` field.
    """

    def _parse(self) -> None:
        data = require_mapping(self.data, "OutboundEvent", "retried_count")
        self.retried_count: int = int(data.get("retried_count") or 0)
        self.events = OutboundEvent.hydrate_many(data.get("outbound_events"))
        self.status: str = self.content.get("status", "unknown")

    def _expected_total(self) -> int:
        return self.retried_count

    def get_retried_count(self) -> int:
        return self.retried_count

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[OutboundEvent]:
        return iter(self.events)

    def to_dict(self) -> dict[str, Any]:
        return {
            "retried_count": self.retried_count,
            "status": self.status,
            "events": [summarize_event(event) for event in self.events],
            **super().to_dict(),
        }


class EventListResponse(EventCollectionMixin, PaginatedResponse[OutboundEvent]):
    """One page of events from ``GET /events``."""

    items_key = "outbound_events"

    def _hydrate_items(self, raw_items: Any) -> list[OutboundEvent]:
        return OutboundEvent.hydrate_many(raw_items)

    @property
    def events(self) -> list[OutboundEvent]:  # type: ignore[override]
        return self.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "events": [summarize_event(event) for event in self.items],
            "pagination": self.get_pagination_meta(),
            "status": self.status,
            **super().to_dict(),
        }


__all__ = [
    "BatchEventResponse",
    "BulkRetryResponse",
    "EventListResponse",
    "EventResponse",
]
