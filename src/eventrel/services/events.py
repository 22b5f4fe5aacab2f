"""Event endpoints: create, fetch, list, retry and cancel."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from eventrel.builders import BatchEventBuilder, EventBuilder
from eventrel.exceptions import ValidationError
from eventrel.helpers import batch_body, compact, event_body, format_timestamp
from eventrel.models import EventStatus
from eventrel.responses import (
    BatchEventResponse,
    BulkRetryResponse,
    EventListResponse,
    EventResponse,
)

if TYPE_CHECKING:
    from eventrel.client import EventrelClient

logger = logging.getLogger(__name__)


class EventService:
    """Typed access to ``/events``.

    Every call issues exactly one HTTP request through the owning client.
    Creation calls always carry an ``X-Idempotency-Key`` header; a random
    key is generated when none is given.
    """

    def __init__(self, client: EventrelClient) -> None:
        self._client = client

    def builder(self, event_type: str = "") -> EventBuilder:
        return EventBuilder(self._client, event_type)

    def batch(self, event_type: str = "") -> BatchEventBuilder:
        return BatchEventBuilder(self._client, event_type)

    def create(
        self,
        event_type: str,
        payload: Mapping[str, Any] | None = None,
        destination: str | None = None,
        tags: Iterable[str] = (),
        idempotency_key: str | None = None,
        scheduled_at: datetime | None = None,
    ) -> EventResponse:
        """Create a single event.

        Args:
            event_type: Event name, e.g. "user.created".
            payload: Event data.
            destination: Target destination identifier.
            tags: Free-form labels.
            idempotency_key: Key sent in ``X-Idempotency-Key``.
            scheduled_at: Deliver at this time instead of immediately.

        Returns:
            EventResponse wrapping the created event.

        Raises:
            ValidationError: If ``event_type`` is empty.
            APIError: If the request fails.
        """
        if not event_type:
            raise ValidationError("event_type", "Event type is required")

        key = idempotency_key or self._client.idempotency.generate()
        body = event_body(
            event_type,
            payload or {},
            tags=tags,
            destination=destination,
            scheduled_at=scheduled_at,
        )
        logger.debug("Creating %s event for destination %s", event_type, destination)
        response = self._client.request("POST", "events", json=body, idempotency_key=key)
        return EventResponse(response)

    def create_many(
        self,
        event_type: str,
        events: Iterable[Mapping[str, Any]],
        destination: str | None = None,
        tags: Iterable[str] = (),
        idempotency_key: str | None = None,
        scheduled_at: datetime | None = None,
    ) -> BatchEventResponse:
        """Create a batch of events sharing one type and destination.

        Args:
            event_type: Event name shared by the batch.
            events: ``{"payload": {...}, "tags": [...]}`` records, in order.
            destination: Target destination identifier.
            tags: Batch-level tags.
            idempotency_key: Key sent in ``X-Idempotency-Key``.
            scheduled_at: Deliver the whole batch at this time.

        Raises:
            ValidationError: If ``event_type`` is empty or ``events`` is empty.
            APIError: If the request fails.
        """
        if not event_type:
            raise ValidationError("event_type", "Event type is required")
        records = list(events)
        if not records:
            raise ValidationError("events", "Batch must contain at least one event")

        key = idempotency_key or self._client.idempotency.generate()
        body = batch_body(
            event_type,
            records,
            tags=tags,
            destination=destination,
            scheduled_at=scheduled_at,
        )
        logger.debug("Creating batch of %d %s events", len(records), event_type)
        response = self._client.request("POST", "events", json=body, idempotency_key=key)
        return BatchEventResponse(response)

    def get(self, uuid: str) -> EventResponse:
        response = self._client.request("GET", f"events/{_require_uuid(uuid)}")
        return EventResponse(response)

    def list(
        self,
        page: int = 1,
        per_page: int = 15,
        status: EventStatus | str | None = None,
        event_type: str | None = None,
        tags: Iterable[str] | None = None,
        from_date: datetime | str | None = None,
        to_date: datetime | str | None = None,
        destination: str | None = None,
        idempotency_key: str | None = None,
    ) -> EventListResponse:
        """List events, newest first, one page at a time.

        Tags are sent comma-separated. Datetimes are sent as ISO 8601 UTC.
        """
        params = compact(
            {
                "page": page,
                "per_page": per_page,
                "status": status.value if isinstance(status, EventStatus) else status,
                "event_type": event_type,
                "tags": ",".join(tags) if tags else None,
                "from_date": _query_date(from_date),
                "to_date": _query_date(to_date),
                "destination": destination,
                "idempotency_key": idempotency_key,
            }
        )
        response = self._client.request("GET", "events", params=params)
        return EventListResponse(response)

    def retry(self, uuid: str) -> EventResponse:
        """Ask the server to redeliver a failed event."""
        response = self._client.request("POST", f"events/{_require_uuid(uuid)}/retry")
        return EventResponse(response)

    def retry_many(self, uuids: Iterable[str]) -> BulkRetryResponse:
        """Retry several events in one request.

        Raises:
            ValidationError: If no UUIDs are given.
        """
        ids = [_require_uuid(uuid) for uuid in uuids]
        if not ids:
            raise ValidationError("events", "At least one event UUID is required")
        response = self._client.request("POST", "events/retry", json={"events": ids})
        return BulkRetryResponse(response)

    def cancel(self, uuid: str, reason: str | None = None) -> EventResponse:
        """Cancel a pending or scheduled event."""
        response = self._client.request(
            "POST",
            f"events/{_require_uuid(uuid)}/cancel",
            json={"reason": reason},
        )
        return EventResponse(response)


def _require_uuid(uuid: str) -> str:
    if not uuid:
        raise ValidationError("uuid", "Event UUID is required")
    return uuid


def _query_date(value: datetime | str | None) -> str | None:
    if isinstance(value, datetime):
        return format_timestamp(value)
    return value


__all__ = ["EventService"]
