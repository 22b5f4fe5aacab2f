"""Fluent builders for single events and event batches."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, Self

from eventrel.exceptions import ValidationError
from eventrel.helpers import batch_body, event_body, format_timestamp

from .base import RequestBuilder

if TYPE_CHECKING:
    from eventrel.client import EventrelClient
    from eventrel.responses import BatchEventResponse, EventResponse


class EventBuilder(RequestBuilder):
    """Builds and sends a single event.

    Example:
        ```python
        response = (
            client.event("user.created")
            .to("dest_billing")
            .payload({"user_id": 42})
            .with_value("plan", "pro")
            .tags(["signup"])
            .schedule_in_minutes(5)
            .send()
        )
        ```
    """

    def __init__(
        self,
        client: EventrelClient,
        event_type: str = "",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(client, clock)
        self._event_type = event_type
        self._destination: str | None = None
        self._payload: dict[str, Any] = {}
        self._tags: list[str] = []

    def event_type(self, event_type: str) -> Self:
        self._event_type = event_type
        return self

    def to(self, destination: str) -> Self:
        """Target destination identifier."""
        self._destination = destination
        return self

    def payload(self, payload: Mapping[str, Any]) -> Self:
        """Replace the whole payload."""
        self._payload = dict(payload)
        return self

    def with_value(self, key: str, value: Any) -> Self:
        """Set a single payload key."""
        self._payload[key] = value
        return self

    def with_data(self, data: Mapping[str, Any]) -> Self:
        """Merge ``data`` into the payload; later keys win."""
        self._payload.update(data)
        return self

    def tags(self, tags: Iterable[str]) -> Self:
        self._tags = list(tags)
        return self

    def get_event_type(self) -> str:
        return self._event_type

    def get_destination(self) -> str | None:
        return self._destination

    def get_payload(self) -> dict[str, Any]:
        return dict(self._payload)

    def get_tags(self) -> list[str]:
        return list(self._tags)

    def build(self) -> dict[str, Any]:
        """Validate and return the request body without sending it.

        Raises:
            ValidationError: If the destination or event type is missing.
        """
        self._validate()
        return event_body(
            self._event_type,
            self._payload,
            tags=self._tags,
            destination=self._destination,
            scheduled_at=self._scheduled_at,
        )

    def send(self) -> EventResponse:
        """Validate, then create the event.

        Raises:
            ValidationError: If the destination or event type is missing.
            APIError: If the API call fails.
        """
        self._validate()
        return self._client.events.create(
            event_type=self._event_type,
            payload=self._payload,
            destination=self._destination,
            tags=self._tags,
            idempotency_key=self.get_idempotency_key(),
            scheduled_at=self._scheduled_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Current builder state, for debugging."""
        return {
            "destination": self._destination,
            "event_type": self._event_type,
            "payload": dict(self._payload),
            "tags": list(self._tags),
            "idempotency_key": self._idempotency_key,
            "scheduled_at": format_timestamp(self._scheduled_at) if self._scheduled_at else None,
        }

    def _validate(self) -> None:
        if not self._destination:
            raise ValidationError("destination", "Destination is required before sending")
        if not self._event_type:
            raise ValidationError("event_type", "Event type is required")

    def _key_context(self) -> dict[str, Any]:
        return {
            "destination": self._destination,
            "event_type": self._event_type,
            "payload": self._payload,
            "tags": self._tags,
        }


class BatchEventBuilder(RequestBuilder):
    """Builds and sends several events of one type in a single request.

    All events share the event type, the destination and the batch-level
    tags. Each event may carry extra tags of its own.

    Example:
        ```python
        response = (
            client.batch("user.created")
            .to("dest_crm")
            .tags(["bulk-import"])
            .add({"user_id": 1}, ["premium"])
            .add({"user_id": 2})
            .send()
        )
        ```
    """

    def __init__(
        self,
        client: EventrelClient,
        event_type: str = "",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(client, clock)
        self._event_type = event_type
        self._destination: str | None = None
        self._tags: list[str] = []
        self._events: list[dict[str, Any]] = []

    def event_type(self, event_type: str) -> Self:
        self._event_type = event_type
        return self

    def to(self, destination: str) -> Self:
        self._destination = destination
        return self

    def tags(self, tags: Iterable[str]) -> Self:
        """Batch-level tags applied to every event."""
        self._tags = list(tags)
        return self

    def events(self, events: Iterable[Mapping[str, Any]]) -> Self:
        """Replace the batch with ``{"payload": ..., "tags": [...]}`` records.

        Raises:
            ValidationError: If a record has no mapping under ``payload``.
        """
        records = []
        for index, event in enumerate(events):
            if not isinstance(event, Mapping) or not isinstance(event.get("payload"), Mapping):
                raise ValidationError(f"events[{index}].payload", "Payload must be a mapping")
            records.append(_event_record(event["payload"], event.get("tags")))
        self._events = records
        return self

    def add(self, payload: Mapping[str, Any], tags: Iterable[str] | None = None) -> Self:
        """Append one event; order is kept."""
        self._events.append(_event_record(payload, tags))
        return self

    def get_event_type(self) -> str:
        return self._event_type

    def get_events(self) -> list[dict[str, Any]]:
        return [dict(event) for event in self._events]

    def count(self) -> int:
        return len(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.get_events())

    def build(self) -> dict[str, Any]:
        """Validate and return the request body without sending it.

        Raises:
            ValidationError: If the destination or event type is missing
                or the batch is empty.
        """
        self._validate()
        return batch_body(
            self._event_type,
            self._events,
            tags=self._tags,
            destination=self._destination,
            scheduled_at=self._scheduled_at,
        )

    def send(self) -> BatchEventResponse:
        self._validate()
        return self._client.events.create_many(
            event_type=self._event_type,
            events=self._events,
            destination=self._destination,
            tags=self._tags,
            idempotency_key=self.get_idempotency_key(),
            scheduled_at=self._scheduled_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self._event_type,
            "destination": self._destination,
            "tags": list(self._tags),
            "events": self.get_events(),
            "idempotency_key": self._idempotency_key,
            "scheduled_at": format_timestamp(self._scheduled_at) if self._scheduled_at else None,
        }

    def _validate(self) -> None:
        if not self._destination:
            raise ValidationError("destination", "Destination is required before sending")
        if not self._event_type:
            raise ValidationError("event_type", "Event type is required")
        if not self._events:
            raise ValidationError("events", "Batch must contain at least one event")

    def _key_context(self) -> dict[str, Any]:
        return {
            "destination": self._destination,
            "event_type": self._event_type,
            "events": self._events,
            "tags": self._tags,
        }


def _event_record(payload: Mapping[str, Any], tags: Iterable[str] | None) -> dict[str, Any]:
    record: dict[str, Any] = {"payload": dict(payload)}
    tag_list = list(tags or [])
    if tag_list:
        record["tags"] = tag_list
    return record


__all__ = ["BatchEventBuilder", "EventBuilder"]
