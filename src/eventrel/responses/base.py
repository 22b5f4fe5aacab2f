"""Base response wrapper shared by every endpoint.

Every API response uses the same envelope:

    {"success": bool, "data": {...} | [...], "errors": [...],
     "status_code": int, "message": "..."}

``BaseResponse`` decodes that envelope once; subclasses hydrate the
endpoint-specific entities in ``_parse()``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Generic, TypeVar

import httpx

from eventrel.exceptions import HydrationError
from eventrel.models import EventStatus, OutboundEvent, Pagination

IDEMPOTENCY_HEADER = "X-Idempotency-Key"

T = TypeVar("T")


class BaseResponse:
    """Decoded API envelope.

    Attributes:
        raw_response: The underlying ``httpx.Response``.
        content: Full decoded JSON body (empty dict for empty/non-object bodies).
        data: The ``data`` member of the envelope.
        errors: Structured error list.
        success: Success flag reported by the API.
        status_code: Status code echoed in the body, or the HTTP status.
        headers: Response headers.
        message: Human-readable message, if any.
        idempotency_key: Key from the response header, else from ``data``.
    """

    def __init__(self, response: httpx.Response) -> None:
        self.raw_response = response
        self.content: dict[str, Any] = _decode(response)
        data = self.content.get("data")
        # An empty list page is still a list page.
        self.data: Any = {} if data is None else data
        self.errors: list[Any] = self.content.get("errors") or []
        self.success: bool = bool(self.content.get("success", False))
        self.status_code: int = int(self.content.get("status_code") or response.status_code)
        self.headers: httpx.Headers = response.headers
        self.message: str | None = self._data_get("message") or self.content.get("message")
        self.idempotency_key: str | None = response.headers.get(
            IDEMPOTENCY_HEADER
        ) or self._data_get("idempotency_key")
        self._parse()

    def _parse(self) -> None:
        """Hydrate endpoint-specific entities. Override in subclasses."""

    def _data_get(self, key: str, default: Any = None) -> Any:
        if isinstance(self.data, dict):
            return self.data.get(key, default)
        return default

    def is_success(self) -> bool:
        return self.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "status_code": self.status_code,
            "message": self.message,
            "errors": self.errors,
            "idempotency_key": self.idempotency_key,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, success={self.success})"


class PaginatedResponse(BaseResponse, Generic[T]):
    """Response for list endpoints.

    Items live under ``data.<items_key>`` with the page metadata next to
    them inside ``data``. When ``data`` is itself a list, the page
    metadata is read from the top level of the body instead.
    """

    items_key: str = ""

    items: list[T]
    pagination: Pagination

    def _parse(self) -> None:
        if isinstance(self.data, list):
            raw_items: Any = self.data
            meta_source = self.content
        else:
            raw_items = self.data.get(self.items_key)
            meta_source = self.data
        self.items = self._hydrate_items(raw_items)
        self.pagination = Pagination.hydrate(
            {key: value for key, value in meta_source.items() if key in _PAGINATION_KEYS}
        )
        self.status: str = self.content.get("status", "unknown")
        self.status_text: str = self.content.get("status_text", "")

    def _hydrate_items(self, raw_items: Any) -> list[T]:
        raise NotImplementedError

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def count(self) -> int:
        return len(self.items)

    @property
    def current_page(self) -> int:
        return self.pagination.current_page

    @property
    def last_page(self) -> int:
        return self.pagination.last_page

    @property
    def per_page(self) -> int:
        return self.pagination.per_page

    @property
    def total(self) -> int:
        return self.pagination.total

    def has_more_pages(self) -> bool:
        return self.pagination.has_more_pages()

    def has_previous_page(self) -> bool:
        return self.pagination.has_previous_page()

    def is_first_page(self) -> bool:
        return self.pagination.is_first_page()

    def is_last_page(self) -> bool:
        return self.pagination.is_last_page()

    def get_next_page_url(self) -> str | None:
        return self.pagination.next_page_url

    def get_previous_page_url(self) -> str | None:
        return self.pagination.prev_page_url

    def get_pagination_meta(self) -> dict[str, Any]:
        return self.pagination.to_meta()


class EventCollectionMixin:
    """Filtering helpers over a list of hydrated events.

    Classes using the mixin expose ``events`` and may override
    ``_expected_total()`` when the API reports a count of its own.
    """

    events: list[OutboundEvent]

    def _expected_total(self) -> int:
        return len(self.events)

    def get_events(self) -> list[OutboundEvent]:
        return list(self.events)

    def get_event_by_uuid(self, uuid: str) -> OutboundEvent | None:
        """First event with the given UUID, or None."""
        return next((event for event in self.events if event.uuid == uuid), None)

    def get_events_by_status(self, status: EventStatus | str) -> list[OutboundEvent]:
        """Events with an exact status; unknown status strings match nothing."""
        wanted = EventStatus.parse(status)
        if wanted is None:
            return []
        return [event for event in self.events if event.status is wanted]

    def get_events_by_tag(self, tag: str) -> list[OutboundEvent]:
        return [event for event in self.events if event.has_tag(tag)]

    def count_by_status(self, status: EventStatus | str) -> int:
        return len(self.get_events_by_status(status))

    def get_pending_events(self) -> list[OutboundEvent]:
        return self.get_events_by_status(EventStatus.PENDING)

    def get_delivered_events(self) -> list[OutboundEvent]:
        return self.get_events_by_status(EventStatus.DELIVERED)

    def get_failed_events(self) -> list[OutboundEvent]:
        return self.get_events_by_status(EventStatus.FAILED)

    def has_failures(self) -> bool:
        return self.count_by_status(EventStatus.FAILED) > 0

    def is_all_pending(self) -> bool:
        total = self._expected_total()
        return total > 0 and self.count_by_status(EventStatus.PENDING) == total

    def is_all_delivered(self) -> bool:
        total = self._expected_total()
        return total > 0 and self.count_by_status(EventStatus.DELIVERED) == total


def summarize_event(event: OutboundEvent) -> dict[str, Any]:
    """Compact JSON-friendly view of an event used by ``to_dict()``."""
    return event.model_dump(
        mode="json",
        include={
            "uuid",
            "event_type",
            "status",
            "payload",
            "tags",
            "retry_count",
            "failure_reason",
            "scheduled_at",
            "created_at",
            "updated_at",
        },
    )


def require_mapping(value: Any, entity: str, key: str) -> dict[str, Any]:
    """Return ``value`` if it is a JSON object, else raise HydrationError."""
    if not isinstance(value, dict):
        raise HydrationError(entity, f"response data has no '{key}' object")
    return value


def _decode(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    try:
        content = response.json()
    except ValueError as e:
        raise HydrationError("response", f"body is not valid JSON: {e}") from e
    return content if isinstance(content, dict) else {"data": content}


_PAGINATION_KEYS = frozenset(
    {
        "current_page",
        "last_page",
        "per_page",
        "total",
        "from",
        "to",
        "first_page_url",
        "last_page_url",
        "next_page_url",
        "prev_page_url",
        "path",
        "links",
    }
)
