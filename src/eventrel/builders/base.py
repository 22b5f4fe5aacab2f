"""Shared state for the event builders.

Single-event and batch builders can both carry an idempotency key and an
optional delivery time, so both live here. Destinations are neither
scheduled nor deduplicated and have their own builder.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from eventrel.client import EventrelClient


def utcnow() -> datetime:
    return datetime.now(UTC)


class RequestBuilder(ABC):
    """Base class for builders that end in a single API call.

    Args:
        client: Client used to send the request and derive keys.
        clock: Returns the current time. Defaults to the client's clock.
    """

    def __init__(
        self,
        client: EventrelClient,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._clock = clock or getattr(client, "clock", None) or utcnow
        self._idempotency_key: str | None = None
        self._scheduled_at: datetime | None = None

    # Idempotency

    def idempotency_key(self, key: str) -> Self:
        """Use an explicit idempotency key."""
        self._idempotency_key = key
        return self

    def with_unique_key(self) -> Self:
        """Attach a fresh random key (``evt_`` prefix)."""
        self._idempotency_key = self._client.idempotency.generate()
        return self

    def with_contextual_key(self, context: Mapping[str, Any] | None = None) -> Self:
        """Attach a key derived from ``context``.

        Without a context the builder's own request fields are used, so two
        builders configured the same way produce the same key.
        """
        if context is None:
            context = self._key_context()
        self._idempotency_key = self._client.idempotency.generate_contextual(context)
        return self

    def get_idempotency_key(self) -> str:
        """Return the key, generating a random one on first use."""
        if not self._idempotency_key:
            self._idempotency_key = self._client.idempotency.generate()
        return self._idempotency_key

    @abstractmethod
    def _key_context(self) -> dict[str, Any]:
        """Request fields hashed by ``with_contextual_key()``."""
        ...

    # Scheduling

    def schedule_at(self, when: datetime) -> Self:
        """Deliver at ``when``. Naive datetimes are read as UTC."""
        if when.tzinfo is None:
            when = when.replace(tzinfo=UTC)
        self._scheduled_at = when
        return self

    def schedule_in(self, seconds: float) -> Self:
        return self.schedule_at(self._clock() + timedelta(seconds=seconds))

    def schedule_in_minutes(self, minutes: float) -> Self:
        return self.schedule_at(self._clock() + timedelta(minutes=minutes))

    def schedule_in_hours(self, hours: float) -> Self:
        return self.schedule_at(self._clock() + timedelta(hours=hours))

    def get_scheduled_at(self) -> datetime | None:
        return self._scheduled_at


__all__ = ["RequestBuilder", "utcnow"]
