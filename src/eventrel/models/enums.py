"""Closed value sets used on the wire."""

from __future__ import annotations

from enum import Enum


class EventStatus(str, Enum):
    """Delivery status of an outbound event.

    ``pending`` and ``processing`` are non-terminal; ``delivered``,
    ``failed`` and ``cancelled`` are terminal.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    DELIVERED = "delivered"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'Delivered'."""
        return self.value.capitalize()

    def is_final(self) -> bool:
        """Check if the status is terminal."""
        return self in _FINAL_STATUSES

    def can_retry(self) -> bool:
        """Only failed events may be retried through the retry endpoints."""
        return self is EventStatus.FAILED

    def can_cancel(self) -> bool:
        """Only events that have not reached a terminal state may be cancelled."""
        return not self.is_final()

    def can_transition_to(self, other: EventStatus) -> bool:
        """Check whether moving from this status to ``other`` moves forward.

        Terminal states never transition; ``processing`` cannot go back to
        ``pending``.
        """
        if self.is_final():
            return False
        if self is EventStatus.PROCESSING:
            return other is not EventStatus.PENDING
        return True

    @classmethod
    def parse(cls, value: EventStatus | str) -> EventStatus | None:
        """Look up a status by wire value, returning None for unknown strings."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


_FINAL_STATUSES = frozenset({EventStatus.DELIVERED, EventStatus.FAILED, EventStatus.CANCELLED})


class WebhookMode(str, Enum):
    """Which directions a destination supports."""

    BIDIRECTIONAL = "bidirectional"  # send and receive
    OUTBOUND = "outbound"  # send only
    INBOUND = "inbound"  # receive only

    def can_send(self) -> bool:
        return self in (WebhookMode.BIDIRECTIONAL, WebhookMode.OUTBOUND)

    def can_receive(self) -> bool:
        return self in (WebhookMode.BIDIRECTIONAL, WebhookMode.INBOUND)


class DeliveryStrategy(str, Enum):
    """How the server groups events when delivering to a destination."""

    IMMEDIATE = "immediate"
    BATCHED = "batched"
    SCHEDULED = "scheduled"

    @property
    def label(self) -> str:
        """Display label, e.g. 'Batched Delivery'."""
        return f"{self.value.capitalize()} Delivery"


__all__ = [
    "DeliveryStrategy",
    "EventStatus",
    "WebhookMode",
]
