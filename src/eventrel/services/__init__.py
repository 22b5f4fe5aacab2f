"""Service layer: one class per API resource, plus key derivation."""

from .destinations import DestinationService
from .events import EventService
from .idempotency import IdempotencyService

__all__ = ["DestinationService", "EventService", "IdempotencyService"]
