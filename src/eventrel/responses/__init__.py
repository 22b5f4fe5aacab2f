"""Typed wrappers around Eventrel API responses."""

from .base import IDEMPOTENCY_HEADER, BaseResponse, EventCollectionMixin, PaginatedResponse
from .destination import DestinationListResponse, DestinationResponse
from .event import BatchEventResponse, BulkRetryResponse, EventListResponse, EventResponse

__all__ = [
    "IDEMPOTENCY_HEADER",
    "BaseResponse",
    "BatchEventResponse",
    "BulkRetryResponse",
    "DestinationListResponse",
    "DestinationResponse",
    "EventCollectionMixin",
    "EventListResponse",
    "EventResponse",
    "PaginatedResponse",
]
