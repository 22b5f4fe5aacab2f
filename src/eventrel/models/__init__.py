"""Entity models for the Eventrel client.

Entities:
    - OutboundEvent: An event queued for or delivered to a destination
    - Destination: A configured webhook endpoint
    - WebhookConfig: Delivery configuration nested in a Destination
    - EventFiltering: Event type allow-list nested in WebhookConfig

Supporting Types:
    - EventStatus, WebhookMode, DeliveryStrategy: Wire enums
    - Pagination: Page metadata for list endpoints
    - Entity: Immutable base with ``hydrate()``
"""

from .base import Entity
from .destination import DEFAULT_SIGNATURE_HEADER, Destination, EventFiltering, WebhookConfig
from .enums import DeliveryStrategy, EventStatus, WebhookMode
from .event import OutboundEvent
from .pagination import Pagination

__all__ = [
    "DEFAULT_SIGNATURE_HEADER",
    "DeliveryStrategy",
    "Destination",
    "Entity",
    "EventFiltering",
    "EventStatus",
    "OutboundEvent",
    "Pagination",
    "WebhookConfig",
    "WebhookMode",
]
