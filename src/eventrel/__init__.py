"""Eventrel: Python client for the Eventrel event delivery platform.

Send events to webhook destinations with idempotency, scheduling and
batching, and manage the destinations themselves.

Quick Start:
    from eventrel import EventrelClient

    with EventrelClient("your-api-token") as client:
        # Send one event
        response = (
            client.event("user.created")
            .to("dest_billing")
            .payload({"user_id": 42, "email": "ada@example.com"})
            .with_contextual_key()
            .send()
        )

        # Send a batch
        batch = (
            client.batch("user.imported")
            .to("dest_crm")
            .tags(["bulk"])
            .add({"user_id": 1})
            .add({"user_id": 2})
            .send()
        )

        # Inspect failures
        failed = client.events.list(status="failed").get_failed_events()

Configuration:
    EVENTREL_API_TOKEN, EVENTREL_BASE_URL, EVENTREL_API_VERSION and
    EVENTREL_TIMEOUT are read by ``EventrelClient.from_settings()``.
"""

__version__ = "0.1.0"

# Client
from .client import EventrelClient

# Configuration
from .config import Settings, settings

# Context Manager
from .context import client_context, get_current_client, scoped_client

# Exceptions
from .exceptions import (
    APIError,
    ConfigurationError,
    EventrelError,
    HydrationError,
    RequestTimeoutError,
    ValidationError,
)

# Logging
from .logging import bind_context, clear_context, configure_logging, get_logger, unbind_context

# Models
from .models import (
    DeliveryStrategy,
    Destination,
    EventFiltering,
    EventStatus,
    OutboundEvent,
    Pagination,
    WebhookConfig,
    WebhookMode,
)

__all__ = [
    # Version
    "__version__",
    # Client
    "EventrelClient",
    # Configuration
    "Settings",
    "settings",
    # Context
    "client_context",
    "get_current_client",
    "scoped_client",
    # Exceptions
    "EventrelError",
    "ValidationError",
    "HydrationError",
    "APIError",
    "RequestTimeoutError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    # Models
    "OutboundEvent",
    "Destination",
    "WebhookConfig",
    "EventFiltering",
    "Pagination",
    "EventStatus",
    "WebhookMode",
    "DeliveryStrategy",
]
