"""Context-scoped current client.

Lets application code reach a configured ``EventrelClient`` without
threading it through every call, while keeping each thread or task
isolated.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from eventrel.client import EventrelClient
from eventrel.config import Settings
from eventrel.logging import bind_context, get_logger, unbind_context

_client_context: ContextVar[EventrelClient | None] = ContextVar("eventrel_client", default=None)

_LOG_KEYS = ("eventrel_base_url", "eventrel_api_version")


def get_current_client() -> EventrelClient | None:
    """Get the client bound to the current context.

    Returns:
        The current EventrelClient, or None outside ``client_context``/``scoped_client``.

    Example:
        ```python
        def notify_signup(user_id: int) -> None:
            client = get_current_client()
            if client is not None:
                client.event("user.created").to("dest_crm").with_value("user_id", user_id).send()
        ```
    """
    return _client_context.get()


@contextmanager
def client_context(
    settings: Settings | None = None,
    **overrides: Any,
) -> Iterator[EventrelClient]:
    """Create a client from settings, bind it to the context, close it on exit.

    Args:
        settings: Optional settings. Reads ``EVENTREL_*`` from the environment if None.
        **overrides: Constructor arguments that take precedence over settings.

    Yields:
        The new EventrelClient.

    Raises:
        ConfigurationError: If no API token is available.

    Example:
        ```python
        with client_context(timeout=10) as client:
            client.event("order.paid").to("dest_ledger").payload(order).send()
        ```
    """
    if settings is None:
        settings = Settings()

    client = EventrelClient.from_settings(settings, **overrides)
    bind_context(eventrel_base_url=client.base_url, eventrel_api_version=client.api_version)
    token = _client_context.set(client)

    logger = get_logger(__name__)
    logger.debug("Eventrel client context opened", base_url=client.base_url)

    try:
        yield client
    finally:
        _client_context.reset(token)
        client.close()
        unbind_context(*_LOG_KEYS)
        logger.debug("Eventrel client context closed")


@contextmanager
def scoped_client(client: EventrelClient) -> Iterator[EventrelClient]:
    """Bind an existing client to the current context without closing it.

    Use this when the client's lifetime is managed elsewhere (for example
    by a web framework's dependency injection).
    """
    bind_context(eventrel_base_url=client.base_url, eventrel_api_version=client.api_version)
    token = _client_context.set(client)

    try:
        yield client
    finally:
        _client_context.reset(token)
        unbind_context(*_LOG_KEYS)


__all__ = ["client_context", "get_current_client", "scoped_client"]
