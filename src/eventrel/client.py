"""Eventrel API client.

``EventrelClient`` owns the HTTP transport and hands out builders and
services. It performs no retries: every call is exactly one blocking
request that either returns or raises an ``EventrelError``.

Example:
    ```python
    from eventrel import EventrelClient

    with EventrelClient("your-token") as client:
        response = (
            client.event("user.created")
            .to("dest_billing")
            .payload({"user_id": 42})
            .send()
        )
        print(response.id, response.status)
    ```
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime
from functools import cached_property
from types import TracebackType
from typing import Any, Self

import httpx

from eventrel import __version__
from eventrel.builders import BatchEventBuilder, DestinationBuilder, EventBuilder
from eventrel.builders.base import utcnow
from eventrel.config import DEFAULT_API_VERSION, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings
from eventrel.exceptions import APIError, ConfigurationError, RequestTimeoutError
from eventrel.responses import IDEMPOTENCY_HEADER
from eventrel.services import DestinationService, EventService, IdempotencyService

logger = logging.getLogger(__name__)

USER_AGENT = f"eventrel-python/{__version__}"


class EventrelClient:
    """Synchronous client for the Eventrel API.

    Args:
        api_token: Team-scoped API token, sent as a bearer token and used
            as the secret for derived idempotency keys.
        base_url: API host.
        api_version: Version path segment, e.g. "v1".
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        clock: Returns the current time. Used for scheduling and
            time-bound idempotency keys.

    Raises:
        ConfigurationError: If ``api_token`` is empty.
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not api_token:
            raise ConfigurationError("An API token is required to create an EventrelClient")

        self._api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version.strip("/")
        self.timeout = timeout
        self.clock: Callable[[], datetime] = clock or utcnow

        self._http = httpx.Client(
            base_url=self.build_uri(),
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> Self:
        """Build a client from ``Settings`` (``EVENTREL_*`` environment variables).

        Keyword overrides are passed straight to the constructor.

        Raises:
            ConfigurationError: If no API token is configured.
        """
        if settings is None:
            from eventrel.config import settings as default_settings

            settings = default_settings

        options: dict[str, Any] = {
            "base_url": settings.base_url,
            "api_version": settings.api_version,
            "timeout": settings.timeout,
        }
        options.update(overrides)
        api_token = options.pop("api_token", None) or settings.require_api_token()
        return cls(api_token, **options)

    # Services, created on first access

    @cached_property
    def events(self) -> EventService:
        return EventService(self)

    @cached_property
    def destinations(self) -> DestinationService:
        return DestinationService(self)

    @cached_property
    def idempotency(self) -> IdempotencyService:
        return IdempotencyService(self._api_token, clock=self._unix_time)

    # Builders

    def event(self, event_type: str = "") -> EventBuilder:
        """Start building a single event."""
        return EventBuilder(self, event_type)

    def batch(self, event_type: str = "") -> BatchEventBuilder:
        """Start building a batch of events of one type."""
        return BatchEventBuilder(self, event_type)

    def destination(self) -> DestinationBuilder:
        return DestinationBuilder(self)

    # Transport

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        idempotency_key: str | None = None,
    ) -> httpx.Response:
        """Send one request relative to the versioned base URL.

        Args:
            method: HTTP method.
            path: Path below ``/<version>/``, e.g. "events".
            json: JSON body.
            params: Query parameters.
            idempotency_key: Sent as ``X-Idempotency-Key`` when given.

        Returns:
            The 2xx response.

        Raises:
            RequestTimeoutError: If the request timed out.
            APIError: On transport failure or a non-2xx status.
        """
        headers = {IDEMPOTENCY_HEADER: idempotency_key} if idempotency_key else None
        path = path.lstrip("/")

        started = time.perf_counter()
        try:
            response = self._http.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out after %ss", method, path, self.timeout)
            raise RequestTimeoutError(
                f"Request timed out after {self.timeout}s",
                idempotency_key=idempotency_key,
            ) from e
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise APIError(f"Request failed: {e}", idempotency_key=idempotency_key) from e

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(
            "%s %s -> %d (%.1fms)", method, path, response.status_code, elapsed_ms
        )

        if response.is_success:
            return response

        body = _safe_json(response)
        message = _error_message(body, response.status_code)
        logger.warning("%s %s -> %d: %s", method, path, response.status_code, message)
        raise APIError(
            message,
            status_code=response.status_code,
            idempotency_key=idempotency_key,
            body=body,
        )

    def build_uri(self, path: str = "") -> str:
        """Absolute URL for ``path`` under the versioned base URL."""
        return f"{self.base_url}/{self.api_version}/{path.lstrip('/')}"

    def version(self) -> str:
        """Client library version."""
        return __version__

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"EventrelClient(base_url={self.base_url!r}, api_version={self.api_version!r})"

    def _unix_time(self) -> float:
        return self.clock().timestamp()


def _safe_json(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _error_message(body: Any, status_code: int) -> str:
    """Best-effort message: ``message``, then ``errors``, then the status."""
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
        errors = _flatten_errors(body.get("errors"))
        if errors:
            return "; ".join(errors)
    return f"HTTP {status_code}"


def _flatten_errors(errors: Any) -> list[str]:
    # Either a list of strings/objects or a field -> [messages] map.
    if isinstance(errors, dict):
        flat: list[str] = []
        for field, messages in errors.items():
            items = messages if isinstance(messages, list) else [messages]
            flat.extend(f"{field}: {item}" for item in items)
        return flat
    if isinstance(errors, list):
        return [
            str(error.get("message", error)) if isinstance(error, dict) else str(error)
            for error in errors
        ]
    return []


__all__ = ["USER_AGENT", "EventrelClient"]
