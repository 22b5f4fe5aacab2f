"""Destination endpoints."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from eventrel.builders import DestinationBuilder
from eventrel.exceptions import ValidationError
from eventrel.helpers import compact, destination_body
from eventrel.models import WebhookMode
from eventrel.responses import DestinationListResponse, DestinationResponse

if TYPE_CHECKING:
    from eventrel.client import EventrelClient

logger = logging.getLogger(__name__)


class DestinationService:
    """Typed access to ``/destinations``."""

    def __init__(self, client: EventrelClient) -> None:
        self._client = client

    def builder(self, name: str | None = None, webhook_url: str | None = None) -> DestinationBuilder:
        return DestinationBuilder(self._client, name, webhook_url)

    def create(
        self,
        name: str,
        webhook_url: str,
        webhook_mode: WebhookMode | str = WebhookMode.OUTBOUND,
        description: str | None = None,
        headers: Mapping[str, str] | None = None,
        metadata: Mapping[str, Any] | None = None,
        webhook_config: Mapping[str, Any] | None = None,
        timeout: int | None = None,
        retry_limit: int | None = None,
        rate_limit_per_minute: int | None = None,
        rate_limit_per_hour: int | None = None,
        rate_limit_per_day: int | None = None,
        is_active: bool = True,
    ) -> DestinationResponse:
        """Create a destination.

        Prefer ``builder()`` for anything beyond a name and a URL.

        Raises:
            ValidationError: If ``webhook_mode`` is not a known mode.
            APIError: If the request fails.
        """
        raw = webhook_mode if isinstance(webhook_mode, WebhookMode) else webhook_mode.lower()
        try:
            mode = WebhookMode(raw).value
        except ValueError as e:
            allowed = ", ".join(m.value for m in WebhookMode)
            raise ValidationError("webhook_mode", f"Must be one of: {allowed}") from e

        body = destination_body(
            name,
            webhook_url,
            webhook_mode=mode,
            description=description,
            headers=headers,
            metadata=metadata,
            webhook_config=webhook_config,
            timeout=timeout,
            retry_limit=retry_limit,
            rate_limit_per_minute=rate_limit_per_minute,
            rate_limit_per_hour=rate_limit_per_hour,
            rate_limit_per_day=rate_limit_per_day,
            is_active=is_active,
        )
        logger.debug("Creating %s destination %s", mode, name)
        response = self._client.request("POST", "destinations", json=body)
        return DestinationResponse(response)

    def get(self, uuid: str) -> DestinationResponse:
        response = self._client.request("GET", f"destinations/{_require_uuid(uuid)}")
        return DestinationResponse(response)

    def update(self, uuid: str, data: Mapping[str, Any]) -> DestinationResponse:
        """Partially update a destination with the given fields."""
        response = self._client.request(
            "PATCH", f"destinations/{_require_uuid(uuid)}", json=dict(data)
        )
        return DestinationResponse(response)

    def delete(self, uuid: str) -> DestinationResponse:
        response = self._client.request("DELETE", f"destinations/{_require_uuid(uuid)}")
        return DestinationResponse(response)

    def list(
        self,
        page: int = 1,
        per_page: int = 15,
        enabled: bool | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        **filters: Any,
    ) -> DestinationListResponse:
        """List destinations one page at a time.

        Extra keyword arguments are passed through as query filters.
        """
        params = compact(
            {
                "page": page,
                "per_page": per_page,
                # Query strings carry booleans as 1/0.
                "enabled": int(enabled) if enabled is not None else None,
                "search": search,
                "sort_by": sort_by,
                "sort_order": sort_order,
                **filters,
            }
        )
        response = self._client.request("GET", "destinations", params=params)
        return DestinationListResponse(response)


def _require_uuid(uuid: str) -> str:
    if not uuid:
        raise ValidationError("uuid", "Destination UUID is required")
    return uuid


__all__ = ["DestinationService"]
