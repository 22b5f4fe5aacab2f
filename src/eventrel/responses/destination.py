"""Responses returned by the destination endpoints."""

from __future__ import annotations

from typing import Any

from eventrel.exceptions import HydrationError
from eventrel.models import Destination

from .base import BaseResponse, PaginatedResponse


class DestinationResponse(BaseResponse):
    """A single destination, from create/get/update/delete.

    The destination is read from ``data.destination`` when present. Delete
    calls may answer without one, so absence is only an error when
    ``details`` is accessed.
    """

    destination: Destination | None

    def _parse(self) -> None:
        raw = self._data_get("destination")
        self.destination = Destination.hydrate(raw) if raw is not None else None

    @property
    def details(self) -> Destination:
        """The hydrated destination.

        Raises:
            HydrationError: If the response carried no destination.
        """
        if self.destination is None:
            raise HydrationError("Destination", "response data has no 'destination' object")
        return self.destination

    def get_details(self) -> Destination:
        return self.details

    @property
    def id(self) -> str:
        return self.details.uuid

    @property
    def name(self) -> str:
        return self.details.name

    @property
    def webhook_url(self) -> str:
        return self.details.webhook_url

    def is_enabled(self) -> bool:
        return self.details.is_enabled()

    def to_dict(self) -> dict[str, Any]:
        destination = self.destination.model_dump(mode="json") if self.destination else None
        return {"destination": destination, **super().to_dict()}


class DestinationListResponse(PaginatedResponse[Destination]):
    """One page of destinations from ``GET /destinations``."""

    items_key = "destinations"

    def _hydrate_items(self, raw_items: Any) -> list[Destination]:
        return Destination.hydrate_many(raw_items)

    @property
    def destinations(self) -> list[Destination]:
        return self.items

    def get(self) -> list[Destination]:
        return list(self.items)

    def get_by_uuid(self, uuid: str) -> Destination | None:
        """First destination with the given UUID, or None."""
        return next((item for item in self.items if item.uuid == uuid), None)

    def get_enabled(self) -> list[Destination]:
        return [item for item in self.items if item.is_enabled()]

    def to_dict(self) -> dict[str, Any]:
        return {
            "destinations": [
                item.model_dump(mode="json", exclude={"webhook_secret", "inbound_token"})
                for item in self.items
            ],
            "pagination": self.get_pagination_meta(),
            "status": self.status,
            **super().to_dict(),
        }


__all__ = ["DestinationListResponse", "DestinationResponse"]
