"""Wire-format helpers shared by builders and services."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ISO 8601 UTC with a 'Z' suffix.

    Naive datetimes are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


def compact(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is None."""
    return {key: value for key, value in values.items() if value is not None}


def event_body(
    event_type: str,
    payload: Mapping[str, Any],
    tags: Iterable[str] = (),
    destination: str | None = None,
    scheduled_at: datetime | None = None,
) -> dict[str, Any]:
    """Request body for ``POST /events`` (single event)."""
    body: dict[str, Any] = {
        "event_type": event_type,
        "payload": dict(payload),
        "tags": list(tags),
    }
    if destination:
        body["destination"] = destination
    if scheduled_at is not None:
        body["scheduled_at"] = format_timestamp(scheduled_at)
    return body


def batch_body(
    event_type: str,
    events: Iterable[Mapping[str, Any]],
    tags: Iterable[str] = (),
    destination: str | None = None,
    scheduled_at: datetime | None = None,
) -> dict[str, Any]:
    """Request body for ``POST /events`` (batch form)."""
    body: dict[str, Any] = {
        "event_type": event_type,
        "events": [dict(event) for event in events],
        "tags": list(tags),
    }
    if destination:
        body["destination"] = destination
    if scheduled_at is not None:
        body["scheduled_at"] = format_timestamp(scheduled_at)
    return body


def destination_body(
    name: str,
    webhook_url: str,
    webhook_mode: str = "outbound",
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
) -> dict[str, Any]:
    """Request body for ``POST /destinations``.

    Empty maps and unset options are left out so the server applies its
    own defaults.
    """
    return compact(
        {
            "name": name,
            "webhook_url": webhook_url,
            "webhook_mode": webhook_mode,
            "description": description,
            "headers": dict(headers) if headers else None,
            "metadata": dict(metadata) if metadata else None,
            "webhook_config": dict(webhook_config) if webhook_config else None,
            "timeout": timeout,
            "retry_limit": retry_limit,
            "rate_limit_per_minute": rate_limit_per_minute,
            "rate_limit_per_hour": rate_limit_per_hour,
            "rate_limit_per_day": rate_limit_per_day,
            "is_active": is_active,
        }
    )
