"""Tests for the event and destination services."""

from datetime import UTC, datetime

import pytest
from fakes import destination_json, envelope, event_json, page_json

from eventrel.builders import BatchEventBuilder, DestinationBuilder, EventBuilder
from eventrel.exceptions import ValidationError
from eventrel.models import EventStatus, WebhookMode


class TestEventServiceCreate:
    """Tests for EventService.create and create_many."""

    def test_create_body(self, client, api):
        """Should POST the event body to /events."""
        api.queue(envelope({"outbound_event": event_json()}, status_code=201))

        response = client.events.create(
            "user.created",
            {"user_id": 42},
            destination="dest_1",
            tags=["signup"],
            scheduled_at=datetime(2025, 2, 1, 8, 0, tzinfo=UTC),
        )

        assert api.last.method == "POST"
        assert api.last.url.path == "/v1/events"
        assert api.last_json() == {
            "event_type": "user.created",
            "payload": {"user_id": 42},
            "tags": ["signup"],
            "destination": "dest_1",
            "scheduled_at": "2025-02-01T08:00:00Z",
        }
        assert response.status is EventStatus.PENDING

    def test_create_generates_key(self, client, api):
        """Without an explicit key, a random one should be sent."""
        api.queue(envelope({"outbound_event": event_json()}))
        client.events.create("user.created", {"a": 1})
        assert client.idempotency.get_key_type(api.last.headers["X-Idempotency-Key"]) == "evt"

    def test_create_uses_given_key(self, client, api):
        """An explicit key should be sent unchanged."""
        api.queue(envelope({"outbound_event": event_json()}))
        client.events.create("user.created", {"a": 1}, idempotency_key="custom-key")
        assert api.last.headers["X-Idempotency-Key"] == "custom-key"

    def test_create_omits_optional_fields(self, client, api):
        """Destination and schedule should be left out when unset."""
        api.queue(envelope({"outbound_event": event_json()}))
        client.events.create("user.created")
        assert api.last_json() == {"event_type": "user.created", "payload": {}, "tags": []}

    def test_create_requires_event_type(self, client, api):
        """An empty event type should fail locally."""
        with pytest.raises(ValidationError):
            client.events.create("", {"a": 1})
        assert api.requests == []

    def test_create_many_body(self, client, api):
        """Should POST the batch body to /events."""
        api.queue(
            envelope({"batch": "b1", "total_events": 1, "outbound_events": [event_json()]})
        )

        response = client.events.create_many(
            "user.created",
            [{"payload": {"id": 1}, "tags": ["vip"]}],
            destination="dest_1",
            tags=["bulk"],
        )

        assert api.last_json() == {
            "event_type": "user.created",
            "events": [{"payload": {"id": 1}, "tags": ["vip"]}],
            "tags": ["bulk"],
            "destination": "dest_1",
        }
        assert "X-Idempotency-Key" in api.last.headers
        assert response.get_batch_id() == "b1"

    def test_create_many_requires_events(self, client, api):
        """An empty batch should fail locally."""
        with pytest.raises(ValidationError) as exc_info:
            client.events.create_many("user.created", [])
        assert exc_info.value.field == "events"
        assert api.requests == []


class TestEventServiceReads:
    """Tests for get and list."""

    def test_get(self, client, api):
        """Should GET /events/{uuid}."""
        api.queue(envelope({"outbound_event": event_json(uuid="abc")}))
        response = client.events.get("abc")
        assert api.last.method == "GET"
        assert api.last.url.path == "/v1/events/abc"
        assert response.id == "abc"

    def test_get_requires_uuid(self, client):
        """An empty UUID should fail locally."""
        with pytest.raises(ValidationError):
            client.events.get("")

    def test_list_defaults(self, client, api):
        """Should send page and per_page only."""
        api.queue(envelope(page_json("outbound_events", [])))
        client.events.list()
        assert dict(api.last.url.params) == {"page": "1", "per_page": "15"}

    def test_list_filters(self, client, api):
        """Should encode every filter."""
        api.queue(envelope(page_json("outbound_events", [event_json()])))

        response = client.events.list(
            page=2,
            per_page=50,
            status=EventStatus.FAILED,
            event_type="user.created",
            tags=["a", "b"],
            from_date=datetime(2025, 1, 1, tzinfo=UTC),
            to_date="2025-01-31",
            destination="dest_1",
            idempotency_key="evt_x",
        )

        assert dict(api.last.url.params) == {
            "page": "2",
            "per_page": "50",
            "status": "failed",
            "event_type": "user.created",
            "tags": "a,b",
            "from_date": "2025-01-01T00:00:00Z",
            "to_date": "2025-01-31",
            "destination": "dest_1",
            "idempotency_key": "evt_x",
        }
        assert len(response) == 1


class TestEventServiceActions:
    """Tests for retry, retry_many and cancel."""

    def test_retry(self, client, api):
        """Should POST /events/{uuid}/retry."""
        api.queue(envelope({"outbound_event": event_json(uuid="abc")}))
        client.events.retry("abc")
        assert api.last.method == "POST"
        assert api.last.url.path == "/v1/events/abc/retry"

    def test_retry_many(self, client, api):
        """Should POST the UUID list to /events/retry."""
        api.queue(envelope({"retried_count": 2, "outbound_events": []}, status="queued"))
        response = client.events.retry_many(["a", "b"])
        assert api.last.url.path == "/v1/events/retry"
        assert api.last_json() == {"events": ["a", "b"]}
        assert response.get_retried_count() == 2

    def test_retry_many_requires_ids(self, client, api):
        """An empty UUID list should fail locally."""
        with pytest.raises(ValidationError):
            client.events.retry_many([])
        assert api.requests == []

    def test_cancel(self, client, api):
        """Should POST the reason to /events/{uuid}/cancel."""
        cancelled = event_json(
            uuid="abc",
            status="cancelled",
            cancel_reason="duplicate",
            cancelled_at="2025-01-15T12:01:00Z",
        )
        api.queue(envelope({"outbound_event": cancelled}))

        response = client.events.cancel("abc", reason="duplicate")

        assert api.last.url.path == "/v1/events/abc/cancel"
        assert api.last_json() == {"reason": "duplicate"}
        assert response.status is EventStatus.CANCELLED

    def test_builders(self, client):
        """Should hand out builders bound to the client."""
        assert isinstance(client.events.builder("x"), EventBuilder)
        assert isinstance(client.events.batch("x"), BatchEventBuilder)


class TestDestinationService:
    """Tests for DestinationService."""

    def test_create(self, client, api):
        """Should POST to /destinations without empty options."""
        api.queue(envelope({"destination": destination_json()}, status_code=201))

        response = client.destinations.create(
            "Billing",
            "https://billing.example.com/webhook",
            webhook_mode=WebhookMode.BIDIRECTIONAL,
            timeout=30,
        )

        assert api.last_json() == {
            "name": "Billing",
            "webhook_url": "https://billing.example.com/webhook",
            "webhook_mode": "bidirectional",
            "timeout": 30,
            "is_active": True,
        }
        assert response.id == destination_json()["uuid"]

    def test_create_mode_string(self, client, api):
        """Mode strings should be accepted case-insensitively."""
        api.queue(envelope({"destination": destination_json()}))
        client.destinations.create("x", "https://example.com/hook", webhook_mode="INBOUND")
        assert api.last_json()["webhook_mode"] == "inbound"

    def test_create_unknown_mode(self, client, api):
        """Unknown modes should fail locally."""
        with pytest.raises(ValidationError):
            client.destinations.create("x", "https://example.com/hook", webhook_mode="sideways")
        assert api.requests == []

    def test_get(self, client, api):
        """Should GET /destinations/{uuid}."""
        api.queue(envelope({"destination": destination_json(uuid="d1")}))
        response = client.destinations.get("d1")
        assert api.last.url.path == "/v1/destinations/d1"
        assert response.id == "d1"

    def test_update(self, client, api):
        """Should PATCH the given fields."""
        api.queue(envelope({"destination": destination_json(name="Renamed")}))
        response = client.destinations.update("d1", {"name": "Renamed"})
        assert api.last.method == "PATCH"
        assert api.last_json() == {"name": "Renamed"}
        assert response.name == "Renamed"

    def test_delete(self, client, api):
        """Should DELETE and tolerate a response without a destination."""
        api.queue(envelope({}, message="Destination deleted"))
        response = client.destinations.delete("d1")
        assert api.last.method == "DELETE"
        assert response.destination is None
        assert response.message == "Destination deleted"

    def test_list(self, client, api):
        """Should send filters and pass extra ones through."""
        api.queue(envelope(page_json("destinations", [destination_json()])))

        response = client.destinations.list(
            page=3,
            enabled=True,
            search="bill",
            sort_by="name",
            sort_order="asc",
            webhook_mode="outbound",
        )

        assert dict(api.last.url.params) == {
            "page": "3",
            "per_page": "15",
            "enabled": "1",
            "search": "bill",
            "sort_by": "name",
            "sort_order": "asc",
            "webhook_mode": "outbound",
        }
        assert response.destinations[0].name == "Billing"

    def test_list_disabled_filter(self, client, api):
        """enabled=False should be sent, not dropped."""
        api.queue(envelope(page_json("destinations", [])))
        client.destinations.list(enabled=False)
        assert api.last.url.params["enabled"] == "0"

    def test_builder(self, client):
        """Should hand out a destination builder with name and URL preset."""
        builder = client.destinations.builder("Billing", "https://billing.example.com/webhook")
        assert isinstance(builder, DestinationBuilder)
        assert builder.build()["name"] == "Billing"
