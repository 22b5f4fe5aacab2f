"""Tests for Eventrel entity models."""

from datetime import UTC, datetime, timedelta

import pytest
from fakes import destination_json, event_json
from pydantic import ValidationError as PydanticValidationError

from eventrel.exceptions import HydrationError
from eventrel.models import (
    DeliveryStrategy,
    Destination,
    EventFiltering,
    EventStatus,
    OutboundEvent,
    Pagination,
    WebhookConfig,
    WebhookMode,
)


class TestEventStatus:
    """Tests for the EventStatus enum."""

    def test_labels(self):
        """Should capitalize the wire value."""
        assert EventStatus.DELIVERED.label == "Delivered"
        assert EventStatus.PENDING.label == "Pending"

    @pytest.mark.parametrize(
        "status,final",
        [
            (EventStatus.PENDING, False),
            (EventStatus.PROCESSING, False),
            (EventStatus.DELIVERED, True),
            (EventStatus.FAILED, True),
            (EventStatus.CANCELLED, True),
        ],
    )
    def test_is_final(self, status, final):
        """Delivered, failed and cancelled are terminal."""
        assert status.is_final() is final

    def test_only_failed_can_retry(self):
        """Retry applies to failed events only."""
        assert [s for s in EventStatus if s.can_retry()] == [EventStatus.FAILED]

    def test_can_cancel_non_final(self):
        """Pending and processing events may be cancelled."""
        assert EventStatus.PENDING.can_cancel()
        assert EventStatus.PROCESSING.can_cancel()
        assert not EventStatus.DELIVERED.can_cancel()

    def test_transitions(self):
        """Terminal states never move; processing never goes back to pending."""
        assert EventStatus.PENDING.can_transition_to(EventStatus.PROCESSING)
        assert EventStatus.PROCESSING.can_transition_to(EventStatus.DELIVERED)
        assert not EventStatus.PROCESSING.can_transition_to(EventStatus.PENDING)
        assert not EventStatus.FAILED.can_transition_to(EventStatus.PENDING)

    def test_parse(self):
        """Should parse case-insensitively and return None for unknown values."""
        assert EventStatus.parse("FAILED") is EventStatus.FAILED
        assert EventStatus.parse(EventStatus.PENDING) is EventStatus.PENDING
        assert EventStatus.parse("exploded") is None


class TestWebhookMode:
    """Tests for the WebhookMode enum."""

    def test_directions(self):
        """Each mode should report which directions it supports."""
        assert WebhookMode.BIDIRECTIONAL.can_send() and WebhookMode.BIDIRECTIONAL.can_receive()
        assert WebhookMode.OUTBOUND.can_send() and not WebhookMode.OUTBOUND.can_receive()
        assert WebhookMode.INBOUND.can_receive() and not WebhookMode.INBOUND.can_send()


class TestDeliveryStrategy:
    """Tests for the DeliveryStrategy enum."""

    def test_label(self):
        """Should render a display label."""
        assert DeliveryStrategy.BATCHED.label == "Batched Delivery"
        assert DeliveryStrategy.IMMEDIATE.label == "Immediate Delivery"


class TestOutboundEvent:
    """Tests for OutboundEvent hydration."""

    def test_hydrate_all_fields(self):
        """Every fixture field should read back unchanged."""
        data = event_json(
            status="delivered",
            batch="batch_123",
            retry_count=2,
            scheduled_at="2025-01-15T13:00:00Z",
            last_attempted_at="2025-01-15T13:00:01Z",
            delivered_at="2025-01-15T13:00:02Z",
            metadata={"source": "api"},
        )
        event = OutboundEvent.hydrate(data)

        assert event.uuid == data["uuid"]
        assert event.idempotency_key == data["idempotency_key"]
        assert event.event_type == "user.created"
        assert event.payload == {"user_id": 42, "email": "ada@example.com"}
        assert event.status is EventStatus.DELIVERED
        assert event.tags == ["signup", "web"]
        assert event.batch == "batch_123"
        assert event.retry_count == 2
        assert event.created_at == datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
        assert event.scheduled_at == datetime(2025, 1, 15, 13, 0, tzinfo=UTC)
        assert event.last_attempted_at == datetime(2025, 1, 15, 13, 0, 1, tzinfo=UTC)
        assert event.delivered_at == datetime(2025, 1, 15, 13, 0, 2, tzinfo=UTC)
        assert event.metadata == {"source": "api"}

    def test_optional_fields_default(self):
        """Missing optional fields should take their empty values."""
        event = OutboundEvent.hydrate(
            {
                "uuid": "u1",
                "event_type": "order.paid",
                "status": "pending",
                "created_at": "2025-01-15T12:00:00Z",
                "updated_at": "2025-01-15T12:00:00Z",
            }
        )
        assert event.payload == {}
        assert event.tags == []
        assert event.idempotency_key is None
        assert event.retry_count is None
        assert not event.is_scheduled()

    @pytest.mark.parametrize("missing", ["uuid", "event_type", "status", "created_at"])
    def test_missing_required_field(self, missing):
        """Missing required fields should raise HydrationError naming the field."""
        data = event_json()
        del data[missing]
        with pytest.raises(HydrationError) as exc_info:
            OutboundEvent.hydrate(data)
        assert missing in str(exc_info.value)
        assert exc_info.value.entity == "OutboundEvent"

    def test_unknown_status(self):
        """Unknown status values should be rejected, not defaulted."""
        with pytest.raises(HydrationError):
            OutboundEvent.hydrate(event_json(status="exploded"))

    def test_non_mapping(self):
        """Should reject input that is not a JSON object."""
        with pytest.raises(HydrationError):
            OutboundEvent.hydrate(["not", "an", "object"])

    def test_empty_payload_array(self):
        """An empty JSON array for the payload should become an empty map."""
        assert OutboundEvent.hydrate(event_json(payload=[])).payload == {}

    def test_unknown_fields_ignored(self):
        """New server fields should not break hydration."""
        event = OutboundEvent.hydrate(event_json(brand_new_field="x"))
        assert not hasattr(event, "brand_new_field")

    def test_failure_reason_requires_failed(self):
        """failure_reason on a non-failed event should be rejected."""
        with pytest.raises(HydrationError):
            OutboundEvent.hydrate(event_json(status="pending", failure_reason="boom"))

    def test_failed_event(self):
        """A failed event may carry a failure reason and be retried."""
        event = OutboundEvent.hydrate(event_json(status="failed", failure_reason="HTTP 500"))
        assert event.failure_reason == "HTTP 500"
        assert event.can_retry()
        assert event.is_final()

    def test_cancel_fields_require_cancelled(self):
        """Cancellation fields on other statuses should be rejected."""
        with pytest.raises(HydrationError):
            OutboundEvent.hydrate(event_json(status="delivered", cancel_reason="changed mind"))
        with pytest.raises(HydrationError):
            OutboundEvent.hydrate(
                event_json(status="pending", cancelled_at="2025-01-15T12:00:00Z")
            )

    def test_delivered_at_requires_delivered(self):
        """delivered_at on a non-delivered event should be rejected."""
        with pytest.raises(HydrationError):
            OutboundEvent.hydrate(event_json(status="failed", delivered_at="2025-01-15T12:00:00Z"))

    def test_cancelled_event(self):
        """A cancelled event may carry a reason and time."""
        event = OutboundEvent.hydrate(
            event_json(
                status="cancelled",
                cancel_reason="duplicate",
                cancelled_at="2025-01-15T12:05:00Z",
            )
        )
        assert event.cancel_reason == "duplicate"
        assert not event.can_cancel()

    def test_frozen(self):
        """Entities should be immutable."""
        event = OutboundEvent.hydrate(event_json())
        with pytest.raises(PydanticValidationError):
            event.status = EventStatus.DELIVERED

    def test_has_tag(self):
        """Should test tag membership."""
        event = OutboundEvent.hydrate(event_json())
        assert event.has_tag("signup")
        assert not event.has_tag("bulk")

    def test_hydrate_many(self):
        """Should hydrate arrays and treat None as empty."""
        assert len(OutboundEvent.hydrate_many([event_json(), event_json(uuid="u2")])) == 2
        assert OutboundEvent.hydrate_many(None) == []
        with pytest.raises(HydrationError):
            OutboundEvent.hydrate_many({"uuid": "x"})


class TestEventFiltering:
    """Tests for EventFiltering."""

    def test_allows_everything_when_disabled(self):
        """Disabled filtering should allow every type."""
        filtering = EventFiltering(enabled=False, allowed_events=["a"])
        assert filtering.is_event_allowed("b")
        assert filtering.get_allowed_event_count() is None

    def test_allow_list(self):
        """Enabled filtering should only allow listed types."""
        filtering = EventFiltering(enabled=True, allowed_events=["a", "b"])
        assert filtering.is_event_allowed("a")
        assert not filtering.is_event_allowed("c")
        assert filtering.get_allowed_event_count() == 2

    def test_enabled_without_list(self):
        """Enabled filtering without a list should allow every type."""
        assert EventFiltering(enabled=True).is_event_allowed("anything")


class TestWebhookConfig:
    """Tests for WebhookConfig."""

    def test_batching(self):
        """Batching is on only for a batch size above 1."""
        assert WebhookConfig(batch_size=50).is_batching_enabled()
        assert not WebhookConfig(batch_size=1).is_batching_enabled()
        assert not WebhookConfig().is_batching_enabled()

    def test_strategy_label(self):
        """Should label the strategy, defaulting when unset."""
        assert WebhookConfig(delivery_strategy="batched").get_delivery_strategy_label() == (
            "Batched Delivery"
        )
        assert WebhookConfig().get_delivery_strategy_label() == "Default Delivery"

    def test_unknown_strategy(self):
        """Unknown strategies should be rejected."""
        with pytest.raises(HydrationError):
            WebhookConfig.hydrate({"delivery_strategy": "carrier-pigeon"})

    def test_security_summary_default_header(self):
        """Should fall back to the default signature header."""
        summary = WebhookConfig(verify_ssl=True, signature_algorithm="sha256").get_security_summary()
        assert summary["signature_header"] == "X-Webhook-Signature"
        assert summary["ssl_verification"] is True

    def test_security_flags(self):
        """Should report SSL and dead-letter settings."""
        config = WebhookConfig(verify_ssl=False, dead_letter_queue=True)
        assert not config.is_secure()
        assert config.has_dead_letter_queue()

    def test_delivery_summary(self):
        """Should summarize delivery settings."""
        summary = WebhookConfig(batch_size=10, delivery_strategy="batched").get_delivery_summary()
        assert summary["strategy"] == "batched"
        assert summary["batching_enabled"] is True
        assert summary["batch_size"] == 10


class TestDestination:
    """Tests for the Destination entity."""

    def test_hydrate(self):
        """Should hydrate nested config and filtering."""
        destination = Destination.hydrate(destination_json())
        assert destination.name == "Billing"
        assert destination.webhook_mode is WebhookMode.OUTBOUND
        assert destination.webhook_config is not None
        assert destination.webhook_config.delivery_strategy is DeliveryStrategy.BATCHED
        assert destination.webhook_config.has_event_filtering()
        assert destination.headers == {"X-Team": "payments"}

    def test_empty_arrays_as_maps(self):
        """Empty JSON arrays for metadata/headers/config should be accepted."""
        destination = Destination.hydrate(
            destination_json(metadata=[], headers=[], webhook_config=[])
        )
        assert destination.metadata == {}
        assert destination.headers == {}
        assert destination.webhook_config is None

    def test_unknown_mode(self):
        """Unknown webhook modes should be rejected."""
        with pytest.raises(HydrationError):
            Destination.hydrate(destination_json(webhook_mode="sideways"))

    def test_enabled(self):
        """Enabled means active and not deleted."""
        assert Destination.hydrate(destination_json()).is_enabled()
        assert not Destination.hydrate(destination_json(is_active=False)).is_enabled()
        deleted = Destination.hydrate(destination_json(deleted_at="2025-01-10T00:00:00Z"))
        assert deleted.is_deleted()
        assert not deleted.is_enabled()

    def test_rate_limiting(self):
        """Any positive limit counts as rate limiting."""
        assert Destination.hydrate(destination_json()).has_rate_limiting()
        assert not Destination.hydrate(
            destination_json(rate_limit_per_minute=0)
        ).has_rate_limiting()

    def test_mode_helpers(self):
        """Mode helpers should follow webhook_mode."""
        bidirectional = Destination.hydrate(destination_json(webhook_mode="bidirectional"))
        assert bidirectional.is_bidirectional()
        assert bidirectional.can_send_events() and bidirectional.can_receive_webhooks()
        inbound = Destination.hydrate(destination_json(webhook_mode="inbound"))
        assert inbound.is_inbound_only()
        assert not inbound.can_send_events()

    def test_metadata(self):
        """Should read metadata with a default."""
        destination = Destination.hydrate(destination_json())
        assert destination.get_metadata("team") == "payments"
        assert destination.get_metadata("missing", "n/a") == "n/a"

    def test_age_and_recency(self):
        """Should compute age in days and recent updates relative to now."""
        destination = Destination.hydrate(destination_json())
        now = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
        assert destination.get_age(now) == 10
        assert destination.is_recently_updated(now)
        assert not destination.is_recently_updated(now + timedelta(days=2))

    def test_summary(self):
        """Should summarize identity and state."""
        now = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)
        summary = Destination.hydrate(destination_json()).get_summary(now)
        assert summary["identifier"] == "app_billing"
        assert summary["enabled"] is True
        assert summary["age_days"] == 10
        assert summary["environment"] == "production"


class TestPagination:
    """Tests for pagination math."""

    def test_middle_page(self):
        """Page 2 of 5 has more pages and a previous page."""
        page = Pagination(current_page=2, last_page=5)
        assert page.has_more_pages()
        assert page.has_previous_page()
        assert not page.is_first_page()
        assert not page.is_last_page()

    def test_last_page(self):
        """Page 5 of 5 is the last page."""
        page = Pagination(current_page=5, last_page=5)
        assert page.is_last_page()
        assert not page.has_more_pages()

    def test_defaults(self):
        """An empty payload should describe a single empty page."""
        page = Pagination.hydrate({})
        assert page.current_page == 1
        assert page.per_page == 15
        assert page.total == 0
        assert page.is_first_page() and page.is_last_page()

    def test_from_alias_and_nulls(self):
        """Should read 'from' and treat null indices as 0."""
        assert Pagination.hydrate({"from": 16, "to": 30}).from_ == 16
        assert Pagination.hydrate({"from": None, "to": None}).to == 0

    def test_meta(self):
        """Should produce a compact summary."""
        meta = Pagination(current_page=1, last_page=3, total=40).to_meta()
        assert meta["has_more_pages"] is True
        assert meta["total"] == 40
