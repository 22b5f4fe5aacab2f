#!/usr/bin/env python3
"""Quickstart demo - send, inspect and cancel events.

Demonstrates:
- client.event(): Fluent single-event builder
- client.batch(): Several payloads of one type in one request
- events.list(): Paging through recent events
- events.cancel(): Cancelling a scheduled event

Prerequisites:
    - API token in .env: EVENTREL_API_TOKEN=...
    - A destination identifier to send to: EVENTREL_DEMO_DESTINATION=app_...
"""

import os

from eventrel import APIError, EventrelClient, configure_logging


def main() -> None:
    configure_logging(level="WARNING", format="text")
    destination = os.environ.get("EVENTREL_DEMO_DESTINATION", "app_demo")

    print("=" * 70)
    print("Eventrel Quickstart Demo")
    print("=" * 70)

    with EventrelClient.from_settings() as client:
        # 1. Single event
        print("\n1. Sending a single event")
        sent = (
            client.event("user.created")
            .to(destination)
            .payload({"user_id": 42, "email": "ada@example.com"})
            .tags(["signup", "demo"])
            .with_contextual_key()
            .send()
        )
        print(f"   {sent.id} -> {sent.status.value}")

        # 2. Batch
        print("\n2. Sending a batch")
        batch = client.batch("order.shipped").to(destination).tags(["demo"])
        for order_id in range(1, 4):
            batch.add({"order_id": order_id, "carrier": "dhl"})
        result = batch.send()
        print(f"   batch {result.get_batch_id()}: {result.get_total_events()} events")

        # 3. Scheduled event, then cancel it
        print("\n3. Scheduling and cancelling")
        scheduled = (
            client.event("trial.ending")
            .to(destination)
            .with_value("user_id", 42)
            .schedule_in_hours(24)
            .send()
        )
        print(f"   scheduled for {scheduled.scheduled_at}")
        try:
            cancelled = client.events.cancel(scheduled.id, reason="demo cleanup")
            print(f"   cancelled: {cancelled.cancellation_reason}")
        except APIError as e:
            print(f"   cancel failed: {e}")

        # 4. Listing
        print("\n4. Recent demo events")
        page = client.events.list(tags=["demo"], per_page=10)
        for event in page:
            print(f"   {event.created_at:%H:%M:%S}  {event.event_type:<16} {event.status.value}")
        print(f"   page {page.current_page}/{page.last_page}, {page.total} total")


if __name__ == "__main__":
    main()
