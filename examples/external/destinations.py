#!/usr/bin/env python3
"""Destination management demo.

Demonstrates:
- client.destination(): Fluent destination builder with presets
- destinations.list(): Filtering and paging
- destinations.update() / delete()

Prerequisites:
    - API token in .env: EVENTREL_API_TOKEN=...
"""

from eventrel import EventrelClient, ValidationError


def main() -> None:
    print("=" * 70)
    print("Eventrel Destinations Demo")
    print("=" * 70)

    with EventrelClient.from_settings() as client:
        # Local validation happens before any request
        try:
            client.destination().name("Broken").webhook_url("not a url").create()
        except ValidationError as e:
            print(f"\nRejected locally: {e}")

        created = (
            client.destination()
            .name("Demo billing")
            .webhook_url("https://billing.example.com/webhooks/eventrel")
            .with_description("Created by the destinations demo")
            .with_bearer_token("demo-secret")
            .with_metadata("environment", "demo")
            .with_event_filtering(["invoice.paid", "invoice.refunded"])
            .production_preset()
            .create()
        )
        destination = created.details
        print(f"\nCreated {destination.name} ({destination.identifier})")
        config = destination.webhook_config
        if config is not None:
            print(f"  strategy: {config.get_delivery_strategy_label()}")
            print(f"  security: {config.get_security_summary()}")

        updated = client.destinations.update(destination.uuid, {"timeout": 60})
        print(f"  timeout now {updated.details.timeout}s")

        print("\nActive destinations:")
        for item in client.destinations.list(enabled=True, sort_by="name"):
            print(f"  {item.identifier:<24} {item.webhook_url}")

        client.destinations.delete(destination.uuid)
        print(f"\nDeleted {destination.uuid}")


if __name__ == "__main__":
    main()
