#!/usr/bin/env python3
"""Idempotency key demo.

Shows the four key families and how keys derived from the same context
stay stable across processes while random keys never repeat.

No network access required - runs entirely locally.
"""

from eventrel.services import IdempotencyService


def main() -> None:
    service = IdempotencyService("demo-token")

    print("=" * 70)
    print("Eventrel Idempotency Keys")
    print("=" * 70)

    print("\n1. Random keys")
    print(f"   {service.generate()}")
    print(f"   {service.generate()}")

    print("\n2. Contextual keys ignore key order")
    a = service.generate_contextual({"order_id": 7, "action": "ship"})
    b = service.generate_contextual({"action": "ship", "order_id": 7})
    print(f"   {a}\n   {b}\n   equal: {service.keys_match(a, b)}")

    print("\n3. Time-bound keys collapse retries inside a window")
    key = service.generate_time_bound({"user_id": 42}, "send_welcome", window_seconds=300)
    print(f"   {key} ({service.get_key_type(key)})")

    print("\n4. Scoped generators share a base context")
    for_order = service.create_scoped_generator({"order_id": 7})
    print(f"   charge:  {for_order('charge')}")
    print(f"   ship:    {for_order('ship')}")
    print(f"   charge (10 min window): {for_order('charge', 600)}")


if __name__ == "__main__":
    main()
