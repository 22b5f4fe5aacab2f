"""Idempotency key generation.

The Eventrel API deduplicates requests that carry the same
``X-Idempotency-Key``. Three kinds of key are supported:

- ``evt_<32 hex>``: random, every request is unique.
- ``evt_ctx_<32 hex>``: contextual, derived from request content, so
  identical content always produces the same key.
- ``evt_tbx_<32 hex>``: time-bound, derived from content, an operation
  label and a time window, so the same operation deduplicates within the
  window and may repeat once the window rolls over.

Derived keys hash the canonical form of the context together with the
client's API token, so two teams never collide on the same content.

Example:
    ```python
    service = IdempotencyService(secret="token")

    key = service.generate_contextual({"order_id": "ord_456", "amount": 10000})
    daily = service.generate_time_bound({"user_id": 123}, "daily_report", 86400)
    ```
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import math
import re
import secrets
import time
import warnings
from collections.abc import Callable, Mapping
from typing import Any, Literal

from pydantic import BaseModel

from eventrel.exceptions import ValidationError

logger = logging.getLogger(__name__)

RANDOM_PREFIX = "evt_"
CONTEXTUAL_PREFIX = "evt_ctx_"
TIME_BOUND_PREFIX = "evt_tbx_"

# Hex characters kept from the SHA-256 digest (128 bits).
KEY_HEX_LENGTH = 32

KEY_PATTERN = re.compile(r"^(evt|evt_ctx|evt_tbx)_[a-f0-9]{32}$")

KeyType = Literal["evt", "ctx", "tbx"]

_KEY_TYPES: dict[str, KeyType] = {
    "evt": "evt",
    "evt_ctx": "ctx",
    "evt_tbx": "tbx",
}


class IdempotencyService:
    """Generates and validates idempotency keys.

    Args:
        secret: Caller-specific secret mixed into derived keys (the API token).
        clock: Returns the current Unix time in seconds. Injected for tests.
    """

    def __init__(self, secret: str, clock: Callable[[], float] = time.time) -> None:
        self._secret = secret
        self._clock = clock

    def generate(self) -> str:
        """Generate a random key with 128 bits of entropy."""
        return RANDOM_PREFIX + secrets.token_hex(16)

    def generate_contextual(self, context: Any) -> str:
        """Generate a deterministic key from request content.

        Key order and ``None`` values in ``context`` do not affect the result.

        Raises:
            ValidationError: If the context holds values that cannot be
                serialized to JSON.
        """
        canonical = self.canonicalize(context)
        return CONTEXTUAL_PREFIX + self._digest(f"{canonical}{self._secret}")

    def generate_time_bound(
        self,
        context: Any,
        operation: str,
        window_seconds: int | None = None,
    ) -> str:
        """Generate a key stable within a time window.

        Args:
            context: Request content to hash.
            operation: Operation label, e.g. "daily_report".
            window_seconds: Window length; None or 0 means per-second granularity.

        Raises:
            ValidationError: If the window is negative or the context is not
                serializable.
        """
        if window_seconds is not None and window_seconds < 0:
            raise ValidationError("window_seconds", "must not be negative")

        canonical = self.canonicalize(context)
        window = self._time_window(window_seconds)
        logger.debug("Deriving time-bound key for operation %s in window %d", operation, window)
        return TIME_BOUND_PREFIX + self._digest(f"{canonical}_{operation}_{window}{self._secret}")

    def generate_content_based(self, data: Any, window_ms: int = 1000) -> str:
        """Deprecated: use ``generate_contextual`` or ``generate_time_bound``."""
        warnings.warn(
            "generate_content_based() is deprecated; use generate_contextual() "
            "or generate_time_bound() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        if window_ms > 1000:
            return self.generate_time_bound(data, "event", window_ms // 1000)
        return self.generate_contextual(data)

    def is_valid(self, key: str) -> bool:
        """Check a key against the three known formats."""
        return isinstance(key, str) and KEY_PATTERN.match(key) is not None

    def get_key_type(self, key: str) -> KeyType | None:
        """Return "evt", "ctx" or "tbx" for a valid key, None otherwise."""
        if not self.is_valid(key):
            return None
        return _KEY_TYPES[key[: -(KEY_HEX_LENGTH + 1)]]

    def keys_match(self, key1: str, key2: str) -> bool:
        """Constant-time comparison of two keys."""
        return hmac.compare_digest(key1.encode("utf-8"), key2.encode("utf-8"))

    def create_scoped_generator(self, base_context: Any) -> Callable[..., str]:
        """Bind a context and return a time-bound key generator for it.

        Example:
            ```python
            user_keys = service.create_scoped_generator({"user_id": 123})
            login_key = user_keys("login")
            report_key = user_keys("report", 86400)
            ```
        """

        def generate(operation: str, window_seconds: int | None = None) -> str:
            return self.generate_time_bound(base_context, operation, window_seconds)

        return generate

    def standardize_context(self, value: Any) -> Any:
        """Normalize a context for hashing.

        Mappings get their keys sorted and ``None`` entries dropped;
        sequences keep their order but drop ``None`` elements; everything
        is normalized recursively. Normalizing an already-normalized value
        returns an equal value.
        """
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")

        if isinstance(value, Mapping):
            cleaned: dict[Any, Any] = {}
            for key in sorted(value, key=str):
                item = self.standardize_context(value[key])
                if item is not None:
                    cleaned[key] = item
            return cleaned

        if isinstance(value, (list, tuple)):
            items = (self.standardize_context(item) for item in value)
            return [item for item in items if item is not None]

        return value

    def canonicalize(self, context: Any) -> str:
        """Canonical string form of a context: compact, key-sorted, ASCII JSON."""
        standardized = self.standardize_context(context)
        try:
            return json.dumps(
                standardized,
                separators=(",", ":"),
                ensure_ascii=True,
                allow_nan=False,
            )
        except (TypeError, ValueError) as e:
            raise ValidationError("context", f"cannot be serialized for hashing: {e}") from e

    def _time_window(self, window_seconds: int | None) -> int:
        now = self._clock()
        if window_seconds:
            return math.floor(now / window_seconds)
        return math.floor(now)

    @staticmethod
    def _digest(value: str) -> str:
        return hashlib.sha256(value.encode("utf-8")).hexdigest()[:KEY_HEX_LENGTH]


__all__ = [
    "CONTEXTUAL_PREFIX",
    "KEY_PATTERN",
    "RANDOM_PREFIX",
    "TIME_BOUND_PREFIX",
    "IdempotencyService",
    "KeyType",
]
