"""Structured logging configuration for the Eventrel client.

Library modules log through the standard ``logging`` module.
``configure_logging`` installs one root handler whose
``structlog.stdlib.ProcessorFormatter`` renders both those records and
structlog events, producing JSON in production and colored console
output during development.

Secrets never reach the output: any event key or ``extra`` field that
looks like a credential (``authorization``, ``api_token``,
``webhook_secret`` ...) is masked by the ``redact_secrets`` processor.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.typing import Processor

    from eventrel.config import Settings

_configured = False
_handler: logging.Handler | None = None

SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "api_token",
        "token",
        "secret",
        "webhook_secret",
        "inbound_token",
        "x-api-key",
    }
)

REDACTED = "***"


def redact_secrets(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask credential-like values in a log event.

    Nested header mappings (e.g. ``headers={"Authorization": ...}``) are
    masked as well.
    """
    for key, value in list(event_dict.items()):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, dict):
            event_dict[key] = {
                k: REDACTED if str(k).lower() in SENSITIVE_KEYS else v for k, v in value.items()
            }
    return event_dict


def configure_logging(
    level: str | None = None,
    format: str | None = None,
    settings: Settings | None = None,
) -> None:
    """Configure structured logging for the Eventrel client.

    Explicit arguments win over settings; settings win over the defaults
    (INFO, json).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format: "json" for production, "text" for development.
        settings: Optional settings to read ``log_level``/``log_format`` from.

    Example:
        ```python
        from eventrel.logging import configure_logging, get_logger

        configure_logging(level="DEBUG", format="text")
        logger = get_logger(__name__)
        logger.info("Client configured", base_url="https://api.eventrel.sh")
        ```
    """
    global _configured, _handler

    if settings is not None:
        level = level or settings.log_level
        format = format or settings.log_format
    level = level or "INFO"
    format = format or "json"

    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_secrets,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format.lower() == "json":
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=True)]

    # Plain logging records (and their ``extra`` fields) run through the
    # same chain as structlog events before rendering.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[structlog.stdlib.ExtraAdder(), *shared_processors],
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setFormatter(formatter)
    root.addHandler(_handler)
    root.setLevel(log_level)
    logging.getLogger("eventrel").setLevel(log_level)

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, configuring defaults on first use.

    Args:
        name: Logger name. Uses the root structlog logger if None.
    """
    if not _configured:
        configure_logging()

    return structlog.get_logger(name)  # type: ignore[no-any-return]


def bind_context(**kwargs: object) -> None:
    """Bind key-value pairs to every subsequent log message in this context.

    Example:
        ```python
        bind_context(destination="app_123", request_id="req_abc")
        ```
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
