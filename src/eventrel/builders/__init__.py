"""Fluent request builders."""

from .base import RequestBuilder
from .destination import DestinationBuilder, is_valid_url
from .event import BatchEventBuilder, EventBuilder

__all__ = [
    "BatchEventBuilder",
    "DestinationBuilder",
    "EventBuilder",
    "RequestBuilder",
    "is_valid_url",
]
