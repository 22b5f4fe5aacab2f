"""Base model and hydration helpers for API entities."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from eventrel.exceptions import HydrationError


class Entity(BaseModel):
    """Immutable record decoded from an API response.

    Entities are never mutated locally: a changed status means fetching
    a fresh copy. Unknown keys sent by the server are ignored so that
    additive API changes do not break older clients.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @classmethod
    def hydrate(cls, data: Any) -> Self:
        """Build an entity from a decoded JSON object.

        Args:
            data: Mapping decoded from the response body.

        Returns:
            The validated, immutable entity.

        Raises:
            HydrationError: If ``data`` is not a mapping, a required field is
                missing, a value has the wrong shape, or an enum value is unknown.
        """
        if not isinstance(data, Mapping):
            raise HydrationError(
                cls.__name__,
                f"expected a JSON object, got {type(data).__name__}",
            )
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as e:
            errors = e.errors(include_url=False)
            fields = ", ".join(".".join(str(p) for p in err["loc"]) or "<root>" for err in errors)
            raise HydrationError(cls.__name__, f"invalid fields: {fields}", errors) from e

    @classmethod
    def hydrate_many(cls, items: Any) -> list[Self]:
        """Hydrate a JSON array of objects. ``None`` yields an empty list."""
        if items is None:
            return []
        if not isinstance(items, list):
            raise HydrationError(
                cls.__name__,
                f"expected a JSON array, got {type(items).__name__}",
            )
        return [cls.hydrate(item) for item in items]


def empty_list_as_dict(value: Any) -> Any:
    """The API encodes empty maps as ``[]``; accept that as ``{}``."""
    if value is None or value == []:
        return {}
    return value
