"""Resource description models: typed, immutable artifact metadata.

A description is populated once at plan time (from embedded source metadata,
sidecar metadata, or synthesized defaults) and is read-only afterwards.

Well-known properties have typed fields; anything else lands in
``properties`` keyed by its camelCase handle. Lexical values are parsed
through a small type inference table keyed by property name pattern:

- ``.+On``  (e.g. ``publishedOn``)  -> :class:`datetime.date`
- ``.+At``  (e.g. ``createdAt``)    -> :class:`datetime.datetime`
- ``order``                         -> ``int``
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MetadataParseError(ValueError):
    """Raised when a metadata property value cannot be parsed."""

    def __init__(self, name: str, value: Any, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Property `{name}` value {value!r} is invalid: {reason}")


# Property handles with typed fields, mapped to the field name.
WELL_KNOWN_PROPERTIES: dict[str, str] = {
    "title": "title",
    "description": "description",
    "publishedOn": "published_on",
    "createdAt": "created_at",
    "contentType": "content_type",
    "artist": "artist",
    "copyright": "copyright",
    "order": "order",
    "aspect": "aspect",
}


def _parse_int(lexical: str) -> int:
    return int(lexical.strip())


PROPERTY_TYPE_INFERENCE: list[tuple[re.Pattern[str], Callable[[str], Any]]] = [
    (re.compile(r".+On"), date.fromisoformat),
    (re.compile(r".+At"), datetime.fromisoformat),
    (re.compile(r"order"), _parse_int),
]


def to_handle(name: str) -> str:
    """Normalize a kebab-case property name (``published-on``) to its handle (``publishedOn``)."""
    head, *rest = name.strip().split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def parse_property_value(name: str, value: Any) -> Any:
    """Parse a lexical property value based upon the property name.

    Non-string values (e.g. already typed YAML values) are returned as-is.
    A string whose name matches no inference rule stays a string.
    """
    if not isinstance(value, str):
        return value
    for pattern, parser in PROPERTY_TYPE_INFERENCE:
        if pattern.fullmatch(name):
            try:
                return parser(value)
            except ValueError as exc:
                raise MetadataParseError(name, value, str(exc)) from exc
    return value


TEXT_FIELDS = frozenset(
    {"title", "description", "content_type", "artist", "copyright", "aspect"}
)


def _coerce_field(field: str, value: Any) -> Any:
    """Fit an already typed value (e.g. a YAML scalar) to its field's type."""
    if value is None or isinstance(value, str):
        return value
    if field in TEXT_FIELDS:
        return str(value)
    if field == "published_on" and isinstance(value, datetime):
        return value.date()
    if field == "created_at" and isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time())
    return value


class ResourceDescription(BaseModel):
    """Metadata describing a produced resource.

    Frozen: use :meth:`with_properties` to derive a changed copy.
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    description: str | None = None
    published_on: date | None = None
    created_at: datetime | None = None
    content_type: str | None = None
    artist: str | None = None
    copyright: str | None = None
    order: int | None = None
    aspect: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_properties(
        cls, pairs: Iterable[tuple[str, Any]]
    ) -> ResourceDescription:
        """Build a description from (name, value) pairs; the first property wins."""
        fields: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for name, value in pairs:
            handle = to_handle(name)
            field = WELL_KNOWN_PROPERTIES.get(handle)
            if field is not None:
                if field not in fields:
                    fields[field] = _coerce_field(field, parse_property_value(handle, value))
            elif handle not in extra:
                extra[handle] = parse_property_value(handle, value)
        return cls(**fields, properties=extra)

    def with_properties(self, **changes: Any) -> ResourceDescription:
        """Return a copy with the given typed fields replaced."""
        return self.model_copy(update=changes)

    def find(self, handle: str) -> Any:
        """Look up a property by handle, typed or ad-hoc; ``None`` if absent."""
        field = WELL_KNOWN_PROPERTIES.get(handle)
        if field is not None:
            return getattr(self, field)
        return self.properties.get(handle)

    def has(self, handle: str) -> bool:
        return self.find(handle) is not None

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_DESCRIPTION


EMPTY_DESCRIPTION = ResourceDescription()
