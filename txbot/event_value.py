"""Key/value pairs extracted from chain events."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class EventValue:
    """A single event attribute, keyed as ``<namespace>.<key>``."""

    key: str
    value: str

    @classmethod
    def from_parts(cls, namespace: str, key: str, value: str) -> EventValue:
        """Build a value whose key is the namespace and key joined by a dot."""
        return cls(key=f"{namespace}.{key}", value=value)


def event_values_to_map(values: Iterable[EventValue]) -> dict[str, list[str]]:
    """Group values by key, keeping their order."""
    events: dict[str, list[str]] = {}
    for event in values:
        events.setdefault(event.key, []).append(event.value)
    return events