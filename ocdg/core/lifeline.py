"""
Object lifelines.

A lifeline is an object's type plus the ordered list of events it took
part in. The first event is the object's birth, the last its death.

The store is mutable only while the log is being ingested. Everything
evaluated afterwards works on a frozen snapshot, so no relation ever
sees a lifeline that is still growing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Iterator, Optional

from ocdg.core.errors import IntegrityError


DEFAULT_OBJECT_TYPE = ""


@dataclass(frozen=True)
class Lifeline:
    """
    Immutable view of one object's participation history.

    Attributes:
        object_id: Object identifier
        object_type: Object type label
        events: Event ids in log order
    """

    object_id: int
    object_type: str
    events: tuple[int, ...] = ()
    event_set: frozenset[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_set", frozenset(self.events))

    def __len__(self) -> int:
        return len(self.events)

    @property
    def birth(self) -> Optional[int]:
        """First event of the object, None if it never appeared."""
        return self.events[0] if self.events else None

    @property
    def death(self) -> Optional[int]:
        """Last event of the object, None if it never appeared."""
        return self.events[-1] if self.events else None


class LifelineSnapshot(Mapping):
    """Read-only mapping of object id to frozen Lifeline."""

    def __init__(self, lifelines: dict[int, Lifeline]):
        self._lifelines = lifelines

    def __getitem__(self, object_id: int) -> Lifeline:
        try:
            return self._lifelines[object_id]
        except KeyError:
            raise IntegrityError(object_id, "object", f"No lifeline for object {object_id}") from None

    def __contains__(self, object_id: object) -> bool:
        return object_id in self._lifelines

    def get(self, object_id: int, default: Optional[Lifeline] = None) -> Optional[Lifeline]:
        return self._lifelines.get(object_id, default)

    def __iter__(self) -> Iterator[int]:
        return iter(self._lifelines)

    def __len__(self) -> int:
        return len(self._lifelines)


class LifelineStore:
    """
    Per-object type label and ordered event sequence.

    Entries are created on first sighting with register() and grow with
    append(). Sequences are append-only and never reordered.

    Thread Safety:
        Not thread-safe. Only the single-threaded ingestion pass writes;
        concurrent readers must use freeze().
    """

    def __init__(self):
        self._types: dict[int, str] = {}
        self._events: dict[int, list[int]] = {}

    def __contains__(self, object_id: int) -> bool:
        return object_id in self._types

    def __len__(self) -> int:
        return len(self._types)

    def register(self, object_id: int, object_type: str = DEFAULT_OBJECT_TYPE) -> None:
        """
        Create an entry for an object, or set its type if already known.

        Without an explicit type the object keeps the default type until
        register() is called again with one.

        Args:
            object_id: Object identifier
            object_type: Type label of the object
        """
        if object_id not in self._types or object_type != DEFAULT_OBJECT_TYPE:
            self._types[object_id] = object_type
        self._events.setdefault(object_id, [])

    def append(self, object_id: int, event_id: int) -> None:
        """
        Append an event to an object's sequence.

        Raises:
            IntegrityError: If the object was never registered
        """
        if object_id not in self._types:
            raise IntegrityError(object_id, "object", f"No lifeline for object {object_id}")
        self._events[object_id].append(event_id)

    def length(self, object_id: int) -> int:
        """Current number of events of an object."""
        if object_id not in self._types:
            raise IntegrityError(object_id, "object", f"No lifeline for object {object_id}")
        return len(self._events[object_id])

    def get(self, object_id: int) -> tuple[str, list[int]]:
        """
        Get an object's type and a copy of its ordered events.

        Raises:
            IntegrityError: If the object was never registered
        """
        if object_id not in self._types:
            raise IntegrityError(object_id, "object", f"No lifeline for object {object_id}")
        return self._types[object_id], list(self._events[object_id])

    def freeze(self) -> LifelineSnapshot:
        """Take an immutable snapshot of every lifeline."""
        return LifelineSnapshot({
            oid: Lifeline(oid, self._types[oid], tuple(events))
            for oid, events in self._events.items()
        })
