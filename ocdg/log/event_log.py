"""
In-memory object-centric event log.

The graph builder consumes this interface:

- enumerate events in deterministic (chronological) order
- enumerate declared objects with their type
- random access from an event id to its object set

Reading logs from disk is left to callers; they build an EventLog
with add_object() / add_event() or from_records().
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Union

from ocdg.core.errors import IntegrityError
from ocdg.core.models import EventRecord, ObjectRecord


ObjectInput = Union[ObjectRecord, tuple[int, str]]
EventInput = Union[EventRecord, tuple[int, Iterable[int]]]


class EventLog:
    """
    Objects and events of an object-centric log.

    Events keep their insertion order, which is taken as the log's
    chronological order. Event ids are unique; objects are declared once
    and may be referenced by any number of events.

    Example:
        ```python
        log = EventLog()
        log.add_object(1, "order")
        log.add_object(2, "item")
        log.add_event(10, {1, 2})
        ```
    """

    def __init__(self):
        self._objects: dict[int, ObjectRecord] = {}
        self._events: dict[int, EventRecord] = {}

    @property
    def event_count(self) -> int:
        """Get the number of events."""
        return len(self._events)

    @property
    def object_count(self) -> int:
        """Get the number of declared objects."""
        return len(self._objects)

    def __len__(self) -> int:
        return len(self._events)

    def add_object(self, object_id: int, object_type: str) -> ObjectRecord:
        """
        Declare an object, replacing an earlier declaration.

        Args:
            object_id: Object identifier
            object_type: Type label

        Returns:
            The stored ObjectRecord
        """
        record = ObjectRecord(id=object_id, object_type=object_type)
        self._objects[object_id] = record
        return record

    def add_event(self, event_id: int, objects: Iterable[int]) -> EventRecord:
        """
        Append an event at the end of the log.

        Args:
            event_id: Event identifier
            objects: Ids of the participating objects

        Returns:
            The stored EventRecord

        Raises:
            ValueError: If the event id is already in the log
        """
        if event_id in self._events:
            raise ValueError(f"Duplicate event id: {event_id}")
        record = EventRecord(id=event_id, objects=frozenset(objects))
        self._events[event_id] = record
        return record

    def iter_events(self) -> Iterator[EventRecord]:
        """Iterate over events in log order."""
        return iter(self._events.values())

    def iter_objects(self) -> Iterator[ObjectRecord]:
        """Iterate over declared objects."""
        return iter(self._objects.values())

    def has_object(self, object_id: int) -> bool:
        """Check if an object is declared."""
        return object_id in self._objects

    def get_object(self, object_id: int) -> ObjectRecord:
        """
        Get a declared object.

        Raises:
            IntegrityError: If the object is not declared
        """
        try:
            return self._objects[object_id]
        except KeyError:
            raise IntegrityError(object_id, "object", f"Object {object_id} is not declared in the log") from None

    def get_event(self, event_id: int) -> EventRecord:
        """
        Get an event by id.

        Raises:
            IntegrityError: If the event is not in the log
        """
        try:
            return self._events[event_id]
        except KeyError:
            raise IntegrityError(event_id, "event", f"Event {event_id} is not in the log") from None

    def get_event_objects(self, event_id: int) -> frozenset[int]:
        """Get the full object set of an event."""
        return self.get_event(event_id).objects

    @classmethod
    def from_records(
        cls,
        objects: Iterable[ObjectInput],
        events: Iterable[EventInput],
    ) -> EventLog:
        """
        Build a log from object and event records.

        Args:
            objects: ObjectRecords or (id, type) pairs
            events: EventRecords or (id, object ids) pairs, in log order

        Returns:
            New EventLog
        """
        log = cls()
        for obj in objects:
            if isinstance(obj, ObjectRecord):
                log.add_object(obj.id, obj.object_type)
            else:
                object_id, object_type = obj
                log.add_object(object_id, object_type)
        for event in events:
            if isinstance(event, EventRecord):
                log.add_event(event.id, event.objects)
            else:
                event_id, event_objects = event
                log.add_event(event_id, event_objects)
        return log

    def to_dict(self) -> dict[str, Any]:
        """Serialize the log to a dictionary."""
        return {
            "objects": [obj.model_dump() for obj in self._objects.values()],
            "events": [
                {"id": event.id, "objects": sorted(event.objects)}
                for event in self._events.values()
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EventLog:
        """Deserialize a log produced by to_dict()."""
        return cls.from_records(
            (ObjectRecord(**obj) for obj in data.get("objects", [])),
            ((event["id"], event.get("objects", [])) for event in data.get("events", [])),
        )
