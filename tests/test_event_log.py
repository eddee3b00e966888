"""
Tests for the in-memory event log.
"""

import pytest

from ocdg.core.errors import IntegrityError
from ocdg.core.models import EventRecord, ObjectRecord
from ocdg.log.event_log import EventLog


class TestEventLog:
    """Tests for building and reading a log."""

    def test_events_keep_insertion_order(self):
        """Iteration follows insertion, not id order."""
        log = EventLog()
        log.add_event(5, {1})
        log.add_event(2, {1, 2})
        log.add_event(9, set())

        assert [e.id for e in log.iter_events()] == [5, 2, 9]
        assert len(log) == 3
        assert log.event_count == 3

    def test_objects(self):
        """Objects are declared with a type."""
        log = EventLog()
        log.add_object(1, "order")
        log.add_object(2, "item")

        assert log.object_count == 2
        assert log.has_object(1)
        assert log.get_object(2).object_type == "item"
        assert {o.id for o in log.iter_objects()} == {1, 2}

    def test_random_access(self, chain_log):
        """Event ids resolve to their full object set."""
        assert chain_log.get_event_objects(1) == frozenset({1, 2})
        assert chain_log.get_event(2).objects == frozenset({2, 3})

    def test_duplicate_event(self):
        """Event ids are unique."""
        log = EventLog()
        log.add_event(1, {1})
        with pytest.raises(ValueError):
            log.add_event(1, {2})

    def test_unknown_lookups(self):
        """Missing ids are integrity errors naming the id."""
        log = EventLog()
        with pytest.raises(IntegrityError) as exc_info:
            log.get_event(3)
        assert exc_info.value.kind == "event"
        with pytest.raises(IntegrityError) as exc_info:
            log.get_object(4)
        assert exc_info.value.kind == "object"
        assert "4" in str(exc_info.value)

    def test_from_records_accepts_models(self):
        """Records and plain pairs can be mixed."""
        log = EventLog.from_records(
            objects=[ObjectRecord(id=1, object_type="A"), (2, "B")],
            events=[EventRecord(id=1, objects=frozenset({1, 2})), (2, [2])],
        )
        assert log.get_object(1).object_type == "A"
        assert log.get_event_objects(2) == frozenset({2})

    def test_dict_roundtrip(self, chain_log):
        """to_dict() output rebuilds an equivalent log."""
        rebuilt = EventLog.from_dict(chain_log.to_dict())
        assert rebuilt.to_dict() == chain_log.to_dict()
        assert [e.id for e in rebuilt.iter_events()] == [1, 2]
