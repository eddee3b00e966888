"""
Tests for OCDG core models and lifelines.
"""

import pytest
from pydantic import ValidationError

from ocdg.core.errors import IntegrityError
from ocdg.core.lifeline import DEFAULT_OBJECT_TYPE, Lifeline, LifelineStore
from ocdg.core.models import (
    EventRecord,
    ObjectRecord,
    Relation,
    RelationProposal,
    RelationTier,
)


class TestRelation:
    """Tests for the relation enumeration."""

    def test_twelve_relations(self):
        """There are exactly twelve relations."""
        assert len(Relation) == 12

    def test_tiers(self):
        """Tier classification."""
        assert Relation.of_tier(RelationTier.PRIMITIVE) == [Relation.INTERACTS, Relation.DESCENDANTS]
        assert Relation.of_tier(RelationTier.WHOLE) == [Relation.SPLIT]
        assert len(Relation.of_tier(RelationTier.INSTANCE)) == 9
        assert Relation.MERGE.tier == RelationTier.INSTANCE

    def test_positions_stable(self):
        """Positions follow declaration order."""
        assert Relation.INTERACTS.position == 0
        assert Relation.DESCENDANTS.position == 4
        assert Relation.SPLIT.position == 7
        assert Relation.ENGAGES.position == 11

    def test_parse(self):
        """Names and values parse case-insensitively."""
        assert Relation.parse("COBIRTH") is Relation.COBIRTH
        assert Relation.parse("cobirth") is Relation.COBIRTH
        assert Relation.parse(" Peeler ") is Relation.PEELER
        assert Relation.parse(Relation.SPLIT) is Relation.SPLIT

    def test_parse_unknown(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            Relation.parse("FRIENDS")
        with pytest.raises(ValueError):
            Relation.parse(3)

    def test_str_is_name(self):
        """Display uses the member name."""
        assert str(Relation.INHERITANCE) == "INHERITANCE"


class TestRecords:
    """Tests for log records."""

    def test_object_record(self):
        """Objects carry id and type and are frozen."""
        obj = ObjectRecord(id=1, object_type="order")
        assert obj.object_type == "order"
        with pytest.raises(ValidationError):
            obj.object_type = "item"

    def test_negative_ids_rejected(self):
        """Identifiers are non-negative."""
        with pytest.raises(ValidationError):
            ObjectRecord(id=-1, object_type="order")
        with pytest.raises(ValidationError):
            EventRecord(id=1, objects=frozenset({-3}))

    def test_event_objects_are_a_set(self):
        """Duplicates in the object map collapse."""
        event = EventRecord(id=4, objects=[1, 2, 2])
        assert event.objects == frozenset({1, 2})

    def test_proposal_single(self):
        """Single-event proposals."""
        proposal = RelationProposal.single(1, 2, Relation.INHERITANCE, 9)
        assert proposal.events == frozenset({9})
        assert proposal == RelationProposal(1, 2, Relation.INHERITANCE, frozenset({9}))


class TestLifelineStore:
    """Tests for the lifeline store."""

    def test_register_and_append(self):
        """Events are kept in append order."""
        store = LifelineStore()
        store.register(1, "order")
        store.append(1, 30)
        store.append(1, 10)

        assert store.get(1) == ("order", [30, 10])
        assert store.length(1) == 2
        assert 1 in store
        assert len(store) == 1

    def test_default_type(self):
        """Objects registered without a type get the default one."""
        store = LifelineStore()
        store.register(1)
        assert store.get(1) == (DEFAULT_OBJECT_TYPE, [])

        store.register(1, "item")
        store.register(1)
        assert store.get(1)[0] == "item"

    def test_register_keeps_events(self):
        """Re-registering does not reset the sequence."""
        store = LifelineStore()
        store.register(1, "order")
        store.append(1, 5)
        store.register(1, "order")
        assert store.get(1)[1] == [5]

    def test_unknown_object(self):
        """Unregistered lookups are integrity errors."""
        store = LifelineStore()
        with pytest.raises(IntegrityError) as exc_info:
            store.get(7)
        assert exc_info.value.identifier == 7
        with pytest.raises(IntegrityError):
            store.append(7, 1)
        with pytest.raises(IntegrityError):
            store.length(7)

    def test_get_returns_copy(self):
        """Callers cannot grow a lifeline through get()."""
        store = LifelineStore()
        store.register(1, "order")
        store.get(1)[1].append(99)
        assert store.get(1)[1] == []

    def test_freeze(self):
        """Snapshots do not follow later appends."""
        store = LifelineStore()
        store.register(1, "order")
        store.append(1, 1)
        snapshot = store.freeze()
        store.append(1, 2)

        assert snapshot[1].events == (1,)
        assert len(snapshot) == 1
        assert list(snapshot) == [1]
        assert 2 not in snapshot
        assert snapshot.get(2) is None
        with pytest.raises(IntegrityError):
            snapshot[2]


class TestLifeline:
    """Tests for frozen lifelines."""

    def test_birth_and_death(self):
        """First and last events."""
        lifeline = Lifeline(1, "order", (4, 5, 6))
        assert lifeline.birth == 4
        assert lifeline.death == 6
        assert len(lifeline) == 3
        assert lifeline.event_set == {4, 5, 6}

    def test_empty(self):
        """Empty lifelines have no birth or death."""
        lifeline = Lifeline(1, "order")
        assert lifeline.birth is None
        assert lifeline.death is None
        assert len(lifeline) == 0

    def test_equality_ignores_cache(self):
        """Lifelines compare by id, type and events."""
        assert Lifeline(1, "A", (1, 2)) == Lifeline(1, "A", (1, 2))
        assert Lifeline(1, "A", (1, 2)) != Lifeline(1, "A", (2, 1))
