"""
Relation evaluators.

One pure function per relation kind. Evaluators read lifelines (and, for
PEELER, the event log) and return RelationProposals; they never touch the
graph. The builder decides when each one runs, based on its tier:

- PRIMITIVE: run inline while the log is ingested, per event and ordered
  pair of objects in that event
- INSTANCE: run after ingestion on frozen lifelines, per adjacent pair
- WHOLE: run after ingestion on an object and its outgoing neighborhood

Symmetric relations (COBIRTH, CODEATH, PEELER, ENGAGES) are evaluated for
source < target only and propose both directions at once, so swapping the
pair can never produce a second, different evidence set.
"""

from __future__ import annotations

from typing import Callable, Sequence

from ocdg.core.lifeline import Lifeline, LifelineStore
from ocdg.core.models import Relation, RelationProposal, RelationTier
from ocdg.log.event_log import EventLog


PrimitiveEvaluator = Callable[[LifelineStore, int, int, int], list[RelationProposal]]
InstanceEvaluator = Callable[[Lifeline, Lifeline, EventLog], list[RelationProposal]]
WholeEvaluator = Callable[[Lifeline, Sequence[Lifeline]], list[RelationProposal]]


def _both_ways(source: Lifeline, target: Lifeline, relation: Relation, events: frozenset[int]) -> list[RelationProposal]:
    return [
        RelationProposal(source.object_id, target.object_id, relation, events),
        RelationProposal(target.object_id, source.object_id, relation, events),
    ]


# =============================================================================
# PRIMITIVE
# =============================================================================

def interacts(store: LifelineStore, source_id: int, target_id: int, event_id: int) -> list[RelationProposal]:
    """Two objects took part in the same event."""
    if source_id == target_id:
        return []
    return [RelationProposal.single(source_id, target_id, Relation.INTERACTS, event_id)]


def descendants(store: LifelineStore, source_id: int, target_id: int, event_id: int) -> list[RelationProposal]:
    """
    The source spawns the target.

    Lifelines already include event_id: the source has been seen before
    and this event is the target's first.
    """
    if source_id == target_id:
        return []
    source_len = store.length(source_id)
    target_len = store.length(target_id)
    if source_len > 1 and target_len == 1:
        return [RelationProposal.single(source_id, target_id, Relation.DESCENDANTS, event_id)]
    return []


# =============================================================================
# INSTANCE
# =============================================================================

def colife(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """Both objects share exactly the same lifeline, in the same order."""
    if not source.events or source.events != target.events:
        return []
    return [RelationProposal(source.object_id, target.object_id, Relation.COLIFE, source.event_set)]


def cobirth(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """Both objects are born in the same event."""
    if source.object_id >= target.object_id or source.birth is None:
        return []
    if source.birth != target.birth:
        return []
    return _both_ways(source, target, Relation.COBIRTH, frozenset((source.birth,)))


def codeath(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """Both objects die in the same event."""
    if source.object_id >= target.object_id or source.death is None:
        return []
    if source.death != target.death:
        return []
    return _both_ways(source, target, Relation.CODEATH, frozenset((source.death,)))


def inheritance(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """The target, of the same type, begins exactly where the source ends."""
    if source.death is None or source.object_type != target.object_type:
        return []
    if source.death != target.birth:
        return []
    return [RelationProposal.single(source.object_id, target.object_id, Relation.INHERITANCE, source.death)]


def consumes(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """The target, of another type, begins exactly where the source ends."""
    if source.death is None or source.object_type == target.object_type:
        return []
    if source.death != target.birth:
        return []
    return [RelationProposal.single(source.object_id, target.object_id, Relation.CONSUMES, source.death)]


def merge(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """
    Same type, different last events.

    This fires for any same-typed adjacent pair whose deaths differ, which
    is much broader than the name suggests. Kept literally.
    """
    if source.death is None or target.death is None:
        return []
    if source.object_type != target.object_type or source.death == target.death:
        return []
    return [RelationProposal.single(source.object_id, target.object_id, Relation.MERGE, source.death)]


def minion(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """The target's whole (shorter) lifeline happens inside the source's."""
    if len(source) <= len(target):
        return []
    common = source.event_set & target.event_set
    if len(common) != len(target):
        return []
    return [RelationProposal(source.object_id, target.object_id, Relation.MINION, frozenset(common))]


def peeler(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """
    The pair never meets in an event with a third object.

    Walks the shorter lifeline (the source's on ties). Any event with more
    than two objects that contains both ends the check with no relation.
    Every walked event becomes evidence, whether or not it involves both.
    """
    if source.object_id >= target.object_id:
        return []
    shorter = target if len(source) > len(target) else source
    if not shorter.events:
        return []
    for event_id in shorter.events:
        objects = log.get_event_objects(event_id)
        if len(objects) > 2 and source.object_id in objects and target.object_id in objects:
            return []
    return _both_ways(source, target, Relation.PEELER, shorter.event_set)


def engages(source: Lifeline, target: Lifeline, log: EventLog) -> list[RelationProposal]:
    """Both objects meet while neither is being born or dying."""
    if source.object_id >= target.object_id:
        return []
    if not source.events or not target.events:
        return []
    if (
        source.birth in target.event_set
        or source.death in target.event_set
        or target.birth in source.event_set
        or target.death in source.event_set
    ):
        return []
    shared = source.event_set & target.event_set
    if not shared:
        return []
    return _both_ways(source, target, Relation.ENGAGES, frozenset(shared))


# =============================================================================
# WHOLE
# =============================================================================

def split(source: Lifeline, neighbors: Sequence[Lifeline]) -> list[RelationProposal]:
    """
    The source ends in an event that starts several objects of its type.

    Only fires when more than one such neighbor exists.
    """
    if source.death is None:
        return []
    children = [
        neighbor.object_id
        for neighbor in neighbors
        if neighbor.object_type == source.object_type and neighbor.birth == source.death
    ]
    if len(children) < 2:
        return []
    return [
        RelationProposal.single(source.object_id, child_id, Relation.SPLIT, source.death)
        for child_id in children
    ]


PRIMITIVE_EVALUATORS: dict[Relation, PrimitiveEvaluator] = {
    Relation.INTERACTS: interacts,
    Relation.DESCENDANTS: descendants,
}

INSTANCE_EVALUATORS: dict[Relation, InstanceEvaluator] = {
    Relation.COLIFE: colife,
    Relation.COBIRTH: cobirth,
    Relation.CODEATH: codeath,
    Relation.INHERITANCE: inheritance,
    Relation.CONSUMES: consumes,
    Relation.MERGE: merge,
    Relation.MINION: minion,
    Relation.PEELER: peeler,
    Relation.ENGAGES: engages,
}

WHOLE_EVALUATORS: dict[Relation, WholeEvaluator] = {
    Relation.SPLIT: split,
}

_EVALUATORS_BY_TIER: dict[RelationTier, dict] = {
    RelationTier.PRIMITIVE: PRIMITIVE_EVALUATORS,
    RelationTier.INSTANCE: INSTANCE_EVALUATORS,
    RelationTier.WHOLE: WHOLE_EVALUATORS,
}


def evaluator_for(relation: Relation) -> Callable[..., list[RelationProposal]]:
    """Get the evaluator of a relation from its tier's table."""
    return _EVALUATORS_BY_TIER[relation.tier][relation]
