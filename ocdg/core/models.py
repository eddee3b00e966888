"""
Core models for object-centric graph construction.

This module defines the vocabulary shared by every other layer:

- ObjectRecord / EventRecord: read-only records of the event log
- Relation: the twelve relationship kinds mined between object pairs
- RelationTier: what state a relation needs before it can be evaluated
- RelationProposal: an evaluator's output, merged later by the builder

Design Philosophy:
    An event log says which objects met in which event. The graph says
    how those objects relate to each other over their whole lives, and
    every relation keeps the events that justify it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class RelationTier(str, Enum):
    """Execution tier of a relation, ordered by data dependency."""

    PRIMITIVE = "primitive"  # current event + lifelines so far
    INSTANCE = "instance"  # two adjacent objects' frozen lifelines
    WHOLE = "whole"  # an object's full outgoing neighborhood


class Relation(str, Enum):
    """Relationship kinds between two objects."""

    INTERACTS = "interacts"
    COLIFE = "colife"
    COBIRTH = "cobirth"
    CODEATH = "codeath"
    DESCENDANTS = "descendants"
    INHERITANCE = "inheritance"
    CONSUMES = "consumes"
    SPLIT = "split"
    MERGE = "merge"
    MINION = "minion"
    PEELER = "peeler"
    ENGAGES = "engages"

    def __str__(self) -> str:
        return self.name

    @property
    def tier(self) -> RelationTier:
        """Tier this relation is evaluated in."""
        return _RELATION_TIERS[self]

    @property
    def position(self) -> int:
        """Stable numeric position of the relation (0..11)."""
        return _RELATION_ORDER.index(self)

    @classmethod
    def parse(cls, name: Any) -> Relation:
        """
        Resolve a relation from a member, name or value.

        Args:
            name: Relation member, "INTERACTS" or "interacts"

        Returns:
            The matching Relation

        Raises:
            ValueError: If the name does not match any relation
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            key = name.strip()
            if key.upper() in cls.__members__:
                return cls.__members__[key.upper()]
            try:
                return cls(key.lower())
            except ValueError:
                pass
        raise ValueError(f"Unknown relation: {name!r}")

    @classmethod
    def of_tier(cls, tier: RelationTier) -> list[Relation]:
        """All relations classified into a tier, in index order."""
        return [rel for rel in _RELATION_ORDER if _RELATION_TIERS[rel] == tier]


_RELATION_ORDER: tuple[Relation, ...] = tuple(Relation)

_RELATION_TIERS: dict[Relation, RelationTier] = {
    Relation.INTERACTS: RelationTier.PRIMITIVE,
    Relation.DESCENDANTS: RelationTier.PRIMITIVE,
    Relation.COLIFE: RelationTier.INSTANCE,
    Relation.COBIRTH: RelationTier.INSTANCE,
    Relation.CODEATH: RelationTier.INSTANCE,
    Relation.INHERITANCE: RelationTier.INSTANCE,
    Relation.CONSUMES: RelationTier.INSTANCE,
    Relation.MERGE: RelationTier.INSTANCE,
    Relation.MINION: RelationTier.INSTANCE,
    Relation.PEELER: RelationTier.INSTANCE,
    Relation.ENGAGES: RelationTier.INSTANCE,
    Relation.SPLIT: RelationTier.WHOLE,
}


class ObjectRecord(BaseModel):
    """
    An object declared by the event log.

    Objects are identified by a non-negative integer and carry a single
    type label (e.g. "order", "item", "package").
    """

    id: int = Field(..., ge=0, description="Object identifier")
    object_type: str = Field(..., description="Object type label")

    model_config = {"frozen": True, "extra": "forbid"}


class EventRecord(BaseModel):
    """
    An event of the log and the set of objects it involves.

    The object set is unordered; the position of the event in the log is
    what orders it relative to other events.
    """

    id: int = Field(..., ge=0, description="Event identifier")
    objects: frozenset[int] = Field(
        default_factory=frozenset,
        description="Ids of the objects participating in this event"
    )

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("objects")
    @classmethod
    def validate_objects(cls, v: frozenset[int]) -> frozenset[int]:
        """Object ids are non-negative."""
        if any(oid < 0 for oid in v):
            raise ValueError("object ids must be non-negative")
        return v


@dataclass(frozen=True)
class RelationProposal:
    """
    A relation instance found by an evaluator, not yet merged.

    Attributes:
        source: Source object id
        target: Target object id
        relation: Relation kind
        events: Events justifying the relation (non-empty)
    """

    source: int
    target: int
    relation: Relation
    events: frozenset[int]

    @classmethod
    def single(cls, source: int, target: int, relation: Relation, event_id: int) -> RelationProposal:
        """Proposal justified by exactly one event."""
        return cls(source, target, relation, frozenset((event_id,)))
