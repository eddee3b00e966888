"""
Core data model for OCDG.

This module defines the building blocks of graph construction:
- Relation / RelationTier: what is mined and when
- LifelineStore / Lifeline: per-object event histories
- ObjectGraph: nodes, edges and relation evidence
"""

from ocdg.core.errors import IntegrityError
from ocdg.core.models import EventRecord, ObjectRecord, Relation, RelationProposal, RelationTier
from ocdg.core.lifeline import Lifeline, LifelineSnapshot, LifelineStore
from ocdg.core.graph import ObjectGraph

__all__ = [
    "IntegrityError",
    "EventRecord",
    "ObjectRecord",
    "Relation",
    "RelationProposal",
    "RelationTier",
    "Lifeline",
    "LifelineSnapshot",
    "LifelineStore",
    "ObjectGraph",
]
