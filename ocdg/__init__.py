"""
OCDG - Object-centric directed graphs.

Derives a directed, multi-relational graph over the objects of an
object-centric event log. Every edge records which relations hold
between two objects and the events that justify each of them.

Layers:
- Event log: objects, events, and the objects each event involves
- Lifelines: every object's ordered participation history
- Relations: twelve evaluators grouped into three execution tiers
- Builder: ingestion, parallel per-object evaluation, reconciliation
"""
from ocdg.core.errors import IntegrityError
from ocdg.core.models import (
    EventRecord,
    ObjectRecord,
    Relation,
    RelationProposal,
    RelationTier,
)
from ocdg.core.lifeline import Lifeline, LifelineSnapshot, LifelineStore
from ocdg.core.graph import ObjectGraph
from ocdg.log.event_log import EventLog
from ocdg.config import BuildConfig
from ocdg.builder import BuildResult, BuildStats, GraphBuilder, build_graph

__version__ = "0.1.0"

__all__ = [
    # Errors
    "IntegrityError",
    # Models
    "EventRecord",
    "ObjectRecord",
    "Relation",
    "RelationProposal",
    "RelationTier",
    # Lifelines
    "Lifeline",
    "LifelineSnapshot",
    "LifelineStore",
    # Graph
    "ObjectGraph",
    # Log
    "EventLog",
    # Construction
    "BuildConfig",
    "BuildResult",
    "BuildStats",
    "GraphBuilder",
    "build_graph",
]
