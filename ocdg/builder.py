"""
Graph construction.

Builds an ObjectGraph from an EventLog in three strictly ordered phases:

1. Ingestion (sequential, log order): extend lifelines with each event,
   then evaluate PRIMITIVE relations for every ordered pair of objects in
   that event and merge them right away.
2. Per-object evaluation (parallel, one task per node): run the WHOLE
   relation on the node's outgoing neighborhood, then every INSTANCE
   relation on each neighbor it already relates to. Tasks only read
   frozen state and return their proposals by value.
3. Reconciliation (sequential): merge every proposal into the graph.

Evidence merging is a plain set union, so the result does not depend on
how phase 2 tasks are scheduled.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from itertools import permutations
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field

from ocdg.config import BuildConfig
from ocdg.core.graph import ObjectGraph
from ocdg.core.lifeline import LifelineSnapshot, LifelineStore
from ocdg.core.models import Relation, RelationProposal, RelationTier
from ocdg.log.event_log import EventLog
from ocdg.relations.evaluators import evaluator_for

logger = logging.getLogger(__name__)


class BuildStats(BaseModel):
    """Counters collected while building a graph."""

    events: int = Field(default=0, description="Events ingested")
    nodes: int = Field(default=0, description="Nodes in the final graph")
    edges: int = Field(default=0, description="Directed edges in the final graph")
    primitive_proposals: int = Field(default=0, description="Proposals merged during ingestion")
    derived_proposals: int = Field(default=0, description="Proposals merged during reconciliation")
    relation_counts: dict[str, int] = Field(
        default_factory=dict,
        description="Directed pairs per relation name"
    )

    model_config = {"extra": "forbid"}


class BuildResult:
    """A finished graph with the lifelines it was derived from."""

    def __init__(self, graph: ObjectGraph, lifelines: LifelineSnapshot, stats: BuildStats):
        self.graph = graph
        self.lifelines = lifelines
        self.stats = stats

    def __repr__(self) -> str:
        return f"BuildResult({self.graph!r}, events={self.stats.events})"


class GraphBuilder:
    """
    Runs the three construction phases over one event log.

    The graph is only written from the calling thread. Workers of the
    parallel phase read the frozen lifelines and the phase 1 graph and
    return proposal lists.

    Example:
        ```python
        builder = GraphBuilder(log, BuildConfig(relations=["INTERACTS", "COBIRTH"]))
        result = builder.build()
        result.graph.evidence(1, 2, Relation.COBIRTH)
        ```
    """

    def __init__(self, log: EventLog, config: Optional[BuildConfig] = None):
        """
        Initialize the builder.

        Args:
            log: Event log to read
            config: Relation selection and worker count
        """
        self._log = log
        self._config = config or BuildConfig()
        self._primitive = self._config.relations_for(RelationTier.PRIMITIVE)
        self._instance = self._config.relations_for(RelationTier.INSTANCE)
        self._whole = self._config.relations_for(RelationTier.WHOLE)

    @property
    def config(self) -> BuildConfig:
        """Get the build configuration."""
        return self._config

    def build(self) -> BuildResult:
        """
        Build the graph.

        Returns:
            BuildResult with the graph, frozen lifelines and counters

        Raises:
            IntegrityError: If the log references an undeclared object or
                event. Nothing is returned in that case.
        """
        if not self._config.relations:
            logger.warning("No relations selected; the graph will have nodes only")

        graph = ObjectGraph()
        store = LifelineStore()
        stats = BuildStats()

        stats.primitive_proposals = self._ingest(graph, store, stats)
        lifelines = store.freeze()
        logger.info(
            f"Ingested {stats.events} events: {graph.node_count} objects, "
            f"{graph.edge_count} primitive edges"
        )

        proposals = self._evaluate(graph, lifelines)
        stats.derived_proposals = graph.apply(proposals)
        logger.info(f"Reconciled {stats.derived_proposals} derived proposals")

        stats.nodes = graph.node_count
        stats.edges = graph.edge_count
        stats.relation_counts = {rel.name: count for rel, count in graph.relation_counts().items()}
        return BuildResult(graph, lifelines, stats)

    # =========================================================================
    # PHASE 1 - INGESTION
    # =========================================================================

    def _ingest(self, graph: ObjectGraph, store: LifelineStore, stats: BuildStats) -> int:
        applied = 0
        for event in self._log.iter_events():
            stats.events += 1
            for oid in event.objects:
                if oid not in store:
                    obj = self._log.get_object(oid)
                    store.register(oid, obj.object_type)
                    graph.ensure_node(oid, obj.object_type)
                store.append(oid, event.id)

            if len(event.objects) < 2 or not self._primitive:
                continue
            proposals: list[RelationProposal] = []
            for source_id, target_id in permutations(sorted(event.objects), 2):
                for rel in self._primitive:
                    proposals.extend(evaluator_for(rel)(store, source_id, target_id, event.id))
            applied += graph.apply(proposals)
        return applied

    # =========================================================================
    # PHASE 2 - PER-OBJECT EVALUATION
    # =========================================================================

    def _evaluate(self, graph: ObjectGraph, lifelines: LifelineSnapshot) -> list[RelationProposal]:
        """
        Fan out one read-only task per object.

        Evaluators are pure Python, so the GIL keeps threads from running
        them truly in parallel; the pool bounds and isolates the tasks
        rather than speeding them up.
        """
        if not self._instance and not self._whole:
            return []

        nodes = sorted(graph.nodes())
        neighborhoods = {oid: graph.successors(oid) for oid in nodes}

        if self._config.max_workers == 1:
            results = [self._evaluate_object(oid, neighborhoods[oid], graph, lifelines) for oid in nodes]
        else:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as executor:
                results = list(executor.map(
                    lambda oid: self._evaluate_object(oid, neighborhoods[oid], graph, lifelines),
                    nodes,
                ))

        proposals = [proposal for batch in results for proposal in batch]
        logger.info(f"Evaluated {len(nodes)} objects: {len(proposals)} proposals")
        return proposals

    def _evaluate_object(
        self,
        object_id: int,
        neighbors: list[int],
        graph: ObjectGraph,
        lifelines: LifelineSnapshot,
    ) -> list[RelationProposal]:
        """Evaluate WHOLE and INSTANCE relations for one object. Read-only."""
        source = lifelines[object_id]
        proposals: list[RelationProposal] = []

        if self._whole:
            neighborhood = [lifelines[oid] for oid in neighbors]
            for rel in self._whole:
                proposals.extend(evaluator_for(rel)(source, neighborhood))

        for target_id in neighbors:
            if not graph.has_any_relation(object_id, target_id):
                continue
            target = lifelines[target_id]
            for rel in self._instance:
                proposals.extend(evaluator_for(rel)(source, target, self._log))

        logger.debug(f"Object {object_id}: {len(neighbors)} neighbors, {len(proposals)} proposals")
        return proposals


def build_graph(
    log: EventLog,
    relations: Optional[Iterable[Union[Relation, str]]] = None,
    max_workers: Optional[int] = None,
) -> ObjectGraph:
    """
    Build the object graph of a log.

    Args:
        log: Event log to read
        relations: Relations to compute (None = all). Selecting any
            INSTANCE or WHOLE relation also computes INTERACTS, so its
            evidence appears in the graph even when not listed.
        max_workers: Worker threads for the parallel pass

    Returns:
        The finished ObjectGraph
    """
    options: dict = {}
    if relations is not None:
        options["relations"] = list(relations)
    if max_workers is not None:
        options["max_workers"] = max_workers
    return GraphBuilder(log, BuildConfig(**options)).build().graph

