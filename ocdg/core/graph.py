"""
Object graph with relation evidence.

The graph is a directed multi-relational graph over the objects of an
event log:

- Nodes are object ids (with their type as a node attribute)
- At most one edge exists per ordered (source, target) pair
- Each edge carries, per relation kind, the set of events that justify it

Design Philosophy:
    An edge is never just "a is related to b". It always says which
    relation holds and which events prove it. Evidence only grows, by
    set union, so the order in which findings are merged never changes
    the result.

Implementation uses NetworkX for the node/edge structure. Evidence lives
in a separate index keyed by the (source, target) pair.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable, Iterator, Optional

import networkx as nx

from ocdg.core.errors import IntegrityError
from ocdg.core.models import Relation, RelationProposal


class ObjectGraph:
    """
    Directed node/edge structure plus a layered evidence index.

    Writes (ensure_node, ensure_edge, add_evidence, apply) are only made by
    the single-threaded phases of construction. Reads are safe to perform
    concurrently once writing has stopped.

    Thread Safety:
        This class is NOT thread-safe for writers. No lock is taken; the
        builder never writes while workers are reading.
    """

    def __init__(self):
        """Initialize an empty graph."""
        self._graph: nx.DiGraph = nx.DiGraph()
        # (source, target) -> relation -> event ids
        self._evidence: dict[tuple[int, int], dict[Relation, set[int]]] = {}

    @property
    def node_count(self) -> int:
        """Get the number of nodes in the graph."""
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        """Get the number of directed edges in the graph."""
        return self._graph.number_of_edges()

    # =========================================================================
    # WRITES
    # =========================================================================

    def ensure_node(self, object_id: int, object_type: Optional[str] = None) -> None:
        """
        Add an object node if it does not exist yet.

        Args:
            object_id: Object identifier
            object_type: Optional type label stored as node attribute
        """
        if object_id not in self._graph:
            self._graph.add_node(object_id, object_type=object_type)
        elif object_type is not None:
            self._graph.nodes[object_id]["object_type"] = object_type

    def ensure_edge(self, source_id: int, target_id: int) -> tuple[int, int]:
        """
        Add a directed edge if it does not exist yet.

        Both endpoints must already be nodes.

        Returns:
            The (source, target) key of the existing or new edge

        Raises:
            IntegrityError: If either endpoint is not a node
        """
        if source_id not in self._graph:
            raise IntegrityError(source_id, "object", f"Edge source {source_id} is not a node")
        if target_id not in self._graph:
            raise IntegrityError(target_id, "object", f"Edge target {target_id} is not a node")
        if not self._graph.has_edge(source_id, target_id):
            self._graph.add_edge(source_id, target_id)
            self._evidence[(source_id, target_id)] = {}
        return (source_id, target_id)

    def add_evidence(
        self,
        source_id: int,
        target_id: int,
        relation: Relation,
        events: Iterable[int],
    ) -> None:
        """
        Union events into the evidence of a (source, target, relation) triple.

        The edge is created if needed. An empty collection of events is
        ignored, so every visible relation has non-empty evidence.

        Args:
            source_id: Source object id
            target_id: Target object id
            relation: Relation kind
            events: Event ids justifying the relation
        """
        events = set(events)
        if not events:
            return
        key = self.ensure_edge(source_id, target_id)
        relations = self._evidence[key]
        if relation in relations:
            relations[relation] |= events
        else:
            relations[relation] = events

    def apply(self, proposals: Iterable[RelationProposal]) -> int:
        """
        Merge evaluator proposals into the graph.

        Returns:
            Number of proposals applied
        """
        count = 0
        for proposal in proposals:
            self.add_evidence(proposal.source, proposal.target, proposal.relation, proposal.events)
            count += 1
        return count

    # =========================================================================
    # READS
    # =========================================================================

    def has_node(self, object_id: int) -> bool:
        """Check if an object is a node of the graph."""
        return object_id in self._graph

    def has_edge(self, source_id: int, target_id: int) -> bool:
        """Check if a directed edge exists between two objects."""
        return self._graph.has_edge(source_id, target_id)

    def has_any_relation(self, source_id: int, target_id: int) -> bool:
        """Check if at least one relation holds from source to target."""
        return bool(self._evidence.get((source_id, target_id)))

    def object_type(self, object_id: int) -> Optional[str]:
        """
        Get the type label stored on a node.

        Raises:
            IntegrityError: If the object is not a node
        """
        if object_id not in self._graph:
            raise IntegrityError(object_id)
        return self._graph.nodes[object_id].get("object_type")

    def successors(self, object_id: int) -> list[int]:
        """
        Get the outgoing neighbors of an object, sorted.

        Raises:
            IntegrityError: If the object is not a node
        """
        if object_id not in self._graph:
            raise IntegrityError(object_id)
        return sorted(self._graph.successors(object_id))

    def nodes(self) -> Iterator[int]:
        """Iterate over object ids."""
        return iter(self._graph.nodes())

    def edges(self) -> Iterator[tuple[int, int, dict[Relation, frozenset[int]]]]:
        """
        Iterate over directed edges with their evidence.

        Yields:
            (source, target, {relation: events}) per edge
        """
        for source_id, target_id in self._graph.edges():
            yield source_id, target_id, self.relations_between(source_id, target_id)

    def relations_between(self, source_id: int, target_id: int) -> dict[Relation, frozenset[int]]:
        """Get every relation from source to target with its evidence."""
        relations = self._evidence.get((source_id, target_id), {})
        return {rel: frozenset(events) for rel, events in relations.items()}

    def evidence(self, source_id: int, target_id: int, relation: Relation) -> frozenset[int]:
        """Get the evidence of one relation, empty if it does not hold."""
        return frozenset(self._evidence.get((source_id, target_id), {}).get(relation, ()))

    def relation_counts(self) -> dict[Relation, int]:
        """Count the directed pairs each relation holds for."""
        counts: dict[Relation, int] = defaultdict(int)
        for relations in self._evidence.values():
            for rel in relations:
                counts[rel] += 1
        return dict(counts)

    def relation_subgraph(self, relation: Relation) -> nx.DiGraph:
        """
        Create a NetworkX graph restricted to one relation.

        Every node is kept. Edges carry their evidence as the "events"
        attribute.

        Args:
            relation: Relation to keep

        Returns:
            New nx.DiGraph
        """
        subgraph = nx.DiGraph()
        subgraph.add_nodes_from(self._graph.nodes(data=True))
        for (source_id, target_id), relations in self._evidence.items():
            if relation in relations:
                subgraph.add_edge(source_id, target_id, events=frozenset(relations[relation]))
        return subgraph

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize the graph to a plain dictionary.

        Node, edge and event lists are sorted so equal graphs give equal
        dictionaries.
        """
        return {
            "nodes": [
                {"id": oid, "object_type": self._graph.nodes[oid].get("object_type")}
                for oid in sorted(self._graph.nodes())
            ],
            "edges": [
                {
                    "source": source_id,
                    "target": target_id,
                    "relations": {
                        rel.name: sorted(events)
                        for rel, events in sorted(
                            self._evidence[(source_id, target_id)].items(),
                            key=lambda item: item[0].position,
                        )
                    },
                }
                for source_id, target_id in sorted(self._graph.edges())
            ],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectGraph):
            return NotImplemented
        return (
            set(self._graph.nodes()) == set(other._graph.nodes())
            and self._evidence == other._evidence
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ObjectGraph(nodes={self.node_count}, edges={self.edge_count})"
