"""
OCDG Quickstart Example

This example walks through building an object graph from a tiny
order-to-delivery log:

1. Declaring objects and events
2. Building the graph with a relation selection
3. Reading relations and their evidence
"""

import logging

from ocdg import BuildConfig, EventLog, GraphBuilder, Relation


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # ==========================================================================
    # Declare the log
    # ==========================================================================
    print("=" * 60)
    print("OCDG Quickstart")
    print("=" * 60)

    log = EventLog()
    log.add_object(1, "order")
    log.add_object(2, "item")
    log.add_object(3, "item")
    log.add_object(4, "package")

    log.add_event(100, {1})  # place order
    log.add_event(101, {1, 2, 3})  # pick items, order is done
    log.add_event(102, {2, 3, 4})  # pack items into a package
    log.add_event(103, {4})  # deliver

    print(f"\nLog: {log.object_count} objects, {log.event_count} events")

    # ==========================================================================
    # Build
    # ==========================================================================
    config = BuildConfig(relations=["INTERACTS", "CONSUMES", "COBIRTH", "CODEATH", "DESCENDANTS"])
    result = GraphBuilder(log, config).build()
    graph = result.graph

    print(f"Graph: {graph.node_count} nodes, {graph.edge_count} edges")

    # ==========================================================================
    # Inspect
    # ==========================================================================
    print("\n" + "-" * 40)
    print("Relations")
    print("-" * 40)
    for source, target, relations in sorted(graph.edges()):
        names = ", ".join(
            f"{rel}{sorted(events)}" for rel, events in sorted(relations.items(), key=lambda i: i[0].position)
        )
        print(f"  {source} -> {target}: {names}")

    print("\nItems consumed from the order:",
          [t for t in graph.successors(1) if graph.evidence(1, t, Relation.CONSUMES)])


if __name__ == "__main__":
    main()
