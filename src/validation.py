"""Relationship validation for genogram input data."""

from collections import Counter

import networkx as nx

from graph import PARENT_OF, build_relationship_graph
from models import E, Gender, Node, PersonSchema


def validate_graph(G: nx.MultiDiGraph) -> list[str]:
    """
    Validate a relationship graph for:
    - Cycles in parent-child relationships
    - Spouses who are also parent and child of each other

    Returns a list of warning messages.
    """
    warnings: list[str] = []

    # Create a subgraph with only PARENT_OF edges for cycle detection
    parent_edges = [
        (u, v) for u, v, d in G.edges(data=True) if d.get("relationship_type") == PARENT_OF
    ]
    parent_graph = nx.DiGraph(parent_edges)

    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    for u, v, d in G.edges(data=True):
        if d.get("relationship_type") == PARENT_OF:
            continue
        if parent_graph.has_edge(u, v) or parent_graph.has_edge(v, u):
            warnings.append(f"{u} and {v} are recorded as both spouses and parent/child")

    return warnings


def validate_persons(items: list[E], schema: PersonSchema[E]) -> list[str]:
    """
    Check a person list before layout. Nothing found here stops a layout:
    missing people are left out and duplicates make lookups ambiguous.

    Returns a list of warning messages.
    """
    warnings: list[str] = []
    ids = [schema.id(item) for item in items]
    known = set(ids)

    for person_id, count in Counter(ids).items():
        if count > 1:
            warnings.append(f"Duplicate id {person_id!r} appears {count} times")

    for item in items:
        person_id = schema.id(item)
        fathers = schema.father_ids(item) or []
        mothers = schema.mother_ids(item) or []
        for label, refs in (("father", fathers), ("mother", mothers), ("spouse", schema.spouse_ids(item) or [])):
            for ref in refs:
                if ref not in known:
                    warnings.append(f"{person_id!r} references unknown {label} {ref!r}")
        if len(fathers) > 1 or len(mothers) > 1:
            warnings.append(f"{person_id!r} lists {len(fathers)} fathers and {len(mothers)} mothers")
        if schema.gender(item) not in (Gender.MALE, Gender.FEMALE):
            warnings.append(f"{person_id!r} has an unsupported gender {schema.gender(item)!r}")

    nodes = [Node(schema.id(item), item) for item in items]
    warnings.extend(validate_graph(build_relationship_graph(nodes, schema)))
    return warnings
