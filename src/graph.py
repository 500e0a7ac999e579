"""NetworkX relationship graph and the derived family lookups."""

import logging
from collections.abc import Iterable
from typing import Generic

import networkx as nx

from models import E, Gender, Node, PersonSchema

logger = logging.getLogger("genogram.graph")

PARENT_OF = "PARENT_OF"
SPOUSE_OF = "SPOUSE_OF"

# Edge keys in the multigraph; a pair of people can be linked by several of them.
FATHER = "father"
MOTHER = "mother"
SPOUSE = "spouse"


def build_relationship_graph(nodes: Iterable[Node[E]], schema: PersonSchema[E]) -> nx.MultiDiGraph:
    """
    Build a directed multigraph from flat per-person references.

    Every node carries its ``node`` object and its ``order`` in the input list.
    PARENT_OF edges run parent -> child (keyed ``father`` or ``mother``);
    SPOUSE_OF edges run from the person declaring the marriage to the spouse.
    References to ids that are not in ``nodes`` are dropped.
    """
    nodes = list(nodes)
    G = nx.MultiDiGraph()

    for order, node in enumerate(nodes):
        G.add_node(node.id, node=node, order=order)

    dangling = 0
    for node in nodes:
        for role, parent_ids in (
            (FATHER, schema.father_ids(node.data)),
            (MOTHER, schema.mother_ids(node.data)),
        ):
            for parent_id in parent_ids or []:
                if parent_id not in G or parent_id == node.id:
                    dangling += 1
                    continue
                G.add_edge(parent_id, node.id, key=role, relationship_type=PARENT_OF)

        for spouse_id in schema.spouse_ids(node.data) or []:
            if spouse_id == node.id:
                continue
            if spouse_id not in G:
                dangling += 1
                continue
            G.add_edge(node.id, spouse_id, key=SPOUSE, relationship_type=SPOUSE_OF)

    if dangling:
        logger.debug("Ignored %d references to unknown people", dangling)
    return G


class RelationshipIndex(Generic[E]):
    """
    Parents, spouses and children lookups over one person list.

    Results are cached per person id until ``invalidate`` is called, which
    happens at the start of every layout pass and whenever the person list
    is replaced.
    """

    def __init__(self, nodes: list[Node[E]], schema: PersonSchema[E]):
        self.schema = schema
        self._nodes = nodes
        self._graph: nx.MultiDiGraph | None = None
        self._parents_cache: dict[str, list[Node[E]]] = {}
        self._spouses_cache: dict[str, list[Node[E]]] = {}

    @property
    def nodes(self) -> list[Node[E]]:
        return self._nodes

    @property
    def graph(self) -> nx.MultiDiGraph:
        if self._graph is None:
            self._graph = build_relationship_graph(self._nodes, self.schema)
        return self._graph

    def reset(self, nodes: list[Node[E]]) -> None:
        self._nodes = nodes
        self.invalidate()

    def invalidate(self) -> None:
        self._graph = None
        self._parents_cache.clear()
        self._spouses_cache.clear()

    def node(self, node_id: str) -> Node[E] | None:
        if node_id not in self.graph:
            return None
        return self.graph.nodes[node_id]["node"]

    def is_male(self, node: Node[E]) -> bool:
        return self.schema.gender(node.data) == Gender.MALE

    def roots(self) -> list[Node[E]]:
        """People with neither father nor mother references."""
        return [
            node
            for node in self._nodes
            if not self.schema.father_ids(node.data) and not self.schema.mother_ids(node.data)
        ]

    def parents_of(self, node: Node[E]) -> list[Node[E]]:
        if node.id in self._parents_cache:
            return self._parents_cache[node.id]

        result = self._in_order(
            parent for parent, _, key in self.graph.in_edges(node.id, keys=True) if key in (FATHER, MOTHER)
        )
        self._parents_cache[node.id] = result
        return result

    def fathers_of(self, node: Node[E]) -> list[Node[E]]:
        return self._in_order(
            parent for parent, _, key in self.graph.in_edges(node.id, keys=True) if key == FATHER
        )

    def mothers_of(self, node: Node[E]) -> list[Node[E]]:
        return self._in_order(
            parent for parent, _, key in self.graph.in_edges(node.id, keys=True) if key == MOTHER
        )

    def spouses_of(self, node: Node[E]) -> list[Node[E]]:
        """
        All spouses of a person, whichever side declared the marriage.

        Spouses this person declares come first, in declaration order,
        followed by people who declare this person, in input order.
        """
        if node.id in self._spouses_cache:
            return self._spouses_cache[node.id]

        G = self.graph
        declared = [v for _, v, key in G.out_edges(node.id, keys=True) if key == SPOUSE]
        seen = set(declared)
        reverse = self._in_order(
            u for u, _, key in G.in_edges(node.id, keys=True) if key == SPOUSE and u not in seen
        )

        result = [G.nodes[spouse_id]["node"] for spouse_id in declared] + reverse
        self._spouses_cache[node.id] = result
        return result

    def declared_by_males(self, node: Node[E]) -> list[Node[E]]:
        """Male people whose own spouse list names this person."""
        declarers = self._in_order(
            u for u, _, key in self.graph.in_edges(node.id, keys=True) if key == SPOUSE
        )
        return [n for n in declarers if self.is_male(n)]

    def children_of(self, group: list[Node[E]]) -> list[Node[E]]:
        """Everyone with a father or mother inside ``group``, in input order."""
        G = self.graph
        return self._in_order(
            child
            for parent in group
            if parent.id in G
            for _, child, key in G.out_edges(parent.id, keys=True)
            if key in (FATHER, MOTHER)
        )

    def _in_order(self, node_ids: Iterable[str]) -> list[Node[E]]:
        G = self.graph
        unique = set(node_ids)
        return [G.nodes[n]["node"] for n in sorted(unique, key=lambda n: G.nodes[n]["order"])]
