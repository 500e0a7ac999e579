"""
Genogram layout: recursive, overlap-free placement of family subtrees.

A family unit (one man and his wives, or a single unmarried woman) is
placed side by side along the primary axis; its children go one generation
further along the secondary axis, and the unit is then centered over the
span its children occupy. A per-generation "level edge" keeps unrelated
branches of the same generation from overlapping.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Generic

from config import LayoutConfig
from graph import RelationshipIndex
from models import ORIGIN, Axis, E, Node, PersonSchema, Point, Size
from ordering import ChildOrderingPolicy

logger = logging.getLogger("genogram.layout")


@dataclass
class LayoutContext:
    """Mutable state of one layout pass."""

    laid_out: set[str] = field(default_factory=set)
    # generation -> farthest primary-axis coordinate used so far
    level_edges: dict[int, float] = field(default_factory=dict)
    # every placement in order, with the generation it was placed at
    placed: list[tuple[Node, int]] = field(default_factory=list)

    def extend_level(self, generation: int, edge: float) -> None:
        self.level_edges[generation] = max(self.level_edges.get(generation, 0.0), edge)


class LayoutEngine(Generic[E]):
    def __init__(
        self,
        index: RelationshipIndex[E],
        policy: ChildOrderingPolicy[E],
        config: LayoutConfig,
    ):
        self.index = index
        self.policy = policy
        self.config = config
        self.axis = Axis(config.orientation)

    def run(self, nodes: list[Node[E]]) -> LayoutContext:
        """Place every node. Returns the context of the finished pass."""
        ctx = LayoutContext()

        cursor = self._layout_trees(self.index.roots(), self.config.min_pos, ctx)

        # People whose parent references all dangle never hang below a root.
        orphans = [n for n in nodes if n.id not in ctx.laid_out and not self.index.parents_of(n)]
        cursor = self._layout_trees(orphans, cursor, ctx)

        # Whatever is left sits on a parent cycle.
        leftovers = [n for n in nodes if n.id not in ctx.laid_out]
        if leftovers:
            logger.warning("%d people are unreachable from any root", len(leftovers))
            self._layout_trees(leftovers, cursor, ctx)

        return ctx

    def layout_family(
        self,
        node: Node[E],
        primary_start: float,
        secondary: float,
        generation: int,
        ctx: LayoutContext,
    ) -> float:
        """
        Lay out ``node``, its spouses and all their descendants.

        Returns the footprint of the subtree along the primary axis, measured
        from ``primary_start``; 0 when nothing was placed.
        """
        spacing = self.config.spacing
        start = max(primary_start, self.config.min_pos)

        if node.id in ctx.laid_out:
            return 0.0

        if generation in ctx.level_edges:
            start = max(start, ctx.level_edges[generation] + spacing)

        group = self._couple_group(node, ctx)
        if not group:
            return 0.0

        box = self.axis.primary_extent(self.config.box_size)
        group_size = len(group) * box + (len(group) - 1) * spacing
        for i, member in enumerate(group):
            member.position = self.axis.point(start + i * (box + spacing), secondary)
            ctx.placed.append((member, generation))

        children = [c for c in self.index.children_of(group) if c.id not in ctx.laid_out]
        children = self.policy.order(children, group)

        if not children:
            ctx.extend_level(generation, start + group_size)
            return group_size + (start - primary_start)

        child_secondary = secondary + self.axis.secondary_extent(self.config.box_size) + self.config.run_spacing
        first_placed = len(ctx.placed)

        cursor = start
        span_start = span_end = None
        for child in children:
            child_start = max(cursor, self.config.min_pos)
            footprint = self.layout_family(child, child_start, child_secondary, generation + 1, ctx)
            if not footprint:
                continue
            if span_start is None:
                span_start = self._placed_start(ctx, first_placed)
            span_end = child_start + footprint
            cursor = span_end + spacing

        if span_start is None:
            ctx.extend_level(generation, start + group_size)
            return group_size + (start - primary_start)

        shift = (span_start + span_end) / 2 - (start + group_size / 2)
        if shift >= 0:
            for member in group:
                member.position = self.axis.translate(member.position, primary=shift)
        else:
            # Parents are wider than their children: center the children instead,
            # so the subtree never reaches back before ``start``.
            self._shift_subtree(ctx, first_placed, -shift)
            span_end -= shift

        total = max(start + group_size + max(shift, 0.0), span_end) - start
        ctx.extend_level(generation, start + total)
        return total + (start - primary_start)

    def _couple_group(self, node: Node[E], ctx: LayoutContext) -> list[Node[E]]:
        index = self.index
        if index.is_male(node):
            spouses = index.spouses_of(node)
            ctx.laid_out.add(node.id)
            # A spouse already placed elsewhere is pulled into this group.
            for spouse in spouses:
                ctx.laid_out.discard(spouse.id)
            ctx.laid_out.update(spouse.id for spouse in spouses)
            return [node, *spouses]

        # She is placed next to a husband who has not been laid out yet.
        if any(male.id not in ctx.laid_out for male in index.declared_by_males(node)):
            return []

        ctx.laid_out.add(node.id)
        return [node]

    def _layout_trees(self, candidates: Iterable[Node[E]], cursor: float, ctx: LayoutContext) -> float:
        """Lay out independent trees one after another; returns the advanced cursor."""
        for root in self._sort_roots(candidates):
            if root.id in ctx.laid_out:
                continue
            footprint = self.layout_family(root, cursor, 0.0, 0, ctx)
            cursor += footprint + self.config.root_gap
        return cursor

    def _sort_roots(self, nodes: Iterable[Node[E]]) -> list[Node[E]]:
        return sorted(nodes, key=lambda n: (not self.index.is_male(n), n.id))

    def _placed_start(self, ctx: LayoutContext, first: int) -> float:
        return min(self.axis.primary(node.position) for node, _ in ctx.placed[first:])

    def _shift_subtree(self, ctx: LayoutContext, first: int, delta: float) -> None:
        box = self.axis.primary_extent(self.config.box_size)
        moved: dict[str, tuple[Node, int]] = {}
        for node, generation in ctx.placed[first:]:
            moved[node.id] = (node, generation)
        for node, generation in moved.values():
            node.position = self.axis.translate(node.position, primary=delta)
            ctx.extend_level(generation, self.axis.primary(node.position) + box)


class GenogramLayout(Generic[E]):
    """
    Owns a person list, its nodes and the layout of the whole diagram.

    Positions are recomputed from scratch on construction and whenever the
    person list is replaced.
    """

    def __init__(
        self,
        items: Iterable[E],
        schema: PersonSchema[E],
        config: LayoutConfig | None = None,
        calculate: bool = True,
    ):
        self.schema = schema
        self.config = config or LayoutConfig()
        self.axis = Axis(self.config.orientation)
        self._items = list(items)
        self.nodes: list[Node[E]] = self._make_nodes(self._items)
        self.index = RelationshipIndex(self.nodes, schema)
        self.policy = ChildOrderingPolicy(schema)
        self.engine = LayoutEngine(self.index, self.policy, self.config)
        if calculate:
            self.calculate_position()

    @property
    def items(self) -> list[E]:
        return list(self._items)

    @property
    def roots(self) -> list[Node[E]]:
        return self.index.roots()

    def _make_nodes(self, items: list[E]) -> list[Node[E]]:
        return [Node(self.schema.id(item), item) for item in items]

    def replace_all(self, items: Iterable[E], recalculate: bool = True) -> None:
        self._items = list(items)
        self.nodes = self._make_nodes(self._items)
        self.index.reset(self.nodes)
        if recalculate:
            self.calculate_position()

    def calculate_position(self) -> LayoutContext:
        self.index.invalidate()
        for node in self.nodes:
            node.position = ORIGIN

        ctx = self.engine.run(self.nodes)
        logger.debug(
            "Laid out %d people over %d generations", len(ctx.laid_out), len(ctx.level_edges)
        )
        return ctx

    def node(self, node_id: str) -> Node[E] | None:
        return self.index.node(node_id)

    def positions(self) -> list[tuple[str, Point]]:
        return [(node.id, node.position) for node in self.nodes]

    def get_size(self) -> Size:
        """Bounding size of the diagram measured from the origin."""
        width = max((n.position.x + self.config.box_size.width for n in self.nodes), default=0.0)
        height = max((n.position.y + self.config.box_size.height for n in self.nodes), default=0.0)
        return Size(width, height)

    def centered_offset(self, viewport: Size) -> Point:
        """Translation that centers the diagram in ``viewport`` without re-running the layout."""
        size = self.get_size()
        return Point((viewport.width - size.width) / 2, (viewport.height - size.height) / 2)
