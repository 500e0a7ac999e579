"""
Connector geometry for a laid-out genogram.

Marriage lines drop a short stub from each spouse and join them with a
bridge carrying a diamond junction marker. Children hang from the
"marriage point" on that bridge when both parents are married to each
other, and from each parent separately otherwise.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic

from config import EdgeStyle
from layout import GenogramLayout
from models import Axis, E, MarriageStatus, Node, Point

logger = logging.getLogger("genogram.routing")

FIRST_SPOUSE_RATIO = 0.5
LATER_SPOUSE_RATIO = 0.9
MARRIAGE_POINT_DROP = 0.95


class ConnectionPoint(Enum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"
    CENTER = "center"


class ConnectorKind(Enum):
    DIRECT = "direct"  # straight segment
    ROUTED = "routed"  # orthogonal polyline through ``points``
    JUNCTION = "junction"  # filled marker polygon through ``points``


@dataclass(frozen=True)
class DrawRequest:
    start: Point
    end: Point
    kind: ConnectorKind
    color: str
    stroke_width: float
    line_style: str = "solid"
    points: tuple[Point, ...] = ()
    filled: bool = False


@dataclass
class MarriageRecord:
    key: str
    husband: Node
    wife: Node
    spouse_index: int
    color: str
    status: MarriageStatus
    husband_anchor: Point
    wife_anchor: Point
    marriage_point: Point


def marriage_key(husband_id: str, wife_id: str) -> str:
    return f"{husband_id}|{wife_id}"


class ConnectionRouter(Generic[E]):
    """
    Computes drawable connectors from the positions of a ``GenogramLayout``.

    ``exact_anchors`` selects per-edge anchor points. By default RIGHT,
    BOTTOM and LEFT all resolve to the bottom-center of a box, the geometry
    existing diagrams were drawn with.
    """

    def __init__(
        self,
        layout: GenogramLayout[E],
        style: EdgeStyle | None = None,
        marriage_status: Callable[[E, E], MarriageStatus] | None = None,
        exact_anchors: bool = False,
    ):
        self.layout = layout
        self.style = style or EdgeStyle()
        self.marriage_status = marriage_status
        self.exact_anchors = exact_anchors
        self.marriages: dict[str, MarriageRecord] = {}

    @property
    def axis(self) -> Axis:
        return self.layout.axis

    @property
    def marriage_colors(self) -> dict[str, str]:
        return {key: record.color for key, record in self.marriages.items()}

    def route(self) -> list[DrawRequest]:
        """Run one routing pass over the current positions."""
        self.marriages.clear()
        requests = self._route_marriages()
        requests.extend(self._route_parent_child())
        logger.debug("Routed %d marriages into %d draw requests", len(self.marriages), len(requests))
        return requests

    def connection_point(self, node: Node[E], point: ConnectionPoint) -> Point:
        box = self.layout.config.box_size
        w, h = box.width, box.height
        if point == ConnectionPoint.TOP:
            return node.position.translate(w / 2, 0)
        if point == ConnectionPoint.CENTER:
            return node.position.translate(w / 2, h / 2)
        if not self.exact_anchors:
            return node.position.translate(w / 2, h)
        if point == ConnectionPoint.RIGHT:
            return node.position.translate(w, h / 2)
        if point == ConnectionPoint.BOTTOM:
            return node.position.translate(w / 2, h)
        return node.position.translate(0, h / 2)

    def _collect_marriages(self) -> list[tuple[str, Node[E], Node[E], int]]:
        index = self.layout.index
        marriages = []
        for person in self.layout.nodes:
            if not index.is_male(person):
                continue
            for i, spouse in enumerate(index.spouses_of(person)):
                marriages.append((marriage_key(person.id, spouse.id), person, spouse, i))
        # Colors follow the sorted keys, never the traversal order.
        marriages.sort(key=lambda m: m[0])
        return marriages

    def _route_marriages(self) -> list[DrawRequest]:
        style = self.style
        axis = self.axis
        palette = style.marriage_colors
        radius = style.junction_radius
        requests: list[DrawRequest] = []

        for i, (key, husband, wife, spouse_index) in enumerate(self._collect_marriages()):
            color = palette[i % len(palette)]
            status = MarriageStatus.MARRIED
            if self.marriage_status is not None:
                status = self.marriage_status(husband.data, wife.data)
            line = style.marriage_style(status)

            husband_conn = self.connection_point(husband, ConnectionPoint.RIGHT)
            wife_conn = self.connection_point(wife, ConnectionPoint.LEFT)
            husband_end = axis.translate(husband_conn, secondary=style.stub_length)
            wife_end = axis.translate(wife_conn, secondary=style.stub_length)

            def line_request(start: Point, end: Point) -> DrawRequest:
                return DrawRequest(start, end, ConnectorKind.DIRECT, color, line.stroke_width, line.line_style)

            requests.append(line_request(husband_conn, husband_end))
            requests.append(line_request(wife_conn, wife_end))
            requests.append(
                line_request(
                    axis.translate(husband_end, primary=-line.stroke_width / 2),
                    axis.translate(wife_end, primary=line.stroke_width / 2),
                )
            )

            center = axis.point(
                (axis.primary(husband_end) + axis.primary(wife_end)) / 2,
                axis.secondary(husband_end),
            )
            requests.append(
                DrawRequest(
                    center,
                    center,
                    ConnectorKind.JUNCTION,
                    style.junction_color,
                    0.0,
                    points=_diamond(center, radius),
                    filled=True,
                )
            )

            ratio = FIRST_SPOUSE_RATIO if spouse_index == 0 else LATER_SPOUSE_RATIO
            along = Point(
                husband_end.x + (wife_end.x - husband_end.x) * ratio,
                husband_end.y + (wife_end.y - husband_end.y) * ratio,
            )
            self.marriages[key] = MarriageRecord(
                key=key,
                husband=husband,
                wife=wife,
                spouse_index=spouse_index,
                color=color,
                status=status,
                husband_anchor=husband_conn,
                wife_anchor=wife_conn,
                marriage_point=axis.translate(along, secondary=radius * MARRIAGE_POINT_DROP),
            )

        return requests

    def _route_parent_child(self) -> list[DrawRequest]:
        index = self.layout.index
        style = self.style
        requests: list[DrawRequest] = []

        for child in self.layout.nodes:
            fathers = index.fathers_of(child)
            mothers = index.mothers_of(child)
            if not fathers and not mothers:
                continue

            child_top = self.connection_point(child, ConnectionPoint.TOP)
            consumed: set[str] = set()

            for father in fathers:
                for mother in mothers:
                    record = self.marriages.get(marriage_key(father.id, mother.id))
                    if record is None:
                        continue
                    consumed.update((father.id, mother.id))
                    requests.append(
                        DrawRequest(
                            record.marriage_point,
                            child_top,
                            ConnectorKind.ROUTED,
                            record.color,
                            style.child_stroke_width,
                            points=self._elbow(record.marriage_point, child_top),
                        )
                    )

            for parent in [*fathers, *mothers]:
                if parent.id in consumed:
                    continue
                requests.append(
                    DrawRequest(
                        self.connection_point(parent, ConnectionPoint.BOTTOM),
                        child_top,
                        ConnectorKind.DIRECT,
                        style.child_single_parent_color,
                        style.child_single_parent_stroke_width,
                    )
                )

        return requests

    def _elbow(self, start: Point, end: Point) -> tuple[Point, ...]:
        """Orthogonal path leaving and entering along the secondary axis."""
        axis = self.axis
        if axis.primary(start) == axis.primary(end):
            return (start, end)
        middle = (axis.secondary(start) + axis.secondary(end)) / 2
        return (
            start,
            axis.point(axis.primary(start), middle),
            axis.point(axis.primary(end), middle),
            end,
        )


def _diamond(center: Point, radius: float) -> tuple[Point, ...]:
    return (
        center.translate(radius, 0),
        center.translate(0, radius),
        center.translate(-radius, 0),
        center.translate(0, -radius),
    )
