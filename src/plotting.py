"""Rendering sinks for a computed genogram: matplotlib figures and pinned DOT files."""

import logging
from collections.abc import Callable
from pathlib import Path

import matplotlib.pyplot as plt
import pydot
from matplotlib.patches import Ellipse, Polygon, Rectangle

from layout import GenogramLayout
from models import Gender
from routing import ConnectorKind, DrawRequest

logger = logging.getLogger("genogram.plotting")

MALE_FILL = "lightblue"
FEMALE_FILL = "lightpink"

# matplotlib linestyle names match the connector line styles
LINE_STYLES = {"solid": "-", "dashed": "--", "dotted": ":"}

POINTS_PER_INCH = 72.0


def _label_for(label_provider: Callable | None):
    if label_provider is None:
        return lambda node: node.id
    return lambda node: label_provider(node.data)


def draw_request(ax, request: DrawRequest):
    """Draw one connector onto a matplotlib axes."""
    if request.kind == ConnectorKind.JUNCTION:
        ax.add_patch(
            Polygon(
                [(p.x, p.y) for p in request.points],
                closed=True,
                facecolor=request.color if request.filled else "none",
                edgecolor=request.color,
                linewidth=request.stroke_width,
                zorder=3,
            )
        )
        return

    points = request.points or (request.start, request.end)
    ax.plot(
        [p.x for p in points],
        [p.y for p in points],
        color=request.color,
        linewidth=request.stroke_width,
        linestyle=LINE_STYLES.get(request.line_style, "-"),
        solid_capstyle="butt",
        zorder=1,
    )


def plot_genogram(
    layout: GenogramLayout,
    requests: list[DrawRequest],
    output_path: Path | None = None,
    label_provider: Callable | None = None,
):
    """
    Plot laid-out people and their connectors.

    Men are drawn as boxes and women as ellipses, in diagram coordinates
    with y growing downwards.

    Args:
        layout: A GenogramLayout whose positions have been calculated
        requests: Draw requests from a ConnectionRouter
        output_path: Path to save the image (format from the extension). If None, displays interactively.
        label_provider: Maps a person record to its label (default: the person id)
    """
    box = layout.config.box_size
    size = layout.get_size()
    label = _label_for(label_provider)

    fig, ax = plt.subplots(figsize=(max(size.width / 100, 4), max(size.height / 100, 3)))

    for request in requests:
        draw_request(ax, request)

    for node in layout.nodes:
        x, y = node.position.x, node.position.y
        if layout.schema.gender(node.data) == Gender.MALE:
            patch = Rectangle((x, y), box.width, box.height, facecolor=MALE_FILL, edgecolor="black", zorder=2)
        else:
            patch = Ellipse(
                (x + box.width / 2, y + box.height / 2),
                box.width,
                box.height,
                facecolor=FEMALE_FILL,
                edgecolor="black",
                zorder=2,
            )
        ax.add_patch(patch)
        ax.text(x + box.width / 2, y + box.height / 2, label(node), ha="center", va="center", fontsize=8, zorder=4)

    ax.set_xlim(0, size.width + layout.config.spacing)
    ax.set_ylim(size.height + layout.config.spacing, 0)
    ax.set_aspect("equal")
    ax.axis("off")
    fig.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        logger.info("Genogram saved to %s", output_path)
    else:
        plt.show()


def build_dot(
    layout: GenogramLayout,
    requests: list[DrawRequest],
    label_provider: Callable | None = None,
) -> pydot.Dot:
    """
    Export the computed geometry as a DOT graph with pinned positions.

    Render it with ``neato -n2`` so Graphviz keeps every coordinate. People
    become nodes named ``p_<n>``; each connector becomes a chain of point
    nodes ``c<i>_<j>`` joined by edges, and junction markers become small
    diamonds.
    """
    box = layout.config.box_size
    height = layout.get_size().height
    label = _label_for(label_provider)

    def pos(x: float, y: float) -> str:
        # DOT's y axis points up
        return f"{x:.2f},{height - y:.2f}!"

    P = pydot.Dot(graph_type="graph")
    P.set("layout", "neato")
    P.set("splines", "line")
    P.set("outputorder", "edgesfirst")

    for n, node in enumerate(layout.nodes):
        male = layout.schema.gender(node.data) == Gender.MALE
        P.add_node(
            pydot.Node(
                f"p_{n}",
                label=label(node),
                pos=pos(node.position.x + box.width / 2, node.position.y + box.height / 2),
                shape="box" if male else "ellipse",
                width=f"{box.width / POINTS_PER_INCH:.3f}",
                height=f"{box.height / POINTS_PER_INCH:.3f}",
                fixedsize="true",
                style="filled",
                fillcolor=MALE_FILL if male else FEMALE_FILL,
            )
        )

    for i, request in enumerate(requests):
        if request.kind == ConnectorKind.JUNCTION:
            xs = [p.x for p in request.points]
            P.add_node(
                pydot.Node(
                    f"c{i}_0",
                    label="",
                    pos=pos(request.start.x, request.start.y),
                    shape="diamond",
                    width=f"{(max(xs) - min(xs)) / POINTS_PER_INCH:.3f}",
                    height=f"{(max(xs) - min(xs)) / POINTS_PER_INCH:.3f}",
                    fixedsize="true",
                    style="filled",
                    color=request.color,
                    fillcolor=request.color if request.filled else "none",
                )
            )
            continue

        points = request.points or (request.start, request.end)
        for j, point in enumerate(points):
            P.add_node(pydot.Node(f"c{i}_{j}", label="", shape="point", width="0.01", pos=pos(point.x, point.y)))
        for j in range(len(points) - 1):
            P.add_edge(
                pydot.Edge(
                    f"c{i}_{j}",
                    f"c{i}_{j + 1}",
                    color=request.color,
                    penwidth=str(request.stroke_width),
                    style=request.line_style,
                )
            )

    return P


def write_dot(
    layout: GenogramLayout,
    requests: list[DrawRequest],
    output_path: Path,
    label_provider: Callable | None = None,
) -> Path:
    """Write the pinned DOT source of a genogram to ``output_path``."""
    P = build_dot(layout, requests, label_provider)
    Path(output_path).write_text(P.to_string(), encoding="utf-8")
    logger.info("DOT file saved to %s", output_path)
    return Path(output_path)
