"""Graphviz (DOT) export of a computed layout."""

from pathlib import Path

import pydot

from kinlayout.config import DEFAULT_CONFIG, LayoutConfig
from kinlayout.models import JUNCTION_NODE, Layout, Node


POINTS_PER_INCH = 72

GENDER_FILL = {
    "male": "lightblue",
    "female": "lightpink",
}


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _quote(node_id: str) -> str:
    # Quoted names keep pydot from reading "a:b" as a node:port pair
    return f'"{_escape(node_id)}"'


def _label(node: Node) -> str:
    member = node.member
    if member is None:
        return _escape(node.id)
    lines = [member.name or "Unknown"]
    person = member.person
    if person is not None and (person.birth_date or person.death_date):
        birth_year = person.birth_date[:4] if person.birth_date else ""
        death_year = person.death_date[:4] if person.death_date else ""
        lines.append(f"{birth_year}-{death_year}")
    return "\\n".join(_escape(line) for line in lines)


def build_dot(layout: Layout, config: LayoutConfig = DEFAULT_CONFIG) -> pydot.Dot:
    """
    Build a pydot graph that reproduces the computed layout.

    Node positions are pinned (`pos="x,y!"` in points, node centres, y flipped
    since Graphviz grows upwards), so `neato -n` draws the diagram exactly as
    laid out instead of running its own layout.

    Args:
        layout: Output of build_tree_layout
        config: The config the layout was computed with (for node sizes)

    Returns:
        A pydot.Dot graph
    """
    P = pydot.Dot(graph_type="digraph")
    P.set("splines", "line")
    P.set("outputorder", "edgesfirst")

    for node in layout.nodes:
        if node.type == JUNCTION_NODE:
            size = config.junction_size
            cx = node.position.x + size / 2
            cy = node.position.y + size / 2
            P.add_node(
                pydot.Node(
                    _quote(node.id),
                    shape="point",
                    width=f"{size / POINTS_PER_INCH:.3f}",
                    label="",
                    pos=f'"{cx:.1f},{-cy:.1f}!"',
                )
            )
            continue

        cx = node.position.x + config.node_width / 2
        cy = node.position.y + config.node_height / 2
        gender = node.member.person.gender if node.member and node.member.person else None
        P.add_node(
            pydot.Node(
                _quote(node.id),
                label=f'"{_label(node)}"',
                shape="box",
                style='"rounded,filled"',
                fillcolor=GENDER_FILL.get(gender, "lightgray"),
                fixedsize="true",
                width=f"{config.node_width / POINTS_PER_INCH:.3f}",
                height=f"{config.node_height / POINTS_PER_INCH:.3f}",
                fontsize="10",
                pos=f'"{cx:.1f},{-cy:.1f}!"',
            )
        )

    for edge in layout.edges:
        attrs = {"color": f'"{edge.style.stroke}"', "penwidth": str(edge.style.stroke_width)}
        if edge.style.stroke_dasharray:
            attrs["style"] = "dashed"
        if edge.label:
            attrs["label"] = _quote(edge.label)
        # Only descent edges to a person get an arrow head
        if edge.target_handle != "top":
            attrs["dir"] = "none"
        P.add_edge(pydot.Edge(_quote(edge.source), _quote(edge.target), **attrs))

    return P


def write_dot(layout: Layout, output_path: Path, config: LayoutConfig = DEFAULT_CONFIG):
    """Write the layout as DOT source (render it with `neato -n`)."""
    P = build_dot(layout, config)
    P.write(str(output_path), format="raw")
