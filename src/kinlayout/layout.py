"""Positions family units on a canvas and synthesizes the edges between them."""

import functools
import logging
from typing import Iterable

from kinlayout.config import DEFAULT_CONFIG, LayoutConfig
from kinlayout.graph import Adjacency, ClassifiedRelationships, build_adjacency, classify_relationships
from kinlayout.models import (
    JUNCTION_NODE,
    PARENT_CHILD,
    PERSON_NODE,
    SIBLING,
    SPOUSE,
    Edge,
    Layout,
    Member,
    Node,
    Position,
    Relationship,
)
from kinlayout.styles import CONNECTOR_STYLE, edge_label, edge_style
from kinlayout.units import FamilyUnit, resolve_family_units


logger = logging.getLogger(__name__)


def _escape(part: str) -> str:
    return part.replace("\\", "\\\\").replace(":", "\\:")


def element_id(kind: str, *parts: str) -> str:
    """
    Join id parts unambiguously: `element_id("spouse", "A-B", "C")` and
    `element_id("spouse", "A", "B-C")` differ, as do ids whose parts contain ':'.
    """
    return ":".join([kind, *(_escape(p) for p in parts)])


def junction_id(primary: str) -> str:
    return element_id("junction", primary)


class _LayoutBuilder:
    """Accumulates nodes and edges for one call of build_tree_layout."""

    def __init__(
        self,
        members: dict[str, Member],
        adjacency: Adjacency,
        classified: ClassifiedRelationships,
        config: LayoutConfig,
    ):
        self.members = members
        self.adjacency = adjacency
        self.classified = classified
        self.config = config
        self.nodes: list[Node] = []
        self.edges: list[Edge] = []
        self.positions: dict[str, Position] = {}
        # member id -> primary of the unit that placed it
        self.unit_of: dict[str, str] = {}
        self.junction_ids: set[str] = set()
        # (parent, child) pairs and spouse pairs already drawn
        self.drawn_descent: set[tuple[str, str]] = set()
        self.drawn_unions: set[frozenset[str]] = set()

    # ------------------------------------------------------------------
    # Positioning
    # ------------------------------------------------------------------

    def place_roots(self, units: list[FamilyUnit]):
        cursor = 0.0
        for unit in units:
            self.position(unit, cursor + unit.subtree_width / 2, 0.0)
            cursor += unit.subtree_width + self.config.branch_gap

    def position(self, unit: FamilyUnit, center_x: float, y: float):
        """Place a unit and its descendants, then connect each unit to its children."""
        cfg = self.config
        # (unit, center_x, y, children_placed)
        stack = [(unit, center_x, y, False)]
        while stack:
            unit, center_x, y, children_placed = stack.pop()
            if children_placed:
                if unit.is_couple:
                    self.add_junction(unit, center_x, y)
                else:
                    for child in unit.children:
                        self.add_descent_edge(unit.primary, child.primary)
                continue

            self.place_members(unit, center_x, y)
            if not unit.children:
                continue

            stack.append((unit, center_x, y, True))
            child_y = y + cfg.generation_height
            total = sum(c.subtree_width for c in unit.children)
            total += (len(unit.children) - 1) * cfg.horizontal_gap
            cursor = center_x - total / 2
            placed = []
            for child in unit.children:
                placed.append((child, cursor + child.subtree_width / 2, child_y, False))
                cursor += child.subtree_width + cfg.horizontal_gap
            stack.extend(reversed(placed))

    def place_members(self, unit: FamilyUnit, center_x: float, y: float):
        cfg = self.config
        left = center_x - unit.width / 2
        step = cfg.node_width + cfg.spouse_gap

        for i, member_id in enumerate(unit.members):
            pos = Position(left + i * step, y)
            self.positions[member_id] = pos
            self.unit_of[member_id] = unit.primary
            self.nodes.append(
                Node(
                    id=member_id,
                    type=PERSON_NODE,
                    position=pos,
                    member=self.members[member_id],
                    is_root=not self.adjacency.has_parents(member_id),
                )
            )

        for a, b in zip(unit.members, unit.members[1:]):
            self.add_union_edge(a, b)

    def unique_junction_id(self, unit: FamilyUnit) -> str:
        """The unit's junction id, suffixed while it clashes with another node id."""
        base = junction_id(unit.primary)
        jid = base
        suffix = 1
        while jid in self.members or jid in self.junction_ids:
            suffix += 1
            jid = f"{base}:{suffix}"
        self.junction_ids.add(jid)
        return jid

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def add_union_edge(self, a: str, b: str):
        rel = self.adjacency.spouse_record(a, b)
        subtype = rel.subtype if rel is not None else None
        self.drawn_unions.add(frozenset((a, b)))
        self.edges.append(
            Edge(
                id=element_id(SPOUSE, a, b),
                source=a,
                target=b,
                style=edge_style(SPOUSE, subtype),
                source_handle="right",
                target_handle="left",
                label=edge_label(SPOUSE, subtype),
            )
        )

    def add_descent_edge(self, parent_id: str, child_id: str):
        rel = self.adjacency.parent_child_record(parent_id, child_id)
        subtype = rel.subtype if rel is not None else None
        self.drawn_descent.add((parent_id, child_id))
        self.edges.append(
            Edge(
                id=element_id(PARENT_CHILD, parent_id, child_id),
                source=parent_id,
                target=child_id,
                style=edge_style(PARENT_CHILD, subtype),
                source_handle="bottom",
                target_handle="top",
                label=edge_label(PARENT_CHILD, subtype),
            )
        )

    def add_junction(self, unit: FamilyUnit, center_x: float, y: float):
        cfg = self.config
        jid = self.unique_junction_id(unit)
        self.nodes.append(
            Node(
                id=jid,
                type=JUNCTION_NODE,
                position=Position(
                    center_x - cfg.junction_size / 2,
                    y + cfg.node_height / 2 + cfg.junction_drop,
                ),
            )
        )

        for member_id in unit.members:
            self.edges.append(
                Edge(
                    id=element_id("connector", jid, member_id),
                    source=member_id,
                    target=jid,
                    style=CONNECTOR_STYLE,
                )
            )

        for child in unit.children:
            subtype = None
            for parent_id in unit.members:
                rel = self.adjacency.parent_child_record(parent_id, child.primary)
                if rel is not None:
                    self.drawn_descent.add((parent_id, child.primary))
                    if subtype is None:
                        subtype = rel.subtype
            self.edges.append(
                Edge(
                    id=element_id("descent", jid, child.primary),
                    source=jid,
                    target=child.primary,
                    style=edge_style(PARENT_CHILD, subtype),
                    target_handle="top",
                    label=edge_label(PARENT_CHILD, subtype),
                )
            )

    def add_cross_links(self):
        """Draw recorded links that the unit structure could not express."""
        for rel in self.classified.parent_child:
            pair = (rel.parent_id, rel.child_id)
            if pair in self.drawn_descent or rel.parent_id == rel.child_id:
                continue
            if rel.parent_id in self.positions and rel.child_id in self.positions:
                self.add_descent_edge(rel.parent_id, rel.child_id)

        for rel in self.classified.spouse:
            a, b = rel.member1_id, rel.member2_id
            if a not in self.positions or b not in self.positions:
                continue
            # Spouses sharing a unit are already joined through the chain
            if self.unit_of[a] == self.unit_of[b] or frozenset((a, b)) in self.drawn_unions:
                continue
            self.add_union_edge(*self.left_to_right(a, b))

    def add_sibling_edges(self):
        for rel in self.classified.sibling:
            a, b = rel.member1_id, rel.member2_id
            if a == b or a not in self.positions or b not in self.positions:
                continue

            parents_a = set(self.adjacency.parents_of(a))
            parents_b = set(self.adjacency.parents_of(b))
            if parents_a & parents_b:
                # The shared parent's connector already shows them as siblings
                continue

            source, target = self.left_to_right(a, b)
            self.edges.append(
                Edge(
                    id=element_id(SIBLING, rel.id),
                    source=source,
                    target=target,
                    style=edge_style(SIBLING, rel.subtype),
                    source_handle="right",
                    target_handle="left",
                    label=edge_label(SIBLING, rel.subtype),
                )
            )

    def left_to_right(self, a: str, b: str) -> tuple[str, str]:
        if self.positions[b].x < self.positions[a].x:
            return b, a
        return a, b


def _unique_members(members: Iterable[Member]) -> list[Member]:
    seen: dict[str, Member] = {}
    for member in members:
        if member.id in seen:
            logger.debug("Ignoring duplicate member %s", member.id)
            continue
        seen[member.id] = member
    return list(seen.values())


def build_tree_layout(
    members: Iterable[Member],
    relationships: Iterable[Relationship],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> Layout:
    """
    Lay out a family tree.

    Args:
        members: Members to draw; each appears as exactly one person node
        relationships: Relationship rows in store order (order decides tie-breaks)
        config: Layout dimensions

    Returns:
        A Layout of positioned person and junction nodes plus styled edges.
        Identical input always gives an identical Layout.
    """
    unique = _unique_members(members)
    if not unique:
        return Layout()

    classified = classify_relationships(relationships)
    adjacency = build_adjacency(unique, classified)
    units = resolve_family_units(unique, adjacency, config)

    builder = _LayoutBuilder({m.id: m for m in unique}, adjacency, classified, config)
    builder.place_roots(units)
    builder.add_cross_links()
    builder.add_sibling_edges()

    return Layout(nodes=tuple(builder.nodes), edges=tuple(builder.edges))


@functools.lru_cache(maxsize=32)
def cached_tree_layout(
    members: tuple[Member, ...],
    relationships: tuple[Relationship, ...],
    config: LayoutConfig = DEFAULT_CONFIG,
) -> Layout:
    """build_tree_layout memoized on its (hashable) inputs."""
    return build_tree_layout(members, relationships, config)
