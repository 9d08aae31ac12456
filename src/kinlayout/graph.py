"""Relationship classification and NetworkX adjacency building."""

import logging
from dataclasses import dataclass, field
from typing import Iterable

import networkx as nx

from kinlayout.models import (
    PARENT_CHILD,
    SIBLING,
    SPOUSE,
    Member,
    ParentChild,
    Relationship,
    Sibling,
    Spouse,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifiedRelationships:
    parent_child: tuple[ParentChild, ...] = ()
    spouse: tuple[Spouse, ...] = ()
    sibling: tuple[Sibling, ...] = ()


def classify_relationships(relationships: Iterable[Relationship]) -> ClassifiedRelationships:
    """
    Partition raw relationship rows by type, preserving their order.

    This is the only place that interprets member1/member2 positionally: for
    parent_child rows member1 is the parent and member2 the child. Rows with
    an unknown type are dropped.
    """
    parent_child: list[ParentChild] = []
    spouse: list[Spouse] = []
    sibling: list[Sibling] = []

    for rel in relationships:
        rtype = rel.relationship_type
        if rtype == PARENT_CHILD:
            parent_child.append(
                ParentChild(
                    id=rel.id,
                    parent_id=rel.member1_id,
                    child_id=rel.member2_id,
                    subtype=rel.relation_subtype or "biological",
                )
            )
        elif rtype == SPOUSE:
            spouse.append(
                Spouse(
                    id=rel.id,
                    member1_id=rel.member1_id,
                    member2_id=rel.member2_id,
                    subtype=rel.relation_subtype or "married",
                )
            )
        elif rtype == SIBLING:
            sibling.append(
                Sibling(
                    id=rel.id,
                    member1_id=rel.member1_id,
                    member2_id=rel.member2_id,
                    subtype=rel.relation_subtype or "full",
                )
            )
        else:
            logger.debug("Dropping relationship %s with unknown type %r", rel.id, rtype)

    return ClassifiedRelationships(tuple(parent_child), tuple(spouse), tuple(sibling))


@dataclass
class Adjacency:
    """
    Lookup structures for one layout run.

    `lineage` holds parent -> child edges and `marriages` undirected spouse
    edges; each edge carries the first relationship record seen for the pair.
    Ids that are not members stay in the graphs, and the `present_only`
    lookups filter them out.
    """

    member_ids: set[str] = field(default_factory=set)
    lineage: nx.DiGraph = field(default_factory=nx.DiGraph)
    marriages: nx.Graph = field(default_factory=nx.Graph)

    def contains(self, member_id: str) -> bool:
        return member_id in self.member_ids

    def _filter(self, ids: Iterable[str], present_only: bool) -> list[str]:
        if present_only:
            return [i for i in ids if i in self.member_ids]
        return list(ids)

    def parents_of(self, member_id: str, present_only: bool = True) -> list[str]:
        if member_id not in self.lineage:
            return []
        return self._filter(self.lineage.predecessors(member_id), present_only)

    def children_of(self, member_id: str, present_only: bool = True) -> list[str]:
        if member_id not in self.lineage:
            return []
        return self._filter(self.lineage.successors(member_id), present_only)

    def spouses_of(self, member_id: str, present_only: bool = True) -> list[str]:
        if member_id not in self.marriages:
            return []
        return self._filter(self.marriages.neighbors(member_id), present_only)

    def has_parents(self, member_id: str) -> bool:
        return bool(self.parents_of(member_id))

    def parent_child_record(self, parent_id: str, child_id: str) -> ParentChild | None:
        if not self.lineage.has_edge(parent_id, child_id):
            return None
        return self.lineage.edges[parent_id, child_id]["relationship"]

    def spouse_record(self, a: str, b: str) -> Spouse | None:
        if not self.marriages.has_edge(a, b):
            return None
        return self.marriages.edges[a, b]["relationship"]


def build_adjacency(
    members: Iterable[Member], classified: ClassifiedRelationships
) -> Adjacency:
    """
    Build the parent/child and spouse graphs for a layout run.

    Args:
        members: Members that will be drawn
        classified: Output of classify_relationships

    Returns:
        An Adjacency whose graphs keep relationship insertion order
    """
    adj = Adjacency(member_ids={m.id for m in members})

    for rel in classified.parent_child:
        if not adj.lineage.has_edge(rel.parent_id, rel.child_id):
            adj.lineage.add_edge(rel.parent_id, rel.child_id, relationship=rel)

    # nx.Graph is undirected, so a spouse is always reachable from both sides
    for rel in classified.spouse:
        if not adj.marriages.has_edge(rel.member1_id, rel.member2_id):
            adj.marriages.add_edge(rel.member1_id, rel.member2_id, relationship=rel)

    return adj
