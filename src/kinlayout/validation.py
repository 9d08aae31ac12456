"""Data-quality checks for family tree input."""

from typing import Iterable

import networkx as nx

from kinlayout.graph import classify_relationships
from kinlayout.models import RELATIONSHIP_TYPES, Member, Relationship


def _year(date: str) -> int | None:
    try:
        return int(date[:4])
    except (ValueError, IndexError):
        return None


def validate(members: Iterable[Member], relationships: Iterable[Relationship]) -> list[str]:
    """
    Validate family tree data for:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent)
    - Date ordering issues
    - Relationships that reference unknown members or types

    None of these stop a layout; the engine skips what it cannot draw.
    Returns a list of warning messages.
    """
    warnings: list[str] = []
    members = list(members)
    relationships = list(relationships)
    by_id = {m.id: m for m in members}

    for rel in relationships:
        if rel.relationship_type not in RELATIONSHIP_TYPES:
            warnings.append(f"Unknown relationship type {rel.relationship_type!r} on {rel.id}")
            continue
        if rel.member1_id == rel.member2_id:
            warnings.append(f"Relationship {rel.id} links {rel.member1_id} to itself")
        for member_id in (rel.member1_id, rel.member2_id):
            if member_id not in by_id:
                warnings.append(f"Relationship {rel.id} references unknown member {member_id}")

    classified = classify_relationships(relationships)

    # Create a graph with only parent -> child edges for cycle detection
    parent_graph = nx.DiGraph((r.parent_id, r.child_id) for r in classified.parent_child)
    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        cycle_nodes = [edge[0] for edge in cycle]
        warnings.append(f"Cycle detected in parent-child relationships: {cycle_nodes}")
    except nx.NetworkXNoCycle:
        pass

    # ISO dates (YYYY-MM-DD) can be compared as strings
    for rel in classified.parent_child:
        parent = by_id.get(rel.parent_id)
        child = by_id.get(rel.child_id)
        if parent is None or child is None:
            continue

        parent_birth = parent.birth_date
        child_birth = child.birth_date
        if not (parent_birth and child_birth):
            continue

        if child_birth < parent_birth:
            warnings.append(f"Impossible: {child.name} born before parent {parent.name}")
            continue

        parent_year = _year(parent_birth)
        child_year = _year(child_birth)
        if parent_year is not None and child_year is not None and child_year - parent_year < 12:
            warnings.append(
                f"Suspicious: {parent.name} was less than 12 years old when {child.name} was born"
            )

    for member in members:
        if member.person is None:
            continue
        birth = member.person.birth_date
        death = member.person.death_date
        if birth and death and death < birth:
            warnings.append(f"Impossible: {member.name} died before being born")

    return warnings
