"""Family unit resolution and root selection."""

import functools
import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Iterator

from kinlayout.config import LayoutConfig
from kinlayout.graph import Adjacency
from kinlayout.models import Member


logger = logging.getLogger(__name__)


@dataclass
class FamilyUnit:
    """A primary member, their spouses, and the units of their children."""

    primary: str
    spouses: list[str] = field(default_factory=list)
    width: float = 0
    children: list["FamilyUnit"] = field(default_factory=list)
    subtree_width: float = 0

    @property
    def members(self) -> list[str]:
        return [self.primary, *self.spouses]

    @property
    def is_couple(self) -> bool:
        return len(self.spouses) > 0

    def walk(self) -> Iterator["FamilyUnit"]:
        """Yield this unit and every descendant unit, depth first."""
        stack = [self]
        while stack:
            unit = stack.pop()
            yield unit
            stack.extend(reversed(unit.children))


def name_key(name: str) -> tuple[str, str]:
    """Collation key that ignores accents and case, falling back to the raw name."""
    base = "".join(
        c for c in unicodedata.normalize("NFD", name) if unicodedata.category(c) != "Mn"
    )
    return (base.casefold(), name)


def _sibling_name(member: Member) -> str:
    if member.person is not None and member.person.canonical_name:
        return member.person.canonical_name
    return member.display_name or ""


def compare_siblings(a: Member, b: Member) -> int:
    """Birth date order when both dates are known, otherwise canonical name order."""
    if a.birth_date and b.birth_date:
        if a.birth_date != b.birth_date:
            return -1 if a.birth_date < b.birth_date else 1
        return 0
    key_a = name_key(_sibling_name(a))
    key_b = name_key(_sibling_name(b))
    if key_a == key_b:
        return 0
    return -1 if key_a < key_b else 1


class UnitResolver:
    """
    Groups members into family units for a single layout run.

    Each member is placed at most once: `resolve` returns None for a member
    that an earlier call already consumed, which also stops traversal of a
    parent/child cycle. Descendants are visited with an explicit stack, so
    lineage depth is not bounded by the interpreter's recursion limit.
    """

    def __init__(self, members: dict[str, Member], adjacency: Adjacency, config: LayoutConfig):
        self.members = members
        self.adjacency = adjacency
        self.config = config
        self.used: set[str] = set()

    def unit_width(self, spouse_count: int) -> float:
        cfg = self.config
        return (1 + spouse_count) * cfg.node_width + spouse_count * cfg.spouse_gap

    def _open(self, member_id: str) -> FamilyUnit | None:
        """Claim a member and their unused spouses as a new unit."""
        if member_id in self.used or member_id not in self.members:
            return None
        self.used.add(member_id)

        spouses: list[str] = []
        for spouse_id in self.adjacency.spouses_of(member_id):
            if spouse_id not in self.used:
                self.used.add(spouse_id)
                spouses.append(spouse_id)

        return FamilyUnit(primary=member_id, spouses=spouses, width=self.unit_width(len(spouses)))

    def _child_ids(self, unit: FamilyUnit) -> Iterator[str]:
        # Children of any member of the unit hang from the unit, so a
        # remarried parent keeps the children of every union together
        child_ids: dict[str, None] = {}
        for parent_id in unit.members:
            for child_id in self.adjacency.children_of(parent_id):
                child_ids.setdefault(child_id, None)

        ordered = sorted(
            (self.members[c] for c in child_ids),
            key=functools.cmp_to_key(compare_siblings),
        )
        return iter([child.id for child in ordered])

    def _close(self, unit: FamilyUnit):
        children_width = sum(c.subtree_width for c in unit.children)
        if unit.children:
            children_width += (len(unit.children) - 1) * self.config.horizontal_gap
        unit.subtree_width = max(unit.width, children_width)

    def resolve(self, member_id: str) -> FamilyUnit | None:
        root = self._open(member_id)
        if root is None:
            return None

        stack = [(root, self._child_ids(root))]
        while stack:
            unit, pending = stack[-1]
            child_id = next(pending, None)
            if child_id is None:
                stack.pop()
                self._close(unit)
                if stack:
                    stack[-1][0].children.append(unit)
                continue

            child = self._open(child_id)
            if child is not None:
                stack.append((child, self._child_ids(child)))

        return root


def select_roots(members: list[Member], adjacency: Adjacency) -> list[str]:
    """
    Return the ids of members without recorded parents, in layout order.

    A root who is married to someone with parents is moved to the end so that
    the blood-line ancestor claims them as a spouse instead of the in-law
    starting a separate tree.
    """
    roots = [m.id for m in members if not adjacency.has_parents(m.id)]
    root_set = set(roots)

    primary: list[str] = []
    married_in: list[str] = []
    for member_id in roots:
        spouses = adjacency.spouses_of(member_id)
        if any(s not in root_set for s in spouses):
            married_in.append(member_id)
        else:
            primary.append(member_id)
    return primary + married_in


def resolve_family_units(
    members: list[Member], adjacency: Adjacency, config: LayoutConfig
) -> list[FamilyUnit]:
    """
    Resolve every member into exactly one family unit.

    Args:
        members: De-duplicated members in input order
        adjacency: Lookup structures built from the same members
        config: Layout dimensions used for unit widths

    Returns:
        Top-level units in left-to-right order. Members not reachable from any
        root (for example inside a parent/child cycle) start extra top-level
        units, in input order, so coverage is total.
    """
    by_id = {m.id: m for m in members}
    resolver = UnitResolver(by_id, adjacency, config)

    units: list[FamilyUnit] = []
    for root_id in select_roots(members, adjacency):
        unit = resolver.resolve(root_id)
        if unit is not None:
            units.append(unit)

    for member in members:
        if member.id not in resolver.used:
            logger.debug("Member %s not reachable from a root; laying out separately", member.id)
            unit = resolver.resolve(member.id)
            if unit is not None:
                units.append(unit)

    return units
