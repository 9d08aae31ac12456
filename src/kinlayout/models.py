"""Data classes for family tree entities and layout output."""

from dataclasses import asdict, dataclass
from typing import Any, Mapping


PARENT_CHILD = "parent_child"
SPOUSE = "spouse"
SIBLING = "sibling"
RELATIONSHIP_TYPES = (PARENT_CHILD, SPOUSE, SIBLING)

PERSON_NODE = "person"
JUNCTION_NODE = "junction"


# ============================================================================
# Input records
# ============================================================================


@dataclass(frozen=True)
class Person:
    id: str
    canonical_name: str
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    gender: str | None = None  # male, female, other, unknown
    photo_url: str | None = None
    occupation: str | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Person":
        return cls(
            id=str(record.get("id", "")),
            canonical_name=record.get("canonical_name") or "",
            birth_date=record.get("birth_date") or None,
            death_date=record.get("death_date") or None,
            gender=record.get("gender") or None,
            photo_url=record.get("photo_url") or None,
            occupation=record.get("occupation") or None,
        )


@dataclass(frozen=True)
class Member:
    id: str
    person: Person | None = None
    is_living: bool = True
    display_name: str | None = None

    @property
    def name(self) -> str:
        """Name used for display and for ordering siblings without birth dates."""
        if self.display_name:
            return self.display_name
        if self.person is not None and self.person.canonical_name:
            return self.person.canonical_name
        return ""

    @property
    def birth_date(self) -> str | None:
        return self.person.birth_date if self.person is not None else None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Member":
        person = record.get("person")
        return cls(
            id=str(record["id"]),
            person=Person.from_record(person) if person else None,
            is_living=bool(record.get("is_living", True)),
            display_name=record.get("display_name") or None,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Relationship:
    """A relationship row as stored: for parent_child, member1 is the parent."""

    id: str
    relationship_type: str  # parent_child, spouse, sibling
    relation_subtype: str | None
    member1_id: str
    member2_id: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Relationship":
        member1 = record.get("member_1_id", record.get("member1_id"))
        member2 = record.get("member_2_id", record.get("member2_id"))
        return cls(
            id=str(record["id"]),
            relationship_type=record.get("relationship_type") or "",
            relation_subtype=record.get("relation_subtype") or None,
            member1_id=str(member1),
            member2_id=str(member2),
        )


# Relationship variants with explicit roles, produced by the classifier.


@dataclass(frozen=True)
class ParentChild:
    id: str
    parent_id: str
    child_id: str
    subtype: str = "biological"  # biological, adopted, step, foster


@dataclass(frozen=True)
class Spouse:
    id: str
    member1_id: str
    member2_id: str
    subtype: str = "married"  # married, partner, divorced


@dataclass(frozen=True)
class Sibling:
    id: str
    member1_id: str
    member2_id: str
    subtype: str = "full"  # full, half, step, adopted


# ============================================================================
# Layout output
# ============================================================================


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class EdgeStyle:
    stroke: str
    stroke_width: float = 2
    stroke_dasharray: str | None = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"stroke": self.stroke, "strokeWidth": self.stroke_width}
        if self.stroke_dasharray:
            out["strokeDasharray"] = self.stroke_dasharray
        return out


@dataclass(frozen=True)
class Node:
    id: str
    type: str  # person or junction
    position: Position
    member: Member | None = None
    is_root: bool = False

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.type == PERSON_NODE and self.member is not None:
            data = {"member": self.member.to_dict(), "isRoot": self.is_root}
        return {
            "id": self.id,
            "type": self.type,
            "position": {"x": self.position.x, "y": self.position.y},
            "data": data,
        }


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    style: EdgeStyle
    source_handle: str | None = None
    target_handle: str | None = None
    label: str | None = None

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"id": self.id, "source": self.source, "target": self.target}
        if self.source_handle:
            out["sourceHandle"] = self.source_handle
        if self.target_handle:
            out["targetHandle"] = self.target_handle
        out["style"] = self.style.to_dict()
        if self.label:
            out["label"] = self.label
        return out


@dataclass(frozen=True)
class Layout:
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()

    def node(self, node_id: str) -> Node | None:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }
