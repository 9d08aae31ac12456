from __future__ import annotations

from kinlayout.models import Member, Person, Relationship
from kinlayout.validation import validate


def _member(member_id: str, born: str | None = None, died: str | None = None) -> Member:
    return Member(member_id, Person(member_id, member_id, birth_date=born, death_date=died))


def _parent(parent: str, child: str) -> Relationship:
    return Relationship(f"{parent}-{child}", "parent_child", "biological", parent, child)


def test_clean_data_has_no_warnings() -> None:
    members = [_member("A", "1900-01-01"), _member("B", "1930-01-01")]
    assert validate(members, [_parent("A", "B")]) == []


def test_empty_input() -> None:
    assert validate([], []) == []


def test_cycle_is_reported() -> None:
    members = [_member("A"), _member("B")]
    warnings = validate(members, [_parent("A", "B"), _parent("B", "A")])
    assert any(w.startswith("Cycle detected") for w in warnings)


def test_child_born_before_parent() -> None:
    members = [_member("A", "1950-01-01"), _member("B", "1940-01-01")]
    warnings = validate(members, [_parent("A", "B")])
    assert warnings == ["Impossible: B born before parent A"]


def test_young_parent_is_suspicious() -> None:
    members = [_member("A", "1950-01-01"), _member("B", "1955-06-01")]
    warnings = validate(members, [_parent("A", "B")])
    assert warnings == ["Suspicious: A was less than 12 years old when B was born"]


def test_death_before_birth() -> None:
    warnings = validate([_member("A", "1950-01-01", "1940-01-01")], [])
    assert warnings == ["Impossible: A died before being born"]


def test_bad_references_are_reported() -> None:
    members = [_member("A")]
    relationships = [
        Relationship("r1", "godparent", None, "A", "A"),
        Relationship("r2", "spouse", "married", "A", "GHOST"),
        Relationship("r3", "sibling", "full", "A", "A"),
    ]

    warnings = validate(members, relationships)

    assert "Unknown relationship type 'godparent' on r1" in warnings
    assert "Relationship r2 references unknown member GHOST" in warnings
    assert "Relationship r3 links A to itself" in warnings
