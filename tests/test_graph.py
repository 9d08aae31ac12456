from __future__ import annotations

from kinlayout.config import LayoutConfig
from kinlayout.graph import build_adjacency, classify_relationships
from kinlayout.models import Member, ParentChild, Person, Relationship, Sibling, Spouse
from kinlayout.units import compare_siblings, name_key, resolve_family_units, select_roots


def _rel(rel_id: str, rtype: str, a: str, b: str, subtype: str | None = None) -> Relationship:
    return Relationship(rel_id, rtype, subtype, a, b)


def test_classify_partitions_by_type_and_keeps_order() -> None:
    rels = [
        _rel("1", "spouse", "A", "B"),
        _rel("2", "parent_child", "A", "C", "adopted"),
        _rel("3", "sibling", "C", "D", "half"),
        _rel("4", "cousin", "C", "E"),
        _rel("5", "parent_child", "B", "C"),
    ]

    out = classify_relationships(rels)

    assert out.parent_child == (
        ParentChild("2", parent_id="A", child_id="C", subtype="adopted"),
        ParentChild("5", parent_id="B", child_id="C", subtype="biological"),
    )
    assert out.spouse == (Spouse("1", "A", "B", "married"),)
    assert out.sibling == (Sibling("3", "C", "D", "half"),)


def test_classify_empty() -> None:
    out = classify_relationships([])
    assert out.parent_child == out.spouse == out.sibling == ()


def test_adjacency_lookups() -> None:
    members = [Member(i) for i in ["A", "B", "C", "D"]]
    rels = [
        _rel("1", "parent_child", "A", "C"),
        _rel("2", "parent_child", "B", "C"),
        _rel("3", "parent_child", "A", "D"),
        _rel("4", "spouse", "B", "A"),
    ]

    adj = build_adjacency(members, classify_relationships(rels))

    assert adj.parents_of("C") == ["A", "B"]
    assert adj.children_of("A") == ["C", "D"]
    assert adj.spouses_of("A") == ["B"]
    assert adj.spouses_of("B") == ["A"]
    assert adj.has_parents("C") and not adj.has_parents("A")
    assert adj.parent_child_record("A", "C").id == "1"
    assert adj.parent_child_record("C", "A") is None
    assert adj.spouse_record("A", "B").id == "4"
    assert adj.children_of("unknown") == []


def test_adjacency_keeps_first_record_for_duplicate_pairs() -> None:
    rels = [
        _rel("1", "parent_child", "A", "B", "step"),
        _rel("2", "parent_child", "A", "B", "biological"),
    ]
    adj = build_adjacency([Member("A"), Member("B")], classify_relationships(rels))
    assert adj.parent_child_record("A", "B").subtype == "step"


def test_dangling_ids_are_kept_but_filtered() -> None:
    rels = [_rel("1", "parent_child", "GHOST", "A"), _rel("2", "spouse", "A", "NOBODY")]
    adj = build_adjacency([Member("A")], classify_relationships(rels))

    assert adj.parents_of("A") == []
    assert adj.parents_of("A", present_only=False) == ["GHOST"]
    assert adj.spouses_of("A", present_only=False) == ["NOBODY"]
    assert not adj.contains("GHOST")
    assert not adj.has_parents("A")


def test_select_roots_moves_in_laws_last() -> None:
    members = [Member("W"), Member("X"), Member("G"), Member("H")]
    rels = [_rel("1", "parent_child", "G", "H"), _rel("2", "spouse", "W", "H")]
    adj = build_adjacency(members, classify_relationships(rels))

    assert select_roots(members, adj) == ["X", "G", "W"]


def test_unit_width_counts_spouses() -> None:
    members = [Member(i) for i in "ABC"]
    rels = [_rel("1", "spouse", "A", "B"), _rel("2", "spouse", "A", "C")]
    adj = build_adjacency(members, classify_relationships(rels))

    units = resolve_family_units(members, adj, LayoutConfig(node_width=100, spouse_gap=10))

    assert len(units) == 1
    assert units[0].members == ["A", "B", "C"]
    assert units[0].width == 3 * 100 + 2 * 10
    assert units[0].subtree_width == units[0].width


def test_subtree_width_sums_children_with_gaps() -> None:
    members = [Member(i) for i in "PABC"]
    rels = [_rel(str(i), "parent_child", "P", c) for i, c in enumerate("ABC")]
    adj = build_adjacency(members, classify_relationships(rels))
    config = LayoutConfig(node_width=100, horizontal_gap=20)

    (unit,) = resolve_family_units(members, adj, config)

    assert [c.primary for c in unit.children] == ["A", "B", "C"]
    assert unit.subtree_width == 3 * 100 + 2 * 20


def test_compare_siblings_prefers_dates_then_names() -> None:
    older = Member("1", Person("1", "Zed", birth_date="1950-01-01"))
    younger = Member("2", Person("2", "Amy", birth_date="1960-01-01"))
    undated = Member("3", Person("3", "bea"))

    assert compare_siblings(older, younger) == -1
    assert compare_siblings(younger, older) == 1
    assert compare_siblings(younger, undated) == -1
    assert compare_siblings(undated, older) == -1
    assert compare_siblings(undated, undated) == 0


def test_compare_siblings_folds_accents_and_case() -> None:
    emile = Member("1", Person("1", "Émile"))
    zoe = Member("2", Person("2", "Zoe"))
    plain = Member("3", Person("3", "emile"))

    assert compare_siblings(emile, zoe) == -1
    assert compare_siblings(zoe, emile) == 1
    # Same letters once folded; the raw name still gives a stable order
    assert name_key("Émile")[0] == name_key("emile")[0]
    assert compare_siblings(plain, emile) == -1


def test_compare_siblings_uses_canonical_name_over_display_name() -> None:
    a = Member("1", Person("1", "Adams"), display_name="Zed")
    b = Member("2", Person("2", "Brown"), display_name="Amy")
    no_person = Member("3", display_name="Carter")

    assert compare_siblings(a, b) == -1
    assert compare_siblings(b, no_person) == -1


def test_deep_lineage_resolves_without_recursion() -> None:
    depth = 1200
    members = [Member(f"g{i}", Person(f"g{i}", f"Gen {i}")) for i in range(depth)]
    relationships = [
        _rel(f"r{i}", "parent_child", f"g{i}", f"g{i + 1}") for i in range(depth - 1)
    ]
    adjacency = build_adjacency(members, classify_relationships(relationships))

    units = resolve_family_units(members, adjacency, LayoutConfig())

    assert len(units) == 1
    assert [u.primary for u in units[0].walk()] == [m.id for m in members]
