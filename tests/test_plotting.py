from __future__ import annotations

import json

from kinlayout.layout import build_tree_layout
from kinlayout.main import main
from kinlayout.models import Member, Person, Relationship
from kinlayout.plotting import build_dot, write_dot


def _family():
    members = [
        Member("A", Person("A", "Alan", birth_date="1900-01-01", gender="male")),
        Member("B", Person("B", "Beth", gender="female")),
        Member("C", Person("C", "Cleo")),
    ]
    relationships = [
        Relationship("r1", "spouse", "married", "A", "B"),
        Relationship("r2", "parent_child", "adopted", "A", "C"),
        Relationship("r3", "parent_child", "biological", "B", "C"),
    ]
    return members, relationships


def test_build_dot_pins_node_centres() -> None:
    layout = build_tree_layout([Member("A", Person("A", "Alan"))], [])

    text = build_dot(layout).to_string()

    assert text.startswith("digraph")
    assert '"A"' in text
    assert 'pos="100.0,-60.0!"' in text


def test_build_dot_includes_junctions_and_edges() -> None:
    members, relationships = _family()
    layout = build_tree_layout(members, relationships)

    text = build_dot(layout).to_string()

    assert '"junction:A"' in text
    assert "shape=point" in text
    assert "lightblue" in text and "lightpink" in text
    assert text.count("->") == len(layout.edges)
    assert '"adopted"' in text


def test_write_dot(tmp_path) -> None:
    members, relationships = _family()
    path = tmp_path / "tree.dot"

    write_dot(build_tree_layout(members, relationships), path)

    assert path.read_text().startswith("digraph")


def test_main_writes_layout_json(tmp_path, capsys) -> None:
    members, relationships = _family()
    source = tmp_path / "family.json"
    source.write_text(
        json.dumps(
            {
                "members": [
                    {"id": m.id, "person": {"id": m.person.id, "canonical_name": m.person.canonical_name}}
                    for m in members
                ],
                "relationships": [
                    {
                        "id": r.id,
                        "relationship_type": r.relationship_type,
                        "relation_subtype": r.relation_subtype,
                        "member_1_id": r.member1_id,
                        "member_2_id": r.member2_id,
                    }
                    for r in relationships
                ],
            }
        ),
        encoding="utf-8",
    )
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"spouse_gap": 20}), encoding="utf-8")
    dot_path = tmp_path / "family.dot"

    main([str(source), "--config", str(config), "--dot", str(dot_path)])

    out = json.loads((tmp_path / "family.layout.json").read_text(encoding="utf-8"))
    assert len(out["nodes"]) == 4
    positions = {n["id"]: n["position"] for n in out["nodes"]}
    assert positions["B"]["x"] - positions["A"]["x"] == 200 + 20
    assert dot_path.exists()
    assert "Done!" in capsys.readouterr().out


def test_build_dot_escapes_quotes_in_labels() -> None:
    members = [Member("A", Person("A", 'Robert "Bob" Smith\\Jr'))]

    text = build_dot(build_tree_layout(members, [])).to_string()

    assert 'label="Robert \\"Bob\\" Smith\\\\Jr"' in text


def test_build_dot_escapes_edge_labels() -> None:
    members = [Member("A", Person("A", "Alan")), Member("B", Person("B", "Beth"))]
    relationships = [Relationship("r1", "spouse", 'so-called "partner"', "A", "B")]

    text = build_dot(build_tree_layout(members, relationships)).to_string()

    assert 'label="so-called \\"partner\\""' in text
