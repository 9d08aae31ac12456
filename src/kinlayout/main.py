"""
1) Load family tree data from a GEDCOM file or a JSON export.
2) Validate it for cycles, impossible ages, and dangling references.
3) Compute the tree layout (positioned nodes and styled edges).
4) Write the layout as JSON, and optionally as Graphviz DOT source.
"""

import argparse
import json
import logging
from pathlib import Path

from kinlayout.config import DEFAULT_CONFIG, LayoutConfig
from kinlayout.layout import build_tree_layout
from kinlayout.parsing import load_gedcom, load_json
from kinlayout.plotting import write_dot
from kinlayout.validation import validate


MAX_WARNINGS_SHOWN = 10


def load_input(path: Path):
    ext = path.suffix.lower()
    if ext in (".ged", ".gedcom"):
        return load_gedcom(path)
    if ext == ".json":
        return load_json(path)
    raise ValueError(f"Unsupported input file type: {path.suffix or path.name}")


def load_config(path: Path | None) -> LayoutConfig:
    if path is None:
        return DEFAULT_CONFIG
    with open(path, encoding="utf-8") as f:
        return LayoutConfig.from_mapping(json.load(f))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lay out a family tree as positioned nodes and edges.")
    parser.add_argument("input", type=Path, help="GEDCOM (.ged) or JSON export")
    parser.add_argument("-o", "--output", type=Path, help="layout JSON (default: <input>.layout.json)")
    parser.add_argument("--dot", type=Path, help="also write Graphviz DOT source here")
    parser.add_argument("--config", type=Path, help="JSON file with layout settings")
    parser.add_argument("-v", "--verbose", action="store_true", help="log skipped data")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.config)
    output_path = args.output or args.input.with_name(args.input.stem + ".layout.json")

    print(f"Loading family tree: {args.input}")
    members, relationships = load_input(args.input)
    print(f"  Found {len(members)} members and {len(relationships)} relationships")

    print("Validating data...")
    warnings = validate(members, relationships)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:MAX_WARNINGS_SHOWN]:
            print(f"    - {w}")
        if len(warnings) > MAX_WARNINGS_SHOWN:
            print(f"    ... and {len(warnings) - MAX_WARNINGS_SHOWN} more")
    else:
        print("  No validation issues found")

    print("Computing layout...")
    layout = build_tree_layout(members, relationships, config)
    print(f"  Layout has {len(layout.nodes)} nodes and {len(layout.edges)} edges")

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(layout.to_dict(), f, indent=2)
    print(f"Layout saved to {output_path}")

    if args.dot:
        write_dot(layout, args.dot, config)
        print(f"DOT source saved to {args.dot}")

    print("Done!")


if __name__ == "__main__":
    main()
