"""Genealogical tree layout: members and relationships in, positioned nodes and edges out."""

from kinlayout.config import LayoutConfig
from kinlayout.layout import build_tree_layout, cached_tree_layout
from kinlayout.models import Edge, Layout, Member, Node, Person, Relationship

__all__ = [
    "Edge",
    "Layout",
    "LayoutConfig",
    "Member",
    "Node",
    "Person",
    "Relationship",
    "build_tree_layout",
    "cached_tree_layout",
]
