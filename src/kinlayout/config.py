"""Layout constants."""

from dataclasses import dataclass, fields
from typing import Any, Mapping


@dataclass(frozen=True)
class LayoutConfig:
    """
    Pixel dimensions used by the positioner.

    Node positions are top-left corners, so node_width/node_height describe the
    box a renderer draws for each person. Every value must be strictly positive.
    """

    node_width: float = 200
    node_height: float = 120
    spouse_gap: float = 40
    horizontal_gap: float = 60
    vertical_gap: float = 100
    branch_gap: float = 120
    junction_size: float = 10
    junction_drop: float = 20

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{f.name} must be a number, got {value!r}")
            if value <= 0:
                raise ValueError(f"{f.name} must be positive, got {value!r}")

    @property
    def generation_height(self) -> float:
        """Vertical distance between the tops of two consecutive generations."""
        return self.node_height + self.vertical_gap

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "LayoutConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown layout settings: {', '.join(unknown)}")
        return cls(**dict(values))


DEFAULT_CONFIG = LayoutConfig()
