"""Edge styles per relationship kind and subtype."""

from kinlayout.models import EdgeStyle, PARENT_CHILD, SIBLING, SPOUSE


FALLBACK_COLOR = "#6b7280"
CONNECTOR_COLOR = "#94a3b8"

# Solid lines for descent, dashed for unions, dotted for siblings
SPOUSE_DASH = "6 4"
SIBLING_DASH = "2 4"

PARENT_CHILD_STYLES = {
    "biological": EdgeStyle("#3b82f6"),
    "adopted": EdgeStyle("#8b5cf6"),
    "step": EdgeStyle("#f59e0b"),
    "foster": EdgeStyle("#64748b"),
}

SPOUSE_STYLES = {
    "married": EdgeStyle("#ec4899", 2, SPOUSE_DASH),
    "partner": EdgeStyle("#f472b6", 2, SPOUSE_DASH),
    "divorced": EdgeStyle("#9ca3af", 2, SPOUSE_DASH),
}

SIBLING_STYLES = {
    "full": EdgeStyle("#14b8a6", 2, SIBLING_DASH),
    "half": EdgeStyle("#2dd4bf", 2, SIBLING_DASH),
    "step": EdgeStyle("#0d9488", 2, SIBLING_DASH),
    "adopted": EdgeStyle("#5eead4", 2, SIBLING_DASH),
}

# Subtypes that are the unremarkable case and get no label
UNLABELLED_SUBTYPES = {
    PARENT_CHILD: "biological",
    SPOUSE: "married",
    SIBLING: "full",
}

_TABLES = {
    PARENT_CHILD: (PARENT_CHILD_STYLES, None),
    SPOUSE: (SPOUSE_STYLES, SPOUSE_DASH),
    SIBLING: (SIBLING_STYLES, SIBLING_DASH),
}

CONNECTOR_STYLE = EdgeStyle(CONNECTOR_COLOR)


def edge_style(kind: str, subtype: str | None) -> EdgeStyle:
    """
    Look up the style for a relationship.

    Unknown kinds or subtypes, and a missing subtype (no relationship record),
    get the fallback color. The kind's dash pattern is kept so a spouse or
    sibling line still reads as one.
    """
    table, dash = _TABLES.get(kind, ({}, None))
    style = table.get(subtype) if subtype else None
    if style is None:
        return EdgeStyle(FALLBACK_COLOR, 2, dash)
    return style


def edge_label(kind: str, subtype: str | None) -> str | None:
    if not subtype or subtype == UNLABELLED_SUBTYPES.get(kind):
        return None
    return subtype
