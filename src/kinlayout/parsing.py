"""Loading members and relationships from GEDCOM and JSON files."""

import json
from pathlib import Path
import re

from ged4py import GedcomReader

from kinlayout.models import PARENT_CHILD, SPOUSE, Member, Person, Relationship


# Month name mappings (handle abbreviations and full names)
MONTH_MAP = {
    "JAN": 1, "JANUARY": 1,
    "FEB": 2, "FEBRUARY": 2,
    "MAR": 3, "MARCH": 3,
    "APR": 4, "APRIL": 4,
    "MAY": 5,
    "JUN": 6, "JUNE": 6,
    "JUL": 7, "JULY": 7,
    "AUG": 8, "AUGUST": 8,
    "SEP": 9, "SEPT": 9, "SEPTEMBER": 9,
    "OCT": 10, "OCTOBER": 10,
    "NOV": 11, "NOVEMBER": 11,
    "DEC": 12, "DECEMBER": 12,
}

QUALIFIERS = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|FROM|TO|BET\.?|AND|CIRCA|CA\.?|AROUND):?\s*",
    flags=re.IGNORECASE,
)

# (pattern, field order) pairs tried in turn; "M" is a month name, "m" a month number
DATE_PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{2})-(\d{2})$"), "ymd"),  # 1839-08-29
    (re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$"), "dMy"),  # 25 NOV 1954, 02 May1838
    (re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$"), "My"),  # NOV 1954, May, 1837
    (re.compile(r"^(\d{4})$"), "y"),  # 1698
    (re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$"), "mdy"),  # 01-27-1920, 05/15/1923
    (re.compile(r"^(\d{1,2})\s+(\d{1,2})\s+(\d{4})$"), "mdy"),  # 04 05 1911
    (re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),?\s*(\d{4})$"), "Mdy"),  # April 17, 1850
]


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a free-form genealogy date into ISO format (YYYY-MM-DD).

    Missing day or month default to 01. Qualifiers such as ABT or BEF, wrapping
    parentheses and a trailing question mark are ignored. Returns None if the
    date cannot be parsed.
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = QUALIFIERS.sub("", s).strip()
    if not s:
        return None

    for pattern, order in DATE_PATTERNS:
        match = pattern.match(s)
        if not match:
            continue

        year, month, day = None, 1, 1
        for part, value in zip(order, match.groups()):
            if part == "y":
                year = int(value)
            elif part == "m":
                month = int(value)
            elif part == "M":
                month = MONTH_MAP.get(value.upper().rstrip("."))
            elif part == "d":
                day = int(value)

        # GEDCOM exports write unknown parts as 00
        month = month or (1 if order == "ymd" else None)
        day = day or 1
        if month is None or not (1 <= month <= 12 and 1 <= day <= 31):
            continue
        return f"{year:04d}-{month:02d}-{day:02d}"

    return None


# ============================================================================
# GEDCOM
# ============================================================================


PEDIGREE_SUBTYPES = {
    "BIRTH": "biological",
    "ADOPTED": "adopted",
    "FOSTER": "foster",
    "STEP": "step",
}

GENDERS = {"M": "male", "F": "female"}


def xref_to_id(xref_id: str) -> str:
    """Turn a GEDCOM xref like '@I_347421849@' into a member id."""
    member_id = xref_id.strip().strip("@")
    if not member_id:
        raise ValueError(f"Empty GEDCOM xref: {xref_id!r}")
    return member_id


def extract_name(indi) -> str:
    """Extract the full display name from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        parts = [p for p in name_rec.value if p]
        return " ".join(parts) if parts else "Unknown"

    # Fallback: string format "Given /Surname/"
    return " ".join(str(name_rec.value).replace("/", " ").split()) or "Unknown"


def extract_event_date(rec, tag: str) -> tuple[bool, str | None]:
    """Return whether the event is present and its ISO date, if parseable."""
    event = rec.sub_tag(tag)
    if event is None:
        return (False, None)

    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec is None or not date_rec.value:
        return (True, None)
    return (True, parse_date_string(str(date_rec.value)))


def extract_pedigrees(indi) -> dict[str, str]:
    """Map family id -> parent_child subtype from an individual's FAMC.PEDI tags."""
    out: dict[str, str] = {}
    for famc in indi.sub_tags("FAMC", follow=False):
        if not famc.value:
            continue
        pedi = famc.sub_tag_value("PEDI")
        subtype = PEDIGREE_SUBTYPES.get(str(pedi).upper()) if pedi else None
        if subtype:
            out[xref_to_id(str(famc.value))] = subtype
    return out


def normalize_data(reader) -> tuple[list[Member], list[Relationship]]:
    """
    Extract members and relationships from parsed GEDCOM data.

    FAM records give one spouse relationship (when both partners are known)
    and one parent_child relationship per parent and child. Non-standard tags
    (starting with _) are ignored.
    """
    members: list[Member] = []
    relationships: list[Relationship] = []

    # child id -> family id -> subtype
    pedigrees: dict[str, dict[str, str]] = {}

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        member_id = xref_to_id(rec.xref_id)
        _, birth_date = extract_event_date(rec, "BIRT")
        died, death_date = extract_event_date(rec, "DEAT")
        sex_rec = rec.sub_tag("SEX")
        occu_rec = rec.sub_tag("OCCU")

        person = Person(
            id=member_id,
            canonical_name=extract_name(rec),
            birth_date=birth_date,
            death_date=death_date,
            gender=GENDERS.get(sex_rec.value, "unknown") if sex_rec else None,
            occupation=str(occu_rec.value) if occu_rec and occu_rec.value else None,
        )
        members.append(Member(id=member_id, person=person, is_living=not died))

        family_pedigrees = extract_pedigrees(rec)
        if family_pedigrees:
            pedigrees[member_id] = family_pedigrees

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue
        fam_id = xref_to_id(rec.xref_id)

        husb = rec.sub_tag("HUSB")
        wife = rec.sub_tag("WIFE")
        parents = [xref_to_id(p.xref_id) for p in (husb, wife) if p is not None and p.xref_id]

        if len(parents) == 2:
            divorced = rec.sub_tag("DIV") is not None
            relationships.append(
                Relationship(
                    id=f"{fam_id}-spouse",
                    relationship_type=SPOUSE,
                    relation_subtype="divorced" if divorced else "married",
                    member1_id=parents[0],
                    member2_id=parents[1],
                )
            )

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = xref_to_id(child.xref_id)
            subtype = pedigrees.get(child_id, {}).get(fam_id, "biological")
            for parent_id in parents:
                relationships.append(
                    Relationship(
                        id=f"{fam_id}-{parent_id}-{child_id}",
                        relationship_type=PARENT_CHILD,
                        relation_subtype=subtype,
                        member1_id=parent_id,
                        member2_id=child_id,
                    )
                )

    return members, relationships


def load_gedcom(filepath: Path) -> tuple[list[Member], list[Relationship]]:
    """Parse a GEDCOM file into members and relationships."""
    reader = GedcomReader(str(filepath))
    return normalize_data(reader)


# ============================================================================
# JSON
# ============================================================================


def load_json(filepath: Path) -> tuple[list[Member], list[Relationship]]:
    """
    Load a JSON export of the form {"members": [...], "relationships": [...]}.

    Member rows carry an embedded "person" object; relationship rows use
    member_1_id/member_2_id with member 1 as the parent for parent_child rows.
    """
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)

    members = [Member.from_record(row) for row in data.get("members", [])]
    relationships = [Relationship.from_record(row) for row in data.get("relationships", [])]
    return members, relationships
