"""
Enum definitions for the Storyloom layout engine.

Relationship types stay dynamic (str) so projects can invent their own; only
the causal subset is fixed because it drives DAG layering.
"""
from enum import Enum


class EntityType(str, Enum):
    """Kind of story element an entity represents."""
    CHARACTER = "character"
    TIMELINE = "timeline"
    EVENT = "event"
    ARC = "arc"
    THEME = "theme"
    LOCATION = "location"
    NOTE = "note"
    CHAPTER = "chapter"


class ViewMode(str, Enum):
    """Which layout engine the host is currently showing."""
    TYPE = "type"
    TIMELINE = "timeline"


class Zone(str, Enum):
    """Partition a graph node belongs to."""
    CAUSAL = "causal"
    CONTEXT = "context"


# Types that drive DAG layering (left-to-right flow).
CAUSAL_TYPES = frozenset({
    "causes",
    "branches_into",
    "creates",
    "inspires",
    "makes",
    "parent_of",
    "originates_in",
})

# Types the authoring UI offers that only connect, never order.
STRUCTURAL_TYPES = frozenset({
    "sibling_of",
    "caused_by",
    "leads_to",
    "sets_up",
    "concludes",
    "threatens",
    "occurs_in",
    "happens_at",
    "located_at",
    "involves",
    "explores_theme",
    "demonstrates",
    "contrasts_with",
    "observes",
    "parallels",
    "foreshadows",
    "reveals",
    "arrives_before",
    "currently_in",
    "means",
    "references",
    "costs",
})

KNOWN_RELATIONSHIP_TYPES = CAUSAL_TYPES | STRUCTURAL_TYPES


def normalize_type(type_str: str) -> str:
    """
    Normalize a type string for consistency.

    - Lowercase
    - Strip whitespace
    - Replace spaces with underscores

    Examples:
        "Causes" -> "causes"
        "Parent Of" -> "parent_of"
        " branches into " -> "branches_into"
    """
    return type_str.lower().strip().replace(" ", "_")


def is_causal(relationship_type: str) -> bool:
    return normalize_type(relationship_type) in CAUSAL_TYPES
