"""
Storyloom models.

Usage:
    from storyloom.models import Entity, Relationship, TimelineVariant
    from storyloom.models import GraphLayoutRequest, GraphLayout
    from storyloom.models import EntityType, ViewMode, Zone, normalize_type
"""

# --- Enums & utilities ---
from storyloom.models.enums import (
    EntityType,
    ViewMode,
    Zone,
    CAUSAL_TYPES,
    STRUCTURAL_TYPES,
    KNOWN_RELATIONSHIP_TYPES,
    normalize_type,
    is_causal,
)

# --- Domain models ---
from storyloom.models.domain import (
    Entity, Relationship, TimelineVariant,
    LayoutInput, GraphLayoutRequest, TimelineLayoutRequest, LayoutRequest, ResolveRequest,
    GraphNode, GraphLink, GraphSummary, GraphLayout, ZoneBounds,
    CANONICAL_LANE_ID, TimelineLane, TimelineEventNode, CausalArrow, LaneConnector,
    TemporalConflict, LayoutSizing, TimelineSummary, TimelineLayout,
)

__all__ = [
    # Enums
    "EntityType", "ViewMode", "Zone",
    "CAUSAL_TYPES", "STRUCTURAL_TYPES", "KNOWN_RELATIONSHIP_TYPES",
    "normalize_type", "is_causal",
    # Domain
    "Entity", "Relationship", "TimelineVariant",
    "LayoutInput", "GraphLayoutRequest", "TimelineLayoutRequest", "LayoutRequest", "ResolveRequest",
    "GraphNode", "GraphLink", "GraphSummary", "GraphLayout", "ZoneBounds",
    "CANONICAL_LANE_ID", "TimelineLane", "TimelineEventNode", "CausalArrow", "LaneConnector",
    "TemporalConflict", "LayoutSizing", "TimelineSummary", "TimelineLayout",
]
