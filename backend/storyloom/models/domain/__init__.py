"""Domain models: the story graph snapshot and the layouts derived from it."""

from storyloom.models.domain.entity import Entity
from storyloom.models.domain.relationship import Relationship
from storyloom.models.domain.variant import TimelineVariant
from storyloom.models.domain.requests import (
    LayoutInput,
    GraphLayoutRequest,
    TimelineLayoutRequest,
    LayoutRequest,
    ResolveRequest,
)
from storyloom.models.domain.graph import (
    GraphNode,
    GraphLink,
    GraphSummary,
    GraphLayout,
    ZoneBounds,
)
from storyloom.models.domain.timeline import (
    CANONICAL_LANE_ID,
    TimelineLane,
    TimelineEventNode,
    CausalArrow,
    LaneConnector,
    TemporalConflict,
    LayoutSizing,
    TimelineSummary,
    TimelineLayout,
)

__all__ = [
    "Entity", "Relationship", "TimelineVariant",
    "LayoutInput", "GraphLayoutRequest", "TimelineLayoutRequest", "LayoutRequest", "ResolveRequest",
    "GraphNode", "GraphLink", "GraphSummary", "GraphLayout", "ZoneBounds",
    "CANONICAL_LANE_ID", "TimelineLane", "TimelineEventNode", "CausalArrow", "LaneConnector",
    "TemporalConflict", "LayoutSizing", "TimelineSummary", "TimelineLayout",
]
