"""Timeline swimlane layout result models."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from storyloom.models.domain.entity import Entity

CANONICAL_LANE_ID = "canonical"

SizeTier = Literal["compact", "medium", "full"]


class TimelineLane(BaseModel):
    """A horizontal track: one per timeline plus the canonical lane."""

    id: str = Field(description="Timeline entity id, or 'canonical'.")
    label: str
    color: str
    y: float
    height: float
    event_count: int = 0
    collapsed: bool = False


class TimelineEventNode(BaseModel):
    """
    One visual occurrence of an event in a lane.

    The entity itself lives once in ``TimelineLayout.entities``; occurrences
    only carry its id plus the lane tag.
    """

    entity_id: str
    lane_id: str
    occurrence: int = Field(default=0, description="Index among this event's occurrences.")
    x: float
    y: float
    width: float
    height: float
    has_conflict: bool = False
    conflict_reason: Optional[str] = None


class CausalArrow(BaseModel):
    from_id: str
    to_id: str
    from_x: float
    from_y: float
    to_x: float
    to_y: float
    type: str
    is_causal: bool = False


class LaneConnector(BaseModel):
    """Dashed link between two occurrences of the same event in different lanes."""

    entity_id: str
    from_lane_id: str
    to_lane_id: str
    from_x: float
    from_y: float
    to_x: float
    to_y: float
    style: Literal["dashed"] = "dashed"


class TemporalConflict(BaseModel):
    """Advisory: the cause is drawn level with or after its effect across lanes."""

    event_id: str
    cause_id: str
    reason: str


class LayoutSizing(BaseModel):
    tier: SizeTier
    event_width: float
    event_height: float
    lane_height: float
    label_width: float


class TimelineSummary(BaseModel):
    lane_count: int = 0
    event_count: int = 0
    occurrence_count: int = 0
    conflict_count: int = 0


class TimelineLayout(BaseModel):
    """Complete output of the timeline swimlane layout engine."""

    lanes: list[TimelineLane] = Field(default_factory=list)
    event_nodes: list[TimelineEventNode] = Field(default_factory=list)
    entities: dict[str, Entity] = Field(default_factory=dict)
    arrows: list[CausalArrow] = Field(default_factory=list)
    connectors: list[LaneConnector] = Field(default_factory=list)
    conflicts: list[TemporalConflict] = Field(default_factory=list)
    width: float = 0.0
    height: float = 0.0
    sizing: LayoutSizing
    summary: TimelineSummary = Field(default_factory=TimelineSummary)

    def occurrences(self, entity_id: str) -> list[TimelineEventNode]:
        return [n for n in self.event_nodes if n.entity_id == entity_id]

    def lane(self, lane_id: str) -> Optional[TimelineLane]:
        for lane in self.lanes:
            if lane.id == lane_id:
                return lane
        return None
