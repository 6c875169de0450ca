"""Layout request models: the snapshot of inputs a layout is computed from."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from storyloom.models.domain.entity import Entity
from storyloom.models.domain.relationship import Relationship
from storyloom.models.domain.variant import TimelineVariant
from storyloom.models.enums import EntityType, ViewMode, normalize_type


class LayoutInput(BaseModel):
    """Inputs shared by both layout engines."""

    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    variants: list[TimelineVariant] = Field(default_factory=list)
    timelines: Optional[list[Entity]] = Field(
        default=None,
        description="Ordered timeline entities. Defaults to the timeline-typed entities in input order.",
    )
    focused_timeline_id: Optional[str] = None
    relationship_types: Optional[list[str]] = Field(
        default=None,
        description="Relationship types to keep. None keeps every type.",
    )

    @field_validator("relationship_types")
    @classmethod
    def normalize_relationship_filter(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        if value is None:
            return None
        return sorted({normalize_type(t) for t in value})

    def timeline_entities(self) -> list[Entity]:
        """Ordered timelines, one per id; a repeated id keeps its first position."""
        if self.timelines is not None:
            candidates = self.timelines
        else:
            candidates = [e for e in self.entities if e.entity_type == EntityType.TIMELINE]
        unique: dict[str, Entity] = {}
        for timeline in candidates:
            unique.setdefault(timeline.id, timeline)
        return list(unique.values())

    def visible_relationships(self) -> list[Relationship]:
        if self.relationship_types is None:
            return list(self.relationships)
        allowed = set(self.relationship_types)
        return [r for r in self.relationships if r.relationship_type in allowed]


class GraphLayoutRequest(LayoutInput):
    """Inputs for the causal DAG layout."""

    selected_entity_id: Optional[str] = None
    highlighted_character_id: Optional[str] = None
    hidden_types: list[EntityType] = Field(default_factory=list)
    search: Optional[str] = None

    @field_validator("hidden_types")
    @classmethod
    def dedupe_hidden_types(cls, value: list[EntityType]) -> list[EntityType]:
        return sorted(set(value), key=lambda t: t.value)


class TimelineLayoutRequest(LayoutInput):
    """Inputs for the timeline swimlane layout."""


class LayoutRequest(GraphLayoutRequest):
    """A layout request for whichever engine matches ``view_mode``."""

    view_mode: ViewMode = ViewMode.TYPE

    def to_graph_request(self) -> GraphLayoutRequest:
        return GraphLayoutRequest(
            **{name: getattr(self, name) for name in GraphLayoutRequest.model_fields}
        )

    def to_timeline_request(self) -> TimelineLayoutRequest:
        return TimelineLayoutRequest(
            **{name: getattr(self, name) for name in TimelineLayoutRequest.model_fields}
        )


class ResolveRequest(BaseModel):
    """Payload for resolving one entity's display fields under a timeline focus."""

    entity: Entity
    timeline_id: Optional[str] = None
    variants: list[TimelineVariant] = Field(default_factory=list)
