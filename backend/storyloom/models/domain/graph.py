"""Causal graph layout result models."""

from typing import Optional

from pydantic import BaseModel, Field

from storyloom.models.domain.entity import Entity
from storyloom.models.domain.relationship import Relationship
from storyloom.models.enums import Zone


class GraphNode(BaseModel):
    """A positioned entity in the causal graph view."""

    id: str
    entity: Entity = Field(description="Display entity; variant-resolved when a timeline is focused.")
    color: str
    zone: Zone
    layer: int = Field(description="DAG layer for causal nodes, -1 for context nodes.")
    x: float
    y: float
    highlighted: bool = False
    timeline_ids: list[str] = Field(default_factory=list)
    timeline_colors: list[str] = Field(default_factory=list)


class GraphLink(BaseModel):
    """A relationship drawn between two nodes present in the layout."""

    id: str
    source_id: str
    target_id: str
    relationship: Relationship
    is_causal: bool
    highlighted: bool = False


class ZoneBounds(BaseModel):
    width: float = 0.0
    height: float = 0.0


class GraphSummary(BaseModel):
    """Counts for the surrounding UI chrome."""

    causal_count: int = 0
    context_count: int = 0
    max_layer: int = 0
    cycle_detected: bool = False
    frozen_node_ids: list[str] = Field(default_factory=list)


class GraphLayout(BaseModel):
    """Complete output of the causal DAG layout engine."""

    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)
    summary: GraphSummary = Field(default_factory=GraphSummary)
    relationship_types: list[str] = Field(default_factory=list)
    causal_depths: Optional[dict[str, int]] = None
    focused_entity_ids: Optional[list[str]] = None
    character_path_ids: list[str] = Field(default_factory=list)
    context_zone_bounds: ZoneBounds = Field(default_factory=ZoneBounds)

    def node(self, entity_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == entity_id:
                return node
        return None
