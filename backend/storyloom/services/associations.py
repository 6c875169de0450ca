"""Entity-to-timeline association and the color tables shared by both views."""

from typing import Iterable

from storyloom.models import Entity, EntityType, Relationship
from storyloom.services.variants import VariantIndex

DEFAULT_COLOR = "#6b7280"

TYPE_COLORS = {
    EntityType.CHARACTER: "#6366f1",
    EntityType.TIMELINE: "#06b6d4",
    EntityType.EVENT: "#f59e0b",
    EntityType.ARC: "#ec4899",
    EntityType.THEME: "#8b5cf6",
    EntityType.LOCATION: "#10b981",
    EntityType.NOTE: "#6b7280",
    EntityType.CHAPTER: "#ef4444",
}

# Timeline badge colors in the causal graph view.
GRAPH_TIMELINE_COLORS = (
    "#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6",
    "#ec4899", "#06b6d4", "#6366f1", "#14b8a6", "#f97316",
    "#84cc16", "#e879f9", "#22d3ee", "#a78bfa",
)

# Lane colors in the timeline swimlane view.
LANE_COLORS = (
    "#6366f1", "#06b6d4", "#f59e0b", "#ec4899",
    "#10b981", "#8b5cf6", "#ef4444", "#14b8a6",
    "#f97316", "#a855f7", "#eab308", "#3b82f6",
    "#22d3ee", "#fb923c", "#c084fc", "#4ade80",
)


def entity_color(entity: Entity) -> str:
    return entity.color or TYPE_COLORS.get(entity.entity_type, DEFAULT_COLOR)


def timeline_colors(timelines: Iterable[Entity], palette: tuple[str, ...]) -> dict[str, str]:
    """Color each timeline by its position in the list, wrapping around the palette."""
    return {t.id: palette[i % len(palette)] for i, t in enumerate(timelines)}


def map_entities_to_timelines(
    entities: Iterable[Entity],
    relationships: Iterable[Relationship],
    timelines: list[Entity],
    variants: VariantIndex,
) -> dict[str, list[str]]:
    """
    Find the timelines each entity belongs to.

    An entity belongs to timeline T when a relationship connects it directly
    to T (either direction) or a variant exists for (entity, T). References
    to unknown entities or timelines are dropped.

    :return: entity id -> timeline ids, ordered by timeline position
    """
    order = {t.id: i for i, t in enumerate(timelines)}
    found: dict[str, set[str]] = {
        e.id: set() for e in entities if e.id not in order
    }

    for rel in relationships:
        if rel.to_entity_id in order and rel.from_entity_id in found:
            found[rel.from_entity_id].add(rel.to_entity_id)
        if rel.from_entity_id in order and rel.to_entity_id in found:
            found[rel.to_entity_id].add(rel.from_entity_id)

    for entity_id, timeline_ids in found.items():
        timeline_ids.update(t for t in variants.timelines_for(entity_id) if t in order)

    return {
        entity_id: sorted(timeline_ids, key=order.__getitem__)
        for entity_id, timeline_ids in found.items()
    }
