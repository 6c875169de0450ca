"""
Timeline swimlane layout.

One lane per timeline plus an always-present canonical lane. Events sit in
the lanes of the timelines they belong to, left to right in arrival order.
Relationships between events become arrows, and an arrow whose cause is drawn
level with or after its effect in another lane flags a temporal conflict.
"""

from typing import Optional

from storyloom.logging import get_logger
from storyloom.models import (
    CANONICAL_LANE_ID,
    CausalArrow,
    Entity,
    EntityType,
    LaneConnector,
    LayoutSizing,
    TemporalConflict,
    TimelineEventNode,
    TimelineLane,
    TimelineLayout,
    TimelineLayoutRequest,
    TimelineSummary,
    is_causal,
)
from storyloom.services.associations import (
    DEFAULT_COLOR,
    LANE_COLORS,
    map_entities_to_timelines,
    timeline_colors,
)
from storyloom.services.variants import VariantIndex, resolve_entity

logger = get_logger("services.timeline")

CANONICAL_LABEL = "Canonical"
COLLAPSED_LANE_HEIGHT = 28
LANE_GAP = 8
LANE_LABEL_WIDTH = 180
EVENT_GAP = 16
MIN_CANVAS_WIDTH = 800
CANVAS_RIGHT_PADDING = 100
CANVAS_BOTTOM_PADDING = 40

COMPACT_SIZING = LayoutSizing(
    tier="compact", event_width=120, event_height=48, lane_height=70, label_width=LANE_LABEL_WIDTH,
)
MEDIUM_SIZING = LayoutSizing(
    tier="medium", event_width=150, event_height=56, lane_height=90, label_width=LANE_LABEL_WIDTH,
)
FULL_SIZING = LayoutSizing(
    tier="full", event_width=180, event_height=72, lane_height=120, label_width=LANE_LABEL_WIDTH,
)


def select_sizing(timeline_count: int) -> LayoutSizing:
    """Shrink events and lanes as the number of timelines grows."""
    if timeline_count > 10:
        return COMPACT_SIZING
    if timeline_count >= 6:
        return MEDIUM_SIZING
    return FULL_SIZING


def assign_lanes(
    events: list[Entity],
    event_timelines: dict[str, list[str]],
    lane_ids: list[str],
    focused_timeline_id: Optional[str],
) -> list[tuple[Entity, str]]:
    """
    Decide which lane(s) each event occupies, in arrival order.

    In focus mode an event appears once: in the focused lane if it belongs
    there, otherwise in the canonical lane. Otherwise it appears in every
    lane it belongs to, or in the canonical lane when it belongs nowhere.
    """
    valid = set(lane_ids)
    placements: list[tuple[Entity, str]] = []
    for event in events:
        timelines = event_timelines.get(event.id, [])
        if focused_timeline_id:
            lanes = [focused_timeline_id] if focused_timeline_id in timelines else [CANONICAL_LANE_ID]
        else:
            lanes = [t for t in timelines if t in valid] or [CANONICAL_LANE_ID]
        placements.extend((event, lane_id) for lane_id in lanes)
    return placements


def _build_lanes(
    lane_timelines: list[Entity],
    counts: dict[str, int],
    colors: dict[str, str],
    sizing: LayoutSizing,
) -> list[TimelineLane]:
    lanes: list[TimelineLane] = []
    current_y = 0.0
    specs = [(CANONICAL_LANE_ID, CANONICAL_LABEL, DEFAULT_COLOR)]
    specs += [(t.id, t.name, colors.get(t.id, DEFAULT_COLOR)) for t in lane_timelines]
    for lane_id, label, color in specs:
        count = counts.get(lane_id, 0)
        collapsed = count == 0
        height = COLLAPSED_LANE_HEIGHT if collapsed else sizing.lane_height
        lanes.append(TimelineLane(
            id=lane_id,
            label=label,
            color=color,
            y=current_y,
            height=height,
            event_count=count,
            collapsed=collapsed,
        ))
        current_y += height + LANE_GAP
    return lanes


def _connectors(nodes: list[TimelineEventNode]) -> list[LaneConnector]:
    by_entity: dict[str, list[TimelineEventNode]] = {}
    for node in nodes:
        by_entity.setdefault(node.entity_id, []).append(node)

    connectors = []
    for entity_id, occurrences in by_entity.items():
        for upper, lower in zip(occurrences, occurrences[1:]):
            connectors.append(LaneConnector(
                entity_id=entity_id,
                from_lane_id=upper.lane_id,
                to_lane_id=lower.lane_id,
                from_x=upper.x + upper.width / 2,
                from_y=upper.y + upper.height,
                to_x=lower.x + lower.width / 2,
                to_y=lower.y,
            ))
    return connectors


def compute_timeline_layout(request: TimelineLayoutRequest) -> TimelineLayout:
    """
    Lay out the timeline swimlane view.

    Conflicts are advisory annotations; the layout is never reflowed to
    resolve them.
    """
    timelines = request.timeline_entities()
    focus = request.focused_timeline_id
    variants = VariantIndex(request.variants)
    relationships = request.visible_relationships()
    sizing = select_sizing(len(timelines))

    lane_timelines = [t for t in timelines if t.id == focus] if focus else timelines
    lane_ids = [CANONICAL_LANE_ID] + [t.id for t in lane_timelines]

    seen: set[str] = set()
    events: list[Entity] = []
    for entity in request.entities:
        if entity.entity_type == EntityType.EVENT and entity.id not in seen:
            seen.add(entity.id)
            events.append(entity)

    event_timelines = map_entities_to_timelines(events, relationships, timelines, variants)
    placements = assign_lanes(events, event_timelines, lane_ids, focus)

    counts: dict[str, int] = {}
    occurrence_index: dict[str, int] = {}
    slots: list[tuple[Entity, str, int, int]] = []
    for event, lane_id in placements:
        slot = counts.get(lane_id, 0)
        counts[lane_id] = slot + 1
        occurrence = occurrence_index.get(event.id, 0)
        occurrence_index[event.id] = occurrence + 1
        slots.append((event, lane_id, slot, occurrence))

    lanes = _build_lanes(lane_timelines, counts, timeline_colors(timelines, LANE_COLORS), sizing)
    lane_by_id = {lane.id: lane for lane in lanes}

    nodes = []
    for event, lane_id, slot, occurrence in slots:
        lane = lane_by_id[lane_id]
        nodes.append(TimelineEventNode(
            entity_id=event.id,
            lane_id=lane_id,
            occurrence=occurrence,
            x=sizing.label_width + slot * (sizing.event_width + EVENT_GAP),
            y=lane.y + (lane.height - sizing.event_height) / 2,
            width=sizing.event_width,
            height=sizing.event_height,
        ))

    entities = {event.id: resolve_entity(event, focus, variants) for event in events}

    # Arrows and conflicts use each event's first occurrence.
    first: dict[str, TimelineEventNode] = {}
    for node in nodes:
        first.setdefault(node.entity_id, node)

    arrows: list[CausalArrow] = []
    conflicts: list[TemporalConflict] = []
    for rel in relationships:
        source = first.get(rel.from_entity_id)
        target = first.get(rel.to_entity_id)
        if source is None or target is None:
            continue
        arrows.append(CausalArrow(
            from_id=rel.from_entity_id,
            to_id=rel.to_entity_id,
            from_x=source.x + source.width,
            from_y=source.y + source.height / 2,
            to_x=target.x,
            to_y=target.y + target.height / 2,
            type=rel.relationship_type,
            is_causal=is_causal(rel.relationship_type),
        ))
        if source.x >= target.x and source.lane_id != target.lane_id:
            conflicts.append(TemporalConflict(
                event_id=rel.to_entity_id,
                cause_id=rel.from_entity_id,
                reason=f'"{entities[rel.from_entity_id].name}" causes this but appears after it',
            ))

    reasons: dict[str, list[str]] = {}
    for conflict in conflicts:
        reasons.setdefault(conflict.event_id, []).append(conflict.reason)
    for node in nodes:
        if node.entity_id in reasons:
            node.has_conflict = True
            node.conflict_reason = "; ".join(reasons[node.entity_id])

    if conflicts:
        logger.debug(f"Timeline layout flagged {len(conflicts)} temporal conflict(s)")

    max_x = max((n.x + n.width for n in nodes), default=0)
    last = lanes[-1]

    return TimelineLayout(
        lanes=lanes,
        event_nodes=nodes,
        entities=entities,
        arrows=arrows,
        connectors=_connectors(nodes),
        conflicts=conflicts,
        width=max(max_x, MIN_CANVAS_WIDTH) + CANVAS_RIGHT_PADDING,
        height=last.y + last.height + CANVAS_BOTTOM_PADDING,
        sizing=sizing,
        summary=TimelineSummary(
            lane_count=len(lanes),
            event_count=len(events),
            occurrence_count=len(nodes),
            conflict_count=len(conflicts),
        ),
    )
