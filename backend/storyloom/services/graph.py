"""
Causal graph layout.

Entities with at least one visible causal relationship form the causal zone
and are laid out in DAG columns, left to right by layer. Everything else sits
in a compact context grid on the left, grouped by entity type.
"""

import math
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Optional

from storyloom.logging import get_logger
from storyloom.models import (
    CAUSAL_TYPES,
    Entity,
    EntityType,
    GraphLayout,
    GraphLayoutRequest,
    GraphLink,
    GraphNode,
    GraphSummary,
    Relationship,
    ZoneBounds,
    Zone,
)
from storyloom.services.associations import (
    GRAPH_TIMELINE_COLORS,
    DEFAULT_COLOR,
    entity_color,
    map_entities_to_timelines,
    timeline_colors,
)
from storyloom.services.variants import VariantIndex, resolve_entity

logger = get_logger("services.graph")

COL_SPACING = 180
ROW_SPACING = 58
CONTEXT_COL_SPACING = 70
CONTEXT_ROW_SPACING = 65
CONTEXT_ZONE_LEFT = 40
CONTEXT_ZONE_TOP = 80
CONTEXT_GROUP_GAP = 30
CONTEXT_MAX_COLUMNS = 3
DAG_ZONE_GAP = 60
DAG_ZONE_MIN_LEFT = 280
DAG_ZONE_TOP = 80
DAG_BAND_HEIGHT = 500
ZONE_BOUNDS_PADDING = 40
CONTEXT_LAYER = -1


@dataclass
class LayerAssignment:
    """DAG layers plus what the cycle guard had to do to produce them."""
    layers: dict[str, int]
    frozen: list[str] = field(default_factory=list)
    unreached: list[str] = field(default_factory=list)

    @property
    def cycle_detected(self) -> bool:
        # A node with an incoming edge that no root reaches sits on or below a cycle.
        return bool(self.frozen or self.unreached)

    @property
    def max_layer(self) -> int:
        return max(self.layers.values(), default=0)


def visible_entities(request: GraphLayoutRequest, timeline_ids: set[str]) -> list[Entity]:
    hidden = set(request.hidden_types)
    needle = (request.search or "").strip().lower()
    result = []
    for entity in request.entities:
        if entity.entity_type in hidden or entity.entity_type == EntityType.TIMELINE:
            continue
        if entity.id in timeline_ids:
            continue
        if needle and needle not in entity.name.lower():
            continue
        result.append(entity)
    return result


def partition_zones(
    entities: list[Entity],
    relationships: Iterable[Relationship],
) -> tuple[list[Entity], list[Entity]]:
    """
    Split entities into (causal, context), both in input order.

    An entity is causal when it is an endpoint of a causal relationship whose
    two endpoints are both in ``entities``.
    """
    ids = {e.id for e in entities}
    has_causal_edge: set[str] = set()
    for rel in relationships:
        if rel.relationship_type not in CAUSAL_TYPES:
            continue
        if rel.from_entity_id in ids and rel.to_entity_id in ids:
            has_causal_edge.add(rel.from_entity_id)
            has_causal_edge.add(rel.to_entity_id)

    causal = [e for e in entities if e.id in has_causal_edge]
    context = [e for e in entities if e.id not in has_causal_edge]
    return causal, context


def causal_edges(entity_ids: Iterable[str], relationships: Iterable[Relationship]) -> list[tuple[str, str]]:
    ids = set(entity_ids)
    return [
        (rel.from_entity_id, rel.to_entity_id)
        for rel in relationships
        if rel.relationship_type in CAUSAL_TYPES
        and rel.from_entity_id in ids
        and rel.to_entity_id in ids
    ]


def assign_layers(entity_ids: list[str], edges: list[tuple[str, str]]) -> LayerAssignment:
    """
    Longest-path layering by BFS from the roots.

    Each child takes ``max(current, parent + 1)`` and is re-queued only when
    its layer strictly increases. In an acyclic graph of n nodes no layer
    reaches n, so a child that would be raised to layer n or beyond is on or
    below a cycle and stays frozen at its last layer. Every layer stays
    below n. Nodes no root reaches default to layer 0.
    """
    id_set = set(entity_ids)
    forward: dict[str, list[str]] = {}
    has_incoming: set[str] = set()
    for source, target in edges:
        if source not in id_set or target not in id_set:
            continue
        forward.setdefault(source, []).append(target)
        has_incoming.add(target)

    layer_limit = len(entity_ids)
    layers: dict[str, int] = {}
    frozen: dict[str, None] = {}
    queue: deque[tuple[str, int]] = deque()

    for node_id in entity_ids:
        if node_id not in has_incoming and node_id not in layers:
            layers[node_id] = 0
            queue.append((node_id, 0))

    while queue:
        node_id, depth = queue.popleft()
        if depth < layers[node_id]:
            continue  # superseded by a later raise
        for child in forward.get(node_id, ()):
            if child in frozen or depth + 1 <= layers.get(child, -1):
                continue
            if depth + 1 >= layer_limit:
                frozen[child] = None
                continue
            layers[child] = depth + 1
            queue.append((child, depth + 1))

    unreached = [node_id for node_id in entity_ids if node_id not in layers]
    for node_id in unreached:
        layers[node_id] = 0

    if frozen or unreached:
        logger.warning(
            f"Causal cycle detected: {len(frozen)} node(s) frozen, "
            f"{len(unreached)} node(s) unreachable from a root"
        )
    return LayerAssignment(layers=layers, frozen=list(frozen), unreached=unreached)


def causal_distances(
    start_id: str,
    relationships: Iterable[Relationship],
    max_depth: int = 4,
) -> dict[str, int]:
    """BFS over all relationships treated as undirected, up to ``max_depth`` hops."""
    adjacency: dict[str, list[str]] = {}
    for rel in relationships:
        adjacency.setdefault(rel.from_entity_id, []).append(rel.to_entity_id)
        adjacency.setdefault(rel.to_entity_id, []).append(rel.from_entity_id)

    depths = {start_id: 0}
    queue = deque([(start_id, 0)])
    while queue:
        node_id, depth = queue.popleft()
        if depth >= max_depth:
            continue
        for neighbour in adjacency.get(node_id, ()):
            if neighbour not in depths:
                depths[neighbour] = depth + 1
                queue.append((neighbour, depth + 1))
    return depths


def neighbourhood(entity_id: str, relationships: Iterable[Relationship]) -> list[str]:
    """The entity plus every entity one relationship away, in discovery order."""
    path = {entity_id: None}
    for rel in relationships:
        if rel.from_entity_id == entity_id:
            path.setdefault(rel.to_entity_id, None)
        if rel.to_entity_id == entity_id:
            path.setdefault(rel.from_entity_id, None)
    return list(path)


def _context_positions(context: list[Entity]) -> tuple[dict[str, tuple[float, float]], float]:
    by_type: dict[str, list[Entity]] = {}
    for entity in context:
        by_type.setdefault(entity.entity_type.value, []).append(entity)

    positions: dict[str, tuple[float, float]] = {}
    max_x = 0.0
    y_offset = CONTEXT_ZONE_TOP
    for type_name in sorted(by_type):
        group = by_type[type_name]
        cols = min(CONTEXT_MAX_COLUMNS, max(1, math.ceil(math.sqrt(len(group)))))
        for i, entity in enumerate(group):
            x = CONTEXT_ZONE_LEFT + (i % cols) * CONTEXT_COL_SPACING
            y = y_offset + (i // cols) * CONTEXT_ROW_SPACING
            positions[entity.id] = (x, y)
            max_x = max(max_x, x + CONTEXT_COL_SPACING)
        y_offset += math.ceil(len(group) / cols) * CONTEXT_ROW_SPACING + CONTEXT_GROUP_GAP
    return positions, max_x


def _causal_positions(
    causal: list[Entity],
    layers: dict[str, int],
    start_x: float,
) -> dict[str, tuple[float, float]]:
    columns: dict[int, list[str]] = {}
    for entity in causal:
        columns.setdefault(layers.get(entity.id, 0), []).append(entity.id)

    positions: dict[str, tuple[float, float]] = {}
    for layer, ids in columns.items():
        x = start_x + layer * COL_SPACING
        total_height = (len(ids) - 1) * ROW_SPACING
        start_y = DAG_ZONE_TOP + max(0, (DAG_BAND_HEIGHT - total_height) / 2)
        for i, entity_id in enumerate(ids):
            positions[entity_id] = (x, start_y + i * ROW_SPACING)
    return positions


def compute_graph_layout(request: GraphLayoutRequest, highlight_max_depth: int = 4) -> GraphLayout:
    """
    Lay out the causal graph view.

    Pure function of ``request``: positions and zones come from canonical
    data only, so focusing a timeline changes displayed fields but never
    moves a node.
    """
    timelines = request.timeline_entities()
    timeline_ids = {t.id for t in timelines}
    variants = VariantIndex(request.variants)
    relationships = request.visible_relationships()

    entities = visible_entities(request, timeline_ids)
    causal, context = partition_zones(entities, relationships)
    assignment = assign_layers(
        [e.id for e in causal],
        causal_edges((e.id for e in causal), relationships),
    )

    context_positions, context_max_x = _context_positions(context)
    dag_start_x = max(context_max_x + DAG_ZONE_GAP, DAG_ZONE_MIN_LEFT)
    positions = {**context_positions, **_causal_positions(causal, assignment.layers, dag_start_x)}

    depths: Optional[dict[str, int]] = None
    if request.selected_entity_id:
        depths = causal_distances(request.selected_entity_id, relationships, highlight_max_depth)

    non_timeline = [e for e in request.entities if e.id not in timeline_ids]
    entity_timelines = map_entities_to_timelines(non_timeline, relationships, timelines, variants)
    palette = timeline_colors(timelines, GRAPH_TIMELINE_COLORS)

    focused_ids: Optional[list[str]] = None
    focus = request.focused_timeline_id
    if focus:
        focused_ids = [
            entity_id for entity_id, tls in entity_timelines.items() if focus in tls
        ]

    def build_node(entity: Entity, zone: Zone) -> GraphNode:
        x, y = positions.get(entity.id, (0.0, 0.0))
        tl_ids = entity_timelines.get(entity.id, [])
        return GraphNode(
            id=entity.id,
            entity=resolve_entity(entity, focus, variants),
            color=entity_color(entity),
            zone=zone,
            layer=assignment.layers.get(entity.id, 0) if zone == Zone.CAUSAL else CONTEXT_LAYER,
            x=x,
            y=y,
            highlighted=depths is not None and entity.id in depths,
            timeline_ids=tl_ids,
            timeline_colors=[palette.get(t, DEFAULT_COLOR) for t in tl_ids],
        )

    nodes = [build_node(e, Zone.CAUSAL) for e in causal]
    nodes += [build_node(e, Zone.CONTEXT) for e in context]

    node_ids = {n.id for n in nodes}
    links = [
        GraphLink(
            id=rel.id,
            source_id=rel.from_entity_id,
            target_id=rel.to_entity_id,
            relationship=rel,
            is_causal=rel.relationship_type in CAUSAL_TYPES,
            highlighted=(
                depths is not None
                and rel.from_entity_id in depths
                and rel.to_entity_id in depths
            ),
        )
        for rel in relationships
        if rel.from_entity_id in node_ids and rel.to_entity_id in node_ids
    ]
    dropped = len(relationships) - len(links)
    if dropped:
        logger.debug(f"Dropped {dropped} relationship(s) without two visible endpoints")

    bounds = ZoneBounds()
    for entity in context:
        x, y = context_positions[entity.id]
        bounds.width = max(bounds.width, x + ZONE_BOUNDS_PADDING)
        bounds.height = max(bounds.height, y + ZONE_BOUNDS_PADDING)

    character_path: list[str] = []
    if request.highlighted_character_id:
        character_path = neighbourhood(request.highlighted_character_id, relationships)

    summary = GraphSummary(
        causal_count=len(causal),
        context_count=len(context),
        max_layer=assignment.max_layer,
        cycle_detected=assignment.cycle_detected,
        frozen_node_ids=assignment.frozen,
    )
    logger.debug(
        f"Graph layout: {summary.causal_count} causal, {summary.context_count} context, "
        f"max layer {summary.max_layer}"
    )

    return GraphLayout(
        nodes=nodes,
        links=links,
        summary=summary,
        relationship_types=sorted({r.relationship_type for r in request.relationships}),
        causal_depths=depths,
        focused_entity_ids=focused_ids,
        character_path_ids=character_path,
        context_zone_bounds=bounds,
    )
