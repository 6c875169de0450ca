"""Layout service: the entry point the host application calls."""

from typing import Union

from storyloom.logging import get_logger
from storyloom.models import (
    Entity,
    GraphLayout,
    GraphLayoutRequest,
    LayoutRequest,
    ResolveRequest,
    TimelineLayout,
    TimelineLayoutRequest,
    ViewMode,
)
from storyloom.services.cache import LayoutCache
from storyloom.services.graph import compute_graph_layout
from storyloom.services.timeline import compute_timeline_layout
from storyloom.services.variants import resolve_entity

logger = get_logger("services.layout")


class LayoutService:
    """Memoized access to the graph and timeline layout engines."""

    def __init__(self, cache_size: int = 32, highlight_max_depth: int = 4):
        self.highlight_max_depth = highlight_max_depth
        self._graph_cache: LayoutCache[GraphLayoutRequest, GraphLayout] = LayoutCache(
            self._compute_graph, max_size=cache_size, name="graph",
        )
        self._timeline_cache: LayoutCache[TimelineLayoutRequest, TimelineLayout] = LayoutCache(
            compute_timeline_layout, max_size=cache_size, name="timeline",
        )

    def _compute_graph(self, request: GraphLayoutRequest) -> GraphLayout:
        return compute_graph_layout(request, highlight_max_depth=self.highlight_max_depth)

    def graph_layout(self, request: GraphLayoutRequest) -> GraphLayout:
        return self._graph_cache.get(request)

    def timeline_layout(self, request: TimelineLayoutRequest) -> TimelineLayout:
        return self._timeline_cache.get(request)

    def layout(self, request: LayoutRequest) -> Union[GraphLayout, TimelineLayout]:
        """Run whichever engine matches the request's view mode."""
        if request.view_mode == ViewMode.TYPE:
            return self.graph_layout(request.to_graph_request())
        if request.view_mode == ViewMode.TIMELINE:
            return self.timeline_layout(request.to_timeline_request())
        raise ValueError(f"Unsupported view mode: {request.view_mode}")

    def resolve(self, request: ResolveRequest) -> Entity:
        return resolve_entity(request.entity, request.timeline_id, request.variants)

    def clear(self) -> None:
        self._graph_cache.clear()
        self._timeline_cache.clear()
        logger.info("Layout caches cleared")

    def cache_stats(self) -> list[dict]:
        return [self._graph_cache.stats(), self._timeline_cache.stats()]
