"""Layout API routes."""

from fastapi import APIRouter, HTTPException

from storyloom.dependencies import LayoutServiceDep
from storyloom.models import (
    CAUSAL_TYPES,
    KNOWN_RELATIONSHIP_TYPES,
    STRUCTURAL_TYPES,
    Entity,
    GraphLayout,
    GraphLayoutRequest,
    LayoutRequest,
    ResolveRequest,
    TimelineLayout,
    TimelineLayoutRequest,
)

router = APIRouter()


@router.post("/graph", response_model=GraphLayout)
def graph_layout(body: GraphLayoutRequest, service: LayoutServiceDep):
    return service.graph_layout(body)


@router.post("/timeline", response_model=TimelineLayout)
def timeline_layout(body: TimelineLayoutRequest, service: LayoutServiceDep):
    return service.timeline_layout(body)


@router.post("")
def layout(body: LayoutRequest, service: LayoutServiceDep):
    try:
        return service.layout(body)
    except ValueError as exc:
        raise HTTPException(400, str(exc)) from exc


@router.post("/resolve", response_model=Entity)
def resolve_entity(body: ResolveRequest, service: LayoutServiceDep):
    return service.resolve(body)


@router.get("/relationship-types")
def relationship_types():
    return {
        "causal": sorted(CAUSAL_TYPES),
        "structural": sorted(STRUCTURAL_TYPES),
        "known": sorted(KNOWN_RELATIONSHIP_TYPES),
    }
