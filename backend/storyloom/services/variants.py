"""Timeline variant resolution: canonical entity + optional override -> display entity."""

from typing import Iterable, Optional, Union

from storyloom.logging import get_logger
from storyloom.models import Entity, TimelineVariant

logger = get_logger("services.variants")


class VariantIndex:
    """
    Variant records keyed by ``(entity_id, timeline_id)``.

    Upstream data is expected to hold at most one record per pair. If it
    does not, the first record supplied wins.
    """

    def __init__(self, variants: Iterable[TimelineVariant] = ()):
        self._by_key: dict[tuple[str, str], TimelineVariant] = {}
        self._timelines_by_entity: dict[str, list[str]] = {}
        duplicates = 0
        for variant in variants:
            key = (variant.entity_id, variant.timeline_id)
            if key in self._by_key:
                duplicates += 1
                continue
            self._by_key[key] = variant
            self._timelines_by_entity.setdefault(variant.entity_id, []).append(variant.timeline_id)
        if duplicates:
            logger.debug(f"Ignored {duplicates} duplicate timeline variant(s)")

    def get(self, entity_id: str, timeline_id: str) -> Optional[TimelineVariant]:
        return self._by_key.get((entity_id, timeline_id))

    def timelines_for(self, entity_id: str) -> list[str]:
        return list(self._timelines_by_entity.get(entity_id, ()))


def apply_variant(entity: Entity, variant: TimelineVariant) -> Entity:
    """
    Build the display copy of ``entity`` with ``variant``'s overrides.

    Each field falls back independently; ``properties`` is replaced as a
    whole, never deep-merged.
    """
    name = variant.variant_name if variant.variant_name is not None else entity.name
    description = (
        variant.variant_description
        if variant.variant_description is not None
        else entity.description
    )
    properties = (
        variant.variant_properties
        if variant.variant_properties is not None
        else entity.properties
    )
    return entity.model_copy(update={
        "name": name,
        "description": description,
        "properties": dict(properties),
    })


def resolve_entity(
    entity: Entity,
    timeline_id: Optional[str],
    variants: Union[VariantIndex, Iterable[TimelineVariant]],
) -> Entity:
    """
    Resolve the entity to display under a timeline focus.

    :param entity: Canonical entity, never mutated
    :param timeline_id: Focused timeline id, or None for no focus
    :param variants: Variant records, or a prebuilt ``VariantIndex``
    :return: The canonical entity itself when there is no focus or no
        matching variant, otherwise a new resolved copy
    """
    if not timeline_id:
        return entity
    index = variants if isinstance(variants, VariantIndex) else VariantIndex(variants)
    variant = index.get(entity.id, timeline_id)
    if variant is None:
        return entity
    return apply_variant(entity, variant)
