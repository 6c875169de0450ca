"""Timeline variant domain model."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class TimelineVariant(BaseModel):
    """
    Per-timeline partial override of an entity's displayed fields.

    A ``None`` override field inherits the canonical value. Variants never
    change identity, type or position of the canonical entity.
    """
    id: Optional[str] = None
    project_id: Optional[str] = None
    entity_id: str
    timeline_id: str
    variant_name: Optional[str] = None
    variant_description: Optional[str] = None
    variant_properties: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
