"""Relationship domain model."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from storyloom.models.enums import normalize_type


class Relationship(BaseModel):
    """A directed, typed edge between two entities. Duplicates are legal."""
    id: str
    project_id: Optional[str] = None
    from_entity_id: str
    to_entity_id: str
    relationship_type: str
    label: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    @field_validator("relationship_type")
    @classmethod
    def normalize_relationship_type(cls, value: str) -> str:
        return normalize_type(value)
