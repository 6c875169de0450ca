"""Entity domain model."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from storyloom.models.enums import EntityType


class Entity(BaseModel):
    """
    A story element: a node in the world graph, or a timeline defining lanes.

    The layout engines read only the fixed fields. The ``prop_*`` accessors
    are for host applications reading the open-ended ``properties`` bag
    (renderers, exporters).
    """
    id: str
    project_id: Optional[str] = None
    entity_type: EntityType
    name: str
    description: str = ""
    properties: dict[str, Any] = Field(default_factory=dict)
    position_x: float = 0.0
    position_y: float = 0.0
    color: Optional[str] = None
    sort_order: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Typed accessors for the open-ended properties bag. A missing key or a
    # value of the wrong shape returns the default instead of raising.

    def prop_str(self, key: str, default: str = "") -> str:
        value = self.properties.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            name = value.get("name")
            return str(name) if name is not None else default
        if isinstance(value, (int, float, bool)):
            return str(value)
        return default

    def prop_float(self, key: str, default: float = 0.0) -> float:
        value = self.properties.get(key)
        if isinstance(value, bool):
            return default
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return default
        return default

    def prop_int(self, key: str, default: int = 0) -> int:
        value = self.properties.get(key)
        if isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return default
        return default

    def prop_bool(self, key: str, default: bool = False) -> bool:
        value = self.properties.get(key)
        return value if isinstance(value, bool) else default
