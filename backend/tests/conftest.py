from __future__ import annotations

import pytest

from factories import make_entity
from storyloom.models import Entity


@pytest.fixture
def two_timelines() -> list[Entity]:
    return [
        make_entity("t1", "timeline", name="Prime"),
        make_entity("t2", "timeline", name="Mirror"),
    ]
