"""
Dependency injection for FastAPI routes.

Provides typed service dependencies that enable IDE navigation (Ctrl+Click).
"""

from typing import Annotated
from fastapi import Request, Depends

from storyloom.services.layout import LayoutService


def get_layout_service(request: Request) -> LayoutService:
    return request.app.state.layout_service


LayoutServiceDep = Annotated[LayoutService, Depends(get_layout_service)]
