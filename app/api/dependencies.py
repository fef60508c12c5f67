"""
FastAPI dependencies.

The service objects are built once in the application lifespan and
stored on ``app.state``. Tests replace them through
``app.dependency_overrides``.
"""

from fastapi import Request

from app.core.resources.catalog import ResourceCatalog
from app.core.triage.orchestrator import CrisisChatService


def get_crisis_service(request: Request) -> CrisisChatService:
    """Crisis chat orchestrator for the current app."""
    return request.app.state.crisis_service


def get_resource_catalog(request: Request) -> ResourceCatalog:
    """Static resource/tip catalog for the current app."""
    return request.app.state.catalog
