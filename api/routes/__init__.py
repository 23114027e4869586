"""
API Routes - all endpoint definitions for the SoulyCore backend.

One module per area; `router` combines them and is mounted under /api.
"""
from fastapi import APIRouter

from . import (
    system,
    contacts,
    entities,
    brains,
    segments,
    conversations,
    assistant,
    data_sources,
    project,
    library,
)

router = APIRouter()

for module in (
    system,
    contacts,
    entities,
    brains,
    segments,
    conversations,
    assistant,
    data_sources,
    project,
    library,
):
    router.include_router(module.router)

__all__ = ["router"]
