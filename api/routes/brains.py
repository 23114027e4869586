"""
Brain Routes - named memory configurations.
"""
import json

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session_dependency
from database.models import Brain
from repositories import BrainRepository
from ..schemas import BrainBody

router = APIRouter(tags=["brains"])

DUPLICATE_BRAIN = "A brain with this name already exists."


def _parse_config(body: BrainBody) -> dict:
    if not body.name or body.config_json is None or body.config_json == "":
        raise HTTPException(status_code=400, detail="Name and configJson are required")
    if isinstance(body.config_json, str):
        try:
            return json.loads(body.config_json)
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="configJson must be valid JSON.")
    return body.config_json


@router.get("/brains")
async def list_brains(session: AsyncSession = Depends(get_session_dependency)):
    brains = await BrainRepository(session).list_all()
    return [b.to_dict() for b in brains]


@router.post("/brains", status_code=201)
async def create_brain(body: BrainBody, session: AsyncSession = Depends(get_session_dependency)):
    config = _parse_config(body)
    try:
        brain = await BrainRepository(session).add(Brain(name=body.name, config_json=config))
    except IntegrityError:
        raise HTTPException(status_code=409, detail=DUPLICATE_BRAIN)
    return brain.to_dict()


@router.get("/brains/stats")
async def get_brain_stats(session: AsyncSession = Depends(get_session_dependency)):
    """Entity and relationship counts per brain, Global Memory first."""
    return await BrainRepository(session).get_stats()


@router.get("/brains/{brain_id}")
async def get_brain(brain_id: str, session: AsyncSession = Depends(get_session_dependency)):
    brain = await BrainRepository(session).get(brain_id)
    if not brain:
        raise HTTPException(status_code=404, detail="Brain not found")
    return brain.to_dict()


@router.put("/brains/{brain_id}")
async def update_brain(brain_id: str, body: BrainBody, session: AsyncSession = Depends(get_session_dependency)):
    config = _parse_config(body)
    repo = BrainRepository(session)
    brain = await repo.get(brain_id)
    if not brain:
        raise HTTPException(status_code=404, detail="Brain not found")
    
    try:
        await repo.update(brain, {"name": body.name, "config_json": config})
    except IntegrityError:
        raise HTTPException(status_code=409, detail=DUPLICATE_BRAIN)
    return brain.to_dict()


@router.delete("/brains/{brain_id}")
async def delete_brain(brain_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await BrainRepository(session).delete(brain_id):
        raise HTTPException(status_code=404, detail="Brain not found")
    return {"message": "Brain deleted successfully"}
