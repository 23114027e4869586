"""
Segment Routes - conversation segments and entity type validation rules.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from constants import SegmentType
from database import get_session_dependency
from repositories import SegmentRepository, ValidationRuleRepository
from ..schemas import SegmentBody, ValidationRuleBody

router = APIRouter(tags=["segments"])

SEGMENT_TYPES = [t.value for t in SegmentType]


def _segment_values(body: SegmentBody) -> dict:
    if not body.name or not body.type:
        raise HTTPException(status_code=400, detail="Missing required fields: name and type")
    if body.type not in SEGMENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid segment type. Expected one of: {', '.join(SEGMENT_TYPES)}",
        )
    return {"name": body.name, "type": body.type, "description": body.description}


# ============================================================
# Segments
# ============================================================
@router.get("/segments")
async def list_segments(session: AsyncSession = Depends(get_session_dependency)):
    segments = await SegmentRepository(session).list_all()
    return {"segments": [s.to_dict() for s in segments]}


@router.post("/segments", status_code=201)
async def create_segment(body: SegmentBody, session: AsyncSession = Depends(get_session_dependency)):
    """Create a segment; posting an existing name updates its type and description."""
    segment = await SegmentRepository(session).upsert(_segment_values(body))
    return segment.to_dict()


@router.put("/segments/{segment_id}")
async def update_segment(segment_id: str, body: SegmentBody, session: AsyncSession = Depends(get_session_dependency)):
    values = _segment_values(body)
    repo = SegmentRepository(session)
    segment = await repo.get(segment_id)
    if not segment:
        raise HTTPException(status_code=404, detail="Segment not found")
    await repo.update(segment, values)
    return segment.to_dict()


@router.delete("/segments/{segment_id}")
async def delete_segment(segment_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await SegmentRepository(session).delete(segment_id):
        raise HTTPException(status_code=404, detail="Segment not found")
    return {"message": "Segment deleted successfully"}


# ============================================================
# Validation rules
# ============================================================
@router.get("/validation-rules")
async def list_validation_rules(session: AsyncSession = Depends(get_session_dependency)):
    rules = await ValidationRuleRepository(session).list_all()
    return [r.to_dict() for r in rules]


@router.post("/validation-rules", status_code=201)
async def save_validation_rule(body: ValidationRuleBody, session: AsyncSession = Depends(get_session_dependency)):
    """Create or replace the rules of one entity type."""
    if not body.entity_type or body.rules_json is None:
        raise HTTPException(status_code=400, detail="entityType and rulesJson are required")
    rule = await ValidationRuleRepository(session).upsert(body.entity_type, body.rules_json)
    return rule.to_dict()


@router.delete("/validation-rules/{entity_type}")
async def delete_validation_rule(entity_type: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await ValidationRuleRepository(session).delete(entity_type):
        raise HTTPException(status_code=404, detail="Validation rule not found for this type")
    return {"message": "Validation rule deleted successfully"}
