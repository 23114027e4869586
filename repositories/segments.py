"""
Segment and Validation Rule Repositories
"""
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import select

from database.models import Segment, EntityTypeValidationRule
from .base import BaseRepository


class SegmentRepository(BaseRepository[Segment]):
    """Repository for conversation segments."""
    
    model = Segment
    
    async def list_all(self) -> Sequence[Segment]:
        return await self.get_all(order_by="name")
    
    async def get_by_name(self, name: str) -> Optional[Segment]:
        stmt = select(Segment).where(Segment.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def upsert(self, values: Dict[str, Any]) -> Segment:
        """Create a segment, or refresh type and description of the one with this name."""
        existing = await self.get_by_name(values["name"])
        if existing:
            return await self.update(existing, {
                "type": values["type"],
                "description": values.get("description"),
            })
        return await self.add(Segment(**values))


class ValidationRuleRepository(BaseRepository[EntityTypeValidationRule]):
    """Repository for per entity type validation rules, keyed by type name."""
    
    model = EntityTypeValidationRule
    
    async def list_all(self) -> Sequence[EntityTypeValidationRule]:
        return await self.get_all(order_by="entity_type")
    
    async def upsert(self, entity_type: str, rules: Dict[str, Any]) -> EntityTypeValidationRule:
        existing = await self.get(entity_type)
        if existing:
            return await self.update(existing, {"rules_json": rules})
        return await self.add(EntityTypeValidationRule(entity_type=entity_type, rules_json=rules))
