"""
Brain Repository
"""
from typing import Optional, Sequence, List, Dict, Any

from sqlalchemy import select, func

from database.models import Brain, EntityDefinition, EntityRelationship
from .base import BaseRepository


GLOBAL_MEMORY_ID = "none"
GLOBAL_MEMORY_NAME = "Global Memory"


class BrainRepository(BaseRepository[Brain]):
    """Repository for brains and their memory usage."""
    
    model = Brain
    
    async def list_all(self) -> Sequence[Brain]:
        return await self.get_all(order_by="name")
    
    async def get_by_name(self, name: str) -> Optional[Brain]:
        stmt = select(Brain).where(Brain.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def get_stats(self) -> List[Dict[str, Any]]:
        """
        Entity and relationship counts per brain.
        
        The first entry covers rows outside any brain ("Global Memory").
        """
        entity_counts = dict((await self.session.execute(
            select(EntityDefinition.brain_id, func.count()).group_by(EntityDefinition.brain_id)
        )).all())
        relationship_counts = dict((await self.session.execute(
            select(EntityRelationship.brain_id, func.count()).group_by(EntityRelationship.brain_id)
        )).all())
        
        stats = [{
            "id": GLOBAL_MEMORY_ID,
            "name": GLOBAL_MEMORY_NAME,
            "entityCount": entity_counts.get(None, 0),
            "relationshipCount": relationship_counts.get(None, 0),
        }]
        for brain in await self.list_all():
            stats.append({
                "id": brain.id,
                "name": brain.name,
                "entityCount": entity_counts.get(brain.id, 0),
                "relationshipCount": relationship_counts.get(brain.id, 0),
            })
        return stats
