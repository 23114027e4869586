"""
Entity Repository

Handles entity definitions, their edit history, and the structural
operations on the knowledge graph: merge, split, bulk edits and
duplicate detection.
"""
import json
from typing import Optional, Sequence, List, Dict, Any, Tuple

from sqlalchemy import select, delete, update, func, or_, exists
from loguru import logger

from database.models import (
    EntityDefinition,
    EntityHistory,
    EntityRelationship,
    MessageEntity,
)
from utils.text import trigram_similarity
from .base import BaseRepository


# Fields whose edits are written to entity_history
TRACKED_FIELDS = ("name", "type", "description", "aliases", "tags", "brain_id")

DUPLICATE_THRESHOLD = 0.4
DUPLICATE_LIMIT = 20


def _merge_unique(*groups: Optional[List[str]]) -> List[str]:
    """Concatenate lists keeping the first occurrence of each value."""
    merged: List[str] = []
    for group in groups:
        for value in group or []:
            if value not in merged:
                merged.append(value)
    return merged


def _history_value(value: Any) -> Optional[str]:
    """Text stored in entity_history; lists are kept as JSON."""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


class EntityRepository(BaseRepository[EntityDefinition]):
    """Repository for entity definitions."""
    
    model = EntityDefinition
    
    # ============================================
    # QUERIES
    # ============================================
    
    async def list_all(self, brain_id: Optional[str] = None) -> Sequence[EntityDefinition]:
        """Newest first, optionally restricted to one brain."""
        stmt = select(EntityDefinition).order_by(EntityDefinition.created_at.desc())
        if brain_id:
            stmt = stmt.where(EntityDefinition.brain_id == brain_id)
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_by_name_type(self, name: str, entity_type: str) -> Optional[EntityDefinition]:
        stmt = select(EntityDefinition).where(
            EntityDefinition.name == name,
            EntityDefinition.type == entity_type,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def get_by_name(self, name: str) -> Optional[EntityDefinition]:
        """First entity with this exact name, any type."""
        stmt = (
            select(EntityDefinition)
            .where(EntityDefinition.name == name)
            .order_by(EntityDefinition.created_at)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def get_history(self, entity_id: str) -> Sequence[EntityHistory]:
        """Edit log for one entity, latest change first."""
        stmt = (
            select(EntityHistory)
            .where(EntityHistory.entity_id == entity_id)
            .order_by(EntityHistory.changed_at.desc(), EntityHistory.version.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_unused(self) -> Sequence[EntityDefinition]:
        """Entities that no relationship and no message refers to, oldest first."""
        in_relationship = exists().where(or_(
            EntityRelationship.source_entity_id == EntityDefinition.id,
            EntityRelationship.target_entity_id == EntityDefinition.id,
        ))
        in_message = exists().where(MessageEntity.entity_id == EntityDefinition.id)
        stmt = (
            select(EntityDefinition)
            .where(~in_relationship, ~in_message)
            .order_by(EntityDefinition.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def find_duplicates(
        self,
        threshold: float = DUPLICATE_THRESHOLD,
        limit: int = DUPLICATE_LIMIT,
    ) -> List[Dict[str, Any]]:
        """
        Pairs of entities with similar names.
        
        Each pair is reported once (entity1.id < entity2.id), most similar
        first.
        
        Returns:
            [{"entity1": {...}, "entity2": {...}, "similarity": 0.62}, ...]
        """
        entities = sorted(await self.get_all(), key=lambda e: e.id)
        pairs = []
        for i, first in enumerate(entities):
            for second in entities[i + 1:]:
                score = trigram_similarity(first.name, second.name)
                if score > threshold:
                    pairs.append((score, first, second))
        
        pairs.sort(key=lambda p: p[0], reverse=True)
        return [
            {"entity1": first.to_dict(), "entity2": second.to_dict(), "similarity": round(score, 4)}
            for score, first, second in pairs[:limit]
        ]
    
    # ============================================
    # WRITES
    # ============================================
    
    async def upsert(self, values: Dict[str, Any]) -> Tuple[EntityDefinition, bool]:
        """
        Create an entity, or refresh the description of the existing one
        with the same name and type.
        
        Returns:
            (entity, created)
        """
        existing = await self.get_by_name_type(values["name"], values["type"])
        if existing:
            if values.get("description") is not None:
                await self.update(existing, {"description": values["description"]})
            return existing, False
        
        entity = await self.add(EntityDefinition(
            name=values["name"],
            type=values["type"],
            description=values.get("description"),
            aliases=values.get("aliases") or [],
            tags=values.get("tags") or [],
            brain_id=values.get("brain_id"),
        ))
        return entity, True
    
    async def update_with_history(
        self,
        entity: EntityDefinition,
        values: Dict[str, Any],
        changed_by: str = "user",
    ) -> EntityDefinition:
        """Apply edits and append one history row per changed tracked field."""
        version = await self._latest_version(entity.id)
        for field in TRACKED_FIELDS:
            if field not in values:
                continue
            old, new = getattr(entity, field), values[field]
            if old == new:
                continue
            version += 1
            self.session.add(EntityHistory(
                entity_id=entity.id,
                field_name=field,
                old_value=_history_value(old),
                new_value=_history_value(new),
                version=version,
                changed_by=changed_by,
            ))
        return await self.update(entity, values)
    
    async def _latest_version(self, entity_id: str) -> int:
        stmt = select(func.max(EntityHistory.version)).where(EntityHistory.entity_id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one() or 0
    
    async def merge(self, target: EntityDefinition, source: EntityDefinition) -> EntityDefinition:
        """
        Fold source into target.
        
        The source name and aliases become target aliases, relationships and
        message links move to the target, and the source is deleted. Edges
        that would become self-loops or duplicate an existing edge of the
        target are dropped.
        """
        target.aliases = _merge_unique(target.aliases, source.aliases, [source.name])
        
        stmt = select(EntityRelationship).where(or_(
            EntityRelationship.source_entity_id == source.id,
            EntityRelationship.target_entity_id == source.id,
        ))
        moved = (await self.session.execute(stmt)).scalars().all()
        for rel in moved:
            new_source = target.id if rel.source_entity_id == source.id else rel.source_entity_id
            new_target = target.id if rel.target_entity_id == source.id else rel.target_entity_id
            if new_source == new_target or await self._edge_exists(new_source, new_target, rel.predicate_id):
                await self.session.delete(rel)
            else:
                rel.source_entity_id = new_source
                rel.target_entity_id = new_target
            # Flush per edge so the next duplicate check sees this one
            await self.session.flush()
        
        already_linked = select(MessageEntity.message_id).where(MessageEntity.entity_id == target.id)
        await self.session.execute(
            delete(MessageEntity).where(
                MessageEntity.entity_id == source.id,
                MessageEntity.message_id.in_(already_linked),
            )
        )
        await self.session.execute(
            update(MessageEntity)
            .where(MessageEntity.entity_id == source.id)
            .values(entity_id=target.id)
        )
        
        await self.session.delete(source)
        await self.session.flush()
        logger.info(f"Merged entity {source.id} into {target.id}")
        return target
    
    async def _edge_exists(self, source_id: str, target_id: str, predicate_id: str) -> bool:
        stmt = select(func.count()).select_from(EntityRelationship).where(
            EntityRelationship.source_entity_id == source_id,
            EntityRelationship.target_entity_id == target_id,
            EntityRelationship.predicate_id == predicate_id,
        )
        return (await self.session.execute(stmt)).scalar_one() > 0
    
    async def split(
        self,
        source: EntityDefinition,
        new_entities: List[Dict[str, Any]],
        migrations: List[Dict[str, Any]],
    ) -> List[EntityDefinition]:
        """
        Replace source with several new entities.
        
        Args:
            source: Entity being split
            new_entities: [{"id": <temporary id>, "name", "type", "description"}]
            migrations: [{"relationshipId", "newOwnerEntityId"}]; the owner is a
                temporary id from new_entities, or "DELETE"
        
        Returns:
            The created entities, in request order
        """
        created: List[EntityDefinition] = []
        id_map: Dict[str, str] = {}
        for new_entity in new_entities:
            entity = EntityDefinition(
                name=new_entity["name"],
                type=new_entity["type"],
                description=new_entity.get("description"),
                aliases=[],
                tags=[],
                brain_id=source.brain_id,
            )
            self.session.add(entity)
            created.append(entity)
        await self.session.flush()
        for new_entity, entity in zip(new_entities, created):
            if new_entity.get("id") is not None:
                id_map[str(new_entity["id"])] = entity.id
        
        for migration in migrations:
            rel = await self.session.get(EntityRelationship, migration.get("relationshipId"))
            if rel is None:
                continue
            owner = migration.get("newOwnerEntityId")
            if owner == "DELETE":
                await self.session.delete(rel)
                continue
            new_owner_id = id_map.get(str(owner))
            if new_owner_id is None:
                continue
            if rel.source_entity_id == source.id:
                rel.source_entity_id = new_owner_id
            if rel.target_entity_id == source.id:
                rel.target_entity_id = new_owner_id
        await self.session.flush()
        
        await self.session.delete(source)
        await self.session.flush()
        logger.info(f"Split entity {source.id} into {len(created)} entities")
        return created
    
    async def bulk_change_type(self, entity_ids: List[str], new_type: str) -> int:
        stmt = (
            update(EntityDefinition)
            .where(EntityDefinition.id.in_(entity_ids))
            .values(type=new_type, last_updated_at=self.now())
        )
        result = await self.session.execute(stmt)
        return result.rowcount
    
    async def bulk_add_tags(self, entity_ids: List[str], tags: List[str]) -> int:
        """Union the given tags into every entity's tag list."""
        entities = await self.get_by_ids(entity_ids)
        for entity in entities:
            entity.tags = _merge_unique(entity.tags, tags)
        await self.session.flush()
        return len(entities)
