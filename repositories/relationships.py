"""
Relationship and Predicate Repositories

Edges of the knowledge graph and the vocabulary of predicates they use.
"""
from typing import Optional, Sequence, List, Dict, Any, Tuple

from sqlalchemy import select, or_
from sqlalchemy.orm import aliased

from database.models import EntityDefinition, EntityRelationship, PredicateDefinition
from .base import BaseRepository


class PredicateRepository(BaseRepository[PredicateDefinition]):
    """Repository for predicate definitions."""
    
    model = PredicateDefinition
    
    async def list_all(self) -> Sequence[PredicateDefinition]:
        return await self.get_all(order_by="name")
    
    async def get_by_name(self, name: str) -> Optional[PredicateDefinition]:
        stmt = select(PredicateDefinition).where(PredicateDefinition.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def upsert(self, values: Dict[str, Any]) -> Tuple[PredicateDefinition, bool]:
        """
        Create a predicate, or refresh the description of the existing one.
        
        Returns:
            (predicate, created)
        """
        existing = await self.get_by_name(values["name"])
        if existing:
            if values.get("description") is not None:
                await self.update(existing, {"description": values["description"]})
            return existing, False
        
        predicate = await self.add(PredicateDefinition(
            name=values["name"],
            description=values.get("description"),
            is_transitive=bool(values.get("is_transitive") or False),
            is_symmetric=bool(values.get("is_symmetric") or False),
        ))
        return predicate, True
    
    async def ensure(self, name: str) -> PredicateDefinition:
        """Predicate with this name, created on first use."""
        predicate, _ = await self.upsert({"name": name})
        return predicate


class RelationshipRepository(BaseRepository[EntityRelationship]):
    """Repository for entity relationships."""
    
    model = EntityRelationship
    
    async def find(self, source_id: str, target_id: str, predicate_id: str) -> Optional[EntityRelationship]:
        """Edge with exactly this (source, target, predicate) triple."""
        stmt = select(EntityRelationship).where(
            EntityRelationship.source_entity_id == source_id,
            EntityRelationship.target_entity_id == target_id,
            EntityRelationship.predicate_id == predicate_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
    
    async def create_if_missing(
        self,
        source_id: str,
        target_id: str,
        predicate_id: str,
        context: Optional[str] = None,
        brain_id: Optional[str] = None,
    ) -> Tuple[EntityRelationship, bool]:
        """
        Insert the edge unless the triple is already present.
        
        Returns:
            (relationship, created)
        """
        existing = await self.find(source_id, target_id, predicate_id)
        if existing:
            return existing, False
        
        relationship = await self.add(EntityRelationship(
            source_entity_id=source_id,
            target_entity_id=target_id,
            predicate_id=predicate_id,
            context=context,
            brain_id=brain_id,
        ))
        return relationship, True
    
    async def get_graph(self) -> Dict[str, List[Dict[str, Any]]]:
        """
        Whole graph in the shape the force-directed view consumes.
        
        Returns:
            {"nodes": [{id, name, type}], "edges": [{id, source, target, label, context}]}
        """
        entities = (await self.session.execute(
            select(EntityDefinition.id, EntityDefinition.name, EntityDefinition.type)
        )).all()
        edges = (await self.session.execute(
            select(EntityRelationship, PredicateDefinition.name)
            .join(PredicateDefinition, PredicateDefinition.id == EntityRelationship.predicate_id)
        )).all()
        
        return {
            "nodes": [{"id": e.id, "name": e.name, "type": e.type} for e in entities],
            "edges": [
                {
                    "id": rel.id,
                    "source": rel.source_entity_id,
                    "target": rel.target_entity_id,
                    "label": label,
                    "context": rel.context,
                }
                for rel, label in edges
            ],
        }
    
    async def get_for_entity(self, entity_id: str) -> List[Dict[str, Any]]:
        """Edges touching an entity, with predicate and endpoint names resolved."""
        source = aliased(EntityDefinition)
        target = aliased(EntityDefinition)
        stmt = (
            select(
                EntityRelationship,
                PredicateDefinition.name.label("predicate_name"),
                source.name.label("source_name"),
                target.name.label("target_name"),
            )
            .join(PredicateDefinition, PredicateDefinition.id == EntityRelationship.predicate_id)
            .join(source, source.id == EntityRelationship.source_entity_id)
            .join(target, target.id == EntityRelationship.target_entity_id)
            .where(or_(
                EntityRelationship.source_entity_id == entity_id,
                EntityRelationship.target_entity_id == entity_id,
            ))
            .order_by(EntityRelationship.created_at.desc())
        )
        rows = (await self.session.execute(stmt)).all()
        return [
            {
                **rel.to_dict(),
                "predicate_name": predicate_name,
                "source_name": source_name,
                "target_name": target_name,
            }
            for rel, predicate_name, source_name, target_name in rows
        ]
