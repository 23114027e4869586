"""
Entity Routes - the structured memory graph.

Endpoints organized by:
- Entities (CRUD, history)
- Relationships (graph, edges between entities)
- Graph maintenance (merge, split, duplicates, bulk actions, unused)
- Predicates

Static paths under /entities are declared before /entities/{entity_id}.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from constants import BulkAction
from database import get_session_dependency
from repositories import EntityRepository, PredicateRepository, RelationshipRepository
from ..schemas import (
    EntityBody,
    MergeEntitiesBody,
    SplitEntityBody,
    BulkActionBody,
    PredicateBody,
    RelationshipBody,
    RelationshipFromNamesBody,
)

router = APIRouter(tags=["entities"])


# ============================================================
# Entities
# ============================================================
@router.get("/entities")
async def list_entities(
    brain_id: Optional[str] = Query(default=None, alias="brainId"),
    session: AsyncSession = Depends(get_session_dependency),
):
    """All entities, newest first, optionally for one brain."""
    entities = await EntityRepository(session).list_all(brain_id)
    return [e.to_dict() for e in entities]


@router.post("/entities", status_code=201)
async def create_entity(body: EntityBody, session: AsyncSession = Depends(get_session_dependency)):
    """Create an entity, or update the description of the one with the same name and type."""
    if not body.name or not body.type:
        raise HTTPException(status_code=400, detail="Missing required fields: name and type")
    
    entity, _ = await EntityRepository(session).upsert(body.changes())
    return entity.to_dict()


# ============================================================
# Relationships
# ============================================================
@router.get("/entities/relationships")
async def get_relationship_graph(session: AsyncSession = Depends(get_session_dependency)):
    """Nodes and labelled edges for the graph view."""
    return await RelationshipRepository(session).get_graph()


@router.post("/entities/relationships", status_code=201)
async def create_relationship(
    body: RelationshipBody,
    response: Response,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Link two entities; an existing (source, target, predicate) triple is left alone."""
    predicate_name = body.predicate or body.predicate_name
    if not body.source_entity_id or not body.target_entity_id or not (predicate_name or body.predicate_id):
        raise HTTPException(status_code=400, detail="source, target, and predicate are required")
    
    entities = EntityRepository(session)
    for entity_id in (body.source_entity_id, body.target_entity_id):
        if not await entities.exists(entity_id):
            raise HTTPException(status_code=404, detail="Entity not found")
    
    predicates = PredicateRepository(session)
    if body.predicate_id:
        predicate = await predicates.get(body.predicate_id)
        if not predicate:
            raise HTTPException(status_code=404, detail="Predicate not found")
    else:
        predicate = await predicates.ensure(predicate_name)
    
    relationship, created = await RelationshipRepository(session).create_if_missing(
        body.source_entity_id,
        body.target_entity_id,
        predicate.id,
        context=body.context,
        brain_id=body.brain_id,
    )
    if not created:
        response.status_code = 200
        return {"message": "Relationship already exists."}
    return relationship.to_dict()


@router.post("/entities/relationships/from-names", status_code=201)
async def create_relationship_from_names(
    body: RelationshipFromNamesBody,
    response: Response,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Link two entities given by name, creating the predicate if needed."""
    if not body.source or not body.predicate or not body.target:
        raise HTTPException(status_code=400, detail="Source, predicate, and target names are required.")
    
    entities = EntityRepository(session)
    source = await entities.get_by_name(body.source)
    if not source:
        raise HTTPException(status_code=404, detail=f"Source entity '{body.source}' not found.")
    target = await entities.get_by_name(body.target)
    if not target:
        raise HTTPException(status_code=404, detail=f"Target entity '{body.target}' not found.")
    
    predicate = await PredicateRepository(session).ensure(body.predicate)
    relationship, created = await RelationshipRepository(session).create_if_missing(
        source.id, target.id, predicate.id, context=body.context, brain_id=source.brain_id,
    )
    if not created:
        response.status_code = 200
        return {"message": "Relationship already exists.", "relationship": relationship.to_dict()}
    return relationship.to_dict()


@router.put("/entities/relationships/{relationship_id}")
async def update_relationship(
    relationship_id: str,
    body: RelationshipBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Change the predicate (by name) and context of an edge."""
    predicate_name = body.predicate_name or body.predicate
    if not predicate_name:
        raise HTTPException(status_code=400, detail="predicateName is required")
    
    repo = RelationshipRepository(session)
    relationship = await repo.get(relationship_id)
    if not relationship:
        raise HTTPException(status_code=404, detail="Relationship not found")
    
    predicate = await PredicateRepository(session).ensure(predicate_name)
    try:
        await repo.update(relationship, {"predicate_id": predicate.id, "context": body.context})
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Relationship already exists.")
    return relationship.to_dict()


@router.delete("/entities/relationships/{relationship_id}")
async def delete_relationship(relationship_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await RelationshipRepository(session).delete(relationship_id):
        raise HTTPException(status_code=404, detail="Relationship not found")
    return {"message": "Relationship deleted successfully"}


# ============================================================
# Graph maintenance
# ============================================================
@router.post("/entities/merge")
async def merge_entities(body: MergeEntitiesBody, session: AsyncSession = Depends(get_session_dependency)):
    """Fold the source entity into the target entity."""
    if not body.target_id or not body.source_id:
        raise HTTPException(status_code=400, detail="targetId and sourceId are required")
    if body.target_id == body.source_id:
        raise HTTPException(status_code=400, detail="Cannot merge an entity with itself")
    
    repo = EntityRepository(session)
    target = await repo.get(body.target_id)
    if not target:
        raise HTTPException(status_code=404, detail="Target entity not found")
    source = await repo.get(body.source_id)
    if not source:
        raise HTTPException(status_code=404, detail="Source entity not found")
    
    await repo.merge(target, source)
    return {"success": True, "message": "Entities merged successfully."}


@router.post("/entities/split")
async def split_entity(body: SplitEntityBody, session: AsyncSession = Depends(get_session_dependency)):
    """Replace one entity with two or more, redistributing its relationships."""
    new_entities = body.new_entities or []
    if (
        not body.source_entity_id
        or len(new_entities) < 2
        or body.relationship_migrations is None
        or any(not e.name or not e.type for e in new_entities)
    ):
        raise HTTPException(status_code=400, detail="Invalid request body for splitting entity.")
    
    repo = EntityRepository(session)
    source = await repo.get(body.source_entity_id)
    if not source:
        raise HTTPException(status_code=404, detail="Source entity not found")
    
    try:
        created = await repo.split(
            source,
            [e.model_dump() for e in new_entities],
            [
                {"relationshipId": m.relationship_id, "newOwnerEntityId": m.new_owner_entity_id}
                for m in body.relationship_migrations
            ],
        )
    except IntegrityError:
        raise HTTPException(status_code=409, detail="An entity with this name and type already exists.")
    
    return {
        "success": True,
        "message": "Entity split successfully.",
        "newEntityIds": [e.id for e in created],
    }


@router.get("/entities/duplicates")
async def find_duplicate_entities(session: AsyncSession = Depends(get_session_dependency)):
    """Pairs of entities with similar names, most similar first."""
    return await EntityRepository(session).find_duplicates()


@router.post("/entities/bulk-actions")
async def bulk_entity_action(body: BulkActionBody, session: AsyncSession = Depends(get_session_dependency)):
    """Delete, retype or tag several entities at once."""
    if not body.action or not body.ids:
        raise HTTPException(status_code=400, detail="Action and an array of IDs are required.")
    
    payload = body.payload or {}
    repo = EntityRepository(session)
    
    if body.action == BulkAction.DELETE.value:
        await repo.delete_all(body.ids)
    elif body.action == BulkAction.CHANGE_TYPE.value:
        new_type = payload.get("newType")
        if not isinstance(new_type, str):
            raise HTTPException(status_code=400, detail="Payload with newType is required for change_type action.")
        await repo.bulk_change_type(body.ids, new_type)
    elif body.action == BulkAction.ADD_TAGS.value:
        tags = payload.get("tags")
        if not isinstance(tags, list) or not tags:
            raise HTTPException(
                status_code=400,
                detail="Payload with a non-empty tags array is required for add_tags action.",
            )
        await repo.bulk_add_tags(body.ids, tags)
    else:
        raise HTTPException(status_code=400, detail=f"Invalid action: {body.action}")
    
    logger.info(f"Bulk action '{body.action}' on {len(body.ids)} entities")
    return {"success": True, "message": f"Action '{body.action}' completed on {len(body.ids)} entities."}


@router.get("/entities/unused")
async def list_unused_entities(session: AsyncSession = Depends(get_session_dependency)):
    """Entities with no relationships and no message mentions, oldest first."""
    entities = await EntityRepository(session).get_unused()
    return [e.to_dict() for e in entities]


# ============================================================
# Single entity
# ============================================================
@router.get("/entities/{entity_id}")
async def get_entity(entity_id: str, session: AsyncSession = Depends(get_session_dependency)):
    entity = await EntityRepository(session).get(entity_id)
    if not entity:
        raise HTTPException(status_code=404, detail="Entity not found")
    return entity.to_dict()


@router.put("/entities/{entity_id}")
async def update_entity(
    entity_id: str,
    body: EntityBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Edit an entity; every changed field is written to its history."""
    repo = EntityRepository(session)
    entity = await repo.get(entity_id)
    if not entity:
        raise HTTPException(status_code=404, detail="Entity not found")
    
    changes = body.changes()
    if ("name" in changes and not changes["name"]) or ("type" in changes and not changes["type"]):
        raise HTTPException(status_code=400, detail="Missing required fields: name and type")
    
    try:
        await repo.update_with_history(entity, changes)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="An entity with this name and type already exists.")
    return entity.to_dict()


@router.delete("/entities/{entity_id}")
async def delete_entity(entity_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await EntityRepository(session).delete(entity_id):
        raise HTTPException(status_code=404, detail="Entity not found")
    return {"message": "Entity deleted successfully"}


@router.get("/entities/{entity_id}/history")
async def get_entity_history(entity_id: str, session: AsyncSession = Depends(get_session_dependency)):
    history = await EntityRepository(session).get_history(entity_id)
    return [h.to_dict() for h in history]


@router.get("/entities/{entity_id}/relationships")
async def get_entity_relationships(entity_id: str, session: AsyncSession = Depends(get_session_dependency)):
    """Edges touching the entity, with predicate and endpoint names."""
    return await RelationshipRepository(session).get_for_entity(entity_id)


# ============================================================
# Predicates
# ============================================================
@router.get("/predicates")
async def list_predicates(session: AsyncSession = Depends(get_session_dependency)):
    predicates = await PredicateRepository(session).list_all()
    return [p.to_dict() for p in predicates]


@router.post("/predicates", status_code=201)
async def create_predicate(body: PredicateBody, session: AsyncSession = Depends(get_session_dependency)):
    """Create a predicate, or update the description of the one with this name."""
    if not body.name:
        raise HTTPException(status_code=400, detail="Missing required field: name")
    
    predicate, _ = await PredicateRepository(session).upsert(body.changes())
    return predicate.to_dict()


@router.put("/predicates/{predicate_id}")
async def update_predicate(
    predicate_id: str,
    body: PredicateBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    if not body.name:
        raise HTTPException(status_code=400, detail="Missing required field: name")
    
    repo = PredicateRepository(session)
    predicate = await repo.get(predicate_id)
    if not predicate:
        raise HTTPException(status_code=404, detail="Predicate not found")
    
    try:
        await repo.update(predicate, body.changes())
    except IntegrityError:
        raise HTTPException(status_code=409, detail="A predicate with this name already exists.")
    return predicate.to_dict()


@router.delete("/predicates/{predicate_id}")
async def delete_predicate(predicate_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await PredicateRepository(session).delete(predicate_id):
        raise HTTPException(status_code=404, detail="Predicate not found")
    return {"message": "Predicate deleted successfully"}
