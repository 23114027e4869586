"""
Base Repository Pattern with SQLAlchemy

Provides common async CRUD operations for all repositories.
"""
from datetime import datetime
from typing import TypeVar, Generic, Optional, List, Sequence, Type, Any, Dict

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from database.models.base import Base


# Generic type for model classes
ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """
    Base repository with common async database operations.
    
    Subclasses set the `model` class attribute to their SQLAlchemy model.
    Writes flush immediately so constraint violations surface inside the
    caller; the surrounding session decides when to commit.
    
    Example:
        class BrainRepository(BaseRepository[Brain]):
            model = Brain
    """
    
    model: Type[ModelT]
    
    def __init__(self, session: AsyncSession):
        self.session = session
    
    # ============================================
    # READ OPERATIONS
    # ============================================
    
    async def get(self, entity_id: str) -> Optional[ModelT]:
        """Get row by primary key, or None."""
        return await self.session.get(self.model, entity_id)
    
    async def get_all(
        self,
        limit: Optional[int] = None,
        offset: int = 0,
        order_by: str = "id",
        descending: bool = False
    ) -> Sequence[ModelT]:
        """
        Get all rows, sorted by one column.
        
        Args:
            limit: Maximum number of results (None for all)
            offset: Number of results to skip
            order_by: Column name to sort by
            descending: Sort in descending order
        """
        column = getattr(self.model, order_by)
        if descending:
            column = column.desc()
        
        stmt = select(self.model).order_by(column).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_by_ids(self, entity_ids: List[str]) -> Sequence[ModelT]:
        """Get multiple rows by primary key."""
        if not entity_ids:
            return []
        
        stmt = select(self.model).where(self.model.id.in_(entity_ids))
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def count(self, *criteria: Any) -> int:
        """Count rows, optionally filtered by SQLAlchemy criteria."""
        stmt = select(func.count()).select_from(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        result = await self.session.execute(stmt)
        return result.scalar_one()
    
    async def exists(self, entity_id: str) -> bool:
        """Check if a row with this primary key exists."""
        return await self.count(self.model.id == entity_id) > 0
    
    # ============================================
    # WRITE OPERATIONS
    # ============================================
    
    async def add(self, entity: ModelT) -> ModelT:
        """Insert a row and flush so generated values are populated."""
        self.session.add(entity)
        await self.session.flush()
        return entity
    
    async def update(self, entity: ModelT, values: Optional[Dict[str, Any]] = None) -> ModelT:
        """
        Apply column values to a persistent row and flush.
        
        Args:
            entity: Row loaded through this session
            values: Column name to new value; unknown keys are ignored
        """
        for key, value in (values or {}).items():
            if key in self.model.__table__.columns:
                setattr(entity, key, value)
        await self.session.flush()
        return entity
    
    async def delete(self, entity_id: str) -> bool:
        """
        Delete row by primary key.
        
        Returns:
            True if deleted, False if not found
        """
        entity = await self.get(entity_id)
        if entity:
            await self.session.delete(entity)
            await self.session.flush()
            return True
        return False
    
    async def delete_all(self, entity_ids: List[str]) -> int:
        """Delete rows by primary key, returning how many went."""
        if not entity_ids:
            return 0
        
        stmt = delete(self.model).where(self.model.id.in_(entity_ids))
        result = await self.session.execute(stmt)
        return result.rowcount
    
    # ============================================
    # UTILITY METHODS
    # ============================================
    
    @staticmethod
    def now() -> datetime:
        """Get current datetime."""
        return datetime.now()
