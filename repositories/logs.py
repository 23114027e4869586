"""
Application Log Repository
"""
from typing import Optional, Sequence, Any

from sqlalchemy import select, delete

from constants import LogLevel
from database.models import Log
from .base import BaseRepository


class LogRepository(BaseRepository[Log]):
    """Repository for the dev console log."""
    
    model = Log
    
    async def list_recent(self, limit: Optional[int] = None) -> Sequence[Log]:
        stmt = select(Log).order_by(Log.timestamp.desc())
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def write(self, message: str, level: str = LogLevel.INFO.value, payload: Any = None) -> Log:
        return await self.add(Log(message=message, level=level, payload=payload))
    
    async def clear(self) -> int:
        result = await self.session.execute(delete(Log))
        return result.rowcount
