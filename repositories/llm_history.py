"""
LLM History Repository

Persists LLM call records collected by the clients.
"""
from typing import List, Sequence, Optional

from sqlalchemy import select

from database.models import LLMCallHistory
from llm.base import LLMCallRecord
from .base import BaseRepository


class LLMHistoryRepository(BaseRepository[LLMCallHistory]):
    """Repository for LLM call history."""
    
    model = LLMCallHistory
    
    async def save_records(self, records: List[LLMCallRecord]) -> int:
        """Insert call records, returning how many were written."""
        for record in records:
            self.session.add(LLMCallHistory(
                id=record.id,
                timestamp=record.timestamp,
                model=record.model,
                system_prompt=record.system_prompt,
                user_prompt=record.user_prompt,
                messages=record.messages,
                response=record.response,
                input_tokens=record.input_tokens,
                output_tokens=record.output_tokens,
                total_tokens=record.total_tokens,
                temperature=record.temperature,
                max_tokens=record.max_tokens,
                latency_ms=record.latency_ms,
                stop_reason=record.stop_reason,
                task_type=record.task_type,
                conversation_id=record.conversation_id,
                is_valid_json=record.is_valid_json,
            ))
        await self.session.flush()
        return len(records)
    
    async def get_recent(self, task_type: Optional[str] = None, limit: int = 50) -> Sequence[LLMCallHistory]:
        stmt = select(LLMCallHistory).order_by(LLMCallHistory.timestamp.desc()).limit(limit)
        if task_type:
            stmt = stmt.where(LLMCallHistory.task_type == task_type)
        result = await self.session.execute(stmt)
        return result.scalars().all()
