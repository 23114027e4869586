"""
Conversation Repository

Handles conversations, their messages and the pipeline runs recorded
against messages.
"""
from typing import Optional, Sequence, List, Dict, Any

from sqlalchemy import select, delete, func

from database.models import Conversation, Message, PipelineRun, PipelineRunStep
from .base import BaseRepository


DEFAULT_TITLE = "New Chat"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.95
DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."


class ConversationRepository(BaseRepository[Conversation]):
    """Repository for conversations."""
    
    model = Conversation
    
    async def list_recent(self) -> Sequence[Conversation]:
        """Most recently active first."""
        return await self.get_all(order_by="last_updated_at", descending=True)
    
    async def create_with_defaults(
        self,
        title: Optional[str],
        agent_id: Optional[str],
        defaults: Dict[str, Any],
    ) -> Conversation:
        """
        Create a conversation seeded from the stored default settings.
        
        Args:
            title: Conversation title, "New Chat" when empty
            agent_id: Owning agent, if any
            defaults: Settings dict; reads defaultModelConfig,
                defaultAgentConfig and featureFlags
        """
        model_config = defaults.get("defaultModelConfig") or {}
        agent_config = defaults.get("defaultAgentConfig") or {}
        flags = defaults.get("featureFlags") or {}
        
        conversation = Conversation(
            title=title or DEFAULT_TITLE,
            agent_id=agent_id,
            model=model_config.get("model", DEFAULT_MODEL),
            temperature=model_config.get("temperature", DEFAULT_TEMPERATURE),
            top_p=model_config.get("topP", DEFAULT_TOP_P),
            system_prompt=agent_config.get("systemPrompt", DEFAULT_SYSTEM_PROMPT),
            use_semantic_memory=agent_config.get("useSemanticMemory", True),
            use_structured_memory=agent_config.get("useStructuredMemory", True),
            enable_memory_extraction=flags.get("enableMemoryExtraction", True),
            enable_proactive_suggestions=flags.get("enableProactiveSuggestions", True),
            enable_auto_summarization=flags.get("enableAutoSummarization", True),
        )
        return await self.add(conversation)
    
    async def touch(self, conversation: Conversation) -> None:
        """Mark the conversation as just active."""
        conversation.last_updated_at = self.now()
        await self.session.flush()
    
    async def search_titles(self, term: str, limit: int = 5) -> Sequence[Conversation]:
        """Case-insensitive title match."""
        stmt = (
            select(Conversation)
            .where(func.lower(Conversation.title).like(f"%{term.lower()}%"))
            .order_by(Conversation.last_updated_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def average_message_count(self) -> float:
        """Mean number of messages per conversation (empty ones count as 0)."""
        per_conversation = (
            select(func.count(Message.id).label("msg_count"))
            .select_from(Conversation)
            .outerjoin(Message, Message.conversation_id == Conversation.id)
            .group_by(Conversation.id)
            .subquery()
        )
        result = await self.session.execute(select(func.avg(per_conversation.c.msg_count)))
        return float(result.scalar_one() or 0)


class MessageRepository(BaseRepository[Message]):
    """Repository for chat messages."""
    
    model = Message
    
    async def get_for_conversation(self, conversation_id: str) -> Sequence[Message]:
        """Messages in chronological order."""
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def clear_conversation(self, conversation_id: str) -> int:
        """Delete every message of a conversation, returning how many."""
        stmt = delete(Message).where(Message.conversation_id == conversation_id)
        result = await self.session.execute(stmt)
        return result.rowcount
    
    async def get_bookmarked(self) -> Sequence[Message]:
        """Bookmarked messages, newest first."""
        stmt = (
            select(Message)
            .where(Message.is_bookmarked.is_(True))
            .order_by(Message.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def search_in_conversation(self, conversation_id: str, term: str, limit: int = 50) -> Sequence[Message]:
        """Case-insensitive content match inside one conversation, newest first."""
        stmt = (
            select(Message)
            .where(
                Message.conversation_id == conversation_id,
                func.lower(Message.content).like(f"%{term.lower()}%"),
            )
            .order_by(Message.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def toggle_bookmark(self, message: Message) -> Message:
        """Flip the bookmark flag; a missing flag counts as not bookmarked."""
        message.is_bookmarked = not bool(message.is_bookmarked)
        await self.session.flush()
        return message


class PipelineRunRepository(BaseRepository[PipelineRun]):
    """Repository for pipeline runs and their steps."""
    
    model = PipelineRun
    
    async def get_for_message(self, message_id: str) -> Sequence[PipelineRun]:
        stmt = (
            select(PipelineRun)
            .where(PipelineRun.message_id == message_id)
            .order_by(PipelineRun.start_time.asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_steps(self, run_id: str) -> Sequence[PipelineRunStep]:
        stmt = (
            select(PipelineRunStep)
            .where(PipelineRunStep.run_id == run_id)
            .order_by(PipelineRunStep.step_order.asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
    
    async def get_stats(self) -> List[Dict[str, Any]]:
        """Run count and mean duration per (pipeline_type, status)."""
        stmt = (
            select(
                PipelineRun.pipeline_type,
                PipelineRun.status,
                func.count().label("count"),
                func.avg(PipelineRun.duration_ms).label("avg_duration"),
            )
            .group_by(PipelineRun.pipeline_type, PipelineRun.status)
        )
        rows = (await self.session.execute(stmt)).all()
        return [
            {
                "pipeline_type": row.pipeline_type,
                "status": row.status,
                "count": row.count,
                "avg_duration": float(row.avg_duration or 0),
            }
            for row in rows
        ]
