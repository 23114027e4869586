"""
LLM Call History Model

Stores every completion request made by the assistant helpers
(titles, summaries) with its full input and output.
"""
from datetime import datetime
from typing import Optional, List, Dict

from sqlalchemy import String, Integer, Float, DateTime, Text, Boolean, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class LLMCallHistory(Base):
    """
    One LLM API call.
    
    messages is the request in OpenAI chat format, so a row can be
    replayed against any OpenAI-compatible endpoint.
    """
    __tablename__ = "llm_call_history"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    
    # Request
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    system_prompt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    messages: Mapped[List[Dict[str, str]]] = mapped_column(JSON, nullable=False)
    temperature: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    max_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=1024)
    
    # Response
    response: Mapped[str] = mapped_column(Text, nullable=False)
    input_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    output_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    latency_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    stop_reason: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    
    # Context
    task_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)  # 'title', 'summary', ...
    conversation_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_valid_json: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    
    __table_args__ = (
        Index('idx_llm_history_task_date', 'task_type', 'timestamp'),
    )
    
    def __repr__(self) -> str:
        return f"<LLMCallHistory(id={self.id}, task={self.task_type}, tokens={self.total_tokens})>"
