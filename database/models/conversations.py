"""
Conversation Models

Chat conversations, their messages, and the pipeline runs logged by the
backend cognitive services for each message.
"""
from datetime import datetime
from typing import Optional, Dict, Any

from sqlalchemy import String, Integer, Float, Boolean, DateTime, Text, Index, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id


class Conversation(Base):
    """
    Chat conversation with its per-conversation agent settings.
    
    Defaults for model, temperature and the memory toggles come from the
    settings table when a conversation is created.
    """
    __tablename__ = "conversations"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    agent_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="New Chat")
    summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    # Agent configuration
    system_prompt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    use_semantic_memory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    use_structured_memory: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    
    # Model configuration
    model: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    temperature: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    top_p: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    
    # Feature toggles
    enable_memory_extraction: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    enable_proactive_suggestions: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    enable_auto_summarization: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    
    ui_settings: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    last_updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, index=True)


class Message(Base):
    """Single chat turn. role is 'user' or 'model'."""
    __tablename__ = "messages"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    conversation_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    content_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    token_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    response_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # ms
    is_bookmarked: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=False)
    parent_message_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    
    __table_args__ = (
        Index('idx_messages_conversation', 'conversation_id', 'created_at'),
    )


class PipelineRun(Base):
    """
    Record of a backend pipeline execution for one message.
    
    Written by the context assembly and memory extraction services,
    read by the inspector.
    """
    __tablename__ = "pipeline_runs"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    message_id: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    pipeline_type: Mapped[str] = mapped_column(String(50), nullable=False)  # ContextAssembly / MemoryExtraction
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="running")
    final_output: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    final_llm_prompt: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    final_system_instruction: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    model_config_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class PipelineRunStep(Base):
    """One ordered step of a pipeline run."""
    __tablename__ = "pipeline_run_steps"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    run_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("pipeline_runs.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    step_order: Mapped[int] = mapped_column(Integer, nullable=False)
    step_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    input_payload: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    output_payload: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    model_used: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    prompt_used: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    config_used: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
