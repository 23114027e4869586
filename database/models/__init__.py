"""
SQLAlchemy ORM Models

All table definitions for the SoulyCore backend.
"""
from .base import Base, TimestampMixin, new_id
from .knowledge import (
    Brain,
    Contact,
    EntityDefinition,
    PredicateDefinition,
    EntityRelationship,
    EntityHistory,
    MessageEntity,
    Segment,
    EntityTypeValidationRule,
)
from .conversations import Conversation, Message, PipelineRun, PipelineRunStep
from .project import (
    Feature,
    FeatureTest,
    Task,
    Project,
    ProjectTask,
    Subsystem,
    VersionHistory,
    Documentation,
    HedraGoal,
    Prompt,
    Tool,
    ApiEndpoint,
    EndpointTestLog,
)
from .system import Setting, Log, DataSource
from .llm_history import LLMCallHistory

__all__ = [
    "Base",
    "TimestampMixin",
    "new_id",
    # Knowledge
    "Brain",
    "Contact",
    "EntityDefinition",
    "PredicateDefinition",
    "EntityRelationship",
    "EntityHistory",
    "MessageEntity",
    "Segment",
    "EntityTypeValidationRule",
    # Conversations
    "Conversation",
    "Message",
    "PipelineRun",
    "PipelineRunStep",
    # Project
    "Feature",
    "FeatureTest",
    "Task",
    "Project",
    "ProjectTask",
    "Subsystem",
    "VersionHistory",
    "Documentation",
    "HedraGoal",
    "Prompt",
    "Tool",
    "ApiEndpoint",
    "EndpointTestLog",
    # System
    "Setting",
    "Log",
    "DataSource",
    "LLMCallHistory",
]
