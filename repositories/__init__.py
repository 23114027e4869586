"""
Repositories - async data access built on SQLAlchemy.

Usage:
    from database import get_session
    from repositories import BrainRepository
    
    async with get_session() as session:
        brains = await BrainRepository(session).list_all()
"""
from .base import BaseRepository
from .contacts import ContactRepository
from .entities import EntityRepository
from .relationships import PredicateRepository, RelationshipRepository
from .brains import BrainRepository
from .conversations import ConversationRepository, MessageRepository, PipelineRunRepository
from .settings import SettingRepository, DEFAULT_SETTINGS
from .data_sources import DataSourceRepository, DataSourceValidationError
from .project import (
    FeatureRepository,
    FeatureTestRepository,
    TaskRepository,
    ProjectRepository,
    ProjectTaskRepository,
    SubsystemRepository,
    VersionHistoryRepository,
    DocumentationRepository,
    HedraGoalRepository,
)
from .segments import SegmentRepository, ValidationRuleRepository
from .library import PromptRepository, ToolRepository
from .api_endpoints import ApiEndpointRepository
from .logs import LogRepository
from .llm_history import LLMHistoryRepository

__all__ = [
    "BaseRepository",
    "ContactRepository",
    "EntityRepository",
    "PredicateRepository",
    "RelationshipRepository",
    "BrainRepository",
    "ConversationRepository",
    "MessageRepository",
    "PipelineRunRepository",
    "SettingRepository",
    "DEFAULT_SETTINGS",
    "DataSourceRepository",
    "DataSourceValidationError",
    "FeatureRepository",
    "FeatureTestRepository",
    "TaskRepository",
    "ProjectRepository",
    "ProjectTaskRepository",
    "SubsystemRepository",
    "VersionHistoryRepository",
    "DocumentationRepository",
    "HedraGoalRepository",
    "SegmentRepository",
    "ValidationRuleRepository",
    "PromptRepository",
    "ToolRepository",
    "ApiEndpointRepository",
    "LogRepository",
    "LLMHistoryRepository",
]
