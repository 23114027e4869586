"""
Project Tracking Models

Developer dashboard data: features and their manual tests, tasks,
projects with their task lists, subsystems, release history,
documentation, goals, prompt and tool libraries, and the API endpoint
registry with its test log.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import String, Integer, DateTime, Text, Index, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_id


# ==================================================
# FEATURES
# ==================================================

class Feature(Base, TimestampMixin):
    """Tracked product feature with its UI and logic breakdown."""
    __tablename__ = "features"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    overview: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False, default="Uncategorized")
    ui_ux_breakdown_json: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    logic_flow: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    key_files_json: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class FeatureTest(Base, TimestampMixin):
    """Manual test case attached to a feature."""
    __tablename__ = "feature_tests"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    feature_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("features.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    manual_steps: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    expected_result: Mapped[str] = mapped_column(Text, nullable=False)
    last_run_status: Mapped[str] = mapped_column(String(20), nullable=False, default="Not Run")
    last_run_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class Task(Base, TimestampMixin):
    """Personal task board item."""
    __tablename__ = "tasks"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="todo")
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class Project(Base, TimestampMixin):
    """Project grouping its own task list."""
    __tablename__ = "projects"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active")
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class ProjectTask(Base, TimestampMixin):
    """Checklist item of a project."""
    __tablename__ = "project_tasks"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    project_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="todo")
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


# ==================================================
# ROADMAP
# ==================================================

class Subsystem(Base):
    """Roadmap subsystem card. id is a readable slug ("soulycore")."""
    __tablename__ = "subsystems"
    
    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    health_score: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    dependencies: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    resources: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    milestones: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    github_stats: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    tasks: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class VersionHistory(Base):
    """Released version with its changelog."""
    __tablename__ = "version_history"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    version: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    release_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    changes: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)


class Documentation(Base, TimestampMixin):
    """Editable markdown document addressed by doc_key."""
    __tablename__ = "documentations"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    doc_key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")


class HedraGoal(Base, TimestampMixin):
    """Section of the product goals document."""
    __tablename__ = "hedra_goals"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    section_key: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")


# ==================================================
# PROMPT & TOOL LIBRARY
# ==================================================

class Prompt(Base, TimestampMixin):
    """Saved prompt, either a single template or a chain of steps."""
    __tablename__ = "prompts"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    folder: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    tags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="single")
    chain_definition: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)


class Tool(Base, TimestampMixin):
    """Function declaration exposed to the agent."""
    __tablename__ = "tools"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    schema_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)


# ==================================================
# API ENDPOINT REGISTRY
# ==================================================

class ApiEndpoint(Base, TimestampMixin):
    """Registered route with the request used to smoke test it."""
    __tablename__ = "api_endpoints"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    path: Mapped[str] = mapped_column(String(255), nullable=False)
    group_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    default_params_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    default_body_json: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    expected_status_code: Mapped[int] = mapped_column(Integer, nullable=False, default=200)
    last_test_status: Mapped[str] = mapped_column(String(20), nullable=False, default="Not Run")
    last_test_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    
    __table_args__ = (
        UniqueConstraint('method', 'path', name='uq_endpoint_method_path'),
    )


class EndpointTestLog(Base):
    """Result of one endpoint smoke test."""
    __tablename__ = "endpoint_test_logs"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    endpoint_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("api_endpoints.id", ondelete="CASCADE"),
        nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    status_code: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    response_body: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    response_headers: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    
    __table_args__ = (
        Index('idx_endpoint_test_logs_endpoint', 'endpoint_id', 'created_at'),
    )
