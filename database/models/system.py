"""
System Models

Key/value settings, the application log, and external data source
configurations.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import String, Boolean, DateTime, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_id


class Setting(Base):
    """Global setting. value is arbitrary JSON."""
    __tablename__ = "settings"
    
    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    last_updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.now,
        onupdate=datetime.now
    )


class Log(Base):
    """Application log entry shown in the dev console."""
    __tablename__ = "logs"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    payload: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    level: Mapped[str] = mapped_column(String(10), nullable=False, default="info")


class DataSource(Base, TimestampMixin):
    """
    External storage backend (database, vector index, blob store...).
    
    config_json holds the connection fields edited in the settings modals,
    including the synchronized connectionString where the provider has one.
    stats_json is a list of {label, value} pairs shown on the card.
    """
    __tablename__ = "data_sources"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    provider: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="needs_config")
    config_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    stats_json: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    last_successful_connection: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    last_error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
