"""
Knowledge Models

Contacts, entity definitions, predicates, relationships between entities,
the brains that partition them, conversation segments and per-type
entity validation rules.
"""
from datetime import datetime
from typing import Optional, List, Dict, Any

from sqlalchemy import String, Integer, Boolean, DateTime, Text, Index, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_id


class Brain(Base, TimestampMixin):
    """
    Named memory namespace configuration for an agent.
    
    config_json maps memory modules to their isolated namespaces.
    """
    __tablename__ = "brains"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    config_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)


class Contact(Base):
    """Person known to the assistant. (name, email) is unique."""
    __tablename__ = "contacts"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    linkedin_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    last_contacted_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    details_json: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    
    __table_args__ = (
        UniqueConstraint('name', 'email', name='uq_contact_name_email'),
    )


class EntityDefinition(Base, TimestampMixin):
    """
    Structured memory entity (person, project, concept...).
    
    (name, type) is unique; aliases collects alternative names picked up
    through merges.
    """
    __tablename__ = "entity_definitions"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    aliases: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    brain_id: Mapped[Optional[str]] = mapped_column(
        String(50),
        ForeignKey("brains.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    
    __table_args__ = (
        UniqueConstraint('name', 'type', name='uq_entity_name_type'),
    )


class PredicateDefinition(Base, TimestampMixin):
    """Relationship verb ("works_at", "is_part_of")."""
    __tablename__ = "predicate_definitions"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_transitive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_symmetric: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class EntityRelationship(Base):
    """Directed edge source --predicate--> target."""
    __tablename__ = "entity_relationships"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    source_entity_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("entity_definitions.id", ondelete="CASCADE"),
        nullable=False
    )
    target_entity_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("entity_definitions.id", ondelete="CASCADE"),
        nullable=False
    )
    predicate_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("predicate_definitions.id", ondelete="CASCADE"),
        nullable=False
    )
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    brain_id: Mapped[Optional[str]] = mapped_column(
        String(50),
        ForeignKey("brains.id", ondelete="SET NULL"),
        nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    
    __table_args__ = (
        UniqueConstraint('source_entity_id', 'target_entity_id', 'predicate_id', name='uq_relationship_triple'),
        Index('idx_relationship_source', 'source_entity_id'),
        Index('idx_relationship_target', 'target_entity_id'),
    )


class EntityHistory(Base):
    """Field level audit trail for entity edits."""
    __tablename__ = "entity_history"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    entity_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("entity_definitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    old_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    new_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    changed_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    changed_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)


class MessageEntity(Base):
    """Link between a chat message and an entity mentioned in it."""
    __tablename__ = "message_entities"
    
    message_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("messages.id", ondelete="CASCADE"),
        primary_key=True
    )
    entity_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("entity_definitions.id", ondelete="CASCADE"),
        primary_key=True
    )


class Segment(Base):
    """Label for grouping conversations by topic or impact."""
    __tablename__ = "segments"
    
    id: Mapped[str] = mapped_column(String(50), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="Topic")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)


class EntityTypeValidationRule(Base, TimestampMixin):
    """Validation rules applied to entities of one type, keyed by the type name."""
    __tablename__ = "entity_type_validation_rules"
    
    entity_type: Mapped[str] = mapped_column(String(100), primary_key=True)
    rules_json: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False)
