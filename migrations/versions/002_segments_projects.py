"""Add segments, validation rules and projects

Revision ID: 002_segments_projects
Revises: 001_initial
Create Date: 2026-10-18 00:00:00.000000

This migration adds:
1. segments and entity_type_validation_rules for the knowledge graph
2. projects and project_tasks for the developer dashboard
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '002_segments_projects'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ==================================================
    # KNOWLEDGE
    # ==================================================
    op.create_table(
        'segments',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    
    op.create_table(
        'entity_type_validation_rules',
        sa.Column('entity_type', sa.String(100), primary_key=True),
        sa.Column('rules_json', sa.JSON, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('last_updated_at', sa.DateTime, nullable=True),
    )
    
    # ==================================================
    # PROJECTS
    # ==================================================
    op.create_table(
        'projects',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('due_date', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('last_updated_at', sa.DateTime, nullable=True),
    )
    
    op.create_table(
        'project_tasks',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('project_id', sa.String(50), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('order_index', sa.Integer, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('last_updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_project_tasks_project_id', 'project_tasks', ['project_id'])


def downgrade() -> None:
    op.drop_index('ix_project_tasks_project_id', table_name='project_tasks')
    op.drop_table('project_tasks')
    op.drop_table('projects')
    op.drop_table('entity_type_validation_rules')
    op.drop_table('segments')
