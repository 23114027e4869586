"""Initial schema - All tables

Revision ID: 001_initial
Revises: 
Create Date: 2025-01-01 00:00:00.000000

This is the initial migration that creates all database tables.
Based on the SQLAlchemy models defined in database/models/.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('last_updated_at', sa.DateTime, nullable=True),
    ]


def upgrade() -> None:
    # ==================================================
    # KNOWLEDGE
    # ==================================================
    
    op.create_table(
        'brains',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('config_json', sa.JSON, nullable=False),
        *_timestamps(),
    )
    
    op.create_table(
        'contacts',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('company', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('linkedin_url', sa.Text, nullable=True),
        sa.Column('address', sa.Text, nullable=True),
        sa.Column('tags', sa.JSON, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('last_contacted_date', sa.DateTime, nullable=True),
        sa.Column('details_json', sa.JSON, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('name', 'email', name='uq_contact_name_email'),
    )
    
    op.create_table(
        'entity_definitions',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('aliases', sa.JSON, nullable=False),
        sa.Column('tags', sa.JSON, nullable=False),
        sa.Column('brain_id', sa.String(50), sa.ForeignKey('brains.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('name', 'type', name='uq_entity_name_type'),
    )
    op.create_index('ix_entity_definitions_brain_id', 'entity_definitions', ['brain_id'])
    
    op.create_table(
        'predicate_definitions',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('is_transitive', sa.Boolean, nullable=False),
        sa.Column('is_symmetric', sa.Boolean, nullable=False),
        *_timestamps(),
    )
    
    op.create_table(
        'entity_relationships',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('source_entity_id', sa.String(50), sa.ForeignKey('entity_definitions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('target_entity_id', sa.String(50), sa.ForeignKey('entity_definitions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('predicate_id', sa.String(50), sa.ForeignKey('predicate_definitions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('context', sa.Text, nullable=True),
        sa.Column('brain_id', sa.String(50), sa.ForeignKey('brains.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('source_entity_id', 'target_entity_id', 'predicate_id', name='uq_relationship_triple'),
    )
    op.create_index('idx_relationship_source', 'entity_relationships', ['source_entity_id'])
    op.create_index('idx_relationship_target', 'entity_relationships', ['target_entity_id'])
    
    op.create_table(
        'entity_history',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('entity_id', sa.String(50), sa.ForeignKey('entity_definitions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('field_name', sa.String(100), nullable=False),
        sa.Column('old_value', sa.Text, nullable=True),
        sa.Column('new_value', sa.Text, nullable=True),
        sa.Column('version', sa.Integer, nullable=False),
        sa.Column('changed_by', sa.String(100), nullable=True),
        sa.Column('changed_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_entity_history_entity_id', 'entity_history', ['entity_id'])
    
    # ==================================================
    # CONVERSATIONS
    # ==================================================
    
    op.create_table(
        'conversations',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('agent_id', sa.String(100), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('summary', sa.Text, nullable=True),
        sa.Column('system_prompt', sa.Text, nullable=True),
        sa.Column('use_semantic_memory', sa.Boolean, nullable=False),
        sa.Column('use_structured_memory', sa.Boolean, nullable=False),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('temperature', sa.Float, nullable=True),
        sa.Column('top_p', sa.Float, nullable=True),
        sa.Column('enable_memory_extraction', sa.Boolean, nullable=False),
        sa.Column('enable_proactive_suggestions', sa.Boolean, nullable=False),
        sa.Column('enable_auto_summarization', sa.Boolean, nullable=False),
        sa.Column('ui_settings', sa.JSON, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('last_updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('ix_conversations_last_updated_at', 'conversations', ['last_updated_at'])
    
    op.create_table(
        'messages',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('conversation_id', sa.String(50), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('content_summary', sa.Text, nullable=True),
        sa.Column('token_count', sa.Integer, nullable=True),
        sa.Column('response_time', sa.Integer, nullable=True),
        sa.Column('is_bookmarked', sa.Boolean, nullable=True),
        sa.Column('parent_message_id', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_messages_conversation', 'messages', ['conversation_id', 'created_at'])
    
    op.create_table(
        'message_entities',
        sa.Column('message_id', sa.String(50), sa.ForeignKey('messages.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('entity_id', sa.String(50), sa.ForeignKey('entity_definitions.id', ondelete='CASCADE'), primary_key=True),
    )
    
    op.create_table(
        'pipeline_runs',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('message_id', sa.String(50), nullable=False),
        sa.Column('pipeline_type', sa.String(50), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('final_output', sa.Text, nullable=True),
        sa.Column('final_llm_prompt', sa.Text, nullable=True),
        sa.Column('final_system_instruction', sa.Text, nullable=True),
        sa.Column('model_config_json', sa.JSON, nullable=True),
        sa.Column('error_message', sa.Text, nullable=True),
        sa.Column('duration_ms', sa.Integer, nullable=True),
        sa.Column('start_time', sa.DateTime, nullable=True),
        sa.Column('end_time', sa.DateTime, nullable=True),
    )
    op.create_index('ix_pipeline_runs_message_id', 'pipeline_runs', ['message_id'])
    
    op.create_table(
        'pipeline_run_steps',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('run_id', sa.String(50), sa.ForeignKey('pipeline_runs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('step_order', sa.Integer, nullable=False),
        sa.Column('step_name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('input_payload', sa.JSON, nullable=True),
        sa.Column('output_payload', sa.JSON, nullable=True),
        sa.Column('model_used', sa.String(100), nullable=True),
        sa.Column('prompt_used', sa.Text, nullable=True),
        sa.Column('config_used', sa.JSON, nullable=True),
        sa.Column('error_message', sa.Text, nullable=True),
        sa.Column('duration_ms', sa.Integer, nullable=True),
    )
    op.create_index('ix_pipeline_run_steps_run_id', 'pipeline_run_steps', ['run_id'])
    
    # ==================================================
    # PROJECT
    # ==================================================
    
    op.create_table(
        'features',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('overview', sa.Text, nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('category', sa.String(255), nullable=False),
        sa.Column('ui_ux_breakdown_json', sa.JSON, nullable=True),
        sa.Column('logic_flow', sa.Text, nullable=True),
        sa.Column('key_files_json', sa.JSON, nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        *_timestamps(),
    )
    
    op.create_table(
        'feature_tests',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('feature_id', sa.String(50), sa.ForeignKey('features.id', ondelete='CASCADE'), nullable=False),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('manual_steps', sa.Text, nullable=True),
        sa.Column('expected_result', sa.Text, nullable=False),
        sa.Column('last_run_status', sa.String(20), nullable=False),
        sa.Column('last_run_at', sa.DateTime, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_feature_tests_feature_id', 'feature_tests', ['feature_id'])
    
    op.create_table(
        'tasks',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('due_date', sa.DateTime, nullable=True),
        sa.Column('completed_at', sa.DateTime, nullable=True),
        *_timestamps(),
    )
    
    op.create_table(
        'subsystems',
        sa.Column('id', sa.String(100), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('progress', sa.Integer, nullable=False),
        sa.Column('health_score', sa.String(10), nullable=True),
        sa.Column('dependencies', sa.JSON, nullable=False),
        sa.Column('resources', sa.JSON, nullable=False),
        sa.Column('milestones', sa.JSON, nullable=False),
        sa.Column('github_stats', sa.JSON, nullable=True),
        sa.Column('tasks', sa.JSON, nullable=False),
        sa.Column('order_index', sa.Integer, nullable=False),
    )
    
    op.create_table(
        'version_history',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('version', sa.String(50), nullable=False, unique=True),
        sa.Column('release_date', sa.DateTime, nullable=False),
        sa.Column('changes', sa.Text, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    
    op.create_table(
        'documentations',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('doc_key', sa.String(100), nullable=False, unique=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        *_timestamps(),
    )
    
    op.create_table(
        'hedra_goals',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('section_key', sa.String(100), nullable=False, unique=True),
        sa.Column('content', sa.Text, nullable=False),
        *_timestamps(),
    )
    
    # ==================================================
    # PROMPT & TOOL LIBRARY
    # ==================================================
    
    op.create_table(
        'prompts',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('content', sa.Text, nullable=False),
        sa.Column('folder', sa.String(255), nullable=True),
        sa.Column('tags', sa.JSON, nullable=True),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('chain_definition', sa.JSON, nullable=True),
        *_timestamps(),
    )
    
    op.create_table(
        'tools',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('description', sa.Text, nullable=False),
        sa.Column('schema_json', sa.JSON, nullable=False),
        *_timestamps(),
    )
    
    op.create_table(
        'api_endpoints',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('method', sa.String(10), nullable=False),
        sa.Column('path', sa.String(255), nullable=False),
        sa.Column('group_name', sa.String(100), nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('default_params_json', sa.JSON, nullable=True),
        sa.Column('default_body_json', sa.JSON, nullable=True),
        sa.Column('expected_status_code', sa.Integer, nullable=False),
        sa.Column('last_test_status', sa.String(20), nullable=False),
        sa.Column('last_test_at', sa.DateTime, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('method', 'path', name='uq_endpoint_method_path'),
    )
    
    op.create_table(
        'endpoint_test_logs',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('endpoint_id', sa.String(50), sa.ForeignKey('api_endpoints.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('status_code', sa.Integer, nullable=True),
        sa.Column('response_body', sa.JSON, nullable=True),
        sa.Column('response_headers', sa.JSON, nullable=True),
        sa.Column('duration_ms', sa.Integer, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_endpoint_test_logs_endpoint', 'endpoint_test_logs', ['endpoint_id', 'created_at'])
    
    # ==================================================
    # SYSTEM
    # ==================================================
    
    op.create_table(
        'settings',
        sa.Column('key', sa.String(255), primary_key=True),
        sa.Column('value', sa.JSON, nullable=True),
        sa.Column('last_updated_at', sa.DateTime, nullable=True),
    )
    
    op.create_table(
        'logs',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('timestamp', sa.DateTime, nullable=True),
        sa.Column('message', sa.Text, nullable=False),
        sa.Column('payload', sa.JSON, nullable=True),
        sa.Column('level', sa.String(10), nullable=False),
    )
    op.create_index('ix_logs_timestamp', 'logs', ['timestamp'])
    
    op.create_table(
        'data_sources',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False, unique=True),
        sa.Column('provider', sa.String(100), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('config_json', sa.JSON, nullable=False),
        sa.Column('stats_json', sa.JSON, nullable=False),
        sa.Column('last_successful_connection', sa.DateTime, nullable=True),
        sa.Column('last_error', sa.Text, nullable=True),
        sa.Column('is_enabled', sa.Boolean, nullable=False),
        *_timestamps(),
    )
    
    # ==================================================
    # LLM CALL HISTORY
    # ==================================================
    
    op.create_table(
        'llm_call_history',
        sa.Column('id', sa.String(50), primary_key=True),
        sa.Column('timestamp', sa.DateTime, nullable=False),
        sa.Column('model', sa.String(100), nullable=False),
        sa.Column('system_prompt', sa.Text, nullable=True),
        sa.Column('user_prompt', sa.Text, nullable=False),
        sa.Column('messages', sa.JSON, nullable=False),
        sa.Column('temperature', sa.Float, nullable=False),
        sa.Column('max_tokens', sa.Integer, nullable=False),
        sa.Column('response', sa.Text, nullable=False),
        sa.Column('input_tokens', sa.Integer, nullable=False),
        sa.Column('output_tokens', sa.Integer, nullable=False),
        sa.Column('total_tokens', sa.Integer, nullable=False),
        sa.Column('latency_ms', sa.Integer, nullable=True),
        sa.Column('stop_reason', sa.String(50), nullable=True),
        sa.Column('task_type', sa.String(50), nullable=True),
        sa.Column('conversation_id', sa.String(50), nullable=True),
        sa.Column('is_valid_json', sa.Boolean, nullable=True),
    )
    op.create_index('idx_llm_history_task_date', 'llm_call_history', ['task_type', 'timestamp'])


def downgrade() -> None:
    for table in (
        'llm_call_history',
        'data_sources',
        'logs',
        'settings',
        'endpoint_test_logs',
        'api_endpoints',
        'tools',
        'prompts',
        'hedra_goals',
        'documentations',
        'version_history',
        'subsystems',
        'tasks',
        'feature_tests',
        'features',
        'pipeline_run_steps',
        'pipeline_runs',
        'message_entities',
        'messages',
        'conversations',
        'entity_history',
        'entity_relationships',
        'predicate_definitions',
        'entity_definitions',
        'contacts',
        'brains',
    ):
        op.drop_table(table)
