"""
Request Schemas

Request bodies accept snake_case field names and the camelCase spelling the
web client sends (configJson, sourceEntityId...). Required-field checks are
done in the routes so the error messages match what the client displays.
"""
from datetime import datetime
from typing import ClassVar, Optional, List, Dict, Any, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Base for request bodies: camelCase aliases, unknown keys ignored."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")
    
    # Columns that may be omitted but never set to null
    NOT_NULL: ClassVar[Tuple[str, ...]] = ()
    
    def changes(self) -> Dict[str, Any]:
        """
        Fields the client actually sent, keyed by column name.
        
        Raises:
            ValueError: A NOT_NULL field was sent as null
        """
        values = self.model_dump(exclude_unset=True)
        nulls = [to_camel(f) for f in self.NOT_NULL if f in values and values[f] is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return values


# ============================================================
# Knowledge
# ============================================================
class ContactBody(RequestModel):
    NOT_NULL = ("name",)
    
    name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None
    address: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    last_contacted_date: Optional[datetime] = None
    details_json: Optional[Dict[str, Any]] = None


class EntityBody(RequestModel):
    NOT_NULL = ("aliases", "tags")
    
    name: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    aliases: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    brain_id: Optional[str] = None


class MergeEntitiesBody(RequestModel):
    target_id: Optional[str] = None
    source_id: Optional[str] = None


class NewEntitySpec(RequestModel):
    id: Optional[Union[str, int]] = None
    name: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None


class RelationshipMigration(RequestModel):
    relationship_id: Optional[str] = None
    new_owner_entity_id: Optional[Union[str, int]] = None


class SplitEntityBody(RequestModel):
    source_entity_id: Optional[str] = None
    new_entities: Optional[List[NewEntitySpec]] = None
    relationship_migrations: Optional[List[RelationshipMigration]] = None


class BulkActionBody(RequestModel):
    action: Optional[str] = None
    ids: Optional[List[str]] = None
    payload: Optional[Dict[str, Any]] = None


class PredicateBody(RequestModel):
    NOT_NULL = ("name", "is_transitive", "is_symmetric")
    
    name: Optional[str] = None
    description: Optional[str] = None
    is_transitive: Optional[bool] = None
    is_symmetric: Optional[bool] = None


class RelationshipBody(RequestModel):
    source_entity_id: Optional[str] = None
    target_entity_id: Optional[str] = None
    predicate_id: Optional[str] = None
    predicate_name: Optional[str] = None
    predicate: Optional[str] = None
    context: Optional[str] = None
    brain_id: Optional[str] = None


class RelationshipFromNamesBody(RequestModel):
    source: Optional[str] = None
    predicate: Optional[str] = None
    target: Optional[str] = None
    context: Optional[str] = None


class BrainBody(RequestModel):
    name: Optional[str] = None
    config_json: Optional[Union[Dict[str, Any], str]] = None


class SegmentBody(RequestModel):
    name: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None


class ValidationRuleBody(RequestModel):
    entity_type: Optional[str] = None
    rules_json: Optional[Dict[str, Any]] = None


# ============================================================
# Conversations
# ============================================================
class ConversationCreateBody(RequestModel):
    title: Optional[str] = None
    agent_id: Optional[str] = None


class ConversationUpdateBody(RequestModel):
    NOT_NULL = (
        "title",
        "use_semantic_memory",
        "use_structured_memory",
        "enable_memory_extraction",
        "enable_proactive_suggestions",
        "enable_auto_summarization",
    )
    
    title: Optional[str] = None
    summary: Optional[str] = None
    system_prompt: Optional[str] = None
    use_semantic_memory: Optional[bool] = None
    use_structured_memory: Optional[bool] = None
    model: Optional[str] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    enable_memory_extraction: Optional[bool] = None
    enable_proactive_suggestions: Optional[bool] = None
    enable_auto_summarization: Optional[bool] = None
    ui_settings: Optional[Dict[str, Any]] = None


class MessageFields(RequestModel):
    role: Optional[str] = None
    content: Optional[str] = None
    token_count: Optional[int] = None
    response_time: Optional[int] = None
    is_bookmarked: Optional[bool] = None
    parent_message_id: Optional[str] = None


class MessageCreateBody(RequestModel):
    message: Optional[MessageFields] = None


class MessageUpdateBody(RequestModel):
    content: Optional[str] = None


class TextBody(RequestModel):
    text: Optional[str] = None


class RegeneratePromptBody(RequestModel):
    prompt_to_rewrite: Optional[str] = None
    history: Optional[List[Dict[str, Any]]] = None


# ============================================================
# Data sources
# ============================================================
class DataSourceBody(RequestModel):
    name: Optional[str] = None
    provider: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    config_json: Optional[Dict[str, Any]] = None
    stats_json: Optional[List[Dict[str, Any]]] = None
    is_enabled: Optional[bool] = None
    last_error: Optional[str] = None


class ConnectionStringBody(RequestModel):
    kind: Optional[str] = None
    config: Optional[Dict[str, Any]] = None
    source: Optional[str] = "fields"


class ConnectionTestBody(RequestModel):
    config: Optional[Dict[str, Any]] = None
    service_name: Optional[str] = None
    action: Optional[str] = "test"


# ============================================================
# Project tracking
# ============================================================
class FeatureBody(RequestModel):
    name: Optional[str] = None
    overview: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    ui_ux_breakdown_json: Optional[Any] = None
    logic_flow: Optional[str] = None
    key_files_json: Optional[Any] = None
    notes: Optional[str] = None


class FeatureTestBody(RequestModel):
    NOT_NULL = ("description", "expected_result")
    
    feature_id: Optional[str] = None
    description: Optional[str] = None
    manual_steps: Optional[str] = None
    expected_result: Optional[str] = None
    last_run_status: Optional[str] = None


class TaskBody(RequestModel):
    NOT_NULL = ("title", "status")
    
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[datetime] = None


class DocumentationBody(RequestModel):
    NOT_NULL = ("title",)
    
    title: Optional[str] = None
    content: Optional[str] = None


class ProjectBody(RequestModel):
    NOT_NULL = ("name", "status")
    
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    due_date: Optional[datetime] = None


class ProjectTaskBody(RequestModel):
    NOT_NULL = ("title", "status", "order_index")
    
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    order_index: Optional[int] = None


class QuickLinksBody(RequestModel):
    links: Optional[Any] = None


# ============================================================
# Library
# ============================================================
class PromptBody(RequestModel):
    name: Optional[str] = None
    content: Optional[str] = None
    folder: Optional[str] = None
    tags: Optional[List[str]] = None
    type: Optional[str] = None
    chain_definition: Optional[Any] = None


class ToolBody(RequestModel):
    name: Optional[str] = None
    description: Optional[str] = None
    # "schema_json" would shadow a BaseModel method
    tool_schema: Optional[Union[Dict[str, Any], str]] = Field(
        default=None, validation_alias=AliasChoices("schema_json", "schemaJson")
    )


class ApiEndpointBody(RequestModel):
    method: Optional[str] = None
    path: Optional[str] = None
    group_name: Optional[str] = None
    description: Optional[str] = None
    default_params_json: Optional[Dict[str, Any]] = None
    default_body_json: Optional[Any] = None
    expected_status_code: Optional[int] = None


class LogBody(RequestModel):
    message: Optional[str] = None
    level: Optional[str] = None
    payload: Optional[Any] = None
