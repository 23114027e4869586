"""
Shared Enums

Application-wide enums for the value sets the API accepts and stores.
"""
from enum import Enum


class MessageRole(str, Enum):
    """Author of a chat message."""
    USER = "user"
    MODEL = "model"


class FeatureStatus(str, Enum):
    """Development status of a tracked feature."""
    COMPLETED = "✅ Completed"
    NEEDS_IMPROVEMENT = "🟡 Needs Improvement"
    NEEDS_REFACTOR = "🔴 Needs Refactor"
    PLANNED = "⚪ Planned"


class FeatureTestStatus(str, Enum):
    """Outcome of the last manual or automated test run."""
    PASSED = "Passed"
    FAILED = "Failed"
    NOT_RUN = "Not Run"


class TaskStatus(str, Enum):
    """Task board columns."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class SegmentType(str, Enum):
    """Kind of conversation segment."""
    TOPIC = "Topic"
    IMPACT = "Impact"


class PromptType(str, Enum):
    """Stored prompt shape."""
    SINGLE = "single"
    CHAIN = "chain"


class LogLevel(str, Enum):
    """Levels accepted by the application log table."""
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DEBUG = "debug"


class PipelineType(str, Enum):
    """Backend cognitive pipelines that report runs."""
    CONTEXT_ASSEMBLY = "ContextAssembly"
    MEMORY_EXTRACTION = "MemoryExtraction"


class PipelineStatus(str, Enum):
    """Pipeline run lifecycle."""
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class DataSourceType(str, Enum):
    """Storage category of an external data source."""
    RELATIONAL_DB = "relational_db"
    VECTOR = "vector"
    BLOB = "blob"
    CACHE = "cache"
    DOCUMENT_DB = "document_db"
    FILE_SYSTEM = "file_system"
    GRAPH = "graph"
    KEY_VALUE = "key_value"
    OBJECT_STORAGE = "object_storage"


class DataSourceStatus(str, Enum):
    """Connection status shown on the data source cards."""
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"
    NEEDS_CONFIG = "needs_config"
    FULL = "full"
    UNSTABLE = "unstable"
    UNSUPPORTED = "unsupported"


class ConnectionKind(str, Enum):
    """Connection string dialects understood by the config sync."""
    POSTGRES = "postgres"
    MYSQL = "mysql"
    MONGODB = "mongodb"
    GRAPH = "graph"
    REDIS = "redis"


class BulkAction(str, Enum):
    """Bulk operations on entity definitions."""
    DELETE = "delete"
    CHANGE_TYPE = "change_type"
    ADD_TAGS = "add_tags"


# Dict versions for quick membership checks
FEATURE_STATUSES = {s.value: s.value for s in FeatureStatus}
DATA_SOURCE_TYPES = {t.value: t.value for t in DataSourceType}
DATA_SOURCE_STATUSES = {s.value: s.value for s in DataSourceStatus}

# Chart colors for feature status slices
FEATURE_STATUS_COLORS = {
    "Completed": "hsl(140, 70%, 50%)",
    "Needs Improvement": "hsl(45, 80%, 60%)",
    "Needs Refactor": "hsl(0, 70%, 60%)",
    "Planned": "hsl(210, 9%, 55%)",
}
DEFAULT_CHART_COLOR = "hsl(210, 9%, 45%)"
