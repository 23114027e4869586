"""
Constants package for the SoulyCore backend.
"""

from .enums import (
    MessageRole,
    FeatureStatus,
    FeatureTestStatus,
    TaskStatus,
    SegmentType,
    PromptType,
    LogLevel,
    PipelineType,
    PipelineStatus,
    DataSourceType,
    DataSourceStatus,
    ConnectionKind,
    BulkAction,
    FEATURE_STATUSES,
    DATA_SOURCE_TYPES,
    DATA_SOURCE_STATUSES,
    FEATURE_STATUS_COLORS,
    DEFAULT_CHART_COLOR,
)

__all__ = [
    "MessageRole",
    "FeatureStatus",
    "FeatureTestStatus",
    "TaskStatus",
    "SegmentType",
    "PromptType",
    "LogLevel",
    "PipelineType",
    "PipelineStatus",
    "DataSourceType",
    "DataSourceStatus",
    "ConnectionKind",
    "BulkAction",
    "FEATURE_STATUSES",
    "DATA_SOURCE_TYPES",
    "DATA_SOURCE_STATUSES",
    "FEATURE_STATUS_COLORS",
    "DEFAULT_CHART_COLOR",
]
