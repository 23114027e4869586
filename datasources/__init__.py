"""
Data source helpers: connection string sync and simulated connection tests.
"""

from .connection_strings import (
    build_connection_string,
    parse_connection_string,
    sync_config,
    sync_stored_config,
    detect_kind,
    SOURCE_FIELDS,
    SOURCE_CONNECTION_STRING,
)
from .tester import ConnectionTester, ConnectionTestResult

__all__ = [
    "build_connection_string",
    "parse_connection_string",
    "sync_config",
    "sync_stored_config",
    "detect_kind",
    "SOURCE_FIELDS",
    "SOURCE_CONNECTION_STRING",
    "ConnectionTester",
    "ConnectionTestResult",
]
