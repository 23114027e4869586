"""
Connection Tester - simulated connection checks for data source configs.

No real client is opened: the tester validates the config for the service's
kind, waits a configurable round trip and reports success with a
configurable probability. Every step is narrated in a log list the UI shows
next to the connection form.
"""
import asyncio
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from loguru import logger

from config import settings
from constants import ConnectionKind, DataSourceStatus
from datasources.connection_strings import detect_kind


KNOWLEDGE_BASE_SERVICE = "Pinecone KnowledgeBase"
KNOWLEDGE_BASE_INDEX = "soul-knowledgebase"

URL_SERVICES = ("redis", "upstash", "supabase", "kv")

MESSAGE_CONNECTED = "Connection successful!"
MESSAGE_AUTH_FAILED = "Authentication failed. Please check your credentials."
MESSAGE_DISCONNECTED = "Disconnected successfully."
MESSAGE_INDEX_NOT_FOUND = "Index not found. You can create it below."

# Log entry statuses
LOG_PENDING = "pending"
LOG_SUCCESS = "success"
LOG_ERROR = "error"
LOG_INFO = "info"


@dataclass
class ConnectionTestResult:
    """Outcome of a connection test or disconnect."""
    success: bool
    status: str
    message: str
    logs: List[Dict[str, str]] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "status": self.status,
            "message": self.message,
            "logs": self.logs,
        }


class ConnectionTester:
    """
    Simulated connection tester.
    
    Usage:
        tester = ConnectionTester(delay=0)
        result = await tester.test("Vercel Postgres", {"host": "db.example.com"})
    """
    
    def __init__(
        self,
        delay: Optional[float] = None,
        success_rate: Optional[float] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.delay = settings.CONNECTION_TEST_DELAY if delay is None else delay
        self.success_rate = settings.CONNECTION_TEST_SUCCESS_RATE if success_rate is None else success_rate
        self.rng = rng or random.Random()
        self._sleep = sleep
    
    async def test(self, service_name: str, config: Dict[str, Any], action: str = "test") -> ConnectionTestResult:
        """
        Test (or disconnect) a service.
        
        Args:
            service_name: Data source name, e.g. "Pinecone KnowledgeBase"
            config: Connection config as stored on the data source
            action: "test" or "disconnect"
        """
        logs: List[Dict[str, str]] = []
        self._log(logs, f"Initiating {action}...", LOG_INFO)
        
        if self.delay:
            await self._sleep(self.delay)
        
        if action == "disconnect":
            self._log(logs, MESSAGE_DISCONNECTED, LOG_SUCCESS)
            return ConnectionTestResult(True, DataSourceStatus.DISCONNECTED.value, MESSAGE_DISCONNECTED, logs)
        
        self._log(logs, f"Validating configuration for {service_name}...", LOG_PENDING)
        error = self.validate(service_name, config)
        if error:
            self._log(logs, error, LOG_ERROR)
            logger.info(f"Connection test for {service_name} rejected: {error}")
            return ConnectionTestResult(False, DataSourceStatus.ERROR.value, error, logs)
        self._log(logs, "Configuration looks valid.", LOG_SUCCESS)
        
        if service_name == KNOWLEDGE_BASE_SERVICE and config.get("indexName") != KNOWLEDGE_BASE_INDEX:
            self._log(logs, MESSAGE_INDEX_NOT_FOUND, LOG_ERROR)
            return ConnectionTestResult(False, "index_not_found", MESSAGE_INDEX_NOT_FOUND, logs)
        
        self._log(logs, f"Connecting to {service_name}...", LOG_PENDING)
        if self.rng.random() < self.success_rate:
            self._log(logs, MESSAGE_CONNECTED, LOG_SUCCESS)
            return ConnectionTestResult(True, DataSourceStatus.CONNECTED.value, MESSAGE_CONNECTED, logs)
        
        self._log(logs, MESSAGE_AUTH_FAILED, LOG_ERROR)
        return ConnectionTestResult(False, DataSourceStatus.ERROR.value, MESSAGE_AUTH_FAILED, logs)
    
    def validate(self, service_name: str, config: Dict[str, Any]) -> Optional[str]:
        """Reason the config cannot be tested, or None when it can."""
        name = service_name.lower()
        
        if "pinecone" in name:
            if len(str(config.get("apiKey") or "")) <= 5:
                return "Invalid API key."
            if len(str(config.get("environment") or "")) <= 3:
                return "Invalid environment."
            return None
        
        if any(s in name for s in URL_SERVICES):
            if not config.get("url"):
                return "Connection URL is required."
            return None
        
        kind = detect_kind(service_name, config.get("provider", ""))
        if kind is None:
            return None
        
        host = str(config.get("host") or "")
        if not host and not config.get("connectionString"):
            return "Host or connection string is required."
        
        if kind == ConnectionKind.MYSQL:
            if config.get("useSsh"):
                if len(str(config.get("sshHost") or "")) <= 3 or not config.get("sshUser"):
                    return "SSH Tunnel failed: Invalid SSH host or user."
            if host and len(host) <= 3:
                return "Ping failed: Invalid database host."
            if host and not config.get("username"):
                return "Authentication failed: Access denied for user."
        return None
    
    @staticmethod
    def _log(logs: List[Dict[str, str]], message: str, status: str) -> None:
        logs.append({
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "message": message,
            "status": status,
        })
