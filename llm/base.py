"""
LLM Client Base - Abstract base class for LLM providers.
"""
import json
import uuid
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List, Dict, Any
from contextvars import ContextVar

from loguru import logger


# Context variables for tagging recorded calls
_current_task_type: ContextVar[Optional[str]] = ContextVar('task_type', default=None)
_current_conversation_id: ContextVar[Optional[str]] = ContextVar('conversation_id', default=None)
_current_call_group: ContextVar[Optional[str]] = ContextVar('call_group', default=None)


def set_llm_context(
    task_type: Optional[str] = None,
    conversation_id: Optional[str] = None,
    call_group: Optional[str] = None,
):
    """
    Set context for LLM call recording.
    
    call_group tags the records of one unit of work so that only they are
    drained afterwards (see LLMClient.drain_logs).
    """
    if task_type is not None:
        _current_task_type.set(task_type)
    if conversation_id is not None:
        _current_conversation_id.set(conversation_id)
    if call_group is not None:
        _current_call_group.set(call_group)


def get_llm_context() -> Dict[str, Optional[str]]:
    """Get current LLM recording context."""
    return {
        "task_type": _current_task_type.get(),
        "conversation_id": _current_conversation_id.get(),
        "call_group": _current_call_group.get(),
    }


class LLMError(Exception):
    """Provider call failed."""


class LLMRateLimitError(LLMError):
    """Provider answered 429; the call may succeed if retried later."""


@dataclass
class LLMResponse:
    """Standard response from LLM."""
    content: str
    model: str
    usage: Dict[str, int]  # input_tokens, output_tokens
    stop_reason: Optional[str] = None
    latency_ms: Optional[int] = None
    
    @property
    def total_tokens(self) -> int:
        return self.usage.get("input_tokens", 0) + self.usage.get("output_tokens", 0)


@dataclass
class Message:
    """Chat message."""
    role: str  # "user", "assistant", "system"
    content: str


@dataclass
class LLMCallRecord:
    """Record of an LLM call, persisted to llm_call_history."""
    id: str
    timestamp: datetime
    model: str
    system_prompt: Optional[str]
    user_prompt: str
    messages: List[Dict[str, str]]
    response: str
    input_tokens: int
    output_tokens: int
    total_tokens: int
    temperature: float
    max_tokens: int
    latency_ms: Optional[int]
    stop_reason: Optional[str]
    task_type: Optional[str]
    conversation_id: Optional[str]
    is_valid_json: Optional[bool] = None
    call_group: Optional[str] = None


class LLMClient(ABC):
    """
    Abstract base class for LLM clients.
    
    All LLM providers implement this interface. Successful calls are kept
    as LLMCallRecord objects until the caller drains them into the
    database (see repositories.LLMHistoryRepository).
    """
    
    def __init__(self, api_key: str, model: str, enable_logging: bool = True):
        self.api_key = api_key
        self.model = model
        self.enable_logging = enable_logging
        self._pending_logs: List[LLMCallRecord] = []
        # Calls run in worker threads
        self._lock = threading.Lock()
    
    @abstractmethod
    def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """
        Generate a response from a single prompt.
        
        Args:
            prompt: The user prompt
            system: Optional system prompt
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            
        Raises:
            LLMRateLimitError: The provider rate limited the request
            LLMError: Any other provider failure
        """
        pass
    
    @abstractmethod
    def chat(
        self,
        messages: List[Message],
        system: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate a response from a conversation."""
        pass
    
    def _build_messages_for_log(
        self,
        messages: List[Message],
        system: Optional[str] = None
    ) -> List[Dict[str, str]]:
        """Messages list in OpenAI format."""
        result = []
        if system:
            result.append({"role": "system", "content": system})
        for msg in messages:
            result.append({"role": msg.role, "content": msg.content})
        return result
    
    @staticmethod
    def _check_valid_json(content: str) -> bool:
        try:
            json.loads(content)
            return True
        except (json.JSONDecodeError, TypeError):
            return False
    
    def log_call(
        self,
        messages: List[Message],
        system: Optional[str],
        response: LLMResponse,
        max_tokens: int,
        temperature: float,
    ) -> None:
        """Keep a record of a finished call until it is drained."""
        if not self.enable_logging:
            return
        
        context = get_llm_context()
        user_prompt = next((m.content for m in reversed(messages) if m.role == "user"), "")
        record = LLMCallRecord(
            id=f"llm_{datetime.now().strftime('%Y%m%d%H%M%S')}_{uuid.uuid4().hex[:8]}",
            timestamp=datetime.now(),
            model=response.model,
            system_prompt=system,
            user_prompt=user_prompt,
            messages=self._build_messages_for_log(messages, system),
            response=response.content,
            input_tokens=response.usage.get("input_tokens", 0),
            output_tokens=response.usage.get("output_tokens", 0),
            total_tokens=response.total_tokens,
            temperature=temperature,
            max_tokens=max_tokens,
            latency_ms=response.latency_ms,
            stop_reason=response.stop_reason,
            task_type=context.get("task_type"),
            conversation_id=context.get("conversation_id"),
            is_valid_json=self._check_valid_json(response.content),
            call_group=context.get("call_group"),
        )
        with self._lock:
            self._pending_logs.append(record)
        logger.debug(f"LLM call recorded: {record.id} ({record.task_type or 'unknown'})")
    
    def drain_logs(self, call_group: Optional[str] = None) -> List[LLMCallRecord]:
        """
        Return and forget the records collected so far.
        
        Args:
            call_group: Only take the records tagged with this group;
                records of other groups stay pending
        """
        with self._lock:
            if call_group is None:
                records, self._pending_logs = self._pending_logs, []
            else:
                records = [r for r in self._pending_logs if r.call_group == call_group]
                self._pending_logs = [r for r in self._pending_logs if r.call_group != call_group]
        return records
    
    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model})"
