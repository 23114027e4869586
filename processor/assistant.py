"""
Text Assistant - short LLM helpers used by the chat UI.

Covers conversation titles, conversation, text and project summaries,
context summaries for long-term memory, and rewriting the user's last
prompt.
Every call goes through a rate-limit aware retry loop: a 429 from the
provider is retried with a doubling delay, any other error propagates.
"""
import time
from typing import Optional, List, Dict, Any, Callable

from loguru import logger

from config import settings
from llm import LLMClient, LLMResponse, LLMRateLimitError, Message
from prompts import PromptLoader
from utils.text import strip_quotes


class AssistantError(Exception):
    """Raised when the provider keeps rate limiting after all retries."""


class TextAssistant:
    """
    LLM helpers for titles, summaries and prompt rewriting.
    
    Methods are blocking; call them through asyncio.to_thread from async code.
    """
    
    def __init__(
        self,
        client: LLMClient,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            client: LLM client instance
            max_retries: Retries after a rate limit (default settings.LLM_MAX_RETRIES)
            retry_delay: First retry delay in seconds, doubled each time
                (default settings.LLM_RETRY_DELAY)
            sleep: Sleep function, replaceable in tests
        """
        self.client = client
        self.prompt_loader = PromptLoader()
        self.max_retries = settings.LLM_MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = settings.LLM_RETRY_DELAY if retry_delay is None else retry_delay
        self._sleep = sleep
    
    # ============================================
    # PUBLIC HELPERS
    # ============================================
    
    def generate_title(self, history: List[Dict[str, Any]]) -> Optional[str]:
        """Title of 5 words or less for a conversation, without quotes."""
        response = self._chat(self._to_messages(history), self.prompt_loader.get("conversation_title"))
        title = strip_quotes(response.content.replace('"', ''))
        return title or None
    
    def summarize_conversation(self, history: List[Dict[str, Any]]) -> Optional[str]:
        """One-paragraph summary of a whole conversation."""
        response = self._chat(self._to_messages(history), self.prompt_loader.get("conversation_summary"))
        return response.content.strip() or None
    
    def summarize_text(self, text: str) -> Optional[str]:
        """Concise summary of arbitrary text."""
        response = self._chat([Message(role="user", content=text)], self.prompt_loader.get("text_summary"))
        return response.content.strip() or None
    
    def summarize_for_context(self, content: str) -> Optional[str]:
        """Dense summary meant to be fed back as context later."""
        response = self._chat([Message(role="user", content=content)], self.prompt_loader.get("context_summary"))
        return response.content.strip() or None
    
    def summarize_project(self, project: Dict[str, Any], tasks: List[Dict[str, Any]]) -> Optional[str]:
        """One-paragraph status summary of a project and its checklist."""
        checklist = "\n".join(
            f"- [{'x' if task.get('status') == 'done' else ' '}] {task.get('title')}" for task in tasks
        )
        request = self.prompt_loader.format(
            "project_summary",
            name=project.get("name"),
            description=project.get("description") or "",
            status=project.get("status"),
            due_date=project.get("due_date") or "",
            tasks=checklist or "(no tasks)",
        )
        response = self._chat([Message(role="user", content=request)])
        return response.content.strip() or None
    
    def rewrite_prompt(self, prompt: str, history: List[Dict[str, Any]]) -> Optional[str]:
        """Clearer version of the user's last prompt."""
        transcript = self.format_transcript(history) or "(empty)"
        request = self.prompt_loader.format("rewrite_request", history=transcript, prompt=prompt)
        response = self._chat([Message(role="user", content=request)], self.prompt_loader.get("prompt_rewriter"))
        return response.content.strip() or None
    
    # ============================================
    # INTERNALS
    # ============================================
    
    def _chat(self, messages: List[Message], system: Optional[str] = None) -> LLMResponse:
        """Run a chat call, retrying on rate limits with exponential backoff."""
        delay = self.retry_delay
        for attempt in range(self.max_retries + 1):
            try:
                return self.client.chat(messages, system=system)
            except LLMRateLimitError as e:
                if attempt == self.max_retries:
                    logger.error(f"LLM still rate limited after {self.max_retries} retries")
                    raise AssistantError(
                        "AI service is currently busy (Rate Limit). Please try again in a few moments."
                    ) from e
                logger.warning(
                    f"LLM rate limited. Retrying in {delay:.1f}s "
                    f"({self.max_retries - attempt} retries left)"
                )
                self._sleep(delay)
                delay *= 2
        raise AssistantError("LLM call was not attempted")
    
    @staticmethod
    def _content_of(item: Dict[str, Any]) -> str:
        """Text of a history item, either {content} or Gemini style {parts: [{text}]}."""
        if item.get("content") is not None:
            return str(item["content"])
        return "".join(part.get("text", "") for part in item.get("parts") or [] if isinstance(part, dict))
    
    @classmethod
    def _to_messages(cls, history: List[Dict[str, Any]]) -> List[Message]:
        return [
            Message(role=item.get("role") or "user", content=cls._content_of(item))
            for item in history
        ]
    
    @classmethod
    def format_transcript(cls, history: List[Dict[str, Any]]) -> str:
        return "\n".join(f"{item.get('role')}: {cls._content_of(item)}" for item in history)
