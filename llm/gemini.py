"""
Gemini Client - Google Gemini through its OpenAI-compatible endpoint.

API docs: https://ai.google.dev/gemini-api/docs/openai
"""
import time
from typing import Optional, List

import httpx
from openai import OpenAI, RateLimitError, OpenAIError
from loguru import logger

from .base import LLMClient, LLMResponse, LLMError, LLMRateLimitError, Message


class GeminiClient(LLMClient):
    """
    Gemini client using the OpenAI SDK.
    
    Gemini names the assistant role "model"; messages are mapped to
    "assistant" before they are sent.
    """
    
    API_BASE = "https://generativelanguage.googleapis.com/v1beta/openai/"
    
    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        timeout: float = 60.0,
        verify_ssl: bool = True,
        enable_logging: bool = True,
    ):
        """
        Initialize Gemini client.
        
        Args:
            api_key: Google AI Studio API key
            model: Model name (gemini-2.5-flash, gemini-2.5-pro, ...)
            timeout: Request timeout in seconds
            verify_ssl: Whether to verify SSL certificates
            enable_logging: Keep call records for llm_call_history
        """
        super().__init__(api_key, model, enable_logging=enable_logging)
        self.timeout = timeout
        
        http_client = None
        if not verify_ssl:
            http_client = httpx.Client(verify=False)
            logger.warning("SSL verification disabled for Gemini client")
        
        self._client = OpenAI(
            api_key=api_key,
            base_url=self.API_BASE,
            timeout=timeout,
            http_client=http_client,
            # Retries are handled by the caller's backoff loop
            max_retries=0,
        )
    
    def generate(
        self,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate response from a single prompt."""
        messages = [Message(role="user", content=prompt)]
        return self.chat(messages, system=system, max_tokens=max_tokens, temperature=temperature)
    
    def chat(
        self,
        messages: List[Message],
        system: Optional[str] = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Generate response from conversation."""
        api_messages = []
        if system:
            api_messages.append({"role": "system", "content": system})
        for msg in messages:
            role = "assistant" if msg.role == "model" else msg.role
            api_messages.append({"role": role, "content": msg.content})
        
        logger.debug(f"Gemini request: model={self.model}, messages={len(api_messages)}")
        
        started = time.monotonic()
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=api_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except RateLimitError as e:
            logger.warning(f"Gemini rate limited: {e}")
            raise LLMRateLimitError(str(e)) from e
        except OpenAIError as e:
            logger.error(f"Gemini request failed: {e}")
            raise LLMError(str(e)) from e
        
        choice = response.choices[0]
        usage = response.usage
        result = LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            usage={
                "input_tokens": usage.prompt_tokens if usage else 0,
                "output_tokens": usage.completion_tokens if usage else 0,
            },
            stop_reason=choice.finish_reason,
            latency_ms=int((time.monotonic() - started) * 1000),
        )
        self.log_call(messages, system, result, max_tokens, temperature)
        return result
