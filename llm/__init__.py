"""
LLM Module - Unified interface for LLM providers.

Usage:
    from llm import get_client
    
    client = get_client()  # Uses config settings
    response = client.generate("Summarize this: ...")
    print(response.content)

Supported providers:
- gemini: Google Gemini via its OpenAI-compatible API
"""
from typing import Optional

from config import settings
from .base import (
    LLMClient,
    LLMResponse,
    LLMCallRecord,
    LLMError,
    LLMRateLimitError,
    Message,
    set_llm_context,
    get_llm_context,
)
from .gemini import GeminiClient


# Provider mapping
_PROVIDERS = {
    "gemini": GeminiClient,
}

# Default models per provider
_DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
}


def get_client(
    provider: Optional[str] = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    verify_ssl: Optional[bool] = None,
) -> LLMClient:
    """
    Get an LLM client instance.
    
    Args:
        provider: Provider name. Defaults to settings.LLM_PROVIDER
        api_key: API key. Defaults to the provider's key in settings
        model: Model name. Defaults to settings.LLM_MODEL or provider default
        verify_ssl: Whether to verify SSL. Defaults to settings.LLM_VERIFY_SSL
        
    Raises:
        ValueError: Unknown provider or no API key configured
    """
    provider = (provider or settings.LLM_PROVIDER).lower()
    
    if provider not in _PROVIDERS:
        raise ValueError(f"Unknown LLM provider: {provider}. Available: {list(_PROVIDERS.keys())}")
    
    if api_key is None:
        api_key = settings.GEMINI_API_KEY
    
    if not api_key:
        raise ValueError(f"API key required for provider: {provider}")
    
    model = model or settings.LLM_MODEL or _DEFAULT_MODELS.get(provider)
    
    if verify_ssl is None:
        verify_ssl = settings.LLM_VERIFY_SSL
    
    client_class = _PROVIDERS[provider]
    return client_class(api_key=api_key, model=model, verify_ssl=verify_ssl)


__all__ = [
    "get_client",
    "LLMClient",
    "LLMResponse",
    "LLMCallRecord",
    "LLMError",
    "LLMRateLimitError",
    "Message",
    "GeminiClient",
    "set_llm_context",
    "get_llm_context",
]
