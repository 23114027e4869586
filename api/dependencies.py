"""
FastAPI Dependencies

Shared request dependencies: database session, LLM client, text assistant
and connection tester. Tests replace the LLM client and the tester through
app.dependency_overrides.
"""
import asyncio
import uuid
from functools import lru_cache
from typing import Any, Callable, Optional

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from database import get_session_dependency
from datasources import ConnectionTester
from llm import LLMClient, get_client, set_llm_context
from processor import TextAssistant, AssistantError
from repositories import LLMHistoryRepository


@lru_cache(maxsize=1)
def _default_llm_client() -> LLMClient:
    return get_client()


def get_llm_client() -> LLMClient:
    """LLM client built from settings, shared across requests."""
    try:
        return _default_llm_client()
    except ValueError as e:
        logger.error(f"LLM client unavailable: {e}")
        raise HTTPException(status_code=500, detail="Server configuration error: API key not found.")


def get_assistant(client: LLMClient = Depends(get_llm_client)) -> TextAssistant:
    return TextAssistant(client)


def get_connection_tester() -> ConnectionTester:
    return ConnectionTester()


async def run_assistant(
    session: AsyncSession,
    assistant: TextAssistant,
    task_type: str,
    func: Callable[..., Any],
    *args: Any,
    conversation_id: Optional[str] = None,
) -> Any:
    """
    Run a blocking assistant call off the event loop and store its LLM calls.
    
    Only the records of this call are stored; the client is shared, so
    concurrent requests keep theirs.
    
    Raises:
        HTTPException: 429 when the provider is still rate limiting
    """
    call_group = uuid.uuid4().hex
    set_llm_context(task_type=task_type, conversation_id=conversation_id, call_group=call_group)
    try:
        return await asyncio.to_thread(func, *args)
    except AssistantError as e:
        raise HTTPException(status_code=429, detail=str(e))
    finally:
        records = assistant.client.drain_logs(call_group)
        if records:
            await LLMHistoryRepository(session).save_records(records)


__all__ = [
    "get_session_dependency",
    "get_llm_client",
    "get_assistant",
    "get_connection_tester",
    "run_assistant",
]
