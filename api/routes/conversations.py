"""
Conversation Routes

Endpoints organized by:
- Conversations (CRUD)
- Messages (per conversation, single message, bookmarks)
- LLM helpers (title, summaries)
- Pipeline inspection
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from constants import MessageRole, PipelineType
from database import get_session_dependency
from database.models import Message
from processor import TextAssistant
from repositories import (
    ConversationRepository,
    MessageRepository,
    PipelineRunRepository,
    SettingRepository,
)
from utils.text import estimate_tokens
from ..dependencies import get_assistant, run_assistant
from ..schemas import (
    ConversationCreateBody,
    ConversationUpdateBody,
    MessageCreateBody,
    MessageUpdateBody,
)

router = APIRouter(tags=["conversations"])

VALID_ROLES = {r.value for r in MessageRole}


async def _get_conversation_or_404(session: AsyncSession, conversation_id: str):
    conversation = await ConversationRepository(session).get(conversation_id)
    if not conversation:
        raise HTTPException(status_code=404, detail="Conversation not found")
    return conversation


async def _get_message_or_404(session: AsyncSession, message_id: str) -> Message:
    message = await MessageRepository(session).get(message_id)
    if not message:
        raise HTTPException(status_code=404, detail="Message not found")
    return message


def _history(messages) -> list:
    return [{"role": m.role, "content": m.content} for m in messages]


# ============================================================
# Conversations
# ============================================================
@router.get("/conversations")
async def list_conversations(session: AsyncSession = Depends(get_session_dependency)):
    """All conversations, most recently active first."""
    conversations = await ConversationRepository(session).list_recent()
    return [c.to_dict() for c in conversations]


@router.post("/conversations", status_code=201)
async def create_conversation(
    body: ConversationCreateBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Start a conversation using the stored default model and agent settings."""
    settings_repo = SettingRepository(session)
    defaults = {
        key: await settings_repo.get_value(key, {})
        for key in ("defaultModelConfig", "defaultAgentConfig", "featureFlags")
    }
    conversation = await ConversationRepository(session).create_with_defaults(
        body.title, body.agent_id, defaults
    )
    return conversation.to_dict()


@router.get("/conversations/{conversation_id}")
async def get_conversation(conversation_id: str, session: AsyncSession = Depends(get_session_dependency)):
    conversation = await _get_conversation_or_404(session, conversation_id)
    return conversation.to_dict()


@router.put("/conversations/{conversation_id}")
async def update_conversation(
    conversation_id: str,
    body: ConversationUpdateBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Partial update; only the fields sent are changed."""
    changes = body.changes()
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    
    repo = ConversationRepository(session)
    conversation = await _get_conversation_or_404(session, conversation_id)
    await repo.update(conversation, {**changes, "last_updated_at": repo.now()})
    return conversation.to_dict()


@router.delete("/conversations/{conversation_id}")
async def delete_conversation(conversation_id: str, session: AsyncSession = Depends(get_session_dependency)):
    """Delete a conversation and, through the foreign key, its messages."""
    if not await ConversationRepository(session).delete(conversation_id):
        raise HTTPException(status_code=404, detail="Conversation not found")
    return {"message": "Conversation deleted successfully"}


# ============================================================
# Messages
# ============================================================
@router.get("/conversations/{conversation_id}/messages")
async def list_messages(conversation_id: str, session: AsyncSession = Depends(get_session_dependency)):
    messages = await MessageRepository(session).get_for_conversation(conversation_id)
    return [m.to_dict() for m in messages]


@router.post("/conversations/{conversation_id}/messages", status_code=201)
async def create_message(
    conversation_id: str,
    body: MessageCreateBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Append a message and mark the conversation as just active."""
    fields = body.message
    if fields is None or not fields.content:
        raise HTTPException(status_code=400, detail="Message is required")
    if fields.role not in VALID_ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid message role: {fields.role}")
    
    conversations = ConversationRepository(session)
    conversation = await _get_conversation_or_404(session, conversation_id)
    await conversations.touch(conversation)
    
    message = await MessageRepository(session).add(Message(
        conversation_id=conversation_id,
        role=fields.role,
        content=fields.content,
        token_count=fields.token_count,
        response_time=fields.response_time,
        is_bookmarked=bool(fields.is_bookmarked),
        parent_message_id=fields.parent_message_id,
    ))
    return message.to_dict()


@router.post("/conversations/{conversation_id}/clear-messages")
async def clear_messages(conversation_id: str, session: AsyncSession = Depends(get_session_dependency)):
    count = await MessageRepository(session).clear_conversation(conversation_id)
    return {"success": True, "message": f"Cleared {count} messages."}


@router.get("/conversations/{conversation_id}/search")
async def search_messages(
    conversation_id: str,
    q: str = Query(default=""),
    session: AsyncSession = Depends(get_session_dependency),
):
    """Messages of one conversation containing the query text."""
    messages = await MessageRepository(session).search_in_conversation(conversation_id, q)
    return {"messages": [m.to_dict() for m in messages]}


@router.put("/messages/{message_id}")
async def update_message(
    message_id: str,
    body: MessageUpdateBody,
    session: AsyncSession = Depends(get_session_dependency),
):
    """Edit message content; the token count is re-estimated."""
    if not body.content or not body.content.strip():
        raise HTTPException(status_code=400, detail="Content is required")
    
    message = await _get_message_or_404(session, message_id)
    await MessageRepository(session).update(message, {
        "content": body.content,
        "token_count": estimate_tokens(body.content),
    })
    return message.to_dict()


@router.delete("/messages/{message_id}")
async def delete_message(message_id: str, session: AsyncSession = Depends(get_session_dependency)):
    if not await MessageRepository(session).delete(message_id):
        raise HTTPException(status_code=404, detail="Message not found")
    return {"message": "Message deleted successfully"}


@router.put("/messages/{message_id}/bookmark")
async def toggle_bookmark(message_id: str, session: AsyncSession = Depends(get_session_dependency)):
    message = await _get_message_or_404(session, message_id)
    await MessageRepository(session).toggle_bookmark(message)
    return message.to_dict()


@router.get("/bookmarks")
async def list_bookmarks(session: AsyncSession = Depends(get_session_dependency)):
    """Bookmarked messages across all conversations, newest first."""
    messages = await MessageRepository(session).get_bookmarked()
    return [m.to_dict() for m in messages]


# ============================================================
# LLM helpers
# ============================================================
@router.post("/conversations/{conversation_id}/generate-title")
async def generate_title(
    conversation_id: str,
    session: AsyncSession = Depends(get_session_dependency),
    assistant: TextAssistant = Depends(get_assistant),
):
    """Ask the LLM for a short title and store it."""
    messages = await MessageRepository(session).get_for_conversation(conversation_id)
    if not messages:
        raise HTTPException(status_code=400, detail="Cannot generate title for an empty conversation")
    
    conversation = await _get_conversation_or_404(session, conversation_id)
    title = await run_assistant(
        session, assistant, "title", assistant.generate_title, _history(messages),
        conversation_id=conversation_id,
    )
    if not title:
        raise HTTPException(status_code=500, detail="Failed to generate title from the AI model")
    
    repo = ConversationRepository(session)
    await repo.update(conversation, {"title": title, "last_updated_at": repo.now()})
    return conversation.to_dict()


@router.post("/conversations/{conversation_id}/summarize")
async def summarize_conversation(
    conversation_id: str,
    session: AsyncSession = Depends(get_session_dependency),
    assistant: TextAssistant = Depends(get_assistant),
):
    """Summarize the whole conversation and store the summary on it."""
    conversation = await _get_conversation_or_404(session, conversation_id)
    messages = await MessageRepository(session).get_for_conversation(conversation_id)
    if not messages:
        return {"message": "Conversation is empty, nothing to summarize."}
    
    summary = await run_assistant(
        session, assistant, "conversation_summary", assistant.summarize_conversation, _history(messages),
        conversation_id=conversation_id,
    )
    if not summary:
        raise HTTPException(status_code=500, detail="Failed to generate summary from the AI model")
    
    repo = ConversationRepository(session)
    await repo.update(conversation, {"summary": summary, "last_updated_at": repo.now()})
    return {"id": conversation.id, "summary": summary}


@router.post("/messages/{message_id}/summarize-for-context")
async def summarize_message_for_context(
    message_id: str,
    session: AsyncSession = Depends(get_session_dependency),
    assistant: TextAssistant = Depends(get_assistant),
):
    """One-sentence summary of a message, kept for context assembly."""
    message = await _get_message_or_404(session, message_id)
    summary = await run_assistant(
        session, assistant, "context_summary", assistant.summarize_for_context, message.content,
        conversation_id=message.conversation_id,
    )
    if not summary:
        raise HTTPException(status_code=500, detail="AI failed to generate a summary for context.")
    
    await MessageRepository(session).update(message, {"content_summary": summary})
    return {"success": True, "messageId": message_id, "summary": summary}


# ============================================================
# Pipeline inspection
# ============================================================
@router.get("/inspect/{message_id}")
async def inspect_message(message_id: str, session: AsyncSession = Depends(get_session_dependency)):
    """
    Pipeline runs recorded for a message.
    
    The ContextAssembly run is shown as the primary run because it carries
    the assembled prompt; steps belong to that run.
    """
    repo = PipelineRunRepository(session)
    runs = await repo.get_for_message(message_id)
    if not runs:
        return {
            "pipelineRun": {
                "final_output": "No pipeline run found.",
                "pipeline_type": "N/A",
                "status": "not_found",
            },
            "allRuns": [],
            "pipelineSteps": [],
        }
    
    primary = next(
        (r for r in runs if r.pipeline_type == PipelineType.CONTEXT_ASSEMBLY.value),
        runs[0],
    )
    steps = await repo.get_steps(primary.id)
    return {
        "pipelineRun": primary.to_dict(),
        "allRuns": [r.to_dict() for r in runs],
        "pipelineSteps": [s.to_dict() for s in steps],
    }
