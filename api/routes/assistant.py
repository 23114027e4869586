"""
Assistant Routes - stateless LLM helpers for the chat UI.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session_dependency
from processor import TextAssistant
from ..dependencies import get_assistant, run_assistant
from ..schemas import TextBody, RegeneratePromptBody

router = APIRouter(tags=["assistant"])


@router.post("/summarize")
async def summarize_text(
    body: TextBody,
    session: AsyncSession = Depends(get_session_dependency),
    assistant: TextAssistant = Depends(get_assistant),
):
    """Concise summary of arbitrary text."""
    if not body.text or not body.text.strip():
        raise HTTPException(status_code=400, detail="Text is required")
    
    summary = await run_assistant(session, assistant, "text_summary", assistant.summarize_text, body.text)
    if not summary:
        raise HTTPException(status_code=500, detail="Failed to generate summary from the AI model")
    return {"summary": summary}


@router.post("/prompt/regenerate")
async def regenerate_prompt(
    body: RegeneratePromptBody,
    session: AsyncSession = Depends(get_session_dependency),
    assistant: TextAssistant = Depends(get_assistant),
):
    """Rewrite the user's prompt in light of the conversation so far."""
    if not body.prompt_to_rewrite or body.history is None:
        raise HTTPException(status_code=400, detail="Missing promptToRewrite or history")
    
    rewritten = await run_assistant(
        session, assistant, "prompt_rewrite", assistant.rewrite_prompt, body.prompt_to_rewrite, body.history,
    )
    if not rewritten:
        raise HTTPException(status_code=500, detail="Failed to regenerate prompt from AI model")
    return {"rewrittenPrompt": rewritten}
